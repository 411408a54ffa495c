"""Build pipeline: classify → extract → compose → set version → tag.

This module turns a TriggerContext into a build identifier and carries it
into the downstream steps:
1. Classify the branch topology into a qualifier (fails fast)
2. Read the declared project version
3. Compose the identifier from version, qualifier, commit time and sha
4. Write the identifier into the project descriptor before packaging
5. Tag mainline and support builds with the identifier

Steps 1-3 are pure and idempotent: re-running them on the same commit
yields the same identifier, and nothing is written before they succeed.
"""

from __future__ import annotations

from .branches import classify, is_tagged_build
from .buildid import commit_timestamp, compose, short_sha
from .descriptor import ProjectDescriptor, extract_version
from .models import BranchPolicy, BuildInfo, Qualifier, TriggerContext
from .shell import git, step


def calculate_build(
    ctx: TriggerContext,
    descriptor: ProjectDescriptor,
    policy: BranchPolicy | None = None,
) -> BuildInfo:
    """Resolve the build identifier for this run.

    Raises:
        ClassificationFailure: If the trigger matches no branch rule.
        VersionUnavailable: If the declared version cannot be read.
        MalformedVersion: If a mainline version cannot be stripped.
    """
    policy = policy or BranchPolicy()
    step("Calculating build identifier")

    qualifier = classify(ctx, policy)
    target = ""
    if ctx.is_merge_event:
        target = f" → {ctx.target_branch} (merged={ctx.merged})"
    print(f"  trigger:   {ctx.source_branch}{target}")
    print(f"  qualifier: {qualifier.value} ({qualifier.tag or 'release'})")

    version = extract_version(descriptor)
    print(f"  version:   {version.raw} ({descriptor.name})")

    if qualifier is Qualifier.NONE:
        build_id = compose(version, qualifier, "", "")
    else:
        build_id = compose(version, qualifier, commit_timestamp(), short_sha())
    print(f"  build:     {build_id}")

    return BuildInfo(qualifier=qualifier, version=version, build_id=build_id)


def apply_version(descriptor: ProjectDescriptor, build_id: str) -> str:
    """Write the build identifier into the project descriptor.

    Returns:
        The version as written, which for pyproject.toml is the PEP 440 form.
    """
    step(f"Setting project version to {build_id}")
    written = descriptor.set_version(build_id)
    print(f"  {descriptor.name}: {written}")
    return written


def create_tag(name: str, target: str = "HEAD") -> None:
    """Create a lightweight tag at target and push it to origin."""
    git("tag", name, target)
    git("push", "origin", name)


def tag_build(
    ctx: TriggerContext, build_id: str, policy: BranchPolicy | None = None
) -> bool:
    """Tag mainline and support builds with their identifier.

    Returns:
        True if a tag was created.
    """
    if not is_tagged_build(ctx, policy):
        print(f"  {ctx.source_branch}: not a tagged build")
        return False
    step(f"Tagging build {build_id}")
    create_tag(build_id)
    print(f"  {build_id}")
    return True


def write_output(output_path: str, name: str, value: str) -> None:
    """Append a name=value line to a GitHub step output file."""
    with open(output_path, "a") as fh:
        fh.write(f"{name}={value}\n")
