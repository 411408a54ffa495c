"""CLI entry point for flowbuild."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from flowbuild.branches import classify
from flowbuild.config import FlowConfig, load_config
from flowbuild.descriptor import ProjectDescriptor, descriptor_for
from flowbuild.errors import FlowBuildError
from flowbuild.hosting import GhRequestHost
from flowbuild.models import BuildInfo, TriggerContext
from flowbuild.pipeline import apply_version, calculate_build, tag_build, write_output
from flowbuild.trigger import build_trigger
from flowbuild.updates import run_update_cycle

TEMPLATES_DIR = Path(__file__).parent / "templates"
WORKFLOW_TEMPLATES = ("build.yml", "nightly.yml")


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Surface flowbuild errors as a one-line message and exit status 1."""
    try:
        yield
    except FlowBuildError as exc:
        raise click.ClickException(str(exc)) from exc


def _trigger_options(f):
    f = click.option(
        "--merged/--not-merged",
        default=None,
        help="Whether the pull request was merged (only with --target).",
    )(f)
    f = click.option(
        "--target", default=None, help="Pull request target branch, e.g. develop."
    )(f)
    f = click.option(
        "--source",
        default=None,
        help="Source branch. Read from the GitHub Actions environment if omitted.",
    )(f)
    return f


def _load(project_dir: str) -> tuple[FlowConfig, ProjectDescriptor]:
    root = Path(project_dir)
    with _reported_errors():
        config = load_config(root)
    return config, descriptor_for(config.descriptor, root)


def _resolve_trigger(
    source: str | None, target: str | None, merged: bool | None
) -> TriggerContext | None:
    """Build the trigger, or None if this run needs no build at all."""
    ctx = build_trigger(source, target, merged)
    if ctx.is_abandoned_merge:
        click.echo(
            f"Pull request {ctx.source_branch} → {ctx.target_branch} was closed "
            "without being merged. No action required."
        )
        return None
    return ctx


def _calculate(
    ctx: TriggerContext, config: FlowConfig, descriptor: ProjectDescriptor
) -> BuildInfo:
    with _reported_errors():
        return calculate_build(ctx, descriptor, config.branches)


project_dir_option = click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Repository root holding pyproject.toml (and pom.xml for Maven).",
)


@click.group()
@click.version_option(package_name="flowbuild")
def cli() -> None:
    """Git-flow build identifiers and automated update pull requests."""


@cli.command()
@_trigger_options
@project_dir_option
@click.option(
    "--github-output",
    type=click.Path(),
    envvar="GITHUB_OUTPUT",
    default=None,
    help="Append project_qualifier=<tag> to this GitHub step output file.",
)
def qualifier(
    source: str | None,
    target: str | None,
    merged: bool | None,
    project_dir: str,
    github_output: str | None,
) -> None:
    """Print the build qualifier for the triggering branch."""
    config, _ = _load(project_dir)
    ctx = _resolve_trigger(source, target, merged)
    if ctx is None:
        return
    with _reported_errors():
        result = classify(ctx, config.branches)
    if github_output:
        write_output(github_output, "project_qualifier", result.tag)
    click.echo(result.value)


@cli.command("build-id")
@_trigger_options
@project_dir_option
@click.option(
    "--github-output",
    type=click.Path(),
    envvar="GITHUB_OUTPUT",
    default=None,
    help="Append project_build=<id> to this GitHub step output file.",
)
def build_id(
    source: str | None,
    target: str | None,
    merged: bool | None,
    project_dir: str,
    github_output: str | None,
) -> None:
    """Calculate and print the build identifier."""
    config, descriptor = _load(project_dir)
    ctx = _resolve_trigger(source, target, merged)
    if ctx is None:
        return
    info = _calculate(ctx, config, descriptor)
    if github_output:
        write_output(github_output, "project_build", info.build_id)
    click.echo(info.build_id)


@cli.command("set-version")
@click.argument("build_id", required=False)
@_trigger_options
@project_dir_option
def set_version(
    build_id: str | None,
    source: str | None,
    target: str | None,
    merged: bool | None,
    project_dir: str,
) -> None:
    """Write BUILD_ID (calculated if omitted) into the project descriptor."""
    config, descriptor = _load(project_dir)
    if not build_id:
        ctx = _resolve_trigger(source, target, merged)
        if ctx is None:
            return
        build_id = _calculate(ctx, config, descriptor).build_id
    with _reported_errors():
        apply_version(descriptor, build_id)


@cli.command()
@click.argument("build_id", required=False)
@_trigger_options
@project_dir_option
def tag(
    build_id: str | None,
    source: str | None,
    target: str | None,
    merged: bool | None,
    project_dir: str,
) -> None:
    """Tag mainline and support builds with BUILD_ID (calculated if omitted)."""
    config, descriptor = _load(project_dir)
    ctx = _resolve_trigger(source, target, merged)
    if ctx is None:
        return
    if not build_id:
        build_id = _calculate(ctx, config, descriptor).build_id
    tag_build(ctx, build_id, config.branches)


@cli.command()
@click.option(
    "--run-number",
    envvar="GITHUB_RUN_NUMBER",
    required=True,
    help="Unique run number appended to the update branch name.",
)
@project_dir_option
def update(run_number: str, project_dir: str) -> None:
    """Run one scheduled dependency-update cycle."""
    config, _ = _load(project_dir)
    with _reported_errors():
        run_update_cycle(config.update, config.branches, GhRequestHost(), run_number)


@cli.command()
@click.option(
    "--workflow-dir",
    type=click.Path(),
    default=".github/workflows",
    show_default=True,
    help="Directory to write the workflow files.",
)
def init(workflow_dir: str) -> None:
    """Scaffold the build and nightly GitHub Actions workflows into your repo."""
    root = Path.cwd()

    if not (root / ".git").exists():
        raise click.ClickException("Not a git repository. Run from the repo root.")

    dest_dir = root / workflow_dir
    dest_dir.mkdir(parents=True, exist_ok=True)
    for name in WORKFLOW_TEMPLATES:
        dest = dest_dir / name
        dest.write_text((TEMPLATES_DIR / name).read_text())
        click.echo(f"✓ Wrote workflow to {dest.relative_to(root)}")

    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Configure [tool.flowbuild] in pyproject.toml if needed")
    click.echo("  2. Commit and push the workflow files")
    click.echo("  3. Push to a feature/ branch to see its build identifier")
