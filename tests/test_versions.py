"""Tests for flowbuild.versions."""

from __future__ import annotations

import pytest

from flowbuild.errors import MalformedVersion, VersionUnavailable
from flowbuild.versions import (
    parse_project_version,
    strip_prerelease,
    to_python_version,
)


class TestParseProjectVersion:
    def test_full_semver(self) -> None:
        v = parse_project_version("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)
        assert v.raw == "1.2.3"

    def test_snapshot_suffix(self) -> None:
        v = parse_project_version("1.0.245-SNAPSHOT")
        assert (v.major, v.minor, v.patch) == (1, 0, 245)
        assert v.raw == "1.0.245-SNAPSHOT"

    def test_strips_surrounding_whitespace(self) -> None:
        assert parse_project_version(" 2.0.1\n").raw == "2.0.1"

    def test_zero_version(self) -> None:
        v = parse_project_version("0.0.0")
        assert (v.major, v.minor, v.patch) == (0, 0, 0)

    @pytest.mark.parametrize("raw", ["1.2.3-rc.01", "1.2.3-beta_2", "4.0.0-M1-SNAPSHOT"])
    def test_maven_style_suffixes(self, raw: str) -> None:
        v = parse_project_version(raw)
        assert v.raw == raw
        assert v.core == raw.split("-", 1)[0]

    @pytest.mark.parametrize(
        "raw", ["1.2", "5", "v1.2.3", "1.2.x", "latest", "1.2.3-", "1.2.3-rc 1"]
    )
    def test_rejects_wrong_shape(self, raw: str) -> None:
        with pytest.raises(VersionUnavailable) as excinfo:
            parse_project_version(raw, source="pom.xml")
        assert "pom.xml" in str(excinfo.value)
        assert raw in str(excinfo.value)

    def test_rejects_empty(self) -> None:
        with pytest.raises(VersionUnavailable, match="no version declared"):
            parse_project_version("")


class TestStripPrerelease:
    def test_snapshot(self) -> None:
        assert strip_prerelease("1.0.245-SNAPSHOT") == "1.0.245"

    def test_release_version_unchanged(self) -> None:
        assert strip_prerelease("2.1.0") == "2.1.0"

    def test_dotted_prerelease(self) -> None:
        assert strip_prerelease("3.0.0-rc.1") == "3.0.0"

    def test_build_metadata(self) -> None:
        assert strip_prerelease("3.0.0+build.7") == "3.0.0"

    def test_malformed(self) -> None:
        with pytest.raises(MalformedVersion) as excinfo:
            strip_prerelease("1.0-SNAPSHOT")
        assert excinfo.value.raw == "1.0-SNAPSHOT"

    def test_leading_zero_suffix(self) -> None:
        assert strip_prerelease("1.2.3-rc.01") == "1.2.3"


class TestToPythonVersion:
    def test_mainline_passes_through(self) -> None:
        assert to_python_version("1.0.245") == "1.0.245"

    @pytest.mark.parametrize(
        "build_id, expected",
        [
            ("1.0.245-f20221205_140600.bas63e1", "1.0.245+f20221205.140600.bas63e1"),
            ("1.2.3-d20221205_140600.abc1234", "1.2.3+d20221205.140600.abc1234"),
            ("2.0.0-h20230101_000000.0a1b2c3", "2.0.0+h20230101.000000.0a1b2c3"),
        ],
    )
    def test_qualified_builds_become_local_labels(
        self, build_id: str, expected: str
    ) -> None:
        assert to_python_version(build_id) == expected

    def test_unmappable(self) -> None:
        with pytest.raises(MalformedVersion) as excinfo:
            to_python_version("1.0.245-f!broken")
        assert excinfo.value.raw == "1.0.245-f!broken"
