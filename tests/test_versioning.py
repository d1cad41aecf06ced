"""Tests for version name/code strategies and next tag names."""

import pytest

from buildtag.domain import TagBuild
from buildtag.errors import ConfigurationError, DocumentError
from buildtag.services import compile_pattern
from buildtag.services.versioning import (
    VersionCodeStrategy,
    VersionNameStrategy,
    build_version_code,
    build_version_name,
    next_tag_name,
)


def tag_build(name="v1.0.42-debug", version="1.0", number=42, variant="debug"):
    return TagBuild(
        name=name,
        commit_sha="abc",
        message=None,
        build_version=version,
        build_variant=variant,
        build_number=number,
    )


class TestVersionName:

    @pytest.mark.parametrize("strategy,expected", [
        (VersionNameStrategy.BUILD_VERSION, "1.0"),
        (VersionNameStrategy.BUILD_VERSION_NUMBER, "1.0.42"),
        (VersionNameStrategy.BUILD_VERSION_NUMBER_VARIANT, "1.0.42-debug"),
        (VersionNameStrategy.BUILD_VERSION_VARIANT, "1.0-debug"),
        (VersionNameStrategy.TAG_RAW_NAME, "v1.0.42-debug"),
    ])
    def test_strategies(self, strategy, expected):
        assert build_version_name(tag_build(), strategy) == expected

    def test_default_is_build_version(self):
        assert build_version_name(tag_build()) == "1.0"

    def test_parse(self):
        assert VersionNameStrategy.parse("build-version-number") == VersionNameStrategy.BUILD_VERSION_NUMBER
        assert VersionNameStrategy.parse(VersionNameStrategy.TAG_RAW_NAME) == VersionNameStrategy.TAG_RAW_NAME

    def test_parse_unknown(self):
        with pytest.raises(ConfigurationError, match="tag_raw_name"):
            VersionNameStrategy.parse("semver")


class TestVersionCode:

    def test_build_number(self):
        assert build_version_code(tag_build()) == 42

    def test_semantic_flattened(self):
        code = build_version_code(tag_build(version="2.5", number=17), VersionCodeStrategy.SEMANTIC_FLATTENED)
        assert code == 2005017

    def test_semantic_flattened_major_only(self):
        code = build_version_code(tag_build(version="3", number=1), VersionCodeStrategy.SEMANTIC_FLATTENED)
        assert code == 3000001

    def test_parse_unknown(self):
        with pytest.raises(ConfigurationError):
            VersionCodeStrategy.parse("fixed")


class TestNextTagName:

    def test_default_pattern(self):
        assert next_tag_name(tag_build(), compile_pattern()) == "v1.0.43-debug"

    def test_carry_into_new_digit(self):
        assert next_tag_name(tag_build("v1.0.9-debug", number=9), compile_pattern()) == "v1.0.10-debug"

    def test_postfix_kept(self):
        build = tag_build("v1.0.2-release-androidAuto", number=2, variant="release")
        assert next_tag_name(build, compile_pattern()) == "v1.0.3-release-androidAuto"

    def test_version_text_repeated_in_prefix(self):
        build = tag_build("app1.0.5-v1.0.5-debug", number=5)
        assert next_tag_name(build, compile_pattern()) == "app1.0.5-v1.0.6-debug"

    def test_without_pattern(self):
        build = tag_build("cabinet-1.2.34+release", version="1.2", number=34, variant="release")
        assert next_tag_name(build) == "cabinet-1.2.35+release"

    def test_name_not_matching_pattern(self):
        build = tag_build("cabinet-1.2.34+release", version="1.2", number=34, variant="release")
        assert next_tag_name(build, compile_pattern()) == "cabinet-1.2.35+release"

    def test_stub(self):
        build = tag_build("v0.0.1-debug", version="0.0", number=1)
        assert next_tag_name(build, compile_pattern()) == "v0.0.2-debug"

    def test_number_missing_from_name(self):
        with pytest.raises(DocumentError, match="1.0.3"):
            next_tag_name(tag_build("weird", number=3))
