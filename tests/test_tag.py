"""Tests for tag classification and comparability."""

import pytest

from tagbump.constants import Constants
from tagbump.errors import NotComparable
from tagbump.versioning.models import TagFormat
from tagbump.versioning.tag import Tag

DIGEST = "a" * 64


class TestTagParsing:
    """Splitting tags into prefix, numeric version and suffix."""

    def test_plain_version(self):
        """Test a bare version tag."""
        tag = Tag.parse("1.2.3")
        assert tag.comparable
        assert tag.numeric_version == "1.2.3"
        assert tag.precision == 3
        assert tag.prefix is None and tag.suffix is None
        assert tag.is_plain

    def test_suffix(self):
        """Test a trailing variant suffix."""
        tag = Tag.parse("1.25-alpine")
        assert tag.numeric_version == "1.25"
        assert tag.suffix == "-alpine"
        assert tag.precision == 2
        assert not tag.is_plain

    def test_prefix(self):
        """Test a leading variant prefix."""
        tag = Tag.parse("alpine-3.18")
        assert tag.prefix == "alpine-"
        assert tag.numeric_version == "3.18"

    def test_prefix_and_suffix(self):
        """Test a tag decorated on both sides."""
        tag = Tag.parse("jdk-17.0-slim")
        assert tag.prefix == "jdk-"
        assert tag.numeric_version == "17.0"
        assert tag.suffix == "-slim"

    def test_v_prefix_is_not_part_of_version(self):
        """Test a leading v is dropped from the version."""
        tag = Tag.parse("v1.4.0")
        assert tag.numeric_version == "1.4.0"
        assert tag.is_plain

    def test_build_number_is_part_of_version(self):
        """Test a numeric build suffix counts as version."""
        tag = Tag.parse("1.2.3-4")
        assert tag.numeric_version == "1.2.3-4"
        assert tag.precision == 4

    @pytest.mark.parametrize("raw", ["latest", "stable", "edge", ""])
    def test_non_comparable(self, raw):
        """Test names without a version are not comparable."""
        tag = Tag.parse(raw)
        assert not tag.comparable
        assert tag.precision == 0
        with pytest.raises(NotComparable):
            tag.version


class TestTagKinds:
    """Digest and canonical marker detection."""

    def test_prefixed_digest(self):
        """Test an algorithm-prefixed digest."""
        assert Tag.parse(f"sha256:{DIGEST}").is_digest

    def test_bare_digest(self):
        """Test a bare hex digest."""
        assert Tag.parse(DIGEST).is_digest

    def test_version_is_not_digest(self):
        """Test a version is not taken for a digest."""
        assert not Tag.parse("1.2").is_digest

    def test_latest_is_canonical(self):
        """Test latest is a canonical marker."""
        assert Tag.parse("latest").is_canonical
        assert not Tag.parse("1.2").is_canonical

    def test_canonical_markers_are_configurable(self):
        """Test extra canonical markers from Constants."""
        Constants.CANONICAL_TAGS = ["latest", "stable"]
        assert Tag.parse("stable").is_canonical


class TestTagFormat:
    """Numeric formats that must match for comparison."""

    @pytest.mark.parametrize("raw,expected", [
        ("2021.04", TagFormat.YEAR_MONTH),
        ("2021-04-01", TagFormat.YEAR_MONTH),
        ("20210401", TagFormat.YEAR_MONTH_DAY),
        ("42", TagFormat.BUILD_NUM),
        ("1.2.3", TagFormat.NORMAL),
        ("1.2.3-1234567", TagFormat.SHA_SUFFIXED),
    ])
    def test_format(self, raw, expected):
        """Test numeric format detection."""
        assert Tag.parse(raw).format == expected

    def test_different_formats_not_comparable(self):
        """Test date and semantic tags do not compare."""
        assert not Tag.parse("20210401").comparable_to(Tag.parse("1.2.3"))


class TestComparability:
    """Only tags with the same decoration are orderable against each other."""

    def test_same_suffix(self):
        """Test equal suffixes compare."""
        assert Tag.parse("1.3-alpine").comparable_to(Tag.parse("1.2-alpine"))

    def test_different_suffix(self):
        """Test different suffixes do not compare."""
        assert not Tag.parse("1.2-alpine").comparable_to(Tag.parse("1.2-debian"))

    def test_suffix_vs_none(self):
        """Test a suffixed tag does not compare to a bare one."""
        assert not Tag.parse("1.3.0-rc1").comparable_to(Tag.parse("1.2.0"))

    def test_different_prefix(self):
        """Test different prefixes do not compare."""
        assert not Tag.parse("alpine-3.18").comparable_to(Tag.parse("debian-3.18"))

    def test_non_comparable_never_comparable(self):
        """Test non-numeric tags never compare."""
        assert not Tag.parse("latest").comparable_to(Tag.parse("latest"))


class TestPrecision:
    """Precision equality and less-precise aliasing."""

    def test_same_precision(self):
        """Test precision is the segment count."""
        assert Tag.parse("1.2").same_precision(Tag.parse("3.4"))
        assert not Tag.parse("1.2").same_precision(Tag.parse("1.2.0"))

    def test_same_but_less_precise(self):
        """Test 1.2 is a less precise 1.2.3."""
        assert Tag.parse("1.2").same_but_less_precise(Tag.parse("1.2.3"))

    def test_not_less_precise_when_longer(self):
        """Test a longer tag is not less precise."""
        assert not Tag.parse("1.2.3").same_but_less_precise(Tag.parse("1.2"))

    def test_not_less_precise_when_different(self):
        """Test differing leading segments do not count."""
        assert not Tag.parse("1.3").same_but_less_precise(Tag.parse("1.2.3"))

    def test_equal_is_not_strict_prefix(self):
        """Test equal tags are not less precise."""
        assert not Tag.parse("1.2").same_but_less_precise(Tag.parse("1.2"))


class TestLooksLikePrerelease:
    """Keyword and letter based prerelease heuristic."""

    @pytest.mark.parametrize("raw", ["1.3.0-rc1", "2.0-beta", "2.0-preview2", "1.2.3.rc1", "3.0-ALPHA", "1.0-dev"])
    def test_prerelease(self, raw):
        """Test prerelease keywords and letters are detected."""
        assert Tag.parse(raw).looks_like_prerelease()

    @pytest.mark.parametrize("raw", ["1.2.3", "1.25-alpine", "12-debian", "alpine-3.18", "latest"])
    def test_not_prerelease(self, raw):
        """Test variant names are not prereleases."""
        assert not Tag.parse(raw).looks_like_prerelease()
