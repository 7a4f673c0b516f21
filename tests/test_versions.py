import pytest

from releaseplz.versions import (
    Op,
    UnsupportedVersionReqError,
    Version,
    VersionReq,
    upgrade_requirement,
)


@pytest.mark.parametrize(
    "text",
    ["1.2.3", "0.0.0", "1.0.0-alpha.1", "1.0.0-beta.1+1.1.0", "1.0.1+abcd"],
)
def test_version_round_trip(text):
    assert str(Version.parse(text)) == text


def test_version_fields():
    version = Version.parse("1.0.0-alpha.1.2+meta")
    assert (version.major, version.minor, version.patch) == (1, 0, 0)
    assert version.pre == "alpha.1.2"
    assert version.build == "meta"


@pytest.mark.parametrize("text", ["1.2", "01.2.3", "1.2.3-01", "a.b.c", "1.2.3-", "1.2.3.4"])
def test_invalid_version_raises(text):
    with pytest.raises(ValueError):
        Version.parse(text)


def test_version_ordering():
    assert Version.parse("1.0.0-alpha") < Version.parse("1.0.0")
    assert Version.parse("1.0.0-alpha.2") < Version.parse("1.0.0-alpha.10")
    assert Version(1, 2, 3) < Version(1, 10, 0)
    assert Version(2, 0, 0) > Version(1, 99, 99)


@pytest.mark.parametrize(
    "text", ["^1.2.3", "=1.0.0", "~1.2", ">=1.0.0, <2.0.0", "1.*", "1.2.*", "*"]
)
def test_version_req_round_trip(text):
    assert str(VersionReq.parse(text)) == text


def test_bare_requirement_defaults_to_caret():
    req = VersionReq.parse("1.2")
    assert req.comparators[0].op is Op.CARET
    assert str(req) == "^1.2"


def test_wildcard_requirement_has_no_comparators():
    assert VersionReq.parse("*").comparators == ()


@pytest.mark.parametrize("text", ["", "abc", "1.*.2", "1.2-alpha", ">=1.0.0+build"])
def test_invalid_requirement_raises(text):
    with pytest.raises(ValueError):
        VersionReq.parse(text)


def test_star_is_not_upgraded():
    assert upgrade_requirement("*", Version(2, 3, 4)) is None


def test_same_requirement_is_not_upgraded():
    version = Version(1, 2, 3)
    assert upgrade_requirement("1.2.3", version) is None
    assert upgrade_requirement("^1.2.3", version) is None


def test_partial_requirement_is_upgraded():
    assert upgrade_requirement("1.0", Version(2, 3, 4)) == "2.3"


def test_tilde_requirement_is_upgraded():
    assert upgrade_requirement("~1.0.0", Version(2, 3, 4)) == "~2.3.4"


def test_caret_prefix_is_kept():
    version = Version(2, 3, 4)
    result = upgrade_requirement("^1.0", version)
    assert result.startswith("^")
    comparator = VersionReq.parse(result).comparators[0]
    assert (comparator.major, comparator.minor, comparator.patch) == (2, 3, None)


def test_wildcard_requirement_is_upgraded():
    version = Version(3, 1, 0)
    result = upgrade_requirement("1.*", version)
    comparator = VersionReq.parse(result).comparators[0]
    assert comparator.op is Op.WILDCARD
    assert comparator.major == version.major
    assert comparator.minor is None


def test_prerelease_is_copied_into_exact_requirement():
    version = Version.parse("2.0.0-rc.1")
    result = upgrade_requirement("=1.0.0", version)
    comparator = VersionReq.parse(result).comparators[0]
    assert comparator.op is Op.EXACT
    assert comparator.pre == version.pre


def test_unsupported_operator_raises():
    with pytest.raises(UnsupportedVersionReqError, match="currently unsupported"):
        upgrade_requirement(">=1.0", Version(2, 0, 0))