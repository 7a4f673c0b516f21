import pytest

from releaseplz.conventional import (
    CommitType,
    ConventionalCommitError,
    parse_commit,
)


def test_feature_commit_is_parsed():
    commit = parse_commit("feat: make coffe")
    assert commit.commit_type is CommitType.FEATURE
    assert commit.type_name == "feat"
    assert commit.summary == "make coffe"
    assert commit.scope is None
    assert commit.is_breaking_change is False


def test_fix_commit_is_parsed():
    commit = parse_commit("fix: serious bug")
    assert commit.commit_type is CommitType.BUG_FIX
    assert commit.summary == "serious bug"


def test_bang_marks_breaking_change():
    commit = parse_commit("feat!: break user")
    assert commit.commit_type is CommitType.FEATURE
    assert commit.is_breaking_change is True


def test_scope_is_parsed():
    commit = parse_commit("fix(parser)!: handle empty input")
    assert commit.scope == "parser"
    assert commit.summary == "handle empty input"
    assert commit.is_breaking_change is True


def test_breaking_change_footer():
    message = "feat: make coffe\n\nmy change\n\nBREAKING CHANGE: user will be broken\n"
    commit = parse_commit(message)
    assert commit.is_breaking_change is True
    assert commit.body == "my change"
    assert commit.footers == (("BREAKING CHANGE", "user will be broken"),)


def test_breaking_change_footer_with_hyphen():
    commit = parse_commit("fix: x\n\nBREAKING-CHANGE: api removed")
    assert commit.is_breaking_change is True


def test_body_and_footers_are_separated():
    message = "fix: x\n\nbody text\n\nReviewed-by: Z\nRefs #133"
    commit = parse_commit(message)
    assert commit.body == "body text"
    assert commit.footers == (("Reviewed-by", "Z"), ("Refs", "133"))
    assert commit.is_breaking_change is False


def test_custom_type_is_accepted():
    commit = parse_commit("wip: half done")
    assert commit.commit_type is CommitType.CUSTOM
    assert commit.type_name == "wip"


@pytest.mark.parametrize(
    "message", ["my change", "", "feat:nospace", "feat(: x", "feat: ", "simple update"]
)
def test_non_conventional_message_raises(message):
    with pytest.raises(ConventionalCommitError):
        parse_commit(message)