import pytest

from releaseplz.config import (
    CommonCmdConfig,
    Config,
    ConfigError,
    GitReleaseConfig,
    GitTagConfig,
    PackageConfig,
    PackageReleaseConfig,
    PackageSpecificConfig,
    PackageSpecificConfigWithName,
    PackageUpdateConfig,
    ReleaseConfig,
    ReleasePrConfig,
    ReleaseType,
    UpdateConfig,
    Workspace,
)

REPO_URL = "https://example.com/owner/project"


def test_config_without_update_config_is_deserialized():
    text = f"""
        [workspace]
        dependencies_update = false
        changelog_config = "../git-cliff.toml"
        repo_url = "{REPO_URL}"
        git_release_enable = true
        git_release_type = "prod"
        git_release_draft = false
    """
    expected = Config(
        workspace=Workspace(
            update=UpdateConfig(
                dependencies_update=False,
                changelog_config="../git-cliff.toml",
                allow_dirty=None,
            ),
            common=CommonCmdConfig(repo_url=REPO_URL),
            packages_defaults=PackageConfig(
                update=PackageUpdateConfig(semver_check=None, changelog_update=None),
                release=PackageReleaseConfig(
                    git_release=GitReleaseConfig(
                        enable=True, release_type=ReleaseType.PROD, draft=False
                    ),
                ),
            ),
            release_pr=ReleasePrConfig(pr_draft=False, pr_labels=()),
        ),
        package=(),
    )
    assert Config.from_toml(text) == expected


def test_config_is_deserialized():
    text = f"""
        [workspace]
        changelog_config = "../git-cliff.toml"
        allow_dirty = false
        repo_url = "{REPO_URL}"
        changelog_update = true

        git_release_enable = true
        git_release_type = "prod"
        git_release_draft = false
    """
    expected = Config(
        workspace=Workspace(
            update=UpdateConfig(
                dependencies_update=None,
                changelog_config="../git-cliff.toml",
                allow_dirty=False,
            ),
            common=CommonCmdConfig(repo_url=REPO_URL),
            release_pr=ReleasePrConfig(pr_draft=False, pr_labels=()),
            packages_defaults=PackageConfig(
                update=PackageUpdateConfig(semver_check=None, changelog_update=True),
                release=PackageReleaseConfig(
                    git_release=GitReleaseConfig(
                        enable=True, release_type=ReleaseType.PROD, draft=False
                    ),
                    git_tag=GitTagConfig(enable=None),
                    release=ReleaseConfig(publish=None, allow_dirty=None, no_verify=None),
                ),
            ),
        ),
        package=(),
    )
    assert Config.from_toml(text) == expected


def _full_config() -> Config:
    return Config(
        workspace=Workspace(
            update=UpdateConfig(changelog_config="../git-cliff.toml"),
            common=CommonCmdConfig(repo_url=REPO_URL),
            release_pr=ReleasePrConfig(pr_draft=False, pr_labels=("label1",)),
            packages_defaults=PackageConfig(
                update=PackageUpdateConfig(semver_check=None, changelog_update=True),
                release=PackageReleaseConfig(
                    git_release=GitReleaseConfig(
                        enable=True, release_type=ReleaseType.PROD, draft=False
                    ),
                ),
            ),
        ),
        package=(
            PackageSpecificConfigWithName(
                name="crate1",
                config=PackageSpecificConfig(
                    update=PackageUpdateConfig(semver_check=False, changelog_update=True),
                    release=PackageReleaseConfig(
                        git_release=GitReleaseConfig(
                            enable=True, release_type=ReleaseType.PROD, draft=False
                        ),
                    ),
                    changelog_path="./CHANGELOG.md",
                    changelog_include=("pkg1",),
                ),
            ),
        ),
    )


def test_config_is_serialized():
    expected = f"""[workspace]
changelog_config = "../git-cliff.toml"
pr_draft = false
pr_labels = ["label1"]
repo_url = "{REPO_URL}"
changelog_update = true
git_release_enable = true
git_release_type = "prod"
git_release_draft = false

[[package]]
name = "crate1"
semver_check = false
changelog_update = true
git_release_enable = true
git_release_type = "prod"
git_release_draft = false
changelog_path = "./CHANGELOG.md"
changelog_include = ["pkg1"]
"""
    assert _full_config().to_toml() == expected


def test_serialized_config_round_trips():
    config = _full_config()
    assert Config.from_toml(config.to_toml()) == config


def test_empty_config_is_default():
    assert Config.from_toml("") == Config()


def test_unknown_top_level_field_is_rejected():
    with pytest.raises(ConfigError):
        Config.from_toml("[unknown]\nkey = 1\n")


def test_invalid_release_type_is_rejected():
    with pytest.raises(ConfigError):
        Config.from_toml('[workspace]\ngit_release_type = "nightly"\n')


def test_wrong_value_type_is_rejected():
    with pytest.raises(ConfigError):
        Config.from_toml('[workspace]\nallow_dirty = "yes"\n')


def test_package_without_name_is_rejected():
    with pytest.raises(ConfigError):
        Config.from_toml("[[package]]\npublish = false\n")


def test_packages_are_indexed_by_name():
    config = Config.from_toml(
        '[[package]]\nname = "aaa"\npublish_allow_dirty = true\n'
        '\n[[package]]\nname = "bbb"\npublish = false\n'
    )
    packages = config.packages()
    assert set(packages) == {"aaa", "bbb"}
    assert packages["aaa"].release.release.allow_dirty is True
    assert packages["bbb"].release.release.publish is False


def test_package_config_overrides_workspace_defaults():
    config = Config.from_toml(
        "[workspace]\npublish_allow_dirty = false\npublish_no_verify = true\n"
        '\n[[package]]\nname = "aaa"\npublish_allow_dirty = true\n'
    )
    merged = config.packages()["aaa"].merge(config.workspace.packages_defaults)
    assert merged.release.release.allow_dirty is True
    assert merged.release.release.no_verify is True
    assert merged.release.release.publish is None


def test_update_config_merge_prefers_own_values():
    own = PackageUpdateConfig(semver_check=False, changelog_update=None)
    default = PackageUpdateConfig(semver_check=True, changelog_update=False)
    assert own.merge(default) == PackageUpdateConfig(semver_check=False, changelog_update=False)


def test_git_release_merge_fills_missing_values():
    own = GitReleaseConfig(enable=None, release_type=ReleaseType.PRE, draft=None)
    default = GitReleaseConfig(enable=False, release_type=ReleaseType.AUTO, draft=True)
    assert own.merge(default) == GitReleaseConfig(
        enable=False, release_type=ReleaseType.PRE, draft=True
    )


def test_git_tag_merge():
    assert GitTagConfig().merge(GitTagConfig(enable=False)) == GitTagConfig(enable=False)
    assert GitTagConfig(enable=True).merge(GitTagConfig(enable=False)) == GitTagConfig(
        enable=True
    )


def test_specific_config_merge_keeps_changelog_settings():
    own = PackageSpecificConfig(changelog_path="docs/CHANGELOG.md", changelog_include=("x",))
    default = PackageConfig(update=PackageUpdateConfig(semver_check=True))
    merged = own.merge(default)
    assert merged.changelog_path == "docs/CHANGELOG.md"
    assert merged.changelog_include == ("x",)
    assert merged.update.semver_check is True
    assert merged.release == PackageReleaseConfig()


def test_release_config_merge():
    own = ReleaseConfig(publish=False)
    default = ReleaseConfig(publish=True, allow_dirty=True, no_verify=False)
    assert own.merge(default) == ReleaseConfig(publish=False, allow_dirty=True, no_verify=False)


def test_invalid_repo_url_is_rejected():
    with pytest.raises(ConfigError):
        Config.from_toml('[workspace]\nrepo_url = "not a url"\n')