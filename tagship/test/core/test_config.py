"""Tests for tagship.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from tagship.core.config import (
    Credentials,
    FileConfig,
    RemoteConfig,
    TimeoutsConfig,
    build_release_config,
    credentials_from_env,
    load_config,
    load_config_or_default,
)
from tagship.core.result import Err, Ok


def _creds() -> Credentials:
    return Credentials(registry_token="reg-secret", remote_token="gh-secret")


class TestFileConfig:
    def test_defaults(self) -> None:
        config = FileConfig()
        assert config.remote == RemoteConfig()
        assert config.tag_prefix == "v"
        assert config.timeouts == TimeoutsConfig()
        assert config.push_retry_attempts == 1

    def test_from_dict_empty(self) -> None:
        assert FileConfig.from_dict({}) == FileConfig()

    def test_from_dict_full(self) -> None:
        data = {
            "remote": {"url": "https://github.com/awestlake87/organelle", "user": "bot"},
            "tag": {"prefix": "release-"},
            "timeouts": {"publish": 60, "pkgid": 5.5, "tag": 3, "push": 10},
            "push": {"retry_attempts": 3},
        }
        config = FileConfig.from_dict(data)
        assert config.remote.url == "https://github.com/awestlake87/organelle"
        assert config.remote.user == "bot"
        assert config.tag_prefix == "release-"
        assert config.timeouts == TimeoutsConfig(publish=60.0, pkgid=5.5, tag=3.0, push=10.0)
        assert config.push_retry_attempts == 3

    def test_empty_prefix_allowed(self) -> None:
        assert FileConfig.from_dict({"tag": {"prefix": ""}}).tag_prefix == ""

    def test_token_in_file_rejected(self) -> None:
        with pytest.raises(ValueError, match="environment"):
            FileConfig.from_dict({"remote": {"token": "oops"}})

    def test_retry_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            FileConfig.from_dict({"push": {"retry_attempts": 0}})

    @pytest.mark.parametrize("value", [0, 0.0, -5])
    def test_timeouts_must_be_positive(self, value: float) -> None:
        with pytest.raises(ValueError, match="timeouts.publish"):
            FileConfig.from_dict({"timeouts": {"publish": value}})

    def test_zero_timeout_not_replaced_by_default(self) -> None:
        with pytest.raises(ValueError, match="timeouts.push must be > 0"):
            FileConfig.from_dict({"timeouts": {"publish": 60, "push": 0}})

    def test_partial_timeouts_keep_defaults(self) -> None:
        config = FileConfig.from_dict({"timeouts": {"push": 12}})
        assert config.timeouts == TimeoutsConfig(push=12.0)

    def test_frozen(self) -> None:
        config = FileConfig()
        with pytest.raises(AttributeError):
            config.tag_prefix = "x"  # type: ignore[misc]


class TestLoadConfig:
    def test_load_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "tagship.toml"
        path.write_text('[remote]\nurl = "https://example.org/o/r"\n', encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Ok)
        assert result.value.remote.url == "https://example.org/o/r"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "tagship.toml"
        path.write_text("[remote\n", encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "tagship.toml"
        path.write_text('[remote]\ntoken = "abc"\n', encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message

    def test_negative_timeout_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "tagship.toml"
        path.write_text("[timeouts]\npublish = -5\n", encoding="utf-8")

        result = load_config(path)
        assert isinstance(result, Err)
        assert "timeouts.publish must be > 0" in result.error.message

    def test_or_default_missing_file(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / "tagship.toml")
        assert result == Ok(FileConfig())


class TestCredentials:
    def test_from_env(self) -> None:
        result = credentials_from_env({"CARGO_TOKEN": " reg ", "GH_TOKEN": "gh"})
        assert isinstance(result, Ok)
        assert result.value.registry_token == "reg"
        assert result.value.remote_token == "gh"

    def test_missing_both(self) -> None:
        result = credentials_from_env({})
        assert isinstance(result, Err)
        assert "CARGO_TOKEN" in result.error.message
        assert "GH_TOKEN" in result.error.message

    def test_blank_counts_as_missing(self) -> None:
        result = credentials_from_env({"CARGO_TOKEN": "reg", "GH_TOKEN": "  "})
        assert isinstance(result, Err)
        assert "GH_TOKEN" in result.error.message
        assert "CARGO_TOKEN" not in result.error.message

    def test_repr_hides_tokens(self) -> None:
        text = repr(_creds())
        assert "reg-secret" not in text
        assert "gh-secret" not in text

    def test_secrets_include_quoted_form(self) -> None:
        creds = Credentials(registry_token="a", remote_token="p@ss/word")
        assert "p@ss/word" in creds.secrets
        assert "p%40ss%2Fword" in creds.secrets


class TestBuildReleaseConfig:
    def test_from_file(self, tmp_path: Path) -> None:
        remote = RemoteConfig(url="https://github.com/awestlake87/organelle")
        file_config = FileConfig(remote=remote)
        result = build_release_config(
            repo_root=tmp_path, file_config=file_config, credentials=_creds()
        )
        assert isinstance(result, Ok)
        assert result.value.remote_url == "https://github.com/awestlake87/organelle"
        assert result.value.remote_user == "awestlake87"
        assert result.value.repo_root == tmp_path

    def test_overrides_win(self, tmp_path: Path) -> None:
        file_config = FileConfig(remote=RemoteConfig(url="https://a.example/x/y", user="file"))
        result = build_release_config(
            repo_root=tmp_path,
            file_config=file_config,
            credentials=_creds(),
            remote_url="https://b.example/o/r",
            remote_user="cli",
        )
        assert isinstance(result, Ok)
        assert result.value.remote_url == "https://b.example/o/r"
        assert result.value.remote_user == "cli"

    def test_missing_remote(self, tmp_path: Path) -> None:
        result = build_release_config(
            repo_root=tmp_path, file_config=FileConfig(), credentials=_creds()
        )
        assert isinstance(result, Err)
        assert "no remote URL" in result.error.message

    def test_rejects_non_https(self, tmp_path: Path) -> None:
        result = build_release_config(
            repo_root=tmp_path,
            file_config=FileConfig(),
            credentials=_creds(),
            remote_url="git@github.com:o/r.git",
        )
        assert isinstance(result, Err)

    def test_rejects_embedded_credentials(self, tmp_path: Path) -> None:
        result = build_release_config(
            repo_root=tmp_path,
            file_config=FileConfig(),
            credentials=_creds(),
            remote_url="https://u:p@github.com/o/r",
        )
        assert isinstance(result, Err)
        assert "credentials" in result.error.message

    def test_user_required_when_url_has_no_path(self, tmp_path: Path) -> None:
        result = build_release_config(
            repo_root=tmp_path,
            file_config=FileConfig(),
            credentials=_creds(),
            remote_url="https://github.com",
        )
        assert isinstance(result, Err)
        assert "remote user" in result.error.message
