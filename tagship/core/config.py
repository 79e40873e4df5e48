"""Typed configuration loading and access.

Release settings come from two places:
- an optional ``tagship.toml`` in the repository root (remote, tag prefix,
  timeouts, push retries)
- the environment, for the two credential tokens only

Both are combined into a single frozen ``ReleaseConfig`` that is passed into
the sequencer's constructor; nothing below the CLI reads ``os.environ``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote, urlsplit

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_int, get_str, get_table

__all__ = [
    "ConfigError",
    "Credentials",
    "FileConfig",
    "ReleaseConfig",
    "RemoteConfig",
    "TimeoutsConfig",
    "build_release_config",
    "credentials_from_env",
    "load_config",
    "load_config_or_default",
    "DEFAULT_CONFIG_FILE",
    "REGISTRY_TOKEN_ENV",
    "REMOTE_TOKEN_ENV",
]

DEFAULT_CONFIG_FILE = "tagship.toml"

REGISTRY_TOKEN_ENV = "CARGO_TOKEN"
REMOTE_TOKEN_ENV = "GH_TOKEN"

# Seconds
PUBLISH_TIMEOUT_SECONDS = 15 * 60.0
PKGID_TIMEOUT_SECONDS = 30.0
TAG_TIMEOUT_SECONDS = 30.0
PUSH_TIMEOUT_SECONDS = 3 * 60.0

DEFAULT_TAG_PREFIX = "v"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded, parsed or completed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class TimeoutsConfig:
    """Per-step subprocess timeouts in seconds."""

    publish: float = PUBLISH_TIMEOUT_SECONDS
    pkgid: float = PKGID_TIMEOUT_SECONDS
    tag: float = TAG_TIMEOUT_SECONDS
    push: float = PUSH_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class RemoteConfig:
    """Where release tags are pushed.

    ``user`` defaults to the repository owner (first URL path segment).
    """

    url: str | None = None
    user: str | None = None


@dataclass(frozen=True, slots=True)
class FileConfig:
    """Settings read from ``tagship.toml``."""

    remote: RemoteConfig = field(default_factory=RemoteConfig)
    tag_prefix: str = DEFAULT_TAG_PREFIX
    timeouts: TimeoutsConfig = field(default_factory=TimeoutsConfig)
    push_retry_attempts: int = 1

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> FileConfig:
        """Create FileConfig from a mapping (parsed TOML)."""
        remote: StrDict = get_table(data, "remote") or {}
        tag: StrDict = get_table(data, "tag") or {}
        timeouts: StrDict = get_table(data, "timeouts") or {}
        push: StrDict = get_table(data, "push") or {}

        if "token" in remote:
            raise ValueError("remote.token is not allowed; set it through the environment")

        retry_attempts = get_int(push, "retry_attempts")
        if retry_attempts is not None and retry_attempts < 1:
            raise ValueError("push.retry_attempts must be >= 1")

        return cls(
            remote=RemoteConfig(
                url=get_str(remote, "url"),
                user=get_str(remote, "user"),
            ),
            # An explicit empty prefix is allowed: tags become bare versions.
            tag_prefix=(
                tag["prefix"] if isinstance(tag.get("prefix"), str) else DEFAULT_TAG_PREFIX
            ),
            timeouts=_timeouts_from_table(timeouts),
            push_retry_attempts=retry_attempts or 1,
        )


def _timeouts_from_table(table: StrDict) -> TimeoutsConfig:
    values: dict[str, float] = {}
    for name in ("publish", "pkgid", "tag", "push"):
        value = get_float(table, name)
        if value is None:
            continue
        if value <= 0:
            raise ValueError(f"timeouts.{name} must be > 0")
        values[name] = value
    return TimeoutsConfig(**values)


@dataclass(frozen=True, slots=True)
class Credentials:
    """The two secret tokens. Never part of ``repr``."""

    registry_token: str = field(repr=False)
    remote_token: str = field(repr=False)

    @property
    def secrets(self) -> tuple[str, ...]:
        """Values to mask in any command echo or error text.

        Includes the URL-quoted form, which is what appears in a remote URL.
        """
        values = (self.registry_token, self.remote_token)
        quoted = tuple(quote(v, safe="") for v in values)
        return tuple(dict.fromkeys(values + quoted))


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Everything a release run needs, resolved up front."""

    repo_root: Path
    credentials: Credentials
    remote_url: str
    remote_user: str
    tag_prefix: str = DEFAULT_TAG_PREFIX
    timeouts: TimeoutsConfig = field(default_factory=TimeoutsConfig)
    push_retry_attempts: int = 1


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[FileConfig, ConfigError]:
    """Load and parse ``tagship.toml``.

    Args:
        path: Path to the config file

    Returns:
        Ok(FileConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(FileConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[FileConfig, ConfigError]:
    """Like load_config, but a missing file yields the defaults."""
    if not path.exists():
        return Ok(FileConfig())
    return load_config(path)


def credentials_from_env(env: Mapping[str, str]) -> Result[Credentials, ConfigError]:
    """Read both tokens from an environment mapping.

    Blank values count as missing.
    """
    missing = [
        name for name in (REGISTRY_TOKEN_ENV, REMOTE_TOKEN_ENV) if not env.get(name, "").strip()
    ]
    if missing:
        return Err(
            ConfigError(
                f"missing credentials: {', '.join(missing)}",
                hint="Export the registry and remote tokens before releasing.",
            )
        )
    return Ok(
        Credentials(
            registry_token=env[REGISTRY_TOKEN_ENV].strip(),
            remote_token=env[REMOTE_TOKEN_ENV].strip(),
        )
    )


def _owner_from_url(url: str) -> str | None:
    parts = [p for p in urlsplit(url).path.split("/") if p]
    return parts[0] if parts else None


def build_release_config(
    *,
    repo_root: Path,
    file_config: FileConfig,
    credentials: Credentials,
    remote_url: str | None = None,
    remote_user: str | None = None,
) -> Result[ReleaseConfig, ConfigError]:
    """Merge file settings, command-line overrides and credentials.

    Overrides win over the file. The remote must be an https URL without
    embedded credentials, since the token is added at push time.
    """
    url = (remote_url or "").strip() or file_config.remote.url
    if url is None:
        return Err(
            ConfigError(
                "no remote URL configured",
                hint=f"Set [remote] url in {DEFAULT_CONFIG_FILE} or pass --remote-url.",
            )
        )

    parts = urlsplit(url)
    if parts.scheme != "https" or not parts.hostname:
        return Err(ConfigError(f"remote URL must be https://host/path: {url}"))
    if parts.username or parts.password:
        return Err(ConfigError("remote URL must not contain credentials"))

    user = (remote_user or "").strip() or file_config.remote.user or _owner_from_url(url)
    if user is None:
        return Err(
            ConfigError(
                f"cannot derive remote user from URL: {url}",
                hint="Pass --remote-user or set [remote] user.",
            )
        )

    return Ok(
        ReleaseConfig(
            repo_root=repo_root,
            credentials=credentials,
            remote_url=url,
            remote_user=user,
            tag_prefix=file_config.tag_prefix,
            timeouts=file_config.timeouts,
            push_retry_attempts=file_config.push_retry_attempts,
        )
    )
