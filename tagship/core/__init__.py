"""Core domain types and logic."""

from .config import (
    ConfigError,
    Credentials,
    FileConfig,
    ReleaseConfig,
    build_release_config,
    credentials_from_env,
    load_config,
)
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "Credentials",
    "FileConfig",
    "ReleaseConfig",
    "build_release_config",
    "credentials_from_env",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
