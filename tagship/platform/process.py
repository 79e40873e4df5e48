"""Subprocess execution with Result-based error handling.

Wraps subprocess.run so callers get ``Ok(stdout)`` or ``Err(ProcessError)``
instead of exceptions. Both helpers accept ``secrets``: every occurrence of
those strings is masked in the recorded command and in captured output, so a
token passed on a command line can never leak through an error message.

Usage:
    result = run(["cargo", "pkgid"], cwd=repo_root, timeout=30.0)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from tagship.core.result import Err, Ok, Result

__all__ = ["MASK", "ProcessError", "redact", "run", "run_streaming"]

MASK = "***"


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed, secrets masked.
        returncode: The exit code of the process (-1 if it never ran or timed out).
        stdout: Standard output, secrets masked (empty when streamed).
        stderr: Standard error, secrets masked (empty when streamed).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def timed_out(self) -> bool:
        return self.returncode == -1 and self.stderr.startswith("Command timed out")

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace each non-empty secret in ``text`` with ``***``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, MASK)
    return text


def _masked(cmd: list[str], secrets: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(redact(part, secrets) for part in cmd)


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    secrets: Iterable[str] = (),
) -> Result[str, ProcessError]:
    """Execute a command and capture its output.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).
        secrets: Strings to mask in the returned error.

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    hidden = tuple(secrets)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        stdout = e.stdout if isinstance(e.stdout, str) else ""
        return Err(
            ProcessError(
                command=_masked(cmd, hidden),
                returncode=-1,
                stdout=redact(stdout, hidden),
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=_masked(cmd, hidden),
                returncode=-1,
                stdout="",
                stderr=redact(str(e), hidden),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=_masked(cmd, hidden),
                returncode=proc.returncode,
                stdout=redact(proc.stdout, hidden),
                stderr=redact(proc.stderr, hidden),
            )
        )

    return Ok(proc.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    secrets: Iterable[str] = (),
) -> Result[None, ProcessError]:
    """Execute a command with its output going straight to the terminal.

    Use this for long-running tools (``cargo publish``) whose progress the
    user should see. Nothing is captured, so the error carries only the exit
    code. Never use it for a command whose output could echo a secret.

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    hidden = tuple(secrets)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=_masked(cmd, hidden),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=_masked(cmd, hidden),
                returncode=-1,
                stdout="",
                stderr=redact(str(e), hidden),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=_masked(cmd, hidden),
                returncode=proc.returncode,
                stdout="",
                stderr="",
            )
        )

    return Ok(None)
