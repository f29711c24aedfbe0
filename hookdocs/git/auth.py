"""Authentication strategy selection for repository clones."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional

TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


class AuthMethod:
    TOKEN = "token"
    GH_CLI = "gh"
    SSH = "ssh"


@dataclass(frozen=True)
class AuthStrategy:
    """Authentication chosen once per run and applied to every product."""

    method: str
    token: Optional[str] = None

    def describe(self) -> str:
        if self.method == AuthMethod.TOKEN:
            return "access token from the environment (HTTPS)"
        if self.method == AuthMethod.GH_CLI:
            return "authenticated GitHub CLI session (HTTPS)"
        return "SSH keys"

    def redact(self, text: str) -> str:
        """Hide the token if it leaked into command output."""
        if self.token and text:
            return text.replace(self.token, "***")
        return text


def detect_auth_method(
    env: Mapping[str, str] | None = None,
    runner: CommandRunner | None = None,
) -> AuthStrategy:
    """Pick token, then GitHub CLI session, then SSH."""
    environ = os.environ if env is None else env
    for name in TOKEN_ENV_VARS:
        token = environ.get(name)
        if token:
            return AuthStrategy(AuthMethod.TOKEN, token=token)

    run = runner or _default_runner
    try:
        completed = run(["gh", "auth", "status"])
    except OSError:
        completed = None
    if completed is not None and completed.returncode == 0:
        return AuthStrategy(AuthMethod.GH_CLI)
    return AuthStrategy(AuthMethod.SSH)


def clone_url(repo: str, strategy: AuthStrategy, *, host: str = "github.com") -> str:
    if strategy.method == AuthMethod.TOKEN:
        return f"https://x-access-token:{strategy.token}@{host}/{repo}.git"
    if strategy.method == AuthMethod.GH_CLI:
        return f"https://{host}/{repo}.git"
    return f"git@{host}:{repo}.git"


def _default_runner(
    args: Iterable[str],
    *,
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(
        list(args),
        cwd=cwd,
        env=dict(env) if env is not None else None,
        check=False,
        text=True,
        capture_output=True,
    )


__all__ = ["AuthMethod", "AuthStrategy", "clone_url", "detect_auth_method"]
