"""Git helpers for keeping product checkouts current."""

from .auth import AuthMethod, AuthStrategy, clone_url, detect_auth_method
from .sync import GitUnavailableError, RepoSynchronizer, ensure_git_available

__all__ = [
    "AuthMethod",
    "AuthStrategy",
    "GitUnavailableError",
    "RepoSynchronizer",
    "clone_url",
    "detect_auth_method",
    "ensure_git_available",
]
