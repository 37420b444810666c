"""Commit metadata for benchmark runs.

Reads the commit a run was measured at from a local git checkout and
from the GitHub Actions environment.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from benchwatch.benchmarks.models import AuthorInfo, CommitInfo
from benchwatch.core.exceptions import VcsError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 10
NOREPLY_SUFFIX = "@users.noreply.github.com"
MAX_USERNAME_LENGTH = 39

# id, subject, committer time, author name, author email
_SHOW_FORMAT = "%H%x00%s%x00%ct%x00%an%x00%ae"

_GITHUB_REPO = re.compile(r"^(?:https?://[^/]+/|ssh://git@[^/]+/|git@[^:]+:)?([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")


def _git(args: list[str], repo_path: Path | str) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=repo_path,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise VcsError(f"git {args[0]} timed out after {GIT_TIMEOUT}s") from e
    except OSError as e:
        raise VcsError(f"Failed to run git: {e}") from e

    if result.returncode != 0:
        raise VcsError(f"git {args[0]} failed: {result.stderr.strip() or result.returncode}")
    return result.stdout


def extract_github_username(email: str | None, name: str) -> str | None:
    """Guess a GitHub username from a commit author.

    Noreply addresses ("alice@users.noreply.github.com" or
    "12345+alice@users.noreply.github.com") give the username directly.
    Otherwise the author name is used if it looks like a login.

    Example:
        >>> extract_github_username("12345+alice@users.noreply.github.com", "Alice A.")
        'alice'
    """
    if email and email.endswith(NOREPLY_SUFFIX):
        local_part = email.split("@", 1)[0]
        return local_part.split("+", 1)[1] if "+" in local_part else local_part

    if name and " " not in name and len(name) <= MAX_USERNAME_LENGTH:
        return name
    return None


def parse_github_repo(text: str) -> tuple[str, str] | None:
    """Split "owner/repo" or a GitHub remote URL into (owner, repo).

    Example:
        >>> parse_github_repo("git@github.com:owner/repo.git")
        ('owner', 'repo')
    """
    match = _GITHUB_REPO.match(text.strip())
    if match is None:
        return None
    return match.group(1), match.group(2)


def remote_commit_url(commit_id: str, repo_path: Path | str = ".") -> str | None:
    """Commit URL derived from the ``origin`` remote, if it is on GitHub."""
    try:
        remote = _git(["remote", "get-url", "origin"], repo_path).strip()
    except VcsError as e:
        logger.debug(f"No origin remote: {e}")
        return None

    if "github.com" not in remote:
        return None
    owner_repo = parse_github_repo(remote)
    if owner_repo is None:
        return None
    return f"https://github.com/{owner_repo[0]}/{owner_repo[1]}/commit/{commit_id}"


def get_commit_info(repo_path: Path | str = ".", ref: str | None = None) -> CommitInfo:
    """Read commit metadata with ``git show``.

    Args:
        repo_path: Directory inside the git checkout.
        ref: Commit to read. Defaults to HEAD.

    Returns:
        The commit, with its first message line, author and, when the
        origin remote is on GitHub, its URL.

    Raises:
        VcsError: If git is unavailable, times out or cannot resolve ``ref``.
    """
    output = _git(["show", "-s", f"--format={_SHOW_FORMAT}", ref or "HEAD"], repo_path)
    fields = output.strip("\n").split("\x00")
    if len(fields) != 5:
        raise VcsError(f"Unexpected git show output for {ref or 'HEAD'}")

    commit_id, subject, committed, author_name, author_email = fields
    try:
        timestamp = datetime.fromtimestamp(int(committed), tz=timezone.utc)
    except ValueError as e:
        raise VcsError(f"Invalid commit timestamp '{committed}'") from e

    name = author_name or "Unknown"
    email = author_email or None
    logger.debug(f"Commit: {commit_id[:7]} - {subject}")

    return CommitInfo(
        id=commit_id,
        message=subject,
        timestamp=timestamp,
        url=remote_commit_url(commit_id, repo_path),
        author=AuthorInfo(name=name, email=email, username=extract_github_username(email, name)),
    )


@dataclass(frozen=True)
class GitHubActionsEnv:
    """The GitHub Actions variables used to describe a run.

    Attributes:
        repository: "owner/repo" from GITHUB_REPOSITORY.
        sha: Commit under test from GITHUB_SHA.
        server_url: GITHUB_SERVER_URL, defaulting to https://github.com.
        actions: Whether GITHUB_ACTIONS is "true".
    """

    repository: str | None = None
    sha: str | None = None
    server_url: str = "https://github.com"
    actions: bool = False

    @classmethod
    def from_env(cls) -> GitHubActionsEnv:
        return cls(
            repository=os.environ.get("GITHUB_REPOSITORY") or None,
            sha=os.environ.get("GITHUB_SHA") or None,
            server_url=os.environ.get("GITHUB_SERVER_URL") or "https://github.com",
            actions=os.environ.get("GITHUB_ACTIONS") == "true",
        )

    def is_github_actions(self) -> bool:
        return self.actions

    def owner_repo(self) -> tuple[str, str] | None:
        if self.repository is None:
            return None
        return parse_github_repo(self.repository)

    def commit_url(self, sha: str) -> str | None:
        """Commit URL on the server the workflow runs on."""
        owner_repo = self.owner_repo()
        if owner_repo is None:
            return None
        return f"{self.server_url.rstrip('/')}/{owner_repo[0]}/{owner_repo[1]}/commit/{sha}"
