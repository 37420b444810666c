"""Tests for commit metadata lookup."""

from __future__ import annotations

import subprocess
from datetime import datetime, timezone
from typing import Any

import pytest

from benchwatch.core.exceptions import VcsError
from benchwatch.vcs import (
    GitHubActionsEnv,
    extract_github_username,
    get_commit_info,
    parse_github_repo,
)

COMMIT_ID = "0123456789abcdef0123456789abcdef01234567"


class FakeGit:
    """Stand-in for subprocess.run answering git commands by subcommand."""

    def __init__(self, outputs: dict[str, tuple[int, str]]) -> None:
        self.outputs = outputs
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(args)
        assert kwargs["timeout"] > 0
        returncode, stdout = self.outputs.get(args[1], (128, ""))
        stderr = "" if returncode == 0 else "fatal: not a git repository"
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)


def show_output(email: str = "alice@example.com", name: str = "Alice Liddell") -> str:
    return f"{COMMIT_ID}\x00Speed up parser\x001705312800\x00{name}\x00{email}\n"


# ============================================================================
# get_commit_info
# ============================================================================


class TestGetCommitInfo:
    """Tests for get_commit_info."""

    def test_reads_commit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Id, subject, time and author come from git show."""
        fake = FakeGit(
            {
                "show": (0, show_output()),
                "remote": (0, "git@github.com:owner/repo.git\n"),
            }
        )
        monkeypatch.setattr(subprocess, "run", fake)

        commit = get_commit_info("/work/repo")

        assert commit.id == COMMIT_ID
        assert commit.message == "Speed up parser"
        assert commit.timestamp == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert commit.author is not None
        assert commit.author.name == "Alice Liddell"
        assert commit.author.email == "alice@example.com"
        assert commit.author.username is None
        assert commit.url == f"https://github.com/owner/repo/commit/{COMMIT_ID}"
        assert fake.calls[0][-1] == "HEAD"

    def test_ref(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An explicit ref is passed to git show."""
        fake = FakeGit({"show": (0, show_output())})
        monkeypatch.setattr(subprocess, "run", fake)

        commit = get_commit_info(ref="v1.0")

        assert fake.calls[0][-1] == "v1.0"
        assert commit.url is None

    def test_non_github_remote(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeGit({"show": (0, show_output()), "remote": (0, "https://gitlab.com/owner/repo.git\n")})
        monkeypatch.setattr(subprocess, "run", fake)

        assert get_commit_info().url is None

    def test_git_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A failing git command is a VcsError."""
        monkeypatch.setattr(subprocess, "run", FakeGit({}))

        with pytest.raises(VcsError, match="not a git repository"):
            get_commit_info()

    def test_git_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def missing(*args: Any, **kwargs: Any) -> None:
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", missing)

        with pytest.raises(VcsError):
            get_commit_info()

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def slow(*args: Any, **kwargs: Any) -> None:
            raise subprocess.TimeoutExpired(cmd="git", timeout=10)

        monkeypatch.setattr(subprocess, "run", slow)

        with pytest.raises(VcsError, match="timed out"):
            get_commit_info()

    def test_unexpected_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(subprocess, "run", FakeGit({"show": (0, "garbage\n")}))

        with pytest.raises(VcsError):
            get_commit_info()


# ============================================================================
# Helpers
# ============================================================================


class TestExtractGithubUsername:
    """Tests for extract_github_username."""

    @pytest.mark.parametrize(
        ("email", "name", "expected"),
        [
            ("alice@users.noreply.github.com", "Alice Liddell", "alice"),
            ("12345+alice@users.noreply.github.com", "Alice Liddell", "alice"),
            ("alice@example.com", "alice-l", "alice-l"),
            ("alice@example.com", "Alice Liddell", None),
            (None, "x" * 40, None),
            (None, "", None),
        ],
    )
    def test_extract(self, email: str | None, name: str, expected: str | None) -> None:
        assert extract_github_username(email, name) == expected


class TestParseGithubRepo:
    """Tests for parse_github_repo."""

    @pytest.mark.parametrize(
        "text",
        [
            "owner/repo",
            "https://github.com/owner/repo",
            "https://github.com/owner/repo.git",
            "git@github.com:owner/repo.git",
            "ssh://git@github.com/owner/repo.git",
        ],
    )
    def test_formats(self, text: str) -> None:
        assert parse_github_repo(text) == ("owner", "repo")

    def test_invalid(self) -> None:
        assert parse_github_repo("not a repo") is None


class TestGitHubActionsEnv:
    """Tests for GitHubActionsEnv."""

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        monkeypatch.setenv("GITHUB_REPOSITORY", "owner/repo")
        monkeypatch.setenv("GITHUB_SHA", COMMIT_ID)
        monkeypatch.setenv("GITHUB_SERVER_URL", "https://github.example.com")

        env = GitHubActionsEnv.from_env()

        assert env.is_github_actions() is True
        assert env.sha == COMMIT_ID
        assert env.commit_url("abc") == "https://github.example.com/owner/repo/commit/abc"

    def test_outside_actions(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("GITHUB_ACTIONS", "GITHUB_REPOSITORY", "GITHUB_SHA", "GITHUB_SERVER_URL"):
            monkeypatch.delenv(name, raising=False)

        env = GitHubActionsEnv.from_env()

        assert env.is_github_actions() is False
        assert env.server_url == "https://github.com"
        assert env.commit_url("abc") is None
