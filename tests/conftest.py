"""
conftest.py - Pytest configuration for template updater tests

Provides throw-away git repositories with fixed author dates and in-memory
fakes for the repository interfaces.
"""

import os
import subprocess
from pathlib import Path

import pytest

from template_updater.git.domain.entities import Commit
from template_updater.git.domain.errors import CommandFailedError
from template_updater.git.domain.value_objects import CherryPickOptions, LogField
from template_updater.git.repositories.interfaces import GitRepository
from template_updater.updates.repositories.interfaces import (
    OperatorPromptRepository,
    PackageManagerRepository,
)


# ---------------------------------------------------------------------------
# Real git repositories
# ---------------------------------------------------------------------------


def run_git(repo: Path, *args: str, timestamp: int | None = None) -> str:
    """Run git in repo and return stdout."""
    env = dict(os.environ)
    if timestamp is not None:
        env["GIT_AUTHOR_DATE"] = f"@{timestamp} +0000"
        env["GIT_COMMITTER_DATE"] = f"@{timestamp} +0000"
    result = subprocess.run(
        ["git", *args], cwd=repo, env=env, capture_output=True, text=True, check=True
    )
    return result.stdout


def commit_file(
    repo: Path, name: str, content: str, message: str, timestamp: int | None = None
) -> str:
    """Write a file, commit it and return the short hash."""
    (repo / name).write_text(content)
    run_git(repo, "add", name)
    run_git(repo, "commit", "-m", message, timestamp=timestamp)
    return run_git(repo, "log", "-1", "--format=%h").strip()


def log_subjects(repo: Path) -> list[str]:
    """Subjects on the checked-out branch, newest first."""
    return run_git(repo, "log", "--format=%s").strip().split("\n")


@pytest.fixture
def git_env(tmp_path, monkeypatch):
    """Isolate git from the user's configuration."""
    gitconfig = tmp_path / "gitconfig"
    gitconfig.write_text(
        "[user]\n\tname = Test User\n\temail = test@test.com\n"
        "[commit]\n\tgpgsign = false\n"
        "[init]\n\tdefaultBranch = master\n"
    )
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@test.com")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return gitconfig


@pytest.fixture
def make_repo(tmp_path, git_env):
    """Factory creating an empty repository on branch master."""

    def _make(name: str) -> Path:
        repo = tmp_path / name
        repo.mkdir()
        run_git(repo, "init")
        run_git(repo, "symbolic-ref", "HEAD", "refs/heads/master")
        return repo

    return _make


@pytest.fixture
def template_and_downstream(tmp_path, make_repo):
    """A template repository with two commits and a downstream clone of it."""
    template = make_repo("template")
    commit_file(template, "README.md", "# Template\n", "Initial commit", timestamp=1_600_000_000)
    commit_file(
        template,
        "app.txt",
        "line one\nline two\nline three\n",
        "Add app",
        timestamp=1_600_000_100,
    )

    downstream = tmp_path / "downstream"
    run_git(tmp_path, "clone", "-q", str(template), str(downstream))
    run_git(downstream, "checkout", "-q", "-B", "master")
    return template, downstream


# ---------------------------------------------------------------------------
# In-memory fakes
# ---------------------------------------------------------------------------


class FakeGitRepository(GitRepository):
    """GitRepository keeping histories in memory and recording calls.

    Each entry of commit_outcomes is consumed by one commit() call: None means
    success, an exception instance is raised.
    """

    def __init__(
        self,
        histories: dict[str, list[Commit]] | None = None,
        branch: str = "master",
        commit_outcomes: list[Exception | None] | None = None,
        fail_cherry_pick: bool = False,
        fail_stage: bool = False,
        fail_add_remote: bool = False,
        stash_result: bool = True,
    ) -> None:
        self.histories = histories or {}
        self.branch = branch
        self.commit_outcomes = list(commit_outcomes or [])
        self.fail_cherry_pick = fail_cherry_pick
        self.fail_stage = fail_stage
        self.fail_add_remote = fail_add_remote
        self.stash_result = stash_result
        self.remotes: dict[str, str] = {}
        self.calls: list[tuple] = []

    def current_branch(self) -> str:
        return self.branch

    def log_field(self, ref: str, field: LogField) -> list[str]:
        self.calls.append(("log", ref, field))
        if ref not in self.histories:
            raise CommandFailedError(["git", "log", ref], f"fatal: bad revision '{ref}'", 128)
        attribute = {
            LogField.HASH: "hash",
            LogField.SUBJECT: "message",
            LogField.AUTHOR_TIMESTAMP: "timestamp",
        }[field]
        return [str(getattr(commit, attribute)) for commit in self.histories[ref]]

    def add_remote(self, name: str, url: str) -> None:
        self.calls.append(("add_remote", name, url))
        if self.fail_add_remote:
            raise CommandFailedError(["git", "remote", "add"], "fatal: repository not found", 128)
        self.remotes[name] = url

    def remove_remote(self, name: str) -> None:
        self.calls.append(("remove_remote", name))
        if name not in self.remotes:
            raise CommandFailedError(["git", "remote", "remove"], "error: No such remote", 2)
        del self.remotes[name]

    def cherry_pick(self, commit_hash: str, options: CherryPickOptions) -> None:
        self.calls.append(("cherry_pick", commit_hash, options))
        if self.fail_cherry_pick:
            raise CommandFailedError(["git", "cherry-pick"], "CONFLICT (content)", 1)

    def stage_tracked(self) -> None:
        self.calls.append(("stage_tracked",))
        if self.fail_stage:
            raise CommandFailedError(["git", "add", "-u"], "fatal: error", 128)

    def commit(self, message: str, allow_empty: bool = False) -> None:
        self.calls.append(("commit", message, allow_empty))
        outcome = self.commit_outcomes.pop(0) if self.commit_outcomes else None
        if outcome is not None:
            raise outcome

    def stash(self, message: str) -> bool:
        self.calls.append(("stash", message))
        return self.stash_result

    def unstash(self) -> None:
        self.calls.append(("unstash",))

    def calls_named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


class FakePackageManager(PackageManagerRepository):
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.upgrades: list[tuple[str, str]] = []

    def upgrade(self, package: str, version: str) -> bool:
        self.upgrades.append((package, version))
        return self.succeed


class FakeOperatorPrompt(OperatorPromptRepository):
    """Records prompts and optionally runs a callback to resolve conflicts."""

    def __init__(self, on_prompt=None) -> None:
        self.on_prompt = on_prompt
        self.prompts: list[tuple[Commit, str]] = []

    def wait_for_resolution(self, commit: Commit, output: str) -> None:
        self.prompts.append((commit, output))
        if self.on_prompt is not None:
            self.on_prompt(commit, output)


@pytest.fixture
def fake_package_manager():
    return FakePackageManager()


@pytest.fixture
def fake_prompt():
    return FakeOperatorPrompt()
