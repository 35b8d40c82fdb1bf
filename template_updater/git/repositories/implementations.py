"""Concrete implementation of Git repository operations."""

import subprocess
from collections.abc import Sequence
from pathlib import Path

from template_updater.git.domain.errors import (
    ApplicationNoOpError,
    CommandFailedError,
    CommitConflictError,
    HistoryUnavailableError,
)
from template_updater.git.domain.value_objects import CherryPickOptions, LogField
from template_updater.git.repositories.interfaces import CommandRunner, GitRepository
from template_updater.logger import echo_raw, get_logger

logger = get_logger(__name__)

# `git commit` output when the index matches HEAD
NOTHING_TO_COMMIT_MARKERS = ("nothing to commit", "working tree clean")


class SubprocessCommandRunner(CommandRunner):
    """Runs commands with subprocess in a fixed working directory."""

    def __init__(self, cwd: Path | None = None) -> None:
        """
        Initialize SubprocessCommandRunner.

        Args:
            cwd: Directory to run commands in. Defaults to the process cwd.
        """
        self._cwd = cwd

    def run(self, argv: Sequence[str], verbose: bool = False) -> str:
        """
        Run a command and return its combined stdout and stderr.

        Args:
            argv: Program and arguments, passed without shell parsing
            verbose: Echo the output while the command runs

        Returns:
            Combined output text

        Raises:
            CommandFailedError: If the command exits with a non-zero status
                or cannot be started
        """
        logger.debug("» %s", " ".join(argv))
        chunks: list[str] = []
        try:
            with subprocess.Popen(
                list(argv),
                cwd=self._cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            ) as process:
                assert process.stdout is not None
                for line in process.stdout:
                    chunks.append(line)
                    if verbose:
                        echo_raw(line)
                returncode = process.wait()
        except OSError as e:
            raise CommandFailedError(argv, str(e), 127) from e

        output = "".join(chunks)
        logger.debug("« exit %d", returncode)
        if returncode != 0:
            raise CommandFailedError(argv, output, returncode)
        return output


class GitRepositoryImpl(GitRepository):
    """Concrete implementation of Git repository operations using git commands."""

    def __init__(
        self,
        repo_path: Path | None = None,
        runner: CommandRunner | None = None,
        verbose: bool = False,
    ) -> None:
        """
        Initialize GitRepositoryImpl.

        Args:
            repo_path: Path to the git repository (defaults to the process cwd)
            runner: Command runner; defaults to a subprocess runner in repo_path
            verbose: Echo the output of commands that modify the repository
        """
        self._runner = runner or SubprocessCommandRunner(repo_path)
        self._verbose = verbose

    def _git(self, *args: str, verbose: bool = False) -> str:
        return self._runner.run(["git", *args], verbose=verbose)

    def current_branch(self) -> str:
        """
        Get the name of the checked-out branch.

        Raises:
            HistoryUnavailableError: If HEAD is not on a branch
        """
        try:
            branch = self._git("rev-parse", "--abbrev-ref", "HEAD").strip()
        except CommandFailedError as e:
            raise HistoryUnavailableError(
                f"Failed to determine the current branch: {e.output.strip()}"
            ) from e

        if not branch or branch == "HEAD":
            raise HistoryUnavailableError("HEAD is detached; check out a branch first")
        return branch

    def log_field(self, ref: str, field: LogField) -> list[str]:
        output = self._git("--no-pager", "log", ref, f"--format={field.value}", "--")
        if not output:
            return []
        # One line per commit; an empty subject is an empty line
        return output.removesuffix("\n").split("\n")

    def add_remote(self, name: str, url: str) -> None:
        self._git("remote", "add", "-f", name, url, verbose=self._verbose)

    def remove_remote(self, name: str) -> None:
        self._git("remote", "remove", name)

    def cherry_pick(self, commit_hash: str, options: CherryPickOptions) -> None:
        self._git(
            "cherry-pick",
            *options.strategy_options(),
            "--no-commit",
            commit_hash,
            verbose=self._verbose,
        )

    def stage_tracked(self) -> None:
        self._git("add", "-u", verbose=self._verbose)

    def commit(self, message: str, allow_empty: bool = False) -> None:
        """
        Create a commit from the index.

        Args:
            message: Full commit message
            allow_empty: Record the commit even without changes

        Raises:
            ApplicationNoOpError: If there is nothing to commit
            CommitConflictError: If the commit fails for any other reason
        """
        args = ["commit"]
        if allow_empty:
            args.append("--allow-empty")
        args.extend(["-m", message])

        try:
            self._git(*args, verbose=self._verbose)
        except CommandFailedError as e:
            if not allow_empty and any(
                marker in e.output for marker in NOTHING_TO_COMMIT_MARKERS
            ):
                raise ApplicationNoOpError(e.output.strip()) from e
            raise CommitConflictError(e.output) from e

    def stash(self, message: str) -> bool:
        output = self._git("stash", "push", "-m", message, verbose=self._verbose)
        return "No local changes" not in output

    def unstash(self) -> None:
        self._git("stash", "pop", verbose=self._verbose)
