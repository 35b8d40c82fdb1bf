"""Repository interfaces for Git operations."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from template_updater.git.domain.value_objects import CherryPickOptions, LogField


class CommandRunner(ABC):
    """Interface for running external commands."""

    @abstractmethod
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
        """
        ...


class GitRepository(ABC):
    """Interface for Git repository operations."""

    @abstractmethod
    def current_branch(self) -> str:
        """
        Get the name of the checked-out branch.

        Raises:
            HistoryUnavailableError: If HEAD is not on a branch
        """
        ...

    @abstractmethod
    def log_field(self, ref: str, field: LogField) -> list[str]:
        """
        Read one formatted field for every commit reachable from a ref.

        Args:
            ref: Branch or ref name
            field: Placeholder to format each commit with

        Returns:
            One value per commit, newest first

        Raises:
            CommandFailedError: If the ref cannot be read
        """
        ...

    @abstractmethod
    def add_remote(self, name: str, url: str) -> None:
        """
        Add a remote and fetch it.

        Raises:
            CommandFailedError: If the remote cannot be added or fetched
        """
        ...

    @abstractmethod
    def remove_remote(self, name: str) -> None:
        """
        Remove a remote.

        Raises:
            CommandFailedError: If the remote does not exist
        """
        ...

    @abstractmethod
    def cherry_pick(self, commit_hash: str, options: CherryPickOptions) -> None:
        """
        Apply a commit's changes to the working tree without committing.

        Raises:
            CommandFailedError: If the patch does not apply cleanly
        """
        ...

    @abstractmethod
    def stage_tracked(self) -> None:
        """
        Stage every modified tracked file.

        Raises:
            CommandFailedError: If staging fails
        """
        ...

    @abstractmethod
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
        ...

    @abstractmethod
    def stash(self, message: str) -> bool:
        """
        Stash local changes.

        Returns:
            True if changes were stashed, False if the tree was clean
        """
        ...

    @abstractmethod
    def unstash(self) -> None:
        """
        Restore the most recent stash entry.

        Raises:
            CommandFailedError: If the stash cannot be applied
        """
        ...
