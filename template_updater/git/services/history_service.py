"""History service for reading commit metadata from branches."""

from template_updater.git.domain.entities import Commit, HistorySnapshot
from template_updater.git.domain.errors import CommandFailedError, HistoryUnavailableError
from template_updater.git.domain.value_objects import LogField
from template_updater.git.repositories.interfaces import GitRepository
from template_updater.logger import get_logger

logger = get_logger(__name__)


class HistoryService:
    """Service for reading branch histories."""

    def __init__(self, git_repository: GitRepository) -> None:
        """
        Initialize HistoryService.

        Args:
            git_repository: Repository implementation for Git operations
        """
        self._git_repository = git_repository

    def read_history(self, ref: str) -> HistorySnapshot:
        """
        Read the commits reachable from a ref.

        Hashes, subjects and author timestamps are queried separately and
        zipped by position.

        Args:
            ref: Branch or ref name

        Returns:
            HistorySnapshot with commits ordered newest first

        Raises:
            HistoryUnavailableError: If the ref cannot be read or the three
                queries disagree
        """
        try:
            hashes = self._git_repository.log_field(ref, LogField.HASH)
            messages = self._git_repository.log_field(ref, LogField.SUBJECT)
            timestamps = self._git_repository.log_field(ref, LogField.AUTHOR_TIMESTAMP)
        except CommandFailedError as e:
            raise HistoryUnavailableError(
                f"Failed to read history of '{ref}': {e.output.strip()}"
            ) from e

        if not len(hashes) == len(messages) == len(timestamps):
            raise HistoryUnavailableError(
                f"Inconsistent history for '{ref}': {len(hashes)} hashes, "
                f"{len(messages)} subjects, {len(timestamps)} timestamps"
            )

        commits: list[Commit] = []
        for commit_hash, message, timestamp in zip(hashes, messages, timestamps):
            try:
                commits.append(
                    Commit(hash=commit_hash.strip(), message=message, timestamp=int(timestamp))
                )
            except ValueError as e:
                raise HistoryUnavailableError(
                    f"Invalid author timestamp '{timestamp}' for commit {commit_hash} on '{ref}'"
                ) from e

        logger.debug("Read %d commits from %s", len(commits), ref)
        return HistorySnapshot(ref=ref, commits=tuple(commits))

    def read_current_history(self) -> HistorySnapshot:
        """
        Read the history of the checked-out branch.

        Raises:
            HistoryUnavailableError: If HEAD is detached or the branch cannot be read
        """
        return self.read_history(self._git_repository.current_branch())
