"""Service managing the temporary upstream remote."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from template_updater.git.domain.errors import CommandFailedError, RemoteSetupError
from template_updater.git.repositories.interfaces import GitRepository
from template_updater.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class RemoteService:
    """Service for the lifecycle of the upstream template remote."""

    def __init__(self, git_repository: GitRepository) -> None:
        """
        Initialize RemoteService.

        Args:
            git_repository: Repository implementation for Git operations
        """
        self._git_repository = git_repository

    def remove_if_present(self, name: str) -> bool:
        """Remove a remote, returning False when it did not exist."""
        try:
            self._git_repository.remove_remote(name)
            logger.debug("Removed remote %s", name)
            return True
        except CommandFailedError:
            return False

    @contextmanager
    def upstream_remote(self, name: str, url: str) -> Iterator[str]:
        """
        Provide a freshly fetched remote for the duration of the block.

        Any stale remote of the same name is removed first, and the remote is
        removed again on every exit path.

        Args:
            name: Remote name
            url: Upstream repository URL

        Yields:
            The remote name

        Raises:
            RemoteSetupError: If the remote cannot be added
        """
        self.remove_if_present(name)
        try:
            self._git_repository.add_remote(name, url)
        except CommandFailedError as e:
            self.remove_if_present(name)
            raise RemoteSetupError(
                f"Unable to add remote repository with url: {url}"
            ) from e

        try:
            yield name
        finally:
            self.remove_if_present(name)

    def with_upstream_ref(self, name: str, url: str, body: Callable[[], T]) -> T:
        """
        Run body while the upstream remote exists.

        Raises:
            RemoteSetupError: If the remote cannot be added; body is not run
        """
        with self.upstream_remote(name, url):
            return body()
