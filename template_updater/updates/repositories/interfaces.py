"""Repository interfaces for applying updates."""

from abc import ABC, abstractmethod

from template_updater.git.domain.entities import Commit


class PackageManagerRepository(ABC):
    """Interface for upgrading a single dependency."""

    @abstractmethod
    def upgrade(self, package: str, version: str) -> bool:
        """
        Upgrade a dependency to a version.

        Args:
            package: Package name
            version: Target version

        Returns:
            True if the upgrade command succeeded, False otherwise
        """
        ...


class OperatorPromptRepository(ABC):
    """Interface for handing conflicts over to a human."""

    @abstractmethod
    def wait_for_resolution(self, commit: Commit, output: str) -> None:
        """
        Block until the operator says the conflicts are resolved and staged.

        Args:
            commit: Upstream commit being applied
            output: Output of the failed commit attempt
        """
        ...
