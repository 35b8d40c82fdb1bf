"""Concrete implementations of update repositories."""

from rich.prompt import Prompt

from template_updater.git.domain.entities import Commit
from template_updater.git.domain.errors import CommandFailedError
from template_updater.git.repositories.interfaces import CommandRunner
from template_updater.logger import console, get_logger, progress, warning
from template_updater.updates.repositories.interfaces import (
    OperatorPromptRepository,
    PackageManagerRepository,
)

logger = get_logger(__name__)


class CommandPackageManager(PackageManagerRepository):
    """Upgrades dependencies with a package manager command line."""

    # Sub-command used to pin a dependency to an exact version
    UPGRADE_COMMANDS: dict[str, tuple[str, ...]] = {
        "yarn": ("yarn", "upgrade"),
        "npm": ("npm", "install"),
        "pnpm": ("pnpm", "update"),
    }

    def __init__(self, name: str, runner: CommandRunner, verbose: bool = True) -> None:
        """
        Initialize CommandPackageManager.

        Args:
            name: Package manager name (yarn, npm or pnpm)
            runner: Runner executing the command in the repository
            verbose: Echo the package manager output

        Raises:
            ValueError: If the package manager is not supported
        """
        if name not in self.UPGRADE_COMMANDS:
            raise ValueError(
                f"Unsupported package manager: {name}. "
                f"Supported values: {', '.join(sorted(self.UPGRADE_COMMANDS))}"
            )
        self._name = name
        self._runner = runner
        self._verbose = verbose

    @property
    def name(self) -> str:
        return self._name

    def upgrade(self, package: str, version: str) -> bool:
        argv = [*self.UPGRADE_COMMANDS[self._name], f"{package}@{version}"]
        try:
            self._runner.run(argv, verbose=self._verbose)
            return True
        except CommandFailedError as e:
            warning(f"{self._name} could not upgrade {package} to {version}")
            logger.debug("%s", e.output)
            return False


class ConsoleOperatorPrompt(OperatorPromptRepository):
    """Asks the operator on the terminal to resolve conflicts."""

    MESSAGE = "Resolve/stage conflicts and press Enter to continue"

    def wait_for_resolution(self, commit: Commit, output: str) -> None:
        if output.strip():
            progress(output.rstrip(), style="dim")
        progress(f"Could not commit update {commit.hash}: {commit.message}", style="yellow")
        Prompt.ask(
            f"[yellow]{self.MESSAGE}[/yellow]",
            console=console,
            default="",
            show_default=False,
        )


def create_package_manager(
    name: str, runner: CommandRunner, verbose: bool = True
) -> PackageManagerRepository:
    """
    Create a package manager repository by name.

    Raises:
        ValueError: If the package manager is not supported
    """
    return CommandPackageManager(name.lower(), runner, verbose=verbose)
