"""Template update service orchestrating a complete run."""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from template_updater.config import RunOptions, Settings
from template_updater.git.domain.entities import MissingCommitSet
from template_updater.git.domain.errors import CommandFailedError
from template_updater.git.repositories.implementations import (
    GitRepositoryImpl,
    SubprocessCommandRunner,
)
from template_updater.git.repositories.interfaces import GitRepository
from template_updater.git.services.history_service import HistoryService
from template_updater.git.services.reconciliation_service import ReconciliationService
from template_updater.git.services.remote_service import RemoteService
from template_updater.logger import console, get_logger, progress, warning
from template_updater.updates.domain.value_objects import UpdateReport
from template_updater.updates.repositories.implementations import (
    ConsoleOperatorPrompt,
    create_package_manager,
)
from template_updater.updates.repositories.interfaces import (
    OperatorPromptRepository,
    PackageManagerRepository,
)
from template_updater.updates.services.application_service import ApplicationService

logger = get_logger(__name__)

STASH_MESSAGE = "Before applying upstream-template updates"


class TemplateUpdateService:
    """Service running a full update of the checked-out branch from a template."""

    def __init__(
        self,
        git_repository: GitRepository,
        application_service: ApplicationService,
        settings: Settings | None = None,
        options: RunOptions | None = None,
    ) -> None:
        """
        Initialize TemplateUpdateService.

        Args:
            git_repository: Repository implementation for Git operations
            application_service: Service applying individual commits
            settings: Remote and branch settings. Defaults to Settings()
            options: Run options. Defaults to RunOptions()
        """
        self._git_repository = git_repository
        self._application_service = application_service
        self._settings = settings or Settings()
        self._options = options or RunOptions()
        self._history_service = HistoryService(git_repository)
        self._reconciliation_service = ReconciliationService()
        self._remote_service = RemoteService(git_repository)

    def run(self, remote_url: str) -> UpdateReport:
        """
        Bring the checked-out branch up to date with the template repository.

        Args:
            remote_url: URL of the upstream template repository

        Returns:
            UpdateReport with the missing revisions and how each was applied

        Raises:
            RemoteSetupError: If the upstream remote cannot be added
            HistoryUnavailableError: If either history cannot be read
        """
        with self._remote_service.upstream_remote(self._settings.remote_name, remote_url):
            return self._update()

    def find_missing(self) -> MissingCommitSet:
        """
        Compute the template revisions missing from the checked-out branch.

        The upstream remote must already exist.
        """
        downstream = self._history_service.read_current_history()
        upstream = self._history_service.read_history(self._settings.upstream_ref)
        return self._reconciliation_service.compute_missing(downstream, upstream)

    def _update(self) -> UpdateReport:
        missing = self.find_missing()
        if not missing:
            progress("There are no new updates from upstream template repository")
            return UpdateReport(missing=missing)

        self._print_preview(missing)
        if self._options.dry_run:
            return UpdateReport(missing=missing, dry_run=True)

        stashed = False
        if self._options.stash:
            stashed = self._git_repository.stash(STASH_MESSAGE)
            if stashed:
                progress("Stashed your local changes before applying updates", style="yellow")

        results = self._application_service.apply_all(missing)

        if stashed:
            self._restore_stash()

        progress("### Template Update Process finished ###", style="bold")
        return UpdateReport(missing=missing, results=tuple(results))

    def _restore_stash(self) -> None:
        try:
            self._git_repository.unstash()
            progress("Restored your stashed changes", style="yellow")
        except CommandFailedError as e:
            logger.debug("%s", e)
            warning("Could not restore your stashed changes; run 'git stash pop' manually")

    @staticmethod
    def _print_preview(missing: MissingCommitSet) -> None:
        table = Table(
            title=f"(from oldest to newest) List of revisions to merge ({len(missing)})",
            title_style="black on cyan",
            show_header=True,
        )
        table.add_column("Date", style="magenta", no_wrap=True)
        table.add_column("Hash", style="dim", no_wrap=True)
        table.add_column("Revision", style="magenta")

        for commit in missing.in_application_order():
            table.add_row(
                commit.date.strftime("%x"),
                escape(commit.hash),
                escape(commit.message),
            )
        console.print(table)


def create_update_service(
    repo_path: Path | None = None,
    settings: Settings | None = None,
    options: RunOptions | None = None,
    package_manager: PackageManagerRepository | None = None,
    operator_prompt: OperatorPromptRepository | None = None,
) -> TemplateUpdateService:
    """
    Wire a TemplateUpdateService against a repository on disk.

    Args:
        repo_path: Path to the downstream repository. Defaults to the cwd.
        settings: Remote and branch settings. Defaults to Settings()
        options: Run options. Defaults to RunOptions()
        package_manager: Overrides the configured package manager
        operator_prompt: Overrides the terminal conflict prompt

    Raises:
        ValueError: If the configured package manager is not supported
    """
    settings = settings or Settings()
    options = options or RunOptions()

    runner = SubprocessCommandRunner(repo_path)
    git_repository = GitRepositoryImpl(runner=runner, verbose=options.verbose)
    if package_manager is None:
        package_manager = create_package_manager(settings.package_manager, runner)

    application_service = ApplicationService(
        git_repository,
        package_manager,
        operator_prompt or ConsoleOperatorPrompt(),
        options=options,
    )
    return TemplateUpdateService(git_repository, application_service, settings, options)
