"""Application service applying upstream commits one at a time."""

from template_updater.config import RunOptions
from template_updater.git.domain.entities import Commit, MissingCommitSet
from template_updater.git.domain.errors import (
    ApplicationNoOpError,
    CommandFailedError,
    CommitConflictError,
)
from template_updater.git.domain.value_objects import APPLIED_UPDATE_MARKER
from template_updater.git.repositories.interfaces import GitRepository
from template_updater.logger import get_logger, progress
from template_updater.updates.domain.value_objects import (
    ApplicationResult,
    ApplicationState,
    DependencyBump,
    GenericChange,
    UpdateAction,
)
from template_updater.updates.repositories.interfaces import (
    OperatorPromptRepository,
    PackageManagerRepository,
)
from template_updater.updates.services.classifier_service import ClassifierService

logger = get_logger(__name__)


def update_commit_message(commit: Commit) -> str:
    """Message recorded for an applied upstream commit."""
    return f"{APPLIED_UPDATE_MARKER} {commit.hash}: {commit.message}"


class ApplicationService:
    """Service driving each upstream commit until it is committed downstream."""

    def __init__(
        self,
        git_repository: GitRepository,
        package_manager: PackageManagerRepository,
        operator_prompt: OperatorPromptRepository,
        options: RunOptions | None = None,
        classifier: ClassifierService | None = None,
    ) -> None:
        """
        Initialize ApplicationService.

        Args:
            git_repository: Repository implementation for Git operations
            package_manager: Repository upgrading dependencies
            operator_prompt: Repository waiting for manual conflict resolution
            options: Run options. Defaults to RunOptions()
            classifier: Commit classifier. Defaults to ClassifierService()
        """
        self._git_repository = git_repository
        self._package_manager = package_manager
        self._operator_prompt = operator_prompt
        self._options = options or RunOptions()
        self._classifier = classifier or ClassifierService()

    def apply_all(self, missing: MissingCommitSet) -> list[ApplicationResult]:
        """
        Apply every missing commit, oldest first.

        Args:
            missing: Commits to apply

        Returns:
            One result per commit, in application order
        """
        return [self.apply(commit) for commit in missing.in_application_order()]

    def apply(self, commit: Commit) -> ApplicationResult:
        """
        Apply a single upstream commit and record it downstream.

        The commit is applied either by upgrading a dependency or by
        cherry-picking its patch. Failures of that step are tolerated: the
        commit attempt that follows decides what happens. A clean tree gets an
        empty commit; any other failure blocks on the operator and retries the
        same commit until it succeeds.

        Args:
            commit: Upstream commit to apply

        Returns:
            ApplicationResult describing how the commit was recorded
        """
        states: list[ApplicationState] = [ApplicationState.PENDING]
        message = update_commit_message(commit)

        progress(f"Applying update for template commit: {commit.message}", style="bright_cyan")

        self._transition(commit, states, ApplicationState.APPLYING)
        action = self._classifier.classify(commit)
        action_succeeded = self._apply_action(commit, action)

        attempts = 0
        empty = False
        while True:
            self._transition(commit, states, ApplicationState.AWAITING_COMMIT)
            attempts += 1
            try:
                self._git_repository.commit(message)
                break
            except ApplicationNoOpError:
                logger.debug("Nothing to commit for %s, recording an empty commit", commit.hash)
                try:
                    self._git_repository.commit(message, allow_empty=True)
                    empty = True
                    break
                except CommitConflictError as e:
                    output = e.output
            except CommitConflictError as e:
                output = e.output

            self._transition(commit, states, ApplicationState.AWAITING_CONFLICT_RESOLUTION)
            self._operator_prompt.wait_for_resolution(commit, output)

        self._transition(commit, states, ApplicationState.COMMITTED)
        return ApplicationResult(
            commit=commit,
            action=action,
            action_succeeded=action_succeeded,
            empty=empty,
            attempts=attempts,
            states=tuple(states),
        )

    def _apply_action(self, commit: Commit, action: UpdateAction) -> bool:
        match action:
            case DependencyBump(package=package, target_version=version):
                progress(f"Upgrading {package} to {version}", style="green")
                upgraded = self._package_manager.upgrade(package, version)
                staged = self._attempt(self._git_repository.stage_tracked)
                return upgraded and staged
            case GenericChange():
                options = self._options.cherry_pick_options()
                prefix = "(ignoring spaces) " if options.ignore_all_space else ""
                progress(f"{prefix}Running cherry-pick for {commit.hash}", style="green")
                return self._attempt(self._git_repository.cherry_pick, commit.hash, options)
            case _:
                raise TypeError(f"Unsupported update action: {action!r}")

    @staticmethod
    def _attempt(operation, *args) -> bool:
        try:
            operation(*args)
            return True
        except CommandFailedError as e:
            logger.debug("%s", e)
            return False

    @staticmethod
    def _transition(
        commit: Commit, states: list[ApplicationState], state: ApplicationState
    ) -> None:
        logger.debug("%s: %s -> %s", commit.hash, states[-1].value, state.value)
        states.append(state)
