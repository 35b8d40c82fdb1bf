"""Value objects for the updates domain."""

from dataclasses import dataclass
from enum import Enum

from template_updater.git.domain.entities import Commit, MissingCommitSet


@dataclass(frozen=True)
class DependencyBump:
    """Commit raising a single dependency to a new version."""

    package: str
    target_version: str

    def __post_init__(self) -> None:
        """Validate the package and version tokens."""
        if not self.package or not self.target_version:
            raise ValueError("Dependency bump needs a package and a target version")


@dataclass(frozen=True)
class GenericChange:
    """Any other commit, applied as a patch."""


UpdateAction = DependencyBump | GenericChange


class ApplicationState(str, Enum):
    """Steps a commit goes through while it is applied."""

    PENDING = "pending"
    APPLYING = "applying"
    AWAITING_COMMIT = "awaiting_commit"
    AWAITING_CONFLICT_RESOLUTION = "awaiting_conflict_resolution"
    COMMITTED = "committed"


@dataclass(frozen=True)
class ApplicationResult:
    """Outcome of applying one upstream commit.

    Attributes:
        commit: The upstream commit
        action: How the commit was applied
        action_succeeded: Whether the upgrade or patch command succeeded
        empty: Whether an empty commit was recorded because nothing changed
        attempts: Number of commit attempts, including the final one
        states: States visited, in order
    """

    commit: Commit
    action: UpdateAction
    action_succeeded: bool
    empty: bool
    attempts: int
    states: tuple[ApplicationState, ...]

    @property
    def conflicts(self) -> int:
        """Number of times the operator had to resolve conflicts."""
        return self.states.count(ApplicationState.AWAITING_CONFLICT_RESOLUTION)


@dataclass(frozen=True)
class UpdateReport:
    """Summary of a template update run."""

    missing: MissingCommitSet
    results: tuple[ApplicationResult, ...] = ()
    dry_run: bool = False

    @property
    def up_to_date(self) -> bool:
        return not self.missing
