"""Git domain entities."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Commit:
    """Commit entity.

    Identity is the short hash; several commits may share a message.
    """

    hash: str
    message: str
    timestamp: int

    @property
    def date(self) -> datetime:
        """Author date as a local datetime."""
        return datetime.fromtimestamp(self.timestamp)


@dataclass(frozen=True)
class HistorySnapshot:
    """Commits reachable from a ref at query time, newest first."""

    ref: str
    commits: tuple[Commit, ...] = ()

    @property
    def hashes(self) -> tuple[str, ...]:
        return tuple(commit.hash for commit in self.commits)

    @property
    def messages(self) -> tuple[str, ...]:
        return tuple(commit.message for commit in self.commits)

    @property
    def timestamps(self) -> tuple[int, ...]:
        return tuple(commit.timestamp for commit in self.commits)

    @property
    def oldest_timestamp(self) -> int | None:
        """Smallest author timestamp in the snapshot, None when empty."""
        if not self.commits:
            return None
        return min(self.timestamps)

    def __len__(self) -> int:
        return len(self.commits)

    def __iter__(self) -> Iterator[Commit]:
        return iter(self.commits)


@dataclass(frozen=True)
class MissingCommitSet:
    """Upstream commits not yet present downstream, in upstream order."""

    commits: tuple[Commit, ...] = ()
    fork_timestamp: int | None = None
    hashes: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "hashes", frozenset(c.hash for c in self.commits))

    def in_application_order(self) -> tuple[Commit, ...]:
        """
        Return the commits sorted oldest first.

        The sort is stable, so commits sharing a timestamp keep their
        upstream relative order.
        """
        return tuple(sorted(self.commits, key=lambda commit: commit.timestamp))

    def __len__(self) -> int:
        return len(self.commits)

    def __iter__(self) -> Iterator[Commit]:
        return iter(self.commits)

    def __bool__(self) -> bool:
        return bool(self.commits)
