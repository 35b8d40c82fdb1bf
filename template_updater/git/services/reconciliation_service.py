"""Reconciliation of a downstream branch against its upstream template."""

from template_updater.git.domain.entities import Commit, HistorySnapshot, MissingCommitSet
from template_updater.git.domain.value_objects import APPLIED_UPDATE_MARKER
from template_updater.logger import get_logger

logger = get_logger(__name__)


class ReconciliationService:
    """Service computing which upstream commits still have to be applied."""

    def __init__(self, marker: str = APPLIED_UPDATE_MARKER) -> None:
        """
        Initialize ReconciliationService.

        Args:
            marker: Glyph identifying commits created by previous updates
        """
        self._marker = marker

    def compute_missing(
        self, downstream: HistorySnapshot, upstream: HistorySnapshot
    ) -> MissingCommitSet:
        """
        Compute the upstream commits missing from the downstream branch.

        The fork point is approximated by the oldest commit on the downstream
        branch. An upstream commit is missing when it is not older than the
        fork point, its hash is not in the downstream history, and no
        marker-tagged downstream message mentions its hash.

        Args:
            downstream: History of the branch being updated
            upstream: History of the template branch

        Returns:
            MissingCommitSet in upstream order
        """
        fork_timestamp = downstream.oldest_timestamp
        downstream_hashes = frozenset(downstream.hashes)
        applied_messages = tuple(
            message for message in downstream.messages if self._marker in message
        )

        def already_applied(commit: Commit) -> bool:
            if commit.hash in downstream_hashes:
                return True
            return any(commit.hash in message for message in applied_messages)

        def after_fork(commit: Commit) -> bool:
            return fork_timestamp is None or commit.timestamp >= fork_timestamp

        missing = tuple(
            commit
            for commit in upstream.commits
            if not already_applied(commit) and after_fork(commit)
        )

        logger.debug(
            "Fork timestamp %s: %d of %d upstream commits missing",
            fork_timestamp,
            len(missing),
            len(upstream),
        )
        return MissingCommitSet(commits=missing, fork_timestamp=fork_timestamp)
