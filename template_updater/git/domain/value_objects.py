"""Value objects for Git domain."""

from dataclasses import dataclass
from enum import Enum

# Prefixed to every commit this tool creates; future runs look for it to skip
# upstream commits that were already imported.
APPLIED_UPDATE_MARKER = "🔄"


class LogField(str, Enum):
    """`git log --format` placeholders read by the history reader."""

    HASH = "%h"
    SUBJECT = "%s"
    AUTHOR_TIMESTAMP = "%at"


@dataclass(frozen=True)
class CherryPickOptions:
    """Knobs forwarded to the patch-application command.

    Attributes:
        ignore_all_space: Ignore whitespace changes when merging
        rename_threshold: Rename similarity percentage, or None for git's default
    """

    ignore_all_space: bool = False
    rename_threshold: int | None = None

    def __post_init__(self) -> None:
        """Validate the rename threshold."""
        if self.rename_threshold is not None and not 0 <= self.rename_threshold <= 100:
            raise ValueError(
                f"Invalid rename threshold {self.rename_threshold}. "
                "Expected a percentage between 0 and 100"
            )

    def strategy_options(self) -> tuple[str, ...]:
        """Return the `-X` arguments for `git cherry-pick`."""
        args: list[str] = []
        if self.ignore_all_space:
            args.extend(["-X", "ignore-all-space"])
        if self.rename_threshold is not None:
            args.extend(["-X", f"find-renames={self.rename_threshold}%"])
        return tuple(args)
