"""Service for classifying upstream commits."""

import re

from template_updater.git.domain.entities import Commit
from template_updater.updates.domain.value_objects import (
    DependencyBump,
    GenericChange,
    UpdateAction,
)


class ClassifierService:
    """Decides how an upstream commit should be applied."""

    # Subject phrasing used by dependency update bots
    DEPENDENCY_BUMP_PATTERN: re.Pattern[str] = re.compile(r"Bump (\S+) from \S+ to (\S+)")

    def classify(self, commit: Commit) -> UpdateAction:
        """
        Classify a commit from its subject line.

        Args:
            commit: Upstream commit

        Returns:
            DependencyBump when the subject reads "Bump <package> from <x> to <y>",
            GenericChange otherwise
        """
        match = self.DEPENDENCY_BUMP_PATTERN.search(commit.message)
        if match is None:
            return GenericChange()
        return DependencyBump(package=match.group(1), target_version=match.group(2))
