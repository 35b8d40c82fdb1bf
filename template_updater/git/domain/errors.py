"""Exceptions raised by the template updater."""

from collections.abc import Sequence


class TemplateUpdaterError(RuntimeError):
    """Base class for errors that abort or interrupt an update run."""


class CommandFailedError(TemplateUpdaterError):
    """An external command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], output: str, returncode: int) -> None:
        self.argv = tuple(argv)
        self.output = output
        self.returncode = returncode
        super().__init__(
            f"Command '{' '.join(self.argv)}' failed with exit code {returncode}: "
            f"{output.strip()}"
        )


class HistoryUnavailableError(TemplateUpdaterError):
    """A branch or ref could not be read."""


class RemoteSetupError(TemplateUpdaterError):
    """The upstream remote could not be added."""


class ApplicationNoOpError(TemplateUpdaterError):
    """Nothing was left to commit after applying an update."""


class CommitConflictError(TemplateUpdaterError):
    """Commit creation failed for a reason other than a clean working tree."""

    def __init__(self, output: str) -> None:
        self.output = output
        super().__init__(output.strip() or "Commit failed")
