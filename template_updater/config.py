"""Run options and environment-backed settings."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from template_updater.git.domain.value_objects import CherryPickOptions

DEFAULT_REMOTE_NAME = "upstream-template"
DEFAULT_UPSTREAM_BRANCH = "master"
DEFAULT_PACKAGE_MANAGER = "yarn"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class RunOptions:
    """Per-run switches passed explicitly to every component.

    Attributes:
        ignore_all_space: Ignore whitespace when applying upstream patches
        rename_threshold: Rename detection similarity (0-100), None for git's default
        verbose: Echo external command output and enable debug logs
        stash: Stash local changes before applying and restore them afterwards
        dry_run: Only list the revisions that would be applied
    """

    ignore_all_space: bool = False
    rename_threshold: int | None = None
    verbose: bool = False
    stash: bool = False
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Validate the rename threshold."""
        # Raises ValueError for out-of-range thresholds
        self.cherry_pick_options()

    def cherry_pick_options(self) -> CherryPickOptions:
        return CherryPickOptions(
            ignore_all_space=self.ignore_all_space,
            rename_threshold=self.rename_threshold,
        )


@dataclass(frozen=True)
class Settings:
    """Settings read from the environment (and .env files)."""

    remote_name: str = DEFAULT_REMOTE_NAME
    upstream_branch: str = DEFAULT_UPSTREAM_BRANCH
    package_manager: str = DEFAULT_PACKAGE_MANAGER
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """Validate the settings."""
        if not self.remote_name or any(c.isspace() for c in self.remote_name):
            raise ValueError(f"Invalid remote name '{self.remote_name}'")
        if not self.upstream_branch:
            raise ValueError("Upstream branch name cannot be empty")

    @property
    def upstream_ref(self) -> str:
        """Remote-tracking ref holding the template history."""
        return f"{self.remote_name}/{self.upstream_branch}"


def _load_env_file() -> None:
    """Load environment variables from .env file."""
    # Try the project root first (parent of the template_updater package)
    project_root = Path(__file__).parent.parent
    env_file = project_root / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        # Fallback: try current directory
        load_dotenv()


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Returns:
        Settings with defaults for every unset variable

    Raises:
        ValueError: If a configured value is invalid
    """
    _load_env_file()

    return Settings(
        remote_name=os.getenv("TEMPLATE_REMOTE_NAME", DEFAULT_REMOTE_NAME),
        upstream_branch=os.getenv("TEMPLATE_UPSTREAM_BRANCH", DEFAULT_UPSTREAM_BRANCH),
        package_manager=os.getenv("TEMPLATE_PACKAGE_MANAGER", DEFAULT_PACKAGE_MANAGER).lower(),
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
