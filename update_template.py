#!/usr/bin/env python3
"""
Script to update the checked-out branch from its upstream template repository:
- Upstream template URL (required)
- --ignore-all-space: Ignore whitespace when applying template patches
- --rename-threshold: Rename detection similarity for patches (-1 for git's default)
- --upstream-branch / --remote-name: Template branch and temporary remote name
- --package-manager: Tool used for "Bump <package> from <x> to <y>" revisions
- --stash / --dry-run / --verbose
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from template_updater.config import RunOptions, load_settings
from template_updater.git.domain.errors import RemoteSetupError, TemplateUpdaterError
from template_updater.logger import error, progress, setup_logging, success
from template_updater.updates.services.update_service import create_update_service

RENAME_THRESHOLD_DEFAULT = -1


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Apply the revisions of an upstream template repository that are "
            "missing from the current branch, one commit at a time"
        )
    )
    parser.add_argument(
        "upstream_url",
        type=str,
        nargs="?",
        default=None,
        help="URL of the upstream template repository",
    )
    parser.add_argument(
        "--ignore-all-space",
        action="store_true",
        help="Ignore whitespace changes when applying template patches",
    )
    parser.add_argument(
        "--rename-threshold",
        type=int,
        default=RENAME_THRESHOLD_DEFAULT,
        help="Rename detection similarity in percent (default: -1, git's own default)",
    )
    parser.add_argument(
        "--upstream-branch",
        type=str,
        default=None,
        help="Template branch to update from (default: $TEMPLATE_UPSTREAM_BRANCH or master)",
    )
    parser.add_argument(
        "--remote-name",
        type=str,
        default=None,
        help="Name of the temporary remote (default: $TEMPLATE_REMOTE_NAME or upstream-template)",
    )
    parser.add_argument(
        "--package-manager",
        type=str,
        choices=("yarn", "npm", "pnpm"),
        default=None,
        help="Package manager for dependency bumps (default: $TEMPLATE_PACKAGE_MANAGER or yarn)",
    )
    parser.add_argument(
        "--repo",
        type=Path,
        default=None,
        help="Path to the repository to update (default: current directory)",
    )
    parser.add_argument(
        "--stash",
        action="store_true",
        help="Stash local changes before applying updates and restore them afterwards",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list the revisions that would be applied",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show git and package manager output",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the update and return the exit code."""
    args = build_parser().parse_args(argv)

    if not args.upstream_url:
        error("Please provide an upstream-url")
        return 1

    try:
        settings = load_settings()
        overrides = {
            key: value
            for key, value in (
                ("remote_name", args.remote_name),
                ("upstream_branch", args.upstream_branch),
                ("package_manager", args.package_manager),
            )
            if value is not None
        }
        settings = dataclasses.replace(settings, **overrides)

        rename_threshold = args.rename_threshold
        if rename_threshold == RENAME_THRESHOLD_DEFAULT:
            rename_threshold = None
        options = RunOptions(
            ignore_all_space=args.ignore_all_space,
            rename_threshold=rename_threshold,
            verbose=args.verbose,
            stash=args.stash,
            dry_run=args.dry_run,
        )
        setup_logging("DEBUG" if args.verbose else settings.log_level)

        service = create_update_service(args.repo, settings, options)
    except ValueError as e:
        error(f"Configuration error: {e}")
        return 1

    try:
        report = service.run(args.upstream_url)
    except RemoteSetupError as e:
        error(str(e))
        return 1
    except TemplateUpdaterError as e:
        error(f"Template update failed: {e}")
        return 1
    except KeyboardInterrupt:
        error("Interrupted; the repository may contain a partially applied update")
        return 130
    except EOFError:
        error("No input available; the repository may contain a partially applied update")
        return 1

    if report.dry_run:
        progress(f"Dry run: {len(report.missing)} revision(s) not applied")
    elif report.results:
        empty = sum(1 for result in report.results if result.empty)
        success(f"Applied {len(report.results)} revision(s) ({empty} already present)")
    return 0


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
