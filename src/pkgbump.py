"""pkgbump - interactive package.json dependency updater.

Looks up the latest registry version of every dependency, lets the user pick
which ones to bump, and writes the manifest back.

    Returns:
        int: Exit code
"""
import asyncio
import json
import logging
import sys
from typing import List, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from args import parse_args
from cli_config import RunConfig, build_run_config
from common.errors import ConfigError, ManifestError
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from manifest import Manifest
from registry import build_client
from selection import prompt_selection, select_all
from versioning import GroupResult, OutdatedPackage, VersionResolver, VersionService

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        add_file_handler(log_file)
        logger.info("Logging to file: %s", log_file)


async def collect_updates(groups: Sequence[Tuple[str, dict]], config: RunConfig) -> List[GroupResult]:
    """Resolve every group against the configured registry client."""
    client = build_client(
        config.backend,
        registry=config.registry,
        timeout=config.timeout,
        npm_bin=config.npm_bin,
    )
    async with client:
        resolver = VersionResolver(
            client,
            timeout=config.timeout,
            max_concurrency=config.max_concurrency,
            newer_only=config.newer_only,
        )
        return await VersionService(resolver).get_all_group_versions(groups)


def _updates_as_json(results: Sequence[GroupResult]) -> str:
    payload = {
        result.group: [option.value.to_dict() for option in result.options]
        for result in results
        if not result.is_empty
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _print_changes(console: Console, selected: Sequence[OutdatedPackage]) -> None:
    for pkg in selected:
        console.print(
            f"  {escape(pkg.group)}: {escape(pkg.name)} {escape(pkg.current)} → {escape(pkg.latest)}",
            highlight=False,
        )


def main(argv=None):
    """Main function of the program."""
    # pylint: disable=too-many-return-statements
    args = parse_args(argv)
    _setup_logging(args)
    console = Console()

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        config = build_run_config(args)
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        manifest = Manifest.load(args.MANIFEST)
    except ManifestError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    groups = manifest.groups(config.groups)
    if not groups:
        console.print("There are no dependencies or devDependencies.")
        sys.exit(ExitCodes.SUCCESS.value)

    logger.info("Checking %d group(s) with the %s backend", len(groups), config.backend)
    try:
        with console.status("Looking for updates..."):
            results = asyncio.run(collect_updates(groups, config))
    except KeyboardInterrupt:
        console.print("Operation cancelled.")
        sys.exit(ExitCodes.CANCELLED.value)

    if args.JSON:
        print(_updates_as_json(results))
        sys.exit(ExitCodes.SUCCESS.value)

    pending = [result for result in results if not result.is_empty]
    if not pending:
        console.print("There are no dependencies or devDependencies to update.")
        sys.exit(ExitCodes.SUCCESS.value)

    if args.SELECT_ALL:
        selected = select_all(pending)
    else:
        try:
            selected = prompt_selection(pending, console)
        except (KeyboardInterrupt, EOFError):
            console.print("Operation cancelled.")
            sys.exit(ExitCodes.CANCELLED.value)

    if not selected:
        console.print("Nothing was done.")
        sys.exit(ExitCodes.SUCCESS.value)

    if args.DRY_RUN:
        console.print("Would update:")
        _print_changes(console, selected)
        console.print(f"Dry run: {len(selected)} change(s) not written.")
        sys.exit(ExitCodes.SUCCESS.value)

    manifest.apply(selected)
    try:
        path = manifest.save()
    except ManifestError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    _print_changes(console, selected)
    console.print(f"File updated! [underline cyan]{escape(path)}[/underline cyan]")
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
