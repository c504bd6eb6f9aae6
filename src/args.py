"""Argument parsing functionality for pkgbump."""

import argparse

from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Options that can also come from a config file or the environment default
    to None so that only flags given on the command line override them.
    """
    parser = argparse.ArgumentParser(
        prog="pkgbump",
        description=(
            "pkgbump - check package.json dependencies for newer versions "
            "and update the ones you pick"
        ),
        add_help=True,
    )

    parser.add_argument("-f", "--file",
                        dest="MANIFEST",
                        help="Path to the manifest (default: ./package.json)",
                        action="store",
                        type=str,
                        default=Constants.PACKAGE_JSON_FILE)
    parser.add_argument("-b", "--backend",
                        dest="BACKEND",
                        help="How to query the registry: npm (npm show) or http (registry API)",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_BACKENDS)
    parser.add_argument("--registry",
                        dest="REGISTRY",
                        help="Registry URL to query",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help=f"Seconds allowed per registry query (default: {Constants.REQUEST_TIMEOUT}; 0 disables)",
                        action="store",
                        type=float)
    parser.add_argument("--max-concurrency",
                        dest="MAX_CONCURRENCY",
                        help="Maximum registry queries in flight per group (default: unbounded)",
                        action="store",
                        type=int)
    parser.add_argument("--newer-only",
                        dest="NEWER_ONLY",
                        help="Only offer versions that are semantically newer than the pinned one.",
                        action="store_true",
                        default=None)

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("-a", "--all",
                            dest="SELECT_ALL",
                            help="Update every outdated package without prompting.",
                            action="store_true")
    mode_group.add_argument("--json",
                            dest="JSON",
                            help="Print the outdated packages as JSON and exit.",
                            action="store_true")
    parser.add_argument("-n", "--dry-run",
                        dest="DRY_RUN",
                        help="Show the changes that would be written without writing them.",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
