"""Argument parsing functionality for depcatalog."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depcatalog",
        description=(
            "depcatalog - Resolve dependency and BOM coordinates of a platform catalog"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--catalog",
                        dest="CATALOG_FILE",
                        help=f"YAML catalog file (default: ${Constants.ENV_CATALOG_FILE})",
                        action="store",
                        type=str)
    parser.add_argument("-v", "--platform-version",
                        dest="PLATFORM_VERSION",
                        help="Platform version to resolve against. Defaults to the highest known release.",
                        action="store",
                        type=str)
    parser.add_argument("--known-versions",
                        dest="KNOWN_VERSIONS",
                        help="Comma-separated list of published platform versions",
                        action="store",
                        type=str)

    action_group = parser.add_mutually_exclusive_group(required=True)
    action_group.add_argument("--validate",
                              dest="VALIDATE",
                              help="Only validate the catalog",
                              action="store_true")
    action_group.add_argument("-l", "--list",
                              dest="LIST",
                              help="List dependencies available for the platform version",
                              action="store_true")
    action_group.add_argument("-d", "--dependency",
                              dest="DEPENDENCY",
                              help="Resolve a single dependency by id or alias",
                              action="store",
                              type=str)
    action_group.add_argument("-b", "--bom",
                              dest="BOM",
                              help="Resolve a single bom by id",
                              action="store",
                              type=str)
    action_group.add_argument("-s", "--search",
                              dest="SEARCH",
                              help="Search available dependencies by keyword",
                              action="store",
                              type=str)
    action_group.add_argument("-r", "--request",
                              dest="REQUEST",
                              help="Resolve a request made of the given dependency ids (repeatable)",
                              action="append",
                              type=str)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output JSON file (default: stdout)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
