"""depcatalog - resolve dependency and BOM coordinates of a platform catalog.

Loads a YAML catalog, validates it and prints the effective metadata for a
platform version as JSON.

    Returns:
        int: Exit code
"""
import json
import logging
import sys

import yaml

from args import parse_args
from catalog.errors import CatalogValidationError
from catalog.loader import load_catalog_file
from catalog.validation import validate
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from resolution.models import ABSENT
from resolution.resolver import MetadataResolver, ResolutionError
from versioning.errors import ParseError
from versioning.provider import StaticVersionProvider
from versioning.version import Version

logger = logging.getLogger(__name__)


def load_and_validate(path, version_provider=None):
    """Loads and validates the catalog, exiting on failure.

    Args:
        path (str): Catalog file path, or None for the configured default.
        version_provider (VersionProvider): Known platform versions used for wildcard ranges.

    Returns:
        Catalog: the validated snapshot.
    """
    try:
        raw = load_catalog_file(path)
    except FileNotFoundError as e:
        logger.error("Catalog file not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except (IOError, yaml.YAMLError) as e:
        logger.error("Cannot read catalog: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except CatalogValidationError as e:
        _report_validation(e)
        sys.exit(ExitCodes.VALIDATION_ERROR.value)

    known = version_provider.list_known_platform_versions() if version_provider else None
    try:
        return validate(raw, known)
    except CatalogValidationError as e:
        _report_validation(e)
        sys.exit(ExitCodes.VALIDATION_ERROR.value)


def _report_validation(error):
    for problem in error.errors:
        logger.error("%s", problem, extra=extra_context(event="validation_error", component="cli"))
    print(json.dumps({"valid": False, "errors": [
        {"kind": problem.kind, "owner": problem.owner, "message": problem.message} for problem in error.errors
    ]}, indent=2), file=sys.stderr)


def build_version_provider(args):
    """Builds the known-version provider from the CLI list, if any."""
    if not args.KNOWN_VERSIONS:
        return None
    tokens = [token.strip() for token in args.KNOWN_VERSIONS.split(",") if token.strip()]
    return StaticVersionProvider(tokens)


def select_platform_version(args, resolver):
    """Picks the requested platform version, falling back to the highest known release."""
    if args.PLATFORM_VERSION:
        return Version.parse(args.PLATFORM_VERSION)
    default = resolver.default_platform_version()
    if default is None:
        raise ParseError(None, "No platform version given and no known versions to choose from")
    logger.info("Using default platform version %s", default)
    return default


def run_action(args, resolver, platform_version):
    """Runs the selected action and returns JSON-serializable data."""
    if args.LIST:
        return [dep.to_dict() for dep in resolver.list_available_dependencies(platform_version)]
    if args.SEARCH is not None:
        return [dep.to_dict() for dep in resolver.search_by_keyword(platform_version, args.SEARCH)]
    if args.DEPENDENCY:
        effective = resolver.resolve_dependency(args.DEPENDENCY, platform_version)
        if effective is ABSENT:
            return {"id": args.DEPENDENCY, "platform_version": str(platform_version), "available": False}
        return effective.to_dict()
    if args.BOM:
        return resolver.resolve_bom(args.BOM, platform_version).to_dict()
    return resolver.resolve_request(args.REQUEST, platform_version).to_dict()


def export_json(data, path):
    """Exports the result as JSON.

    Args:
        data: JSON-serializable result.
        path (str): File path to export the JSON, or None for stdout.
    """
    if not path:
        print(json.dumps(data, indent=2))
        return
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logger.info("JSON file saved successfully.")
    except OSError as e:
        logger.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    if is_debug_enabled(logger):
        logger.debug("CLI start", extra=extra_context(event="function_entry", component="cli", action="main"))

    try:
        version_provider = build_version_provider(args)
    except ParseError as e:
        logger.error("Invalid known version: %s", e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)

    catalog = load_and_validate(args.CATALOG_FILE, version_provider)
    if args.VALIDATE:
        export_json({
            "valid": True,
            "dependencies": len(catalog.dependencies),
            "boms": len(catalog.boms),
            "repositories": len(catalog.repositories),
        }, args.OUTPUT)
        sys.exit(ExitCodes.SUCCESS.value)

    try:
        resolver = MetadataResolver(catalog, version_provider)
        platform_version = select_platform_version(args, resolver)
        data = run_action(args, resolver, platform_version)
    except ParseError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)
    except ResolutionError as e:
        logger.error("%s", e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)

    export_json(data, args.OUTPUT)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
