"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    VALIDATION_ERROR = 2
    RESOLUTION_ERROR = 3


class DependencyScopes(Enum):
    """Scopes a dependency may declare.

    Args:
        Enum (string): Scope identifiers as written in the catalog.
    """

    COMPILE = "compile"
    RUNTIME = "runtime"
    PROVIDED = "provided"
    TEST = "test"
    ANNOTATION_PROCESSOR = "annotationProcessor"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PLATFORM_GROUP_ID = "org.springframework.boot"
    STARTER_PREFIX = "spring-boot-starter-"
    STARTER_PATTERN = r"^spring-boot-starter(-.*)?$"
    DEFAULT_SCOPE = DependencyScopes.COMPILE.value
    SUPPORTED_SCOPES = [scope.value for scope in DependencyScopes]

    # facet -> id of the dependency injected when no selection carries it
    DEFAULT_FACET_DEPENDENCIES = {"web": "web"}

    # search scoring weights, summed per matched token
    SEARCH_SCORE_ID = 100
    SEARCH_SCORE_KEYWORD = 50
    SEARCH_SCORE_NAME = 20
    SEARCH_SCORE_DESCRIPTION = 5

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_CATALOG_FILE = "DEPCATALOG_CATALOG"
    CATALOG_ROOT_KEY = "catalog"
