"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    UPDATE_AVAILABLE = 3
    AUTHENTICATION_ERROR = 4
    ALL_VERSIONS_IGNORED = 5
    INVALID_INPUT = 6


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_REGISTRY = "registry.hub.docker.com"
    DOCKER_HUB_HOSTS = [
        "registry.hub.docker.com",
        "index.docker.io",
        "registry-1.docker.io",
        "docker.io",
    ]
    # Namespace prepended to single-component repository names, per registry host.
    REPOSITORY_NAMESPACES = {
        "registry.hub.docker.com": "library",
        "index.docker.io": "library",
        "registry-1.docker.io": "library",
        "docker.io": "library",
    }
    CANONICAL_TAGS = ["latest"]
    PRERELEASE_KEYWORDS = [
        "alpha",
        "beta",
        "rc",
        "pre",
        "preview",
        "dev",
        "snapshot",
        "nightly",
        "canary",
        "insiders",
    ]
    DIGEST_PREFIX = "sha256:"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "TAGBUMP_LOG_LEVEL"
    ENV_CONFIG = "TAGBUMP_CONFIG"
    ENV_DEFAULT_REGISTRY = "TAGBUMP_DEFAULT_REGISTRY"
    ENV_READ_TIMEOUT = "TAGBUMP_READ_TIMEOUT"
    ENV_RETRY_MAX = "TAGBUMP_RETRY_MAX"
    ENV_REGISTRY_PASSWORD = "TAGBUMP_REGISTRY_PASSWORD"
    CONFIG_FILE_NAMES = ["tagbump.yml", "tagbump.yaml"]

    CONNECT_TIMEOUT = 10
    READ_TIMEOUT = 10  # Short fixed read timeout on registry connections
    TAGS_PAGE_SIZE = 1000
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_RETRY_MAX_DELAY_SEC = 5.0
    USER_AGENT = "tagbump/0.1"
