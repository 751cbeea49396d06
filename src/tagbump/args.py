"""Argument parsing functionality for tagbump."""

import argparse

from . import __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="tagbump",
        description="tagbump - find the next tag and digest for a pinned container image",
        add_help=True,
    )

    parser.add_argument("image",
                        help="Image reference, e.g. nginx:1.25, ghcr.io/org/app:2.1@sha256:<digest>",
                        action="store", type=str)
    parser.add_argument("-r", "--registry",
                        dest="REGISTRY",
                        help="Registry host (defaults to the host in the reference, then Docker Hub)",
                        action="store", type=str)
    parser.add_argument("-i", "--ignore",
                        dest="IGNORE",
                        help="Ignore versions matching a specifier, e.g. '>=2,<3' (repeatable)",
                        action="append", type=str, default=[])
    parser.add_argument("--error-on-ignored",
                        dest="ERROR_ON_IGNORED",
                        help="Fail when every newer version is excluded by ignore rules.",
                        action="store_true")
    parser.add_argument("--exit-code",
                        dest="EXIT_CODE",
                        help="Exit with status 3 when an update is available.",
                        action="store_true")
    parser.add_argument("-u", "--username",
                        dest="USERNAME",
                        help="Registry username; the password is read from TAGBUMP_REGISTRY_PASSWORD",
                        action="store", type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write the JSON result to a file instead of stdout",
                        action="store", type=str)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML configuration file",
                        action="store", type=str)
    parser.add_argument("--read-timeout",
                        dest="READ_TIMEOUT",
                        help="Registry read timeout in seconds",
                        action="store", type=float)
    parser.add_argument("--retries",
                        dest="RETRY_MAX",
                        help="Attempts per registry call, including the first",
                        action="store", type=int)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $TAGBUMP_LOG_LEVEL, else INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store", type=str)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
