"""tagbump command-line entrypoint.

    Returns:
        int: Exit code (see constants.ExitCodes)
"""
from __future__ import annotations

import dataclasses
import json
import logging
import os
import sys
from typing import Any, Dict, Optional, Sequence

from .args import parse_args
from .cli_config import apply_cli_overrides
from .common.logging_utils import configure_logging
from .config import apply_config, apply_env_overrides, ignore_rules_for, load_config
from .constants import Constants, ExitCodes
from .errors import AllVersionsIgnored, PrivateSourceAuthenticationFailure, PrivateSourceTimedOut
from .registry.errors import RegistryError
from .update_checker import UpdateChecker
from .versioning.ignore import build_rules
from .versioning.models import UpdateResult
from .versioning.parser import dependency_from_reference

logger = logging.getLogger(__name__)


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def result_to_dict(result: UpdateResult) -> Dict[str, Any]:
    return dataclasses.asdict(result)


def _emit(payload: Dict[str, Any], output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text + "\n")
    else:
        sys.stdout.write(text + "\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one update check and print the result as JSON."""
    args = parse_args(argv)
    _setup_logging(args)

    cfg = load_config(args.CONFIG)
    apply_config(cfg)
    apply_env_overrides()
    apply_cli_overrides(args)

    dependency = dependency_from_reference(args.image, registry=args.REGISTRY)
    try:
        ignore_rules = build_rules(ignore_rules_for(cfg, dependency.name) + list(args.IGNORE))
    except ValueError as exc:
        logger.error("%s", exc)
        return ExitCodes.INVALID_INPUT.value

    checker = UpdateChecker(
        dependency,
        ignore_rules=ignore_rules,
        raise_on_ignored=args.ERROR_ON_IGNORED,
        username=args.USERNAME,
        password=os.environ.get(Constants.ENV_REGISTRY_PASSWORD),
    )
    try:
        result = checker.check()
    except AllVersionsIgnored as exc:
        logger.error("%s", exc)
        return ExitCodes.ALL_VERSIONS_IGNORED.value
    except PrivateSourceAuthenticationFailure as exc:
        logger.error("%s; check the credentials for %s", exc, exc.hostname)
        return ExitCodes.AUTHENTICATION_ERROR.value
    except (PrivateSourceTimedOut, RegistryError) as exc:
        logger.error("%s", exc)
        return ExitCodes.CONNECTION_ERROR.value

    try:
        _emit(result_to_dict(result), args.OUTPUT)
    except OSError as exc:
        logger.error("Could not write output: %s", exc)
        return ExitCodes.FILE_ERROR.value

    if args.EXIT_CODE and result.update_available:
        return ExitCodes.UPDATE_AVAILABLE.value
    return ExitCodes.SUCCESS.value


def run() -> None:
    """Console-script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
