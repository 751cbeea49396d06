"""CLI configuration overrides for runtime tunables.

Applied after the YAML file and environment so flags take precedence.
"""

from __future__ import annotations

import logging

from .constants import Constants

logger = logging.getLogger(__name__)


def apply_cli_overrides(args) -> None:
    """Apply CLI overrides for registry and retry tunables."""
    if getattr(args, "READ_TIMEOUT", None) is not None:
        Constants.READ_TIMEOUT = float(args.READ_TIMEOUT)
    if getattr(args, "RETRY_MAX", None) is not None:
        if args.RETRY_MAX < 1:
            logger.warning("--retries must be at least 1; keeping %s", Constants.HTTP_RETRY_MAX)
        else:
            Constants.HTTP_RETRY_MAX = int(args.RETRY_MAX)
