import logging
import os
import sys
from pathlib import Path

from resumeshare.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Exits the process when a required environment variable is missing.
    """
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    data_dir.mkdir(parents=True, exist_ok=True)
    if not os.access(data_dir, os.W_OK):
        logger.critical("Data directory is not writable: %s", data_dir)
        sys.exit(1)

    if "ACCESS_TOKEN_SECRET" not in os.environ:
        logger.warning("ACCESS_TOKEN_SECRET is not set; authenticated routes will return 500")

    logger.info("Configuration validated.")
