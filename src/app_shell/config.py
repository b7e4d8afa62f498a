import logging
import os
import sys
from pathlib import Path

from src.adapters.time_local import is_valid_timezone
from src.rules.models import Rules

logger = logging.getLogger(__name__)


def find_config_problems(rules: Rules, data_dir: Path) -> list[str]:
    """
    Collect operational problems that must block startup.
    """
    problems: list[str] = []

    # 1. Data dir must exist and be writable when required
    if rules.ops.data_dir_required and not (data_dir.is_dir() and os.access(data_dir, os.W_OK)):
        problems.append(f"Data directory {data_dir} is missing or not writable")

    # 2. Required env
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    # 3. Local calendar must resolve
    if not is_valid_timezone(rules.presence.timezone):
        problems.append(f"Unknown timezone: {rules.presence.timezone}")

    return problems


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup; exit on failure.
    """
    problems = find_config_problems(rules, data_dir)
    if problems:
        for problem in problems:
            logger.critical(problem)
        sys.exit(1)

    logger.info("Configuration validated.")
