import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class OpsValidationError(RuntimeError):
    pass


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Raises:
        OpsValidationError: data dir not writable, unknown active editor config,
            or required env vars missing.
    """
    ops = rules.ops

    # 1. Data dir must exist (created if missing) and be writable
    if ops.data_dir_required:
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OpsValidationError(f"Cannot create data dir {data_dir}: {e}") from e
        if not os.access(data_dir, os.W_OK):
            raise OpsValidationError(f"Data dir {data_dir} is not writable")

    # 2. Active editor config must be declared
    if rules.editor.active_config not in rules.editor.configs:
        raise OpsValidationError(
            f"Active editor config '{rules.editor.active_config}' is not declared "
            f"(known: {', '.join(sorted(rules.editor.configs))})"
        )

    # 3. Required env
    missing = [name for name in ops.required_env if name not in os.environ]
    if missing:
        raise OpsValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    logger.info("Configuration validated (data dir %s)", data_dir)
