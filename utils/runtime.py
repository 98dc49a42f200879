"""Runtime directory management for cmdrecall.

All runtime data is stored under ~/.cmdrecall/ directory:
- config: Configuration file (created on first run)
- commands.yaml: User command definitions (optional)
- logs/: Log files (only created with --verbose)
"""

import os

from config import ensure_config_file

RUNTIME_DIR = os.path.join(os.path.expanduser("~"), ".cmdrecall")


def get_config_file() -> str:
    """Get the configuration file path.

    Returns:
        Path to ~/.cmdrecall/config
    """
    return os.path.join(RUNTIME_DIR, "config")


def get_log_dir() -> str:
    """Get the log directory path.

    Returns:
        Path to ~/.cmdrecall/logs/
    """
    return os.path.join(RUNTIME_DIR, "logs")


def ensure_runtime_dirs(create_logs: bool = False) -> None:
    """Ensure runtime directories exist.

    Creates:
    - ~/.cmdrecall/config (with defaults, if missing)
    - ~/.cmdrecall/logs/ (only if create_logs=True)

    Args:
        create_logs: Whether to create the logs directory (for --verbose mode)
    """
    os.makedirs(RUNTIME_DIR, exist_ok=True)
    ensure_config_file(get_config_file())

    if create_logs:
        os.makedirs(get_log_dir(), exist_ok=True)
