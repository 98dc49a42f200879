"""Configuration management for cmdrecall."""

import os

# Define path constants directly to avoid circular imports with utils
# (utils.terminal_ui imports Config, and utils.runtime is in the utils package)
_RUNTIME_DIR = os.path.join(os.path.expanduser("~"), ".cmdrecall")
_CONFIG_FILE = os.path.join(_RUNTIME_DIR, "config")
_USER_COMMANDS_FILE = os.path.join(_RUNTIME_DIR, "commands.yaml")

# Default configuration template
_DEFAULT_CONFIG = """\
# cmdrecall Configuration

# Logging level used with --verbose (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL=DEBUG

# Color theme: dark or light
TUI_THEME=dark

# Your own command definitions (YAML, same format as the built-in set)
USER_COMMANDS_FILE=~/.cmdrecall/commands.yaml

# What to do when two sources define the same template:
#   reject - keep the first one and report the duplicate
#   shadow - the later source replaces the earlier one
DUPLICATE_POLICY=reject

# Set to false to only use your own command definitions
LOAD_BUILTIN=true
"""


def _load_config(path: str) -> dict[str, str]:
    """Parse a KEY=VALUE config file, skipping comments and blank lines."""
    cfg: dict[str, str] = {}
    if not os.path.isfile(path):
        return cfg
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            # Strip inline comments (# ...) from the value
            if "#" in value:
                value = value[: value.index("#")]
            cfg[key.strip()] = value.strip()
    return cfg


def ensure_config_file(path: str = _CONFIG_FILE) -> bool:
    """Create the config file with defaults if missing. Returns True if created."""
    if os.path.exists(path):
        return False
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(_DEFAULT_CONFIG)
    return True


_cfg = _load_config(_CONFIG_FILE)


class Config:
    """Configuration for cmdrecall.

    All configuration is centralized here. Access config values directly via Config.XXX.
    """

    # Logging Configuration
    # Note: Logging is controlled via --verbose flag
    LOG_LEVEL = _cfg.get("LOG_LEVEL", "DEBUG").upper()

    # TUI Configuration
    TUI_THEME = _cfg.get("TUI_THEME", "dark")  # "dark" or "light"

    # Command definitions
    USER_COMMANDS_FILE = os.path.expanduser(_cfg.get("USER_COMMANDS_FILE") or _USER_COMMANDS_FILE)
    DUPLICATE_POLICY = _cfg.get("DUPLICATE_POLICY", "reject").lower()
    LOAD_BUILTIN = _cfg.get("LOAD_BUILTIN", "true").lower() == "true"

    @classmethod
    def validate(cls):
        """Validate configuration values.

        Raises:
            ValueError: If a value is not one of the supported options
        """
        if cls.TUI_THEME not in ("dark", "light"):
            raise ValueError(
                f"Unknown TUI_THEME '{cls.TUI_THEME}'. Use 'dark' or 'light' in ~/.cmdrecall/config."
            )
        if cls.DUPLICATE_POLICY not in ("reject", "shadow"):
            raise ValueError(
                f"Unknown DUPLICATE_POLICY '{cls.DUPLICATE_POLICY}'. "
                "Use 'reject' or 'shadow' in ~/.cmdrecall/config."
            )
