"""
Centralized constants for tabpalette.
"""

import os
from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

# Overridable so tests never touch the real config directory
CONFIG_DIR_ENV_VAR = "TABPALETTE_CONFIG_DIR"


def get_config_dir() -> Path:
    """Return the config directory, honouring TABPALETTE_CONFIG_DIR."""
    override = os.environ.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".config" / "tabpalette"


SETTINGS_FILENAME = "settings.json"

# Vault-relative location of the local bookmark store
BOOKMARKS_RELATIVE_PATH = ".tabpalette/bookmarks.json"

# =============================================================================
# PALETTE LIMITS
# =============================================================================

VAULT_SEARCH_LIMIT = 50  # Max vault-search results kept for responsiveness
RECENTLY_CLOSED_LIMIT = 5  # Bounded recently-closed ring buffer

# Indexed note types
INDEXED_EXTENSIONS = (".md", ".canvas")

# =============================================================================
# DISPLAY
# =============================================================================

MAX_NAME_DISPLAY_LENGTH = 48
MAX_PATH_DISPLAY_LENGTH = 30
