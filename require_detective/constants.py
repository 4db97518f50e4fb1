"""Constants and configuration defaults for require-detective.

Only the command line and the tool server read the environment; the
library API always takes an explicit ``Options`` value.
"""

import os

# =============================================================================
# Detection
# =============================================================================

# Identifier whose calls are treated as dependency declarations
DEFAULT_WORD = "require"

# Overrides DEFAULT_WORD for the command line and the tool server
WORD_ENV_VAR = "REQUIRE_DETECTIVE_WORD"


# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL_ENV_VAR = "REQUIRE_DETECTIVE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

LOGGER_NAME = "require_detective"


# =============================================================================
# Tool server
# =============================================================================

SERVER_NAME = "require-detective"


def word_from_env() -> str:
    """Return the target identifier configured in the environment."""
    return os.environ.get(WORD_ENV_VAR) or DEFAULT_WORD


def log_level_from_env() -> str:
    """Return the log level configured in the environment."""
    return os.environ.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL
