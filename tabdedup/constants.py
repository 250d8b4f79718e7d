"""
Constants for tabdedup.

These constants are used by various modules for sensible defaults.
Several are also available via the config system.
"""

# Similarity
DEFAULT_THRESHOLD = 0.82
THRESHOLD_UI_MIN = 0.6  # Range offered by the settings slider, not enforced
THRESHOLD_UI_MAX = 0.95

# Limits
MAX_TEXT_LENGTH = 800  # Characters compared per item
MAX_PAGE_TEXT_LENGTH = 3000  # Characters kept when extracting a saved page
SCORE_DIGITS = 3

# Page extraction
MAX_PARAGRAPHS = 8
MAX_MAIN_CONTENT_LENGTH = 1500

# Pages that can never be read by an extension
INTERNAL_URL_PREFIXES = (
    "chrome://",
    "chrome-extension://",
    "edge://",
    "about:",
)

# Display limits
DEFAULT_TOP_GROUPS = 10
