import os

# -----------------------
# Konfiguration
# -----------------------
SAVE_FILE = os.getenv('SHARD_SAVE_FILE', 'bloodshards.json')
LOG_PATH = os.getenv('SHARD_LOG_PATH', 'shard_log.txt')
DEBUG_MODE = (os.getenv('SHARD_DEBUG', '0') or '0').strip().lower() in ('1', 'true', 'yes', 'on')

# Log-Rotation: Auto @ 10MB
LOG_MAX_BYTES = 10 * 1024 * 1024

# -----------------------
# Import (pasted chat text)
# -----------------------
# A drop is announced by the marker line; the price line follows within
# LOOKAHEAD_LINES lines. "Image" lines are noise from copying the chat with
# item icons and count against the window.
MARKER_TEXT = "Vyrewatch Sentinel:"
PRICE_ITEM_NAME = "Blood shard"
SKIP_LINE_TEXT = "Image"
LOOKAHEAD_LINES = 6

SUFFIX_MULTIPLIERS = {
    'k': 1_000,
    'm': 1_000_000,
    'b': 1_000_000_000,
}

# Prices are stored as signed 64-bit values in existing save files
MAX_PRICE_GP = 2 ** 63 - 1

# -----------------------
# GUI
# -----------------------
WINDOW_TITLE = "Blood Shard Tracker"
WINDOW_GEOMETRY = "640x720"
CURRENCY_LABEL = "gp"
