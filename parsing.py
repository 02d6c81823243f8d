import re
import datetime

from config import MARKER_TEXT, PRICE_ITEM_NAME, SKIP_LINE_TEXT, LOOKAHEAD_LINES
from models import ShardDrop
from utils import normalize_price_str, log_debug

# -----------------------
# Pre-compiled Regex Patterns
# -----------------------
def _loose_words(text):
    """'Vyrewatch Sentinel:' → r'Vyrewatch\\s+Sentinel:' (any run of whitespace between words)."""
    return r"\s+".join(re.escape(word) for word in text.split())


_MARKER_PATTERN = re.compile(rf"^\s*{_loose_words(MARKER_TEXT)}\s*$", re.IGNORECASE)
# Item name may be split or glued ("Blood shard" / "Bloodshard"), price sits in the
# first parentheses after it: "Blood shard (9,700,000 coins)"
_PRICE_LINE_PATTERN = re.compile(
    r"\b" + r"\s*".join(re.escape(word) for word in PRICE_ITEM_NAME.split()) + r"\b.*?\(([^)]+)\)",
    re.IGNORECASE,
)


def split_text_into_lines(text):
    """Normalize CRLF / CR line endings and split into lines."""
    if not text:
        return []
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def is_marker_line(line):
    return bool(line) and _MARKER_PATTERN.match(line) is not None


def is_skip_line(line):
    return line.strip().lower() == SKIP_LINE_TEXT.lower()


def extract_price_from_line(line):
    """
    Return the gp value of a price line, or None.

    None means either that the line is not a price line or that the text in
    the parentheses could not be turned into a number.
    """
    m = _PRICE_LINE_PATTERN.search(line.strip())
    if not m:
        return None
    return normalize_price_str(m.group(1).strip())


def find_price_after_marker(lines, marker_index, lookahead=LOOKAHEAD_LINES):
    """
    Look at the lines following a marker for the first price line.

    "Image" lines are skipped but still count towards the lookahead window.
    The first price line with a readable price wins; one with unreadable
    price text does not end the search.
    """
    last = min(marker_index + lookahead, len(lines) - 1)
    for j in range(marker_index + 1, last + 1):
        look = lines[j].strip()
        if is_skip_line(look):
            continue
        price = extract_price_from_line(look)
        if price is not None:
            return price
    return None


def iter_shard_prices(text, lookahead=LOOKAHEAD_LINES, debug=False):
    """
    Lazily yield the gp price of every drop found in pasted chat text.

    Each marker line is handled on its own: markers without a price line in
    their window, or with an unreadable price, yield nothing.
    """
    if not text or not text.strip():
        return

    lines = split_text_into_lines(text)
    for i, line in enumerate(lines):
        if not is_marker_line(line):
            continue
        price = find_price_after_marker(lines, i, lookahead=lookahead)
        if price is None:
            if debug:
                log_debug(f"[IMPORT] Marker at line {i + 1}: no usable price within {lookahead} lines")
            continue
        if debug:
            log_debug(f"[IMPORT] Marker at line {i + 1}: {price:,} gp")
        yield price


def import_shard_drops(text, now=None, lookahead=LOOKAHEAD_LINES, debug=False):
    """
    Turn pasted chat text into new drops.

    All drops of one import share the import time as timestamp; the chat
    text carries no usable time.

    Returns:
        (list[ShardDrop], count)
    """
    when = now or datetime.datetime.now()
    drops = [
        ShardDrop(timestamp=when, price_gp=price)
        for price in iter_shard_prices(text, lookahead=lookahead, debug=debug)
    ]
    return drops, len(drops)
