import re
import datetime
import os
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from config import (
    LOG_PATH,
    LOG_MAX_BYTES,
    SUFFIX_MULTIPLIERS,
    MAX_PRICE_GP,
    CURRENCY_LABEL,
)

# -----------------------
# Pre-compiled Regex Patterns
# -----------------------
# "9,700,000" / "1,234.5" - fraction digits are concatenated, not scaled
_COMMA_GROUPED_PATTERN = re.compile(r"[0-9]{1,3}(?:,[0-9]{3})+(?:\.[0-9]+)?")
# "9.00M" / "900k" / "13 m" / ".5k"
_SUFFIX_PATTERN = re.compile(r"([0-9]+(?:\.[0-9]+)?|\.[0-9]+)\s*([kmb])", re.IGNORECASE)
_NON_DIGIT_PATTERN = re.compile(r"[^0-9]")
_ISO_TIMESTAMP_PATTERN = re.compile(
    r"(\d{4}-\d{2}-\d{2})[T ](\d{2}:\d{2})(?::(\d{2}))?(?:\.(\d+))?\s*(Z|[+-]\d{2}(?::?\d{2}){1,2})?",
    re.IGNORECASE,
)


def log_text(text):
    """Logging mit automatischer Rotation bei LOG_MAX_BYTES (verhindert unbegrenztes Wachstum)"""
    try:
        if os.path.exists(LOG_PATH):
            size = os.path.getsize(LOG_PATH)
            if size > LOG_MAX_BYTES:
                # Rotate: .txt → .txt.old (überschreibt alte Rotation)
                try:
                    os.replace(LOG_PATH, f"{LOG_PATH}.old")
                except OSError:
                    try:
                        os.remove(LOG_PATH)
                    except OSError:
                        pass

        with open(LOG_PATH, "a", encoding="utf-8") as f:
            f.write(f"{datetime.datetime.now().isoformat()}:\n{text}\n\n")
    except Exception:
        pass


def log_debug(message: str):
    """Append a debug line to the log file with timestamp (for development diagnostics)."""
    try:
        ts = datetime.datetime.now().isoformat()
        with open(LOG_PATH, "a", encoding="utf-8") as f:
            f.write(f"{ts} [DEBUG] {message}\n")
    except Exception:
        pass


def _digits_to_int(s: str) -> Optional[int]:
    digits = _NON_DIGIT_PATTERN.sub('', s)
    if not digits:
        return None
    return int(digits)


def _expand_suffix(number: str, suffix: str) -> Optional[int]:
    try:
        value = Decimal(number) * SUFFIX_MULTIPLIERS[suffix.lower()]
    except (InvalidOperation, KeyError):
        return None
    # ROUND_HALF_UP rounds ties away from zero
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def normalize_price_str(s):
    """
    Parse a price expression like "9,700,000", "9.00M", "900k" or "12345 coins" into gp.

    Priority:
        1. comma-grouped number → all digits concatenated ("1,234.5" → 12345)
        2. number with k/m/b suffix → scaled and rounded half away from zero
        3. anything else → all digits concatenated, None if there are none

    Returns:
        int or None (never raises)
    """
    if not s:
        return None
    s = s.strip()
    if not s:
        return None

    if _COMMA_GROUPED_PATTERN.fullmatch(s):
        value = _digits_to_int(s)
    else:
        m = _SUFFIX_PATTERN.fullmatch(s)
        if m:
            value = _expand_suffix(m.group(1), m.group(2))
        else:
            value = _digits_to_int(s)

    if value is None or value < 0 or value > MAX_PRICE_GP:
        return None
    return value


def parse_iso_timestamp(ts_text):
    """Parst ISO-8601 Strings wie '2025-10-09T10:13:05' -> datetime.

    Tolerates the 7-digit fractional seconds and the 'Z' / '+01:00' suffixes
    that .NET writes, and the '+05:30:15' offsets of datetime.isoformat().
    Offsets are kept (aware datetime). Returns None for anything unparseable.
    """
    if not isinstance(ts_text, str):
        return None
    m = _ISO_TIMESTAMP_PATTERN.fullmatch(ts_text.strip())
    if not m:
        return None
    date_part, hm_part, seconds, fraction, offset = m.groups()
    normalized = f"{date_part}T{hm_part}:{seconds or '00'}"
    if fraction:
        normalized += "." + fraction[:6].ljust(6, '0')
    if offset:
        if offset.upper() == 'Z':
            offset = "+00:00"
        else:
            # "+0530" / "+05:30" / "+05:30:15" → "+HH:MM[:SS]"
            digits = offset[1:].replace(':', '')
            offset = offset[0] + ":".join(digits[i:i + 2] for i in range(0, len(digits), 2))
        normalized += offset
    try:
        return datetime.datetime.fromisoformat(normalized)
    except ValueError:
        return None


def to_local_naive(ts):
    """Aware datetimes → local wall-clock time without tzinfo; naive ones unchanged.

    Drops from the form and the importer are naive local times, so this puts
    loaded .NET timestamps on the same scale for sorting and charts.
    """
    if ts is None or ts.tzinfo is None or ts.utcoffset() is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def parse_manual_timestamp(date_text, hour_text, minute_text):
    """Build the timestamp of a manually entered drop.

    Args:
        date_text: 'YYYY-MM-DD'
        hour_text: 0-23
        minute_text: 0-59

    Returns:
        datetime or None if any part is invalid
    """
    try:
        day = datetime.datetime.strptime((date_text or "").strip(), "%Y-%m-%d")
        hh = int((hour_text or "").strip())
        mm = int((minute_text or "").strip())
    except ValueError:
        return None
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        return None
    return day.replace(hour=hh, minute=mm)


def parse_manual_price(price_text):
    """Price typed into the form; same formats the importer understands."""
    return normalize_price_str(price_text)


def format_gp(value) -> str:
    try:
        return f"{int(value):,} {CURRENCY_LABEL}"
    except (TypeError, ValueError):
        return f"- {CURRENCY_LABEL}"
