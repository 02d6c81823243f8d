"""
Shard Store - persistence of drops in a single JSON document

Document format (compatible with save files of the earlier .NET release):
    [
      {"When": "2025-10-12T04:04:00", "PriceGp": 9700000},
      ...
    ]

Every operation returns a StoreResult instead of raising, so callers can tell
a missing document apart from a corrupt one.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from config import SAVE_FILE
from models import ShardDrop
from utils import log_debug, parse_iso_timestamp

STATUS_OK = "ok"
STATUS_NOT_FOUND = "not_found"
STATUS_CORRUPT = "corrupt"
STATUS_ERROR = "error"

_TIMESTAMP_KEYS = ("When", "timestamp")
_PRICE_KEYS = ("PriceGp", "price_gp")


@dataclass
class StoreResult:
    status: str
    drops: List[ShardDrop] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def _first_present(entry: dict, keys):
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def drop_from_dict(entry) -> ShardDrop:
    """Build a drop from one document entry; raises ValueError on bad data."""
    if not isinstance(entry, dict):
        raise ValueError(f"entry is not an object: {entry!r}")

    raw_ts = _first_present(entry, _TIMESTAMP_KEYS)
    ts = parse_iso_timestamp(raw_ts)
    if ts is None:
        raise ValueError(f"invalid timestamp: {raw_ts!r}")

    price = _first_present(entry, _PRICE_KEYS)
    # bool is an int subclass; JSON true/false is not a price
    if isinstance(price, bool) or not isinstance(price, int) or price < 0:
        raise ValueError(f"invalid price: {price!r}")

    return ShardDrop(timestamp=ts, price_gp=price)


class ShardStore:
    def __init__(self, path=SAVE_FILE):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, drops) -> StoreResult:
        """Overwrite the document with the full list of drops."""
        drops = list(drops)
        payload = [drop.to_dict() for drop in drops]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log_debug(f"[STORE] Save to {self.path} failed: {e}")
            return StoreResult(STATUS_ERROR, error=str(e))
        return StoreResult(STATUS_OK, drops=drops)

    def load(self) -> StoreResult:
        """
        Read the document.

        Returns:
            StoreResult with status
                'ok'        - drops loaded (empty list for an empty/null document)
                'not_found' - no document yet
                'corrupt'   - unreadable or invalid document; no drops
        """
        if not self.exists():
            return StoreResult(STATUS_NOT_FOUND)

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if data is None:
                return StoreResult(STATUS_OK)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            drops = [drop_from_dict(entry) for entry in data]
        except (OSError, UnicodeDecodeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            log_debug(f"[STORE] Load from {self.path} failed: {e}")
            return StoreResult(STATUS_CORRUPT, error=str(e))

        return StoreResult(STATUS_OK, drops=drops)

    def clear(self) -> StoreResult:
        """Delete the document if present."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            log_debug(f"[STORE] Delete of {self.path} failed: {e}")
            return StoreResult(STATUS_ERROR, error=str(e))
        return StoreResult(STATUS_OK)
