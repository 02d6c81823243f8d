import datetime
import pandas as pd

from config import DEBUG_MODE, LOOKAHEAD_LINES
from models import ShardDrop
from parsing import import_shard_drops
from store import ShardStore, StoreResult, STATUS_OK
from utils import log_debug, log_text, to_local_naive


def drops_to_frame(drops) -> pd.DataFrame:
    """Drops as a DataFrame (timestamp, price_gp) for export and charts.

    Timestamps are converted to naive local time so that drops loaded with a
    UTC offset sort together with drops entered in this session.
    """
    df = pd.DataFrame(
        [{"timestamp": to_local_naive(d.timestamp), "price_gp": d.price_gp} for d in drops],
        columns=["timestamp", "price_gp"],
    )
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df


def compute_stats(drops) -> dict:
    """
    Totals over a list of drops.

    Returns:
        dict with keys:
            'count': int - number of drops
            'total': int - sum of prices (gp)
            'average': int - total // count, 0 without drops
    """
    count = 0
    total = 0
    for drop in drops:
        count += 1
        total += drop.price_gp
    return {
        'count': count,
        'total': total,
        'average': total // count if count else 0,
    }


# -----------------------
# Session-State: Drops im Speicher
# -----------------------
class ShardTracker:
    def __init__(self, store=None, debug=None, lookahead=LOOKAHEAD_LINES):
        if debug is None:
            debug = DEBUG_MODE
        self.debug = bool(debug)
        self.store = store if store is not None else ShardStore()
        self.lookahead = lookahead
        # replaced as a whole on load; the UI re-reads it after every action
        self.drops: list[ShardDrop] = []

    @property
    def stats(self) -> dict:
        return compute_stats(self.drops)

    def add_manual(self, timestamp: datetime.datetime, price_gp: int) -> ShardDrop:
        """Append a drop entered by hand (inputs are validated by the caller)."""
        drop = ShardDrop(timestamp=timestamp, price_gp=int(price_gp))
        self.drops.append(drop)
        if self.debug:
            log_debug(f"[ADD] {drop.timestamp.isoformat()} {drop.price_display}")
        return drop

    def import_from_text(self, text, now=None):
        """
        Import every drop found in pasted chat text.

        Returns:
            (list of imported drops, count)
        """
        imported, count = import_shard_drops(text, now=now, lookahead=self.lookahead, debug=self.debug)
        self.drops.extend(imported)
        if count:
            log_text(f"[IMPORT] {count} shard(s): " + ", ".join(d.price_display for d in imported))
        elif self.debug:
            log_debug("[IMPORT] No shards found in pasted text")
        return imported, count

    def save(self) -> StoreResult:
        result = self.store.save(self.drops)
        if result.ok:
            log_debug(f"[SAVE] {len(self.drops)} drop(s) written to {self.store.path}")
        return result

    def load(self) -> StoreResult:
        """
        Replace the in-memory drops with the saved ones.

        Only an 'ok' result touches self.drops; a missing or corrupt document
        leaves the current session as it is.
        """
        result = self.store.load()
        if result.status == STATUS_OK:
            self.drops = list(result.drops)
            log_debug(f"[LOAD] {len(self.drops)} drop(s) read from {self.store.path}")
        else:
            log_debug(f"[LOAD] {self.store.path}: {result.status}" + (f" ({result.error})" if result.error else ""))
        return result

    def clear(self, delete_saved=False) -> StoreResult:
        """
        Forget all drops; optionally delete the saved document as well.

        With delete_saved, the drops stay in memory when the delete fails.
        """
        result = self.store.clear() if delete_saved else StoreResult(STATUS_OK)
        if not result.ok:
            log_debug(f"[CLEAR] Kept {len(self.drops)} drop(s): {result.error}")
            return result
        removed = len(self.drops)
        self.drops = []
        log_debug(f"[CLEAR] {removed} drop(s) removed" + (", saved file deleted" if delete_saved else ""))
        return result
