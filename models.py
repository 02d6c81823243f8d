from dataclasses import dataclass
import datetime

from config import CURRENCY_LABEL


@dataclass(frozen=True)
class ShardDrop:
    """A single Blood shard sale: when it dropped and what it sold for (gp)."""
    timestamp: datetime.datetime
    price_gp: int

    @property
    def price_display(self) -> str:
        return f"{self.price_gp:,} {CURRENCY_LABEL}"

    def to_dict(self) -> dict:
        # Key names match save files of the earlier .NET release
        return {
            "When": self.timestamp.isoformat(),
            "PriceGp": int(self.price_gp),
        }
