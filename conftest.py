import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolated_log(tmp_path, monkeypatch):
    """Keep test runs from writing shard_log.txt into the working directory."""
    import utils

    monkeypatch.setattr(utils, "LOG_PATH", str(tmp_path / "shard_log.txt"))
    return tmp_path / "shard_log.txt"
