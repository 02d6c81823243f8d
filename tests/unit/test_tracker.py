import datetime
import json
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import ShardDrop  # noqa: E402
from store import STATUS_CORRUPT, STATUS_ERROR, STATUS_NOT_FOUND, STATUS_OK, ShardStore  # noqa: E402
from tracker import ShardTracker, compute_stats, drops_to_frame  # noqa: E402


PASTE = (
    "Vyrewatch Sentinel:\n"
    "Image\n"
    "Blood shard (9,700,000 coins)\n"
    "Vyrewatch Sentinel:\n"
    "Blood shard (9.00M)\n"
)


def _tracker(tmp_path, **kwargs):
    return ShardTracker(store=ShardStore(tmp_path / "bloodshards.json"), **kwargs)


def _at(price):
    return ShardDrop(datetime.datetime(2025, 10, 12), price)


def test_compute_stats():
    assert compute_stats([_at(100), _at(200), _at(300)]) == {"count": 3, "total": 600, "average": 200}


def test_compute_stats_empty():
    assert compute_stats([]) == {"count": 0, "total": 0, "average": 0}


def test_compute_stats_average_is_truncated():
    assert compute_stats([_at(1), _at(2)])["average"] == 1
    assert compute_stats([_at(10), _at(10), _at(11)])["average"] == 10


def test_compute_stats_accepts_iterators():
    assert compute_stats(iter([_at(5)])) == {"count": 1, "total": 5, "average": 5}


def test_add_manual_appends_in_order(tmp_path):
    tracker = _tracker(tmp_path)
    when = datetime.datetime(2025, 10, 12, 4, 4)

    first = tracker.add_manual(when, 9_700_000)
    second = tracker.add_manual(when, 1_000)

    assert tracker.drops == [first, second]
    assert first == ShardDrop(when, 9_700_000)
    assert tracker.stats == {"count": 2, "total": 9_701_000, "average": 4_850_500}


def test_import_appends_to_existing_drops(tmp_path):
    tracker = _tracker(tmp_path, debug=True)
    tracker.add_manual(datetime.datetime(2025, 10, 11, 23, 7), 500)
    now = datetime.datetime(2025, 10, 12, 4, 4)

    imported, count = tracker.import_from_text(PASTE, now=now)

    assert count == 2
    assert [d.price_gp for d in imported] == [9_700_000, 9_000_000]
    assert all(d.timestamp == now for d in imported)
    assert [d.price_gp for d in tracker.drops] == [500, 9_700_000, 9_000_000]
    assert tracker.stats["total"] == 18_700_500


def test_import_of_empty_text_changes_nothing(tmp_path):
    tracker = _tracker(tmp_path)
    assert tracker.import_from_text("  \n ") == ([], 0)
    assert tracker.drops == []


def test_save_then_load_replaces_session(tmp_path):
    tracker = _tracker(tmp_path)
    tracker.import_from_text(PASTE)
    saved = list(tracker.drops)
    assert tracker.save().ok

    tracker.add_manual(datetime.datetime(2025, 10, 13), 1)
    result = tracker.load()

    assert result.status == STATUS_OK
    assert tracker.drops == saved


def test_load_missing_document_keeps_session(tmp_path):
    tracker = _tracker(tmp_path)
    tracker.add_manual(datetime.datetime(2025, 10, 13), 1)

    result = tracker.load()

    assert result.status == STATUS_NOT_FOUND
    assert len(tracker.drops) == 1


def test_load_corrupt_document_keeps_session(tmp_path):
    (tmp_path / "bloodshards.json").write_text("[{broken", encoding="utf-8")
    tracker = _tracker(tmp_path)
    tracker.add_manual(datetime.datetime(2025, 10, 13), 1)

    result = tracker.load()

    assert result.status == STATUS_CORRUPT
    assert result.error
    assert len(tracker.drops) == 1


def test_clear_keeps_saved_document_by_default(tmp_path):
    tracker = _tracker(tmp_path)
    tracker.import_from_text(PASTE)
    tracker.save()

    assert tracker.clear().ok
    assert tracker.drops == []
    assert tracker.stats == {"count": 0, "total": 0, "average": 0}
    assert tracker.store.exists()


def test_clear_can_delete_saved_document(tmp_path):
    tracker = _tracker(tmp_path)
    tracker.import_from_text(PASTE)
    tracker.save()

    assert tracker.clear(delete_saved=True).ok
    assert not tracker.store.exists()


def test_import_is_logged(tmp_path, _isolated_log):
    tracker = _tracker(tmp_path)
    tracker.import_from_text(PASTE)

    log = _isolated_log.read_text(encoding="utf-8")
    assert "[IMPORT] 2 shard(s)" in log
    assert "9,700,000 gp" in log


def test_clear_keeps_drops_when_delete_fails(tmp_path):
    # a directory in place of the document cannot be removed with os.remove
    path = tmp_path / "bloodshards.json"
    path.mkdir()
    tracker = ShardTracker(store=ShardStore(path))
    tracker.import_from_text(PASTE)

    result = tracker.clear(delete_saved=True)

    assert result.status == STATUS_ERROR
    assert result.error
    assert len(tracker.drops) == 2


def test_frame_of_naive_and_aware_drops_sorts():
    aware = ShardDrop(datetime.datetime(2025, 1, 2, tzinfo=datetime.timezone.utc), 2)
    naive = ShardDrop(datetime.datetime(2024, 12, 30, 12, 0), 1)

    df = drops_to_frame([aware, naive]).sort_values("timestamp")

    assert list(df["price_gp"]) == [1, 2]
    assert df["timestamp"].dt.tz is None


def test_frame_after_loading_dotnet_file_and_importing(tmp_path):
    (tmp_path / "bloodshards.json").write_text(
        json.dumps([{"When": "2020-01-01T10:00:00.1234567+02:00", "PriceGp": 500}]),
        encoding="utf-8",
    )
    tracker = _tracker(tmp_path)
    assert tracker.load().ok
    tracker.import_from_text(PASTE, now=datetime.datetime(2025, 10, 12, 4, 4))
    tracker.add_manual(datetime.datetime(2025, 10, 11, 23, 7), 1)

    df = drops_to_frame(tracker.drops).sort_values("timestamp", kind="stable")

    assert list(df["price_gp"]) == [500, 1, 9_700_000, 9_000_000]


def test_frame_of_no_drops_is_empty():
    df = drops_to_frame([])
    assert df.empty
    assert list(df.columns) == ["timestamp", "price_gp"]
