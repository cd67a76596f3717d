import sqlite3
from datetime import datetime
from unittest.mock import MagicMock

from naoload.services.usage import UsageLogger, compute_stats


NOW = datetime(2024, 5, 10, 15, 30)
MIDNIGHT = int(datetime(2024, 5, 10).timestamp())


def test_empty_stats():
    stats = compute_stats([], now=NOW)
    assert stats.to_dict() == {"total": 0, "today": 0, "topPlatform": "N/A", "byPlatform": {}}


def test_histogram_today_and_tie_break():
    logs = [
        {"platform": "tiktok", "format": "mp4", "created_at": MIDNIGHT + 300},
        {"platform": "youtube", "format": "mp3", "created_at": MIDNIGHT + 200},
        {"platform": "tiktok", "format": "mp4", "created_at": MIDNIGHT - 100},
        {"platform": "youtube", "format": "mp4", "created_at": MIDNIGHT},
    ]

    stats = compute_stats(logs, now=NOW)

    assert stats.total == 4
    assert stats.today == 3
    assert list(stats.by_platform.items()) == [("tiktok", 2), ("youtube", 2)]
    assert stats.top_platform == "tiktok"


def test_exact_total_overrides_sample_size():
    logs = [{"platform": "instagram", "created_at": MIDNIGHT + 1}]
    stats = compute_stats(logs, total=1234, now=NOW)
    assert stats.total == 1234
    assert stats.top_platform == "instagram"


def test_record_and_read_back(db):
    usage = UsageLogger(db)
    usage.record("tiktok", "mp4")
    usage.record("YouTube", "MP3")

    recent = usage.recent()

    assert [(entry["platform"], entry["format"]) for entry in recent] == [("youtube", "mp3"), ("tiktok", "mp4")]
    assert usage.total() == 2


def test_recent_respects_limit(db):
    usage = UsageLogger(db)
    for _ in range(5):
        usage.record("twitter", "mp4")
    assert len(usage.recent(limit=3)) == 3
    assert usage.total() == 5


def test_record_swallows_storage_errors():
    broken = MagicMock()
    broken.add_download_log.side_effect = sqlite3.OperationalError("disk full")

    UsageLogger(broken).record("tiktok", "mp4")

    broken.add_download_log.assert_called_once_with("tiktok", "mp4")


def test_record_on_unhealthy_database(db):
    db._healthy = False
    UsageLogger(db).record("tiktok", "mp4")


def test_disabled_store_is_a_no_op():
    usage = UsageLogger(None)
    usage.record("tiktok", "mp4")
    assert not usage.enabled
    assert usage.recent() == []
    assert usage.total() == 0


def test_reads_on_unhealthy_database_are_empty(db):
    usage = UsageLogger(db)
    usage.record("tiktok", "mp4")
    db._healthy = False

    assert usage.recent() == []
    assert usage.total() == 0


def test_read_errors_are_swallowed():
    broken = MagicMock()
    broken.get_recent_download_logs.side_effect = sqlite3.OperationalError("database is locked")
    broken.count_download_logs.side_effect = sqlite3.OperationalError("database is locked")

    usage = UsageLogger(broken)

    assert usage.recent() == []
    assert usage.total() == 0
