import os
from datetime import datetime

import pytest

from sniff_console.services.comparison import CompareMode, Direction
from sniff_console.services.frame_parser import parse_line
from sniff_console.services.ingestion_service import IngestionService
from sniff_console.services.snapshot_service import SnapshotService
from sniff_backend import metrics


@pytest.fixture
def ingestion():
    return IngestionService(window_ms=1000, target_addresses=[])


def _ingest(service, frames):
    for frame in frames:
        service.ingest(frame)


def test_capture_copies_full_history(ingestion, make_frame, tmp_path):
    _ingest(ingestion, [make_frame(0x100, [1], 0.1), make_frame(0x100, [2], 0.2), make_frame(0x200, [3], 0.3)])
    snapshots = SnapshotService(str(tmp_path))
    assert snapshots.capture(ingestion) == 3
    assert len(snapshots) == 3

    # the ingestion buffer keeps evolving independently
    ingestion.ingest(make_frame(0x300, [4], 0.4))
    assert len(snapshots) == 3
    assert [f.can_id for f in snapshots.frames()] == [0x100, 0x100, 0x200]


def test_refine_replaces_baseline(ingestion, make_frame, tmp_path):
    _ingest(ingestion, [make_frame(0x100, [1], 0.0), make_frame(0x200, [5], 0.0), make_frame(0x300, [7], 0.0)])
    snapshots = SnapshotService(str(tmp_path))
    snapshots.capture(ingestion)

    _ingest(ingestion, [make_frame(0x100, [2], 0.5), make_frame(0x200, [4], 0.5), make_frame(0x300, [7], 0.5)])
    result = snapshots.refine(ingestion, Direction.INCREASE)
    assert [(f.can_id, f.data) for f in result] == [(0x100, b"\x02")]
    assert snapshots.frames() == result


def test_refine_decrease(ingestion, make_frame, tmp_path):
    _ingest(ingestion, [make_frame(0x100, [1], 0.0), make_frame(0x200, [5], 0.0)])
    snapshots = SnapshotService(str(tmp_path))
    snapshots.capture(ingestion)
    _ingest(ingestion, [make_frame(0x100, [2], 0.5), make_frame(0x200, [4], 0.5)])
    assert [f.can_id for f in snapshots.refine(ingestion, Direction.DECREASE)] == [0x200]


def test_refine_twice_without_new_frames_is_empty(ingestion, make_frame, tmp_path):
    _ingest(ingestion, [make_frame(0x100, [1], 0.0)])
    snapshots = SnapshotService(str(tmp_path))
    snapshots.capture(ingestion)
    ingestion.ingest(make_frame(0x100, [9], 0.5))
    assert len(snapshots.refine(ingestion, Direction.INCREASE)) == 1
    assert snapshots.refine(ingestion, Direction.INCREASE) == []
    assert len(snapshots) == 0


def test_refine_pair_mode(ingestion, make_frame, tmp_path):
    ingestion.ingest(make_frame(0x17C, [0x01, 0x00, 0x00], 0.0))
    snapshots = SnapshotService(str(tmp_path), mode=CompareMode.PAIR)
    snapshots.capture(ingestion)
    ingestion.ingest(make_frame(0x17C, [0x00, 0x05, 0x00], 0.5))
    assert len(snapshots.refine(ingestion, Direction.INCREASE)) == 1


def test_export_lines_format(make_frame, tmp_path):
    snapshots = SnapshotService(str(tmp_path))
    snapshots.replace([make_frame(0x17C, [0x00, 0x0A, 0xFF], 0.0), make_frame(0x7, [], 0.0)])
    assert snapshots.export_lines() == ["ID:17C:00 0A FF", "ID:7:"]


def test_export_writes_timestamped_file(make_frame, tmp_path):
    snapshots = SnapshotService(str(tmp_path / "exports"))
    frames = [make_frame(0x17C, [0x00, 0x00, 0x02, 0x00], 0.0), make_frame(0x1DC, [0xAB], 0.0)]
    snapshots.replace(frames)
    path = snapshots.export(when=datetime(2026, 10, 18, 12, 30, 5, 123456))
    assert os.path.basename(path) == "baseline_20261018_123005_123.txt"
    with open(path, encoding="utf-8") as f:
        lines = f.read().splitlines()
    assert lines == ["ID:17C:00 00 02 00", "ID:1DC:AB"]
    parsed = [parse_line(line, timestamp=0.0) for line in lines]
    assert [(f.can_id, f.data) for f in parsed] == [(f.can_id, f.data) for f in frames]
    assert metrics.get("baseline_exports") == 1


def test_export_empty_baseline(tmp_path):
    path = SnapshotService(str(tmp_path)).export()
    assert os.path.getsize(path) == 0
