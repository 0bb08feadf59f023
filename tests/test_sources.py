from __future__ import annotations

import gzip

import pytest

from histanim.sources import Event, iter_point_table


def test_reads_tsv_with_mixed_timestamps(tmp_path):
    path = tmp_path / "points.tsv"
    path.write_text(
        "id\tlat\tlon\ttimestamp\n"
        "1\t51.5\t-0.12\t1262304000\n"
        "2\t48.85\t2.35\t2010-01-01T00:01:00Z\n"
        "3\tnot-a-lat\t2.35\t1262304000\n"
        "4\t40.0\t-3.7\tyesterday\n",
        encoding="utf-8",
    )
    events = list(iter_point_table(path))
    assert events == [
        Event(51.5, -0.12, 1262304000),
        Event(48.85, 2.35, 1262304060),
    ]
    assert all(isinstance(e.timestamp, int) for e in events)


def test_reads_gzipped_csv_in_chunks(tmp_path):
    path = tmp_path / "points.csv.gz"
    rows = "".join(f"{i * 0.1},{i * 0.2},{1262304000 + i}\n" for i in range(25))
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write("lat,lon,timestamp\n" + rows)
    events = list(iter_point_table(path, chunk_size=4))
    assert len(events) == 25
    assert events[-1].timestamp == 1262304024
    assert events[3].lat == pytest.approx(0.3)


def test_missing_column_rejected(tmp_path):
    path = tmp_path / "points.csv"
    path.write_text("lat,lon\n1,2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        list(iter_point_table(path))
