"""Event source adapter: geotagged, timestamped edit points from a delimited table."""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, NamedTuple, Optional, Union

import numpy as np
import pandas as pd

REQUIRED_COLUMNS = ("lat", "lon", "timestamp")
DEFAULT_CHUNK_SIZE = 500_000


class Event(NamedTuple):
    lat: float
    lon: float
    timestamp: int


def _guess_separator(path: Path) -> str:
    suffixes = [s.lower() for s in path.suffixes]
    return "\t" if ".tsv" in suffixes else ","


def _to_epoch_seconds(values: pd.Series) -> pd.Series:
    """Integer epoch seconds, or ISO-8601 strings converted to UTC seconds. Unparseable -> NaN."""
    numeric = pd.to_numeric(values, errors="coerce")
    if numeric.notna().all():
        return numeric
    parsed = pd.to_datetime(values[numeric.isna()], utc=True, errors="coerce", format="ISO8601")
    seconds = (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(seconds=1)
    numeric = numeric.astype("float64")
    numeric.loc[seconds.index] = seconds.to_numpy(dtype="float64", na_value=np.nan)
    return numeric


def iter_point_table(
    path: Union[str, Path],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    sep: Optional[str] = None,
) -> Iterator[Event]:
    """
    Stream edit events from a CSV/TSV file with ``lat``, ``lon`` and ``timestamp`` columns.

    Compression (e.g. ``.tsv.gz``) is inferred from the suffix. Rows with a
    missing or unparseable field are skipped.
    """
    path = Path(path)
    sep = sep or _guess_separator(path)

    header = pd.read_csv(path, sep=sep, nrows=0)
    missing = [c for c in REQUIRED_COLUMNS if c not in header.columns]
    if missing:
        raise ValueError(f"{path} is missing required column(s): {', '.join(missing)}")

    for chunk in pd.read_csv(
        path,
        sep=sep,
        usecols=list(REQUIRED_COLUMNS),
        dtype=str,
        chunksize=chunk_size,
    ):
        lats = pd.to_numeric(chunk["lat"], errors="coerce")
        lons = pd.to_numeric(chunk["lon"], errors="coerce")
        stamps = _to_epoch_seconds(chunk["timestamp"])
        mask = lats.notna() & lons.notna() & stamps.notna()
        if not mask.any():
            continue

        lat_arr = lats[mask].to_numpy(dtype=np.float64)
        lon_arr = lons[mask].to_numpy(dtype=np.float64)
        ts_arr = np.floor(stamps[mask].to_numpy(dtype=np.float64)).astype(np.int64)
        for lat, lon, ts in zip(lat_arr.tolist(), lon_arr.tolist(), ts_arr.tolist()):
            yield Event(lat, lon, ts)
