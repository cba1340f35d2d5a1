"""
Dyno Telemetry - Persistence
============================

Writers and readers for session buffers. They only touch the buffer's
row view (``len``, iteration, ``CHANNEL_NAMES``) and rebuild through
``TelemetryBuffer.from_rows``.

Formats:
--------
1. CSV   - header ``SPEED,RPM(WHEEL),RPM(ENGINE),TORQUE,HORSEPOWER,TEMP,TIME``,
           one row per sample, TIME as integer epoch milliseconds
2. NPZ   - numpy compressed archive, one array per channel plus the
           channel display names

Rows that cannot be parsed are logged at WARNING and skipped; they never
abort a load.
"""

import csv
import logging
import math
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

import numpy as np

from .buffer import (
    CHANNEL_FIELDS,
    CHANNEL_NAMES,
    CSV_HEADER,
    DEFAULT_CAPACITY,
    Channel,
    TelemetryBuffer,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save_csv(buffer: TelemetryBuffer, path: PathLike) -> Path:
    """
    Write a buffer to CSV.

    Args:
        buffer: Session buffer
        path: Output file (parent directories are created)

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for row in buffer:
            writer.writerow([repr(float(v)) for v in row[:-1]] + [int(row[-1])])

    logger.info(f"Saved {len(buffer)} samples to {path}")
    return path


def parse_csv_row(fields: Sequence[str]) -> tuple:
    """
    Parse one CSV data row.

    Raises:
        ValueError: Wrong field count, non-numeric or non-finite values
    """
    if len(fields) != len(CSV_HEADER):
        raise ValueError(f"expected {len(CSV_HEADER)} fields, got {len(fields)}")

    values = [float(field) for field in fields[:-1]]
    if not all(math.isfinite(v) for v in values):
        raise ValueError("non-finite value")
    return (*values, int(fields[-1]))


def _csv_rows(path: Path, log: logging.Logger) -> Iterator[tuple]:
    with open(path, "r", newline="") as f:
        for line_no, fields in enumerate(csv.reader(f), start=1):
            if not fields:
                continue
            if line_no == 1 and tuple(name.strip() for name in fields) == CSV_HEADER:
                continue
            try:
                yield parse_csv_row(fields)
            except ValueError as e:
                log.warning(f"{path}:{line_no}: skipping unparsable row ({e})")


def load_csv(path: PathLike,
             capacity: int = DEFAULT_CAPACITY,
             logger: Optional[logging.Logger] = None) -> TelemetryBuffer:
    """
    Read a CSV written by ``save_csv``.

    Args:
        path: Input file
        capacity: Capacity of the rebuilt buffer
        logger: Logger for skipped rows (module logger if None)

    Returns:
        TelemetryBuffer with every parsable row
    """
    path = Path(path)
    log = logger if logger is not None else logging.getLogger(__name__)
    if not path.exists():
        raise FileNotFoundError(f"Telemetry file not found: {path}")

    buffer = TelemetryBuffer.from_rows(_csv_rows(path, log), capacity=capacity)
    log.info(f"Loaded {len(buffer)} samples from {path}")
    return buffer


def save_compressed(buffer: TelemetryBuffer, path: PathLike) -> Path:
    """Write every channel to a compressed ``.npz`` archive."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    np.savez_compressed(
        path,
        channel_names=np.array(CHANNEL_NAMES),
        **{CHANNEL_FIELDS[channel]: buffer.column(channel) for channel in Channel}
    )

    # numpy appends the suffix when missing
    if path.suffix != ".npz":
        path = path.with_name(path.name + ".npz")
    logger.info(f"Saved {len(buffer)} samples to {path}")
    return path


def load_compressed(path: PathLike,
                    capacity: int = DEFAULT_CAPACITY,
                    logger: Optional[logging.Logger] = None) -> TelemetryBuffer:
    """
    Read an archive written by ``save_compressed``.

    Raises:
        ValueError: Missing channels or channels of unequal length
    """
    path = Path(path)
    log = logger if logger is not None else logging.getLogger(__name__)

    with np.load(path, allow_pickle=False) as archive:
        missing = [name for name in CHANNEL_FIELDS if name not in archive.files]
        if missing:
            raise ValueError(f"{path}: missing channels {missing}")
        columns: List[np.ndarray] = [archive[name] for name in CHANNEL_FIELDS]

    lengths = {len(column) for column in columns}
    if len(lengths) != 1:
        raise ValueError(f"{path}: channels have unequal lengths {sorted(lengths)}")

    buffer = TelemetryBuffer.from_rows(
        zip(*(column.tolist() for column in columns)), capacity=capacity)
    log.info(f"Loaded {len(buffer)} samples from {path}")
    return buffer
