"""
Dyno Telemetry - Columnar Sample Buffer
=======================================

Append-only, per-channel store of derived telemetry for one session.

Layout:
-------
One numpy column per channel, all of equal length at all times:

    idx  channel       name                 dtype
    0    SPEED         SPEED (km/h)         float64
    1    RPM_WHEEL     RPM Wheel (RPM)      float64
    2    RPM_ENGINE    RPM Engine (RPM)     float64
    3    TORQUE        TORQUE (Nm)          float64
    4    HORSEPOWER    HORSEPOWER (HP)      float64
    5    TEMPERATURE   TEMPERATURE (°C)     float64
    6    TIMESTAMP     TIMESTAMP            int64 (epoch ms)

Capacity is reserved up front (30,000 samples by default) and doubles
when exhausted, so ``append`` is O(1) amortized. Views handed out
before a growth or a ``clear`` keep pointing at the old storage and stay
valid.

Statistics:
-----------
``min``/``max``/``sum``/``average`` per channel, by linear scan.
Empty channels report 0.0; ``average`` divides with ``safe_div``.

Row View:
---------
Persistence collaborators only need ``len(buffer)``, ``buffer.row(i)``
(or iteration), ``CHANNEL_NAMES`` and ``TelemetryBuffer.from_rows()``.

Example:
--------
>>> buffer = TelemetryBuffer()
>>> buffer.append(sample)
>>> buffer.average(Channel.SPEED)
93.81...
"""

import logging
from datetime import datetime
from enum import IntEnum
from typing import Dict, Iterable, Iterator, Sequence, Tuple, Union

import numpy as np

from core.sample import TelemetrySample
from units import (
    Celsius,
    HorsePower,
    KilometresPerHour,
    NewtonMetres,
    RotationsPerMinute,
    safe_div,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 30_000


class Channel(IntEnum):
    """Buffer column index."""
    SPEED = 0
    RPM_WHEEL = 1
    RPM_ENGINE = 2
    TORQUE = 3
    HORSEPOWER = 4
    TEMPERATURE = 5
    TIMESTAMP = 6


CHANNEL_NAMES = (
    "SPEED (km/h)",
    "RPM Wheel (RPM)",
    "RPM Engine (RPM)",
    "TORQUE (Nm)",
    "HORSEPOWER (HP)",
    "TEMPERATURE (°C)",
    "TIMESTAMP",
)

# Header row of the CSV export (timestamp as epoch ms)
CSV_HEADER = (
    "SPEED",
    "RPM(WHEEL)",
    "RPM(ENGINE)",
    "TORQUE",
    "HORSEPOWER",
    "TEMP",
    "TIME",
)

# TelemetrySample attribute stored in each column
CHANNEL_FIELDS = (
    "speed",
    "rpm_wheel",
    "rpm_engine",
    "torque",
    "horsepower",
    "temperature",
    "timestamp",
)

Row = Tuple[float, float, float, float, float, float, int]
ChannelKey = Union[Channel, int, str]


def sample_to_row(sample: TelemetrySample) -> Row:
    """Flatten a sample into one buffer row (timestamp as epoch ms)."""
    return (
        sample.speed.value,
        sample.rpm_wheel.value,
        sample.rpm_engine.value,
        sample.torque.value,
        sample.horsepower.value,
        sample.temperature.value,
        sample.timestamp_ms,
    )


def sample_from_row(row: Sequence) -> TelemetrySample:
    """
    Rebuild a sample from a stored row.

    Channels that are not stored (odometer, angular/roller rates) come
    back as zero.
    """
    speed, rpm_wheel, rpm_engine, torque, horsepower, temperature, stamp = row[:len(Channel)]
    return TelemetrySample(
        speed=KilometresPerHour(speed),
        torque=NewtonMetres(torque),
        horsepower=HorsePower(horsepower),
        temperature=Celsius(temperature),
        timestamp=datetime.fromtimestamp(int(stamp) / 1000.0),
        rpm_wheel=RotationsPerMinute(rpm_wheel),
        rpm_engine=RotationsPerMinute(rpm_engine),
    )


class ColumnBuffer:
    """
    Growable numpy column with O(1) amortized append.

    Example:
    --------
    >>> column = ColumnBuffer()
    >>> for _ in range(99):
    ...     column.append(69.0)
    >>> column.append(420.0)
    >>> column.sum(), column.average()
    (7251.0, 72.51)
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, dtype=np.float64):
        self._data = np.empty(max(int(capacity), 1), dtype=dtype)
        self._len = 0

    @property
    def capacity(self) -> int:
        return self._data.shape[0]

    @property
    def dtype(self):
        return self._data.dtype

    def append(self, value):
        if self._len == self.capacity:
            self._grow()
        self._data[self._len] = value
        self._len += 1

    def _grow(self):
        grown = np.empty(self.capacity * 2, dtype=self._data.dtype)
        grown[:self._len] = self._data[:self._len]
        self._data = grown
        logger.debug(f"Column grown to {self.capacity} entries")

    def clear(self):
        """Empty the column into fresh storage; earlier views keep their values."""
        self._data = np.empty(self.capacity, dtype=self._data.dtype)
        self._len = 0

    def view(self) -> np.ndarray:
        """Read-only view of the stored values."""
        values = self._data[:self._len]
        values.flags.writeable = False
        return values

    def __len__(self) -> int:
        return self._len

    def __getitem__(self, index: int):
        if index < 0:
            index += self._len
        if not 0 <= index < self._len:
            raise IndexError(f"index {index} out of range for {self._len} values")
        return self._data[index].item()

    def __iter__(self):
        return iter(self.view().tolist())

    def first(self):
        return self[0] if self._len else self._data.dtype.type(0).item()

    def last(self):
        return self[-1] if self._len else self._data.dtype.type(0).item()

    def min(self) -> float:
        if not self._len:
            return 0.0
        return np.min(self.view()).item()

    def max(self) -> float:
        if not self._len:
            return 0.0
        return np.max(self.view()).item()

    def sum(self) -> float:
        return np.sum(self.view()).item()

    def average(self) -> float:
        return safe_div(float(self.sum()), float(self._len))


class TelemetryBuffer:
    """
    Session telemetry store: equal-length channel columns plus the cached
    last sample.
    """

    CHANNEL_NAMES = CHANNEL_NAMES

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Initialize buffer.

        Args:
            capacity: Samples reserved per column before the first growth
        """
        self._columns: Dict[Channel, ColumnBuffer] = {
            channel: ColumnBuffer(
                capacity,
                dtype=np.int64 if channel is Channel.TIMESTAMP else np.float64,
            )
            for channel in Channel
        }
        self._last = TelemetrySample.zero()
        self._len = 0

    @classmethod
    def from_rows(cls,
                  rows: Iterable[Sequence],
                  capacity: int = DEFAULT_CAPACITY) -> "TelemetryBuffer":
        """Rebuild a buffer by appending parsed rows in order."""
        buffer = cls(capacity)
        for row in rows:
            buffer.append(sample_from_row(row))
        return buffer

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, sample: TelemetrySample):
        """Push every channel of ``sample`` and cache it as ``last()``."""
        row = sample_to_row(sample)
        for channel, value in zip(Channel, row):
            self._columns[channel].append(value)
        self._last = sample
        self._len += 1

    def clear(self):
        """Drop all samples (session reset)."""
        for column in self._columns.values():
            column.clear()
        self._last = TelemetrySample.zero()
        self._len = 0

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def last(self) -> TelemetrySample:
        """Most recently appended sample, or the zero sample when empty."""
        return self._last

    def first(self) -> TelemetrySample:
        if not self._len:
            return TelemetrySample.zero()
        return sample_from_row(self.row(0))

    def __len__(self) -> int:
        return self._len

    def is_empty(self) -> bool:
        return self._len == 0

    @property
    def capacity(self) -> int:
        return self._columns[Channel.SPEED].capacity

    def column(self, channel: ChannelKey) -> np.ndarray:
        """Read-only numpy view of one channel."""
        return self._columns[self._channel(channel)].view()

    def row(self, index: int) -> Row:
        """Values of every channel at ``index`` (CHANNEL_NAMES order)."""
        return tuple(self._columns[channel][index] for channel in Channel)

    def __getitem__(self, index: int) -> Row:
        return self.row(index)

    def rows(self) -> Iterator[Row]:
        for index in range(self._len):
            yield self.row(index)

    def __iter__(self) -> Iterator[Row]:
        return self.rows()

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def min(self, channel: ChannelKey) -> float:
        return self._columns[self._channel(channel)].min()

    def max(self, channel: ChannelKey) -> float:
        return self._columns[self._channel(channel)].max()

    def sum(self, channel: ChannelKey) -> float:
        return self._columns[self._channel(channel)].sum()

    def average(self, channel: ChannelKey) -> float:
        return self._columns[self._channel(channel)].average()

    def statistics(self) -> Dict[str, Dict[str, float]]:
        """min/max/sum/average of every measurement channel (timestamp excluded)."""
        return {
            CHANNEL_FIELDS[channel]: {
                "min": self.min(channel),
                "max": self.max(channel),
                "sum": self.sum(channel),
                "average": self.average(channel),
            }
            for channel in Channel
            if channel is not Channel.TIMESTAMP
        }

    @staticmethod
    def _channel(key: ChannelKey) -> Channel:
        if isinstance(key, str):
            try:
                return Channel(CHANNEL_FIELDS.index(key))
            except ValueError:
                return Channel[key.upper()]
        return Channel(key)

    def __repr__(self) -> str:
        return f"TelemetryBuffer(len={self._len}, capacity={self.capacity})"
