"""
Dyno Telemetry Module - Initialization
======================================

Telemetry module moves samples from the rig to storage.

Components:
-----------
1. frame.py    - RawFrame wire codec, sentinel-delimited FrameDecoder
2. buffer.py   - TelemetryBuffer (columnar per-channel store + statistics)
3. session.py  - DynoSession (decoder -> derivation -> filters -> buffer)
4. storage.py  - CSV and compressed (.npz) persistence

Telemetry Pipeline:
-------------------
Serial bytes
    ↓
[FrameDecoder]      malformed records logged and dropped
    ↓
[derive()]          last-known-good fallback per field
    ↓
[FilterBank]        rpm / torque / horsepower smoothing
    ↓
[TelemetryBuffer]   → statistics, save_csv(), save_compressed()

Usage:
------
from core import CalibrationConfig
from telemetry import DynoSession, save_csv

session = DynoSession(CalibrationConfig())
session.feed(serial_port.read(4096))
save_csv(session.buffer, "runs/run_001.csv")
"""

from .frame import (
    FRAME_DELIMITER,
    FRAME_SIZE,
    MAX_PENDING,
    FrameDecoder,
    FrameError,
    RawFrame,
    encode_stream,
)

from .buffer import (
    CHANNEL_NAMES,
    CSV_HEADER,
    DEFAULT_CAPACITY,
    Channel,
    ColumnBuffer,
    TelemetryBuffer,
)

from .session import DynoSession

from .storage import (
    load_compressed,
    load_csv,
    save_compressed,
    save_csv,
)

__all__ = [
    # Wire format
    "FRAME_DELIMITER",
    "FRAME_SIZE",
    "MAX_PENDING",
    "FrameDecoder",
    "FrameError",
    "RawFrame",
    "encode_stream",
    # Buffer
    "CHANNEL_NAMES",
    "CSV_HEADER",
    "DEFAULT_CAPACITY",
    "Channel",
    "ColumnBuffer",
    "TelemetryBuffer",
    # Session
    "DynoSession",
    # Storage
    "load_compressed",
    "load_csv",
    "save_compressed",
    "save_csv",
]

__version__ = "1.0.0"
