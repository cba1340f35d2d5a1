"""
Dyno Telemetry - Raw Frame Wire Format
======================================

Fixed-size binary record sent by the rig controller once per sampling
period.

Record Layout (little-endian, no padding, 24 bytes):
----------------------------------------------------
    offset  type  field
    0       u32   period         elapsed time since previous frame [ms]
    4       u32   pulse_enc_max  encoder ticks per roller revolution
    8       u32   pulse_enc      encoder ticks this period
    12      u32   pulse_enc_z    encoder index (Z) pulses this period
    16      u32   pulse_rpm      RPM sensor ticks this period
    20      f32   temperature    calibrated temperature [°C]

Stream Framing:
---------------
Records are separated by a single sentinel byte (``b"\\n"``). A chunk
between two sentinels is accepted only if its length is exactly the
record size; anything else is discarded, logged and counted. A record
whose payload happens to contain the sentinel byte is split by it and
therefore dropped as well.
Bytes waiting for a sentinel are capped at ``MAX_PENDING`` (four records);
a longer run with no sentinel is discarded as one rejected frame.

Example:
--------
>>> decoder = FrameDecoder()
>>> for chunk in serial_port:
...     for frame in decoder.feed(chunk):
...         session.push_frame(frame)
"""

import logging
import struct
from dataclasses import dataclass
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

FRAME_STRUCT = struct.Struct("<IIIIIf")
FRAME_SIZE = FRAME_STRUCT.size
FRAME_DELIMITER = b"\n"
MAX_PENDING = 4 * FRAME_SIZE


class FrameError(ValueError):
    """Byte record that is not a valid raw frame."""
    pass


@dataclass(frozen=True)
class RawFrame:
    """One hardware sample."""
    period_ms: int = 0
    pulse_enc_max: int = 0
    pulse_enc: int = 0
    pulse_enc_z: int = 0
    pulse_rpm: int = 0
    temperature: float = 0.0

    SIZE = FRAME_SIZE
    DELIMITER = FRAME_DELIMITER

    @classmethod
    def from_bytes(cls, record: bytes) -> "RawFrame":
        """
        Decode one record.

        Args:
            record: Exactly ``FRAME_SIZE`` bytes

        Returns:
            RawFrame

        Raises:
            FrameError: If the record has the wrong length
        """
        if len(record) != FRAME_SIZE:
            raise FrameError(f"Frame must be {FRAME_SIZE} bytes, got {len(record)}")
        period, enc_max, enc, enc_z, rpm, temperature = FRAME_STRUCT.unpack(bytes(record))
        return cls(
            period_ms=period,
            pulse_enc_max=enc_max,
            pulse_enc=enc,
            pulse_enc_z=enc_z,
            pulse_rpm=rpm,
            temperature=temperature,
        )

    @classmethod
    def try_from_bytes(cls, record: bytes) -> Optional["RawFrame"]:
        """Decode one record, returning None when the length is wrong."""
        if len(record) != FRAME_SIZE:
            return None
        return cls.from_bytes(record)

    def to_bytes(self) -> bytes:
        return FRAME_STRUCT.pack(
            self.period_ms,
            self.pulse_enc_max,
            self.pulse_enc,
            self.pulse_enc_z,
            self.pulse_rpm,
            self.temperature,
        )

    def __str__(self) -> str:
        return (
            f"RawFrame(period={self.period_ms}ms, enc_max={self.pulse_enc_max}, "
            f"enc={self.pulse_enc}, enc_z={self.pulse_enc_z}, "
            f"rpm={self.pulse_rpm}, temp={self.temperature:.2f})"
        )


def encode_stream(frames: Iterable[RawFrame], delimiter: bytes = FRAME_DELIMITER) -> bytes:
    """Serialize frames into a sentinel-delimited byte stream."""
    return b"".join(frame.to_bytes() + delimiter for frame in frames)


class FrameDecoder:
    """
    Incremental decoder for the sentinel-delimited frame stream.

    Bytes may arrive in arbitrary chunks; incomplete trailing data is
    kept until the next sentinel.
    """

    def __init__(self,
                 logger: Optional[logging.Logger] = None,
                 delimiter: bytes = FRAME_DELIMITER,
                 max_pending: int = MAX_PENDING):
        """
        Initialize decoder.

        Args:
            logger: Logger for malformed-frame warnings (module logger if None)
            delimiter: Single sentinel byte
            max_pending: Bytes kept without a sentinel before they are dropped
        """
        if len(delimiter) != 1:
            raise ValueError("Frame delimiter must be a single byte")
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.delimiter = delimiter
        self.max_pending = max_pending
        self._pending = bytearray()

        self.n_decoded = 0
        self.n_rejected = 0

    def feed(self, data: bytes) -> List[RawFrame]:
        """
        Consume raw bytes.

        Args:
            data: Next chunk from the transport

        Returns:
            Frames completed by this chunk, in arrival order
        """
        self._pending.extend(data)
        *chunks, rest = self._pending.split(self.delimiter)
        if len(rest) > self.max_pending:
            self.n_rejected += 1
            self.logger.warning(
                f"Discarding {len(rest)} bytes with no frame delimiter "
                f"(limit {self.max_pending})"
            )
            rest = b""
        self._pending = bytearray(rest)

        frames = []
        for chunk in chunks:
            if not chunk:
                continue
            frame = RawFrame.try_from_bytes(chunk)
            if frame is None:
                self.n_rejected += 1
                self.logger.warning(
                    f"Discarding malformed frame: {len(chunk)} bytes "
                    f"(expected {FRAME_SIZE})"
                )
                continue
            self.n_decoded += 1
            frames.append(frame)
        return frames

    @property
    def pending(self) -> int:
        """Bytes waiting for a sentinel."""
        return len(self._pending)

    def reset(self):
        self._pending.clear()
        self.n_decoded = 0
        self.n_rejected = 0
