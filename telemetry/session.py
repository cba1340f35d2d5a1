"""
Dyno Telemetry - Session Owner
==============================

Single owner of one dynamometer run:

    bytes -> FrameDecoder -> derive() -> FilterBank -> TelemetryBuffer

Every frame is derived from the buffer's last sample, so frames must be
pushed in arrival order by one consumer. A session owns its calibration
(and therefore its filter bank) and its buffer; concurrent sessions must
each be given their own CalibrationConfig.

Example:
--------
>>> session = DynoSession(CalibrationConfig(), logger=setup_logging())

or straight from a loaded rig file:

>>> session = DynoSession.from_config(load_config("config/dyno.yaml"))
>>> for chunk in serial_port:
...     session.feed(chunk)
>>> session.last.summary()
"""

import logging
from typing import Any, Dict, List, Optional

from core.calibration import CalibrationConfig
from core.derivation import derive
from core.sample import TelemetrySample
from utils.config import validate_config

from .buffer import DEFAULT_CAPACITY, TelemetryBuffer
from .frame import FrameDecoder, FrameError, RawFrame

logger = logging.getLogger(__name__)


class DynoSession:
    """
    Wires frame decoding, derivation, smoothing and buffering together.

    Malformed input is logged through the injected logger and counted;
    nothing in the frame path raises.
    """

    def __init__(self,
                 config: Optional[CalibrationConfig] = None,
                 capacity: int = DEFAULT_CAPACITY,
                 apply_filters: bool = True,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize session.

        Args:
            config: Rig calibration (defaults when None)
            capacity: Samples reserved in the buffer
            apply_filters: Smooth rpm/torque/horsepower through config.filters
            logger: Logging capability (module logger when None)
        """
        self.config = config if config is not None else CalibrationConfig()
        self.apply_filters = apply_filters
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        self.buffer = TelemetryBuffer(capacity)
        self.decoder = FrameDecoder(logger=self.logger)

        self.n_processed = 0
        self._n_invalid = 0

        self.config.reset()
        self.logger.info(
            f"DynoSession initialized (capacity={capacity}, "
            f"filters={'on' if apply_filters else 'off'}, "
            f"powertrain={self.config.powertrain})"
        )

    @classmethod
    def from_config(cls,
                    config: Optional[Dict[str, Any]] = None,
                    logger: Optional[logging.Logger] = None) -> "DynoSession":
        """
        Build a session from a loaded configuration dictionary.

        The calibration, powertrain and filters sections go to
        ``CalibrationConfig.from_dict``; ``session.buffer_capacity`` and
        ``session.apply_filters`` set the buffer size and smoothing.

        Raises:
            ConfigError: If the configuration fails validation
        """
        config = config or {}
        validate_config(config)
        options = config.get("session") or {}
        return cls(
            CalibrationConfig.from_dict(config),
            capacity=options.get("buffer_capacity", DEFAULT_CAPACITY),
            apply_filters=options.get("apply_filters", True),
            logger=logger,
        )

    @property
    def last(self) -> TelemetrySample:
        """Latest sample (zero sample before the first frame)."""
        return self.buffer.last()

    @property
    def n_rejected(self) -> int:
        """Malformed frames discarded by the stream decoder or push_bytes."""
        return self.decoder.n_rejected + self._n_invalid

    def push_frame(self, frame: RawFrame) -> TelemetrySample:
        """
        Derive, smooth and store one frame.

        Args:
            frame: Decoded hardware frame

        Returns:
            The stored sample
        """
        sample = derive(self.buffer.last(), self.config, frame)
        if self.apply_filters:
            sample = self.config.filters.apply(sample)

        self.buffer.append(sample)
        self.n_processed += 1
        self.logger.debug(f"Sample {self.n_processed}: {sample.summary()}")
        return sample

    def push_bytes(self, record: bytes) -> Optional[TelemetrySample]:
        """
        Decode and push one undelimited record.

        Returns:
            The stored sample, or None if the record was malformed
        """
        try:
            frame = RawFrame.from_bytes(record)
        except FrameError as e:
            self._n_invalid += 1
            self.logger.warning(f"Discarding malformed frame: {e}")
            return None
        return self.push_frame(frame)

    def feed(self, data: bytes) -> List[TelemetrySample]:
        """
        Consume a chunk of the sentinel-delimited stream.

        Returns:
            Samples produced by the frames this chunk completed
        """
        return [self.push_frame(frame) for frame in self.decoder.feed(data)]

    def statistics(self) -> Dict[str, Dict[str, float]]:
        """Per-channel min/max/sum/average of the buffer."""
        return self.buffer.statistics()

    def get_diagnostics(self) -> Dict:
        return {
            "samples": len(self.buffer),
            "processed": self.n_processed,
            "rejected": self.n_rejected,
            "pending_bytes": self.decoder.pending,
            "odometer_km": self.last.odometer.value,
        }

    def reset(self):
        """Start a new run: empty buffer, cold filters, drop partial input."""
        self.buffer.clear()
        self.config.reset()
        self.decoder.reset()
        self.n_processed = 0
        self._n_invalid = 0
        self.logger.info("DynoSession reset")

    def __len__(self) -> int:
        return len(self.buffer)

    def __repr__(self) -> str:
        return (
            f"DynoSession(samples={len(self.buffer)}, "
            f"rejected={self.n_rejected}, config={self.config!r})"
        )
