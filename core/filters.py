"""
Dyno Core - Exponential Smoothing Filters
=========================================

Single-channel exponential moving average (EMA) used to suppress
one-sample noise spikes on derived telemetry channels.

Theory:
-------
For a smoothing period N (number of samples conceptually averaged):

    k = 2 / (N + 1)

    y(0) = x(0)                         [cold start: seed]
    y(n) = k * x(n) + (1 - k) * y(n-1)  [warm]

N = 1 gives k = 1, i.e. a pass-through filter.

Filter Bank:
------------
Every smoothed channel owns an independent filter; channels never
share state. Default periods:

    torque       2
    horsepower   2
    wheel rpm    100
    engine rpm   100

Example:
--------
>>> ema = ExponentialFilter(3)
>>> [ema.next(x) for x in (2.0, 5.0, 1.0, 6.25)]
[2.0, 3.5, 2.25, 4.25]
"""

import dataclasses
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = 9

DEFAULT_BANK_PERIODS = {
    "torque": 2,
    "horsepower": 2,
    "rpm_wheel": 100,
    "rpm_engine": 100,
}


class ExponentialFilter:
    """
    Exponential moving average over one numeric channel.

    Accepts plain floats or unit values (``units.Quantity``); the output
    has the same type as the input.
    """

    def __init__(self, period: int = DEFAULT_PERIOD):
        """
        Initialize filter.

        Args:
            period: Smoothing period N (>= 1)

        Raises:
            ValueError: If period < 1 (optimized runs clamp to 1 instead)
        """
        if period < 1:
            if __debug__:
                raise ValueError(f"Filter period must be >= 1, got {period}")
            logger.warning(f"Filter period {period} clamped to 1")
            period = 1

        self.period = int(period)
        self.k = 2.0 / (self.period + 1)
        self.current = 0.0
        self.is_new = True

    def next(self, value):
        """
        Feed one sample and return the smoothed value.

        Args:
            value: New raw sample (float or unit value)

        Returns:
            Smoothed value, same type as ``value``
        """
        x = float(value)
        if self.is_new:
            self.is_new = False
            self.current = x
        else:
            self.current = self.k * x + (1.0 - self.k) * self.current

        if isinstance(value, (int, float)):
            return self.current
        return type(value)(self.current)

    def reset(self):
        """Return to the cold-start state."""
        self.current = 0.0
        self.is_new = True

    def __repr__(self) -> str:
        return f"ExponentialFilter(period={self.period}, current={self.current!r})"


class FilterBank:
    """
    One ExponentialFilter per smoothed telemetry channel.

    Example:
    --------
    >>> bank = FilterBank(torque=2, horsepower=2, rpm_wheel=100, rpm_engine=100)
    >>> smoothed = bank.apply(sample)
    """

    CHANNELS = ("rpm_wheel", "rpm_engine", "torque", "horsepower")

    def __init__(self,
                 rpm_wheel: int = DEFAULT_BANK_PERIODS["rpm_wheel"],
                 rpm_engine: int = DEFAULT_BANK_PERIODS["rpm_engine"],
                 torque: int = DEFAULT_BANK_PERIODS["torque"],
                 horsepower: int = DEFAULT_BANK_PERIODS["horsepower"]):
        self.rpm_wheel = ExponentialFilter(rpm_wheel)
        self.rpm_engine = ExponentialFilter(rpm_engine)
        self.torque = ExponentialFilter(torque)
        self.horsepower = ExponentialFilter(horsepower)

    @classmethod
    def from_periods(cls, periods: Optional[Dict[str, int]] = None) -> "FilterBank":
        """Build a bank from a ``{channel: period}`` mapping; missing keys use defaults."""
        merged = dict(DEFAULT_BANK_PERIODS)
        merged.update(periods or {})
        unknown = set(merged) - set(cls.CHANNELS)
        if unknown:
            raise ValueError(f"Unknown filter channels: {sorted(unknown)}")
        return cls(**merged)

    def periods(self) -> Dict[str, int]:
        return {name: getattr(self, name).period for name in self.CHANNELS}

    def apply(self, sample):
        """
        Smooth the filtered channels of a telemetry sample.

        Args:
            sample: TelemetrySample (any dataclass with the channel fields)

        Returns:
            New sample with rpm_wheel, rpm_engine, torque and horsepower
            replaced by their smoothed values
        """
        return dataclasses.replace(
            sample,
            **{name: getattr(self, name).next(getattr(sample, name))
               for name in self.CHANNELS}
        )

    def reset(self):
        """Reset every channel filter (start of a new session)."""
        for name in self.CHANNELS:
            getattr(self, name).reset()

    def __repr__(self) -> str:
        return f"FilterBank({self.periods()})"
