"""
Dyno Tests - Telemetry Buffer
=============================

Test Coverage:
--------------
1. Length invariant and cached last sample
2. Statistics (min/max/sum/average) on a reference fixture
3. Clear / empty behaviour, views taken before a clear
4. Growth past the reserved capacity
5. Row view and reconstruction from rows
"""

import unittest
from datetime import datetime

import numpy as np

from core.sample import TelemetrySample
from telemetry.buffer import (
    CHANNEL_NAMES,
    CSV_HEADER,
    Channel,
    ColumnBuffer,
    TelemetryBuffer,
    sample_from_row,
    sample_to_row,
)
from units import (
    Celsius,
    HorsePower,
    KilometresPerHour,
    NewtonMetres,
    RotationsPerMinute,
)


def make_sample(value: float, stamp_ms: int = 0) -> TelemetrySample:
    """Sample with every stored channel set to ``value``."""
    return TelemetrySample(
        speed=KilometresPerHour(value),
        torque=NewtonMetres(value),
        horsepower=HorsePower(value),
        temperature=Celsius(value),
        timestamp=datetime.fromtimestamp(stamp_ms / 1000.0),
        rpm_wheel=RotationsPerMinute(value),
        rpm_engine=RotationsPerMinute(value),
    )


class TestColumnBuffer(unittest.TestCase):
    """Single growable column."""

    def test_statistics_fixture(self):
        column = ColumnBuffer()
        for _ in range(99):
            column.append(69.0)
        column.append(420.0)

        self.assertEqual(len(column), 100)
        self.assertEqual(column.sum(), 7251.0)
        self.assertEqual(column.average(), 72.51)
        self.assertEqual(column.min(), 69.0)
        self.assertEqual(column.max(), 420.0)
        self.assertEqual(column.first(), 69.0)
        self.assertEqual(column.last(), 420.0)

    def test_empty(self):
        column = ColumnBuffer()
        self.assertEqual(column.sum(), 0.0)
        self.assertEqual(column.average(), 0.0)
        self.assertEqual(column.min(), 0.0)
        self.assertEqual(column.max(), 0.0)
        self.assertEqual(column.last(), 0.0)
        with self.assertRaises(IndexError):
            column[0]

    def test_growth(self):
        column = ColumnBuffer(capacity=4)
        for i in range(10):
            column.append(float(i))
        self.assertEqual(len(column), 10)
        self.assertGreaterEqual(column.capacity, 10)
        np.testing.assert_array_equal(column.view(), np.arange(10.0))
        self.assertEqual(column[-1], 9.0)

    def test_view_read_only(self):
        column = ColumnBuffer(capacity=2)
        column.append(1.0)
        view = column.view()
        with self.assertRaises(ValueError):
            view[0] = 5.0
        # growth does not invalidate an earlier view
        for _ in range(5):
            column.append(2.0)
        self.assertEqual(view[0], 1.0)

    def test_view_survives_clear(self):
        column = ColumnBuffer(capacity=4)
        for value in (1.0, 2.0, 3.0):
            column.append(value)
        view = column.view()

        column.clear()
        self.assertEqual(len(column), 0)
        self.assertEqual(column.capacity, 4)
        column.append(9.0)
        column.append(8.0)

        np.testing.assert_array_equal(view, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(column.view(), [9.0, 8.0])

    def test_int_column(self):
        column = ColumnBuffer(dtype=np.int64)
        column.append(1700000000123)
        self.assertIsInstance(column[0], int)
        self.assertEqual(column[0], 1700000000123)


class TestTelemetryBuffer(unittest.TestCase):
    """Session buffer."""

    def test_channel_tables(self):
        self.assertEqual(len(CHANNEL_NAMES), len(Channel))
        self.assertEqual(CHANNEL_NAMES[Channel.SPEED], "SPEED (km/h)")
        self.assertEqual(CHANNEL_NAMES[Channel.TEMPERATURE], "TEMPERATURE (°C)")
        self.assertEqual(
            ",".join(CSV_HEADER),
            "SPEED,RPM(WHEEL),RPM(ENGINE),TORQUE,HORSEPOWER,TEMP,TIME",
        )

    def test_length_invariant(self):
        buffer = TelemetryBuffer()
        self.assertTrue(buffer.is_empty())
        self.assertEqual(buffer.last(), TelemetrySample.zero())

        samples = [make_sample(float(i), stamp_ms=i) for i in range(25)]
        for n, sample in enumerate(samples, start=1):
            buffer.append(sample)
            self.assertEqual(len(buffer), n)
            self.assertIs(buffer.last(), sample)
            for channel in Channel:
                self.assertEqual(len(buffer.column(channel)), n)

    def test_statistics_fixture(self):
        buffer = TelemetryBuffer()
        for _ in range(99):
            buffer.append(make_sample(69.0))
        buffer.append(make_sample(420.0))

        for channel in (Channel.SPEED, Channel.TORQUE, "horsepower", "rpm_wheel"):
            with self.subTest(channel=channel):
                self.assertEqual(buffer.sum(channel), 7251.0)
                self.assertEqual(buffer.average(channel), 72.51)
                self.assertEqual(buffer.min(channel), 69.0)
                self.assertEqual(buffer.max(channel), 420.0)

        stats = buffer.statistics()
        self.assertNotIn("timestamp", stats)
        self.assertEqual(stats["temperature"]["average"], 72.51)

    def test_clear(self):
        buffer = TelemetryBuffer()
        for i in range(5):
            buffer.append(make_sample(float(i)))
        buffer.clear()

        self.assertEqual(len(buffer), 0)
        self.assertTrue(buffer.is_empty())
        self.assertEqual(buffer.last(), TelemetrySample.zero())
        self.assertEqual(buffer.average(Channel.SPEED), 0.0)
        for channel in Channel:
            self.assertEqual(len(buffer.column(channel)), 0)

    def test_columns_survive_clear(self):
        buffer = TelemetryBuffer(capacity=8)
        for i in range(3):
            buffer.append(make_sample(float(i + 1), stamp_ms=1000 * i))
        speeds = buffer.column(Channel.SPEED)
        stamps = buffer.column(Channel.TIMESTAMP)

        # next session writes over the same indexes
        buffer.clear()
        for i in range(3):
            buffer.append(make_sample(50.0, stamp_ms=9999))

        np.testing.assert_array_equal(speeds, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(stamps, [0, 1000, 2000])
        np.testing.assert_array_equal(buffer.column(Channel.SPEED), [50.0] * 3)

    def test_growth_keeps_last(self):
        buffer = TelemetryBuffer(capacity=2)
        first = make_sample(1.0)
        buffer.append(first)
        held = buffer.last()
        for i in range(10):
            buffer.append(make_sample(float(i + 2)))
        self.assertIs(held, first)
        self.assertEqual(len(buffer), 11)
        self.assertEqual(buffer.max(Channel.RPM_ENGINE), 11.0)

    def test_row_view(self):
        buffer = TelemetryBuffer()
        buffer.append(make_sample(1.5, stamp_ms=1000))
        buffer.append(make_sample(2.5, stamp_ms=2000))

        self.assertEqual(buffer.row(0), (1.5, 1.5, 1.5, 1.5, 1.5, 1.5, 1000))
        self.assertEqual(buffer[-1], (2.5, 2.5, 2.5, 2.5, 2.5, 2.5, 2000))
        self.assertEqual(len(list(buffer)), 2)
        with self.assertRaises(IndexError):
            buffer.row(2)

    def test_from_rows(self):
        source = TelemetryBuffer()
        for i in range(3):
            source.append(make_sample(10.0 * i, stamp_ms=1000 * i))

        rebuilt = TelemetryBuffer.from_rows(source.rows())
        self.assertEqual(list(rebuilt), list(source))
        self.assertEqual(rebuilt.last().speed, KilometresPerHour(20.0))
        self.assertEqual(rebuilt.first().timestamp_ms, 0)

    def test_sample_row_conversion(self):
        sample = make_sample(3.25, stamp_ms=1234567)
        row = sample_to_row(sample)
        self.assertEqual(row[Channel.TIMESTAMP], 1234567)
        back = sample_from_row(row)
        self.assertEqual(back.torque, sample.torque)
        self.assertEqual(back.timestamp_ms, 1234567)


if __name__ == "__main__":
    unittest.main()
