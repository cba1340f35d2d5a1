"""
Dyno Tests - Typed Unit Values
==============================

Test Coverage:
--------------
1. Conversions
   - Round trip for every unit pair of every domain
   - Reference factors (km/h, knots, hp, lb, °F)
   - Cross-domain conversion rejected

2. Arithmetic
   - Same-unit and scalar operands
   - Mixed units rejected
   - IEEE-754 division by zero

3. Guards & Helpers
   - if_not_normal / if_negative_normal
   - Truncating decimal rounding
   - ULP fuzzy equality, safe division

4. Constructors & Formatting
"""

import itertools
import math
import unittest

import numpy as np

from units import (
    Celsius,
    CentiMetres,
    DegreesPerSecond,
    Fahrenheit,
    Grams,
    HorsePower,
    Kelvin,
    KiloGrams,
    KiloMetres,
    KiloWatts,
    KilometresPerHour,
    Knots,
    Length,
    Metres,
    MetresPerSecond,
    MilliMetres,
    NewtonMetres,
    Pounds,
    PoundFeet,
    Quantity,
    RadiansPerSecond,
    RotationsPerMinute,
    UnitMismatchError,
    Watts,
    fuzzy_eq,
    ieee_div,
    per_hour,
    per_minute,
    per_second,
    roller_distance,
    round_decimal,
    safe_div,
)


class TestConversions(unittest.TestCase):
    """Unit conversion within a domain."""

    def test_all_domains_registered(self):
        self.assertEqual(
            Quantity.domains(),
            ["angular", "length", "mass", "power", "speed", "temperature", "torque"],
        )

    def test_round_trip_every_pair(self):
        """A.to(B).to(A) returns A for every unit pair."""
        for domain in Quantity.domains():
            units = Quantity.units_of(domain)
            self.assertGreaterEqual(len(units), 2, domain)
            for source, target in itertools.product(units, repeat=2):
                for value in (0.0, 1.0, -3.75, 1234.5678):
                    original = source(value)
                    back = original.to(target).to(source)
                    with self.subTest(source=source.__name__, target=target.__name__):
                        self.assertIs(type(back), source)
                        np.testing.assert_allclose(back.value, value, rtol=1e-12, atol=1e-9)

    def test_length_factors(self):
        self.assertAlmostEqual(Metres(1500.0).to(KiloMetres).value, 1.5)
        self.assertAlmostEqual(Metres(1.0).to_millimetres().value, 1000.0)
        self.assertAlmostEqual(CentiMetres(14.22).to(Metres).value, 0.1422)
        self.assertAlmostEqual(MilliMetres(5.0).to_centimetres().value, 0.5)

    def test_speed_factors(self):
        self.assertAlmostEqual(KilometresPerHour(36.0).to_metres_per_second().value, 10.0)
        self.assertAlmostEqual(Knots(1.0).to(MetresPerSecond).value, 1852.0 / 3600.0)

    def test_angular_factors(self):
        self.assertAlmostEqual(
            RotationsPerMinute(60.0).to_radians_per_second().value, 2.0 * math.pi)
        self.assertAlmostEqual(
            DegreesPerSecond(360.0).to_rotations_per_minute().value, 60.0)

    def test_mass_torque_power_factors(self):
        self.assertAlmostEqual(Pounds(1.0).to_kilograms().value, 0.45359237)
        self.assertAlmostEqual(KiloGrams(1.0).to_grams().value, 1000.0)
        self.assertAlmostEqual(PoundFeet(1.0).to_newton_metres().value, 1.3558179483, places=8)
        self.assertAlmostEqual(HorsePower(1.0).to_watts().value, 745.69987, places=4)
        self.assertAlmostEqual(KiloWatts(1.0).to(Watts).value, 1000.0)

    def test_temperature_affine(self):
        self.assertAlmostEqual(Celsius(0.0).to_kelvin().value, 273.15)
        self.assertAlmostEqual(Fahrenheit(212.0).to_celsius().value, 100.0)
        self.assertAlmostEqual(Celsius(-40.0).to_fahrenheit().value, -40.0)
        self.assertAlmostEqual(Kelvin(0.0).to(Fahrenheit).value, -459.67)

    def test_cross_domain_rejected(self):
        with self.assertRaises(UnitMismatchError):
            Metres(1.0).to(KiloGrams)
        with self.assertRaises(UnitMismatchError):
            Metres(1.0).to(Length)
        with self.assertRaises(UnitMismatchError):
            Metres(KiloMetres(1.0))

    def test_domain_not_constructible(self):
        with self.assertRaises(TypeError):
            Length(1.0)


class TestArithmetic(unittest.TestCase):
    """Operators on unit values."""

    def test_same_unit(self):
        self.assertEqual(Metres(1.5) + Metres(0.5), Metres(2.0))
        self.assertEqual(Metres(1.5) - Metres(0.5), Metres(1.0))
        self.assertEqual(Metres(3.0) * Metres(2.0), Metres(6.0))
        self.assertEqual(Metres(3.0) / Metres(2.0), Metres(1.5))

    def test_scalar_operands(self):
        self.assertEqual(Metres(2.0) * 3, Metres(6.0))
        self.assertEqual(3 * Metres(2.0), Metres(6.0))
        self.assertEqual(10.0 - Metres(4.0), Metres(6.0))
        self.assertEqual(-Metres(2.0), Metres(-2.0))
        self.assertEqual(abs(Metres(-2.0)), Metres(2.0))

    def test_mixed_units_rejected(self):
        with self.assertRaises(TypeError):
            Metres(1.0) + KiloMetres(1.0)
        with self.assertRaises(TypeError):
            NewtonMetres(1.0) * RotationsPerMinute(1.0)
        with self.assertRaises(TypeError):
            Metres(1.0) < KiloMetres(1.0)
        self.assertNotEqual(Metres(1000.0), KiloMetres(1.0))

    def test_division_by_zero_is_ieee(self):
        self.assertEqual((Metres(1.0) / 0).value, math.inf)
        self.assertEqual((Metres(-1.0) / 0.0).value, -math.inf)
        self.assertTrue(math.isnan((Metres(0.0) / 0).value))
        self.assertTrue(math.isnan(ieee_div(0, 0)))

    def test_ordering_and_hash(self):
        values = [Metres(3.0), Metres(1.0), Metres(2.0)]
        self.assertEqual(sorted(values), [Metres(1.0), Metres(2.0), Metres(3.0)])
        self.assertEqual(Metres(1.0).max(Metres(2.0)), Metres(2.0))
        self.assertEqual(Metres(1.0).min(0.5), Metres(0.5))
        self.assertEqual(len({Metres(1.0), Metres(1.0), KiloMetres(1.0)}), 2)


class TestGuards(unittest.TestCase):
    """Fallback combinators and numeric helpers."""

    def test_if_not_normal(self):
        fallback = MetresPerSecond(3.0)
        self.assertEqual(MetresPerSecond(math.nan).if_not_normal(fallback), fallback)
        self.assertEqual(MetresPerSecond(math.inf).if_not_normal(fallback), fallback)
        self.assertEqual(MetresPerSecond(-1.0).if_not_normal(fallback), MetresPerSecond(-1.0))

    def test_if_negative_normal(self):
        fallback = NewtonMetres(5.0)
        self.assertEqual(NewtonMetres(-0.1).if_negative_normal(fallback), fallback)
        self.assertEqual(NewtonMetres(-math.inf).if_negative_normal(fallback), fallback)
        self.assertEqual(NewtonMetres(math.nan).if_negative_normal(fallback), fallback)
        self.assertEqual(NewtonMetres(0.0).if_negative_normal(fallback), NewtonMetres(0.0))
        self.assertEqual(NewtonMetres(2.0).if_negative_normal(fallback), NewtonMetres(2.0))

    def test_is_normal(self):
        self.assertTrue(Metres(1.0).is_normal())
        self.assertFalse(Metres(math.nan).is_normal())
        self.assertTrue(Metres(-0.0).is_negative())

    def test_round_decimal_truncates(self):
        self.assertEqual(round_decimal(69.69696969, 2), 69.69)
        self.assertEqual(round_decimal(-1.239, 2), -1.23)
        self.assertEqual(KilometresPerHour(93.8142).round_decimal(2), KilometresPerHour(93.81))
        self.assertTrue(math.isinf(round_decimal(math.inf, 2)))

    def test_fuzzy_eq(self):
        self.assertTrue(fuzzy_eq(0.1 + 0.2, 0.3))
        self.assertFalse(fuzzy_eq(1.0, 1.0001))
        self.assertFalse(fuzzy_eq(math.nan, math.nan))
        self.assertTrue(Metres(0.1 + 0.2).fuzzy_eq(Metres(0.3)))
        self.assertFalse(Metres(0.3).fuzzy_eq(KiloMetres(0.3)))

    def test_safe_div(self):
        self.assertEqual(safe_div(1.0, 0.0), 0.0)
        self.assertEqual(safe_div(1.0, math.nan, default=-1.0), -1.0)
        self.assertEqual(safe_div(7251.0, 100.0), 72.51)
        self.assertEqual(Metres(3.0).safe_div(0), 0.0)


class TestConstructors(unittest.TestCase):
    """Rate helpers and named constructors."""

    def test_tick_rates(self):
        self.assertAlmostEqual(per_second(5, 500), 10.0)
        self.assertAlmostEqual(per_minute(1, 1000), 60.0)
        self.assertAlmostEqual(per_hour(1, 60000), 60.0)
        self.assertTrue(math.isinf(per_minute(1, 0)))

    def test_from_rotations(self):
        self.assertAlmostEqual(RotationsPerMinute.from_rotations(4200 / 360, 200).value, 3500.0)
        self.assertFalse(RotationsPerMinute.from_rotations(1, 0).is_normal())

    def test_from_distance(self):
        self.assertAlmostEqual(MetresPerSecond.from_distance(Metres(10.0), 2000).value, 5.0)
        self.assertAlmostEqual(MetresPerSecond.from_distance(KiloMetres(0.01), 2000).value, 5.0)

    def test_from_torque(self):
        hp = HorsePower.from_torque(NewtonMetres(9549.0), RotationsPerMinute(1.0))
        self.assertAlmostEqual(hp.value, 1.0)
        hp = HorsePower.from_torque(NewtonMetres(10.0), RotationsPerMinute(60.0).to_radians_per_second())
        self.assertAlmostEqual(hp.value, 600.0 / 9549.0)

    def test_roller_distance(self):
        self.assertAlmostEqual(roller_distance(2.0, Metres(0.5)).value, math.pi)
        self.assertAlmostEqual(roller_distance(1.0, CentiMetres(100.0)).value, math.pi)

    def test_parse_and_format(self):
        self.assertEqual(Metres.parse(" 1.5 "), Metres(1.5))
        with self.assertRaises(ValueError):
            Grams.parse("heavy")
        self.assertEqual(str(Metres(1.5)), "1.50")
        self.assertEqual(f"{Metres(1.23456):.3f}", "1.235")
        self.assertEqual(KilometresPerHour(93.814).label(), "93.81 km/h")
        self.assertEqual(repr(Metres(1.5)), "Metres(1.5)")

    def test_default_is_zero(self):
        self.assertEqual(RadiansPerSecond().value, 0.0)
        self.assertEqual(float(Celsius(21.5)), 21.5)


if __name__ == "__main__":
    unittest.main()
