"""
Dyno Core - Telemetry Derivation
================================

Turns one raw hardware frame into one calibrated telemetry sample.

Derivation Chain (order matters):
---------------------------------
    1. rotations      = pulse_enc / pulse_enc_max
    2. distance       = rotations * roller_circumference             [m]
    3. odometer       = previous.odometer + distance                 [km]
    4. roller_rate    = distance / period                            [m/s]
    5. speed          = roller_rate                                  [km/h]
    6. rpm_wheel      = rotations per minute over period             [rpm]
    7. rpm_engine     = ignition pulses per minute (powertrain rule) [rpm]
    8. angular_rate   = rpm_wheel                                    [rad/s]
    9. torque         = inertia_term * (angular_rate - previous.angular_rate)
                        * gear_ratio                                 [Nm]
   10. horsepower     = torque * rpm_wheel / 9549                    [HP]
   11. temperature    = frame temperature                            [°C]
   12. timestamp      = wall clock at derivation

Fallback Policy:
----------------
No step raises. Division by zero yields inf/nan, and every guarded
field falls back to the previous sample's value for that field only:

    odometer, roller_rate, speed, rpm_wheel,
    rpm_engine, temperature                 -> if_not_normal
    torque, horsepower                      -> if_negative_normal

Engine RPM Rule:
----------------
    Electric                       per_minute(pulse_rpm)
    Engine, four-stroke, N known   per_minute(pulse_rpm * 2 // N)
    Engine, anything else          per_minute(pulse_rpm)

Torque Note:
------------
Step 9 multiplies by the CHANGE in angular rate between consecutive
samples, not by that change divided by the elapsed time. Calibrated
results depend on this form; keep it.
"""

import logging
from datetime import datetime

from units import (
    Celsius,
    HorsePower,
    MetresPerSecond,
    NewtonMetres,
    RotationsPerMinute,
    ieee_div,
)

from .calibration import CalibrationConfig, Electric, Engine, Powertrain, Stroke
from .sample import TelemetrySample

logger = logging.getLogger(__name__)


def engine_rpm(powertrain: Powertrain,
               pulse_rpm: int,
               period_ms: float) -> RotationsPerMinute:
    """
    Crankshaft (or motor shaft) speed from the RPM sensor pulse count.

    Args:
        powertrain: Electric or Engine
        pulse_rpm: RPM sensor ticks counted during the period
        period_ms: Period length [ms]

    Returns:
        Unguarded rotational speed
    """
    if isinstance(powertrain, Electric):
        return RotationsPerMinute.from_rotations(pulse_rpm, period_ms)

    if isinstance(powertrain, Engine):
        cylinders = powertrain.cylinder.count
        if powertrain.stroke is Stroke.FOUR and cylinders:
            return RotationsPerMinute.from_rotations((pulse_rpm * 2) // cylinders, period_ms)
        return RotationsPerMinute.from_rotations(pulse_rpm, period_ms)

    raise TypeError(f"Unsupported powertrain: {powertrain!r}")


def derive(previous: TelemetrySample,
           config: CalibrationConfig,
           frame) -> TelemetrySample:
    """
    Derive the next telemetry sample.

    Args:
        previous: Last sample of the session (``TelemetrySample.zero()``
            for the first frame)
        config: Session calibration
        frame: RawFrame from the hardware

    Returns:
        New TelemetrySample; never raises for numeric anomalies
    """
    period_ms = float(frame.period_ms)

    rotations = ieee_div(frame.pulse_enc, frame.pulse_enc_max)
    distance = config.roller_circumference * rotations

    odometer = (previous.odometer + distance.to_kilometres()).if_not_normal(previous.odometer)

    roller_rate = MetresPerSecond.from_distance(distance, period_ms) \
        .if_not_normal(previous.roller_rate)
    speed = roller_rate.to_kilometres_per_hour().if_not_normal(previous.speed)

    rpm_wheel = RotationsPerMinute.from_rotations(rotations, period_ms) \
        .if_not_normal(previous.rpm_wheel)
    rpm_engine = engine_rpm(config.powertrain, frame.pulse_rpm, period_ms) \
        .if_not_normal(previous.rpm_engine)

    angular_rate = rpm_wheel.to_radians_per_second()

    delta_rate = (angular_rate - previous.angular_rate).value
    torque = NewtonMetres(config.inertia_term * delta_rate * config.gear_ratio) \
        .if_negative_normal(previous.torque)

    horsepower = HorsePower.from_torque(torque, rpm_wheel) \
        .if_negative_normal(previous.horsepower)

    temperature = Celsius(frame.temperature).if_not_normal(previous.temperature)

    return TelemetrySample(
        speed=speed,
        torque=torque,
        horsepower=horsepower,
        temperature=temperature,
        timestamp=datetime.now(),
        rpm_wheel=rpm_wheel,
        rpm_engine=rpm_engine,
        odometer=odometer,
        angular_rate=angular_rate,
        roller_rate=roller_rate,
    )
