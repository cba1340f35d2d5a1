"""
Dyno Units - Typed Quantity Base
================================

Scalar values tagged with a physical unit.

Every concrete unit is a subclass of a domain class (``Length``,
``Mass``, ``Angular``, ``Speed``, ``Torque``, ``Power``,
``Temperature``) and declares two table entries:

    scale  - size of one unit expressed in the domain base unit
    offset - base-unit value of this unit's zero (affine units only)

Conversion between two units of the same domain is a single affine
map computed from the table:

    base   = value * scale_from + offset_from
    result = (base - offset_to) / scale_to

so there are no chained conversions and A -> B -> A is exact up to
floating-point rounding.

Rules:
------
1. Arithmetic (+, -, *, /) is defined between two values of the SAME
   unit type, or between a value and a plain real number. Mixing units
   raises TypeError; convert explicitly with ``to()`` first.
2. Equality is exact. ``fuzzy_eq`` compares within a few ULPs.
3. Division follows IEEE-754: x/0 gives +/-inf or nan instead of raising,
   so the guard combinators below can catch it.
4. ``if_not_normal`` / ``if_negative_normal`` swap invalid results for a
   fallback value (last known good).

Example:
--------
>>> from units import Metres, KiloMetres
>>> d = Metres(1500.0)
>>> d.to(KiloMetres)
KiloMetres(1.5)
>>> (d + 500.0).round_decimal(1)
Metres(2000.0)
"""

import math
import numbers
from functools import total_ordering
from typing import ClassVar, Dict, List, Optional, Type, TypeVar

import numpy as np

Q = TypeVar("Q", bound="Quantity")

DEFAULT_MAX_ULPS = 4


class UnitMismatchError(TypeError):
    """Raised when a value is converted to a unit of another domain."""
    pass


def ieee_div(numerator: float, denominator: float) -> float:
    """
    Divide with IEEE-754 semantics.

    Division by zero yields +/-inf (or nan for 0/0) instead of raising
    ZeroDivisionError.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(numerator), np.float64(denominator)))


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Divide, returning ``default`` when the denominator is zero or not finite.

    Args:
        numerator: Dividend
        denominator: Divisor
        default: Value returned when the division is not safe

    Returns:
        numerator / denominator, or default
    """
    if denominator == 0 or not math.isfinite(denominator):
        return default
    return numerator / denominator


def round_decimal(value: float, digits: int) -> float:
    """
    Truncate ``value`` toward zero at ``digits`` decimal places.

    69.69696969 -> 69.69 (2 digits), not 69.70.
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    factor = 10.0 ** digits
    return math.trunc(value * factor) / factor


def fuzzy_eq(a: float, b: float, max_ulps: int = DEFAULT_MAX_ULPS) -> bool:
    """
    ULP-bounded float comparison.

    Two values are equal when their IEEE-754 bit patterns are at most
    ``max_ulps`` steps apart and they share the same sign.
    """
    if a == b:
        return True
    if math.isnan(a) or math.isnan(b):
        return False
    if math.copysign(1.0, a) != math.copysign(1.0, b):
        return False
    bits_a = int(np.float64(a).view(np.int64))
    bits_b = int(np.float64(b).view(np.int64))
    return abs(bits_a - bits_b) <= max_ulps


@total_ordering
class Quantity:
    """
    Base class for all unit types.

    Concrete units set ``symbol`` (and ``scale``/``offset``); domain
    classes only set ``domain``.
    """

    __slots__ = ("_value",)

    domain: ClassVar[str] = ""
    symbol: ClassVar[str] = ""
    scale: ClassVar[float] = 1.0
    offset: ClassVar[float] = 0.0

    _registry: ClassVar[Dict[str, Dict[str, type]]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.symbol:
            Quantity._registry.setdefault(cls.domain, {})[cls.__name__] = cls

    def __init__(self, value=0.0):
        if not type(self).symbol:
            raise TypeError(f"{type(self).__name__} is a domain, not a unit")
        if isinstance(value, Quantity):
            if type(value) is not type(self):
                raise UnitMismatchError(
                    f"Cannot build {type(self).__name__} from "
                    f"{type(value).__name__}; use .to() to convert"
                )
            value = value._value
        self._value = float(value)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    @classmethod
    def domains(cls) -> List[str]:
        """Names of every registered domain."""
        return sorted(Quantity._registry)

    @classmethod
    def units_of(cls, domain: Optional[str] = None) -> List[type]:
        """All unit types of ``domain`` (defaults to the class's own domain)."""
        domain = domain or cls.domain
        return list(Quantity._registry.get(domain, {}).values())

    @classmethod
    def parse(cls: Type[Q], text: str) -> Q:
        """Parse a plain number string into this unit."""
        return cls(float(text.strip()))

    # ------------------------------------------------------------------
    # Value access & conversion
    # ------------------------------------------------------------------

    @property
    def value(self) -> float:
        return self._value

    def __float__(self) -> float:
        return self._value

    def to(self, unit: Type[Q]) -> Q:
        """
        Convert to another unit of the same domain.

        Args:
            unit: Target unit class

        Returns:
            New value expressed in ``unit``

        Raises:
            UnitMismatchError: If ``unit`` belongs to another domain
        """
        if unit.domain != self.domain or not unit.symbol:
            raise UnitMismatchError(
                f"Cannot convert {type(self).__name__} ({self.domain}) "
                f"to {unit.__name__} ({unit.domain or 'abstract'})"
            )
        if unit is type(self):
            return unit(self._value)
        base = self._value * self.scale + self.offset
        return unit((base - unit.offset) / unit.scale)

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def is_normal(self) -> bool:
        """True when the value is neither NaN nor infinite."""
        return math.isfinite(self._value)

    def is_negative(self) -> bool:
        """True for negative values, -0.0 included."""
        return math.copysign(1.0, self._value) < 0

    def if_not_normal(self: Q, default: Q) -> Q:
        """Return ``default`` when this value is NaN or infinite."""
        if not math.isfinite(self._value):
            return default
        return self

    def if_negative_normal(self: Q, default: Q) -> Q:
        """Return ``default`` when this value is negative, NaN or infinite."""
        if not math.isfinite(self._value) or self.is_negative():
            return default
        return self

    # ------------------------------------------------------------------
    # Numeric helpers
    # ------------------------------------------------------------------

    def round_decimal(self: Q, digits: int) -> Q:
        """Truncate toward zero at ``digits`` decimal places."""
        return type(self)(round_decimal(self._value, digits))

    def fuzzy_eq(self, other: "Quantity", max_ulps: int = DEFAULT_MAX_ULPS) -> bool:
        """ULP-bounded equality with another value of the same unit."""
        if type(other) is not type(self):
            return False
        return fuzzy_eq(self._value, other._value, max_ulps)

    def safe_div(self, rhs: float, default: float = 0.0) -> float:
        """Plain float division guarded against zero/non-finite divisors."""
        return safe_div(self._value, rhs, default)

    def min(self: Q, other: Q) -> Q:
        return type(self)(min(self._value, self._coerce_strict(other)))

    def max(self: Q, other: Q) -> Q:
        return type(self)(max(self._value, self._coerce_strict(other)))

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _coerce(self, other) -> Optional[float]:
        if type(other) is type(self):
            return other._value
        if isinstance(other, Quantity):
            return None
        if isinstance(other, numbers.Real):
            return float(other)
        return None

    def _coerce_strict(self, other) -> float:
        rhs = self._coerce(other)
        if rhs is None:
            raise TypeError(
                f"unsupported operand types: {type(self).__name__} "
                f"and {type(other).__name__}"
            )
        return rhs

    def __add__(self, other):
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self._value + rhs)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self._value - rhs)

    def __rsub__(self, other):
        lhs = self._coerce(other)
        if lhs is None:
            return NotImplemented
        return type(self)(lhs - self._value)

    def __mul__(self, other):
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self._value * rhs)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(ieee_div(self._value, rhs))

    def __rtruediv__(self, other):
        lhs = self._coerce(other)
        if lhs is None:
            return NotImplemented
        return type(self)(ieee_div(lhs, self._value))

    def __neg__(self):
        return type(self)(-self._value)

    def __abs__(self):
        return type(self)(abs(self._value))

    # ------------------------------------------------------------------
    # Comparison & formatting
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value < other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __format__(self, format_spec: str) -> str:
        return format(self._value, format_spec or ".2f")

    def __str__(self) -> str:
        return format(self)

    def label(self, digits: int = 2) -> str:
        """Value with its unit symbol, e.g. ``'93.81 km/h'``."""
        return f"{self._value:.{digits}f} {self.symbol}"
