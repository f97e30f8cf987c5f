# backend/unit_conversion_engine.py

"""
Unit Conversion Engine

This engine is responsible for:
- The closed set of supported unit kinds (distance, velocity, time)
- Quantity validation at construction time
- The static conversion factor table
- Compatibility checks and factor lookup
- Converting a source quantity into a destination unit
- Building units from a kind known only at runtime

This engine MUST NOT:
- Parse units from free text
- Synthesize transitive or identity conversions
- Mutate the source unit of a conversion
- Change the kind of a unit after construction

GLOBAL INVARIANTS (ENFORCED):
1) An explicit quantity is finite and strictly greater than zero
2) A unit built without a quantity is a destination placeholder (0.0)
3) Every compatible pair has an explicit factor table entry
4) Table entries only join kinds of the same dimension
5) The factor table is read-only after import
6) A failed conversion leaves the destination untouched
"""

from enum import Enum
from types import MappingProxyType
from typing import Optional, List, Dict, Set, Any, Tuple, Callable, Mapping, Union
import math
from pydantic import BaseModel, Field, field_validator
import logging

logger = logging.getLogger(__name__)

# ==================== ENUMS ====================

class UnitKind(str, Enum):
    """Supported unit kinds"""
    METER = "Meter"
    KILOMETER = "Kilometer"
    METERS_PER_SECOND = "MetersPerSecond"
    KILOMETERS_PER_HOUR = "KilometersPerHour"
    SECOND = "Second"
    HOUR = "Hour"


class Dimension(str, Enum):
    """Physical dimension measured by a unit kind"""
    DISTANCE = "DISTANCE"
    VELOCITY = "VELOCITY"
    TIME = "TIME"


# Distance units
DISTANCE_UNITS = {UnitKind.METER, UnitKind.KILOMETER}

# Velocity units
VELOCITY_UNITS = {UnitKind.METERS_PER_SECOND, UnitKind.KILOMETERS_PER_HOUR}

# Time units
TIME_UNITS = {UnitKind.SECOND, UnitKind.HOUR}

UNIT_DIMENSIONS: Dict[Dimension, Set[UnitKind]] = {
    Dimension.DISTANCE: DISTANCE_UNITS,
    Dimension.VELOCITY: VELOCITY_UNITS,
    Dimension.TIME: TIME_UNITS,
}


def dimension_of(kind: UnitKind) -> Dimension:
    """Return the dimension a unit kind belongs to."""
    for dimension, kinds in UNIT_DIMENSIONS.items():
        if kind in kinds:
            return dimension
    raise UnknownUnitKindError(kind)


# ==================== CONVERSION TABLE ====================

# destination_qty = source_qty * factor
# Both directions are listed explicitly; nothing is derived.
CONVERSION_FACTORS: Mapping[Tuple[UnitKind, UnitKind], float] = MappingProxyType({
    (UnitKind.METER, UnitKind.KILOMETER): 1.0 / 1000.0,
    (UnitKind.KILOMETER, UnitKind.METER): 1000.0,
    (UnitKind.METERS_PER_SECOND, UnitKind.KILOMETERS_PER_HOUR): 3.6,
    (UnitKind.KILOMETERS_PER_HOUR, UnitKind.METERS_PER_SECOND): 1.0 / 3.6,
    (UnitKind.SECOND, UnitKind.HOUR): 1.0 / 3600.0,
    (UnitKind.HOUR, UnitKind.SECOND): 3600.0,
})

# Rendering rule for quantities: 15 significant digits, '.' separator,
# no trailing zeros. Never locale dependent.
QUANTITY_FORMAT = ".15g"

# ==================== ERROR CLASSES ====================

class ConversionError(Exception):
    """Base conversion error"""
    def __init__(self, error_code: str, message: str, field: Optional[str] = None, severity: str = "HARD_ERROR"):
        self.error_code = error_code
        self.message = message
        self.field = field
        self.severity = severity
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "field": self.field,
            "severity": self.severity
        }


class InvalidUnitValueError(ConversionError):
    """Quantity is NaN, infinite, zero or negative"""
    def __init__(self, quantity: Any):
        self.quantity = quantity
        super().__init__(
            "INVALID_UNIT_VALUE",
            "Invalid unit value. Value must be greater than 0 and not NaN or Infinity.",
            field="quantity",
            severity="HARD_ERROR"
        )


class IncompatibleUnitsError(ConversionError):
    """Conversion not supported"""
    def __init__(self, from_kind: UnitKind, to_kind: UnitKind):
        self.from_kind = from_kind
        self.to_kind = to_kind
        super().__init__(
            "INCOMPATIBLE_UNITS",
            f"Conversion between these units is not allowed: "
            f"'{from_kind.value}' ({dimension_of(from_kind).value}) to "
            f"'{to_kind.value}' ({dimension_of(to_kind).value}).",
            field="kind",
            severity="HARD_ERROR"
        )


class UnknownConversionError(ConversionError):
    """Factor requested for a pair with no table entry"""
    def __init__(self, from_kind: Any, to_kind: Any):
        self.from_kind = from_kind
        self.to_kind = to_kind
        super().__init__(
            "UNKNOWN_CONVERSION",
            f"No conversion factor defined from '{_kind_name(from_kind)}' to '{_kind_name(to_kind)}'. "
            f"Check is_compatible() before requesting a factor.",
            field="kind",
            severity="HARD_ERROR"
        )


class UnknownUnitKindError(ConversionError):
    """Unit kind has no registered constructor"""
    def __init__(self, kind: Any):
        self.kind = kind
        allowed_kinds = [k.value for k in UnitKind]
        super().__init__(
            "UNKNOWN_UNIT_KIND",
            f"Unit kind '{_kind_name(kind)}' is not recognized. Allowed kinds: {', '.join(allowed_kinds)}",
            field="kind",
            severity="HARD_ERROR"
        )


def _kind_name(kind: Any) -> str:
    return kind.value if isinstance(kind, UnitKind) else str(kind)


# ==================== DATA MODELS ====================

class UnitValue(BaseModel):
    """
    A quantity measured in one unit kind.

    Built with an explicit quantity, the quantity is validated. Built from
    the kind alone, it is a destination placeholder (quantity 0.0) waiting
    for convert() to fill it in.
    """
    kind: UnitKind = Field(frozen=True)
    quantity: float = 0.0

    @field_validator("quantity", mode="before")
    @classmethod
    def validate_quantity_type(cls, value: Any) -> Any:
        # Only real numbers; no string or bool coercion
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidUnitValueError(value)
        return value

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, value: float) -> float:
        # Raised as-is; pydantic only wraps ValueError/AssertionError
        if math.isnan(value) or math.isinf(value) or value <= 0:
            raise InvalidUnitValueError(value)
        return value

    def __str__(self) -> str:
        return f"{format(self.quantity, QUANTITY_FORMAT)} {self.kind.value}"


# ==================== UNIT CONSTRUCTORS ====================

def _build_unit(kind: UnitKind, quantity: Optional[float]) -> UnitValue:
    if quantity is None:
        return UnitValue(kind=kind)
    return UnitValue(kind=kind, quantity=quantity)


def meter(quantity: Optional[float] = None) -> UnitValue:
    return _build_unit(UnitKind.METER, quantity)


def kilometer(quantity: Optional[float] = None) -> UnitValue:
    return _build_unit(UnitKind.KILOMETER, quantity)


def meters_per_second(quantity: Optional[float] = None) -> UnitValue:
    return _build_unit(UnitKind.METERS_PER_SECOND, quantity)


def kilometers_per_hour(quantity: Optional[float] = None) -> UnitValue:
    return _build_unit(UnitKind.KILOMETERS_PER_HOUR, quantity)


def second(quantity: Optional[float] = None) -> UnitValue:
    return _build_unit(UnitKind.SECOND, quantity)


def hour(quantity: Optional[float] = None) -> UnitValue:
    return _build_unit(UnitKind.HOUR, quantity)


UNIT_CONSTRUCTORS: Mapping[UnitKind, Callable[[Optional[float]], UnitValue]] = MappingProxyType({
    UnitKind.METER: meter,
    UnitKind.KILOMETER: kilometer,
    UnitKind.METERS_PER_SECOND: meters_per_second,
    UnitKind.KILOMETERS_PER_HOUR: kilometers_per_hour,
    UnitKind.SECOND: second,
    UnitKind.HOUR: hour,
})

# ==================== UNIT CONVERSION ENGINE ====================

class UnitConversionEngine:
    """
    Stateless unit conversion engine.

    Conversions follow strict rules:
    - Only pairs with an explicit table entry are compatible
    - Same-kind conversions are NOT compatible (no identity entries)
    - Incompatible requests fail before anything is mutated
    """

    def __init__(self, conversion_factors: Optional[Mapping[Tuple[UnitKind, UnitKind], float]] = None):
        """
        Initialize engine.

        Args:
            conversion_factors: Factor table to use (defaults to CONVERSION_FACTORS)
        """
        self.conversion_factors = conversion_factors if conversion_factors is not None else CONVERSION_FACTORS
        self.version = "1.0.0"

    def is_compatible(self, from_kind: UnitKind, to_kind: UnitKind) -> bool:
        """True iff the ordered pair has a table entry."""
        return (from_kind, to_kind) in self.conversion_factors

    def get_conversion_factor(self, from_kind: UnitKind, to_kind: UnitKind) -> float:
        """
        Get the multiplicative factor for an ordered pair.

        Raises:
            UnknownConversionError: If the pair has no table entry
        """
        try:
            return self.conversion_factors[(from_kind, to_kind)]
        except KeyError:
            raise UnknownConversionError(from_kind, to_kind)

    def supported_conversions(self) -> List[Tuple[UnitKind, UnitKind]]:
        return list(self.conversion_factors.keys())

    def convert(self, source: UnitValue, destination: UnitValue) -> None:
        """
        Convert source into destination, writing destination.quantity.

        The source is never mutated and the destination kind never changes.

        Args:
            source: Unit carrying the quantity to convert
            destination: Unit receiving the converted quantity

        Raises:
            IncompatibleUnitsError: If the kinds have no table entry
                (destination is left untouched)
            InvalidUnitValueError: If the result overflows to infinity or
                underflows to zero (destination is left untouched)
        """
        if not self.is_compatible(source.kind, destination.kind):
            raise IncompatibleUnitsError(source.kind, destination.kind)

        conversion_factor = self.get_conversion_factor(source.kind, destination.kind)
        converted_quantity = source.quantity * conversion_factor
        if math.isinf(converted_quantity) or converted_quantity <= 0:
            raise InvalidUnitValueError(converted_quantity)

        destination.quantity = converted_quantity

        logger.debug(
            f"Converted {source} to {destination} (factor {conversion_factor})"
        )

    def create_unit(self, kind: Union[UnitKind, str], quantity: float) -> UnitValue:
        """
        Build a unit for a kind known only at runtime.

        Args:
            kind: UnitKind or its exact value (e.g. "Meter")
            quantity: Explicit quantity, validated like any other

        Returns:
            New UnitValue

        Raises:
            UnknownUnitKindError: If the kind has no registered constructor
            InvalidUnitValueError: If the quantity is not a positive finite number
        """
        try:
            unit_kind = UnitKind(kind)
        except ValueError:
            raise UnknownUnitKindError(kind)

        constructor = UNIT_CONSTRUCTORS.get(unit_kind)
        if constructor is None:
            raise UnknownUnitKindError(unit_kind)

        # The factory never hands out placeholders
        if quantity is None:
            raise InvalidUnitValueError(quantity)

        return constructor(quantity)


# ==================== MODULE-LEVEL API ====================

default_engine = UnitConversionEngine()


def is_compatible(from_kind: UnitKind, to_kind: UnitKind) -> bool:
    return default_engine.is_compatible(from_kind, to_kind)


def get_conversion_factor(from_kind: UnitKind, to_kind: UnitKind) -> float:
    return default_engine.get_conversion_factor(from_kind, to_kind)


def supported_conversions() -> List[Tuple[UnitKind, UnitKind]]:
    return default_engine.supported_conversions()


def convert(source: UnitValue, destination: UnitValue) -> None:
    default_engine.convert(source, destination)


def create_unit(kind: Union[UnitKind, str], quantity: float) -> UnitValue:
    return default_engine.create_unit(kind, quantity)
