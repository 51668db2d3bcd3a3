"""Domain models for recorded espresso shots and grinder scales."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import ClassVar

OPTIMAL_MIN_TIME = 25
OPTIMAL_MAX_TIME = 30

MIN_STEP_SIZE = 0.01
MAX_STEP_SIZE = 10.0
MAX_SCALE_VALUE = 1000
MIN_RANGE_SIZE = 3
MAX_RANGE_SIZE = 100

# Float slack when deciding whether a value already sits on a grid point.
GRID_TOLERANCE = 1e-9


class TasteDescriptor(Enum):
    """Closed vocabulary of taste outcomes."""

    SOUR = "SOUR"
    PERFECT = "PERFECT"
    BITTER = "BITTER"
    WEAK = "WEAK"
    STRONG = "STRONG"


@dataclass(frozen=True)
class Shot:
    """A recorded espresso extraction."""

    id: str
    bean_id: str
    coffee_weight_in: float
    coffee_weight_out: float
    extraction_time_seconds: int
    grinder_setting: str
    timestamp: datetime
    taste_primary: TasteDescriptor | None = None
    taste_secondary: TasteDescriptor | None = None
    notes: str = ""

    @property
    def brew_ratio(self) -> float:
        """Output weight over input weight, rounded to two decimals."""
        if self.coffee_weight_in <= 0:
            return 0.0
        return round(self.coffee_weight_out / self.coffee_weight_in, 2)

    def is_optimal_extraction_time(self) -> bool:
        """Return True when the extraction time sits inside the 25-30s window."""
        return OPTIMAL_MIN_TIME <= self.extraction_time_seconds <= OPTIMAL_MAX_TIME


@dataclass(frozen=True)
class GrinderConfiguration:
    """Bounds and granularity of a grinder's adjustment scale."""

    scale_min: int
    scale_max: int
    step_size: float = 0.5
    id: str | None = None
    created_at: datetime | None = field(default=None, compare=False)

    DEFAULT_STEP_SIZE: ClassVar[float] = 0.5

    def validate(self) -> list[str]:
        """Return validation errors; an empty list means the scale is usable."""
        errors: list[str] = []
        if self.scale_min >= self.scale_max:
            errors.append("Minimum scale value must be less than maximum scale value")
        if self.scale_min < 0:
            errors.append("Minimum scale value cannot be negative")
        if self.scale_max > MAX_SCALE_VALUE:
            errors.append(f"Maximum scale value cannot exceed {MAX_SCALE_VALUE}")
        range_size = self.scale_max - self.scale_min
        if range_size < MIN_RANGE_SIZE:
            errors.append(
                f"Scale range must have at least {MIN_RANGE_SIZE} steps "
                f"(current range: {range_size})"
            )
        if range_size > MAX_RANGE_SIZE:
            errors.append(
                f"Scale range cannot exceed {MAX_RANGE_SIZE} steps "
                f"(current range: {range_size})"
            )
        if self.step_size < MIN_STEP_SIZE:
            errors.append(f"Step size must be at least {MIN_STEP_SIZE}")
        elif self.step_size > MAX_STEP_SIZE:
            errors.append(f"Step size cannot exceed {MAX_STEP_SIZE}")
        elif range_size > 0 and self.step_size > range_size:
            errors.append("Step size cannot be larger than the range")
        return errors

    def clamp(self, value: float) -> float:
        """Clamp a value to the scale bounds."""
        return min(max(value, float(self.scale_min)), float(self.scale_max))

    def contains(self, value: float) -> bool:
        """Return True when the value lies within the scale bounds."""
        return self.scale_min <= value <= self.scale_max

    def round_to_nearest_step(self, value: float) -> float:
        """Snap a value onto the step grid anchored at the scale minimum."""
        return self.snap_to_step(value)

    def snap_to_step(self, value: float, direction: int = 0) -> float:
        """Snap a value onto the step grid inside the bounds.

        A negative ``direction`` rounds down to the grid, a positive one rounds
        up, and zero rounds to the nearest step.
        """
        position = (value - self.scale_min) / self.step_size
        if direction < 0:
            index = math.floor(position + GRID_TOLERANCE)
        elif direction > 0:
            index = math.ceil(position - GRID_TOLERANCE)
        else:
            index = round(position)
        last_index = math.floor(
            (self.scale_max - self.scale_min) / self.step_size + GRID_TOLERANCE
        )
        index = min(max(index, 0), last_index)
        return round(self.scale_min + index * self.step_size, self.decimal_places() + 2)

    def valid_grind_values(self) -> list[float]:
        """Return every value on the step grid between the bounds."""
        values: list[float] = []
        index = 0
        while True:
            value = round(self.scale_min + index * self.step_size, 6)
            if value > self.scale_max:
                return values
            values.append(value)
            index += 1

    def decimal_places(self) -> int:
        """Number of decimals needed to display a value on this scale."""
        return step_decimal_places(self.step_size)

    def format_grind_value(self, value: float) -> str:
        """Format a setting with the precision implied by the step size."""
        return format_grind_value(value, self.step_size)


DEFAULT_CONFIGURATION = GrinderConfiguration(scale_min=1, scale_max=10, step_size=0.5)


def step_decimal_places(step_size: float) -> int:
    """Decimals shown for values on a grid of the given step size."""
    exponent = Decimal(str(step_size)).normalize().as_tuple().exponent
    if not isinstance(exponent, int):
        return 0
    return max(-exponent, 0)


def format_grind_value(value: float, step_size: float) -> str:
    """Format a setting half-up with the precision implied by the step size."""
    places = step_decimal_places(step_size)
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:.{places}f}"


def to_local_naive(moment: datetime) -> datetime:
    """Express a timestamp as naive local time so any two can be compared."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def parse_grind_setting(label: str) -> float | None:
    """Return the numeric value of a setting label, or None if it has none."""
    try:
        value = float(label.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
