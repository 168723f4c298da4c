"""Typed containers for forecast-field samples and downsampled results."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from aurora_field.constants import CELL_LAT_DEG, CELL_LON_DEG

# One entry of the upstream feed: at least three numbers in an order that
# has not been resolved yet.
RawFieldEntry = Sequence[Union[float, int]]


class Hemisphere(Enum):
    NORTH = "Northern"
    SOUTH = "Southern"

    @classmethod
    def of(cls, latitude: float) -> Hemisphere | None:
        """Return the hemisphere containing *latitude* (``None`` on the equator)."""
        if latitude > 0:
            return cls.NORTH
        if latitude < 0:
            return cls.SOUTH
        return None

    @classmethod
    def parse(cls, value: str | Hemisphere) -> Hemisphere:
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in {member.name.lower(), member.value.lower(), member.name.lower()[0]}:
                return member
        raise ValueError(f"Unknown hemisphere {value!r}; expected 'north' or 'south'")


class AuroraIntensity(Enum):
    NONE = "None"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    EXTREME = "Extreme"

    @classmethod
    def from_probability(cls, probability: float) -> AuroraIntensity:
        if probability >= 70:
            return cls.EXTREME
        if probability >= 50:
            return cls.HIGH
        if probability >= 30:
            return cls.MODERATE
        if probability >= 10:
            return cls.LOW
        return cls.NONE

    @property
    def description(self) -> str:
        return _INTENSITY_DESCRIPTIONS[self]


_INTENSITY_DESCRIPTIONS = {
    AuroraIntensity.NONE: "No visible aurora",
    AuroraIntensity.LOW: "Faint aurora possible",
    AuroraIntensity.MODERATE: "Aurora visible",
    AuroraIntensity.HIGH: "Bright aurora likely",
    AuroraIntensity.EXTREME: "Intense aurora storm",
}


@dataclass(frozen=True)
class Sample:
    """One resolved point of the forecast field.

    Equality is by value so that the same physical point read from two
    fetches compares equal.
    """

    longitude: float
    latitude: float
    probability: float

    @property
    def hemisphere(self) -> Hemisphere | None:
        return Hemisphere.of(self.latitude)

    @property
    def intensity(self) -> AuroraIntensity:
        return AuroraIntensity.from_probability(self.probability)

    @property
    def probability_bin(self) -> int:
        """Index of the 10-point probability bin (0 for 0-10 ... 9 for 90-100)."""
        return min(max(int(math.floor(self.probability / 10.0)), 0), 9)


@dataclass(frozen=True)
class AxisOrder:
    latitude_index: int
    longitude_index: int
    ambiguous: bool = False


@dataclass(frozen=True)
class GridSpec:
    """Cell size of the downsampling grid in degrees."""

    lat_deg: float = CELL_LAT_DEG
    lon_deg: float = CELL_LON_DEG


@dataclass(frozen=True)
class DownsampledField:
    northern: tuple[Sample, ...] = ()
    southern: tuple[Sample, ...] = ()
    target_count: int = 0
    min_probability: float = 0.0

    def for_hemisphere(self, hemisphere: Hemisphere) -> tuple[Sample, ...]:
        if hemisphere is Hemisphere.NORTH:
            return self.northern
        return self.southern

    def __len__(self) -> int:
        return len(self.northern) + len(self.southern)
