"""
Domain models for the CRUD benchmark.

Defines the near-earth-object record loaded from the dataset (aligned with the
`nearest_objects` table), the operation kinds that get timed, and the timing
result produced for every (operation, batch size) pair.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Dict, Iterator, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, Field

# Table column order; `Record.as_row()` follows it.
COLUMNS: Tuple[str, ...] = (
    "id",
    "name",
    "est_diameter_min",
    "est_diameter_max",
    "relative_velocity",
    "miss_distance",
    "orbiting_body",
    "sentry_object",
    "absolute_magnitude",
    "hazardous",
)


class Record(BaseModel):
    """
    Representation of a single row of the dataset / `nearest_objects` table.

    Field names follow the benchmark schema; the dataset's own column names
    (`est_diameter_min`, `sentry_object`, ...) are accepted as aliases.
    """

    id: int = Field(..., description="Object identifier.")
    name: str = Field(..., description="Object designation.")
    min_diameter: float = Field(
        ...,
        validation_alias=AliasChoices("min_diameter", "est_diameter_min"),
        description="Estimated minimum diameter (km).",
    )
    max_diameter: float = Field(
        ...,
        validation_alias=AliasChoices("max_diameter", "est_diameter_max"),
        description="Estimated maximum diameter (km).",
    )
    relative_velocity: float = Field(..., description="Velocity relative to earth.")
    miss_distance: float = Field(..., description="Distance missed in km.")
    orbiting_body: str = Field(..., description="Planet the object orbits.")
    is_sentry_object: bool = Field(
        ...,
        validation_alias=AliasChoices("is_sentry_object", "sentry_object"),
        description="Included in the automated collision monitoring system.",
    )
    absolute_magnitude: float = Field(..., description="Intrinsic luminosity.")
    is_hazardous: bool = Field(
        ...,
        validation_alias=AliasChoices("is_hazardous", "hazardous"),
        description="Whether the object is potentially harmful.",
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def as_row(self) -> Tuple[Any, ...]:
        """Insert parameters in `COLUMNS` order."""
        return (
            self.id,
            self.name,
            self.min_diameter,
            self.max_diameter,
            self.relative_velocity,
            self.miss_distance,
            self.orbiting_body,
            self.is_sentry_object,
            self.absolute_magnitude,
            self.is_hazardous,
        )


class Operation(str, enum.Enum):
    """Timed operation kinds; the value doubles as the metric label."""

    INSERT = "insert"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class OperationTiming:
    """Elapsed time of one operation over one batch."""

    iteration: int
    operation: Operation
    elements: int
    duration_seconds: float
    samples: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iteration": self.iteration,
            "operation": self.operation.value,
            "elements": self.elements,
            "duration_seconds": self.duration_seconds,
            "samples": self.samples,
            "extra": dict(self.extra),
        }


def batch_sizes(total: int) -> Tuple[int, int, int]:
    """
    Return the three workload sizes for a dataset of `total` records:
    33%, 66% and 100% (the first two rounded down to whole thirds).
    """
    if total < 0:
        raise ValueError(f"total must be non-negative, got {total}")
    third = total // 3
    return third, third * 2, total


def batch(records: Sequence[Record], size: int) -> Iterator[Record]:
    """Iterate over the first `size` records without copying the sequence."""
    return islice(records, size)


__all__ = [
    "COLUMNS",
    "Operation",
    "OperationTiming",
    "Record",
    "batch",
    "batch_sizes",
]
