"""Record types shared by the store, the aggregation engine and the API.

Conditions and logs are pydantic models so request bodies, stored rows and
export documents all go through the same validation. The severity/delta
scales are plain frozen dataclasses; they only hold cut points.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MIN_INTENSITY = 1
MAX_INTENSITY = 10
MAX_LABEL_LEN = 120
MAX_TEXT_LEN = 1000
UNKNOWN_CONDITION_LABEL = "Unknown"


class BodyRegion(str, Enum):
    HEAD = "head"
    NECK = "neck"
    CHEST = "chest"
    STOMACH = "stomach"
    PELVIS = "pelvis"
    LEFT_ARM = "arm-l"
    RIGHT_ARM = "arm-r"
    LEFT_THIGH = "leg-l-upper"
    RIGHT_THIGH = "leg-r-upper"
    LEFT_SHIN = "leg-l-lower"
    RIGHT_SHIN = "leg-r-lower"

    @property
    def label(self) -> str:
        return _REGION_LABELS[self]


_REGION_LABELS = {
    BodyRegion.HEAD: "Head",
    BodyRegion.NECK: "Neck",
    BodyRegion.CHEST: "Chest",
    BodyRegion.STOMACH: "Stomach",
    BodyRegion.PELVIS: "Pelvis",
    BodyRegion.LEFT_ARM: "Left Arm",
    BodyRegion.RIGHT_ARM: "Right Arm",
    BodyRegion.LEFT_THIGH: "Left Thigh",
    BodyRegion.RIGHT_THIGH: "Right Thigh",
    BodyRegion.LEFT_SHIN: "Left Shin",
    BodyRegion.RIGHT_SHIN: "Right Shin",
}


class Condition(BaseModel):
    """A tracked recurring health issue."""

    id: str
    label: str
    location: str = ""
    region: Optional[BodyRegion] = None
    onset_date: Optional[date] = None
    is_archived: bool = False
    seq: int = 0


class Log(BaseModel):
    """One timestamped intensity observation. Timestamps are request-local."""

    id: str
    condition_id: str
    timestamp: datetime
    intensity: int = Field(ge=MIN_INTENSITY, le=MAX_INTENSITY)
    medication: str = ""
    notes: str = ""
    seq: int = 0

    @property
    def day(self) -> date:
        return self.timestamp.date()


def unknown_condition(condition_id: str) -> Condition:
    """Stand-in for a log whose condition reference does not resolve."""
    return Condition(id=condition_id, label=UNKNOWN_CONDITION_LABEL)


# ── Request payloads ──────────────────────────────────────────────────────────

class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class ConditionCreate(_Payload):
    label: str = Field(min_length=1, max_length=MAX_LABEL_LEN)
    location: str = Field("", max_length=MAX_LABEL_LEN)
    region: Optional[BodyRegion] = None
    onset_date: Optional[date] = None


class ConditionPatch(_Payload):
    label: Optional[str] = Field(None, min_length=1, max_length=MAX_LABEL_LEN)
    location: Optional[str] = Field(None, max_length=MAX_LABEL_LEN)
    region: Optional[BodyRegion] = None

    @field_validator("label", "location")
    @classmethod
    def _not_null(cls, value):
        # region may be sent as null to clear it; the text fields may not.
        if value is None:
            raise ValueError("cannot be null")
        return value

    @model_validator(mode="after")
    def _not_empty(self):
        if not self.model_fields_set & {"label", "location", "region"}:
            raise ValueError("No valid fields to update")
        return self


class LogCreate(_Payload):
    """A follow-up log (``condition_id``) or a new diagnosis (``new_condition``)."""

    condition_id: Optional[str] = None
    new_condition: Optional[ConditionCreate] = None
    timestamp: Optional[datetime] = None
    intensity: int = Field(ge=MIN_INTENSITY, le=MAX_INTENSITY)
    medication: str = Field("", max_length=MAX_TEXT_LEN)
    notes: str = Field("", max_length=MAX_TEXT_LEN)

    @field_validator("timestamp")
    @classmethod
    def _naive_local(cls, value):
        # The API speaks request-local wall time; drop any offset the client sent.
        if value is not None and value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def _one_condition_source(self):
        if bool(self.condition_id) == (self.new_condition is not None):
            raise ValueError("Provide either condition_id or new_condition")
        return self


# ── Bucket boundaries ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SeverityScale:
    """Inclusive upper bounds of each severity tier.

    Intensities above ``moderate_max`` are high; when ``high_max`` is set,
    intensities above it form an extra "extreme" tier.
    """

    low_max: int
    moderate_max: int
    high_max: Optional[int] = None

    def __post_init__(self):
        bounds = [self.low_max, self.moderate_max]
        if self.high_max is not None:
            bounds.append(self.high_max)
        if bounds != sorted(set(bounds)) or bounds[0] < MIN_INTENSITY or bounds[-1] >= MAX_INTENSITY:
            raise ValueError(f"Invalid severity scale: {bounds}")


@dataclass(frozen=True)
class DeltaScale:
    change: float = 1
    large_change: float = 3

    def __post_init__(self):
        if not 0 < self.change <= self.large_change:
            raise ValueError(f"Invalid delta scale: {self.change}, {self.large_change}")
