from dataclasses import dataclass
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from algorithms.timestamps import to_unix_ms

EntryId = Union[int, str]


class ExerciseEntry(BaseModel):
    """One logged set as returned by the store."""

    model_config = ConfigDict(populate_by_name=True)

    id: EntryId = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    weight: float
    reps: int
    notes: Optional[str] = None
    created_at: int = Field(
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )

    @field_validator("created_at", mode="before")
    @classmethod
    def _normalize_created_at(cls, value):
        return to_unix_ms(value)


class EntryCreate(BaseModel):
    """Request body for creating an entry."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    weight: float = Field(gt=0, allow_inf_nan=False)
    reps: int = Field(gt=0)
    notes: Optional[str] = None
    created_at: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )

    @field_validator("created_at", mode="before")
    @classmethod
    def _normalize_created_at(cls, value):
        return None if value is None else to_unix_ms(value)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class DataPoint:
    """Chart-ready projection of an entry.

    ``label`` is the source entry's identity and is used to fetch the full
    record when the point is clicked. ``display_text`` is only for the
    rendering surface.
    """

    x: int
    y: float
    label: EntryId
    display_text: Optional[str] = None


@dataclass(frozen=True)
class DropdownItem:
    label: str
    value: str
