"""Layout models for tables, areas and the area registry.

All models are frozen: every edit produces a new snapshot via ``model_copy``
so callers can detect "did anything change" by identity.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TableStatus(str, Enum):
    """Service state of a table, in cycling order."""

    EMPTY = "empty"
    SAT = "sat"
    FOOD = "food"
    TOUCHED = "touched"

    def next(self) -> "TableStatus":
        """Return the following status, wrapping back to ``EMPTY``."""
        order = list(TableStatus)
        return order[(order.index(self) + 1) % len(order)]


class Table(BaseModel):
    """A numbered table placed on a grid cell."""

    model_config = ConfigDict(frozen=True)

    id: int
    number: int = Field(gt=0)
    server: str = ""  # empty means unassigned
    status: TableStatus = TableStatus.EMPTY
    col: int = Field(ge=0)
    row: int = Field(ge=0)

    @property
    def cell(self) -> Tuple[int, int]:
        return self.col, self.row


class AreaLayout(BaseModel):
    """Tables and background image of one physical area."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tables: Tuple[Table, ...] = ()
    background_image: Optional[str] = Field(default=None, alias="backgroundImage")

    @field_validator("tables")
    @classmethod
    def _unique_ids(cls, tables: Tuple[Table, ...]) -> Tuple[Table, ...]:
        ids = [table.id for table in tables]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate table ids in layout: {ids}")
        return tables

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class AreaRegistry(BaseModel):
    """Mapping from area name to its layout; the unit of persistence."""

    model_config = ConfigDict(frozen=True)

    areas: Dict[str, AreaLayout]

    @property
    def names(self) -> List[str]:
        return list(self.areas)

    def layout(self, name: str) -> AreaLayout:
        return self.areas[name]

    def to_storage(self) -> Dict[str, Any]:
        """Serialize to the wire shape ``{area: {tables, backgroundImage}}``."""
        return {name: layout.to_storage() for name, layout in self.areas.items()}

    @classmethod
    def from_storage(cls, data: Mapping[str, Any]) -> "AreaRegistry":
        """Validate the wire shape produced by :meth:`to_storage`."""
        return cls(areas={name: AreaLayout.model_validate(value) for name, value in data.items()})
