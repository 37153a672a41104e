"""Exceptions raised by the floor plan core.

None of these are fatal: each failure path ends in "no mutation occurred".
"""


class FloorPlanError(Exception):
    """Base class for floor plan errors."""


class MalformedPersistedState(FloorPlanError):
    """The durable slot holds data that cannot be decoded into a registry."""


class InvalidNumberInput(FloorPlanError, ValueError):
    """A table number entry is not a positive integer."""

    def __init__(self, text: str):
        super().__init__(f"Invalid table number: {text!r}")
        self.text = text


class UnknownEntityReference(FloorPlanError, LookupError):
    """An operation targets a table id that is not in the active area."""

    def __init__(self, table_id: int, area: str):
        super().__init__(f"Table {table_id} not found in area {area!r}")
        self.table_id = table_id
        self.area = area


class UnknownAreaError(FloorPlanError, LookupError):
    """An area name outside the configured set."""

    def __init__(self, name: str):
        super().__init__(f"Unknown area: {name!r}")
        self.name = name


class ImageDecodeFailure(FloorPlanError):
    """An uploaded background blob could not be decoded as an image."""
