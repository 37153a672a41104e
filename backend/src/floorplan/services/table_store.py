"""Table operations on a single area layout.

Every function takes a layout snapshot and returns a new one, or the same
object when nothing changed. A table id that is not present is a silent
no-op.
"""

import logging
import re
from typing import Callable, Optional

from floorplan.core.errors import InvalidNumberInput
from floorplan.models.layout import AreaLayout, Table

logger = logging.getLogger(__name__)

# plain ASCII digits, optional sign
_NUMBER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


def find_table(layout: AreaLayout, table_id: int) -> Optional[Table]:
    for table in layout.tables:
        if table.id == table_id:
            return table
    return None


def _update_table(
    layout: AreaLayout, table_id: int, update: Callable[[Table], Table]
) -> AreaLayout:
    changed = False
    tables = []
    for table in layout.tables:
        if table.id == table_id:
            updated = update(table)
            changed = changed or updated is not table
            tables.append(updated)
        else:
            tables.append(table)

    if not changed:
        if find_table(layout, table_id) is None:
            logger.debug(f"Table {table_id} not found, ignoring update")
        return layout
    return layout.model_copy(update={"tables": tuple(tables)})


def cycle_status(layout: AreaLayout, table_id: int) -> AreaLayout:
    """Advance the table's status to the next one in the cycle."""
    return _update_table(
        layout, table_id, lambda t: t.model_copy(update={"status": t.status.next()})
    )


def set_server(layout: AreaLayout, table_id: int, name: str) -> AreaLayout:
    """Assign a server; an empty string unassigns."""

    def update(table: Table) -> Table:
        if table.server == name:
            return table
        return table.model_copy(update={"server": name})

    return _update_table(layout, table_id, update)


def parse_table_number(text: str) -> int:
    """Parse a table number entry.

    Raises:
        InvalidNumberInput: If the text is not a whole positive integer.
    """
    if not isinstance(text, str) or not _NUMBER_PATTERN.fullmatch(text.strip()):
        raise InvalidNumberInput(text)
    number = int(text.strip())
    if number <= 0:
        raise InvalidNumberInput(text)
    return number


def set_number(layout: AreaLayout, table_id: int, number_text: str) -> AreaLayout:
    """Set the table number from user text; invalid text leaves the layout as is."""
    try:
        number = parse_table_number(number_text)
    except InvalidNumberInput as e:
        logger.info(f"Discarding number edit for table {table_id}: {e}")
        return layout

    def update(table: Table) -> Table:
        if table.number == number:
            return table
        return table.model_copy(update={"number": number})

    return _update_table(layout, table_id, update)


def move_table(layout: AreaLayout, table_id: int, col: int, row: int) -> AreaLayout:
    """Place the table on ``(col, row)``; coordinates must already be clamped."""
    if col < 0 or row < 0:
        raise ValueError(f"Grid position must be non-negative, got ({col}, {row})")

    def update(table: Table) -> Table:
        if table.cell == (col, row):
            return table
        return table.model_copy(update={"col": col, "row": row})

    return _update_table(layout, table_id, update)
