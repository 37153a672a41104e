"""Editor state: which popup, if any, is open and for which table."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class EditorClosed(BaseModel):
    """No editor is open."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["closed"] = "closed"


class ServiceEditor(BaseModel):
    """Server name and status editor, available outside edit mode."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["service"] = "service"
    table_id: int
    draft_server: str = ""


class NumberEditor(BaseModel):
    """Table number editor, available in edit mode."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    table_id: int
    draft_number: str = ""


EditorState = Annotated[
    Union[EditorClosed, ServiceEditor, NumberEditor],
    Field(discriminator="kind"),
]

CLOSED = EditorClosed()
