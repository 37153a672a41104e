"""Pointer and touch input unified behind a single event shape.

Native mouse and touch events are adapted into :class:`PointerEvent` and
dispatched to listeners registered on an :class:`InputSurface`, the global
surface that drag handlers subscribe to for the lifetime of a gesture.
"""

import logging
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

MOUSE_DOWN = "mousedown"
MOUSE_MOVE = "mousemove"
MOUSE_UP = "mouseup"
TOUCH_START = "touchstart"
TOUCH_MOVE = "touchmove"
TOUCH_END = "touchend"

PRESS_EVENTS = (MOUSE_DOWN, TOUCH_START)
MOVE_EVENTS = (MOUSE_MOVE, TOUCH_MOVE)
RELEASE_EVENTS = (MOUSE_UP, TOUCH_END)
EVENT_TYPES = PRESS_EVENTS + MOVE_EVENTS + RELEASE_EVENTS


class MouseInput(BaseModel):
    """Native mouse event payload."""

    model_config = ConfigDict(populate_by_name=True)

    client_x: float = Field(alias="clientX")
    client_y: float = Field(alias="clientY")
    cancelable: bool = True


class TouchPoint(BaseModel):
    """One finger of a touch event."""

    model_config = ConfigDict(populate_by_name=True)

    client_x: float = Field(alias="clientX")
    client_y: float = Field(alias="clientY")


class TouchInput(BaseModel):
    """Native touch event payload."""

    model_config = ConfigDict(populate_by_name=True)

    touches: List[TouchPoint] = Field(default_factory=list)
    changed_touches: List[TouchPoint] = Field(default_factory=list, alias="changedTouches")
    cancelable: bool = True


NativeInput = Union[MouseInput, TouchInput]


class PointerEvent(BaseModel):
    """Source-independent pointer event.

    ``client_x``/``client_y`` are ``None`` for a touch release that carries no
    touch points; release handlers never read them.
    """

    event_type: str
    client_x: Optional[float] = None
    client_y: Optional[float] = None
    cancelable: bool = True
    default_prevented: bool = False

    @property
    def has_position(self) -> bool:
        return self.client_x is not None and self.client_y is not None

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True


def from_mouse(event_type: str, native: MouseInput) -> PointerEvent:
    return PointerEvent(
        event_type=event_type,
        client_x=native.client_x,
        client_y=native.client_y,
        cancelable=native.cancelable,
    )


def from_touch(event_type: str, native: TouchInput) -> PointerEvent:
    # touchend reports the lifted finger only in changedTouches
    points = native.touches or native.changed_touches
    point = points[0] if points else None
    return PointerEvent(
        event_type=event_type,
        client_x=point.client_x if point else None,
        client_y=point.client_y if point else None,
        cancelable=native.cancelable,
    )


def parse_native(event_type: str, payload: Mapping[str, Any]) -> NativeInput:
    """Validate a raw event payload into the native model for its source."""
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unsupported event type: {event_type}")
    if event_type.startswith("touch"):
        return TouchInput.model_validate(payload)
    return MouseInput.model_validate(payload)


def to_pointer_event(event_type: str, native: NativeInput) -> PointerEvent:
    if isinstance(native, TouchInput):
        return from_touch(event_type, native)
    return from_mouse(event_type, native)


Handler = Callable[[PointerEvent], None]


class InputSurface:
    """Global input surface holding listeners per event type."""

    def __init__(self):
        self._listeners: Dict[str, List[Handler]] = defaultdict(list)

    def add_listener(self, event_type: str, handler: Handler) -> None:
        self._listeners[event_type].append(handler)

    def remove_listener(self, event_type: str, handler: Handler) -> None:
        listeners = self._listeners.get(event_type, [])
        if handler in listeners:
            listeners.remove(handler)

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(handlers) for handlers in self._listeners.values())

    @contextmanager
    def listening(self, event_types, handler: Handler) -> Iterator[None]:
        """Subscribe ``handler`` to ``event_types`` until the block exits."""
        for event_type in event_types:
            self.add_listener(event_type, handler)
        try:
            yield
        finally:
            for event_type in event_types:
                self.remove_listener(event_type, handler)

    def dispatch(self, event_type: str, native: NativeInput) -> PointerEvent:
        """Adapt ``native`` and deliver it to every current listener."""
        event = to_pointer_event(event_type, native)
        # handlers may unsubscribe while running
        for handler in list(self._listeners.get(event_type, [])):
            handler(event)
        logger.debug(f"Dispatched {event_type} to {self.listener_count(event_type)} listener(s)")
        return event
