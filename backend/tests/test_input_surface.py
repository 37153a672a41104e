"""Tests for pointer/touch event adaptation and the input surface."""

import pytest
from pydantic import ValidationError

from floorplan.services.input_surface import (
    MOUSE_MOVE,
    TOUCH_END,
    TOUCH_MOVE,
    InputSurface,
    MouseInput,
    TouchInput,
    parse_native,
    to_pointer_event,
)


def test_mouse_event_adapter():
    native = parse_native(MOUSE_MOVE, {"clientX": 12, "clientY": 30.5, "cancelable": False})

    event = to_pointer_event(MOUSE_MOVE, native)

    assert isinstance(native, MouseInput)
    assert (event.client_x, event.client_y) == (12, 30.5)
    event.prevent_default()
    assert event.default_prevented is False


def test_touch_event_adapter_uses_first_touch():
    native = parse_native(
        TOUCH_MOVE,
        {"touches": [{"clientX": 5, "clientY": 6}, {"clientX": 50, "clientY": 60}]},
    )

    event = to_pointer_event(TOUCH_MOVE, native)

    assert isinstance(native, TouchInput)
    assert (event.client_x, event.client_y) == (5, 6)
    event.prevent_default()
    assert event.default_prevented is True


def test_touch_end_without_points():
    event = to_pointer_event(TOUCH_END, TouchInput())
    assert event.has_position is False


def test_touch_end_uses_changed_touches():
    native = parse_native(TOUCH_END, {"changedTouches": [{"clientX": 1, "clientY": 2}]})
    assert to_pointer_event(TOUCH_END, native).has_position


def test_parse_native_rejects_unknown_type():
    with pytest.raises(ValueError, match="Unsupported event type"):
        parse_native("wheel", {})


def test_parse_native_rejects_bad_payload():
    with pytest.raises(ValidationError):
        parse_native(MOUSE_MOVE, {"clientX": "left"})


def test_listening_removes_handlers_on_error():
    """Handlers are unsubscribed even when the scope exits with an exception."""
    surface = InputSurface()
    received = []

    with pytest.raises(RuntimeError):
        with surface.listening([MOUSE_MOVE, TOUCH_MOVE], received.append):
            surface.dispatch(MOUSE_MOVE, MouseInput(clientX=1, clientY=1))
            raise RuntimeError("boom")

    assert surface.listener_count() == 0
    surface.dispatch(MOUSE_MOVE, MouseInput(clientX=2, clientY=2))
    assert len(received) == 1
