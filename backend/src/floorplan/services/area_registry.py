"""Area registry operations: defaults, area lookup and per-area updates."""

import logging
from typing import Iterable, Optional, Sequence

from floorplan.core.errors import UnknownAreaError
from floorplan.models.layout import AreaLayout, AreaRegistry, Table

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = 3
DEFAULT_ROWS = 2


def default_layout() -> AreaLayout:
    """Six empty tables numbered 1-6 on a 3x2 grid, no background."""
    tables = []
    for index in range(DEFAULT_COLUMNS * DEFAULT_ROWS):
        tables.append(
            Table(
                id=index + 1,
                number=index + 1,
                col=index % DEFAULT_COLUMNS,
                row=index // DEFAULT_COLUMNS,
            )
        )
    return AreaLayout(tables=tuple(tables))


def default_registry(area_names: Iterable[str]) -> AreaRegistry:
    return AreaRegistry(areas={name: default_layout() for name in area_names})


def ensure_areas(registry: AreaRegistry, area_names: Sequence[str]) -> AreaRegistry:
    """Return a registry holding exactly ``area_names``, in that order.

    Missing areas get the default layout; names outside the set are dropped.
    """
    if list(registry.areas) == list(area_names):
        return registry

    areas = {}
    for name in area_names:
        layout = registry.areas.get(name)
        if layout is None:
            logger.info(f"Area {name!r} missing from registry, using default layout")
            layout = default_layout()
        areas[name] = layout

    dropped = set(registry.areas) - set(area_names)
    if dropped:
        logger.warning(f"Dropping unknown areas from registry: {sorted(dropped)}")

    return AreaRegistry(areas=areas)


def switch_area(registry: AreaRegistry, name: str) -> str:
    """Validate that ``name`` is a registered area and return it."""
    if name not in registry.areas:
        raise UnknownAreaError(name)
    return name


def replace_layout(registry: AreaRegistry, name: str, layout: AreaLayout) -> AreaRegistry:
    """Copy-on-write of a single area; other areas keep their snapshots."""
    current = registry.areas.get(name)
    if current is None:
        raise UnknownAreaError(name)
    if current is layout:
        return registry
    return registry.model_copy(update={"areas": {**registry.areas, name: layout}})


def set_background(
    registry: AreaRegistry, name: str, encoded_image: Optional[str]
) -> AreaRegistry:
    """Attach (or with ``None`` remove) the background image of one area."""
    layout = registry.areas.get(name)
    if layout is None:
        raise UnknownAreaError(name)
    if layout.background_image == encoded_image:
        return registry
    return replace_layout(
        registry, name, layout.model_copy(update={"background_image": encoded_image})
    )
