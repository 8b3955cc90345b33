"""Parsing of facade, object and light rule tables.

Rule tables come from the ``facade_rules``, ``object_rules`` and
``light_rules`` sections of the inventory YAML file. A tag condition is
written either as a mapping (``{building: church}``) or a list of
``"key=value"`` / ``"key"`` strings; a bare key matches any value.

Example::

    object_rules:
      - tags: {man_made: water_tower}
        objects: [objects/water_tower.obj]
        min_area: 20
        random_angle: false
"""

from __future__ import annotations

from typing import Any

from osm_scenery.core.exceptions import InventoryError
from osm_scenery.models.inventory import FacadeRule, LightRule, ObjectRule, TagMatch


def parse_tag_matches(raw: Any, *, section: str) -> tuple[TagMatch, ...]:
    """Parse a tag condition into ``TagMatch`` tuples.

    Raises:
        InventoryError: If the condition is empty or malformed.
    """
    matches: list[TagMatch] = []
    if isinstance(raw, dict):
        for key, value in raw.items():
            matches.append(TagMatch(str(key), None if value in (None, "*") else str(value)))
    elif isinstance(raw, list):
        for item in raw:
            key, sep, value = str(item).partition("=")
            matches.append(TagMatch(key.strip(), value.strip() if sep else None))
    else:
        raise InventoryError(f"{section}: 'tags' must be a mapping or a list, got {raw!r}")
    if not matches or any(not m.key for m in matches):
        raise InventoryError(f"{section}: empty tag condition")
    return tuple(matches)


def _str_tuple(raw: Any, *, section: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if not isinstance(raw, list):
        raise InventoryError(f"{section}: expected a list of paths, got {raw!r}")
    return tuple(str(item) for item in raw)


def parse_facade_rules(raw: list[dict[str, Any]] | None) -> tuple[FacadeRule, ...]:
    rules: list[FacadeRule] = []
    for i, entry in enumerate(raw or []):
        section = f"facade_rules[{i}]"
        if "facade" not in entry:
            raise InventoryError(f"{section}: missing 'facade'")
        rules.append(
            FacadeRule(
                matches=parse_tag_matches(entry.get("tags"), section=section),
                facade=str(entry["facade"]),
            )
        )
    return tuple(rules)


def parse_object_rules(raw: list[dict[str, Any]] | None) -> tuple[ObjectRule, ...]:
    rules: list[ObjectRule] = []
    for i, entry in enumerate(raw or []):
        section = f"object_rules[{i}]"
        objects = _str_tuple(entry.get("objects"), section=section)
        if not objects:
            raise InventoryError(f"{section}: 'objects' must not be empty")
        try:
            min_area = float(entry.get("min_area", 0.0))
            max_area = float(entry.get("max_area", 0.0))
        except (TypeError, ValueError) as exc:
            raise InventoryError(f"{section}: area limits must be numbers") from exc
        rules.append(
            ObjectRule(
                matches=parse_tag_matches(entry.get("tags"), section=section),
                objects=objects,
                min_area_m2=min_area,
                max_area_m2=max_area,
                random_angle=bool(entry.get("random_angle", True)),
            )
        )
    return tuple(rules)


def parse_light_rules(raw: list[dict[str, Any]] | None) -> tuple[LightRule, ...]:
    rules: list[LightRule] = []
    for i, entry in enumerate(raw or []):
        section = f"light_rules[{i}]"
        rules.append(
            LightRule(
                matches=parse_tag_matches(entry.get("tags"), section=section),
                objects=_str_tuple(entry.get("objects"), section=section),
            )
        )
    return tuple(rules)
