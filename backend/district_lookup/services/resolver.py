"""District identifier extraction from boundary feature attributes.

Boundary files come from different providers and schema vintages, so the
district number is not always stored under the same key. Resolution follows
a fixed, ordered precedence policy; each rule is tagged so the diagnostic
payload can report which one produced the identifier:

1. ``direct``: known numeric fields, chamber-specific first (e.g. the
   Census ``SLDLST``/``SLDUST`` codes), then generic district fields.
2. ``name``: name-like fields holding text such as
   ``"State House District 114"`` or a bare number.
3. ``heuristic``: any key whose name mentions a district, in key order.

``OBJECTID`` is an internal row identifier and is never treated as a
district number.

Example:
    Resolve a TIGER/Line house feature:
        >>> from district_lookup.services import resolver
        >>> resolver.resolve_district_id(
        ...     {"NAMELSAD": "State House District 114"}, "house"
        ... )
        114

        >>> resolver.explain({"SomeDistrictCode": "87"}, "senate")
        Resolution(district=87, rule='heuristic', key='SomeDistrictCode')
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from district_lookup.boundaries import models

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    Rule = Callable[
        [Mapping[str, models.Scalar], str], tuple[models.DistrictId, str] | None
    ]

EXCLUDED_KEYS = frozenset({"OBJECTID"})

CHAMBER_FIELDS: dict[str, tuple[str, ...]] = {
    "house": ("SLDLST", "HD"),
    "senate": ("SLDUST", "SD"),
    "sboe": ("SBOE", "SBOE_DIST"),
}
GENERIC_FIELDS = ("DIST_NBR", "DISTRICT", "district", "District")
NAME_FIELDS = ("NAMELSAD", "NAME", "name")

CHAMBER_KEY_HINTS: dict[str, str] = {
    "house": "sldl",
    "senate": "sldu",
    "sboe": "sboe",
}
KEY_HINTS = ("district", "dist")

_DISTRICT_PATTERN = re.compile(r"district\s+(\d+)", re.IGNORECASE)


def to_number(value: models.Scalar) -> float | None:
    """Parse an attribute value as a finite number.

    Numbers pass through; strings are stripped and parsed. Booleans, None,
    blank strings, non-finite values and integers too large for a float
    yield None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except (OverflowError, ValueError):
            return None
    else:
        return None

    return number if math.isfinite(number) else None


def _direct_fields(chamber: str) -> tuple[str, ...]:
    return CHAMBER_FIELDS.get(chamber, ()) + GENERIC_FIELDS


def _direct(
    attributes: Mapping[str, models.Scalar], chamber: str
) -> tuple[models.DistrictId, str] | None:
    for key in _direct_fields(chamber):
        if key in EXCLUDED_KEYS:
            continue
        number = to_number(attributes.get(key))
        if number is not None:
            return int(number), key
    return None


def _name(
    attributes: Mapping[str, models.Scalar], chamber: str
) -> tuple[models.DistrictId, str] | None:
    for key in NAME_FIELDS:
        value = attributes.get(key)
        if isinstance(value, str):
            match = _DISTRICT_PATTERN.search(value)
            if match:
                return int(match.group(1)), key
        number = to_number(value)
        if number is not None:
            return int(number), key
    return None


def _heuristic(
    attributes: Mapping[str, models.Scalar], chamber: str
) -> tuple[models.DistrictId, str] | None:
    hints = KEY_HINTS + tuple(
        hint for hint in (CHAMBER_KEY_HINTS.get(chamber),) if hint
    )
    for key, value in attributes.items():
        if key in EXCLUDED_KEYS:
            continue
        lowered = key.lower()
        if not any(hint in lowered for hint in hints):
            continue
        number = to_number(value)
        if number is not None and number.is_integer():
            return int(number), key
    return None


PRECEDENCE: tuple[tuple[str, Rule], ...] = (
    ("direct", _direct),
    ("name", _name),
    ("heuristic", _heuristic),
)


def explain(
    attributes: Mapping[str, models.Scalar] | None,
    chamber: str,
) -> models.Resolution:
    """Apply the precedence policy and report which rule matched.

    Args:
        attributes: Properties of the matched boundary feature.
        chamber: Chamber of the layer the feature belongs to; selects the
            chamber-specific fields and key hints.

    Returns:
        Resolution with the district, rule tag, and source key, or an empty
        Resolution when no rule yields an identifier.
    """
    if not attributes:
        return models.Resolution()

    for tag, rule in PRECEDENCE:
        found = rule(attributes, chamber)
        if found is not None:
            district, key = found
            return models.Resolution(district=district, rule=tag, key=key)

    return models.Resolution()


def resolve_district_id(
    attributes: Mapping[str, models.Scalar] | None,
    chamber: str,
) -> models.DistrictId | None:
    """Extract the district identifier from a feature's attributes.

    Returns:
        The district identifier, or None when the boundary matched but no
        rule could determine an identifier.
    """
    return explain(attributes, chamber).district
