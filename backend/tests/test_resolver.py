"""Tests for district identifier resolution from feature attributes.

Exercises each rule of the precedence policy (direct fields, name-like
fields, heuristic key matching), their ordering, and the values that must
never be read as district numbers.
"""

from __future__ import annotations

import math

import pytest

from district_lookup.boundaries import models
from district_lookup.services import resolver


def test_chamber_field_beats_name_field() -> None:
    """Test that a chamber-specific numeric field wins over a name."""
    attributes = {
        "NAMELSAD": "State House District 114",
        "SLDLST": "108",
    }
    resolution = resolver.explain(attributes, "house")
    assert resolution.district == 108
    assert resolution.rule == "direct"
    assert resolution.key == "SLDLST"


def test_chamber_field_beats_generic_field() -> None:
    """Test that chamber-specific fields come before generic ones."""
    attributes = {"DISTRICT": 4, "SLDUST": "016"}
    assert resolver.resolve_district_id(attributes, "senate") == 16


def test_chamber_fields_are_chamber_specific() -> None:
    """Test that another chamber's code is not a direct field."""
    attributes = {"SLDLST": "108", "DIST_NBR": 9}
    assert resolver.resolve_district_id(attributes, "senate") == 9
    assert resolver.resolve_district_id(attributes, "house") == 108


def test_generic_fields_in_priority_order() -> None:
    """Test that DIST_NBR is consulted before DISTRICT."""
    attributes = {"District": 3, "DISTRICT": 2, "DIST_NBR": "1"}
    assert resolver.resolve_district_id(attributes, "sboe") == 1


def test_direct_value_returned_as_integer() -> None:
    """Test that numeric strings and floats come back as integers."""
    assert resolver.resolve_district_id({"DISTRICT": " 12 "}, "house") == 12
    district = resolver.resolve_district_id({"DISTRICT": 7.0}, "house")
    assert district == 7
    assert isinstance(district, int)


def test_objectid_is_never_a_district() -> None:
    """Test that OBJECTID is ignored by every rule."""
    assert resolver.resolve_district_id({"OBJECTID": 42}, "house") is None


def test_name_pattern_extraction() -> None:
    """Test extracting the number from a district name."""
    attributes = {"NAMELSAD": "State House District 114"}
    resolution = resolver.explain(attributes, "house")
    assert resolution.district == 114
    assert resolution.rule == "name"
    assert resolution.key == "NAMELSAD"


def test_name_pattern_is_case_insensitive() -> None:
    """Test that 'DISTRICT 5' and 'district 5' both match."""
    assert resolver.resolve_district_id({"NAME": "SBOE DISTRICT  5"}, "sboe") == 5
    assert resolver.resolve_district_id({"name": "senate district 31"}, "senate") == 31


def test_name_fields_in_priority_order() -> None:
    """Test that NAMELSAD is consulted before NAME."""
    attributes = {"NAME": "District 2", "NAMELSAD": "District 1"}
    assert resolver.resolve_district_id(attributes, "house") == 1


def test_heuristic_key_matching() -> None:
    """Test that an unknown district-like key resolves via heuristics."""
    resolution = resolver.explain({"SomeDistrictCode": "87"}, "house")
    assert resolution.district == 87
    assert resolution.rule == "heuristic"
    assert resolution.key == "SomeDistrictCode"


def test_heuristic_uses_key_order() -> None:
    """Test that the first matching key in iteration order wins."""
    attributes = {"label": "x", "dist_a": "not a number", "DistB": 4, "DistC": 5}
    assert resolver.resolve_district_id(attributes, "senate") == 4


def test_heuristic_chamber_hint() -> None:
    """Test that chamber-coded keys count as district keys."""
    assert resolver.resolve_district_id({"SLDL_CODE": "45"}, "house") == 45
    assert resolver.resolve_district_id({"SLDL_CODE": "45"}, "senate") is None


def test_heuristic_requires_integer() -> None:
    """Test that fractional values are not accepted by heuristics."""
    assert resolver.resolve_district_id({"district_share": 0.5}, "house") is None


def test_unresolvable_attributes() -> None:
    """Test that attributes with no usable field resolve to None."""
    resolution = resolver.explain({"REP_NM": "Jane Doe", "COLOR": 3}, "house")
    assert resolution.district is None
    assert resolution.rule is None
    assert resolver.resolve_district_id({}, "house") is None
    assert resolver.resolve_district_id(None, "house") is None


@pytest.mark.parametrize(
    "value",
    [
        None, True, "", "   ", "abc", "nan", "inf", "1e400",
        math.inf, math.nan, 10**400, [1],
    ],
)
def test_values_that_never_parse(value: object) -> None:
    """Test that blank, boolean, non-finite and oversized values are skipped."""
    assert resolver.to_number(value) is None  # type: ignore[arg-type]
    assert resolver.resolve_district_id({"DISTRICT": value}, "house") is None  # type: ignore[dict-item]


def test_skipped_direct_value_falls_through() -> None:
    """Test that an unparseable direct field falls through to the next."""
    attributes = {"SLDLST": "ZZZ", "DISTRICT": "15"}
    assert resolver.resolve_district_id(attributes, "house") == 15


@pytest.mark.parametrize("value", [27, 27.0, "27"])
def test_name_field_holding_a_number(value: object) -> None:
    """Test that a bare numeric name field resolves through the name rule."""
    resolution = resolver.explain({"NAME": value}, "senate")  # type: ignore[dict-item]
    assert resolution == models.Resolution(district=27, rule="name", key="NAME")


def test_oversized_direct_value_falls_through() -> None:
    """Test that a huge integer is skipped instead of failing the lookup."""
    attributes = {"DISTRICT": 10**400, "NAMELSAD": "State House District 9"}
    assert resolver.resolve_district_id(attributes, "house") == 9
