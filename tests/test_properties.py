"""
Tests for the property classifier

Tests cover:
- Category partitioning and wire names
- Telemetry ordering after explicit normal properties
- Declared-only member lookup across inheritance
- Mis-typed relationship and component markers
"""

import logging
from typing import List, Optional

import pytest

from twins import PropertyCategory, TwinBase, TwinDefinitionError, digital_twin, twin_component, twin_relationship
from twins.properties import (
    classify,
    derivation_depth,
    get_component_properties,
    get_declared_properties,
    get_model_property_type,
    get_normal_properties,
    get_relationship_properties,
    get_twin_only_properties,
    is_sequence_type,
    sort_by_derivation,
    to_camel_case,
    unwrap_optional,
)

from fixtures import (
    Floor,
    Room,
    SimpleTwin,
    TwinA,
    TwinB,
    TwinC,
    TwinWithAllAttributes,
    TwinWithMinMultiplicity,
    TwinWithReadOnlyProperties,
)


class TestTypeHelpers:
    """Tests for type hint helpers."""

    @pytest.mark.parametrize("name,expected", [
        ("quantity", "quantity"),
        ("nested_obj", "nestedObj"),
        ("int_array", "intArray"),
        ("Quantity", "quantity"),
        ("guid_id", "guidId"),
    ])
    def test_to_camel_case(self, name, expected):
        assert to_camel_case(name) == expected

    def test_unwrap_optional(self):
        assert unwrap_optional(Optional[int]) is int
        assert unwrap_optional(int) is int

    def test_sequence_detection(self):
        assert is_sequence_type(List[int])
        assert is_sequence_type(Optional[List[Room]])
        assert not is_sequence_type(str)
        assert not is_sequence_type(dict)

    def test_model_property_type_unwraps_collections(self):
        assert get_model_property_type(Optional[List[Room]]) is Room
        assert get_model_property_type(Optional[Room]) is Room

    def test_derivation_depth(self):
        assert derivation_depth(TwinA) == 2
        assert derivation_depth(TwinC) == 4

    def test_sort_by_derivation_is_stable(self):
        ordered = sort_by_derivation([TwinC, Room, TwinB, Floor, TwinA])
        assert ordered == [Room, Floor, TwinA, TwinB, TwinC]


class TestClassification:
    """Tests for member categories."""

    def test_simple_twin_members(self):
        names = [prop.twin_name for prop in classify(SimpleTwin)]
        assert names == [
            "$dtId", "$etag", "$metadata", "quantity", "measurement",
            "@id", "@type", "extends", "@context", "displayName",
        ]

    def test_excluded_telemetry_is_classified(self):
        categories = {prop.name: prop.category for prop in classify(SimpleTwin)}
        assert categories["measurement"] is PropertyCategory.TELEMETRY
        assert [prop.name for prop in get_normal_properties(SimpleTwin)] == ["quantity", "measurement"]
        assert [prop.name for prop in get_normal_properties(SimpleTwin, exclude=("measurement",))] == ["quantity"]

    def test_reserved_members(self):
        reserved = get_twin_only_properties(SimpleTwin)
        assert [prop.twin_name for prop in reserved] == [
            "$dtId", "$etag", "$metadata", "@id", "@type", "extends", "@context", "displayName",
        ]
        model_only = [prop for prop in reserved if prop.twin_name.startswith("@")]
        assert all(not prop.settable for prop in model_only)

    def test_reserved_members_with_exclusions(self):
        reserved = get_twin_only_properties(SimpleTwin, exclude=("@id", "@type", "extends", "@context", "displayName"))
        assert [prop.twin_name for prop in reserved] == ["$dtId", "$etag", "$metadata"]

    def test_telemetry_follows_explicit_properties(self):
        names = [prop.twin_name for prop in get_normal_properties(TwinWithAllAttributes)]
        assert names == ["label", "flag", "intArray", "stringMap", "guidId", "nullableId", "temperature"]

    def test_normal_properties_without_telemetry(self):
        names = [prop.twin_name for prop in get_normal_properties(TwinWithAllAttributes, include_telemetry=False)]
        assert "temperature" not in names

    def test_component_members(self):
        components = get_component_properties(TwinWithAllAttributes)
        assert [prop.twin_name for prop in components] == ["componentTwin"]
        assert components[0].model_type is SimpleTwin

    def test_relationship_wire_name_override(self):
        relationships = get_relationship_properties(Floor)
        assert len(relationships) == 1
        rel = relationships[0]
        assert rel.name == "rooms"
        assert rel.twin_name == "contains"
        assert rel.model_type is Room
        assert rel.is_collection

    def test_single_valued_relationship(self):
        rel = get_relationship_properties(TwinWithMinMultiplicity)[0]
        assert rel.twin_name == "owner"
        assert not rel.is_collection
        assert rel.info.min_multiplicity == 1

    def test_read_only_property(self):
        props = {prop.twin_name: prop for prop in get_normal_properties(TwinWithReadOnlyProperties)}
        assert props["name"].settable
        assert not props["createdBy"].settable

    def test_classification_is_cached(self):
        assert classify(SimpleTwin) is classify(SimpleTwin)

    def test_non_dataclass_is_rejected(self):
        class NotATwin:
            pass

        with pytest.raises(TwinDefinitionError):
            classify(NotATwin)


class TestMisTypedMarkers:
    """Markers on members whose type does not fit are downgraded with a warning."""

    def test_relationship_to_scalar_becomes_normal(self, caplog):
        @digital_twin
        class BadRelationship(TwinBase):
            target: Optional[str] = twin_relationship()

        with caplog.at_level(logging.WARNING, logger="twins.properties"):
            members = {prop.name: prop for prop in classify(BadRelationship)}

        assert members["target"].category is PropertyCategory.NORMAL
        assert "marked as a relationship" in caplog.text

    def test_component_of_scalar_becomes_normal(self, caplog):
        @digital_twin
        class BadComponent(TwinBase):
            part: Optional[int] = twin_component()

        with caplog.at_level(logging.WARNING, logger="twins.properties"):
            members = {prop.name: prop for prop in classify(BadComponent)}

        assert members["part"].category is PropertyCategory.NORMAL
        assert "marked as a component" in caplog.text


class TestDeclaredProperties:
    """Tests for members declared on a type rather than inherited."""

    def _declared(self, twin_type):
        return [
            prop.twin_name for prop in get_declared_properties(twin_type)
            if prop.category is not PropertyCategory.RESERVED
        ]

    def test_base_declares_own_members(self):
        assert self._declared(TwinA) == ["r1"]

    def test_derived_declares_only_new_members(self):
        assert self._declared(TwinB) == ["r2"]
        assert self._declared(TwinC) == ["note"]

    def test_undecorated_intermediate_belongs_to_subclass(self):
        from dataclasses import dataclass
        from twins import twin_property

        @dataclass
        class Mixin(TwinA):
            extra: Optional[int] = twin_property()

        @digital_twin
        class Concrete(Mixin):
            own: Optional[int] = twin_property()

        assert self._declared(Concrete) == ["extra", "own"]
