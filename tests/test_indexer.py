"""
Tests for the schema indexer.

The index is the single place member references are resolved, so these
tests pin down lookup behavior and the diagnostic channel for unresolved
or duplicated identifiers.
"""

import pytest
from qfjgen.indexer import SchemaIntegrityWarning, build_index
from qfjgen.model import (
    Code,
    CodeSet,
    Component,
    Field,
    FieldRef,
    Group,
    Message,
    Repository,
)


def build_repository() -> Repository:
    return Repository(
        name="Test",
        version="FIX.Latest",
        fields=[
            Field(11, "ClOrdID", "String"),
            Field(54, "Side", "SideCodeSet"),
            Field(453, "NoPartyIDs", "NumInGroup"),
            Field(448, "PartyID", "String"),
            Field(99, "Custom", "String", code_set="CustomCodeSet"),
        ],
        code_sets=[
            CodeSet("SideCodeSet", "char", [Code("Buy", "1")]),
            CodeSet("CustomCodeSet", "int", [Code("One", "1")]),
        ],
        components=[Component(1003, "Instrument", [FieldRef(11)])],
        groups=[Group(1012, "PartiesGrp", 453, [FieldRef(448)])],
        messages=[
            Message("NewOrderSingle", "D"),
            Message("NewOrderSingle", "D", scenario="Limit"),
            Message("ExecutionReport", "8"),
        ],
    )


class TestLookupTables:

    def test_fields_by_id_and_name(self):
        index = build_index(build_repository())
        assert index.fields_by_id[11].name == "ClOrdID"
        assert index.fields_by_name["Side"].id == 54

    def test_components_and_groups(self):
        index = build_index(build_repository())
        assert index.components_by_id[1003].name == "Instrument"
        assert index.components_by_name["Instrument"].id == 1003
        assert index.groups_by_id[1012].num_in_group == 453
        assert index.groups_by_name["PartiesGrp"].id == 1012

    def test_base_messages_only(self):
        """Only base-scenario messages are keyed by name."""
        index = build_index(build_repository())
        assert set(index.base_messages) == {"NewOrderSingle", "ExecutionReport"}
        assert index.base_messages["NewOrderSingle"].is_base_scenario

    def test_clean_repository_has_no_diagnostics(self):
        index = build_index(build_repository())
        assert index.diagnostics == []


class TestResolution:

    def test_resolve_existing(self):
        index = build_index(build_repository())
        assert index.resolve_field(11, "test").name == "ClOrdID"
        assert index.resolve_group(1012, "test").name == "PartiesGrp"
        assert index.resolve_component(1003, "test").name == "Instrument"

    def test_missing_group_warns_and_returns_none(self):
        index = build_index(build_repository())
        with pytest.warns(SchemaIntegrityWarning, match="Group missing from repository; id=9999"):
            assert index.resolve_group(9999, "collect") is None

    def test_missing_reference_message_names_operation(self):
        index = build_index(build_repository())
        with pytest.warns(SchemaIntegrityWarning):
            index.resolve_component(5, "emit_message")
        assert index.diagnostics == ["emit_message: Component missing from repository; id=5"]

    def test_diagnostics_deduplicated(self):
        index = build_index(build_repository())
        with pytest.warns(SchemaIntegrityWarning):
            index.resolve_field(1, "op")
            index.resolve_field(1, "op")
        assert len(index.diagnostics) == 1


class TestCodeSets:

    def test_code_set_named_by_type(self):
        index = build_index(build_repository())
        assert index.code_set_for(index.fields_by_id[54]).name == "SideCodeSet"

    def test_explicit_code_set(self):
        index = build_index(build_repository())
        assert index.code_set_for(index.fields_by_id[99]).type == "int"

    def test_plain_field_has_no_code_set(self):
        index = build_index(build_repository())
        assert index.code_set_for(index.fields_by_id[11]) is None

    def test_missing_explicit_code_set_warns(self):
        index = build_index(Repository(fields=[Field(1, "X", "String", code_set="Nope")]))
        with pytest.warns(SchemaIntegrityWarning, match="CodeSet missing"):
            assert index.code_set_for(index.fields_by_id[1]) is None


class TestDuplicates:

    def test_duplicate_field_keeps_first(self):
        repository = Repository(fields=[Field(1, "First", "String"), Field(1, "Second", "String")])
        with pytest.warns(SchemaIntegrityWarning, match="duplicate Field id=1"):
            index = build_index(repository)
        assert index.fields_by_id[1].name == "First"

    def test_two_base_scenarios_reported(self):
        repository = Repository(messages=[Message("Heartbeat", "0"), Message("Heartbeat", "0")])
        with pytest.warns(SchemaIntegrityWarning, match="more than one base scenario"):
            index = build_index(repository)
        assert len(index.base_messages) == 1

    def test_duplicate_named_scenario_reported(self):
        repository = Repository(messages=[
            Message("NewOrderSingle", "D", scenario="Limit"),
            Message("NewOrderSingle", "D", scenario="Limit"),
        ])
        with pytest.warns(SchemaIntegrityWarning, match="duplicate scenario=Limit"):
            index = build_index(repository)
        assert index.base_messages == {}
