"""
Tests for the field usage analyzer.

Tests verify that the analyzer correctly:
    - Walks nested components and groups transitively
    - Adds group counter fields
    - Prunes header/trailer unless asked to include them
    - Reports and skips missing references and cycles
    - Keeps application and session field sets disjoint
    - Is monotonic in its message set and in header/trailer inclusion
"""

import pytest
from qfjgen.analyzer import GenerationReport, collect_field_ids, resolve_field_usage
from qfjgen.examples import build_example_repository
from qfjgen.indexer import SchemaIntegrityWarning, build_index
from qfjgen.model import (
    Component,
    ComponentRef,
    Field,
    FieldRef,
    Group,
    GroupRef,
    Message,
    Repository,
)
from qfjgen.partition import partition_messages


def build_nested_repository() -> Repository:
    """Message → component → group → nested group, framed by header/trailer."""
    return Repository(
        fields=[Field(i, f"F{i}", "String") for i in (1, 2, 3, 4, 5, 6, 7, 8, 9)],
        components=[
            Component(1024, "StandardHeader", [FieldRef(8)]),
            Component(1025, "StandardTrailer", [FieldRef(9)]),
            Component(100, "Outer", [FieldRef(2), GroupRef(200)]),
        ],
        groups=[
            Group(200, "OuterGrp", 3, [FieldRef(4), GroupRef(201)]),
            Group(201, "InnerGrp", 5, [FieldRef(6)]),
        ],
        messages=[
            Message("M", "M", members=[
                ComponentRef(1024), FieldRef(1), ComponentRef(100), ComponentRef(1025),
            ]),
        ],
    )


class TestCollectFieldIds:

    def test_transitive_walk(self):
        repository = build_nested_repository()
        index = build_index(repository)
        ids = collect_field_ids(repository.messages, index, include_header_trailer=False)
        assert ids == {1, 2, 3, 4, 5, 6}

    def test_header_trailer_included_on_request(self):
        repository = build_nested_repository()
        index = build_index(repository)
        ids = collect_field_ids(repository.messages, index, include_header_trailer=True)
        assert {8, 9} <= ids

    def test_unreferenced_field_not_collected(self):
        repository = build_nested_repository()
        ids = collect_field_ids(repository.messages, build_index(repository), True)
        assert 7 not in ids

    def test_field_ref_added_even_if_undeclared(self):
        """FieldRefs are collected by id; only groups and components are resolved."""
        repository = Repository(messages=[Message("M", "M", members=[FieldRef(42)])])
        assert collect_field_ids(repository.messages, build_index(repository), False) == {42}

    def test_empty_message_set(self):
        repository = build_nested_repository()
        assert collect_field_ids([], build_index(repository), False) == set()


class TestMissingReferences:

    def test_missing_group_skipped(self):
        repository = Repository(messages=[Message("M", "M", members=[FieldRef(1), GroupRef(9999)])])
        index = build_index(repository)
        with pytest.warns(SchemaIntegrityWarning, match="Group missing from repository; id=9999"):
            ids = collect_field_ids(repository.messages, index, False)
        assert ids == {1}
        assert any("9999" in d for d in index.diagnostics)

    def test_missing_component_skipped(self):
        repository = Repository(messages=[Message("M", "M", members=[ComponentRef(77), FieldRef(2)])])
        with pytest.warns(SchemaIntegrityWarning, match="Component missing"):
            ids = collect_field_ids(repository.messages, build_index(repository), False)
        assert ids == {2}


class TestCycles:

    def test_component_cycle_terminates(self):
        repository = Repository(
            components=[
                Component(1, "A", [FieldRef(10), ComponentRef(2)]),
                Component(2, "B", [FieldRef(20), ComponentRef(1)]),
            ],
            messages=[Message("M", "M", members=[ComponentRef(1)])],
        )
        with pytest.warns(SchemaIntegrityWarning, match="cyclic reference to Component id=1"):
            ids = collect_field_ids(repository.messages, build_index(repository), False)
        assert ids == {10, 20}

    def test_self_referencing_group(self):
        repository = Repository(
            groups=[Group(5, "Loop", 50, [FieldRef(51), GroupRef(5)])],
            messages=[Message("M", "M", members=[GroupRef(5)])],
        )
        with pytest.warns(SchemaIntegrityWarning, match="cyclic reference to Group id=5"):
            ids = collect_field_ids(repository.messages, build_index(repository), False)
        assert ids == {50, 51}

    def test_shared_component_is_not_a_cycle(self):
        """The same component reached twice on different paths is fine."""
        repository = Repository(
            components=[Component(1, "Shared", [FieldRef(10)])],
            groups=[Group(2, "G", 20, [ComponentRef(1)])],
            messages=[Message("M", "M", members=[ComponentRef(1), GroupRef(2)])],
        )
        index = build_index(repository)
        assert collect_field_ids(repository.messages, index, False) == {10, 20}
        assert index.diagnostics == []


class TestMonotonicity:

    @pytest.mark.parametrize("build", [build_nested_repository, build_example_repository])
    def test_including_header_trailer_only_adds_fields(self, build):
        repository = build()
        index = build_index(repository)
        without = collect_field_ids(repository.messages, index, include_header_trailer=False)
        with_header = collect_field_ids(repository.messages, index, include_header_trailer=True)
        assert without <= with_header
        assert without != with_header

    def test_superset_of_messages_gives_superset_of_ids(self):
        repository = build_example_repository()
        index = build_index(repository)
        messages = repository.messages
        for n in range(len(messages)):
            smaller = collect_field_ids(messages[:n], index, False)
            larger = collect_field_ids(messages[:n + 1], index, False)
            assert smaller <= larger


class TestResolveFieldUsage:

    def test_disjoint(self):
        repository = build_example_repository()
        index = build_index(repository)
        application, session = partition_messages(repository.messages)
        usage = resolve_field_usage(application, session, index, include_header_trailer=False)
        assert not usage.application_field_ids & usage.session_field_ids

    def test_shared_field_counts_as_session(self):
        """Text(58) is used by Logout and ExecutionReport."""
        repository = build_example_repository()
        index = build_index(repository)
        application, session = partition_messages(repository.messages)
        usage = resolve_field_usage(application, session, index, include_header_trailer=False)
        assert 58 in usage.session_field_ids
        assert 58 not in usage.application_field_ids

    def test_example_sets(self):
        repository = build_example_repository()
        index = build_index(repository)
        application, session = partition_messages(repository.messages)
        usage = resolve_field_usage(application, session, index, include_header_trailer=False)
        assert usage.session_field_ids == frozenset({112, 98, 108, 141, 384, 372, 385, 58})
        assert {11, 453, 448, 452, 802, 523, 55, 44} <= usage.application_field_ids
        assert 35 not in usage.application_field_ids

    def test_header_fields_shared_when_included(self):
        repository = build_example_repository()
        index = build_index(repository)
        application, session = partition_messages(repository.messages)
        usage = resolve_field_usage(application, session, index, include_header_trailer=True)
        assert {8, 35, 627, 10} <= usage.session_field_ids
        assert not usage.application_field_ids & {8, 35, 627, 10}


class TestGenerationReport:

    def test_add_warning_deduplicates(self, tmp_path):
        report = GenerationReport(repository_name="R", version="V", output_dir=tmp_path)
        report.add_warning("w")
        report.add_warning("w")
        assert report.warnings == ["w"]

    def test_record_counts_by_kind(self, tmp_path):
        report = GenerationReport(repository_name="R", version="V", output_dir=tmp_path)
        report.record("field", tmp_path / "A.java")
        report.record("field", tmp_path / "B.java")
        report.record("message", tmp_path / "C.java")
        assert report.artifact_counts == {"field": 2, "message": 1}
        assert report.total_files == 3
