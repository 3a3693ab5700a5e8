"""
Tests for session/application partitioning.

Partition laws checked for both messages and groups:
    - union of the outputs is the input
    - outputs are disjoint
    - relative order is preserved
    - the input list is not mutated
"""

from qfjgen.model import FieldRef, Group, Message
from qfjgen.partition import (
    DEFAULT_REGISTRY,
    GRP_HOP_GRP,
    GRP_MSG_TYPE_GRP,
    SessionLayerRegistry,
    partition_groups,
    partition_messages,
)


def build_messages():
    return [
        Message("Heartbeat", "0", "Session"),
        Message("NewOrderSingle", "D", "SingleGeneralOrderHandling"),
        Message("Logon", "A", "Session"),
        Message("ExecutionReport", "8", "SingleGeneralOrderHandling"),
        Message("Odd", "U1", "session"),
    ]


class TestPartitionMessages:

    def test_session_category_exact_match(self):
        application, session = partition_messages(build_messages())
        assert [m.name for m in session] == ["Heartbeat", "Logon"]

    def test_case_sensitive_category(self):
        """A lower-case 'session' category is application layer."""
        application, _ = partition_messages(build_messages())
        assert "Odd" in [m.name for m in application]

    def test_union_and_disjoint(self):
        messages = build_messages()
        application, session = partition_messages(messages)
        assert len(application) + len(session) == len(messages)
        assert not {id(m) for m in application} & {id(m) for m in session}
        assert {id(m) for m in application} | {id(m) for m in session} == {id(m) for m in messages}

    def test_order_preserved(self):
        application, session = partition_messages(build_messages())
        assert [m.name for m in application] == ["NewOrderSingle", "ExecutionReport", "Odd"]

    def test_input_not_mutated(self):
        messages = build_messages()
        before = list(messages)
        partition_messages(messages)
        assert messages == before

    def test_empty(self):
        assert partition_messages([]) == ([], [])

    def test_custom_registry(self):
        registry = SessionLayerRegistry(session_category="Admin")
        messages = [Message("Logon", "A", "Admin"), Message("Heartbeat", "0", "Session")]
        application, session = partition_messages(messages, registry)
        assert [m.name for m in session] == ["Logon"]
        assert [m.name for m in application] == ["Heartbeat"]


class TestPartitionGroups:

    def build_groups(self):
        return [
            Group(1012, "PartiesGrp", 453, [FieldRef(448)]),
            Group(GRP_HOP_GRP, "HopGrp", 627, [FieldRef(628)]),
            Group(1013, "PtysSubGrp", 802, [FieldRef(523)]),
            Group(GRP_MSG_TYPE_GRP, "MsgTypeGrp", 384, [FieldRef(372)]),
        ]

    def test_registry_groups_are_session_exclusive(self):
        general, session = partition_groups(self.build_groups())
        assert [g.id for g in session] == [GRP_HOP_GRP, GRP_MSG_TYPE_GRP]
        assert [g.id for g in general] == [1012, 1013]

    def test_total_partition(self):
        groups = self.build_groups()
        general, session = partition_groups(groups)
        assert sorted(g.id for g in general + session) == sorted(g.id for g in groups)

    def test_no_session_groups_present(self):
        general, session = partition_groups([Group(1, "G", 2)])
        assert session == []
        assert len(general) == 1


class TestRegistry:

    def test_default_identifiers(self):
        assert DEFAULT_REGISTRY.session_group_ids == frozenset({2085, 2098})
        assert DEFAULT_REGISTRY.header_trailer_ids == frozenset({1024, 1025})

    def test_header_trailer(self):
        assert DEFAULT_REGISTRY.is_header_or_trailer(1024)
        assert DEFAULT_REGISTRY.is_header_or_trailer(1025)
        assert not DEFAULT_REGISTRY.is_header_or_trailer(1003)
