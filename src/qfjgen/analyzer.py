"""
Field Usage Analyzer: transitive field membership of messages.

This module answers "which fields does this set of messages ultimately
contain?" by walking member lists through nested components and groups,
and keeps the application-layer and session-layer field sets disjoint.

It also defines the GenerationReport returned by a generation run.

IMPORTANT: This is the analysis layer. It does NOT modify the repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from qfjgen.indexer import SchemaIndex
from qfjgen.model import ComponentRef, FieldRef, GroupRef, Member, Message
from qfjgen.partition import DEFAULT_REGISTRY, SessionLayerRegistry


@dataclass(frozen=True)
class FieldUsage:
    """Disjoint field-id sets used by the application and session layers."""

    application_field_ids: FrozenSet[int]
    session_field_ids: FrozenSet[int]


def _collect_from_members(
    members: Iterable[Member],
    collected: Set[int],
    index: SchemaIndex,
    include_header_trailer: bool,
    registry: SessionLayerRegistry,
    path: Tuple[Tuple[str, int], ...],
) -> None:
    """Recursively add the field ids required by a member list."""
    for member in members:
        if isinstance(member, FieldRef):
            collected.add(member.id)

        elif isinstance(member, GroupRef):
            group = index.resolve_group(member.id, "collect_field_ids")
            if group is None:
                continue
            collected.add(group.num_in_group)
            key = ("group", group.id)
            if key in path:
                index.report(f"collect_field_ids: cyclic reference to Group id={group.id}")
                continue
            _collect_from_members(
                group.members, collected, index, include_header_trailer, registry, path + (key,)
            )

        elif isinstance(member, ComponentRef):
            component = index.resolve_component(member.id, "collect_field_ids")
            if component is None:
                continue
            if registry.is_header_or_trailer(component.id) and not include_header_trailer:
                continue
            key = ("component", component.id)
            if key in path:
                index.report(f"collect_field_ids: cyclic reference to Component id={component.id}")
                continue
            _collect_from_members(
                component.members, collected, index, include_header_trailer, registry, path + (key,)
            )


def collect_field_ids(
    messages: Iterable[Message],
    index: SchemaIndex,
    include_header_trailer: bool,
    registry: SessionLayerRegistry = DEFAULT_REGISTRY,
) -> Set[int]:
    """
    Compute the transitive set of field ids required by messages.

    Args:
        messages: Messages whose member lists are walked
        index: Lookup tables used to resolve group/component references
        include_header_trailer: If False, StandardHeader/StandardTrailer
            components are not entered
        registry: Identifies the header/trailer components

    Unresolvable references are reported through the index and skipped.
    """
    collected: Set[int] = set()
    for message in messages:
        _collect_from_members(message.members, collected, index, include_header_trailer, registry, ())
    return collected


def resolve_field_usage(
    application_messages: Iterable[Message],
    session_messages: Iterable[Message],
    index: SchemaIndex,
    include_header_trailer: bool,
    registry: SessionLayerRegistry = DEFAULT_REGISTRY,
) -> FieldUsage:
    """
    Collect field ids for both layers and remove session fields from the
    application set, so a field used by both layers counts as session-only.
    """
    application_ids = collect_field_ids(application_messages, index, include_header_trailer, registry)
    session_ids = collect_field_ids(session_messages, index, include_header_trailer, registry)
    application_ids -= session_ids
    return FieldUsage(
        application_field_ids=frozenset(application_ids),
        session_field_ids=frozenset(session_ids),
    )


@dataclass
class GenerationReport:
    """Summary of one generation run."""

    repository_name: str
    version: str
    output_dir: Path

    artifact_counts: Dict[str, int] = field(default_factory=dict)
    written_files: List[Path] = field(default_factory=list)
    application_field_count: int = 0
    session_field_count: int = 0

    # Schema integrity diagnostics
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    def record(self, kind: str, path: Path) -> None:
        self.artifact_counts[kind] = self.artifact_counts.get(kind, 0) + 1
        self.written_files.append(path)

    @property
    def total_files(self) -> int:
        return len(self.written_files)


__all__ = [
    "FieldUsage",
    "GenerationReport",
    "collect_field_ids",
    "resolve_field_usage",
]
