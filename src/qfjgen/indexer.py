"""
Schema Indexer: id-keyed and name-keyed lookup tables for a Repository.

Every member reference in the model is resolved through this index.
A reference that does not resolve is a schema integrity problem, not a crash:
it is reported on the diagnostic channel and the caller skips it.

Diagnostic channel:
    - `warnings.warn(..., SchemaIntegrityWarning)` for interactive visibility
    - `SchemaIndex.diagnostics` for reports
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from qfjgen.model import CodeSet, Component, Field, Group, Message, Repository


class SchemaIntegrityWarning(UserWarning):
    """A schema cross-reference could not be resolved or is inconsistent."""


@dataclass
class SchemaIndex:
    """Lookup tables built once per generation run and read-only afterwards."""

    fields_by_id: Dict[int, Field] = field(default_factory=dict)
    fields_by_name: Dict[str, Field] = field(default_factory=dict)
    components_by_id: Dict[int, Component] = field(default_factory=dict)
    components_by_name: Dict[str, Component] = field(default_factory=dict)
    groups_by_id: Dict[int, Group] = field(default_factory=dict)
    groups_by_name: Dict[str, Group] = field(default_factory=dict)
    code_sets_by_name: Dict[str, CodeSet] = field(default_factory=dict)
    base_messages: Dict[str, Message] = field(default_factory=dict)
    diagnostics: List[str] = field(default_factory=list)

    def report(self, msg: str) -> None:
        """Record an integrity diagnostic once and warn about it."""
        if msg in self.diagnostics:
            return
        self.diagnostics.append(msg)
        warnings.warn(msg, SchemaIntegrityWarning, stacklevel=3)

    def resolve_field(self, field_id: int, operation: str) -> Optional[Field]:
        found = self.fields_by_id.get(field_id)
        if found is None:
            self.report(f"{operation}: Field missing from repository; id={field_id}")
        return found

    def resolve_group(self, group_id: int, operation: str) -> Optional[Group]:
        found = self.groups_by_id.get(group_id)
        if found is None:
            self.report(f"{operation}: Group missing from repository; id={group_id}")
        return found

    def resolve_component(self, component_id: int, operation: str) -> Optional[Component]:
        found = self.components_by_id.get(component_id)
        if found is None:
            self.report(f"{operation}: Component missing from repository; id={component_id}")
        return found

    def code_set_for(self, fld: Field) -> Optional[CodeSet]:
        """Return the code set a field is enumerated by, if any."""
        if fld.code_set:
            code_set = self.code_sets_by_name.get(fld.code_set)
            if code_set is None:
                self.report(f"code_set_for: CodeSet missing from repository; name={fld.code_set}")
            return code_set
        return self.code_sets_by_name.get(fld.type)


def build_index(repository: Repository) -> SchemaIndex:
    """
    Build lookup tables for fields, components, groups, code sets and
    base-scenario messages.

    Duplicate identifiers keep the first declaration and are reported.
    """
    index = SchemaIndex()

    for fld in repository.fields:
        if fld.id in index.fields_by_id:
            index.report(f"build_index: duplicate Field id={fld.id}")
            continue
        index.fields_by_id[fld.id] = fld
        index.fields_by_name.setdefault(fld.name, fld)

    for component in repository.components:
        if component.id in index.components_by_id:
            index.report(f"build_index: duplicate Component id={component.id}")
            continue
        index.components_by_id[component.id] = component
        index.components_by_name.setdefault(component.name, component)

    for group in repository.groups:
        if group.id in index.groups_by_id:
            index.report(f"build_index: duplicate Group id={group.id}")
            continue
        index.groups_by_id[group.id] = group
        index.groups_by_name.setdefault(group.name, group)

    for code_set in repository.code_sets:
        index.code_sets_by_name.setdefault(code_set.name, code_set)

    scenarios = set()
    for message in repository.messages:
        key = (message.name, message.scenario)
        if key in scenarios:
            if message.is_base_scenario:
                index.report(f"build_index: more than one base scenario for Message name={message.name}")
            else:
                index.report(
                    f"build_index: duplicate scenario={message.scenario} for Message name={message.name}"
                )
            continue
        scenarios.add(key)
        if message.is_base_scenario:
            index.base_messages[message.name] = message

    return index


__all__ = ["SchemaIndex", "SchemaIntegrityWarning", "build_index"]
