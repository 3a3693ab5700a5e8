"""
Serialization helpers for Repository objects.

Provides JSON/YAML round-trip via an intermediate dict representation, and
`load_repository` which picks a reader by file suffix (Orchestra XML, YAML
or JSON). This module intentionally keeps serialization structure stable
and explicit.

Member references are written as single-key mappings:
    {"fieldRef": 11}, {"groupRef": 2085}, {"componentRef": 1024}
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from qfjgen.model import (
    Code,
    CodeSet,
    Component,
    ComponentRef,
    Field,
    FieldRef,
    Group,
    GroupRef,
    Member,
    Message,
    Repository,
    BASE_SCENARIO,
)
from qfjgen.orchestra_parser import parse_orchestra_file


class RepositoryFormatError(Exception):
    """Raised when a repository document has an unexpected shape."""
    pass


_MEMBER_KEYS = {
    "fieldRef": FieldRef,
    "groupRef": GroupRef,
    "componentRef": ComponentRef,
}


def member_to_dict(m: Member) -> Dict[str, int]:
    if isinstance(m, FieldRef):
        return {"fieldRef": m.id}
    if isinstance(m, GroupRef):
        return {"groupRef": m.id}
    if isinstance(m, ComponentRef):
        return {"componentRef": m.id}
    raise TypeError(f"Unsupported Member type: {type(m)}")


def member_from_dict(d: Dict[str, Any]) -> Member:
    if not isinstance(d, dict) or len(d) != 1:
        raise RepositoryFormatError(f"Member must be a single-key mapping, got: {d!r}")
    key, value = next(iter(d.items()))
    ref_type = _MEMBER_KEYS.get(key)
    if ref_type is None:
        raise RepositoryFormatError(f"Unsupported member kind: {key}")
    return ref_type(int(value))


def _members_from_list(items: List[Any] | None) -> List[Member]:
    return [member_from_dict(item) for item in items or []]


def field_to_dict(f: Field) -> Dict[str, Any]:
    return {"id": f.id, "name": f.name, "type": f.type, "code_set": f.code_set}


def field_from_dict(d: Dict[str, Any]) -> Field:
    return Field(id=int(d["id"]), name=d["name"], type=d.get("type", "String"), code_set=d.get("code_set"))


def code_set_to_dict(c: CodeSet) -> Dict[str, Any]:
    return {
        "name": c.name,
        "id": c.id,
        "type": c.type,
        "codes": [{"name": code.name, "value": code.value, "id": code.id} for code in c.codes],
    }


def code_set_from_dict(d: Dict[str, Any]) -> CodeSet:
    codes = [
        Code(name=code["name"], value=str(code["value"]), id=code.get("id"))
        for code in d.get("codes", [])
    ]
    return CodeSet(name=d["name"], type=d.get("type", "String"), codes=codes, id=d.get("id"))


def component_to_dict(c: Component) -> Dict[str, Any]:
    return {"id": c.id, "name": c.name, "members": [member_to_dict(m) for m in c.members]}


def component_from_dict(d: Dict[str, Any]) -> Component:
    return Component(id=int(d["id"]), name=d["name"], members=_members_from_list(d.get("members")))


def group_to_dict(g: Group) -> Dict[str, Any]:
    return {
        "id": g.id,
        "name": g.name,
        "num_in_group": g.num_in_group,
        "members": [member_to_dict(m) for m in g.members],
    }


def group_from_dict(d: Dict[str, Any]) -> Group:
    return Group(
        id=int(d["id"]),
        name=d["name"],
        num_in_group=int(d["num_in_group"]),
        members=_members_from_list(d.get("members")),
    )


def message_to_dict(m: Message) -> Dict[str, Any]:
    return {
        "name": m.name,
        "id": m.id,
        "msg_type": m.msg_type,
        "category": m.category,
        "scenario": m.scenario,
        "members": [member_to_dict(member) for member in m.members],
    }


def message_from_dict(d: Dict[str, Any]) -> Message:
    return Message(
        name=d["name"],
        msg_type=str(d["msg_type"]),
        category=d.get("category", ""),
        scenario=d.get("scenario", BASE_SCENARIO),
        members=_members_from_list(d.get("members")),
        id=d.get("id"),
    )


def repository_to_dict(r: Repository) -> Dict[str, Any]:
    return {
        "name": r.name,
        "version": r.version,
        "fields": [field_to_dict(f) for f in r.fields],
        "code_sets": [code_set_to_dict(c) for c in r.code_sets],
        "components": [component_to_dict(c) for c in r.components],
        "groups": [group_to_dict(g) for g in r.groups],
        "messages": [message_to_dict(m) for m in r.messages],
    }


def repository_from_dict(d: Dict[str, Any]) -> Repository:
    if not isinstance(d, dict):
        raise RepositoryFormatError("Repository document must be a mapping")
    try:
        return Repository(
            name=d.get("name", ""),
            version=str(d.get("version", "")),
            fields=[field_from_dict(f) for f in d.get("fields", [])],
            code_sets=[code_set_from_dict(c) for c in d.get("code_sets", [])],
            components=[component_from_dict(c) for c in d.get("components", [])],
            groups=[group_from_dict(g) for g in d.get("groups", [])],
            messages=[message_from_dict(m) for m in d.get("messages", [])],
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RepositoryFormatError(f"Invalid repository document: {e}") from e


def repository_to_json(r: Repository) -> str:
    return json.dumps(repository_to_dict(r), sort_keys=True)


def repository_from_json(s: str) -> Repository:
    d = json.loads(s)
    return repository_from_dict(d)


def repository_to_yaml(r: Repository) -> str:
    return yaml.safe_dump(repository_to_dict(r), sort_keys=False)


def repository_from_yaml(s: str) -> Repository:
    d = yaml.safe_load(s)
    return repository_from_dict(d)


def load_repository(path: Union[str, Path]) -> Repository:
    """
    Load a repository from an Orchestra XML, YAML or JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        RepositoryFormatError: If the suffix is unknown or the document is malformed
        OrchestraParseError: If Orchestra XML is malformed
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".xml":
        return parse_orchestra_file(path)

    content = path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        try:
            return repository_from_yaml(content)
        except yaml.YAMLError as e:
            raise RepositoryFormatError(f"Invalid YAML in {path}: {e}") from e
    if suffix == ".json":
        try:
            return repository_from_json(content)
        except json.JSONDecodeError as e:
            raise RepositoryFormatError(f"Invalid JSON in {path}: {e}") from e
    raise RepositoryFormatError(f"Unsupported repository file type: {path.name}")


__all__ = [
    "RepositoryFormatError",
    "load_repository",
    "repository_from_dict",
    "repository_from_json",
    "repository_from_yaml",
    "repository_to_dict",
    "repository_to_json",
    "repository_to_yaml",
]
