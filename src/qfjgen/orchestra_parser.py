"""
Orchestra XML Parser (Layer 1: Orchestra repository file → Repository model).

Reads the subset of a FIX Orchestra repository the generator needs:

    <fixr:repository name="FIX.Latest" version="FIX.Latest_EP269">
        <fixr:codeSets>  codeSet(name, type) / code(name, value)
        <fixr:fields>    field(id, name, type)
        <fixr:components> component(id, name) / fieldRef|groupRef|componentRef(id)
        <fixr:groups>    group(id, name) / numInGroup(id) / member refs
        <fixr:messages>  message(name, msgType, category, scenario) / structure / member refs

Elements are matched by local name, so any Orchestra namespace version is
accepted. Annotations, pedigree and conditional rules are ignored.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Union

from qfjgen.model import (
    BASE_SCENARIO,
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
)


class OrchestraParseError(Exception):
    """Raised when an Orchestra document cannot be read."""
    pass


_MEMBER_TAGS = {
    "fieldRef": FieldRef,
    "groupRef": GroupRef,
    "componentRef": ComponentRef,
}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: Optional[ET.Element], name: str) -> List[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local_name(child.tag) == name]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    children = _children(element, name)
    return children[0] if children else None


def _required(element: ET.Element, attribute: str) -> str:
    value = element.get(attribute)
    if value is None:
        raise OrchestraParseError(
            f"<{_local_name(element.tag)}> is missing required attribute '{attribute}'"
        )
    return value


def _int_attribute(element: ET.Element, attribute: str) -> int:
    raw = _required(element, attribute)
    try:
        return int(raw)
    except ValueError:
        raise OrchestraParseError(
            f"<{_local_name(element.tag)}> attribute '{attribute}' is not an integer: {raw}"
        )


def _optional_int(element: ET.Element, attribute: str) -> Optional[int]:
    raw = element.get(attribute)
    return int(raw) if raw is not None and raw.isdigit() else None


def _parse_members(element: Optional[ET.Element]) -> List[Member]:
    members: List[Member] = []
    if element is None:
        return members
    for child in element:
        ref_type = _MEMBER_TAGS.get(_local_name(child.tag))
        if ref_type is not None:
            members.append(ref_type(_int_attribute(child, "id")))
    return members


def _parse_code_set(element: ET.Element) -> CodeSet:
    codes = [
        Code(
            name=_required(code, "name"),
            value=_required(code, "value"),
            id=_optional_int(code, "id"),
        )
        for code in _children(element, "code")
    ]
    return CodeSet(
        name=_required(element, "name"),
        type=element.get("type", "String"),
        codes=codes,
        id=_optional_int(element, "id"),
    )


def _parse_group(element: ET.Element) -> Group:
    num_in_group = _child(element, "numInGroup")
    if num_in_group is None:
        raise OrchestraParseError(f"<group name={element.get('name')!r}> has no numInGroup")
    return Group(
        id=_int_attribute(element, "id"),
        name=_required(element, "name"),
        num_in_group=_int_attribute(num_in_group, "id"),
        members=_parse_members(element),
    )


def _parse_message(element: ET.Element) -> Message:
    return Message(
        name=_required(element, "name"),
        msg_type=element.get("msgType", ""),
        category=element.get("category", ""),
        scenario=element.get("scenario", BASE_SCENARIO),
        members=_parse_members(_child(element, "structure")),
        id=_optional_int(element, "id"),
    )


def parse_orchestra_root(root: ET.Element) -> Repository:
    """Build a Repository from a parsed <repository> element."""
    if _local_name(root.tag) != "repository":
        raise OrchestraParseError(f"Expected <repository> root element, got <{_local_name(root.tag)}>")

    code_sets = [_parse_code_set(e) for e in _children(_child(root, "codeSets"), "codeSet")]
    fields = [
        Field(id=_int_attribute(e, "id"), name=_required(e, "name"), type=e.get("type", "String"))
        for e in _children(_child(root, "fields"), "field")
    ]
    components = [
        Component(id=_int_attribute(e, "id"), name=_required(e, "name"), members=_parse_members(e))
        for e in _children(_child(root, "components"), "component")
    ]
    groups = [_parse_group(e) for e in _children(_child(root, "groups"), "group")]
    messages = [_parse_message(e) for e in _children(_child(root, "messages"), "message")]

    return Repository(
        name=root.get("name", ""),
        version=root.get("version", ""),
        fields=fields,
        code_sets=code_sets,
        components=components,
        groups=groups,
        messages=messages,
    )


def parse_orchestra_string(content: str) -> Repository:
    """
    Parse Orchestra XML content into a Repository.

    Raises:
        OrchestraParseError: If the XML is malformed or incomplete
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise OrchestraParseError(f"Malformed Orchestra XML: {e}")
    return parse_orchestra_root(root)


def parse_orchestra_file(filepath: Union[str, Path]) -> Repository:
    """
    Parse an Orchestra XML file into a Repository.

    Raises:
        FileNotFoundError: If file doesn't exist
        OrchestraParseError: If parsing fails
    """
    try:
        tree = ET.parse(str(filepath))
    except FileNotFoundError:
        raise FileNotFoundError(f"Orchestra file not found: {filepath}")
    except ET.ParseError as e:
        raise OrchestraParseError(f"Malformed Orchestra XML in {filepath}: {e}")
    return parse_orchestra_root(tree.getroot())


__all__ = [
    "OrchestraParseError",
    "parse_orchestra_file",
    "parse_orchestra_root",
    "parse_orchestra_string",
]
