"""
Core Orchestra Repository Model Objects

Defines the fundamental data structures of a FIX Orchestra repository
as seen by the generator.

These are pure data classes representing:
    - Fields (tagged wire values)
    - Code sets (enumerations of permitted field values)
    - Components and repeating groups (reusable member lists)
    - Messages (member lists with a wire MsgType)
    - Repository (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about QuickFIX/J or Java
        - Are immutable once loaded
        - Reference each other by id, never by embedding
        - Represent structure, not behavior
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union


BASE_SCENARIO = "base"


@dataclass(frozen=True)
class Code:
    """
    A single enumerated value of a code set.

    Properties:
        name: Symbolic name (e.g., "PartiallyFilled")
        value: Literal wire value (e.g., "1")
        id: Optional Orchestra code id
    """

    name: str
    value: str
    id: Optional[int] = None


@dataclass(frozen=True)
class CodeSet:
    """
    A named enumeration of permitted values for a field.

    Properties:
        name: Code set name (e.g., "SideCodeSet")
        type: Declared primitive type of the codes (e.g., "char", "int")
        codes: Ordered codes
    """

    name: str
    type: str
    codes: List[Code] = field(default_factory=list)
    id: Optional[int] = None


@dataclass(frozen=True)
class Field:
    """
    A tagged protocol field.

    Properties:
        id: Tag number, unique across the repository
        name: Field name (e.g., "ClOrdID")
        type: Primitive type tag, or the name of a code set
        code_set: Optional explicit code set name

    Orchestra usually expresses an enumerated field by naming the code set
    in `type`; the indexer resolves either form.
    """

    id: int
    name: str
    type: str
    code_set: Optional[str] = None


@dataclass(frozen=True)
class FieldRef:
    """Reference to a Field by tag number."""

    id: int


@dataclass(frozen=True)
class GroupRef:
    """Reference to a Group by group id."""

    id: int


@dataclass(frozen=True)
class ComponentRef:
    """Reference to a Component by component id."""

    id: int


Member = Union[FieldRef, GroupRef, ComponentRef]


@dataclass(frozen=True)
class Component:
    """
    A reusable, named list of members.

    Properties:
        id: Component id (unique among components)
        name: Component name (e.g., "Instrument")
        members: Ordered member references
    """

    id: int
    name: str
    members: List[Member] = field(default_factory=list)


@dataclass(frozen=True)
class Group:
    """
    A repeating group: a component variant whose members describe one
    repetition, preceded on the wire by a counter field.

    Properties:
        id: Group id (unique among groups)
        name: Group name (e.g., "PartiesGrp")
        num_in_group: Tag number of the counter field (e.g., 453 NoPartyIDs)
        members: Ordered member references of one repetition
    """

    id: int
    name: str
    num_in_group: int
    members: List[Member] = field(default_factory=list)


@dataclass(frozen=True)
class Message:
    """
    A protocol message definition.

    Properties:
        name: Message name (e.g., "NewOrderSingle")
        msg_type: Wire MsgType(35) value (e.g., "D")
        category: Free-text category; "Session" marks housekeeping messages
        scenario: "base" for the canonical definition, otherwise a variant name
        members: Ordered member references
    """

    name: str
    msg_type: str
    category: str = ""
    scenario: str = BASE_SCENARIO
    members: List[Member] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def is_base_scenario(self) -> bool:
        return self.scenario == BASE_SCENARIO


@dataclass(frozen=True)
class Repository:
    """
    Root container for one version of a protocol dialect.

    Loaded once per generation run and read-only afterwards.

    Properties:
        name: Repository name (e.g., "FIX.Latest")
        version: Declared version (e.g., "FIX.Latest_EP269")
        fields, code_sets, components, groups, messages: flat collections
    """

    name: str = ""
    version: str = ""
    fields: List[Field] = field(default_factory=list)
    code_sets: List[CodeSet] = field(default_factory=list)
    components: List[Component] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)


_TITLE_SPLIT_RE = re.compile(r"[_ ]")
_CAPS_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_title_case(text: str) -> str:
    """Capitalize the first char and any after underscore or space; leave other caps as-is."""
    return "".join(part[:1].upper() + part[1:] for part in _TITLE_SPLIT_RE.split(text) if part)


def precede_caps_with_underscore(name: str) -> str:
    """
    Convert a camel-case code name to a constant identifier.

    Examples:
        PartiallyFilled -> PARTIALLY_FILLED
        GTC -> GTC
        4Hours -> _4_HOURS
    """
    constant = _CAPS_BOUNDARY_RE.sub("_", name).upper()
    if constant[:1].isdigit():
        constant = "_" + constant
    return constant
