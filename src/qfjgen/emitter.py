"""
Artifact Emitter: structural descriptions of the generated QuickFIX/J classes.

Each resolved repository element becomes one artifact: a frozen description
of a class (its package, name, constants, ordered field lists and accessors).
Artifacts contain no Java text; printing them is the job of a backend
(see `qfjgen.backends.quickfixj`).

Artifacts produced per run:
    - FieldArtifact           one per in-scope field
    - ComponentArtifact       one per component and per repeating group
    - MessageArtifact         one per in-scope message (all scenarios)
    - MessageBaseArtifact     optional Message superclass
    - MessageFactoryArtifact  message / group construction by MsgType
    - MessageCrackerArtifact  dispatch by MsgType

ARCHITECTURAL RULE:
    Routing decisions (which package an artifact lands in) come from the
    OutputPlan only. The emitter never inspects raw configuration flags to
    choose a package.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Hashable, List, Optional, Set, Tuple, TypeVar, Union

from qfjgen.analyzer import FieldUsage, resolve_field_usage
from qfjgen.config import DECIMAL_FIELD, FIELD_PACKAGE, GeneratorConfig, OutputPlan, plan_output
from qfjgen.indexer import SchemaIndex, build_index
from qfjgen.model import (
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
    precede_caps_with_underscore,
    to_title_case,
)
from qfjgen.partition import (
    DEFAULT_REGISTRY,
    SessionLayerRegistry,
    partition_groups,
    partition_messages,
)


T = TypeVar("T")

FIX_LATEST = "FIX.Latest"
FIXT_1_1 = "FIXT.1.1"

# Terminates the field order of a repeating group
ORDER_SENTINEL = 0


# =========================================================================
# FIELD KINDS
# =========================================================================


class FieldKind(Enum):
    """QuickFIX/J field base classes."""
    CHAR = "CharField"
    DECIMAL = "DecimalField"
    DOUBLE = "DoubleField"
    INT = "IntField"
    UTC_TIMESTAMP = "UtcTimeStampField"
    UTC_TIME_ONLY = "UtcTimeOnlyField"
    UTC_DATE_ONLY = "UtcDateOnlyField"
    BOOLEAN = "BooleanField"
    STRING = "StringField"


DECIMAL_TYPES = frozenset({"Price", "Amt", "Qty", "PriceOffset"})

_FIELD_KIND_BY_TYPE = {
    "char": FieldKind.CHAR,
    "int": FieldKind.INT,
    "NumInGroup": FieldKind.INT,
    "SeqNum": FieldKind.INT,
    "Length": FieldKind.INT,
    "TagNum": FieldKind.INT,
    "DayOfMonth": FieldKind.INT,
    "UTCTimestamp": FieldKind.UTC_TIMESTAMP,
    "UTCTimeOnly": FieldKind.UTC_TIME_ONLY,
    "LocalMktTime": FieldKind.UTC_TIME_ONLY,
    "UTCDateOnly": FieldKind.UTC_DATE_ONLY,
    "LocalMktDate": FieldKind.UTC_DATE_ONLY,
    "Boolean": FieldKind.BOOLEAN,
    "float": FieldKind.DOUBLE,
    "Percentage": FieldKind.DOUBLE,
}

TEMPORAL_KINDS = frozenset({FieldKind.UTC_TIMESTAMP, FieldKind.UTC_TIME_ONLY, FieldKind.UTC_DATE_ONLY})


def field_kind(fix_type: str, decimal_kind: str = DECIMAL_FIELD) -> FieldKind:
    """
    Map a FIX datatype name to a field base class; unknown types are strings.

    Decimal datatypes take the base class chosen by GeneratorConfig.decimal_kind.
    """
    if fix_type in DECIMAL_TYPES:
        return FieldKind(decimal_kind)
    return _FIELD_KIND_BY_TYPE.get(fix_type, FieldKind.STRING)


class ConstantType(Enum):
    """Java type of a code constant."""
    BOOLEAN = "boolean"
    CHAR = "char"
    INT = "int"
    STRING = "String"


_CONSTANT_TYPE_BY_CODE_SET_TYPE = {
    "Boolean": ConstantType.BOOLEAN,
    "char": ConstantType.CHAR,
    "int": ConstantType.INT,
}


@dataclass(frozen=True)
class CodeConstant:
    name: str
    type: ConstantType
    value: Union[bool, str]


def code_constants(code_set: CodeSet) -> Tuple[CodeConstant, ...]:
    """One constant per code, typed by the code set's declared type."""
    constant_type = _CONSTANT_TYPE_BY_CODE_SET_TYPE.get(code_set.type, ConstantType.STRING)
    constants = []
    for code in code_set.codes:
        value: Union[bool, str] = code.value
        if constant_type is ConstantType.BOOLEAN:
            value = code.value == "Y"
        constants.append(CodeConstant(precede_caps_with_underscore(code.name), constant_type, value))
    return tuple(constants)


# =========================================================================
# ACCESSORS
# =========================================================================


@dataclass(frozen=True)
class FieldAccessor:
    """set / get / get<Name> / isSet accessors for a field."""
    name: str
    field_id: int

    @property
    def qualified_name(self) -> str:
        return f"{FIELD_PACKAGE}.{self.name}"


@dataclass(frozen=True)
class ComponentAccessor:
    """set(component) / get(component) / get<Name>Component accessors."""
    name: str
    qualified_name: str


@dataclass(frozen=True)
class GroupUnit:
    """
    Inner class describing one repetition of a group.

    Properties:
        name: Class name, taken from the counter field (e.g., "NoPartyIDs")
        counter_field_id: Tag of the counter field
        delimiter_field_id: First field of a repetition
        order: Member field ids in declaration order, ending with ORDER_SENTINEL
        accessors: Accessors of the repetition's members
    """
    name: str
    counter_field_id: int
    delimiter_field_id: int
    order: Tuple[int, ...]
    accessors: Tuple["Accessor", ...]


Accessor = Union[FieldAccessor, ComponentAccessor, GroupUnit]


# =========================================================================
# ARTIFACTS
# =========================================================================


@dataclass(frozen=True)
class Artifact:
    package: str
    class_name: str

    kind: ClassVar[str] = "artifact"

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.class_name}"


@dataclass(frozen=True)
class FieldArtifact(Artifact):
    field_id: int
    fix_type: str
    base_kind: FieldKind
    constants: Tuple[CodeConstant, ...] = ()
    use_extended_decimal: bool = True

    kind: ClassVar[str] = "field"


@dataclass(frozen=True)
class ComponentArtifact(Artifact):
    """A component or repeating group class."""
    component_id: int
    component_fields: Tuple[int, ...] = ()
    group_fields: Tuple[int, ...] = ()
    accessors: Tuple[Accessor, ...] = ()
    is_group: bool = False

    kind: ClassVar[str] = "component"


@dataclass(frozen=True)
class MessageArtifact(Artifact):
    message_name: str
    scenario: str
    msg_type: str
    accessors: Tuple[Accessor, ...] = ()

    kind: ClassVar[str] = "message"


@dataclass(frozen=True)
class MessageBaseArtifact(Artifact):
    begin_string: str

    kind: ClassVar[str] = "message_base"


@dataclass(frozen=True)
class GroupCase:
    counter_field_name: str
    qualified_name: str


@dataclass(frozen=True)
class MessageGroupCases:
    message_name: str
    cases: Tuple[GroupCase, ...]


@dataclass(frozen=True)
class MessageFactoryArtifact(Artifact):
    message_names: Tuple[str, ...]
    group_cases: Tuple[MessageGroupCases, ...]
    default_message_class: str

    kind: ClassVar[str] = "message_factory"


@dataclass(frozen=True)
class MessageCrackerArtifact(Artifact):
    message_names: Tuple[str, ...]
    crack_method_name: str

    kind: ClassVar[str] = "message_cracker"


def begin_string_for(version: str) -> str:
    """BeginString(8) of messages of a repository version (EP suffix removed)."""
    version = version.split("_")[0]
    if version.startswith("FIX.5") or version == FIX_LATEST:
        return FIXT_1_1
    return version


def message_class_name(message: Message) -> str:
    name = to_title_case(message.name)
    if not message.is_base_scenario:
        name += to_title_case(message.scenario)
    return name


# =========================================================================
# EMITTER
# =========================================================================

TraversalPath = Tuple[Tuple[str, int], ...]


class ArtifactEmitter:
    """Builds artifacts for resolved repository elements."""

    def __init__(
        self,
        index: SchemaIndex,
        plan: OutputPlan,
        registry: SessionLayerRegistry = DEFAULT_REGISTRY,
    ):
        self.index = index
        self.plan = plan
        self.config = plan.config
        self.registry = registry

    # ----- fields -----

    def emit_field(self, fld: Field) -> FieldArtifact:
        code_set = self.index.code_set_for(fld)
        fix_type = code_set.type if code_set is not None else fld.type
        return FieldArtifact(
            package=self.plan.field_package,
            class_name=to_title_case(fld.name),
            field_id=fld.id,
            fix_type=fix_type,
            base_kind=field_kind(fix_type, self.config.decimal_kind),
            constants=code_constants(code_set) if code_set is not None else (),
            use_extended_decimal=self.config.use_extended_decimal,
        )

    # ----- components and groups -----

    def emit_component(self, component: Component, package: str) -> ComponentArtifact:
        direct_fields = tuple(m.id for m in component.members if isinstance(m, FieldRef))
        accessors = self._member_accessors(
            component.members, package, (("component", component.id),)
        )
        return ComponentArtifact(
            package=package,
            class_name=to_title_case(component.name),
            component_id=component.id,
            component_fields=direct_fields,
            accessors=_unique(accessors),
        )

    def emit_group(self, group: Group, package: str) -> Optional[ComponentArtifact]:
        """Group class: counter accessors, the repetition inner class, member accessors."""
        counter = self.index.resolve_field(group.num_in_group, "emit_group")
        if counter is None:
            return None
        path: TraversalPath = (("group", group.id),)
        accessors: List[Accessor] = [FieldAccessor(to_title_case(counter.name), counter.id)]
        accessors.append(self._group_unit(group, counter, package, path))
        accessors.extend(self._member_accessors(group.members, package, path))
        return ComponentArtifact(
            package=package,
            class_name=to_title_case(group.name),
            component_id=group.id,
            group_fields=(counter.id,),
            accessors=_unique(accessors),
            is_group=True,
        )

    def _group_unit(self, group: Group, counter: Field, component_package: str, path: TraversalPath) -> GroupUnit:
        order = self._group_order(group.members, path)
        if not order:
            self.index.report(f"emit_group: Group has no members; id={group.id}")
        delimiter = order[0] if order else ORDER_SENTINEL
        return GroupUnit(
            name=to_title_case(counter.name),
            counter_field_id=counter.id,
            delimiter_field_id=delimiter,
            order=tuple(order) + (ORDER_SENTINEL,),
            accessors=_unique(self._member_accessors(group.members, component_package, path)),
        )

    def _group_order(self, members: List[Member], path: TraversalPath) -> List[int]:
        """Field ids of one repetition in declaration order, components flattened."""
        order: List[int] = []
        for member in members:
            if isinstance(member, FieldRef):
                order.append(member.id)
            elif isinstance(member, GroupRef):
                group = self.index.resolve_group(member.id, "group_order")
                if group is not None:
                    order.append(group.num_in_group)
            elif isinstance(member, ComponentRef):
                component = self.index.resolve_component(member.id, "group_order")
                if component is None:
                    continue
                key = ("component", component.id)
                if key in path:
                    self.index.report(f"group_order: cyclic reference to Component id={component.id}")
                    continue
                order.extend(self._group_order(component.members, path + (key,)))
        return order

    def _member_accessors(self, members: List[Member], component_package: str, path: TraversalPath) -> List[Accessor]:
        """
        Accessors for a member list.

        A referenced component contributes its own accessor followed by the
        accessors of its fields and nested components; its groups stay behind
        the component accessor.
        """
        accessors: List[Accessor] = []
        for member in members:
            if isinstance(member, FieldRef):
                fld = self.index.resolve_field(member.id, "member_accessors")
                if fld is not None:
                    accessors.append(FieldAccessor(to_title_case(fld.name), fld.id))

            elif isinstance(member, GroupRef):
                group = self.index.resolve_group(member.id, "member_accessors")
                if group is None:
                    continue
                key = ("group", group.id)
                if key in path:
                    self.index.report(f"member_accessors: cyclic reference to Group id={group.id}")
                    continue
                counter = self.index.resolve_field(group.num_in_group, "member_accessors")
                if counter is None:
                    continue
                accessors.append(self._component_accessor(group.name, component_package))
                accessors.append(FieldAccessor(to_title_case(counter.name), counter.id))
                accessors.append(self._group_unit(group, counter, component_package, path + (key,)))

            elif isinstance(member, ComponentRef):
                component = self.index.resolve_component(member.id, "member_accessors")
                if component is None:
                    continue
                if self.registry.is_header_or_trailer(component.id):
                    # The Message base class already exposes header and trailer
                    if not self.config.include_header_trailer:
                        continue
                else:
                    accessors.append(self._component_accessor(component.name, component_package))
                key = ("component", component.id)
                if key in path:
                    self.index.report(f"member_accessors: cyclic reference to Component id={component.id}")
                    continue
                expanded = [m for m in component.members if isinstance(m, (FieldRef, ComponentRef))]
                accessors.extend(self._member_accessors(expanded, component_package, path + (key,)))
        return accessors

    @staticmethod
    def _component_accessor(name: str, component_package: str) -> ComponentAccessor:
        class_name = to_title_case(name)
        return ComponentAccessor(class_name, f"{component_package}.{class_name}")

    # ----- messages -----

    def emit_message(self, message: Message, message_package: str, component_package: str) -> MessageArtifact:
        accessors = self._member_accessors(message.members, component_package, ())
        return MessageArtifact(
            package=message_package,
            class_name=message_class_name(message),
            message_name=message.name,
            scenario=message.scenario,
            msg_type=message.msg_type,
            accessors=_unique(accessors),
        )

    def emit_message_base(self, version: str) -> MessageBaseArtifact:
        return MessageBaseArtifact(
            package=self.plan.message_package,
            class_name="Message",
            begin_string=begin_string_for(version),
        )

    def emit_message_factory(self, messages: List[Message]) -> MessageFactoryArtifact:
        """Factory over base-scenario messages and the groups they introduce."""
        package = self.plan.message_package
        names: List[str] = []
        group_cases: List[MessageGroupCases] = []
        for message in _base_messages(messages):
            class_name = message_class_name(message)
            names.append(class_name)
            cases: List[GroupCase] = []
            seen: Set[str] = set()
            parent = f"{package}.{class_name}"
            for member in message.members:
                if not isinstance(member, GroupRef):
                    continue
                group = self.index.resolve_group(member.id, "message_factory")
                if group is not None:
                    self._group_cases(parent, group, cases, seen, (("group", group.id),))
            group_cases.append(MessageGroupCases(class_name, tuple(cases)))

        if self.config.emit_base_message_class:
            default_message = f"{package}.Message"
        else:
            default_message = "quickfix.Message"
        return MessageFactoryArtifact(
            package=package,
            class_name="MessageFactory",
            message_names=tuple(names),
            group_cases=tuple(group_cases),
            default_message_class=default_message,
        )

    def _group_cases(
        self, parent: str, group: Group, cases: List[GroupCase], seen: Set[str], path: TraversalPath
    ) -> None:
        counter = self.index.resolve_field(group.num_in_group, "message_factory")
        if counter is None:
            return
        counter_name = to_title_case(counter.name)
        qualified = f"{parent}.{counter_name}"
        if counter_name not in seen:
            seen.add(counter_name)
            cases.append(GroupCase(counter_name, qualified))
        for member in group.members:
            if not isinstance(member, GroupRef):
                continue
            nested = self.index.resolve_group(member.id, "message_factory")
            if nested is None:
                continue
            key = ("group", nested.id)
            if key in path:
                self.index.report(f"message_factory: cyclic reference to Group id={nested.id}")
                continue
            self._group_cases(qualified, nested, cases, seen, path + (key,))

    def emit_message_cracker(self, messages: List[Message]) -> MessageCrackerArtifact:
        names: List[str] = []
        for message in _base_messages(messages):
            class_name = message_class_name(message)
            if class_name not in names:
                names.append(class_name)
        return MessageCrackerArtifact(
            package=self.plan.message_package,
            class_name="MessageCracker",
            message_names=tuple(names),
            crack_method_name=f"crack{self.plan.version_segment}",
        )


def _base_messages(messages: List[Message]) -> List[Message]:
    """Base-scenario messages, first declaration per name."""
    return _first_declarations([m for m in messages if m.is_base_scenario], lambda m: m.name)


def _first_declarations(items: List[T], key: Callable[[T], Hashable]) -> List[T]:
    """Keep the first item per key, as build_index does."""
    seen: Set[Hashable] = set()
    first: List[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        first.append(item)
    return first


def _unique(accessors: List[Accessor]) -> Tuple[Accessor, ...]:
    """Drop repeated accessors within one class, keeping the first."""
    seen = set()
    unique: List[Accessor] = []
    for accessor in accessors:
        key = (type(accessor).__name__, accessor.name)
        if key in seen:
            continue
        seen.add(key)
        unique.append(accessor)
    return tuple(unique)


# =========================================================================
# WHOLE-REPOSITORY EMISSION
# =========================================================================


@dataclass
class EmissionResult:
    artifacts: List[Artifact]
    plan: OutputPlan
    usage: FieldUsage
    index: SchemaIndex


def emit_artifacts(
    repository: Repository,
    config: Optional[GeneratorConfig] = None,
    registry: SessionLayerRegistry = DEFAULT_REGISTRY,
) -> EmissionResult:
    """
    Resolve a repository and describe every artifact to generate.

    Artifacts are returned in a fixed order: fields, general groups,
    session-exclusive groups, components, application messages, session
    messages, base message, factory, cracker. Repeated declarations of
    the same id (or message name and scenario) are emitted once, from the
    first declaration.
    """
    config = config or GeneratorConfig()
    index = build_index(repository)
    fields = _first_declarations(repository.fields, lambda f: f.id)
    groups = _first_declarations(repository.groups, lambda g: g.id)
    components = _first_declarations(repository.components, lambda c: c.id)
    messages = _first_declarations(repository.messages, lambda m: (m.name, m.scenario))

    application_messages, session_messages = partition_messages(messages, registry)
    general_groups, session_groups = partition_groups(groups, registry)
    usage = resolve_field_usage(
        application_messages, session_messages, index, config.include_header_trailer, registry
    )
    plan = plan_output(config, repository.version)
    emitter = ArtifactEmitter(index, plan, registry)

    artifacts: List[Artifact] = []

    for fld in fields:
        if config.exclude_session_layer and fld.id not in usage.application_field_ids:
            continue
        artifacts.append(emitter.emit_field(fld))

    for group in general_groups:
        artifact = emitter.emit_group(group, plan.component_package)
        if artifact is not None:
            artifacts.append(artifact)

    if config.emit_session_layer:
        for group in session_groups:
            artifact = emitter.emit_group(group, plan.session_component_package)
            if artifact is not None:
                artifacts.append(artifact)

    for component in components:
        if registry.is_header_or_trailer(component.id) and not config.emit_base_message_class:
            continue
        artifacts.append(emitter.emit_component(component, plan.component_package))

    for message in application_messages:
        artifacts.append(emitter.emit_message(message, plan.message_package, plan.component_package))

    if config.emit_session_layer:
        for message in session_messages:
            artifacts.append(
                emitter.emit_message(message, plan.session_message_package, plan.session_component_package)
            )

    if config.emit_base_message_class:
        artifacts.append(emitter.emit_message_base(repository.version))

    artifacts.append(emitter.emit_message_factory(application_messages))
    artifacts.append(emitter.emit_message_cracker(application_messages))

    return EmissionResult(artifacts=artifacts, plan=plan, usage=usage, index=index)


__all__ = [
    "Accessor",
    "Artifact",
    "ArtifactEmitter",
    "CodeConstant",
    "ComponentAccessor",
    "ComponentArtifact",
    "ConstantType",
    "EmissionResult",
    "FieldAccessor",
    "FieldArtifact",
    "FieldKind",
    "GroupCase",
    "GroupUnit",
    "MessageArtifact",
    "MessageBaseArtifact",
    "MessageCrackerArtifact",
    "MessageFactoryArtifact",
    "MessageGroupCases",
    "ORDER_SENTINEL",
    "begin_string_for",
    "code_constants",
    "emit_artifacts",
    "field_kind",
    "message_class_name",
]
