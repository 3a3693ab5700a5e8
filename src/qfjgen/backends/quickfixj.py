"""
QuickFIX/J Java source renderer for emitted artifacts.

Converts an artifact description (see `qfjgen.emitter`) into the text of one
Java source file conforming to the QuickFIX/J class model:
    - fields extend quickfix.<Kind>Field
    - components and groups extend quickfix.MessageComponent
    - messages extend the version's Message class
    - MessageFactory implements quickfix.MessageFactory
    - MessageCracker dispatches on MsgType(35)
"""

from typing import Callable, Dict, List, Sequence, Type

from qfjgen.emitter import (
    Accessor,
    Artifact,
    CodeConstant,
    ComponentAccessor,
    ComponentArtifact,
    ConstantType,
    FieldAccessor,
    FieldArtifact,
    FieldKind,
    GroupUnit,
    MessageArtifact,
    MessageBaseArtifact,
    MessageCrackerArtifact,
    MessageFactoryArtifact,
    TEMPORAL_KINDS,
)

ARTIFACT_FILE_EXTENSION = ".java"
FILE_HEADER = "/* Generated Java Source File */"
SERIALIZATION_VERSION = 552892318
SPACES_PER_LEVEL = 2


def _indent(level: int) -> str:
    return " " * (level * SPACES_PER_LEVEL)


def _escape_java_string(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')


def _escape_java_char(s: str) -> str:
    if s in ("\\", "'"):
        return "\\" + s
    return s


def _preamble(package: str, imports: Sequence[str]) -> List[str]:
    lines = [FILE_HEADER, f"package {package};"]
    lines.extend(f"import {name};" for name in imports)
    return lines


def _serial_version(level: int = 1) -> str:
    return f"{_indent(level)}static final long serialVersionUID = {SERIALIZATION_VERSION}L;"


def _int_array(ids: Sequence[int]) -> str:
    return "".join(f"{i}, " for i in ids)


# =========================================================================
# ACCESSORS
# =========================================================================


def _field_accessor_lines(accessor: FieldAccessor, level: int) -> List[str]:
    i1, i2 = _indent(level), _indent(level + 1)
    cls = accessor.qualified_name
    name = accessor.name
    return [
        "",
        f"{i1}public void set({cls} value) {{",
        f"{i2}setField(value);",
        f"{i1}}}",
        "",
        f"{i1}public {cls} get({cls} value) throws FieldNotFound {{",
        f"{i2}getField(value);",
        f"{i2}return value;",
        f"{i1}}}",
        "",
        f"{i1}public {cls} get{name}() throws FieldNotFound {{",
        f"{i2}return get(new {cls}());",
        f"{i1}}}",
        "",
        f"{i1}public boolean isSet({cls} field) {{",
        f"{i2}return isSetField(field);",
        f"{i1}}}",
        "",
        f"{i1}public boolean isSet{name}() {{",
        f"{i2}return isSetField({accessor.field_id});",
        f"{i1}}}",
    ]


def _component_accessor_lines(accessor: ComponentAccessor, level: int) -> List[str]:
    i1, i2 = _indent(level), _indent(level + 1)
    cls = accessor.qualified_name
    return [
        "",
        f"{i1}public void set({cls} component) {{",
        f"{i2}setComponent(component);",
        f"{i1}}}",
        "",
        f"{i1}public {cls} get({cls} component) throws FieldNotFound {{",
        f"{i2}getComponent(component);",
        f"{i2}return component;",
        f"{i1}}}",
        "",
        f"{i1}public {cls} get{accessor.name}Component() throws FieldNotFound {{",
        f"{i2}return get(new {cls}());",
        f"{i1}}}",
    ]


def _group_unit_lines(unit: GroupUnit, level: int) -> List[str]:
    i0, i1, i2 = _indent(level), _indent(level + 1), _indent(level + 2)
    lines = [
        "",
        f"{i0}public static class {unit.name} extends Group {{",
        _serial_version(level + 1),
        f"{i1}private static final int[] ORDER = {{{_int_array(unit.order[:-1])}{unit.order[-1]}}};",
        "",
        f"{i1}public {unit.name}() {{",
        f"{i2}super({unit.counter_field_id}, {unit.delimiter_field_id}, ORDER);",
        f"{i1}}}",
    ]
    lines.extend(_accessor_lines(unit.accessors, level + 1))
    lines.append(f"{i0}}}")
    return lines


def _accessor_lines(accessors: Sequence[Accessor], level: int) -> List[str]:
    lines: List[str] = []
    for accessor in accessors:
        if isinstance(accessor, FieldAccessor):
            lines.extend(_field_accessor_lines(accessor, level))
        elif isinstance(accessor, ComponentAccessor):
            lines.extend(_component_accessor_lines(accessor, level))
        elif isinstance(accessor, GroupUnit):
            lines.extend(_group_unit_lines(accessor, level))
    return lines


# =========================================================================
# FIELDS
# =========================================================================


def _constant_line(constant: CodeConstant) -> str:
    if constant.type is ConstantType.BOOLEAN:
        literal = "true" if constant.value else "false"
    elif constant.type is ConstantType.CHAR:
        literal = f"'{_escape_java_char(str(constant.value))}'"
    elif constant.type is ConstantType.INT:
        literal = str(constant.value)
    else:
        literal = f'"{_escape_java_string(str(constant.value))}"'
    return f"{_indent(1)}public static final {constant.type.value} {constant.name} = {literal};"


# Constructor parameter types per field kind
_CONSTRUCTOR_PARAMS: Dict[FieldKind, Sequence[str]] = {
    FieldKind.BOOLEAN: ("Boolean", "boolean"),
    FieldKind.CHAR: ("Character", "char"),
    FieldKind.UTC_DATE_ONLY: ("LocalDate", "String"),
    FieldKind.UTC_TIME_ONLY: ("LocalTime",),
    FieldKind.UTC_TIMESTAMP: ("LocalDateTime",),
    FieldKind.DOUBLE: ("Double", "double"),
    FieldKind.INT: ("Integer", "int"),
    FieldKind.STRING: ("String",),
}


def _field_constructor_lines(artifact: FieldArtifact) -> List[str]:
    i1, i2 = _indent(1), _indent(2)
    name, tag = artifact.class_name, artifact.field_id
    lines = ["", f"{i1}public {name}() {{", f"{i2}super({tag});", f"{i1}}}"]

    if artifact.base_kind is FieldKind.DECIMAL:
        params = [("BigDecimal", "data"), ("double", "BigDecimal.valueOf(data)")]
    else:
        params = [(p, "data") for p in _CONSTRUCTOR_PARAMS[artifact.base_kind]]

    for param_type, argument in params:
        lines.extend([
            "",
            f"{i1}public {name}({param_type} data) {{",
            f"{i2}super({tag}, {argument});",
            f"{i1}}}",
        ])
    return lines


def render_field(artifact: FieldArtifact) -> str:
    imports: List[str] = []
    if artifact.base_kind in TEMPORAL_KINDS:
        imports.extend(["java.time.LocalDate", "java.time.LocalTime", "java.time.LocalDateTime"])
    if artifact.base_kind is FieldKind.DECIMAL:
        imports.append("java.math.BigDecimal")
    imports.append(f"quickfix.{artifact.base_kind.value}")

    lines = _preamble(artifact.package, imports)
    lines.append("")
    lines.append(f"public class {artifact.class_name} extends {artifact.base_kind.value} {{")
    lines.append(_serial_version())
    lines.append("")
    lines.append(f"{_indent(1)}public static final int FIELD = {artifact.field_id};")
    for constant in artifact.constants:
        lines.append("")
        lines.append(_constant_line(constant))
    lines.extend(_field_constructor_lines(artifact))
    lines.append("}")
    return "\n".join(lines) + "\n"


# =========================================================================
# COMPONENTS, GROUPS, MESSAGES
# =========================================================================


def render_component(artifact: ComponentArtifact) -> str:
    i1, i2 = _indent(1), _indent(2)
    lines = _preamble(artifact.package, ["quickfix.FieldNotFound", "quickfix.Group"])
    lines.append("")
    lines.append(f"public class {artifact.class_name} extends quickfix.MessageComponent {{")
    lines.append(_serial_version())
    lines.append("")
    lines.append(f'{i1}public static final String MSGTYPE = "";')
    lines.append(f"{i1}private int[] componentFields = {{{_int_array(artifact.component_fields)}}};")
    lines.append(f"{i1}protected int[] getFields() {{ return componentFields; }}")
    lines.append(f"{i1}private int[] componentGroups = {{{_int_array(artifact.group_fields)}}};")
    lines.append(f"{i1}protected int[] getGroupFields() {{ return componentGroups; }}")
    lines.extend(["", f"{i1}public {artifact.class_name}() {{", f"{i2}super();", f"{i1}}}"])
    lines.extend(_accessor_lines(artifact.accessors, 1))
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_message(artifact: MessageArtifact) -> str:
    i1, i2 = _indent(1), _indent(2)
    lines = _preamble(artifact.package, ["quickfix.FieldNotFound", "quickfix.field.*", "quickfix.Group"])
    lines.append("")
    lines.append(f"public class {artifact.class_name} extends Message {{")
    lines.append(_serial_version())
    lines.append("")
    lines.append(f'{i1}public static final String MSGTYPE = "{_escape_java_string(artifact.msg_type)}";')
    lines.extend([
        "",
        f"{i1}public {artifact.class_name}() {{",
        f"{i2}super();",
        f"{i2}getHeader().setField(new quickfix.field.MsgType(MSGTYPE));",
        f"{i1}}}",
    ])
    lines.extend(_accessor_lines(artifact.accessors, 1))
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_message_base(artifact: MessageBaseArtifact) -> str:
    i1, i2 = _indent(1), _indent(2)
    lines = _preamble(artifact.package, ["quickfix.field.*"])
    lines.append("")
    lines.append(f"public class {artifact.class_name} extends quickfix.Message {{")
    lines.append(_serial_version())
    lines.extend([
        "",
        f"{i1}public {artifact.class_name}() {{",
        f"{i2}this(null);",
        f"{i1}}}",
        "",
        f"{i1}protected {artifact.class_name}(int[] fieldOrder) {{",
        f"{i2}super(fieldOrder);",
        f"{i2}header = new Header(this);",
        f"{i2}trailer = new Trailer();",
        f'{i2}getHeader().setField(new BeginString("{_escape_java_string(artifact.begin_string)}"));',
        f"{i1}}}",
        "",
        f"{i1}public static class Header extends quickfix.Message.Header {{",
        _serial_version(2),
        "",
        f"{i2}public Header(Message msg) {{",
        f"{i2}}}",
        f"{i1}}}",
        "}",
    ])
    return "\n".join(lines) + "\n"


# =========================================================================
# FACTORY AND CRACKER
# =========================================================================


def render_message_factory(artifact: MessageFactoryArtifact) -> str:
    i1, i2, i3, i4 = _indent(1), _indent(2), _indent(3), _indent(4)
    package = artifact.package
    lines = _preamble(package, ["quickfix.Message", "quickfix.Group"])
    lines.append("")
    lines.append(f"public class {artifact.class_name} implements quickfix.MessageFactory {{")

    lines.append("")
    lines.append(f"{i1}public Message create(String beginString, String msgType) {{")
    lines.append(f"{i2}switch (msgType) {{")
    for name in artifact.message_names:
        lines.append(f"{i2}case {package}.{name}.MSGTYPE:")
        lines.append(f"{i3}return new {package}.{name}();")
    lines.append(f"{i2}}}")
    lines.append(f"{i2}return new {artifact.default_message_class}();")
    lines.append(f"{i1}}}")

    lines.append("")
    lines.append(f"{i1}public Group create(String beginString, String msgType, int correspondingFieldID) {{")
    lines.append(f"{i2}switch (msgType) {{")
    for message_cases in artifact.group_cases:
        lines.append(f"{i2}case {package}.{message_cases.message_name}.MSGTYPE:")
        lines.append(f"{i3}switch (correspondingFieldID) {{")
        for case in message_cases.cases:
            lines.append(f"{i3}case quickfix.field.{case.counter_field_name}.FIELD:")
            lines.append(f"{i4}return new {case.qualified_name}();")
        lines.append(f"{i3}}}")
        lines.append(f"{i3}break;")
    lines.append(f"{i2}}}")
    lines.append(f"{i2}return null;")
    lines.append(f"{i1}}}")
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_message_cracker(artifact: MessageCrackerArtifact) -> str:
    i1, i2, i3 = _indent(1), _indent(2), _indent(3)
    throws = "throws FieldNotFound, UnsupportedMessageType, IncorrectTagValue"
    lines = _preamble(artifact.package, ["quickfix.*", "quickfix.field.*"])
    lines.append("")
    lines.append(f"public class {artifact.class_name} {{")

    lines.extend([
        "",
        f"{i1}public void onMessage(quickfix.Message message, SessionID sessionID) {throws} {{",
        f"{i2}throw new UnsupportedMessageType();",
        f"{i1}}}",
    ])
    for name in artifact.message_names:
        lines.extend([
            "",
            f"{i1}/**",
            f"{i1} * Callback for {name} message.",
            f"{i1} */",
            f"{i1}public void onMessage({name} message, SessionID sessionID) {throws} {{",
            f"{i2}throw new UnsupportedMessageType();",
            f"{i1}}}",
        ])

    method = artifact.crack_method_name
    lines.extend([
        "",
        f"{i1}public void crack(quickfix.Message message, SessionID sessionID)",
        f"{i2}throws UnsupportedMessageType, FieldNotFound, IncorrectTagValue {{",
        f"{i2}{method}((Message) message, sessionID);",
        f"{i1}}}",
        "",
        f"{i1}public void {method}(Message message, SessionID sessionID)",
        f"{i2}throws UnsupportedMessageType, FieldNotFound, IncorrectTagValue {{",
        f"{i2}String type = message.getHeader().getString(MsgType.FIELD);",
        f"{i2}switch (type) {{",
    ])
    for name in artifact.message_names:
        lines.append(f"{i2}case {name}.MSGTYPE:")
        lines.append(f"{i3}onMessage(({name}) message, sessionID);")
        lines.append(f"{i3}break;")
    lines.extend([
        f"{i2}default:",
        f"{i3}onMessage(message, sessionID);",
        f"{i2}}}",
        f"{i1}}}",
        "}",
    ])
    return "\n".join(lines) + "\n"


_RENDERERS: Dict[Type[Artifact], Callable[..., str]] = {
    FieldArtifact: render_field,
    ComponentArtifact: render_component,
    MessageArtifact: render_message,
    MessageBaseArtifact: render_message_base,
    MessageFactoryArtifact: render_message_factory,
    MessageCrackerArtifact: render_message_cracker,
}


def render_artifact(artifact: Artifact) -> str:
    """
    Render any artifact as Java source text.

    Raises:
        TypeError: If the artifact type has no renderer
    """
    renderer = _RENDERERS.get(type(artifact))
    if renderer is None:
        raise TypeError(f"Unsupported artifact type: {type(artifact).__name__}")
    return renderer(artifact)


__all__ = [
    "ARTIFACT_FILE_EXTENSION",
    "render_artifact",
    "render_component",
    "render_field",
    "render_message",
    "render_message_base",
    "render_message_cracker",
    "render_message_factory",
]
