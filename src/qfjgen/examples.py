"""
Example repository builder for demos and tests.

Builds a small FIX.Latest-style repository containing:
    - StandardHeader / StandardTrailer components
    - the session-only groups HopGrp and MsgTypeGrp
    - session messages Heartbeat, Logon, Logout
    - application messages NewOrderSingle (base and a Limit scenario)
      and ExecutionReport
    - a nested repeating group (PartiesGrp → PtysSubGrp)
    - code sets of each declared type (char, int, String, Boolean)
"""
from qfjgen.model import (
    Code,
    CodeSet,
    Component,
    ComponentRef,
    Field,
    FieldRef,
    Group,
    GroupRef,
    Message,
    Repository,
)
from qfjgen.partition import (
    COMPONENT_ID_STANDARD_HEADER,
    COMPONENT_ID_STANDARD_TRAILER,
    GRP_HOP_GRP,
    GRP_MSG_TYPE_GRP,
)

COMPONENT_ID_INSTRUMENT = 1003
COMPONENT_ID_PARTIES = 1012
GRP_PARTIES_GRP = 1012
GRP_PTYS_SUB_GRP = 1013

EXAMPLE_VERSION = "FIX.Latest_EP269"


def _fields() -> list:
    return [
        # Header / trailer
        Field(8, "BeginString", "String"),
        Field(9, "BodyLength", "Length"),
        Field(35, "MsgType", "MsgTypeCodeSet"),
        Field(49, "SenderCompID", "String"),
        Field(56, "TargetCompID", "String"),
        Field(34, "MsgSeqNum", "SeqNum"),
        Field(52, "SendingTime", "UTCTimestamp"),
        Field(10, "CheckSum", "String"),
        Field(627, "NoHops", "NumInGroup"),
        Field(628, "HopCompID", "String"),
        Field(629, "HopSendingTime", "UTCTimestamp"),
        # Session
        Field(98, "EncryptMethod", "EncryptMethodCodeSet"),
        Field(108, "HeartBtInt", "int"),
        Field(141, "ResetSeqNumFlag", "ResetSeqNumFlagCodeSet"),
        Field(112, "TestReqID", "String"),
        Field(384, "NoMsgTypes", "NumInGroup"),
        Field(372, "RefMsgType", "String"),
        Field(385, "MsgDirection", "MsgDirectionCodeSet"),
        # Shared by both layers
        Field(58, "Text", "String"),
        # Application
        Field(11, "ClOrdID", "String"),
        Field(37, "OrderID", "String"),
        Field(17, "ExecID", "String"),
        Field(150, "ExecType", "ExecTypeCodeSet"),
        Field(54, "Side", "SideCodeSet"),
        Field(38, "OrderQty", "Qty"),
        Field(44, "Price", "Price"),
        Field(6, "AvgPx", "Price"),
        Field(14, "CumQty", "Qty"),
        Field(40, "OrdType", "OrdTypeCodeSet"),
        Field(60, "TransactTime", "UTCTimestamp"),
        Field(75, "TradeDate", "LocalMktDate"),
        Field(55, "Symbol", "String"),
        Field(453, "NoPartyIDs", "NumInGroup"),
        Field(448, "PartyID", "String"),
        Field(452, "PartyRole", "PartyRoleCodeSet"),
        Field(802, "NoPartySubIDs", "NumInGroup"),
        Field(523, "PartySubID", "String"),
    ]


def _code_sets() -> list:
    return [
        CodeSet("MsgTypeCodeSet", "String", [
            Code("Heartbeat", "0"),
            Code("Logon", "A"),
            Code("Logout", "5"),
            Code("NewOrderSingle", "D"),
            Code("ExecutionReport", "8"),
        ]),
        CodeSet("EncryptMethodCodeSet", "int", [
            Code("None", "0"),
            Code("PKCS", "1"),
        ]),
        CodeSet("ResetSeqNumFlagCodeSet", "Boolean", [
            Code("No", "N"),
            Code("Yes", "Y"),
        ]),
        CodeSet("MsgDirectionCodeSet", "char", [
            Code("Receive", "R"),
            Code("Send", "S"),
        ]),
        CodeSet("SideCodeSet", "char", [
            Code("Buy", "1"),
            Code("Sell", "2"),
            Code("SellShort", "5"),
        ]),
        CodeSet("OrdTypeCodeSet", "char", [
            Code("Market", "1"),
            Code("Limit", "2"),
        ]),
        CodeSet("ExecTypeCodeSet", "char", [
            Code("New", "0"),
            Code("PartialFill", "1"),
            Code("Trade", "F"),
        ]),
        CodeSet("PartyRoleCodeSet", "int", [
            Code("ExecutingFirm", "1"),
            Code("ClearingFirm", "4"),
        ]),
    ]


def _components() -> list:
    return [
        Component(COMPONENT_ID_STANDARD_HEADER, "StandardHeader", [
            FieldRef(8), FieldRef(9), FieldRef(35), FieldRef(49), FieldRef(56),
            FieldRef(34), FieldRef(52), GroupRef(GRP_HOP_GRP),
        ]),
        Component(COMPONENT_ID_STANDARD_TRAILER, "StandardTrailer", [FieldRef(10)]),
        Component(COMPONENT_ID_INSTRUMENT, "Instrument", [FieldRef(55)]),
        Component(COMPONENT_ID_PARTIES, "Parties", [GroupRef(GRP_PARTIES_GRP)]),
    ]


def _groups() -> list:
    return [
        Group(GRP_HOP_GRP, "HopGrp", 627, [FieldRef(628), FieldRef(629)]),
        Group(GRP_MSG_TYPE_GRP, "MsgTypeGrp", 384, [FieldRef(372), FieldRef(385)]),
        Group(GRP_PARTIES_GRP, "PartiesGrp", 453, [
            FieldRef(448), FieldRef(452), GroupRef(GRP_PTYS_SUB_GRP),
        ]),
        Group(GRP_PTYS_SUB_GRP, "PtysSubGrp", 802, [FieldRef(523)]),
    ]


def _framed(*members) -> list:
    """Wrap body members in StandardHeader / StandardTrailer."""
    return [
        ComponentRef(COMPONENT_ID_STANDARD_HEADER),
        *members,
        ComponentRef(COMPONENT_ID_STANDARD_TRAILER),
    ]


def _messages() -> list:
    return [
        Message("Heartbeat", "0", "Session", members=_framed(FieldRef(112))),
        Message("Logon", "A", "Session", members=_framed(
            FieldRef(98), FieldRef(108), FieldRef(141), GroupRef(GRP_MSG_TYPE_GRP),
        )),
        Message("Logout", "5", "Session", members=_framed(FieldRef(58))),
        Message("NewOrderSingle", "D", "SingleGeneralOrderHandling", members=_framed(
            FieldRef(11), ComponentRef(COMPONENT_ID_PARTIES), ComponentRef(COMPONENT_ID_INSTRUMENT),
            FieldRef(54), FieldRef(60), FieldRef(38), FieldRef(40), FieldRef(44),
        )),
        Message("NewOrderSingle", "D", "SingleGeneralOrderHandling", scenario="Limit", members=_framed(
            FieldRef(11), ComponentRef(COMPONENT_ID_INSTRUMENT), FieldRef(54), FieldRef(38), FieldRef(44),
        )),
        Message("ExecutionReport", "8", "SingleGeneralOrderHandling", members=_framed(
            FieldRef(37), FieldRef(17), FieldRef(150), FieldRef(11), GroupRef(GRP_PARTIES_GRP),
            ComponentRef(COMPONENT_ID_INSTRUMENT), FieldRef(54), FieldRef(14), FieldRef(6),
            FieldRef(75), FieldRef(58),
        )),
    ]


def build_example_repository(version: str = EXAMPLE_VERSION) -> Repository:
    return Repository(
        name="FIX.Latest",
        version=version,
        fields=_fields(),
        code_sets=_code_sets(),
        components=_components(),
        groups=_groups(),
        messages=_messages(),
    )
