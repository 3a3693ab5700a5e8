"""
Session Partitioner: splits messages and groups into application-layer and
session-layer subsets.

Messages carry a category attribute, groups do not. Which groups belong
exclusively to the session layer is therefore declared in an explicit
registry rather than derived from the schema.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Tuple

from qfjgen.model import Group, Message


SESSION_CATEGORY = "Session"

COMPONENT_ID_STANDARD_HEADER = 1024
COMPONENT_ID_STANDARD_TRAILER = 1025
GRP_HOP_GRP = 2085
GRP_MSG_TYPE_GRP = 2098


@dataclass(frozen=True)
class SessionLayerRegistry:
    """
    Identifiers that mark the session (FIXT) layer of a repository.

    Properties:
        session_category: Message category value of housekeeping messages
        session_group_ids: Groups used only by session messages
        header_component_id: StandardHeader component
        trailer_component_id: StandardTrailer component
    """

    session_category: str = SESSION_CATEGORY
    session_group_ids: FrozenSet[int] = frozenset({GRP_HOP_GRP, GRP_MSG_TYPE_GRP})
    header_component_id: int = COMPONENT_ID_STANDARD_HEADER
    trailer_component_id: int = COMPONENT_ID_STANDARD_TRAILER

    @property
    def header_trailer_ids(self) -> FrozenSet[int]:
        return frozenset({self.header_component_id, self.trailer_component_id})

    def is_header_or_trailer(self, component_id: int) -> bool:
        return component_id in self.header_trailer_ids

    def is_session_message(self, message: Message) -> bool:
        return message.category == self.session_category

    def is_session_group(self, group: Group) -> bool:
        return group.id in self.session_group_ids


DEFAULT_REGISTRY = SessionLayerRegistry()


def partition_messages(
    messages: List[Message], registry: SessionLayerRegistry = DEFAULT_REGISTRY
) -> Tuple[List[Message], List[Message]]:
    """
    Split messages into (application_messages, session_messages).

    A message is a session message iff its category equals the registry's
    session category exactly. Relative order is preserved in both lists and
    the input list is left untouched.
    """
    application: List[Message] = []
    session: List[Message] = []
    for message in messages:
        if registry.is_session_message(message):
            session.append(message)
        else:
            application.append(message)
    return application, session


def partition_groups(
    groups: List[Group], registry: SessionLayerRegistry = DEFAULT_REGISTRY
) -> Tuple[List[Group], List[Group]]:
    """Split groups into (general_groups, session_exclusive_groups)."""
    general: List[Group] = []
    session_exclusive: List[Group] = []
    for group in groups:
        if registry.is_session_group(group):
            session_exclusive.append(group)
        else:
            general.append(group)
    return general, session_exclusive


__all__ = [
    "SessionLayerRegistry",
    "DEFAULT_REGISTRY",
    "SESSION_CATEGORY",
    "COMPONENT_ID_STANDARD_HEADER",
    "COMPONENT_ID_STANDARD_TRAILER",
    "GRP_HOP_GRP",
    "GRP_MSG_TYPE_GRP",
    "partition_messages",
    "partition_groups",
]
