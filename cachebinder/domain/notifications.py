"""Domain notifications published after a completed write.

Four families carry the payload shapes; concrete subclasses pin ``kind`` and
are the topics the binder subscribes to on the event bus.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict

from cachebinder.domain.models import (
    ContentTypeChange,
    EntityKind,
    EntityRef,
    TreeChange,
    UserGroupWithUsers,
)


class ChangeKind(StrEnum):
    SAVED = "saved"
    DELETED = "deleted"
    TREE_CHANGED = "tree_changed"
    STRUCTURE_CHANGED = "structure_changed"


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    change: ClassVar[ChangeKind]

    kind: EntityKind


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------


class EntitySaved(Notification):
    """Fired when one or more entities of ``kind`` are saved."""

    change: ClassVar[ChangeKind] = ChangeKind.SAVED

    entities: tuple[EntityRef, ...] = ()


class EntityDeleted(Notification):
    """Fired when one or more entities of ``kind`` are deleted."""

    change: ClassVar[ChangeKind] = ChangeKind.DELETED

    entities: tuple[EntityRef, ...] = ()


class TreeChanged(Notification):
    """Fired for any change to a content or media tree."""

    change: ClassVar[ChangeKind] = ChangeKind.TREE_CHANGED

    changes: tuple[TreeChange, ...] = ()


class ContentTypeChanged(Notification):
    """Fired when a content, media or member type structure changes."""

    change: ClassVar[ChangeKind] = ChangeKind.STRUCTURE_CHANGED

    changes: tuple[ContentTypeChange, ...] = ()


# ---------------------------------------------------------------------------
# Concrete variants
# ---------------------------------------------------------------------------


class DataTypeSaved(EntitySaved):
    kind: Literal[EntityKind.DATA_TYPE] = EntityKind.DATA_TYPE


class DataTypeDeleted(EntityDeleted):
    kind: Literal[EntityKind.DATA_TYPE] = EntityKind.DATA_TYPE


class DictionaryItemSaved(EntitySaved):
    kind: Literal[EntityKind.DICTIONARY_ITEM] = EntityKind.DICTIONARY_ITEM


class DictionaryItemDeleted(EntityDeleted):
    kind: Literal[EntityKind.DICTIONARY_ITEM] = EntityKind.DICTIONARY_ITEM


class DomainSaved(EntitySaved):
    kind: Literal[EntityKind.DOMAIN] = EntityKind.DOMAIN


class DomainDeleted(EntityDeleted):
    kind: Literal[EntityKind.DOMAIN] = EntityKind.DOMAIN


class LanguageSaved(EntitySaved):
    kind: Literal[EntityKind.LANGUAGE] = EntityKind.LANGUAGE


class LanguageDeleted(EntityDeleted):
    kind: Literal[EntityKind.LANGUAGE] = EntityKind.LANGUAGE


class MacroSaved(EntitySaved):
    kind: Literal[EntityKind.MACRO] = EntityKind.MACRO


class MacroDeleted(EntityDeleted):
    kind: Literal[EntityKind.MACRO] = EntityKind.MACRO


class MemberSaved(EntitySaved):
    kind: Literal[EntityKind.MEMBER] = EntityKind.MEMBER


class MemberDeleted(EntityDeleted):
    kind: Literal[EntityKind.MEMBER] = EntityKind.MEMBER


class MemberGroupSaved(EntitySaved):
    kind: Literal[EntityKind.MEMBER_GROUP] = EntityKind.MEMBER_GROUP


class MemberGroupDeleted(EntityDeleted):
    kind: Literal[EntityKind.MEMBER_GROUP] = EntityKind.MEMBER_GROUP


class PublicAccessEntrySaved(EntitySaved):
    kind: Literal[EntityKind.PUBLIC_ACCESS_ENTRY] = EntityKind.PUBLIC_ACCESS_ENTRY


class PublicAccessEntryDeleted(EntityDeleted):
    kind: Literal[EntityKind.PUBLIC_ACCESS_ENTRY] = EntityKind.PUBLIC_ACCESS_ENTRY


class RelationTypeSaved(EntitySaved):
    kind: Literal[EntityKind.RELATION_TYPE] = EntityKind.RELATION_TYPE


class RelationTypeDeleted(EntityDeleted):
    kind: Literal[EntityKind.RELATION_TYPE] = EntityKind.RELATION_TYPE


class TemplateSaved(EntitySaved):
    kind: Literal[EntityKind.TEMPLATE] = EntityKind.TEMPLATE


class TemplateDeleted(EntityDeleted):
    kind: Literal[EntityKind.TEMPLATE] = EntityKind.TEMPLATE


class UserSaved(EntitySaved):
    kind: Literal[EntityKind.USER] = EntityKind.USER


class UserDeleted(EntityDeleted):
    kind: Literal[EntityKind.USER] = EntityKind.USER


class UserGroupWithUsersSaved(EntitySaved):
    """A user group save carries the group's user assignments as well."""

    kind: Literal[EntityKind.USER_GROUP] = EntityKind.USER_GROUP

    entities: tuple[UserGroupWithUsers, ...] = ()


class UserGroupDeleted(EntityDeleted):
    kind: Literal[EntityKind.USER_GROUP] = EntityKind.USER_GROUP


class ContentTreeChanged(TreeChanged):
    kind: Literal[EntityKind.CONTENT] = EntityKind.CONTENT


class MediaTreeChanged(TreeChanged):
    kind: Literal[EntityKind.MEDIA] = EntityKind.MEDIA


class ContentTypeStructureChanged(ContentTypeChanged):
    kind: Literal[EntityKind.CONTENT_TYPE] = EntityKind.CONTENT_TYPE


class MediaTypeStructureChanged(ContentTypeChanged):
    kind: Literal[EntityKind.MEDIA_TYPE] = EntityKind.MEDIA_TYPE


class MemberTypeStructureChanged(ContentTypeChanged):
    kind: Literal[EntityKind.MEMBER_TYPE] = EntityKind.MEMBER_TYPE
