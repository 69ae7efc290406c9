"""Domain models for cache invalidation."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class EntityKind(StrEnum):
    CONTENT = "content"
    MEDIA = "media"
    CONTENT_TYPE = "content_type"
    MEDIA_TYPE = "media_type"
    MEMBER_TYPE = "member_type"
    DATA_TYPE = "data_type"
    DICTIONARY_ITEM = "dictionary_item"
    DOMAIN = "domain"
    LANGUAGE = "language"
    MEMBER = "member"
    MEMBER_GROUP = "member_group"
    PUBLIC_ACCESS_ENTRY = "public_access_entry"
    USER = "user"
    USER_GROUP = "user_group"
    MACRO = "macro"
    TEMPLATE = "template"
    RELATION_TYPE = "relation_type"


class CacheRegion(StrEnum):
    CONTENT = "Content"
    MEDIA = "Media"
    CONTENT_TYPE = "ContentType"
    DATA_TYPE = "DataType"
    DICTIONARY = "Dictionary"
    DOMAIN = "Domain"
    LANGUAGE = "Language"
    MEMBER = "Member"
    MEMBER_GROUP = "MemberGroup"
    PUBLIC_ACCESS = "PublicAccess"
    USER = "User"
    USER_GROUP = "UserGroup"
    MACRO = "Macro"
    TEMPLATE = "Template"
    RELATION_TYPE = "RelationType"


class CacheOperation(StrEnum):
    REFRESH = "refresh"
    REMOVE = "remove"
    REFRESH_BRANCH = "refresh_branch"
    REFRESH_ALL = "refresh_all"


class TreeChangeType(StrEnum):
    REFRESH_NODE = "refresh_node"
    REFRESH_BRANCH = "refresh_branch"
    REMOVE = "remove"
    REFRESH_ALL = "refresh_all"


class ContentTypeChangeType(StrEnum):
    CREATE = "create"
    REFRESH_MAIN = "refresh_main"
    REFRESH_OTHER = "refresh_other"
    REMOVE = "remove"


# ---------------------------------------------------------------------------
# Payload records
# ---------------------------------------------------------------------------


class EntityRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int


class UserGroupWithUsers(BaseModel):
    """A saved user group together with the users assigned to it."""

    model_config = ConfigDict(frozen=True)

    user_group: EntityRef
    user_ids: tuple[int, ...] = ()

    @property
    def id(self) -> int:
        return self.user_group.id


class TreeChange(BaseModel):
    """One affected subtree root in a content or media tree."""

    model_config = ConfigDict(frozen=True)

    item: EntityRef
    change_type: TreeChangeType


class ContentTypeChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: EntityRef
    change_type: ContentTypeChangeType = ContentTypeChangeType.REFRESH_MAIN


# ---------------------------------------------------------------------------
# Outbound commands
# ---------------------------------------------------------------------------


class CacheCommand(BaseModel):
    """An invalidation instruction for one cache region.

    ``keys`` holds a single key for node commands, every key of the batch for
    batched commands, and nothing for ``refresh_all``.
    """

    model_config = ConfigDict(frozen=True)

    region: CacheRegion
    operation: CacheOperation
    keys: tuple[int, ...] = ()

    @property
    def key(self) -> int | None:
        return self.keys[0] if len(self.keys) == 1 else None
