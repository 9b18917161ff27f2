"""Domain Types — verifies role sets and enum values used across services."""

from uuid import uuid4

from bugle.core.domain_types import (
    COMMENTER_ROLES, DEFAULT_ROLE, EDITOR_ROLES,
    AdEventKind, CommentId, Role, ServiceName, StoryId, UserId,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert StoryId(uid) == uid
    assert CommentId(uid) == uid
    assert UserId(uid) == uid


def test_role_has_exactly_two_members():
    assert set(Role) == {Role.READER, Role.AUTHOR}


def test_new_accounts_are_readers():
    assert DEFAULT_ROLE == Role.READER


def test_only_authors_edit_everyone_comments():
    assert EDITOR_ROLES == {Role.AUTHOR}
    assert COMMENTER_ROLES == {Role.READER, Role.AUTHOR}


def test_enums_serialize_to_string():
    assert Role.AUTHOR.value == "author"
    assert ServiceName.DISCUSSION.value == "discussion"
    assert AdEventKind.INTERACTION.value == "interaction"
