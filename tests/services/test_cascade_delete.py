"""Cascading story deletion — content deletes the story, then asks discussion
to drop its comments over HTTP.

Invariants:
    - Successful delete: story gone, comments gone, 200
    - Unknown story: 404 and the discussion service is never called
    - Ownership enforced and caller is not the author: 403, nothing deleted, no call
    - Discussion unreachable or failing: still 200, story gone, comments orphaned
    - CASCADE_STRICT: the same failure answers 502, story still gone
    - A comment created after the cascade ran stays behind (no transaction spans both)
    - The bulk delete endpoint is idempotent

Design Decisions:
    - Success path goes through the real discussion app via ASGITransport,
      failure paths swap in an httpx.MockTransport
"""

from uuid import UUID, uuid4

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from bugle.core.domain_types import Role
from bugle.infrastructure.discussion_client import DiscussionClient
from bugle.models.comment import Comment
from bugle.models.story import Story, StoryCategory

DISCUSSION_BASE_URL = "http://discussion"


@pytest.fixture
async def story_with_comments(content_client, act_as, test_session_factory):
    """One story (created through the API) with three comments."""
    act_as(content_client, "peter", "author")
    res = await content_client.post(
        "/stories", json={"title": "t", "body": "b", "categories": ["city"]},
    )
    story_id = UUID(res.json()["story_id"])
    async with test_session_factory() as session:
        for i in range(3):
            session.add(Comment(story_id=story_id, commenter="mj", text=f"c{i}"))
        await session.commit()
    return story_id


async def _count(session_factory, model, **filters) -> int:
    async with session_factory() as session:
        query = select(func.count()).select_from(model)
        for column, value in filters.items():
            query = query.where(getattr(model, column) == value)
        return (await session.execute(query)).scalar_one()


async def test_delete_removes_story_and_comments(
    content_client, story_with_comments, test_session_factory,
):
    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 200
    assert res.json()["message"] == "Story and associated comments deleted successfully"
    assert await _count(test_session_factory, Story) == 0
    assert await _count(test_session_factory, StoryCategory) == 0
    assert await _count(test_session_factory, Comment) == 0


async def test_delete_leaves_other_stories_comments(
    content_client, story_with_comments, test_session_factory,
):
    other = uuid4()
    async with test_session_factory() as session:
        session.add(Comment(story_id=other, commenter="mj", text="elsewhere"))
        await session.commit()

    await content_client.delete(f"/stories/{story_with_comments}")

    assert await _count(test_session_factory, Comment, story_id=other) == 1


async def test_delete_unknown_story_skips_cascade(content_app, content_client, act_as):
    calls = []
    content_app.state.discussion_client = DiscussionClient(
        DISCUSSION_BASE_URL,
        transport=httpx.MockTransport(
            lambda request: calls.append(request) or httpx.Response(200, json={}),
        ),
    )
    act_as(content_client, "peter", "author")

    res = await content_client.delete(f"/stories/{uuid4()}")

    assert res.status_code == 404
    assert calls == []


async def test_reader_cannot_delete(content_client, act_as, story_with_comments, test_session_factory):
    act_as(content_client, "mj", "reader")

    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 403
    assert await _count(test_session_factory, Story) == 1
    assert await _count(test_session_factory, Comment) == 3


async def test_unreachable_discussion_still_returns_200(
    content_client, story_with_comments, unreachable_discussion, test_session_factory,
):
    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 200
    assert len(unreachable_discussion) == 1
    assert await _count(test_session_factory, Story) == 0
    # Orphans: nothing removed them
    assert await _count(test_session_factory, Comment) == 3


async def test_failing_discussion_still_returns_200(
    content_app, content_client, story_with_comments, test_session_factory,
):
    content_app.state.discussion_client = DiscussionClient(
        DISCUSSION_BASE_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )

    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 200
    assert await _count(test_session_factory, Story) == 0
    assert await _count(test_session_factory, Comment) == 3


async def test_strict_cascade_reports_502_but_keeps_delete(
    content_app, content_client, story_with_comments,
    unreachable_discussion, test_session_factory, test_settings,
):
    content_app.state.settings = test_settings.model_copy(update={"cascade_strict": True})

    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 502
    assert res.json()["error"]["code"] == "CASCADE_FAILED"
    assert await _count(test_session_factory, Story) == 0
    assert await _count(test_session_factory, Comment) == 3


async def test_strict_cascade_success_returns_200(
    content_app, content_client, story_with_comments, test_session_factory, test_settings,
):
    content_app.state.settings = test_settings.model_copy(update={"cascade_strict": True})

    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 200
    assert await _count(test_session_factory, Comment) == 0


async def test_comment_created_after_cascade_is_orphaned(
    content_app, content_client, discussion_app, story_with_comments,
    seed_user, act_as, test_session_factory,
):
    """Simulates a commenter racing the delete: their comment lands after the bulk delete."""
    await seed_user("mj", Role.READER)

    async def forward_then_comment(request: httpx.Request) -> httpx.Response:
        async with AsyncClient(
            transport=ASGITransport(app=discussion_app), base_url=DISCUSSION_BASE_URL,
        ) as inner:
            forwarded = await inner.request(request.method, request.url.path)
            act_as(inner, "mj", "reader")
            late = await inner.post(
                "/comments", json={"storyId": str(story_with_comments), "text": "too late"},
            )
            assert late.status_code == 201
        return httpx.Response(forwarded.status_code, json=forwarded.json())

    content_app.state.discussion_client = DiscussionClient(
        DISCUSSION_BASE_URL, transport=httpx.MockTransport(forward_then_comment),
    )

    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 200
    assert await _count(test_session_factory, Story) == 0
    assert await _count(test_session_factory, Comment, story_id=story_with_comments) == 1


async def test_bulk_delete_is_idempotent(discussion_client, test_session_factory):
    story_id = uuid4()
    async with test_session_factory() as session:
        session.add_all([
            Comment(story_id=story_id, commenter="mj", text="a"),
            Comment(story_id=story_id, commenter="mj", text="b"),
        ])
        await session.commit()

    first = await discussion_client.delete(f"/comments/story/{story_id}")
    second = await discussion_client.delete(f"/comments/story/{story_id}")

    assert first.json() == {"message": "Comments deleted successfully", "deleted_count": 2}
    assert second.json()["deleted_count"] == 0


async def test_full_publish_comment_delete_scenario(
    identity_client, content_client, discussion_client,
):
    """Register, log in, publish, comment, delete: the story's discussion is empty."""
    await identity_client.post(
        "/users", json={"username": "u1", "password": "p", "role": "author"},
    )
    login = await identity_client.post("/login", json={"username": "u1", "password": "p"})
    assert login.json()["role"] == "author"
    cookie = login.cookies["user_data"]
    content_client.cookies.set("user_data", cookie)
    discussion_client.cookies.set("user_data", cookie)

    story_id = (await content_client.post(
        "/stories", json={"title": "T", "body": "B"},
    )).json()["story_id"]
    commented = await discussion_client.post(
        "/comments", json={"storyId": story_id, "text": "hi"},
    )
    assert commented.status_code == 201

    deleted = await content_client.delete(f"/stories/{story_id}")

    assert deleted.status_code == 200
    assert (await content_client.get(f"/stories/{story_id}")).status_code == 404
    assert (await discussion_client.get(f"/comments/{story_id}")).json() == []


async def test_non_owner_delete_refused_before_cascade(
    content_app, content_client, act_as, story_with_comments,
    test_session_factory, test_settings,
):
    calls = []
    content_app.state.discussion_client = DiscussionClient(
        DISCUSSION_BASE_URL,
        transport=httpx.MockTransport(
            lambda request: calls.append(request) or httpx.Response(200, json={}),
        ),
    )
    content_app.state.settings = test_settings.model_copy(update={"enforce_ownership": True})
    act_as(content_client, "jjj", "author")

    res = await content_client.delete(f"/stories/{story_with_comments}")

    assert res.status_code == 403
    assert calls == []
    assert await _count(test_session_factory, Story) == 1
    assert await _count(test_session_factory, Comment) == 3
