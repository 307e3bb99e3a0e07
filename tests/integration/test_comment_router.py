"""
File: tests/integration/test_comment_router.py
Description: 评论接口集成测试 (评论计数、一层回复、编辑标记、软删除)
"""

from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient

from socialconnect.core.config import settings

API = settings.API_PREFIX


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def comment(
    client: AsyncClient, token: str, post_id: str, content: str, parent: str | None = None
):
    payload: dict[str, Any] = {"postId": post_id, "content": content}
    if parent is not None:
        payload["parentCommentId"] = parent
    return await client.post(f"{API}/comments", json=payload, headers=bearer(token))


async def comments_count(client: AsyncClient, post_id: str) -> int:
    response = await client.get(f"{API}/posts/{post_id}")
    return response.json()["data"]["commentsCount"]


@pytest.mark.asyncio
async def test_comment_increments_post_counter(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("commenter")
    post = await create_post(user["accessToken"])

    response = await comment(client, user["accessToken"], post["id"], "  Nice post  ")

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["content"] == "Nice post"
    assert data["isEdited"] is False
    assert data["parentCommentId"] is None
    assert data["author"]["username"] == "commenter"
    assert await comments_count(client, post["id"]) == 1


@pytest.mark.asyncio
async def test_comment_validation(client: AsyncClient, register: Any, create_post: Any) -> None:
    user = await register("validator")
    post = await create_post(user["accessToken"])

    blank = await comment(client, user["accessToken"], post["id"], "   ")
    too_long = await comment(client, user["accessToken"], post["id"], "x" * 501)
    missing_post = await comment(client, user["accessToken"], str(uuid4()), "hello")

    assert blank.status_code == 400
    assert blank.json()["errors"][0]["field"] == "content"
    assert too_long.status_code == 400
    assert missing_post.status_code == 404
    assert missing_post.json()["code"] == "posts.post_not_found"


@pytest.mark.asyncio
async def test_replies_are_one_level_deep(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("replier")
    token = user["accessToken"]
    post = await create_post(token)
    other_post = await create_post(token, content="Other")

    top = (await comment(client, token, post["id"], "top")).json()["data"]
    reply = await comment(client, token, post["id"], "reply", parent=top["id"])
    assert reply.status_code == 201
    assert reply.json()["data"]["parentCommentId"] == top["id"]

    nested = await comment(
        client, token, post["id"], "nested", parent=reply.json()["data"]["id"]
    )
    assert nested.status_code == 400
    assert nested.json()["code"] == "comments.invalid_parent"

    cross_post = await comment(client, token, other_post["id"], "cross", parent=top["id"])
    assert cross_post.status_code == 400

    unknown_parent = await comment(client, token, post["id"], "lost", parent=str(uuid4()))
    assert unknown_parent.status_code == 404
    assert unknown_parent.json()["code"] == "comments.parent_not_found"

    # 回复同样计入帖子评论数
    assert await comments_count(client, post["id"]) == 2


@pytest.mark.asyncio
async def test_post_comments_and_replies_listing(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("lister")
    token = user["accessToken"]
    post = await create_post(token)

    older = (await comment(client, token, post["id"], "older")).json()["data"]
    newer = (await comment(client, token, post["id"], "newer")).json()["data"]
    first_reply = (await comment(client, token, post["id"], "r1", parent=older["id"])).json()
    second_reply = (await comment(client, token, post["id"], "r2", parent=older["id"])).json()

    response = await client.get(f"{API}/comments/post/{post['id']}")
    items = response.json()["data"]["items"]
    assert [c["id"] for c in items] == [newer["id"], older["id"]]
    assert {c["id"]: c["repliesCount"] for c in items} == {newer["id"]: 0, older["id"]: 2}

    replies = await client.get(f"{API}/comments/{older['id']}/replies")
    assert [c["id"] for c in replies.json()["data"]["items"]] == [
        first_reply["data"]["id"],
        second_reply["data"]["id"],
    ]

    missing = await client.get(f"{API}/comments/post/{uuid4()}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_user_comments(client: AsyncClient, register: Any, create_post: Any) -> None:
    alice = await register("alice_c")
    bob = await register("bob_c")
    post = await create_post(alice["accessToken"])
    await comment(client, alice["accessToken"], post["id"], "by alice")
    await comment(client, bob["accessToken"], post["id"], "by bob")

    response = await client.get(f"{API}/comments/user/{bob['user']['id']}")

    assert [c["content"] for c in response.json()["data"]["items"]] == ["by bob"]
    assert (await client.get(f"{API}/comments/user/{uuid4()}")).status_code == 404


@pytest.mark.asyncio
async def test_edit_marks_comment_as_edited(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    author = await register("editor")
    other = await register("not_editor")
    post = await create_post(author["accessToken"])
    created = (await comment(client, author["accessToken"], post["id"], "draft")).json()["data"]
    url = f"{API}/comments/{created['id']}"

    forbidden = await client.put(
        url, json={"content": "mine"}, headers=bearer(other["accessToken"])
    )
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "comments.not_owner"

    edited = await client.put(
        url, json={"content": "final"}, headers=bearer(author["accessToken"])
    )
    assert edited.status_code == 200
    assert edited.json()["data"]["content"] == "final"
    assert edited.json()["data"]["isEdited"] is True


@pytest.mark.asyncio
async def test_delete_comment_decrements_counter(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("remover")
    token = user["accessToken"]
    post = await create_post(token)
    created = (await comment(client, token, post["id"], "bye")).json()["data"]
    url = f"{API}/comments/{created['id']}"

    response = await client.delete(url, headers=bearer(token))

    assert response.status_code == 200
    assert await comments_count(client, post["id"]) == 0
    assert (await client.get(url)).status_code == 404

    listing = await client.get(f"{API}/comments/post/{post['id']}")
    assert listing.json()["data"]["items"] == []


@pytest.mark.asyncio
async def test_cannot_comment_on_deleted_post(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("late")
    post = await create_post(user["accessToken"])
    await client.delete(f"{API}/posts/{post['id']}", headers=bearer(user["accessToken"]))

    response = await comment(client, user["accessToken"], post["id"], "too late")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_comment_pages_never_exceed_limit(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("chatty")
    token = user["accessToken"]
    post = await create_post(token)
    for i in range(3):
        await comment(client, token, post["id"], f"comment {i}")

    url = f"{API}/comments/post/{post['id']}"
    page1 = (await client.get(url, params={"page": 1, "limit": 2})).json()["data"]
    page2 = (await client.get(url, params={"page": 2, "limit": 2})).json()["data"]

    assert len(page1["items"]) == 2
    assert page1["pagination"]["hasNextPage"] is True
    assert page1["pagination"]["totalPages"] == 2
    assert len(page2["items"]) == 1
    assert page2["pagination"]["hasNextPage"] is False
    assert {c["id"] for c in page1["items"]}.isdisjoint(c["id"] for c in page2["items"])
