"""
File: tests/integration/test_post_router.py
Description: 帖子接口集成测试

1. contentType 随正文 / 图片变化重新计算
2. 标签过滤、搜索、最新动态、用户帖子
3. 仅作者可改删，软删除后不再出现
"""

from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient

from socialconnect.core.config import settings

API = settings.API_PREFIX

IMAGE = "https://cdn.example.com/photo.png"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_content_type_follows_content_and_image(
    client: AsyncClient, register: Any
) -> None:
    user = await register("writer")
    headers = bearer(user["accessToken"])

    created = await client.post(f"{API}/posts", json={"content": "¡Hola mundo!"}, headers=headers)
    assert created.status_code == 201
    post = created.json()["data"]
    assert post["contentType"] == "text"
    assert post["author"]["username"] == "writer"
    assert post["likesCount"] == 0 and post["commentsCount"] == 0
    post_url = f"{API}/posts/{post['id']}"

    with_image = await client.put(post_url, json={"imageUrl": IMAGE}, headers=headers)
    assert with_image.json()["data"]["contentType"] == "text_image"

    image_only = await client.put(post_url, json={"content": ""}, headers=headers)
    assert image_only.status_code == 200
    assert image_only.json()["data"]["contentType"] == "image"

    # 没有正文时不能移除图片
    blocked = await client.put(post_url, json={"imageUrl": None}, headers=headers)
    assert blocked.status_code == 400
    assert blocked.json()["code"] == "posts.content_required"

    detail = await client.get(post_url)
    assert detail.json()["data"]["imageUrl"] == IMAGE


@pytest.mark.asyncio
async def test_create_requires_content_or_image(client: AsyncClient, register: Any) -> None:
    user = await register("empty_writer")
    headers = bearer(user["accessToken"])

    empty = await client.post(f"{API}/posts", json={"content": "   "}, headers=headers)
    assert empty.status_code == 400
    assert empty.json()["code"] == "posts.content_required"

    bad_image = await client.post(
        f"{API}/posts", json={"imageUrl": "ftp://example.com/a.png"}, headers=headers
    )
    assert bad_image.status_code == 400
    assert bad_image.json()["errors"][0]["field"] == "imageUrl"

    image_only = await client.post(f"{API}/posts", json={"imageUrl": IMAGE}, headers=headers)
    assert image_only.status_code == 201
    assert image_only.json()["data"]["contentType"] == "image"


@pytest.mark.asyncio
async def test_create_requires_authentication(client: AsyncClient) -> None:
    response = await client.post(f"{API}/posts", json={"content": "anonymous"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_tags_are_normalized_and_filterable(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("tagger")
    token = user["accessToken"]

    tagged = await create_post(token, content="FastAPI tips", tags=["Python", " python ", "API"])
    assert tagged["tags"] == ["python", "api"]
    await create_post(token, content="Cooking", tags=["food"])
    await create_post(token, content="No tags")

    response = await client.get(f"{API}/posts", params={"tags": "PYTHON"})
    items = response.json()["data"]["items"]
    assert [p["id"] for p in items] == [tagged["id"]]

    either = await client.get(f"{API}/posts", params={"tags": "food,api"})
    assert either.json()["data"]["pagination"]["totalItems"] == 2


@pytest.mark.asyncio
async def test_too_many_tags_rejected(client: AsyncClient, register: Any) -> None:
    user = await register("many_tags")

    response = await client.post(
        f"{API}/posts",
        json={"content": "x", "tags": [f"t{i}" for i in range(11)]},
        headers=bearer(user["accessToken"]),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "tags"


@pytest.mark.asyncio
async def test_search_matches_content_and_tags(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("searcher")
    token = user["accessToken"]
    by_content = await create_post(token, content="Learning SQLAlchemy today")
    by_tag = await create_post(token, content="Weekend", tags=["sqlalchemy-tips"])
    await create_post(token, content="Unrelated")

    response = await client.get(f"{API}/posts/search", params={"q": "sqlalchemy"})

    assert response.status_code == 200
    ids = {p["id"] for p in response.json()["data"]["items"]}
    assert ids == {by_content["id"], by_tag["id"]}

    blank = await client.get(f"{API}/posts/search", params={"q": "  "})
    assert blank.status_code == 400
    assert blank.json()["code"] == "posts.search_query_required"


@pytest.mark.asyncio
async def test_recent_feed_is_newest_first(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("feeder")
    first = await create_post(user["accessToken"], content="first")
    second = await create_post(user["accessToken"], content="second")

    response = await client.get(f"{API}/posts/feed/recent")

    data = response.json()["data"]
    assert [p["id"] for p in data["items"]] == [second["id"], first["id"]]
    assert data["pagination"]["limit"] == 20


@pytest.mark.asyncio
async def test_user_posts(client: AsyncClient, register: Any, create_post: Any) -> None:
    alice = await register("alice")
    bob = await register("bob")
    await create_post(alice["accessToken"], content="from alice")
    await create_post(bob["accessToken"], content="from bob")

    response = await client.get(f"{API}/posts/user/{alice['user']['id']}")
    items = response.json()["data"]["items"]
    assert [p["content"] for p in items] == ["from alice"]

    missing = await client.get(f"{API}/posts/user/{uuid4()}")
    assert missing.status_code == 404
    assert missing.json()["code"] == "users.user_not_found"


@pytest.mark.asyncio
async def test_only_author_can_modify(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    author = await register("author")
    other = await register("other")
    post = await create_post(author["accessToken"])
    post_url = f"{API}/posts/{post['id']}"

    update = await client.put(
        post_url, json={"content": "mine now"}, headers=bearer(other["accessToken"])
    )
    delete = await client.delete(post_url, headers=bearer(other["accessToken"]))

    assert update.status_code == 403
    assert update.json()["code"] == "posts.not_owner"
    assert delete.status_code == 403

    empty = await client.put(post_url, json={}, headers=bearer(author["accessToken"]))
    assert empty.status_code == 400
    assert empty.json()["code"] == "posts.empty_update"


@pytest.mark.asyncio
async def test_deleted_post_disappears(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("deleter")
    kept = await create_post(user["accessToken"], content="keep me")
    removed = await create_post(user["accessToken"], content="remove me")

    response = await client.delete(
        f"{API}/posts/{removed['id']}", headers=bearer(user["accessToken"])
    )
    assert response.status_code == 200

    detail = await client.get(f"{API}/posts/{removed['id']}")
    assert detail.status_code == 404
    assert detail.json()["code"] == "posts.post_not_found"

    listing = await client.get(f"{API}/posts")
    assert [p["id"] for p in listing.json()["data"]["items"]] == [kept["id"]]

    again = await client.delete(
        f"{API}/posts/{removed['id']}", headers=bearer(user["accessToken"])
    )
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_list_sorting_validation(client: AsyncClient) -> None:
    response = await client.get(f"{API}/posts", params={"sortBy": "password"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "sortBy"


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["[", "]", '"', ",", '","', "%", "_"])
async def test_search_ignores_tag_array_punctuation(
    client: AsyncClient, register: Any, create_post: Any, query: str
) -> None:
    user = await register("punctuation")
    await create_post(user["accessToken"], content="plain text", tags=["alpha", "beta"])

    response = await client.get(f"{API}/posts/search", params={"q": query})

    assert response.status_code == 200
    assert response.json()["data"]["pagination"]["totalItems"] == 0


@pytest.mark.asyncio
async def test_search_matches_inside_single_tag(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("tag_search")
    post = await create_post(user["accessToken"], content="plain text", tags=["alpha", "beta"])

    inside = await client.get(f"{API}/posts/search", params={"q": "LPH"})
    across = await client.get(f"{API}/posts/search", params={"q": "alphabeta"})

    assert [p["id"] for p in inside.json()["data"]["items"]] == [post["id"]]
    assert across.json()["data"]["pagination"]["totalItems"] == 0


@pytest.mark.asyncio
async def test_tag_filter_with_separator_characters_matches_nothing(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("tag_filter")
    await create_post(user["accessToken"], content="x", tags=["alpha", "beta"])

    response = await client.get(f"{API}/posts", params={"tags": 'alpha","beta'})

    assert response.json()["data"]["pagination"]["totalItems"] == 0


@pytest.mark.asyncio
async def test_post_pages_never_exceed_limit(
    client: AsyncClient, register: Any, create_post: Any
) -> None:
    user = await register("pager")
    for i in range(4):
        await create_post(user["accessToken"], content=f"post {i}")

    page1 = (await client.get(f"{API}/posts", params={"page": 1, "limit": 3})).json()["data"]
    page2 = (await client.get(f"{API}/posts", params={"page": 2, "limit": 3})).json()["data"]

    assert len(page1["items"]) == 3
    assert page1["pagination"]["hasNextPage"] is True
    assert len(page2["items"]) == 1
    assert page2["pagination"]["hasNextPage"] is False
    assert page2["pagination"]["hasPrevPage"] is True
    ids = [p["id"] for p in page1["items"] + page2["items"]]
    assert len(set(ids)) == 4

    feed = (await client.get(f"{API}/posts/feed/recent", params={"limit": 3})).json()["data"]
    assert len(feed["items"]) == 3
    assert feed["pagination"]["totalItems"] == 4
