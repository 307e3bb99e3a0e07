"""
File: tests/unit/test_post_rules.py
Description: 帖子派生字段、标签与图片 URL 校验、分页元信息
"""

import pytest
from pydantic import ValidationError

from socialconnect.core.schemas import Pagination
from socialconnect.db.models.post import ContentType, Post, resolve_content_type
from socialconnect.domains.posts.schemas import PostCreate, PostUpdate
from socialconnect.domains.posts.service import parse_tag_filter


@pytest.mark.parametrize(
    ("content", "image_url", "expected"),
    [
        ("¡Hola mundo!", None, ContentType.TEXT),
        ("¡Hola mundo!", "https://cdn.test/a.png", ContentType.TEXT_IMAGE),
        ("", "https://cdn.test/a.png", ContentType.IMAGE),
        ("   ", "https://cdn.test/a.png", ContentType.IMAGE),
        ("", None, ContentType.TEXT),
    ],
)
def test_resolve_content_type(content: str, image_url: str | None, expected: ContentType) -> None:
    assert resolve_content_type(content, image_url) is expected


def test_post_refresh_content_type() -> None:
    post = Post(content="hi", image_url="https://cdn.test/a.jpg")
    post.refresh_content_type()
    assert post.content_type is ContentType.TEXT_IMAGE


def test_tags_are_lowercased_and_deduplicated() -> None:
    post = PostCreate(content="x", tags=[" Python ", "python", "Fast-API", "snake_case"])
    assert post.tags == ["python", "fast-api", "snake_case"]


@pytest.mark.parametrize(
    "tags",
    [
        ["has space"],
        ["emoji🙂"],
        ["a" * 51],
        [f"tag{i}" for i in range(11)],
        [""],
    ],
)
def test_invalid_tags(tags: list[str]) -> None:
    with pytest.raises(ValidationError):
        PostCreate(content="x", tags=tags)


@pytest.mark.parametrize(
    "url",
    ["https://cdn.test/photo.JPG", "http://cdn.test/a/b.webp", "https://x.test/p.jpeg"],
)
def test_valid_image_urls(url: str) -> None:
    assert PostCreate(image_url=url).image_url == url


@pytest.mark.parametrize(
    "url", ["ftp://cdn.test/a.png", "https://cdn.test/a.bmp", "https://cdn.test/png"]
)
def test_invalid_image_urls(url: str) -> None:
    with pytest.raises(ValidationError):
        PostCreate(image_url=url)


def test_content_length_limit() -> None:
    PostCreate(content="a" * 2000)
    with pytest.raises(ValidationError):
        PostCreate(content="a" * 2001)


def test_update_allows_null_image_but_not_null_content() -> None:
    assert PostUpdate(imageUrl=None).model_dump(exclude_unset=True) == {"image_url": None}
    with pytest.raises(ValidationError):
        PostUpdate(content=None)


def test_parse_tag_filter() -> None:
    assert parse_tag_filter(" Python, ,fastapi ") == ["python", "fastapi"]
    assert parse_tag_filter(None) == []


@pytest.mark.parametrize(
    ("page", "limit", "total", "has_next"),
    [(1, 10, 0, False), (1, 10, 10, False), (1, 10, 11, True), (2, 5, 11, True), (3, 5, 11, False)],
)
def test_pagination_has_next_page(page: int, limit: int, total: int, has_next: bool) -> None:
    pagination = Pagination.build(page, limit, total)

    assert pagination.has_next_page is has_next
    assert pagination.has_prev_page is (page > 1)
    assert pagination.total_pages == -(-total // limit)
