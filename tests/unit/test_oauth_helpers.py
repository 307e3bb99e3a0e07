"""
File: tests/unit/test_oauth_helpers.py
Description: OAuth 资料归一化、用户名生成、头像白名单
"""

import pytest

from socialconnect.db.models.user import OAuthProvider
from socialconnect.domains.auth.oauth import (
    OAuthFlowError,
    build_oauth_username,
    filter_profile_picture,
    normalize_github_profile,
    normalize_google_profile,
)


def test_username_keeps_timestamp_suffix_within_limit() -> None:
    username = build_oauth_username("a.very.long.email.local.part+tag", now_ms=1700000000000)

    assert username == "averylongemaillo_1700000000000"
    assert len(username) == 30


def test_username_falls_back_when_hint_has_no_valid_chars() -> None:
    assert build_oauth_username("..", now_ms=1) == "user_1"


@pytest.mark.parametrize(
    ("provider", "url", "kept"),
    [
        (OAuthProvider.GOOGLE, "https://lh3.googleusercontent.com/a/photo.jpg", True),
        (OAuthProvider.GITHUB, "https://avatars.githubusercontent.com/u/1?v=4", True),
        (OAuthProvider.GOOGLE, "https://avatars.githubusercontent.com/u/1", False),
        (OAuthProvider.GITHUB, "https://evil.example.com/githubusercontent.png", False),
        (OAuthProvider.GOOGLE, "javascript:alert(1)", False),
        (OAuthProvider.GOOGLE, None, False),
    ],
)
def test_profile_picture_allow_list(provider: OAuthProvider, url: str | None, kept: bool) -> None:
    assert filter_profile_picture(provider, url) == (url if kept else None)


def test_google_profile_defaults() -> None:
    profile = normalize_google_profile({"sub": "123", "email": "ana.perez@gmail.com"})

    assert profile.provider is OAuthProvider.GOOGLE
    assert profile.provider_id == "123"
    assert profile.username_hint == "ana.perez"
    assert (profile.first_name, profile.last_name) == ("Usuario", "Google")


def test_google_profile_without_email_fails() -> None:
    with pytest.raises(OAuthFlowError):
        normalize_google_profile({"sub": "123"})


def test_github_profile_name_split_and_verified_email() -> None:
    profile = normalize_github_profile(
        {"id": 42, "login": "octocat", "name": "Mona Lisa Octocat", "email": None},
        [
            {"email": "unverified@example.com", "primary": True, "verified": False},
            {"email": "mona@example.com", "primary": False, "verified": True},
        ],
    )

    assert profile.provider_id == "42"
    assert profile.email == "mona@example.com"
    assert (profile.first_name, profile.last_name) == ("Mona", "Lisa")


def test_github_profile_fallbacks() -> None:
    profile = normalize_github_profile({"id": 7, "login": "ghost", "name": None})

    assert profile.email == "ghost@github.local"
    assert (profile.first_name, profile.last_name) == ("ghost", "GitHub")
