"""Tests for identity resolution.

Network probes are mocked with respx; the offline resolver needs no mocking.
"""

from __future__ import annotations

import hashlib

import httpx
import pytest
import respx
from httpx import Response

from icontribute.identity import (
    HttpIdentityResolver,
    OfflineIdentityResolver,
    gravatar_url,
    is_noreply,
    noreply_username,
)


@pytest.mark.parametrize(
    "email,expected",
    [
        ("12345+octocat@users.noreply.github.com", "octocat"),
        ("12345@users.noreply.github.com", None),
        ("jdoe@users.noreply.github.com", "jdoe"),
        ("JDoe@Users.NoReply.GitHub.com", "JDoe"),
        ("jdoe@example.com", None),
    ],
)
def test_noreply_username(email: str, expected: str | None) -> None:
    assert noreply_username(email) == expected


def test_noreply_username_uses_configured_host() -> None:
    assert noreply_username("1+ann@users.noreply.x.com", host="x.com") == "ann"
    assert noreply_username("1+ann@users.noreply.github.com", host="x.com") is None


def test_is_noreply() -> None:
    assert is_noreply("a@users.noreply.github.com") is True
    assert is_noreply("b@real.com") is False


def test_gravatar_url_is_keyed_by_normalized_email() -> None:
    digest = hashlib.md5(b"jane@example.com").hexdigest()
    assert gravatar_url("  Jane@Example.com ") == f"https://www.gravatar.com/avatar/{digest}?s=200&d=identicon"
    assert gravatar_url("jane@example.com") == gravatar_url("JANE@example.com")


def test_offline_resolver_uses_known_username_first() -> None:
    resolver = OfflineIdentityResolver(known_usernames=["octocat"])
    identity = resolver.resolve("someone@example.com", username="octocat")
    assert identity.avatar == "https://github.com/octocat.png"
    assert identity.username == "octocat"


def test_offline_resolver_guesses_from_local_part_then_strips_dots() -> None:
    resolver = OfflineIdentityResolver(known_usernames=["janedoe"])
    identity = resolver.resolve("jane.doe@example.com")
    assert identity.avatar == "https://github.com/janedoe.png"
    assert identity.username == "janedoe"


def test_offline_resolver_drops_unconfirmed_username_and_falls_back_to_gravatar() -> None:
    resolver = OfflineIdentityResolver()
    identity = resolver.resolve("ghost@example.com", username="ghost-handle")
    assert identity.avatar == gravatar_url("ghost@example.com")
    assert identity.username is None


def test_resolver_with_empty_email_still_returns_an_avatar() -> None:
    identity = OfflineIdentityResolver().resolve("")
    assert identity.avatar == gravatar_url("")
    assert identity.username is None


@respx.mock
def test_http_resolver_probes_with_head_and_follows_redirects() -> None:
    respx.head("https://github.com/octocat.png").mock(
        return_value=Response(302, headers={"Location": "https://avatars.example.com/u/1"})
    )
    respx.head("https://avatars.example.com/u/1").mock(return_value=Response(200))

    with HttpIdentityResolver() as resolver:
        identity = resolver.resolve("octocat@example.com")

    assert identity.avatar == "https://github.com/octocat.png"
    assert identity.username == "octocat"


@respx.mock
def test_http_resolver_tries_dotless_local_part() -> None:
    respx.head("https://github.com/jane.doe.png").mock(return_value=Response(404))
    dotless = respx.head("https://github.com/janedoe.png").mock(return_value=Response(200))

    with HttpIdentityResolver() as resolver:
        identity = resolver.resolve("jane.doe@example.com")

    assert dotless.called
    assert identity.username == "janedoe"


@respx.mock
def test_http_resolver_treats_network_errors_as_not_found() -> None:
    respx.head(url__startswith="https://github.com/").mock(side_effect=httpx.ConnectTimeout("timed out"))

    with HttpIdentityResolver(timeout=0.5) as resolver:
        identity = resolver.resolve("jane@example.com", username="jane")

    assert identity.avatar == gravatar_url("jane@example.com")
    assert identity.username is None


@respx.mock
@pytest.mark.parametrize("email", ["tab\tperson@x.com", "a\x01b@example.com"])
def test_http_resolver_treats_unprintable_local_parts_as_not_found(email: str) -> None:
    with HttpIdentityResolver() as resolver:
        identity = resolver.resolve(email)

    assert identity.avatar == gravatar_url(email)
    assert identity.username is None
    assert not respx.calls
