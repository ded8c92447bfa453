"""Resolve an author's email to an avatar URL and a code-hosting handle.

Avatar lookup is a chain of guesses, first hit wins:

1. a handle already known from a noreply address (``https://<host>/<handle>.png``)
2. the email's local part used as a handle
3. the local part with dots removed (hosts drop them from usernames)
4. a Gravatar identicon keyed by the normalized email, which always exists

Whether a profile image "exists" is decided by :meth:`IdentityResolver.avatar_exists`.
:class:`HttpIdentityResolver` asks the network; :class:`OfflineIdentityResolver`
answers from a fixed set of handles and never touches the network.
"""

from __future__ import annotations

import hashlib
import logging
import re
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

import httpx

from icontribute.models import to_json

logger = logging.getLogger(__name__)

DEFAULT_HOST = "github.com"


@dataclass
class Identity:
    avatar: str
    username: str | None = None


def _noreply_suffix(host: str) -> str:
    return f"users.noreply.{host}"


def is_noreply(email: str, host: str = DEFAULT_HOST) -> bool:
    return email.strip().lower().endswith(_noreply_suffix(host).lower())


def noreply_username(email: str, host: str = DEFAULT_HOST) -> str | None:
    """Infer a handle from ``<id>+<handle>@users.noreply.<host>`` style addresses.

    ``12345+octocat@…`` gives ``octocat``, ``jdoe@…`` gives ``jdoe`` and a purely
    numeric ``12345@…`` gives nothing.
    """
    m = re.match(rf"^([^@]+)@{re.escape(_noreply_suffix(host))}$", email.strip(), re.IGNORECASE)
    if not m:
        return None
    local = m.group(1)
    if "+" in local:
        return local.split("+", 1)[1] or None
    if not local.isdigit():
        return local
    return None


def gravatar_url(email: str) -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s=200&d=identicon"


class IdentityResolver(ABC):
    """Base resolver; subclasses only decide whether a profile image exists."""

    def __init__(self, host: str = DEFAULT_HOST) -> None:
        self.host = host
        self._avatar_re = re.compile(rf"^https://{re.escape(host)}/([^/]+)\.png")

    @abstractmethod
    def avatar_exists(self, url: str) -> bool:
        ...

    def profile_image_url(self, username: str) -> str:
        return f"https://{self.host}/{username}.png"

    def username_from_avatar(self, avatar: str) -> str | None:
        m = self._avatar_re.match(avatar)
        return m.group(1) if m else None

    def _probe(self, username: str) -> str | None:
        if not username:
            return None
        url = self.profile_image_url(username)
        return url if self.avatar_exists(url) else None

    def detect_avatar(self, email: str) -> str:
        """Guess a hosted avatar from the email's local part, else use Gravatar."""
        local = email.split("@", 1)[0].strip()
        for candidate in dict.fromkeys((local, local.replace(".", ""))):
            url = self._probe(candidate)
            if url:
                return url
        return gravatar_url(email)

    def resolve(self, email: str, username: str | None = None) -> Identity:
        """Return the avatar and handle for *email*.

        A *username* that was already inferred is only kept when its profile
        image exists; otherwise the handle is back-derived from whichever
        avatar the email lookup settles on.
        """
        if username:
            url = self._probe(username)
            if url:
                return Identity(avatar=url, username=username)
        if not email:
            return Identity(avatar=gravatar_url(email))
        avatar = self.detect_avatar(email)
        return Identity(avatar=avatar, username=self.username_from_avatar(avatar))

    def close(self) -> None:
        pass

    def __enter__(self) -> "IdentityResolver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class HttpIdentityResolver(IdentityResolver):
    """Probe profile images with a HEAD request; any failure counts as missing."""

    def __init__(self, host: str = DEFAULT_HOST, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        super().__init__(host=host)
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": "icontribute/1.0"},
        )

    def avatar_exists(self, url: str) -> bool:
        try:
            r = self._client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Avatar probe failed for %s: %s", url, exc)
            return False
        return r.is_success

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class OfflineIdentityResolver(IdentityResolver):
    """Deterministic resolver: only handles in *known_usernames* have an avatar."""

    def __init__(self, known_usernames: Iterable[str] = (), host: str = DEFAULT_HOST) -> None:
        super().__init__(host=host)
        self.known_usernames = {u.lower() for u in known_usernames}

    def avatar_exists(self, url: str) -> bool:
        username = self.username_from_avatar(url)
        return username is not None and username.lower() in self.known_usernames


if __name__ == "__main__":
    email_arg = sys.argv[1] if len(sys.argv) > 1 else "octocat@github.com"

    with HttpIdentityResolver() as resolver:
        identity = resolver.resolve(email_arg, username=noreply_username(email_arg))
    print(to_json(identity))
