"""
Identity provider seam.

Authentication lives outside TenderHub; the core only asks "who is
calling?" and treats no answer as an AuthenticationError.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Protocol

from .errors import AuthenticationError


@dataclass(frozen=True)
class Identity:
    """An opaque, externally issued identity."""

    subject: str
    email: str | None = None

    def __str__(self) -> str:
        return self.subject


class IdentityProvider(Protocol):
    def current_identity(self) -> Identity | None: ...


class StaticIdentityProvider:
    """Always answers with the identity it was built with."""

    def __init__(self, identity: Identity | str | None):
        if isinstance(identity, str):
            identity = Identity(subject=identity)
        self._identity = identity

    def current_identity(self) -> Identity | None:
        return self._identity


class EnvironmentIdentityProvider:
    """Reads the identity subject from an environment variable."""

    def __init__(self, env_var: str = "TENDERHUB_IDENTITY"):
        self.env_var = env_var

    def current_identity(self) -> Identity | None:
        subject = os.environ.get(self.env_var, "").strip()
        return Identity(subject=subject) if subject else None


def require_identity(identity: Identity | str | None) -> Identity:
    """Return a usable identity or raise AuthenticationError."""
    if isinstance(identity, str):
        identity = Identity(subject=identity)
    if identity is None or not identity.subject or not identity.subject.strip():
        raise AuthenticationError("Please log in to continue")
    return Identity(subject=identity.subject.strip(), email=identity.email)
