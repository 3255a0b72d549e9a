"""Tests for identity resolution."""

from __future__ import annotations

import pytest

from tenderhub.core.errors import AuthenticationError
from tenderhub.core.identity import (
    EnvironmentIdentityProvider,
    Identity,
    StaticIdentityProvider,
    require_identity,
)


def test_static_provider_accepts_strings():
    assert StaticIdentityProvider("alice").current_identity() == Identity(subject="alice")
    assert StaticIdentityProvider(None).current_identity() is None


def test_environment_provider(monkeypatch):
    monkeypatch.setenv("TH_WHO", "  bob  ")
    assert EnvironmentIdentityProvider("TH_WHO").current_identity() == Identity(subject="bob")

    monkeypatch.setenv("TH_WHO", "   ")
    assert EnvironmentIdentityProvider("TH_WHO").current_identity() is None

    monkeypatch.delenv("TH_WHO")
    assert EnvironmentIdentityProvider("TH_WHO").current_identity() is None


def test_require_identity_strips():
    identity = require_identity(Identity(subject=" carol ", email="carol@example.com"))
    assert identity == Identity(subject="carol", email="carol@example.com")
    assert str(identity) == "carol"


@pytest.mark.parametrize("value", [None, "", "  ", Identity(subject="")])
def test_require_identity_rejects_missing(value):
    with pytest.raises(AuthenticationError, match="Please log in"):
        require_identity(value)
