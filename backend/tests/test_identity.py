# tests/test_identity.py
"""
Unit tests for the Identity model and bearer-token identity resolution.

These tests verify:
- Claim mapping into Identity
- Unauthenticated identity handling
- get_identity never rejects, require_identity does

Tokens are minted locally with the test JWT secret.
"""
from __future__ import annotations

import pytest

from app.auth.identity import Identity
from app.core import config as app_config
from app.core.security import create_identity_token


# ---------------------------------------------------------------------------
# Tests: Identity model
# ---------------------------------------------------------------------------


def test_unauthenticated_identity():
    identity = Identity.unauthenticated()

    assert identity.subject is None
    assert identity.email is None
    assert identity.is_authenticated is False
    assert identity.raw_claims == {}


def test_identity_from_claims_normalizes():
    identity = Identity.from_claims(
        {"sub": "user_abc", "email": "Cara.Candidate@Example.COM", "name": "  Cara  "}
    )

    assert identity.subject == "user_abc"
    assert identity.email == "cara.candidate@example.com"
    assert identity.name == "Cara"
    assert identity.is_authenticated is True


def test_identity_from_claims_requires_subject():
    with pytest.raises(ValueError):
        Identity.from_claims({"email": "x@example.com"})


def test_debug_dict_excludes_raw_claims():
    identity = Identity.from_claims({"sub": "user_abc", "secret": "nope"})
    debug = identity.to_debug_dict()

    assert debug == {"subject": "user_abc", "email": None, "name": None, "is_authenticated": True}


# ---------------------------------------------------------------------------
# Tests: bearer token -> identity
# ---------------------------------------------------------------------------


def test_valid_token_resolves_identity(anon_client):
    token = create_identity_token("user_i1", email="i1@example.com")
    res = anon_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 200
    assert res.json()["subject"] == "user_i1"
    assert res.json()["email"] == "i1@example.com"


def test_missing_token_on_protected_route(anon_client):
    res = anon_client.get("/auth/me")
    assert res.status_code == 401
    assert res.json()["error"] == "UNAUTHORIZED"


def test_bad_token_degrades_to_anonymous_for_lists(anon_client, make_interview):
    make_interview()
    headers = {"Authorization": "Bearer not-a-jwt"}

    assert anon_client.get("/interviews", headers=headers).json() == []
    assert anon_client.get("/auth/me", headers=headers).status_code == 401


def test_expired_token_is_rejected(anon_client):
    token = create_identity_token("user_i1", expires_minutes=-5)
    res = anon_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_token_signed_with_other_secret_is_rejected(anon_client, monkeypatch):
    monkeypatch.setattr(app_config.settings, "JWT_SECRET", "some_other_secret")
    token = create_identity_token("user_i1")
    monkeypatch.undo()

    res = anon_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_issuer_is_checked_when_configured(anon_client):
    app_config.settings.JWT_ISSUER = "https://issuer.example.com"
    token = create_identity_token("user_i1")
    ok = anon_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert ok.status_code == 200

    app_config.settings.JWT_ISSUER = "https://someone-else.example.com"
    res = anon_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_token_identity_drives_interview_access(anon_client, make_interview):
    iv = make_interview()
    token = create_identity_token("user_c1")
    headers = {"Authorization": f"Bearer {token}"}

    rows = anon_client.get("/interviews", headers=headers).json()
    assert [r["id"] for r in rows] == [iv.id]
    assert anon_client.post(f"/interviews/{iv.id}/start", headers=headers).status_code == 403
