from types import SimpleNamespace

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.common.deps import CurrentUser, get_current_user, require_recruiter
from conftest import CANDIDATE_ID, RECRUITER_ID


class FakeAuth:
    def __init__(self, tokens):
        self._tokens = tokens

    async def get_user(self, token):
        if token not in self._tokens:
            raise ValueError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=self._tokens[token], email=None, user_metadata={}))


test_app = FastAPI()


@test_app.get("/whoami")
async def whoami(current: CurrentUser = Depends(get_current_user)):
    return current.model_dump()


@test_app.get("/recruiters-only")
async def recruiters_only(current: CurrentUser = Depends(require_recruiter())):
    return {"ok": True}


@pytest.fixture
def client(fake_db, monkeypatch):
    fake_db.auth = FakeAuth({"tok-recruiter": RECRUITER_ID, "tok-candidate": CANDIDATE_ID, "tok-new": "new-user"})
    fake_db.seed(
        "users",
        {"id": RECRUITER_ID, "email": "hiring@acme.test", "role": "recruiter"},
        {"id": CANDIDATE_ID, "email": "dev@example.test", "role": "candidate"},
    )

    async def _fake_get_supabase():
        return fake_db

    monkeypatch.setattr("app.common.deps.get_supabase", _fake_get_supabase)
    return TestClient(test_app)


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_role_comes_from_users_table(client):
    body = client.get("/whoami", headers=_auth("tok-recruiter")).json()
    assert body["id"] == RECRUITER_ID
    assert body["role"] == "recruiter"


def test_unknown_profile_defaults_to_candidate(client):
    body = client.get("/whoami", headers=_auth("tok-new")).json()
    assert body["role"] == "candidate"


def test_invalid_token_is_401(client):
    assert client.get("/whoami", headers=_auth("forged")).status_code == 401


def test_recruiter_gate(client):
    assert client.get("/recruiters-only", headers=_auth("tok-recruiter")).status_code == 200
    assert client.get("/recruiters-only", headers=_auth("tok-candidate")).status_code == 403


def test_profile_lookup_outage_is_503(client, fake_db):
    fake_db.break_table("users")
    assert client.get("/whoami", headers=_auth("tok-candidate")).status_code == 503


def test_supabase_client_failure_is_503(client, monkeypatch):
    async def _unavailable():
        raise RuntimeError("Could not create Supabase async client")

    monkeypatch.setattr("app.common.deps.get_supabase", _unavailable)
    resp = client.get("/whoami", headers=_auth("tok-candidate"))
    assert resp.status_code == 503


@pytest.mark.anyio("asyncio")
async def test_supabase_client_needs_url_and_key(monkeypatch):
    import app.db.supabase as supabase_module
    from app.core.config import Settings

    settings = Settings()
    settings.supabase_url = ""
    monkeypatch.setattr(supabase_module, "_client", None)
    monkeypatch.setattr(supabase_module, "get_settings", lambda: settings)

    with pytest.raises(RuntimeError):
        await supabase_module.get_supabase()
