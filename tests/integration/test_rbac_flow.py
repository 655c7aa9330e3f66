"""
Integration tests for the RBAC flow: YAML rules, matcher, and HTTP gate.
"""

import sys
import types

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from service_rbac.app.middleware import RbacGate
from service_rbac.app.rbac import Rbac


PERMISSIONS_YAML = """
permissions:
  - controller: Health
    action: '*'
    bypassAuth: true

  - role: admin
    prefix: '*'
    plugin: '*'
    extension: '*'
    controller: '*'
    action: '*'

  - role: author
    controller: Posts
    action: [edit, delete]
    allowed:
      rule: service_rbac.app.rules.delegates.OwnerRule
      table: posts
      finder: rbac_flow_store.find

  - '*role': guest
    controller: Posts
    action: [index, view, UserFeed]

  - controller: '*'
    action: '*'
    suspended: true
    allowed: false
"""

API_KEYS = {
    "admin-key": {"id": 1, "role": "admin"},
    "author-key": {"id": 2, "role": "author"},
    "reader-key": {"id": 3},
    "guest-key": {"id": 4, "role": "guest"},
}

POSTS = {
    "10": {"id": "10", "user_id": 2},
    "11": {"id": "11", "user_id": 1},
}


class TestRbacFlow:
    """End-to-end permission checks through FastAPI."""

    @pytest.fixture
    def store(self, monkeypatch):
        module = types.ModuleType("rbac_flow_store")
        module.find = lambda table, field, value: POSTS.get(value) if table == "posts" else None
        monkeypatch.setitem(sys.modules, "rbac_flow_store", module)
        return module

    @pytest.fixture
    def rbac(self, tmp_path, monkeypatch, store):
        (tmp_path / "acl.yaml").write_text(PERMISSIONS_YAML, encoding="utf-8")
        monkeypatch.setenv("RBAC_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("RBAC_AUTOLOAD_CONFIG", "acl")
        return Rbac()

    @pytest.fixture
    def client(self, rbac):
        app = FastAPI()
        gate = RbacGate(rbac)

        @app.middleware("http")
        async def authenticate(request: Request, call_next):
            user_info = API_KEYS.get(request.headers.get("X-API-Key", ""))
            if user_info:
                request.state.user_info = user_info
            return await call_next(request)

        @app.get("/{controller}/{action}/{id}")
        async def with_id(controller: str, action: str, id: str, user=Depends(gate)):
            return {"ok": True}

        @app.get("/{controller}/{action}")
        async def without_id(controller: str, action: str, user=Depends(gate)):
            return {"ok": True}

        return TestClient(app)

    def test_rules_loaded_from_environment_config(self, rbac):
        """Test the provider reads the file named by the environment."""
        assert len(rbac.get_permissions()) == 5

    def test_health_open(self, client):
        assert client.get("/health/live").status_code == 200

    def test_admin_everything(self, client):
        headers = {"X-API-Key": "admin-key"}

        assert client.get("/posts/delete/10", headers=headers).status_code == 200
        assert client.get("/reports/export.csv", headers=headers).status_code == 200

    def test_author_owns_post(self, client):
        headers = {"X-API-Key": "author-key"}

        assert client.get("/posts/edit/10", headers=headers).status_code == 200
        assert client.get("/posts/edit/11", headers=headers).status_code == 403

    def test_reader_defaults_to_user_role(self, client):
        headers = {"X-API-Key": "reader-key"}

        assert client.get("/posts/view/10", headers=headers).status_code == 200
        assert client.get("/posts/user-feed", headers=headers).status_code == 200
        assert client.get("/posts/edit/10", headers=headers).status_code == 403

    def test_guest_denied(self, client):
        assert client.get("/posts/index", headers={"X-API-Key": "guest-key"}).status_code == 403

    def test_anonymous_unauthenticated(self, client):
        assert client.get("/posts/index").status_code == 401

    def test_explicit_deny_rule(self, rbac):
        """Test a suspended user hits the explicit deny rule."""
        user = {"id": 5, "role": "guest", "suspended": True}

        assert rbac.check_permissions(user, {"controller": "Comments", "action": "add"}) is False
