import pytest
from fastapi import APIRouter

from app import main
from app.main import PUBLIC_PATHS, _dependency_calls, api_routes, audit_routes
from app.auth import get_current_user
from app.rbac import require_admin


def test_every_api_router_is_walked():
    paths = {route.path for route in api_routes()}
    assert {"/api/test-items/{item_id}", "/api/studies", "/api/facility-docs", "/api/auth/me"} <= paths
    assert any(p.startswith("/api/audit") for p in paths)
    assert PUBLIC_PATHS <= paths


def test_all_routes_protected():
    for route in api_routes():
        if route.path in PUBLIC_PATHS:
            continue
        deps = set(_dependency_calls(route.dependant))
        assert get_current_user in deps, f"{route.path} missing authentication"


def test_delete_routes_are_admin_gated():
    deletes = [r for r in api_routes() if "DELETE" in r.methods]
    assert len(deletes) == 3
    for route in deletes:
        deps = set(_dependency_calls(route.dependant))
        assert require_admin in deps, f"{route.path} is not admin-only"


def test_route_audit_rejects_unauthenticated_endpoint(monkeypatch):
    open_router = APIRouter(prefix="/api/open")

    @open_router.get("/")
    def leak():
        return {}

    monkeypatch.setattr(main, "API_ROUTERS", main.API_ROUTERS + (open_router,))
    with pytest.raises(RuntimeError, match="/api/open/"):
        audit_routes()
