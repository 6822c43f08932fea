import pytest

from oidcreg.exception import ReconciliationError
from oidcreg.server.client import RegisteredClient
from oidcreg.server.scopes import SCOPE2CLAIMS
from oidcreg.server.scopes import ScopePolicy
from oidcreg.server.scopes import ScopeToClaimsReconciler
from oidcreg.server.scopes import convert_scopes2claims
from oidcreg.server.scopes import intersect_scopes


def test_intersect_keeps_supported_order():
    assert intersect_scopes(["openid", "profile", "email"], ["email", "foo", "openid"]) == [
        "openid",
        "email",
    ]
    assert intersect_scopes(["openid"], []) == []


def test_scope_policy():
    _policy = ScopePolicy(["openid", "email", "openid"])
    assert _policy.supported_scopes() == ["openid", "email"]
    assert _policy.filter_scopes(["email", "profile"]) == ["email"]
    # a copy is returned
    _policy.supported_scopes().append("profile")
    assert _policy.supported_scopes() == ["openid", "email"]


def test_scope_policy_default():
    assert ScopePolicy().supported_scopes() == list(SCOPE2CLAIMS.keys())


def test_convert_scopes2claims():
    assert set(convert_scopes2claims(["openid", "email"]).keys()) == {
        "sub",
        "email",
        "email_verified",
    }
    assert set(convert_scopes2claims(["email"], allowed_claims=["email"]).keys()) == {"email"}


def _client(scopes):
    return RegisteredClient(client_id="client", service_id="https://rp.example/cb", scopes=scopes)


def test_reconcile():
    _client_info = _client(["openid", "email"])
    ScopeToClaimsReconciler().reconcile(_client_info)
    assert _client_info["allowed_claims"] == ["sub", "email", "email_verified"]
    assert _client_info["scopes_to_claims"] == {
        "openid": ["sub"],
        "email": ["email", "email_verified"],
    }


def test_reconcile_custom_mapping():
    _rec = ScopeToClaimsReconciler(scopes_to_claims={"openid": ["sub"], "research": ["affiliation"]})
    _client_info = _client(["openid", "research"])
    _rec.reconcile(_client_info)
    assert _client_info["allowed_claims"] == ["sub", "affiliation"]


def test_reconcile_unknown_scope():
    _client_info = _client(["openid", "research"])
    ScopeToClaimsReconciler().reconcile(_client_info)
    assert _client_info["allowed_claims"] == ["sub"]

    with pytest.raises(ReconciliationError):
        ScopeToClaimsReconciler(strict=True).reconcile(_client(["openid", "research"]))
