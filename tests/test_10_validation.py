import json

import pytest

from oidcreg.message.oidc import RegistrationRequest
from oidcreg.server.failure import MalformedRequest
from oidcreg.server.failure import MissingOpenIdScope
from oidcreg.server.failure import MissingRedirectUri
from oidcreg.server.failure import MissingScopes
from oidcreg.server.failure import is_failure
from oidcreg.server.validation import validate

REQUEST = {
    "client_name": "Relying Party",
    "scopes": ["openid", "profile"],
    "redirect_uris": ["https://rp.example/cb"],
    "subject_type": "public",
}


def _raw(**kwargs):
    _req = dict(REQUEST)
    _req.update(kwargs)
    return json.dumps(_req).encode("utf-8")


def test_valid_request():
    _req = validate(_raw())
    assert isinstance(_req, RegistrationRequest)
    assert not is_failure(_req)
    assert _req.requested_scopes() == ["openid", "profile"]
    assert _req["redirect_uris"] == ["https://rp.example/cb"]


def test_valid_request_str():
    _req = validate(json.dumps(REQUEST))
    assert isinstance(_req, RegistrationRequest)


def test_scope_as_string():
    _req = json.dumps({"scope": "openid email", "redirect_uris": ["https://rp.example/cb"]})
    _res = validate(_req)
    assert _res.requested_scopes() == ["openid", "email"]


@pytest.mark.parametrize(
    "raw",
    [
        b"{not json",
        b"[]",
        b"\xff\xfe",
        json.dumps({"scopes": "openid", "redirect_uris": ["https://rp.example/cb"]}),
        json.dumps({"scopes": ["openid"], "redirect_uris": "https://rp.example/cb"}),
        json.dumps({"scopes": ["openid"], "redirect_uris": [1]}),
        json.dumps({"scopes": ["openid"], "redirect_uris": ["https://rp.example/cb"], "client_name": 5}),
    ],
)
def test_malformed(raw):
    _res = validate(raw)
    assert isinstance(_res, MalformedRequest)


def test_not_allowed_application_type():
    _res = validate(_raw(application_type="desktop"))
    assert isinstance(_res, MalformedRequest)


@pytest.mark.parametrize("scopes", [[], None])
def test_missing_scopes(scopes):
    _res = validate(_raw(scopes=scopes))
    assert isinstance(_res, MissingScopes)
    assert "scope" in _res.message


def test_missing_scopes_checked_before_redirect_uri():
    _res = validate(json.dumps({"client_name": "RP"}))
    assert isinstance(_res, MissingScopes)


@pytest.mark.parametrize("scopes", [["profile"], ["OpenID", "email"], ["openidx"]])
def test_missing_openid_scope(scopes):
    _res = validate(_raw(scopes=scopes))
    assert isinstance(_res, MissingOpenIdScope)
    assert "openid" in _res.message


def test_missing_redirect_uri():
    _req = dict(REQUEST)
    del _req["redirect_uris"]
    _res = validate(json.dumps(_req))
    assert isinstance(_res, MissingRedirectUri)


def test_empty_redirect_uris():
    _res = validate(_raw(redirect_uris=[]))
    assert isinstance(_res, MissingRedirectUri)


def test_unknown_subject_type_accepted():
    _res = validate(_raw(subject_type="ephemeral"))
    assert isinstance(_res, RegistrationRequest)
    assert _res["subject_type"] == "ephemeral"


def test_deeply_nested_json():
    _raw = '{"scopes": ["openid"], "redirect_uris": ["https://rp.example/cb"], "x": '
    _raw += "[" * 100000 + "]" * 100000 + "}"
    _res = validate(_raw)
    assert isinstance(_res, MalformedRequest)


@pytest.mark.parametrize("redirect_uris", [[""], ["   "], ["", "https://rp.example/cb"]])
def test_blank_redirect_uri(redirect_uris):
    _res = validate(_raw(redirect_uris=redirect_uris))
    assert isinstance(_res, MissingRedirectUri)


def test_null_redirect_uris():
    _res = validate(_raw(redirect_uris=None))
    assert isinstance(_res, MissingRedirectUri)


def test_null_scope_values():
    _res = validate(_raw(scopes=None, scope=None))
    assert isinstance(_res, MissingScopes)


def test_null_optional_field_ignored():
    _res = validate(_raw(client_name=None))
    assert isinstance(_res, RegistrationRequest)
    assert "client_name" not in _res
