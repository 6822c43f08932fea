# default set can be changed by configuration
import logging
from typing import List
from typing import Optional

from oidcreg.exception import ReconciliationError

logger = logging.getLogger(__name__)

SCOPE2CLAIMS = {
    "openid": ["sub"],
    "profile": [
        "name",
        "given_name",
        "family_name",
        "middle_name",
        "nickname",
        "profile",
        "picture",
        "website",
        "gender",
        "birthdate",
        "zoneinfo",
        "locale",
        "updated_at",
        "preferred_username",
    ],
    "email": ["email", "email_verified"],
    "address": ["address"],
    "phone": ["phone_number", "phone_number_verified"],
    "offline_access": [],
}


def convert_scopes2claims(scopes, allowed_claims=None, scope2claim_map=None):
    scope2claim_map = scope2claim_map or SCOPE2CLAIMS

    res = {}
    for scope in scopes:
        for name in scope2claim_map.get(scope, []):
            if allowed_claims is None or name in allowed_claims:
                res[name] = None

    return res


def intersect_scopes(supported, requested) -> List[str]:
    """
    The intersection of supported and requested scopes.
    The order of the supported scopes is kept.
    """
    return [s for s in supported if s in requested]


class ScopePolicy:
    """Which scopes the server is willing to grant dynamically registered clients."""

    def __init__(self, scopes: Optional[List[str]] = None):
        if scopes is None:
            scopes = list(SCOPE2CLAIMS.keys())
        self._scopes = []
        for scope in scopes:
            if scope not in self._scopes:
                self._scopes.append(scope)

    def supported_scopes(self) -> List[str]:
        return list(self._scopes)

    def filter_scopes(self, scopes) -> List[str]:
        return intersect_scopes(self._scopes, scopes)


class ScopeToClaimsReconciler:
    """
    Decides which claims are released to a client given the scopes it was
    granted.
    """

    def __init__(self, scopes_to_claims: Optional[dict] = None, strict: Optional[bool] = False):
        if not scopes_to_claims:
            scopes_to_claims = dict(SCOPE2CLAIMS)
        self._scopes_to_claims = scopes_to_claims
        self.strict = strict

    def reconcile(self, client):
        _scopes = client.get("scopes", [])
        _unknown = [s for s in _scopes if s not in self._scopes_to_claims]
        if _unknown:
            if self.strict:
                raise ReconciliationError("No claims defined for scopes: {}".format(_unknown))
            logger.warning("No claims defined for scopes: %s", _unknown)

        _claims = convert_scopes2claims(_scopes, scope2claim_map=self._scopes_to_claims)
        client["allowed_claims"] = list(_claims.keys())
        client["scopes_to_claims"] = {
            s: list(self._scopes_to_claims[s]) for s in _scopes if s in self._scopes_to_claims
        }
        logger.debug("Claims released to %s: %s", client.get("client_id"), client["allowed_claims"])
