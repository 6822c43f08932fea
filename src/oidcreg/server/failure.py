"""Typed failure results returned by the registration pipeline stages."""
from oidcreg.message.oidc import ClientRegistrationErrorResponse

INVALID_CLIENT_METADATA = "invalid_client_metadata"


class Failure(object):
    kind = "failure"

    def __init__(self, message: str, **context):
        self.message = message
        self.context = context

    def __str__(self):
        return "{}: {}".format(self.kind, self.message)

    def __repr__(self):
        return "<{} {!r}>".format(self.__class__.__name__, self.message)

    def to_error_response(self) -> ClientRegistrationErrorResponse:
        return ClientRegistrationErrorResponse(
            error=INVALID_CLIENT_METADATA, error_message=self.message
        )


class MalformedRequest(Failure):
    kind = "malformed_request"


class MissingScopes(Failure):
    kind = "missing_scopes"


class MissingOpenIdScope(Failure):
    kind = "missing_openid_scope"


class MissingRedirectUri(Failure):
    kind = "missing_redirect_uri"


class PersistenceFailure(Failure):
    kind = "persistence_failure"


class ReconciliationFailure(Failure):
    kind = "reconciliation_failure"


def is_failure(result) -> bool:
    return isinstance(result, Failure)
