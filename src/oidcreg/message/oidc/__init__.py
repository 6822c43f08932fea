from oidcreg.message import OPTIONAL_LIST_OF_SP_SEP_STRINGS
from oidcreg.message import OPTIONAL_LIST_OF_STRINGS
from oidcreg.message import REQUIRED_LIST_OF_STRINGS
from oidcreg.message import SINGLE_OPTIONAL_STRING
from oidcreg.message import SINGLE_REQUIRED_STRING
from oidcreg.message import Message

SUBJECT_TYPE_PUBLIC = "public"
SUBJECT_TYPE_PAIRWISE = "pairwise"

GRANT_TYPES = ["authorization_code", "refresh_token"]
RESPONSE_TYPES = ["code"]


class RegistrationRequest(Message):
    """
    Client registration request.

    When token_endpoint_auth_method is absent it defaults to client_secret_basic,
    so that is the value echoed in the registration response.
    """

    c_param = {
        "redirect_uris": REQUIRED_LIST_OF_STRINGS,
        "client_name": SINGLE_OPTIONAL_STRING,
        "scopes": OPTIONAL_LIST_OF_STRINGS,
        "scope": OPTIONAL_LIST_OF_SP_SEP_STRINGS,
        "subject_type": SINGLE_OPTIONAL_STRING,
        "sector_identifier_uri": SINGLE_OPTIONAL_STRING,
        "jwks_uri": SINGLE_OPTIONAL_STRING,
        "post_logout_redirect_uris": OPTIONAL_LIST_OF_STRINGS,
        "token_endpoint_auth_method": SINGLE_OPTIONAL_STRING,
        "application_type": SINGLE_OPTIONAL_STRING,
        "response_types": OPTIONAL_LIST_OF_STRINGS,
        "grant_types": OPTIONAL_LIST_OF_STRINGS,
        "contacts": OPTIONAL_LIST_OF_STRINGS,
        "logo_uri": SINGLE_OPTIONAL_STRING,
        "client_uri": SINGLE_OPTIONAL_STRING,
        "policy_uri": SINGLE_OPTIONAL_STRING,
        "tos_uri": SINGLE_OPTIONAL_STRING,
    }
    c_default = {
        "subject_type": SUBJECT_TYPE_PUBLIC,
        "token_endpoint_auth_method": "client_secret_basic",
    }
    c_allowed_values = {"application_type": ["native", "web"]}

    def requested_scopes(self):
        """
        The scopes asked for, either as a list in 'scopes' or as a space
        separated string in 'scope'. Order is kept and duplicates removed.

        :return: list of scope names
        """
        _scopes = []
        for scope in self.get("scopes", []) + self.get("scope", []):
            if scope not in _scopes:
                _scopes.append(scope)
        return _scopes


class RegistrationResponse(Message):
    """
    Response to client registration requests
    """

    c_param = {
        "application_type": SINGLE_OPTIONAL_STRING,
        "client_id": SINGLE_REQUIRED_STRING,
        "client_secret": SINGLE_OPTIONAL_STRING,
        "subject_type": SINGLE_OPTIONAL_STRING,
        "token_endpoint_auth_method": SINGLE_OPTIONAL_STRING,
        "client_name": SINGLE_OPTIONAL_STRING,
        "grant_types": OPTIONAL_LIST_OF_STRINGS,
        "redirect_uris": OPTIONAL_LIST_OF_STRINGS,
        "response_types": OPTIONAL_LIST_OF_STRINGS,
    }


class ClientRegistrationErrorResponse(Message):
    c_param = {
        "error": SINGLE_REQUIRED_STRING,
        "error_message": SINGLE_OPTIONAL_STRING,
    }
    c_allowed_values = {"error": ["invalid_redirect_uri", "invalid_client_metadata"]}
