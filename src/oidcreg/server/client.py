from oidcreg import HIGHEST_PRECEDENCE
from oidcreg.message import OPTIONAL_LIST_OF_STRINGS
from oidcreg.message import SINGLE_OPTIONAL_BOOLEAN
from oidcreg.message import SINGLE_OPTIONAL_DICT
from oidcreg.message import SINGLE_OPTIONAL_INT
from oidcreg.message import SINGLE_OPTIONAL_STRING
from oidcreg.message import SINGLE_REQUIRED_STRING
from oidcreg.message import Message
from oidcreg.message.oidc import SUBJECT_TYPE_PUBLIC

SINGLE_REQUIRED_INT = (int, True, None, None, False)


class RegisteredClient(Message):
    """
    The client definition that is handed over to the client store.
    """

    c_param = {
        "client_id": SINGLE_REQUIRED_STRING,
        "client_secret": SINGLE_OPTIONAL_STRING,
        "name": SINGLE_OPTIONAL_STRING,
        "service_id": SINGLE_REQUIRED_STRING,
        "scopes": OPTIONAL_LIST_OF_STRINGS,
        "subject_type": SINGLE_OPTIONAL_STRING,
        "subject_type_strategy": SINGLE_OPTIONAL_STRING,
        "sector_identifier_uri": SINGLE_OPTIONAL_STRING,
        "jwks_uri": SINGLE_OPTIONAL_STRING,
        "sign_id_token": SINGLE_OPTIONAL_BOOLEAN,
        "logout_url": SINGLE_OPTIONAL_STRING,
        "description": SINGLE_OPTIONAL_STRING,
        "dynamically_registered": SINGLE_OPTIONAL_BOOLEAN,
        "evaluation_order": SINGLE_REQUIRED_INT,
        "client_id_issued_at": SINGLE_OPTIONAL_INT,
        "client_secret_expires_at": SINGLE_OPTIONAL_INT,
        # set by the scope reconciler
        "allowed_claims": OPTIONAL_LIST_OF_STRINGS,
        "scopes_to_claims": SINGLE_OPTIONAL_DICT,
    }
    c_default = {
        "subject_type": SUBJECT_TYPE_PUBLIC,
        "subject_type_strategy": SUBJECT_TYPE_PUBLIC,
        "sign_id_token": False,
        "logout_url": "",
        "dynamically_registered": False,
        "evaluation_order": 0,
    }

    @property
    def client_id(self):
        return self.get("client_id", "")

    @property
    def service_id(self):
        return self.get("service_id", "")

    def matches(self, service_id: str) -> bool:
        return self.service_id == service_id

    def precedes(self, other: "RegisteredClient") -> bool:
        return self["evaluation_order"] < other["evaluation_order"]

    def is_dynamic(self) -> bool:
        return self.get("dynamically_registered", False) and (
            self["evaluation_order"] == HIGHEST_PRECEDENCE
        )
