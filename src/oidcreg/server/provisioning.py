import logging
import time
from typing import List
from typing import Union

from oidcreg import HIGHEST_PRECEDENCE
from oidcreg.message.oidc import GRANT_TYPES
from oidcreg.message.oidc import RESPONSE_TYPES
from oidcreg.message.oidc import RegistrationRequest
from oidcreg.server.client import RegisteredClient
from oidcreg.server.failure import Failure
from oidcreg.server.failure import PersistenceFailure
from oidcreg.server.failure import ReconciliationFailure
from oidcreg.server.scopes import intersect_scopes
from oidcreg.server.subject import select_strategy

logger = logging.getLogger(__name__)


def describe(name: str, scopes: List[str]) -> str:
    return "Dynamically registered service {} with grant types {} and with scopes {} and response types {}".format(
        name, ",".join(GRANT_TYPES), ",".join(scopes), ",".join(RESPONSE_TYPES)
    )


class ClientProvisioner(object):
    """
    Turns a validated registration request into a persisted client definition.

    :param client_db: Client store, must have a save method
    :param client_id_generator: Produces client identifiers
    :param client_secret_generator: Produces client secrets
    :param scope_reconciler: Decides on attribute release, must have a reconcile method
    """

    def __init__(self, client_db, client_id_generator, client_secret_generator, scope_reconciler):
        self.client_db = client_db
        self.client_id_generator = client_id_generator
        self.client_secret_generator = client_secret_generator
        self.scope_reconciler = scope_reconciler

    def build(self, request: RegistrationRequest, server_scopes: List[str]) -> RegisteredClient:
        # The first redirect URI is the one the client is matched on.
        service_id = request["redirect_uris"][0]
        name = request.get("client_name") or service_id

        client = RegisteredClient(
            client_id=self.client_id_generator.next(),
            client_secret=self.client_secret_generator.next(),
            name=name,
            service_id=service_id,
            subject_type=request["subject_type"],
            subject_type_strategy=select_strategy(request["subject_type"]),
            client_id_issued_at=int(time.time()),
            client_secret_expires_at=0,
            dynamically_registered=True,
            evaluation_order=HIGHEST_PRECEDENCE,
        )

        if request.get("sector_identifier_uri"):
            client["sector_identifier_uri"] = request["sector_identifier_uri"]

        _jwks_uri = request.get("jwks_uri")
        if _jwks_uri and _jwks_uri.strip():
            client["jwks_uri"] = _jwks_uri
            client["sign_id_token"] = True

        client["logout_url"] = ",".join(request.get("post_logout_redirect_uris", []))

        _requested = request.requested_scopes()
        _granted = intersect_scopes(server_scopes, _requested)
        if len(_granted) != len(_requested):
            logger.warning(
                "Scopes not granted to %s: %s",
                client.client_id,
                [s for s in _requested if s not in _granted],
            )
        client["scopes"] = _granted
        client["description"] = describe(name, _granted)

        return client

    def provision(
        self, request: RegistrationRequest, server_scopes: List[str]
    ) -> Union[RegisteredClient, Failure]:
        client = self.build(request, server_scopes)

        try:
            self.scope_reconciler.reconcile(client)
        except Exception as err:
            logger.exception("Scope reconciliation failed for %s", client.client_id)
            return ReconciliationFailure(
                "Could not reconcile scopes for client: {}".format(err),
                client_id=client.client_id,
            )

        try:
            _stored = self.client_db.save(client)
        except Exception as err:
            logger.exception("Could not store client %s", client.client_id)
            return PersistenceFailure(
                "Could not store client: {}".format(err), client_id=client.client_id
            )

        if _stored is None:
            _stored = client

        logger.info(
            "Registered client %s for %s with scopes %s",
            _stored.client_id,
            _stored.service_id,
            _stored["scopes"],
        )
        return _stored
