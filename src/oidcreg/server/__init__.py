import logging
from typing import Optional
from typing import Union

from oidcreg.exception import ConfigurationError
from oidcreg.server.configure import RegistrationConfiguration
from oidcreg.server.oidc.registration import Registration
from oidcreg.server.provisioning import ClientProvisioner
from oidcreg.server.scopes import ScopePolicy
from oidcreg.util import execute

logger = logging.getLogger(__name__)


class Server(object):
    """
    Puts together the collaborators of the registration endpoint as
    described by the configuration.
    """

    def __init__(self, conf: Union[dict, RegistrationConfiguration], **kwargs):
        if not isinstance(conf, RegistrationConfiguration):
            conf = RegistrationConfiguration(conf)
        self.conf = conf
        self.issuer = conf.issuer

        try:
            self.client_db = execute(conf.client_db)
            self.client_id_generator = execute(conf.client_id_generator)
            self.client_secret_generator = execute(conf.client_secret_generator)
            self.scope_reconciler = execute(
                conf.scope_reconciler, scopes_to_claims=conf.scopes_to_claims
            )
            self.subject_identifier = execute(conf.subject)
        except (ImportError, AttributeError, TypeError) as err:
            raise ConfigurationError("Could not instantiate collaborator: {}".format(err))

        self.scope_policy = ScopePolicy(conf.scopes_supported)

        if conf.static_clients:
            self.client_db.load(conf.static_clients)
            logger.info("Loaded %d statically configured clients", len(conf.static_clients))

        self.provisioner = ClientProvisioner(
            client_db=self.client_db,
            client_id_generator=self.client_id_generator,
            client_secret_generator=self.client_secret_generator,
            scope_reconciler=self.scope_reconciler,
        )
        self.endpoint = {
            Registration.name: Registration(
                provisioner=self.provisioner,
                scope_policy=self.scope_policy,
                path=conf.registration_path,
                issuer=self.issuer,
            )
        }

    def get_endpoint(self, endpoint_name: str) -> Optional[Registration]:
        return self.endpoint.get(endpoint_name)

    def registration_endpoint(self, raw: Union[bytes, str]) -> dict:
        return self.endpoint[Registration.name](raw)

    def subject_id(self, uid: str, client_id: str) -> str:
        """
        The subject identifier a user gets with a specific client.
        """
        _client = self.client_db.get(client_id)
        if _client is None:
            raise KeyError(client_id)
        return self.subject_identifier(uid, _client)
