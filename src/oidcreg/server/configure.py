"""Configuration management for the registration service"""
import copy
import logging
from typing import Dict
from typing import List
from typing import Optional

from oidcreg.configure import Base
from oidcreg.exception import ConfigurationError
from oidcreg.logging import configure_logging
from oidcreg.server.scopes import SCOPE2CLAIMS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "issuer": "https://{domain}:{port}",
    "registration_path": "oidc/register",
    "scopes_supported": ["openid", "profile", "email", "address", "phone", "offline_access"],
    "scopes_to_claims": SCOPE2CLAIMS,
    "client_id_generator": {
        "class": "oidcreg.server.credentials.RandomStringGenerator",
        "kwargs": {"size": 16},
    },
    "client_secret_generator": {
        "class": "oidcreg.server.credentials.RandomStringGenerator",
        "kwargs": {"size": 32},
    },
    "client_db": {"class": "oidcreg.storage.client_store.MemoryClientStore", "kwargs": {}},
    "scope_reconciler": {
        "class": "oidcreg.server.scopes.ScopeToClaimsReconciler",
        "kwargs": {"strict": False},
    },
    "subject": {"class": "oidcreg.server.subject.SubjectIdentifier", "kwargs": {}},
    "static_clients": {},
}

CLASS_PARAMETERS = [
    "client_id_generator",
    "client_secret_generator",
    "client_db",
    "scope_reconciler",
    "subject",
]


class RegistrationConfiguration(Base):
    "Registration service configuration"
    default_config = DEFAULT_CONFIG
    parameter = {
        "issuer": "",
        "registration_path": "",
        "scopes_supported": [],
        "scopes_to_claims": {},
        "client_id_generator": None,
        "client_secret_generator": None,
        "client_db": None,
        "scope_reconciler": None,
        "subject": None,
        "static_clients": {},
        "logging": None,
    }

    def __init__(
        self,
        conf: Dict,
        base_path: Optional[str] = "",
        domain: Optional[str] = "",
        port: Optional[int] = 0,
        file_attributes: Optional[List[str]] = None,
    ):
        conf = copy.deepcopy(conf)
        Base.__init__(
            self, conf, base_path, file_attributes=file_attributes, domain=domain, port=port
        )

        for key in conf.keys():
            if key not in self.parameter and key not in ["domain", "port"]:
                logger.warning(f"{key} does not seems to be a valid configuration parameter")

        for key in self.parameter.keys():
            _val = self.conf.get(key)
            if _val is None:
                if key not in self.default_config:
                    continue
                _val = copy.deepcopy(self.default_config[key])
                if isinstance(_val, str):
                    _val = _val.format(domain=self.domain, port=self.port)

            if key in CLASS_PARAMETERS and "class" not in _val:
                raise ConfigurationError(f"{key} must specify a class")

            setattr(self, key, _val)

        if self.logging:
            configure_logging(config=self.logging)

        if "openid" not in self.scopes_supported:
            logger.warning("openid is not among the supported scopes")
