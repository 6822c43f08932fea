"""
Subject identifier strategies.

The strategy is selected when a client is registered and carried on the
client as a tag in 'subject_type_strategy'. It is consulted when a subject
identifier is minted for a user of that client.
"""
import hashlib
import logging
import os
from typing import Optional

from oidcreg.exception import ConfigurationError
from oidcreg.message.oidc import SUBJECT_TYPE_PAIRWISE
from oidcreg.message.oidc import SUBJECT_TYPE_PUBLIC
from oidcreg.util import host_of
from oidcreg.util import rndstr

logger = logging.getLogger(__name__)


def select_strategy(subject_type: Optional[str]) -> str:
    if subject_type and subject_type.lower() == SUBJECT_TYPE_PAIRWISE:
        return SUBJECT_TYPE_PAIRWISE
    return SUBJECT_TYPE_PUBLIC


def pairwise_id(uid, sector_identifier, salt="", **kwargs):
    return hashlib.sha256(
        ("{}{}{}".format(uid, sector_identifier, salt)).encode("utf-8")
    ).hexdigest()


def public_id(uid, salt="", **kwargs):
    return hashlib.sha256("{}{}".format(uid, salt).encode("utf-8")).hexdigest()


SUB_FUNC = {SUBJECT_TYPE_PUBLIC: public_id, SUBJECT_TYPE_PAIRWISE: pairwise_id}


def sector_identifier(client) -> str:
    """
    The host of the sector_identifier_uri if there is one, otherwise the
    host of the client's service_id.
    """
    _uri = client.get("sector_identifier_uri")
    if _uri:
        return host_of(_uri)
    return host_of(client.get("service_id", ""))


class SubjectIdentifier(object):
    def __init__(self, salt: Optional[str] = "", filename: Optional[str] = ""):
        if salt:
            self.salt = salt
        elif filename:
            if os.path.isfile(filename):
                with open(filename) as fp:
                    self.salt = fp.read()
            elif os.path.exists(filename):  # Not a file, something else
                raise ConfigurationError("Salt filename points to something that is not a file")
            else:
                self.salt = rndstr(24)
                with open(filename, "w") as fp:
                    fp.write(self.salt)
        else:
            self.salt = rndstr(24)

    def __call__(self, uid: str, client) -> str:
        _strategy = client.get("subject_type_strategy", SUBJECT_TYPE_PUBLIC)
        try:
            _func = SUB_FUNC[_strategy]
        except KeyError:
            logger.warning("Unknown subject type strategy '%s', using public", _strategy)
            _func = public_id

        return _func(uid, sector_identifier=sector_identifier(client), salt=self.salt)
