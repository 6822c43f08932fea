import logging
from typing import Union

from oidcreg import truncate
from oidcreg.exception import MessageException
from oidcreg.exception import MissingRequiredAttribute
from oidcreg.message.oidc import RegistrationRequest
from oidcreg.server.failure import Failure
from oidcreg.server.failure import MalformedRequest
from oidcreg.server.failure import MissingOpenIdScope
from oidcreg.server.failure import MissingRedirectUri
from oidcreg.server.failure import MissingScopes

logger = logging.getLogger(__name__)

OPENID_SCOPE = "openid"


def validate(raw: Union[bytes, str]) -> Union[RegistrationRequest, Failure]:
    """
    Parses and checks a client registration request.

    :param raw: The JSON document as received
    :return: A RegistrationRequest instance or a Failure
    """
    try:
        request = RegistrationRequest().from_json(raw)
    except MessageException as err:
        return MalformedRequest(
            "Registration request could not be parsed: {}".format(err), raw=truncate(raw)
        )

    logger.debug("Received client registration request: %s", truncate(request))

    if not request.requested_scopes():
        return MissingScopes("Registration request does not contain any scope values")

    if OPENID_SCOPE not in request.requested_scopes():
        return MissingOpenIdScope(
            "Registration request scopes do not contain {}".format(OPENID_SCOPE)
        )

    try:
        request.verify()
    except MissingRequiredAttribute as err:
        if err.args[0] == "redirect_uris":
            return MissingRedirectUri("Registration request does not contain a redirect_uri")
        return MalformedRequest("{}".format(err))
    except MessageException as err:
        return MalformedRequest("{}".format(err))

    if not request["redirect_uris"] or not request["redirect_uris"][0].strip():
        return MissingRedirectUri("Registration request does not contain a redirect_uri")

    return request
