import logging
from http import HTTPStatus
from typing import Tuple
from typing import Union

from oidcreg import truncate
from oidcreg.message import Message
from oidcreg.message.oidc import GRANT_TYPES
from oidcreg.message.oidc import RESPONSE_TYPES
from oidcreg.message.oidc import SUBJECT_TYPE_PUBLIC
from oidcreg.message.oidc import ClientRegistrationErrorResponse
from oidcreg.message.oidc import RegistrationRequest
from oidcreg.message.oidc import RegistrationResponse
from oidcreg.server.client import RegisteredClient
from oidcreg.server.failure import Failure
from oidcreg.server.failure import is_failure
from oidcreg.server.validation import validate

logger = logging.getLogger(__name__)

OAUTH2_NOCACHE_HEADERS = [("Pragma", "no-cache"), ("Cache-Control", "no-store")]


def build_response(request: RegistrationRequest, client: RegisteredClient) -> RegistrationResponse:
    """
    The registration response. Whatever strategy is used internally the
    subject type is always reported as public.
    """
    return RegistrationResponse(
        application_type="web",
        client_id=client["client_id"],
        client_secret=client["client_secret"],
        subject_type=SUBJECT_TYPE_PUBLIC,
        token_endpoint_auth_method=request.get("token_endpoint_auth_method"),
        client_name=client["name"],
        grant_types=list(GRANT_TYPES),
        redirect_uris=[client["service_id"]],
        response_types=list(RESPONSE_TYPES),
    )


class Registration(object):
    """
    The dynamic client registration endpoint.

    :param provisioner: Builds and stores the client, a ClientProvisioner instance
    :param scope_policy: Knows which scopes the server supports
    :param path: Where the endpoint lives relative to the issuer
    """

    name = "registration"
    response_cls = RegistrationResponse
    error_cls = ClientRegistrationErrorResponse
    response_format = "json"

    def __init__(self, provisioner, scope_policy, path: str = "oidc/register", issuer: str = ""):
        self.provisioner = provisioner
        self.scope_policy = scope_policy
        self.endpoint_path = path
        if issuer:
            self.full_path = "{}/{}".format(issuer.rstrip("/"), path)
        else:
            self.full_path = path

    def process_request(self, raw: Union[bytes, str]) -> Union[RegistrationResponse, Failure]:
        request = validate(raw)
        if is_failure(request):
            return request

        client = self.provisioner.provision(request, self.scope_policy.supported_scopes())
        if is_failure(client):
            return client

        return build_response(request, client)

    def handle(self, raw: Union[bytes, str]) -> Tuple[Message, HTTPStatus]:
        try:
            result = self.process_request(raw)
        except Exception as err:
            logger.exception("Unexpected error while registering client")
            result = Failure("Registration failed: {}".format(err))

        if is_failure(result):
            logger.error(
                "Rejected client registration, %s: %s context=%s request=%s",
                result.kind,
                result.message,
                result.context,
                truncate(raw),
            )
            return result.to_error_response(), HTTPStatus.BAD_REQUEST

        return result, HTTPStatus.CREATED

    def do_response(self, response: Message, status: HTTPStatus) -> dict:
        """
        :return: A dictionary with the keys response, http_headers and response_code
        """
        http_headers = [("Content-type", "application/json; charset=utf-8")]
        http_headers.extend(OAUTH2_NOCACHE_HEADERS)
        return {
            "response": response.to_json(),
            "http_headers": http_headers,
            "response_code": int(status),
        }

    def __call__(self, raw: Union[bytes, str]) -> dict:
        return self.do_response(*self.handle(raw))
