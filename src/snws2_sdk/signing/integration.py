"""
HTTP client integration for request signing

This module connects the SNWS2 authorization builder to the `requests`
library, so outbound requests are signed automatically:

    session = create_signing_session(SNWS2Auth("my-token", token_secret="my-secret"))
    session.get("https://data.solarnetwork.net/solarquery/api/v1/sec/range/interval",
                params={"nodeId": 123})
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Union
from urllib.parse import urlsplit, urlunsplit

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest

from ..config.environment import Environment
from ..exceptions import ConfigurationError, SigningError
from .authorization_builder import AuthorizationV2Builder
from .types import HttpContentType, HttpHeaders, SigningErrorCodes
from .utils import form_query_parse

logger = logging.getLogger(__name__)


def prepared_body_content(body: Any) -> Optional[Union[str, bytes]]:
    """
    Get the content of a prepared request body for signing.

    File-like bodies are read and then rewound to where they started, so
    `requests` still sends the full content.

    Args:
        body: The prepared request body

    Returns:
        The body content, or None without a body

    Raises:
        SigningError: If the body is an iterator or a stream that cannot be
            rewound, as its content would be consumed by signing
    """
    if body is None or isinstance(body, (str, bytes)):
        return body
    if isinstance(body, bytearray):
        return bytes(body)
    if hasattr(body, 'read') and hasattr(body, 'seek') and (not hasattr(body, 'seekable') or body.seekable()):
        position = body.tell() if hasattr(body, 'tell') else 0
        content = body.read()
        body.seek(position)
        return content
    raise SigningError(
        f"Request body of type {type(body).__name__} cannot be signed; "
        "use bytes, a string or a seekable file",
        SigningErrorCodes.UNSIGNABLE_BODY,
        {"body_type": type(body).__name__}
    )


class SNWS2Auth(AuthBase):
    """
    `requests` authentication hook for the SNWS2 scheme.

    A new builder is configured for every request, so one instance can be
    shared by a session across threads.
    """

    def __init__(
        self,
        token_id: str,
        token_secret: Optional[str] = None,
        signing_key: Optional[Union[bytes, str]] = None,
        signing_key_date: Optional[datetime] = None,
        environment: Optional[Environment] = None,
        use_sn_date: bool = True,
        force_host_port: bool = False,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the authentication hook.

        Args:
            token_id: The auth token identifier
            token_secret: The token secret, used to derive a key per request
            signing_key: A previously derived signing key, as bytes or hex
            signing_key_date: The date the signing key was derived for
            environment: Environment used for the default `Host` value
            use_sn_date: Send and sign `X-SN-Date` rather than `Date`
            force_host_port: Always include the port in the `Host` value
            clock: Optional current time provider

        Raises:
            ConfigurationError: Unless exactly one of token_secret or
                signing_key is given
        """
        if (token_secret is None) == (signing_key is None):
            raise ConfigurationError(
                "Exactly one of token_secret or signing_key is required",
                SigningErrorCodes.INVALID_CREDENTIALS,
                {"token_id": token_id}
            )
        self.token_id = token_id
        self.token_secret = token_secret
        self.signing_key = signing_key
        self.signing_key_date = signing_key_date
        self.environment = environment
        self.use_sn_date = use_sn_date
        self.force_host_port = force_host_port
        self.clock = clock
        logger.info(f"Configured SNWS2 request signing for token: {token_id}")

    def create_builder(self, request: PreparedRequest) -> AuthorizationV2Builder:
        """
        Create a builder configured from a prepared request.

        Args:
            request: The request to describe

        Returns:
            AuthorizationV2Builder: The configured builder
        """
        builder = AuthorizationV2Builder(
            self.token_id,
            environment=self.environment,
            force_host_port=self.force_host_port,
            clock=self.clock
        )
        # requests encodes query values with `+` for spaces, so parse them as form data
        url = urlsplit(request.url)
        builder.method(request.method.upper()).url(urlunsplit(url._replace(query='', fragment='')))
        if url.query:
            builder.query_params(form_query_parse(url.query))
        if self.use_sn_date:
            builder.sn_date(True)

        content_type = request.headers.get(HttpHeaders.CONTENT_TYPE)
        if content_type:
            builder.content_type(content_type)

        body = prepared_body_content(request.body)
        if body:
            if content_type and content_type.lower().startswith(HttpContentType.FORM_URLENCODED.value):
                builder.query_params(form_query_parse(body))
            else:
                builder.compute_content_digest(body)
        return builder

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        builder = self.create_builder(request)

        if self.token_secret is not None:
            authorization = builder.build(self.token_secret)
        else:
            builder.key(self.signing_key, self.signing_key_date)
            authorization = builder.build_with_saved_key()

        digest = builder.http_headers.first_value(HttpHeaders.DIGEST)
        if digest:
            request.headers[HttpHeaders.DIGEST] = digest
        date_header = HttpHeaders.X_SN_DATE if builder.use_sn_date else HttpHeaders.DATE
        request.headers[date_header] = builder.request_date_header_value
        request.headers[HttpHeaders.AUTHORIZATION] = authorization

        logger.debug(f"Signed {request.method} request to {request.url}")
        return request


def sign_prepared_request(prepared_request: PreparedRequest, auth: SNWS2Auth) -> PreparedRequest:
    """
    Sign a prepared request.

    Args:
        prepared_request: Prepared request to sign
        auth: The authentication hook to apply

    Returns:
        PreparedRequest: Request with the date and Authorization headers added
    """
    return auth(prepared_request)


def create_signing_session(auth: SNWS2Auth, session: Optional[requests.Session] = None) -> requests.Session:
    """
    Create a session that signs every request.

    Args:
        auth: The authentication hook to install
        session: Optional existing session to configure

    Returns:
        requests.Session: The session with the hook installed
    """
    session = session or requests.Session()
    session.auth = auth
    return session
