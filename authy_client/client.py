"""
Authy API client.

This module wraps the Authy two-factor authentication API: registering and
removing users, looking up their status, sending one-time passwords by SMS
and verifying the tokens users type back in.

Every call is a single blocking request with the configured timeout. There is
no retry, caching or background work; the client only holds its immutable
configuration and a ``requests.Session``.

Authy API Reference: https://www.twilio.com/docs/authy/api

Example usage:
    client = AuthyClient(AuthyConfig(api_secret="..."))

    authy_id = client.create_user(AuthyUser(cellphone="5551234567", country_code="1"))
    client.send_otp(authy_id)

    if client.check_otp_token(authy_id, token_from_user):
        # User verified successfully
        ...
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import urljoin, urlsplit

import requests

from .base import AuthyUser, ResponseMessage, TokenVerification
from .conf import AuthyConfig
from .constants import (API_KEY_HEADER, FORM_CONTENT_TYPE, JSON_CONTENT_TYPE,
                        Messages)
from .exceptions import (InvalidTokenError, MalformedResponseError,
                         RequestBuildError, RequestFailedError, TransportError,
                         ValidationError)

logger = logging.getLogger(__name__)


class AuthyClient:
    """
    Client for one Authy application.

    Args:
        config: Application settings (secret, format, base URL, timeout)
        session: Optional ``requests.Session`` to send requests through.
            A private session is created when omitted and closed by
            :meth:`close`.

    Raises:
        ConfigurationError: If the base URL built from the config cannot be parsed
    """

    def __init__(self, config: AuthyConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.api_url
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    @classmethod
    def from_env(cls) -> "AuthyClient":
        """Build a client from ``AUTHY_*`` environment variables."""
        return cls(AuthyConfig.from_env())

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "AuthyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Request construction and transport
    # ------------------------------------------------------------------

    def _get_headers(self) -> dict:
        """Get HTTP headers for Authy API requests."""
        return {
            "Content-Type": FORM_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
            "User-Agent": self.config.user_agent,
            API_KEY_HEADER: self.config.api_secret,
        }

    def _resolve(self, rel_path: str) -> str:
        """Resolve a relative endpoint path against the base URL."""
        if not isinstance(rel_path, str) or any(ord(c) < 0x20 or ord(c) == 0x7F for c in rel_path):
            raise RequestBuildError(Messages.INVALID_PATH.format(path=rel_path))

        try:
            url = urljoin(self.base_url, rel_path)
            netloc = urlsplit(url).netloc
        except ValueError as e:
            raise RequestBuildError(Messages.INVALID_PATH.format(path=rel_path)) from e

        # Only paths below the configured host are allowed to carry the API key
        if netloc != urlsplit(self.base_url).netloc:
            raise RequestBuildError(Messages.INVALID_PATH.format(path=rel_path))
        return url

    def _encode_body(self, body: Any) -> Optional[List[Tuple[str, str]]]:
        """Turn a request body into form key/value pairs."""
        if body is None:
            return None

        if hasattr(body, "to_form"):
            body = body.to_form()

        if isinstance(body, Mapping):
            items: Iterable = body.items()
        else:
            try:
                items = list(body)
            except TypeError as e:
                raise RequestBuildError(Messages.INVALID_BODY) from e

        pairs = []
        try:
            for key, value in items:
                if not isinstance(key, str):
                    raise RequestBuildError(Messages.INVALID_BODY)
                if value is None:
                    continue
                if isinstance(value, bool):
                    value = "true" if value else "false"
                elif isinstance(value, (int, float)):
                    value = str(value)
                elif not isinstance(value, str):
                    raise RequestBuildError(Messages.INVALID_BODY)
                pairs.append((key, value))
        except (TypeError, ValueError) as e:
            raise RequestBuildError(Messages.INVALID_BODY) from e
        return pairs

    def build_request(
        self,
        method: str,
        rel_path: str,
        body: Any = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> requests.PreparedRequest:
        """
        Build a signed, unsent request.

        Args:
            method: HTTP method, e.g. "GET" or "POST"
            rel_path: Endpoint path relative to the base URL
            body: Mapping, iterable of pairs, or object with ``to_form()``
            params: Query parameters, encoded by requests

        Returns:
            requests.PreparedRequest with form-encoded body and Authy headers

        Raises:
            RequestBuildError: If the path cannot be resolved or the body encoded
        """
        url = self._resolve(rel_path)
        data = self._encode_body(body)
        request = requests.Request(method, url, params=params, data=data, headers=self._get_headers())
        return request.prepare()

    def _send(self, request: requests.PreparedRequest, rel_path: str) -> requests.Response:
        try:
            return self.session.send(request, timeout=self.config.timeout)
        except requests.RequestException as e:
            logger.error("Authy API request %s %s failed: %s", request.method, rel_path, e)
            raise TransportError(Messages.REQUEST_FAILED.format(path=rel_path, error=e)) from e

    def _decode(self, response: requests.Response, resource):
        """Best-effort decoding; an unreadable body yields an empty resource."""
        try:
            payload = response.json()
        except ValueError:
            logger.debug(
                "Ignoring undecodable Authy response (HTTP %s)",
                response.status_code,
            )
            payload = None
        return resource.from_payload(payload)

    def get(self, rel_path: str, resource=ResponseMessage, params: Optional[Mapping[str, str]] = None):
        """
        Make a GET request and decode the body into ``resource``.

        Args:
            rel_path: Endpoint path relative to the base URL
            resource: Type with a ``from_payload`` constructor
            params: Optional query parameters

        Raises:
            RequestBuildError: If the request cannot be built
            TransportError: If the request fails on the network
        """
        request = self.build_request("GET", rel_path, params=params)
        logger.debug("Authy GET %s", rel_path)
        return self._decode(self._send(request, rel_path), resource)

    def post(self, rel_path: str, body: Any = None, resource=ResponseMessage):
        """Make a POST request with a form-encoded body; see :meth:`get`."""
        request = self.build_request("POST", rel_path, body)
        logger.debug("Authy POST %s", rel_path)
        return self._decode(self._send(request, rel_path), resource)

    # ------------------------------------------------------------------
    # API operations
    # ------------------------------------------------------------------

    def get_app_info(self) -> ResponseMessage:
        """Get the application details for the configured API secret."""
        return self.get("app/details")

    def create_user(self, user: AuthyUser) -> int:
        """
        Register a user with Authy.

        Args:
            user: Registration data; cellphone and country code are required

        Returns:
            The Authy id assigned to the user

        Raises:
            ValidationError: If cellphone or country code is missing
            RequestFailedError: If Authy rejects the registration
        """
        if not user.is_complete():
            raise ValidationError(Messages.INSUFFICIENT_USER_DATA)

        msg = self.post("users/new", user)
        if not msg.success:
            logger.error("Authy user registration failed: %s", msg.message)
            raise RequestFailedError(Messages.CREATE_NOT_SUCCESSFUL.format(message=msg.message))

        return msg.user.id

    def remove_user(self, authy_user_id: int) -> None:
        """
        Remove a user from the Authy application.

        Raises:
            RequestFailedError: With Authy's message if the removal is rejected
        """
        msg = self.post(f"users/{authy_user_id}/remove")
        if not msg.success:
            logger.error("Authy user removal failed for %s: %s", authy_user_id, msg.message)
            raise RequestFailedError(msg.message)

    def user_status(self, authy_user_id: int) -> ResponseMessage:
        """Get the registration status of a user; the envelope is returned unfiltered."""
        return self.get(f"users/{authy_user_id}/status")

    def send_otp(self, authy_user_id: int) -> ResponseMessage:
        """
        Send a one-time password by SMS to an already registered user.

        The envelope is returned as-is; check ``success`` on the result.
        """
        return self.send_otp_with_action(authy_user_id)

    def send_otp_with_action(
        self,
        authy_user_id: int,
        action: str = "",
        action_message: str = "",
    ) -> ResponseMessage:
        """
        Send a one-time password by SMS with an optional action label.

        ``action`` and ``action_message`` are passed as query parameters.
        The live API does not appear to apply them; ``action_message`` is
        only sent together with ``action``. Both are form-encoded by
        requests, so reserved characters such as ``&`` reach Authy escaped
        instead of splitting the query string.

        Args:
            authy_user_id: Authy id of the user
            action: Action label the token is bound to
            action_message: Custom text for the action
        """
        params = {}
        if action:
            params["action"] = action
            if action_message:
                params["action_message"] = action_message
        return self.get(f"sms/{authy_user_id}", params=params or None)

    def verify_token(self, authy_user_id: int, token: str) -> TokenVerification:
        """
        Verify a token entered by the user and return the decoded response.

        Any status other than 200 is treated as a rejected token, whatever
        the body says.

        Raises:
            ValidationError: If the user id or token is missing
            InvalidTokenError: If Authy answers with a non-200 status
            MalformedResponseError: If a 200 response cannot be decoded
            TransportError: If the request fails on the network
        """
        if not authy_user_id or not token:
            raise ValidationError(Messages.MISSING_TOKEN_OR_USER)

        path = f"verify/{requests.utils.quote(token, safe='')}/{authy_user_id}"
        request = self.build_request("GET", path)
        logger.debug("Authy GET verify/<token>/%s", authy_user_id)
        response = self._send(request, f"verify/<token>/{authy_user_id}")

        if response.status_code != 200:
            logger.info(
                "Authy rejected token for user %s (HTTP %s)",
                authy_user_id,
                response.status_code,
            )
            raise InvalidTokenError(Messages.INVALID_TOKEN, status_code=response.status_code)

        try:
            return TokenVerification.from_payload(response.json())
        except ValueError as e:
            logger.error("Error unmarshaling Authy API response for user %s", authy_user_id)
            raise MalformedResponseError(Messages.MALFORMED_RESPONSE) from e
        except MalformedResponseError:
            logger.error("Malformed Authy verification response for user %s", authy_user_id)
            raise

    def check_otp_token(self, authy_user_id: int, token: str) -> bool:
        """
        Check whether ``token`` is a valid one-time password for the user.

        Returns:
            True only when Authy answers 200 with ``success`` "true" and
            ``token`` "is valid"

        Raises:
            See :meth:`verify_token`.
        """
        return self.verify_token(authy_user_id, token).is_valid
