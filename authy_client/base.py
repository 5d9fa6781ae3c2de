"""
Typed data model for the Authy API.

Authy answers most endpoints with one loosely-typed JSON envelope whose
sub-objects are filled in depending on the endpoint. These dataclasses decode
that envelope on a best-effort basis: unknown keys are ignored, and keys that
are missing or carry a value of the wrong JSON type leave the field at its
zero value instead of failing the call.

The verify endpoint is the exception. It sends ``"success": "true"`` as a
string, so it gets its own narrow :class:`TokenVerification` type rather than
sharing the envelope.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .constants import VERIFY_SUCCESS_VALUE, VERIFY_TOKEN_VALID
from .exceptions import MalformedResponseError


class ResponseFormat(Enum):
    """Response format namespace used in the API base path."""
    JSON = "json"
    XML = "xml"

    @classmethod
    def from_value(cls, value) -> "ResponseFormat":
        """
        Normalise a user-supplied format.

        Empty values select JSON. Raises ValueError for anything that is
        neither ``json`` nor ``xml``.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.JSON
        return cls(str(value).strip().lower())


def _get_dict(payload: Any, key: str) -> Dict[str, Any]:
    value = payload.get(key) if isinstance(payload, dict) else None
    return value if isinstance(value, dict) else {}


def _get_str(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def _get_int(payload: Dict[str, Any], key: str) -> int:
    value = payload.get(key)
    # bool is an int subclass, but JSON true is not a number
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def _get_bool(payload: Dict[str, Any], key: str) -> bool:
    value = payload.get(key)
    return value if isinstance(value, bool) else False


@dataclass
class AppInfo:
    """Application details returned by ``app/details``."""
    name: str = ""
    plan: str = ""
    sms_enabled: bool = False
    phone_calls_enabled: bool = False
    app_id: int = 0
    onetouch_enabled: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AppInfo":
        return cls(
            name=_get_str(payload, "name"),
            plan=_get_str(payload, "plan"),
            sms_enabled=_get_bool(payload, "sms_enabled"),
            phone_calls_enabled=_get_bool(payload, "phone_calls_enabled"),
            app_id=_get_int(payload, "app_id"),
            onetouch_enabled=_get_bool(payload, "onetouch_enabled"),
        )


@dataclass
class User:
    """User reference embedded in the envelope after registration."""
    id: int = 0

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "User":
        return cls(id=_get_int(payload, "id"))


@dataclass
class Status:
    """
    Registration state of a user, returned by ``users/{id}/status``.

    Attributes:
        authy_id: Authy user id the status belongs to
        confirmed: Whether the user confirmed their phone number
        registered: Whether the user installed the Authy app
        country_code: Numeric phone country code
        phone_number: Masked phone number as reported by Authy
        email: Email address on record, if any
    """
    authy_id: int = 0
    confirmed: bool = False
    registered: bool = False
    country_code: int = 0
    phone_number: str = ""
    email: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Status":
        return cls(
            authy_id=_get_int(payload, "authy_id"),
            confirmed=_get_bool(payload, "confirmed"),
            registered=_get_bool(payload, "registered"),
            country_code=_get_int(payload, "country_code"),
            phone_number=_get_str(payload, "phone_number"),
            email=_get_str(payload, "email"),
        )


@dataclass
class Device:
    """Device the OTP was delivered to or verified against."""
    id: int = 0
    os_type: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Device":
        os_type = payload.get("os_type")
        return cls(
            id=_get_int(payload, "id"),
            os_type=os_type if isinstance(os_type, str) else None,
        )


@dataclass
class ResponseMessage:
    """
    Generic response envelope returned by most Authy endpoints.

    Attributes:
        app: Application details (``app/details`` only)
        user: User reference (``users/new`` only)
        status: Registration state (``users/{id}/status`` only)
        device: Device information (``sms/{id}``)
        token: Token state text, when the endpoint reports one
        message: Human-readable message from Authy
        success: Whether Authy considers the call successful
    """
    app: AppInfo = field(default_factory=AppInfo)
    user: User = field(default_factory=User)
    status: Status = field(default_factory=Status)
    device: Device = field(default_factory=Device)
    token: str = ""
    message: str = ""
    success: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> "ResponseMessage":
        """Decode an envelope; anything that is not a JSON object yields an empty one."""
        if not isinstance(payload, dict):
            return cls()
        return cls(
            app=AppInfo.from_payload(_get_dict(payload, "app")),
            user=User.from_payload(_get_dict(payload, "user")),
            status=Status.from_payload(_get_dict(payload, "status")),
            device=Device.from_payload(_get_dict(payload, "device")),
            token=_get_str(payload, "token"),
            message=_get_str(payload, "message"),
            success=_get_bool(payload, "success"),
        )


@dataclass
class AuthyUser:
    """
    Registration request for ``users/new``.

    Authy needs at least the cellphone number and its country code.

    Attributes:
        cellphone: Phone number without the country prefix
        country_code: Numeric country calling code, e.g. "1" or "61"
        email: Optional email address
        send_install_link: Ask Authy to text the app install link
    """
    cellphone: str
    country_code: str
    email: str = ""
    send_install_link: bool = False

    def is_complete(self) -> bool:
        return bool(self.cellphone and self.country_code)

    def to_form(self) -> Dict[str, str]:
        """Form fields for the request body; optional fields are skipped when empty."""
        form = {}
        if self.email:
            form["user[email]"] = self.email
        form["user[cellphone]"] = self.cellphone
        form["user[country_code]"] = self.country_code
        if self.send_install_link:
            form["send_install_link_via_sms"] = "true"
        return form


@dataclass
class TokenVerification:
    """
    Response of ``verify/{token}/{id}``.

    Both ``success`` and ``token`` are kept as the raw strings Authy sends.
    """
    success: str = ""
    token: str = ""
    message: str = ""

    @property
    def is_valid(self) -> bool:
        return self.success == VERIFY_SUCCESS_VALUE and self.token == VERIFY_TOKEN_VALID

    @classmethod
    def from_payload(cls, payload: Any) -> "TokenVerification":
        """
        Decode a verification response.

        Raises:
            MalformedResponseError: If the payload is not a JSON object or
                ``success``/``token`` are not strings
        """
        if not isinstance(payload, dict):
            raise MalformedResponseError("Verification response is not a JSON object")

        for key in ("success", "token"):
            value = payload.get(key)
            if value is not None and not isinstance(value, str):
                raise MalformedResponseError(
                    f"Verification field {key!r} has unexpected type {type(value).__name__}"
                )

        return cls(
            success=payload.get("success") or "",
            token=payload.get("token") or "",
            message=_get_str(payload, "message"),
        )
