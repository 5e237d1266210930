from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional


DEFAULT_NAME = "Anonymous"
DEFAULT_APP_VERSION = "Unknown"


class ValidationError(ValueError):
    """A submitted field failed validation; str(exc) is the client message."""


def _text(data: dict, key: str) -> str:
    # Non-string values count as absent
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""


@dataclass(frozen=True)
class FeedbackSubmission:
    # User content and credentials stay out of repr, which ends up in the logs
    message: str = field(repr=False)
    email: str = field(repr=False)
    name: str = DEFAULT_NAME
    app_version: str = DEFAULT_APP_VERSION
    token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def token_from(cls, data: dict[str, Any]) -> Optional[str]:
        """Read the token, accepting the older ``checktoken`` field name."""
        token = data.get("token")
        if token is None:
            token = data.get("checktoken")
        return token if isinstance(token, str) else None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> FeedbackSubmission:
        """Build a submission from a decoded JSON body.

        Raises ValidationError when ``message`` or ``email`` is missing or blank.
        """
        message = _text(data, "message")
        if not message:
            raise ValidationError("Message is required")

        email = _text(data, "email")
        if not email:
            raise ValidationError("Email is required")

        return cls(
            message=message,
            email=email,
            name=_text(data, "name") or DEFAULT_NAME,
            app_version=_text(data, "appVersion") or DEFAULT_APP_VERSION,
            token=cls.token_from(data),
        )
