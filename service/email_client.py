"""
Resend delivery for feedback submissions.

Builds the escaped HTML and plain-text bodies and sends one message per
submission to the configured inbox, with Reply-To set to the submitter.
"""

import html
import logging
from datetime import datetime, timezone

import resend
from resend.exceptions import ResendError

from .logging_utils import log_function
from .models import FeedbackSubmission
from .secrets import Settings

logger = logging.getLogger(__name__)

APP_NAME = "Asset Hoard"
SUBJECT = f"Feedback from {APP_NAME}"


class EmailDeliveryError(RuntimeError):
    """The provider accepted the call but reported a failure."""


def escape_html(value: str) -> str:
    """Escape &, <, >, " and ' so user text cannot inject markup."""
    return html.escape(value, quote=True)


def _format_time(received_at: datetime) -> str:
    return received_at.astimezone(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')


def build_feedback_html(submission: FeedbackSubmission, received_at: datetime) -> str:
    message_html = escape_html(submission.message).replace("\n", "<br>")
    return f"""\
<p><strong>{SUBJECT}</strong> (version {escape_html(submission.app_version)})</p>
<p><strong>From:</strong> {escape_html(submission.name)} &lt;{escape_html(submission.email)}&gt;</p>
<p><strong>Received:</strong> {_format_time(received_at)}</p>
<hr>
<p>{message_html}</p>
"""


def build_feedback_text(submission: FeedbackSubmission, received_at: datetime) -> str:
    lines = [
        f"{SUBJECT} (version {submission.app_version})",
        "",
        f"From:     {submission.name} <{submission.email}>",
        f"Received: {_format_time(received_at)}",
        "",
        submission.message,
    ]
    return "\n".join(lines)


@log_function
def send_feedback_email(
    submission: FeedbackSubmission,
    settings: Settings,
    received_at: datetime | None = None,
) -> str:
    """Send the submission through Resend and return the provider message id.

    Raises EmailDeliveryError when Resend rejects the message. Network and
    other unexpected errors propagate unchanged.
    """
    received_at = received_at or datetime.now(timezone.utc)

    resend.api_key = settings.resend_api_key
    params = {
        "from": settings.from_email,
        "to": [settings.to_email],
        "reply_to": submission.email,
        "subject": SUBJECT,
        "html": build_feedback_html(submission, received_at),
        "text": build_feedback_text(submission, received_at),
    }

    try:
        response = resend.Emails.send(params)
    except ResendError as e:
        raise EmailDeliveryError(f"Resend rejected the message: {e}") from e

    message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
    if not message_id:
        raise EmailDeliveryError(f"Resend returned no message id: {response!r}")

    logger.info(f"Feedback email sent: id={message_id} reply_to={submission.email}")
    return message_id
