"""
Submission intake pipeline: sanitize -> validate -> persist -> notify.

Persistence is the hard dependency: if the write fails the request fails and
no notification is sent. Notification is best-effort: any notifier error after
a successful write is logged and reported as a NotificationStatus, never as a
failed submission.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from clyra_api.core.exceptions import NotifyError, ValidationError
from clyra_api.core.notifier import MailNotifier
from clyra_api.models.submission import SubmissionKind, SubmissionRecord

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

REQUIRED_MESSAGE = "All fields are required"
INVALID_EMAIL_MESSAGE = "Invalid email address"


def sanitize(value: Any) -> str:
    """Coerce an untrusted value to text, escape angle brackets and trim.

    Missing values and containers become empty text. Never raises.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, str):
        text = value
    elif isinstance(value, (int, float)):
        try:
            text = str(value)
        except ValueError:
            # int exceeds the interpreter's digit limit
            return ""
    else:
        return ""
    return text.replace("<", "&lt;").replace(">", "&gt;").strip()


def sanitize_fields(kind: SubmissionKind, raw_fields: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not isinstance(raw_fields, Mapping):
        raw_fields = {}
    return {field: sanitize(raw_fields.get(field)) for field in kind.fields}


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_fields(kind: SubmissionKind, fields: Dict[str, str]) -> None:
    """
    Check required fields and the email shape.

    Raises:
        ValidationError: listing each missing field, or the invalid email
    """
    missing = [field for field in kind.fields if not fields.get(field)]
    if missing:
        raise ValidationError(
            REQUIRED_MESSAGE,
            [{"field": field, "message": f"{field} is required"} for field in missing],
        )
    if not is_valid_email(fields["email"]):
        raise ValidationError(
            INVALID_EMAIL_MESSAGE,
            [{"field": "email", "message": INVALID_EMAIL_MESSAGE}],
        )


def render_notification(kind: SubmissionKind, record: SubmissionRecord):
    """Build the (html, text) bodies for the admin notification."""
    profile = kind.profile
    values = [(label, getattr(record, field)) for field, label in zip(profile.fields, profile.labels)]

    rows = "\n".join(f"    <p><strong>{label}:</strong> {value}</p>" for label, value in values)
    html = (
        '<div style="font-family:Arial,sans-serif;line-height:1.6">\n'
        f"    <h3>{profile.heading}</h3>\n"
        f"{rows}\n"
        "    <hr/>\n"
        f'    <p style="color:#666;font-size:12px">Saved ID: {record.id}</p>\n'
        "</div>"
    )
    text = "\n".join(
        [profile.heading, ""]
        + [f"{label}: {value}" for label, value in values]
        + ["", f"Saved ID: {record.id}"]
    )
    return html, text


class NotificationStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class IntakeResult:
    kind: SubmissionKind
    record: SubmissionRecord
    notification: NotificationStatus


class IntakePipeline:
    def __init__(self, store, notifier: MailNotifier):
        self.store = store
        self.notifier = notifier

    async def submit(self, kind: SubmissionKind, raw_fields: Optional[Mapping[str, Any]]) -> IntakeResult:
        """
        Process one submission end to end.

        Args:
            kind: contact or consultation
            raw_fields: untrusted request body

        Returns:
            IntakeResult: the persisted record and the notification outcome

        Raises:
            ValidationError: input failed required-field or email checks
            PersistenceError: the store could not save the record
        """
        fields = sanitize_fields(kind, raw_fields)
        validate_fields(kind, fields)

        record = await self.store.create(kind, fields)

        notification = await self._notify(kind, record)
        return IntakeResult(kind=kind, record=record, notification=notification)

    async def _notify(self, kind: SubmissionKind, record: SubmissionRecord) -> NotificationStatus:
        try:
            html, text = render_notification(kind, record)
            result = await self.notifier.notify(
                reply_to=record.email,
                subject=kind.profile.subject,
                html=html,
                text=text,
            )
        except NotifyError as e:
            logger.error(f"❌ {kind.value.capitalize()} mail failed for {record.id} (SMTP blocked?): {e.message}")
            return NotificationStatus.FAILED
        except Exception as e:
            # the record is already saved; the submitter must still see success
            logger.error(f"❌ Unexpected {kind.value} mail error for {record.id}: {str(e)}", exc_info=e)
            return NotificationStatus.FAILED

        if result.skipped:
            logger.info(f"ℹ️ {kind.value.capitalize()} mail skipped for {record.id} (mail disabled)")
            return NotificationStatus.SKIPPED

        logger.info(f"📧 {kind.value.capitalize()} mail sent for {record.id}")
        return NotificationStatus.SENT
