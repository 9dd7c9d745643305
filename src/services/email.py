"""
Email sending for attendance digests and job errors.
"""

import traceback
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from msgraph.generated.models.body_type import BodyType
from msgraph.generated.models.email_address import EmailAddress
from msgraph.generated.models.item_body import ItemBody
from msgraph.generated.models.message import Message
from msgraph.generated.models.recipient import Recipient
from msgraph.generated.users.item.send_mail.send_mail_post_request_body import (
    SendMailPostRequestBody,
)

from core.config import (
    CALENDAR_TIMEZONE,
    ERROR_EMAIL,
    FROM_EMAIL,
    FROM_NAME,
    REPORT_TO_EMAIL,
    SUBJECT_PREFIX,
)
from core.errors import StoreError
from core.graph_client import get_graph_client
from models.events import ChangeSet
from services.reports import aggregate_changes_by_person, create_report_body, create_report_subject


class MailTransport(Protocol):
    async def send_message(
        self, to_address: str, subject: str, body: str, from_address: str, from_name: str
    ) -> None: ...


class GraphMailTransport:
    """Send plain-text mail from a mailbox through MS Graph."""

    def __init__(self, graph=None):
        self._graph = graph

    @property
    def graph(self):
        if self._graph is None:
            self._graph = get_graph_client()
        return self._graph

    async def send_message(
        self, to_address: str, subject: str, body: str, from_address: str, from_name: str
    ) -> None:
        if not to_address or not from_address:
            raise StoreError("Mail addresses are not configured")

        message = Message(
            subject=subject,
            body=ItemBody(content_type=BodyType.Text, content=body),
            to_recipients=[Recipient(email_address=EmailAddress(address=to_address))],
            from_=Recipient(email_address=EmailAddress(address=from_address, name=from_name)),
        )

        request_body = SendMailPostRequestBody(message=message, save_to_sent_items=True)

        await self.graph.users.by_user_id(from_address).send_mail.post(request_body)


async def send_attendance_report(
    transport: MailTransport, changes: ChangeSet, current_time: datetime
) -> str:
    """Send the digest for a change set and return the subject used."""
    person_changes = aggregate_changes_by_person(changes)
    subject = create_report_subject(current_time)
    body = create_report_body(person_changes)

    await transport.send_message(REPORT_TO_EMAIL, subject, body, FROM_EMAIL, FROM_NAME)
    print(f"Sent attendance report to {REPORT_TO_EMAIL}")
    return subject


def create_error_email_body(error_type: str, error: Exception) -> str:
    occurred_at = datetime.now(ZoneInfo(CALENDAR_TIMEZONE)).strftime("%Y/%m/%d %H:%M:%S")
    stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return f"""休暇管理システムでエラーが発生しました。

【エラー詳細】
タイプ: {error_type}
エラー: {error}
スタックトレース: {stack}
発生時刻: {occurred_at}

---
このメールは休暇管理システムにより自動送信されています。"""


async def send_error_email(transport: MailTransport, error_type: str, error: Exception):
    """Send error notification email to the operator."""
    subject = f"{SUBJECT_PREFIX} エラー通知 - {error_type}"
    body = create_error_email_body(error_type, error)

    try:
        await transport.send_message(ERROR_EMAIL, subject, body, FROM_EMAIL, FROM_NAME)
        print(f"Sent error email to {ERROR_EMAIL}")
    except Exception as e:
        print(f"Failed to send error email: {e}")
