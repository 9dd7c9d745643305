"""
Reply texts for the attendance chat bot.
"""

from models.events import AttendanceType
from services.mutations import MutationSummary

# =============================================================================
# HELP / FORMAT
# =============================================================================

GREETING = "こんにちは、{user_name}さん！\n勤怠連絡を受け付けています。\n\n"
FORMAT_ERROR = "申し訳ございません。フォーマットが正しくありません。\n\n"

TYPE_CHOICES = "/".join(t.label for t in AttendanceType)

FORMAT_GUIDE = (
    "【勤怠連絡フォーマット】\n"
    "【勤怠連絡】\n"
    "氏名：　〇〇　〇〇\n"
    f"種別：　[{TYPE_CHOICES}] から選択\n"
    "日付：　YYYYMMDD (複数日付: カンマ区切り、範囲指定: YYYYMMDD-YYYYMMDD)\n"
    "備考：　〇〇のため\n\n"
    "【日付指定例】\n"
    "・単一日付: 20250115\n"
    "・複数日付: 20250115,20250116,20250117\n"
    "・範囲指定: 20250115-20250117\n\n"
    "【取消について】\n"
    "種別に「取消」を指定すると、指定日付の予定を削除します。"
)

# =============================================================================
# RESULTS
# =============================================================================

ATTENDANCE_RECEIVED = "✅ 勤怠連絡を受け付けました！\n"
CANCELLATION_RECEIVED = "✅ 勤怠取消を受け付けました！\n"
EVENTS_ADDED = "✅ {count}件の予定をカレンダーに追加しました。"
EVENTS_DELETED = "✅ {person_name}さんの{count}件の予定をカレンダーから削除しました。"
NO_EVENTS_TO_DELETE = "ℹ️ 指定された日付に{person_name}さんの削除対象の予定はありませんでした。"
ADD_FAILED = "\n❌ {count}件の追加に失敗しました。"
DELETE_FAILED = "\n❌ {count}件の削除に失敗しました。"

CALENDAR_ERROR = "❌ 申し訳ございません。カレンダーへの追加に失敗しました。\nエラー: "
DELETE_ERROR = "❌ 申し訳ございません。イベントの削除に失敗しました。\nエラー: "

SEPARATOR = "─────────────────\n"


def create_help_message(user_name: str) -> str:
    return GREETING.format(user_name=user_name) + FORMAT_GUIDE


def create_format_error_message() -> str:
    return FORMAT_ERROR + FORMAT_GUIDE


def create_attendance_display(summary: MutationSummary) -> str:
    """Echo of the request, with the date text exactly as the user typed it."""
    request = summary.request
    return (
        f"\n氏名: {request.person_name}\n"
        f"種別: {request.type.label}\n"
        f"日付: {request.original_date_text}\n"
        f"備考: {request.remarks}\n"
        f"{SEPARATOR}"
        f"申請: {summary.reporter_name}\n\n"
    )


def create_success_message(summary: MutationSummary) -> str:
    message = ATTENDANCE_RECEIVED + create_attendance_display(summary)
    if summary.succeeded > 0:
        message += EVENTS_ADDED.format(count=summary.succeeded)
    if summary.failed > 0:
        message += ADD_FAILED.format(count=summary.failed)
    return message


def create_cancellation_message(summary: MutationSummary) -> str:
    person_name = summary.request.person_name
    message = CANCELLATION_RECEIVED + create_attendance_display(summary)
    if summary.succeeded > 0:
        message += EVENTS_DELETED.format(person_name=person_name, count=summary.succeeded)
    else:
        message += NO_EVENTS_TO_DELETE.format(person_name=person_name)
    if summary.failed > 0:
        message += DELETE_FAILED.format(count=summary.failed)
    return message


def create_store_error_message(is_cancellation: bool, error: Exception) -> str:
    prefix = DELETE_ERROR if is_cancellation else CALENDAR_ERROR
    return prefix + str(error)
