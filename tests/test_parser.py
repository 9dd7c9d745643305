"""Tests for structured attendance message parsing."""

import pytest

from core.parser import parse_attendance_message, remove_mentions
from models.commands import FormatError, ParseOk, ValidationError
from models.events import AttendanceType, CalendarDate


def build_message(name="山田太郎", type_label="全休", dates="20250115", remarks="私用のため"):
    return f"【勤怠連絡】\n氏名：{name}\n種別：{type_label}\n日付：{dates}\n備考：{remarks}"


class TestParseAttendanceMessage:
    def test_documented_example(self, sample_message):
        result = parse_attendance_message(sample_message)

        assert isinstance(result, ParseOk)
        request = result.request
        assert request.person_name == "山田太郎"
        assert request.type is AttendanceType.FULL_DAY
        assert request.dates == (CalendarDate(2025, 1, 15),)
        assert request.original_date_text == "20250115"
        assert request.remarks == "私用のため"

    @pytest.mark.parametrize("attendance_type", list(AttendanceType))
    def test_every_type_label_is_accepted(self, attendance_type):
        result = parse_attendance_message(build_message(type_label=attendance_type.label))
        assert isinstance(result, ParseOk)
        assert result.request.type is attendance_type

    def test_unknown_type_is_format_error(self):
        assert isinstance(parse_attendance_message(build_message(type_label="有給")), FormatError)

    def test_missing_header_is_format_error(self):
        message = "氏名：山田太郎\n種別：全休\n日付：20250115\n備考：私用のため"
        assert isinstance(parse_attendance_message(message), FormatError)

    def test_missing_remarks_line_is_format_error(self):
        message = "【勤怠連絡】\n氏名：山田太郎\n種別：全休\n日付：20250115"
        assert isinstance(parse_attendance_message(message), FormatError)

    def test_half_width_colon_is_format_error(self):
        message = "【勤怠連絡】\n氏名:山田太郎\n種別:全休\n日付:20250115\n備考:私用"
        assert isinstance(parse_attendance_message(message), FormatError)

    def test_free_text_is_format_error(self):
        assert isinstance(parse_attendance_message("明日休みます"), FormatError)

    def test_tolerates_surrounding_whitespace(self):
        message = "【勤怠連絡】 \n  氏名：　山田 太郎  \n種別： 遅刻\n日付： 20250115 \n備考：  電車遅延  "
        result = parse_attendance_message(message)

        assert isinstance(result, ParseOk)
        assert result.request.person_name == "山田 太郎"
        assert result.request.type is AttendanceType.LATE_ARRIVAL
        assert result.request.remarks == "電車遅延"
        assert result.request.original_date_text == "20250115"

    def test_mentions_are_stripped(self):
        result = parse_attendance_message("@attendance-bot " + build_message())
        assert isinstance(result, ParseOk)

    def test_name_length_limit(self):
        assert isinstance(parse_attendance_message(build_message(name="山" * 50)), ParseOk)
        result = parse_attendance_message(build_message(name="山" * 51))
        assert isinstance(result, ValidationError)

    def test_remarks_length_limit(self):
        assert isinstance(parse_attendance_message(build_message(remarks="あ" * 200)), ParseOk)
        result = parse_attendance_message(build_message(remarks="あ" * 201))
        assert isinstance(result, ValidationError)

    def test_invalid_date_is_validation_error(self):
        result = parse_attendance_message(build_message(dates="20250230"))
        assert isinstance(result, ValidationError)

    def test_reversed_range_is_validation_error(self):
        result = parse_attendance_message(build_message(dates="20250105-20250103"))
        assert isinstance(result, ValidationError)

    def test_thirty_one_dates_allowed(self):
        result = parse_attendance_message(build_message(dates="20250101-20250131"))
        assert isinstance(result, ParseOk)
        assert len(result.request.dates) == 31

    def test_more_than_thirty_one_dates_rejected(self):
        result = parse_attendance_message(build_message(dates="20250101-20250201"))
        assert isinstance(result, ValidationError)

    def test_original_date_text_is_kept_verbatim(self):
        result = parse_attendance_message(build_message(dates="20250115,20250116"))
        assert result.request.original_date_text == "20250115,20250116"
        assert [d.token for d in result.request.dates] == ["20250115", "20250116"]

    def test_multiline_remarks(self):
        result = parse_attendance_message(build_message(remarks="通院のため\n午後から出社"))
        assert result.request.remarks == "通院のため\n午後から出社"


class TestTemplateRoundTrip:
    @pytest.mark.parametrize(
        "dates", ["20250115", "20250115,20250117", "20250115-20250117"]
    )
    def test_to_message_parses_back(self, dates):
        original = parse_attendance_message(build_message(type_label="午前休", dates=dates))
        reparsed = parse_attendance_message(original.request.to_message())

        assert isinstance(reparsed, ParseOk)
        assert reparsed.request == original.request


def test_remove_mentions():
    assert remove_mentions("@bot_1 hello @other-bot") == "hello"
