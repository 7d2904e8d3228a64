# -*- coding: utf-8 -*-
"""Tests for the CSV tokenizer."""
import pytest

from schedule_core.csv_parser import get_csv_headers, parse_csv, parse_csv_file
from schedule_core.errors import CSVParseError


def test_parse_simple_rows():
    rows = parse_csv("a,b,c\n1,2,3\n")
    assert rows == [["a", "b", "c"], ["1", "2", "3"]]


def test_quoted_fields_keep_commas_quotes_and_newlines():
    text = 'subject,location\n"Lab, West","He said ""hi""\nthen left"\n'
    rows = parse_csv(text)
    assert rows[1] == ["Lab, West", 'He said "hi"\nthen left']


def test_crlf_line_endings():
    assert parse_csv("a,b\r\n1,2\r\n") == [["a", "b"], ["1", "2"]]


def test_trailing_blank_lines_are_dropped():
    assert parse_csv("a,b\n1,2\n\n\n") == [["a", "b"], ["1", "2"]]


def test_blank_line_in_the_middle_keeps_row_numbering():
    rows = parse_csv("a,b\n\n1,2\n")
    assert rows == [["a", "b"], [], ["1", "2"]]


def test_byte_order_mark_is_stripped():
    rows = parse_csv("\ufeffsubject_name,day\nPhysics,Mon\n")
    assert rows[0][0] == "subject_name"


def test_empty_text_has_no_rows():
    assert parse_csv("") == []


def test_unterminated_quote_raises():
    with pytest.raises(CSVParseError):
        parse_csv('a,b\n"unterminated,2\n')


def test_get_csv_headers_trims_and_lowercases():
    assert get_csv_headers(" Subject ,DAY,Start Time\nx,y,z\n") == ["subject", "day", "start time"]


def test_parse_csv_file(tmp_path):
    path = tmp_path / "schedule.csv"
    path.write_text("Class,Day\nPhysics,Monday\n", encoding="utf-8")
    headers, rows = parse_csv_file(path)
    assert headers == ["class", "day"]
    assert rows == [["Physics", "Monday"]]
