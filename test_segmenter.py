"""
Tests for line, page and cell segmentation
"""

from phonetable.segmenter import (
    count_header_lines,
    filter_data_lines,
    find_data_start_index,
    is_header_or_separator,
    split_line_into_columns,
    split_lines,
    split_text_into_pages,
)


def test_split_lines_keeps_spacing_and_drops_blanks():
    lines = split_lines("ID    Phone\n\n   \n001    91234567\r\n")

    assert lines == ["ID    Phone", "001    91234567"]
    assert split_lines("") == []


def test_header_and_separator_lines():
    assert is_header_or_separator("ID    Phone    Company")
    assert is_header_or_separator("Phone Number")
    assert is_header_or_separator("S/N  Name")
    assert is_header_or_separator("----------")
    assert is_header_or_separator("|||")
    assert is_header_or_separator("")
    assert is_header_or_separator(None)

    assert not is_header_or_separator("001    91234567    Acme Pte Ltd")
    assert not is_header_or_separator("Identity Corp    91234567")
    assert not is_header_or_separator("Nominee Services    62345678")


def test_filter_data_lines():
    lines = ["ID    Phone", "-----", "001    91234567", "002    98765432"]

    assert filter_data_lines(lines) == ["001    91234567", "002    98765432"]


def test_split_line_into_columns():
    line = "001    91234567    Acme Pte Ltd"

    assert split_line_into_columns(line, r"\s{4,}") == ["001", "91234567", "Acme Pte Ltd"]
    assert split_line_into_columns(line) == ["001", "91234567", "Acme", "Pte", "Ltd"]
    assert split_line_into_columns("| 001 | 91234567 |", r"\|+") == ["001", "91234567"]
    assert split_line_into_columns("") == []


def test_find_data_start_index():
    lines = ["ID    Phone", "-----", "001    91234567"]
    assert find_data_start_index(lines, r"\s{4,}") == 2

    assert find_data_start_index(["001    91234567"], r"\s{4,}") == 0
    assert find_data_start_index(["Directory listing", "More text"]) == 1


def test_count_header_lines():
    assert count_header_lines(["ID  Phone", "-----", "001  91234567"]) == 2
    assert count_header_lines(["001  91234567"]) == 0


def test_split_text_into_pages():
    assert split_text_into_pages("first\fsecond") == ["first", "second"]
    assert len(split_text_into_pages("row a\nPage 2\nrow b")) == 2
    assert len(split_text_into_pages("row a\n  3  \nrow b")) == 2
    assert split_text_into_pages("only page") == ["only page"]
    assert split_text_into_pages("\f\f") == []


def test_box_drawing_rules_are_separators():
    assert is_header_or_separator("┌─────┬──────────┬──────────────┐")
    assert is_header_or_separator("├─────┼──────────┼──────────────┤")
    assert is_header_or_separator("└─────┴──────────┴──────────────┘")
    assert is_header_or_separator("+-----+----------+")
    assert is_header_or_separator("|-----|----------|")

    assert not is_header_or_separator("│ 001 │ 91234567 │ Acme Pte Ltd │")


def test_bordered_header_row_is_header():
    assert is_header_or_separator("│ ID │ Phone │ Company │")
    assert is_header_or_separator("| Name | Phone |")


def test_long_digit_lines_are_not_page_numbers():
    assert len(split_text_into_pages("row a\n12\nrow b")) == 2
    assert split_text_into_pages("row a\n91234567\nrow b") == ["row a\n91234567\nrow b"]
