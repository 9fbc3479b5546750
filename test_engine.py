"""
End-to-end tests for the extraction engine
"""

import pytest

from phonetable.engine import TableExtractionEngine, extract_phone_records
from phonetable.errors import EmptyContentError, ExtractionEmptyError, InputError


def test_directory_table_extraction(directory_text):
    result = extract_phone_records(directory_text, source_file="directory.pdf")
    structure = result.report.structure_analysis

    assert structure['type'] == 'space-separated'
    assert structure['has_headers']
    assert structure['phone_column_index'] == 1
    assert structure['confidence'] > 0.5

    assert len(result.records) == 9
    assert all(record.metadata.company_name is not None for record in result.records)

    first = result.records[0]
    assert first.id == "001"
    assert first.phone_number == "91234567"
    assert first.metadata.company_name.value == "Acme Pte Ltd"
    assert first.metadata.address.value == "10 Anson Road"
    assert first.source_file == "directory.pdf"
    assert first.line_number == 2
    assert first.page_number is None


def test_report_summary(directory_text):
    report = extract_phone_records(directory_text).report

    assert report.extraction_summary['total_records'] == 9
    assert report.extraction_summary['skipped_rows'] == []
    assert report.phone_number_analysis['extraction_methods'] == {'exact-pattern': 9}
    assert report.phone_number_analysis['duplicates_found'] == 0
    assert report.processing_details['header_lines_skipped'] == 1
    assert report.processing_details['separator_pattern'] == r'\s{4,}'
    assert 0.0 <= report.quality_metrics.overall_quality <= 1.0


def test_rows_without_phone_are_skipped(directory_text):
    text = directory_text + "\n010    Pending    Kappa Pte Ltd    5 Shenton Way"

    result = extract_phone_records(text)
    skipped = result.report.extraction_summary['skipped_rows']

    assert len(result.records) == 9
    assert len(skipped) == 1
    assert skipped[0]['line_number'] == 11
    assert skipped[0]['reason'] == 'no phone number found'
    assert '1 rows skipped without phone records' in result.report.warnings


def test_generated_ids_when_no_id_column():
    text = "91234567    Acme Pte Ltd\n98765432    Beta Trading Pte Ltd"

    records = extract_phone_records(text).records
    ids = [record.id for record in records]

    assert len(ids) == 2
    assert all(record_id.startswith("GEN_") for record_id in ids)
    assert len(set(ids)) == 2
    assert ids[0].endswith("_0001") and ids[1].endswith("_0002")


def test_no_phone_numbers_raises_with_report(no_phone_text):
    with pytest.raises(ExtractionEmptyError) as exc_info:
        extract_phone_records(no_phone_text)

    error = exc_info.value
    assert error.error_type == 'no-records-found'
    assert error.category == 'DATA_ERROR'
    assert 'No phone records found' in error.report.issues
    assert error.suggestions
    assert error.to_dict()['issues'] == error.report.issues


def test_invalid_inputs():
    engine = TableExtractionEngine()

    with pytest.raises(InputError):
        engine.extract(b"%PDF-1.4 binary document")
    with pytest.raises(InputError):
        engine.extract(b"\xff\xfe\xfa")
    with pytest.raises(InputError):
        engine.extract(12345)


def test_empty_input():
    with pytest.raises(EmptyContentError) as exc_info:
        extract_phone_records("   \n\t\n")

    assert exc_info.value.category == 'CONTENT_ERROR'
    assert isinstance(exc_info.value, InputError)


def test_utf8_bytes_are_accepted(directory_text):
    result = extract_phone_records(directory_text.encode("utf-8"))

    assert len(result.records) == 9


def test_split_pages_numbers_records(paged_text):
    result = extract_phone_records(paged_text, split_pages=True)

    assert [record.page_number for record in result.records] == [1, 1, 2]
    assert [record.id for record in result.records] == ["001", "002", "003"]
    assert result.report.processing_details['pages'] == 2


def test_without_split_pages_records_have_no_page(paged_text):
    result = extract_phone_records(paged_text)

    assert len(result.records) == 3
    assert all(record.page_number is None for record in result.records)


def test_single_word_company_column_is_kept():
    text = (
        "ID    Phone    Company\n"
        "001    91234561    Acme\n"
        "002    91234562    Beta\n"
        "003    91234563    Gamma"
    )

    result = extract_phone_records(text)

    assert [record.id for record in result.records] == ["001", "002", "003"]
    assert [record.metadata.company_name.value for record in result.records] == ["Acme", "Beta", "Gamma"]


def test_box_drawn_table_has_no_skipped_rows():
    text = "\n".join([
        "┌─────┬──────────┬───────────────┐",
        "│ ID │ Phone │ Company │",
        "├─────┼──────────┼───────────────┤",
        "│ 001 │ 91234567 │ Acme Pte Ltd │",
        "│ 002 │ 98765432 │ Beta Pte Ltd │",
        "│ 003 │ 87654321 │ Gamma Pte Ltd │",
        "└─────┴──────────┴───────────────┘",
    ])

    result = extract_phone_records(text)
    report = result.report

    assert [record.phone_number for record in result.records] == ["91234567", "98765432", "87654321"]
    assert result.records[0].id == "001"
    assert result.records[0].metadata.company_name.value == "Acme Pte Ltd"
    assert result.records[0].metadata.company_name.pattern == 'withLtd'
    assert report.extraction_summary['skipped_rows'] == []
    assert report.processing_details['header_lines_skipped'] == 4
    assert not report.structure_analysis['irregular_spacing']
    assert not report.structure_analysis['mixed_data_types']
    assert 'Irregular spacing detected in table columns' not in report.warnings
    assert not any('rows skipped' in warning for warning in report.warnings)
