"""
Tests for extraction report generation
"""

from datetime import datetime

from phonetable.models import ExtractedMetadata, FieldValue, PhoneRecord, SkippedRow, TableStructure
from phonetable.report import ReportBuilder, classify_format, is_valid_number

STRUCTURE = TableStructure(type='space-separated', confidence=0.9, column_count=3, phone_column_index=1)


def make_record(number, original_text=None, method='exact-pattern', confidence=0.9, company=None):
    metadata = ExtractedMetadata(
        company_name=FieldValue(value=company, confidence=0.8, method='known-column') if company else None
    )
    return PhoneRecord(
        id=f"ID{number}",
        phone_number=number,
        metadata=metadata,
        extracted_at=datetime.now(),
        original_text=original_text or number,
        extraction_method=method,
        confidence=confidence,
    )


def test_classify_format():
    assert classify_format("91234567") == 'eight_digit'
    assert classify_format("+65 9123 4567") == 'international'
    assert classify_format("9123-4567") == 'formatted'
    assert classify_format("9123 4567") == 'other'


def test_is_valid_number():
    assert is_valid_number("81234567")
    assert is_valid_number("61234567")
    assert not is_valid_number("12345678")
    assert not is_valid_number("not a number")


def test_statistics():
    records = [
        make_record("91234567", company="Acme Pte Ltd"),
        make_record("91234567", original_text="9123-4567", method='embedded', confidence=0.7),
        make_record("62345678", original_text="+65 6234 5678", method='fuzzy', confidence=0.5),
    ]

    report = ReportBuilder("text", STRUCTURE).add_records(records).build()
    phones = report.phone_number_analysis

    assert phones['total_found'] == 3
    assert phones['extraction_methods'] == {'exact-pattern': 1, 'embedded': 1, 'fuzzy': 1}
    assert phones['format_distribution'] == {'eight_digit': 1, 'international': 1, 'formatted': 1, 'other': 0}
    assert phones['duplicates_found'] == 1
    assert phones['confidence_distribution']['distribution'] == {'high': 1, 'medium': 2, 'low': 0}
    assert phones['validation_results']['valid'] + phones['validation_results']['invalid'] == 3
    assert '1 duplicate phone numbers found' in report.warnings

    assert report.metadata_analysis['extracted_fields'] == {'company_name': 1}
    assert report.metadata_analysis['fields_with_metadata'] == 1


def test_quality_scores_are_weighted():
    report = ReportBuilder("text", STRUCTURE).add_records([make_record("81234567", company="Acme Pte Ltd")]).build()
    quality = report.quality_metrics

    expected = 0.4 * quality.structure_quality + 0.4 * quality.extraction_quality + 0.2 * quality.metadata_quality
    assert abs(quality.overall_quality - expected) < 1e-9
    assert quality.structure_quality == 0.9


def test_empty_report_has_issue_and_suggestion():
    report = ReportBuilder("", STRUCTURE).build()

    assert 'No phone records found' in report.issues
    assert 'Ensure the document contains a table with Singapore phone numbers' in report.suggestions
    assert len(report.suggestions) == len(set(report.suggestions))
    assert report.phone_number_analysis['confidence_distribution']['average'] == 0.0


def test_low_structure_confidence_and_ambiguity_feedback():
    structure = TableStructure(type='unstructured', confidence=0.1, ambiguous=True,
                               irregular_spacing=True, merged_cells=True)

    report = ReportBuilder("a\nb", structure).add_records([make_record("81234567")]).build()

    assert 'Low confidence in table structure detection' in report.issues
    assert 'Table structure is ambiguous, treated as unstructured' in report.warnings
    assert 'Irregular spacing detected in table columns' in report.warnings
    assert 'Small number of records extracted - verify the document contains expected data' in report.warnings


def test_skipped_rows_and_notes():
    builder = ReportBuilder("text", STRUCTURE)
    builder.add_records([make_record("81234567")])
    builder.add_skipped([SkippedRow(line_number=4, text="no phone here", reason='no phone number found')])
    builder.note('Custom processing note')

    report = builder.build()

    assert report.extraction_summary['skipped_rows'][0]['line_number'] == 4
    assert '1 rows skipped without phone records' in report.warnings
    assert 'Custom processing note' in report.warnings
