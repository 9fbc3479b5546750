"""
Extraction report generation
Summarizes one extraction pass: structure, phone statistics, metadata
coverage, weighted quality scores and rule-based feedback.
"""

import re
import logging
from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import numpy as np
import phonenumbers
from phonenumbers import NumberParseException

from phonetable.config import Settings, get_settings
from phonetable.models import (
    ExtractionReport,
    PhoneRecord,
    QualityMetrics,
    SkippedRow,
    TableStructure,
)
from phonetable.weights import clamp, weight

# Setup logging
logger = logging.getLogger(__name__)

_NON_DIGIT = re.compile(r'\D')
_EIGHT_DIGITS = re.compile(r'^\d{8}$')
_INTERNATIONAL = re.compile(r'^65\d{8}$')
_GROUPED = re.compile(r'\d{4}-\d{4}')


def classify_format(original_text: str) -> str:
    """Surface format of the text a number was found in"""
    text = (original_text or '').strip()
    if _EIGHT_DIGITS.match(text):
        return 'eight_digit'
    if _INTERNATIONAL.match(_NON_DIGIT.sub('', text)):
        return 'international'
    if _GROUPED.search(text):
        return 'formatted'
    return 'other'


def is_valid_number(number: str, region: str = 'SG') -> bool:
    """Validate a canonical number against the region's numbering plan"""
    try:
        parsed = phonenumbers.parse(number, region)
    except NumberParseException:
        return False
    return phonenumbers.is_valid_number(parsed) and phonenumbers.region_code_for_number(parsed) == region


class ReportBuilder:
    """
    Collects the pieces of a report and computes the derived statistics
    """

    def __init__(self, text: str, structure: TableStructure, source_file: Optional[str] = None,
                 settings: Optional[Settings] = None):
        self.text = text or ''
        self.structure = structure
        self.source_file = source_file
        self.settings = settings or get_settings()
        self.started_at = datetime.now()

        self.records: List[PhoneRecord] = []
        self.skipped_rows: List[SkippedRow] = []
        self.header_lines_skipped = 0
        self.rows_processed = 0
        self.pages = 1
        self.notes: List[str] = []

    def add_records(self, records: Sequence[PhoneRecord]) -> 'ReportBuilder':
        self.records.extend(records)
        return self

    def add_skipped(self, skipped_rows: Sequence[SkippedRow]) -> 'ReportBuilder':
        self.skipped_rows.extend(skipped_rows)
        return self

    def note(self, message: str) -> 'ReportBuilder':
        """Attach an extra warning raised during processing"""
        self.notes.append(message)
        return self

    # ==================== STATISTICS ====================

    def method_distribution(self) -> Dict[str, int]:
        return dict(Counter(record.extraction_method for record in self.records))

    def format_distribution(self) -> Dict[str, int]:
        formats = {'eight_digit': 0, 'international': 0, 'formatted': 0, 'other': 0}
        for record in self.records:
            formats[classify_format(record.original_text)] += 1
        return formats

    def confidence_distribution(self) -> Dict:
        scores = np.array([record.confidence for record in self.records if record.confidence > 0])
        if scores.size == 0:
            return {'average': 0.0, 'min': 0.0, 'max': 0.0,
                    'distribution': {'high': 0, 'medium': 0, 'low': 0}}

        return {
            'average': float(scores.mean()),
            'min': float(scores.min()),
            'max': float(scores.max()),
            'distribution': {
                'high': int(np.sum(scores >= 0.8)),
                'medium': int(np.sum((scores >= 0.5) & (scores < 0.8))),
                'low': int(np.sum(scores < 0.5)),
            }
        }

    def duplicate_count(self) -> int:
        counts = Counter(record.phone_number for record in self.records)
        return sum(count - 1 for count in counts.values())

    def validation_results(self) -> Dict[str, int]:
        results = {'valid': 0, 'invalid': 0}
        for record in self.records:
            if is_valid_number(record.phone_number, self.settings.default_region):
                results['valid'] += 1
            else:
                results['invalid'] += 1
        return results

    def metadata_analysis(self) -> Dict:
        field_counts: Dict[str, int] = {}
        field_confidences: Dict[str, List[float]] = {}
        methods: Counter = Counter()

        for record in self.records:
            for name, field in record.metadata.populated_fields().items():
                field_counts[name] = field_counts.get(name, 0) + 1
                field_confidences.setdefault(name, []).append(field.confidence)
            for trace in record.metadata.trace.column_traces.values():
                methods[trace['method']] += 1

        populated = len(field_counts)
        return {
            'fields_with_metadata': populated,
            'extracted_fields': field_counts,
            'confidence_scores': {name: float(np.mean(values)) for name, values in field_confidences.items()},
            'coverage': populated / max(1, self.structure.column_count),
            'extraction_methods': dict(methods),
            'relationships_found': len(self.structure.column_relationships),
        }

    # ==================== QUALITY ====================

    def quality_scores(self, phone_stats: Dict, metadata: Dict) -> QualityMetrics:
        total = len(self.records)
        structure_quality = min(1.0, self.structure.confidence)
        extraction_quality = min(
            1.0,
            phone_stats['validation_results']['valid'] / max(1, total) * (phone_stats['confidence_distribution']['average'] or 0.5)
        )
        metadata_quality = min(1.0, metadata['fields_with_metadata'] / max(1, self.structure.column_count))

        overall = (weight('quality', 'structure') * structure_quality
                   + weight('quality', 'extraction') * extraction_quality
                   + weight('quality', 'metadata') * metadata_quality)

        return QualityMetrics(
            structure_quality=clamp(structure_quality),
            extraction_quality=clamp(extraction_quality),
            metadata_quality=clamp(metadata_quality),
            overall_quality=clamp(overall)
        )

    def feedback(self, phone_stats: Dict, metadata: Dict, quality: QualityMetrics):
        """
        Rule-based issues, warnings and suggestions

        Returns:
            (issues, warnings, suggestions)
        """
        issues: List[str] = []
        warnings: List[str] = []
        suggestions: List[str] = []
        structure = self.structure

        if structure.confidence < 0.5:
            issues.append('Low confidence in table structure detection')
            suggestions.append('Ensure the document has a clear table format with consistent spacing or borders')

        if structure.ambiguous:
            warnings.append(f"Table structure is ambiguous, treated as {structure.type}")
            suggestions.append('Use a consistent column layout (tabs, borders or wide spacing)')

        if structure.irregular_spacing:
            warnings.append('Irregular spacing detected in table columns')
            suggestions.append('Use consistent spacing or tab-delimited format for better parsing')

        if structure.merged_cells:
            warnings.append('Merged cells detected - may affect data extraction accuracy')
            suggestions.append('Avoid merged cells in data tables for optimal processing')

        invalid = phone_stats['validation_results']['invalid']
        if invalid > 0:
            warnings.append(f"{invalid} invalid phone numbers found")
            suggestions.append('Ensure phone numbers are in Singapore format (8 digits starting with 6, 8, or 9)')

        duplicates = phone_stats['duplicates_found']
        if duplicates > 0:
            warnings.append(f"{duplicates} duplicate phone numbers found")
            suggestions.append('Remove duplicate entries from the source data')

        if self.records and phone_stats['confidence_distribution']['average'] < 0.7:
            warnings.append('Low average confidence in phone number extraction')
            suggestions.append('Ensure phone numbers are clearly formatted and separated from other text')

        if metadata['fields_with_metadata'] == 0:
            warnings.append('No metadata extracted from additional columns')
            suggestions.append('Include company names, emails, or addresses in adjacent columns for richer data')

        if quality.overall_quality < 0.6:
            issues.append('Overall extraction quality is below optimal threshold')
            suggestions.append('Consider reformatting the document with clearer table structure and consistent formatting')

        if self.skipped_rows:
            warnings.append(f"{len(self.skipped_rows)} rows skipped without phone records")

        if not self.records:
            issues.append('No phone records found')
            suggestions.append('Ensure the document contains a table with Singapore phone numbers')
        elif len(self.records) < self.settings.min_expected_records:
            warnings.append('Small number of records extracted - verify the document contains expected data')

        warnings.extend(note for note in self.notes if note not in warnings)

        return issues, warnings, list(dict.fromkeys(suggestions))

    # ==================== BUILD ====================

    def build(self) -> ExtractionReport:
        """Compute every statistic and freeze the report"""
        finished_at = datetime.now()
        lines = self.text.split('\n')
        non_empty = [line for line in lines if line.strip()]

        phone_stats = {
            'total_found': len(self.records),
            'extraction_methods': self.method_distribution(),
            'format_distribution': self.format_distribution(),
            'confidence_distribution': self.confidence_distribution(),
            'duplicates_found': self.duplicate_count(),
            'validation_results': self.validation_results(),
        }
        metadata = self.metadata_analysis()
        quality = self.quality_scores(phone_stats, metadata)
        issues, warnings, suggestions = self.feedback(phone_stats, metadata, quality)

        structure = self.structure
        report = ExtractionReport(
            extraction_summary={
                'source_file': self.source_file,
                'started_at': self.started_at.isoformat(),
                'extracted_at': finished_at.isoformat(),
                'processing_time_ms': round((finished_at - self.started_at).total_seconds() * 1000, 2),
                'total_records': len(self.records),
                'total_lines': len(non_empty),
                'rows_processed': self.rows_processed,
                'skipped_rows': [row.model_dump() for row in self.skipped_rows],
            },
            structure_analysis={
                'type': structure.type,
                'subtype': structure.subtype,
                'confidence': structure.confidence,
                'column_count': structure.column_count,
                'has_headers': structure.has_headers,
                'header_lines': list(structure.header_lines),
                'phone_column_index': structure.phone_column_index,
                'id_column_index': structure.id_column_index,
                'metadata_columns_count': len(structure.metadata_columns),
                'irregular_spacing': structure.irregular_spacing,
                'merged_cells': structure.merged_cells,
                'mixed_data_types': structure.mixed_data_types,
                'alignment': structure.alignment,
                'ambiguous': structure.ambiguous,
            },
            phone_number_analysis=phone_stats,
            metadata_analysis=metadata,
            quality_metrics=quality,
            issues=issues,
            warnings=warnings,
            suggestions=suggestions,
            processing_details={
                'pages': self.pages,
                'text_length': len(self.text),
                'empty_lines': len(lines) - len(non_empty),
                'header_lines_skipped': self.header_lines_skipped,
                'separator_pattern': structure.separator_pattern,
            }
        )

        logger.info(
            f"📊 Report: {len(self.records)} records, overall quality {quality.overall_quality:.2f}, "
            f"{len(issues)} issues, {len(warnings)} warnings"
        )
        return report
