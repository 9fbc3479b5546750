"""
Record assembly
Walks the data rows of a table, turns every phone candidate into a
PhoneRecord with an ID and row metadata, and tallies rows it had to skip.
"""

import time
import logging
from datetime import datetime
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from phonetable.column_classifier import is_likely_id, is_strong_id_candidate
from phonetable.errors import RowSkipped
from phonetable.metadata_extractor import MetadataExtractor
from phonetable.models import ExtractedMetadata, PhoneRecord, SkippedRow, TableStructure
from phonetable.phone_extractor import PhoneExtractor
from phonetable.segmenter import find_data_start_index, is_header_or_separator, split_line_into_columns

# Setup logging
logger = logging.getLogger(__name__)

_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'


def to_base36(number: int) -> str:
    if number <= 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return ''.join(reversed(digits))


class AssemblyResult(NamedTuple):
    records: List[PhoneRecord]
    skipped_rows: List[SkippedRow]
    header_lines_skipped: int
    rows_processed: int


class RecordAssembler:
    """
    Build phone records from text and a detected structure

    One assembler serves one extraction run: generated IDs share the run's
    timestamp and a sequence that keeps counting across pages.
    """

    def __init__(self, phone_extractor: Optional[PhoneExtractor] = None,
                 metadata_extractor: Optional[MetadataExtractor] = None):
        self.phone_extractor = phone_extractor or PhoneExtractor()
        self.metadata_extractor = metadata_extractor or MetadataExtractor()
        self.run_stamp = to_base36(int(time.time() * 1000))
        self.sequence = 0

    def generate_id(self) -> str:
        """GEN_<base36 ms>_<sequence>, unique within the run"""
        self.sequence += 1
        return f"GEN_{self.run_stamp}_{self.sequence:04d}"

    def find_id_column(self, cells: Sequence[str], phone_index: Optional[int],
                       structure: TableStructure) -> Optional[int]:
        """
        Find the column holding the ID for a phone found in a given column

        Order: declared ID column, then columns next to the phone, then any
        column holding a strong ID candidate.
        """
        id_index = structure.id_column_index
        if id_index is not None and 0 <= id_index < len(cells):
            return id_index if is_likely_id(cells[id_index]) else None

        if phone_index is not None:
            for index in (phone_index - 1, phone_index + 1):
                if 0 <= index < len(cells) and is_likely_id(cells[index]):
                    return index

        for index, cell in enumerate(cells):
            if index != phone_index and is_likely_id(cell) and is_strong_id_candidate(cell):
                return index

        return None

    def process_row(self, line: str, line_number: int, structure: TableStructure,
                    source_file: Optional[str], page_number: Optional[int]) -> List[PhoneRecord]:
        """
        Turn one data line into records

        Raises:
            RowSkipped: Row has fewer than two cells or no phone number
        """
        cells = split_line_into_columns(line, structure.separator_pattern)
        if len(cells) < 2:
            raise RowSkipped('fewer than two columns', line_number, line)

        candidates = self.phone_extractor.extract_from_row(cells, structure)
        if not candidates:
            raise RowSkipped('no phone number found', line_number, line)

        records = []
        metadata_cache: Dict[Tuple[Optional[int], Optional[int]], ExtractedMetadata] = {}
        extracted_at = datetime.now()

        for candidate in candidates:
            phone_index = candidate.column_index
            id_index = self.find_id_column(cells, phone_index, structure)
            key = (phone_index, id_index)
            if key not in metadata_cache:
                metadata_cache[key] = self.metadata_extractor.extract(cells, structure, phone_index, id_index)

            record_id = cells[id_index].strip() if id_index is not None else self.generate_id()
            records.append(PhoneRecord(
                id=record_id,
                phone_number=candidate.normalized,
                metadata=metadata_cache[key],
                source_file=source_file,
                extracted_at=extracted_at,
                original_text=candidate.original_text,
                extraction_method=candidate.method,
                confidence=candidate.confidence,
                page_number=page_number,
                line_number=line_number
            ))

        return records

    def assemble(self, text: str, structure: TableStructure, source_file: Optional[str] = None,
                 page_number: Optional[int] = None) -> AssemblyResult:
        """
        Parse every data row of the text

        Args:
            text: Table text
            structure: Structure detected for this text
            source_file: Name recorded on every record
            page_number: Page recorded on every record

        Returns:
            AssemblyResult with records, skipped rows and counters
        """
        numbered = [
            (number, raw.strip())
            for number, raw in enumerate(text.split('\n'), start=1)
            if raw.strip()
        ]
        lines = [line for _, line in numbered]

        start = find_data_start_index(lines, structure.separator_pattern) if structure.has_headers else 0
        header_lines = start

        records: List[PhoneRecord] = []
        skipped: List[SkippedRow] = []
        rows_processed = 0

        for line_number, line in numbered[start:]:
            if is_header_or_separator(line):
                header_lines += 1
                continue

            rows_processed += 1
            try:
                records.extend(self.process_row(line, line_number, structure, source_file, page_number))
            except RowSkipped as skip:
                skipped.append(SkippedRow(line_number=skip.line_number, text=skip.text, reason=skip.reason))
            except Exception as e:
                logger.error(f"Row {line_number} failed: {e}", exc_info=True)
                skipped.append(SkippedRow(line_number=line_number, text=line, reason=f"unexpected error: {e}"))

        logger.info(
            f"✅ Assembled {len(records)} records from {rows_processed} rows "
            f"({len(skipped)} skipped, {header_lines} header lines)"
        )
        return AssemblyResult(records, skipped, header_lines, rows_processed)
