"""
Phone table extraction engine
Entry point tying the pipeline together:
text -> lines -> structure -> records + metadata -> report
"""

import logging
from typing import List, Optional, Union

from phonetable.assembler import RecordAssembler
from phonetable.config import Settings, get_settings
from phonetable.errors import EmptyContentError, ExtractionEmptyError, InputError
from phonetable.metadata_extractor import MetadataExtractor
from phonetable.models import ExtractionResult, PhoneRecord, SkippedRow
from phonetable.phone_extractor import PhoneExtractor
from phonetable.report import ReportBuilder
from phonetable.segmenter import split_lines, split_text_into_pages
from phonetable.structure_detector import StructureDetector

# Setup logging
logger = logging.getLogger(__name__)


class TableExtractionEngine:
    """
    Extract Singapore phone records and metadata from table-like text
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Args:
            settings: Engine tunables; the cached application settings by default
        """
        self.settings = settings or get_settings()
        self.phone_extractor = PhoneExtractor()
        self.metadata_extractor = MetadataExtractor()

    def coerce_text(self, text: Union[str, bytes]) -> str:
        """
        Validate input and return it as text

        Raises:
            InputError: Input is not text, not UTF-8, or raw PDF bytes
            EmptyContentError: Input is blank
        """
        if isinstance(text, (bytes, bytearray)):
            if bytes(text).lstrip().startswith(b'%PDF'):
                raise InputError('Raw PDF bytes are not supported: provide text in plain format')
            try:
                text = bytes(text).decode('utf-8')
            except UnicodeDecodeError as e:
                raise InputError('Input bytes are not valid UTF-8 text: unsupported format') from e

        if not isinstance(text, str):
            raise InputError(f"Expected text input, got {type(text).__name__}: unsupported format")

        if not text.strip():
            raise EmptyContentError('Input text is empty: no content to extract')

        return text

    def extract(self, text: Union[str, bytes], source_file: Optional[str] = None,
                split_pages: bool = False) -> ExtractionResult:
        """
        Run the full extraction pipeline

        Args:
            text: Newline-delimited text recovered from a document
            source_file: Name stored on every record and in the report
            split_pages: Split the text on page markers and number records per page

        Returns:
            ExtractionResult with records and report

        Raises:
            InputError: Input is not usable text
            EmptyContentError: Input is blank
            ExtractionEmptyError: No phone record was found (carries the report)
        """
        text = self.coerce_text(text)
        logger.info(f"🔍 Extracting phone records from {source_file or 'text'} ({len(text)} chars)")

        lines = split_lines(text)
        structure = StructureDetector(self.settings).detect(lines)

        assembler = RecordAssembler(self.phone_extractor, self.metadata_extractor)
        report_builder = ReportBuilder(text, structure, source_file, self.settings)

        pages = split_text_into_pages(text) if split_pages else [text]
        records: List[PhoneRecord] = []
        skipped: List[SkippedRow] = []

        for page_number, page_text in enumerate(pages, start=1):
            assembled = assembler.assemble(
                page_text,
                structure,
                source_file=source_file,
                page_number=page_number if split_pages else None
            )
            records.extend(assembled.records)
            skipped.extend(assembled.skipped_rows)
            report_builder.header_lines_skipped += assembled.header_lines_skipped
            report_builder.rows_processed += assembled.rows_processed

        report_builder.pages = len(pages)
        report = report_builder.add_records(records).add_skipped(skipped).build()

        if not records:
            logger.warning(f"⚠️ No phone records found in {source_file or 'text'}")
            raise ExtractionEmptyError('No phone records found in the table', report=report)

        logger.info(f"✅ Extracted {len(records)} phone records")
        return ExtractionResult(records=records, report=report)


def extract_phone_records(text: Union[str, bytes], source_file: Optional[str] = None, *,
                          settings: Optional[Settings] = None,
                          split_pages: bool = False) -> ExtractionResult:
    """
    Convenience function to run one extraction

    Args:
        text: Newline-delimited text (str or UTF-8 bytes)
        source_file: Optional source name
        settings: Optional engine settings
        split_pages: Split on page markers first

    Returns:
        ExtractionResult
    """
    engine = TableExtractionEngine(settings)
    return engine.extract(text, source_file, split_pages=split_pages)
