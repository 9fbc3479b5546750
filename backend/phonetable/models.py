"""
Output entities of one extraction pass
All models are frozen; builders in the pipeline assemble values and
construct these once.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class _Frozen(BaseModel):
    class Config:
        frozen = True


# ==================== STRUCTURE ====================

class MetadataColumn(_Frozen):
    """A column judged to carry business metadata"""
    index: int
    type: str
    confidence: float = Field(ge=0.0, le=1.0)
    avg_length: float = 0.0
    samples: List[str] = []


class ColumnRelationship(_Frozen):
    """Two columns that look like halves of one logical value"""
    kind: str  # name-split, phone-split, address-split
    columns: Tuple[int, int]
    confidence: float = Field(ge=0.0, le=1.0)


class TableStructure(_Frozen):
    """Best structural interpretation of a text block"""
    type: str
    subtype: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    column_count: int = 0
    has_headers: bool = False
    header_lines: List[int] = []
    phone_column_index: Optional[int] = None
    id_column_index: Optional[int] = None
    metadata_columns: List[MetadataColumn] = []
    separator_pattern: str = r'\s{2,}'
    column_relationships: List[ColumnRelationship] = []
    alignment: Optional[str] = None
    irregular_spacing: bool = False
    merged_cells: bool = False
    mixed_data_types: bool = False
    ambiguous: bool = False

    def metadata_column(self, index: int) -> Optional[MetadataColumn]:
        for column in self.metadata_columns:
            if column.index == index:
                return column
        return None


# ==================== PHONE ====================

class PhoneCandidate(_Frozen):
    """A possible phone number found in a cell or across cells"""
    original_text: str
    normalized: Optional[str] = None
    method: str
    pattern_name: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    column_index: Optional[int] = None
    part_index: int = 0
    total_parts: int = 1
    combined_from: Optional[Tuple[int, int]] = None


# ==================== METADATA ====================

class FieldValue(_Frozen):
    """One extracted metadata value with its provenance"""
    value: str
    confidence: float = Field(ge=0.0, le=1.0)
    method: str
    pattern: Optional[str] = None
    kind: Optional[str] = None


class ExtractionTrace(_Frozen):
    """How metadata was recovered for one row"""
    column_traces: Dict[int, Dict[str, Any]] = {}
    relationships: List[Dict[str, Any]] = []
    processed_columns: int = 0
    overall_confidence: float = 0.0


SINGLE_VALUE_FIELDS = (
    'company_name',
    'email',
    'website',
    'address',
    'contact_person',
    'job_title',
    'department',
    'fax',
    'business_registration',
)


class ExtractedMetadata(_Frozen):
    """Business metadata recovered from the non-phone columns of a row"""
    company_name: Optional[FieldValue] = None
    email: Optional[FieldValue] = None
    website: Optional[FieldValue] = None
    address: Optional[FieldValue] = None
    contact_person: Optional[FieldValue] = None
    job_title: Optional[FieldValue] = None
    department: Optional[FieldValue] = None
    fax: Optional[FieldValue] = None
    business_registration: Optional[FieldValue] = None
    additional_data: List[FieldValue] = []
    additional_contacts: List[FieldValue] = []
    trace: ExtractionTrace = ExtractionTrace()

    def populated_fields(self) -> Dict[str, FieldValue]:
        """Single-valued fields that carry a value"""
        return {
            name: getattr(self, name)
            for name in SINGLE_VALUE_FIELDS
            if getattr(self, name) is not None
        }

    def field_values(self) -> Dict[str, str]:
        """Flat name -> value mapping of the populated fields"""
        return {name: field.value for name, field in self.populated_fields().items()}


# ==================== RECORDS & REPORT ====================

class PhoneRecord(_Frozen):
    """One output record: a canonical phone number and its context"""
    id: str
    phone_number: str
    metadata: ExtractedMetadata = ExtractedMetadata()
    source_file: Optional[str] = None
    extracted_at: datetime
    original_text: str = ''
    extraction_method: str = ''
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    page_number: Optional[int] = None
    line_number: int = 0


class SkippedRow(_Frozen):
    """A row the assembler could not turn into records"""
    line_number: int
    text: str
    reason: str


class QualityMetrics(_Frozen):
    structure_quality: float = 0.0
    extraction_quality: float = 0.0
    metadata_quality: float = 0.0
    overall_quality: float = 0.0


class ExtractionReport(_Frozen):
    """Quality and diagnostics report for one extraction pass"""
    extraction_summary: Dict[str, Any] = {}
    structure_analysis: Dict[str, Any] = {}
    phone_number_analysis: Dict[str, Any] = {}
    metadata_analysis: Dict[str, Any] = {}
    quality_metrics: QualityMetrics = QualityMetrics()
    issues: List[str] = []
    warnings: List[str] = []
    suggestions: List[str] = []
    processing_details: Dict[str, Any] = {}


class ExtractionResult(_Frozen):
    """Records plus report"""
    records: List[PhoneRecord] = []
    report: ExtractionReport = ExtractionReport()
