"""
Business metadata extraction
Recovers company, contact and address details from the non-phone columns
of a row, merging evidence from several passes of decreasing trust.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from phonetable.models import (
    SINGLE_VALUE_FIELDS,
    ExtractedMetadata,
    ExtractionTrace,
    FieldValue,
    TableStructure,
)
from phonetable.patterns import (
    ADDRESS_PATTERNS,
    BUSINESS_PATTERNS,
    COMPANY_PATTERNS,
    CONTACT_PATTERNS,
    DEPARTMENT_PATTERNS,
    EMAIL_PATTERNS,
    JOB_TITLE_PATTERNS,
    PERSON_NAME_PATTERNS,
    STREET_CUE,
    WEBSITE_PATTERNS,
)
from phonetable.phone_extractor import is_phone_number
from phonetable.weights import clamp, weight

# Setup logging
logger = logging.getLogger(__name__)

LIST_FIELDS = ('additional_data', 'additional_contacts')

# Metadata column type -> field it feeds
KNOWN_COLUMN_FIELDS = {
    'company': 'company_name',
    'email': 'email',
    'website': 'website',
    'address': 'address',
}

Extraction = Dict[str, List[FieldValue]]


def normalize_website(website: str) -> str:
    """Prefix a scheme when missing"""
    normalized = website.strip()
    if not normalized.startswith(('http://', 'https://')):
        normalized = 'https://' + normalized
    return normalized


def empty_extraction() -> Extraction:
    return {name: [] for name in SINGLE_VALUE_FIELDS + LIST_FIELDS}


class MetadataBuilder:
    """
    Accumulates metadata evidence for one row

    Single-valued fields keep the highest-confidence value offered;
    list fields append and are deduplicated by value on build().
    """

    def __init__(self, column_count: int = 0):
        self.column_count = column_count
        self.fields: Dict[str, FieldValue] = {}
        self.lists: Dict[str, List[FieldValue]] = {name: [] for name in LIST_FIELDS}
        self.column_traces: Dict[int, Dict] = {}
        self.relationships: List[Dict] = []
        self.processed_columns = 0

    def offer(self, field: str, value: FieldValue) -> bool:
        """Keep the value if it beats the current one; returns True if kept"""
        current = self.fields.get(field)
        if current is None or current.confidence < value.confidence:
            self.fields[field] = value
            return True
        return False

    def has(self, field: str) -> bool:
        return field in self.fields

    def merge(self, extracted: Extraction, method: str, pass_weight: float):
        """
        Merge matcher output, scaling each confidence by the pass weight
        """
        for field, items in extracted.items():
            for item in items:
                adjusted = item.model_copy(update={
                    'confidence': clamp(item.confidence * pass_weight),
                    'method': method,
                })
                if field in LIST_FIELDS:
                    self.lists[field].append(adjusted)
                else:
                    self.offer(field, adjusted)

    def trace_column(self, index: int, method: str, confidence: float):
        self.column_traces[index] = {'method': method, 'confidence': round(confidence, 4)}

    def build(self) -> ExtractedMetadata:
        """Freeze the accumulated evidence"""
        lists = {}
        for field, items in self.lists.items():
            seen = set()
            unique = []
            for item in items:
                if item.value in seen:
                    continue
                seen.add(item.value)
                unique.append(item)
            lists[field] = unique

        confidences = [trace['confidence'] for trace in self.column_traces.values()]
        overall = float(np.mean(confidences)) if confidences else 0.0

        return ExtractedMetadata(
            **self.fields,
            **lists,
            trace=ExtractionTrace(
                column_traces=dict(self.column_traces),
                relationships=list(self.relationships),
                processed_columns=self.processed_columns,
                overall_confidence=clamp(overall)
            )
        )


class MetadataExtractor:
    """
    Extract business metadata from a row's cells
    """

    def __init__(self):
        """
        Initialize value families and their confidence categories
        """
        self.families = {
            'company_name': ('pattern.companyName', COMPANY_PATTERNS),
            'address': ('pattern.address', ADDRESS_PATTERNS),
            'contact_person': ('pattern.personName', PERSON_NAME_PATTERNS),
            'job_title': ('pattern.jobTitle', JOB_TITLE_PATTERNS),
            'department': ('pattern.department', DEPARTMENT_PATTERNS),
        }

    # ==================== MATCHERS ====================

    def _whole_value_matches(self, field: str, value: str) -> List[FieldValue]:
        category, patterns = self.families[field]
        return [
            FieldValue(value=value, confidence=weight(category, name), method='pattern', pattern=name)
            for name, pattern in patterns.items()
            if pattern.search(value)
        ]

    def extract_company_names(self, value: str) -> List[FieldValue]:
        return self._whole_value_matches('company_name', value)

    def extract_addresses(self, value: str) -> List[FieldValue]:
        return self._whole_value_matches('address', value)

    def extract_person_names(self, value: str) -> List[FieldValue]:
        return self._whole_value_matches('contact_person', value)

    def extract_job_titles(self, value: str) -> List[FieldValue]:
        return self._whole_value_matches('job_title', value)

    def extract_departments(self, value: str) -> List[FieldValue]:
        return self._whole_value_matches('department', value)

    def extract_emails(self, value: str) -> List[FieldValue]:
        """
        Extract email addresses

        Every embedded address is taken; the looser forms are only tried
        when none is found.
        """
        matches = [
            FieldValue(value=email, confidence=weight('pattern.email', 'embedded'), method='pattern', pattern='embedded')
            for email in EMAIL_PATTERNS['embedded'].findall(value)
        ]
        if matches:
            return matches

        for name, pattern in EMAIL_PATTERNS.items():
            if name == 'embedded':
                continue
            match = pattern.search(value)
            if match:
                found = match.group(1) if match.groups() else match.group(0)
                matches.append(FieldValue(
                    value=''.join(found.split()),
                    confidence=weight('pattern.email', name),
                    method='pattern',
                    pattern=name
                ))
        return matches

    def extract_websites(self, value: str) -> List[FieldValue]:
        """
        Extract websites, normalized to https://

        Email addresses are masked first so their domains are not reported.
        """
        masked = EMAIL_PATTERNS['embedded'].sub(lambda m: ' ' * len(m.group(0)), value)

        matches = [
            FieldValue(
                value=normalize_website(site),
                confidence=weight('pattern.website', 'scanned'),
                method='pattern',
                pattern='embedded'
            )
            for site in WEBSITE_PATTERNS['embedded'].findall(masked)
        ]
        if matches:
            return matches

        for name, pattern in WEBSITE_PATTERNS.items():
            if name != 'embedded' and pattern.search(masked):
                matches.append(FieldValue(
                    value=normalize_website(masked),
                    confidence=weight('pattern.website', name),
                    method='pattern',
                    pattern=name
                ))
        return matches

    def extract_contact_info(self, value: str) -> Dict[str, List[FieldValue]]:
        """Fax numbers and other labelled contact numbers"""
        contacts = {'fax': [], 'other': []}
        for kind, pattern in CONTACT_PATTERNS.items():
            match = pattern.search(value)
            if match:
                item = FieldValue(
                    value=match.group(0).strip(),
                    confidence=weight('pattern.contact', kind),
                    method='pattern',
                    pattern=kind,
                    kind=kind
                )
                contacts['fax' if kind == 'fax' else 'other'].append(item)
        return contacts

    def extract_business_info(self, value: str) -> List[FieldValue]:
        """Registration (UEN), GST and licence numbers"""
        matches = []
        for kind, pattern in BUSINESS_PATTERNS.items():
            match = pattern.search(value)
            if match:
                matches.append(FieldValue(
                    value=match.group(0).strip(),
                    confidence=weight('pattern.business', kind),
                    method='pattern',
                    pattern=kind,
                    kind=kind
                ))
        return matches

    def extract_specific_type(self, value: str, expected_type: str) -> Optional[FieldValue]:
        """Highest-confidence match of the matcher for a known column type"""
        matchers = {
            'company': self.extract_company_names,
            'email': self.extract_emails,
            'website': self.extract_websites,
            'address': self.extract_addresses,
        }
        matcher = matchers.get(expected_type)
        if matcher is None:
            return None
        matches = matcher(value)
        return max(matches, key=lambda m: m.confidence) if matches else None

    def extract_from_value(self, value: str, expected_type: Optional[str] = None) -> Extraction:
        """
        Run the value families over one cell value

        Args:
            value: Cell text
            expected_type: Known column type; its matcher is tried alone first

        Returns:
            Matches per metadata field
        """
        extracted = empty_extraction()

        if expected_type:
            specific = self.extract_specific_type(value, expected_type)
            if specific is not None:
                extracted[KNOWN_COLUMN_FIELDS[expected_type]].append(specific)
                return extracted

        extracted['company_name'].extend(self.extract_company_names(value))
        extracted['email'].extend(self.extract_emails(value))
        extracted['website'].extend(self.extract_websites(value))
        extracted['address'].extend(self.extract_addresses(value))
        extracted['contact_person'].extend(self.extract_person_names(value))
        extracted['job_title'].extend(self.extract_job_titles(value))
        extracted['department'].extend(self.extract_departments(value))

        contacts = self.extract_contact_info(value)
        extracted['fax'].extend(contacts['fax'])
        extracted['additional_contacts'].extend(contacts['other'])

        extracted['business_registration'].extend(self.extract_business_info(value))

        if not any(items for field, items in extracted.items() if field != 'additional_data'):
            extracted['additional_data'].append(FieldValue(
                value=value,
                confidence=weight('pass', 'unclassified'),
                method='pattern',
                pattern='unclassified',
                kind='unclassified'
            ))

        return extracted

    def extraction_confidence(self, value: str, extracted: Extraction) -> float:
        """
        Pass weight for a cell matched without column knowledge
        """
        confidence = weight('pass', 'pattern-base')

        match_count = sum(len(items) for items in extracted.values())
        if match_count:
            confidence += min(0.3, match_count * 0.1)

        if len(value) > 50:
            confidence -= 0.1
        if '@' in value:
            confidence += 0.1
        if '.com' in value or '.sg' in value:
            confidence += 0.1
        if STREET_CUE.search(value):
            confidence += 0.1

        return clamp(confidence, 0.1, 0.9)

    # ==================== PASSES ====================

    def _skipped(self, index: int, phone_index: Optional[int], structure: TableStructure,
                 id_index: Optional[int] = None) -> bool:
        return index in (phone_index, structure.id_column_index) or (id_index is not None and index == id_index)

    def extract_from_known_columns(self, cells: Sequence[str], structure: TableStructure,
                                   builder: MetadataBuilder, phone_index: Optional[int],
                                   id_index: Optional[int] = None) -> MetadataBuilder:
        """Pass 1: columns the structure already typed"""
        for column in structure.metadata_columns:
            if column.index >= len(cells) or self._skipped(column.index, phone_index, structure, id_index):
                continue
            value = cells[column.index].strip()
            if not value:
                continue

            expected = column.type if column.type in KNOWN_COLUMN_FIELDS else None
            pass_weight = column.confidence or weight('pass', 'known-column-default')
            builder.merge(self.extract_from_value(value, expected), 'known-column', pass_weight)
            builder.trace_column(column.index, 'known-column', pass_weight)
        return builder

    def extract_from_all_columns(self, cells: Sequence[str], structure: TableStructure,
                                 builder: MetadataBuilder, phone_index: Optional[int],
                                 id_index: Optional[int] = None) -> MetadataBuilder:
        """Pass 2: remaining cells against every family"""
        known = {column.index for column in structure.metadata_columns}
        for index, cell in enumerate(cells):
            if self._skipped(index, phone_index, structure, id_index) or index in known:
                continue
            value = cell.strip()
            if not value or is_phone_number(value):
                continue

            extracted = self.extract_from_value(value)
            confidence = self.extraction_confidence(value, extracted)
            builder.merge(extracted, 'pattern-match', confidence)
            builder.trace_column(index, 'pattern-matching', confidence)
            builder.processed_columns += 1
        return builder

    def extract_by_proximity(self, cells: Sequence[str], structure: TableStructure,
                             builder: MetadataBuilder, phone_index: Optional[int],
                             id_index: Optional[int] = None) -> MetadataBuilder:
        """Pass 3a: reinforce values by their distance from the phone column"""
        for index, cell in enumerate(cells):
            if self._skipped(index, phone_index, structure, id_index):
                continue
            value = cell.strip()
            if not value or is_phone_number(value):
                continue

            distance = abs(index - phone_index) if phone_index is not None else len(cells)
            if distance == 1:
                proximity = weight('proximity', 'adjacent')
            elif distance <= 2:
                proximity = weight('proximity', 'nearby')
            else:
                proximity = weight('proximity', 'distant')

            builder.merge(self.extract_from_value(value), 'proximity', proximity)
            builder.relationships.append({
                'type': 'proximity',
                'phone_index': phone_index,
                'metadata_index': index,
                'distance': distance,
                'weight': proximity,
            })
        return builder

    def extract_from_relationships(self, cells: Sequence[str], structure: TableStructure,
                                   builder: MetadataBuilder) -> MetadataBuilder:
        """Pass 3b: join split name / address columns"""
        for relationship in structure.column_relationships:
            first, second = relationship.columns
            if second >= len(cells):
                continue
            left, right = cells[first].strip(), cells[second].strip()
            if not left or not right:
                continue

            if relationship.kind == 'name-split':
                field, joined = 'contact_person', f"{left} {right}"
            elif relationship.kind == 'address-split':
                field, joined = 'address', f"{left}, {right}"
            else:
                continue

            kept = builder.offer(field, FieldValue(
                value=joined,
                confidence=relationship.confidence,
                method=f"relationship-{relationship.kind}",
                pattern=relationship.kind
            ))
            builder.relationships.append({
                'type': relationship.kind,
                'columns': [first, second],
                'confidence': relationship.confidence,
                'applied': kept,
            })
        return builder

    def extract_by_position(self, cells: Sequence[str], structure: TableStructure,
                            builder: MetadataBuilder, phone_index: Optional[int],
                            id_index: Optional[int] = None) -> MetadataBuilder:
        """Pass 3c: name in the first column, company in the last (wide rows only)"""
        if len(cells) < 4:
            return builder

        positional = weight('pass', 'positional')
        last = len(cells) - 1

        first_value = cells[0].strip()
        if (first_value and not self._skipped(0, phone_index, structure, id_index)
                and PERSON_NAME_PATTERNS['full'].match(first_value)
                and not builder.has('contact_person')):
            builder.offer('contact_person', FieldValue(
                value=first_value, confidence=positional,
                method='positional-first-column', pattern='full'
            ))

        last_value = cells[last].strip()
        if (last_value and not self._skipped(last, phone_index, structure, id_index)
                and self.extract_company_names(last_value)
                and not builder.has('company_name')):
            builder.offer('company_name', FieldValue(
                value=last_value, confidence=positional,
                method='positional-last-column', pattern='position'
            ))
        return builder

    def extract(self, cells: Sequence[str], structure: TableStructure,
                phone_index: Optional[int] = None, id_index: Optional[int] = None) -> ExtractedMetadata:
        """
        Extract metadata for one row

        Args:
            cells: Row split into cells
            structure: Detected table structure
            phone_index: Column the phone number came from
            id_index: Column the record ID came from

        Returns:
            Frozen ExtractedMetadata
        """
        if phone_index is None:
            phone_index = structure.phone_column_index

        builder = MetadataBuilder(len(cells))
        builder = self.extract_from_known_columns(cells, structure, builder, phone_index, id_index)
        builder = self.extract_from_all_columns(cells, structure, builder, phone_index, id_index)
        builder = self.extract_by_proximity(cells, structure, builder, phone_index, id_index)
        builder = self.extract_from_relationships(cells, structure, builder)
        builder = self.extract_by_position(cells, structure, builder, phone_index, id_index)

        metadata = builder.build()
        logger.debug(f"Row metadata fields: {sorted(metadata.populated_fields())}")
        return metadata
