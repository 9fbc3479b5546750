"""
Column role inference
Profiles each column of the data lines and decides which one holds phone
numbers, which holds record IDs, which carry metadata and which pairs of
columns belong together.
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np
import dateutil.parser as date_parser

from phonetable.models import ColumnRelationship, MetadataColumn
from phonetable.patterns import (
    ADDRESS_PATTERNS,
    AREA_CODE_PART,
    CITY_PART,
    COMPANY_PATTERNS,
    DATE_PATTERNS,
    EMAIL_PATTERNS,
    ID_VALUE,
    NAME_PART,
    NUMERIC_VALUE,
    PHONE_BODY_PART,
    STREET_PART,
    STRONG_ID_PATTERNS,
    WEBSITE_PATTERNS,
)
from phonetable.phone_extractor import is_phone_number
from phonetable.segmenter import split_line_into_columns
from phonetable.weights import weight

# Setup logging
logger = logging.getLogger(__name__)

# Cell kinds in classification order; first match wins
CELL_KINDS = ['empty', 'phone', 'id', 'email', 'website', 'address', 'numeric', 'date', 'text']


def matches_any(patterns, text: str) -> bool:
    """True if any pattern of a family is found in the text"""
    return any(pattern.search(text) for pattern in patterns.values())


def is_likely_id(text) -> bool:
    """Short alphanumeric token that is not a phone number"""
    if not isinstance(text, str):
        return False
    clean = text.strip()
    return bool(ID_VALUE.match(clean)) and not is_phone_number(clean)


def is_strong_id_candidate(text) -> bool:
    """ID-shaped value that also looks like a deliberate identifier"""
    if not isinstance(text, str):
        return False
    clean = text.strip()
    return any(pattern.match(clean) for pattern in STRONG_ID_PATTERNS)


def is_numeric(text: str) -> bool:
    return bool(NUMERIC_VALUE.match(text.strip()))


def is_date(text: str) -> bool:
    """
    Date-shaped text that also parses as a real calendar date
    """
    clean = text.strip()
    if not any(pattern.match(clean) for pattern in DATE_PATTERNS):
        return False
    try:
        date_parser.parse(clean, dayfirst=True)
        return True
    except (ValueError, OverflowError):
        return False


def classify_cell(text: str) -> str:
    """Kind of a single cell, see CELL_KINDS"""
    clean = text.strip()
    if not clean:
        return 'empty'
    if is_phone_number(clean):
        return 'phone'
    if is_likely_id(clean):
        return 'id'
    if matches_any(EMAIL_PATTERNS, clean):
        return 'email'
    if matches_any(WEBSITE_PATTERNS, clean):
        return 'website'
    if matches_any(ADDRESS_PATTERNS, clean):
        return 'address'
    if is_numeric(clean):
        return 'numeric'
    if is_date(clean):
        return 'date'
    if matches_any(COMPANY_PATTERNS, clean):
        return 'text'
    return 'other'


class ColumnRoles(NamedTuple):
    """Outcome of column role inference"""
    column_count: int
    phone_column_index: Optional[int]
    id_column_index: Optional[int]
    metadata_columns: List[MetadataColumn]
    relationships: List[ColumnRelationship]
    confidence_bonus: float


class ColumnRoleClassifier:
    """
    Infer column roles from data lines split by the detected separator
    """

    def __init__(self):
        self.phone_strong_ratio = 0.7
        self.phone_weak_ratio = 0.3
        self.id_strong_ratio = 0.7
        self.id_weak_ratio = 0.3
        self.metadata_type_ratio = 0.5

    def profile_columns(self, data_lines: Sequence[str], separator: Optional[str]) -> List[Dict]:
        """
        Count cell kinds per column

        Args:
            data_lines: Data lines (headers and separators already removed)
            separator: Column separator regex source

        Returns:
            One profile dict per column index
        """
        profiles: List[Dict] = []

        for line in data_lines:
            cells = split_line_into_columns(line, separator)
            for index, cell in enumerate(cells):
                while len(profiles) <= index:
                    profiles.append({'counts': {kind: 0 for kind in CELL_KINDS}, 'samples': []})

                profile = profiles[index]
                clean = cell.strip()
                profile['samples'].append(clean)

                kind = classify_cell(clean)
                if kind in profile['counts']:
                    profile['counts'][kind] += 1

        for profile in profiles:
            lengths = [len(sample) for sample in profile['samples']]
            profile['total'] = len(lengths)
            profile['avg_length'] = float(np.mean(lengths)) if lengths else 0.0
            profile['min_length'] = int(np.min(lengths)) if lengths else 0
            profile['max_length'] = int(np.max(lengths)) if lengths else 0

        return profiles

    def _ratio(self, profile: Dict, kind: str) -> float:
        total = profile['total']
        return profile['counts'][kind] / total if total else 0.0

    def determine_metadata_type(self, profile: Dict) -> str:
        """Dominant metadata type of a column"""
        counts = profile['counts']

        for kind, label in [('email', 'email'), ('website', 'website'), ('address', 'address'),
                            ('text', 'company'), ('date', 'date'), ('numeric', 'numeric')]:
            if self._ratio(profile, kind) > self.metadata_type_ratio:
                return label

        if counts['text'] > 0 and counts['numeric'] > 0:
            return 'mixed'
        if profile['avg_length'] > 50:
            return 'description'
        if profile['avg_length'] < 10 and counts['text'] > 0:
            return 'code'
        return 'additional'

    def metadata_confidence(self, profile: Dict) -> float:
        """0.3 x non-empty ratio + 0.7 x dominant content ratio"""
        total = profile['total']
        if not total:
            return 0.0
        counts = profile['counts']
        non_empty_ratio = (total - counts['empty']) / total
        content_ratio = max(counts[kind] for kind in ('email', 'website', 'address', 'text', 'date', 'numeric')) / total
        return (weight('roles', 'metadata_non_empty', 0.3) * non_empty_ratio
                + weight('roles', 'metadata_dominant', 0.7) * content_ratio)

    def detect_relationship(self, first: Dict, second: Dict, first_index: int,
                            second_index: int) -> Optional[ColumnRelationship]:
        """First matching split hypothesis for a column pair, if any"""
        if not first['samples'] or not second['samples']:
            return None

        def share(profile, pattern):
            return sum(1 for s in profile['samples'] if pattern.search(s)) / len(profile['samples'])

        if (share(first, NAME_PART) > 0.5 and share(second, NAME_PART) > 0.5
                and first['avg_length'] < 15 and second['avg_length'] < 15):
            kind = 'name-split'
        elif share(first, AREA_CODE_PART) > 0.7 and share(second, PHONE_BODY_PART) > 0.7:
            kind = 'phone-split'
        elif share(first, STREET_PART) > 0.5 and share(second, CITY_PART) > 0.5:
            kind = 'address-split'
        else:
            return None

        return ColumnRelationship(
            kind=kind,
            columns=(first_index, second_index),
            confidence=weight('relationship', kind)
        )

    def classify(self, data_lines: Sequence[str], separator: Optional[str]) -> ColumnRoles:
        """
        Infer phone, id and metadata columns plus column relationships

        Args:
            data_lines: Data lines of the sample
            separator: Column separator regex source

        Returns:
            ColumnRoles with the confidence bonus earned by the roles found
        """
        profiles = self.profile_columns(data_lines, separator)
        bonus = 0.0

        # Phone column: highest phone ratio, earliest column on ties
        phone_index = None
        phone_ratio = 0.0
        for index, profile in enumerate(profiles):
            ratio = self._ratio(profile, 'phone')
            if ratio > self.phone_weak_ratio and ratio > phone_ratio:
                phone_index, phone_ratio = index, ratio
        if phone_index is not None:
            bonus += weight('roles', 'phone_strong' if phone_ratio > self.phone_strong_ratio else 'phone_weak')

        # ID column
        id_index = None
        id_ratio = 0.0
        for index, profile in enumerate(profiles):
            if index == phone_index:
                continue
            ratio = self._ratio(profile, 'id')
            strong = ratio > self.id_strong_ratio
            weak = (ratio > self.id_weak_ratio and profile['avg_length'] < 20
                    and profile['counts']['numeric'] > 0)
            if (strong or weak) and ratio > id_ratio:
                id_index, id_ratio = index, ratio
        if id_index is not None:
            bonus += weight('roles', 'id_strong' if id_ratio > self.id_strong_ratio else 'id_weak')

        metadata_columns = []
        for index, profile in enumerate(profiles):
            counts = profile['counts']
            if counts['email'] or counts['website'] or counts['address'] or counts['text']:
                metadata_columns.append(MetadataColumn(
                    index=index,
                    type=self.determine_metadata_type(profile),
                    confidence=min(1.0, self.metadata_confidence(profile)),
                    avg_length=profile['avg_length'],
                    samples=profile['samples'][:3]
                ))

        relationships = []
        for i in range(len(profiles) - 1):
            for j in range(i + 1, len(profiles)):
                relationship = self.detect_relationship(profiles[i], profiles[j], i, j)
                if relationship:
                    relationships.append(relationship)

        logger.debug(
            f"Column roles: phone={phone_index} id={id_index} "
            f"metadata={[c.index for c in metadata_columns]} relationships={len(relationships)}"
        )

        return ColumnRoles(
            column_count=len(profiles),
            phone_column_index=phone_index,
            id_column_index=id_index,
            metadata_columns=metadata_columns,
            relationships=relationships,
            confidence_bonus=bonus
        )
