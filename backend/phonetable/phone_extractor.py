"""
Singapore phone number recognition
Turns cell text into scored, normalized phone candidates and recovers
numbers split across neighbouring columns.
"""

import re
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from phonetable.models import PhoneCandidate, TableStructure
from phonetable.patterns import (
    CANONICAL_PHONE,
    INTERNATIONAL_DIGITS,
    PHONE_BODY_PART,
    PHONE_COUNTRY_NAME,
    PHONE_DELIMITERS,
    PHONE_EMBEDDED_PATTERNS,
    PHONE_EXACT_PATTERNS,
    PHONE_EXTENSION_SUFFIX,
    PHONE_LABEL_PREFIX,
    PHONE_WRAPPERS,
)
from phonetable.weights import clamp, weight

# Setup logging
logger = logging.getLogger(__name__)

_NON_DIGIT = re.compile(r'\D')
_DIGIT_RUN = re.compile(r'\d+')
_FUZZY_INTERNATIONAL = re.compile(r'65[689]\d{7}')
_FUZZY_LOCAL = re.compile(r'[689]\d{7}')
_NUMERIC_CELL = re.compile(r'^\+?[\d\s\-().]+$')
_AREA_PREFIX = re.compile(r'^[689]\d{0,3}$')


def normalize_phone(text) -> Optional[str]:
    """
    Reduce a phone-like string to its canonical 8-digit form

    Args:
        text: Raw text, possibly labelled, bracketed or carrying +65

    Returns:
        8-digit string starting with 6, 8 or 9, or None
    """
    if not isinstance(text, str):
        return None

    cleaned = text.strip()
    cleaned = PHONE_LABEL_PREFIX.sub('', cleaned)
    cleaned = PHONE_EXTENSION_SUFFIX.sub('', cleaned)
    cleaned = PHONE_WRAPPERS.sub('', cleaned)
    cleaned = PHONE_COUNTRY_NAME.sub('', cleaned.strip())

    digits = _NON_DIGIT.sub('', cleaned)
    if CANONICAL_PHONE.match(digits):
        return digits
    if INTERNATIONAL_DIGITS.match(digits):
        return digits[2:]
    return None


class PhoneExtractor:
    """
    Extract Singapore phone numbers from table cells
    Exact whole-cell forms first, then embedded scanning, then a fuzzy
    digit-run fallback
    """

    def __init__(self):
        """
        Initialize extractor with pattern tables and method confidences
        """
        self.exact_patterns = PHONE_EXACT_PATTERNS
        self.embedded_patterns = PHONE_EMBEDDED_PATTERNS

        self.exact_confidence = weight('phone', 'exact-pattern')
        self.embedded_confidence = weight('phone', 'embedded')
        self.fuzzy_international_confidence = weight('phone', 'fuzzy-international')
        self.fuzzy_confidence = weight('phone', 'fuzzy')
        self.adjacent_confidence = weight('phone', 'adjacent-column-combination')

    # ==================== SINGLE VALUES ====================

    def match_exact(self, text: str) -> Optional[str]:
        """
        Find the exact surface form a whole value matches

        Returns:
            Pattern name, or None when no exact form matches
        """
        value = text.strip()
        for name, pattern in self.exact_patterns.items():
            if pattern.match(value) and normalize_phone(value):
                return name
        return None

    def scan_embedded(self, text: str) -> List[Tuple[str, str, str]]:
        """
        Scan free text for phone numbers

        Patterns run most specific first; spans claimed by one pattern are
        masked before the next one runs.

        Returns:
            List of (pattern_name, matched_text, normalized)
        """
        found = []
        masked = text

        for name, pattern in self.embedded_patterns.items():
            spans = []
            for match in pattern.finditer(masked):
                normalized = normalize_phone(match.group(0))
                if normalized:
                    found.append((name, text[match.start():match.end()], normalized))
                    spans.append((match.start(), match.end()))

            for start, end in spans:
                masked = masked[:start] + '#' * (end - start) + masked[end:]

        return found

    def fuzzy_match(self, text: str) -> Optional[Tuple[str, str, float]]:
        """
        Last-resort reconstruction from all digit runs in the text

        Returns:
            (method, normalized, confidence) or None
        """
        digits = ''.join(_DIGIT_RUN.findall(text))
        if len(digits) < 8:
            return None

        match = _FUZZY_INTERNATIONAL.search(digits)
        if match:
            return 'fuzzy-international', match.group(0)[2:], self.fuzzy_international_confidence

        match = _FUZZY_LOCAL.search(digits)
        if match:
            return 'fuzzy', match.group(0), self.fuzzy_confidence

        return None

    def is_phone_number(self, text) -> bool:
        """Whole value is an exact phone form or carries an embedded number"""
        if not isinstance(text, str) or not text.strip():
            return False
        if self.match_exact(text):
            return True
        return bool(self.scan_embedded(text))

    # ==================== CELLS ====================

    def split_parts(self, text: str) -> List[str]:
        """Split a multi-number cell on list delimiters"""
        return [part.strip() for part in PHONE_DELIMITERS.split(text) if part and part.strip()]

    def extract_from_part(self, part: str, column_index: Optional[int] = None,
                          part_index: int = 0, total_parts: int = 1) -> List[PhoneCandidate]:
        """
        Extract candidates from one delimiter-free part of a cell
        """
        shared = dict(column_index=column_index, part_index=part_index, total_parts=total_parts)

        exact_name = self.match_exact(part)
        if exact_name:
            return [PhoneCandidate(
                original_text=part,
                normalized=normalize_phone(part),
                method='exact-pattern',
                pattern_name=exact_name,
                confidence=self.exact_confidence,
                **shared
            )]

        embedded = self.scan_embedded(part)
        if embedded:
            return [
                PhoneCandidate(
                    original_text=matched,
                    normalized=normalized,
                    method='embedded',
                    pattern_name=name,
                    confidence=self.embedded_confidence,
                    **shared
                )
                for name, matched, normalized in embedded
            ]

        fuzzy = self.fuzzy_match(part)
        if fuzzy:
            method, normalized, confidence = fuzzy
            return [PhoneCandidate(
                original_text=part,
                normalized=normalized,
                method='fuzzy',
                pattern_name=method,
                confidence=confidence,
                **shared
            )]

        return []

    def extract_candidates(self, cell_text, column_index: Optional[int] = None) -> List[PhoneCandidate]:
        """
        Extract every phone number a cell holds

        Args:
            cell_text: Cell content, possibly listing several numbers
            column_index: Column the cell came from

        Returns:
            Deduplicated candidates sorted by confidence (highest first)
        """
        if not isinstance(cell_text, str) or not cell_text.strip():
            return []

        parts = self.split_parts(cell_text)
        candidates = []
        for part_index, part in enumerate(parts):
            candidates.extend(self.extract_from_part(part, column_index, part_index, len(parts)))

        return deduplicate_candidates(candidates)

    # ==================== ROWS ====================

    def combine_parts(self, first: str, second: str) -> Optional[str]:
        """Concatenate the digits of two fragments and revalidate"""
        combined = _NON_DIGIT.sub('', first) + _NON_DIGIT.sub('', second)
        return normalize_phone(combined)

    def could_be_phone_parts(self, first: str, second: str) -> bool:
        """Area-code-like fragment followed by a 4-7 digit body"""
        if not _NUMERIC_CELL.match(first) or not _NUMERIC_CELL.match(second):
            return False
        digits_first = _NON_DIGIT.sub('', first)
        digits_second = _NON_DIGIT.sub('', second)
        return bool(_AREA_PREFIX.match(digits_first) and PHONE_BODY_PART.match(digits_second))

    def extract_split_numbers(self, cells: Sequence[str],
                              structure: Optional[TableStructure] = None) -> List[PhoneCandidate]:
        """
        Recover numbers whose digits were split across two columns

        Declared phone-split relationships use their own confidence; any
        other adjacent pair that looks like prefix + body scores lower.
        """
        combined = []

        relationships = structure.column_relationships if structure else []
        for relationship in relationships:
            if relationship.kind != 'phone-split':
                continue
            first_index, second_index = relationship.columns
            if second_index >= len(cells):
                continue
            first, second = cells[first_index].strip(), cells[second_index].strip()
            normalized = self.combine_parts(first, second)
            if normalized:
                combined.append(PhoneCandidate(
                    original_text=f"{first} {second}",
                    normalized=normalized,
                    method='relationship-combination',
                    pattern_name='phone-split',
                    confidence=clamp(relationship.confidence),
                    column_index=first_index,
                    combined_from=(first_index, second_index)
                ))

        for index in range(len(cells) - 1):
            first, second = cells[index].strip(), cells[index + 1].strip()
            if not first or not second or not self.could_be_phone_parts(first, second):
                continue
            normalized = self.combine_parts(first, second)
            if normalized:
                combined.append(PhoneCandidate(
                    original_text=f"{first} {second}",
                    normalized=normalized,
                    method='adjacent-column-combination',
                    pattern_name='adjacent',
                    confidence=self.adjacent_confidence,
                    column_index=index,
                    combined_from=(index, index + 1)
                ))

        return combined

    def extract_from_row(self, cells: Sequence[str],
                         structure: Optional[TableStructure] = None) -> List[PhoneCandidate]:
        """
        Extract phone candidates from one row of cells

        Args:
            cells: Row split into cells
            structure: Detected table structure (phone column, relationships)

        Returns:
            Deduplicated candidates sorted by confidence (highest first)
        """
        candidates = []
        phone_index = structure.phone_column_index if structure else None

        if phone_index is not None and 0 <= phone_index < len(cells):
            candidates.extend(self.extract_candidates(cells[phone_index], phone_index))
        else:
            for index, cell in enumerate(cells):
                candidates.extend(self.extract_candidates(cell, index))

        candidates.extend(self.extract_split_numbers(cells, structure))

        return deduplicate_candidates(candidates)


def deduplicate_candidates(candidates: List[PhoneCandidate]) -> List[PhoneCandidate]:
    """
    Collapse candidates sharing a normalized number

    Keeps the highest-confidence instance (earliest on ties) and sorts the
    survivors by confidence, highest first.
    """
    best: Dict[str, PhoneCandidate] = {}
    order = []
    for candidate in candidates:
        if not candidate.normalized:
            continue
        existing = best.get(candidate.normalized)
        if existing is None:
            best[candidate.normalized] = candidate
            order.append(candidate.normalized)
        elif candidate.confidence > existing.confidence:
            best[candidate.normalized] = candidate

    return sorted((best[key] for key in order), key=lambda c: -c.confidence)


_default_extractor = PhoneExtractor()


def is_phone_number(text) -> bool:
    """Convenience wrapper around the shared extractor"""
    return _default_extractor.is_phone_number(text)


def extract_phone_candidates(cell_text, column_index: Optional[int] = None) -> List[PhoneCandidate]:
    """Convenience wrapper around the shared extractor"""
    return _default_extractor.extract_candidates(cell_text, column_index)
