"""
Table structure detection
Scores the sampled lines under several layout hypotheses (bordered, tab,
space, aligned), keeps the strongest, then profiles the data lines for
spacing, merged cells, data types, alignment, headers and column roles.
"""

import re
import logging
import warnings
from typing import Dict, NamedTuple, Optional, Pattern, Sequence

import numpy as np

from phonetable.column_classifier import ColumnRoleClassifier
from phonetable.config import Settings, get_settings
from phonetable.errors import StructureAmbiguityWarning
from phonetable.models import TableStructure
from phonetable.patterns import (
    ALIGNED_PATTERNS,
    BORDERED_PATTERNS,
    BORDERED_SEPARATORS,
    DATA_TYPE_PATTERNS,
    DEFAULT_SPACE_SEPARATOR,
    HEADER_PATTERNS,
    MERGED_CELL_PATTERNS,
    SPACE_PATTERNS,
    SPACE_SEPARATORS,
    TAB_PATTERNS,
    TAB_SEPARATOR,
)
from phonetable.phone_extractor import is_phone_number
from phonetable.segmenter import filter_data_lines, split_line_into_columns
from phonetable.weights import clamp, weight

# Setup logging
logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r'\s+')
_ALL_ALPHA = re.compile(r'^[A-Za-z\s]+$')
_HAS_DIGIT = re.compile(r'\d')


class DetectorScore(NamedTuple):
    """Evidence a layout strategy found in the sample"""
    type: str
    confidence: float
    subtype: Optional[str]
    separator: str
    alignment: Optional[str] = None


# ==================== LAYOUT STRATEGIES ====================

class LayoutStrategy:
    """
    Scores lines against an ordered family of sub-patterns

    Each line contributes the weight of the first sub-pattern it matches.
    The strongest sub-pattern always sets the subtype; weaker ones only fill
    it in when nothing stronger has been seen.
    """

    table_type = ''
    weight_category = ''
    patterns: Dict[str, Pattern] = {}

    def subtype_name(self, pattern_name: str) -> str:
        return pattern_name

    def separator_for(self, subtype: Optional[str]) -> str:
        return DEFAULT_SPACE_SEPARATOR

    def score(self, lines: Sequence[str]) -> DetectorScore:
        total = 0.0
        subtype = None
        strongest = next(iter(self.patterns))

        for line in lines:
            for name, pattern in self.patterns.items():
                if pattern.search(line):
                    total += weight(self.weight_category, name)
                    if name == strongest or subtype is None:
                        subtype = self.subtype_name(name)
                    break

        confidence = clamp(total / len(lines)) if lines else 0.0
        return DetectorScore(
            type=self.table_type,
            confidence=confidence,
            subtype=subtype,
            separator=self.separator_for(subtype)
        )


class BorderedStrategy(LayoutStrategy):
    table_type = 'bordered'
    weight_category = 'structure.bordered'
    patterns = BORDERED_PATTERNS

    def subtype_name(self, pattern_name: str) -> str:
        return f"{pattern_name}-bordered"

    def separator_for(self, subtype: Optional[str]) -> str:
        return BORDERED_SEPARATORS.get(subtype, BORDERED_SEPARATORS['mixed-bordered'])


class TabStrategy(LayoutStrategy):
    table_type = 'tab-delimited'
    weight_category = 'structure.tab'
    patterns = TAB_PATTERNS

    def subtype_name(self, pattern_name: str) -> str:
        return f"{pattern_name}-tabs"

    def separator_for(self, subtype: Optional[str]) -> str:
        return TAB_SEPARATOR


class SpaceStrategy(LayoutStrategy):
    table_type = 'space-separated'
    weight_category = 'structure.space'
    patterns = SPACE_PATTERNS

    def subtype_name(self, pattern_name: str) -> str:
        return f"{pattern_name}-spaced"

    def separator_for(self, subtype: Optional[str]) -> str:
        return SPACE_SEPARATORS.get(subtype, DEFAULT_SPACE_SEPARATOR)


class AlignedStrategy(LayoutStrategy):
    table_type = 'aligned'
    weight_category = 'structure.aligned'
    patterns = ALIGNED_PATTERNS

    def score(self, lines: Sequence[str]) -> DetectorScore:
        result = super().score(lines)
        return result._replace(alignment=result.subtype)


DEFAULT_STRATEGIES = (BorderedStrategy, TabStrategy, SpaceStrategy, AlignedStrategy)


# ==================== ORCHESTRATOR ====================

class StructureDetector:
    """
    Detect the table structure of a block of text lines
    """

    def __init__(self, settings: Optional[Settings] = None,
                 strategies: Optional[Sequence[LayoutStrategy]] = None):
        """
        Args:
            settings: Engine tunables (sample size, thresholds)
            strategies: Layout strategies in evaluation order
        """
        self.settings = settings or get_settings()
        self.strategies = list(strategies) if strategies is not None else [cls() for cls in DEFAULT_STRATEGIES]
        self.classifier = ColumnRoleClassifier()

    def select_layout(self, sample: Sequence[str]) -> Optional[DetectorScore]:
        """
        Run every strategy and keep the best score

        Ties go to the strategy evaluated first.
        """
        best = None
        for strategy in self.strategies:
            result = strategy.score(sample)
            logger.debug(f"Layout {result.type}: {result.confidence:.3f} ({result.subtype})")
            if result.confidence > (best.confidence if best else 0.0):
                best = result
        return best

    # ---- secondary passes ----

    def detect_irregular_spacing(self, data_lines: Sequence[str]) -> bool:
        """Rows disagree on gap count, or a gap width drifts by more than one"""
        patterns = []
        for line in data_lines:
            gaps = [len(run) for run in _WHITESPACE_RUN.findall(line)]
            if gaps:
                patterns.append(np.array(gaps))

        if len(patterns) < 2:
            return False

        first = patterns[0]
        for gaps in patterns[1:]:
            if len(gaps) != len(first) or np.any(np.abs(gaps - first) > 1):
                return True
        return False

    def detect_merged_cells(self, sample: Sequence[str]) -> bool:
        return any(pattern.search(line) for line in sample for pattern in MERGED_CELL_PATTERNS)

    def detect_mixed_data_types(self, data_lines: Sequence[str], separator: str) -> bool:
        """Any column holding more than one value signature"""
        signatures: Dict[int, set] = {}
        for line in data_lines:
            for index, cell in enumerate(split_line_into_columns(line, separator)):
                signatures.setdefault(index, set()).add(self._data_type(cell.strip()))
        return any(len(kinds) > 1 for kinds in signatures.values())

    def _data_type(self, value: str) -> str:
        for name, pattern in DATA_TYPE_PATTERNS.items():
            if pattern.match(value):
                return name
        return 'formatted'

    def detect_column_alignment(self, data_lines: Sequence[str]) -> Optional[str]:
        """Majority alignment of the data lines (needs three or more)"""
        if len(data_lines) < 3:
            return None

        scores = {'left': 0, 'right': 0, 'center': 0, 'mixed': 0}
        for line in data_lines:
            if ALIGNED_PATTERNS['left'].search(line):
                scores['left'] += 1
            elif ALIGNED_PATTERNS['right'].search(line):
                scores['right'] += 1
            elif ALIGNED_PATTERNS['centered'].search(line):
                scores['center'] += 1
            else:
                scores['mixed'] += 1

        top = max(scores.values())
        return next(name for name, value in scores.items() if value == top)

    # ---- headers ----

    def _differs_from_data(self, line: str, following: Sequence[str]) -> bool:
        if not following:
            return False

        header_cells = split_line_into_columns(line)
        data_cells = [split_line_into_columns(row) for row in following[:3]]

        avg_data_columns = np.mean([len(cells) for cells in data_cells])
        if abs(len(header_cells) - avg_data_columns) > 1:
            return True

        header_all_text = all(_ALL_ALPHA.match(cell) for cell in header_cells)
        data_has_numbers = any(_HAS_DIGIT.search(cell) for cells in data_cells for cell in cells)
        return header_all_text and data_has_numbers

    def _contains_phone(self, line: str) -> bool:
        return any(is_phone_number(cell) for cell in split_line_into_columns(line))

    def detect_headers(self, sample: Sequence[str]):
        """
        Score header signals over the first three lines

        Returns:
            (has_headers, header_lines, score)
        """
        if not sample:
            return False, [], 0.0

        score = 0.0
        header_lines = []

        for index in range(min(3, len(sample))):
            line = sample[index]
            fired = []

            if index < len(sample) - 1 and HEADER_PATTERNS['underlined'].search(line + '\n' + sample[index + 1].strip()):
                fired.append('underlined')
            if HEADER_PATTERNS['capitalized'].match(line.strip()):
                fired.append('capitalized')
            if HEADER_PATTERNS['keywords'].search(line):
                fired.append('keywords')
            if HEADER_PATTERNS['numbered'].search(line):
                fired.append('numbered')
            if self._differs_from_data(line, sample[index + 1:]):
                fired.append('divergent')

            for signal in fired:
                score += weight('header', signal)
            if fired:
                header_lines.append(index)

            if index == 0 and not self._contains_phone(line):
                score += weight('header', 'no_phone')

        return score > self.settings.header_threshold, sorted(set(header_lines)), score

    # ---- orchestration ----

    def finalize(self, structure: Dict) -> Dict:
        """Fall back to a residual interpretation when confidence stays low"""
        if structure['confidence'] >= self.settings.low_confidence_threshold:
            return structure

        if structure['irregular_spacing'] and structure['mixed_data_types']:
            fallback = 'complex-mixed'
        elif structure['merged_cells']:
            fallback = 'merged-cells'
        else:
            fallback = 'unstructured'

        message = (f"Table structure is ambiguous: {structure['type']} scored "
                   f"{structure['confidence']:.2f}, treating as {fallback}")
        logger.warning(f"⚠️ {message}")
        warnings.warn(message, StructureAmbiguityWarning, stacklevel=3)

        structure.update(
            type=fallback,
            confidence=weight('structure.fallback', fallback),
            ambiguous=True
        )
        return structure

    def detect(self, lines: Sequence[str]) -> TableStructure:
        """
        Detect the structure of the given lines

        Args:
            lines: Non-empty text lines (original spacing preserved)

        Returns:
            Frozen TableStructure
        """
        sample = [line for line in lines if line.strip()][:self.settings.structure_sample_size]
        data_lines = filter_data_lines(sample)

        layout = self.select_layout(sample)
        structure = {
            'type': layout.type if layout else 'unstructured',
            'subtype': layout.subtype if layout else None,
            'confidence': layout.confidence if layout else 0.0,
            'separator_pattern': layout.separator if layout else DEFAULT_SPACE_SEPARATOR,
            'alignment': layout.alignment if layout else None,
        }

        structure['irregular_spacing'] = self.detect_irregular_spacing(data_lines)
        structure['merged_cells'] = self.detect_merged_cells(sample)
        structure['mixed_data_types'] = self.detect_mixed_data_types(data_lines, structure['separator_pattern'])
        structure['alignment'] = self.detect_column_alignment(data_lines) or structure['alignment']

        roles = self.classifier.classify(data_lines, structure['separator_pattern'])
        structure['confidence'] = clamp(structure['confidence'] + roles.confidence_bonus)

        has_headers, header_lines, header_score = self.detect_headers(sample)
        logger.debug(f"Header score {header_score:.2f} on lines {header_lines}")

        structure.update(
            column_count=roles.column_count,
            has_headers=has_headers,
            header_lines=header_lines,
            phone_column_index=roles.phone_column_index,
            id_column_index=roles.id_column_index,
            metadata_columns=roles.metadata_columns,
            column_relationships=roles.relationships,
            ambiguous=False,
        )
        structure = self.finalize(structure)

        logger.info(
            f"🔍 Detected {structure['type']} table ({structure['subtype']}), "
            f"confidence {structure['confidence']:.2f}, {structure['column_count']} columns, "
            f"phone column {structure['phone_column_index']}"
        )
        return TableStructure(**structure)


def detect_table_structure(lines: Sequence[str], settings: Optional[Settings] = None) -> TableStructure:
    """Convenience function for one-off detection"""
    return StructureDetector(settings).detect(lines)
