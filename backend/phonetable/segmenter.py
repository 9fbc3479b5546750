"""
Line segmentation helpers
Split raw text into lines, pages and cells, and tell header/separator
lines apart from data lines
"""

import re
import logging
from typing import List, Optional

from phonetable.patterns import HEADER_LINE_PATTERNS, SEPARATOR_LINE_PATTERNS
from phonetable.phone_extractor import is_phone_number

# Setup logging
logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s+')
_BORDER_GLYPHS = '│┃║| \t'

_PAGE_BREAKS = [
    re.compile(r'\f'),
    re.compile(r'Page\s+\d+', re.IGNORECASE),
    # Bare page number on its own line; longer digit runs are data
    re.compile(r'^\s*\d{1,3}\s*$', re.MULTILINE),
]


def split_lines(text: str) -> List[str]:
    """
    Split text into lines, dropping blank ones

    Lines keep their original spacing; structure detection depends on it.
    """
    if not text:
        return []
    return [line.rstrip('\r') for line in text.split('\n') if line.strip()]


def is_separator_line(line: str) -> bool:
    """Line made only of rule characters (dashes, pipes, box drawing)"""
    clean = line.strip() if isinstance(line, str) else ''
    return any(pattern.match(clean) for pattern in SEPARATOR_LINE_PATTERNS)


def is_header_or_separator(line) -> bool:
    """
    Check if a line is a header or separator

    Args:
        line: The line to check

    Returns:
        True for separators, header-keyword lines and empty/non-text values
    """
    if not line or not isinstance(line, str):
        return True

    clean = line.strip()
    if not clean:
        return True

    if is_separator_line(clean):
        return True

    # Bordered rows open with a border glyph
    clean = clean.lstrip(_BORDER_GLYPHS)
    return any(pattern.match(clean) for pattern in HEADER_LINE_PATTERNS)


def filter_data_lines(lines: List[str]) -> List[str]:
    """Lines that are neither blank nor header/separator lines"""
    return [line for line in lines if line.strip() and not is_header_or_separator(line)]


def split_line_into_columns(line: str, separator: Optional[str] = None) -> List[str]:
    """
    Split a line into trimmed, non-empty cells

    Args:
        line: Line to split
        separator: Regex source of the column separator; whitespace runs if None

    Returns:
        List of cell values
    """
    if not line:
        return []

    if separator:
        return [cell.strip() for cell in re.split(separator, line) if cell.strip()]

    return [cell for cell in _WHITESPACE.split(line) if cell]


def find_data_start_index(lines: List[str], separator: Optional[str] = None) -> int:
    """
    Index of the first data line among the first five lines

    A data line is a non header/separator line holding a phone-shaped cell.
    Defaults to 1 (skip one header line) when none is found.
    """
    for index in range(min(5, len(lines))):
        if is_header_or_separator(lines[index]):
            continue

        cells = split_line_into_columns(lines[index], separator)
        if any(is_phone_number(cell) for cell in cells):
            return index

    return 1


def count_header_lines(lines: List[str]) -> int:
    """Number of leading header/separator lines before the first data line"""
    count = 0
    for line in lines:
        if is_header_or_separator(line):
            count += 1
        elif line.strip():
            break
    return count


def split_text_into_pages(text: str) -> List[str]:
    """
    Split text into pages on form feeds, "Page N" markers and standalone
    page-number lines; blank pages are dropped
    """
    pages = [text or '']
    for pattern in _PAGE_BREAKS:
        pages = [piece for page in pages for piece in pattern.split(page)]

    pages = [page for page in pages if page.strip()]
    logger.debug(f"Split text into {len(pages)} pages")
    return pages
