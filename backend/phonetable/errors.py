"""
Engine error taxonomy
Classified errors carry a category and user-facing suggestions.
"""

from typing import Any, Dict, List, Optional


# Keyword buckets, checked in order
_ERROR_CATEGORIES = [
    ('SECURITY_ERROR', ('encrypted', 'password')),
    ('CONTENT_ERROR', ('empty', 'no content')),
    ('DATA_ERROR', ('phone', 'records')),
    ('STRUCTURE_ERROR', ('table', 'structure')),
    ('FORMAT_ERROR', ('format', 'parsing')),
]

_SUGGESTIONS = {
    'SECURITY_ERROR': [
        'Remove password protection from the source document',
        'Export the document again without encryption',
    ],
    'CONTENT_ERROR': [
        'Ensure the document contains visible text and tables',
        'Check that the document is not just images (scanned pages)',
        'Run OCR on scanned documents before extraction',
    ],
    'DATA_ERROR': [
        'Ensure the document contains a table with phone numbers',
        'Phone numbers should be in Singapore format (8 digits starting with 6, 8, or 9)',
        'Check that phone numbers are in separate columns or clearly formatted',
        'Avoid mixing phone numbers with other text in the same cell',
    ],
    'STRUCTURE_ERROR': [
        'Ensure data is organized in a clear table format',
        'Use consistent spacing or borders between columns',
        'Avoid merged cells or complex table layouts',
        'Consider using tab-delimited format for better parsing',
    ],
    'FORMAT_ERROR': [
        'Export the text from the original source again',
        'Ensure the content was not corrupted during transfer',
        'Provide plain UTF-8 text rather than binary document bytes',
    ],
    'UNKNOWN_ERROR': [
        'Ensure the document contains a clear table with phone numbers',
        'Verify that phone numbers are in Singapore format (8 digits)',
        'Use consistent formatting throughout the document',
    ],
}


def categorize_error(message: str) -> str:
    """
    Map an error message onto a coarse category

    Args:
        message: Error message text

    Returns:
        One of SECURITY_ERROR, CONTENT_ERROR, DATA_ERROR, STRUCTURE_ERROR,
        FORMAT_ERROR, UNKNOWN_ERROR
    """
    lowered = (message or '').lower()
    for category, keywords in _ERROR_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return 'UNKNOWN_ERROR'


def suggestions_for(message: str) -> List[str]:
    """
    Collect suggestions for every category the message mentions

    Falls back to the generic suggestions when nothing matches.
    """
    lowered = (message or '').lower()
    suggestions: List[str] = []
    for category, keywords in _ERROR_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            suggestions.extend(_SUGGESTIONS[category])
    return suggestions or list(_SUGGESTIONS['UNKNOWN_ERROR'])


class ExtractionError(Exception):
    """Base class for classified extraction errors"""

    error_type = 'extraction-error'

    def __init__(self, message: str, suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.category = categorize_error(message)
        self.suggestions = suggestions if suggestions is not None else suggestions_for(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'error_type': self.error_type,
            'category': self.category,
            'message': self.message,
            'suggestions': list(self.suggestions),
        }


class InputError(ExtractionError):
    """Input is not text-like"""
    error_type = 'invalid-input'


class EmptyContentError(InputError):
    """Input text is empty or whitespace-only"""
    error_type = 'empty-content'


class ExtractionEmptyError(ExtractionError):
    """No phone records could be extracted; carries the diagnostic report"""

    error_type = 'no-records-found'

    def __init__(self, message: str, report=None, suggestions: Optional[List[str]] = None):
        if suggestions is None and report is not None:
            suggestions = list(dict.fromkeys(list(report.suggestions) + suggestions_for(message)))
        super().__init__(message, suggestions)
        self.report = report

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.report is not None:
            data['issues'] = list(self.report.issues)
            data['warnings'] = list(self.report.warnings)
        return data


class RowSkipped(ExtractionError):
    """A single row yielded no records"""

    error_type = 'row-skipped'

    def __init__(self, reason: str, line_number: int = 0, text: str = ''):
        super().__init__(reason, suggestions=[])
        self.reason = reason
        self.line_number = line_number
        self.text = text


class StructureAmbiguityWarning(UserWarning):
    """The detected table structure was downgraded to a fallback interpretation"""
