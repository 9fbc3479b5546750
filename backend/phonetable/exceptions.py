"""
Standardized exception handlers for consistent error responses
"""
from fastapi import HTTPException, status

from phonetable.errors import ExtractionError


def _detail(error: ExtractionError) -> dict:
    return error.to_dict()


class InvalidInputException(HTTPException):
    """Raised when the submitted content is not usable text"""
    def __init__(self, error: ExtractionError):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_detail(error)
        )


class EmptyContentException(HTTPException):
    """Raised when the submitted text is blank"""
    def __init__(self, error: ExtractionError):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_detail(error)
        )


class NoRecordsFoundException(HTTPException):
    """Raised when extraction completes without any phone record"""
    def __init__(self, error: ExtractionError):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_detail(error)
        )


class TextTooLargeException(HTTPException):
    """Raised when submitted text exceeds the size limit"""
    def __init__(self, length: int, max_length: int):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Text length ({length} chars) exceeds maximum allowed length ({max_length} chars)"
        )


def http_exception_for(error: ExtractionError) -> HTTPException:
    """Map a classified engine error onto its HTTP exception"""
    if error.error_type == 'empty-content':
        return EmptyContentException(error)
    if error.error_type == 'invalid-input':
        return InvalidInputException(error)
    return NoRecordsFoundException(error)
