"""
Standardized request/response schemas for consistent API responses
"""
from pydantic import BaseModel
from typing import Optional, Any, Dict


class APIResponse(BaseModel):
    """Standard API response wrapper"""
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Extracted 9 phone records",
                "data": {"records": [], "report": {}},
                "meta": {"processing_time_ms": 12.5}
            }
        }


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    error: str
    detail: Optional[Any] = None
    path: Optional[str] = None
    timestamp: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "no-records-found",
                "detail": {
                    "category": "DATA_ERROR",
                    "suggestions": ["Ensure the document contains a table with phone numbers"]
                },
                "path": "/api/v1/extract"
            }
        }


class ExtractRequest(BaseModel):
    """Text extraction request"""
    text: str
    source_file: Optional[str] = None
    split_pages: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "text": "ID    Phone       Company\n001   91234567    Acme Pte Ltd",
                "source_file": "directory.pdf",
                "split_pages": False
            }
        }
