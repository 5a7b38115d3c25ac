from fastapi import HTTPException, status
from typing import Any, Dict, Optional

class NotFoundException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_404_NOT_FOUND
        self.detail = detail or "Not found"

class ForbiddenException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_403_FORBIDDEN
        self.detail = detail or "Forbidden"

class BadRequestException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_400_BAD_REQUEST
        self.detail = detail or "Bad request"

class ValidationException(BadRequestException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail=detail or "Validation error", headers=headers)

class ConflictException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_409_CONFLICT
        self.detail = detail or "Conflict"

class UnauthorizedException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers or {"WWW-Authenticate": "Bearer"}
        self.status_code = status.HTTP_401_UNAUTHORIZED
        self.detail = detail or "Unauthorized"

class InternalServerException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        self.detail = detail or "Internal server error"

def is_unique_violation(error_msg: str) -> bool:
    return (
        'UniqueViolation' in error_msg
        or 'duplicate key value' in error_msg
        or 'UNIQUE constraint failed' in error_msg
    )

def integrity_error_to_http_exception(error: Exception) -> HTTPException:
    """Turn a database integrity error into a client facing exception."""
    error_msg = str(error.orig) if hasattr(error, 'orig') else str(error)

    if 'DETAIL:' in error_msg:
        # Include the DETAIL part which often has useful info
        main_error = error_msg.split('\n')[0]
        detail_part = error_msg.split('DETAIL:')[1].split('\n')[0].strip()
        clean_msg = f"{main_error}. {detail_part}"
    else:
        clean_msg = error_msg.split('\n')[0]

    if is_unique_violation(error_msg):
        return ConflictException(detail=clean_msg)
    return BadRequestException(detail=clean_msg)
