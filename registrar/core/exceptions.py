"""
Custom exceptions for the Registrar platform.
"""

from typing import Optional, Any, Dict


class RegistrarException(Exception):
    """Base exception for all Registrar-related errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(RegistrarException):
    """Raised when data validation fails."""
    pass


class InvalidArgumentError(ValidationError):
    """Raised when a required student or course reference is missing."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="INVALID_ARGUMENT", details=details)


class GradeOutOfRangeError(ValidationError):
    """Raised when a grade value falls outside the accepted range."""
    
    def __init__(self, value: Any, minimum: float, maximum: float):
        super().__init__(
            f"Grade {value!r} is outside the range [{minimum:g}, {maximum:g}]",
            error_code="OUT_OF_RANGE",
            details={'value': value, 'minimum': minimum, 'maximum': maximum}
        )


class NotEnrolledError(ValidationError):
    """Raised when a grade is recorded for a student not enrolled in the course."""
    
    def __init__(self, student_id: int, course_code: str):
        super().__init__(
            f"Student {student_id} is not enrolled in {course_code}",
            error_code="NOT_ENROLLED",
            details={'student_id': student_id, 'course_code': course_code}
        )


class ResourceNotFoundError(RegistrarException):
    """Raised when a requested resource is not found."""
    pass


class DuplicateEntityError(RegistrarException):
    """Raised when attempting to create a duplicate entity."""
    pass


class ConfigurationError(RegistrarException):
    """Raised when configuration is invalid."""
    pass
