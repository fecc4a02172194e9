"""
Enumerations and constants for the Registrar platform.
"""

from enum import Enum


class EnrollmentFailureReason(Enum):
    """Reasons an enrollment attempt can be rejected."""
    INVALID_ARGUMENT = "invalid_argument"
    COURSE_FULL = "course_full"
    ALREADY_ENROLLED = "already_enrolled"
    PREREQUISITE_NOT_SATISFIED = "prerequisite_not_satisfied"


class EventType(Enum):
    """Types of events published by the services."""
    ENROLLMENT = "enrollment"
    ENROLLMENT_REJECTED = "enrollment_rejected"
    GRADING = "grading"


# Accepted grade range, inclusive on both ends
MIN_GRADE = 0.0
MAX_GRADE = 100.0
