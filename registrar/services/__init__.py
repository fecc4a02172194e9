"""
Services module containing the enrollment registry and gradebook.
"""

from .enrollment_registry import EnrollmentRegistry, EnrollmentResult
from .event_publisher import EventPublisher
from .gradebook import GradeBook

__all__ = [
    "EnrollmentRegistry",
    "EnrollmentResult",
    "EventPublisher",
    "GradeBook",
]
