"""
Core module containing the entity model, interfaces and exceptions.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *
from .enrollment_policies import *

__all__ = [
    # Entities
    "AbstractEntity",
    "Student",
    "Course",
    "LabCourse",
    "EnrollmentEvent",
    
    # Interfaces
    "EnrollmentRequirement",
    "EventHandler",
    
    # Policies
    "MinimumSemesterRequirement",
    
    # Enums
    "EnrollmentFailureReason",
    "EventType",
    "MIN_GRADE",
    "MAX_GRADE",
    
    # Exceptions
    "RegistrarException",
    "ValidationError",
    "InvalidArgumentError",
    "GradeOutOfRangeError",
    "NotEnrolledError",
    "ResourceNotFoundError",
    "DuplicateEntityError",
    "ConfigurationError",
]
