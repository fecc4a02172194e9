"""
Core interfaces and abstract base classes for the Registrar platform.
"""

from abc import ABC, abstractmethod

from .enums import EnrollmentFailureReason


class EnrollmentRequirement(ABC):
    """Abstract base class for course-specific enrollment requirements.
    
    Course variants contribute requirements through
    ``Course.get_enrollment_requirements()``; the registry evaluates them
    after the capacity and duplicate checks.
    """
    
    @abstractmethod
    def is_satisfied(self, student: 'Student', course: 'Course') -> bool:
        """Check if the student meets this requirement for the course."""
        pass
    
    @abstractmethod
    def get_failure_reason(self) -> EnrollmentFailureReason:
        """Get the reason reported when the requirement is not met."""
        pass
    
    @abstractmethod
    def describe_failure(self, student: 'Student', course: 'Course') -> str:
        """Get a human-readable explanation of a failed check."""
        pass
    
    @abstractmethod
    def get_requirement_name(self) -> str:
        """Get the name of this requirement."""
        pass


class EventHandler(ABC):
    """Abstract base class for event handlers."""
    
    @abstractmethod
    def handle_event(self, event: 'EnrollmentEvent') -> None:
        """Handle an event."""
        pass
    
    @abstractmethod
    def can_handle(self, event_type: str) -> bool:
        """Check if this handler can handle the event type."""
        pass
