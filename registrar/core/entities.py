"""
Core entities for the Registrar platform.

Students and courses are immutable value objects identified by their natural
keys: the numeric student id and the course code respectively.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Hashable, List

from .enums import EventType
from .enrollment_policies import MinimumSemesterRequirement
from .exceptions import ValidationError
from .interfaces import EnrollmentRequirement


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class AbstractEntity(ABC):
    """Base abstract entity with natural-key identity and creation timestamp."""

    def __init__(self):
        self._created_at = datetime.now(timezone.utc)

    @property
    @abstractmethod
    def key(self) -> Hashable:
        """Natural key used for equality and hashing."""
        pass

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    def _identity_type(self) -> type:
        """Class whose instances share one key space."""
        return type(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractEntity):
            return NotImplemented
        return self._identity_type() is other._identity_type() and self.key == other.key

    def __hash__(self) -> int:
        return hash((self._identity_type().__name__, self.key))

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {'created_at': self._created_at.isoformat()}

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.key})"


class Student(AbstractEntity):
    """Student entity identified by a numeric id."""

    def __init__(self, student_id: int, name: str, semester: int):
        super().__init__()
        if not _is_int(student_id):
            raise ValidationError("Student id must be an integer")
        if not _is_int(semester) or semester < 1:
            raise ValidationError("Semester must be a positive integer")
        self._student_id = student_id
        self._name = name
        self._semester = semester

    @property
    def key(self) -> int:
        return self._student_id

    @property
    def student_id(self) -> int:
        return self._student_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def semester(self) -> int:
        return self._semester

    def _identity_type(self) -> type:
        return Student

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'student_id': self._student_id,
            'name': self._name,
            'semester': self._semester
        })
        return base_dict

    def __repr__(self) -> str:
        return f"Student(student_id={self._student_id}, name={self._name!r}, semester={self._semester})"


class Course(AbstractEntity):
    """Course entity identified by its code."""

    def __init__(self, code: str, title: str, max_capacity: int, credits: int):
        super().__init__()
        if not code:
            raise ValidationError("Course code cannot be empty")
        if not _is_int(max_capacity) or max_capacity < 0:
            raise ValidationError("Capacity cannot be negative")
        if not _is_int(credits) or credits < 0:
            raise ValidationError("Credits cannot be negative")
        self._code = code
        self._title = title
        self._max_capacity = max_capacity
        self._credits = credits

    @property
    def key(self) -> str:
        return self._code

    @property
    def code(self) -> str:
        return self._code

    @property
    def title(self) -> str:
        return self._title

    @property
    def max_capacity(self) -> int:
        return self._max_capacity

    @property
    def credits(self) -> int:
        return self._credits

    def _identity_type(self) -> type:
        # Variants share the course code space
        return Course

    def get_enrollment_requirements(self) -> List[EnrollmentRequirement]:
        """Requirements a student must meet beyond capacity and duplicates."""
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'code': self._code,
            'title': self._title,
            'max_capacity': self._max_capacity,
            'credits': self._credits
        })
        return base_dict

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(code={self._code!r}, title={self._title!r}, "
                f"max_capacity={self._max_capacity}, credits={self._credits})")


class LabCourse(Course):
    """Course that only admits students from a minimum semester onwards."""

    def __init__(self, code: str, title: str, max_capacity: int, credits: int,
                 required_semester: int):
        super().__init__(code, title, max_capacity, credits)
        if not _is_int(required_semester) or required_semester < 1:
            raise ValidationError("Required semester must be a positive integer")
        self._requirement = MinimumSemesterRequirement(required_semester)

    @property
    def required_semester(self) -> int:
        return self._requirement.required_semester

    def get_enrollment_requirements(self) -> List[EnrollmentRequirement]:
        return [self._requirement]

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict['required_semester'] = self.required_semester
        return base_dict


class EnrollmentEvent:
    """Event describing an enrollment, rejection or grading outcome."""

    def __init__(self, event_type: EventType, stream_id: str,
                 event_data: Dict[str, Any]):
        self._id = str(uuid.uuid4())
        self._event_type = event_type
        self._stream_id = stream_id
        self._event_data = event_data
        self._timestamp = datetime.now(timezone.utc)

    @property
    def id(self) -> str:
        return self._id

    @property
    def event_type(self) -> EventType:
        return self._event_type

    @property
    def stream_id(self) -> str:
        return self._stream_id

    @property
    def event_data(self) -> Dict[str, Any]:
        return self._event_data.copy()

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    def __repr__(self) -> str:
        return f"EnrollmentEvent(type={self._event_type.value}, stream={self._stream_id})"
