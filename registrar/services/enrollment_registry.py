"""
Enrollment registry: the single source of truth for course membership.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Set, Tuple

from ..core.entities import Course, EnrollmentEvent, Student
from ..core.enums import EnrollmentFailureReason, EventType
from ..logging import get_logger
from .event_publisher import EventPublisher

logger = get_logger("enrollment_registry")


@dataclass
class EnrollmentResult:
    """Result of an enrollment attempt."""
    success: bool
    message: str
    reason: Optional[EnrollmentFailureReason] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.success


class EnrollmentRegistry(EventPublisher):
    """Tracks which students are enrolled in which courses.

    Enrollment is gated by three rules evaluated in a fixed order, the first
    failure determining the reported reason:

    1. the course must have a free seat,
    2. the student must not already be enrolled,
    3. every requirement the course contributes through
       ``get_enrollment_requirements()`` must be satisfied.
    """

    def __init__(self):
        super().__init__()
        self._enrollments: Dict[Course, Set[Student]] = {}  # course -> students
        self._lock = threading.RLock()

    def enroll(self, student: Optional[Student], course: Optional[Course]) -> EnrollmentResult:
        """Enroll a student in a course."""
        if student is None or course is None:
            missing = "student" if student is None else "course"
            result, event = self._reject(student, course, EnrollmentFailureReason.INVALID_ARGUMENT,
                                         f"A {missing} is required for enrollment")
        else:
            with self._lock:
                result, event = self._apply_rules(student, course)

        self._publish(event)
        return result

    def _apply_rules(self, student: Student, course: Course) -> Tuple[EnrollmentResult, EnrollmentEvent]:
        """Check-then-insert; callers hold the lock."""
        members = self._enrollments.get(course, set())

        if len(members) >= course.max_capacity:
            return self._reject(student, course, EnrollmentFailureReason.COURSE_FULL,
                                f"{course.code} is full ({course.max_capacity} seats)")

        if student in members:
            return self._reject(student, course, EnrollmentFailureReason.ALREADY_ENROLLED,
                                f"Student {student.student_id} is already enrolled in {course.code}")

        for requirement in course.get_enrollment_requirements():
            if not requirement.is_satisfied(student, course):
                return self._reject(student, course, requirement.get_failure_reason(),
                                    requirement.describe_failure(student, course),
                                    requirement=requirement.get_requirement_name())

        self._enrollments.setdefault(course, set()).add(student)
        logger.info("Enrolled student %s in %s (%d/%d)", student.student_id, course.code,
                    len(self._enrollments[course]), course.max_capacity)

        result = EnrollmentResult(
            success=True,
            message=f"Student {student.student_id} enrolled in {course.code}"
        )
        event = self._build_event(EventType.ENROLLMENT, {
            'student_id': student.student_id,
            'course_code': course.code,
            'status': 'enrolled'
        })
        return result, event

    def _reject(self, student: Optional[Student], course: Optional[Course],
                reason: EnrollmentFailureReason, message: str,
                **metadata) -> Tuple[EnrollmentResult, EnrollmentEvent]:
        """Build a failed result and the event announcing it."""
        logger.warning("Enrollment rejected (%s): %s", reason.value, message)
        event = self._build_event(EventType.ENROLLMENT_REJECTED, {
            'student_id': student.student_id if student is not None else None,
            'course_code': course.code if course is not None else None,
            'reason': reason.value
        })
        return EnrollmentResult(success=False, message=message, reason=reason, metadata=metadata), event

    def get_enrolled_students(self, course: Course) -> FrozenSet[Student]:
        """Get the students currently enrolled in a course."""
        with self._lock:
            return frozenset(self._enrollments.get(course, ()))

    def get_student_courses(self, student: Student) -> Set[Course]:
        """Get every course the student is enrolled in."""
        with self._lock:
            return {course for course, members in self._enrollments.items() if student in members}

    def calculate_workload(self, student: Student) -> int:
        """Total credits across the student's courses."""
        return sum(course.credits for course in self.get_student_courses(student))

    def is_enrolled(self, student: Student, course: Course) -> bool:
        """Check if student is enrolled in course."""
        with self._lock:
            return student in self._enrollments.get(course, ())

    def get_enrollment_count(self, course: Course) -> int:
        """Get number of students enrolled in a course."""
        with self._lock:
            return len(self._enrollments.get(course, ()))

    def get_statistics(self) -> Dict[str, Any]:
        """Get enrollment statistics."""
        with self._lock:
            return {
                'total_courses': len(self._enrollments),
                'total_enrollments': sum(len(members) for members in self._enrollments.values()),
                'full_courses': sum(1 for course, members in self._enrollments.items()
                                    if len(members) >= course.max_capacity),
                'event_handlers': self.handler_count
            }
