"""
Gradebook service: records grades for enrolled students and derives metrics.
"""

import numbers
import threading
from typing import Any, Dict, Optional, Tuple

from ..core.entities import Course, Student
from ..core.enums import MAX_GRADE, MIN_GRADE, EventType
from ..core.exceptions import GradeOutOfRangeError, InvalidArgumentError, NotEnrolledError
from ..logging import get_logger
from .enrollment_registry import EnrollmentRegistry
from .event_publisher import EventPublisher

logger = get_logger("gradebook")


class GradeBook(EventPublisher):
    """Per-student, per-course grades backed by an enrollment registry.

    The registry is only read; grades can be recorded for a pair solely
    while that pair is enrolled. Recording again overwrites the earlier grade.
    Every recorded grade is announced to event handlers as a GRADING event.
    """

    def __init__(self, registry: EnrollmentRegistry):
        super().__init__()
        self._registry = registry
        self._grades: Dict[Student, Dict[Course, float]] = {}  # student -> course -> grade
        self._lock = threading.RLock()

    @property
    def registry(self) -> EnrollmentRegistry:
        return self._registry

    def record_grade(self, student: Student, course: Course, value: float) -> None:
        """Record a grade, replacing any earlier grade for the pair.

        Raises:
            InvalidArgumentError: If student or course is missing.
            GradeOutOfRangeError: If value is not a number in [0, 100].
            NotEnrolledError: If the student is not enrolled in the course.
        """
        if student is None or course is None:
            raise InvalidArgumentError("Both student and course are required to record a grade")

        if (isinstance(value, bool) or not isinstance(value, numbers.Real)
                or not MIN_GRADE <= value <= MAX_GRADE):
            logger.warning("Rejected grade %r for student %s in %s", value,
                           student.student_id, course.code)
            raise GradeOutOfRangeError(value, MIN_GRADE, MAX_GRADE)

        with self._lock:
            if not self._registry.is_enrolled(student, course):
                logger.warning("Rejected grade for student %s: not enrolled in %s",
                               student.student_id, course.code)
                raise NotEnrolledError(student.student_id, course.code)

            self._grades.setdefault(student, {})[course] = float(value)

        logger.info("Recorded grade %s for student %s in %s", value, student.student_id, course.code)
        self._publish(self._build_event(EventType.GRADING, {
            'student_id': student.student_id,
            'course_code': course.code,
            'grade': float(value)
        }))

    def get_grade(self, student: Student, course: Course) -> Optional[float]:
        with self._lock:
            return self._grades.get(student, {}).get(course)

    def get_student_grades(self, student: Student) -> Dict[Course, float]:
        with self._lock:
            return dict(self._grades.get(student, {}))

    def calculate_gpa(self, student: Student) -> Optional[float]:
        """Credit-weighted mean of the student's recorded grades.

        Returns None when the student has no grades or the grades carry no
        credits at all.
        """
        grades = self.get_student_grades(student)
        if not grades:
            return None

        total_credits = sum(course.credits for course in grades)
        if total_credits == 0:
            return None

        weighted = sum(grade * course.credits for course, grade in grades.items())
        return weighted / total_credits

    def get_top_student(self, course: Course) -> Optional[Tuple[Student, float]]:
        """Student with the highest grade in a course.

        Ties go to the lowest student id.
        """
        with self._lock:
            candidates = [(student, grades[course]) for student, grades in self._grades.items()
                          if course in grades]
        if not candidates:
            return None
        return min(candidates, key=lambda pair: (-pair[1], pair[0].student_id))

    def get_statistics(self) -> Dict[str, Any]:
        """Get gradebook statistics."""
        with self._lock:
            return {
                'graded_students': len(self._grades),
                'recorded_grades': sum(len(grades) for grades in self._grades.values()),
                'event_handlers': self.handler_count
            }
