from .enums import EnrollmentFailureReason
from .interfaces import EnrollmentRequirement


class MinimumSemesterRequirement(EnrollmentRequirement):
    """Student must have reached a minimum semester to join the course."""

    def __init__(self, required_semester: int):
        self._required_semester = required_semester

    @property
    def required_semester(self) -> int:
        return self._required_semester

    def is_satisfied(self, student, course) -> bool:
        return student.semester >= self._required_semester

    def get_failure_reason(self) -> EnrollmentFailureReason:
        return EnrollmentFailureReason.PREREQUISITE_NOT_SATISFIED

    def describe_failure(self, student, course) -> str:
        return (f"{course.code} requires semester {self._required_semester}, "
                f"student {student.student_id} is in semester {student.semester}")

    def get_requirement_name(self) -> str:
        return "MinimumSemesterRequirement"
