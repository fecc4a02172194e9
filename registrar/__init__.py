"""
Registrar: course enrollment and gradebook management.

Tracks which students are enrolled in which courses, subject to capacity and
course-specific requirements, and derives academic metrics such as
credit-weighted GPA and the top performer of a course.
"""

__version__ = "1.0.0"
__author__ = "Registrar Development Team"
__description__ = "Course enrollment registry and gradebook"
