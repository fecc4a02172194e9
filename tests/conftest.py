"""Shared pytest fixtures and configuration."""

import logging

import pytest

from registrar.core import Course, LabCourse, Student
from registrar.services import EnrollmentRegistry, GradeBook


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


@pytest.fixture
def registry() -> EnrollmentRegistry:
    return EnrollmentRegistry()


@pytest.fixture
def gradebook(registry: EnrollmentRegistry) -> GradeBook:
    return GradeBook(registry)


@pytest.fixture
def alice() -> Student:
    return Student(1, "Alice", semester=2)


@pytest.fixture
def bob() -> Student:
    return Student(2, "Bob", semester=4)


@pytest.fixture
def dan() -> Student:
    return Student(3, "Dan", semester=1)


@pytest.fixture
def lab() -> LabCourse:
    """Capacity-2 lab course requiring semester 2."""
    return LabCourse("C1", "Physics Lab", max_capacity=2, credits=4, required_semester=2)


@pytest.fixture
def lecture() -> Course:
    return Course("C2", "Calculus", max_capacity=30, credits=3)


@pytest.fixture(autouse=True)
def reset_registrar_logger():
    """Drop handlers installed by setup_logging so streams do not outlive a test."""
    yield
    logger = logging.getLogger("registrar")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
