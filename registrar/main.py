"""
Main entry point for the Registrar platform.
"""

import argparse
import sys
from typing import Optional

from .api.rest_api import RegistrarRestAPI
from .config import load_config
from .core.entities import Student, Course, LabCourse
from .core.exceptions import ConfigurationError, ValidationError
from .logging import get_logger, setup_logging
from .services import EnrollmentRegistry, GradeBook

logger = get_logger("main")


class RegistrarPlatform:
    """Main platform class that wires the services and the REST API."""

    def __init__(self, config: Optional[dict] = None):
        self._config = config or {}
        self._registry = None
        self._gradebook = None
        self._rest_api = None

        self._initialize_platform()

    @property
    def registry(self) -> EnrollmentRegistry:
        return self._registry

    @property
    def gradebook(self) -> GradeBook:
        return self._gradebook

    @property
    def rest_api(self) -> RegistrarRestAPI:
        return self._rest_api

    def _initialize_platform(self):
        """Initialize the platform with all services."""
        logger.info("Initializing Registrar platform...")

        self._registry = EnrollmentRegistry()
        self._gradebook = GradeBook(self._registry)
        logger.info("Services initialized")

        self._rest_api = RegistrarRestAPI(self._registry, self._gradebook)
        logger.info("REST API initialized")

    def start_rest_server(self, host: Optional[str] = None, port: Optional[int] = None):
        """Serve the REST API until interrupted."""
        import uvicorn

        host = host or self._config.get('rest_host', "0.0.0.0")
        port = port or self._config.get('rest_port', 8000)
        logger.info("Starting REST server on %s:%s", host, port)

        uvicorn.run(
            self._rest_api.app,
            host=host,
            port=port,
            log_level=str(self._config.get('log_level', "info")).lower()
        )

    def run_demo(self):
        """Run the reference enrollment and grading scenario."""
        print("=" * 60)
        print("REGISTRAR - DEMO")
        print("=" * 60)

        alice = Student(1, "Alice", semester=2)
        bob = Student(2, "Bob", semester=4)
        dan = Student(3, "Dan", semester=1)

        lab = LabCourse("C1", "Physics Lab", max_capacity=2, credits=4, required_semester=2)
        lecture = Course("C2", "Calculus", max_capacity=30, credits=3)

        print("\n1. Enrolling students...")
        for student, course in [(alice, lab), (bob, lab), (dan, lab),
                                (alice, lecture), (dan, lecture)]:
            result = self._registry.enroll(student, course)
            outcome = "OK" if result.success else result.reason.value
            print(f"  {student.name:<6} -> {course.code}: {outcome} ({result.message})")

        print("\n2. Recording grades...")
        for student, course, value in [(alice, lab, 85), (bob, lab, 92), (alice, lecture, 70)]:
            self._gradebook.record_grade(student, course, value)
            print(f"  {student.name:<6} {course.code}: {value}")

        try:
            self._gradebook.record_grade(dan, lab, 99)
        except ValidationError as e:
            print(f"  Rejected: {e.message}")

        print("\n3. Academic metrics...")
        for student in (alice, bob, dan):
            gpa = self._gradebook.calculate_gpa(student)
            gpa_text = f"{gpa:.2f}" if gpa is not None else "n/a"
            print(f"  {student.name:<6} workload={self._registry.calculate_workload(student)} "
                  f"gpa={gpa_text}")

        top = self._gradebook.get_top_student(lab)
        if top is not None:
            print(f"  Top student in {lab.code}: {top[0].name} ({top[1]:g})")

        print("\n=== Statistics ===")
        print(f"Enrollment: {self._registry.get_statistics()}")
        print(f"Grades: {self._gradebook.get_statistics()}")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Registrar enrollment and gradebook service")
    parser.add_argument("--rest-port", type=int, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--config", type=str, help="Configuration file path")

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        parser.error(e.message)

    if args.rest_port:
        config['rest_port'] = args.rest_port

    setup_logging(level=config['log_level'], log_file=config['log_file'])

    platform = RegistrarPlatform(config)

    if args.demo:
        platform.run_demo()
        return 0

    try:
        platform.start_rest_server()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
