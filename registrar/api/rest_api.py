"""
REST API implementation for the Registrar platform using FastAPI.

Routes are plain functions, so FastAPI runs them in its thread pool; the
services serialize concurrent callers with their own locks.
"""

import threading
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ..core.entities import Student, Course, LabCourse
from ..core.exceptions import (
    ValidationError, GradeOutOfRangeError, NotEnrolledError,
    ResourceNotFoundError, DuplicateEntityError
)
from ..logging import get_logger
from ..services import EnrollmentRegistry, GradeBook

logger = get_logger("api")


# Pydantic models for API
class StudentCreate(BaseModel):
    student_id: int = Field(..., ge=0)
    name: str = Field(..., min_length=1, max_length=200)
    semester: int = Field(..., ge=1, le=30)


class StudentResponse(BaseModel):
    student_id: int
    name: str
    semester: int
    created_at: datetime


class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=200)
    max_capacity: int = Field(..., ge=1, le=1000)
    credits: int = Field(..., ge=0, le=30)
    required_semester: Optional[int] = Field(None, ge=1, le=30)


class CourseResponse(BaseModel):
    code: str
    title: str
    max_capacity: int
    credits: int
    is_lab: bool
    required_semester: Optional[int] = None
    enrolled_count: int
    created_at: datetime


class EnrollmentRequest(BaseModel):
    student_id: int
    course_code: str = Field(..., min_length=1)


class EnrollmentResponse(BaseModel):
    success: bool
    message: str
    reason: Optional[str] = None


class GradeRequest(BaseModel):
    student_id: int
    course_code: str = Field(..., min_length=1)
    value: float


class GradeResponse(BaseModel):
    student_id: int
    course_code: str
    value: float


class WorkloadResponse(BaseModel):
    student_id: int
    workload: int


class GPAResponse(BaseModel):
    student_id: int
    gpa: Optional[float] = None


class TopStudentResponse(BaseModel):
    course_code: str
    student_id: int
    name: str
    grade: float


class StatisticsResponse(BaseModel):
    success: bool
    message: str
    statistics: Dict[str, Any]


class RegistrarRestAPI:
    """REST API over one enrollment registry and gradebook."""

    def __init__(self, registry: EnrollmentRegistry, gradebook: GradeBook):
        self._registry = registry
        self._gradebook = gradebook

        # In-memory catalog of the records the services operate on
        self._students: Dict[int, Student] = {}
        self._courses: Dict[str, Course] = {}

        self._lock = threading.RLock()

        self.app = FastAPI(
            title="Registrar API",
            description="Course enrollment registry and gradebook",
            version="1.0.0",
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self._setup_exception_handlers()
        self._setup_routes()

    # Catalog access

    def add_student(self, student: Student) -> Student:
        """Add a student to the catalog."""
        with self._lock:
            if student.student_id in self._students:
                raise DuplicateEntityError(f"Student {student.student_id} already exists",
                                           error_code="DUPLICATE_STUDENT")
            self._students[student.student_id] = student
        logger.info("Created student %s", student.student_id)
        return student

    def add_course(self, course: Course) -> Course:
        """Add a course to the catalog."""
        with self._lock:
            if course.code in self._courses:
                raise DuplicateEntityError(f"Course {course.code} already exists",
                                           error_code="DUPLICATE_COURSE")
            self._courses[course.code] = course
        logger.info("Created course %s", course.code)
        return course

    def get_student(self, student_id: int) -> Student:
        with self._lock:
            student = self._students.get(student_id)
        if student is None:
            raise ResourceNotFoundError(f"Student {student_id} not found",
                                        error_code="STUDENT_NOT_FOUND")
        return student

    def get_course(self, course_code: str) -> Course:
        with self._lock:
            course = self._courses.get(course_code)
        if course is None:
            raise ResourceNotFoundError(f"Course {course_code} not found",
                                        error_code="COURSE_NOT_FOUND")
        return course

    def _setup_exception_handlers(self):
        """Map domain exceptions to HTTP responses."""

        @self.app.exception_handler(ResourceNotFoundError)
        async def not_found_handler(_request: Request, exc: ResourceNotFoundError) -> JSONResponse:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"detail": exc.message, "error_code": exc.error_code}
            )

        @self.app.exception_handler(DuplicateEntityError)
        async def duplicate_handler(_request: Request, exc: DuplicateEntityError) -> JSONResponse:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": exc.message, "error_code": exc.error_code}
            )

        @self.app.exception_handler(NotEnrolledError)
        async def not_enrolled_handler(_request: Request, exc: NotEnrolledError) -> JSONResponse:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": exc.message, "error_code": exc.error_code}
            )

        @self.app.exception_handler(GradeOutOfRangeError)
        async def out_of_range_handler(_request: Request, exc: GradeOutOfRangeError) -> JSONResponse:
            return JSONResponse(
                status_code=422,
                content={"detail": exc.message, "error_code": exc.error_code}
            )

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/health", response_model=Dict[str, str])
        def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        def create_student(student_data: StudentCreate):
            """Create a new student."""
            try:
                student = Student(
                    student_id=student_data.student_id,
                    name=student_data.name,
                    semester=student_data.semester
                )
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=e.message)

            return self._student_to_response(self.add_student(student))

        @self.app.get("/students/{student_id}", response_model=StudentResponse)
        def get_student(student_id: int):
            """Get a student by ID."""
            return self._student_to_response(self.get_student(student_id))

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        def create_course(course_data: CourseCreate):
            """Create a new course; a required semester makes it a lab course."""
            try:
                if course_data.required_semester is not None:
                    course = LabCourse(
                        code=course_data.code,
                        title=course_data.title,
                        max_capacity=course_data.max_capacity,
                        credits=course_data.credits,
                        required_semester=course_data.required_semester
                    )
                else:
                    course = Course(
                        code=course_data.code,
                        title=course_data.title,
                        max_capacity=course_data.max_capacity,
                        credits=course_data.credits
                    )
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=e.message)

            return self._course_to_response(self.add_course(course))

        @self.app.get("/courses/{course_code}", response_model=CourseResponse)
        def get_course(course_code: str):
            """Get a course by code."""
            return self._course_to_response(self.get_course(course_code))

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse)
        def enroll_student(enrollment_data: EnrollmentRequest):
            """Enroll a student in a course."""
            student = self.get_student(enrollment_data.student_id)
            course = self.get_course(enrollment_data.course_code)

            result = self._registry.enroll(student, course)

            return EnrollmentResponse(
                success=result.success,
                message=result.message,
                reason=result.reason.value if result.reason else None
            )

        @self.app.get("/courses/{course_code}/students", response_model=List[StudentResponse])
        def get_course_students(course_code: str):
            """Get students enrolled in a course."""
            course = self.get_course(course_code)
            students = sorted(self._registry.get_enrolled_students(course),
                              key=lambda s: s.student_id)
            return [self._student_to_response(student) for student in students]

        @self.app.get("/students/{student_id}/courses", response_model=List[str])
        def get_student_courses(student_id: int):
            """Get codes of the courses a student is enrolled in."""
            student = self.get_student(student_id)
            return sorted(course.code for course in self._registry.get_student_courses(student))

        @self.app.get("/students/{student_id}/workload", response_model=WorkloadResponse)
        def get_workload(student_id: int):
            """Get a student's total credits."""
            student = self.get_student(student_id)
            return WorkloadResponse(student_id=student_id,
                                    workload=self._registry.calculate_workload(student))

        # Grade endpoints
        @self.app.post("/grades", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
        def record_grade(grade_data: GradeRequest):
            """Record a grade for an enrolled student."""
            student = self.get_student(grade_data.student_id)
            course = self.get_course(grade_data.course_code)

            self._gradebook.record_grade(student, course, grade_data.value)

            return GradeResponse(student_id=student.student_id, course_code=course.code,
                                 value=grade_data.value)

        @self.app.get("/students/{student_id}/gpa", response_model=GPAResponse)
        def get_gpa(student_id: int):
            """Get a student's credit-weighted GPA."""
            student = self.get_student(student_id)
            return GPAResponse(student_id=student_id, gpa=self._gradebook.calculate_gpa(student))

        @self.app.get("/courses/{course_code}/top-student", response_model=TopStudentResponse)
        def get_top_student(course_code: str):
            """Get the best graded student of a course."""
            course = self.get_course(course_code)
            top = self._gradebook.get_top_student(course)
            if top is None:
                raise HTTPException(status_code=404, detail=f"No grades recorded for {course_code}")

            student, grade = top
            return TopStudentResponse(course_code=course.code, student_id=student.student_id,
                                      name=student.name, grade=grade)

        # Statistics endpoints
        @self.app.get("/statistics", response_model=StatisticsResponse)
        def get_statistics():
            """Get system statistics."""
            with self._lock:
                catalog = {"students": len(self._students), "courses": len(self._courses)}

            statistics = {
                "catalog": catalog,
                "enrollment": self._registry.get_statistics(),
                "grades": self._gradebook.get_statistics()
            }

            return StatisticsResponse(
                success=True,
                message="Statistics retrieved successfully",
                statistics=statistics
            )

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(**student.to_dict())

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        data = course.to_dict()
        return CourseResponse(
            **data,
            is_lab=data.get('required_semester') is not None,
            enrolled_count=self._registry.get_enrollment_count(course)
        )
