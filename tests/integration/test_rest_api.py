"""Integration tests for the REST API."""

import asyncio

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from registrar.api import RegistrarRestAPI
from registrar.core import Course, DuplicateEntityError, ResourceNotFoundError, Student
from registrar.services import EnrollmentRegistry, GradeBook


@pytest.fixture
def client() -> TestClient:
    registry = EnrollmentRegistry()
    api = RegistrarRestAPI(registry, GradeBook(registry))
    return TestClient(api.app)


@pytest.fixture
def seeded(client: TestClient) -> TestClient:
    """Students A(sem2), B(sem4), D(sem1) and lab C1 (capacity 2, 4 credits, sem 2)."""
    for student_id, name, semester in [(1, "Alice", 2), (2, "Bob", 4), (3, "Dan", 1)]:
        response = client.post("/students", json={
            "student_id": student_id, "name": name, "semester": semester,
        })
        assert response.status_code == 201
    response = client.post("/courses", json={
        "code": "C1", "title": "Physics Lab", "max_capacity": 2,
        "credits": 4, "required_semester": 2,
    })
    assert response.status_code == 201
    response = client.post("/courses", json={
        "code": "C2", "title": "Calculus", "max_capacity": 30, "credits": 3,
    })
    assert response.status_code == 201
    return client


def enroll(client: TestClient, student_id: int, course_code: str) -> dict:
    response = client.post("/enrollments", json={"student_id": student_id, "course_code": course_code})
    assert response.status_code == 200
    return response.json()


@pytest.mark.integration
class TestCatalogRoutes:
    """Tests for student and course creation."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_get_student(self, seeded: TestClient) -> None:
        response = seeded.get("/students/2")

        assert response.status_code == 200
        body = response.json()
        assert (body["student_id"], body["name"], body["semester"]) == (2, "Bob", 4)
        assert "created_at" in body

    def test_unknown_student(self, client: TestClient) -> None:
        response = client.get("/students/99")

        assert response.status_code == 404
        assert response.json()["error_code"] == "STUDENT_NOT_FOUND"

    def test_duplicate_student(self, seeded: TestClient) -> None:
        response = seeded.post("/students", json={"student_id": 1, "name": "Other", "semester": 1})

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_STUDENT"

    def test_invalid_semester_rejected(self, client: TestClient) -> None:
        response = client.post("/students", json={"student_id": 1, "name": "Ann", "semester": 0})

        assert response.status_code == 422

    def test_lab_course_flag(self, seeded: TestClient) -> None:
        lab = seeded.get("/courses/C1").json()
        lecture = seeded.get("/courses/C2").json()

        assert lab["is_lab"] is True
        assert lab["required_semester"] == 2
        assert lecture["is_lab"] is False
        assert lecture["required_semester"] is None

    def test_duplicate_course(self, seeded: TestClient) -> None:
        response = seeded.post("/courses", json={
            "code": "C1", "title": "Again", "max_capacity": 5, "credits": 1,
        })

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_COURSE"
        assert "created_at" in seeded.get("/courses/C1").json()


@pytest.mark.integration
class TestEnrollmentRoutes:
    """Tests for enrollment and membership routes."""

    def test_reference_scenario(self, seeded: TestClient) -> None:
        assert enroll(seeded, 1, "C1")["success"] is True
        assert enroll(seeded, 2, "C1")["success"] is True

        rejected = enroll(seeded, 3, "C1")

        assert rejected["success"] is False
        assert rejected["reason"] == "course_full"
        assert seeded.get("/courses/C1").json()["enrolled_count"] == 2

    def test_prerequisite_reason(self, seeded: TestClient) -> None:
        assert enroll(seeded, 3, "C1")["reason"] == "prerequisite_not_satisfied"

    def test_unknown_course(self, seeded: TestClient) -> None:
        response = seeded.post("/enrollments", json={"student_id": 1, "course_code": "NOPE"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "COURSE_NOT_FOUND"

    def test_membership_queries(self, seeded: TestClient) -> None:
        enroll(seeded, 2, "C1")
        enroll(seeded, 1, "C1")
        enroll(seeded, 1, "C2")

        students = seeded.get("/courses/C1/students").json()
        courses = seeded.get("/students/1/courses").json()
        workload = seeded.get("/students/1/workload").json()

        assert [s["student_id"] for s in students] == [1, 2]
        assert courses == ["C1", "C2"]
        assert workload == {"student_id": 1, "workload": 7}


@pytest.mark.integration
class TestGradeRoutes:
    """Tests for grading and metric routes."""

    def test_grades_gpa_and_top_student(self, seeded: TestClient) -> None:
        enroll(seeded, 1, "C1")
        enroll(seeded, 2, "C1")

        for student_id, value in [(1, 85), (2, 92)]:
            response = seeded.post("/grades", json={
                "student_id": student_id, "course_code": "C1", "value": value,
            })
            assert response.status_code == 201

        assert seeded.get("/students/1/gpa").json() == {"student_id": 1, "gpa": 85.0}
        assert seeded.get("/students/2/gpa").json() == {"student_id": 2, "gpa": 92.0}

        top = seeded.get("/courses/C1/top-student").json()
        assert top["student_id"] == 2
        assert top["grade"] == 92.0

    def test_gpa_absent(self, seeded: TestClient) -> None:
        assert seeded.get("/students/3/gpa").json() == {"student_id": 3, "gpa": None}

    def test_out_of_range_grade(self, seeded: TestClient) -> None:
        enroll(seeded, 1, "C1")

        response = seeded.post("/grades", json={"student_id": 1, "course_code": "C1", "value": 101})

        assert response.status_code == 422
        assert response.json()["error_code"] == "OUT_OF_RANGE"

    def test_not_enrolled_grade(self, seeded: TestClient) -> None:
        response = seeded.post("/grades", json={"student_id": 1, "course_code": "C1", "value": 80})

        assert response.status_code == 409
        assert response.json()["error_code"] == "NOT_ENROLLED"

    def test_top_student_without_grades(self, seeded: TestClient) -> None:
        assert seeded.get("/courses/C1/top-student").status_code == 404

    def test_statistics(self, seeded: TestClient) -> None:
        enroll(seeded, 1, "C1")
        seeded.post("/grades", json={"student_id": 1, "course_code": "C1", "value": 70})

        statistics = seeded.get("/statistics").json()["statistics"]

        assert statistics["catalog"] == {"students": 3, "courses": 2}
        assert statistics["enrollment"]["total_enrollments"] == 1
        assert statistics["grades"]["recorded_grades"] == 1


@pytest.mark.integration
class TestCatalogAccess:
    """Tests for the catalog methods behind the routes."""

    @pytest.fixture
    def api(self) -> RegistrarRestAPI:
        registry = EnrollmentRegistry()
        return RegistrarRestAPI(registry, GradeBook(registry))

    def test_unknown_records_raise(self, api: RegistrarRestAPI) -> None:
        with pytest.raises(ResourceNotFoundError) as exc_info:
            api.get_student(42)
        assert exc_info.value.error_code == "STUDENT_NOT_FOUND"

        with pytest.raises(ResourceNotFoundError):
            api.get_course("NOPE")

    def test_duplicates_raise(self, api: RegistrarRestAPI) -> None:
        api.add_course(Course("C1", "Physics Lab", 2, 4))
        api.add_student(Student(1, "Alice", semester=2))

        with pytest.raises(DuplicateEntityError):
            api.add_course(Course("C1", "Other", 5, 1))
        with pytest.raises(DuplicateEntityError):
            api.add_student(Student(1, "Other", semester=1))

    def test_routes_run_in_thread_pool(self, api: RegistrarRestAPI) -> None:
        """Routes are plain functions so blocking service locks never stall the event loop."""
        routes = [route for route in api.app.routes if isinstance(route, APIRoute)]

        assert routes
        assert not [route.path for route in routes if asyncio.iscoroutinefunction(route.endpoint)]
