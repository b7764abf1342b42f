"""Test cases for SQLAlchemy models."""

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from gradebook.models import (
    Assignment, BulkGradingJob, BulkJobStatus, Course, GradedBy,
    RubricItem, Submission, SubmissionStatus, User, UserRole, validate_rubric,
)


class TestUserModel:
    """Test cases for User model."""

    def test_create_user(self, db_session):
        """Test creating a user."""
        user = User(email="teacher@test.com", full_name="Jane Smith", role=UserRole.teacher)
        user.set_password("Secret123!")
        db_session.add(user)
        db_session.commit()

        assert user.id is not None
        assert user.is_teacher
        assert not user.is_student
        assert user.is_active is True
        assert user.hashed_password != "Secret123!"

    def test_password_verification(self, teacher):
        assert teacher.verify_password("TestPass123!")
        assert not teacher.verify_password("wrong")

    def test_unique_email(self, db_session, teacher):
        """Test that user email must be unique."""
        duplicate = User(email=teacher.email, role=UserRole.student, hashed_password="x")
        db_session.add(duplicate)

        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_user_repr(self, teacher):
        repr_str = repr(teacher)
        assert "User" in repr_str
        assert teacher.email in repr_str


class TestCourseModel:
    """Test cases for Course model."""

    def test_join_code_generated(self, course):
        assert len(course.code) == 6
        assert course.code.isupper() or course.code.isdigit()

    def test_enrollment(self, course, student, outsider_student, teacher):
        assert course.is_enrolled(student)
        assert not course.is_enrolled(outsider_student)
        assert course.is_taught_by(teacher)
        assert course in student.enrolled_courses

    def test_course_delete_cascades_assignments(self, db_session, course, assignment):
        db_session.delete(course)
        db_session.commit()

        assert db_session.query(Assignment).count() == 0


class TestAssignmentModel:
    """Test cases for Assignment model."""

    def test_rubric_order_preserved(self, db_session, assignment):
        db_session.expire_all()
        assert [item["criteria"] for item in assignment.rubric] == ["Clarity", "Examples"]

    def test_get_criterion_by_name(self, assignment):
        assert assignment.get_criterion_by_name("Examples")["weight"] == 50
        assert assignment.get_criterion_by_name("Spelling") is None

    def test_delete_cascades_submissions(self, db_session, assignment, submission):
        db_session.delete(assignment)
        db_session.commit()

        assert db_session.query(Submission).count() == 0


class TestRubricValidation:
    """Test cases for rubric structure validation."""

    def test_empty_rubric_is_valid(self):
        assert validate_rubric([]) == (True, "Valid rubric")

    @pytest.mark.parametrize("rubric,message", [
        (["Clarity"], "must be a dictionary"),
        ([{"weight": 10}], "missing required field: criteria"),
        ([{"criteria": "Clarity"}], "missing required field: weight"),
        ([{"criteria": " ", "weight": 10}], "non-empty string"),
        ([{"criteria": "A", "weight": 5}, {"criteria": "A", "weight": 5}], "Duplicate rubric criteria: A"),
        ([{"criteria": "A", "weight": "ten"}], "weight must be a number"),
    ])
    def test_invalid_rubric(self, rubric, message):
        is_valid, error = validate_rubric(rubric)
        assert not is_valid
        assert message in error

    def test_weights_need_not_sum_to_total(self):
        assert validate_rubric([{"criteria": "A", "weight": 30}, {"criteria": "B", "weight": 30}])[0]

    def test_rubric_item_requires_label(self):
        with pytest.raises(PydanticValidationError):
            RubricItem(criteria="", weight=10)

    def test_rubric_item_rejects_nan_weight(self):
        with pytest.raises(PydanticValidationError):
            RubricItem(criteria="Clarity", weight=float("nan"))


class TestSubmissionModel:
    """Test cases for Submission model."""

    def test_defaults(self, db_session, assignment, student):
        submission = Submission(assignment_id=assignment.id, student_id=student.id, content="Essay")
        db_session.add(submission)
        db_session.commit()

        assert submission.status == SubmissionStatus.submitted
        assert submission.graded_by == GradedBy.none
        assert submission.grade is None
        assert submission.feedback == ""
        assert submission.rubric_grades == []

    def test_one_submission_per_student(self, db_session, assignment, student, submission):
        db_session.add(Submission(assignment_id=assignment.id, student_id=student.id, content="Again"))

        with pytest.raises(IntegrityError):
            db_session.commit()


class TestBulkGradingJobModel:
    """Test cases for BulkGradingJob model."""

    def test_defaults(self, db_session, assignment, submission):
        job = BulkGradingJob(assignment_id=assignment.id, submission_ids=[submission.id])
        db_session.add(job)
        db_session.commit()

        assert job.status == BulkJobStatus.pending
        assert job.processed_count == 0
        assert job.failed_count == 0
        assert job.scheduled_count == 1
        assert not job.is_finished

    @pytest.mark.parametrize("job_status,finished", [
        (BulkJobStatus.pending, False),
        (BulkJobStatus.running, False),
        (BulkJobStatus.completed, True),
        (BulkJobStatus.failed, True),
    ])
    def test_is_finished(self, assignment, job_status, finished):
        job = BulkGradingJob(assignment_id=assignment.id, submission_ids=[], status=job_status)
        assert job.is_finished is finished
