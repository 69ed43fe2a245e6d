"""
Tests for job record validation and request parsing.
"""

import pytest

from similarjobs.errors import InvalidInputError
from similarjobs.schema import (
    is_valid_job_id,
    parse_debug,
    parse_limit,
    parse_request,
    validate_job_record,
)


class TestValidateJobRecord:
    """Test job record validation."""

    def test_valid_record(self, valid_job_dict):
        """Valid camelCase record should have no errors."""
        assert validate_job_record(valid_job_dict) == []

    def test_valid_snake_case_record(self):
        data = {
            "id": "job-1",
            "title": "Backend Engineer",
            "job_type": "Full-Time",
            "experience_level": "senior",
            "remote_work": "hybrid",
            "salary_min": 100,
            "salary_max": 200,
        }
        assert validate_job_record(data) == []

    def test_missing_required_field(self):
        errors = validate_job_record({"id": "job-1"})
        assert any("title" in err for err in errors)

    def test_empty_required_field(self):
        errors = validate_job_record({"id": "job-1", "title": "   "})
        assert errors == ["Field 'title' must be a non-empty string"]

    def test_optional_string_type(self):
        errors = validate_job_record({"id": "job-1", "title": "Engineer", "location": 42})
        assert any("location" in err for err in errors)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("jobType", "gig"),
            ("experienceLevel", "guru"),
            ("remoteWork", "moon"),
            ("job_type", 3),
        ],
    )
    def test_invalid_enum(self, field, value):
        errors = validate_job_record({"id": "job-1", "title": "Engineer", field: value})
        assert len(errors) == 1
        assert "must be one of" in errors[0]

    def test_negative_salary(self):
        errors = validate_job_record({"id": "job-1", "title": "Engineer", "salaryMin": -5})
        assert any("salary_min" in err for err in errors)

    def test_salary_must_be_number(self):
        errors = validate_job_record({"id": "job-1", "title": "Engineer", "salary_max": "lots"})
        assert any("salary_max" in err for err in errors)

    def test_inverted_salary(self):
        errors = validate_job_record({"id": "job-1", "title": "Engineer", "salary_min": 300, "salary_max": 100})
        assert errors == ["Field 'salary_min' must not exceed 'salary_max'"]

    def test_skills_must_be_strings(self):
        errors = validate_job_record({"id": "job-1", "title": "Engineer", "skills": ["python", 3]})
        assert errors == ["Field 'skills' must be a list of strings"]

    def test_counts(self):
        errors = validate_job_record({"id": "job-1", "title": "Engineer", "views": -1, "applications": True})
        assert len(errors) == 2


class TestJobId:
    """Test job id format checks."""

    @pytest.mark.parametrize(
        "job_id",
        [
            "2f1c3b8e-6a55-4b1e-9d7c-3e2a1f0b9c11",
            "2F1C3B8E-6A55-4B1E-9D7C-3E2A1F0B9C11",
            "7b9e2d44-1c3f-1a8b-8e6d-5f4a3b2c1d00",
        ],
    )
    def test_valid(self, job_id):
        assert is_valid_job_id(job_id)

    @pytest.mark.parametrize(
        "job_id",
        [
            "",
            "job-1",
            "2f1c3b8e6a554b1e9d7c3e2a1f0b9c11",
            "2f1c3b8e-6a55-6b1e-9d7c-3e2a1f0b9c11",
            "2f1c3b8e-6a55-4b1e-1d7c-3e2a1f0b9c11",
            " 2f1c3b8e-6a55-4b1e-9d7c-3e2a1f0b9c11",
            None,
            123,
        ],
    )
    def test_invalid(self, job_id):
        assert not is_valid_job_id(job_id)


class TestParseLimit:
    """Test result count parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, 3),
            ("", 3),
            (5, 5),
            ("7", 7),
            (" 2 ", 2),
            (4.0, 4),
            (0, 1),
            (-3, 1),
            ("-3", 1),
            (11, 10),
            ("500", 10),
        ],
    )
    def test_clamped(self, raw, expected):
        assert parse_limit(raw) == expected

    @pytest.mark.parametrize("raw", ["ten", "2.5", 2.5, True, [3], "3 jobs"])
    def test_rejected(self, raw):
        with pytest.raises(InvalidInputError):
            parse_limit(raw)

    def test_custom_bounds(self):
        assert parse_limit(None, default=5, maximum=20) == 5
        assert parse_limit(50, default=5, maximum=20) == 20


class TestParseDebug:
    """Test debug flag parsing."""

    @pytest.mark.parametrize("raw", [True, "true", "1", "YES", "on"])
    def test_true(self, raw):
        assert parse_debug(raw) is True

    @pytest.mark.parametrize("raw", [False, None, "false", "0", "no", "off", ""])
    def test_false(self, raw):
        assert parse_debug(raw) is False

    def test_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_debug("maybe")


class TestParseRequest:
    """Test whole-request parsing."""

    def test_valid(self):
        request = parse_request("2f1c3b8e-6a55-4b1e-9d7c-3e2a1f0b9c11", "5", "true")

        assert request.job_id == "2f1c3b8e-6a55-4b1e-9d7c-3e2a1f0b9c11"
        assert request.limit == 5
        assert request.debug is True

    def test_defaults(self):
        request = parse_request("2f1c3b8e-6a55-4b1e-9d7c-3e2a1f0b9c11")

        assert request.limit == 3
        assert request.debug is False

    def test_invalid_id(self):
        with pytest.raises(InvalidInputError, match="Invalid job ID format"):
            parse_request("nope", 3)
