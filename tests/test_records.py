"""
Tests for record parsing and JSON job files.
"""

import json
import pytest
from datetime import datetime, timedelta, timezone

from similarjobs.normalize import (
    location_parts,
    normalize_item,
    normalize_job_type,
    normalize_work_mode,
    normalize_words,
)
from similarjobs.records import CompanyInfo, JobRecord, to_datetime, to_number
from similarjobs.storage import load_job_dicts, load_jobs, save_results


class TestParsers:
    """Test scalar parsing helpers."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (1500, 1500.0),
            ("1,200,000", 1200000.0),
            (" 42.5 ", 42.5),
            ("", None),
            (None, None),
            (True, None),
            (-1, None),
            ("abc", None),
            (float("nan"), None),
            (float("inf"), None),
        ],
    )
    def test_to_number(self, raw, expected):
        assert to_number(raw) == expected

    def test_to_datetime(self):
        expected = datetime(2025, 5, 30, 9, 0, tzinfo=timezone.utc)
        assert to_datetime("2025-05-30T09:00:00Z") == expected
        assert to_datetime("2025-05-30T09:00:00") == expected
        assert to_datetime(datetime(2025, 5, 30, 9, 0)) == expected
        assert to_datetime("yesterday") is None
        assert to_datetime(12345) is None


class TestJobRecordFromDict:
    """Test building records from API-style mappings."""

    def test_camel_case(self, valid_job_dict):
        record = JobRecord.from_dict(valid_job_dict)

        assert record.id == "2f1c3b8e-6a55-4b1e-9d7c-3e2a1f0b9c11"
        assert record.job_type == "full-time"
        assert record.experience_level == "mid"
        assert record.salary_min == 1200000.0
        assert record.remote_work == "remote"
        assert record.company_id == "company-beta"
        assert record.company.name == "Beta Analytics"
        assert record.company.company_size == "201-500"
        assert record.company.is_featured is True
        assert record.industries == ("Analytics",)
        assert record.skills == ("Python", "Spark", "SQL")
        assert record.created_at == datetime(2025, 5, 30, 9, 0, tzinfo=timezone.utc)
        assert record.views == 250

    def test_enums_lowercased(self):
        record = JobRecord.from_dict({"id": "j", "title": "T", "jobType": "Contract", "remoteWork": "Hybrid"})
        assert record.job_type == "contract"
        assert record.remote_work == "hybrid"

    def test_company_as_name(self):
        record = JobRecord.from_dict({"id": "j", "title": "T", "company": "Acme Corp"})
        assert record.company_name == "Acme Corp"
        assert record.company_id is None

    def test_company_id_from_company(self):
        record = JobRecord.from_dict({"id": "j", "title": "T", "company": {"id": "c-1", "name": "C"}})
        assert record.company_id == "c-1"

    def test_skills_from_string(self):
        record = JobRecord.from_dict({"id": "j", "title": "T", "skills": "Python, SQL ,"})
        assert record.skills == ("Python", "SQL")

    def test_missing_fields(self):
        record = JobRecord.from_dict({"id": "j"})

        assert record.title == ""
        assert record.skills is None
        assert record.company is None
        assert record.industries == ()
        assert record.company_size is None
        assert record.views == 0

    def test_unknown_keys_kept_aside(self):
        record = JobRecord.from_dict({"id": "j", "title": "T", "source": "board"})
        assert record.extra == {"source": "board"}

    def test_company_from_dict(self):
        info = CompanyInfo.from_dict({"name": "C", "size": "1-10", "totalReviews": "7", "rating": "4.5"})
        assert info.company_size == "1-10"
        assert info.total_reviews == 7
        assert info.rating == 4.5
        assert CompanyInfo.from_dict(None) is None


class TestJobRecordTimestamps:
    """Timestamps are always timezone-aware, however the record is built."""

    def test_naive_timestamps_become_utc(self):
        record = JobRecord(
            id="j",
            created_at=datetime(2025, 6, 1, 9, 30),
            valid_till=datetime(2025, 7, 1),
        )

        assert record.created_at == datetime(2025, 6, 1, 9, 30, tzinfo=timezone.utc)
        assert record.valid_till == datetime(2025, 7, 1, tzinfo=timezone.utc)

    def test_aware_timestamps_untouched(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        created = datetime(2025, 6, 1, 9, 30, tzinfo=ist)

        record = JobRecord(id="j", created_at=created)

        assert record.created_at.tzinfo is ist
        assert record.valid_till is None

    def test_equal_to_parsed_record(self):
        built = JobRecord(id="j", created_at=datetime(2025, 6, 1))
        parsed = JobRecord.from_dict({"id": "j", "createdAt": "2025-06-01T00:00:00Z"})

        assert built == parsed


class TestNormalize:
    """Test normalization helpers."""

    def test_words(self):
        assert normalize_words("  Senior   Backend-Engineer! ") == "senior backend engineer"

    def test_item(self):
        assert normalize_item("Node.JS") == "nodejs"

    def test_location_parts(self):
        assert location_parts("Pune , Maharashtra,, India") == ["pune", "maharashtra", "india"]

    @pytest.mark.parametrize(
        "raw,expected",
        [("Work From Home", "remote"), ("Flexible", "hybrid"), ("In Office", "on-site"), (None, None)],
    )
    def test_work_mode(self, raw, expected):
        assert normalize_work_mode(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [("Full Time", "full-time"), ("full_time", "full-time"), ("Intern", "internship"), ("", None)],
    )
    def test_job_type(self, raw, expected):
        assert normalize_job_type(raw) == expected


class TestJobFiles:
    """Test JSON job file loading."""

    def test_load_jobs(self, jobs_file):
        records, rejected = load_jobs(jobs_file)

        assert len(records) == 3
        assert list(rejected) == ["broken"]
        assert any("job_type" in err for err in rejected["broken"])

    def test_plain_list(self, tmp_path, valid_job_dict):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps([valid_job_dict]))
        assert len(load_job_dicts(path)) == 1

    def test_single_object(self, tmp_path, valid_job_dict):
        path = tmp_path / "job.json"
        path.write_text(json.dumps(valid_job_dict))
        assert load_job_dicts(path) == [valid_job_dict]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("  ")
        assert load_job_dicts(path) == []

    def test_rejected_without_id_uses_index(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps([{"title": "No id"}]))

        _, rejected = load_jobs(path)

        assert list(rejected) == ["#0"]

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps({"jobs": "nope"}))
        with pytest.raises(ValueError):
            load_job_dicts(path)

    def test_save_results(self, tmp_path):
        path = tmp_path / "out" / "result.json"

        save_results(path, {"success": True, "message": "₹ ok"})

        assert json.loads(path.read_text(encoding="utf-8")) == {"success": True, "message": "₹ ok"}
