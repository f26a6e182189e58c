"""
Tests for public applicant intake and the applicant views.

Tests cover:
- Successful submission (rows, pipeline defaults, stored resume)
- Rejected submissions leave no rows and no files behind
- Listing, detail, per-job view and deletion
"""

import io
import json
import logging
import os

from talentdesk.core.config import settings
from talentdesk.models.applicant import Applicant
from talentdesk.models.pipeline import ShortlistedCandidate
from talentdesk.services.applicant_intake import discard_resume

PDF_BYTES = b"%PDF-1.4\n%%EOF\n"


def _stored_resumes(storage):
    return os.listdir(storage.resume_dir)


class TestApplicantSubmission:
    """Tests for POST /applicants"""

    def test_submit_success(self, client, db_session, storage, created_job, submit_application):
        """Test a valid submission creates the applicant, its pipeline entry and the file"""
        response = submit_application(created_job["id"])

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Application submitted & candidate shortlisted!"

        applicant = db_session.query(Applicant).filter(Applicant.id == data["applicant_id"]).one()
        assert applicant.job_id == created_job["id"]
        assert applicant.application_form_data == {"years": 4}
        assert applicant.resume_path.startswith("/uploads/resumes/")
        assert applicant.resume_path.endswith(".pdf")
        assert storage.file_exists(applicant.resume_path)

        entry = db_session.query(ShortlistedCandidate).filter(ShortlistedCandidate.applicant_id == applicant.id).one()
        assert entry.full_name == "Jo Applicant"
        assert entry.email == "jo@example.com"
        assert entry.phone == "+1 555 0100"
        assert entry.stage == "Application Screening"
        assert entry.status == "New Application"
        assert entry.rating == 0
        assert entry.job_post_id == created_job["id"]

    def test_submit_matches_alternate_field_names(self, client, db_session, created_job, submit_application):
        """Test contact fields are found by name when labels differ"""
        response = submit_application(created_job["id"], basic=[
            {"label": "Your name", "name": "fullName", "value": "Sam"},
            {"label": "Contact", "name": "email", "value": "sam@example.com"},
        ])

        assert response.status_code == 201
        entry = db_session.query(ShortlistedCandidate).one()
        assert entry.full_name == "Sam"
        assert entry.phone is None

    def test_submit_without_resume(self, client, db_session, storage, created_job, submit_application):
        """Test a submission without a file writes nothing"""
        response = submit_application(created_job["id"], resume=None)

        assert response.status_code == 400
        assert response.json()["error"] == "Resume PDF is required"
        assert db_session.query(Applicant).count() == 0
        assert db_session.query(ShortlistedCandidate).count() == 0
        assert _stored_resumes(storage) == []

    def test_submit_non_pdf(self, client, db_session, storage, created_job, submit_application):
        """Test non-PDF uploads are rejected"""
        response = submit_application(created_job["id"], resume=("resume.docx", b"PK\x03\x04", "application/msword"))

        assert response.status_code == 400
        assert response.json()["error"] == "Only PDF files are allowed!"
        assert db_session.query(Applicant).count() == 0
        assert _stored_resumes(storage) == []

    def test_submit_too_large(self, client, db_session, storage, created_job, submit_application):
        """Test resumes above the size cap are rejected with 413"""
        oversized = PDF_BYTES + b"0" * settings.MAX_RESUME_SIZE_BYTES

        response = submit_application(created_job["id"], resume=("big.pdf", oversized, "application/pdf"))

        assert response.status_code == 413
        assert db_session.query(Applicant).count() == 0
        assert _stored_resumes(storage) == []

    def test_submit_exactly_at_size_cap(self, client, db_session, storage, created_job, submit_application):
        """Test a resume of exactly MAX_RESUME_SIZE_MB is accepted"""
        at_cap = PDF_BYTES + b"0" * (settings.MAX_RESUME_SIZE_BYTES - len(PDF_BYTES))

        response = submit_application(created_job["id"], resume=("cap.pdf", at_cap, "application/pdf"))

        assert response.status_code == 201
        resume_path = db_session.query(Applicant).one().resume_path
        assert os.path.getsize(storage.resolve(resume_path)) == settings.MAX_RESUME_SIZE_BYTES

    def test_submit_one_byte_over_cap(self, client, db_session, storage, created_job, submit_application):
        """Test a single byte past the cap is enough for a 413"""
        over_cap = PDF_BYTES + b"0" * (settings.MAX_RESUME_SIZE_BYTES - len(PDF_BYTES) + 1)

        response = submit_application(created_job["id"], resume=("big.pdf", over_cap, "application/pdf"))

        assert response.status_code == 413
        assert _stored_resumes(storage) == []

    def test_oversized_upload_is_read_only_past_the_cap(self, client, created_job, submit_application, monkeypatch):
        """Test the endpoint stops reading the upload one byte after the cap"""
        from talentdesk.api.endpoints import applicants as applicants_endpoint

        real_submit = applicants_endpoint.submit_application
        read_sizes = []

        def recording_submit(*args, **kwargs):
            read_sizes.append(len(kwargs["resume_content"]))
            return real_submit(*args, **kwargs)

        monkeypatch.setattr(applicants_endpoint, "submit_application", recording_submit)
        oversized = PDF_BYTES + b"0" * (2 * settings.MAX_RESUME_SIZE_BYTES)

        response = submit_application(created_job["id"], resume=("big.pdf", oversized, "application/pdf"))

        assert response.status_code == 413
        assert read_sizes == [settings.MAX_RESUME_SIZE_BYTES + 1]

    def test_submit_missing_email(self, client, db_session, storage, created_job, submit_application):
        """Test name and email are both required"""
        response = submit_application(created_job["id"], basic=[
            {"label": "Full Name", "name": "full_name", "value": "Nameless Email"},
        ])

        assert response.status_code == 400
        assert db_session.query(Applicant).count() == 0
        assert _stored_resumes(storage) == []

    def test_submit_missing_job_id(self, client, db_session, basic_answers):
        """Test job_id is required"""
        response = client.post(
            "/applicants",
            data={"basicFormData": json.dumps(basic_answers)},
            files={"resume": ("resume.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == 400
        assert db_session.query(Applicant).count() == 0

    def test_submit_unknown_job(self, client, db_session, storage, submit_application):
        """Test applying to a posting that doesn't exist"""
        response = submit_application(99999)

        assert response.status_code == 404
        assert _stored_resumes(storage) == []

    def test_submit_malformed_json(self, client, db_session, created_job):
        """Test broken basicFormData is reported instead of treated as empty"""
        response = client.post(
            "/applicants",
            data={"job_id": str(created_job["id"]), "basicFormData": "[{not json"},
            files={"resume": ("resume.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "basicFormData must be valid JSON"

    def test_submit_wrong_json_shape(self, client, created_job, basic_answers):
        """Test applicationFormData must be an object"""
        response = client.post(
            "/applicants",
            data={
                "job_id": str(created_job["id"]),
                "basicFormData": json.dumps(basic_answers),
                "applicationFormData": json.dumps(["not", "an", "object"]),
            },
            files={"resume": ("resume.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "applicationFormData must be a JSON object"

    def test_submit_rolls_back_file_when_insert_fails(
        self, client, db_session, storage, created_job, basic_answers, monkeypatch
    ):
        """Test the stored resume is removed when the database write fails"""
        from fastapi.testclient import TestClient
        from talentdesk.crud import applicant as applicant_crud
        from main import app

        def failing_create(*args, **kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(applicant_crud, "create_with_pipeline_entry", failing_create)

        # Overrides from the client fixture stay active; report the 500 instead of raising
        failing_client = TestClient(app, raise_server_exceptions=False)
        response = failing_client.post(
            "/applicants",
            data={"job_id": str(created_job["id"]), "basicFormData": json.dumps(basic_answers)},
            files={"resume": ("resume.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert _stored_resumes(storage) == []


class TestApplicantViews:
    """Tests for the protected applicant listings"""

    def test_engineer_example(self, client, auth_headers, storage):
        """Test a posting and applicant created end to end show up in the listings"""
        created = client.post("/add-job", json={"title": "Engineer", "slug": "eng-1"}, headers=auth_headers)
        job_id = created.json()["job"]["id"]

        jobs = client.get("/jobs").json()["jobs"]
        listed = next(j for j in jobs if j["slug"] == "eng-1")
        assert listed["basicFormSchema"] == []
        assert listed["applicationFormSchema"] == {}

        submitted = client.post(
            "/applicants",
            data={
                "job_id": str(job_id),
                "basicFormData": json.dumps([
                    {"label": "Full Name", "value": "Jo"},
                    {"label": "Email", "value": "jo@x.com"},
                ]),
            },
            files={"resume": ("a.pdf", PDF_BYTES, "application/pdf")}
        )
        assert submitted.status_code == 201
        applicant_id = submitted.json()["applicant_id"]

        applicants = client.get("/applicants", headers=auth_headers).json()["applicants"]
        match = next(a for a in applicants if a["id"] == applicant_id)
        assert match["currentStage"] == "Application Screening"
        assert match["currentStageStatus"] == "New Application"
        assert match["full_name"] == "Jo"
        assert match["job_title"] == "Engineer"

    def test_list_includes_department_and_newest_first(
        self, client, auth_headers, created_job, submit_application
    ):
        """Test the listing joins the posting and orders newest first"""
        first = submit_application(created_job["id"]).json()["applicant_id"]
        second = submit_application(created_job["id"]).json()["applicant_id"]

        response = client.get("/applicants", headers=auth_headers)

        assert response.status_code == 200
        applicants = response.json()["applicants"]
        assert [a["id"] for a in applicants] == [second, first]
        assert applicants[0]["department"] == "Engineering"
        assert applicants[0]["rating"] == 0
        assert applicants[0]["basicFormData"][0]["value"] == "Jo Applicant"

    def test_list_applicant_without_pipeline_entry(
        self, client, db_session, auth_headers, created_job, submit_application
    ):
        """Test applicants without a pipeline entry are listed with empty stage fields"""
        applicant_id = submit_application(created_job["id"]).json()["applicant_id"]
        db_session.query(ShortlistedCandidate).delete()
        db_session.commit()

        response = client.get("/applicants", headers=auth_headers)

        applicant = response.json()["applicants"][0]
        assert applicant["id"] == applicant_id
        assert applicant["currentStage"] is None
        assert applicant["currentStageStatus"] is None
        assert applicant["email"] == "jo@example.com"

    def test_get_applicant(self, client, auth_headers, created_job, submit_application):
        """Test retrieving one applicant with posting title and pipeline data"""
        applicant_id = submit_application(created_job["id"]).json()["applicant_id"]

        response = client.get(f"/applicants/{applicant_id}", headers=auth_headers)

        assert response.status_code == 200
        applicant = response.json()["applicant"]
        assert applicant["job_title"] == "Backend Engineer"
        assert applicant["currentStage"] == "Application Screening"
        assert applicant["applicationFormData"] == {"years": 4}

    def test_get_unknown_applicant(self, client, auth_headers):
        """Test retrieving an applicant that doesn't exist"""
        response = client.get("/applicants/99999", headers=auth_headers)

        assert response.status_code == 404

    def test_list_by_job(self, client, auth_headers, created_job, submit_application):
        """Test the per-posting view only returns that posting's applicants"""
        other = client.post("/add-job", json={"title": "Other", "slug": "other"}, headers=auth_headers).json()["job"]
        mine = submit_application(created_job["id"]).json()["applicant_id"]
        submit_application(other["id"])

        response = client.get(f"/applicants/job/{created_job['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert [a["id"] for a in response.json()["applicants"]] == [mine]

    def test_views_require_token(self, client):
        """Test every applicant view is protected"""
        for path in ["/applicants", "/applicants/shortlisted", "/applicants/rejected",
                     "/applicants/hired", "/applicants/1", "/applicants/job/1"]:
            assert client.get(path).status_code == 401, path


class TestApplicantDeletion:
    """Tests for DELETE /applicants/{id}"""

    def test_delete_applicant(self, client, db_session, storage, auth_headers, created_job, submit_application):
        """Test deleting removes the row, the pipeline entry and the resume"""
        applicant_id = submit_application(created_job["id"]).json()["applicant_id"]
        resume_path = db_session.query(Applicant).one().resume_path

        response = client.delete(f"/applicants/{applicant_id}", headers=auth_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(Applicant).count() == 0
        assert db_session.query(ShortlistedCandidate).count() == 0
        assert not storage.file_exists(resume_path)

    def test_delete_with_missing_file(self, client, db_session, storage, auth_headers, created_job, submit_application):
        """Test a resume that is already gone doesn't block deletion"""
        applicant_id = submit_application(created_job["id"]).json()["applicant_id"]
        storage.delete_file(db_session.query(Applicant).one().resume_path)

        response = client.delete(f"/applicants/{applicant_id}", headers=auth_headers)

        assert response.status_code == 200

    def test_delete_unknown_applicant(self, client, auth_headers):
        """Test deleting an applicant that doesn't exist"""
        response = client.delete("/applicants/99999", headers=auth_headers)

        assert response.status_code == 404


class TestDiscardResume:
    """Tests for discard_resume"""

    def test_removes_stored_file(self, storage):
        """Test an existing resume is deleted"""
        resume_path = storage.save_resume(io.BytesIO(PDF_BYTES), "resume.pdf")

        assert discard_resume(storage, resume_path) is True
        assert not storage.file_exists(resume_path)

    def test_already_gone(self, storage, monkeypatch, caplog):
        """Test a missing file counts as removed without attempting a delete"""
        resume_path = storage.save_resume(io.BytesIO(PDF_BYTES), "resume.pdf")
        storage.delete_file(resume_path)

        def unexpected_delete(file_path):
            raise AssertionError("delete_file called for a missing resume")

        monkeypatch.setattr(storage, "delete_file", unexpected_delete)

        with caplog.at_level(logging.INFO, logger="talentdesk.services.applicant_intake"):
            assert discard_resume(storage, resume_path) is True

        assert "already removed" in caplog.text

    def test_failed_delete_is_reported(self, storage, monkeypatch, caplog):
        """Test a delete that fails is logged as a warning and returns False"""
        resume_path = storage.save_resume(io.BytesIO(PDF_BYTES), "resume.pdf")
        monkeypatch.setattr(storage, "delete_file", lambda file_path: False)

        with caplog.at_level(logging.WARNING, logger="talentdesk.services.applicant_intake"):
            assert discard_resume(storage, resume_path) is False

        assert storage.file_exists(resume_path)
        assert f"Could not remove resume {resume_path}" in caplog.text
