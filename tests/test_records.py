"""
Test Records Module
===================

Unit tests for the patient registry, recording log, consultation
analysis and report rendering.
"""

import logging
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import NotFoundError, ValidationError
from services.records import PatientRegistry, RecordingLog, Patient, SAMPLE_PATIENTS
from services.analysis import ConsultationAnalyzer, KEY_FINDINGS, RECOMMENDATIONS, patient_display_name
from services.reports import ReportRenderer, PHI_NOTICE


class TestPatientRegistry:
    """Tests for PatientRegistry."""

    def test_seed_samples(self):
        registry = PatientRegistry()
        registry.seed_samples()

        assert len(registry) == len(SAMPLE_PATIENTS)
        john = registry.get("patient_1")
        assert john.name == "John Smith"
        assert john.bloodType == "A+"
        assert john.lastVisit.endswith("Z")

    def test_create(self):
        registry = PatientRegistry()

        patient = registry.create({"name": "Jane Doe", "age": 40, "conditions": ["Migraine"]})

        assert isinstance(patient, Patient)
        assert patient.id.startswith("patient_")
        assert patient.bloodType == "Unknown"
        assert patient.conditions == ["Migraine"]
        assert patient.createdAt == patient.lastVisit
        assert registry.get(patient.id) is patient

    @pytest.mark.parametrize("data", [{}, {"name": "Jane"}, {"age": 40}, {"name": "", "age": 40}])
    def test_create_requires_name_and_age(self, data):
        registry = PatientRegistry()
        with pytest.raises(ValidationError) as exc_info:
            registry.create(data)
        assert exc_info.value.message == "Name and age are required"
        assert len(registry) == 0

    def test_delete(self):
        registry = PatientRegistry()
        patient = registry.create({"name": "Jane", "age": 40})

        registry.delete(patient.id)

        with pytest.raises(NotFoundError):
            registry.get(patient.id)
        with pytest.raises(NotFoundError):
            registry.delete(patient.id)

    def test_audit_has_no_patient_details(self, caplog):
        registry = PatientRegistry()
        with caplog.at_level(logging.INFO, logger="mediai.audit"):
            registry.create({"name": "Jane Doe", "age": 40, "medications": ["Aspirin"]})

        record = [r for r in caplog.records if r.getMessage() == "patient.created"][-1]
        assert record.extra_data["has_medical_data"] is True
        assert "Jane Doe" not in str(record.extra_data)

    def test_to_dict_uses_client_field_names(self):
        patient = PatientRegistry().create({"name": "Jane", "age": 40})
        data = patient.to_dict()
        assert "bloodType" in data
        assert "emergencyContact" in data
        assert "lastVisit" in data


class TestRecordingLog:
    """Tests for RecordingLog."""

    def test_create(self):
        log = RecordingLog()

        recording = log.create({"patientName": "Jane", "duration": 120, "summary": "Follow-up"})

        assert recording.id.startswith("rec_")
        assert recording.status == "completed"
        assert recording.date == recording.createdAt
        assert log.get(recording.id) is recording

    def test_create_with_no_fields(self):
        recording = RecordingLog().create({})
        assert recording.patientName == ""
        assert recording.duration is None

    def test_list_newest_first(self):
        log = RecordingLog()
        first = log.create({"patientName": "A"})
        second = log.create({"patientName": "B"})
        third = log.create({"patientName": "C"})

        assert [r.id for r in log.list()] == [third.id, second.id, first.id]

    def test_delete(self):
        log = RecordingLog()
        recording = log.create({})

        log.delete(recording.id)

        assert len(log) == 0
        with pytest.raises(NotFoundError):
            log.delete(recording.id)


class TestConsultationAnalyzer:
    """Tests for ConsultationAnalyzer."""

    def test_analyze_with_patient(self):
        result = ConsultationAnalyzer().analyze(
            "Patient reports headaches",
            {"firstName": "Jane", "lastName": "Doe"},
        )

        assert result.summary.startswith("Summary of the consultation for Jane Doe.")
        assert result.keyFindings == KEY_FINDINGS
        assert result.recommendations == RECOMMENDATIONS

    def test_analyze_without_patient(self):
        result = ConsultationAnalyzer().analyze("Patient reports headaches")
        assert result.summary.startswith("Summary of the consultation for the patient.")

    def test_pdf_url_encodes_transcription(self):
        result = ConsultationAnalyzer().analyze("pain & fever (2 days)")
        assert result.pdfUrl == "/api/mediAI/generate-pdf?transcription=pain%20%26%20fever%20(2%20days)"

    @pytest.mark.parametrize("transcription", [None, "", "   "])
    def test_requires_transcription(self, transcription):
        with pytest.raises(ValidationError):
            ConsultationAnalyzer().analyze(transcription)

    def test_to_dict_keys(self):
        data = ConsultationAnalyzer().analyze("notes").to_dict()
        assert set(data) == {"summary", "keyFindings", "recommendations", "pdfUrl"}

    @pytest.mark.parametrize("context,expected", [
        (None, ""),
        ({}, ""),
        ({"name": "Maria Garcia"}, "Maria Garcia"),
        ({"firstName": "Jane"}, "Jane"),
        ({"firstName": "Jane", "lastName": "Doe", "name": "Ignored"}, "Jane Doe"),
    ])
    def test_patient_display_name(self, context, expected):
        assert patient_display_name(context) == expected


class TestReportRenderer:
    """Tests for ReportRenderer."""

    def test_render_recording(self):
        recording = RecordingLog().create({"patientName": "Jane", "duration": 95, "summary": "Stable."})

        report = ReportRenderer().render_recording(recording)

        assert report.filename == f"consultation-{recording.id}.txt"
        assert report.media_type.startswith("text/plain")
        assert report.content_disposition == f'attachment; filename="{report.filename}"'
        assert "Patient: Jane" in report.content
        assert "Duration: 95 seconds" in report.content
        assert "Stable." in report.content
        assert PHI_NOTICE in report.content

    def test_render_recording_without_details(self):
        recording = RecordingLog().create({})

        content = ReportRenderer().render_recording(recording).content

        assert "Patient: Unknown" in content
        assert "Duration:" not in content
        assert "No summary recorded." in content

    def test_render_transcription(self):
        report = ReportRenderer().render_transcription("Patient reports <pain>")

        assert report.filename == "consultation.txt"
        assert "Patient reports <pain>" in report.content
