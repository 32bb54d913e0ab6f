"""
Web Routes - API endpoints and page routes
=========================================

This module defines all web routes for the MediAI Pro interface.
Errors are returned as ``{"error": ...}`` by the handlers registered
in ``app.py``.
"""

from typing import Optional, List

from fastapi import APIRouter, Request, Query
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from core.clock import iso_timestamp
from core.exceptions import ValidationError
from core.logging import get_logger

logger = get_logger("web.routes")

router = APIRouter()

API_PREFIX = "/api/mediAI"


# === Page Routes ===

@router.get("/", response_class=HTMLResponse)
async def chat_page(request: Request):
    """Render the chat page."""
    templates = request.app.state.templates
    config = request.app.state.config

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_name": config.app_name,
            "chat_url": f"{API_PREFIX}/chat",
        }
    )


# === Request Models ===

class ChatRequest(BaseModel):
    """Chat request; either field carries the question."""
    message: Optional[str] = None
    query: Optional[str] = None
    patientName: Optional[str] = None

    def question(self) -> Optional[str]:
        """First of message or query that is not blank."""
        for text in (self.message, self.query):
            if text and text.strip():
                return text
        return None


class AnalysisRequest(BaseModel):
    """Consultation analysis request."""
    transcription: Optional[str] = None
    patientContext: Optional[dict] = None


class PatientCreate(BaseModel):
    """Patient creation model."""
    name: Optional[str] = None
    age: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    conditions: Optional[List[str]] = None
    medications: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    bloodType: Optional[str] = None
    emergencyContact: Optional[str] = None
    insurance: Optional[str] = None


class RecordingCreate(BaseModel):
    """Recording creation model."""
    patientName: Optional[str] = None
    duration: Optional[float] = None
    summary: Optional[str] = None


# === Assistant ===

@router.post(f"{API_PREFIX}/chat")
async def chat(request: Request, body: ChatRequest):
    """Answer a medical question with the matching consultation note."""
    selector = request.app.state.selector
    query = body.question()

    try:
        reply = selector.select_response(query, body.patientName)
    except ValidationError:
        raise
    except Exception as e:
        logger.error(f"Chat failed: {e}", exc_info=True)
        return JSONResponse(status_code=500, content=selector.fallback_response().to_dict())

    logger.info(f"Chat answered with rule '{reply.rule}'")
    return reply.to_dict()


@router.post(f"{API_PREFIX}/analyze-consultation")
async def analyze_consultation(request: Request, body: AnalysisRequest):
    """Summarize a transcribed consultation."""
    analyzer = request.app.state.analyzer

    analysis = analyzer.analyze(body.transcription, body.patientContext)
    return analysis.to_dict()


@router.get(f"{API_PREFIX}/generate-pdf")
async def generate_report(request: Request, transcription: Optional[str] = Query(None)):
    """Download a report built from a raw transcription."""
    if not transcription or not transcription.strip():
        raise ValidationError("Transcription is required")

    report = request.app.state.reports.render_transcription(transcription)
    return _attachment(report)


@router.get(f"{API_PREFIX}/rules")
async def list_rules(request: Request):
    """Rules in evaluation order."""
    engine = request.app.state.selector.rules_engine

    return {
        "rules": [
            {
                "name": rule.name,
                "patterns": list(rule.patterns),
                "match_type": rule.match_type.value,
            }
            for rule in engine.get_all_rules()
        ],
        "fallback": engine.fallback.name or "custom",
    }


# === Patients ===

@router.get(f"{API_PREFIX}/patients")
async def list_patients(request: Request, patient_id: Optional[str] = Query(None, alias="id")):
    """All patients, or one patient when ``id`` is given."""
    patients = request.app.state.patients

    if patient_id:
        return {"patient": patients.get(patient_id).to_dict()}

    return {"patients": [p.to_dict() for p in patients.list()]}


@router.post(f"{API_PREFIX}/patients", status_code=201)
async def create_patient(request: Request, body: PatientCreate):
    """Create a patient."""
    patients = request.app.state.patients

    patient = patients.create(body.model_dump(exclude_none=True))
    return {"patient": patient.to_dict()}


@router.get(f"{API_PREFIX}/patients/{{patient_id}}")
async def get_patient(request: Request, patient_id: str):
    """Get one patient."""
    return {"patient": request.app.state.patients.get(patient_id).to_dict()}


@router.delete(f"{API_PREFIX}/patients/{{patient_id}}")
async def delete_patient(request: Request, patient_id: str):
    """Delete a patient."""
    request.app.state.patients.delete(patient_id)
    return {"success": True}


# === Recordings ===

@router.get(f"{API_PREFIX}/recordings")
async def list_recordings(request: Request):
    """All recordings, newest first."""
    recordings = request.app.state.recordings
    return {"recordings": [r.to_dict() for r in recordings.list()]}


@router.post(f"{API_PREFIX}/recordings", status_code=201)
async def create_recording(request: Request, body: RecordingCreate):
    """Create a recording."""
    recordings = request.app.state.recordings

    recording = recordings.create(body.model_dump(exclude_none=True))
    return {"recording": recording.to_dict()}


@router.delete(f"{API_PREFIX}/recordings/{{recording_id}}")
async def delete_recording(request: Request, recording_id: str):
    """Delete a recording."""
    request.app.state.recordings.delete(recording_id)
    return {"success": True}


@router.get(f"{API_PREFIX}/recordings/{{recording_id}}/download")
async def download_recording(request: Request, recording_id: str):
    """Download the consultation report for a recording."""
    recording = request.app.state.recordings.get(recording_id)
    report = request.app.state.reports.render_recording(recording)
    return _attachment(report)


# === Status ===

@router.get("/api/status")
async def get_status(request: Request):
    """Get system status."""
    state = request.app.state

    return {
        "app": state.config.app_name,
        "version": state.config.version,
        "rules": len(state.selector.rules_engine.rules),
        "patients": len(state.patients),
        "recordings": len(state.recordings),
        "timestamp": iso_timestamp(),
    }


def _attachment(report) -> Response:
    return Response(
        content=report.content,
        media_type=report.media_type,
        headers={"Content-Disposition": report.content_disposition},
    )
