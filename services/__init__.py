"""
Services Module - Core services for MediAI Pro
==============================================

This module provides the main services:
- Response Selector: keyword-driven assistant replies
- Consultation Analyzer: fixed consultation summaries
- Patient Registry / Recording Log: in-memory clinical records
- Report Renderer: downloadable consultation reports
"""

from .responder import ResponseSelector, ConsultationResponse
from .analysis import ConsultationAnalyzer, ConsultationAnalysis
from .records import PatientRegistry, RecordingLog, Patient, Recording
from .reports import ReportRenderer, RenderedReport

__all__ = [
    "ResponseSelector",
    "ConsultationResponse",
    "ConsultationAnalyzer",
    "ConsultationAnalysis",
    "PatientRegistry",
    "RecordingLog",
    "Patient",
    "Recording",
    "ReportRenderer",
    "RenderedReport",
]
