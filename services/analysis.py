"""
Consultation Analyzer - Fixed consultation summaries
====================================================

Produces the summary, key findings and recommendations shown after a
consultation is transcribed. The content is static apart from the
patient's name.
"""

from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field, asdict
from urllib.parse import quote

from rules.templates import TemplateManager
from core.exceptions import ValidationError
from core.logging import get_logger

logger = get_logger("services.analysis")

KEY_FINDINGS = [
    "Presenting symptoms as described by the patient",
    "Clinical observations noted during the examination",
    "Preliminary diagnosis based on the findings",
    "Recommended treatment plan",
]

RECOMMENDATIONS = [
    "Follow-up visit recommended in 2 weeks for reassessment",
    "Further investigations if needed depending on progress",
    "Prescribed treatment with detailed dosage",
    "Lifestyle and preventive recommendations",
]

PDF_ENDPOINT = "/api/mediAI/generate-pdf"

# Same unreserved set as JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "!~*'()"


@dataclass
class ConsultationAnalysis:
    summary: str
    keyFindings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    pdfUrl: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def patient_display_name(patient_context: Optional[Dict[str, Any]]) -> str:
    """
    Name to show for a patient context.

    Uses ``firstName``/``lastName`` when given, else ``name``.
    """
    if not patient_context:
        return ""
    parts = [patient_context.get("firstName"), patient_context.get("lastName")]
    full = " ".join(str(p).strip() for p in parts if p and str(p).strip())
    return full or str(patient_context.get("name") or "").strip()


class ConsultationAnalyzer:
    """
    Example:
        analyzer = ConsultationAnalyzer()
        result = analyzer.analyze("Patient reports ...", {"firstName": "Jane", "lastName": "Doe"})
        result.summary  # "Summary of the consultation for Jane Doe. ..."
    """

    def __init__(self, templates: Optional[TemplateManager] = None):
        self.templates = templates or TemplateManager.with_builtins()

    def analyze(
        self,
        transcription: Optional[str],
        patient_context: Optional[Dict[str, Any]] = None
    ) -> ConsultationAnalysis:
        """
        Analyze a consultation transcription.

        Raises:
            ValidationError: If the transcription is missing or blank
        """
        if not isinstance(transcription, str) or not transcription.strip():
            raise ValidationError("Transcription is required")

        summary = self.templates.render(
            "consultation_summary",
            {"patient_name": patient_display_name(patient_context)},
        )

        logger.info("Consultation analyzed", extra={"length": len(transcription)})

        encoded = quote(transcription, safe=URI_COMPONENT_SAFE)
        return ConsultationAnalysis(
            summary=summary,
            keyFindings=list(KEY_FINDINGS),
            recommendations=list(RECOMMENDATIONS),
            pdfUrl=f"{PDF_ENDPOINT}?transcription={encoded}",
        )
