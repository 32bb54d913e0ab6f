"""
Report Renderer - Downloadable consultation reports
===================================================

Renders plain-text consultation reports with Jinja2, either for a
stored recording or for a raw transcription.
"""

from dataclasses import dataclass
from typing import Optional

from jinja2 import Environment, StrictUndefined

from core.clock import iso_timestamp
from core.logging import get_logger
from .records import Recording

logger = get_logger("services.reports")


RECORDING_REPORT = """\
Consultation Report - {{ recording.id }}
Generated: {{ generated }}

Patient: {{ recording.patientName or "Unknown" }}
Date: {{ recording.date }}
{% if recording.duration is not none -%}
Duration: {{ recording.duration }} seconds
{% endif -%}
Status: {{ recording.status }}

Summary:
{{ recording.summary or "No summary recorded." }}

{{ notice }}
"""

TRANSCRIPTION_REPORT = """\
Consultation Report
Generated: {{ generated }}

Transcription:
{{ transcription }}

{{ notice }}
"""

PHI_NOTICE = """\
HIPAA Compliance Notice:
This document contains protected health information (PHI).
Unauthorized access is prohibited by law."""


@dataclass
class RenderedReport:
    """A rendered report ready to send as an attachment."""
    filename: str
    content: str
    media_type: str = "text/plain; charset=utf-8"

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


class ReportRenderer:
    """
    Example:
        renderer = ReportRenderer()
        report = renderer.render_recording(recording)
        report.filename  # "consultation-rec_1714550400000.txt"
    """

    def __init__(self):
        # Plain-text output; nothing here is HTML
        self.env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)
        self._recording_template = self.env.from_string(RECORDING_REPORT)
        self._transcription_template = self.env.from_string(TRANSCRIPTION_REPORT)

    def render_recording(self, recording: Recording) -> RenderedReport:
        content = self._recording_template.render(
            recording=recording,
            generated=iso_timestamp(),
            notice=PHI_NOTICE,
        )
        logger.debug(f"Rendered report for {recording.id}")
        return RenderedReport(filename=f"consultation-{recording.id}.txt", content=content)

    def render_transcription(self, transcription: str, name: Optional[str] = None) -> RenderedReport:
        content = self._transcription_template.render(
            transcription=transcription,
            generated=iso_timestamp(),
            notice=PHI_NOTICE,
        )
        return RenderedReport(filename=f"{name or 'consultation'}.txt", content=content)
