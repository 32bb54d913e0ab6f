"""
Test Response Selector
======================

Unit tests for the chat response selector.
"""

import logging
import re
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import Config, DEFAULT_FALLBACK_REPLY
from core.exceptions import MediAIError, ValidationError
from rules import notes
from rules.engine import RulesEngine, FALLBACK_RULE
from services.responder import ResponseSelector, ConsultationResponse


ISO_MS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class BrokenEngine(RulesEngine):
    """Engine whose selection always fails."""

    def select(self, message, context=None):
        raise RuntimeError("rule table corrupted")


@pytest.fixture
def selector():
    return ResponseSelector()


class TestSelectResponse:
    """Tests for ResponseSelector.select_response."""

    def test_chest_pain(self, selector):
        reply = selector.select_response("I have severe chest pain")
        assert reply.rule == "cardiology"
        assert reply.response == notes.CARDIOLOGY

    def test_headache(self, selector):
        reply = selector.select_response("bad headache for two days")
        assert reply.rule == "neurology"
        assert reply.response == notes.NEUROLOGY

    def test_fever_and_cough(self, selector):
        reply = selector.select_response("fever and cough for a week")
        assert reply.rule == "infectious_disease"
        assert reply.response == notes.INFECTIOUS_DISEASE

    def test_no_keyword_uses_fallback(self, selector):
        reply = selector.select_response("my knee hurts")
        assert reply.rule == FALLBACK_RULE
        assert reply.response == notes.INTERNAL_MEDICINE

    @pytest.mark.parametrize("query", ["", "   ", None, 42])
    def test_missing_input(self, selector, query):
        with pytest.raises(ValidationError) as exc_info:
            selector.select_response(query)
        assert exc_info.value.message == "Message is required"
        assert exc_info.value.status_code == 400

    def test_same_input_same_text(self, selector):
        first = selector.select_response("COUGH that won't stop")
        second = selector.select_response("  cough that won't stop  ")
        assert first.response == second.response
        assert first.rule == second.rule == "pulmonology"

    def test_response_fields(self, selector):
        reply = selector.select_response("heart palpitations")

        assert reply.provider == "MediAI Expert System"
        assert reply.confidence == "high"
        assert ISO_MS.match(reply.timestamp)

    def test_to_dict_shape(self, selector):
        data = selector.select_response("heart palpitations").to_dict()
        assert set(data) == {"response", "provider", "timestamp", "confidence"}

    def test_audit_event(self, selector, caplog):
        with caplog.at_level(logging.INFO, logger="mediai.audit"):
            selector.select_response("migraine again")

        records = [r for r in caplog.records if r.name == "mediai.audit"]
        assert records
        assert records[-1].getMessage() == "assistant.query"
        assert records[-1].extra_data["rule"] == "neurology"
        assert "migraine" not in str(records[-1].extra_data)


class TestRespond:
    """Tests for the error-tolerant respond path."""

    def test_internal_error_falls_back(self):
        selector = ResponseSelector(rules_engine=BrokenEngine())

        reply = selector.respond("chest pain")

        assert isinstance(reply, ConsultationResponse)
        assert reply.response == DEFAULT_FALLBACK_REPLY
        assert reply.provider == "Medical Assistant"

    def test_validation_error_propagates(self):
        selector = ResponseSelector(rules_engine=BrokenEngine())
        with pytest.raises(ValidationError):
            selector.respond("")

    def test_normal_reply_passes_through(self, selector):
        assert selector.respond("stomach pain").rule == "gastroenterology"


class TestFromConfig:
    """Tests for building a selector from configuration."""

    def test_builtin_rules(self, tmp_path):
        selector = ResponseSelector.from_config(Config(config_dir=str(tmp_path)))
        assert len(selector.rules_engine.rules) == 5

    def test_labels_from_config(self, tmp_path):
        config = Config(config_dir=str(tmp_path))
        config.assistant.provider = "Clinic Bot"
        config.assistant.confidence = "medium"

        reply = ResponseSelector.from_config(config).select_response("heart")

        assert reply.provider == "Clinic Bot"
        assert reply.confidence == "medium"

    def test_rules_file_from_config_dir(self, tmp_path):
        (tmp_path / "rules.yaml").write_text(
            "fallback:\n"
            "  text: Tell me more.\n"
            "rules:\n"
            "  - name: knee\n"
            "    patterns: [knee]\n"
            "    text: Knee advice.\n"
        )

        selector = ResponseSelector.from_config(Config(config_dir=str(tmp_path)))

        assert selector.select_response("my knee hurts").response == "Knee advice."
        assert selector.select_response("chest pain").response == "Tell me more."

    def test_patient_name_placeholder(self, tmp_path):
        (tmp_path / "rules.yaml").write_text(
            "rules:\n"
            "  - name: knee\n"
            "    patterns: [knee]\n"
            "    text: 'Knee advice for {patient_name:you}.'\n"
        )
        selector = ResponseSelector.from_config(Config(config_dir=str(tmp_path)))

        assert selector.select_response("knee", "Jane").response == "Knee advice for Jane."
        assert selector.select_response("knee").response == "Knee advice for you."

    def test_malformed_rules_file_is_a_mediai_error(self, tmp_path):
        (tmp_path / "rules.yaml").write_text(
            "rules:\n"
            "  - name: emergency\n"
            "    patterns: [911]\n"
            "    text: Call now.\n"
        )

        with pytest.raises(MediAIError) as exc_info:
            ResponseSelector.from_config(Config(config_dir=str(tmp_path)))
        assert exc_info.value.status_code == 500

    def test_builtin_notes_ignore_patient_name(self, selector):
        reply = selector.select_response("chest pain", "Jane Doe")
        assert reply.response == notes.CARDIOLOGY
