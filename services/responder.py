"""
Response Selector - Keyword-driven medical assistant replies
============================================================

This module turns a free-text question into a consultation note by
running it through the rules engine. It is the single dispatch point
shared by the web API, the terminal chat and the command line.
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict

from rules.engine import RulesEngine, FALLBACK_RULE
from core.clock import iso_timestamp
from core.config import Config, DEFAULT_FALLBACK_REPLY
from core.exceptions import ValidationError
from core.logging import get_logger, audit

logger = get_logger("services.responder")


@dataclass
class ConsultationResponse:
    """
    A reply produced by the selector.

    Attributes:
        response (str): Consultation note text
        provider (str): Provider label shown to the user
        timestamp (str): ISO-8601 UTC time the reply was produced
        confidence (str): Fixed confidence label
        rule (str): Name of the matched rule, "fallback" when none matched
    """
    response: str
    provider: str
    timestamp: str
    confidence: str
    rule: str = FALLBACK_RULE

    def to_dict(self) -> Dict[str, Any]:
        """Public JSON shape; the matched rule stays internal."""
        data = asdict(self)
        data.pop("rule")
        return data


class ResponseSelector:
    """
    Stateless classify-and-template responder.

    Safe to share between threads: the rules engine is only read.

    Example:
        selector = ResponseSelector(RulesEngine.with_defaults())

        reply = selector.select_response("I have severe chest pain")
        reply.rule       # "cardiology"
        reply.response   # the cardiology consultation note
    """

    def __init__(
        self,
        rules_engine: Optional[RulesEngine] = None,
        provider: str = "MediAI Expert System",
        confidence: str = "high",
        fallback_provider: str = "Medical Assistant",
        fallback_reply: str = DEFAULT_FALLBACK_REPLY
    ):
        """
        Initialize the selector.

        Args:
            rules_engine: Rule table to dispatch on (built-in table if omitted)
            provider: Provider label for normal replies
            confidence: Confidence label for every reply
            fallback_provider: Provider label for the error-path reply
            fallback_reply: Text sent when selection fails unexpectedly
        """
        self.rules_engine = rules_engine or RulesEngine.with_defaults()
        self.provider = provider
        self.confidence = confidence
        self.fallback_provider = fallback_provider
        self.fallback_reply = fallback_reply

    @classmethod
    def from_config(cls, config: Config) -> "ResponseSelector":
        """Build a selector from configuration, loading rules.yaml if set."""
        rules_path = config.rules_path
        if rules_path is not None:
            rules_engine = RulesEngine.from_file(rules_path)
        else:
            rules_engine = RulesEngine.with_defaults()

        return cls(
            rules_engine=rules_engine,
            provider=config.assistant.provider,
            confidence=config.assistant.confidence,
            fallback_provider=config.assistant.fallback_provider,
            fallback_reply=config.assistant.fallback_reply,
        )

    def select_response(
        self,
        query: Optional[str],
        patient_name: Optional[str] = None
    ) -> ConsultationResponse:
        """
        Select the consultation note for a query.

        Args:
            query: Free-text question
            patient_name: Filled into templates with a {patient_name} placeholder

        Returns:
            ConsultationResponse with the matched rule's note, or the
            generic note when nothing matched

        Raises:
            ValidationError: If the query is missing or blank
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Message is required")

        rule_name, text = self.rules_engine.select(query, {"patient_name": patient_name})

        audit("assistant.query", rule=rule_name, length=len(query))

        return ConsultationResponse(
            response=text,
            provider=self.provider,
            timestamp=iso_timestamp(),
            confidence=self.confidence,
            rule=rule_name,
        )

    def fallback_response(self) -> ConsultationResponse:
        """The polite reply used when selection fails unexpectedly."""
        return ConsultationResponse(
            response=self.fallback_reply,
            provider=self.fallback_provider,
            timestamp=iso_timestamp(),
            confidence=self.confidence,
        )

    def respond(self, query: Optional[str], patient_name: Optional[str] = None) -> ConsultationResponse:
        """
        Like ``select_response`` but never fails on internal errors.

        Validation errors still propagate; anything else is logged and
        replaced by the fallback reply.
        """
        try:
            return self.select_response(query, patient_name)
        except ValidationError:
            raise
        except Exception as e:
            logger.error(f"Response selection failed: {e}", exc_info=True)
            return self.fallback_response()
