"""
Rules Module - Keyword-driven consultation notes
================================================

This module provides the rule table behind every assistant reply:
- Ordered keyword rules (first match wins)
- Named templates with patient-name substitution
- Built-in consultation notes
- YAML import/export of rule tables
"""

from .engine import RulesEngine, Rule, RuleMatch, MatchType, default_rules
from .templates import TemplateManager, Template

__all__ = [
    "RulesEngine",
    "Rule",
    "RuleMatch",
    "MatchType",
    "default_rules",
    "TemplateManager",
    "Template",
]
