"""
Rules Engine - Keyword matching and template-based responses
============================================================

This module implements the rules engine that matches a free-text
query against an ordered list of keyword rules and picks the
consultation note to answer with.

Rules are evaluated top to bottom and the first match wins, so
narrow rules must come before broad ones.
"""

import yaml
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

from core.exceptions import ConfigError, RuleError
from core.logging import get_logger
from .templates import Template, TemplateManager

logger = get_logger("rules.engine")

FALLBACK_RULE = "fallback"


class MatchType(Enum):
    """Types of keyword matching."""
    CONTAINS = "contains"          # Any pattern is a substring
    ALL_KEYWORDS = "all_keywords"  # Every pattern is a substring


def normalize(message: str) -> str:
    """Lowercase and trim a query the way every rule sees it."""
    return message.lower().strip()


@dataclass(frozen=True)
class Rule:
    """
    A single keyword rule.

    Patterns are stored lowercased and trimmed. A rule is immutable
    once built.

    Attributes:
        name (str): Unique rule name
        patterns (tuple): Lowercase substrings to look for
        template (Template): Response template
        match_type (MatchType): Whether any or all patterns must occur
    """
    name: str
    patterns: Tuple[str, ...]
    template: Template
    match_type: MatchType = MatchType.CONTAINS

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise RuleError("Rule name is required", {"name": self.name})

        if not all(isinstance(p, str) for p in self.patterns):
            raise RuleError(
                f"Rule '{self.name}' patterns must be strings",
                {"patterns": list(self.patterns)},
            )

        patterns = tuple(normalize(p) for p in self.patterns if p.strip())
        if not patterns:
            raise RuleError(f"Rule '{self.name}' has no patterns")
        object.__setattr__(self, "patterns", patterns)

        if not isinstance(self.match_type, MatchType):
            try:
                object.__setattr__(self, "match_type", MatchType(self.match_type))
            except ValueError:
                raise RuleError(
                    f"Rule '{self.name}' has unknown match type",
                    {"match_type": self.match_type},
                )

    def matches(self, message: str) -> Optional["RuleMatch"]:
        """
        Check if this rule matches a message.

        Args:
            message: Raw query; normalized before matching

        Returns:
            RuleMatch if matched, None otherwise
        """
        query = normalize(message)

        if self.match_type == MatchType.ALL_KEYWORDS:
            hits = [p for p in self.patterns if p in query]
            if len(hits) == len(self.patterns):
                return RuleMatch(rule=self, message=message, keywords=hits)
            return None

        for pattern in self.patterns:
            if pattern in query:
                return RuleMatch(rule=self, message=message, keywords=[pattern])
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to the rules.yaml representation."""
        data = {
            "name": self.name,
            "patterns": list(self.patterns),
            "match_type": self.match_type.value,
        }
        if self.template.name:
            data["template"] = self.template.name
        else:
            data["text"] = self.template.content
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], templates: TemplateManager) -> "Rule":
        """
        Create rule from dictionary.

        The response is either ``template`` (a named template known to
        ``templates``) or ``text`` (inline content).

        Raises:
            RuleError: If the entry is incomplete or names an unknown template
        """
        if not isinstance(data, dict):
            raise RuleError("Rule entry must be a mapping", {"entry": data})

        name = data.get("name", "")
        patterns = data.get("patterns") or []
        if isinstance(patterns, str):
            patterns = [patterns]
        if not isinstance(patterns, list):
            raise RuleError(f"Rule '{name}' patterns must be a list", {"entry": data})

        return cls(
            name=name,
            patterns=tuple(patterns),
            template=_resolve_template(data, templates, name),
            match_type=data.get("match_type", MatchType.CONTAINS.value),
        )


@dataclass
class RuleMatch:
    """
    Result of a rule matching a message.

    Attributes:
        rule (Rule): The matching rule
        message (str): The matched message
        keywords (list): Patterns found in the message
    """
    rule: Rule
    message: str
    keywords: List[str] = field(default_factory=list)

    def get_response(self, context: Optional[Dict[str, Any]] = None) -> str:
        """Render the matched rule's template."""
        return self.rule.template.render(context)


def _resolve_template(data: Dict[str, Any], templates: TemplateManager, owner: str) -> Template:
    """Turn a ``template``/``text`` entry into a Template."""
    if not isinstance(data, dict):
        raise RuleError(f"Rule '{owner}' response must be a mapping", {"entry": data})

    for key in ("template", "text"):
        if data.get(key) is not None and not isinstance(data[key], str):
            raise RuleError(f"Rule '{owner}' {key} must be a string", {"entry": data})

    if data.get("template"):
        template = templates.get_template(data["template"])
        if template is None:
            raise RuleError(
                f"Rule '{owner}' references unknown template",
                {"template": data["template"]},
            )
        return template

    if data.get("text"):
        return Template(content=data["text"])

    raise RuleError(f"Rule '{owner}' needs a 'template' or 'text' entry")


def default_rules(templates: Optional[TemplateManager] = None) -> List[Rule]:
    """
    Build the canonical rule table.

    Order matters: a query mentioning both "fever" and "cough" is an
    infectious disease consultation, not a pulmonology one.
    """
    templates = templates or TemplateManager.with_builtins()
    table = [
        ("cardiology", ("chest pain", "heart", "cardiac")),
        ("neurology", ("headache", "migraine", "stroke")),
        ("infectious_disease", ("fever", "infection", "covid")),
        ("gastroenterology", ("abdominal pain", "stomach pain", "gi")),
        ("pulmonology", ("cough", "shortness of breath", "sob", "asthma")),
    ]
    return [
        Rule(name=name, patterns=patterns, template=templates.get_template(name))
        for name, patterns in table
    ]


class RulesEngine:
    """
    Ordered keyword rules plus a fallback template.

    Example:
        engine = RulesEngine.with_defaults()

        match = engine.match("I have severe chest pain")
        if match:
            print(match.get_response())

        rule_name, text = engine.select("my knee hurts")  # "fallback", ...
    """

    def __init__(
        self,
        rules: Optional[List[Rule]] = None,
        fallback: Optional[Template] = None,
        templates: Optional[TemplateManager] = None
    ):
        """
        Initialize rules engine.

        Args:
            rules: Rules in evaluation order
            fallback: Template used when no rule matches
            templates: Named templates for rules added from dictionaries
        """
        self.templates = templates or TemplateManager.with_builtins()
        self.fallback = fallback or self.templates.get_template("internal_medicine")
        self.rules: List[Rule] = []

        for rule in rules or []:
            self.add_rule(rule)

    @classmethod
    def with_defaults(cls) -> "RulesEngine":
        """Engine with the canonical rule table."""
        templates = TemplateManager.with_builtins()
        return cls(rules=default_rules(templates), templates=templates)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RulesEngine":
        """
        Load an engine from a rules.yaml file.

        Raises:
            ConfigError: If the file cannot be read or parsed
            RuleError: If an entry is invalid
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse rules file: {e}", {"path": str(path)})
        except IOError as e:
            raise ConfigError(f"Failed to read rules file: {e}", {"path": str(path)})

        if not isinstance(data, dict):
            raise ConfigError("Rules file must contain a mapping", {"path": str(path)})

        extra_templates = data.get("templates") or {}
        if not isinstance(extra_templates, dict) or not all(
            isinstance(content, str) for content in extra_templates.values()
        ):
            raise RuleError("Rules file 'templates' must map names to text", {"path": str(path)})

        rule_entries = data.get("rules") or []
        if not isinstance(rule_entries, list):
            raise RuleError("Rules file 'rules' must be a list", {"path": str(path)})

        templates = TemplateManager.with_builtins()
        templates.load_from_dict(extra_templates)

        engine = cls(templates=templates)
        if data.get("fallback"):
            engine.fallback = _resolve_fallback(data["fallback"], templates)

        for rule_data in rule_entries:
            engine.add_rule(Rule.from_dict(rule_data, templates))

        logger.info(f"Loaded {len(engine.rules)} rules from {path}")
        return engine

    def add_rule(self, rule: Rule) -> None:
        """
        Append a rule; it is evaluated after every existing rule.

        Raises:
            RuleError: If a rule with the same name exists
        """
        if self.get_rule(rule.name) is not None:
            raise RuleError(f"Duplicate rule name '{rule.name}'")
        self.rules.append(rule)

    def remove_rule(self, name: str) -> bool:
        """Remove a rule by name. Returns True if a rule was removed."""
        for i, rule in enumerate(self.rules):
            if rule.name == name:
                del self.rules[i]
                return True
        return False

    def get_rule(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def match(self, message: str) -> Optional[RuleMatch]:
        """
        Find the first rule, in order, that matches a message.

        Returns:
            RuleMatch if found, None otherwise
        """
        for rule in self.rules:
            match = rule.matches(message)
            if match:
                return match
        return None

    def match_all(self, message: str) -> List[RuleMatch]:
        """Every matching rule, in evaluation order."""
        matches = []
        for rule in self.rules:
            match = rule.matches(message)
            if match:
                matches.append(match)
        return matches

    def select(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ) -> Tuple[str, str]:
        """
        Pick the response text for a message.

        Returns:
            Tuple of (rule name or "fallback", rendered text)
        """
        match = self.match(message)
        if match:
            return match.rule.name, match.get_response(context)
        return FALLBACK_RULE, self.fallback.render(context)

    def save_rules(self, path: Union[str, Path]) -> None:
        """
        Save current rules to a rules.yaml file.

        Inline templates are written out in full; named ones by name.
        """
        data: Dict[str, Any] = {}
        if self.fallback.name:
            data["fallback"] = self.fallback.name
        else:
            data["fallback"] = {"text": self.fallback.content}
        data["rules"] = [rule.to_dict() for rule in self.rules]

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def get_all_rules(self) -> List[Rule]:
        return self.rules.copy()


def _resolve_fallback(entry: Union[str, Dict[str, Any]], templates: TemplateManager) -> Template:
    """A fallback is a template name or a ``{text: ...}`` mapping."""
    if isinstance(entry, str):
        template = templates.get_template(entry)
        if template is None:
            raise RuleError("Fallback references unknown template", {"template": entry})
        return template
    return _resolve_template(entry, templates, FALLBACK_RULE)
