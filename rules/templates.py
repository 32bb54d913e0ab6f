"""
Template Manager - Named response templates with placeholder substitution
=========================================================================

This module provides the named templates rules point at. Templates
support two placeholder forms:
- Simple: {variable}
- Default: {variable:default}   (default may be empty)

Rendering is deterministic: no dates, no random choices.
"""

import re
from typing import Dict, Any, Optional, List
from dataclasses import dataclass

from .notes import BUILTIN_NOTES


_SIMPLE_VAR = re.compile(r"\{(\w+)\}")
_DEFAULT_VAR = re.compile(r"\{(\w+):([^}]*)\}")


@dataclass(frozen=True)
class Template:
    """
    A response template with variable substitution support.

    Attributes:
        content (str): Template content with placeholders
        name (str): Optional template name
    """
    content: str
    name: str = ""

    def render(self, context: Optional[Dict[str, Any]] = None) -> str:
        """
        Render the template with context variables.

        Placeholders without a value and without a default are left
        untouched. Empty context values count as missing.

        Args:
            context: Dictionary of variable values

        Returns:
            Rendered string
        """
        context = {k: v for k, v in (context or {}).items() if v not in (None, "")}

        def replace_simple(match):
            var_name = match.group(1)
            if var_name in context:
                return str(context[var_name])
            return match.group(0)

        def replace_default(match):
            var_name = match.group(1)
            if var_name in context:
                return str(context[var_name])
            return match.group(2)

        result = _DEFAULT_VAR.sub(replace_default, self.content)
        return _SIMPLE_VAR.sub(replace_simple, result)

    def extract_variables(self) -> List[str]:
        """
        Extract all variable names from template.

        Returns:
            Sorted list of variable names
        """
        names = set(_SIMPLE_VAR.findall(self.content))
        names.update(name for name, _ in _DEFAULT_VAR.findall(self.content))
        return sorted(names)


class TemplateManager:
    """
    Manager for named templates.

    Rules loaded from YAML may reference a template by name instead of
    carrying the full text inline.

    Example:
        manager = TemplateManager.with_builtins()
        manager.render("consultation_summary", {"patient_name": "Jane Doe"})
    """

    def __init__(self):
        self.templates: Dict[str, Template] = {}

    @classmethod
    def with_builtins(cls) -> "TemplateManager":
        """Create a manager preloaded with the built-in consultation notes."""
        manager = cls()
        manager.load_from_dict(BUILTIN_NOTES)
        return manager

    def add_template(self, name: str, content: str) -> None:
        """Add or replace a named template."""
        self.templates[name] = Template(content=content, name=name)

    def get_template(self, name: str) -> Optional[Template]:
        """Get a template by name, or None."""
        return self.templates.get(name)

    def render(self, name: str, context: Optional[Dict] = None) -> Optional[str]:
        """
        Render a template by name.

        Returns:
            Rendered string or None if template not found
        """
        template = self.get_template(name)
        if template:
            return template.render(context)
        return None

    def has_template(self, name: str) -> bool:
        return name in self.templates

    def list_templates(self) -> List[str]:
        return list(self.templates.keys())

    def load_from_dict(self, data: Dict[str, str]) -> None:
        for name, content in data.items():
            self.add_template(name, content)
