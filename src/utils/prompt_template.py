"""YAML prompt templates rendered with Jinja2.

A template file declares where it belongs (``role``/``task``), a version,
the Jinja2 text, and the variables the text reads:

```yaml
role: comic
task: panel_image
version: "1.0"
template: |-
  {{ visual_description }}. Comic book panel...
variables:
  required: [visual_description]
  optional: [art_style]
```

Every variable the text reads must be declared, so a template and the code
that renders it cannot drift apart silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError, meta

from src.utils.exceptions import InfiniteComicError

logger = logging.getLogger(__name__)

_JINJA_ENV = Environment(undefined=StrictUndefined, keep_trailing_newline=False)

REQUIRED_FIELDS = ("version", "role", "task", "template")


class PromptTemplateError(InfiniteComicError):
    """A template could not be loaded or rendered."""


@dataclass
class PromptTemplate:
    """One prompt, addressed by ``role/task``."""

    name: str
    version: str
    role: str
    task: str
    template: str
    description: str = ""
    required_variables: list[str] = field(default_factory=list)
    optional_variables: list[str] = field(default_factory=list)
    is_system_prompt: bool = False

    @property
    def key(self) -> str:
        """Registry key, e.g. ``comic/next_panel``."""
        return f"{self.role}/{self.task}"

    def render(self, **variables: Any) -> str:
        """Render with the given variables. Undeclared optionals render as None.

        Raises:
            PromptTemplateError: If a required variable is missing or rendering fails.
        """
        missing = sorted(set(self.required_variables) - variables.keys())
        if missing:
            raise PromptTemplateError(f"Missing required variables for '{self.key}': {missing}")

        values = dict.fromkeys(self.optional_variables) | variables
        try:
            rendered = _JINJA_ENV.from_string(self.template).render(**values)
        except UndefinedError as e:
            raise PromptTemplateError(f"Undefined variable in '{self.key}': {e}") from e
        except TemplateSyntaxError as e:
            raise PromptTemplateError(f"Syntax error in '{self.key}': {e}") from e
        logger.debug("Rendered '%s' v%s (%d chars)", self.key, self.version, len(rendered))
        return rendered

    def validate(self) -> list[str]:
        """Check the template against its declaration.

        Returns:
            Error messages, empty when the template is usable.
        """
        errors = [
            f"'{name}' is required" for name in REQUIRED_FIELDS if not getattr(self, name)
        ]
        if not self.template:
            return errors

        try:
            used = meta.find_undeclared_variables(_JINJA_ENV.parse(self.template))
        except TemplateSyntaxError as e:
            errors.append(f"Invalid Jinja2 syntax: {e}")
            return errors

        undeclared = used - set(self.required_variables) - set(self.optional_variables)
        if undeclared:
            errors.append(f"Variables used but not declared: {sorted(undeclared)}")
        return errors

    @classmethod
    def from_yaml(cls, path: Path) -> PromptTemplate:
        """Load and validate a template file.

        Raises:
            PromptTemplateError: If the file is missing, unparseable or invalid.
        """
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise PromptTemplateError(f"Template file not found: {path}") from e
        except OSError as e:
            raise PromptTemplateError(f"Cannot read template file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise PromptTemplateError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise PromptTemplateError(f"Invalid template format in {path}: expected a mapping")

        variables = data.get("variables") or {}
        if not isinstance(variables, dict) or not all(
            isinstance(variables.get(kind, []), list) for kind in ("required", "optional")
        ):
            raise PromptTemplateError(
                f"Invalid 'variables' in {path}: expected lists under 'required'/'optional'"
            )

        template = cls(
            name=data.get("name", path.stem),
            version=str(data.get("version", "")),
            role=data.get("role", ""),
            task=data.get("task", path.stem),
            template=data.get("template", ""),
            description=data.get("description", ""),
            required_variables=variables.get("required", []),
            optional_variables=variables.get("optional", []),
            is_system_prompt=data.get("is_system_prompt", False),
        )

        errors = template.validate()
        if errors:
            raise PromptTemplateError(f"Invalid template in {path}: {'; '.join(errors)}")

        logger.debug("Loaded '%s' v%s from %s", template.key, template.version, path.name)
        return template

    def __str__(self) -> str:
        """Return string representation."""
        return f"PromptTemplate({self.key} v{self.version})"
