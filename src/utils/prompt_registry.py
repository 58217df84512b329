"""Central registry for prompt templates."""

import logging
from pathlib import Path
from typing import Any

from src.prompts import TEMPLATES_DIR
from src.utils.prompt_template import PromptTemplate, PromptTemplateError

logger = logging.getLogger(__name__)


class PromptRegistry:
    """Registry that loads every YAML template under the templates directory.

    Templates are organized in directories by role:
    ```
    prompts/templates/
    └── comic/
        ├── system.yaml
        ├── next_panel.yaml
        └── panel_image.yaml
    ```
    """

    def __init__(self, templates_dir: Path | str | None = None):
        """Initialize registry and load all templates.

        Args:
            templates_dir: Directory containing template YAML files.
                          Defaults to src/prompts/templates.
        """
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self._templates: dict[str, PromptTemplate] = {}
        self._load_all_templates()

    def _make_key(self, role: str, task: str) -> str:
        """Create lookup key from role and task."""
        return f"{role}/{task}"

    def _load_all_templates(self) -> None:
        """Recursively load every YAML file, keyed by role/task."""
        if not self.templates_dir.exists():
            logger.warning("Templates directory not found: %s", self.templates_dir)
            return

        yaml_files = sorted(self.templates_dir.rglob("*.yaml"))
        loaded = 0
        errors = 0

        for yaml_file in yaml_files:
            try:
                template = PromptTemplate.from_yaml(yaml_file)
            except PromptTemplateError as e:
                logger.error("Failed to load template %s: %s", yaml_file, e)
                errors += 1
                continue

            key = template.key
            if key in self._templates:
                logger.warning("Duplicate template key '%s', overwriting with %s", key, yaml_file)
            self._templates[key] = template
            loaded += 1

        logger.info("Loaded %d templates from %s (%d errors)", loaded, self.templates_dir, errors)

    def get(self, role: str, task: str) -> PromptTemplate:
        """Get a template by role and task.

        Raises:
            PromptTemplateError: If template not found.
        """
        key = self._make_key(role, task)
        template = self._templates.get(key)

        if template is None:
            available = sorted(self._templates.keys())
            raise PromptTemplateError(f"Template not found: {key}. Available templates: {available}")

        return template

    def render(self, role: str, task: str, **kwargs: Any) -> str:
        """Render a template with variables.

        Raises:
            PromptTemplateError: If template not found or rendering fails.
        """
        return self.get(role, task).render(**kwargs)

    def render_system(self, role: str, **kwargs: Any) -> str:
        """Render the system prompt (task="system") for a role."""
        return self.render(role, "system", **kwargs)
