"""Tests for the prompt registry and the bundled comic templates."""

import pytest

from src.prompts import TEMPLATES_DIR
from src.utils.prompt_registry import PromptRegistry
from src.utils.prompt_template import PromptTemplateError


class TestBundledTemplates:
    """Tests against the templates shipped in src/prompts/templates."""

    @pytest.fixture
    def registry(self):
        """Registry over the bundled templates."""
        return PromptRegistry()

    def test_defaults_to_bundled_directory(self, registry):
        """No argument means the package templates."""
        assert registry.templates_dir == TEMPLATES_DIR

    @pytest.mark.parametrize("task", ["system", "next_panel", "panel_image"])
    def test_comic_templates_present(self, registry, task):
        """All three comic templates load."""
        template = registry.get("comic", task)
        assert template.key == f"comic/{task}"
        assert template.validate() == []

    def test_system_prompt_rules(self, registry):
        """The system prompt carries the caption limit and the choice rule."""
        prompt = registry.render_system("comic", max_caption_words=50)
        assert "under 50 words" in prompt
        assert "CAMERA ANGLE" in prompt
        assert "exactly 2 distinct choices" in prompt

    def test_unknown_template(self, registry):
        """Unknown role/task lists the available keys."""
        with pytest.raises(PromptTemplateError, match="comic/next_panel"):
            registry.get("comic", "epilogue")


class TestCustomDirectory:
    """Tests with a temporary templates directory."""

    def test_loads_nested_yaml(self, tmp_path):
        """Templates in role subdirectories are keyed by role/task."""
        role_dir = tmp_path / "narrator"
        role_dir.mkdir()
        (role_dir / "intro.yaml").write_text(
            'name: intro\nversion: "1"\nrole: narrator\ntask: intro\ntemplate: "Once upon"\n'
        )

        registry = PromptRegistry(tmp_path)

        assert registry.render("narrator", "intro") == "Once upon"

    def test_broken_file_skipped(self, tmp_path):
        """A file that fails to load does not stop the others."""
        (tmp_path / "good.yaml").write_text(
            'name: good\nversion: "1"\nrole: r\ntask: good\ntemplate: ok\n'
        )
        (tmp_path / "bad.yaml").write_text("name: [oops")

        registry = PromptRegistry(tmp_path)

        assert registry.render("r", "good") == "ok"
        with pytest.raises(PromptTemplateError, match=r"Available templates: \['r/good'\]"):
            registry.get("r", "bad")

    def test_missing_directory(self, tmp_path):
        """A missing directory yields an empty registry."""
        registry = PromptRegistry(tmp_path / "absent")
        with pytest.raises(PromptTemplateError, match=r"Available templates: \[\]"):
            registry.get("comic", "system")
