"""Prompt templates package.

This package contains YAML-based prompt templates rendered with Jinja2.
Templates are organized by role under templates/.

Directory structure:
    prompts/
    ├── __init__.py
    └── templates/
        └── comic/
            ├── system.yaml       # Writer/director persona and panel rules
            ├── next_panel.yaml   # Per-turn script request
            └── panel_image.yaml  # Image prompt for an approved panel
"""

from pathlib import Path

# Path to templates directory
TEMPLATES_DIR = Path(__file__).parent / "templates"
