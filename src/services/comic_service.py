"""Comic service - the generative client behind every turn.

Builds the script and image prompts from the story so far and runs them
against Gemini:

- generate_segment(): narrative caption, visual direction and two choices
- generate_image(): panel artwork as a data URL, or a placeholder when the
  provider answers without an image
"""

import base64
import logging
from collections.abc import Sequence
from typing import Protocol

from pydantic import BaseModel, Field

from src.memory.story_state import StoryContext, StoryPage
from src.settings import Settings
from src.utils.exceptions import GenerationError, LLMError, RenderError
from src.utils.prompt_registry import PromptRegistry

from . import llm_client

logger = logging.getLogger(__name__)

# Shown in place of the panel when Gemini answers without image data
IMAGE_GENERATION_FAILED_PLACEHOLDER = (
    "https://placehold.co/1024x1024/1a1a1a/FFF?text=Image+Generation+Failed"
)

MAX_CAPTION_WORDS = 50
PROMPT_ROLE = "comic"


class StorySegment(BaseModel):
    """Structured script returned by the text model for one panel."""

    narrative: str = Field(description="The story text/caption for this panel.")
    visual_description: str = Field(
        description=(
            "A detailed visual prompt for the image generator. "
            "MUST start with the Camera Angle and Action."
        )
    )
    choices: list[str] = Field(
        min_length=2,
        max_length=2,
        description="Two distinct actions for the protagonist.",
    )


class ComicClient(Protocol):
    """The two remote operations a turn can issue."""

    def generate_segment(
        self, history: Sequence[StoryPage], instruction: str, context: StoryContext
    ) -> StorySegment:
        """Generate the next panel script."""
        ...

    def generate_image(self, visual_description: str, art_style: str) -> str:
        """Render a panel and return an image reference."""
        ...


def format_history(history: Sequence[StoryPage]) -> str:
    """Render committed pages as one prompt line per panel.

    Args:
        history: Pages in story order.

    Returns:
        Newline-joined ``[PANEL n] Narrative: ... | Visual Action: ... | Reader Choice: ...``
        lines; an empty string for an empty history.
    """
    return "\n".join(
        f'[PANEL {index}] Narrative: "{page.narrative}" | '
        f'Visual Action: "{page.visual_description}" | '
        f'Reader Choice: "{page.user_choice or "None"}"'
        for index, page in enumerate(history, start=1)
    )


def to_data_url(data: bytes, mime_type: str | None) -> str:
    """Encode raw image bytes as a data URL the browser can display directly."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or 'image/png'};base64,{encoded}"


class ComicService:
    """Gemini-backed implementation of ComicClient.

    Usage:
        comic = ComicService(settings)
        segment = comic.generate_segment([], OPENING_INSTRUCTION, context)
        image_url = comic.generate_image(segment.visual_description, context.art_style)
    """

    def __init__(self, settings: Settings, registry: PromptRegistry | None = None):
        """Initialize comic service.

        Args:
            settings: Application settings (models, temperature, timeout).
            registry: Prompt registry; loads the bundled templates if omitted.
        """
        self.settings = settings
        self.registry = registry or PromptRegistry()

    def build_segment_prompt(
        self, history: Sequence[StoryPage], instruction: str, context: StoryContext
    ) -> str:
        """Render the user prompt for the next panel script."""
        return self.registry.render(
            PROMPT_ROLE,
            "next_panel",
            character_name=context.character_name,
            character_description=context.character_description,
            plot_summary=context.plot_summary,
            art_style=context.art_style,
            history_text=format_history(history),
            instruction=instruction,
            panel_number=len(history) + 1,
        )

    def build_image_prompt(self, visual_description: str, art_style: str) -> str:
        """Render the image prompt; the visual direction comes first, then the style."""
        return self.registry.render(
            PROMPT_ROLE,
            "panel_image",
            visual_description=visual_description,
            art_style=art_style,
        )

    def generate_segment(
        self, history: Sequence[StoryPage], instruction: str, context: StoryContext
    ) -> StorySegment:
        """Generate narrative, visual direction and two choices for the next panel.

        Args:
            history: Committed pages, including any choice just recorded.
            instruction: Opening instruction or the reader's chosen option.
            context: Story premise.

        Returns:
            Validated StorySegment.

        Raises:
            ConfigError: If the API key is missing.
            GenerationError: On transport, timeout or parse failure.
        """
        prompt = self.build_segment_prompt(history, instruction, context)
        system_prompt = self.registry.render_system(
            PROMPT_ROLE, max_caption_words=MAX_CAPTION_WORDS
        )
        logger.debug("Requesting panel %d script (%d chars)", len(history) + 1, len(prompt))

        try:
            return llm_client.generate_structured(
                self.settings,
                model=self.settings.text_model,
                prompt=prompt,
                response_model=StorySegment,
                system_prompt=system_prompt,
                temperature=self.settings.text_temperature,
            )
        except LLMError as e:
            raise GenerationError(str(e)) from e

    def generate_image(self, visual_description: str, art_style: str) -> str:
        """Render a panel image.

        Args:
            visual_description: The (possibly edited) visual direction.
            art_style: Art style from the story context.

        Returns:
            A data URL for the generated image, or IMAGE_GENERATION_FAILED_PLACEHOLDER
            when the provider answered without image data.

        Raises:
            ConfigError: If the API key is missing.
            RenderError: On transport failure or timeout.
        """
        prompt = self.build_image_prompt(visual_description, art_style)

        try:
            blob = llm_client.generate_image(self.settings, self.settings.image_model, prompt)
        except LLMError as e:
            raise RenderError(str(e)) from e

        if blob is None or not blob.data:
            logger.warning("No image in response, using placeholder")
            return IMAGE_GENERATION_FAILED_PLACEHOLDER

        return to_data_url(blob.data, blob.mime_type)
