import logging
from typing import Optional

from ..core.ai_client import ai_client
from ..core.text import clean_md
from ..errors import ConfigurationError, RecoverableInputError
from ..schemas import ExtractedRecipe, ExtractedRecipeOut
from ..settings import settings
from . import scraping, transcripts

logger = logging.getLogger("cooklog.extract")

PLACEHOLDER_TITLE = "Unnamed recipe"

SYSTEM_PROMPT = """
You are a professional recipe parser. Your job is to take raw text extracted from a web page
or a cooking video transcript and structure it as a recipe.
Output ONLY valid JSON matching the provided schema. No markdown, no prose, no code fences.
- Ignore chatter, advertisements and anything unrelated to cooking.
- amount is a number (1, 0.5, 200) or null when it cannot be expressed as one ("a pinch", "to taste").
- unit is an empty string when there is none.
- step_order starts at 1.
- timer_seconds is the wait implied by a step (simmer 10 minutes -> 600), else 0.
- Write every text value in {language}.
"""


def build_user_prompt(text: str) -> str:
    return f"Extract the recipe information from the following text:\n\n{text}"


class RecipeExtractor:
    """URL -> source text -> language model -> structured recipe. Nothing is persisted."""

    def __init__(self, client=None):
        self.client = client or ai_client

    async def _acquire(self, url: str) -> tuple[str, str, Optional[str], str]:
        """(text, fallback_title, thumbnail_url, source_kind)"""
        if transcripts.is_video_url(url):
            video = await transcripts.load_video(url)
            return video.text, "", video.thumbnail_url, "video"

        page = await scraping.load_page(url)
        return page.text, page.title, page.thumbnail_url, "page"

    async def extract(self, url) -> ExtractedRecipeOut:
        if url is not None and not isinstance(url, str):
            raise RecoverableInputError("url must be a string.")
        url = (url or "").strip()
        if not url:
            raise RecoverableInputError("A URL is required.")

        text, fallback_title, thumbnail_url, kind = await self._acquire(url)
        if not text or not text.strip():
            raise RecoverableInputError("Not enough text to extract a recipe from.")

        logger.info("Extracting recipe from %s source (%d chars): %s", kind, len(text), url)

        if not self.client.is_available():
            raise ConfigurationError("GEMINI_API_KEY is not configured on the server.")

        recipe = await self.client.generate_structured(
            prompt=build_user_prompt(text),
            response_model=ExtractedRecipe,
            system_instruction=SYSTEM_PROMPT.format(language=settings.extraction_language),
            temperature=0.1,
        )
        return self._assemble(recipe, url, thumbnail_url, fallback_title)

    def _assemble(
        self,
        recipe: ExtractedRecipe,
        source_url: str,
        thumbnail_url: Optional[str],
        fallback_title: str,
    ) -> ExtractedRecipeOut:
        title = clean_md(recipe.title or "")
        if not title:
            title = (fallback_title or "").strip() or PLACEHOLDER_TITLE

        steps = [
            step.model_copy(update={"instruction": clean_md(step.instruction)})
            for step in recipe.steps
        ]
        return ExtractedRecipeOut(
            title=title,
            difficulty=recipe.difficulty,
            servings=recipe.servings,
            ingredients=recipe.ingredients,
            steps=steps,
            source_url=source_url,
            thumbnail_url=thumbnail_url,
        )


extractor = RecipeExtractor()
