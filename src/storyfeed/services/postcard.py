"""Postcard rendering for stories.

The default renderer writes a small SVG card per story and returns the URL it
will be served from. Deployments with a real image pipeline replace the
``get_postcard_renderer`` dependency.
"""

from __future__ import annotations

import asyncio
import logging
import textwrap
from functools import lru_cache
from pathlib import Path
from xml.sax.saxutils import escape

from storyfeed.core.settings import settings
from storyfeed.models import Story

logger = logging.getLogger(__name__)

CARD_WIDTH = 600
CARD_HEIGHT = 400
LINE_CHARS = 48
MAX_LINES = 12


class PostcardRenderer:
    """Render story postcards into a directory."""

    def __init__(self, directory: str | Path, url_prefix: str) -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def filename(self, story: Story) -> str:
        return f"{story.id}.svg"

    def url_for(self, story: Story) -> str:
        """Return the public URL of the story's postcard."""
        return f"{self.url_prefix}/{self.filename(story)}"

    def to_svg(self, story: Story) -> str:
        lines = textwrap.wrap(story.content or "", LINE_CHARS)[:MAX_LINES]
        tspans = "".join(
            f'<tspan x="40" dy="{0 if i == 0 else 26}">{escape(line)}</tspan>'
            for i, line in enumerate(lines)
        )
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{CARD_WIDTH}" '
            f'height="{CARD_HEIGHT}" viewBox="0 0 {CARD_WIDTH} {CARD_HEIGHT}">'
            '<rect width="100%" height="100%" fill="#fdf6e3"/>'
            f'<text x="40" y="60" font-family="serif" font-size="20" fill="#333">{tspans}</text>'
            "</svg>"
        )

    def _write(self, story: Story) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / self.filename(story)).write_text(self.to_svg(story), encoding="utf-8")

    async def render(self, story: Story) -> str:
        """Write the postcard and return its URL.

        Raises:
            OSError: If the card cannot be written.
        """
        await asyncio.to_thread(self._write, story)
        logger.debug("Rendered postcard for story %s", story.id)
        return self.url_for(story)


@lru_cache(maxsize=1)
def get_postcard_renderer() -> PostcardRenderer:
    """Return the shared postcard renderer."""
    return PostcardRenderer(settings.postcard_dir, settings.postcard_url_prefix)
