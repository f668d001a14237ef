"""Video transcripts (YouTube) for recipe extraction."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

from youtube_transcript_api import YouTubeTranscriptApi

from ..errors import RecoverableInputError
from ..settings import settings

logger = logging.getLogger("cooklog.extract")

VIDEO_HOSTS = ("youtube.com", "youtu.be")
THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

_VIDEO_ID_RE = re.compile(r"(?:[?&]v=|youtu\.be/|/shorts/|/embed/)([^&?#/]+)")

NO_TRANSCRIPT_MESSAGE = (
    "Could not fetch a transcript for this video. Check that captions are enabled."
)


@dataclass
class VideoSource:
    video_id: str
    text: str
    thumbnail_url: str


def is_video_url(url: str) -> bool:
    lowered = url.lower()
    return any(host in lowered for host in VIDEO_HOSTS)


def parse_video_id(url: str) -> Optional[str]:
    match = _VIDEO_ID_RE.search(url)
    return match.group(1) if match else None


def thumbnail_for(video_id: str) -> str:
    return THUMBNAIL_URL.format(video_id=video_id)


def fetch_transcript_text(video_id: str, languages: Optional[list[str]] = None) -> str:
    """Blocking fetch. Fragments are joined with single spaces in spoken order."""
    fetched = YouTubeTranscriptApi().fetch(video_id, languages=languages or settings.transcript_languages)
    return " ".join(snippet.text for snippet in fetched)


async def load_video(url: str) -> VideoSource:
    video_id = parse_video_id(url)
    if not video_id:
        raise RecoverableInputError(NO_TRANSCRIPT_MESSAGE)

    try:
        text = await asyncio.to_thread(fetch_transcript_text, video_id)
    except Exception as e:
        logger.warning("Transcript fetch failed for %s: %s", video_id, e)
        raise RecoverableInputError(NO_TRANSCRIPT_MESSAGE) from e

    return VideoSource(video_id=video_id, text=text, thumbnail_url=thumbnail_for(video_id))
