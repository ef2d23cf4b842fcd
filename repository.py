"""
Question repository - fetches the question source (file or URL), normalizes it
and holds the resulting master list. A reload replaces the list wholesale.
"""

import asyncio
import json
from pathlib import Path
from typing import Tuple

import httpx
from loguru import logger

from quiz import Question, normalize_questions


NO_STORE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


def is_url(source) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


async def fetch_questions(source, transport=None):
    """
    Fetch and parse the raw question document.
    URLs are requested with caching disabled; anything else is read as a file.
    """
    if is_url(source):
        async with httpx.AsyncClient(timeout=None, transport=transport) as client:
            r = await client.get(str(source), headers=NO_STORE_HEADERS)
            r.raise_for_status()
            return r.json()

    text = Path(source).read_text(encoding="utf-8")
    return json.loads(text)


class QuestionRepository:
    """Holds the normalized, immutable master list of questions."""

    def __init__(self, questions=()):
        self._questions: Tuple[Question, ...] = tuple(questions)
        self.source = None

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    def __len__(self):
        return len(self._questions)

    def is_empty(self) -> bool:
        return not self._questions

    def load(self, source, transport=None) -> int:
        """
        (Re)load from a source. Failures are logged and leave the repository empty.
        Returns the number of questions loaded.
        """
        self.source = source
        try:
            data = asyncio.run(fetch_questions(source, transport=transport))
        except (OSError, ValueError, httpx.HTTPError) as e:
            logger.error(f"[quiz] Failed to load questions from {source}: {e}")
            self._questions = ()
            return 0

        if not isinstance(data, list):
            logger.error(f"[quiz] {source} is not an array")
            self._questions = ()
            return 0

        self._questions = tuple(normalize_questions(data))
        logger.info(f"[quiz] Loaded {len(self._questions)} questions from {source}")
        return len(self._questions)
