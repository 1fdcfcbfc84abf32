"""Gemini generateContent call that asks for one Bible verse in Korean."""

import logging
from typing import Optional, Tuple

import requests

from churchecker.config.settings import settings

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

VERSE_PROMPT = """오늘의 성경 구절을 하나 추천해주세요.

응답 형식:
구절: [성경 구절 내용]
출처: [책 이름 장:절]

예시:
구절: 하나님이 세상을 이처럼 사랑하사 독생자를 주셨으니 이는 그를 믿는 자마다 멸망하지 않고 영생을 얻게 하려 하심이라
출처: 요한복음 3:16

한국어 개역한글 성경을 사용하며, 실제 성경 구절만 제공해주세요. 추가 설명은 하지 마세요."""

TEXT_PREFIX = "구절:"
REFERENCE_PREFIX = "출처:"


def parse_verse(text: str) -> Optional[Tuple[str, str]]:
    """(verse text, reference) from a '구절: ... / 출처: ...' reply, or None if either is missing"""
    verse_text = ""
    reference = ""
    for line in text.strip().splitlines():
        line = line.strip()
        if line.startswith(TEXT_PREFIX):
            verse_text = line[len(TEXT_PREFIX):].strip()
        elif line.startswith(REFERENCE_PREFIX):
            reference = line[len(REFERENCE_PREFIX):].strip()
    if verse_text and reference:
        return verse_text, reference
    return None


class GeminiClient:
    def __init__(self, api_key: str = None, model: str = None, session: requests.Session = None):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.session = session or requests.Session()
        self.timeout = settings.http_timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def generate_verse(self) -> Optional[Tuple[str, str]]:
        """Ask Gemini for a verse; None on any failure"""
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not configured")
            return None
        body = {
            "contents": [{"parts": [{"text": VERSE_PROMPT}]}],
            "generationConfig": {"temperature": 0.9, "maxOutputTokens": 200},
        }
        try:
            response = self.session.post(
                GEMINI_URL.format(model=self.model),
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            if not response.ok:
                logger.error(f"Gemini API error: {response.status_code}")
                return None
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Gemini request failed: {e}")
            return None

        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.error("No text in Gemini response")
            return None

        verse = parse_verse(text)
        if verse is None:
            logger.warning(f"Could not parse Gemini verse reply: {text[:100]!r}")
        return verse
