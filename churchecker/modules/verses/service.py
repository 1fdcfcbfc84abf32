from supabase import Client
from datetime import date
from churchecker.core.db_utils import first_row
from churchecker.core.timeutils import today_local
from churchecker.modules.verses.gemini_client import GeminiClient
from churchecker.modules.verses.schemas import VerseResponse
from typing import Callable, Optional, Sequence
import logging
import random

logger = logging.getLogger(__name__)

FALLBACK_VERSES = (
    ("하나님이 세상을 이처럼 사랑하사 독생자를 주셨으니 이는 그를 믿는 자마다 멸망하지 않고 영생을 얻게 하려 하심이라", "요한복음 3:16"),
    ("여호와는 나의 목자시니 내게 부족함이 없으리로다", "시편 23:1"),
    ("너는 마음을 다하여 여호와를 신뢰하고 네 명철을 의지하지 말라", "잠언 3:5"),
    ("내가 주께 바라는 것은 오직 한 가지 일이니 곧 내가 내 생전에 여호와의 집에 살면서 여호와의 아름다움을 바라보며 그의 성전에서 사모하는 그것이라", "시편 27:4"),
    ("수고하고 무거운 짐 진 자들아 다 내게로 오라 내가 너희를 쉬게 하리라", "마태복음 11:28"),
)


class VerseService:
    def __init__(
        self,
        supabase: Client,
        gemini: Optional[GeminiClient] = None,
        choose: Callable[[Sequence], tuple] = random.choice
    ):
        self.supabase = supabase
        self.gemini = gemini or GeminiClient()
        self.choose = choose

    def fallback_verse(self) -> VerseResponse:
        text, reference = self.choose(FALLBACK_VERSES)
        return VerseResponse(text=text, reference=reference, source="fallback")

    def _cached_verse(self, day: date) -> Optional[VerseResponse]:
        row = first_row(
            self.supabase.table("daily_verses")
            .select("*")
            .eq("verse_date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not row:
            return None
        return VerseResponse(text=row["verse_text"], reference=row["verse_reference"], source=row["source"])

    def _store_verse(self, day: date, verse: VerseResponse) -> None:
        """Persist today's verse; a failure is logged and the verse is still served"""
        try:
            self.supabase.table("daily_verses").insert({
                "verse_date": day.isoformat(),
                "verse_text": verse.text,
                "verse_reference": verse.reference,
                "source": verse.source,
            }).execute()
        except Exception as e:
            logger.error(f"Error saving daily verse for {day}: {e}")

    def get_daily_verse(self) -> VerseResponse:
        """Today's verse: cached row, else Gemini, else a random fallback"""
        try:
            day = today_local()
            cached = self._cached_verse(day)
            if cached:
                return cached

            generated = self.gemini.generate_verse()
            if generated:
                verse = VerseResponse(text=generated[0], reference=generated[1], source="gemini")
            else:
                logger.warning("Using fallback daily verse")
                verse = self.fallback_verse()

            self._store_verse(day, verse)
            return verse
        except Exception as e:
            logger.error(f"Error in daily verse: {e}")
            return self.fallback_verse()
