from fastapi import APIRouter, Depends
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.verses.gemini_client import GeminiClient
from churchecker.modules.verses.schemas import VerseResponse
from churchecker.modules.verses.service import VerseService
from supabase import Client

router = APIRouter(prefix="/daily-verse", tags=["daily-verse"])


def get_gemini_client() -> GeminiClient:
    return GeminiClient()


def get_verse_service(
    supabase: Client = Depends(get_supabase),
    gemini: GeminiClient = Depends(get_gemini_client)
) -> VerseService:
    return VerseService(supabase, gemini)


@router.get("", response_model=VerseResponse)
async def get_daily_verse(service: VerseService = Depends(get_verse_service)):
    """Today's Bible verse (no sign-in required)"""
    return service.get_daily_verse()
