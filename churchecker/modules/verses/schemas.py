from pydantic import BaseModel
from typing import Literal

VerseSource = Literal["gemini", "fallback"]


class VerseResponse(BaseModel):
    text: str
    reference: str
    source: VerseSource
