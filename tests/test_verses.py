from datetime import date

import requests

from churchecker.modules.verses import service as verse_service
from churchecker.modules.verses.gemini_client import GeminiClient, parse_verse
from churchecker.modules.verses.service import FALLBACK_VERSES, VerseService

TODAY = date(2026, 10, 19)


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.ok = status_code < 400
        self.payload = payload

    def json(self):
        if self.payload is None:
            raise ValueError("no JSON body")
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def gemini_reply(text):
    return FakeResponse(payload={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def test_parse_verse():
    text = "구절: 여호와는 나의 목자시니\n출처: 시편 23:1\n"
    assert parse_verse(text) == ("여호와는 나의 목자시니", "시편 23:1")
    assert parse_verse("구절: 본문만 있음") is None
    assert parse_verse("") is None


def test_gemini_client_sends_key_and_parses_reply():
    session = FakeSession(gemini_reply("구절: 항상 기뻐하라\n출처: 데살로니가전서 5:16"))
    client = GeminiClient(api_key="k", model="gemini-pro", session=session)
    assert client.generate_verse() == ("항상 기뻐하라", "데살로니가전서 5:16")
    url, kwargs = session.calls[0]
    assert url.endswith("/models/gemini-pro:generateContent")
    assert kwargs["params"] == {"key": "k"}
    assert kwargs["json"]["generationConfig"]["temperature"] == 0.9


def test_gemini_client_failures_return_none():
    assert GeminiClient(api_key="", session=FakeSession()).generate_verse() is None
    assert GeminiClient(api_key="k", session=FakeSession(FakeResponse(500))).generate_verse() is None
    assert GeminiClient(api_key="k", session=FakeSession(error=requests.ConnectionError("down"))).generate_verse() is None
    assert GeminiClient(api_key="k", session=FakeSession(FakeResponse(payload={"candidates": []}))).generate_verse() is None
    assert GeminiClient(api_key="k", session=FakeSession(gemini_reply("아무 말"))).generate_verse() is None


def test_generated_verse_is_stored_once_per_day(fake, monkeypatch):
    monkeypatch.setattr(verse_service, "today_local", lambda: TODAY)
    session = FakeSession(gemini_reply("구절: 쉬지 말고 기도하라\n출처: 데살로니가전서 5:17"))
    service = VerseService(fake, GeminiClient(api_key="k", session=session))

    verse = service.get_daily_verse()
    assert verse.source == "gemini"
    assert verse.reference == "데살로니가전서 5:17"

    again = service.get_daily_verse()
    assert again == verse
    assert len(session.calls) == 1
    assert len(fake.rows("daily_verses", verse_date="2026-10-19")) == 1


def test_fallback_when_gemini_unavailable(fake, monkeypatch):
    monkeypatch.setattr(verse_service, "today_local", lambda: TODAY)
    service = VerseService(fake, GeminiClient(api_key=""), choose=lambda verses: verses[1])
    verse = service.get_daily_verse()
    assert verse.source == "fallback"
    assert (verse.text, verse.reference) == FALLBACK_VERSES[1]
    assert fake.rows("daily_verses")[0]["source"] == "fallback"


def test_store_failure_still_serves_verse(fake, monkeypatch):
    monkeypatch.setattr(verse_service, "today_local", lambda: TODAY)
    fake.fail_on("daily_verses", "insert")
    service = VerseService(fake, GeminiClient(api_key=""), choose=lambda verses: verses[0])
    verse = service.get_daily_verse()
    assert (verse.text, verse.reference) == FALLBACK_VERSES[0]
    assert fake.rows("daily_verses") == []


def test_backend_failure_falls_back(fake, monkeypatch):
    monkeypatch.setattr(verse_service, "today_local", lambda: TODAY)
    fake.fail_on("daily_verses", "select")
    service = VerseService(fake, GeminiClient(api_key=""), choose=lambda verses: verses[2])
    assert service.get_daily_verse().reference == FALLBACK_VERSES[2][1]


def test_daily_verse_route_needs_no_sign_in(client, fake):
    fake.seed("daily_verses", {
        "verse_date": verse_service.today_local().isoformat(),
        "verse_text": "여호와는 나의 목자시니",
        "verse_reference": "시편 23:1",
        "source": "gemini",
    })
    response = client.get("/api/v1/daily-verse")
    assert response.status_code == 200
    assert response.json() == {"text": "여호와는 나의 목자시니", "reference": "시편 23:1", "source": "gemini"}
