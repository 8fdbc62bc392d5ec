"""
Shared fixtures: a manual clock for the flashcard transitions, a scripted
generation client, and small PDFs built with PyMuPDF.
"""
import json
import random

import fitz
import pytest
from fastapi.testclient import TestClient

from studyaid.main import create_app
from studyaid.settings import Settings
from studyaid.state.controller import StudyController

FLASHCARDS = [
    {"question": "What do mitochondria produce?", "answer": "ATP"},
    {"question": "Where is DNA stored?", "answer": "The nucleus"},
    {"question": "What does the cell membrane regulate?", "answer": "What enters and leaves the cell"},
]
QUIZ = [
    {"question": "Powerhouse of the cell?", "type": "MCQ",
     "options": ["Nucleus", "Mitochondria", "Ribosome"], "answer": "Mitochondria"},
    {"question": "Where is DNA stored?", "type": "MCQ",
     "options": ["Nucleus", "Golgi", "Vacuole", "Lysosome"], "answer": "Nucleus"},
]


class ManualScheduler:
    def __init__(self):
        self.now = 0.0
        self._timers = []
        self._seq = 0

    def call_later(self, delay, callback):
        self._seq += 1
        timer = _Timer(self.now + delay, self._seq, callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self):
        return len([t for t in self._timers if not t.cancelled])

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = sorted(
                # tolerance for float accumulation of repeated delays
                (t for t in self._timers if not t.cancelled and t.due <= target + 1e-9),
                key=lambda t: (t.due, t.seq),
            )
            if not due:
                break
            timer = due[0]
            self._timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target


class _Timer:
    def __init__(self, due, seq, callback):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClient:
    """Answers with queued payloads, or with whatever keys the schema asks for."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def complete(self, prompt, schema, **kw):
        self.calls.append((prompt, schema))
        if self.responses:
            r = self.responses.pop(0)
        else:
            keys = schema["properties"]
            r = {}
            if "flashcards" in keys:
                r["flashcards"] = FLASHCARDS
            if "quiz" in keys:
                r["quiz"] = QUIZ
        if isinstance(r, Exception):
            raise r
        return r if isinstance(r, str) else json.dumps(r)


def make_pdf(*pages):
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def pdf_bytes():
    return make_pdf("Cells are the basic unit of life", "Mitochondria produce ATP")


@pytest.fixture
def controller(fake_client, scheduler):
    return StudyController(
        fake_client,
        scheduler,
        max_upload_bytes=20 * 1024 * 1024,
        max_text_chars=100_000,
        transition_seconds=0.3,
        rng=random.Random(7),
    )


@pytest.fixture
def test_settings():
    return Settings(MOCK_MODE=True, RATE_LIMIT="1000/minute", _env_file=None)


@pytest.fixture
def client(test_settings, controller):
    app = create_app(test_settings, controller=controller)
    with TestClient(app) as c:
        yield c
