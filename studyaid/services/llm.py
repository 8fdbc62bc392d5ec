import asyncio, json
from typing import Optional
from openai import OpenAI, OpenAIError
from loguru import logger

from ..errors import ConfigurationError, GenerationError
from ..settings import Settings, check_config

MOCK_FLASHCARDS = [
    {"question": "What is latency?", "answer": "The delay before a data transfer begins."},
    {"question": "What are the three steps of the TCP handshake?", "answer": "SYN, SYN-ACK, ACK."},
]
MOCK_QUIZ = [
    {
        "question": "Which layer handles routing on the Internet?",
        "type": "MCQ",
        "options": ["Physical", "Data Link", "Network", "Transport"],
        "answer": "Network",
    },
]


class GenerationClient:
    """One structured-output round trip to the generative service."""

    def __init__(self, *, model: str, api_key: Optional[str] = None, mock: bool = False):
        self.model = model
        self.mock = mock
        self._client = None if mock else OpenAI(api_key=api_key)

    @classmethod
    def from_settings(cls, s: Settings) -> "GenerationClient":
        report = check_config(s)
        if not report.ok:
            for p in report.problems:
                logger.error(f"[config] {p}")
            raise ConfigurationError("; ".join(report.problems))
        return cls(model=s.OPENAI_MODEL, api_key=s.OPENAI_API_KEY, mock=s.MOCK_MODE)

    def _mock(self, schema: dict) -> str:
        keys = schema.get("properties", {})
        out = {}
        if "flashcards" in keys:
            out["flashcards"] = MOCK_FLASHCARDS
        if "quiz" in keys:
            out["quiz"] = MOCK_QUIZ
        return json.dumps(out)

    def _complete_sync(self, prompt: str, schema: dict, *, temperature: float = 0.2) -> str:
        if self.mock:
            return self._mock(schema)
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": "study_aids", "schema": schema, "strict": True},
                },
            )
        except OpenAIError as e:
            logger.warning(f"[llm] request failed: {type(e).__name__}: {e}")
            raise GenerationError() from e
        return resp.choices[0].message.content or ""

    async def complete(self, prompt: str, schema: dict, **kw) -> str:
        return await asyncio.to_thread(self._complete_sync, prompt, schema, **kw)
