from typing import AbstractSet, List, Optional
from loguru import logger

from ..errors import MissingQuizError, MissingStudyAidError, SelectionError
from ..schemas import OutputType, QuizQuestion, StudyAids
from ..settings import settings
from .llm import GenerationClient
from .parse import parse_study_aids

FLASHCARD_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "question": {"type": "string", "description": "The question for the front of the flashcard."},
            "answer": {"type": "string", "description": "The answer for the back of the flashcard."},
        },
        "required": ["question", "answer"],
        "additionalProperties": False,
    },
}

QUIZ_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "question": {"type": "string", "description": "The quiz question."},
            "type": {"type": "string", "enum": ["MCQ"], "description": "Must be Multiple Choice (MCQ)."},
            "options": {
                "type": "array",
                "items": {"type": "string"},
                "description": "3-5 distinct possible answers.",
            },
            "answer": {"type": "string", "description": "The correct answer, exactly one of the options."},
        },
        "required": ["question", "type", "options", "answer"],
        "additionalProperties": False,
    },
}

_SCHEMAS = {OutputType.FLASHCARDS: FLASHCARD_SCHEMA, OutputType.QUIZ: QUIZ_SCHEMA}
# fixed order so prompts and schemas do not depend on set iteration order
_ORDER = (OutputType.FLASHCARDS, OutputType.QUIZ)


def _ordered(kinds: AbstractSet[OutputType]) -> List[OutputType]:
    return [k for k in _ORDER if k in kinds]


def truncate_text(text: str, limit: Optional[int] = None) -> str:
    limit = settings.MAX_TEXT_CHARS if limit is None else limit
    return text if len(text) <= limit else text[:limit]


def build_response_schema(kinds: AbstractSet[OutputType]) -> dict:
    ordered = _ordered(kinds)
    return {
        "type": "object",
        "properties": {k.key: _SCHEMAS[k] for k in ordered},
        "required": [k.key for k in ordered],
        "additionalProperties": False,
    }


def build_prompt(text: str, kinds: AbstractSet[OutputType]) -> str:
    requested = ", ".join(k.value for k in _ordered(kinds))
    return (
        "You are an expert academic assistant. Your task is to analyze the following text "
        f"and generate the specified study materials: {requested}.\n\n"
        "For any quiz requested, you must ONLY generate unique Multiple Choice Questions (MCQ). "
        "Each question must be different from the others, have between 3 and 5 distinct options, "
        "and have exactly one correct answer that appears verbatim in its options list.\n\n"
        "Ensure the generated content is accurate and derived only from the provided text. "
        "Format your entire response as a single JSON object that strictly adheres to the provided "
        "schema. Do not include any explanatory text, markdown formatting, or anything outside of "
        "the JSON object.\n\n"
        f"Text to analyze:\n---\n{text}\n---\n"
    )


async def generate_study_aids(
    client: GenerationClient,
    text: str,
    kinds: AbstractSet[OutputType],
    max_chars: Optional[int] = None,
) -> StudyAids:
    if not kinds:
        raise SelectionError("Please select at least one output type.")
    text = truncate_text(text, max_chars)
    raw = await client.complete(build_prompt(text, kinds), build_response_schema(kinds))
    aids = parse_study_aids(raw, kinds)
    logger.info(
        f"[generate] kinds={[k.value for k in _ordered(kinds)]} chars={len(text)} "
        f"flashcards={len(aids.flashcards or [])} quiz={len(aids.quiz or [])}"
    )
    return aids


async def regenerate_quiz(
    client: GenerationClient, text: str, max_chars: Optional[int] = None
) -> List[QuizQuestion]:
    try:
        aids = await generate_study_aids(client, text, {OutputType.QUIZ}, max_chars)
    except MissingStudyAidError as e:
        raise MissingQuizError() from e
    if not aids.quiz:
        raise MissingQuizError()
    return aids.quiz


def merge_quiz(results: Optional[StudyAids], quiz: List[QuizQuestion]) -> StudyAids:
    flashcards = results.flashcards if results else None
    return StudyAids(flashcards=flashcards, quiz=quiz)
