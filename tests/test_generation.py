"""
Tests for the generation request/response contract
"""
import asyncio
import json

import pytest

from conftest import FLASHCARDS, QUIZ, FakeClient
from studyaid.errors import (
    ConfigurationError,
    InvalidAIResponseError,
    MissingQuizError,
    MissingStudyAidError,
    SelectionError,
)
from studyaid.schemas import Flashcard, OutputType, QuizQuestion, StudyAids
from studyaid.services.generation import (
    build_prompt,
    build_response_schema,
    generate_study_aids,
    merge_quiz,
    regenerate_quiz,
    truncate_text,
)
from studyaid.services.llm import GenerationClient
from studyaid.services.parse import parse_study_aids
from studyaid.settings import Settings, check_config

BOTH = {OutputType.FLASHCARDS, OutputType.QUIZ}


class TestSchemaAndPrompt:
    def test_schema_only_has_requested_keys(self):
        assert list(build_response_schema({OutputType.FLASHCARDS})["properties"]) == ["flashcards"]
        assert list(build_response_schema({OutputType.QUIZ})["properties"]) == ["quiz"]
        schema = build_response_schema(BOTH)
        assert list(schema["properties"]) == ["flashcards", "quiz"]
        assert schema["required"] == ["flashcards", "quiz"]

    def test_quiz_type_fixed_to_mcq(self):
        item = build_response_schema({OutputType.QUIZ})["properties"]["quiz"]["items"]
        assert item["properties"]["type"]["enum"] == ["MCQ"]
        assert set(item["required"]) == {"question", "type", "options", "answer"}

    def test_prompt_names_kinds_and_embeds_text(self):
        prompt = build_prompt("Photosynthesis needs light.", BOTH)
        assert "Flashcards, Quiz" in prompt
        assert "Photosynthesis needs light." in prompt
        assert "between 3 and 5" in prompt

    def test_truncate_is_plain_prefix(self):
        assert truncate_text("abcdef", 4) == "abcd"
        assert truncate_text("abc", 4) == "abc"


class TestParse:
    def test_code_fences_are_stripped(self):
        raw = "```json\n" + json.dumps({"flashcards": FLASHCARDS}) + "\n```"
        aids = parse_study_aids(raw, {OutputType.FLASHCARDS})
        assert aids.flashcards[0] == Flashcard(**FLASHCARDS[0])

    def test_backticks_inside_values_kept(self):
        cards = [{"question": "How do you format code in markdown?", "answer": "Wrap it in ```python\nprint(1)\n```"}]
        for raw in (json.dumps({"flashcards": cards}), "```json\n" + json.dumps({"flashcards": cards}) + "\n```"):
            aids = parse_study_aids(raw, {OutputType.FLASHCARDS})
            assert aids.flashcards[0].answer == cards[0]["answer"]

    def test_empty_requested_list_is_missing(self):
        with pytest.raises(MissingStudyAidError) as exc:
            parse_study_aids('{"flashcards": []}', {OutputType.FLASHCARDS})
        assert exc.value.key == "flashcards"

    def test_not_json(self):
        with pytest.raises(InvalidAIResponseError):
            parse_study_aids("Sure! Here are your flashcards:", {OutputType.FLASHCARDS})

    def test_unrequested_keys_dropped(self):
        raw = json.dumps({"flashcards": FLASHCARDS, "quiz": QUIZ})
        aids = parse_study_aids(raw, {OutputType.FLASHCARDS})
        assert aids.quiz is None
        assert set(aids.public()) == {"flashcards"}

    def test_missing_requested_key(self):
        with pytest.raises(MissingStudyAidError) as exc:
            parse_study_aids(json.dumps({"flashcards": FLASHCARDS}), BOTH)
        assert exc.value.key == "quiz"

    @pytest.mark.parametrize("question", [
        {"question": "Q", "type": "MCQ", "options": ["a", "b"], "answer": "a"},
        {"question": "Q", "type": "MCQ", "options": ["a", "b", "c", "d", "e", "f"], "answer": "a"},
        {"question": "Q", "type": "MCQ", "options": ["a", "a", "b"], "answer": "a"},
        {"question": "Q", "type": "MCQ", "options": ["a", "b", "c"], "answer": "z"},
        {"question": "Q", "type": "TF", "options": ["a", "b", "c"], "answer": "a"},
        {"question": "Q", "type": "MCQ", "options": ["a", "b", "c"]},
        {"question": "Q", "options": ["a", "b", "c"], "answer": "a"},
    ])
    def test_schema_violations_rejected(self, question):
        with pytest.raises(InvalidAIResponseError):
            parse_study_aids(json.dumps({"quiz": [question]}), {OutputType.QUIZ})


class TestGenerate:
    @pytest.mark.parametrize("kinds,expected", [
        ({OutputType.FLASHCARDS}, {"flashcards"}),
        ({OutputType.QUIZ}, {"quiz"}),
        (BOTH, {"flashcards", "quiz"}),
    ])
    def test_result_keys_match_requested_kinds(self, kinds, expected):
        aids = asyncio.run(generate_study_aids(FakeClient(), "some text", kinds))
        assert set(aids.public()) == expected

    def test_empty_selection_rejected_before_network(self):
        client = FakeClient()
        with pytest.raises(SelectionError):
            asyncio.run(generate_study_aids(client, "text", set()))
        assert client.calls == []

    def test_text_truncated_before_sending(self, monkeypatch):
        from studyaid.services import generation
        monkeypatch.setattr(generation.settings, "MAX_TEXT_CHARS", 10)
        client = FakeClient()
        asyncio.run(generate_study_aids(client, "0123456789ABCDEF", {OutputType.FLASHCARDS}))
        prompt, _ = client.calls[0]
        assert "0123456789" in prompt
        assert "ABCDEF" not in prompt


class TestRegenerate:
    def test_quiz_only_request(self):
        client = FakeClient()
        quiz = asyncio.run(regenerate_quiz(client, "text"))
        assert [q.answer for q in quiz] == ["Mitochondria", "Nucleus"]
        _, schema = client.calls[0]
        assert list(schema["properties"]) == ["quiz"]

    def test_missing_quiz_is_distinct_error(self):
        client = FakeClient({"flashcards": FLASHCARDS})
        with pytest.raises(MissingQuizError):
            asyncio.run(regenerate_quiz(client, "text"))

    def test_empty_quiz_is_missing(self):
        with pytest.raises(MissingQuizError):
            asyncio.run(regenerate_quiz(FakeClient({"quiz": []}), "text"))

    def test_merge_keeps_flashcards(self):
        old = StudyAids(flashcards=[Flashcard(**c) for c in FLASHCARDS], quiz=[QuizQuestion(**QUIZ[0])])
        new_quiz = [QuizQuestion(**QUIZ[1])]
        merged = merge_quiz(old, new_quiz)
        assert merged.flashcards == old.flashcards
        assert merged.quiz == new_quiz
        assert old.quiz == [QuizQuestion(**QUIZ[0])]


class TestClientConfig:
    def test_missing_key_is_fatal(self):
        s = Settings(OPENAI_API_KEY=None, MOCK_MODE=False, _env_file=None)
        report = check_config(s)
        assert not report.ok
        assert any("OPENAI_API_KEY" in p for p in report.problems)
        with pytest.raises(ConfigurationError):
            GenerationClient.from_settings(s)

    def test_mock_mode_needs_no_key(self):
        s = Settings(OPENAI_API_KEY=None, MOCK_MODE=True, _env_file=None)
        assert check_config(s).ok
        client = GenerationClient.from_settings(s)
        raw = asyncio.run(client.complete("prompt", build_response_schema({OutputType.QUIZ})))
        assert set(json.loads(raw)) == {"quiz"}
        assert parse_study_aids(raw, {OutputType.QUIZ}).quiz
