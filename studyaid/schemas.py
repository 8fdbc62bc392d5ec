from enum import Enum
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OutputType(str, Enum):
    FLASHCARDS = "Flashcards"
    QUIZ = "Quiz"

    @property
    def key(self) -> str:
        return "flashcards" if self is OutputType.FLASHCARDS else "quiz"

    @property
    def description(self) -> str:
        return OUTPUT_DESCRIPTIONS[self]


OUTPUT_DESCRIPTIONS = {
    OutputType.FLASHCARDS: "Q&A style cards for active recall.",
    OutputType.QUIZ: "Test your knowledge with questions.",
}


class Flashcard(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    answer: str

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    type: Literal["MCQ"]
    options: List[str] = Field(min_length=3, max_length=5)
    answer: str

    @field_validator("question")
    @classmethod
    def _question_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("options")
    @classmethod
    def _unique_options(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("options must be unique")
        return v

    @model_validator(mode="after")
    def _answer_in_options(self):
        if self.answer not in self.options:
            raise ValueError("answer must be one of the options")
        return self


class StudyAids(BaseModel):
    flashcards: Optional[List[Flashcard]] = None
    quiz: Optional[List[QuizQuestion]] = None

    def public(self) -> dict:
        return self.model_dump(exclude_none=True)


# ---------- views (read-only snapshots for the HTTP layer) ----------
class OptionState(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    NEUTRAL = "neutral"


class OutputOption(BaseModel):
    id: OutputType
    label: str
    description: str
    selected: bool


class SelectionView(BaseModel):
    selected: List[OutputType]
    options: List[OutputOption]
    can_generate: bool


class FlashcardDeckView(BaseModel):
    total: int
    index: int
    flipped: bool
    animating: bool
    animation: str
    card: Optional[Flashcard] = None
    shown: Optional[str] = None


class QuizOptionView(BaseModel):
    text: str
    state: OptionState


class QuizQuestionView(BaseModel):
    index: int
    question: str
    options: List[QuizOptionView]
    selected: Optional[str] = None


class QuizView(BaseModel):
    questions: List[QuizQuestionView]
    answers: Dict[int, str]
    submitted: bool
    can_submit: bool
    can_regenerate: bool
    score: Optional[int] = None
    total: int


class FileView(BaseModel):
    filename: str
    size: int


class AppView(BaseModel):
    file: Optional[FileView] = None
    selection: SelectionView
    loading: bool
    loading_message: str
    error: Optional[str] = None
    results: Optional[Dict] = None
    flashcards: Optional[FlashcardDeckView] = None
    quiz: Optional[QuizView] = None


# ---------- request bodies ----------
class KeyPress(BaseModel):
    code: str


class AnswerChoice(BaseModel):
    index: int
    option: str
