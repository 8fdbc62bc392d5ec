"""
Application shell: owns the single session's state and composes the
selection, flashcard viewer and quiz form. All mutation happens on the
event loop; blocking work (PDF parsing, the model call) runs in threads.
"""
import random
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..errors import (
    BusyError,
    ExtractionError,
    GenerationError,
    QuizStateError,
    SelectionError,
    StudyAidError,
    UploadValidationError,
)
from ..schemas import AppView, FileView, OutputOption, OutputType, SelectionView, StudyAids
from ..services.generation import generate_study_aids, merge_quiz, regenerate_quiz
from ..services.llm import GenerationClient
from ..services.pdf import extract_text_async
from ..services.scheduler import Scheduler
from ..services.validation import validate_generation_request, validate_upload
from .flashcards import FlashcardViewer
from .quiz import QuizForm
from .selection import OutputSelection

GENERATE_FAILED = "An error occurred while generating study materials. Please try again."
REGENERATE_FAILED = "An error occurred while generating the new quiz. Please try again."


@dataclass(frozen=True)
class SelectedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class StudyController:
    def __init__(
        self,
        client: GenerationClient,
        scheduler: Scheduler,
        *,
        max_upload_bytes: int,
        max_text_chars: int,
        transition_seconds: float = 0.3,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.scheduler = scheduler
        self.max_upload_bytes = max_upload_bytes
        self.max_text_chars = max_text_chars
        self.transition_seconds = transition_seconds
        self.rng = rng

        self.file: Optional[SelectedFile] = None
        self.selection = OutputSelection()
        self.extracted_text = ""
        self.results: Optional[StudyAids] = None
        self.loading = False
        self.loading_message = ""
        self.error: Optional[str] = None
        self.viewer: Optional[FlashcardViewer] = None
        self.quiz_form: Optional[QuizForm] = None

    # ---------- input ----------
    def select_file(self, filename: str, content_type: Optional[str], data: bytes) -> SelectedFile:
        try:
            validate_upload(content_type, len(data), max_bytes=self.max_upload_bytes)
        except UploadValidationError as e:
            self.file = None
            self.error = e.message
            raise
        self.file = SelectedFile(filename=filename, content_type=content_type or "", data=data)
        self.error = None
        self._set_results(None)
        logger.info(f"[upload] selected {filename!r} size={len(data)}")
        return self.file

    def clear_file(self) -> None:
        self.file = None
        self.error = None
        self._set_results(None)
        logger.info("[upload] selection cleared")

    def toggle_output(self, kind: OutputType) -> bool:
        return self.selection.toggle(kind)

    # ---------- generation ----------
    async def generate(self) -> StudyAids:
        try:
            validate_generation_request(self.file is not None, self.selection.kinds)
        except SelectionError as e:
            self.error = e.message
            raise
        if self.loading:
            raise BusyError()

        kinds = self.selection.kinds
        self.loading = True
        self.error = None
        try:
            self.loading_message = "Extracting text from your PDF..."
            text = await extract_text_async(self.file.data)
            self.extracted_text = text

            self.loading_message = "AI is generating your study materials..."
            aids = await generate_study_aids(self.client, text, kinds, self.max_text_chars)
        except ExtractionError as e:
            self.error = e.message
            raise
        except StudyAidError as e:
            logger.warning(f"[generate] failed: {e.message}")
            self.error = GENERATE_FAILED
            e.message = self.error
            raise
        except Exception as e:
            logger.exception("[generate] unexpected error")
            self.error = GENERATE_FAILED
            raise GenerationError(GENERATE_FAILED) from e
        finally:
            self.loading = False
            self.loading_message = ""

        self._set_results(aids)
        return aids

    async def regenerate_quiz(self) -> StudyAids:
        if not self.extracted_text:
            self.error = "Could not regenerate quiz. Please generate study aids first."
            raise QuizStateError(self.error)
        if self.quiz_form is None or not self.quiz_form.can_regenerate:
            self.error = "Submit the quiz before generating a new one."
            raise QuizStateError(self.error)
        if self.loading:
            raise BusyError()

        self.loading = True
        self.loading_message = "AI is generating a new quiz for you..."
        self.error = None
        try:
            quiz = await regenerate_quiz(self.client, self.extracted_text, self.max_text_chars)
        except StudyAidError as e:
            logger.warning(f"[quiz] regeneration failed: {e.message}")
            self.error = REGENERATE_FAILED
            e.message = self.error
            raise
        except Exception as e:
            logger.exception("[quiz] unexpected error")
            self.error = REGENERATE_FAILED
            raise GenerationError(REGENERATE_FAILED) from e
        finally:
            self.loading = False
            self.loading_message = ""

        # flashcards and their viewer are untouched; only the quiz form remounts
        self.results = merge_quiz(self.results, quiz)
        self.quiz_form = QuizForm(quiz)
        logger.info(f"[quiz] regenerated questions={len(quiz)}")
        return self.results

    def _set_results(self, aids: Optional[StudyAids]) -> None:
        self.results = aids
        cards = aids.flashcards if aids else None
        if cards:
            if self.viewer is None:
                self.viewer = FlashcardViewer(
                    cards, self.scheduler, delay=self.transition_seconds, rng=self.rng
                )
            else:
                self.viewer.load(cards)
        else:
            self.viewer = None
        quiz = aids.quiz if aids else None
        self.quiz_form = QuizForm(quiz) if quiz else None

    # ---------- views ----------
    def view(self) -> AppView:
        return AppView(
            file=FileView(filename=self.file.filename, size=self.file.size) if self.file else None,
            selection=self.selection_view(),
            loading=self.loading,
            loading_message=self.loading_message,
            error=self.error,
            results=self.results.public() if self.results else None,
            flashcards=self.viewer.view() if self.viewer else None,
            quiz=self.quiz_form.view() if self.quiz_form else None,
        )

    def selection_view(self) -> SelectionView:
        return SelectionView(
            selected=[k for k in OutputType if self.selection.selected(k)],
            options=[
                OutputOption(id=k, label=k.value, description=k.description, selected=self.selection.selected(k))
                for k in OutputType
            ],
            can_generate=self.file is not None and not self.selection.is_empty and not self.loading,
        )
