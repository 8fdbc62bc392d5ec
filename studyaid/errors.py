"""
Error taxonomy. Every error carries the single human-readable message shown
to the user and the HTTP status the routers answer with.
"""
from typing import Optional


class StudyAidError(Exception):
    status_code = 400
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(StudyAidError):
    status_code = 500
    default_message = "The service is not configured."


# ---------- validation (before any I/O) ----------
class UploadValidationError(StudyAidError):
    default_message = "Please upload a valid PDF file."


class FileTooLargeError(UploadValidationError):
    status_code = 413


class SelectionError(StudyAidError):
    default_message = "Please select a PDF file and at least one output type."


class BusyError(StudyAidError):
    status_code = 409
    default_message = "Study aids are already being generated. Please wait."


# ---------- extraction ----------
class ExtractionError(StudyAidError):
    status_code = 422
    default_message = "Could not read text from this PDF. Please try another file."


# ---------- generation ----------
class GenerationError(StudyAidError):
    status_code = 502
    default_message = "An error occurred while generating study materials. Please try again."


class InvalidAIResponseError(GenerationError):
    default_message = "The AI returned an invalid response. Please try again."


class MissingStudyAidError(GenerationError):
    """Parsed JSON lacks a key that was requested."""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"The AI did not return any {key}.")


class MissingQuizError(MissingStudyAidError):
    def __init__(self, message: Optional[str] = None):
        super().__init__("quiz", message or "The AI did not return a new quiz.")


# ---------- quiz form ----------
class QuizStateError(StudyAidError):
    default_message = "That quiz action is not available right now."
