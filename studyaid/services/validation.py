from typing import AbstractSet, Optional
from loguru import logger

from ..errors import FileTooLargeError, SelectionError, UploadValidationError
from ..schemas import OutputType
from ..settings import settings

PDF_MIME = "application/pdf"


def validate_upload(content_type: Optional[str], size: int, *, max_bytes: Optional[int] = None) -> None:
    limit = settings.max_upload_bytes if max_bytes is None else max_bytes
    if (content_type or "").split(";")[0].strip().lower() != PDF_MIME:
        logger.info(f"[upload] rejected content_type={content_type!r}")
        raise UploadValidationError("Please upload a valid PDF file.")
    if size > limit:
        logger.info(f"[upload] rejected size={size} limit={limit}")
        raise FileTooLargeError(
            f"File size exceeds {limit // (1024 * 1024)}MB. Please upload a smaller PDF."
        )
    if size == 0:
        raise UploadValidationError("The selected file is empty.")


def validate_generation_request(has_file: bool, kinds: AbstractSet[OutputType]) -> None:
    if not has_file or not kinds:
        raise SelectionError("Please select a PDF file and at least one output type.")
