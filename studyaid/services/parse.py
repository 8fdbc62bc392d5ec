import json, re
from typing import AbstractSet
from pydantic import ValidationError
from loguru import logger

from ..errors import InvalidAIResponseError, MissingStudyAidError
from ..schemas import OutputType, StudyAids


_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.S)


def _clean(s: str) -> str:
    # only a fence wrapping the whole response is removed; backticks inside values stay
    s = (s or "").strip()
    m = _FENCE.fullmatch(s)
    return m.group(1) if m else s


def parse_study_aids(s: str, kinds: AbstractSet[OutputType]) -> StudyAids:
    """
    Parse raw model output into StudyAids holding exactly the requested keys.
    Unrequested keys are dropped; a requested key that is absent or empty is a semantic error.
    """
    try:
        data = json.loads(_clean(s))
    except json.JSONDecodeError as e:
        logger.warning(f"[parse] response is not JSON: {e}")
        logger.debug(f"[parse] raw response: {s!r}")
        raise InvalidAIResponseError() from e
    if not isinstance(data, dict):
        raise InvalidAIResponseError()

    wanted = {k.key for k in kinds}
    for key in sorted(wanted):
        if not data.get(key):
            raise MissingStudyAidError(key)

    try:
        return StudyAids.model_validate({k: v for k, v in data.items() if k in wanted})
    except ValidationError as e:
        logger.warning(f"[parse] response does not match schema: {e.error_count()} error(s)")
        logger.debug(f"[parse] raw response: {s!r}")
        raise InvalidAIResponseError() from e
