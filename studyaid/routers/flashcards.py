from enum import Enum

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_controller
from ..schemas import FlashcardDeckView, KeyPress
from ..state.controller import StudyController
from ..state.flashcards import FlashcardViewer

router = APIRouter(prefix="/flashcards")


class Action(str, Enum):
    flip = "flip"
    next = "next"
    prev = "prev"
    shuffle = "shuffle"


def _viewer(controller: StudyController = Depends(get_controller)) -> FlashcardViewer:
    if controller.viewer is None:
        raise HTTPException(404, "No flashcards available.")
    return controller.viewer


@router.get("", response_model=FlashcardDeckView)
async def deck(viewer: FlashcardViewer = Depends(_viewer)):
    return viewer.view()


@router.post("/keys")
async def key(press: KeyPress, viewer: FlashcardViewer = Depends(_viewer)):
    prevent_default = viewer.handle_key(press.code)
    return {"prevent_default": prevent_default, "deck": viewer.view()}


@router.post("/{action}")
async def act(action: Action, viewer: FlashcardViewer = Depends(_viewer)):
    accepted = getattr(viewer, action.value)()
    return {"accepted": accepted, "deck": viewer.view()}
