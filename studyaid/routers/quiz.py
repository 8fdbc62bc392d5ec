from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_controller, http_error
from ..errors import StudyAidError
from ..schemas import AnswerChoice, QuizView
from ..state.controller import StudyController
from ..state.quiz import QuizForm

router = APIRouter(prefix="/quiz")


def _form(controller: StudyController = Depends(get_controller)) -> QuizForm:
    if controller.quiz_form is None:
        raise HTTPException(404, "No quiz available.")
    return controller.quiz_form


@router.get("", response_model=QuizView)
async def quiz(form: QuizForm = Depends(_form)):
    return form.view()


@router.post("/answers", response_model=QuizView)
async def answer(choice: AnswerChoice, form: QuizForm = Depends(_form)):
    try:
        form.select(choice.index, choice.option)
    except StudyAidError as e:
        raise http_error(e)
    return form.view()


@router.post("/submit", response_model=QuizView)
async def submit(form: QuizForm = Depends(_form)):
    # submit stays disabled until every question is answered
    form.submit()
    return form.view()


@router.post("/regenerate")
async def regenerate(controller: StudyController = Depends(get_controller)):
    try:
        aids = await controller.regenerate_quiz()
    except StudyAidError as e:
        raise http_error(e)
    return aids.public()
