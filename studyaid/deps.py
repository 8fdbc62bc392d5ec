from fastapi import HTTPException, Request

from .errors import StudyAidError
from .state.controller import StudyController


def get_controller(request: Request) -> StudyController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(503, "Service is starting up.")
    return controller


def http_error(e: StudyAidError) -> HTTPException:
    return HTTPException(e.status_code, e.message)
