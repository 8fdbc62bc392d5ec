from fastapi import APIRouter, Depends, File, UploadFile

from ..deps import get_controller, http_error
from ..errors import StudyAidError
from ..schemas import AppView, FileView, OutputType, SelectionView
from ..state.controller import StudyController

router = APIRouter()


@router.get("/state", response_model=AppView)
async def state(controller: StudyController = Depends(get_controller)):
    return controller.view()


@router.post("/upload", response_model=FileView)
async def upload(
    file: UploadFile = File(...),
    controller: StudyController = Depends(get_controller),
):
    raw = await file.read()
    try:
        selected = controller.select_file(file.filename or "document.pdf", file.content_type, raw)
    except StudyAidError as e:
        raise http_error(e)
    return FileView(filename=selected.filename, size=selected.size)


@router.delete("/upload", response_model=AppView)
async def clear_upload(controller: StudyController = Depends(get_controller)):
    controller.clear_file()
    return controller.view()


@router.get("/selection", response_model=SelectionView)
async def selection(controller: StudyController = Depends(get_controller)):
    return controller.selection_view()


@router.post("/selection/{kind}", response_model=SelectionView)
async def toggle_selection(kind: OutputType, controller: StudyController = Depends(get_controller)):
    controller.toggle_output(kind)
    return controller.selection_view()


@router.post("/generate")
async def generate(controller: StudyController = Depends(get_controller)):
    try:
        aids = await controller.generate()
    except StudyAidError as e:
        raise http_error(e)
    return aids.public()
