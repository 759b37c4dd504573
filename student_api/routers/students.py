import logging
import re
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response, status

from student_api.clients.ollama import OllamaClient
from student_api.core.errors import InputError, NotFoundError, UpstreamError
from student_api.core.handlers import INVALID_ID_DETAIL
from student_api.schemas.student import INT64_MAX, INT64_MIN, Student, StudentIn, StudentUpdate, SummaryResponse
from student_api.services import summary as summary_service
from student_api.services.store import StudentStore

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND_DETAIL = "Student not found"
SUMMARY_FAILED_DETAIL = "Failed to generate summary"

_STUDENT_ID_RE = re.compile(r"[+-]?[0-9]+")


def parse_student_id(student_id: str = Path(..., description="Decimal student id")) -> int:
    """Parse the path id as a signed 64-bit decimal integer.

    Forms like ``1.0``, ``1e3`` or ``0x10`` are rejected instead of coerced.
    """
    if not _STUDENT_ID_RE.fullmatch(student_id):
        raise InputError(INVALID_ID_DETAIL)
    value = int(student_id)
    if not INT64_MIN <= value <= INT64_MAX:
        raise InputError(INVALID_ID_DETAIL)
    return value


def get_store(request: Request) -> StudentStore:
    return request.app.state.store


def get_summary_client(request: Request) -> OllamaClient:
    return request.app.state.summary_client


# CRUD handlers are sync so each request runs on its own worker thread.

@router.post("", response_model=Student, status_code=status.HTTP_201_CREATED, summary="Create a student")
def create_student(body: StudentIn, store: StudentStore = Depends(get_store)) -> Student:
    return store.create(body)


@router.get("", response_model=List[Student], summary="List all students")
def list_students(store: StudentStore = Depends(get_store)) -> List[Student]:
    return store.list()


@router.get("/{student_id}", response_model=Student, summary="Get a student")
def get_student(student_id: int = Depends(parse_student_id), store: StudentStore = Depends(get_store)) -> Student:
    try:
        return store.get(student_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)


@router.put("/{student_id}", response_model=Student, summary="Replace a student")
def update_student(
    body: StudentUpdate,
    student_id: int = Depends(parse_student_id),
    store: StudentStore = Depends(get_store),
) -> Student:
    try:
        return store.update(student_id, body)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a student")
def delete_student(student_id: int = Depends(parse_student_id), store: StudentStore = Depends(get_store)) -> Response:
    try:
        store.delete(student_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{student_id}/summary", response_model=SummaryResponse, summary="Generate a student summary")
async def get_student_summary(
    student_id: int = Depends(parse_student_id),
    store: StudentStore = Depends(get_store),
    client: OllamaClient = Depends(get_summary_client),
) -> SummaryResponse:
    """
    Ask the text-generation service for a made-up biography of the student.
    """
    request_id = uuid.uuid4().hex[:8]
    logger.info(f"Summary requested for student {student_id} | req={request_id}")
    try:
        student = store.get(student_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)

    try:
        summary = await summary_service.summarize_student(student, client, request_id=request_id)
    except UpstreamError as e:
        logger.error(f"Summary generation failed for student {student_id} | req={request_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SUMMARY_FAILED_DETAIL)
    return SummaryResponse(summary=summary)
