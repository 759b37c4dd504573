import logging
import threading
from typing import Callable, Dict, List

from student_api.core.errors import NotFoundError
from student_api.schemas.student import Student, StudentIn, StudentUpdate
from student_api.services.ids import generate_id

logger = logging.getLogger(__name__)


class StudentStore:
    """In-memory student records guarded by a single lock.

    Every operation holds the lock only for its own read-modify-write step.
    Records handed out are copies, so callers can serialize or mutate them
    after the lock is released without touching the store.
    """

    def __init__(self, id_factory: Callable[[], int] = generate_id) -> None:
        self._students: Dict[int, Student] = {}
        self._lock = threading.Lock()
        self._id_factory = id_factory

    def create(self, data: StudentIn) -> Student:
        with self._lock:
            student_id = self._id_factory()
            if student_id in self._students:
                # ids are not checked for uniqueness, the newer record wins
                logger.warning(f"id {student_id} already in use, overwriting existing student")
            student = Student(id=student_id, name=data.name, age=data.age, email=data.email)
            self._students[student_id] = student
        return student.model_copy()

    def list(self) -> List[Student]:
        with self._lock:
            students = list(self._students.values())
        return [s.model_copy() for s in students]

    def get(self, student_id: int) -> Student:
        with self._lock:
            student = self._students.get(student_id)
        if student is None:
            raise NotFoundError(student_id)
        return student.model_copy()

    def update(self, student_id: int, data: StudentUpdate) -> Student:
        with self._lock:
            if student_id not in self._students:
                raise NotFoundError(student_id)
            student = Student(id=student_id, name=data.name, age=data.age, email=data.email)
            self._students[student_id] = student
        return student.model_copy()

    def delete(self, student_id: int) -> None:
        with self._lock:
            if student_id not in self._students:
                raise NotFoundError(student_id)
            del self._students[student_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._students)
