from typing import Optional


class StudentAPIError(Exception):
    """Base class for every error raised by the service."""


class InputError(StudentAPIError):
    """Malformed request body or non-numeric id."""


class NotFoundError(StudentAPIError):
    def __init__(self, student_id: int):
        super().__init__(f"student {student_id} not found")
        self.student_id = student_id


class UpstreamError(StudentAPIError):
    """The text-generation service could not produce a summary."""


class UpstreamTransportError(UpstreamError):
    """Endpoint unreachable, connection dropped or timed out."""


class UpstreamProtocolError(UpstreamError):
    def __init__(self, status: int, message: Optional[str] = None):
        super().__init__(message or f"generation service returned non-200 status: {status}")
        self.status = status


class UpstreamDecodeError(UpstreamError):
    """A streamed chunk was not a JSON object."""
