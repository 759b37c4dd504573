import logging

from student_api.clients.ollama import OllamaClient
from student_api.core.monitor import StepMonitor
from student_api.schemas.student import Student

logger = logging.getLogger(__name__)


def build_prompt(student: Student) -> str:
    return (
        f"Provide some made up information about the student with ID {student.id}. "
        f"The student's name is {student.name}, they are {student.age} years old, "
        f"and their email is {student.email}. "
        "Summarize the above given details in a paragraph."
    )


async def summarize_student(student: Student, client: OllamaClient, request_id: str) -> str:
    """Generate a one-paragraph summary for ``student``.

    ``student`` must already be read from the store; the store lock is never
    held while the generation service is called. ``request_id`` tags the
    monitor lines of this call.
    """
    prompt = build_prompt(student)
    with StepMonitor("generate_summary", request_id, student_id=student.id, model=client.model) as step:
        summary = await client.generate(prompt)
    logger.info(
        f"Generated summary for student {student.id} | req={request_id} "
        f"| {len(summary)} chars in {step.duration:.3f}s: {summary}"
    )
    return summary
