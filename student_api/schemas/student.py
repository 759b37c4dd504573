from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class StudentIn(BaseModel):
    """Body of POST /students. Any ``id`` sent by the client is ignored."""

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field("", description="Student name")
    age: int = Field(0, ge=INT64_MIN, le=INT64_MAX, description="Age in years")
    email: str = Field("", description="Contact email")

    @field_validator("*", mode="before")
    @classmethod
    def null_means_default(cls, v: Any, info: ValidationInfo) -> Any:
        # JSON null leaves the field at its zero value
        if v is None:
            return cls.model_fields[info.field_name].get_default()
        return v


class StudentUpdate(StudentIn):
    """Body of PUT /students/{id}: the full record.

    ``id`` is accepted for symmetry with the response shape, but the path id
    always wins.
    """

    id: Optional[int] = Field(None, ge=INT64_MIN, le=INT64_MAX, description="Ignored, the path id is used")


class Student(BaseModel):
    id: int
    name: str
    age: int
    email: str


class SummaryResponse(BaseModel):
    summary: str
