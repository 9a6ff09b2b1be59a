from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator


class TaskCreate(BaseModel):
    task: str

    @field_validator("task")
    @classmethod
    def task_not_blank(cls, value: str) -> str:
        # Blank text is rejected, but accepted text is stored as sent
        if not value.strip():
            raise ValueError("task must not be empty")
        return value


class TaskUpdate(BaseModel):
    task: Optional[str] = None

    def new_text(self) -> Optional[str]:
        """Replacement text, or None when the stored text should be kept"""
        if self.task is None or not self.task.strip():
            return None
        return self.task


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task: str
    # Rows written outside this service may hold NULL here
    is_done: Optional[bool]
    created_at: Optional[datetime]


class ErrorResponse(BaseModel):
    error: str
