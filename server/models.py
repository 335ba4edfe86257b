from pydantic import BaseModel, ConfigDict, field_validator


class TaskRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    task: str = ""
    difficulty: str = ""
    rating: str = ""


class ChatRequest(BaseModel):
    message: str | None = None
    tasks: list[TaskRecord] = []

    @field_validator("tasks", mode="before")
    @classmethod
    def _none_means_no_tasks(cls, value):
        return [] if value is None else value


class ChatResponse(BaseModel):
    reply: str
