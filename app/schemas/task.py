from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = ""
    owner_id: int


class AdminTaskOut(TaskOut):
    owner_email: Optional[str] = None


class TaskList(BaseModel):
    tasks: List[TaskOut]


class AdminTaskList(BaseModel):
    tasks: List[AdminTaskOut]
