"""Pydantic models for records returned by the backend list commands."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class TaskStatus(str, Enum):
    """Task lifecycle."""

    TODO = "todo"
    STARTED = "started"
    IN_PROGRESS = "in-progress"
    STAGE_COMPLETE = "stage-complete"
    COMPLETED = "completed"
    DROPPED = "dropped"


class IdeaStatus(str, Enum):
    """Idea lifecycle."""

    INBOX = "inbox"
    EXPLORING = "exploring"
    BUILDING = "building"
    PAUSED = "paused"
    SHIPPED = "shipped"
    DROPPED = "dropped"


class DocStatus(str, Enum):
    """Document publication state."""

    DRAFT = "draft"
    IN_REVIEW = "in_review"
    PUBLISHED = "published"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str


class TaskRow(_Record):
    """Row of the task list."""

    name: str
    category: str
    status: TaskStatus
    current_stage: str | None = None
    start_at: datetime | None = None
    end_est_at: datetime | None = None
    updated_at: datetime


class IdeaRow(_Record):
    """Row of the idea list for one project."""

    project_id: str
    title: str
    status: IdeaStatus
    priority: int = 0
    updated_at: datetime


class DocRow(_Record):
    """Row of the document list for one project."""

    project_id: str
    title: str
    slug: str | None = None
    status: DocStatus
    updated_at: datetime


class ProjectOption(_Record):
    """Project choice for scoping list screens, grouped by workspace."""

    name: str
    workspace_id: str
    workspace_name: str
    status: str = "active"
    description: str | None = None
