"""Domain records served to API callers, and their conversion from CMS records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..cms import models as cms


class NotFoundError(LookupError):
    """Raised when a requested record does not exist."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


@dataclass
class CourseProgress:
    """A user's progress through a course."""

    id: str = ""
    course_id: str = ""
    user_id: str = ""
    state: str = ""
    completed_steps: int = 0
    date_started: Optional[datetime] = None
    date_completed: Optional[datetime] = None


@dataclass
class CourseNote:
    """A user's note on a course."""

    id: str = ""
    course_id: str = ""
    user_id: str = ""
    value: str = ""
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None


@dataclass
class StepProgress:
    """A user's progress on a single step."""

    id: str = ""
    step_id: str = ""
    user_id: str = ""
    state: str = ""
    date_started: Optional[datetime] = None
    date_completed: Optional[datetime] = None


@dataclass
class StepNote:
    """A user's note on a step."""

    id: str = ""
    step_id: str = ""
    user_id: str = ""
    value: str = ""
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None


@dataclass
class Timemap:
    """A user's timemap."""

    id: str = ""
    user_id: str = ""
    map: str = ""
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None


@dataclass
class _Content:
    id: str = ""
    title: str = ""
    description: str = ""


@dataclass
class Course(_Content):
    """A course with the user-specific data attached to it."""

    session_count: int = 0
    step_count: int = 0
    first_session: Optional[str] = None
    sessions: list[Session] = field(default_factory=list)
    note: Optional[CourseNote] = None
    progress: Optional[CourseProgress] = None


@dataclass
class Session(_Content):
    """A session of a course."""

    steps: list[Step] = field(default_factory=list)
    course: Optional[Course] = None


@dataclass
class Step(_Content):
    """A step of a session, with the user's note and progress when known."""

    type: str = ""
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    question: Optional[str] = None
    session: Optional[Session] = None
    note: Optional[StepNote] = None
    progress: Optional[StepProgress] = None


def _content(item: Any) -> dict[str, str]:
    return {"id": item.id, "title": item.title, "description": item.description}


def course_from_cms(course: cms.Course) -> Course:
    """Convert a CMS course; its sessions are not carried over."""
    return Course(**_content(course))


def courses_from_cms(courses: Iterable[cms.Course]) -> list[Course]:
    return [course_from_cms(c) for c in courses]


def session_from_cms(session: cms.Session) -> Session:
    """Convert a CMS session together with its steps and course."""
    return Session(
        **_content(session),
        steps=[step_from_cms(s) for s in session.steps],
        course=course_from_cms(session.course) if session.course is not None else None,
    )


def sessions_from_cms(sessions: Iterable[cms.Session]) -> list[Session]:
    return [session_from_cms(s) for s in sessions]


def step_from_cms(step: cms.Step) -> Step:
    """Convert a CMS step, flattening its audio asset to a URL."""
    return Step(
        **_content(step),
        type=step.type,
        video_url=step.video_url,
        audio_url=step.audio.url if step.audio is not None else None,
        question=step.question,
    )