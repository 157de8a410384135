"""Records returned to API callers, built from the service layer's records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from ..service import models as service

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _format_time(when: Optional[datetime]) -> str:
    """Render a timestamp as 'YYYY-MM-DD HH:MM:SS[.frac] +hhmm ZONE'; None is the zero time."""
    if when is None:
        when = _ZERO_TIME
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    text = (
        f"{when.year:04d}-{when.month:02d}-{when.day:02d} "
        f"{when.hour:02d}:{when.minute:02d}:{when.second:02d}"
    )
    if when.microsecond:
        text += f".{when.microsecond:06d}".rstrip("0")

    offset = when.utcoffset()
    total = int(offset.total_seconds()) if offset is not None else 0
    sign = "+" if total >= 0 else "-"
    hours, minutes = divmod(abs(total) // 60, 60)
    numeric = f"{sign}{hours:02d}{minutes:02d}"

    name = when.tzname() or ""
    if not name or (name.startswith("UTC") and total != 0):
        name = numeric
    return f"{text} {numeric} {name}"


@dataclass
class CourseNote:
    """A user's note on a course."""

    id: str = ""
    course_id: str = ""
    user_id: str = ""
    value: str = ""


@dataclass
class CourseProgress:
    """A user's progress through a course."""

    id: str = ""
    state: str = ""
    completed_steps: int = 0
    date_started: str = ""


@dataclass
class StepNote:
    """A user's note on a step."""

    id: str = ""
    step_id: str = ""
    user_id: str = ""
    value: str = ""


@dataclass
class StepProgress:
    """A user's progress on a step."""

    id: str = ""
    state: str = ""
    date_started: str = ""
    date_completed: str = ""


@dataclass
class Timemap:
    """A user's timemap and when it last changed."""

    id: str = ""
    map: str = ""
    updated_at: str = ""


@dataclass
class _Content:
    id: str = ""
    title: str = ""
    description: str = ""


@dataclass
class Course(_Content):
    """A course as served to API callers."""

    session_count: int = 0
    step_count: int = 0
    sessions: list[Session] = field(default_factory=list)
    note: Optional[CourseNote] = None
    progress: Optional[CourseProgress] = None


@dataclass
class Session(_Content):
    """A session as served to API callers."""

    steps: list[Step] = field(default_factory=list)
    course: Optional[Course] = None


@dataclass
class Step(_Content):
    """A step as served to API callers."""

    type: str = ""
    video_url: Optional[str] = None
    audio_url: Optional[str] = None
    question: Optional[str] = None
    note: Optional[StepNote] = None
    progress: Optional[StepProgress] = None


def _content(item: Any) -> dict[str, str]:
    return {"id": item.id, "title": item.title, "description": item.description}


def course_from_service(course: service.Course) -> Course:
    """Convert a course; its sessions are not carried over."""
    return Course(**_content(course))


def course_progress_from_service(progress: service.CourseProgress) -> CourseProgress:
    return CourseProgress(
        id=progress.id,
        state=progress.state,
        completed_steps=progress.completed_steps,
        date_started=_format_time(progress.date_started),
    )


def course_note_from_service(note: service.CourseNote) -> CourseNote:
    return CourseNote(
        id=note.id, course_id=note.course_id, user_id=note.user_id, value=note.value
    )


def courses_from_service(courses: Iterable[service.Course]) -> list[Course]:
    return [course_from_service(c) for c in courses]


def session_from_service(session: service.Session) -> Session:
    """Convert a session together with its steps and course."""
    return Session(
        **_content(session),
        steps=[step_from_service(s) for s in session.steps],
        course=course_from_service(session.course) if session.course is not None else None,
    )


def sessions_from_service(sessions: Iterable[service.Session]) -> list[Session]:
    return [session_from_service(s) for s in sessions]


def step_from_service(step: service.Step) -> Step:
    return Step(
        **_content(step),
        type=step.type,
        video_url=step.video_url,
        audio_url=step.audio_url,
        question=step.question,
    )


def step_note_from_service(note: service.StepNote) -> StepNote:
    return StepNote(id=note.id, step_id=note.step_id, user_id=note.user_id, value=note.value)


def step_progress_from_service(progress: service.StepProgress) -> StepProgress:
    view = StepProgress(
        id=progress.id,
        state=progress.state,
        date_started=_format_time(progress.date_started),
    )
    if progress.date_completed is not None:
        view.date_completed = _format_time(progress.date_completed)
    return view