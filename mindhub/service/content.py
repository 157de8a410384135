"""Services that serve course content from the CMS and course progress from the store."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Optional, TypeVar

from ..logs import COURSE_ID_KEY, SESSION_ID_KEY, STEP_ID_KEY, USER_ID_KEY, logger_from_context
from .models import (
    Course,
    CourseProgress,
    NotFoundError,
    Session,
    Step,
    course_from_cms,
    courses_from_cms,
    session_from_cms,
    sessions_from_cms,
    step_from_cms,
)

_T = TypeVar("_T")


def _logger(ctx: Mapping[Any, Any], fields: Optional[Mapping[str, Any]] = None) -> Any:
    log = logger_from_context(ctx)
    return log.with_fields(fields) if fields else log


@contextmanager
def _logged_failure(log: Any, message: str, wrap: Optional[str] = None) -> Iterator[None]:
    """Log any failure; re-raise it as is, or as a RuntimeError prefixed by wrap."""
    try:
        yield
    except Exception as exc:
        log.error("%s: %s", message, exc)
        if wrap is None:
            raise
        raise RuntimeError(f"{wrap} {exc}") from exc


def _found(record: Optional[_T], log: Any, message: str, level: int = logging.ERROR) -> _T:
    if record is None:
        log.log(level, message)
        raise NotFoundError()
    return record


class _CMSService:
    def __init__(self, cms: Any) -> None:
        self.cms = cms


class CourseService(_CMSService):
    """Serves courses from the CMS."""

    def get_all(self, ctx: Mapping[Any, Any]) -> list[Course]:
        log = _logger(ctx)
        with _logged_failure(log, "error getting all courses from cms"):
            courses = self.cms.get_courses(ctx)
        return courses_from_cms(courses)

    def get_by_id(self, ctx: Mapping[Any, Any], course_id: str) -> Course:
        log = _logger(ctx, {COURSE_ID_KEY: course_id})
        with _logged_failure(log, "error getting course by id from cms"):
            course = self.cms.get_course_by_id(ctx, course_id)
        return course_from_cms(_found(course, log, "course not found in cms"))


class SessionService(_CMSService):
    """Serves sessions from the CMS."""

    def get_by_id(self, ctx: Mapping[Any, Any], session_id: str) -> Session:
        log = _logger(ctx, {SESSION_ID_KEY: session_id})
        with _logged_failure(log, "error getting session by id from cms"):
            session = self.cms.get_session_by_id(ctx, session_id)
        return session_from_cms(_found(session, log, "session not found in cms"))

    def get_by_course_id(self, ctx: Mapping[Any, Any], course_id: str) -> list[Session]:
        log = _logger(ctx, {COURSE_ID_KEY: course_id})
        with _logged_failure(log, "error getting session by course id from cms"):
            sessions = self.cms.get_sessions_by_course_id(ctx, course_id)
        return sessions_from_cms(sessions)

    def count_by_course_id(self, ctx: Mapping[Any, Any], course_id: str) -> int:
        log = _logger(ctx, {COURSE_ID_KEY: course_id})
        with _logged_failure(log, "error getting session count by course id from cms"):
            sessions = self.cms.get_sessions_by_course_id(ctx, course_id)
        return len(sessions)


class StepService(_CMSService):
    """Serves steps from the CMS."""

    def get_by_id(self, ctx: Mapping[Any, Any], step_id: str) -> Step:
        log = _logger(ctx, {STEP_ID_KEY: step_id})
        with _logged_failure(log, "error getting step by id from cms"):
            step = self.cms.get_steps_by_id(ctx, step_id)
        return step_from_cms(_found(step, log, "step not found in cms"))

    def count_by_course_id(self, ctx: Mapping[Any, Any], course_id: str) -> int:
        log = _logger(ctx, {COURSE_ID_KEY: course_id})
        with _logged_failure(log, "error getting step count by course id from cms"):
            step_ids = self.cms.get_step_ids_by_course_id(ctx, course_id)
        return len(step_ids)


def _progress_from_store(stored: Any, *, with_completion: bool) -> CourseProgress:
    return CourseProgress(
        id=stored.id,
        course_id=stored.entity_id,
        user_id=stored.user_id,
        state=stored.state,
        date_started=stored.date_started,
        date_completed=stored.date_completed if with_completion else None,
    )


class CourseProgressService(_CMSService):
    """Combines stored course progress with the steps the user has completed."""

    def __init__(self, cms: Any, progress_store: Any) -> None:
        super().__init__(cms)
        self.progress_store = progress_store

    def get(self, ctx: Mapping[Any, Any], course_id: str, user_id: str) -> CourseProgress:
        log = _logger(ctx, {COURSE_ID_KEY: course_id, USER_ID_KEY: user_id})
        with _logged_failure(log, "error getting course progress from store"):
            stored = self.progress_store.get(ctx, course_id, user_id)
        stored = _found(stored, log, "course progress not found in store", logging.INFO)
        progress = _progress_from_store(stored, with_completion=True)

        with _logged_failure(
            log,
            "error getting course steps for course progress",
            wrap="error occurred getting course step ids",
        ):
            step_ids = self.cms.get_step_ids_by_course_id(ctx, course_id)

        if not step_ids:
            return progress

        with _logged_failure(
            log,
            "error getting completed steps for course progress",
            wrap="error occurred getting course progress",
        ):
            completed = self.progress_store.get_completed_by_ids(ctx, user_id, *step_ids)

        progress.completed_steps = len(completed)
        return progress

    def start(self, ctx: Mapping[Any, Any], course_id: str, user_id: str) -> CourseProgress:
        log = _logger(ctx, {COURSE_ID_KEY: course_id, USER_ID_KEY: user_id})
        with _logged_failure(log, "error starting course progress in store"):
            stored = self.progress_store.start(ctx, course_id, user_id)
        return _progress_from_store(stored, with_completion=False)