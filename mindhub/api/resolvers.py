"""Resolvers behind the API's queries, mutations and object fields."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from ..logs import logger_from_context
from ..request import ContextError, get_user_id
from ..service.models import NotFoundError
from ..service.records import Services
from .views import (
    Course,
    CourseNote,
    CourseProgress,
    Session,
    Step,
    StepNote,
    StepProgress,
    Timemap,
    _format_time,
    course_from_service,
    course_note_from_service,
    course_progress_from_service,
    courses_from_service,
    session_from_service,
    sessions_from_service,
    step_from_service,
    step_note_from_service,
    step_progress_from_service,
)


class Resolver:
    """Answers API requests by calling the services."""

    def __init__(self, services: Optional[Services] = None) -> None:
        self.services = services if services is not None else Services()

    def _user_id(self, ctx: Mapping[Any, Any], log: Any, prefix: Optional[str]) -> str:
        try:
            return get_user_id(ctx)
        except ContextError as exc:
            log.error("error occurred getting request user: %s", exc)
            if prefix is None:
                raise
            raise ContextError(f"{prefix} {exc}") from exc

    # Course fields

    def course_session_count(self, ctx: Mapping[Any, Any], course: Course) -> int:
        log = logger_from_context(ctx)
        log.info("course sessions count resolver got called %s", course.id)
        try:
            return self.services.session.count_by_course_id(ctx, course.id)
        except Exception as exc:
            log.error("error occurred getting session count: %s", exc)
            raise

    def course_step_count(self, ctx: Mapping[Any, Any], course: Course) -> int:
        log = logger_from_context(ctx)
        log.info("course step count resolver got called %s", course.id)
        try:
            return self.services.step.count_by_course_id(ctx, course.id)
        except Exception as exc:
            log.error("error occurred getting step count: %s", exc)
            raise

    def course_sessions(self, ctx: Mapping[Any, Any], course: Course) -> list[Session]:
        log = logger_from_context(ctx)
        log.info("course sessions resolver got called %s", course.id)
        try:
            sessions = self.services.session.get_by_course_id(ctx, course.id)
        except Exception as exc:
            log.error("error occurred getting sessions by course ID: %s", exc)
            raise
        return sessions_from_service(sessions)

    def course_note(self, ctx: Mapping[Any, Any], course: Course) -> Optional[CourseNote]:
        log = logger_from_context(ctx)
        log.info("Course Note resolver got called %s", course.id)
        user_id = self._user_id(ctx, log, "error occurred getting request user ID")
        try:
            note = self.services.course_note.get(ctx, course.id, user_id)
        except NotFoundError:
            log.info("course note not found")
            return None
        except Exception as exc:
            log.error("Error occurred getting Course Note: %s", exc)
            raise
        return course_note_from_service(note)

    def course_progress(
        self, ctx: Mapping[Any, Any], course: Course
    ) -> Optional[CourseProgress]:
        log = logger_from_context(ctx)
        log.info("get progress resolver got called")
        user_id = self._user_id(ctx, log, "error occurred getting course progress1")
        try:
            progress = self.services.course_progress.get(ctx, course.id, user_id)
        except NotFoundError:
            log.info("course progress not found")
            return None
        except Exception as exc:
            log.error("Error occurred getting Course Progress1: %s", exc)
            raise
        return course_progress_from_service(progress)

    # Mutations

    def course_started(self, ctx: Mapping[Any, Any], course_id: str) -> Course:
        log = logger_from_context(ctx)
        log.info("course started resolver got called")
        user_id = self._user_id(ctx, log, "error occurred getting request user ID")
        try:
            self.services.course_progress.start(ctx, course_id, user_id)
        except Exception as exc:
            log.error("error starting Course: %s", exc)
            raise
        return Course(id=course_id)

    def update_course_note(self, ctx: Mapping[Any, Any], course_id: str, value: str) -> Course:
        log = logger_from_context(ctx)
        log.info("Update Course Note resolver called")
        user_id = self._user_id(ctx, log, None)
        note = self.services.course_note.update(ctx, course_id, user_id, value)
        return Course(id=course_id, note=course_note_from_service(note))

    def step_started(self, ctx: Mapping[Any, Any], step_id: str) -> Step:
        log = logger_from_context(ctx)
        log.info("step started resolver got called")
        user_id = self._user_id(ctx, log, "error occurred getting request user ID")
        try:
            self.services.step_progress.start(ctx, step_id, user_id)
        except Exception as exc:
            log.error("error putting record in store: %s", exc)
            raise
        return Step(id=step_id)

    def step_completed(self, ctx: Mapping[Any, Any], step_id: str) -> Step:
        log = logger_from_context(ctx)
        log.info("step completed resolver got called")
        user_id = self._user_id(ctx, log, "error occurred getting request user ID")
        try:
            self.services.step_progress.complete(ctx, step_id, user_id)
        except Exception as exc:
            log.error("error putting record in store: %s", exc)
            raise
        return Step(id=step_id)

    def update_step_note(self, ctx: Mapping[Any, Any], step_id: str, value: str) -> Step:
        log = logger_from_context(ctx)
        log.info("Update Step Note resolver called")
        user_id = self._user_id(ctx, log, None)
        note = self.services.step_note.update(ctx, step_id, user_id, value)
        return Step(id=step_id, note=step_note_from_service(note))

    def update_timemap(self, ctx: Mapping[Any, Any], map_value: str) -> Timemap:
        log = logger_from_context(ctx)
        log.info("Update Timemap resolver called")
        user_id = self._user_id(ctx, log, None)
        try:
            timemap = self.services.timemap.update(ctx, user_id, map_value)
        except Exception as exc:
            log.error("An error occurred getting Timemap: %s", exc)
            raise
        return Timemap(map=timemap.map, updated_at=_format_time(timemap.date_updated))

    # Queries

    def courses(self, ctx: Mapping[Any, Any]) -> list[Course]:
        log = logger_from_context(ctx)
        log.info("courses resolver called")
        try:
            courses = self.services.course.get_all(ctx)
        except Exception as exc:
            log.error("error occurred getting all courses: %s", exc)
            raise
        return courses_from_service(courses)

    def course(self, ctx: Mapping[Any, Any], course_id: str) -> Optional[Course]:
        log = logger_from_context(ctx)
        log.info("course by id resolver called %s", course_id)
        try:
            course = self.services.course.get_by_id(ctx, course_id)
        except NotFoundError:
            log.error("course not found")
            return None
        except Exception as exc:
            log.error("error occurred getting course by id: %s", exc)
            raise
        return course_from_service(course)

    def session(self, ctx: Mapping[Any, Any], session_id: str) -> Optional[Session]:
        log = logger_from_context(ctx)
        log.info("session by id resolver called %s", session_id)
        try:
            session = self.services.session.get_by_id(ctx, session_id)
        except NotFoundError:
            log.error("session not found")
            return None
        except Exception as exc:
            log.error("error occurred getting session by id: %s", exc)
            raise
        return session_from_service(session)

    def step(self, ctx: Mapping[Any, Any], step_id: str) -> Optional[Step]:
        log = logger_from_context(ctx)
        log.info("step by id resolver called %s", step_id)
        try:
            step = self.services.step.get_by_id(ctx, step_id)
        except NotFoundError:
            log.error("step not found")
            return None
        except Exception as exc:
            log.error("error occurred getting step by id: %s", exc)
            raise
        return step_from_service(step)

    def sessions_by_course_id(self, ctx: Mapping[Any, Any], course_id: str) -> list[Session]:
        log = logger_from_context(ctx)
        log.info("Sessions By Course ID resolver got called %s", course_id)
        try:
            sessions = self.services.session.get_by_course_id(ctx, course_id)
        except Exception as exc:
            log.error("error occurred getting sessions by course id: %s", exc)
            raise
        return sessions_from_service(sessions)

    def timemap(self, ctx: Mapping[Any, Any]) -> Optional[Timemap]:
        log = logger_from_context(ctx)
        log.info("Timemap resolver got called")
        user_id = self._user_id(ctx, log, "error occurred getting request user ID")
        try:
            timemap = self.services.timemap.get(ctx, user_id)
        except NotFoundError:
            log.error("timemap not found")
            return None
        except Exception as exc:
            log.error("error getting Timemap: %s", exc)
            raise RuntimeError(f"error occurred getting Timemap {exc}") from exc
        return Timemap(
            id=timemap.id, map=timemap.map, updated_at=_format_time(timemap.date_updated)
        )

    # Step fields

    def step_note(self, ctx: Mapping[Any, Any], step: Step) -> Optional[StepNote]:
        log = logger_from_context(ctx)
        log.info("Step Note resolver got called %s", step.id)
        user_id = self._user_id(ctx, log, "error occurred getting request user ID")
        try:
            note = self.services.step_note.get(ctx, step.id, user_id)
        except NotFoundError:
            log.info("step note not found")
            return None
        except Exception as exc:
            log.error("error getting step note: %s", exc)
            raise
        return step_note_from_service(note)

    def step_progress(self, ctx: Mapping[Any, Any], step: Step) -> Optional[StepProgress]:
        log = logger_from_context(ctx)
        log.info("Step Progress resolver got called")
        user_id = self._user_id(ctx, log, "error occurred getting request user ID")
        try:
            progress = self.services.step_progress.get(ctx, step.id, user_id)
        except NotFoundError:
            log.info("step progress not found")
            return None
        except Exception as exc:
            log.error("error getting step progress: %s", exc)
            raise
        return step_progress_from_service(progress)