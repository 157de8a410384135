"""Fetching courses, sessions and steps from the CMS."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from ..logs import COURSE_ID_KEY, SESSION_ID_KEY, STEP_ID_KEY, logger_from_context
from .client import (
    GET_ALL_COURSES_QUERY,
    GET_COURSE_BY_ID_QUERY,
    GET_SESSION_BY_ID_QUERY,
    GET_SESSIONS_BY_COURSE_ID_QUERY,
    GET_STEP_BY_ID_QUERY,
    CMSError,
    Requester,
    new_request,
)
from .models import Course, Session, Step


class Resolver:
    """Runs the CMS queries and turns their results into content records."""

    def __init__(self, client: Requester) -> None:
        self.client = client

    def _query(
        self,
        ctx: Mapping[Any, Any],
        query: str,
        failure: str,
        entity_id: Optional[str] = None,
    ) -> Mapping[str, Any]:
        req = new_request(ctx, query)
        if entity_id is not None:
            req.var("id", entity_id)
        try:
            return self.client.run(ctx, req) or {}
        except CMSError as exc:
            raise CMSError(failure) from exc

    def get_courses(self, ctx: Mapping[Any, Any]) -> list[Course]:
        logger_from_context(ctx).info("Resolving GraphCMS Courses")
        data = self._query(ctx, GET_ALL_COURSES_QUERY, "error occurred getting GraphCMS Courses")
        return [Course.from_dict(c) for c in data.get("courses") or []]

    def get_course_by_id(self, ctx: Mapping[Any, Any], course_id: str) -> Optional[Course]:
        log = logger_from_context(ctx).with_fields({COURSE_ID_KEY: course_id})
        log.info(f"Resolving GraphCMS Course {course_id}")
        data = self._query(
            ctx, GET_COURSE_BY_ID_QUERY, "error occurred getting GraphCMS Course", course_id
        )
        course = data.get("course")
        return Course.from_dict(course) if course else None

    def get_sessions_by_course_id(self, ctx: Mapping[Any, Any], course_id: str) -> list[Session]:
        log = logger_from_context(ctx).with_fields({COURSE_ID_KEY: course_id})
        log.info(f"Resolving GraphCMS Course {course_id} Sessions")
        data = self._query(
            ctx,
            GET_SESSIONS_BY_COURSE_ID_QUERY,
            "error occurred getting GraphCMS Course Sessions",
            course_id,
        )
        return [Session.from_dict(s) for s in data.get("sessions") or []]

    def get_session_by_id(self, ctx: Mapping[Any, Any], session_id: str) -> Optional[Session]:
        log = logger_from_context(ctx).with_fields({SESSION_ID_KEY: session_id})
        log.info(f"Resolving GraphCMS Session {session_id}")
        data = self._query(
            ctx, GET_SESSION_BY_ID_QUERY, "error occurred getting GraphCMS Session", session_id
        )
        session = data.get("session")
        return Session.from_dict(session) if session else None

    def get_step_ids_by_course_id(self, ctx: Mapping[Any, Any], course_id: str) -> list[str]:
        log = logger_from_context(ctx).with_fields({SESSION_ID_KEY: course_id})
        log.info(f"Resolving GraphCMS Step IDs for Course {course_id}")
        data = self._query(
            ctx,
            GET_SESSIONS_BY_COURSE_ID_QUERY,
            "error occurred getting GraphCMS Session By Course ID",
            course_id,
        )
        sessions = [Session.from_dict(s) for s in data.get("sessions") or []]
        return [step.id for session in sessions for step in session.steps]

    def get_steps_by_id(self, ctx: Mapping[Any, Any], step_id: str) -> Optional[Step]:
        log = logger_from_context(ctx).with_fields({STEP_ID_KEY: step_id})
        log.info(f"Resolving GraphCMS Step {step_id}")
        data = self._query(
            ctx, GET_STEP_BY_ID_QUERY, "error occurred getting GraphCMS Step", step_id
        )
        step = data.get("step")
        return Step.from_dict(step) if step else None