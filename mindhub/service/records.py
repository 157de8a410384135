"""Services for a user's notes, step progress and timemap, kept in the store."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from ..logs import COURSE_ID_KEY, SESSION_ID_KEY, USER_ID_KEY, logger_from_context
from .models import CourseNote, NotFoundError, StepNote, StepProgress, Timemap


@dataclass(frozen=True)
class NoteUpdate:
    """The new value of a user's note on a course or step."""

    entity_id: str
    user_id: str
    value: str


@dataclass(frozen=True)
class TimemapUpdate:
    """The new map of a user's timemap."""

    user_id: str
    map: str


def _course_note(stored: Any) -> CourseNote:
    return CourseNote(
        id=stored.id,
        course_id=stored.entity_id,
        user_id=stored.user_id,
        value=stored.value,
    )


def _step_note(stored: Any) -> StepNote:
    return StepNote(
        id=stored.id,
        step_id=stored.entity_id,
        user_id=stored.user_id,
        value=stored.value,
        date_created=stored.date_created,
        date_updated=stored.date_updated,
    )


def _step_progress(stored: Any) -> StepProgress:
    return StepProgress(
        id=stored.id,
        step_id=stored.entity_id,
        user_id=stored.user_id,
        state=stored.state,
        date_started=stored.date_started,
        date_completed=stored.date_completed,
    )


def _timemap(stored: Any) -> Timemap:
    return Timemap(
        id=stored.id,
        user_id=stored.user_id,
        map=stored.map,
        date_created=stored.date_created,
        date_updated=stored.date_updated,
    )


class CourseNoteService:
    """Reads and updates a user's notes on courses."""

    def __init__(self, store: Any) -> None:
        self.store = store

    def get(self, ctx: Mapping[Any, Any], course_id: str, user_id: str) -> CourseNote:
        log = logger_from_context(ctx).with_fields(
            {COURSE_ID_KEY: course_id, USER_ID_KEY: user_id}
        )
        try:
            stored = self.store.get(ctx, course_id, user_id)
        except Exception as exc:
            log.error("error occurred getting course note from store: %s", exc)
            raise
        if stored is None:
            log.info("course note not found in store")
            raise NotFoundError()
        return _course_note(stored)

    def update(
        self, ctx: Mapping[Any, Any], course_id: str, user_id: str, value: str
    ) -> CourseNote:
        log = logger_from_context(ctx).with_fields(
            {COURSE_ID_KEY: course_id, USER_ID_KEY: user_id}
        )
        note = NoteUpdate(entity_id=course_id, user_id=user_id, value=value)
        try:
            stored = self.store.update(ctx, note)
        except Exception as exc:
            log.error("An error occurred updating course note: %s", exc)
            raise
        return _course_note(stored)


class StepNoteService:
    """Reads and updates a user's notes on steps."""

    def __init__(self, store: Any) -> None:
        self.store = store

    def get(self, ctx: Mapping[Any, Any], step_id: str, user_id: str) -> StepNote:
        log = logger_from_context(ctx).with_fields(
            {SESSION_ID_KEY: step_id, USER_ID_KEY: user_id}
        )
        try:
            stored = self.store.get(ctx, step_id, user_id)
        except Exception as exc:
            log.error("error occurred getting session note from store: %s", exc)
            raise
        if stored is None:
            log.info("session note not found in store")
            raise NotFoundError()
        return _step_note(stored)

    def update(
        self, ctx: Mapping[Any, Any], step_id: str, user_id: str, value: str
    ) -> StepNote:
        log = logger_from_context(ctx).with_fields(
            {SESSION_ID_KEY: step_id, USER_ID_KEY: user_id}
        )
        note = NoteUpdate(entity_id=step_id, user_id=user_id, value=value)
        try:
            stored = self.store.update(ctx, note)
        except Exception as exc:
            log.error("error occurred updating step note in store: %s", exc)
            raise
        return _step_note(stored)


class StepProgressService:
    """Reads, starts and completes a user's progress on steps."""

    def __init__(self, store: Any) -> None:
        self.store = store

    def _log(self, ctx: Mapping[Any, Any], step_id: str, user_id: str) -> Any:
        return logger_from_context(ctx).with_fields(
            {SESSION_ID_KEY: step_id, USER_ID_KEY: user_id}
        )

    def get(self, ctx: Mapping[Any, Any], step_id: str, user_id: str) -> StepProgress:
        log = self._log(ctx, step_id, user_id)
        try:
            stored = self.store.get(ctx, step_id, user_id)
        except Exception as exc:
            log.error("error getting step progress from store: %s", exc)
            raise
        if stored is None:
            log.info("step progress not found in store")
            raise NotFoundError()
        return _step_progress(stored)

    def start(self, ctx: Mapping[Any, Any], step_id: str, user_id: str) -> StepProgress:
        log = self._log(ctx, step_id, user_id)
        try:
            stored = self.store.start(ctx, step_id, user_id)
        except Exception as exc:
            log.error("error starting step progress in store: %s", exc)
            raise
        return _step_progress(stored)

    def complete(self, ctx: Mapping[Any, Any], step_id: str, user_id: str) -> StepProgress:
        log = self._log(ctx, step_id, user_id)
        try:
            stored = self.store.complete(ctx, step_id, user_id)
        except Exception as exc:
            log.error("error completing step progress in store: %s", exc)
            raise
        return _step_progress(stored)


class TimemapService:
    """Reads and updates a user's timemap."""

    def __init__(self, store: Any) -> None:
        self.store = store

    def get(self, ctx: Mapping[Any, Any], user_id: str) -> Timemap:
        log = logger_from_context(ctx).with_fields({USER_ID_KEY: user_id})
        try:
            stored = self.store.get(ctx, user_id)
        except Exception as exc:
            log.error("error getting timemap by id from store: %s", exc)
            raise
        if stored is None:
            log.error("timemap not found in store")
            raise NotFoundError()
        return _timemap(stored)

    def update(self, ctx: Mapping[Any, Any], user_id: str, value: str) -> Timemap:
        log = logger_from_context(ctx).with_fields({USER_ID_KEY: user_id})
        try:
            stored = self.store.update(ctx, TimemapUpdate(user_id=user_id, map=value))
        except Exception as exc:
            log.error("error updating timemap from store: %s", exc)
            raise
        return _timemap(stored)


@dataclass
class Services:
    """The set of services the API resolvers call."""

    session: Optional[Any] = None
    step: Optional[Any] = None
    course: Optional[Any] = None
    course_progress: Optional[Any] = None
    course_note: Optional[Any] = None
    step_progress: Optional[Any] = None
    step_note: Optional[Any] = None
    timemap: Optional[Any] = None