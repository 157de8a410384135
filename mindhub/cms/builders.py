"""Builders of CMS records filled with random data, for tests and fixtures."""

from __future__ import annotations

import random
import string
from dataclasses import replace
from typing import Optional

from .models import Course, Session, Step

_ALPHANUMERIC = string.ascii_letters + string.digits
_WORDS = (
    "calm", "breath", "mind", "focus", "rest", "light", "path", "river",
    "morning", "gentle", "steady", "open", "quiet", "space", "moment", "garden",
    "balance", "ground", "notice", "kind", "return", "shore", "wave", "cloud",
)


def _characters(length: int = 10) -> str:
    return "".join(random.choices(_ALPHANUMERIC, k=length))


def _title() -> str:
    return " ".join(w.capitalize() for w in random.sample(_WORDS, k=random.randint(2, 4)))


def _sentence() -> str:
    words = random.choices(_WORDS, k=random.randint(4, 9))
    return " ".join(words).capitalize() + "."


def _sentences() -> str:
    return " ".join(_sentence() for _ in range(random.randint(3, 5)))


class CourseBuilder:
    """Builds a Course; each with_* call returns a new builder."""

    def __init__(self, course: Optional[Course] = None) -> None:
        self._course = course if course is not None else Course(
            id=_characters(), title=_title(), description=_sentences()
        )

    def with_id(self, id_: str) -> CourseBuilder:
        return CourseBuilder(replace(self._course, id=id_))

    def with_title(self, title: str) -> CourseBuilder:
        return CourseBuilder(replace(self._course, title=title))

    def build(self) -> Course:
        return replace(self._course)


class SessionBuilder:
    """Builds a Session; each with_* call returns a new builder."""

    def __init__(self, session: Optional[Session] = None) -> None:
        self._session = session if session is not None else Session(
            id=_characters(), title=_title(), description=_sentences()
        )

    def with_id(self, id_: str) -> SessionBuilder:
        return SessionBuilder(replace(self._session, id=id_))

    def with_title(self, title: str) -> SessionBuilder:
        return SessionBuilder(replace(self._session, title=title))

    def with_course(self, course: Optional[Course]) -> SessionBuilder:
        return SessionBuilder(replace(self._session, course=course))

    def with_steps(self, *args: Step) -> SessionBuilder:
        return SessionBuilder(replace(self._session, steps=list(args)))

    def build(self) -> Session:
        return replace(self._session)


class StepBuilder:
    """Builds a Step; each with_* call returns a new builder."""

    def __init__(self, step: Optional[Step] = None) -> None:
        self._step = step if step is not None else Step(
            id=_characters(), title=_title(), description=_sentences()
        )

    def with_id(self, id_: str) -> StepBuilder:
        return StepBuilder(replace(self._step, id=id_))

    def with_title(self, title: str) -> StepBuilder:
        return StepBuilder(replace(self._step, title=title))

    def build(self) -> Step:
        return replace(self._step)