"""Builders of service records filled with random data, for tests and fixtures."""

from __future__ import annotations

import random
import string
from dataclasses import replace
from datetime import datetime
from typing import Optional

from .models import StepNote, Timemap

_ALPHANUMERIC = string.ascii_letters + string.digits
_WORDS = (
    "calm", "breath", "mind", "focus", "rest", "light", "path", "river",
    "morning", "gentle", "steady", "open", "quiet", "space", "moment", "garden",
)


def _characters(length: int = 10) -> str:
    return "".join(random.choices(_ALPHANUMERIC, k=length))


def _sentences() -> str:
    sentences = (
        " ".join(random.choices(_WORDS, k=random.randint(4, 9))).capitalize() + "."
        for _ in range(random.randint(3, 5))
    )
    return " ".join(sentences)


class StepNoteBuilder:
    """Builds a StepNote; each with_* call returns a new builder."""

    def __init__(self, note: Optional[StepNote] = None) -> None:
        self._note = note if note is not None else StepNote(
            id=_characters(),
            step_id=_characters(),
            user_id=_characters(),
            value=_sentences(),
        )

    def with_id(self, id_: str) -> StepNoteBuilder:
        return StepNoteBuilder(replace(self._note, id=id_))

    def with_user_id(self, user_id: str) -> StepNoteBuilder:
        return StepNoteBuilder(replace(self._note, user_id=user_id))

    def with_step_id(self, step_id: str) -> StepNoteBuilder:
        return StepNoteBuilder(replace(self._note, step_id=step_id))

    def with_value(self, value: str) -> StepNoteBuilder:
        return StepNoteBuilder(replace(self._note, value=value))

    def with_date_created(self, when: datetime) -> StepNoteBuilder:
        return StepNoteBuilder(replace(self._note, date_created=when))

    def with_date_updated(self, when: datetime) -> StepNoteBuilder:
        return StepNoteBuilder(replace(self._note, date_updated=when))

    def build(self) -> StepNote:
        return replace(self._note)


class TimemapBuilder:
    """Builds a Timemap; each with_* call returns a new builder."""

    def __init__(self, timemap: Optional[Timemap] = None) -> None:
        self._timemap = timemap if timemap is not None else Timemap(
            id=_characters(), user_id=_characters(), map=_characters()
        )

    def with_id(self, id_: str) -> TimemapBuilder:
        return TimemapBuilder(replace(self._timemap, id=id_))

    def with_user_id(self, user_id: str) -> TimemapBuilder:
        return TimemapBuilder(replace(self._timemap, user_id=user_id))

    def with_map(self, value: str) -> TimemapBuilder:
        return TimemapBuilder(replace(self._timemap, map=value))

    def with_date_updated(self, when: datetime) -> TimemapBuilder:
        return TimemapBuilder(replace(self._timemap, date_updated=when))

    def build(self) -> Timemap:
        return replace(self._timemap)