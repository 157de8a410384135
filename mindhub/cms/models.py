"""Content records as the CMS returns them."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar

_T = TypeVar("_T")

_CONTENT_KEYS = ("id", "title", "description")


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _optional_text(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _content(data: Mapping[str, Any]) -> dict[str, str]:
    return {key: _text(data, key) for key in _CONTENT_KEYS}


def _nested(
    data: Mapping[str, Any], key: str, build: Callable[[Mapping[str, Any]], _T]
) -> Optional[_T]:
    value = data.get(key)
    return build(value) if value else None


def _many(
    data: Mapping[str, Any], key: str, build: Callable[[Mapping[str, Any]], _T]
) -> list[_T]:
    return [build(item) for item in data.get(key) or []]


@dataclass
class _Content:
    id: str = ""
    title: str = ""
    description: str = ""


@dataclass
class Audio:
    """An audio asset attached to a step."""

    id: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Audio:
        return cls(id=_text(data, "id"), url=_text(data, "url"))


@dataclass
class Course(_Content):
    """A course and, when requested, its sessions."""

    sessions: list[Session] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Course:
        return cls(**_content(data), sessions=_many(data, "sessions", Session.from_dict))


@dataclass
class Session(_Content):
    """A session of a course, with its steps and owning course when requested."""

    steps: list[Step] = field(default_factory=list)
    course: Optional[Course] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Session:
        return cls(
            **_content(data),
            steps=_many(data, "steps", Step.from_dict),
            course=_nested(data, "course", Course.from_dict),
        )


@dataclass
class Step(_Content):
    """A single step of a session."""

    type: str = ""
    video_url: Optional[str] = None
    audio: Optional[Audio] = None
    question: Optional[str] = None
    session: Optional[Session] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Step:
        return cls(
            **_content(data),
            type=_text(data, "type"),
            video_url=_optional_text(data, "videoUrl"),
            audio=_nested(data, "audio", Audio.from_dict),
            question=_optional_text(data, "question"),
            session=_nested(data, "session", Session.from_dict),
        )