from datetime import datetime, timezone

import jwt
import pytest

from mindhub.api import views
from mindhub.api.resolvers import Resolver
from mindhub.request import ContextError, RequestContext, with_request_context
from mindhub.service import models as service
from mindhub.service.records import Services

USER_ID = "user-1"
WHEN = datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class Stub:
    """Answers named method calls with a fixed result, or raises a fixed error."""

    def __init__(self, **results):
        self._results = results
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            result = self._results[name]
        except KeyError:
            raise AttributeError(name) from None

        def call(*args):
            self.calls.append((name, args[1:]))
            if isinstance(result, Exception):
                raise result
            return result

        return call


def _ctx(subject=f"auth0|{USER_ID}"):
    encoded = jwt.encode({"sub": subject}, "secret", algorithm="HS256")
    if isinstance(encoded, bytes):
        encoded = encoded.decode()
    request = RequestContext(headers={"Authorization": f"Bearer {encoded}"})
    return with_request_context({}, request)


def _course(course_id="c1"):
    return service.Course(id=course_id, title="T", description="D")


def test_courses_converts_each_course():
    stub = Stub(get_all=[_course("a"), _course("b")])
    result = Resolver(Services(course=stub)).courses({})
    assert [c.id for c in result] == ["a", "b"]
    assert result[0] == views.course_from_service(_course("a"))


def test_courses_propagates_error():
    stub = Stub(get_all=RuntimeError("something went wrong"))
    with pytest.raises(RuntimeError, match="something went wrong"):
        Resolver(Services(course=stub)).courses({})


def test_course_found_and_not_found():
    found = Resolver(Services(course=Stub(get_by_id=_course("c1")))).course({}, "c1")
    assert found == views.course_from_service(_course("c1"))
    missing = Resolver(Services(course=Stub(get_by_id=service.NotFoundError()))).course({}, "c1")
    assert missing is None


def test_course_other_error_propagates():
    stub = Stub(get_by_id=RuntimeError("boom"))
    with pytest.raises(RuntimeError, match="boom"):
        Resolver(Services(course=stub)).course({}, "c1")


def test_session_includes_steps_and_course():
    session = service.Session(
        id="s1", steps=[service.Step(id="st1", audio_url="a")], course=_course("c2")
    )
    result = Resolver(Services(session=Stub(get_by_id=session))).session({}, "s1")
    assert result == views.session_from_service(session)
    assert result.course.id == "c2"
    assert result.steps[0].audio_url == "a"


def test_session_not_found_returns_none():
    stub = Stub(get_by_id=service.NotFoundError())
    assert Resolver(Services(session=stub)).session({}, "s1") is None


def test_step_found_and_not_found():
    step = service.Step(id="st1", title="T", question="Q")
    found = Resolver(Services(step=Stub(get_by_id=step))).step({}, "st1")
    assert found == views.step_from_service(step)
    assert Resolver(Services(step=Stub(get_by_id=service.NotFoundError()))).step({}, "x") is None


def test_sessions_by_course_id_and_course_sessions():
    sessions = [service.Session(id="a"), service.Session(id="b")]
    stub = Stub(get_by_course_id=sessions)
    resolver = Resolver(Services(session=stub))
    assert [s.id for s in resolver.sessions_by_course_id({}, "c1")] == ["a", "b"]
    assert [s.id for s in resolver.course_sessions({}, views.Course(id="c1"))] == ["a", "b"]
    assert stub.calls == [("get_by_course_id", ("c1",)), ("get_by_course_id", ("c1",))]


def test_counts_come_from_services():
    resolver = Resolver(
        Services(session=Stub(count_by_course_id=2), step=Stub(count_by_course_id=5))
    )
    course = views.Course(id="c1")
    assert resolver.course_session_count({}, course) == 2
    assert resolver.course_step_count({}, course) == 5


def test_count_error_propagates():
    resolver = Resolver(Services(step=Stub(count_by_course_id=RuntimeError("boom"))))
    with pytest.raises(RuntimeError, match="boom"):
        resolver.course_step_count({}, views.Course(id="c1"))


def test_course_note_uses_request_user():
    note = service.CourseNote(id="n", course_id="c1", user_id=USER_ID, value="v")
    stub = Stub(get=note)
    result = Resolver(Services(course_note=stub)).course_note(_ctx(), views.Course(id="c1"))
    assert result == views.course_note_from_service(note)
    assert stub.calls == [("get", ("c1", USER_ID))]


def test_course_note_not_found_returns_none():
    stub = Stub(get=service.NotFoundError())
    assert Resolver(Services(course_note=stub)).course_note(_ctx(), views.Course(id="c1")) is None


def test_course_note_invalid_user_raises():
    resolver = Resolver(Services(course_note=Stub(get=None)))
    with pytest.raises(ContextError) as info:
        resolver.course_note(_ctx("invalid user ID"), views.Course(id="c1"))
    assert str(info.value) == (
        "error occurred getting request user ID token user ID is an invalid Auth0 user ID"
    )


def test_course_progress_found_and_not_found():
    progress = service.CourseProgress(id="p", state="STARTED", completed_steps=1, date_started=WHEN)
    resolver = Resolver(Services(course_progress=Stub(get=progress)))
    assert resolver.course_progress(_ctx(), views.Course(id="c1")) == (
        views.course_progress_from_service(progress)
    )
    missing = Resolver(Services(course_progress=Stub(get=service.NotFoundError())))
    assert missing.course_progress(_ctx(), views.Course(id="c1")) is None


def test_course_started_starts_progress():
    stub = Stub(start=service.CourseProgress(id="p"))
    result = Resolver(Services(course_progress=stub)).course_started(_ctx(), "c1")
    assert result == views.Course(id="c1")
    assert stub.calls == [("start", ("c1", USER_ID))]


def test_course_started_store_error_propagates():
    stub = Stub(start=RuntimeError("something went wrong"))
    with pytest.raises(RuntimeError, match="something went wrong"):
        Resolver(Services(course_progress=stub)).course_started(_ctx(), "c1")


def test_update_course_note_returns_course_with_note():
    note = service.CourseNote(id="n", course_id="c1", user_id=USER_ID, value="new")
    stub = Stub(update=note)
    result = Resolver(Services(course_note=stub)).update_course_note(_ctx(), "c1", "new")
    assert result.id == "c1"
    assert result.note == views.course_note_from_service(note)
    assert stub.calls == [("update", ("c1", USER_ID, "new"))]


def test_update_course_note_without_context_raises_unwrapped():
    resolver = Resolver(Services(course_note=Stub(update=None)))
    with pytest.raises(ContextError) as info:
        resolver.update_course_note({}, "c1", "v")
    assert str(info.value).startswith("no auth token in context")


def test_step_started_and_completed():
    stub = Stub(start=service.StepProgress(), complete=service.StepProgress())
    resolver = Resolver(Services(step_progress=stub))
    assert resolver.step_started(_ctx(), "s1") == views.Step(id="s1")
    assert resolver.step_completed(_ctx(), "s1") == views.Step(id="s1")
    assert stub.calls == [("start", ("s1", USER_ID)), ("complete", ("s1", USER_ID))]


def test_update_step_note_returns_step_with_note():
    note = service.StepNote(id="n", step_id="s1", user_id=USER_ID, value="v")
    result = Resolver(Services(step_note=Stub(update=note))).update_step_note(_ctx(), "s1", "v")
    assert result.id == "s1"
    assert result.note == views.step_note_from_service(note)


def test_update_timemap_returns_map():
    timemap = service.Timemap(id="t", user_id=USER_ID, map="m", date_updated=WHEN)
    stub = Stub(update=timemap)
    result = Resolver(Services(timemap=stub)).update_timemap(_ctx(), "m")
    assert result.map == "m"
    assert result.id == ""
    assert stub.calls == [("update", (USER_ID, "m"))]


def test_timemap_found():
    timemap = service.Timemap(id="t", user_id=USER_ID, map="m", date_updated=WHEN)
    result = Resolver(Services(timemap=Stub(get=timemap))).timemap(_ctx())
    assert result.id == "t"
    assert result.map == "m"
    assert result.updated_at == views.course_progress_from_service(
        service.CourseProgress(date_started=WHEN)
    ).date_started


def test_timemap_not_found_and_error():
    missing = Resolver(Services(timemap=Stub(get=service.NotFoundError())))
    assert missing.timemap(_ctx()) is None
    failing = Resolver(Services(timemap=Stub(get=RuntimeError("boom"))))
    with pytest.raises(RuntimeError) as info:
        failing.timemap(_ctx())
    assert str(info.value) == "error occurred getting Timemap boom"


def test_step_note_found_and_not_found():
    note = service.StepNote(id="n", step_id="s1", user_id=USER_ID, value="v")
    stub = Stub(get=note)
    assert Resolver(Services(step_note=stub)).step_note(_ctx(), views.Step(id="s1")) == (
        views.step_note_from_service(note)
    )
    assert stub.calls == [("get", ("s1", USER_ID))]
    missing = Resolver(Services(step_note=Stub(get=service.NotFoundError())))
    assert missing.step_note(_ctx(), views.Step(id="s1")) is None


def test_step_progress_with_and_without_completion():
    started = service.StepProgress(id="p", state="STARTED", date_started=WHEN)
    done = service.StepProgress(id="p", state="COMPLETED", date_started=WHEN, date_completed=WHEN)
    first = Resolver(Services(step_progress=Stub(get=started))).step_progress(
        _ctx(), views.Step(id="s1")
    )
    second = Resolver(Services(step_progress=Stub(get=done))).step_progress(
        _ctx(), views.Step(id="s1")
    )
    assert first.date_completed == ""
    assert second.date_completed == second.date_started
    assert second.state == "COMPLETED"


def test_step_progress_without_context_raises():
    resolver = Resolver(Services(step_progress=Stub(get=None)))
    with pytest.raises(ContextError) as info:
        resolver.step_progress({}, views.Step(id="s1"))
    assert str(info.value).startswith("error occurred getting request user ID no auth token")