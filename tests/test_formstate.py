"""Tests for the form engine state and submission lifecycle."""

import logging

import anyio
import pytest

from fieldops_tracker.lib import validators as v
from fieldops_tracker.lib.formstate import ChangeEvent, FormEngine, extract_value


class SubmitSpy:
    def __init__(self, error=None):
        self.calls = []
        self.error = error
        self.engine = None
        self.submitting_during_call = None

    async def __call__(self, values):
        self.calls.append(values)
        if self.engine is not None:
            self.submitting_during_call = self.engine.is_submitting
        if self.error is not None:
            raise self.error


class FakeSubmitEvent:
    def __init__(self):
        self.prevented = False

    def prevent_default(self):
        self.prevented = True


def installer_rules():
    return {
        "name": v.String(required=True, min_length=3),
        "contactNo": v.MalaysianPhone(required=True),
    }


@pytest.mark.anyio
async def test_submit_blocked_while_invalid():
    spy = SubmitSpy()
    engine = FormEngine({"name": "", "contactNo": ""}, installer_rules(), spy)

    await engine.handle_submit()

    assert spy.calls == []
    assert not engine.is_submitting
    assert not engine.is_form_valid
    assert engine.touched == {"name", "contactNo"}


@pytest.mark.anyio
async def test_submit_happy_path():
    spy = SubmitSpy()
    engine = FormEngine({"name": "Alice", "contactNo": "0123456789"}, installer_rules(), spy)
    spy.engine = engine
    states = []
    engine.subscribe(lambda eng: states.append(eng.is_submitting))

    assert not engine.is_submitting
    await engine.handle_submit()

    assert spy.calls == [{"name": "Alice", "contactNo": "0123456789"}]
    assert spy.submitting_during_call is True
    assert states == [True, False]
    assert not engine.is_submitting
    assert engine.errors == {}


@pytest.mark.anyio
async def test_submit_receives_a_copy_of_values():
    received = []

    async def on_submit(values):
        values["name"] = "changed"
        received.append(values)

    engine = FormEngine({"name": "Alice"}, {"name": v.String(required=True)}, on_submit)
    await engine.handle_submit()

    assert received == [{"name": "changed"}]
    assert engine.values == {"name": "Alice"}


@pytest.mark.anyio
async def test_submit_failure_surfaces_form_error():
    spy = SubmitSpy(error=Exception("boom"))
    engine = FormEngine({"name": "Alice", "contactNo": "0123456789"}, installer_rules(), spy)

    await engine.handle_submit()

    assert engine.errors["form"] == "boom"
    assert not engine.is_submitting
    assert len(spy.calls) == 1


@pytest.mark.anyio
async def test_submit_failure_without_message_uses_fallback():
    spy = SubmitSpy(error=RuntimeError())
    engine = FormEngine({}, {}, spy)

    await engine.handle_submit()

    assert engine.errors == {"form": "Form submission failed"}


@pytest.mark.anyio
async def test_form_error_is_dropped_on_next_change():
    engine = FormEngine({"name": "Alice"}, {"name": v.String()}, SubmitSpy(Exception("boom")))
    await engine.handle_submit()
    assert "form" in engine.errors

    engine.handle_change("name", "Bob")
    assert engine.errors == {}


@pytest.mark.anyio
async def test_sync_submit_handler_is_accepted():
    calls = []
    engine = FormEngine({"name": "Alice"}, {"name": v.String()}, calls.append)

    await engine.handle_submit()

    assert calls == [{"name": "Alice"}]


@pytest.mark.anyio
async def test_submit_event_default_is_prevented():
    event = FakeSubmitEvent()
    engine = FormEngine({}, {})

    await engine.handle_submit(event)

    assert event.prevented


@pytest.mark.anyio
async def test_second_submit_is_ignored_while_in_flight():
    started = anyio.Event()
    release = anyio.Event()
    calls = []

    async def on_submit(values):
        calls.append(values)
        started.set()
        await release.wait()

    engine = FormEngine({"name": "Alice"}, {"name": v.String(required=True)}, on_submit)

    async with anyio.create_task_group() as tg:
        tg.start_soon(engine.handle_submit)
        await started.wait()
        assert engine.is_submitting

        await engine.handle_submit()
        release.set()

    assert len(calls) == 1
    assert not engine.is_submitting


@pytest.mark.anyio
async def test_cancelled_submission_clears_submitting():
    started = anyio.Event()
    states = []

    async def on_submit(values):
        started.set()
        await anyio.sleep_forever()

    engine = FormEngine({"name": "Alice"}, {"name": v.String(required=True)}, on_submit)
    engine.subscribe(lambda eng: states.append(eng.is_submitting))

    async with anyio.create_task_group() as tg:
        tg.start_soon(engine.handle_submit)
        await started.wait()
        assert engine.is_submitting
        tg.cancel_scope.cancel()

    assert not engine.is_submitting
    assert "form" not in engine.errors
    assert states == [True, False]


@pytest.mark.anyio
async def test_submit_failure_is_logged_as_warning(caplog):
    engine = FormEngine({}, {}, SubmitSpy(error=RuntimeError("backend down")))

    with caplog.at_level(logging.WARNING, logger="fieldops-tracker"):
        await engine.handle_submit()

    records = [r for r in caplog.records if "Form submission error" in r.getMessage()]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert "backend down" in records[0].getMessage()


@pytest.mark.anyio
async def test_disposed_form_ignores_late_submission_result():
    started = anyio.Event()
    release = anyio.Event()

    async def on_submit(values):
        started.set()
        await release.wait()
        raise Exception("network down")

    engine = FormEngine({"name": "Alice"}, {"name": v.String()}, on_submit)
    seen = []
    engine.subscribe(lambda eng: seen.append(eng.is_submitting))

    async with anyio.create_task_group() as tg:
        tg.start_soon(engine.handle_submit)
        await started.wait()
        engine.dispose()
        release.set()

    assert engine.is_disposed
    assert "form" not in engine.errors
    # listeners were detached before the submission settled
    assert seen == [True]


@pytest.mark.anyio
async def test_submit_on_disposed_form_is_noop():
    spy = SubmitSpy()
    engine = FormEngine({"name": "Alice"}, {"name": v.String()}, spy)
    engine.dispose()

    await engine.handle_submit()

    assert spy.calls == []


@pytest.mark.anyio
async def test_reset_during_submission_discards_result():
    started = anyio.Event()
    release = anyio.Event()

    async def on_submit(values):
        started.set()
        await release.wait()
        raise Exception("late failure")

    engine = FormEngine({"name": "Alice"}, {"name": v.String()}, on_submit)

    async with anyio.create_task_group() as tg:
        tg.start_soon(engine.handle_submit)
        await started.wait()
        engine.reset_form()
        assert not engine.is_submitting
        release.set()

    assert engine.errors == {}


@pytest.mark.anyio
async def test_reset_form_restores_initial_state():
    initial = {"name": "", "contactNo": "", "tags": ["fibre"]}
    engine = FormEngine(initial, installer_rules(), SubmitSpy())

    engine.handle_change("name", "Al")
    engine.handle_blur("contactNo")
    engine.set_field_value("tags", ["copper"])
    await engine.handle_submit()
    assert engine.errors

    engine.reset_form()

    assert engine.values == {"name": "", "contactNo": "", "tags": ["fibre"]}
    assert engine.errors == {}
    assert engine.touched == set()
    assert not engine.is_submitting


def test_initial_values_are_copied():
    initial = {"tags": ["fibre"]}
    engine = FormEngine(initial, {})

    initial["tags"].append("copper")
    engine.reset_form()

    assert engine.values == {"tags": ["fibre"]}


def test_handle_change_marks_touched_and_revalidates():
    engine = FormEngine({"name": ""}, installer_rules())
    assert engine.touched == set()
    assert engine.visible_error("name") is None

    engine.handle_change("name", "Al")

    assert engine.values["name"] == "Al"
    assert engine.is_touched("name")
    assert engine.errors["name"] == "Minimum length is 3 characters"
    assert engine.visible_error("name") == "Minimum length is 3 characters"


def test_handle_blur_only_marks_touched():
    engine = FormEngine({"name": ""}, installer_rules())

    engine.handle_blur("name")

    assert engine.values == {"name": ""}
    assert engine.touched == {"name"}
    assert engine.visible_error("name") == "This field is required"


def test_change_event_dispatch():
    assert extract_value(ChangeEvent(type="checkbox", value="on", checked=True)) is True
    assert extract_value(ChangeEvent(type="checkbox", checked=False)) is False
    assert extract_value(ChangeEvent(type="text", value="Alice")) == "Alice"
    assert extract_value(ChangeEvent(type="number", value=12)) == 12
    assert extract_value("raw") == "raw"

    engine = FormEngine({"is_active": True}, {"is_active": v.Boolean()})
    engine.handle_change("is_active", ChangeEvent(type="checkbox", checked=False))
    assert engine.values["is_active"] is False


def test_programmatic_values_are_validated():
    rules = {
        "quantity": v.Integer(required=True, min_value=1),
        "unit_price": v.Number(required=True, min_value=0),
    }
    engine = FormEngine({"quantity": 1, "unit_price": 10}, rules)
    assert engine.is_form_valid

    engine.set_field_value("quantity", 0)
    assert not engine.is_form_valid
    assert "quantity" in engine.errors

    engine.set_form_values({"quantity": 2, "total_amount": 20})
    assert engine.is_form_valid
    # auxiliary fields are stored but never validated
    assert engine.values["total_amount"] == 20
    assert engine.touched == set()


def test_empty_rule_set_is_always_valid():
    engine = FormEngine({"anything": ""}, {})
    assert engine.is_form_valid
    assert engine.errors == {}


def test_subscribe_and_unsubscribe():
    engine = FormEngine({"name": ""}, {})
    seen = []
    unsubscribe = engine.subscribe(lambda eng: seen.append(eng.values["name"]))

    engine.handle_change("name", "A")
    unsubscribe()
    engine.handle_change("name", "AB")

    assert seen == ["A"]


def test_snapshot():
    engine = FormEngine({"name": ""}, {"name": v.String(required=True)})
    engine.handle_blur("name")

    snapshot = engine.snapshot()

    assert snapshot.as_dict() == {
        "values": {"name": ""},
        "errors": {"name": "This field is required"},
        "touched": ["name"],
        "is_submitting": False,
        "is_valid": False,
    }


def test_invalid_construction_arguments():
    with pytest.raises(TypeError):
        FormEngine(["name"], {})
    with pytest.raises(TypeError):
        FormEngine({}, ["name"])


@pytest.mark.anyio
async def test_installer_scenario():
    spy = SubmitSpy()
    engine = FormEngine({"name": "", "contactNo": ""}, installer_rules(), spy)

    await engine.handle_submit()
    assert engine.errors == {
        "name": "This field is required",
        "contactNo": "This field is required",
    }
    assert not engine.is_form_valid
    assert spy.calls == []

    engine.handle_change("name", "Al")
    assert engine.errors["name"] == "Minimum length is 3 characters"

    engine.handle_change("name", "Alice")
    engine.handle_change("contactNo", "0123456789")
    assert engine.errors == {}
    assert engine.is_form_valid

    await engine.handle_submit()
    assert spy.calls == [{"name": "Alice", "contactNo": "0123456789"}]
