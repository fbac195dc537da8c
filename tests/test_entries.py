import datetime
import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from entries import EntryLifecycleController, parse_draft
from errors import TransportError, ValidationError
from exercise_labels import dropdown_item
from history import HistoryLoader
from log_state import EntryDraft, ExerciseLogState, ModalKind


def _controller(store, key="deadlift"):
    state = ExerciseLogState(selected=dropdown_item(key))
    loader = HistoryLoader(store, state)
    return EntryLifecycleController(store, loader, state), state


def test_parse_draft():
    when = datetime.datetime(1970, 1, 1, 0, 0, 1, tzinfo=datetime.timezone.utc)
    request = parse_draft(EntryDraft("squat", " 102.5 ", "5", "  ", when))
    assert request.weight == 102.5
    assert request.reps == 5
    assert request.notes is None
    assert request.created_at == 1000


@pytest.mark.parametrize(
    "weight,reps,message",
    [
        ("abc", "5", "must be numbers"),
        ("100", "5.5", "must be numbers"),
        ("inf", "5", "must be numbers"),
        ("1_0", "5", "must be numbers"),
        ("100", "1_0", "must be numbers"),
        ("nan", "5", "must be numbers"),
        ("1e999", "5", "must be numbers"),
        ("0", "5", "greater than zero"),
        ("100", "-2", "greater than zero"),
    ],
)
def test_parse_draft_rejects(weight, reps, message):
    with pytest.raises(ValidationError, match=message):
        parse_draft(EntryDraft("squat", weight, reps))


@pytest.mark.asyncio
async def test_invalid_weight_never_reaches_store(store):
    controller, state = _controller(store)
    state.form.weight_text = "abc"
    with pytest.raises(ValidationError):
        await controller.submit(EntryDraft("deadlift", "abc", "5"))
    assert store.count("create_entry") == 0
    assert store.count("list_entries") == 0
    assert state.form.weight_text == "abc"


@pytest.mark.asyncio
async def test_submit_refreshes_once(store):
    controller, state = _controller(store)
    state.form.weight_text = "135"
    entry = await controller.submit(EntryDraft("deadlift", "135", "5", "", datetime.datetime(2024, 1, 1)))
    assert store.count("create_entry") == 1
    assert store.count("list_entries") == 1
    assert [p.label for p in state.points] == [entry.id]
    assert state.form.weight_text == ""


@pytest.mark.asyncio
async def test_failed_create_keeps_form(store):
    controller, state = _controller(store)
    state.form.weight_text = "135"
    store.fail_with["create_entry"] = TransportError("HTTP error! status: 500")
    with pytest.raises(TransportError):
        await controller.submit(EntryDraft("deadlift", "135", "5"))
    assert state.form.weight_text == "135"
    assert store.count("list_entries") == 0


@pytest.mark.asyncio
async def test_remove_drops_point_and_closes_detail(store):
    keep = store.seed("deadlift", 135, 5, 100)
    gone = store.seed("deadlift", 185, 5, 200)
    controller, state = _controller(store)
    state.show_entry(gone)
    await controller.remove(gone.id, "deadlift")
    assert state.modal is ModalKind.NONE
    assert state.inspected is None
    assert [p.label for p in state.points] == [keep.id]


@pytest.mark.asyncio
async def test_failed_remove_keeps_detail_open(store):
    entry = store.seed("deadlift", 135, 5, 100)
    controller, state = _controller(store)
    state.show_entry(entry)
    with pytest.raises(TransportError):
        await controller.remove(999, "deadlift")
    assert state.modal is ModalKind.ENTRY_DETAIL
    assert state.inspected == entry


def test_parse_draft_accepts_plain_decimals():
    for text, expected in [("135", 135.0), ("102.5", 102.5), (".5", 0.5), ("+20", 20.0)]:
        assert parse_draft(EntryDraft("squat", text, "5")).weight == expected


@pytest.mark.asyncio
async def test_remove_keeps_detail_of_another_entry(store):
    gone = store.seed("deadlift", 135, 5, 100)
    other = store.seed("deadlift", 185, 5, 200)
    controller, state = _controller(store)
    state.show_entry(other)
    await controller.remove(gone.id, "deadlift")
    assert state.modal is ModalKind.ENTRY_DETAIL
    assert state.inspected == other
    assert [p.label for p in state.points] == [other.id]
