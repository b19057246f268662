from __future__ import annotations

from datetime import timedelta

import pytest

from dailyhabits.services.daily_notes import DailyNotebook


@pytest.fixture
def notebook(daily_note_repo, clock):
    return DailyNotebook(daily_note_repo, user_id="user-1", clock=clock)


def test_today_without_entry_is_blank(notebook, clock):
    note = notebook.get_today()

    assert note.date == clock()
    assert note.focus == ""
    assert note.note == ""
    assert note.is_empty


def test_save_trims_and_keeps_omitted_field(notebook, daily_note_repo):
    notebook.save(focus="  Finish the report ")
    saved = notebook.save(note=" One step at a time ")

    assert saved.focus == "Finish the report"
    assert saved.note == "One step at a time"
    assert len(daily_note_repo.rows) == 1
    assert notebook.get_today().to_dict()["focus"] == "Finish the report"


def test_empty_string_clears_field(notebook):
    notebook.save(focus="Ship it", note="keep going")
    cleared = notebook.save(focus="")

    assert cleared.focus == ""
    assert cleared.note == "keep going"


def test_each_day_has_its_own_entry(notebook, clock):
    notebook.save(focus="Monday focus")
    clock.advance()

    assert notebook.get_today().is_empty
    assert notebook.get(clock() - timedelta(days=1)).focus == "Monday focus"


def test_past_day_can_be_written(notebook, clock):
    yesterday = clock() - timedelta(days=1)
    saved = notebook.save(note="late entry", day=yesterday)

    assert saved.date == yesterday
    assert notebook.get_today().is_empty


def test_future_day_rejected(notebook, clock):
    with pytest.raises(ValueError):
        notebook.save(focus="later", day=clock() + timedelta(days=1))


def test_overlong_focus_rejected(notebook, daily_note_repo):
    with pytest.raises(ValueError):
        notebook.save(focus="x" * 201)
    assert daily_note_repo.rows == {}
