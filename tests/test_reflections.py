from __future__ import annotations

from datetime import timedelta

import pytest

from dailyhabits.services.reflections import DEFAULT_PROMPTS, ReflectionJournal


@pytest.fixture
def journal(reflection_repo, clock):
    return ReflectionJournal(reflection_repo, user_id="user-1", clock=clock)


def test_get_today_seeds_blank_prompts(journal, clock):
    reflection = journal.get_today()

    assert reflection.date == clock()
    assert [r["question"] for r in reflection.responses] == list(DEFAULT_PROMPTS)
    assert reflection.answered_count == 0


def test_save_trims_and_replaces_same_day(journal, reflection_repo):
    journal.save([{"question": DEFAULT_PROMPTS[0], "answer": "  ran 5k  "}])
    saved = journal.save(
        [
            {"question": DEFAULT_PROMPTS[0], "answer": "ran 5k"},
            {"question": DEFAULT_PROMPTS[1], "answer": "   "},
        ]
    )

    assert len(reflection_repo.rows) == 1
    assert saved.responses[0]["answer"] == "ran 5k"
    assert saved.answered_count == 1
    assert journal.get_today().responses == saved.responses


def test_save_rejects_future_date(journal, clock):
    with pytest.raises(ValueError):
        journal.save([{"question": "q", "answer": "a"}], day=clock() + timedelta(days=1))


def test_history_newest_first(journal, clock):
    for offset in (3, 1, 2):
        journal.save([{"question": "q", "answer": str(offset)}], day=clock() - timedelta(days=offset))

    history = journal.history(limit=2)

    assert [r.date for r in history] == [clock() - timedelta(days=1), clock() - timedelta(days=2)]
