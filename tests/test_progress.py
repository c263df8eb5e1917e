import pytest

from triage_rulesets.models.session import AnsweredQuestion, SessionState
from triage_rulesets.progress import progress, progress_percent, round_half_up


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, 0), (0.49, 0), (0.5, 1), (2.5, 3), (42.5, 43), (99.6, 100)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_running_session_credits_current_question():
    assert progress_percent(0, 7, finished=False) == 14
    assert progress_percent(3, 7, finished=False) == 57


def test_finished_session_counts_answers_only():
    assert progress_percent(2, 7, finished=True) == 29
    assert progress_percent(7, 7, finished=True) == 100


def test_progress_is_clamped():
    # A long path can credit N + 1 questions before the last submission
    assert progress_percent(7, 7, finished=False) == 100
    assert progress_percent(9, 7, finished=True) == 100


def test_half_percent_rounds_up():
    # 1 of 8 is 12.5%
    assert progress_percent(1, 8, finished=True) == 13


def test_total_must_be_positive():
    with pytest.raises(ValueError):
        progress_percent(0, 0, finished=False)


def test_progress_from_state():
    running = SessionState(
        current_qid="Q2", answered_log=(AnsweredQuestion(qid="Q1", answer=True),),
    )
    assert progress(running, 7) == 29
    done = running.model_copy(update={"current_qid": None, "final_result": "consulta"})
    assert progress(done, 7) == 14
