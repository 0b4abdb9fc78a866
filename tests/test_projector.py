import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from exam_model import (  # noqa: E402
    ExamAnswer, ExamQuestion, MultipleChoiceQuestion, ShortAnswerQuestion, TrueFalseQuestion,
)
from exam_text import is_correct_option, option_letter, strip_option_prefix  # noqa: E402
from projector import parse_true_false, project  # noqa: E402


def _q(qid, qtype, text="?", options=()):
    return ExamQuestion(id=qid, text=text, type=qtype, options=tuple(options))


def _a(qid, answer, explanation=""):
    return ExamAnswer(question_id=qid, answer_text=answer, explanation=explanation)


def test_project_preserves_order_and_variants():
    questions = [
        _q("Q1", "MULTIPLE_CHOICE", "Thủ đô?", ["A. Paris", "B. Lyon"]),
        _q("Q2", "TRUE_FALSE", "Đúng hay sai?"),
        _q("Q3", "SHORT_ANSWER", "Viết gì?"),
    ]
    answers = [_a("Q3", "abc"), _a("Q1", "Paris"), _a("Q2", "Đúng")]
    out = project(questions, answers)
    assert out == [
        MultipleChoiceQuestion(prompt="Thủ đô?", options=("A. Paris", "B. Lyon"), correct_answer="Paris"),
        TrueFalseQuestion(prompt="Đúng hay sai?", correct_answer=True),
        ShortAnswerQuestion(prompt="Viết gì?", correct_answer="abc"),
    ]


def test_project_excludes_questions_without_answer(capsys):
    out = project([_q("Q1", "SHORT_ANSWER"), _q("Q2", "SHORT_ANSWER")], [_a("Q2", "x")])
    assert len(out) == 1
    assert out[0].correct_answer == "x"
    assert "no answer found for question 'Q1'" in capsys.readouterr().out


def test_project_drops_unknown_types(capsys):
    out = project([_q("Q1", "ESSAY")], [_a("Q1", "x")])
    assert out == []
    assert "unknown question type" in capsys.readouterr().out


def test_project_output_never_longer_than_input():
    questions = [_q(f"Q{i}", "SHORT_ANSWER") for i in range(5)]
    answers = [_a("Q1", "a"), _a("Q3", "b"), _a("Q9", "c")]
    assert len(project(questions, answers)) == 2


def test_duplicate_answer_ids_last_one_wins():
    out = project([_q("Q1", "SHORT_ANSWER")], [_a("Q1", "first"), _a("Q1", "second")])
    assert out[0].correct_answer == "second"


@pytest.mark.parametrize("answer, expected", [
    ("Đúng", True),
    ("true", True),
    ("TRUE", True),
    ("True", True),
    ("false", False),
    ("Sai", False),
    ("maybe", False),
    ("", False),
])
def test_parse_true_false(answer, expected):
    assert parse_true_false(answer) is expected


def test_multiple_choice_prefixed_option_matches_bare_answer():
    q = project([_q("Q1", "MULTIPLE_CHOICE", "Thủ đô?", ["A. Paris", "B. Lyon"])], [_a("Q1", "Paris")])[0]
    marked = [option_letter(i) for i, opt in enumerate(q.options) if is_correct_option(opt, q.correct_answer)]
    assert marked == ["A"]
    assert [strip_option_prefix(o) for o in q.options] == ["Paris", "Lyon"]


def test_strip_option_prefix_removes_only_one_marker():
    assert strip_option_prefix("A. B. text") == "B. text"
    assert strip_option_prefix("Đ.Đà Nẵng") == "Đà Nẵng"
    assert strip_option_prefix("a. lower") == "a. lower"


def test_prefixed_answer_matches_prefixed_option():
    q = project(
        [_q("Q1", "MULTIPLE_CHOICE", "Thủ đô của Pháp?", ["A. Paris", "B. London"])],
        [_a("Q1", "A. Paris")],
    )[0]
    assert q.correct_answer == "A. Paris"
    assert [is_correct_option(opt, q.correct_answer) for opt in q.options] == [True, False]
    assert [strip_option_prefix(o) for o in q.options] == ["Paris", "London"]
