# sanitizer.py
# -----------------------------------------------------------------------------
# Rebuilds an untrusted provider payload into a SanitizedExam.
# Total: any input (None, lists, numbers, half-shaped dicts) yields a fully
# typed value; fields default instead of failing.
# -----------------------------------------------------------------------------

import math
from typing import Any, List, Optional, Tuple

from exam_model import ExamAnswer, ExamQuestion, SanitizedExam


def _text(value: Any) -> str:
    """Entry-level text coercion: None -> '', primitives -> JSON-ish string, containers -> ''."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    return ""


def _strict_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _items(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _options(value: Any) -> Tuple[str, ...]:
    return tuple(
        _text(opt) for opt in _items(value)
        if opt is not None and not isinstance(opt, (dict, list, tuple, set))
    )


def sanitize_question(entry: Any) -> Optional[ExamQuestion]:
    if not isinstance(entry, dict):
        return None
    return ExamQuestion(
        id=_text(entry.get("question_id")),
        text=_text(entry.get("question_text")),
        type=_text(entry.get("question_type")),
        options=_options(entry.get("options")),
    )


def sanitize_answer(entry: Any) -> Optional[ExamAnswer]:
    if not isinstance(entry, dict):
        return None
    return ExamAnswer(
        question_id=_text(entry.get("question_id")),
        answer_text=_text(entry.get("answer")),
        explanation=_text(entry.get("explanation")),
    )


def sanitize(raw: Any) -> SanitizedExam:
    if not isinstance(raw, dict):
        return SanitizedExam()

    raw_questions = _items(raw.get("exam"))
    raw_answers = _items(raw.get("answer_key"))
    questions = tuple(q for q in (sanitize_question(e) for e in raw_questions) if q is not None)
    answers = tuple(a for a in (sanitize_answer(e) for e in raw_answers) if a is not None)

    dropped = (len(raw_questions) - len(questions)) + (len(raw_answers) - len(answers))
    if dropped:
        print(f"[sanitizer] dropped {dropped} malformed exam/answer entries")

    return SanitizedExam(
        matrix=_strict_text(raw.get("matrix")),
        specification=_strict_text(raw.get("specification")),
        exam_questions=questions,
        answer_key=answers,
    )


__all__ = ["sanitize", "sanitize_question", "sanitize_answer"]
