# projector.py
# Sanitized questions + answer key -> display-ready question variants.

from typing import Dict, List, Optional, Sequence

from exam_model import (
    DisplayQuestion, ExamAnswer, ExamQuestion, MultipleChoiceQuestion,
    QuestionType, ShortAnswerQuestion, TrueFalseQuestion,
)
from exam_text import TRUE_LABEL


def answer_lookup(answers: Sequence[ExamAnswer]) -> Dict[str, str]:
    # Duplicate ids: the later entry wins, silently.
    return {a.question_id: a.answer_text for a in answers}


def parse_true_false(answer: str) -> bool:
    # Anything that is not "true"/"Đúng" reads as false, including garbage like "maybe".
    return answer.lower() == "true" or answer == TRUE_LABEL


def project_question(question: ExamQuestion, answer: str) -> Optional[DisplayQuestion]:
    try:
        kind = QuestionType(question.type)
    except ValueError:
        print(f"[projector] unknown question type: {question.type!r} ({question.id})")
        return None

    if kind is QuestionType.MULTIPLE_CHOICE:
        return MultipleChoiceQuestion(prompt=question.text, options=question.options, correct_answer=answer)
    if kind is QuestionType.TRUE_FALSE:
        return TrueFalseQuestion(prompt=question.text, correct_answer=parse_true_false(answer))
    return ShortAnswerQuestion(prompt=question.text, correct_answer=answer)


def project(questions: Sequence[ExamQuestion], answers: Sequence[ExamAnswer]) -> List[DisplayQuestion]:
    """
    One display question per input question that has an answer and a known type,
    in input order. Everything else is logged and left out.
    """
    lookup = answer_lookup(answers)
    out: List[DisplayQuestion] = []
    for q in questions:
        answer = lookup.get(q.id)
        if answer is None:
            print(f"[projector] no answer found for question {q.id!r}")
            continue
        projected = project_question(q, answer)
        if projected is not None:
            out.append(projected)
    return out


__all__ = ["project", "project_question", "answer_lookup", "parse_true_false"]
