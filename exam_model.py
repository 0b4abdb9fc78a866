# exam_model.py
# -----------------------------------------------------------------------------
# Value types shared by the sanitizer, projector, renderers and web layer.
# Everything here is immutable; each stage builds fresh values.
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


# Section flags, in the fixed order used by every export path.
SECTION_MATRIX = "matrix"
SECTION_SPECIFICATION = "specification"
SECTION_EXAM = "exam"
SECTION_ANSWERS = "answers"
SECTION_KEYS: Tuple[str, ...] = (SECTION_MATRIX, SECTION_SPECIFICATION, SECTION_EXAM, SECTION_ANSWERS)


def normalize_sections(sections: Any) -> frozenset:
    """
    Accepts an iterable of keys or a {key: bool} mapping.
    Unknown keys are ignored; anything unusable means 'nothing enabled'.
    """
    if sections is None:
        return frozenset()
    if isinstance(sections, dict):
        sections = [k for k, v in sections.items() if v]
    elif isinstance(sections, str):
        sections = [sections]
    try:
        items = list(sections)
    except TypeError:
        return frozenset()
    return frozenset(s for s in items if isinstance(s, str) and s in SECTION_KEYS)


# ------------------------------- sanitized exam -------------------------------
@dataclass(frozen=True)
class ExamQuestion:
    id: str = ""
    text: str = ""
    type: str = ""  # kept as a plain string; unknown tags are dropped later, not here
    options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExamAnswer:
    question_id: str = ""
    answer_text: str = ""
    explanation: str = ""


@dataclass(frozen=True)
class SanitizedExam:
    matrix: str = ""
    specification: str = ""
    exam_questions: Tuple[ExamQuestion, ...] = ()
    answer_key: Tuple[ExamAnswer, ...] = ()

    def to_raw(self) -> Dict[str, Any]:
        """Back to the provider's JSON shape (the same keys the response schema asks for)."""
        return {
            "matrix": self.matrix,
            "specification": self.specification,
            "exam": [
                {
                    "question_id": q.id,
                    "question_text": q.text,
                    "question_type": q.type,
                    "options": list(q.options),
                }
                for q in self.exam_questions
            ],
            "answer_key": [
                {
                    "question_id": a.question_id,
                    "answer": a.answer_text,
                    "explanation": a.explanation,
                }
                for a in self.answer_key
            ],
        }

    @property
    def is_empty(self) -> bool:
        return not (self.matrix or self.specification or self.exam_questions or self.answer_key)


# ------------------------------ display questions -----------------------------
@dataclass(frozen=True)
class MultipleChoiceQuestion:
    prompt: str
    options: Tuple[str, ...] = field(default_factory=tuple)
    correct_answer: str = ""
    kind: str = QuestionType.MULTIPLE_CHOICE.value


@dataclass(frozen=True)
class TrueFalseQuestion:
    prompt: str
    correct_answer: bool = False
    kind: str = QuestionType.TRUE_FALSE.value


@dataclass(frozen=True)
class ShortAnswerQuestion:
    prompt: str
    correct_answer: str = ""
    kind: str = QuestionType.SHORT_ANSWER.value


DisplayQuestion = Union[MultipleChoiceQuestion, TrueFalseQuestion, ShortAnswerQuestion]

__all__: List[str] = [
    "QuestionType", "SECTION_KEYS", "SECTION_MATRIX", "SECTION_SPECIFICATION",
    "SECTION_EXAM", "SECTION_ANSWERS", "normalize_sections",
    "ExamQuestion", "ExamAnswer", "SanitizedExam",
    "MultipleChoiceQuestion", "TrueFalseQuestion", "ShortAnswerQuestion", "DisplayQuestion",
]
