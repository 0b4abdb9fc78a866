# exam_text.py
# -----------------------------------------------------------------------------
# Text rules shared by the question cards, the print renderer and the DOCX
# builder. Any change here shows up in all three outputs at once.
# -----------------------------------------------------------------------------

import re

# One leading "A." / "Đ." marker, as the provider sometimes prefixes options.
OPTION_PREFIX_RE = re.compile(r"^[A-ZĐ]\.\s*")

TRUE_LABEL = "Đúng"
FALSE_LABEL = "Sai"

HEADING_MATRIX = "MA TRẬN ĐỀ KIỂM TRA"
HEADING_SPECIFICATION = "BẢN ĐẶC TẢ ĐỀ KIỂM TRA"
HEADING_EXAM = "ĐỀ THI"
HEADING_ANSWERS = "ĐÁP ÁN VÀ HƯỚNG DẪN CHẤM"

SECTION_HEADINGS = {
    "matrix": HEADING_MATRIX,
    "specification": HEADING_SPECIFICATION,
    "exam": HEADING_EXAM,
    "answers": HEADING_ANSWERS,
}

EXPLANATION_LABEL = "Giải thích"


def strip_option_prefix(text: str) -> str:
    return OPTION_PREFIX_RE.sub("", text or "", count=1)


def option_letter(index: int) -> str:
    """0 -> 'A', 1 -> 'B', ... (position based, regardless of the option text)."""
    return chr(65 + int(index))


def is_correct_option(option: str, answer: str) -> bool:
    return strip_option_prefix(option) == strip_option_prefix(answer) or option == answer


def question_label(number: int) -> str:
    return f"Câu {number}:"


def explanation_line(explanation: str) -> str:
    return f"{EXPLANATION_LABEL}: {explanation}"


def true_false_label(value: bool) -> str:
    return TRUE_LABEL if value else FALSE_LABEL


def page_breaks(sections) -> dict:
    """
    Page-break hints shared by both export paths:
      - before the exam when matrix or specification precede it
      - before the answer key when the exam precedes it
    """
    return {
        "exam": "exam" in sections and ("matrix" in sections or "specification" in sections),
        "answers": "answers" in sections and "exam" in sections,
    }
