# print_view.py
# -----------------------------------------------------------------------------
# Standalone print document (the browser prints it / saves it as PDF).
# Same sections, order, filtering and option-prefix rule as docx_export.py.
# -----------------------------------------------------------------------------

from typing import Iterable, List, Optional

from markupsafe import escape

from exam_model import (
    SECTION_ANSWERS, SECTION_EXAM, SECTION_MATRIX, SECTION_SPECIFICATION,
    QuestionType, SanitizedExam, normalize_sections,
)
from exam_text import (
    SECTION_HEADINGS, explanation_line, page_breaks, question_label, strip_option_prefix,
)

PRINT_TITLE = "Đề thi"

PRINT_STYLES = """
<style>
  body { font-family: 'Times New Roman', Times, serif; font-size: 12pt; }
  h1 { font-size: 16pt; color: #2d3748; }
  p { margin-bottom: 10px; line-height: 1.5; }
  table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
  th, td { border: 1px solid #cccccc; padding: 6px; text-align: left; vertical-align: top; }
  th { background-color: #f2f2f2; font-weight: bold; }
  ol { margin: 0; padding-left: 40px; }
  li { margin-bottom: 5px; }
  .explanation { font-style: italic; }
  .no-break { page-break-inside: avoid; }
  .page-break { page-break-before: always; }
  @media print {
    h1, h2, h3 { page-break-after: avoid; }
    table { page-break-inside: auto; }
    tr { page-break-inside: avoid; page-break-after: auto; }
  }
</style>
"""


def _open_section(key: str, page_break: bool = False) -> str:
    cls = "no-break page-break" if page_break else "no-break"
    return f'<div class="{cls}" data-section="{key}"><h1>{SECTION_HEADINGS[key]}</h1>'


def _exam_html(doc: SanitizedExam) -> List[str]:
    parts: List[str] = []
    for i, q in enumerate(doc.exam_questions, start=1):
        parts.append(f"<p><strong>{question_label(i)}</strong> {escape(q.text)}</p>")
        if q.type == QuestionType.MULTIPLE_CHOICE.value and q.options:
            parts.append('<ol type="A">')
            for opt in q.options:
                parts.append(f"<li>{escape(strip_option_prefix(opt))}</li>")
            parts.append("</ol>")
    return parts


def _answers_html(doc: SanitizedExam) -> List[str]:
    parts: List[str] = []
    for i, ans in enumerate(doc.answer_key, start=1):
        parts.append(f"<p><strong>{question_label(i)}</strong> {escape(ans.answer_text)}</p>")
        if ans.explanation:
            parts.append(f'<p class="explanation">{escape(explanation_line(ans.explanation))}</p>')
    return parts


def render_printable(doc: Optional[SanitizedExam], sections: Iterable[str]) -> str:
    enabled = normalize_sections(sections)
    if doc is None or not enabled:
        return ""
    breaks = page_breaks(enabled)

    body: List[str] = []
    if SECTION_MATRIX in enabled:
        # provider table markup goes in as-is
        body.append(_open_section(SECTION_MATRIX) + doc.matrix + "</div>")
    if SECTION_SPECIFICATION in enabled:
        body.append(_open_section(SECTION_SPECIFICATION) + doc.specification + "</div>")
    if SECTION_EXAM in enabled:
        body.append(_open_section(SECTION_EXAM, breaks[SECTION_EXAM]) + "".join(_exam_html(doc)) + "</div>")
    if SECTION_ANSWERS in enabled:
        body.append(_open_section(SECTION_ANSWERS, breaks[SECTION_ANSWERS]) + "".join(_answers_html(doc)) + "</div>")

    return (
        "<!DOCTYPE html>\n"
        '<html lang="vi">\n'
        f'<head><meta charset="UTF-8"><title>{PRINT_TITLE}</title>{PRINT_STYLES}</head>\n'
        "<body>\n"
        + "\n".join(body)
        + "\n</body></html>"
    )


__all__ = ["render_printable", "PRINT_STYLES"]
