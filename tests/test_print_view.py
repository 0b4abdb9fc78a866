import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from exam_text import page_breaks  # noqa: E402
from print_view import render_printable  # noqa: E402
from sanitizer import sanitize  # noqa: E402

ALL = ["matrix", "specification", "exam", "answers"]

RAW = {
    "matrix": "<table><tr><th>Chủ đề</th></tr><tr><td>Mạng</td></tr></table>",
    "specification": "<table><tr><td>Đặc tả</td></tr></table>",
    "exam": [
        {"question_id": "Q1", "question_text": "Thủ đô <Pháp>?", "question_type": "MULTIPLE_CHOICE",
         "options": ["A. Paris", "B. Lyon"]},
        {"question_id": "Q2", "question_text": "Máy tính cần điện.", "question_type": "TRUE_FALSE"},
    ],
    "answer_key": [
        {"question_id": "Q1", "answer": "Paris", "explanation": "Paris là thủ đô"},
        {"question_id": "Q2", "answer": "Đúng"},
    ],
}


def test_nothing_rendered_without_exam_or_sections():
    assert render_printable(None, ALL) == ""
    assert render_printable(sanitize(RAW), []) == ""
    assert render_printable(sanitize(RAW), {"matrix": False}) == ""


def test_full_document_has_sections_in_fixed_order():
    html = render_printable(sanitize(RAW), ["answers", "exam", "specification", "matrix"])
    assert html.startswith("<!DOCTYPE html>")
    assert '<html lang="vi">' in html
    positions = [html.index(f'data-section="{k}"') for k in ALL]
    assert positions == sorted(positions)
    for heading in ("MA TRẬN ĐỀ KIỂM TRA", "BẢN ĐẶC TẢ ĐỀ KIỂM TRA", "ĐỀ THI", "ĐÁP ÁN VÀ HƯỚNG DẪN CHẤM"):
        assert f"<h1>{heading}</h1>" in html


def test_tables_embedded_verbatim_and_text_escaped():
    html = render_printable(sanitize(RAW), ALL)
    assert RAW["matrix"] in html
    assert "Thủ đô &lt;Pháp&gt;?" in html
    assert "<strong>Câu 1:</strong>" in html


def test_options_rendered_as_lettered_list_without_prefix():
    html = render_printable(sanitize(RAW), ["exam"])
    assert '<ol type="A"><li>Paris</li><li>Lyon</li></ol>' in html
    assert "A. Paris" not in html


def test_explanation_only_when_present():
    html = render_printable(sanitize(RAW), ["answers"])
    assert html.count('class="explanation"') == 1
    assert "Giải thích: Paris là thủ đô" in html


def test_page_breaks():
    html = render_printable(sanitize(RAW), ALL)
    assert 'class="no-break page-break" data-section="exam"' in html
    assert 'class="no-break page-break" data-section="answers"' in html
    assert 'class="no-break" data-section="matrix"' in html

    only_answers = render_printable(sanitize(RAW), ["answers"])
    assert 'class="no-break" data-section="answers"' in only_answers

    assert page_breaks({"exam"}) == {"exam": False, "answers": False}
    assert page_breaks({"specification", "exam", "answers"}) == {"exam": True, "answers": True}
