import io
import sys
from pathlib import Path

import pytest
from docx import Document

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import docx_export  # noqa: E402
from docx_export import (  # noqa: E402
    OPTIONS_STYLE, ExportError, Heading, Paragraph, Table, build_export_document, encode_docx,
)
from html_table import MAX_COLSPAN, MAX_ROWSPAN, grid_size, parse_span, parse_table, place_cells  # noqa: E402
from sanitizer import sanitize  # noqa: E402

ALL = ["matrix", "specification", "exam", "answers"]

MATRIX = """
<table>
  <thead>
    <tr><th rowspan="2">Chủ đề</th><th colspan="2">Mức độ</th></tr>
    <tr><th>Biết</th><th>Hiểu</th></tr>
  </thead>
  <tbody>
    <tr><td>Mạng<br>máy tính</td><td>2</td><td>1</td></tr>
  </tbody>
</table>
"""

RAW = {
    "matrix": MATRIX,
    "specification": "",
    "exam": [
        {"question_id": "Q1", "question_text": "Thủ đô?", "question_type": "MULTIPLE_CHOICE",
         "options": ["A. Paris", "Lyon"]},
        {"question_id": "Q2", "question_text": "Nêu khái niệm.", "question_type": "SHORT_ANSWER"},
    ],
    "answer_key": [
        {"question_id": "Q1", "answer": "Paris", "explanation": "Thủ đô nước Pháp"},
        {"question_id": "Q2", "answer": "Mạng là..."},
    ],
}


# ---- html tables ----
def test_parse_table_reads_spans_and_headers():
    rows = parse_table(MATRIX)
    assert [[c.text for c in r] for r in rows] == [["Chủ đề", "Mức độ"], ["Biết", "Hiểu"], ["Mạng máy tính", "2", "1"]]
    assert rows[0][0].header and rows[0][0].rowspan == 2
    assert rows[0][1].colspan == 2
    assert not rows[2][0].header


def test_place_cells_skips_columns_taken_by_rowspans():
    rows = parse_table(MATRIX)
    placed = [(r, c, rs, cs, cell.text) for r, c, rs, cs, cell in place_cells(rows)]
    assert (1, 1, 1, 1, "Biết") in placed
    assert (1, 2, 1, 1, "Hiểu") in placed
    assert grid_size(rows) == (3, 3)


def test_rowspan_past_last_row_is_clipped():
    rows = parse_table('<table><tr><td rowspan="5">a</td><td>b</td></tr></table>')
    assert place_cells(rows)[0][2] == 1


@pytest.mark.parametrize("value, expected", [(None, 1), ("2", 2), ("0", 1), ("x", 1), ("3px", 3), ("-2", 1)])
def test_parse_span(value, expected):
    assert parse_span(value) == expected


def test_parse_table_empty_and_nested():
    assert parse_table("") == []
    assert parse_table("<p>no table</p>") == []
    rows = parse_table("<table><tr><td>outer <table><tr><td>inner</td></tr></table></td></tr></table>")
    assert len(rows) == 1
    assert rows[0][0].text == "outer inner"


# ---- document tree ----
def test_empty_tree_without_exam_or_sections():
    assert len(build_export_document(None, ALL)) == 0
    assert len(build_export_document(sanitize(RAW), [])) == 0


def test_tree_sections_order_and_page_breaks():
    tree = build_export_document(sanitize(RAW), ALL)
    assert tree.headings() == ["MA TRẬN ĐỀ KIỂM TRA", "BẢN ĐẶC TẢ ĐỀ KIỂM TRA", "ĐỀ THI", "ĐÁP ÁN VÀ HƯỚNG DẪN CHẤM"]
    headings = [b for b in tree if isinstance(b, Heading)]
    assert [h.page_break_before for h in headings] == [False, False, True, True]
    # empty specification html: heading, no table
    assert sum(isinstance(b, Table) for b in tree) == 1


def test_tree_question_and_option_paragraphs():
    tree = build_export_document(sanitize(RAW), ["exam"])
    paragraphs = [b for b in tree if isinstance(b, Paragraph) and b.runs]
    assert paragraphs[0].runs[0].text == "Câu 1: "
    assert paragraphs[0].runs[0].bold
    assert paragraphs[0].text == "Câu 1: Thủ đô?"
    options = [p.text for p in paragraphs if p.style == OPTIONS_STYLE]
    assert options == ["A. Paris", "B. Lyon"]
    assert headings_page_break(tree) == [False]


def headings_page_break(tree):
    return [b.page_break_before for b in tree if isinstance(b, Heading)]


def test_tree_answers_have_italic_explanations():
    tree = build_export_document(sanitize(RAW), ["answers"])
    texts = [b.text for b in tree if isinstance(b, Paragraph) and b.runs]
    assert texts == ["Câu 1: Paris", "Giải thích: Thủ đô nước Pháp", "Câu 2: Mạng là..."]
    explanation = [b for b in tree if isinstance(b, Paragraph) and b.text.startswith("Giải thích")][0]
    assert explanation.runs[0].italic


# ---- encoding ----
def test_encode_docx_produces_readable_document():
    data = encode_docx(build_export_document(sanitize(RAW), ALL))
    assert data[:2] == b"PK"
    document = Document(io.BytesIO(data))
    texts = [p.text for p in document.paragraphs]
    assert "ĐỀ THI" in texts
    assert "Câu 1: Thủ đô?" in texts
    assert "A. Paris" in texts
    assert len(document.tables) == 1
    table = document.tables[0]
    assert table.cell(0, 0).text == "Chủ đề"
    assert table.cell(1, 0).text == "Chủ đề"  # merged with the cell above
    assert table.cell(2, 0).text == "Mạng máy tính"


def test_encode_docx_wraps_failures(monkeypatch):
    def boom():
        raise OSError("disk gone")

    monkeypatch.setattr(docx_export, "Document", boom)
    with pytest.raises(ExportError, match="disk gone"):
        encode_docx(build_export_document(sanitize(RAW), ["exam"]))


def test_huge_spans_are_clamped():
    rows = parse_table('<table><tr><td colspan="200000000" rowspan="99999999">a</td></tr></table>')
    assert rows[0][0].colspan == MAX_COLSPAN
    assert rows[0][0].rowspan == MAX_ROWSPAN
    assert grid_size(rows) == (1, MAX_COLSPAN)
    assert parse_span("70000", MAX_ROWSPAN) == MAX_ROWSPAN
