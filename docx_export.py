# docx_export.py
# -----------------------------------------------------------------------------
# SanitizedExam -> DocumentTree (headings / paragraphs of runs / tables)
#               -> .docx bytes via python-docx.
# Mirrors print_view.py: same sections, order, filtering and option-prefix rule.
# -----------------------------------------------------------------------------

import io
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches

from exam_model import (
    SECTION_ANSWERS, SECTION_EXAM, SECTION_MATRIX, SECTION_SPECIFICATION,
    QuestionType, SanitizedExam, normalize_sections,
)
from exam_text import (
    SECTION_HEADINGS, explanation_line, option_letter, page_breaks,
    question_label, strip_option_prefix,
)
from html_table import TableCell, grid_size, parse_table, place_cells

TABLE_HEADER_STYLE = "Table Header"
OPTIONS_STYLE = "Exam Options"


class ExportError(RuntimeError):
    pass


# ------------------------------- document tree --------------------------------
@dataclass(frozen=True)
class Run:
    text: str
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class Heading:
    text: str
    page_break_before: bool = False


@dataclass(frozen=True)
class Paragraph:
    runs: Tuple[Run, ...] = ()
    style: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


@dataclass(frozen=True)
class Table:
    rows: Tuple[Tuple[TableCell, ...], ...]


Block = Union[Heading, Paragraph, Table]


@dataclass(frozen=True)
class DocumentTree:
    blocks: Tuple[Block, ...] = ()

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def headings(self) -> List[str]:
        return [b.text for b in self.blocks if isinstance(b, Heading)]


SPACER = Paragraph()


# ---------------------------------- builder -----------------------------------
def _table_block(html: str) -> List[Block]:
    rows = parse_table(html)
    if not rows:
        return []
    return [Table(rows=tuple(tuple(r) for r in rows))]


def _labelled(number: int, text: str) -> Paragraph:
    return Paragraph(runs=(Run(f"{question_label(number)} ", bold=True), Run(text)))


def build_export_document(doc: Optional[SanitizedExam], sections: Iterable[str]) -> DocumentTree:
    enabled = normalize_sections(sections)
    if doc is None or not enabled:
        return DocumentTree()
    breaks = page_breaks(enabled)
    blocks: List[Block] = []

    for key, html in ((SECTION_MATRIX, doc.matrix), (SECTION_SPECIFICATION, doc.specification)):
        if key in enabled:
            blocks.append(Heading(SECTION_HEADINGS[key]))
            blocks.extend(_table_block(html))
            blocks.append(SPACER)

    if SECTION_EXAM in enabled:
        blocks.append(Heading(SECTION_HEADINGS[SECTION_EXAM], page_break_before=breaks[SECTION_EXAM]))
        for i, q in enumerate(doc.exam_questions, start=1):
            blocks.append(_labelled(i, q.text))
            if q.type == QuestionType.MULTIPLE_CHOICE.value:
                for j, opt in enumerate(q.options):
                    blocks.append(Paragraph(
                        runs=(Run(f"{option_letter(j)}. {strip_option_prefix(opt)}"),),
                        style=OPTIONS_STYLE,
                    ))
            blocks.append(SPACER)

    if SECTION_ANSWERS in enabled:
        blocks.append(Heading(SECTION_HEADINGS[SECTION_ANSWERS], page_break_before=breaks[SECTION_ANSWERS]))
        for i, ans in enumerate(doc.answer_key, start=1):
            blocks.append(_labelled(i, ans.answer_text))
            if ans.explanation:
                blocks.append(Paragraph(runs=(Run(explanation_line(ans.explanation), italic=True),)))

    return DocumentTree(blocks=tuple(blocks))


# ---------------------------------- encoder -----------------------------------
def _add_styles(document) -> None:
    styles = document.styles
    header = styles.add_style(TABLE_HEADER_STYLE, WD_STYLE_TYPE.PARAGRAPH)
    header.base_style = styles["Normal"]
    header.next_paragraph_style = styles["Normal"]
    header.font.bold = True

    options = styles.add_style(OPTIONS_STYLE, WD_STYLE_TYPE.PARAGRAPH)
    options.base_style = styles["Normal"]
    options.next_paragraph_style = styles["Normal"]
    options.paragraph_format.left_indent = Inches(0.5)
    options.paragraph_format.first_line_indent = Inches(-0.25)


def _write_table(document, block: Table) -> None:
    rows = [list(r) for r in block.rows]
    n_rows, n_cols = grid_size(rows)
    if not n_rows or not n_cols:
        return
    table = document.add_table(rows=n_rows, cols=n_cols)
    table.style = "Table Grid"
    # merge first, then write, so merged cells don't collect stray paragraphs
    placed = []
    for r, c, rowspan, colspan, cell in place_cells(rows):
        target = table.cell(r, c)
        if rowspan > 1 or colspan > 1:
            target = target.merge(table.cell(r + rowspan - 1, c + colspan - 1))
        placed.append((target, cell))
    for target, cell in placed:
        para = target.paragraphs[0]
        if cell.header:
            para.style = document.styles[TABLE_HEADER_STYLE]
        para.add_run(cell.text)


def encode_docx(tree: DocumentTree) -> bytes:
    """Serializes the tree in memory; nothing touches the disk."""
    try:
        document = Document()
        _add_styles(document)
        for block in tree:
            if isinstance(block, Heading):
                p = document.add_heading(block.text, level=1)
                p.alignment = WD_ALIGN_PARAGRAPH.CENTER
                p.paragraph_format.page_break_before = block.page_break_before
            elif isinstance(block, Table):
                _write_table(document, block)
            else:
                p = document.add_paragraph(style=block.style)
                for run in block.runs:
                    r = p.add_run(run.text)
                    r.bold = run.bold or None
                    r.italic = run.italic or None
        buf = io.BytesIO()
        document.save(buf)
        return buf.getvalue()
    except Exception as e:
        raise ExportError(str(e) or e.__class__.__name__) from e


__all__ = [
    "ExportError", "Run", "Heading", "Paragraph", "Table", "DocumentTree",
    "build_export_document", "encode_docx", "TABLE_HEADER_STYLE", "OPTIONS_STYLE",
]
