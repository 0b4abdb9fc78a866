# generator.py
# -----------------------------------------------------------------------------
# Exam package generator: form page, AI generation, DOCX export, print document.
# - Stateless: the generated exam lives in the browser (embedded JSON) and is
#   posted back for every export/print request
# - Provider call injected through deps["generate_exam"]
# - Every payload goes through sanitize() before anything is rendered
# -----------------------------------------------------------------------------

import io
import json
from typing import Any, Callable, Dict, Optional, Tuple

import bleach
from flask import Blueprint, jsonify, make_response, render_template, request, send_file
from markupsafe import Markup

from catalog import (
    DEFAULT_DURATION, DEFAULT_LEVEL, DEFAULT_PERIOD, DEFAULT_SUBJECT, EDUCATIONAL_LEVELS,
    GRADES_BY_LEVEL, MAX_DURATION, MIN_DURATION, TABS, lessons_summary, periods_for_level,
    EXAM_PERIODS, PRIMARY_EXAM_PERIODS, PRIMARY, QUESTION_TYPES, label_for,
)
from controller import ExamView, exports_enabled
from docx_export import ExportError, build_export_document, encode_docx
from exam_model import MultipleChoiceQuestion, TrueFalseQuestion
from exam_text import is_correct_option, option_letter, question_label, strip_option_prefix, true_false_label
from gemini import ExamGenerationParams, ProviderError
from print_view import render_printable
from uploads import ACCEPT_ATTR, read_uploads

DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

MSG_GENERATION_FAILED = "Lỗi khi tạo đề thi: {error}"
MSG_UNKNOWN_ERROR = "Đã xảy ra lỗi không xác định. Vui lòng thử lại."
MSG_NO_EXAM = "Chưa có đề thi để xuất."
MSG_NO_SECTIONS = "Vui lòng chọn ít nhất một phần để xuất."
MSG_DOCX_FAILED = "Lỗi tạo DOCX: {error}"
MSG_PRINT_FAILED = "Đã xảy ra lỗi khi chuẩn bị in. Vui lòng thử lại."

PREVIEW_TABLE_TAGS = [
    "table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption", "colgroup", "col",
    "br", "p", "b", "strong", "i", "em", "u", "sub", "sup", "span", "ul", "ol", "li",
]
PREVIEW_TABLE_ATTRS = {
    "th": ["colspan", "rowspan", "scope"],
    "td": ["colspan", "rowspan"],
    "col": ["span"],
    "colgroup": ["span"],
}


class FormError(ValueError):
    pass


# -----------------------------------------------------------------------------
# Form parsing
# -----------------------------------------------------------------------------
def params_from_form(form, files, subject: str = DEFAULT_SUBJECT) -> ExamGenerationParams:
    level = (form.get("level") or DEFAULT_LEVEL).strip()
    if level not in GRADES_BY_LEVEL:
        raise FormError("Cấp học không hợp lệ.")

    grade = (form.get("grade") or GRADES_BY_LEVEL[level][0]).strip()
    if grade not in GRADES_BY_LEVEL[level]:
        raise FormError("Lớp không thuộc cấp học đã chọn.")

    # a period the level doesn't have falls back to the level's first one
    valid_periods = [p["value"] for p in periods_for_level(level)]
    period = (form.get("period") or DEFAULT_PERIOD).strip()
    if period not in valid_periods:
        period = valid_periods[0]

    try:
        duration = int(form.get("duration") or DEFAULT_DURATION)
    except (TypeError, ValueError):
        raise FormError("Thời gian phải là một số nguyên (phút).")
    if not (MIN_DURATION <= duration <= MAX_DURATION):
        raise FormError(f"Thời gian phải từ {MIN_DURATION} đến {MAX_DURATION} phút.")

    lesson_plan, images = read_uploads(files)
    return ExamGenerationParams(
        grade=grade,
        level=level,
        period=period,
        subject=subject,
        duration=duration,
        lessons=lessons_summary(grade),
        lesson_plan_content=lesson_plan,
        prompt=(form.get("prompt") or "").strip(),
        images=images,
    )


def _form_values(form) -> Dict[str, Any]:
    level = form.get("level") if form.get("level") in GRADES_BY_LEVEL else DEFAULT_LEVEL
    return {
        "level": level,
        "grade": form.get("grade") or GRADES_BY_LEVEL[level][0],
        "period": form.get("period") or (DEFAULT_PERIOD if level != PRIMARY else PRIMARY_EXAM_PERIODS[0]["value"]),
        "duration": form.get("duration") or DEFAULT_DURATION,
        "prompt": form.get("prompt") or "",
    }


def _summary(form) -> str:
    """'Lớp 7 · Cuối học kì 1 · 45 phút' for the result header; '' before the first request."""
    if not form:
        return ""
    values = _form_values(form)
    return " · ".join([
        f"Lớp {values['grade']}",
        label_for(EXAM_PERIODS, values["period"]),
        f"{values['duration']} phút",
    ])


# -----------------------------------------------------------------------------
# Blueprint factory
# -----------------------------------------------------------------------------
def create_generator_blueprint(base_path: str, deps: Dict[str, Any], name: str = "generator") -> Blueprint:
    """
    Factory that returns a Blueprint mounted at base_path ("" = site root).
    Required deps: generate_exam (ExamGenerationParams -> raw JSON, raises ProviderError)
    Optional deps: subject, sanitize_html, export_filename
    """
    bp = Blueprint(name, __name__, url_prefix=base_path or None, template_folder="templates")

    generate_exam: Callable = deps["generate_exam"]
    SUBJECT = deps.get("subject") or DEFAULT_SUBJECT
    SANITIZE_HTML = bool(deps.get("sanitize_html", True))
    EXPORT_FILENAME = deps.get("export_filename") or "de-kiem-tra.docx"

    # ------------------------------- rendering --------------------------------
    def _preview_table(html: str) -> Markup:
        if not html:
            return Markup("")
        if not SANITIZE_HTML:
            return Markup(html)
        return Markup(bleach.clean(html, tags=PREVIEW_TABLE_TAGS, attributes=PREVIEW_TABLE_ATTRS, strip=True))

    def _render_page(view: ExamView, form=None, status: int = 200):
        doc = view.sanitized
        ctx = {
            "view": view,
            "doc": doc,
            "questions": view.questions,
            "tabs": TABS,
            "exam_json": json.dumps(doc.to_raw(), ensure_ascii=False) if doc is not None else "",
            "matrix_html": _preview_table(doc.matrix) if doc is not None else Markup(""),
            "specification_html": _preview_table(doc.specification) if doc is not None else Markup(""),
            "levels": EDUCATIONAL_LEVELS,
            "grades_by_level": GRADES_BY_LEVEL,
            "periods": EXAM_PERIODS,
            "primary_periods": PRIMARY_EXAM_PERIODS,
            "primary_level": PRIMARY,
            "form": _form_values(form or {}),
            "min_duration": MIN_DURATION,
            "max_duration": MAX_DURATION,
            "accept": ACCEPT_ATTR,
            "can_docx": view.can_run("docx"),
            "can_print": view.can_run("print"),
            "is_multiple_choice": lambda q: isinstance(q, MultipleChoiceQuestion),
            "is_true_false": lambda q: isinstance(q, TrueFalseQuestion),
            "strip_option_prefix": strip_option_prefix,
            "option_letter": option_letter,
            "is_correct_option": is_correct_option,
            "question_label": question_label,
            "true_false_label": true_false_label,
            "kind_label": lambda q: label_for(QUESTION_TYPES, q.kind),
            "summary": _summary(form),
            "export_filename": EXPORT_FILENAME,
        }
        return render_template("generator.html", **ctx), status

    # ------------------------------- generation -------------------------------
    def _run_generation(view: ExamView) -> int:
        """Drives view through loading -> ready/failed; returns the HTTP status."""
        view.begin_generation()
        try:
            params = params_from_form(request.form, request.files.getlist("files"), subject=SUBJECT)
        except FormError as e:
            view.fail_generation(str(e))
            return 400
        try:
            raw = generate_exam(params)
        except ProviderError as e:
            view.fail_generation(MSG_GENERATION_FAILED.format(error=e))
            return 502
        except Exception as e:
            print(f"[generator] provider raised {e.__class__.__name__}: {e}")
            view.fail_generation(MSG_GENERATION_FAILED.format(error=e) if str(e) else MSG_UNKNOWN_ERROR)
            return 502
        view.finish_generation(raw)
        doc = view.sanitized
        if doc.is_empty:
            print("[generator] provider returned nothing usable after sanitizing")
        print(f"[generator] exam ready: {len(doc.exam_questions)} questions, "
              f"{len(doc.answer_key)} answers, {len(view.questions)} displayable")
        return 200

    # ------------------------------- export input -----------------------------
    def _export_view() -> Tuple[Optional[ExamView], Optional[Tuple[Any, int]]]:
        if request.is_json:
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                data = {}
            raw = data.get("exam")
            sections = data.get("sections") or []
        else:
            try:
                raw = json.loads(request.form.get("exam_json") or "null")
            except ValueError:
                raw = None
            sections = request.form.getlist("sections")

        if raw is None:
            return None, (jsonify({"ok": False, "error": MSG_NO_EXAM}), 400)
        if not exports_enabled(sections):
            return None, (jsonify({"ok": False, "error": MSG_NO_SECTIONS}), 400)
        # one view per request: repeat clicks are gated by the page's busy flags
        return ExamView(raw=raw, sections=sections), None

    # --------------------------------- routes ---------------------------------
    @bp.get("/")
    def index():
        view = ExamView()
        view.select_tab(request.args.get("tab"))
        return _render_page(view)

    @bp.post("/generate")
    def generate_page():
        view = ExamView()
        status = _run_generation(view)
        view.select_tab(request.form.get("tab"))
        return _render_page(view, request.form, status)

    @bp.post("/api/generate")
    def generate_api():
        view = ExamView()
        status = _run_generation(view)
        if status != 200:
            return jsonify({"ok": False, "error": view.error}), status
        return jsonify({"ok": True, "exam": view.sanitized.to_raw()})

    @bp.post("/export/docx")
    def export_docx():
        view, err = _export_view()
        if err:
            return err
        try:
            with view.running("docx"):
                tree = build_export_document(view.sanitized, view.enabled_sections)
                data = encode_docx(tree)
        except ExportError as e:
            print(f"[export] docx encoding failed: {e}")
            return jsonify({"ok": False, "error": MSG_DOCX_FAILED.format(error=e)}), 500
        return send_file(
            io.BytesIO(data),
            mimetype=DOCX_MIMETYPE,
            as_attachment=True,
            download_name=EXPORT_FILENAME,
        )

    @bp.post("/export/print")
    def export_print():
        view, err = _export_view()
        if err:
            return err
        with view.running("print"):
            html = render_printable(view.sanitized, view.enabled_sections)
        if not html:
            return jsonify({"ok": False, "error": MSG_PRINT_FAILED}), 500
        resp = make_response(html)
        resp.headers["Content-Type"] = "text/html; charset=utf-8"
        return resp

    @bp.get("/healthz")
    def healthz():
        return jsonify({"ok": True})

    return bp


__all__ = ["create_generator_blueprint", "params_from_form", "FormError"]
