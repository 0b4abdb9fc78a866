# controller.py
# -----------------------------------------------------------------------------
# ExamView: the result panel's state (idle/loading/ready/failed), selected tab,
# export section flags, and per-kind in-flight guards for DOCX and print.
# -----------------------------------------------------------------------------

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Set

from catalog import TABS
from exam_model import SECTION_KEYS, DisplayQuestion, SanitizedExam, normalize_sections
from projector import project
from sanitizer import sanitize

IDLE, LOADING, READY, FAILED = "idle", "loading", "ready", "failed"
EXPORT_KINDS = ("docx", "print")
DEFAULT_TAB = "exam"


class ExportBusy(RuntimeError):
    pass


def exports_enabled(sections: Any) -> bool:
    """Both DOCX and print need at least one section selected."""
    return bool(normalize_sections(sections))


class ExamView:
    def __init__(self, raw: Any = None, active_tab: str = DEFAULT_TAB, sections: Optional[Iterable[str]] = None):
        self.state = IDLE
        self.error: Optional[str] = None
        self.raw: Any = None
        self.active_tab = DEFAULT_TAB
        self.section_flags: Dict[str, bool] = {k: True for k in SECTION_KEYS}
        self._in_flight: Set[str] = set()
        self._sanitized_for: Any = None
        self._sanitized: Optional[SanitizedExam] = None
        self._questions_for: Optional[SanitizedExam] = None
        self._questions: List[DisplayQuestion] = []

        if raw is not None:
            self.finish_generation(raw)
        self.select_tab(active_tab)
        if sections is not None:
            self.set_sections(sections)

    # ---- generation lifecycle ------------------------------------------------
    def begin_generation(self) -> None:
        # the previous exam goes away before the new request, so a failure never shows stale data
        self.state = LOADING
        self.error = None
        self.raw = None

    def finish_generation(self, raw: Any) -> None:
        self.state = READY
        self.error = None
        self.raw = raw

    def fail_generation(self, message: str) -> None:
        self.state = FAILED
        self.error = message
        self.raw = None

    # ---- derived data (memoized) ---------------------------------------------
    @property
    def sanitized(self) -> Optional[SanitizedExam]:
        if self.raw is None:
            return None
        if self._sanitized is None or self._sanitized_for is not self.raw:
            self._sanitized = sanitize(self.raw)
            self._sanitized_for = self.raw
        return self._sanitized

    @property
    def questions(self) -> List[DisplayQuestion]:
        doc = self.sanitized
        if doc is None:
            return []
        if self._questions_for is not doc:
            self._questions = project(doc.exam_questions, doc.answer_key)
            self._questions_for = doc
        return self._questions

    # ---- tabs & section flags ------------------------------------------------
    def select_tab(self, key: Optional[str]) -> str:
        self.active_tab = key if key in TABS else DEFAULT_TAB
        return self.active_tab

    def toggle_section(self, key: str) -> None:
        if key in self.section_flags:
            self.section_flags[key] = not self.section_flags[key]

    def set_sections(self, keys: Iterable[str]) -> None:
        enabled = normalize_sections(keys)
        self.section_flags = {k: (k in enabled) for k in SECTION_KEYS}

    @property
    def enabled_sections(self) -> frozenset:
        return normalize_sections(self.section_flags)

    # ---- export / print gating -----------------------------------------------
    def is_running(self, kind: str) -> bool:
        return kind in self._in_flight

    def can_run(self, kind: str) -> bool:
        if kind not in EXPORT_KINDS:
            return False
        return (self.sanitized is not None
                and exports_enabled(self.section_flags)
                and kind not in self._in_flight)

    @contextmanager
    def running(self, kind: str):
        """Marks `kind` in flight for the duration of the block; always released."""
        if not self.can_run(kind):
            raise ExportBusy(f"{kind} export is not available right now")
        self._in_flight.add(kind)
        try:
            yield self
        finally:
            self._in_flight.discard(kind)


__all__ = ["ExamView", "ExportBusy", "exports_enabled", "IDLE", "LOADING", "READY", "FAILED"]
