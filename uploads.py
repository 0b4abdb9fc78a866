# uploads.py
# Uploaded lesson materials -> (lesson plan text, inline image parts) for the prompt.

import base64
import io
from typing import Dict, Iterable, List, Tuple

IMAGE_TYPES = {"image/png", "image/jpeg", "image/gif"}
TEXT_TYPES = {"text/plain"}
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
# accepted by the form, but only their names reach the prompt
NAME_ONLY_TYPES = {"application/pdf", "application/msword"}

ACCEPT_ATTR = ".png,.jpg,.jpeg,.gif,.txt,.pdf,.doc,.docx"

_EXT_TYPES = {
    ".png": "image/png", ".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".gif": "image/gif",
    ".txt": "text/plain", ".pdf": "application/pdf", ".doc": "application/msword",
    ".docx": DOCX_TYPE,
}


def guess_type(filename: str, declared: str = "") -> str:
    declared = (declared or "").split(";")[0].strip().lower()
    if declared and declared != "application/octet-stream":
        return declared
    name = (filename or "").lower()
    for ext, mime in _EXT_TYPES.items():
        if name.endswith(ext):
            return mime
    return declared


def docx_text(data: bytes) -> str:
    from docx import Document
    document = Document(io.BytesIO(data))
    return "\n".join(p.text for p in document.paragraphs if p.text.strip())


def read_uploads(files: Iterable) -> Tuple[str, List[Dict[str, str]]]:
    """
    files: werkzeug FileStorage-like objects (filename, mimetype, read()).
    Returns (aggregated text, [{"mimeType", "data"}]).
    """
    text_parts: List[str] = []
    images: List[Dict[str, str]] = []
    other_names: List[str] = []

    for f in files or []:
        name = getattr(f, "filename", "") or ""
        if not name:
            continue
        mime = guess_type(name, getattr(f, "mimetype", "") or getattr(f, "content_type", ""))
        data = f.read() or b""
        if mime in IMAGE_TYPES:
            images.append({"mimeType": mime, "data": base64.b64encode(data).decode("ascii")})
        elif mime in TEXT_TYPES:
            text_parts.append(f"--- Content from {name} ---\n{data.decode('utf-8', errors='replace')}")
        elif mime == DOCX_TYPE:
            try:
                text_parts.append(f"--- Content from {name} ---\n{docx_text(data)}")
            except Exception as e:
                print(f"[uploads] could not read {name}: {e}")
                other_names.append(name)
        elif mime in NAME_ONLY_TYPES:
            other_names.append(name)
        else:
            print(f"[uploads] ignoring unsupported file {name} ({mime or 'unknown type'})")

    if other_names:
        text_parts.append("--- Attached files (content not extracted) ---\n" + "\n".join(other_names))
    return "\n\n".join(text_parts).strip(), images


__all__ = ["read_uploads", "guess_type", "ACCEPT_ATTR"]
