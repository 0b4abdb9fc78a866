# main.py: BASE_PATH-aware entry point for the exam generator
# Wires the Gemini provider into the generator blueprint; no database, no login.

import os

from flask import Flask, jsonify, request

from gemini import DEFAULT_MODEL, make_gemini_provider
from generator import create_generator_blueprint

# =============================================================================
# BASE_PATH & Flask app
# =============================================================================
BASE_PATH = (os.getenv("BASE_PATH", "") or "").rstrip("/")
STATIC_URL_PATH = (BASE_PATH + "/static") if BASE_PATH else "/static"

app = Flask(
    __name__,
    static_folder="static",
    static_url_path=STATIC_URL_PATH,
    template_folder="templates",
)
app.url_map.strict_slashes = False
app.secret_key = os.getenv("SECRET_KEY", "dev-secret")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"[config] {name}={raw!r} is not a number; using {default}", flush=True)
        return default


MAX_UPLOAD_MB = _env_float("MAX_UPLOAD_MB", 20)
app.config["MAX_CONTENT_LENGTH"] = int(MAX_UPLOAD_MB * 1024 * 1024)

# =============================================================================
# Provider
# =============================================================================
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""
GEMINI_MODEL = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
GEMINI_TEMPERATURE = _env_float("GEMINI_TEMPERATURE", 0.7)
GEMINI_TIMEOUT = _env_float("GEMINI_TIMEOUT", 120)

if GEMINI_API_KEY:
    print(f"[AI] Gemini configured (model={GEMINI_MODEL}).", flush=True)
else:
    print("[AI] GEMINI_API_KEY not set; generation requests will fail until it is.", flush=True)

generate_exam = make_gemini_provider(
    GEMINI_API_KEY,
    model=GEMINI_MODEL,
    temperature=GEMINI_TEMPERATURE,
    timeout=GEMINI_TIMEOUT,
)

# =============================================================================
# Blueprints
# =============================================================================
app.register_blueprint(create_generator_blueprint(BASE_PATH, {
    "generate_exam": generate_exam,
    "subject": os.getenv("EXAM_SUBJECT"),
    "sanitize_html": os.getenv("SANITIZE_HTML", "1").lower() in {"1", "true", "yes"},
    "export_filename": os.getenv("EXPORT_FILENAME"),
}))


@app.errorhandler(413)
def too_large(e):
    msg = f"Tệp tải lên quá lớn (tối đa {MAX_UPLOAD_MB:g} MB)."
    print(f"[upload] rejected {request.path}: body over {MAX_UPLOAD_MB:g} MB")
    return jsonify({"ok": False, "error": msg}), 413


# =============================================================================
# Local dev entry
# =============================================================================
if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=True)
