# gemini.py
# -----------------------------------------------------------------------------
# Gemini generateContent client for exam packages.
# make_gemini_provider() returns a plain callable that the web layer receives
# through its deps, so tests can swap in a fake without touching the network.
# -----------------------------------------------------------------------------

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"


class ProviderError(RuntimeError):
    pass


@dataclass
class ExamGenerationParams:
    grade: str
    level: str
    period: str
    subject: str
    duration: int
    lessons: str = ""
    lesson_plan_content: str = ""
    prompt: str = ""
    images: List[Dict[str, str]] = field(default_factory=list)  # [{"mimeType":..., "data": <base64>}]


SYSTEM_INSTRUCTION = """You are an expert assistant for creating educational exams in Vietnam.
You must follow the Vietnamese General Education Program 2018 (Chương trình GDPT 2018).
Your task is to generate a complete exam package based on the user's specifications.
The output must be a valid JSON object matching the provided schema.
All content must be in Vietnamese.
The exam questions should be appropriate for the specified grade and educational level.
The matrix and specification tables must be valid HTML table strings.
Each question must have a unique 'question_id' in the format 'Q1', 'Q2', etc.
The 'options' array for multiple choice questions should contain only the option text, without any prefixes like "A.", "B.", etc.
The answer key must correspond to the questions using the same 'question_id'."""

_TABLE_RULES = (
    "It must use <table>, <thead>, <tbody>, <tr>, <th>, and <td> tags. "
    "Use colspan and rowspan attributes where necessary"
)

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "matrix": {
            "type": "STRING",
            "description": (
                "Ma trận đề kiểm tra (exam matrix) as a complete, valid HTML table string. "
                f"{_TABLE_RULES} to create nested headers and merged cells, matching the official "
                "Vietnamese educational format. Do not include any CSS styles."
            ),
        },
        "specification": {
            "type": "STRING",
            "description": (
                "Bản đặc tả đề kiểm tra (exam specification) as a complete, valid HTML table string. "
                f"{_TABLE_RULES}, similar to the matrix format. Do not include any CSS styles."
            ),
        },
        "exam": {
            "type": "ARRAY",
            "description": "List of exam questions.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question_id": {"type": "STRING", "description": 'Unique ID for the question (e.g., "Q1").'},
                    "question_text": {"type": "STRING", "description": "The text of the question."},
                    "question_type": {
                        "type": "STRING",
                        "description": 'Type of question (e.g., "MULTIPLE_CHOICE", "SHORT_ANSWER", "TRUE_FALSE").',
                    },
                    "options": {
                        "type": "ARRAY",
                        "description": "List of options for multiple choice questions. Should be omitted for other types.",
                        "items": {"type": "STRING"},
                    },
                },
                "required": ["question_id", "question_text", "question_type"],
            },
        },
        "answer_key": {
            "type": "ARRAY",
            "description": "List of answers and explanations for the exam.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question_id": {"type": "STRING", "description": "ID of the question this answer corresponds to."},
                    "answer": {
                        "type": "STRING",
                        "description": (
                            "The correct answer. For multiple choice, this is the option text. "
                            'For true/false, it is "True" or "False".'
                        ),
                    },
                    "explanation": {"type": "STRING", "description": "An optional explanation for the answer."},
                },
                "required": ["question_id", "answer"],
            },
        },
    },
    "required": ["matrix", "specification", "exam", "answer_key"],
}


def build_user_prompt(params: ExamGenerationParams) -> str:
    lines = [
        "Please generate an exam with the following specifications:",
        f"- Subject: {params.subject}",
        f"- Grade: {params.grade}",
        f"- Educational Level: {params.level}",
        f"- Exam Period: {params.period}",
        f"- Duration: {params.duration} minutes",
        f"- Lessons to focus on: {params.lessons or 'Not specified'}",
        "- Content from lesson plans provided by user:",
        params.lesson_plan_content or "None provided.",
    ]
    if params.images:
        lines.append("- The user has also provided images. Please analyze them and create relevant questions if applicable.")
    lines.append(f"- Additional requirements: {params.prompt or 'None'}")
    return "\n".join(lines)


def build_request_body(params: ExamGenerationParams, temperature: float) -> Dict[str, Any]:
    parts: List[Dict[str, Any]] = [{"text": build_user_prompt(params)}]
    for image in params.images or []:
        parts.append({"inlineData": {"mimeType": image["mimeType"], "data": image["data"]}})
    return {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
            "temperature": temperature,
        },
    }


def _response_text(data: Dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        reason = ((data or {}).get("promptFeedback") or {}).get("blockReason")
        raise ProviderError(f"empty response from model{f' ({reason})' if reason else ''}")
    return "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict)).strip()


def parse_json_reply(content: str) -> Any:
    try:
        return json.loads(content)
    except ValueError:
        m = re.search(r"```(?:json)?\s*(\{.*\})\s*```", content, re.DOTALL)
        if not m:
            raise
        return json.loads(m.group(1))


def make_gemini_provider(api_key: str,
                         model: str = DEFAULT_MODEL,
                         temperature: float = 0.7,
                         timeout: float = 120,
                         api_base: str = GEMINI_API_BASE) -> Callable[[ExamGenerationParams], Any]:
    """
    Returns generate_exam(params) -> parsed JSON (untrusted; sanitize before use).
    A missing key is reported when a request is made, not here.
    """
    api_key = (api_key or "").strip()
    url = f"{api_base.rstrip('/')}/models/{model}:generateContent"

    def generate_exam(params: ExamGenerationParams) -> Any:
        if not api_key:
            raise ProviderError("Failed to generate exam: GEMINI_API_KEY is not set.")
        import requests
        try:
            r = requests.post(
                url,
                headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                json=build_request_body(params, temperature),
                timeout=timeout,
            )
            r.raise_for_status()
            content = _response_text(r.json())
            return parse_json_reply(content)
        except ProviderError as e:
            print(f"[gemini] generation failed: {e}")
            raise ProviderError(f"Failed to generate exam: {e}") from e
        except (requests.RequestException, ValueError) as e:
            print(f"[gemini] generation failed: {e}")
            raise ProviderError(f"Failed to generate exam: {e}") from e

    return generate_exam


__all__ = [
    "ProviderError", "ExamGenerationParams", "SYSTEM_INSTRUCTION", "RESPONSE_SCHEMA",
    "build_user_prompt", "build_request_body", "parse_json_reply", "make_gemini_provider",
]
