# catalog.py
# Static content tables: levels, grades, exam periods, curriculum topics, labels.

from typing import Dict, List

from exam_model import QuestionType

PRIMARY = "PRIMARY"
SECONDARY = "SECONDARY"
HIGH_SCHOOL = "HIGH_SCHOOL"

MID_TERM_1 = "MID_TERM_1"
END_TERM_1 = "END_TERM_1"
MID_TERM_2 = "MID_TERM_2"
END_TERM_2 = "END_TERM_2"

DEFAULT_SUBJECT = "Tin học"
DEFAULT_LEVEL = SECONDARY
DEFAULT_PERIOD = MID_TERM_1
DEFAULT_DURATION = 45
MIN_DURATION, MAX_DURATION = 15, 120

EDUCATIONAL_LEVELS: List[Dict[str, str]] = [
    {"value": PRIMARY, "label": "Tiểu học"},
    {"value": SECONDARY, "label": "Trung học cơ sở"},
    {"value": HIGH_SCHOOL, "label": "Trung học phổ thông"},
]

GRADES_BY_LEVEL: Dict[str, List[str]] = {
    PRIMARY: ["3", "4", "5"],
    SECONDARY: ["6", "7", "8", "9"],
    HIGH_SCHOOL: ["10", "11"],
}

QUESTION_TYPES: List[Dict[str, str]] = [
    {"value": QuestionType.MULTIPLE_CHOICE.value, "label": "Trắc nghiệm"},
    {"value": QuestionType.TRUE_FALSE.value, "label": "Đúng/Sai"},
    {"value": QuestionType.SHORT_ANSWER.value, "label": "Trả lời ngắn"},
]

EXAM_PERIODS: List[Dict[str, str]] = [
    {"value": MID_TERM_1, "label": "Giữa học kì 1"},
    {"value": END_TERM_1, "label": "Cuối học kì 1"},
    {"value": MID_TERM_2, "label": "Giữa học kì 2"},
    {"value": END_TERM_2, "label": "Cuối học kì 2"},
]

# Primary schools only sit end-of-term exams.
PRIMARY_EXAM_PERIODS: List[Dict[str, str]] = [
    {"value": END_TERM_1, "label": "Cuối học kì 1"},
    {"value": END_TERM_2, "label": "Cuối học kì 2"},
]

# Tabs double as the export section keys (same four parts, same order on screen).
TABS: Dict[str, str] = {
    "exam": "Đề thi",
    "answers": "Đáp án",
    "matrix": "Ma trận",
    "specification": "Đặc tả",
}

_PRIMARY_TOPICS = [
    "Chủ đề A: Máy tính và em",
    "Chủ đề B: Mạng máy tính và Internet",
    "Chủ đề C: Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
    "Chủ đề D: Đạo đức, pháp luật và văn hoá trong môi trường số",
    "Chủ đề E: Ứng dụng tin học",
    "Chủ đề F: Giải quyết vấn đề với sự trợ giúp của máy tính",
]

LESSONS_BY_GRADE: Dict[str, List[str]] = {
    "3": list(_PRIMARY_TOPICS),
    "4": list(_PRIMARY_TOPICS),
    "5": list(_PRIMARY_TOPICS),
    "6": [
        "Chủ đề 1: Máy tính và cộng đồng",
        "Chủ đề 2: Mạng máy tính và Internet",
        "Chủ đề 3: Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
        "Chủ đề 4: Đạo đức, pháp luật và văn hoá trong môi trường số",
        "Chủ đề 5: Ứng dụng tin học",
        "Chủ đề 6: Giải quyết vấn đề với sự trợ giúp của máy tính",
    ],
    "7": [
        "Chủ đề 1: Máy tính và cộng đồng",
        "Chủ đề 2: Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
        "Chủ đề 3: Đạo đức, pháp luật và văn hoá trong môi trường số",
        "Chủ đề 4: Ứng dụng tin học",
        "Chủ đề 5: Giải quyết vấn đề với sự trợ giúp của máy tính",
    ],
    "8": [
        "Chủ đề 1: Máy tính và cộng đồng",
        "Chủ đề 2: Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
        "Chủ đề 3: Đạo đức, pháp luật và văn hoá trong môi trường số",
        "Chủ đề 4: Ứng dụng tin học",
        "Chủ đề 5: Giải quyết vấn đề với sự trợ giúp của máy tính",
        "Chủ đề 6: Hướng nghiệp với Tin học",
    ],
    "9": [
        "Chủ đề 1: Máy tính và cộng đồng",
        "Chủ đề 2: Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
        "Chủ đề 3: Đạo đức, pháp luật và văn hoá trong môi trường số",
        "Chủ đề 4: Ứng dụng tin học",
        "Chủ đề 5: Giải quyết vấn đề với sự trợ giúp của máy tính",
        "Chủ đề 6: Hướng nghiệp với tin học",
    ],
    "10": [
        "Chủ đề 1: Máy tính và xã hội tri thức",
        "Chủ đề 2: Mạng máy tính và Internet",
        "Chủ đề 3: Đạo đức, pháp luật và văn hoá trong môi trường số",
        "Chủ đề 4: Ứng dụng tin học",
        "Chủ đề 5: Giải quyết vấn đề với sự trợ giúp của máy tính",
        "Chủ đề 6: Hướng nghiệp với Tin học",
    ],
    "11": [
        "Chủ đề 1: Máy tính và xã hội tri thức",
        "Chủ đề 2: Tổ chức lưu trữ, tìm kiếm và trao đổi thông tin",
        "Chủ đề 3: Đạo đức, pháp luật và văn hoá trong môi trường số",
        "Chủ đề 4: Giới thiệu các hệ cơ sở dữ liệu",
        "Chủ đề 5: Hướng nghiệp với tin học",
        "Chủ đề 6: Thực hành tạo và khai thác cơ sở dữ liệu",
        "Chủ đề 7: Phần mềm chỉnh sửa ảnh và làm video",
    ],
}


def periods_for_level(level: str) -> List[Dict[str, str]]:
    return PRIMARY_EXAM_PERIODS if level == PRIMARY else EXAM_PERIODS


def lessons_summary(grade: str) -> str:
    topics = LESSONS_BY_GRADE.get(str(grade)) or []
    return f"Toàn bộ chương trình học, bao gồm các chủ đề: {', '.join(topics)}"


def label_for(options: List[Dict[str, str]], value: str) -> str:
    for o in options:
        if o["value"] == value:
            return o["label"]
    return value
