from typing import Dict, List, Tuple

APP_NAME = "QuizMaster"
APP_VERSION = "1.0.0"

QUESTION_COUNTS: Tuple[int, ...] = (5, 10, 15, 20)
DEFAULT_COUNT = 10

DIFFICULTIES: Tuple[str, ...] = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY = "medium"

DIFFICULTY_CHOICES: List[Dict[str, str]] = [
    {"value": "easy", "label": "Easy", "description": "Basic concepts"},
    {"value": "medium", "label": "Medium", "description": "Requires analysis"},
    {"value": "hard", "label": "Hard", "description": "Expert level"},
]

FEEDBACK_IMMEDIATE = "immediate"
FEEDBACK_DEFERRED = "deferred"
FEEDBACK_MODES: Tuple[str, ...] = (FEEDBACK_IMMEDIATE, FEEDBACK_DEFERRED)

OPTION_COUNT = 4
OPTION_LABELS: List[str] = ["A", "B", "C", "D"]

# (min percentage, label, css tone), checked top-down
GRADE_BANDS: List[Tuple[int, str, str]] = [
    (90, "Excellent!", "success"),
    (70, "Great Job!", "accent"),
    (50, "Good Effort!", "warning"),
    (0, "Keep Learning!", "muted"),
]

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a moment."
PAYMENT_REQUIRED_MESSAGE = "Payment required. Please add credits to continue."
GENERIC_CLIENT_ERROR = "Failed to generate quiz. Please try again."
