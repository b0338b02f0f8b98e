from __future__ import annotations

import logging
from typing import Any, Dict, List

from quizmaster.constants import (
    OPTION_COUNT,
    PAYMENT_REQUIRED_MESSAGE,
    RATE_LIMIT_MESSAGE,
)
from quizmaster.models.quiz import Question, QuizConfig
from quizmaster.services.llm import LLMClient, LLMError

log = logging.getLogger("quizmaster")

TOOL_NAME = "create_mcqs"
TEMPERATURE = 0.7


class QuizGenerationError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# -----------------------------
# Prompting
# -----------------------------
def _system_prompt(config: QuizConfig) -> str:
    d = config.difficulty
    return (
        "You are an expert quiz creator. "
        f"Generate exactly {config.count} multiple choice questions about "
        f'"{config.topic}" at {d} difficulty level.\n'
        "\n"
        f"For {d} difficulty:\n"
        "- Easy: Basic concepts, straightforward questions, commonly known facts\n"
        "- Medium: Requires understanding of concepts, some analysis needed\n"
        "- Hard: Complex scenarios, requires deep knowledge, tricky distractors\n"
        "\n"
        f"Each question must have exactly {OPTION_COUNT} options with only one correct answer."
    )


def _make_prompt(config: QuizConfig) -> str:
    return f"Generate {config.count} MCQs about {config.topic}."


def mcq_tool() -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": TOOL_NAME,
            "description": "Create multiple choice questions",
            "parameters": {
                "type": "object",
                "properties": {
                    "questions": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "question": {
                                    "type": "string",
                                    "description": "The question text",
                                },
                                "options": {
                                    "type": "array",
                                    "items": {"type": "string"},
                                    "minItems": OPTION_COUNT,
                                    "maxItems": OPTION_COUNT,
                                    "description": f"Exactly {OPTION_COUNT} answer options",
                                },
                                "correctAnswer": {
                                    "type": "number",
                                    "description": f"Index of correct answer (0-{OPTION_COUNT - 1})",
                                },
                                "explanation": {
                                    "type": "string",
                                    "description": "Brief explanation of why the answer is correct",
                                },
                            },
                            "required": ["question", "options", "correctAnswer", "explanation"],
                            "additionalProperties": False,
                        },
                    }
                },
                "required": ["questions"],
                "additionalProperties": False,
            },
        },
    }


def _max_tokens(count: int) -> int:
    return min(8000, 600 + count * 300)


# -----------------------------
# Parsing
# -----------------------------
def parse_questions(args: Dict[str, Any]) -> List[Question]:
    raw = args.get("questions")
    if not isinstance(raw, list):
        raise QuizGenerationError("Invalid response from AI")

    out: List[Question] = []
    for i, item in enumerate(raw):
        try:
            out.append(Question.from_dict(item))
        except ValueError as e:
            log.warning("Rejected question %d from AI: %s", i + 1, e)
            raise QuizGenerationError("Invalid response from AI") from e
    return out


# -----------------------------
# Main generator
# -----------------------------
async def generate_mcqs(llm: LLMClient, config: QuizConfig) -> List[Question]:
    """
    One forced function call, no retries. Upstream 429/402 keep their status;
    everything else becomes a 500.
    """
    try:
        args = await llm.call_tool(
            system=_system_prompt(config),
            prompt=_make_prompt(config),
            tool=mcq_tool(),
            max_tokens=_max_tokens(config.count),
            temperature=TEMPERATURE,
        )
    except LLMError as e:
        if e.status_code == 429:
            raise QuizGenerationError(RATE_LIMIT_MESSAGE, 429) from e
        if e.status_code == 402:
            raise QuizGenerationError(PAYMENT_REQUIRED_MESSAGE, 402) from e
        raise QuizGenerationError("Failed to generate questions") from e

    if args is None:
        raise QuizGenerationError("Invalid response from AI")

    questions = parse_questions(args)

    log.info(
        "Quiz generated | topic=%r | difficulty=%s | requested=%d | got=%d",
        config.topic,
        config.difficulty,
        config.count,
        len(questions),
    )
    return questions
