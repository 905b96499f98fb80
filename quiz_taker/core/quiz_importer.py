"""Utilities for loading quiz definitions from JSON or a human-friendly text file.

JSON documents use the layout of the browser widget's ``questions.json``::

    {
      "title": "Radians",
      "timeLimitSec": 120,
      "passThreshold": 0.7,
      "questions": [
        {"id": "q1", "text": "...", "options": ["a", "b"], "correctIndex": 1, "topic": "Angles"}
      ]
    }

Text files consist of blocks separated by blank lines or '---'. The first
block may be a header; every other block is one question:

    TITLE: Radians
    TIMELIMIT: 120
    PASS: 0.7

    ID: q1
    TOPIC: Angles          (optional)
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    ...                    (at least two options, letters in order)
    CORRECT: B

Inside the question text a line such as "E: energy" stays part of the text;
only a line starting with "A:" closes it. A continuation line that itself
starts with "A:" is therefore read as the first option.

Architecture note:
    Both formats end up as the same immutable ``QuizDefinition``; everything
    that validates quiz content lives on the model so the two parsers only
    translate syntax.
"""

from __future__ import annotations

import json
from pathlib import Path
from string import ascii_uppercase

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quiz_taker.constants.quiz_constants import DEFAULT_PASS_THRESHOLD
from quiz_taker.core.models import QuestionDefinition, QuizDefinition, QuizDefinitionError


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


class _QuestionDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str
    options: list[str]
    correct_index: int = Field(alias="correctIndex")
    topic: str | None = None


class _QuizDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    time_limit_sec: int = Field(alias="timeLimitSec")
    pass_threshold: float = Field(default=DEFAULT_PASS_THRESHOLD, alias="passThreshold")
    questions: list[_QuestionDocument]


def load_quiz_from_file(file_path: Path) -> QuizDefinition:
    """Read ``file_path`` and return its quiz; the suffix selects the format."""
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        return parse_quiz_json(text, default_title=file_path.stem)
    return parse_quiz_text(text, default_title=file_path.stem)


def parse_quiz_json(text: str, default_title: str = "") -> QuizDefinition:
    try:
        document = _QuizDocument.model_validate(json.loads(text))
    except json.JSONDecodeError as exc:
        raise QuizImportError(f"Quiz file is not valid JSON: {exc.msg}.") from exc
    except ValidationError as exc:
        raise QuizImportError(f"Quiz file has an unexpected structure: {exc}") from exc

    try:
        return QuizDefinition(
            title=document.title or default_title,
            time_limit_sec=document.time_limit_sec,
            pass_threshold=document.pass_threshold,
            questions=tuple(
                QuestionDefinition(
                    id=q.id,
                    text=q.text,
                    options=tuple(q.options),
                    correct_index=q.correct_index,
                    topic=q.topic,
                )
                for q in document.questions
            ),
        )
    except QuizDefinitionError as exc:
        raise QuizImportError(str(exc)) from exc


def parse_quiz_text(text: str, default_title: str = "") -> QuizDefinition:
    header: dict[str, str] = {}
    questions: list[QuestionDefinition] = []
    for position, block in enumerate(_split_blocks(text)):
        if position == 0 and _is_header_block(block):
            header = _parse_header(block)
            continue
        questions.append(_parse_question_block(block, position=len(questions) + 1))

    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    if "TIMELIMIT" not in header:
        raise QuizImportError("TIMELIMIT must be set in the header block.")

    try:
        return QuizDefinition(
            title=header.get("TITLE") or default_title,
            time_limit_sec=_parse_positive_int(header["TIMELIMIT"], "TIMELIMIT"),
            pass_threshold=_parse_fraction(header.get("PASS")),
            questions=tuple(questions),
        )
    except QuizDefinitionError as exc:
        raise QuizImportError(str(exc)) from exc


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


_HEADER_KEYS = ("TITLE", "TIMELIMIT", "PASS")


def _is_header_block(block: str) -> bool:
    first_line = block.splitlines()[0].strip().upper()
    return any(first_line.startswith(f"{key}:") for key in _HEADER_KEYS)


def _parse_header(block: str) -> dict[str, str]:
    header: dict[str, str] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        key, separator, value = line.partition(":")
        key = key.strip().upper()
        if not separator or key not in _HEADER_KEYS:
            raise QuizImportError(f"Unknown header line: '{line}'.")
        header[key] = value.strip()
    return header


def _parse_question_block(block: str, position: int) -> QuestionDefinition:
    question_id: str | None = None
    topic: str | None = None
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("ID:"):
            question_id = line[3:].strip()
            current_section = None
            continue

        if upper.startswith("TOPIC:"):
            topic = line[6:].strip() or None
            current_section = None
            continue

        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in ascii_uppercase and line[1] == ":":
            letter = line[0].upper()
            expected_letter = ascii_uppercase[len(options)] if len(options) < len(ascii_uppercase) else None
            if current_section == "Q" and letter != expected_letter:
                # Only the next option letter ends the question text.
                question_lines.append(line)
                continue
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in options:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")

    letters = list(ascii_uppercase[: len(options)])
    if sorted(options) != letters:
        raise QuizImportError("Options must use consecutive letters starting at A.")

    option_list = [options[letter].strip() for letter in letters]
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("CORRECT must name the correct option.")
    if correct_letter not in letters:
        raise QuizImportError(f"CORRECT must be one of {', '.join(letters)}.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text cannot be empty.")

    try:
        return QuestionDefinition(
            id=question_id or f"q{position}",
            text=question_text,
            options=tuple(option_list),
            correct_index=letters.index(correct_letter),
            topic=topic,
        )
    except QuizDefinitionError as exc:
        raise QuizImportError(str(exc)) from exc


def _parse_positive_int(raw_value: str, name: str) -> int:
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{name} must be an integer number of seconds.") from exc
    if parsed_value <= 0:
        raise QuizImportError(f"{name} must be a positive integer.")
    return parsed_value


def _parse_fraction(raw_value: str | None) -> float:
    if not raw_value:
        return DEFAULT_PASS_THRESHOLD
    try:
        value = float(raw_value.rstrip("%"))
    except ValueError as exc:
        raise QuizImportError("PASS must be a number such as 0.7 or 70%.") from exc
    if raw_value.endswith("%"):
        value /= 100
    return value
