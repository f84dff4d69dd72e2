"""
Questionnaire answers and their ordinal severity.

Every question in the screening banks is answered on the same five-point
frequency scale. The scale is ordinal: "always" reports the behavior more
often than "often", and so on down to "never".

    never=0  rarely=1  sometimes=2  often=3  always=4

Raw answers arrive from the questionnaire form as plain strings, keyed by
question id. Coercion here is tolerant: unknown values are kept (so the
question still counts as answered) and scored at index 0.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)


class AnswerValue(Enum):
    """Five-point frequency scale, in ascending order of severity."""
    NEVER = "never"
    RARELY = "rarely"
    SOMETIMES = "sometimes"
    OFTEN = "often"
    ALWAYS = "always"

    @property
    def severity_index(self) -> int:
        return ANSWER_SEVERITY_INDEX[self]

    @classmethod
    def coerce(cls, raw: Any) -> Optional['AnswerValue']:
        """Parse a raw form value. Returns None for anything off the scale."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                return None
        return None


ANSWER_SEVERITY_INDEX = {
    AnswerValue.NEVER: 0,
    AnswerValue.RARELY: 1,
    AnswerValue.SOMETIMES: 2,
    AnswerValue.OFTEN: 3,
    AnswerValue.ALWAYS: 4,
}

MAX_SEVERITY_INDEX = 4


@dataclass(frozen=True)
class Answer:
    """
    One answered question.

    Attributes:
        question_id: Id of the question in its bank
        value: Parsed answer, or None when the raw value was not on the scale
        raw_value: Value as received from the form
    """
    question_id: str
    value: Optional[AnswerValue]
    raw_value: Any = None

    @property
    def severity_index(self) -> int:
        """Ordinal index 0..4; unparseable answers count as 0."""
        if self.value is None:
            return 0
        return self.value.severity_index

    @classmethod
    def from_raw(cls, question_id: Any, raw_value: Any) -> 'Answer':
        return cls(
            question_id=str(question_id),
            value=AnswerValue.coerce(raw_value),
            raw_value=raw_value,
        )


AnswerInput = Union[Mapping, Iterable]


def coerce_answers(answers: Optional[AnswerInput]) -> List[Answer]:
    """
    Normalize any supported answer collection into an ordered list of Answer.

    Accepted shapes:
    - Mapping of question_id -> value (insertion order is kept)
    - Sequence of Answer objects
    - Sequence of (question_id, value) pairs
    - Sequence of {'questionId' | 'question_id': ..., 'value': ...} dicts

    Unrecognized entries are skipped. When a question id appears more than
    once, the last answer wins but keeps the position of the first.

    Args:
        answers: Raw answer collection (None is treated as empty)

    Returns:
        List of Answer, one per distinct question id
    """
    if answers is None:
        return []

    if isinstance(answers, Mapping):
        items = list(answers.items())
    elif isinstance(answers, (str, bytes)):
        logger.warning("Answer collection is a string; treating as empty")
        return []
    else:
        try:
            items = list(answers)
        except TypeError:
            logger.warning(f"Answer collection of type {type(answers).__name__} is not iterable")
            return []

    by_id: Dict[str, Answer] = {}
    for item in items:
        answer = _to_answer(item)
        if answer is None:
            logger.warning(f"Skipping unrecognized answer entry: {item!r}")
            continue
        if answer.value is None:
            logger.warning(
                f"Answer for {answer.question_id} is off the scale "
                f"({answer.raw_value!r}); scoring it as index 0"
            )
        if answer.question_id in by_id:
            logger.warning(f"Duplicate answer for {answer.question_id}; keeping the last one")
        by_id[answer.question_id] = answer

    return list(by_id.values())


def _to_answer(item: Any) -> Optional[Answer]:
    if isinstance(item, Answer):
        return item
    if isinstance(item, Mapping):
        question_id = item.get('questionId') or item.get('question_id')
        if question_id is None:
            return None
        return Answer.from_raw(question_id, item.get('value'))
    if isinstance(item, (tuple, list)) and len(item) == 2:
        return Answer.from_raw(item[0], item[1])
    return None
