"""
Normalized questionnaire score computation.

Formula:
    contribution_i = (severity_index_i / 4) * weight_i
    score = 100 * sum(contribution_i) / sum(weight_i)        over answered i

Only answered questions enter the denominator. A partially completed
questionnaire is therefore scored on what was answered, and banks with
different total weights (self-report vs caregiver-report) land on the same
0-100 scale.

Score interpretation:
- 0: nothing reported, or nothing answered (see answered_count)
- 100: every answered question reported as "always"

Family history:
- A fixed bonus (default +5.0) models elevated prior risk
- Applied after rounding, clamped at 100
- Not applied to an empty questionnaire, which stays at 0 (incomplete)
"""

import logging
import math
from dataclasses import dataclass
from typing import List

from utils.numeric import clamp, is_finite_number, round1

from .answers import MAX_SEVERITY_INDEX, AnswerInput, coerce_answers
from .question_bank import QuestionBank

logger = logging.getLogger(__name__)

DEFAULT_FAMILY_HISTORY_BONUS = 5.0


@dataclass(frozen=True)
class QuestionContribution:
    """
    Weighted contribution of one answered question.

    Attributes:
        question_id: Question id
        position: Position of the question in its bank
        severity_index: Ordinal answer index (0-4)
        weight: Question weight from the bank
        contribution: (severity_index / 4) * weight
    """
    question_id: str
    position: int
    severity_index: int
    weight: float
    contribution: float


def compute_contributions(
    answers: AnswerInput,
    question_bank: QuestionBank
) -> List[QuestionContribution]:
    """
    Compute per-question contributions for all answered, known questions.

    Answers for question ids missing from the bank are dropped (they have no
    weight). Output follows answer order.

    Args:
        answers: Answer collection (see scoring.answers.coerce_answers)
        question_bank: Bank supplying weights

    Returns:
        List of QuestionContribution
    """
    contributions = []

    for answer in coerce_answers(answers):
        question = question_bank.get(answer.question_id)
        if question is None:
            logger.warning(
                f"Answer for unknown question {answer.question_id} "
                f"(bank '{question_bank.name}'); ignoring"
            )
            continue

        if not is_finite_number(question.weight) or question.weight <= 0:
            logger.warning(f"Question {question.question_id} has unusable weight; ignoring")
            continue

        index = answer.severity_index
        contribution = (index / MAX_SEVERITY_INDEX) * question.weight

        logger.debug(
            f"{question.question_id}: index={index} weight={question.weight} "
            f"contribution={contribution:.3f}"
        )

        contributions.append(QuestionContribution(
            question_id=question.question_id,
            position=question_bank.position(question.question_id),
            severity_index=index,
            weight=question.weight,
            contribution=contribution,
        ))

    return contributions


def compute_normalized_score(
    contributions: List[QuestionContribution],
    family_history: bool = False,
    family_history_bonus: float = DEFAULT_FAMILY_HISTORY_BONUS
) -> float:
    """
    Aggregate contributions into the 0-100 questionnaire score.

    Args:
        contributions: Output of compute_contributions
        family_history: Whether the hereditary-risk bonus applies
        family_history_bonus: Points added when family_history is set

    Returns:
        Score in [0, 100], one decimal
    """
    if not contributions:
        return 0.0

    total_weight = math.fsum(c.weight for c in contributions)
    ratio = math.fsum(c.contribution for c in contributions) / total_weight if total_weight > 0 else 0.0

    score = round1(clamp(ratio * 100.0, 0.0, 100.0))

    if family_history:
        bonus = family_history_bonus if is_finite_number(family_history_bonus) else DEFAULT_FAMILY_HISTORY_BONUS
        boosted = round1(clamp(score + max(0.0, float(bonus)), 0.0, 100.0))
        logger.info(f"Family history bonus applied: {score:.1f} -> {boosted:.1f}")
        score = boosted

    return score
