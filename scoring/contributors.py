"""
Top contributing factors.

Ranks answered questions by weighted contribution and attaches each one's
recommended action, so reports can say which answers drove the score and
what to do about them.

Ordering:
- Descending contribution
- Ties keep question-bank order (stable sort on bank position)

Identical input therefore always yields the same list.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np

from .normalization import QuestionContribution
from .question_bank import QuestionBank

logger = logging.getLogger(__name__)

DEFAULT_TOP_CONTRIBUTORS = 5


@dataclass(frozen=True)
class TopContributor:
    """
    One ranked contributing question.

    Attributes:
        question: Question text from the bank
        action: Recommended action from the bank
        contribution_weight: Weighted contribution (severity_index / 4 * weight)
        question_id: Question id
        domain: Behavioral domain of the question
    """
    question: str
    action: str
    contribution_weight: float
    question_id: str = ""
    domain: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'question': self.question,
            'action': self.action,
            'contribution_weight': self.contribution_weight,
            'question_id': self.question_id,
            'domain': self.domain,
        }


def rank_top_contributors(
    contributions: List[QuestionContribution],
    question_bank: QuestionBank,
    top_n: int = DEFAULT_TOP_CONTRIBUTORS
) -> Tuple[TopContributor, ...]:
    """
    Select the top-N contributions.

    Args:
        contributions: Output of compute_contributions
        question_bank: Bank supplying question text and actions
        top_n: Number of contributors to return (at least 1)

    Returns:
        Tuple of TopContributor, highest contribution first
    """
    if not contributions:
        return ()

    top_n = max(1, int(top_n))

    # Bank order first, then a stable sort on descending contribution
    by_position = sorted(contributions, key=lambda c: c.position)
    values = np.array([c.contribution for c in by_position], dtype=float)
    order = np.argsort(-values, kind='stable')[:top_n]

    ranked = []
    for idx in order:
        item = by_position[int(idx)]
        question = question_bank.get(item.question_id)
        ranked.append(TopContributor(
            question=question.text,
            action=question.action,
            contribution_weight=float(item.contribution),
            question_id=item.question_id,
            domain=question.domain,
        ))

    logger.debug(
        f"Top contributors: {[(c.question_id, round(c.contribution_weight, 3)) for c in ranked]}"
    )

    return tuple(ranked)
