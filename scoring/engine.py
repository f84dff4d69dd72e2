"""
Screening scoring engine.

Pipeline:
1. Coerce answers and compute weighted per-question contributions
2. Aggregate into the normalized questionnaire score (0-100)
3. Validate the optional video prediction and fuse (60/40)
4. Classify the effective score into a severity band
5. Rank top contributing questions with their recommended actions

Properties:
- Pure: no I/O, no randomness, no wall-clock reads
- Deterministic: identical input gives an equal ScoringResult
- Fail-soft: malformed input is repaired and logged, never raised
- Thread-safe: configuration is read once at construction and never mutated

Usage:
    engine = ScoringEngine(question_bank, config)
    result = engine.score(answers, family_history=True, video_prediction=payload)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from fusion.score_fusion import DEFAULT_QUESTIONNAIRE_WEIGHT, fuse_scores
from fusion.video_prediction import DEFAULT_CONFIDENCE, VideoPrediction, validate_prediction
from utils.config_loader import get_nested_config

from .answers import AnswerInput
from .contributors import DEFAULT_TOP_CONTRIBUTORS, TopContributor, rank_top_contributors
from .normalization import DEFAULT_FAMILY_HISTORY_BONUS, compute_contributions, compute_normalized_score
from .question_bank import QuestionBank
from .severity import Severity, classify_severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringResult:
    """
    Immutable outcome of one questionnaire submission.

    Attributes:
        normalized_score: Questionnaire score (0-100, one decimal)
        fused_score: Questionnaire/video fused score, None when nothing was fused
        severity: Coarse severity of the effective score
        severity_label: Fine-grained band label
        top_contributors: Ranked contributing questions, highest first
        video_prediction: Validated prediction as supplied, or None
        recommendations: Recommended next steps for the band
        answered_count: Number of answered questions that were scored
    """
    normalized_score: float
    fused_score: Optional[float]
    severity: Severity
    severity_label: str
    top_contributors: Tuple[TopContributor, ...] = ()
    video_prediction: Optional[VideoPrediction] = None
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
    answered_count: int = 0

    @property
    def effective_score(self) -> float:
        """Fused score when present, otherwise the normalized score."""
        return self.fused_score if self.fused_score is not None else self.normalized_score

    @property
    def is_incomplete(self) -> bool:
        """No answers were scored; a 0 here means 'not assessed', not 'no risk'."""
        return self.answered_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'normalized_score': self.normalized_score,
            'fused_score': self.fused_score,
            'effective_score': self.effective_score,
            'severity': self.severity.value,
            'severity_label': self.severity_label,
            'top_contributors': [c.to_dict() for c in self.top_contributors],
            'video_prediction': self.video_prediction.to_dict() if self.video_prediction else None,
            'recommendations': list(self.recommendations),
            'answered_count': self.answered_count,
            'is_incomplete': self.is_incomplete,
        }


class ScoringEngine:
    """
    Scoring engine bound to one question bank and configuration.

    Configuration keys (all optional):
        scoring.family_history_bonus: Points added for family history (default 5.0)
        scoring.top_contributors: Number of contributors reported (default 5)
        scoring.fusion.questionnaire_weight: Questionnaire share in fusion (default 0.6;
            other values depart from the fixed 60/40 split)
        scoring.fusion.default_confidence: Neutral confidence for bad payloads (default 0.7)
    """

    def __init__(self, question_bank: QuestionBank, config: Optional[Dict] = None):
        """
        Initialize scoring engine.

        Args:
            question_bank: Read-only bank supplying weights, text and actions
            config: Configuration dict (see class docstring)
        """
        config = config or {}
        self.question_bank = question_bank

        self.family_history_bonus = get_nested_config(
            config, 'scoring.family_history_bonus', DEFAULT_FAMILY_HISTORY_BONUS
        )
        top_n = get_nested_config(config, 'scoring.top_contributors', DEFAULT_TOP_CONTRIBUTORS)
        if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
            logger.warning(f"Invalid scoring.top_contributors {top_n!r}; using {DEFAULT_TOP_CONTRIBUTORS}")
            top_n = DEFAULT_TOP_CONTRIBUTORS
        self.top_n = top_n
        self.questionnaire_weight = get_nested_config(
            config, 'scoring.fusion.questionnaire_weight', DEFAULT_QUESTIONNAIRE_WEIGHT
        )
        self.default_confidence = get_nested_config(
            config, 'scoring.fusion.default_confidence', DEFAULT_CONFIDENCE
        )

        logger.info(
            f"Scoring engine initialized: bank={question_bank.name} "
            f"({len(question_bank)} questions, total weight {question_bank.total_weight:.1f}), top_n={self.top_n}, "
            f"questionnaire_weight={self.questionnaire_weight}"
        )

    def score(
        self,
        answers: AnswerInput,
        family_history: bool = False,
        video_prediction: Any = None
    ) -> ScoringResult:
        """
        Score one questionnaire submission.

        Args:
            answers: Answer collection (mapping, Answer list, or (id, value) pairs)
            family_history: Whether the hereditary-risk bonus applies
            video_prediction: Raw or validated prediction payload, or None

        Returns:
            ScoringResult
        """
        contributions = compute_contributions(answers, self.question_bank)

        normalized_score = compute_normalized_score(
            contributions,
            family_history=bool(family_history) and bool(contributions),
            family_history_bonus=self.family_history_bonus,
        )

        prediction = validate_prediction(video_prediction, self.default_confidence)
        fused_score = fuse_scores(normalized_score, prediction, self.questionnaire_weight)

        effective = fused_score if fused_score is not None else normalized_score
        band = classify_severity(effective)

        top_contributors = rank_top_contributors(contributions, self.question_bank, self.top_n)

        if not contributions:
            logger.warning("No answered questions; assessment is incomplete")

        logger.info(
            f"Scored {len(contributions)} answers: normalized={normalized_score:.1f}, "
            f"fused={'n/a' if fused_score is None else f'{fused_score:.1f}'}, "
            f"severity={band.severity.value} ({band.label})"
        )

        return ScoringResult(
            normalized_score=normalized_score,
            fused_score=fused_score,
            severity=band.severity,
            severity_label=band.label,
            top_contributors=top_contributors,
            video_prediction=prediction,
            recommendations=band.recommendations,
            answered_count=len(contributions),
        )


def calculate_score(
    answers: AnswerInput,
    question_bank: QuestionBank,
    family_history: bool = False,
    video_prediction: Any = None,
    config: Optional[Dict] = None
) -> ScoringResult:
    """
    Convenience function to score a submission without keeping an engine.

    Args:
        answers: Answer collection
        question_bank: Question bank for the respondent's role
        family_history: Whether the hereditary-risk bonus applies
        video_prediction: Optional prediction payload
        config: Optional configuration dict

    Returns:
        ScoringResult
    """
    engine = ScoringEngine(question_bank, config)
    return engine.score(answers, family_history, video_prediction)
