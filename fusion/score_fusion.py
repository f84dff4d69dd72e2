"""
Questionnaire / video score fusion.

Formula:
    fused = 0.6 * normalized_score + 0.4 * clamp(prediction_score, 0, 100)

Rationale:
- The questionnaire is always available and is the primary signal
- The video score is supplementary and may be a fallback estimate, so it is
  down-weighted
- Weights sum to 1, so the fused score stays within [0, 100]

No prediction, or an unscorable one, means no fused score; the effective
score is then the normalized score unchanged.
"""

import logging
from typing import Optional

from utils.numeric import clamp, is_finite_number, round1

from .video_prediction import VideoPrediction

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONNAIRE_WEIGHT = 0.6


def fuse_scores(
    normalized_score: float,
    prediction: Optional[VideoPrediction],
    questionnaire_weight: float = DEFAULT_QUESTIONNAIRE_WEIGHT
) -> Optional[float]:
    """
    Fuse the questionnaire score with a validated prediction.

    Args:
        normalized_score: Questionnaire score (0-100)
        prediction: Output of validate_prediction, or None
        questionnaire_weight: Share of the questionnaire score; the video
            score gets the remainder

    Returns:
        Fused score (0-100, one decimal), or None when nothing was fused
    """
    if prediction is None:
        return None

    if not prediction.is_scorable:
        logger.info(
            f"Prediction from '{prediction.source}' is not scorable; "
            f"using questionnaire score alone"
        )
        return None

    if not is_finite_number(questionnaire_weight):
        questionnaire_weight = DEFAULT_QUESTIONNAIRE_WEIGHT
    questionnaire_weight = clamp(float(questionnaire_weight), 0.0, 1.0)
    video_weight = 1.0 - questionnaire_weight

    if not is_finite_number(normalized_score):
        normalized_score = 0.0
    normalized_score = clamp(float(normalized_score), 0.0, 100.0)
    video_score = clamp(float(prediction.prediction_score), 0.0, 100.0)

    fused = round1(clamp(
        questionnaire_weight * normalized_score + video_weight * video_score,
        0.0,
        100.0
    ))

    logger.info(
        f"Fused score: {questionnaire_weight:.1f}*{normalized_score:.1f} + "
        f"{video_weight:.1f}*{video_score:.1f} = {fused:.1f} "
        f"(source={prediction.source})"
    )

    return fused
