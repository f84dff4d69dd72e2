"""
Video-derived ML prediction and its validation.

Prediction payloads come from a remote service that may itself have fallen
back to an estimate, so they are untrusted. validate_prediction is the only
way a payload reaches the fusion formula.

Validation rules:
- prediction_score: finite real number, clamped to [0, 100], one decimal.
  Anything else (NaN, strings, bools, missing) is recorded as absent.
- confidence: finite real number, clamped to [0, 1], one decimal.
  Anything else is replaced by DEFAULT_CONFIDENCE and flagged.
- features_detected: mapping of name -> score; unusable values become 0.0.
- source: non-empty string tag ('python', 'model', 'fallback', ...).
- confidence_defaulted: carried over when a validated prediction (or its
  to_dict() form) is validated again, so revalidation never makes a
  prediction scorable.

Validated predictions are immutable: features_detected is a read-only view.

A prediction is scorable only when both prediction_score and confidence
were valid. Unscorable predictions are still carried on the result so the
UI can show reduced confidence, but they are never fused.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping as MappingType, Optional

from utils.numeric import clamp, is_finite_number, round1

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.7
UNKNOWN_SOURCE = "unknown"
FALLBACK_SOURCES = frozenset({"fallback", "client-fallback"})


@dataclass(frozen=True)
class VideoPrediction:
    """
    Validated ML prediction.

    Attributes:
        prediction_score: Model score (0-100), None when the payload's score was unusable
        confidence: Model confidence (0-1)
        features_detected: Named feature scores
        source: Origin tag ('python', 'model', 'fallback', ...)
        confidence_defaulted: True when confidence was replaced by the neutral default
    """
    prediction_score: Optional[float]
    confidence: float = DEFAULT_CONFIDENCE
    features_detected: MappingType[str, float] = field(default_factory=dict, hash=False)
    source: str = UNKNOWN_SOURCE
    confidence_defaulted: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'features_detected', MappingProxyType(dict(self.features_detected)))

    @property
    def is_scorable(self) -> bool:
        """Whether the prediction may enter the fusion formula."""
        return self.prediction_score is not None and not self.confidence_defaulted

    @property
    def is_fallback(self) -> bool:
        return self.source in FALLBACK_SOURCES

    def to_dict(self) -> Dict[str, Any]:
        return {
            'prediction_score': self.prediction_score,
            'confidence': self.confidence,
            'features_detected': dict(self.features_detected),
            'source': self.source,
            'confidence_defaulted': self.confidence_defaulted,
        }


def validate_prediction(
    payload: Any,
    default_confidence: float = DEFAULT_CONFIDENCE
) -> Optional[VideoPrediction]:
    """
    Turn an untrusted payload into a VideoPrediction, or None.

    Never raises. Returns None only when there is no payload or it is not a
    mapping; every other defect is repaired field by field.

    Args:
        payload: Raw prediction (dict from JSON, VideoPrediction, or None)
        default_confidence: Neutral confidence used when the payload's is unusable

    Returns:
        VideoPrediction or None
    """
    if payload is None:
        return None

    if isinstance(payload, VideoPrediction):
        payload = payload.to_dict()

    if not isinstance(payload, Mapping):
        logger.warning(f"Ignoring prediction payload of type {type(payload).__name__}")
        return None

    if not is_finite_number(default_confidence):
        default_confidence = DEFAULT_CONFIDENCE

    raw_score = payload.get('prediction_score')
    if is_finite_number(raw_score):
        prediction_score = round1(clamp(float(raw_score), 0.0, 100.0))
    else:
        logger.warning(f"Invalid prediction_score {raw_score!r}; prediction will not be fused")
        prediction_score = None

    raw_confidence = payload.get('confidence')
    if is_finite_number(raw_confidence):
        confidence = round1(clamp(float(raw_confidence), 0.0, 1.0))
        # A prediction already validated with a defaulted confidence stays unscorable
        confidence_defaulted = payload.get('confidence_defaulted') is True
    else:
        logger.warning(
            f"Invalid confidence {raw_confidence!r}; defaulting to {default_confidence}"
        )
        confidence = float(clamp(default_confidence, 0.0, 1.0))
        confidence_defaulted = True

    features = {}
    raw_features = payload.get('features_detected')
    if isinstance(raw_features, Mapping):
        for name, value in raw_features.items():
            features[str(name)] = round1(float(value)) if is_finite_number(value) else 0.0
    elif raw_features is not None:
        logger.warning("features_detected is not a mapping; dropping features")

    source = payload.get('source')
    if not isinstance(source, str) or not source.strip():
        source = UNKNOWN_SOURCE

    prediction = VideoPrediction(
        prediction_score=prediction_score,
        confidence=confidence,
        features_detected=features,
        source=source.strip(),
        confidence_defaulted=confidence_defaulted,
    )

    logger.debug(
        f"Validated prediction: score={prediction.prediction_score} "
        f"confidence={prediction.confidence} source={prediction.source} "
        f"scorable={prediction.is_scorable}"
    )

    return prediction
