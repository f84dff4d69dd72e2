"""
Deterministic fallback prediction.

When the video model is unavailable, both the prediction service and the
report layer need a stand-in estimate. They call this one generator so the
same seed always yields the same prediction, wherever it is produced.

Seeding:
- SHA-256 of the seed string -> 64-bit integer -> numpy default_rng
- Same seed, same numbers, independent of process or platform

Output is tagged source='fallback' so displays can flag reduced confidence.
The scoring engine itself never calls this.
"""

import hashlib
import logging
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from utils.config_loader import get_nested_config
from utils.numeric import round1

from .video_prediction import VideoPrediction

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"
DEFAULT_PREDICTION_RANGE = (30.0, 85.0)
DEFAULT_CONFIDENCE_RANGE = (0.55, 0.95)
DEFAULT_FEATURE_RANGE = (1.0, 10.0)
DEFAULT_FEATURE_NAMES = (
    "behavioral_markers",
    "communication_patterns",
    "social_interaction",
)


def _rng_for_seed(seed: str) -> np.random.Generator:
    digest = hashlib.sha256(str(seed).encode('utf-8')).digest()
    return np.random.default_rng(int.from_bytes(digest[:8], 'big'))


def _uniform(rng: np.random.Generator, bounds: Tuple[float, float]) -> float:
    low, high = sorted((float(bounds[0]), float(bounds[1])))
    return float(rng.uniform(low, high))


def generate_fallback_prediction(
    seed,
    prediction_range: Tuple[float, float] = DEFAULT_PREDICTION_RANGE,
    confidence_range: Tuple[float, float] = DEFAULT_CONFIDENCE_RANGE,
    feature_range: Tuple[float, float] = DEFAULT_FEATURE_RANGE,
    feature_names: Sequence[str] = DEFAULT_FEATURE_NAMES,
    source: str = FALLBACK_SOURCE
) -> VideoPrediction:
    """
    Generate a stand-in prediction that is stable for a given seed.

    Values are drawn in a fixed order (score, confidence, then features in
    the given order), so adding a feature name does not change the score.

    Args:
        seed: Any value; its str() seeds the generator (e.g. a session id or video URL)
        prediction_range: Bounds for prediction_score
        confidence_range: Bounds for confidence
        feature_range: Bounds for every feature score
        feature_names: Names of the features to emit
        source: Source tag for the result

    Returns:
        VideoPrediction with every numeric field rounded to one decimal
    """
    rng = _rng_for_seed(seed)

    prediction_score = round1(_uniform(rng, prediction_range))
    confidence = round1(_uniform(rng, confidence_range))
    features: Dict[str, float] = {
        str(name): round1(_uniform(rng, feature_range))
        for name in feature_names
    }

    logger.info(
        f"Generated fallback prediction: score={prediction_score:.1f} "
        f"confidence={confidence:.1f}"
    )

    return VideoPrediction(
        prediction_score=prediction_score,
        confidence=confidence,
        features_detected=features,
        source=source,
    )


def fallback_from_config(seed, config: Optional[Dict] = None) -> VideoPrediction:
    """
    Generate a fallback prediction using ranges from the 'fallback' config section.

    Args:
        seed: Seed value (see generate_fallback_prediction)
        config: Configuration dict; missing keys use module defaults

    Returns:
        VideoPrediction
    """
    config = config or {}
    return generate_fallback_prediction(
        seed,
        prediction_range=tuple(get_nested_config(config, 'fallback.prediction_range', DEFAULT_PREDICTION_RANGE)),
        confidence_range=tuple(get_nested_config(config, 'fallback.confidence_range', DEFAULT_CONFIDENCE_RANGE)),
        feature_range=tuple(get_nested_config(config, 'fallback.feature_range', DEFAULT_FEATURE_RANGE)),
        feature_names=tuple(get_nested_config(config, 'fallback.feature_names', DEFAULT_FEATURE_NAMES)),
    )
