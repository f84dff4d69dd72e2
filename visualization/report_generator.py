"""
Downloadable screening report.

Builds the content of the assessment report from a ScoringResult, without
recomputing any score:
- Final (effective) score and severity label
- Score statistics: questionnaire score, ML score, model confidence
- Detected video features
- Numbered top contributing factors with suggested actions
- Interpretation of every band and the band's recommended next steps
- Informational-use disclaimer

When the result carries no scorable prediction, the ML statistics come from
the shared fallback generator and are marked as such. PDF layout is left to
the export collaborator; this module only writes JSON.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from fusion.fallback import fallback_from_config
from scoring.engine import ScoringResult
from scoring.severity import interpretation_lines

logger = logging.getLogger(__name__)

REPORT_TITLE = "ASD Assessment Report"
DISCLAIMER = (
    "This report is generated for informational purposes only and should not "
    "replace professional medical advice."
)
FUSION_NOTE = (
    "The final score combines questionnaire responses (60%) with ML video analysis (40%)"
)


@dataclass
class ScreeningReport:
    """
    Container for the downloadable report.

    Attributes:
        title: Report title
        generated_at: ISO timestamp of report generation
        final_score: Effective score (fused if present, else questionnaire)
        severity: Coarse severity value
        severity_label: Fine-grained band label
        questionnaire_score: Normalized questionnaire score
        fused_score: Fused score, None when no prediction was fused
        ml_score: ML prediction score shown in the report
        ml_confidence_percent: Model confidence as a whole percentage
        ml_source: Source tag of the ML values ('python', 'fallback', ...)
        features_detected: Video feature scores
        contributors: Numbered contributors with suggested actions
        interpretation: Interpretation line of every band
        recommendations: Recommended next steps for this result's band
        incomplete: True when no answers were scored
        notes: Additional display notes
        disclaimer: Informational-use disclaimer
    """
    title: str
    generated_at: str
    final_score: float
    severity: str
    severity_label: str
    questionnaire_score: float
    fused_score: Optional[float]
    ml_score: float
    ml_confidence_percent: int
    ml_source: str
    features_detected: Dict[str, float]
    contributors: List[Dict]
    interpretation: List[str]
    recommendations: List[str]
    incomplete: bool = False
    notes: List[str] = field(default_factory=list)
    disclaimer: str = DISCLAIMER


def build_screening_report(
    result: ScoringResult,
    fallback_seed: Optional[str] = None,
    config: Optional[Dict] = None,
    generated_at: Optional[datetime] = None
) -> ScreeningReport:
    """
    Assemble report content from a scoring result.

    Args:
        result: ScoringResult to report on
        fallback_seed: Seed for the fallback ML values (defaults to the
            serialized result, so the same result always shows the same values)
        config: Configuration dict passed to the fallback generator
        generated_at: Report timestamp (defaults to now)

    Returns:
        ScreeningReport
    """
    prediction = result.video_prediction
    notes = []

    if prediction is None or prediction.prediction_score is None:
        seed = fallback_seed if fallback_seed is not None else json.dumps(result.to_dict(), sort_keys=True)
        display = fallback_from_config(seed, config)
        notes.append("ML analysis unavailable; showing fallback estimate")
        logger.info("Report uses fallback ML values")
    else:
        display = prediction
        if prediction.is_fallback:
            notes.append("ML score is a fallback estimate")
        if not prediction.is_scorable:
            notes.append("ML prediction was incomplete and not included in the final score")

    if result.fused_score is not None:
        notes.append(FUSION_NOTE)
    if result.is_incomplete:
        notes.append("No questions were answered; this assessment is incomplete")

    contributors = [
        {
            'rank': rank,
            'question': contributor.question,
            'action': contributor.action,
            'contribution_weight': contributor.contribution_weight,
        }
        for rank, contributor in enumerate(result.top_contributors, start=1)
    ]

    timestamp = (generated_at or datetime.now()).isoformat(timespec='seconds')

    return ScreeningReport(
        title=REPORT_TITLE,
        generated_at=timestamp,
        final_score=result.effective_score,
        severity=result.severity.value,
        severity_label=result.severity_label,
        questionnaire_score=result.normalized_score,
        fused_score=result.fused_score,
        ml_score=display.prediction_score,
        ml_confidence_percent=int(round(display.confidence * 100)),
        ml_source=display.source,
        features_detected=dict(display.features_detected),
        contributors=contributors,
        interpretation=interpretation_lines(),
        recommendations=list(result.recommendations),
        incomplete=result.is_incomplete,
        notes=notes,
    )


def export_json_report(report: ScreeningReport, output_path) -> str:
    """
    Write the report as JSON.

    Args:
        report: ScreeningReport to export
        output_path: Destination file (parent directories are created)

    Returns:
        Path to the written report
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Writing JSON report: {output_path}")

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(asdict(report), f, indent=2, ensure_ascii=False)

    logger.info(f"JSON report saved: {output_path}")
    return str(output_path)
