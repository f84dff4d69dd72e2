#!/usr/bin/env python3
"""
Command-line driver for the screening score engine.

This script scores one completed questionnaire:
1. Load engine configuration and question banks
2. Load answers (and an optional video prediction) from JSON
3. Derive the family-history flag for the respondent role
4. Score, classify and rank contributors
5. Write the downloadable report as JSON

Usage:
    python main.py --answers answers.json --role parent --output results/report.json

Answers file formats:
    {"par_1": "often", "par_2": "never", ...}
    [{"questionId": "par_1", "value": "often"}, ...]

Prediction file: the JSON payload returned by the video prediction service,
e.g. {"prediction_score": 62.5, "confidence": 0.8, "features_detected": {...},
"source": "python"}.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from scoring import ScoringEngine, has_family_history, load_question_banks
from utils.config_loader import DEFAULT_QUESTION_BANKS, DEFAULT_SCORING_CONFIG, load_config
from visualization import build_screening_report, export_json_report

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('screening_score.log'),
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def _load_json(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def run_scoring(
    answers: Any,
    role: str,
    config: Dict,
    banks_path: Path,
    output_path: str,
    prediction: Optional[Any] = None,
    seed: Optional[str] = None
) -> Dict:
    """
    Score one submission and export its report.

    Args:
        answers: Parsed answers JSON
        role: Respondent role ('individual', 'parent' or 'clinician')
        config: Engine configuration dictionary
        banks_path: Path to question bank YAML
        output_path: Destination of the JSON report
        prediction: Parsed prediction JSON, or None
        seed: Seed for fallback ML values in the report

    Returns:
        Dictionary with the scoring result and report path
    """
    logger.info("=" * 80)
    logger.info("SCREENING SCORE ENGINE")
    logger.info("=" * 80)

    registry = load_question_banks(banks_path)
    profile = registry.for_role(role)

    family_history = has_family_history(profile, answers)
    logger.info(f"Role: {role} (bank={profile.bank.name}), family history: {family_history}")

    engine = ScoringEngine(profile.bank, config)
    result = engine.score(answers, family_history=family_history, video_prediction=prediction)

    if result.is_incomplete:
        logger.warning("Assessment incomplete: no answered questions matched the bank")

    report = build_screening_report(result, fallback_seed=seed, config=config)
    report_path = export_json_report(report, output_path)

    logger.info(f"Questionnaire score: {result.normalized_score:.1f}")
    if result.fused_score is not None:
        logger.info(f"Fused score: {result.fused_score:.1f}")
    logger.info(f"Severity: {result.severity_label} ({result.severity.value})")
    for i, contributor in enumerate(result.top_contributors, start=1):
        logger.info(f"  {i}. {contributor.question} -> {contributor.action}")

    return {
        'result': result.to_dict(),
        'report_path': report_path,
    }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Screening Score Engine - questionnaire scoring with optional video fusion',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Caregiver questionnaire
  python main.py --answers answers.json --role parent

  # With a video prediction payload
  python main.py --answers answers.json --role parent --prediction prediction.json

  # Custom configuration and output
  python main.py --answers answers.json --role individual --config custom.yaml --output out/report.json
        """
    )

    parser.add_argument(
        '--answers',
        type=str,
        required=True,
        help='Path to answers JSON file'
    )

    parser.add_argument(
        '--role',
        type=str,
        default='individual',
        help='Respondent role: individual, parent or clinician (default: individual)'
    )

    parser.add_argument(
        '--prediction',
        type=str,
        default=None,
        help='Path to video prediction JSON file (optional)'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=str(DEFAULT_SCORING_CONFIG),
        help='Path to configuration YAML file (default: configs/scoring.yaml)'
    )

    parser.add_argument(
        '--banks',
        type=str,
        default=str(DEFAULT_QUESTION_BANKS),
        help='Path to question bank YAML file (default: configs/question_banks.yaml)'
    )

    parser.add_argument(
        '--output',
        type=str,
        default='data/outputs/report.json',
        help='Output path for the JSON report (default: data/outputs/report.json)'
    )

    parser.add_argument(
        '--seed',
        type=str,
        default=None,
        help='Seed for fallback ML values when no prediction is available'
    )

    args = parser.parse_args()

    answers_path = Path(args.answers)
    if not answers_path.exists():
        logger.error(f"Answers file not found: {answers_path}")
        sys.exit(1)

    config_path = Path(args.config)
    if not config_path.exists():
        logger.error(f"Config file not found: {config_path}")
        sys.exit(1)

    try:
        config = load_config(config_path)
        answers = _load_json(answers_path)

        prediction = None
        if args.prediction:
            prediction_path = Path(args.prediction)
            if prediction_path.exists():
                try:
                    prediction = _load_json(prediction_path)
                except json.JSONDecodeError as e:
                    logger.warning(f"Prediction file is not valid JSON ({e}); scoring without it")
            else:
                logger.warning(f"Prediction file not found: {prediction_path}; scoring without it")

        outcome = run_scoring(
            answers=answers,
            role=args.role,
            config=config,
            banks_path=Path(args.banks),
            output_path=args.output,
            prediction=prediction,
            seed=args.seed
        )

        logger.info("\n" + "=" * 80)
        logger.info("✓ SUCCESS: Scoring completed")
        logger.info(f"  Report: {outcome['report_path']}")
        logger.info("=" * 80)

        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("\nScoring interrupted by user")
        sys.exit(1)

    except Exception as e:
        logger.error(f"\n✗ ERROR: Scoring failed with exception:")
        logger.error(f"  {type(e).__name__}: {str(e)}")
        logger.exception("Full traceback:")
        sys.exit(1)


if __name__ == '__main__':
    main()
