"""Configuration management utilities."""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / 'configs'
DEFAULT_SCORING_CONFIG = CONFIG_DIR / 'scoring.yaml'
DEFAULT_QUESTION_BANKS = CONFIG_DIR / 'question_banks.yaml'


def load_config(config_path) -> Dict[str, Any]:
    """
    Load configuration from YAML file.
    
    Args:
        config_path: Path to YAML configuration file (str or Path)
        
    Returns:
        Dictionary containing configuration (empty dict for an empty file)
        
    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
        ValueError: If the top level of the file is not a mapping
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    logger.info(f"Loading configuration from {config_path}")
    
    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping at top level: {config_path}")
    
    logger.debug(f"Loaded config keys: {list(config.keys())}")
    
    return config


def get_nested_config(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get nested configuration value using dot notation.
    
    Example:
        get_nested_config(config, 'scoring.fusion.questionnaire_weight', default=0.6)
    
    Args:
        config: Configuration dictionary
        key_path: Dot-separated path to value
        default: Default value if path not found
        
    Returns:
        Configuration value or default
    """
    keys = key_path.split('.')
    value = config
    
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    
    return value
