# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup, configuration
loading and lenient parsing of user-entered numbers, that are used across
different parts of the application but do not belong to a specific domain
like geometry or rendering.
"""
import logging
import logging.handlers
import json
import math
import os
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# parse_int(value: Any, default: int, minimum: int = 1) -> int:
#   - Outputs: value as an int, or default when it cannot be parsed or is
#     below minimum. Never raises.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/simulation.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

def parse_int(value: Any, default: int, minimum: int = 1) -> int:
    """
    Parses user input as an integer, falling back to a default.

    Mirrors what a form field does with free text: "7" and 7.9 become 7,
    anything unparseable or smaller than `minimum` becomes `default`.
    """
    try:
        parsed = int(float(value))
    except (TypeError, ValueError, OverflowError):
        logging.warning(f"Could not parse {value!r} as an integer. Using default {default}.")
        return default
    if parsed < minimum:
        logging.warning(f"Value {parsed} is below the minimum of {minimum}. Using default {default}.")
        return default
    return parsed

def parse_float(value: Any) -> Optional[float]:
    """Parses a positive finite float, returning None for anything else."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not (parsed > 0.0) or parsed == float('inf'):
        return None
    return parsed

def parse_finite(value: Any) -> Optional[float]:
    """Parses any finite float, returning None for NaN, infinities and non-numbers."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed
