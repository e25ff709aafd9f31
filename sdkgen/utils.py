"""Utility functions for loading introspection payloads.

This module provides functions for loading pre-computed introspection
JSON from files with proper error handling and validation.
"""

import json
from pathlib import Path

from .codegen.core.errors import IntrospectionError
from .logging_config import get_logger

logger = get_logger(__name__)


def load_introspection_file(file_path: str | Path) -> str:
    """Load a pre-computed introspection payload from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        The payload as a JSON string, suitable for
        ``GenerationConfig.introspection_json``.

    Raises:
        FileNotFoundError: If file doesn't exist.
        IntrospectionError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load introspection JSON from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"File does not have .json extension: {file_path}")

    try:
        payload = file_path.read_text(encoding="utf-8")
        # Validate early so a broken file fails before any generation pass
        json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}", exc_info=True)
        raise IntrospectionError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise IntrospectionError(f"Error reading file {file_path}: {e}") from e

    logger.info(f"Successfully loaded introspection JSON from {file_path}")
    return payload
