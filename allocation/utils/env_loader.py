"""
Environment variable loading utility.

This module provides functions to load environment variables from files.
"""
import os
import logging

logger = logging.getLogger(__name__)


def load_env_from_file(file_path, override=True):
    """
    Load environment variables from a file of KEY=VALUE lines.

    Blank lines and lines starting with '#' are ignored. Surrounding
    whitespace and matching quotes around values are stripped.

    Args:
        file_path: Path to the environment variable file.
        override: Replace variables that are already set in the environment.

    Returns:
        True if file was loaded successfully, False otherwise.
    """
    if not os.path.exists(file_path):
        logger.warning(f"Environment file not found: {file_path}")
        return False

    try:
        loaded = {}
        with open(file_path, 'r') as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if line.startswith('export '):
                    line = line[len('export '):]

                if '=' not in line:
                    raise ValueError(f"line {line_number} is not KEY=VALUE")
                key, value = line.split('=', 1)
                key = key.strip()
                if not key:
                    raise ValueError(f"line {line_number} has an empty key")
                value = value.strip()
                if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                    value = value[1:-1]
                loaded[key] = value
    except (OSError, ValueError) as e:
        logger.error(f"Error loading environment variables from {file_path}: {str(e)}")
        return False

    for key, value in loaded.items():
        if override or key not in os.environ:
            os.environ[key] = value

    logger.info(f"Loaded environment variables from {file_path}")
    return True
