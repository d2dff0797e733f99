"""Auto-detect the API document dialect."""

import json
from pathlib import Path

import yaml


def detect_version(data: object) -> str:
    """Return 'swagger' for Swagger 2.0, 'openapi' for OpenAPI 3.x, 'unknown' otherwise."""
    if not isinstance(data, dict):
        return "unknown"
    if "swagger" in data:
        return "swagger"
    if "openapi" in data:
        return "openapi"
    return "unknown"


def detect_format(file_path: Path) -> str:
    """Detect the dialect of an API document file.

    Returns: 'swagger', 'openapi', or 'unknown'.
    """
    text = file_path.read_text(encoding="utf-8")

    try:
        version = detect_version(yaml.safe_load(text))
        if version != "unknown":
            return version
    except yaml.YAMLError:
        pass

    # Try JSON specifically (for files not parseable as YAML)
    try:
        return detect_version(json.loads(text))
    except (json.JSONDecodeError, ValueError):
        pass

    return "unknown"
