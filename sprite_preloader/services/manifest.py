"""
Sprite manifest loading.

A manifest is a JSON object mapping sprite keys to entries such as
{"type": "image", "src": "/sprites/player.png", "width": 32, "height": 32}.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from sprite_preloader.models import ManifestEntry
from sprite_preloader.utils.errors import ManifestError

logger = logging.getLogger("sprite_preloader")


def parse_manifest(data: Mapping[str, Any]) -> Dict[str, ManifestEntry]:
    """
    Validate an in-memory manifest.

    Args:
        data: Mapping of sprite key to raw entry; None entries are skipped

    Returns:
        Mapping of sprite key to ManifestEntry, in input order

    Raises:
        ManifestError: If the root is not a mapping or an entry is invalid
    """
    if not isinstance(data, Mapping):
        raise ManifestError(f"Manifest root must be an object, got {type(data).__name__}")

    entries: Dict[str, ManifestEntry] = {}
    for key, raw in data.items():
        if raw is None:
            continue
        try:
            entries[key] = ManifestEntry.model_validate(raw)
        except ValidationError as e:
            raise ManifestError(
                f"Invalid manifest entry '{key}'",
                details={"key": key, "errors": e.errors(include_url=False)},
            ) from e

    image_count = sum(1 for entry in entries.values() if entry.is_image)
    logger.debug(f"ManifestParsed entries={len(entries)} images={image_count}")
    return entries


def load_manifest(path: Union[str, Path]) -> Dict[str, ManifestEntry]:
    """
    Load and validate a manifest JSON file.

    Raises:
        ManifestError: If the file is missing, is not valid JSON, or fails validation
    """
    manifest_path = Path(path)
    try:
        raw_text = manifest_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read manifest: {e}", path=str(manifest_path)) from e

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise ManifestError(
            f"Manifest is not valid JSON: {e.msg} (line {e.lineno})",
            path=str(manifest_path),
        ) from e

    try:
        entries = parse_manifest(data)
    except ManifestError as e:
        e.path = str(manifest_path)
        raise

    logger.info(f"ManifestLoaded path={manifest_path} entries={len(entries)}")
    return entries
