"""Loading: raw file text -> parsed value -> :class:`ParsedData`."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

from skimalens.core.detection import detect
from skimalens.core.estimator import estimate_record_count
from skimalens.core.exceptions import ParseError
from skimalens.core.types import (
    DataKind,
    DataMetadata,
    ParsedData,
    RawPayload,
    SerializationKind,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".json", ".yaml", ".yml")

_YAML_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class ExportYamlLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings, the way JSON exports carry them."""


ExportYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _YAML_TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_yaml(content: str) -> Any:
    return yaml.load(content, Loader=ExportYamlLoader)


def determine_serialization(filename: str, content: str) -> SerializationKind:
    """Pick JSON or YAML from the extension, else by trying both parsers."""
    name = filename.lower()
    if name.endswith(".json"):
        return SerializationKind.JSON
    if name.endswith((".yaml", ".yml")):
        return SerializationKind.YAML

    try:
        json.loads(content)
        return SerializationKind.JSON
    except json.JSONDecodeError:
        pass
    try:
        load_yaml(content)
        return SerializationKind.YAML
    except yaml.YAMLError:
        return SerializationKind.JSON


def parse_content(content: str, serialization: SerializationKind) -> Any:
    """Parse *content*. Raises :class:`ParseError` with the parser's message."""
    if serialization is SerializationKind.JSON:
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseError(serialization.value, str(exc)) from exc

    try:
        return load_yaml(content)
    except yaml.YAMLError as exc:
        raise ParseError(serialization.value, str(exc)) from exc


def parse_data(payload: RawPayload, file_size: int | None = None) -> ParsedData:
    """Detect the kind of an already-parsed payload and build its metadata."""
    parse_time = datetime.now(UTC)
    kind = detect(payload.data, payload.filename)
    if kind is DataKind.GENERIC_JSON and payload.serialization is SerializationKind.YAML:
        kind = DataKind.GENERIC_YAML

    metadata = DataMetadata(
        filename=payload.filename,
        estimated_type=kind,
        parse_time=parse_time,
        file_size=file_size,
        record_count=estimate_record_count(payload.data, kind),
    )
    return ParsedData(raw=payload.data, kind=kind, metadata=metadata)


def load_text(content: str, filename: str) -> ParsedData:
    """Parse and classify in-memory file content."""
    serialization = determine_serialization(filename, content)
    data = parse_content(content, serialization)
    payload = RawPayload(data=data, filename=filename, serialization=serialization)
    return parse_data(payload, file_size=len(content.encode("utf-8")))


def load_file(path: str | Path) -> ParsedData:
    """Read a ``.json``/``.yaml``/``.yml`` file from disk and classify it.

    Raises :class:`FileNotFoundError` for missing files and
    :class:`ParseError` for unsupported extensions or invalid content.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"File not found: {file_path.resolve()}")
    if file_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ParseError(
            file_path.suffix.lstrip(".") or "file",
            "Unsupported file type. Please use .json, .yaml, or .yml files.",
        )

    logger.info("Reading file: %s", file_path)
    content = file_path.read_text(encoding="utf-8")
    parsed = load_text(content, file_path.name)
    parsed.metadata.file_size = file_path.stat().st_size
    logger.info(
        "Detected %s in %s (%s records)",
        parsed.kind,
        file_path.name,
        parsed.record_count,
    )
    return parsed
