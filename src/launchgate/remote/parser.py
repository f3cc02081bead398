"""Parse the configuration document into a Configuration.

Undecodable or structurally wrong documents raise ParseError. A single
malformed section is dropped with a warning and the rest still parse.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from launchgate.errors import LaunchGateError
from launchgate.gates.models import Configuration
from launchgate.remote.schemas import (
    ALERT_SECTION,
    OPTIONAL_UPDATE_SECTION,
    REQUIRED_UPDATE_SECTION,
    SECTION_KEYS,
    AlertSection,
    UpdateSection,
)

logger = logging.getLogger(__name__)

DEFAULT_PLATFORM = "ios"


class ParseError(LaunchGateError):
    """Raised when the configuration document cannot be read."""

    pass


class Parser(Protocol):
    """Protocol for configuration parsers."""

    def parse(self, data: bytes) -> Configuration:
        """Parse raw document bytes.

        Raises:
            ParseError: If the document is malformed
        """
        ...


class JsonConfigParser:
    """JSON parser for the platform-keyed configuration document."""

    def __init__(self, platform: str | None = DEFAULT_PLATFORM):
        """Initialize parser.

        Args:
            platform: Top-level key holding the sections. If the key is
                missing (or None), sections are read from the root.
        """
        self.platform = platform

    def parse(self, data: bytes) -> Configuration:
        try:
            document = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseError(f"Configuration is not valid JSON: {e}") from e

        sections = self._select_sections(document)

        alert = _parse_section(sections, ALERT_SECTION, AlertSection)
        optional_update = _parse_section(sections, OPTIONAL_UPDATE_SECTION, UpdateSection)
        required_update = _parse_section(sections, REQUIRED_UPDATE_SECTION, UpdateSection)

        return Configuration(
            alert=alert.to_spec() if alert else None,
            optional_update=optional_update.to_spec() if optional_update else None,
            required_update=required_update.to_spec() if required_update else None,
        )

    def _select_sections(self, document: Any) -> dict:
        if not isinstance(document, dict):
            raise ParseError(
                f"Configuration root must be an object, got {type(document).__name__}"
            )

        if self.platform and self.platform in document:
            sections = document[self.platform]
            if not isinstance(sections, dict):
                raise ParseError(f"Section '{self.platform}' must be an object")
            return sections

        if any(key in document for key in SECTION_KEYS):
            return document

        raise ParseError(
            f"No '{self.platform}' section and no gate sections at the root"
            if self.platform
            else "No gate sections at the root"
        )


def _parse_section(sections: dict, key: str, model: type[BaseModel]) -> Any:
    raw = sections.get(key)
    if raw is None:
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning(
            f"Ignoring malformed '{key}' section ({e.error_count()} errors)"
        )
        return None
