"""
Field mapping: turns a nested input document into a flat Pipedrive payload.

mappings.json is a list of rules like:
  [{"pipedriveKey": "name", "inputKey": "contact.fullName"}, ...]

`inputKey` is a dotted path into input_data.json. A path that does not resolve
is skipped (the key is left out of the payload, never set to null).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pdsync.errors import ConfigurationError


class MappingRule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pipedrive_key: str = Field(alias="pipedriveKey", min_length=1)
    input_key: str = Field(alias="inputKey", min_length=1)


@dataclass(frozen=True)
class Resolution:
    """Result of a dotted-path lookup. `present=False` means the path is absent."""

    present: bool
    value: Any = None


ABSENT = Resolution(present=False)


def resolve_path(document: Any, path: str) -> Resolution:
    current = document
    for key in path.split("."):
        if isinstance(current, Mapping):
            if key not in current:
                return ABSENT
            current = current[key]
        elif isinstance(current, list) and key.isdecimal():
            # "emails.0.value": list positions are plain digits
            idx = int(key)
            if idx >= len(current):
                return ABSENT
            current = current[idx]
        else:
            return ABSENT
    return Resolution(present=True, value=current)


def build_payload(rules: List[MappingRule], document: Mapping[str, Any]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for rule in rules:
        resolved = resolve_path(document, rule.input_key)
        if resolved.present:
            payload[rule.pipedrive_key] = resolved.value
    return payload


def find_rule(rules: List[MappingRule], pipedrive_key: str) -> Optional[MappingRule]:
    """Return the only rule targeting `pipedrive_key`; ConfigurationError if there are several."""
    matches = [rule for rule in rules if rule.pipedrive_key == pipedrive_key]
    if len(matches) > 1:
        sources = ", ".join(rule.input_key for rule in matches)
        raise ConfigurationError(f"More than one mapping targets '{pipedrive_key}' ({sources})")
    return matches[0] if matches else None


def _read_json(path: str | Path) -> Any:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"File not found: {p}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {p}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {p}: {e}")


def load_input_document(path: str | Path) -> Dict[str, Any]:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object, got {type(data).__name__}")
    return data


def load_mapping_rules(path: str | Path) -> List[MappingRule]:
    data = _read_json(path)
    if not isinstance(data, list):
        raise ConfigurationError(f"{path} must contain a JSON list of mapping rules")
    rules: List[MappingRule] = []
    for idx, raw in enumerate(data):
        try:
            rules.append(MappingRule.model_validate(raw))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid mapping rule #{idx} in {path}: {e.errors()[0]['msg']}")
    return rules
