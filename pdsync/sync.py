"""
Find-or-create-or-update orchestration.

One linear pass per entity:
  payload = map(rules, document)
  name    = document[<rule for "name">]      (config error if missing/empty)
  match   = search_by_name(name)
  match ? update(match.id, payload) : create(payload)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping

from pdsync.errors import ConfigurationError
from pdsync.integrations.pipedrive import (
    PipedriveClient,
    PipedriveEntity,
    PipedriveOrganization,
    PipedrivePerson,
)
from pdsync.logging_setup import get_logger
from pdsync.mapping import MappingRule, build_payload, find_rule, resolve_path

NAME_KEY = "name"


class EntityKind(Enum):
    person = "person"
    organization = "organization"


class SyncAction(Enum):
    created = "created"
    updated = "updated"


@dataclass(frozen=True)
class SyncResult:
    kind: EntityKind
    action: SyncAction
    entity: PipedriveEntity


def resolve_search_name(rules: List[MappingRule], document: Mapping[str, Any]) -> str:
    rule = find_rule(rules, NAME_KEY)
    if rule is None:
        raise ConfigurationError(f"No mapping found for '{NAME_KEY}' field in mappings")
    resolved = resolve_path(document, rule.input_key)
    if not resolved.present or resolved.value is None or (
        isinstance(resolved.value, str) and not resolved.value.strip()
    ):
        raise ConfigurationError(f"Name not found in input data at '{rule.input_key}'")
    return str(resolved.value)


def sync_entity(
    kind: EntityKind,
    client: PipedriveClient,
    rules: List[MappingRule],
    document: Mapping[str, Any],
    extra_fields: Dict[str, Any] | None = None,
) -> SyncResult:
    """
    Upsert one entity. `extra_fields` are added to the payload only where no
    mapping rule already produced that key.
    """
    log = get_logger()
    payload = build_payload(rules, document)
    for key, value in (extra_fields or {}).items():
        payload.setdefault(key, value)
    name = resolve_search_name(rules, document)

    if kind is EntityKind.person:
        search, create, update = client.search_person_by_name, client.create_person, client.update_person
    else:
        search, create, update = (
            client.search_organization_by_name,
            client.create_organization,
            client.update_organization,
        )

    existing = search(name)
    if existing is not None:
        entity = update(existing.id, payload)
        action = SyncAction.updated
    else:
        entity = create(payload)
        action = SyncAction.created

    log.info(f"{kind.value}_synced", action=action.value, id=entity.id, fields=sorted(payload))
    return SyncResult(kind=kind, action=action, entity=entity)


def sync_person(
    client: PipedriveClient,
    rules: List[MappingRule],
    document: Mapping[str, Any],
    extra_fields: Dict[str, Any] | None = None,
) -> PipedrivePerson:
    return sync_entity(EntityKind.person, client, rules, document, extra_fields).entity


def sync_organization(
    client: PipedriveClient, rules: List[MappingRule], document: Mapping[str, Any]
) -> PipedriveOrganization:
    return sync_entity(EntityKind.organization, client, rules, document).entity
