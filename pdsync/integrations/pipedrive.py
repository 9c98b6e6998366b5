# pdsync/integrations/pipedrive.py
# Minimal Pipedrive v1 client for the sync:
# - persons: search by name, create, update
# - organizations: same three calls (optional org sync)
# - users/me: token sanity check
# Every response goes through _decode_envelope, one attempt per call, no retries.

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ConfigDict, ValidationError

from pdsync.errors import PipedriveEnvelopeError, PipedriveHTTPError
from pdsync.logging_setup import get_logger

DEFAULT_TIMEOUT = 30


class PipedriveEntity(BaseModel):
    # Pipedrive returns dozens of fields (plus hashed custom field keys); keep them all.
    model_config = ConfigDict(extra="allow")

    id: int
    name: Optional[str] = None


class PipedrivePerson(PipedriveEntity):
    pass


class PipedriveOrganization(PipedriveEntity):
    pass


E = TypeVar("E", bound=PipedriveEntity)


def _decode_envelope(method: str, path: str, response: requests.Response) -> Any:
    """Validate a Pipedrive response and return its `data` member."""
    if not 200 <= response.status_code < 300:
        raise PipedriveHTTPError.from_status(method, path, response.status_code, response.text or "")
    try:
        envelope = response.json()
    except ValueError:
        raise PipedriveEnvelopeError(
            f"Pipedrive {method} {path} returned a non-JSON body: {(response.text or '')[:300]}",
            method=method,
            path=path,
            status_code=response.status_code,
            envelope=response.text,
        )
    if not isinstance(envelope, dict) or "success" not in envelope:
        raise PipedriveEnvelopeError(
            f"Pipedrive {method} {path} returned an unexpected body: {envelope!r}"[:500],
            method=method,
            path=path,
            status_code=response.status_code,
            envelope=envelope,
        )
    if not envelope.get("success"):
        raise PipedriveEnvelopeError(
            f"Pipedrive {method} {path} reported success=false: {envelope}",
            method=method,
            path=path,
            status_code=response.status_code,
            envelope=envelope,
        )
    return envelope.get("data")


def _to_entity(model: Type[E], data: Any, method: str, path: str) -> E:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PipedriveEnvelopeError(
            f"Pipedrive {method} {path} returned data that is not a {model.__name__}: "
            f"{e.errors()[0]['msg']}: {data!r}"[:500],
            method=method,
            path=path,
            envelope=data,
        ) from None


class PipedriveClient:
    def __init__(self, api_token: str, company_domain: str, timeout: int = DEFAULT_TIMEOUT):
        self.api_token = api_token
        self.base_url = f"https://{company_domain}.pipedrive.com/api/v1"
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "PipedriveClient":
        return cls(settings.PIPEDRIVE_API_TOKEN, settings.PIPEDRIVE_COMPANY_DOMAIN)

    def _request(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        params = dict(params or {})
        params["api_token"] = self.api_token
        url = f"{self.base_url}{path}"
        try:
            r = requests.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise PipedriveHTTPError(
                f"Pipedrive {method} {path} failed: {type(e).__name__}: {self._redact(str(e))}",
                category="transport",
                method=method,
                path=path,
            ) from None
        get_logger().debug("pipedrive_request", method=method, path=path, status=r.status_code)
        return _decode_envelope(method, path, r)

    def _redact(self, text: str) -> str:
        # requests puts the full URL (api_token query param included) in its messages
        return text.replace(self.api_token, "***") if self.api_token else text

    # ---------- generic resource helpers ----------

    def _search_by_name(self, resource: str, name: str, model: Type[E]) -> Optional[E]:
        path = f"/{resource}/search"
        data = self._request(path, params={"term": name})
        items = (data.get("items") or []) if isinstance(data, dict) else []
        if not items:
            return None
        first = items[0]
        item = first["item"] if isinstance(first, dict) and "item" in first else first
        return _to_entity(model, item, "GET", path)

    def _create(self, resource: str, payload: Dict[str, Any], model: Type[E]) -> E:
        path = f"/{resource}"
        return _to_entity(model, self._request(path, method="POST", json=payload), "POST", path)

    def _update(self, resource: str, entity_id: int, payload: Dict[str, Any], model: Type[E]) -> E:
        path = f"/{resource}/{entity_id}"
        return _to_entity(model, self._request(path, method="PUT", json=payload), "PUT", path)

    # ---------- persons ----------

    def search_person_by_name(self, name: str) -> Optional[PipedrivePerson]:
        return self._search_by_name("persons", name, PipedrivePerson)

    def create_person(self, payload: Dict[str, Any]) -> PipedrivePerson:
        return self._create("persons", payload, PipedrivePerson)

    def update_person(self, person_id: int, payload: Dict[str, Any]) -> PipedrivePerson:
        return self._update("persons", person_id, payload, PipedrivePerson)

    # ---------- organizations ----------

    def search_organization_by_name(self, name: str) -> Optional[PipedriveOrganization]:
        return self._search_by_name("organizations", name, PipedriveOrganization)

    def create_organization(self, payload: Dict[str, Any]) -> PipedriveOrganization:
        return self._create("organizations", payload, PipedriveOrganization)

    def update_organization(self, org_id: int, payload: Dict[str, Any]) -> PipedriveOrganization:
        return self._update("organizations", org_id, payload, PipedriveOrganization)

    # ---------- users ----------

    def get_current_user(self) -> Dict[str, Any]:
        return self._request("/users/me") or {}
