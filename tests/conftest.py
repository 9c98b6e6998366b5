"""
Shared pytest fixtures: fake `requests` responses and a ready client.
"""
import json
from unittest.mock import Mock

import pytest

from pdsync.integrations.pipedrive import PipedriveClient


def make_response(status_code=200, body=None, text=None):
    resp = Mock()
    resp.status_code = status_code
    if body is not None:
        resp.json = Mock(return_value=body)
        resp.text = json.dumps(body)
    else:
        resp.json = Mock(side_effect=ValueError("no json"))
        resp.text = text or ""
    return resp


@pytest.fixture
def client():
    return PipedriveClient(api_token="tok123", company_domain="acme")


@pytest.fixture
def document():
    return {
        "contact": {
            "fullName": "Jane Doe",
            "emails": [{"value": "jane@example.com", "primary": True}],
            "nickname": None,
        },
        "company": {"name": "Example Corp"},
    }
