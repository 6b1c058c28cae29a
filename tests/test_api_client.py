# tests/test_api_client.py
"""
The request adapter and the typed client, against a recorded fake session.
"""
import json

import pytest
import requests

from core.api_client import IncentiveApi
from core.ui_helpers import ApiError, api_request


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        if payload is None:
            self.text = ""
        elif isinstance(payload, str):
            self.text = payload
        else:
            self.text = json.dumps(payload)
        self.content = self.text.encode()

    def json(self):
        return json.loads(self.text)


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def test_api_request_decodes_json():
    session = FakeSession(FakeResponse(payload={"ok": True}))

    assert api_request("http://x/api/roles", session=session) == {"ok": True}
    method, _, kwargs = session.calls[0]
    assert method == "GET"
    assert "json" not in kwargs
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_api_request_sends_body_for_writes():
    session = FakeSession(FakeResponse(status_code=204))

    assert api_request("http://x/api/roles/1", "put", {"a": 1}, session=session) is None
    method, _, kwargs = session.calls[0]
    assert method == "PUT"
    assert kwargs["json"] == {"a": 1}


def test_non_2xx_raises_api_error_with_body():
    session = FakeSession(FakeResponse(status_code=409, payload={"detail": "last role"}))

    with pytest.raises(ApiError) as info:
        api_request("http://x/api/roles/1", "DELETE", session=session)

    assert info.value.status == 409
    assert "last role" in info.value.body
    assert str(info.value).startswith("409: ")


def test_empty_error_body_uses_status_text():
    session = FakeSession(FakeResponse(status_code=502, reason="Bad Gateway"))

    with pytest.raises(ApiError) as info:
        api_request("http://x/api/roles", session=session)

    assert info.value.body == "Bad Gateway"


def test_client_builds_urls_and_parses_roles():
    session = FakeSession(
        FakeResponse(payload=[{"id": 1, "title": "Closer", "description": "d", "permissions": ["view"], "isDefault": True}])
    )
    api = IncentiveApi("http://backend:8000/", session=session)

    roles = api.list_roles()

    assert session.calls[0][1] == "http://backend:8000/api/roles"
    assert roles[0].is_default is True
    assert roles[0].permissions == ["view"]


def test_update_role_products_sends_sorted_ids():
    session = FakeSession(FakeResponse(payload=[{"id": "a", "name": "A", "commission": "1%", "bonus": "1€"}]))
    api = IncentiveApi("http://backend", session=session)

    products = api.update_role_products(3, {"b", "a"})

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("PUT", "http://backend/api/roles/3/products")
    assert kwargs["json"] == {"productIds": ["a", "b"]}
    assert [p.id for p in products] == ["a"]


def test_role_errors_propagate():
    api = IncentiveApi("http://backend", session=FakeSession(FakeResponse(status_code=400, payload={"message": "x"})))
    with pytest.raises(ApiError):
        api.create_role("Ab", "short", [])


def test_ai_calls_fall_back_on_failure():
    session = FakeSession(
        FakeResponse(status_code=500, payload={"detail": "boom"}),
        requests.ConnectionError("down"),
        FakeResponse(payload={"permissions": ["fly", "teleport"]}),
    )
    api = IncentiveApi("http://backend", session=session)

    assert api.generate_role_description("Setter") == (
        "Responsible for setter activities within the sales organization."
    )
    recs = api.recommend_roles("Coaching")
    assert [r.title for r in recs] == ["Sales Representative"]
    assert api.generate_role_permissions("Setter", "Books calls") == ["view"]


def test_ai_calls_return_server_values():
    session = FakeSession(
        FakeResponse(payload={"description": "  Books qualified calls.  "}),
        FakeResponse(payload={"recommendations": [{"title": "SDR", "relevanceScore": 140}]}),
        FakeResponse(payload={"permissions": ["Edit", "view", "edit"]}),
    )
    api = IncentiveApi("http://backend", session=session)

    assert api.generate_role_description("Setter") == "Books qualified calls."
    assert api.recommend_roles("Coaching")[0].relevance_score == 100
    assert api.generate_role_permissions("Setter", "Books calls") == ["edit", "view"]


@pytest.mark.parametrize(
    "description_body, recommendations_body, permissions_body",
    [
        (["not", "an", "object"], {"recommendations": ["SDR"]}, ["view"]),
        ('"just text"', '"just text"', {"permissions": "view"}),
        ({"description": 42}, {"recommendations": {"title": "SDR"}}, {"permissions": None}),
    ],
)
def test_ai_calls_fall_back_on_non_object_payloads(description_body, recommendations_body, permissions_body):
    session = FakeSession(
        FakeResponse(payload=description_body),
        FakeResponse(payload=recommendations_body),
        FakeResponse(payload=permissions_body),
    )
    api = IncentiveApi("http://backend", session=session)

    assert api.generate_role_description("Setter") == (
        "Responsible for setter activities within the sales organization."
    )
    assert [r.title for r in api.recommend_roles("Coaching")] == ["Sales Representative"]
    assert api.generate_role_permissions("Setter", "Books calls") == ["view"]


def test_recommendations_skip_non_object_items():
    session = FakeSession(FakeResponse(payload={"recommendations": ["SDR", {"title": "AE", "relevanceScore": 80}]}))
    api = IncentiveApi("http://backend", session=session)

    assert [r.title for r in api.recommend_roles("Coaching")] == ["AE"]
