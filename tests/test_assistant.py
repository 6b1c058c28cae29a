# tests/test_assistant.py
"""
OpenAIRoleAssistant against a fake chat-completions client.
"""
import json
from types import SimpleNamespace

import pytest

from core.assistant import OpenAIRoleAssistant, filter_permissions


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_assistant(content):
    completions = FakeCompletions(content)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIRoleAssistant(model="test-model", client=client), completions


def test_description_is_stripped():
    assistant, completions = make_assistant("  Closes qualified deals.  ")

    assert assistant.generate_role_description("Closer") == "Closes qualified deals."
    assert completions.kwargs["model"] == "test-model"
    assert "response_format" not in completions.kwargs


def test_empty_content_raises():
    assistant, _ = make_assistant("   ")
    with pytest.raises(ValueError):
        assistant.generate_role_description("Closer")


def test_recommendations_sorted_by_score():
    payload = {
        "recommendations": [
            {"title": "SDR", "description": "Prospects", "relevanceScore": 60},
            {"title": "AE", "description": "Closes", "relevanceScore": 95, "requiredSkills": ["Negotiation"]},
        ]
    }
    assistant, completions = make_assistant(json.dumps(payload))

    recs = assistant.recommend_roles("B2B SaaS", ["Closer"])

    assert [r.title for r in recs] == ["AE", "SDR"]
    assert recs[0].required_skills == ("Negotiation",)
    assert completions.kwargs["response_format"] == {"type": "json_object"}


def test_recommendations_with_bad_shape_raise():
    assistant, _ = make_assistant(json.dumps({"roles": []}))
    with pytest.raises(ValueError):
        assistant.recommend_roles("B2B SaaS")


def test_permissions_filtered_to_vocabulary():
    assistant, _ = make_assistant(json.dumps({"permissions": ["view", "fly", "export"]}))
    assert assistant.generate_role_permissions("Closer", "Closes deals") == ["view", "export"]


def test_permissions_fall_back_to_view():
    assistant, _ = make_assistant(json.dumps({"permissions": ["fly"]}))
    assert assistant.generate_role_permissions("Closer", "Closes deals") == ["view"]


def test_filter_permissions():
    assert filter_permissions([" ADMIN", "admin", "x", "delete"]) == ["admin", "delete"]
