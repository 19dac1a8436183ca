"""Tests for task breakdown suggestions."""

import pytest
from pydantic import ValidationError

from freelancehub.services.task_suggestions import (
    DEFAULT_TASKS,
    TaskSuggestionRequest,
    categorize,
    estimated_duration,
    suggest_tasks,
)


def request(**fields):
    data = {
        "project_description": "An online store for handmade goods",
        "project_type": "web-development",
        "complexity": "simple",
        "timeline": "short",
    }
    data.update(fields)
    return TaskSuggestionRequest(**data)


class TestSuggestTasks:
    def test_hours_scaled_by_timeline(self):
        result = suggest_tasks(request())
        assert [t.estimated_hours for t in result.tasks] == [1, 3, 6, 4, 3]

    def test_long_timeline(self):
        result = suggest_tasks(request(timeline="long"))
        assert [t.estimated_hours for t in result.tasks] == [3, 6, 12, 9, 6]

    def test_categories_and_dependencies(self):
        tasks = {t.title: t for t in suggest_tasks(request()).tasks}
        assert tasks["Setup project repository"].category == "Setup"
        assert tasks["Implement responsive CSS"].category == "Development"
        assert tasks["Implement responsive CSS"].dependencies == ["Setup project repository"]
        assert tasks["Testing and bug fixes"].category == "Testing"
        assert tasks["Testing and bug fixes"].dependencies == ["Implement responsive CSS"]

    def test_other_type_uses_defaults(self):
        result = suggest_tasks(request(project_type="other", complexity="complex"))
        assert [t.title for t in result.tasks] == [title for title, _, _ in DEFAULT_TASKS]

    def test_duration(self):
        assert suggest_tasks(request(complexity="complex", timeline="long")).estimated_duration == "12-20 weeks"
        assert estimated_duration("unknown", "short") == "4-8 weeks"

    def test_guest_message(self):
        assert suggest_tasks(request(), is_guest=True).message == "Sign in to save these tasks to your projects"
        assert suggest_tasks(request()).message is None


class TestRequestValidation:
    def test_short_description_rejected(self):
        with pytest.raises(ValidationError):
            request(project_description="too short")

    def test_unknown_project_type_rejected(self):
        with pytest.raises(ValidationError):
            request(project_type="gardening")


@pytest.mark.parametrize("title,category", [
    ("Setup development environment", "Setup"),
    ("Design UI/UX mockups", "Design"),
    ("Implement authentication", "Development"),
    ("Testing and debugging", "Testing"),
    ("Multi-platform deployment", "Deployment"),
    ("Stakeholder interviews", "General"),
])
def test_categorize(title, category):
    assert categorize(title) == category
