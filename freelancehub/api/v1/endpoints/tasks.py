"""
Task Suggestion Endpoints Module

Generates a task breakdown for a project description. Suggestions are not
saved, so anonymous callers may use this endpoint too.
"""
from typing import Optional
from fastapi import APIRouter, Depends

from freelancehub.services.storage import Identity
from freelancehub.services.task_suggestions import TaskSuggestionRequest, TaskSuggestions, suggest_tasks
from freelancehub.api import deps

router = APIRouter()


@router.post("/generate", response_model=TaskSuggestions)
def generate_tasks(
    request_in: TaskSuggestionRequest,
    identity: Optional[Identity] = Depends(deps.get_current_identity),
):
    """
    Suggest tasks for a project.

    Args:
        request_in: Description (at least 10 characters), project type,
            complexity and timeline
        identity: The caller, if any; guests and anonymous callers get a
            prompt to sign in

    Returns:
        TaskSuggestions: Tasks with hours, priority, category and dependencies
    """
    is_guest = identity is None or identity.is_guest
    return suggest_tasks(request_in, is_guest=is_guest)
