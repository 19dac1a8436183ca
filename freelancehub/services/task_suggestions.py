"""
Task breakdown suggestions for a new project.

Suggestions come from a fixed template per project type and complexity,
scaled to the requested timeline.  Nothing is persisted, so guests can use
this too.
"""
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from freelancehub.utils import round_half_up

ProjectType = Literal["web-development", "mobile-app", "consulting", "design", "other"]
Complexity = Literal["simple", "medium", "complex"]
Timeline = Literal["short", "medium", "long"]

# (title, estimated hours, priority)
TaskTemplate = Tuple[str, int, str]

TASK_TEMPLATES: Dict[str, Dict[str, List[TaskTemplate]]] = {
    "web-development": {
        "simple": [
            ("Setup project repository", 2, "high"),
            ("Create basic HTML structure", 4, "high"),
            ("Implement responsive CSS", 8, "medium"),
            ("Add basic JavaScript functionality", 6, "medium"),
            ("Testing and bug fixes", 4, "low"),
        ],
        "medium": [
            ("Setup development environment", 4, "high"),
            ("Design database schema", 6, "high"),
            ("Implement backend API", 16, "high"),
            ("Build frontend components", 20, "medium"),
            ("Integrate frontend with backend", 8, "medium"),
            ("Implement authentication", 6, "medium"),
            ("Add payment processing", 10, "low"),
            ("Testing and deployment", 8, "low"),
        ],
        "complex": [
            ("Architecture planning", 8, "high"),
            ("Setup microservices infrastructure", 20, "high"),
            ("Implement core business logic", 40, "high"),
            ("Build admin dashboard", 24, "medium"),
            ("Implement real-time features", 16, "medium"),
            ("Add analytics and reporting", 12, "medium"),
            ("Implement caching strategy", 8, "low"),
            ("Security audit and hardening", 16, "low"),
            ("Performance optimization", 12, "low"),
            ("Documentation and deployment", 16, "low"),
        ],
    },
    "mobile-app": {
        "simple": [
            ("Setup development environment", 4, "high"),
            ("Design app wireframes", 6, "high"),
            ("Implement core screens", 12, "medium"),
            ("Add navigation", 4, "medium"),
            ("Testing and debugging", 6, "low"),
        ],
        "medium": [
            ("Setup React Native/Flutter project", 6, "high"),
            ("Design UI/UX mockups", 12, "high"),
            ("Implement authentication", 8, "high"),
            ("Build core features", 24, "medium"),
            ("Integrate with backend API", 12, "medium"),
            ("Add push notifications", 6, "medium"),
            ("Offline functionality", 8, "low"),
            ("App store submission", 4, "low"),
        ],
        "complex": [
            ("Technical architecture design", 12, "high"),
            ("Setup CI/CD pipeline", 16, "high"),
            ("Implement advanced features", 40, "high"),
            ("Real-time synchronization", 20, "medium"),
            ("Advanced animations", 16, "medium"),
            ("Background processing", 12, "medium"),
            ("Security implementation", 16, "low"),
            ("Performance optimization", 12, "low"),
            ("Multi-platform deployment", 8, "low"),
        ],
    },
    "consulting": {
        "simple": [
            ("Initial client consultation", 2, "high"),
            ("Requirements gathering", 4, "high"),
            ("Analysis and recommendations", 6, "medium"),
            ("Report preparation", 4, "medium"),
            ("Follow-up meeting", 2, "low"),
        ],
        "medium": [
            ("Discovery phase", 8, "high"),
            ("Stakeholder interviews", 12, "high"),
            ("Process analysis", 16, "medium"),
            ("Solution design", 12, "medium"),
            ("Implementation planning", 8, "medium"),
            ("Training sessions", 6, "low"),
            ("Documentation", 4, "low"),
        ],
        "complex": [
            ("Comprehensive audit", 20, "high"),
            ("Market research", 16, "high"),
            ("Strategic planning", 24, "high"),
            ("Change management", 16, "medium"),
            ("Team training", 12, "medium"),
            ("Performance metrics setup", 8, "medium"),
            ("Long-term roadmap", 12, "low"),
            ("Success measurement", 4, "low"),
        ],
    },
    "design": {
        "simple": [
            ("Design brief analysis", 2, "high"),
            ("Mood board creation", 4, "high"),
            ("Initial sketches", 6, "medium"),
            ("Digital mockups", 8, "medium"),
            ("Final revisions", 4, "low"),
        ],
        "medium": [
            ("Research and discovery", 6, "high"),
            ("User persona creation", 8, "high"),
            ("Wireframing", 12, "medium"),
            ("High-fidelity designs", 20, "medium"),
            ("Prototyping", 8, "medium"),
            ("Design system creation", 12, "low"),
            ("Asset preparation", 4, "low"),
        ],
        "complex": [
            ("Comprehensive research", 12, "high"),
            ("User journey mapping", 16, "high"),
            ("Information architecture", 12, "high"),
            ("Interaction design", 20, "medium"),
            ("Visual design system", 24, "medium"),
            ("Animation design", 12, "medium"),
            ("Accessibility compliance", 8, "low"),
            ("Cross-platform adaptation", 8, "low"),
        ],
    },
}

DEFAULT_TASKS: List[TaskTemplate] = [
    ("Project kickoff meeting", 2, "high"),
    ("Requirements documentation", 4, "high"),
    ("Project planning", 6, "medium"),
    ("Regular progress updates", 8, "medium"),
    ("Final delivery", 4, "low"),
]

TIMELINE_MULTIPLIERS = {"short": 0.7, "medium": 1.0, "long": 1.5}

DURATIONS = {
    "simple": {"short": "1-2 weeks", "medium": "2-4 weeks", "long": "4-6 weeks"},
    "medium": {"short": "2-4 weeks", "medium": "4-8 weeks", "long": "8-12 weeks"},
    "complex": {"short": "4-6 weeks", "medium": "8-12 weeks", "long": "12-20 weeks"},
}

# Checked in order; the first keyword match wins
CATEGORY_KEYWORDS = [
    ("Setup", ("setup", "environment")),
    ("Design", ("design", "ui")),
    ("Development", ("develop", "implement")),
    ("Testing", ("test", "debug")),
    ("Deployment", ("deploy", "release")),
]


class TaskSuggestionRequest(BaseModel):
    project_description: str = Field(min_length=10)
    project_type: ProjectType
    complexity: Complexity
    timeline: Timeline


class SuggestedTask(BaseModel):
    title: str
    estimated_hours: int
    priority: str
    category: str
    dependencies: List[str]


class TaskSuggestions(BaseModel):
    tasks: List[SuggestedTask]
    project_type: str
    complexity: str
    estimated_duration: str
    is_guest: bool = False
    message: Optional[str] = None


def categorize(title: str) -> str:
    lowered = title.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "General"


def _is_build(title: str) -> bool:
    lowered = title.lower()
    return "implement" in lowered or "build" in lowered


def dependencies(title: str, templates: List[TaskTemplate]) -> List[str]:
    lowered = title.lower()
    found: List[str] = []
    if _is_build(title):
        setup = next(
            (t for t, _, _ in templates if "setup" in t.lower() or "environment" in t.lower()),
            None,
        )
        if setup:
            found.append(setup)
    if "test" in lowered or "deploy" in lowered:
        found.extend(t for t, _, _ in templates if _is_build(t))
    return found


def estimated_duration(complexity: str, timeline: str) -> str:
    return DURATIONS.get(complexity, {}).get(timeline, "4-8 weeks")


def suggest_tasks(request: TaskSuggestionRequest, is_guest: bool = False) -> TaskSuggestions:
    if request.project_type == "other":
        templates = DEFAULT_TASKS
    else:
        templates = TASK_TEMPLATES.get(request.project_type, {}).get(request.complexity, DEFAULT_TASKS)
    multiplier = TIMELINE_MULTIPLIERS.get(request.timeline, 1.0)

    tasks = [
        SuggestedTask(
            title=title,
            estimated_hours=round_half_up(hours * multiplier),
            priority=priority,
            category=categorize(title),
            dependencies=dependencies(title, templates),
        )
        for title, hours, priority in templates
    ]
    return TaskSuggestions(
        tasks=tasks,
        project_type=request.project_type,
        complexity=request.complexity,
        estimated_duration=estimated_duration(request.complexity, request.timeline),
        is_guest=is_guest,
        message="Sign in to save these tasks to your projects" if is_guest else None,
    )
