from .user import User, UserRead, ProfileUpdate
from .client import Client, ClientCreate, ClientRead, ClientSnapshot, ClientStatus, ClientUpdate
from .project import Project, ProjectCreate, ProjectRead, ProjectStatus, ProjectUpdate

__all__ = [
    "User", "UserRead", "ProfileUpdate",
    "Client", "ClientCreate", "ClientRead", "ClientSnapshot", "ClientStatus", "ClientUpdate",
    "Project", "ProjectCreate", "ProjectRead", "ProjectStatus", "ProjectUpdate",
]
