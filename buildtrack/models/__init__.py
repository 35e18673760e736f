from .organization import Organization
from .user import User
from .project import Project
from .task import Task
from .auth import AccessToken
