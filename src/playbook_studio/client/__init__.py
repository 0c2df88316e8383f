"""Client side of Playbook Studio: HTTP client, view state and terminal front-end"""

from .api_client import StudioClient
from .controllers import DashboardController, EditorController, LoginGate
from .result import Result
from .view_config import ViewConfig

__all__ = [
    "StudioClient",
    "DashboardController",
    "EditorController",
    "LoginGate",
    "Result",
    "ViewConfig",
]
