"""Review Proctor: decide when to ask users to review an app."""

from .cli import main as cli_main
from .config import ProctorConfig
from .config_loader import load_config
from .presentation import HeadlessDispatcher, PresentationDispatcher, UserResponse
from .rules import CheckName, Decision
from .services import ReviewProctor
from .state import InMemoryStateStore, JsonFileStateStore
from .thresholds import Threshold

__all__ = [
    "CheckName",
    "Decision",
    "HeadlessDispatcher",
    "InMemoryStateStore",
    "JsonFileStateStore",
    "PresentationDispatcher",
    "ProctorConfig",
    "ReviewProctor",
    "Threshold",
    "UserResponse",
    "cli_main",
    "load_config",
    "config",
    "presentation",
    "rules",
    "services",
    "state",
]
