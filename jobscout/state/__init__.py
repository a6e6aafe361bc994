from .actions import Action, Fulfilled, Rejected, Result
from .auth import AuthState
from .jobs import JobsState
from .store import RootState, Store
from .ui import UIState

__all__ = [
    "Action", "Fulfilled", "Rejected", "Result",
    "AuthState", "JobsState", "UIState",
    "RootState", "Store",
]
