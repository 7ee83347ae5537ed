# debian2pve/core/__init__.py
from .exceptions import Debian2PveError, Fatal
from .logger import Log
from .steps import StepResult, StepStatus
from .utils import U

__all__ = ["Debian2PveError", "Fatal", "Log", "StepResult", "StepStatus", "U"]
