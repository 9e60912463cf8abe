from .base_config import BaseScheduler
from .toolforge import ToolforgeScheduler

__all__ = [
    'BaseScheduler',
    'ToolforgeScheduler',
]
