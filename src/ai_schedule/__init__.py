"""AI Schedule.

In-memory domain state for the AI schedule dashboard:
- tasks, agents, workflows and execution logs held by a single store
- derived views (filtered lists and statistics)
- workflow step graph validation
"""

__version__ = "0.1.0"

from ai_schedule.config import AppSettings, StoreConfig

__all__ = ["__version__", "AppSettings", "StoreConfig"]
