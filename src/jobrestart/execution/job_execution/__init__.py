from .logs import LogRotation, rotate_logs
from .restart import JobRestarter, RestartReport, StepResult
from .scheduler_setup import get_scheduler, load_scheduler_plugins
from .script import render_restart_script, write_restart_script

__all__ = [
    'JobRestarter',
    'RestartReport',
    'StepResult',
    'LogRotation',
    'rotate_logs',
    'get_scheduler',
    'load_scheduler_plugins',
    'render_restart_script',
    'write_restart_script',
]
