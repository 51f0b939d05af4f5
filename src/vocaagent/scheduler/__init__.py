"""定时任务与任务入口."""

from vocaagent.scheduler.tasks import (
    collect_task,
    create_scheduler,
    export_task,
    notify_task,
    shutdown_scheduler,
)

__all__ = [
    "collect_task",
    "create_scheduler",
    "export_task",
    "notify_task",
    "shutdown_scheduler",
]
