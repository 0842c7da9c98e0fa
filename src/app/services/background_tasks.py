"""Registro de tasks em background (efeitos colaterais não aguardados).

Notificações e envios ao CRM disparados pela finalização rodam aqui,
cada um com sua própria fronteira de erro. No shutdown o app aguarda
as pendentes por um tempo limitado.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Coroutine

logger = logging.getLogger(__name__)

_TASK_SEMAPHORE = asyncio.Semaphore(20)
_active_tasks: set[asyncio.Task[Any]] = set()


def schedule_background_task(name: str, coroutine: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
    """Agenda task sem aguardar; falhas são registradas em log."""
    task = asyncio.create_task(_run_with_limit(coroutine), name=name)
    _active_tasks.add(task)
    task.add_done_callback(_on_task_done)
    logger.debug(
        "background_task_scheduled",
        extra={"task_name": name, "active_tasks": len(_active_tasks)},
    )
    return task


async def _run_with_limit(coroutine: Coroutine[Any, Any, Any]) -> Any:
    async with _TASK_SEMAPHORE:
        return await coroutine


def _on_task_done(task: asyncio.Task[Any]) -> None:
    _active_tasks.discard(task)
    with contextlib.suppress(asyncio.CancelledError):
        exc = task.exception()
        if exc is not None:
            logger.error(
                "background_task_failed",
                extra={
                    "task_name": task.get_name(),
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )


def active_task_count() -> int:
    return len(_active_tasks)


async def drain_background_tasks(timeout_seconds: float = 30.0) -> None:
    """Aguarda tasks pendentes durante shutdown do processo."""
    if not _active_tasks:
        return

    pending_now = list(_active_tasks)
    logger.info(
        "background_tasks_shutdown_wait",
        extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
    )
    _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
    if not pending:
        return

    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    logger.warning("background_tasks_shutdown_cancelled", extra={"cancelled_tasks": len(pending)})
