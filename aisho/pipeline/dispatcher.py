"""后台任务调度。"""

import asyncio
import uuid
from typing import Any, Coroutine

from loguru import logger


class TaskDispatcher:
    """
    以后台任务运行事件管道，不阻塞 webhook 确认。

    任务完成后自动从记录中移除；join() 可以等待所有进行中的任务（测试和优雅关闭）。
    """

    def __init__(self):
        self._running_tasks: dict[str, asyncio.Task[Any]] = {}

    def spawn(self, coro: Coroutine[Any, Any, Any], label: str | None = None) -> str:
        """
        在后台运行协程。

        参数:
            coro: 要运行的协程。
            label: 日志中显示的标签。

        返回:
            任务 id。
        """
        task_id = str(uuid.uuid4())[:8]
        display_label = label or task_id

        bg_task = asyncio.create_task(coro)
        self._running_tasks[task_id] = bg_task

        # 完成时清理
        bg_task.add_done_callback(lambda t: self._on_done(task_id, display_label, t))

        logger.debug(f"启动任务 [{task_id}]：{display_label}")
        return task_id

    def _on_done(self, task_id: str, label: str, task: asyncio.Task[Any]) -> None:
        self._running_tasks.pop(task_id, None)
        if task.cancelled():
            logger.warning(f"任务 [{task_id}] 已取消：{label}")
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"任务 [{task_id}] 异常退出：{label}")

    async def join(self, timeout: float | None = None) -> bool:
        """
        等待进行中的任务完成。

        返回:
            超时前全部完成时为 True。
        """
        # 任务可能在等待期间派生新任务
        while self._running_tasks:
            tasks = list(self._running_tasks.values())
            _, pending = await asyncio.wait(tasks, timeout=timeout)
            if pending:
                logger.warning(f"仍有 {len(pending)} 个任务未完成")
                return False
        return True

    def get_running_count(self) -> int:
        """返回当前运行中的任务数量。"""
        return len(self._running_tasks)
