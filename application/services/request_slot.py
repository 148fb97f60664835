import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


def _log_failure(task: asyncio.Task) -> None:
	if task.cancelled():
		return
	exc = task.exception()
	if exc is not None:
		logger.error(f'Request task {task.get_name()} failed: {exc}', exc_info=exc)


class LatestRequestSlot:
	"""Holds at most one running task; submitting a new one cancels the previous."""

	def __init__(self):
		self._task: asyncio.Task | None = None

	@property
	def current(self) -> asyncio.Task | None:
		return self._task

	def submit(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
		self.cancel()
		self._task = asyncio.create_task(coro)
		self._task.add_done_callback(_log_failure)
		return self._task

	def cancel(self) -> None:
		if self._task is not None and not self._task.done():
			self._task.cancel()
