import asyncio
from typing import Any, List, Optional

from sentry_sdk import capture_exception

from smellbot.common.logging_config import get_logger
from smellbot.jobs.handler import AnalyzerJobHandler

logger = get_logger(__name__)


class JobQueueWorker:
    """
    In-process job queue feeding an AnalyzerJobHandler.

    ``concurrency`` worker tasks consume the queue; each job runs in a thread
    so the blocking network calls of one job do not hold up the others.
    Jobs are never retried or requeued.
    """

    def __init__(self, handler: AnalyzerJobHandler, concurrency: int = 4):
        self.handler = handler
        self.concurrency = concurrency
        self._queue: Optional["asyncio.Queue[List[Any]]"] = None
        self._tasks: List[asyncio.Task] = []

    @property
    def queue(self) -> "asyncio.Queue[List[Any]]":
        # Created lazily so the queue binds to the running event loop
        if self._queue is None:
            self._queue = asyncio.Queue()
        return self._queue

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def enqueue(self, args: List[Any]) -> None:
        await self.queue.put(args)
        logger.debug("Enqueued job with args %r (%d waiting)", args, self.queue.qsize())

    async def join(self) -> None:
        """Wait until every enqueued job has been processed."""
        await self.queue.join()

    async def _run_job(self, args: List[Any]) -> None:
        try:
            outcome = await asyncio.to_thread(self.handler.process, args)
            logger.debug("Job with args %r finished: %s", args, outcome.value)
        except Exception as e:
            logger.error("Job with args %r crashed: %s", args, e, exc_info=True)
            capture_exception(e)

    async def _worker_loop(self) -> None:
        while True:
            args = await self.queue.get()
            try:
                await self._run_job(args)
            finally:
                self.queue.task_done()

    def start(self) -> None:
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._worker_loop())
            for _ in range(self.concurrency)
        ]
        logger.info("Started %d job workers", self.concurrency)

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks = []
        logger.info("Job workers stopped")
