from contextlib import asynccontextmanager

from fastapi import FastAPI

import smellbot.sentry as sentry
from smellbot.analysis.client import AnalysisClient
from smellbot.comments.corpus import CommentCorpus, corpus_root
from smellbot.common.logging_config import get_logger, setup_logging
from smellbot.config import Settings, settings
from smellbot.jobs.handler import AnalyzerJobHandler
from smellbot.jobs.queue_worker import JobQueueWorker
from smellbot.platform.client import PlatformClient
from smellbot.web.routers.health import router as health_router
from smellbot.web.routers.jobs import router as jobs_router

setup_logging(settings.log_level)

logger = get_logger(__name__)

sentry.init(settings.sentry)


def create_handler(app_settings: Settings) -> AnalyzerJobHandler:
    """Build the corpus and the clients once and wire them into a handler."""
    corpus = CommentCorpus.build(
        corpus_root(app_settings.comments.directory, app_settings.comments.track)
    )
    platform = PlatformClient(
        host=app_settings.platform.host,
        shared_key=app_settings.platform.shared_key,
        timeout=app_settings.platform.timeout,
    )
    return AnalyzerJobHandler(
        fetcher=platform,
        analysis_client=AnalysisClient(
            host=app_settings.analysis.host, timeout=app_settings.analysis.timeout
        ),
        publisher=platform,
        corpus=corpus,
        supported_track=app_settings.comments.track,
    )


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    worker = JobQueueWorker(
        create_handler(settings), concurrency=settings.worker.concurrency
    )
    fastapi_app.state.worker = worker
    worker.start()
    try:
        yield
    finally:
        await worker.stop()


app = FastAPI(title="Smellbot", lifespan=lifespan)

app.include_router(health_router)
app.include_router(jobs_router)
