from fastapi import APIRouter, Depends, Request, status

from smellbot.common.logging_config import get_logger
from smellbot.dependencies import TokenValidator
from smellbot.domain.job_dto import AnalyzeJobRequestDTO

router = APIRouter(prefix="/api/v1/jobs", tags=["jobs"])
logger = get_logger(__name__)


@router.post(
    "/analyze",
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(TokenValidator())],
)
async def enqueue_analyze_job(dto: AnalyzeJobRequestDTO, request: Request):
    # The handler validates the arguments, a bad id simply ends that job
    await request.app.state.worker.enqueue(dto.args)
    logger.info("Accepted analyze job with args %r", dto.args)
    return {"status": "queued"}
