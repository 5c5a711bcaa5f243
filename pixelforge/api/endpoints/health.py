from fastapi import APIRouter

from pixelforge.schemas.conversion import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe; checks nothing beyond the process answering."""
    return HealthResponse()
