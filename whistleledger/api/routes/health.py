"""Health check endpoint."""

from fastapi import APIRouter, Depends

from whistleledger.api.dependencies.cases import get_lifecycle_config
from whistleledger.api.models.health import HealthResponse
from whistleledger.config.case_config import LifecycleConfig

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    config: LifecycleConfig = Depends(get_lifecycle_config),
) -> HealthResponse:
    """Return health status with the active lifecycle variant."""
    return HealthResponse(status="healthy", lifecycle=config.variant.value)
