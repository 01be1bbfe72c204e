from fastapi import APIRouter

from reputation_monitor.dependencies import SettingsDep
from reputation_monitor.schemas.channels import CHANNELS
from reputation_monitor.schemas.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: SettingsDep) -> HealthResponse:
    capabilities = settings.capabilities()
    return HealthResponse(
        configured=capabilities.any_available,
        keys=settings.key_status(),
        channels={str(c): capabilities.is_available(c) for c in CHANNELS},
        missing_keys=sorted(k for k, ok in settings.key_status().items() if not ok),
    )
