from fastapi import APIRouter, Depends

from careerpilot.ai.factory import ProviderRegistry
from careerpilot.api.deps import get_registry

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy"}


@router.get("/providers", summary="Configured AI providers")
async def providers(registry: ProviderRegistry = Depends(get_registry)):
    return {"providers": registry.describe()}
