from typing import Any, Dict

from fastapi import APIRouter

from ...core.settings import ProxySettings
from ...utils.service_health import get_health_checker
from ..dependencies import SettingsDep

router = APIRouter()


@router.get("/health")
async def health_check(settings: ProxySettings = SettingsDep) -> Dict[str, Any]:
    """Health check endpoint for the product proxy."""
    return get_health_checker(settings).run_checks()
