# mindbalance/routes/ops.py
from fastapi import APIRouter, Depends, HTTPException, Header

from ..config import ConfigProvider, get_config_provider
from ..logging_config import log_event
from ..server import ToolServer, get_tool_server
from ..settings import get_settings

router = APIRouter(prefix="/ops", tags=["operations"])
settings = get_settings()


@router.get("/health")
def health_check(
    provider: ConfigProvider = Depends(get_config_provider),
    server: ToolServer = Depends(get_tool_server),
):
    """Liveness plus which config file (if any) is in effect."""
    return {
        "api": "online",
        "version": settings.APP_VERSION,
        "environment": provider.environment,
        "checks": {
            "config_source": str(provider.source) if provider.source else "defaults",
            "tools": server.registry.names(),
        },
    }


@router.get("/config")
def effective_config(provider: ConfigProvider = Depends(get_config_provider)):
    """Effective mind-balance defaults as the scorer will see them."""
    d = provider.scorer_defaults()
    return {
        "abstainThreshold": d.abstain_threshold,
        "tanClamp": d.tan_clamp,
        "normalize": d.normalize,
        "scoringRules": list(d.scoring_rules),
        "abstentionScore": d.abstention_score,
    }


@router.post("/config/reload")
def reload_config(
    x_admin_key: str = Header(None),
    provider: ConfigProvider = Depends(get_config_provider),
):
    if x_admin_key != settings.ADMIN_KEY:
        raise HTTPException(403, "Unauthorized")

    # ConfigError propagates to the CONFIG_INVALID handler; the old snapshot stays live
    provider.reload()

    log_event("CONFIG_RELOAD", "configuration reloaded via ops endpoint")
    return {"status": "reloaded", "source": str(provider.source) if provider.source else "defaults"}
