from fastapi import APIRouter
from datetime import datetime

from ..engines.closing import TriggerKind

router = APIRouter()

APP_VERSION = "0.1.0"


@router.get("/health")
def health_check():
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}


@router.get("/ready")
def readiness_check():
    return {
        "ready": True,
        "version": APP_VERSION,
        "handlers": [kind.value for kind in TriggerKind],
    }
