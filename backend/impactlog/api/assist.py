from fastapi import APIRouter, Depends, HTTPException

from impactlog.api.deps import require_principal
from impactlog.core.config import settings
from impactlog.core.identity import AccessPolicy, Principal, get_access_policy
from impactlog.schemas.assist import CarDraft, CarRequest
from impactlog.services.car_assist import (
    AssistDenied,
    AssistNotConfigured,
    AssistUpstreamError,
    CarAssistant,
)

router = APIRouter(prefix="/assist", tags=["assist"])


def get_car_assistant(policy: AccessPolicy = Depends(get_access_policy)) -> CarAssistant:
    return CarAssistant(settings, policy)


@router.post("/car", response_model=CarDraft)
async def rewrite_as_car(
    payload: CarRequest,
    principal: Principal = Depends(require_principal),
    assistant: CarAssistant = Depends(get_car_assistant),
):
    try:
        return await assistant.rewrite(principal, payload.text)
    except AssistDenied as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AssistNotConfigured as e:
        raise HTTPException(status_code=503, detail=str(e))
    except AssistUpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))
