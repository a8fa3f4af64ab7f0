from typing import Optional

from fastapi import APIRouter, Depends

from app.dependencies.security import optional_user_id
from app.dependencies.services import get_advisor_service
from app.schemas.ai_schemas import AdviceRequest, AdviceResponse
from app.services.advisor_service import AdvisorService

router = APIRouter(
    prefix="/api/v1/explore",
    tags=["advisor"]
)


@router.post("/advice", response_model=AdviceResponse)
def get_advice(
    payload: AdviceRequest,
    user_id: Optional[str] = Depends(optional_user_id),
    service: AdvisorService = Depends(get_advisor_service),
) -> AdviceResponse:
    """
    Redemption advice for a balance snapshot.

    Always answers 200: when the LLM is unavailable the response carries
    template text with is_fallback=true.
    """
    return service.generate_advice(payload, user_id=user_id)
