"""Quote router - live preview and quote emails for the intake form"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthSession, get_current_session
from ...database import get_db
from .schemas import QuoteEmailRequest, QuoteEmailResponse, QuotePreviewRequest, QuotePreviewResponse
from .service import QuoteService

router = APIRouter(prefix="/quotes", tags=["Quotes"])


def get_quote_service(db: Session = Depends(get_db)) -> QuoteService:
    """Dependency injection for QuoteService"""
    return QuoteService(db)


@router.post("/preview", response_model=QuotePreviewResponse)
async def preview_quote(
    data: QuotePreviewRequest,
    session: AuthSession = Depends(get_current_session),
    service: QuoteService = Depends(get_quote_service),
):
    """Recompute the preliminary quote for the current answers"""
    _, breakdown = service.quote(data.vehicle_type, data.responses)
    return QuotePreviewResponse.from_breakdown(breakdown)


@router.post("/email", response_model=QuoteEmailResponse)
async def email_quote(
    data: QuoteEmailRequest,
    session: AuthSession = Depends(get_current_session),
    service: QuoteService = Depends(get_quote_service),
):
    """Send the preliminary quote to the client"""
    breakdown = await service.email_quote(session, data)
    return QuoteEmailResponse(sent=True, quote=QuotePreviewResponse.from_breakdown(breakdown))
