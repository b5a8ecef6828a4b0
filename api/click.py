from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import logging

from db.session import get_db
from core.click import ClickService
from core.click_sign import SignatureVerifier, get_signature_verifier
from crud.store import SQLAlchemyRecordStore
from schemas.click import (
    ClickCompleteRequest,
    ClickCompleteResponse,
    ClickPrepareRequest,
    ClickPrepareResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/click", tags=["click"])

def get_click_service(
    db: Session = Depends(get_db),
    verifier: SignatureVerifier = Depends(get_signature_verifier),
) -> ClickService:
    """Dependency wiring the webhook processor to the request session"""
    return ClickService(SQLAlchemyRecordStore(db), verifier)

@router.post(
    "/prepare",
    response_model=ClickPrepareResponse,
    response_model_exclude_none=True,
    summary="Click prepare webhook",
)
async def click_prepare(request: Request, service: ClickService = Depends(get_click_service)):
    """First phase: validate the order and register a pending transaction"""
    form = await request.form()
    data = ClickPrepareRequest.model_validate(dict(form))
    logger.info(f"Click prepare: click_trans_id={data.click_trans_id} merchant_trans_id={data.merchant_trans_id}")
    return service.prepare(data)

@router.post(
    "/complete",
    response_model=ClickCompleteResponse,
    response_model_exclude_none=True,
    summary="Click complete webhook",
)
async def click_complete(request: Request, service: ClickService = Depends(get_click_service)):
    """Second phase: mark the prepared transaction paid or canceled"""
    form = await request.form()
    data = ClickCompleteRequest.model_validate(dict(form))
    logger.info(
        f"Click complete: click_trans_id={data.click_trans_id} "
        f"merchant_prepare_id={data.merchant_prepare_id} error={data.error}"
    )
    return service.complete(data)
