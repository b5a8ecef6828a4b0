from pydantic import BaseModel
from typing import Optional

# Signed fields stay strings: the signature is computed over the raw form values

class ClickPrepareRequest(BaseModel):
    click_trans_id: str
    service_id: str
    click_paydoc_id: Optional[str] = None
    merchant_trans_id: str
    amount: str
    action: str
    error: int = 0
    error_note: Optional[str] = None
    sign_time: str
    sign_string: str

class ClickCompleteRequest(ClickPrepareRequest):
    merchant_prepare_id: str

class ClickResponse(BaseModel):
    click_trans_id: Optional[str] = None
    merchant_trans_id: Optional[str] = None
    error: int
    error_note: str

class ClickPrepareResponse(ClickResponse):
    merchant_prepare_id: Optional[int] = None

class ClickCompleteResponse(ClickResponse):
    merchant_confirm_id: Optional[int] = None
