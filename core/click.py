import logging
import re
import time
from decimal import Decimal
from functools import partial
from typing import Callable, Optional

from core.click_sign import SignatureVerifier
from core.enums import ClickAction, ClickError, TransactionState, ERROR_NOTES, COMPLETE_ERROR_NOTES
from crud import transaction as transaction_crud
from crud.store import RecordStore
from models.order import Order
from models.product import Product
from models.user import User
from schemas.click import (
    ClickCompleteRequest,
    ClickCompleteResponse,
    ClickPrepareRequest,
    ClickPrepareResponse,
)

logger = logging.getLogger(__name__)

def _now_ms() -> int:
    return int(time.time() * 1000)

def _parse_int(raw) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None

AMOUNT_PATTERN = re.compile(r"\d{1,15}(?:\.\d{1,2})?")

def _parse_amount(raw) -> Optional[Decimal]:
    """Click sends sums like ``"5000"`` or ``"5000.00"``; exponents and signs are rejected"""
    text = str(raw).strip() if raw is not None else ""
    if not AMOUNT_PATTERN.fullmatch(text):
        return None
    return Decimal(text)

def _amount_matches(amount: Optional[Decimal], price) -> bool:
    # Whole sums only; any fractional part is truncated
    return amount is not None and price is not None and int(amount) == int(price)

def _belongs_to(prepared, data, order) -> bool:
    """The prepare token must have been issued for this payment and order"""
    return (
        prepared.click_trans_id == data.click_trans_id
        and prepared.merchant_trans_id == data.merchant_trans_id
        and prepared.user_id == order.user_id
        and prepared.product_id == order.product_id
    )

class ClickService:
    """Prepare/complete webhook processor for the Click gateway.

    Business failures never raise: every branch returns a response model
    carrying a ``ClickError`` code, which the router sends with HTTP 200.
    Only store faults propagate as exceptions.
    """

    def __init__(self, store: RecordStore, verifier: SignatureVerifier, clock: Callable[[], int] = _now_ms):
        self.store = store
        self.verifier = verifier
        self.clock = clock

    def _reply(self, phase: str, response_cls, notes, data, error: ClickError, **extra):
        if error != ClickError.Success:
            logger.warning(
                f"Click {phase} rejected: {error.name} "
                f"click_trans_id={data.click_trans_id} merchant_trans_id={data.merchant_trans_id}"
            )
        return response_cls(
            click_trans_id=data.click_trans_id,
            merchant_trans_id=data.merchant_trans_id,
            error=int(error),
            error_note=notes.get(error, ERROR_NOTES[error]),
            **extra,
        )

    def prepare(self, data: ClickPrepareRequest) -> ClickPrepareResponse:
        reply = partial(self._reply, "prepare", ClickPrepareResponse, {}, data)

        order = self.store.get_by_id(Order, data.merchant_trans_id)
        if not order:
            return reply(ClickError.TransactionNotFound)

        signed = self.verifier.verify(
            data.sign_string,
            click_trans_id=data.click_trans_id,
            service_id=data.service_id,
            merchant_trans_id=data.merchant_trans_id,
            amount=data.amount,
            action=data.action,
            sign_time=data.sign_time,
        )
        if not signed:
            return reply(ClickError.SignFailed)

        if _parse_int(data.action) != ClickAction.Prepare:
            return reply(ClickError.ActionNotFound)

        if transaction_crud.get_paid_transaction(self.store, order.user_id, order.product_id):
            return reply(ClickError.AlreadyPaid)

        if not self.store.get_by_id(User, order.user_id):
            return reply(ClickError.UserNotFound)

        product = self.store.get_by_id(Product, order.product_id)
        if not product:
            return reply(ClickError.BadRequest)

        amount = _parse_amount(data.amount)
        if not _amount_matches(amount, product.price):
            return reply(ClickError.InvalidAmount)

        if transaction_crud.get_canceled_transaction(self.store, data.click_trans_id):
            return reply(ClickError.TransactionCanceled)

        now = self.clock()
        transaction_crud.create_pending_transaction(
            self.store,
            click_trans_id=data.click_trans_id,
            merchant_trans_id=data.merchant_trans_id,
            user_id=order.user_id,
            product_id=order.product_id,
            amount=amount,
            now=now,
        )
        logger.info(f"Click prepare accepted: click_trans_id={data.click_trans_id} prepare_id={now}")
        return reply(ClickError.Success, merchant_prepare_id=now)

    def complete(self, data: ClickCompleteRequest) -> ClickCompleteResponse:
        reply = partial(self._reply, "complete", ClickCompleteResponse, COMPLETE_ERROR_NOTES, data)

        order = self.store.get_by_id(Order, data.merchant_trans_id)
        if not order:
            return reply(ClickError.TransactionNotFound)

        signed = self.verifier.verify(
            data.sign_string,
            click_trans_id=data.click_trans_id,
            service_id=data.service_id,
            merchant_trans_id=data.merchant_trans_id,
            merchant_prepare_id=data.merchant_prepare_id,
            amount=data.amount,
            action=data.action,
            sign_time=data.sign_time,
        )
        if not signed:
            return reply(ClickError.SignFailed)

        if _parse_int(data.action) != ClickAction.Complete:
            return reply(ClickError.ActionNotFound)

        if not self.store.get_by_id(User, order.user_id):
            return reply(ClickError.UserNotFound)

        product = self.store.get_by_id(Product, order.product_id)
        if not product:
            return reply(ClickError.BadRequest)

        prepare_id = _parse_int(data.merchant_prepare_id)
        prepared = None
        if prepare_id is not None:
            prepared = transaction_crud.get_transaction_by_prepare_id(self.store, prepare_id)
        if not prepared or not _belongs_to(prepared, data, order):
            return reply(ClickError.TransactionNotFound)

        if transaction_crud.get_paid_transaction(self.store, order.user_id, order.product_id):
            return reply(ClickError.AlreadyPaid)

        if not _amount_matches(_parse_amount(data.amount), product.price):
            return reply(ClickError.InvalidAmount)

        if transaction_crud.get_canceled_transaction(self.store, data.click_trans_id):
            return reply(ClickError.TransactionCanceled)

        # Paid and Canceled are terminal
        if prepared.state in (TransactionState.Canceled, TransactionState.CanceledAfterFail):
            return reply(ClickError.TransactionCanceled)
        if prepared.state != TransactionState.Pending:
            return reply(ClickError.AlreadyPaid)

        now = self.clock()
        if data.error < 0:
            transaction_crud.mark_canceled(self.store, prepared.id, now)
            # The provider expects TransactionNotFound after a cancellation
            return reply(ClickError.TransactionNotFound)

        transaction_crud.mark_paid(self.store, prepared.id, now)
        logger.info(f"Click complete accepted: click_trans_id={data.click_trans_id} confirm_id={now}")
        return reply(ClickError.Success, merchant_confirm_id=now)
