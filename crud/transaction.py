from decimal import Decimal
from typing import Optional
import logging

from crud.store import RecordStore
from models.transaction import Transaction
from core.enums import TransactionState, CLICK_PROVIDER

logger = logging.getLogger(__name__)

def _first(rows) -> Optional[Transaction]:
    return rows[0] if rows else None

def get_paid_transaction(store: RecordStore, user_id: int, product_id: int) -> Optional[Transaction]:
    """Get the Paid transaction for a user/product pair, if any"""
    return _first(store.query_equals(
        Transaction,
        user_id=user_id,
        product_id=product_id,
        state=int(TransactionState.Paid),
        provider=CLICK_PROVIDER,
    ))

def get_canceled_transaction(store: RecordStore, click_trans_id: str) -> Optional[Transaction]:
    """Get a canceled transaction carrying this provider id"""
    return _first(store.query_equals(
        Transaction,
        click_trans_id=click_trans_id,
        state=int(TransactionState.Canceled),
    ))

def get_transaction_by_prepare_id(store: RecordStore, prepare_id: int) -> Optional[Transaction]:
    """Get transaction by the prepare token issued in the prepare phase"""
    return _first(store.query_equals(Transaction, prepare_id=prepare_id, provider=CLICK_PROVIDER))

def create_pending_transaction(
    store: RecordStore,
    click_trans_id: str,
    merchant_trans_id: str,
    user_id: int,
    product_id: int,
    amount: Decimal,
    now: int,
) -> Transaction:
    """Create new Pending transaction; prepare_id equals create_time"""
    transaction = store.insert(
        Transaction,
        click_trans_id=click_trans_id,
        merchant_trans_id=merchant_trans_id,
        user_id=user_id,
        product_id=product_id,
        state=int(TransactionState.Pending),
        amount=amount,
        create_time=now,
        prepare_id=now,
        provider=CLICK_PROVIDER,
    )
    logger.info(f"Created pending transaction {transaction.id} for click_trans_id={click_trans_id}")
    return transaction

def mark_paid(store: RecordStore, transaction_id: int, now: int) -> Optional[Transaction]:
    """Mark transaction as paid"""
    transaction = store.update_by_id(
        Transaction, transaction_id, state=int(TransactionState.Paid), perform_time=now
    )
    logger.info(f"Transaction {transaction_id} paid")
    return transaction

def mark_canceled(store: RecordStore, transaction_id: int, now: int) -> Optional[Transaction]:
    """Mark transaction as canceled"""
    transaction = store.update_by_id(
        Transaction, transaction_id, state=int(TransactionState.Canceled), cancel_time=now
    )
    logger.info(f"Transaction {transaction_id} canceled")
    return transaction
