import itertools
import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CLICK_SECRET_KEY"] = "test-secret"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.click import ClickService
from core.click_sign import SignatureVerifier
from core.enums import ClickAction
from crud.store import SQLAlchemyRecordStore
from db.base import Base
from models.order import Order
from models.product import Product
from models.transaction import Transaction  # noqa: F401
from models.user import User
from schemas.click import ClickCompleteRequest, ClickPrepareRequest

SECRET = "test-secret"
PRICE = 5000

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()

@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    session.add_all([
        User(id=1, name="Buyer"),
        User(id=2, name="Other buyer"),
        Product(id=1, title="Course", price=PRICE),
    ])
    session.flush()
    session.add_all([
        Order(id="order-1", user_id=1, product_id=1),
        Order(id="order-2", user_id=2, product_id=1),
        Order(id="order-no-user", user_id=99, product_id=1),
        Order(id="order-no-product", user_id=1, product_id=99),
        Order(id="order-nobody", user_id=99, product_id=99),
    ])
    session.commit()
    yield session
    session.close()

@pytest.fixture
def verifier():
    return SignatureVerifier(SECRET)

@pytest.fixture
def store(db_session):
    return SQLAlchemyRecordStore(db_session)

@pytest.fixture
def service(store, verifier):
    ticks = itertools.count(1_700_000_000_000)
    return ClickService(store, verifier, clock=lambda: next(ticks))

@pytest.fixture
def prepare_form(verifier):
    """Build a signed prepare form; ``sign_string`` may be overridden"""
    def build(**overrides):
        form = {
            "click_trans_id": "111",
            "service_id": "77",
            "click_paydoc_id": "222",
            "merchant_trans_id": "order-1",
            "amount": str(PRICE),
            "action": str(int(ClickAction.Prepare)),
            "error": "0",
            "error_note": "Success",
            "sign_time": "2024-01-01 10:00:00",
        }
        form.update({k: v for k, v in overrides.items() if k != "sign_string"})
        form["sign_string"] = overrides.get("sign_string") or verifier.build(
            click_trans_id=form["click_trans_id"],
            service_id=form["service_id"],
            merchant_trans_id=form["merchant_trans_id"],
            amount=form["amount"],
            action=form["action"],
            sign_time=form["sign_time"],
        )
        return form
    return build

@pytest.fixture
def complete_form(verifier):
    """Build a signed complete form for a given merchant_prepare_id"""
    def build(merchant_prepare_id, **overrides):
        form = {
            "click_trans_id": "111",
            "service_id": "77",
            "click_paydoc_id": "222",
            "merchant_trans_id": "order-1",
            "merchant_prepare_id": str(merchant_prepare_id),
            "amount": str(PRICE),
            "action": str(int(ClickAction.Complete)),
            "error": "0",
            "error_note": "Success",
            "sign_time": "2024-01-01 10:05:00",
        }
        form.update({k: v for k, v in overrides.items() if k != "sign_string"})
        form["sign_string"] = overrides.get("sign_string") or verifier.build(
            click_trans_id=form["click_trans_id"],
            service_id=form["service_id"],
            merchant_trans_id=form["merchant_trans_id"],
            merchant_prepare_id=form["merchant_prepare_id"],
            amount=form["amount"],
            action=form["action"],
            sign_time=form["sign_time"],
        )
        return form
    return build

@pytest.fixture
def prepare_request(prepare_form):
    return lambda **overrides: ClickPrepareRequest(**prepare_form(**overrides))

@pytest.fixture
def complete_request(complete_form):
    return lambda merchant_prepare_id, **overrides: ClickCompleteRequest(
        **complete_form(merchant_prepare_id, **overrides)
    )
