import os
from datetime import date, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from models import Account, Membership, Order, Payment, Product, PromoCode, Store, User
from services.cart import Cart, cart_service
from services.checkout import CheckoutService

GUEST = "guest@example.com"
STUDENT = "sam@student.monash.edu"
STAFF = "alex@monash.edu"
MEMBER = "vip@example.com"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def fresh_carts():
    cart_service._carts.clear()
    yield
    cart_service._carts.clear()


@pytest.fixture
def seeded(db):
    today = date.today()
    db.add_all([
        Product(id="P1", name="Campus Hoodie", category="Apparel", price=10.00, member_price=8.00, stock=5),
        Product(id="P2", name="Notebook", category="Stationery", price=10.00, member_price=9.00, stock=20),
        Product(id="P3", name="Coffee Beans", category="Pantry", price=7.50, member_price=7.50, stock=0),
        Store(id="S1", name="Clayton Campus Store", address="21 College Walk", hours="9am-5pm"),
        PromoCode(code="PROMO10", percent=10, scope="ALL", expiry=date(2099, 12, 31)),
        PromoCode(code="FIRST_PICKUP", percent=15, scope="PICKUP", expiry=date(2099, 12, 31)),
        PromoCode(code="NEWMONASH20", percent=20, scope="PICKUP", expiry=None),
        PromoCode(code="OLD5", percent=5, scope="ALL", expiry=today - timedelta(days=1)),
        PromoCode(code="TODAY5", percent=5, scope="ALL", expiry=today),
        PromoCode(code="HUGE", percent=100, scope="ALL", expiry=None),
        Membership(email=MEMBER, tier="VIP", status="ACTIVE",
                   start_date=today - timedelta(days=10), end_date=today + timedelta(days=300)),
    ])
    for email, balance in ((GUEST, 100.0), (STUDENT, 100.0), (STAFF, 100.0), (MEMBER, 100.0)):
        db.add(User(email=email, role="customer"))
        db.add(Account(email=email, balance=balance))
    db.commit()
    return db


@pytest.fixture
def engine_service(seeded):
    return CheckoutService.for_session(seeded)


def make_cart(*lines):
    cart = Cart()
    for product_id, qty in lines:
        cart.add_or_merge(product_id, qty)
    return cart


def snapshot(db):
    """Everything a checkout may touch, for all-or-nothing comparisons."""
    db.expire_all()
    return {
        "balances": {a.email: a.balance for a in db.query(Account).all()},
        "stock": {p.id: p.stock for p in db.query(Product).all()},
        "orders": db.query(Order).count(),
        "payments": db.query(Payment).count(),
    }
