"""Seeds the database with pickup stores, promo codes, a demo catalog and demo customers."""
import os
import sys
from datetime import date, timedelta

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models import Account, Membership, Product, PromoCode, Store, User

STORES = [
    ("S1", "Clayton Campus Store", "21 College Walk", "9am-5pm", "+61 3 9905 0000"),
    ("S2", "Caulfield Campus Store", "24 Sir John Monash Dr", "9am-5pm", "+61 3 9903 0000"),
]

PROMOS = [
    ("PROMO10", 10, "ALL", date(2099, 12, 31)),
    ("FIRST_PICKUP", 15, "PICKUP", date(2099, 12, 31)),
    ("NEWMONASH20", 20, "PICKUP", date(2099, 12, 31)),
]

# id, name, category, subcategory, brand, price, member price, stock
PRODUCTS = [
    ("P1", "Full Cream Milk 2L", "Dairy", "Milk", "Campus Farm", 3.50, 3.10, 40),
    ("P2", "Wholemeal Bread", "Bakery", "Bread", "Campus Bakery", 4.20, 3.80, 25),
    ("P3", "Free Range Eggs 12pk", "Dairy", "Eggs", "Sunny Hens", 6.90, 6.20, 30),
    ("P4", "A4 Notebook 5pk", "Stationery", "Paper", "Monash Press", 12.00, 10.50, 60),
    ("P5", "USB-C Cable 1m", "Electronics", "Accessories", "VoltLine", 15.00, 13.00, 20),
    ("P6", "Instant Noodles 5pk", "Pantry", "Noodles", "Quick Bowl", 5.00, 4.50, 80),
]

CUSTOMERS = [
    ("student@student.monash.edu", "Sam", "Student", 200.0, None),
    ("staff@monash.edu", "Alex", "Staff", 300.0, "ACTIVE"),
    ("guest@example.com", "Gale", "Guest", 100.0, None),
]


def seed(session):
    for sid, name, address, hours, phone in STORES:
        session.merge(Store(id=sid, name=name, address=address, hours=hours, phone=phone))

    for code, percent, scope, expiry in PROMOS:
        session.merge(PromoCode(code=code, percent=percent, scope=scope, expiry=expiry))

    for pid, name, category, sub, brand, price, member_price, stock in PRODUCTS:
        session.merge(Product(
            id=pid, name=name, category=category, subcategory=sub, brand=brand,
            price=price, member_price=member_price, stock=stock,
        ))

    today = date.today()
    for email, first, last, balance, membership in CUSTOMERS:
        if not session.query(User).filter(User.email == email).first():
            session.add(User(email=email, role="customer", first_name=first, last_name=last))
        session.merge(Account(email=email, balance=balance))
        if membership:
            session.merge(Membership(
                email=email, tier="VIP", status=membership,
                start_date=today, end_date=today + timedelta(days=365),
            ))
    session.commit()


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        seed(session)
        print(f"Seeded {len(PRODUCTS)} products, {len(PROMOS)} promos, {len(STORES)} stores.")
    finally:
        session.close()
