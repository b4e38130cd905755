# backend/routes/account.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from utils.tokenJWT import customer_required
from utils.audit import write_log
from models.users import User
from models.store import Store
from services.cart import cart_service
from services.stores import AccountStore, MembershipLookup
from schemas.account import AccountOut, StoreOut, TopUpRequest

router = APIRouter(tags=["Account"])

def _account_out(db: Session, email: str) -> AccountOut:
    memberships = MembershipLookup(db)
    return AccountOut(
        email=email,
        balance=round(AccountStore(db).get_balance(email), 2),
        membership=memberships.summary(email),
        member_active=memberships.is_active(email),
    )

@router.get("/account", response_model=AccountOut)
def get_account(
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    return _account_out(db, current_user.email)

# Credit the prepaid balance
@router.post("/account/topup", response_model=AccountOut)
def top_up(
    payload: TopUpRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    if payload.amount > settings.MAX_TOPUP:
        raise HTTPException(
            status_code=400,
            detail=f"Please enter a smaller amount (max ${settings.MAX_TOPUP:.0f} per top-up)",
        )

    AccountStore(db).credit(current_user.email, payload.amount)
    db.commit()
    write_log(db, current_user, action="ACCOUNT_TOPUP", resource="account", status="SUCCESS",
              request=request, meta={"amount": payload.amount})
    return _account_out(db, current_user.email)

# End the session: the in-memory cart is dropped
@router.post("/logout")
def logout(current_user: User = Depends(customer_required)):
    cart_service.discard(current_user.email)
    return {"message": "Logged out"}

# Pickup locations
@router.get("/stores", response_model=List[StoreOut])
def list_stores(db: Session = Depends(get_db)):
    return db.query(Store).order_by(Store.id).all()
