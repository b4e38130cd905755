# backend/routes/orders.py
from fastapi import APIRouter, Depends, HTTPException, Request, Query
from sqlalchemy.orm import Session, joinedload
import logging

from database import get_db
from utils.tokenJWT import customer_required
from utils.audit import write_log
from models.users import User
from models.order import Order, OrderItem
from models.store import Store
from services.cart import cart_service
from services.checkout import CheckoutService, render_summary
from services.pricing import PICKUP
from services.stores import OrderLedger
from schemas.order import (
    CheckoutPayload, CheckoutResponse, OrderItemOut, OrderPreviewResponse,
    OrderResponse, OrdersPage, QuoteLineOut,
)

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

DEFAULT_DELIVERY_ADDRESS = "Default Delivery Address"

# Turn the requested location into the text stored on the order
def _resolve_location(db: Session, payload: CheckoutPayload) -> str:
    if payload.fulfilment == PICKUP:
        store = db.get(Store, (payload.location or "").strip())
        return store.label if store else "Unknown store"
    return (payload.location or "").strip() or DEFAULT_DELIVERY_ADDRESS

# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    items = [
        OrderItemOut(
            product_id=it.product_id,
            product_name=it.product.name if it.product else "Removed product",
            qty=it.qty,
            unit_price=it.unit_price,
        )
        for it in order.items
    ]
    return OrderResponse(
        id=order.id,
        fulfilment=order.fulfilment,
        location=order.location,
        promo_code=order.promo_code,
        subtotal=order.subtotal,
        discount=order.discount,
        fee=order.fee,
        total=order.total,
        created_at=order.created_at,
        items=items,
    )

# Price the current cart without placing the order
@router.post("/preview", response_model=OrderPreviewResponse)
def preview_order(
    payload: CheckoutPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    cart = cart_service.get(current_user.email)
    location = _resolve_location(db, payload)
    quote = CheckoutService.for_session(db).quote(current_user.email, cart, payload.fulfilment, payload.promo_code)
    return OrderPreviewResponse(
        lines=[
            QuoteLineOut(product_id=l.product_id, name=l.name, quantity=l.quantity,
                         unit_price=round(l.unit_price, 2), line_total=round(l.line_total, 2))
            for l in quote.lines
        ],
        subtotal=round(quote.subtotal, 2),
        discount=round(quote.discount, 2),
        fee=round(quote.fee, 2),
        total=quote.total,
        summary=render_summary(quote, current_user.display_name, current_user.email, location),
    )

# Place the order: debit balance, decrement stock, record order and payment
@router.post("/checkout", response_model=CheckoutResponse)
def checkout(
    payload: CheckoutPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    cart = cart_service.get(current_user.email)
    location = _resolve_location(db, payload)
    result = CheckoutService.for_session(db).checkout(
        current_user.email, cart, payload.fulfilment, location, payload.promo_code
    )
    if not result.ok:
        write_log(db, current_user, action="ORDER_CHECKOUT", resource="orders", status="FAIL",
                  request=request, meta={"reason": result.reason})
        raise HTTPException(status_code=400, detail=result.message)

    write_log(db, current_user, action="ORDER_CHECKOUT", resource="orders", status="SUCCESS",
              request=request, meta={"order_id": result.order_id, "total": result.total})
    return CheckoutResponse(order_id=result.order_id, total=result.total, new_balance=result.new_balance)

# List the current customer's orders, newest first
@router.get("", response_model=OrdersPage)
def list_my_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    q = OrderLedger(db).for_customer(current_user.email).options(
        joinedload(Order.items).joinedload(OrderItem.product)
    )
    total = q.count()
    rows = q.offset((page - 1) * page_size).limit(page_size).all()
    items = [_order_to_out(o) for o in rows]
    return {"items": items, "total": total, "page": page, "page_size": page_size}
