# backend/routes/cart.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from database import get_db
from utils.tokenJWT import customer_required
from utils.audit import write_log
from models.users import User
from services.cart import cart_service
from services.checkout import CheckoutService
from services.errors import CartError, InsufficientStock, UnknownProduct
from services.stores import ProductStore
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartItemOut

router = APIRouter(prefix="/cart", tags=["Cart"])

def _cart_to_out(db: Session, user: User, message=None) -> CartOut:
    cart = cart_service.get(user.email)
    # Preview pricing: removed products are skipped rather than rejected
    quote = CheckoutService.for_session(db).quote(user.email, cart, "PICKUP")
    items_out = [
        CartItemOut(
            product_id=line.product_id,
            name=line.name,
            qty=line.quantity,
            unit_price=round(line.unit_price, 2),
            line_total=round(line.line_total, 2),
        )
        for line in quote.lines
    ]
    return CartOut(items=items_out, total_units=cart.total_units, subtotal=round(quote.subtotal, 2), message=message)

def _raise_for(error):
    # Translate cart errors into HTTP errors
    if isinstance(error, UnknownProduct):
        raise HTTPException(status_code=404, detail=error.message)
    raise HTTPException(status_code=400, detail=error.message)

@router.get("", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    return _cart_to_out(db, current_user)

@router.post("/add", response_model=CartOut, status_code=status.HTTP_200_OK)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    try:
        cart_service.add(ProductStore(db), current_user.email, payload.product_id, payload.qty)
    except (CartError, UnknownProduct) as e:
        write_log(db, current_user, action="CART_ADD", resource="cart", status="FAIL",
                  request=request, meta={"product_id": payload.product_id, "qty": payload.qty, "reason": e.reason})
        _raise_for(e)

    out = _cart_to_out(db, current_user, message="OK")
    write_log(
        db,
        current_user,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        request=request,
        meta={"product_id": payload.product_id, "qty": payload.qty, "cart_units": out.total_units},
    )
    return out

@router.put("/items/{product_id}", response_model=CartOut)
def update_cart_item(
    product_id: str,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    try:
        found = cart_service.edit_quantity(ProductStore(db), current_user.email, product_id, payload.qty)
    except (CartError, UnknownProduct, InsufficientStock) as e:
        write_log(db, current_user, action="CART_UPDATE", resource="cart", status="FAIL",
                  request=request, meta={"product_id": product_id, "qty": payload.qty, "reason": e.reason})
        _raise_for(e)

    if payload.qty <= 0:
        message = "Removed" if found else "Not found"
    else:
        message = f"Updated: {product_id} -> {min(payload.qty, 10)}"

    out = _cart_to_out(db, current_user, message=message)
    write_log(
        db,
        current_user,
        action="CART_UPDATE",
        resource="cart",
        status="SUCCESS",
        request=request,
        meta={"product_id": product_id, "qty": payload.qty, "subtotal": out.subtotal},
    )
    return out

@router.delete("/items/{product_id}", response_model=CartOut)
def delete_cart_item(
    product_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    if not cart_service.remove(current_user.email, product_id):
        raise HTTPException(status_code=404, detail="Cart item not found")

    out = _cart_to_out(db, current_user, message="Removed")
    write_log(
        db,
        current_user,
        action="CART_DELETE",
        resource="cart",
        status="SUCCESS",
        request=request,
        meta={"product_id": product_id, "cart_units": out.total_units},
    )
    return out

@router.delete("", response_model=CartOut)
def clear_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(customer_required)
):
    cart_service.clear(current_user.email)
    return _cart_to_out(db, current_user, message="Cleared")
