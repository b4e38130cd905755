from typing import Optional, List, Literal
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from schemas.product import ProductOut, ProductListPage

router = APIRouter(
    prefix="/shop",
    tags=["Shop"]
)

# Retrieve unique product categories
@router.get("/categories", response_model=List[str])
def get_unique_categories(
    db: Session = Depends(get_db),
):
    # Fetch distinct non-null categories
    categories = db.query(Product.category).distinct().filter(Product.category != None).order_by(Product.category).all()
    return [c[0] for c in categories]

@router.get("/products", response_model=ProductListPage)
def list_products_for_shop(
    # Search and filter parameters
    q: Optional[str] = Query(None, description="Search by name, brand or category"),
    category: Optional[str] = Query(None, description="Filter by category"),
    in_stock: bool = Query(True, description="Hide sold out products"),
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    sort_by: Literal["name", "price", "stock"] = "name",
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
):
    query = db.query(Product)
    if in_stock:
        query = query.filter(Product.stock > 0)

    # Apply general search filter
    if q:
        like = f"%{q}%"
        query = query.filter(
            or_(
                Product.name.ilike(like),
                Product.brand.ilike(like),
                Product.category.ilike(like),
                Product.subcategory.ilike(like),
            )
        )

    # Filter by specific category (case-insensitive)
    if category:
        query = query.filter(Product.category.ilike(category))

    # Configure sorting logic
    allowed = {
        "name": Product.name,
        "price": Product.price,
        "stock": Product.stock,
    }
    sort_col = allowed.get(sort_by, Product.name)
    if order == "desc":
        query = query.order_by(sort_col.desc())
    else:
        query = query.order_by(sort_col.asc())

    total = query.count()
    items: List[Product] = query.offset((page - 1) * page_size).limit(page_size).all()

    return {"items": items, "total": total, "page": page, "page_size": page_size}

@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
