"""Product management for artisans and the public catalogue.

Every function returns a result dictionary with a ``success`` flag and either
a payload plus ``message`` or an ``error`` string suitable for display.
Database failures are logged and reported the same way rather than raised.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from data.database.product_model import Product
from src.config import settings
from src.logging_config import get_logger
from src.utils.storage import (
    PRODUCTS_BUCKET,
    ImageStorage,
    StorageError,
    build_object_name,
    get_storage,
    object_path_from_url,
    validate_image,
)

logger = get_logger("products")

DEFAULT_CATEGORIES = [
    "Pottery & Ceramics",
    "Jewelry & Accessories",
    "Textiles & Clothing",
    "Woodwork",
    "Glass",
    "Metalwork",
    "Art & Paintings",
    "Leather Goods",
]

# Storefront price filter buckets: name -> (lower, upper, lower_inclusive)
PRICE_RANGES = {
    "under-25": (None, Decimal("25"), False),
    "25-50": (Decimal("25"), Decimal("50"), True),
    "50-100": (Decimal("50"), Decimal("100"), False),
    "over-100": (Decimal("100"), None, False),
}

SORT_OPTIONS = ("newest", "price_asc", "price_desc", "rating")

UPDATABLE_FIELDS = ("title", "description", "price", "category", "stock", "image_url")


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _to_price(value: Any) -> Optional[Decimal]:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return price if price.is_finite() else None


def _to_stock(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def validate_product_data(data: Dict[str, Any]) -> Optional[str]:
    """Return the first validation error for a new product, or None."""
    if _is_blank(data.get("title")):
        return "Product title is required"
    if _is_blank(data.get("description")):
        return "Product description is required"
    price = _to_price(data.get("price"))
    if price is None or price <= 0:
        return "Valid product price is required"
    if _is_blank(data.get("category")):
        return "Product category is required"
    stock = _to_stock(data.get("stock"))
    if stock is None or stock < 0:
        return "Valid stock quantity is required"
    return None


def _failure(db: Session, error: Exception, message: str, **extra) -> Dict[str, Any]:
    db.rollback()
    logger.error("%s: %s", message, error)
    return {"success": False, "error": message, **extra}


def get_artisan_products(db: Session, artisan_id: str) -> Dict[str, Any]:
    """
    Get all products of one artisan, newest first.

    Args:
        db: Database session
        artisan_id: Owning profile ID

    Returns:
        Dictionary with ``products`` and a count message
    """
    logger.info("Getting products for artisan %s", artisan_id)
    try:
        products = (
            db.query(Product)
            .filter(Product.artisan_id == artisan_id)
            .order_by(Product.created_at.desc())
            .all()
        )
    except SQLAlchemyError as e:
        return _failure(db, e, "Failed to load products", products=[])

    return {
        "success": True,
        "products": products,
        "message": f"Found {len(products)} products"
    }


def create_product(db: Session, artisan_id: Optional[str], product_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a product for an artisan.

    Args:
        db: Database session
        artisan_id: Owning profile ID (None for seeded catalogue rows)
        product_data: title, description, price, category, stock and optional image_url

    Returns:
        Dictionary with the created ``product`` or an ``error``
    """
    error = validate_product_data(product_data)
    if error:
        return {"success": False, "error": error}

    product = Product(
        artisan_id=artisan_id,
        title=product_data["title"].strip(),
        description=product_data["description"].strip(),
        price=_to_price(product_data["price"]),
        category=product_data["category"].strip(),
        stock=_to_stock(product_data["stock"]),
        image_url=product_data.get("image_url") or None,
        rating=0,
    )
    try:
        db.add(product)
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        return _failure(db, e, "Failed to create product")

    logger.info("Product created: %s (%s)", product.id, product.title)
    return {
        "success": True,
        "product": product,
        "message": "Product created successfully!"
    }


def update_product(db: Session, product_id: str, artisan_id: str, product_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update the provided fields of a product owned by ``artisan_id``.

    Fields absent from ``product_data`` (or set to None) are left unchanged.
    """
    logger.info("Updating product %s", product_id)
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        return {"success": False, "error": "Product not found", "not_found": True}
    if product.artisan_id != artisan_id:
        return {
            "success": False,
            "error": "You do not have permission to update this product",
            "forbidden": True
        }

    changes = {k: v for k, v in product_data.items() if k in UPDATABLE_FIELDS and v is not None}
    for field in ("title", "description", "category"):
        if field in changes:
            if _is_blank(changes[field]):
                return {"success": False, "error": f"Product {field} is required"}
            changes[field] = changes[field].strip()
    if "price" in changes:
        price = _to_price(changes["price"])
        if price is None or price <= 0:
            return {"success": False, "error": "Valid product price is required"}
        changes["price"] = price
    if "stock" in changes:
        stock = _to_stock(changes["stock"])
        if stock is None or stock < 0:
            return {"success": False, "error": "Valid stock quantity is required"}
        changes["stock"] = stock

    for field, value in changes.items():
        setattr(product, field, value)

    try:
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        return _failure(db, e, "Failed to update product")

    return {
        "success": True,
        "product": product,
        "message": "Product updated successfully!"
    }


def delete_product(db: Session, product_id: str, artisan_id: str, storage: Optional[ImageStorage] = None) -> Dict[str, Any]:
    """
    Delete a product owned by ``artisan_id`` together with its stored image.

    A failure to remove the image is logged and does not stop the deletion.
    """
    logger.info("Deleting product %s", product_id)
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        return {"success": False, "error": "Product not found", "not_found": True}
    if product.artisan_id != artisan_id:
        return {
            "success": False,
            "error": "You do not have permission to delete this product",
            "forbidden": True
        }

    if product.image_url:
        storage = storage or get_storage()
        try:
            storage.remove(PRODUCTS_BUCKET, [object_path_from_url(product.image_url, PRODUCTS_BUCKET)])
        except StorageError as e:
            logger.warning("Error deleting image for product %s: %s", product_id, e)

    try:
        db.delete(product)
        db.commit()
    except SQLAlchemyError as e:
        return _failure(db, e, "Failed to delete product")

    return {"success": True, "message": "Product deleted successfully"}


def upload_product_image(
    artisan_id: str,
    filename: str,
    content_type: Optional[str],
    content: bytes,
    storage: Optional[ImageStorage] = None
) -> Dict[str, Any]:
    """
    Validate and store a product image.

    Returns:
        Dictionary with the public ``image_url`` or an ``error``
    """
    logger.info("Uploading product image %s", filename)
    error = validate_image(content_type, content, settings.max_product_image_bytes)
    if error:
        return {"success": False, "error": error}

    storage = storage or get_storage()
    object_path = f"{PRODUCTS_BUCKET}/{build_object_name(artisan_id, filename)}"
    try:
        storage.upload(PRODUCTS_BUCKET, object_path, content, upsert=False)
    except StorageError as e:
        logger.error("Upload product image error: %s", e)
        message = "Failed to upload image. Please try again."
        if "Bucket not found" in str(e):
            message = "Storage not configured. Please contact support."
        return {"success": False, "error": message}

    image_url = storage.get_public_url(PRODUCTS_BUCKET, object_path)
    return {
        "success": True,
        "image_url": image_url,
        "message": "Image uploaded successfully!"
    }


def get_product_categories(db: Session) -> List[str]:
    """Sorted distinct categories; the default list when none can be read."""
    try:
        rows = db.query(Product.category).distinct().all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Get categories error: %s", e)
        return list(DEFAULT_CATEGORIES)

    categories = sorted({row[0] for row in rows if row[0]})
    return categories or list(DEFAULT_CATEGORIES)


def get_product(db: Session, product_id: str) -> Dict[str, Any]:
    """Fetch one product with its artisan loaded."""
    product = (
        db.query(Product)
        .options(joinedload(Product.artisan))
        .filter(Product.id == product_id)
        .first()
    )
    if not product:
        return {"success": False, "error": "Product not found", "not_found": True}
    return {"success": True, "product": product}


def list_products(
    db: Session,
    search: Optional[str] = None,
    category: Optional[str] = None,
    price_range: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort: str = "newest",
    page: int = 1,
    page_size: int = 20
) -> Dict[str, Any]:
    """
    Catalogue search with filters and pagination.

    Args:
        search: Case-insensitive match on title, description or category
        category: Exact category ("All Categories" means no filter)
        price_range: One of under-25, 25-50, 50-100, over-100 or "all"
        min_price: Inclusive lower bound
        max_price: Inclusive upper bound
        sort: newest, price_asc, price_desc or rating
        page: 1-indexed page number
        page_size: Items per page

    Returns:
        Dictionary with ``products``, ``total``, ``page`` and ``page_size``
    """
    query = db.query(Product)

    if search:
        term = search.strip().lower()
        query = query.filter(
            or_(
                func.lower(Product.title).contains(term, autoescape=True),
                func.lower(Product.description).contains(term, autoescape=True),
                func.lower(Product.category).contains(term, autoescape=True)
            )
        )

    if category and category != "All Categories":
        query = query.filter(Product.category == category)

    if price_range and price_range != "all":
        if price_range not in PRICE_RANGES:
            return {"success": False, "error": f"Unknown price range '{price_range}'"}
        lower, upper, lower_inclusive = PRICE_RANGES[price_range]
        if lower is not None:
            query = query.filter(Product.price >= lower if lower_inclusive else Product.price > lower)
        if upper is not None:
            # under-25 is exclusive, the other buckets include their upper bound
            query = query.filter(Product.price < upper if price_range == "under-25" else Product.price <= upper)

    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    if max_price is not None:
        query = query.filter(Product.price <= max_price)

    if sort not in SORT_OPTIONS:
        return {"success": False, "error": f"Unknown sort option '{sort}'"}
    ordering = {
        "newest": [Product.created_at.desc()],
        "price_asc": [Product.price.asc(), Product.created_at.desc()],
        "price_desc": [Product.price.desc(), Product.created_at.desc()],
        "rating": [Product.rating.desc(), Product.created_at.desc()],
    }[sort]

    try:
        total = query.count()
        offset = (page - 1) * page_size
        products = query.order_by(*ordering).offset(offset).limit(page_size).all()
    except SQLAlchemyError as e:
        return _failure(db, e, "Error loading products from database", products=[], total=0)

    return {
        "success": True,
        "products": products,
        "total": total,
        "page": page,
        "page_size": page_size
    }


def get_catalogue_stats(db: Session) -> Dict[str, int]:
    """Totals shown above the storefront grid."""
    total, average_price = db.query(func.count(Product.id), func.avg(Product.price)).one()
    categories_count = db.query(Product.category).distinct().count()
    return {
        "total_products": total or 0,
        "categories_count": categories_count,
        "average_price": int(Decimal(str(average_price or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
    }


def get_inventory_stats(products: List[Product]) -> Dict[str, Any]:
    """Dashboard counters for an artisan's products."""
    return {
        "total": len(products),
        "in_stock": sum(1 for p in products if p.stock > 0),
        "out_of_stock": sum(1 for p in products if p.stock == 0),
        "total_value": float(sum(Decimal(str(p.price)) * p.stock for p in products)),
    }
