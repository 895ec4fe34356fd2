"""Maintenance commands: seeding, image fixes and diagnostics.

Run as ``python -m src.maintenance <command>`` or through the
``haven-maintenance`` console script.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from data.database.auth_models import AuthSession, AuthUser
from data.database.connection import SessionLocal, init_db
from data.database.product_model import Product
from src.config import settings
from src.logging_config import get_logger, setup_logging
from src.services import auth_service, product_service
from src.utils.storage import PRODUCTS_BUCKET, ImageStorage, StorageError, get_storage

logger = get_logger("maintenance")

SAMPLE_PRODUCTS_FILE = project_root / "data" / "sample_products.json"

# Display-name image files -> the slug names referenced by the sample catalogue
IMAGE_RENAME_MAP = {
    "Abstract Acrylic Painting.png": "abstract-painting.png",
    "Knitted Alpaca Wool Sweater.png": "alpaca-sweater.png",
    "Handmade Ceramic Coffee Mug.png": "ceramic-mug.png",
    "Artisan Clay Dinner Plates Set.png": "clay-plates.png",
    "Copper Wire Sculpture.png": "copper-sculpture.png",
    "Reclaimed Wood Cutting Board.png": "cutting-board.png",
    "Embroidered Cotton Cushion Cover.png": "embroidered-cushion.png",
    "Hand-blown Glass Ornaments Set.png": "glass-ornaments.png",
    "Blown Glass Vase.png": "glass-vase.png",
    "Forged Iron Candle Holders.png": "iron-candles.png",
    "Artisan Leather Journal.png": "leather-journal.png",
    "Handstitched Leather Wallet.png": "leather-wallet.png",
    "Sterling Silver Wire Wrapped Pendant.png": "silver-pendant.png",
    "Stained Glass Window Panel.png": "stained-glass.png",
    "Watercolor Landscape Print.png": "watercolor-print.png",
    "Hand-carved Wooden Bowl.png": "wooden-bowl.png",
    "Handcrafted Wooden Earrings.png": "wooden-earrings.png",
    "Hand-woven Wool Scarf.png": "wool-scarf.png",
}

REQUIRED_PRODUCT_FIELDS = (
    "id", "artisan_id", "title", "description", "price", "category",
    "stock", "image_url", "rating", "created_at", "updated_at",
)
AUTH_TABLES = ("auth_users", "auth_sessions", "user_profiles")


def load_sample_products(file_path: Path = SAMPLE_PRODUCTS_FILE) -> List[Dict[str, Any]]:
    """Load the sample catalogue from JSON."""
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def seed_products(db: Session, products: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Insert catalogue rows that are not present yet (matched by title).

    Seeded rows have no artisan and keep the rating given in the catalogue.

    Returns:
        Dictionary with ``created``, ``skipped`` and ``errors`` title lists
    """
    existing = {row[0] for row in db.query(Product.title).all()}
    stats = {"created": [], "skipped": [], "errors": []}

    for product_data in products:
        title = product_data.get("title", "")
        if title in existing:
            stats["skipped"].append(title)
            continue

        result = product_service.create_product(db, None, product_data)
        if not result["success"]:
            logger.error("Could not seed %s: %s", title, result["error"])
            stats["errors"].append(title)
            continue

        product = result["product"]
        if product_data.get("rating"):
            product.rating = product_data["rating"]
            db.commit()
        existing.add(title)
        stats["created"].append(title)

    logger.info(
        "Seed finished: %d created, %d skipped, %d failed",
        len(stats["created"]), len(stats["skipped"]), len(stats["errors"])
    )
    return stats


def fix_image_urls(db: Session, old_extension: str = ".jpg", new_extension: str = ".png") -> List[Dict[str, str]]:
    """
    Replace the ``old_extension`` suffix of each matching image URL with ``new_extension``.

    Returns:
        One ``{"title", "old", "new"}`` entry per updated product
    """
    if not old_extension:
        return []
    products = db.query(Product).filter(Product.image_url.endswith(old_extension, autoescape=True)).all()
    updates = []
    for product in products:
        new_url = product.image_url[:-len(old_extension)] + new_extension
        updates.append({"title": product.title, "old": product.image_url, "new": new_url})
        product.image_url = new_url

    if updates:
        db.commit()
    logger.info("Rewrote %d image URL(s) from %s to %s", len(updates), old_extension, new_extension)
    return updates


def rename_images(directory: Path, rename_map: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Rename image files in ``directory`` according to ``rename_map``.

    Targets that already exist are left alone.

    Returns:
        Dictionary with ``renamed``, ``skipped``, ``not_found`` and ``errors`` lists
    """
    rename_map = rename_map if rename_map is not None else IMAGE_RENAME_MAP
    directory = Path(directory)
    summary = {"renamed": [], "skipped": [], "not_found": [], "errors": []}

    for old_name, new_name in rename_map.items():
        old_path = directory / old_name
        new_path = directory / new_name
        if not old_path.exists():
            summary["not_found"].append(old_name)
            continue
        if new_path.exists():
            summary["skipped"].append(new_name)
            continue
        try:
            old_path.rename(new_path)
        except OSError as e:
            logger.error("Error renaming %s: %s", old_name, e)
            summary["errors"].append(old_name)
            continue
        summary["renamed"].append((old_name, new_name))

    return summary


def _check(name: str, ok: bool, detail: str = "") -> Dict[str, Any]:
    return {"check": name, "ok": ok, "detail": detail}


def _database_reachable(db: Session) -> Dict[str, Any]:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.rollback()
        return _check("database connection", False, str(e))
    return _check("database connection", True, settings.database_url)


def diagnose_auth(db: Session, token: Optional[str] = None) -> List[Dict[str, Any]]:
    """Check configuration, database, auth tables and optionally a session token."""
    checks = [
        _check("DATABASE_URL configured", bool(settings.database_url), settings.database_url),
        _check(
            "session lifetime",
            settings.session_ttl_hours > 0,
            f"{settings.session_ttl_hours} hours"
        ),
        _check(
            "ADMIN_TOKEN configured",
            bool(settings.admin_token),
            "" if settings.admin_token else "admin routes are disabled"
        ),
    ]

    connection = _database_reachable(db)
    checks.append(connection)
    if not connection["ok"]:
        return checks

    table_names = set(inspect(db.get_bind()).get_table_names())
    missing = [name for name in AUTH_TABLES if name not in table_names]
    checks.append(_check("auth tables", not missing, f"missing: {', '.join(missing)}" if missing else ""))
    if missing:
        return checks

    user_count = db.query(AuthUser).count()
    session_count = db.query(AuthSession).count()
    checks.append(_check("registered users", True, f"{user_count} users, {session_count} sessions"))

    if token:
        result = auth_service.get_current_user(db, token)
        if result["success"]:
            user = result["user"]
            checks.append(_check("session token", True, f"{user.email} ({user.id})"))
        else:
            checks.append(_check("session token", False, "token is unknown or expired"))

    return checks


def diagnose_products(db: Session, storage: Optional[ImageStorage] = None) -> List[Dict[str, Any]]:
    """Check the database, products table, image bucket and an insert/delete round trip."""
    connection = _database_reachable(db)
    checks = [connection]
    if not connection["ok"]:
        return checks

    inspector = inspect(db.get_bind())
    if not inspector.has_table(Product.__tablename__):
        checks.append(_check("products table", False, "table does not exist"))
        return checks
    columns = {column["name"] for column in inspector.get_columns(Product.__tablename__)}
    missing = [field for field in REQUIRED_PRODUCT_FIELDS if field not in columns]
    checks.append(_check(
        "products table",
        not missing,
        f"missing: {', '.join(missing)}" if missing else f"fields: {', '.join(sorted(columns))}"
    ))

    storage = storage or get_storage()
    try:
        storage.list(PRODUCTS_BUCKET, limit=1)
        checks.append(_check(f"bucket '{PRODUCTS_BUCKET}'", True))
    except StorageError as e:
        checks.append(_check(f"bucket '{PRODUCTS_BUCKET}'", False, str(e)))

    result = product_service.create_product(db, None, {
        "title": "TEST - DELETE ME",
        "description": "Diagnostic product",
        "price": 1,
        "category": "Test",
        "stock": 0,
    })
    if not result["success"]:
        checks.append(_check("create test product", False, result["error"]))
        return checks

    try:
        db.delete(result["product"])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        checks.append(_check("create test product", False, f"created but not deleted: {e}"))
        return checks
    checks.append(_check("create test product", True, "created and deleted"))
    return checks


def print_checks(checks: List[Dict[str, Any]]) -> bool:
    """Print check results; returns True when every check passed."""
    for item in checks:
        mark = "✓" if item["ok"] else "✗"
        line = f"{mark} {item['check']}"
        if item["detail"]:
            line += f": {item['detail']}"
        print(line)
    return all(item["ok"] for item in checks)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Handcrafted Haven maintenance commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed_parser = subparsers.add_parser("seed", help="Insert the sample catalogue")
    seed_parser.add_argument(
        "--file",
        type=Path,
        default=SAMPLE_PRODUCTS_FILE,
        help="JSON file with products (default: data/sample_products.json)"
    )

    fix_parser = subparsers.add_parser("fix-image-urls", help="Rewrite product image URL extensions")
    fix_parser.add_argument("--from", dest="old_extension", default=".jpg", help="Extension to replace (default: .jpg)")
    fix_parser.add_argument("--to", dest="new_extension", default=".png", help="Replacement extension (default: .png)")

    rename_parser = subparsers.add_parser("rename-images", help="Rename display-name images to slug names")
    rename_parser.add_argument("directory", type=Path, help="Directory holding the image files")

    auth_parser = subparsers.add_parser("diagnose-auth", help="Check authentication setup")
    auth_parser.add_argument("--token", default=None, help="Session token to inspect")

    subparsers.add_parser("diagnose-products", help="Check product storage and permissions")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    if args.command == "rename-images":
        summary = rename_images(args.directory)
        for old_name, new_name in summary["renamed"]:
            print(f"✓ {old_name}")
            print(f"   → {new_name}")
        for name in summary["skipped"]:
            print(f"⚠ Already exists: {name} (skipping)")
        for name in summary["not_found"]:
            print(f"⚠ Not found: {name}")
        print("-" * 60)
        print(f"Total files to rename: {len(IMAGE_RENAME_MAP)}")
        print(f"  Renamed: {len(summary['renamed'])}")
        print(f"  Not found: {len(summary['not_found'])}")
        print(f"  Errors: {len(summary['errors'])}")
        return 1 if summary["errors"] else 0

    init_db()
    db = SessionLocal()
    try:
        if args.command == "seed":
            products = load_sample_products(args.file)
            print(f"Found {len(products)} products in {args.file}")
            print("-" * 60)
            stats = seed_products(db, products)
            for title in stats["created"]:
                print(f"✓ Created: {title}")
            for title in stats["skipped"]:
                print(f"⚠ Already present: {title}")
            for title in stats["errors"]:
                print(f"✗ Failed: {title}")
            print("-" * 60)
            print(f"Seed complete: {len(stats['created'])} created, {len(stats['skipped'])} skipped, "
                  f"{len(stats['errors'])} failed")
            return 1 if stats["errors"] else 0

        if args.command == "fix-image-urls":
            updates = fix_image_urls(db, args.old_extension, args.new_extension)
            print(f"Found {len(updates)} products with {args.old_extension} images")
            for update in updates:
                print(f"✓ Updated: {update['title']}")
                print(f"   Old: {update['old']}")
                print(f"   New: {update['new']}")
            return 0

        if args.command == "diagnose-auth":
            return 0 if print_checks(diagnose_auth(db, args.token)) else 1

        if args.command == "diagnose-products":
            return 0 if print_checks(diagnose_products(db)) else 1
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
