"""Tests for product management and catalogue queries."""
from decimal import Decimal

import pytest

from data.database.product_model import Product
from src.services import product_service
from src.services.product_service import DEFAULT_CATEGORIES
from src.utils.storage import PRODUCTS_BUCKET


def _create(db, artisan_id, **overrides):
    data = {
        "title": "Item",
        "description": "Made by hand.",
        "price": 10,
        "category": "Woodwork",
        "stock": 3,
    }
    data.update(overrides)
    result = product_service.create_product(db, artisan_id, data)
    assert result["success"], result.get("error")
    return result["product"]


class TestValidation:

    @pytest.mark.parametrize("field,value,message", [
        ("title", "   ", "Product title is required"),
        ("description", "", "Product description is required"),
        ("price", 0, "Valid product price is required"),
        ("price", "abc", "Valid product price is required"),
        ("category", None, "Product category is required"),
        ("stock", -1, "Valid stock quantity is required"),
    ])
    def test_rejects_invalid_fields(self, product_data, field, value, message):
        product_data[field] = value
        assert product_service.validate_product_data(product_data) == message

    def test_accepts_valid_product(self, product_data):
        assert product_service.validate_product_data(product_data) is None


class TestCrud:

    def test_create_then_fetch_round_trip(self, db, seller, product_data):
        result = product_service.create_product(db, seller.id, product_data)
        assert result["success"]
        assert result["message"] == "Product created successfully!"

        fetched = product_service.get_product(db, result["product"].id)["product"]
        assert fetched.title == product_data["title"]
        assert fetched.description == product_data["description"]
        assert fetched.price == Decimal("24.99")
        assert fetched.category == product_data["category"]
        assert fetched.stock == 15
        assert float(fetched.rating) == 0.0
        assert fetched.artisan.shop_name == "Paula's Pottery"

    def test_create_strips_strings(self, db, seller, product_data):
        product_data["title"] = "  Mug  "
        product = product_service.create_product(db, seller.id, product_data)["product"]
        assert product.title == "Mug"

    def test_invalid_create_does_not_insert(self, db, seller, product_data):
        product_data["title"] = ""
        result = product_service.create_product(db, seller.id, product_data)
        assert result == {"success": False, "error": "Product title is required"}
        assert db.query(Product).count() == 0

    def test_get_missing_product(self, db):
        result = product_service.get_product(db, "nope")
        assert not result["success"]
        assert result["not_found"]

    def test_artisan_products_only_include_own(self, db, seller, other_seller):
        first = _create(db, seller.id, title="First")
        second = _create(db, seller.id, title="Second")
        _create(db, other_seller.id, title="Not mine")

        result = product_service.get_artisan_products(db, seller.id)
        titles = [p.title for p in result["products"]]
        assert set(titles) == {first.title, second.title}
        assert result["message"] == "Found 2 products"

    def test_update_changes_only_given_fields(self, db, seller):
        product = _create(db, seller.id, title="Bowl", stock=4)
        result = product_service.update_product(db, product.id, seller.id, {"price": "55.00", "title": None})
        assert result["success"]
        assert result["product"].price == Decimal("55.00")
        assert result["product"].title == "Bowl"
        assert result["product"].stock == 4

    def test_update_validates_values(self, db, seller):
        product = _create(db, seller.id)
        result = product_service.update_product(db, product.id, seller.id, {"stock": -2})
        assert result["error"] == "Valid stock quantity is required"

    def test_update_requires_ownership(self, db, seller, other_seller):
        product = _create(db, seller.id)
        result = product_service.update_product(db, product.id, other_seller.id, {"title": "Stolen"})
        assert result["forbidden"]
        db.refresh(product)
        assert product.title == "Item"

    def test_delete_requires_ownership(self, db, seller, other_seller, storage):
        product = _create(db, seller.id)
        result = product_service.delete_product(db, product.id, other_seller.id, storage=storage)
        assert result["forbidden"]
        assert db.query(Product).count() == 1

    def test_delete_removes_stored_image(self, db, seller, storage, png_bytes):
        upload = product_service.upload_product_image(seller.id, "mug.png", "image/png", png_bytes, storage=storage)
        product = _create(db, seller.id, image_url=upload["image_url"])
        assert len(storage.list(PRODUCTS_BUCKET)) == 1

        result = product_service.delete_product(db, product.id, seller.id, storage=storage)
        assert result == {"success": True, "message": "Product deleted successfully"}
        assert storage.list(PRODUCTS_BUCKET) == []
        assert db.query(Product).count() == 0

    def test_delete_missing_product(self, db, seller, storage):
        assert product_service.delete_product(db, "missing", seller.id, storage=storage)["not_found"]


class TestImageUpload:

    def test_upload_returns_public_url(self, seller, storage, png_bytes):
        result = product_service.upload_product_image(seller.id, "mug.png", "image/png", png_bytes, storage=storage)
        assert result["success"]
        assert result["image_url"].startswith("http://testserver/storage/products/products/")
        assert result["image_url"].endswith(".png")

    def test_upload_rejects_invalid_type(self, seller, storage, png_bytes):
        result = product_service.upload_product_image(seller.id, "mug.gif", "image/gif", png_bytes, storage=storage)
        assert not result["success"]
        assert storage.list(PRODUCTS_BUCKET) == []


class TestCatalogue:

    @pytest.fixture
    def catalogue(self, db, seller):
        _create(db, seller.id, title="Ceramic Mug", price=24.99, category="Pottery & Ceramics", stock=15)
        _create(db, seller.id, title="Silver Pendant", price=45, category="Jewelry & Accessories", stock=0)
        _create(db, seller.id, title="Clay Plates", price=89.99, category="Pottery & Ceramics", stock=2)
        _create(db, seller.id, title="Abstract Painting", price=150, category="Art & Paintings", stock=1,
                description="Acrylic on canvas")

    def test_categories_sorted_and_distinct(self, db, catalogue):
        assert product_service.get_product_categories(db) == [
            "Art & Paintings", "Jewelry & Accessories", "Pottery & Ceramics"
        ]

    def test_categories_default_when_empty(self, db):
        assert product_service.get_product_categories(db) == DEFAULT_CATEGORIES

    def test_search_matches_title_description_and_category(self, db, catalogue):
        assert _titles(product_service.list_products(db, search="mug")) == {"Ceramic Mug"}
        assert _titles(product_service.list_products(db, search="ACRYLIC")) == {"Abstract Painting"}
        assert _titles(product_service.list_products(db, search="jewelry")) == {"Silver Pendant"}

    def test_search_treats_wildcards_literally(self, db, catalogue, seller):
        assert _titles(product_service.list_products(db, search="_")) == set()
        assert _titles(product_service.list_products(db, search="%")) == set()
        _create(db, seller.id, title="100% Wool Scarf", price=30, category="Textiles & Clothing", stock=3)
        _create(db, seller.id, title="100 Linen Napkins", price=18, category="Textiles & Clothing", stock=3)
        assert _titles(product_service.list_products(db, search="100%")) == {"100% Wool Scarf"}

    def test_category_filter(self, db, catalogue):
        result = product_service.list_products(db, category="Pottery & Ceramics")
        assert _titles(result) == {"Ceramic Mug", "Clay Plates"}
        assert result["total"] == 2
        assert product_service.list_products(db, category="All Categories")["total"] == 4

    @pytest.mark.parametrize("price_range,expected", [
        ("under-25", {"Ceramic Mug"}),
        ("25-50", {"Silver Pendant"}),
        ("50-100", {"Clay Plates"}),
        ("over-100", {"Abstract Painting"}),
    ])
    def test_price_ranges(self, db, catalogue, price_range, expected):
        assert _titles(product_service.list_products(db, price_range=price_range)) == expected

    def test_unknown_price_range(self, db):
        assert not product_service.list_products(db, price_range="cheap")["success"]

    def test_min_max_price(self, db, catalogue):
        result = product_service.list_products(db, min_price=45, max_price=89.99)
        assert _titles(result) == {"Silver Pendant", "Clay Plates"}

    def test_sort_by_price(self, db, catalogue):
        result = product_service.list_products(db, sort="price_asc")
        assert [p.title for p in result["products"]][0] == "Ceramic Mug"
        result = product_service.list_products(db, sort="price_desc")
        assert [p.title for p in result["products"]][0] == "Abstract Painting"

    def test_unknown_sort(self, db):
        assert product_service.list_products(db, sort="random")["error"] == "Unknown sort option 'random'"

    def test_pagination(self, db, catalogue):
        page_one = product_service.list_products(db, sort="price_asc", page=1, page_size=3)
        page_two = product_service.list_products(db, sort="price_asc", page=2, page_size=3)
        assert len(page_one["products"]) == 3
        assert [p.title for p in page_two["products"]] == ["Abstract Painting"]
        assert page_two["total"] == 4

    def test_catalogue_stats(self, db, catalogue):
        stats = product_service.get_catalogue_stats(db)
        # (24.99 + 45 + 89.99 + 150) / 4 = 77.495
        assert stats == {"total_products": 4, "categories_count": 3, "average_price": 77}

    def test_catalogue_stats_empty(self, db):
        assert product_service.get_catalogue_stats(db) == {
            "total_products": 0, "categories_count": 0, "average_price": 0
        }

    def test_inventory_stats(self, db, seller, catalogue):
        products = product_service.get_artisan_products(db, seller.id)["products"]
        stats = product_service.get_inventory_stats(products)
        assert stats["total"] == 4
        assert stats["in_stock"] == 3
        assert stats["out_of_stock"] == 1
        # 24.99 * 15 + 89.99 * 2 + 150 * 1
        assert stats["total_value"] == pytest.approx(704.83)


def _titles(result):
    return {p.title for p in result["products"]}
