"""Tests for seller messages and account deletion."""
import pytest

from data.database.auth_models import AuthUser
from data.database.contact_models import ContactMessage
from data.database.product_model import Product
from data.database.profile_model import UserProfile
from src.services import contact_service, product_service, profile_service, review_service
from src.utils.storage import PRODUCTS_BUCKET, PROFILES_BUCKET


def _message(seller_id, **overrides):
    data = {
        "seller_id": seller_id,
        "sender_name": "Bea",
        "sender_email": " Bea@Example.com ",
        "subject": "Custom order",
        "message": "Could you make a larger mug?",
    }
    data.update(overrides)
    return data


class TestEmailValidation:

    @pytest.mark.parametrize("email", ["a@b.co", "first.last@shop.example.org"])
    def test_valid(self, email):
        assert contact_service.is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "no-at.example.com", "a@b", "a b@c.de", None])
    def test_invalid(self, email):
        assert not contact_service.is_valid_email(email)


class TestSendMessage:

    def test_stores_normalised_message(self, db, seller):
        result = contact_service.send_contact_message(db, _message(seller.id))
        assert result["success"]
        stored = db.get(ContactMessage, result["message_id"])
        assert stored.sender_email == "bea@example.com"
        assert stored.is_read is False
        assert stored.sender_id is None

    @pytest.mark.parametrize("field,value,message", [
        ("seller_id", "", "Seller ID is required"),
        ("sender_name", " ", "Your name is required"),
        ("sender_email", "", "Your email is required"),
        ("sender_email", "bea", "Please enter a valid email address"),
        ("subject", "", "Subject is required"),
        ("message", "   ", "Message content is required"),
        ("message", "x" * 2001, "Message is too long (maximum 2000 characters)"),
    ])
    def test_validation(self, db, seller, field, value, message):
        data = _message(seller.id)
        data[field] = value
        assert contact_service.send_contact_message(db, data) == {"success": False, "error": message}

    def test_unknown_seller(self, db):
        result = contact_service.send_contact_message(db, _message("missing"))
        assert result["error"] == "Seller not found. Please try again."


class TestInbox:

    @pytest.fixture
    def inbox(self, db, seller, other_seller):
        ids = [
            contact_service.send_contact_message(db, _message(seller.id, subject=f"Hello {i}"))["message_id"]
            for i in range(3)
        ]
        contact_service.send_contact_message(db, _message(other_seller.id))
        return ids

    def test_lists_only_own_messages(self, db, seller, inbox):
        result = contact_service.get_seller_messages(db, seller.id)
        assert result["count"] == 3
        assert {m.id for m in result["messages"]} == set(inbox)

    def test_limit(self, db, seller, inbox):
        assert len(contact_service.get_seller_messages(db, seller.id, limit=2)["messages"]) == 2

    def test_mark_as_read_updates_unread(self, db, seller, inbox):
        assert contact_service.get_unread_message_count(db, seller.id)["count"] == 3
        result = contact_service.mark_message_as_read(db, inbox[0], seller.id)
        assert result == {"success": True, "message": "Message marked as read"}
        assert contact_service.get_unread_message_count(db, seller.id)["count"] == 2

        unread = contact_service.get_seller_messages(db, seller.id, unread_only=True)["messages"]
        assert inbox[0] not in {m.id for m in unread}
        assert db.get(ContactMessage, inbox[0]).read_at is not None

    def test_cannot_touch_other_sellers_messages(self, db, other_seller, inbox):
        assert contact_service.mark_message_as_read(db, inbox[0], other_seller.id)["not_found"]
        assert contact_service.delete_message(db, inbox[0], other_seller.id)["not_found"]

    def test_delete_message(self, db, seller, inbox):
        assert contact_service.delete_message(db, inbox[1], seller.id)["success"]
        assert contact_service.get_seller_messages(db, seller.id)["count"] == 2


class TestDeleteAccount:

    def test_requires_exact_confirmation(self, db, seller, storage):
        result = contact_service.delete_seller_account(db, seller.id, "delete my account", storage=storage)
        assert result["error"] == "Confirmation text does not match. Account deletion cancelled."
        assert db.get(UserProfile, seller.id) is not None

    def test_deletes_everything_owned(self, db, seller, buyer, storage, png_bytes):
        profile_service.upload_profile_image(db, seller.id, "me.png", "image/png", png_bytes, storage=storage)
        image = product_service.upload_product_image(seller.id, "mug.png", "image/png", png_bytes, storage=storage)
        product = product_service.create_product(db, seller.id, {
            "title": "Mug", "description": "Stoneware", "price": 20, "category": "Pottery", "stock": 1,
            "image_url": image["image_url"],
        })["product"]
        product_id = product.id
        review_service.create_product_review(db, {
            "product_id": product_id, "reviewer_name": "Bea", "rating": 5, "comment": "Great", "user_id": buyer.id
        })
        contact_service.send_contact_message(db, _message(seller.id))

        result = contact_service.delete_seller_account(db, seller.id, "DELETE MY ACCOUNT", storage=storage)
        assert result["success"]

        db.expire_all()
        assert db.get(UserProfile, seller.id) is None
        assert db.get(AuthUser, seller.id) is None
        assert db.query(Product).count() == 0
        assert db.query(ContactMessage).count() == 0
        assert review_service.get_product_reviews(db, product_id)["total_count"] == 0
        assert storage.list(PRODUCTS_BUCKET) == []
        assert storage.list(PROFILES_BUCKET) == []
        # Other accounts are untouched
        assert db.get(UserProfile, buyer.id) is not None

    def test_unknown_account(self, db, storage):
        result = contact_service.delete_seller_account(db, "missing", "DELETE MY ACCOUNT", storage=storage)
        assert result["not_found"]
