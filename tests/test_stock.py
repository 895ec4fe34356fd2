"""Tests for stock status labels."""
import pytest

from src.utils.stock import get_stock_status


@pytest.mark.parametrize("stock,label", [
    (0, "Out of Stock"),
    (-3, "Out of Stock"),
    (1, "Low Stock"),
    (5, "Low Stock"),
    (6, "In Stock"),
    (120, "In Stock"),
])
def test_label_boundaries(stock, label):
    assert get_stock_status(stock)["label"] == label


def test_text_includes_count():
    assert get_stock_status(3)["text"] == "Low Stock (3)"
    assert get_stock_status(12)["text"] == "In Stock (12)"
    assert get_stock_status(0)["text"] == "Out of Stock"


def test_class_names():
    assert get_stock_status(0)["class_name"] == "out-of-stock"
    assert get_stock_status(2)["class_name"] == "low-stock"
    assert get_stock_status(9)["class_name"] == "in-stock"


def test_none_counts_as_zero():
    assert get_stock_status(None)["label"] == "Out of Stock"
