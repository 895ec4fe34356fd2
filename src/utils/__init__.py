"""Utility functions for the application."""
from .pricing import format_price, calculate_discount_percentage
from .rating import compute_average_rating, rating_distribution, rating_percentages, is_valid_rating
from .stock import get_stock_status

__all__ = [
    "format_price",
    "calculate_discount_percentage",
    "compute_average_rating",
    "rating_distribution",
    "rating_percentages",
    "is_valid_rating",
    "get_stock_status"
]
