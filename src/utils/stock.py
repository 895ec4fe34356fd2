"""Stock status labels shown on product cards and the artisan dashboard."""
from typing import Dict

# Stock at or below this count (and above zero) is "Low Stock"
LOW_STOCK_THRESHOLD = 5

OUT_OF_STOCK = "Out of Stock"
LOW_STOCK = "Low Stock"
IN_STOCK = "In Stock"


def get_stock_status(stock: int) -> Dict[str, str]:
    """
    Derive the stock label for a quantity.

    Args:
        stock: Units available (negative values are treated as zero)

    Returns:
        Dictionary with ``label`` (Out of Stock / Low Stock / In Stock),
        ``text`` (label with the count, for seller views) and ``class_name``
    """
    stock = int(stock or 0)
    if stock <= 0:
        return {"label": OUT_OF_STOCK, "text": OUT_OF_STOCK, "class_name": "out-of-stock"}
    if stock <= LOW_STOCK_THRESHOLD:
        return {"label": LOW_STOCK, "text": f"{LOW_STOCK} ({stock})", "class_name": "low-stock"}
    return {"label": IN_STOCK, "text": f"{IN_STOCK} ({stock})", "class_name": "in-stock"}
