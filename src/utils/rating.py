"""Review rating arithmetic."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable

MIN_RATING = 1
MAX_RATING = 5


def compute_average_rating(ratings: Iterable[int]) -> float:
    """
    Mean of the given ratings rounded to one decimal place.

    Halves round up (4.25 -> 4.3), matching how the storefront displays
    ratings. An empty set of ratings averages to 0.0.
    """
    values = [int(r) for r in ratings]
    if not values:
        return 0.0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def rating_distribution(ratings: Iterable[int]) -> Dict[int, int]:
    """Count of reviews per star value, always with keys 1..5."""
    distribution = {star: 0 for star in range(MIN_RATING, MAX_RATING + 1)}
    for rating in ratings:
        if int(rating) in distribution:
            distribution[int(rating)] += 1
    return distribution


def rating_percentages(distribution: Dict[int, int]) -> Dict[int, int]:
    """Whole-number share of each star value."""
    total = sum(distribution.values())
    if total == 0:
        return {star: 0 for star in distribution}
    return {
        star: int((Decimal(count * 100) / Decimal(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        for star, count in distribution.items()
    }


def is_valid_rating(value) -> bool:
    """True when ``value`` parses as an integer within 1..5."""
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return False
    return MIN_RATING <= rating <= MAX_RATING
