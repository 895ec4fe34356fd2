"""Script to import products from a JSON file into an artisan's shop."""
import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

import httpx

PRODUCT_FIELDS = ("title", "description", "price", "category", "stock", "image_url")


def load_products(file_path: str) -> List[Dict[str, Any]]:
    """Load products from JSON file."""
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def sign_in(client: httpx.Client, email: str, password: str) -> Optional[str]:
    """Return a bearer token for the artisan account, or None."""
    response = client.post("/auth/sign-in", json={"email": email, "password": password})
    if response.status_code != 200:
        print(f"✗ Sign-in failed for {email} - {response.status_code}")
        print(f"  Error: {_error_detail(response)}")
        return None
    return response.json()["access_token"]


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def create_product(client: httpx.Client, token: str, product: Dict[str, Any]) -> bool:
    """Create a single product via API."""
    payload = {field: product[field] for field in PRODUCT_FIELDS if field in product}
    try:
        response = client.post(
            "/artisan/products",
            json=payload,
            headers={"Authorization": f"Bearer {token}"}
        )
    except httpx.HTTPError as e:
        print(f"✗ Error creating {product.get('title')}: {e}")
        return False

    if response.status_code == 201:
        print(f"✓ Created: {product['title']} ({product['category']})")
        return True
    print(f"✗ Failed: {product.get('title')} - {response.status_code}")
    print(f"  Error: {_error_detail(response)}")
    return False


def build_client(api_url: str) -> httpx.Client:
    return httpx.Client(base_url=api_url, timeout=30.0)


def main(argv: Optional[List[str]] = None) -> int:
    """Sign in as an artisan and create every product in the file."""
    parser = argparse.ArgumentParser(description="Import products through the Handcrafted Haven API")
    parser.add_argument("file", nargs="?", default="data/sample_products.json", help="JSON file with products")
    parser.add_argument("--api-url", default=os.getenv("HAVEN_API_URL", "http://localhost:8000"))
    parser.add_argument("--email", default=os.getenv("HAVEN_ARTISAN_EMAIL"), help="Artisan account email")
    parser.add_argument("--password", default=os.getenv("HAVEN_ARTISAN_PASSWORD"), help="Artisan account password")
    parser.add_argument("--skip", type=int, default=0, help="Skip the first N products in the file")
    args = parser.parse_args(argv)

    if not args.email or not args.password:
        parser.error("artisan credentials are required (--email/--password or HAVEN_ARTISAN_EMAIL/PASSWORD)")

    all_products = load_products(args.file)
    products = all_products[args.skip:]

    print(f"Found {len(all_products)} products in file, importing {len(products)}...")
    print("-" * 60)

    success_count = 0
    failed_count = 0

    with build_client(args.api_url) as client:
        token = sign_in(client, args.email, args.password)
        if token is None:
            return 1

        for product in products:
            if create_product(client, token, product):
                success_count += 1
            else:
                failed_count += 1

    print("-" * 60)
    print(f"Import complete: {success_count} succeeded, {failed_count} failed")
    return 1 if failed_count else 0


if __name__ == "__main__":
    sys.exit(main())
