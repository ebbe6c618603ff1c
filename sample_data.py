"""
Built-in catalogue.

Served when the database is not configured, unreachable, or empty, and used
as the seed list for ``POST /api/seed-products``. Fallback ids are plain
numbers as text ("1", "2", ...) so the frontend can still link to them.
"""
import copy
from typing import List, Optional

from schemas import Product

SORT_OPTIONS = ("price_asc", "price_desc", "newest", "rating")

_CATALOG = [
    Product(
        name="Men's Premium Blazer",
        description="Elevate your professional wardrobe with this premium blazer featuring superior tailoring and premium fabric.",
        price=89.99,
        originalPrice=119.99,
        image="https://images.unsplash.com/photo-1594938298603-c8148c4dae35?w=400&h=400&fit=crop",
        category="Men's Fashion",
        gender="men",
        rating=4.8,
        reviews=124,
        quantity=15,
        isNew=True,
        sizes=["S", "M", "L", "XL", "XXL"],
        colors=["Navy", "Black", "Charcoal"],
        features=["Premium Wool Blend", "Perfect Tailoring", "Wrinkle Resistant"],
    ),
    Product(
        name="Women's Summer Dress",
        description="Embrace summer elegance with this flowing dress featuring floral patterns and comfortable fabric.",
        price=59.99,
        originalPrice=79.99,
        image="https://images.unsplash.com/photo-1595777457583-95e059d581b8?w=400&h=400&fit=crop",
        category="Women's Fashion",
        gender="women",
        rating=4.6,
        reviews=89,
        quantity=30,
        isHot=True,
        sizes=["XS", "S", "M", "L"],
        colors=["Floral Red", "Floral Blue", "Solid White"],
        features=["Breathable Fabric", "Floral Pattern", "Comfort Fit"],
    ),
    Product(
        name="Classic Leather Sneakers",
        description="Minimal low-top sneakers in full-grain leather that pair with everything.",
        price=74.5,
        originalPrice=95.0,
        image="https://images.unsplash.com/photo-1549298916-b41d501d3772?w=400&h=400&fit=crop",
        category="Footwear",
        gender="unisex",
        rating=4.7,
        reviews=210,
        quantity=40,
        isHot=True,
        sizes=["38", "39", "40", "41", "42", "43", "44"],
        colors=["White", "Black"],
        features=["Full-Grain Leather", "Cushioned Insole", "Rubber Outsole"],
    ),
    Product(
        name="Men's Slim Fit Chinos",
        description="Stretch cotton chinos with a modern slim cut for the office or the weekend.",
        price=39.99,
        image="https://images.unsplash.com/photo-1473966968600-fa801b869a1a?w=400&h=400&fit=crop",
        category="Men's Fashion",
        gender="men",
        rating=4.3,
        reviews=57,
        quantity=25,
        sizes=["30", "32", "34", "36"],
        colors=["Khaki", "Olive", "Navy"],
        features=["Stretch Cotton", "Slim Fit"],
    ),
    Product(
        name="Women's Knit Cardigan",
        description="Soft chunky-knit cardigan that layers over anything on cooler days.",
        price=49.0,
        originalPrice=65.0,
        image="https://images.unsplash.com/photo-1434389677669-e08b4cac3105?w=400&h=400&fit=crop",
        category="Women's Fashion",
        gender="women",
        rating=4.5,
        reviews=73,
        quantity=18,
        isNew=True,
        sizes=["S", "M", "L"],
        colors=["Cream", "Camel"],
        features=["Chunky Knit", "Button Front", "Relaxed Fit"],
    ),
    Product(
        name="Canvas Weekender Bag",
        description="Roomy canvas travel bag with leather trim and a padded shoulder strap.",
        price=85.0,
        image="https://images.unsplash.com/photo-1553062407-98eeb64c6a62?w=400&h=400&fit=crop",
        category="Accessories",
        gender="unisex",
        rating=4.9,
        reviews=41,
        quantity=12,
        colors=["Sand", "Forest Green"],
        features=["Water Resistant Canvas", "Leather Trim", "Shoe Compartment"],
    ),
]

SAMPLE_PRODUCTS = []
for idx, item in enumerate(_CATALOG, start=1):
    s = item.model_dump()
    s["id"] = str(idx)
    SAMPLE_PRODUCTS.append(s)


def sample_products() -> List[dict]:
    return copy.deepcopy(SAMPLE_PRODUCTS)


def find_sample_product(product_id: str) -> Optional[dict]:
    for p in SAMPLE_PRODUCTS:
        if p["id"] == product_id:
            return copy.deepcopy(p)
    return None


def seed_catalog() -> List[dict]:
    return [item.model_dump() for item in _CATALOG]


def query_samples(
    category: Optional[str] = None,
    gender: Optional[str] = None,
    search: Optional[str] = None,
    sort: str = "newest",
    limit: Optional[int] = None,
) -> List[dict]:
    """Filter, sort and cap the fallback list the same way the database query does."""
    items = sample_products()
    if category:
        items = [p for p in items if category.lower() in p["category"].lower()]
    if gender:
        items = [p for p in items if p["gender"] == gender]
    if search:
        items = [p for p in items if search.lower() in p["name"].lower()]

    if sort == "price_asc":
        items.sort(key=lambda p: p["price"])
    elif sort == "price_desc":
        items.sort(key=lambda p: p["price"], reverse=True)
    elif sort == "rating":
        items.sort(key=lambda p: p["rating"], reverse=True)
    else:
        # no creation time on literals, so newest means highest id
        items.sort(key=lambda p: int(p["id"]), reverse=True)

    if limit:
        items = items[:limit]
    return items
