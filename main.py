import os
import logging
import secrets
import time
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import (
    close,
    count_documents,
    create_document,
    delete_document,
    find_by_id,
    get_db,
    get_documents,
    insert_documents,
    is_connected,
    serialize,
    to_object_id,
    update_document,
)
from schemas import Contact, Gender, Order, OrderUpdate, Product, ProductUpdate
from sample_data import find_sample_product, query_samples, seed_catalog

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

PORT = int(os.getenv("PORT", 8000))
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

ENDPOINTS = [
    "GET    /",
    "GET    /api/health",
    "GET    /api/products",
    "GET    /api/products/featured",
    "GET    /api/products/bestsellers",
    "GET    /api/products/:id",
    "POST   /api/products",
    "PUT    /api/products/:id",
    "DELETE /api/products/:id",
    "POST   /api/seed-products",
    "GET    /api/orders",
    "POST   /api/orders",
    "GET    /api/orders/:id",
    "PUT    /api/orders/:id",
    "POST   /api/contact",
]

SortOption = Literal["price_asc", "price_desc", "newest", "rating"]

PRODUCT_SORTS = {
    "price_asc": [("price", 1)],
    "price_desc": [("price", -1)],
    "newest": [("createdAt", -1), ("_id", -1)],
    "rating": [("rating", -1)],
}

# Optional product fields that PUT may reset with an explicit null
CLEARABLE_PRODUCT_FIELDS = {"originalPrice"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 50)
    logger.info("StyleHub Store API starting")
    logger.info("Port: %s  Environment: %s", PORT, ENVIRONMENT)
    logger.info("Database: %s", "configured" if get_db() is not None else "not configured, serving sample data")
    logger.info("=" * 50)
    yield
    close()


app = FastAPI(title="StyleHub Store API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Errors
class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class StoreUnavailable(ApiError):
    status_code = 503

    def __init__(self, message: str = "Database not connected"):
        super().__init__(message)


def error_envelope(status_code: int, message: str, **extra) -> JSONResponse:
    body = {"success": False, "message": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def internal_error(exc: Exception) -> JSONResponse:
    logger.error("Unhandled error: %s", exc, exc_info=exc)
    extra = {} if ENVIRONMENT == "production" else {"error": str(exc)}
    return error_envelope(500, "Internal server error", **extra)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return error_envelope(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    summary = "; ".join(f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors)
    return error_envelope(400, f"Validation failed - {summary}", errors=errors)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_envelope(
            404,
            "Route not found",
            requestedUrl=str(request.url.path),
            availableEndpoints=ENDPOINTS,
        )
    return error_envelope(exc.status_code, str(exc.detail))


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    return internal_error(exc)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    return internal_error(exc)


# Helpers
def require_db(db: Optional[Database]) -> Database:
    if db is None:
        raise StoreUnavailable()
    return db


def product_filter(category: Optional[str], gender: Optional[str], search: Optional[str]) -> dict:
    filt = {}
    if category:
        filt["category"] = {"$regex": re.escape(category), "$options": "i"}
    if gender:
        filt["gender"] = gender
    if search:
        filt["name"] = {"$regex": re.escape(search), "$options": "i"}
    return filt


def generate_order_number(existing_count: int) -> str:
    """ORD-<epoch ms>-<count + 1>-<random hex>. The random tail keeps numbers
    unique when two orders land in the same millisecond with the same count."""
    millis = int(time.time() * 1000)
    return f"ORD-{millis}-{existing_count + 1}-{secrets.token_hex(2).upper()}"


def expand_order(db: Database, order: dict) -> dict:
    """Attach the referenced product to each line item as ``product``.

    The snapshot fields stored with the line item are left as they were at
    order time, even if the live product has changed since.
    """
    order = serialize(order)
    items = order.get("products", [])
    oids = [oid for oid in (to_object_id(i.get("productId")) for i in items) if oid is not None]
    found = {}
    if oids:
        for doc in db["product"].find({"_id": {"$in": oids}}):
            found[str(doc["_id"])] = serialize(doc)
    for item in items:
        pid = item.get("productId")
        item["product"] = found.get(pid) or find_sample_product(pid)
    return order


# Root / Health
@app.get("/")
def read_root(db: Optional[Database] = Depends(get_db)):
    return {
        "message": "StyleHub Store API is running",
        "status": "SUCCESS",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "Connected" if is_connected(db) else "Disconnected",
        "endpoints": ENDPOINTS,
    }


@app.get("/api/health")
def health(db: Optional[Database] = Depends(get_db)):
    return {
        "status": "Healthy",
        "server": "FastAPI",
        "port": PORT,
        "environment": ENVIRONMENT,
        "database": "Connected" if is_connected(db) else "Disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Products
@app.get("/api/products")
def list_products(
    category: Optional[str] = None,
    gender: Optional[Gender] = None,
    search: Optional[str] = None,
    sort: SortOption = "newest",
    limit: Optional[int] = Query(None, gt=0),
    db: Optional[Database] = Depends(get_db),
):
    if db is None:
        reason = "Database not connected - using sample data"
    else:
        try:
            docs = get_documents(db, "product", product_filter(category, gender, search), PRODUCT_SORTS[sort], limit)
            catalog_empty = not docs and count_documents(db, "product") == 0
        except PyMongoError as e:
            logger.warning("Product query failed, serving sample data: %s", e)
            reason = "Database unavailable - using sample data"
        else:
            # only an empty collection falls back, a filter that matches nothing stays empty
            if not catalog_empty:
                products = [serialize(d) for d in docs]
                return {"success": True, "count": len(products), "source": "database", "products": products}
            reason = "No products in database - using sample data"

    products = query_samples(category=category, gender=gender, search=search, sort=sort, limit=limit)
    return {
        "success": True,
        "count": len(products),
        "source": "sample data",
        "message": reason,
        "products": products,
    }


@app.get("/api/products/featured")
def featured_products(db: Optional[Database] = Depends(get_db)):
    docs = get_documents(
        require_db(db),
        "product",
        {"$or": [{"isNew": True}, {"isHot": True}]},
        PRODUCT_SORTS["newest"],
        6,
    )
    products = [serialize(d) for d in docs]
    return {"success": True, "count": len(products), "products": products}


@app.get("/api/products/bestsellers")
def bestseller_products(db: Optional[Database] = Depends(get_db)):
    docs = get_documents(require_db(db), "product", {}, [("rating", -1), ("reviews", -1)], 8)
    products = [serialize(d) for d in docs]
    return {"success": True, "count": len(products), "products": products}


@app.get("/api/products/{product_id}")
def get_product(product_id: str, db: Optional[Database] = Depends(get_db)):
    doc = None
    if db is not None:
        try:
            doc = find_by_id(db, "product", product_id)
        except PyMongoError as e:
            logger.warning("Product lookup failed, checking sample data: %s", e)
    if doc is not None:
        return {"success": True, "source": "database", "product": serialize(doc)}
    sample = find_sample_product(product_id)
    if sample is None:
        raise NotFound("Product not found")
    return {"success": True, "source": "sample data", "product": sample}


@app.post("/api/products", status_code=201)
def create_product(payload: Product, db: Optional[Database] = Depends(get_db)):
    doc = create_document(require_db(db), "product", payload)
    logger.info("Product created: %s", doc["_id"])
    return {"success": True, "message": "Product created successfully", "product": serialize(doc)}


@app.put("/api/products/{product_id}")
def update_product(product_id: str, payload: ProductUpdate, db: Optional[Database] = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field not in CLEARABLE_PRODUCT_FIELDS:
            raise ValidationFailed(f"{field} cannot be null")
    if not changes:
        raise ValidationFailed("No fields to update")
    doc = update_document(require_db(db), "product", product_id, changes)
    if doc is None:
        raise NotFound("Product not found")
    return {"success": True, "message": "Product updated successfully", "product": serialize(doc)}


@app.delete("/api/products/{product_id}")
def delete_product(product_id: str, db: Optional[Database] = Depends(get_db)):
    if not delete_document(require_db(db), "product", product_id):
        raise NotFound("Product not found")
    logger.info("Product deleted: %s", product_id)
    return {"success": True, "message": "Product deleted successfully"}


@app.post("/api/seed-products", status_code=201)
def seed_products(db: Optional[Database] = Depends(get_db)):
    """Replace the whole product collection with the built-in catalogue."""
    db = require_db(db)
    removed = db["product"].delete_many({}).deleted_count
    docs = insert_documents(db, "product", seed_catalog())
    logger.info("Seeded products: removed %d, inserted %d", removed, len(docs))
    return {
        "success": True,
        "message": f"Seeded {len(docs)} products",
        "count": len(docs),
        "products": [serialize(d) for d in docs],
    }


# Orders
@app.get("/api/orders")
def list_orders(email: Optional[str] = None, db: Optional[Database] = Depends(get_db)):
    db = require_db(db)
    filt = {"customerInfo.email": email} if email else {}
    docs = get_documents(db, "order", filt, [("createdAt", -1), ("_id", -1)])
    orders = [expand_order(db, d) for d in docs]
    return {"success": True, "count": len(orders), "orders": orders}


@app.post("/api/orders", status_code=201)
def create_order(payload: Order, db: Optional[Database] = Depends(get_db)):
    db = require_db(db)
    data = payload.model_dump()
    data["orderNumber"] = generate_order_number(count_documents(db, "order"))
    doc = create_document(db, "order", data)
    logger.info("Order %s created for %s", data["orderNumber"], payload.customerInfo.email)
    return {"success": True, "message": "Order created successfully", "order": expand_order(db, doc)}


@app.get("/api/orders/{order_id}")
def get_order(order_id: str, db: Optional[Database] = Depends(get_db)):
    db = require_db(db)
    doc = find_by_id(db, "order", order_id)
    if doc is None:
        raise NotFound("Order not found")
    return {"success": True, "order": expand_order(db, doc)}


@app.put("/api/orders/{order_id}")
def update_order(order_id: str, payload: OrderUpdate, db: Optional[Database] = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailed("Provide status or paymentStatus to update")
    db = require_db(db)
    doc = update_document(db, "order", order_id, changes)
    if doc is None:
        raise NotFound("Order not found")
    return {"success": True, "message": "Order updated successfully", "order": expand_order(db, doc)}


# Contact
@app.post("/api/contact", status_code=201)
def submit_contact(payload: Contact, db: Optional[Database] = Depends(get_db)):
    saved = False
    if db is not None:
        try:
            create_document(db, "contact", payload)
            saved = True
        except PyMongoError as e:
            logger.warning("Could not store contact message from %s: %s", payload.email, e)
    else:
        logger.info("Contact message (not stored) from %s %s <%s>: %s",
                    payload.firstName, payload.lastName, payload.email, payload.subject or "no subject")
    return {
        "success": True,
        "message": "Thank you for contacting us! We will get back to you soon.",
        "saved": saved,
    }



if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
