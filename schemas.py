"""
Database Schemas for the StyleHub Store

Each Pydantic model represents a collection in MongoDB. The collection name
is the lowercase of the class name (e.g., Product -> "product").
"""
from typing import List, Optional, Literal
from pydantic import BaseModel, Field, EmailStr

Gender = Literal["men", "women", "unisex"]
OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]
ContactStatus = Literal["new", "read", "replied"]


class Product(BaseModel):
    """
    Products collection schema
    Collection: "product"
    """
    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field(..., description="Product description")
    price: float = Field(..., gt=0, description="Price in USD")
    originalPrice: Optional[float] = Field(None, ge=0, description="Pre-discount price, display only")
    image: str = Field(..., description="Primary image URL")
    category: str = Field(..., description="Category label, e.g. \"Men's Fashion\"")
    gender: Gender = "unisex"
    rating: float = Field(0, ge=0, le=5, description="Average rating")
    reviews: int = Field(0, ge=0, description="Number of reviews")
    inStock: bool = Field(True, description="Availability flag")
    quantity: int = Field(0, ge=0, description="Units in stock")
    isNew: bool = False
    isHot: bool = False
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list, description="Key selling points")


class ProductUpdate(BaseModel):
    """Partial update, only the fields the client sends are written."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    originalPrice: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[str] = None
    gender: Optional[Gender] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    reviews: Optional[int] = Field(None, ge=0)
    inStock: Optional[bool] = None
    quantity: Optional[int] = Field(None, ge=0)
    isNew: Optional[bool] = None
    isHot: Optional[bool] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    features: Optional[List[str]] = None


class CustomerInfo(BaseModel):
    name: str
    email: EmailStr
    address: str
    phone: str
    city: str
    country: str
    zipCode: str


class OrderItem(BaseModel):
    """Snapshot of a product at the time it was ordered."""
    productId: str = Field(..., description="Referenced product id")
    name: str
    price: float = Field(..., ge=0)
    image: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int = Field(..., ge=1)


class Order(BaseModel):
    """
    Orders collection schema
    Collection: "order"

    orderNumber is assigned by the server when the order is first stored.
    """
    customerInfo: CustomerInfo
    products: List[OrderItem] = Field(..., min_length=1)
    totalAmount: float = Field(..., ge=0)
    shippingCost: float = Field(0, ge=0)
    taxAmount: float = Field(0, ge=0)
    status: OrderStatus = "pending"
    paymentStatus: PaymentStatus = "pending"


class OrderUpdate(BaseModel):
    status: Optional[OrderStatus] = None
    paymentStatus: Optional[PaymentStatus] = None


class Contact(BaseModel):
    """
    Contact form submissions
    Collection: "contact"
    """
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: str = Field(..., min_length=1)
    status: ContactStatus = "new"
