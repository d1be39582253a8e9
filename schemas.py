"""
Schemas for the Quantum Build storefront

Product, User and Order mirror the documents stored in the JSON collections
(products.json, users.json, orders.json). The *Request models are API bodies.
"""
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

CATEGORIES = ("cpu", "gpu", "motherboard", "ram", "storage", "psu", "cabinet")

Category = Literal["cpu", "gpu", "motherboard", "ram", "storage", "psu", "cabinet"]


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: Category
    price: int = Field(..., ge=0)
    image: Optional[str] = None
    badge: Optional[str] = None
    specs: Optional[str] = None
    description: Optional[str] = None
    usage: Optional[str] = Field(None, description="Usage tag, e.g. Gaming")
    stock: Optional[int] = Field(None, ge=0)


class CartItem(Product):
    model_config = ConfigDict(frozen=False, populate_by_name=True)

    quantity: int = Field(1, ge=1, alias="qty")

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


class Build(BaseModel):
    build: List[Product] = []
    total: int = 0


class BuildRequest(BaseModel):
    budget: float = Field(..., ge=0)
    usage: Optional[str] = Field(None, description="gaming|editing|anything else = default")


class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class User(BaseModel):
    id: str
    name: str
    email: EmailStr
    password_hash: str = Field(..., description="Hashed password")
    created_at: Optional[str] = None


class UserOut(BaseModel):
    name: str
    email: str


class OrderRequest(BaseModel):
    # extra client fields (payment method, phone, ...) are kept on the order
    model_config = ConfigDict(extra="allow")

    items: Optional[List[CartItem]] = None
    user: Optional[Any] = None
    address: Optional[Any] = None


class Order(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    date: str
    status: str = "Pending"
    user: Any
    address: Any
    items: List[CartItem]
    total: int


class InventoryRow(BaseModel):
    name: str
    category: str
    stock: int


class Stats(BaseModel):
    totalOrders: int
    totalRevenue: float
    activeCustomers: int
    recentOrders: List[dict]
    inventory: List[InventoryRow]
