"""Pydantic request/response schemas for the SouqLink API.

These are the external contracts: camelCase on the wire, snake_case
accepted too, and separate from the internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------------------------------------------------------------------------
# Auth & users
# ---------------------------------------------------------------------------
class LoginRequest(CamelModel):
    email: str = Field(..., max_length=254)
    name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=30)
    role: str | None = Field(None, max_length=20)
    password: str | None = Field(None, max_length=128)


class RegisterRequest(CamelModel):
    email: str = Field(..., max_length=254)
    name: str = Field(..., max_length=100)
    password: str = Field(..., max_length=128)
    phone: str | None = Field(None, max_length=30)
    role: str | None = Field(None, max_length=20)


class UpdateUserRequest(CamelModel):
    name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=30)


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    phone: str | None = None
    role: str
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CreateProductRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Fresh mint",
                    "category": "fruits_vegetables",
                    "indicativePrice": 5.0,
                    "imageUrl": None,
                    "isActive": True,
                }
            ]
        }
    )

    name: str = Field(..., max_length=255)
    category: str = Field(..., max_length=50)
    indicative_price: float = Field(0.0, ge=0)
    image_url: str | None = Field(None, max_length=500)
    is_active: bool = True


class UpdateProductRequest(CamelModel):
    name: str | None = Field(None, max_length=255)
    category: str | None = Field(None, max_length=50)
    indicative_price: float | None = Field(None, ge=0)
    image_url: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class ProductResponse(CamelModel):
    id: str
    name: str
    category: str
    image_url: str | None = None
    indicative_price: float
    is_active: bool
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemInput(CamelModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    indicative_price: float | None = Field(None, ge=0)


class PlaceOrderRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "orderType": "souq",
                    "customerEmail": "amina@example.com",
                    "customerName": "Amina",
                    "customerPhone": "+212600000000",
                    "deliveryAddress": "12 Rue des Oliviers, Casablanca",
                    "souqListText": "2kg tomatoes, fresh mint, 1 dozen eggs",
                    "qualityPreference": "best_quality",
                    "budgetEnabled": True,
                    "budgetMax": 150.0,
                    "preferredTimeWindow": "morning",
                }
            ]
        }
    )

    order_type: str = Field("supermarket", max_length=20)
    customer_email: str = Field(..., max_length=254)
    customer_name: str = Field(..., max_length=100)
    customer_phone: str = Field(..., max_length=30)
    delivery_address: str = Field(..., max_length=500)
    items: list[OrderItemInput] = Field(default_factory=list)
    souq_list_text: str | None = None
    notes: str | None = None
    quality_preference: str | None = None
    budget_enabled: bool = False
    budget_max: float | None = Field(None, ge=0)
    preferred_time_window: str | None = None
    pickup_address: str | None = Field(None, max_length=500)
    pickup_lat: float | None = None
    pickup_lng: float | None = None
    dropoff_lat: float | None = None
    dropoff_lng: float | None = None


class UpdateOrderRequest(CamelModel):
    """Partial order update. ``courierEmail`` restricts the update to that courier's orders."""

    status: str | None = None
    assigned_courier_email: str | None = None
    final_total: float | None = Field(None, ge=0)
    notes: str | None = None
    courier_lat: float | None = None
    courier_lng: float | None = None
    courier_email: str | None = None


class ClaimOrderRequest(CamelModel):
    courier_email: str = Field(..., max_length=254)


class CourierLocationRequest(CamelModel):
    lat: float
    lng: float


class OrderResponse(CamelModel):
    id: str
    order_type: str
    customer_email: str
    customer_name: str
    customer_phone: str
    delivery_address: str
    status: str
    assigned_courier_email: str | None = None
    delivery_fee: float
    final_total: float | None = None
    notes: str | None = None
    souq_list_text: str | None = None
    quality_preference: str | None = None
    budget_enabled: bool = False
    budget_max: float | None = None
    preferred_time_window: str | None = None
    pickup_address: str | None = None
    pickup_lat: float | None = None
    pickup_lng: float | None = None
    dropoff_lat: float | None = None
    dropoff_lng: float | None = None
    courier_lat: float | None = None
    courier_lng: float | None = None
    courier_last_update: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ItemProduct(CamelModel):
    name: str
    image_url: str | None = None


class OrderItemResponse(CamelModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    indicative_price: float
    product: ItemProduct


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------
class Place(CamelModel):
    address: str | None = None
    lat: float
    lng: float


class CourierPosition(CamelModel):
    email: str
    name: str
    phone: str | None = None
    lat: float | None = None
    lng: float | None = None
    last_update: datetime | None = None


class TimelineStep(CamelModel):
    key: str
    label: str
    completed: bool
    current: bool


class TrackingResponse(CamelModel):
    order_id: str
    status: str
    order_type: str
    created_at: datetime | None = None
    pickup: Place
    dropoff: Place
    courier: CourierPosition | None = None
    timeline: list[TimelineStep]
    progress: float


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------
class OrdersByStatus(CamelModel):
    received: int = 0
    shopping: int = 0
    # Keyed by status value on the wire
    in_delivery: int = Field(0, alias="in_delivery")
    delivered: int = 0


class AdminStatsResponse(CamelModel):
    total_orders: int
    supermarket_orders: int
    souq_orders: int
    orders_by_status: OrdersByStatus


class CourierStatsResponse(CamelModel):
    total_assigned: int
    delivered: int
    active: int


class HealthResponse(BaseModel):
    status: str = "ok"
    domain: str
