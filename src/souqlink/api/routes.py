"""FastAPI routes for SouqLink — auth, users, catalogue, orders, couriers and admin."""

import json

from fastapi import APIRouter, Query, Request
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from souqlink.api.schemas import (
    AdminStatsResponse,
    ClaimOrderRequest,
    CourierLocationRequest,
    CourierStatsResponse,
    CreateProductRequest,
    LoginRequest,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductResponse,
    RegisterRequest,
    TrackingResponse,
    UpdateOrderRequest,
    UpdateProductRequest,
    UpdateUserRequest,
    UserResponse,
)
from souqlink.media import get_image_store
from souqlink.order.claim import ClaimOrder
from souqlink.order.modification import RecordCourierLocation, UpdateOrder
from souqlink.order.order import Order
from souqlink.order.placement import PlaceOrder
from souqlink.product.management import CreateProduct, UpdateProduct
from souqlink.product.product import Product
from souqlink.user.profile import UpdateUserProfile
from souqlink.user.registration import LoginUser, RegisterUser
from souqlink.user.user import User
from souqlink.views.order_items import list_order_items
from souqlink.views.stats import admin_stats, courier_stats
from souqlink.views.tracking import get_tracking


async def _json_body(request: Request) -> dict:
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError({"body": ["Request body must be valid JSON"]}) from None
    if not isinstance(payload, dict):
        raise ValidationError({"body": ["Request body must be a JSON object"]})
    return payload


def _user(user_id) -> UserResponse:
    return UserResponse.model_validate(current_domain.repository_for(User).get(user_id))


def _product(product_id) -> ProductResponse:
    return ProductResponse.model_validate(current_domain.repository_for(Product).get(product_id))


def _order(order_id) -> OrderResponse:
    return OrderResponse.model_validate(current_domain.repository_for(Order).get(order_id))


def _orders(orders) -> list[OrderResponse]:
    return [OrderResponse.model_validate(order) for order in orders]


# ---------------------------------------------------------------------------
# Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest) -> UserResponse:
    command = LoginUser(
        email=body.email,
        name=body.name,
        phone=body.phone,
        role=body.role,
        password=body.password,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return _user(user_id)


@auth_router.get("/me", response_model=UserResponse)
async def me(email: str) -> UserResponse:
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None:
        raise ObjectNotFoundError("User not found")
    return UserResponse.model_validate(user)


@auth_router.post("/register", status_code=201, response_model=UserResponse)
async def register(body: RegisterRequest) -> UserResponse:
    command = RegisterUser(
        email=body.email,
        name=body.name,
        password=body.password,
        phone=body.phone,
        role=body.role,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return _user(user_id)


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.get("", response_model=list[UserResponse])
async def list_users() -> list[UserResponse]:
    users = current_domain.repository_for(User).list_all()
    return [UserResponse.model_validate(user) for user in users]


@user_router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, body: UpdateUserRequest) -> UserResponse:
    command = UpdateUserProfile(user_id=user_id, name=body.name, phone=body.phone)
    current_domain.process(command, asynchronous=False)
    return _user(user_id)


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("")
async def list_products(active: bool = False, product_id: str | None = Query(None, alias="id")):
    if product_id:
        return _product(product_id)

    repo = current_domain.repository_for(Product)
    products = repo.list_active() if active else repo.list_all()
    return [ProductResponse.model_validate(product) for product in products]


@product_router.get("/active", response_model=list[ProductResponse])
async def list_active_products() -> list[ProductResponse]:
    products = current_domain.repository_for(Product).list_active()
    return [ProductResponse.model_validate(product) for product in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product(product_id)


async def _product_body(request: Request, model):
    """Parse a JSON body or a multipart form; returns the validated model and the uploaded ``image``, if any."""
    if not request.headers.get("content-type", "").startswith("multipart/form-data"):
        return model.model_validate(await _json_body(request)), None

    form = await request.form()
    image = form.get("image")
    body = model.model_validate({key: value for key, value in form.items() if key != "image" and isinstance(value, str)})
    if image is None or isinstance(image, str) or not image.filename:
        return body, None
    return body, image


async def _store_image(image) -> str | None:
    if image is None:
        return None
    content = await image.read()
    return get_image_store().save(image.filename, content, image.content_type)


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(request: Request) -> ProductResponse:
    """Create a product from a JSON body or a multipart form with an optional ``image`` file."""
    body, image = await _product_body(request, CreateProductRequest)
    uploaded_url = await _store_image(image)

    command = CreateProduct(
        name=body.name,
        category=body.category,
        indicative_price=body.indicative_price,
        image_url=uploaded_url or body.image_url,
        is_active=body.is_active,
    )
    try:
        product_id = current_domain.process(command, asynchronous=False)
    except ValidationError:
        if uploaded_url:
            get_image_store().delete(uploaded_url)
        raise
    return _product(product_id)


@product_router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, request: Request) -> ProductResponse:
    """Partially update a product; a multipart ``image`` replaces the stored one."""
    previous_url = current_domain.repository_for(Product).get(product_id).image_url
    body, image = await _product_body(request, UpdateProductRequest)
    uploaded_url = await _store_image(image)

    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        category=body.category,
        indicative_price=body.indicative_price,
        image_url=uploaded_url or body.image_url,
        is_active=body.is_active,
    )
    try:
        current_domain.process(command, asynchronous=False)
    except ValidationError:
        if uploaded_url:
            get_image_store().delete(uploaded_url)
        raise

    product = _product(product_id)
    if previous_url and previous_url != product.image_url:
        get_image_store().delete(previous_url)
    return product


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _place_order(body: PlaceOrderRequest) -> OrderResponse:
    items_data = [item.model_dump() for item in body.items]
    command = PlaceOrder(
        order_type=body.order_type,
        customer_email=body.customer_email,
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
        delivery_address=body.delivery_address,
        items=json.dumps(items_data),
        souq_list_text=body.souq_list_text,
        notes=body.notes,
        quality_preference=body.quality_preference,
        budget_enabled=body.budget_enabled,
        budget_max=body.budget_max,
        preferred_time_window=body.preferred_time_window,
        pickup_address=body.pickup_address,
        pickup_lat=body.pickup_lat,
        pickup_lng=body.pickup_lng,
        dropoff_lat=body.dropoff_lat,
        dropoff_lng=body.dropoff_lng,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _order(order_id)


def _claim_order(order_id: str, body: ClaimOrderRequest) -> OrderResponse:
    command = ClaimOrder(order_id=order_id, courier_email=body.courier_email)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


def _update_order(order_id: str, body: UpdateOrderRequest) -> OrderResponse:
    command = UpdateOrder(
        order_id=order_id,
        status=body.status,
        assigned_courier_email=body.assigned_courier_email,
        final_total=body.final_total,
        notes=body.notes,
        courier_lat=body.courier_lat,
        courier_lng=body.courier_lng,
        acting_courier_email=body.courier_email,
    )
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


def _require_id(order_id, action):
    if not order_id:
        raise ValidationError({"id": [f"is required for action={action}"]})
    return order_id


@order_router.get("")
async def list_orders(
    action: str | None = None,
    role: str | None = None,
    email: str | None = None,
    order_id: str | None = Query(None, alias="id"),
):
    """Order listings and lookups selected by query parameters."""
    repo = current_domain.repository_for(Order)

    if action == "available":
        return _orders(repo.list_available())
    if action == "tracking":
        return TrackingResponse.model_validate(get_tracking(_require_id(order_id, action)))
    if action == "items":
        return [OrderItemResponse.model_validate(row) for row in list_order_items(_require_id(order_id, action))]
    if action:
        raise ValidationError({"action": [f"Unknown action {action!r}"]})

    if order_id:
        return _order(order_id)
    if role == "customer" and email:
        return _orders(repo.list_for_customer(email))
    if role == "courier" and email:
        return _orders(repo.list_for_courier(email))
    if role or email:
        raise ValidationError({"role": ["Filter by role=customer or role=courier together with email"]})

    return _orders(repo.list_all())


@order_router.post("", response_model=OrderResponse)
async def place_order(
    request: Request,
    action: str | None = None,
    order_id: str | None = Query(None, alias="id"),
) -> OrderResponse:
    """Place an order; ``?action=assign`` and ``?action=status`` act on an existing one."""
    payload = await _json_body(request)

    if action == "assign":
        return _claim_order(_require_id(order_id, action), ClaimOrderRequest.model_validate(payload))
    if action == "status":
        body = UpdateOrderRequest.model_validate(payload)
        if not body.status:
            raise ValidationError({"status": ["is required"]})
        return _update_order(_require_id(order_id, action), body)
    if action:
        raise ValidationError({"action": [f"Unknown action {action!r}"]})

    return _place_order(PlaceOrderRequest.model_validate(payload))


@order_router.get("/available", response_model=list[OrderResponse])
async def list_available_orders() -> list[OrderResponse]:
    return _orders(current_domain.repository_for(Order).list_available())


@order_router.get("/customer/{email}", response_model=list[OrderResponse])
async def list_customer_orders(email: str) -> list[OrderResponse]:
    return _orders(current_domain.repository_for(Order).list_for_customer(email))


@order_router.get("/courier/{email}", response_model=list[OrderResponse])
async def list_courier_orders(email: str) -> list[OrderResponse]:
    return _orders(current_domain.repository_for(Order).list_for_courier(email))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order(order_id)


@order_router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(order_id: str, body: UpdateOrderRequest) -> OrderResponse:
    return _update_order(order_id, body)


@order_router.post("/{order_id}/claim", response_model=OrderResponse)
async def claim_order(order_id: str, body: ClaimOrderRequest) -> OrderResponse:
    return _claim_order(order_id, body)


@order_router.post("/{order_id}/courier-location", response_model=OrderResponse)
async def record_courier_location(order_id: str, body: CourierLocationRequest) -> OrderResponse:
    command = RecordCourierLocation(order_id=order_id, lat=body.lat, lng=body.lng)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.get("/{order_id}/items", response_model=list[OrderItemResponse])
async def get_order_items(order_id: str) -> list[OrderItemResponse]:
    return [OrderItemResponse.model_validate(row) for row in list_order_items(order_id)]


@order_router.get("/{order_id}/tracking", response_model=TrackingResponse)
async def get_order_tracking(order_id: str) -> TrackingResponse:
    return TrackingResponse.model_validate(get_tracking(order_id))


# ---------------------------------------------------------------------------
# Courier Router
# ---------------------------------------------------------------------------
courier_router = APIRouter(prefix="/couriers", tags=["couriers"])


@courier_router.get("", response_model=list[UserResponse])
async def list_couriers() -> list[UserResponse]:
    couriers = current_domain.repository_for(User).list_couriers()
    return [UserResponse.model_validate(courier) for courier in couriers]


@courier_router.get("/stats/{email}", response_model=CourierStatsResponse)
async def get_courier_stats(email: str) -> CourierStatsResponse:
    return CourierStatsResponse.model_validate(courier_stats(email))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/stats", response_model=AdminStatsResponse)
async def get_admin_stats() -> AdminStatsResponse:
    return AdminStatsResponse.model_validate(admin_stats())
