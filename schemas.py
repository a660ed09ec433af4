"""
Database Schemas for the Sayad Alsamak store

Each collection model below corresponds to a MongoDB collection.
The collection name is the lowercase class name (e.g., OrderItem -> "orderitem").
Fields are snake_case in Python and stored/serialized as camelCase, the shape
the storefront and dashboard clients consume.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True, validate_default=True
    )


# ===================== Enums =====================
class Role(str, Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


class ProductType(str, Enum):
    RETAIL = "RETAIL"
    WHOLESALE = "WHOLESALE"
    BOTH = "BOTH"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"
    CREDIT_CARD = "CREDIT_CARD"
    MOBILE_WALLET = "MOBILE_WALLET"


# ===================== Collections =====================
class User(CamelModel):
    email: EmailStr = Field(..., description="Unique email address")
    name: str = Field(..., description="Full name")
    phone: Optional[str] = None
    password: str = Field(..., description="BCrypt password hash")
    role: Role = Role.ADMIN
    avatar: Optional[str] = None
    is_active: bool = True


class Category(CamelModel):
    name: str = Field(..., description="Unique category name")
    name_ar: Optional[str] = None
    description: Optional[str] = None
    description_ar: Optional[str] = None
    image: Optional[str] = Field(None, description="Hosted image URL")
    is_active: bool = True
    sort_order: int = 0


class Product(CamelModel):
    name: Optional[str] = None
    name_ar: str = Field(..., description="Arabic display name, also used as slug")
    description_ar: Optional[str] = None
    category_id: str = Field(..., description="Reference to category _id")
    type: ProductType = ProductType.RETAIL
    price: float = Field(..., ge=0, description="Retail unit price")
    original_price: Optional[float] = Field(None, ge=0)
    discount: float = Field(0, ge=0, le=100, description="Display discount percentage")
    wholesale_price: Optional[float] = Field(None, ge=0)
    min_wholesale_qty: Optional[int] = None
    weight: Optional[float] = Field(None, ge=0)
    unit: str
    origin: Optional[str] = None
    stock: int = Field(0, ge=0)
    is_available: bool = True
    is_featured: bool = False
    is_best_seller: bool = False
    is_new_arrival: bool = False
    main_image: str
    images: List[str] = Field(default_factory=list)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: List[str] = Field(default_factory=list)
    views: int = 0
    sales_count: int = 0
    average_rating: float = 0.0
    total_reviews: int = 0


class Review(CamelModel):
    product_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    is_approved: bool = True


class Order(CamelModel):
    order_number: str = Field(..., description="ORD + YYYYMMDD + daily sequence")
    subtotal: float = Field(..., ge=0)
    discount: float = Field(0, ge=0)
    delivery_fee: float = Field(0, ge=0)
    tax: float = Field(0, ge=0)
    total: float = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod
    delivery_date: Optional[datetime] = None
    delivery_time: Optional[str] = None
    customer_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    cancel_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    # Shipping address, copied from the checkout form
    customer_name: str
    customer_phone: str
    governorate: str
    city: str
    district: str
    street: str
    building_no: Optional[str] = None
    floor: Optional[str] = None
    apartment: Optional[str] = None
    landmark: Optional[str] = None


class OrderItem(CamelModel):
    order_id: str
    product_id: str
    product_name: str
    product_image: Optional[str] = None
    price: float = Field(..., ge=0, description="Unit price at purchase time")
    quantity: int = Field(..., ge=1)
    total: float = Field(..., ge=0)


class ContactMessage(CamelModel):
    name: str
    email: EmailStr
    phone: str
    message: str
    is_read: bool = False
    is_replied: bool = False
    notes: Optional[str] = None


class ContactInfo(CamelModel):
    hero_title: Optional[str] = None
    hero_description: Optional[str] = None
    hero_image: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    social_media: Dict[str, str] = Field(default_factory=dict)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_active: bool = True


class AboutUsValue(CamelModel):
    title: str
    image: Optional[str] = None


class AboutUsContent(CamelModel):
    hero_title: Optional[str] = None
    hero_description: Optional[str] = None
    hero_image: Optional[str] = None
    vision_title: Optional[str] = None
    vision_description: Optional[str] = None
    vision_image: Optional[str] = None
    mission_title: Optional[str] = None
    mission_description: Optional[str] = None
    mission_image: Optional[str] = None
    values_title: Optional[str] = None
    values: List[AboutUsValue] = Field(default_factory=list)
    is_active: bool = True


class HomepageContent(CamelModel):
    hero_title: Optional[str] = None
    hero_description: Optional[str] = None
    hero_button_text1: Optional[str] = None
    hero_button_text2: Optional[str] = None
    hero_button_link1: Optional[str] = None
    hero_button_link2: Optional[str] = None
    hero_background_image1: Optional[str] = None
    hero_background_image2: Optional[str] = None
    section_two_title: Optional[str] = None
    section_two_description: Optional[str] = None
    section_three_title: Optional[str] = None
    section_four_title: Optional[str] = None
    section_four_description: Optional[str] = None
    section_four_button_text: Optional[str] = None
    section_four_button_link: Optional[str] = None
    section_four_image: Optional[str] = None
    is_active: bool = True


# ============ Auth requests ==========
class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=20)
    password: str = Field(..., min_length=6)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


# ============ Category requests ==========
class CategoryIn(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    name_ar: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    description_ar: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = None
    sort_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    name_ar: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    description_ar: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = None
    sort_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


# ============ Product requests ==========
class ProductCreate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    name_ar: str = Field(..., min_length=2, max_length=200)
    description_ar: Optional[str] = Field(None, min_length=10, max_length=2000)
    category_id: str
    type: Optional[ProductType] = None
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0, le=100)
    wholesale_price: Optional[float] = Field(None, ge=0)
    min_wholesale_qty: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    unit: str
    origin: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    is_available: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_best_seller: Optional[bool] = None
    is_new_arrival: Optional[bool] = None
    main_image: str
    images: Optional[List[str]] = Field(None, max_length=10)
    meta_title: Optional[str] = Field(None, max_length=100)
    meta_description: Optional[str] = Field(None, max_length=200)
    meta_keywords: Optional[List[str]] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    name_ar: Optional[str] = Field(None, min_length=2, max_length=200)
    description_ar: Optional[str] = Field(None, max_length=2000)
    category_id: Optional[str] = None
    type: Optional[ProductType] = None
    price: Optional[float] = Field(None, ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0, le=100)
    wholesale_price: Optional[float] = Field(None, ge=0)
    min_wholesale_qty: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None
    origin: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    is_available: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_best_seller: Optional[bool] = None
    is_new_arrival: Optional[bool] = None
    main_image: Optional[str] = None
    images: Optional[List[str]] = Field(None, max_length=10)
    meta_title: Optional[str] = Field(None, max_length=100)
    meta_description: Optional[str] = Field(None, max_length=200)
    meta_keywords: Optional[List[str]] = None


class StockUpdate(CamelModel):
    stock: int = Field(..., ge=0)


class ReviewCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewApproval(CamelModel):
    is_approved: bool


# ============ Order requests ==========
class OrderItemIn(CamelModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class ShippingAddress(CamelModel):
    full_name: str
    phone: str
    governorate: str
    city: str
    district: str
    street: str
    building_no: Optional[str] = None
    floor: Optional[str] = None
    apartment: Optional[str] = None
    landmark: Optional[str] = None


class OrderCreate(CamelModel):
    items: List[OrderItemIn] = Field(..., min_length=1)
    address: ShippingAddress
    payment_method: PaymentMethod
    delivery_date: Optional[datetime] = None
    delivery_time: Optional[str] = None
    customer_notes: Optional[str] = Field(None, max_length=1000)
    discount: float = Field(0, ge=0)
    delivery_fee: float = Field(0, ge=0)
    tax: float = Field(0, ge=0)


class OrderStatusUpdate(CamelModel):
    status: OrderStatus
    admin_notes: Optional[str] = None
    cancel_reason: Optional[str] = None


class PaymentStatusUpdate(CamelModel):
    payment_status: PaymentStatus


# ============ Contact message requests ==========
class ContactMessageCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ContactMessageUpdate(CamelModel):
    is_read: Optional[bool] = None
    is_replied: Optional[bool] = None
    notes: Optional[str] = None


# ============ Content requests ==========
class ContactInfoIn(CamelModel):
    hero_title: Optional[str] = None
    hero_description: Optional[str] = None
    hero_image: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    social_media: Optional[Dict[str, str]] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class AboutUsIn(CamelModel):
    hero_title: Optional[str] = None
    hero_description: Optional[str] = None
    hero_image: Optional[str] = None
    vision_title: Optional[str] = None
    vision_description: Optional[str] = None
    vision_image: Optional[str] = None
    mission_title: Optional[str] = None
    mission_description: Optional[str] = None
    mission_image: Optional[str] = None
    values_title: Optional[str] = None
    values: Optional[List[AboutUsValue]] = None


class HomepageContentIn(CamelModel):
    hero_title: Optional[str] = None
    hero_description: Optional[str] = None
    hero_button_text1: Optional[str] = None
    hero_button_text2: Optional[str] = None
    hero_button_link1: Optional[str] = None
    hero_button_link2: Optional[str] = None
    hero_background_image1: Optional[str] = None
    hero_background_image2: Optional[str] = None
    section_two_title: Optional[str] = None
    section_two_description: Optional[str] = None
    section_three_title: Optional[str] = None
    section_four_title: Optional[str] = None
    section_four_description: Optional[str] = None
    section_four_button_text: Optional[str] = None
    section_four_button_link: Optional[str] = None
    section_four_image: Optional[str] = None
"""
Notes:
- Request models dump with ``model_dump(by_alias=True, exclude_unset=True)`` so a
  partial update only touches the fields the client sent.
"""
