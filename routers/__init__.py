from fastapi import APIRouter

from routers import about_us, auth, categories, contact_info, contact_messages, homepage, orders, products

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(contact_messages.router, prefix="/contact-messages", tags=["contact-messages"])
api_router.include_router(contact_info.router, prefix="/contact-info", tags=["contact-info"])
api_router.include_router(about_us.router, prefix="/about-us", tags=["about-us"])
api_router.include_router(homepage.router, prefix="/homepage", tags=["homepage"])
