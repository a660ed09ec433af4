"""
Domain services, built once at startup around a shared Database handle.
"""

from config import Settings
from database import Database
from images import ImageUploader
from services.auth import AuthService
from services.categories import CategoryService
from services.contact_messages import ContactMessageService
from services.content import AboutUsService, ContactInfoService, HomepageContentService
from services.homepage import HomepageSectionsService
from services.orders import OrderService
from services.products import ProductService


class Services:
    def __init__(self, db: Database, uploader: ImageUploader, settings: Settings):
        self.auth = AuthService(db, settings.jwt_secret, settings.token_lifetime)
        self.categories = CategoryService(db, uploader)
        self.products = ProductService(db, uploader, self.categories)
        self.orders = OrderService(db, strict_transitions=settings.strict_order_transitions)
        self.contact_messages = ContactMessageService(db)
        self.contact_info = ContactInfoService(db, uploader)
        self.about_us = AboutUsService(db, uploader)
        self.homepage_content = HomepageContentService(db, uploader)
        self.homepage = HomepageSectionsService(db)
