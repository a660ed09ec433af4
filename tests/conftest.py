import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from images import ImageUploadError, ImageUploader
from main import create_app

ADMIN = {"name": "Sayad Admin", "email": "admin@sayad-alsamak.com", "phone": "01000000000", "password": "secret123"}


class FakeUploader(ImageUploader):
    """Records uploads instead of calling Cloudinary."""

    def __init__(self, max_file_size: int = 1024 * 1024):
        super().__init__("demo", "key", "secret", max_file_size)
        self.uploads = []
        self.fail = False

    def _send(self, data_uri, params):
        if self.fail:
            raise ImageUploadError("Cloudinary upload failed: unavailable")
        self.uploads.append(params)
        return f"https://res.cloudinary.com/demo/{params['folder']}/{len(self.uploads)}.png"


@pytest.fixture
def settings():
    return Settings(
        database_url="mongodb://localhost:27017",
        database_name="sayad_alsamak_test",
        jwt_secret="test-secret",
        mongo_transactions=False,
        environment="test",
    )


@pytest.fixture
def db():
    return Database(mongomock.MongoClient(), "sayad_alsamak_test", use_transactions=False)


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def app(settings, db, uploader):
    return create_app(settings, db=db, uploader=uploader)


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_user():
    return dict(ADMIN)


@pytest.fixture
def admin_headers(client, admin_user):
    res = client.post("/api/v1/auth/register", json=admin_user)
    assert res.status_code == 201, res.text
    token = res.json()["token"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def category(client, admin_headers):
    res = client.post(
        "/api/v1/categories",
        json={"name": "Fresh Fish", "nameAr": "أسماك طازجة", "sortOrder": 1},
        headers=admin_headers,
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]


@pytest.fixture
def make_product(client, admin_headers, category):
    def _make(**overrides):
        payload = {
            "name": "Sea Bass",
            "nameAr": "قاروص",
            "categoryId": category["id"],
            "price": 50,
            "unit": "kg",
            "stock": 10,
            "mainImage": "https://cdn.example.com/bass.jpg",
        }
        payload.update(overrides)
        res = client.post("/api/v1/products", json=payload, headers=admin_headers)
        assert res.status_code == 201, res.text
        return res.json()["data"]

    return _make


@pytest.fixture
def address():
    return {
        "fullName": "Ahmed Ali",
        "phone": "01012345678",
        "governorate": "Alexandria",
        "city": "Alexandria",
        "district": "Smouha",
        "street": "Victor Emmanuel St",
        "buildingNo": "12",
    }
