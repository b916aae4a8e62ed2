import pytest
from fastapi.testclient import TestClient

from database import Store
from main import app
from utils.cloudinary import MediaHost, get_media_host
from utils.jwt import JwtIdentityVerifier, create_access_token
from utils.security import get_identity_verifier

TEST_SECRET = "test-identity-secret"

CLOUD = "https://res.cloudinary.com/demo/image/upload"


class FakeMediaHost(MediaHost):
    def __init__(self):
        self.uploads = []
        self.destroyed = []
        self.failing = set()

    async def upload(self, file, folder: str) -> str:
        self.uploads.append((folder, file.read()))
        return f"{CLOUD}/v1700000000/{folder}/photo{len(self.uploads)}.jpg"

    async def destroy(self, public_id: str) -> dict:
        if public_id in self.failing:
            raise RuntimeError("cloudinary unavailable")
        self.destroyed.append(public_id)
        return {"result": "ok"}


def auth(uid: str, **claims) -> dict:
    token = create_access_token(uid, secret=TEST_SECRET, **claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store():
    store = Store("sqlite://")
    store.init_db()
    yield store
    store.dispose()


@pytest.fixture
def media_host():
    return FakeMediaHost()


@pytest.fixture
def client(store, media_host):
    app.state.store = store
    app.dependency_overrides[get_identity_verifier] = lambda: JwtIdentityVerifier(
        secret=TEST_SECRET, audience=None, issuer=None
    )
    app.dependency_overrides[get_media_host] = lambda: media_host

    yield TestClient(app)

    app.dependency_overrides.clear()
    app.state.store = None


@pytest.fixture
def register_seller(client):
    def _register(uid: str, **overrides):
        body = {
            "email": f"{uid}@students.must.ac.mw",
            "business_name": f"{uid} Traders",
            "business_logo": f"{CLOUD}/v1/buymesho/logo-{uid}.png",
            "university": "MUST",
            "bio": "Campus hustle",
        }
        body.update(overrides)
        resp = client.post("/api/sellers", json=body, headers=auth(uid))
        assert resp.status_code == 200, resp.text
        return body

    return _register


@pytest.fixture
def post_listing(client):
    def _post(uid: str, **overrides) -> int:
        body = {
            "name": "Calculator",
            "price": 5000,
            "description": "Scientific calculator, barely used",
            "category": "Electronics & Gadgets",
            "university": "MUST",
            "photos": [],
            "whatsapp_number": "265991234567",
        }
        body.update(overrides)
        resp = client.post("/api/listings", json=body, headers=auth(uid))
        assert resp.status_code == 200, resp.text
        return resp.json()["id"]

    return _post
