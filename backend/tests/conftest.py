"""
Pytest fixtures for Train Hub backend and client tests.

Provides a fresh in-memory database per test, the Flask test client, and
an httpx transport that routes the async client core straight into the
Flask app so client tests run end to end without a live server.
"""

import httpx
import pytest

from trainhub import create_app
from trainhub.extensions import db
from trainhub.client.app import TrainHubApp
from trainhub.client.config import ClientConfig
from trainhub.client.session import MemoryStorage, Principal, Session
from trainhub.client.transport import Transport


BASE_URL = "http://testserver"

DRILL = {"description": "Drill", "upc": "012345678905", "number": "7", "quantity": 5, "target_quantity": 10}


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
        'UPLOAD_FOLDER': str(tmp_path / "uploads"),
        'SEARCHUPCDATA_API_KEY': 'test-key',
        'BARCODE_API_URL': 'https://upc.example.test/api/products',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


def flask_transport(flask_client) -> httpx.MockTransport:
    """httpx transport that answers every request with the Flask app."""

    def handler(request: httpx.Request) -> httpx.Response:
        headers = {
            k: v for k, v in request.headers.items()
            if k.lower() not in ("host", "content-length", "content-type")
        }
        resp = flask_client.open(
            request.url.path,
            method=request.method,
            query_string=request.url.query.decode("ascii"),
            headers=headers,
            data=request.content,
            content_type=request.headers.get("content-type"),
        )
        return httpx.Response(
            resp.status_code,
            headers=[(k, v) for k, v in resp.headers.items() if k.lower() != "content-length"],
            content=resp.get_data(),
        )

    return httpx.MockTransport(handler)


@pytest.fixture(scope='function')
def http_transport(client):
    return flask_transport(client)


@pytest.fixture(scope='function')
def transport(http_transport):
    return Transport(BASE_URL, transport=http_transport)


def make_session(transport, principal=None) -> Session:
    session = Session(transport, MemoryStorage())
    if principal is not None:
        session.set_current_user(principal)
    return session


@pytest.fixture(scope='function')
def make_app(http_transport):
    """Factory for independent headless clients sharing the test server."""

    def factory(path="/", principal=None):
        client_app = TrainHubApp(
            ClientConfig(api_base=BASE_URL, state_file=""),
            http_transport=http_transport,
            storage=MemoryStorage(),
            url=BASE_URL + path,
        )
        if principal is not None:
            client_app.session.set_current_user(principal)
        return client_app

    return factory


def signup(client, name="Alice Smith", email="alice@example.com", password="secret123") -> Principal:
    """Create an account through the API."""
    resp = client.post('/api/signup', json={'name': name, 'email': email, 'password': password})
    assert resp.status_code == 200
    assert resp.json['ok'], resp.json
    return Principal(resp.json['user']['name'], resp.json['user']['email'])


@pytest.fixture(scope='function')
def alice(client):
    return signup(client)


@pytest.fixture(scope='function')
def bob(client):
    return signup(client, name="Bob Jones", email="bob@example.com")


def create_training(client, email, title="Forklift Safety", blocks=None) -> dict:
    resp = client.post(
        f'/api/trainings?email={email}',
        json={'title': title, 'description': 'Basics', 'blocks': blocks or []},
    )
    assert resp.json['ok'], resp.json
    return resp.json['training']
