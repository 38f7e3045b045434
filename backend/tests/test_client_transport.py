"""
Client transport and session tests.

Transport failures are classified before anything reaches a view:
unreachable -> NetworkError, non-JSON -> MalformedResponseError,
{"ok": false} -> ApplicationError (subclass chosen by the reply's code).
"""

import asyncio
import json

import httpx
import pytest

from trainhub.client.config import ClientConfig
from trainhub.client.errors import (
    ApplicationError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    NotSignedInError,
    OwnershipError,
    RenderError,
    TransitionError,
    TransportError,
    ValidationError,
    user_message,
)
from trainhub.client.session import STORAGE_KEY, FileStorage, MemoryStorage, Principal, Session
from trainhub.client.transport import Transport

from conftest import BASE_URL, make_session


def _transport(handler):
    return Transport(BASE_URL, transport=httpx.MockTransport(handler))


# =============================================================================
# TRANSPORT
# =============================================================================


class TestTransportClassification:
    def test_ok_reply_returned(self):
        def handler(request):
            assert request.url.path == '/api/trainings'
            assert request.url.params['email'] == 'a@b.co'
            return httpx.Response(200, json={'ok': True, 'trainings': []})

        data = asyncio.run(_transport(handler).get('/trainings', {'email': 'a@b.co'}))
        assert data == {'ok': True, 'trainings': []}

    def test_post_sends_json(self):
        def handler(request):
            assert request.method == 'POST'
            assert json.loads(request.content) == {'email': 'a@b.co'}
            return httpx.Response(200, json={'ok': True})

        assert asyncio.run(_transport(handler).post('/user', {'email': 'a@b.co'})) == {'ok': True}

    def test_unreachable_server(self):
        def handler(request):
            raise httpx.ConnectError('connection refused', request=request)

        with pytest.raises(NetworkError) as exc:
            asyncio.run(_transport(handler).get('/trainings'))
        assert isinstance(exc.value, TransportError)

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout('too slow', request=request)

        with pytest.raises(NetworkError):
            asyncio.run(_transport(handler).get('/trainings'))

    def test_html_reply_is_malformed(self):
        def handler(request):
            return httpx.Response(502, text='<html>Bad Gateway</html>', headers={'content-type': 'text/html'})

        with pytest.raises(MalformedResponseError):
            asyncio.run(_transport(handler).get('/trainings'))

    def test_undecodable_json(self):
        def handler(request):
            return httpx.Response(200, content=b'{"ok": tru', headers={'content-type': 'application/json'})

        with pytest.raises(MalformedResponseError):
            asyncio.run(_transport(handler).get('/trainings'))

    def test_non_object_json(self):
        def handler(request):
            return httpx.Response(200, json=[1, 2, 3])

        with pytest.raises(MalformedResponseError):
            asyncio.run(_transport(handler).get('/trainings'))

    @pytest.mark.parametrize(
        "code,cls",
        [
            ('forbidden', OwnershipError),
            ('not_found', NotFoundError),
            ('lifecycle', TransitionError),
            ('validation', ApplicationError),
            (None, ApplicationError),
        ],
    )
    def test_ok_false_maps_code(self, code, cls):
        payload = {'ok': False, 'error': 'nope'}
        if code:
            payload['code'] = code

        def handler(request):
            return httpx.Response(200, json=payload)

        with pytest.raises(cls) as exc:
            asyncio.run(_transport(handler).post('/training/delete', {'id': 'x'}))
        assert type(exc.value) is cls
        assert str(exc.value) == 'nope'
        assert exc.value.code == code

    def test_http_error_with_json_error(self):
        def handler(request):
            return httpx.Response(400, json={'ok': False, 'error': 'invalid request body'})

        with pytest.raises(ApplicationError) as exc:
            asyncio.run(_transport(handler).post('/signup', {}))
        assert str(exc.value) == 'invalid request body'

    @pytest.mark.parametrize("payload", [{'ok': False}, {}])
    def test_http_error_without_message(self, payload):
        def handler(request):
            return httpx.Response(502, json=payload)

        with pytest.raises(ApplicationError) as exc:
            asyncio.run(_transport(handler).get('/trainings'))
        assert 'HTTP' not in str(exc.value)
        assert user_message(exc.value) == 'An error occurred. Please try again.'

    def test_upload_is_multipart(self):
        def handler(request):
            assert request.headers['content-type'].startswith('multipart/form-data')
            assert b'name="video"; filename="a.mp4"' in request.content
            return httpx.Response(200, json={'ok': True, 'video_url': '/uploads/videos/a.mp4'})

        data = asyncio.run(_transport(handler).upload('/upload-video', 'video', 'a.mp4', b'data', 'video/mp4'))
        assert data['video_url'] == '/uploads/videos/a.mp4'


class TestUserMessage:
    @pytest.mark.parametrize(
        "exc,expected",
        [
            (NetworkError('boom'), 'Unable to connect to server. Please check your connection.'),
            (MalformedResponseError('x'), 'Server returned an invalid response. Please try again.'),
            (ApplicationError('account already exists'), 'Account already exists'),
            (ValidationError('description is required'), 'Description is required'),
            (ApplicationError(''), 'An error occurred. Please try again.'),
            (KeyError('user'), 'An error occurred. Please try again.'),
            (RenderError('/x', RuntimeError('trace')), 'An error occurred. Please try again.'),
        ],
    )
    def test_messages(self, exc, expected):
        assert user_message(exc) == expected


def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv('TRAINHUB_API_BASE', 'http://hub.internal:8080')
    monkeypatch.setenv('TRAINHUB_STATE_FILE', str(tmp_path / 'state.json'))
    monkeypatch.setenv('TRAINHUB_TIMEOUT', '2.5')
    config = ClientConfig.from_env()
    assert config.api_base == 'http://hub.internal:8080'
    assert config.state_file == str(tmp_path / 'state.json')
    assert config.timeout == 2.5


# =============================================================================
# SESSION
# =============================================================================


class TestSession:
    @pytest.mark.auth
    def test_signup_stores_principal(self, transport):
        session = make_session(transport)
        principal = asyncio.run(session.signup('Alice Smith', 'Alice@Example.com', 'secret123', 'secret123'))
        assert principal == Principal('Alice Smith', 'alice@example.com')
        assert session.current_user == principal
        assert json.loads(session.storage.get(STORAGE_KEY)) == {'name': 'Alice Smith', 'email': 'alice@example.com'}

    @pytest.mark.auth
    def test_login_and_logout(self, transport, alice):
        session = make_session(transport)
        assert asyncio.run(session.login('alice@example.com', 'secret123')) == alice
        session.logout()
        assert session.current_user is None
        with pytest.raises(NotSignedInError):
            session.require_user()

    @pytest.mark.auth
    def test_bad_credentials_leave_session_empty(self, transport, alice):
        session = make_session(transport)
        with pytest.raises(ApplicationError) as exc:
            asyncio.run(session.login('alice@example.com', 'wrongpass'))
        assert str(exc.value) == 'invalid credentials'
        assert session.current_user is None

    @pytest.mark.auth
    def test_validation_happens_before_any_request(self):
        def handler(request):
            raise AssertionError('no request expected')

        session = Session(_transport(handler), MemoryStorage())
        with pytest.raises(ValidationError):
            asyncio.run(session.signup('Alice', 'alice@example.com', 'short'))
        with pytest.raises(ValidationError) as exc:
            asyncio.run(session.signup('Alice', 'alice@example.com', 'secret123', 'secret124'))
        assert exc.value.field == 'confirm'
        with pytest.raises(ValidationError):
            asyncio.run(session.login('', 'secret123'))

    def test_file_storage_survives_restart(self, tmp_path, transport):
        path = str(tmp_path / 'nested' / 'state.json')
        first = Session(transport, FileStorage(path))
        first.set_current_user(Principal('Alice', 'alice@example.com'))

        second = Session(transport, FileStorage(path))
        assert second.current_user == Principal('Alice', 'alice@example.com')

        second.logout()
        assert first.current_user is None

    def test_corrupt_state_is_ignored(self, tmp_path, transport):
        path = tmp_path / 'state.json'
        path.write_text('{not json')
        assert Session(transport, FileStorage(str(path))).current_user is None

        storage = MemoryStorage()
        storage.set(STORAGE_KEY, '{"name": "no email"}')
        assert Session(transport, storage).current_user is None
