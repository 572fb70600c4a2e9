from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
import pytest

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import (
    ConcurrentModificationError,
    InsufficientCapacityError,
    InvalidTransitionError,
    NotFoundError,
    StoreUnavailableError,
)


class _Body(BaseModel):
    quantity: int


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/not-found')
    async def not_found():
        raise NotFoundError('Ticket not found.')

    @app.get('/capacity')
    async def capacity():
        raise InsufficientCapacityError('Not enough tickets available.')

    @app.get('/transition')
    async def transition():
        raise InvalidTransitionError('Cannot change ticket status from canceled to pending.')

    @app.get('/store')
    async def store():
        raise StoreUnavailableError('Ticket store unavailable during ticket create')

    @app.get('/conflict')
    async def conflict():
        raise ConcurrentModificationError('Ticket status changed concurrently, try again.')

    @app.get('/boom')
    async def boom():
        raise RuntimeError('secret internals')

    @app.post('/validate')
    async def validate(body: _Body):
        return body

    return app


@pytest.mark.unit
class TestErrorEnvelope:
    @pytest.fixture
    def client(self):
        return TestClient(_app(), raise_server_exceptions=False)

    @pytest.mark.parametrize(
        'path,status_code,kind',
        [
            ('/not-found', 404, 'NotFound'),
            ('/capacity', 400, 'InsufficientCapacity'),
            ('/transition', 400, 'InvalidTransition'),
            ('/store', 500, 'StoreUnavailable'),
            ('/conflict', 409, 'ConcurrentModification'),
        ],
    )
    def test_domain_errors(self, client, path, status_code, kind):
        response = client.get(path)

        assert response.status_code == status_code
        body = response.json()
        assert body['success'] is False
        assert body['error'] == kind
        assert body['message']

    def test_unexpected_error_hides_details(self, client):
        response = client.get('/boom')

        assert response.status_code == 500
        assert response.json() == {
            'success': False,
            'error': 'InternalError',
            'message': 'Internal server error',
        }

    def test_request_validation_is_400(self, client):
        response = client.post('/validate', json={'quantity': 'many'})

        assert response.status_code == 400
        assert response.json()['error'] == 'InvalidArgument'
