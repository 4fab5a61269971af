"""
Tests for the application factory and lifespan.
"""

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from fortune_api.api.routes.fortunes import json_response
from fortune_api.exceptions import SerializationFailure
from fortune_api.main import create_app
from fortune_api.storage import FortuneStore

from tests.fakes import FakeSecondaryStore


@pytest.mark.integration
class TestLifespan:
    def test_lifespan_builds_store_when_none_injected(self):
        built = FortuneStore(secondary=FakeSecondaryStore())
        app = create_app(instrument=False)

        with patch("fortune_api.main.create_fortune_store", return_value=built):
            with TestClient(app) as client:
                assert app.state.fortune_store is built
                assert client.get("/fortunes").json() == []

        # The lifespan owns the Redis connection it opened
        assert built.secondary.closed is True

    def test_injected_store_is_not_closed(self):
        fake = FakeSecondaryStore()
        store = FortuneStore(secondary=fake)

        with TestClient(create_app(store=store, instrument=False)):
            pass

        assert fake.closed is False


@pytest.mark.integration
class TestMetricsEndpoint:
    def test_metrics_exposed_by_module_app(self):
        from fortune_api.main import app

        with TestClient(app) as client:
            client.get("/fortunes")
            response = client.get("/metrics")

        assert response.status_code == 200
        assert "fortune_store_size" in response.text


@pytest.mark.unit
class TestJsonResponse:
    def test_encodes_payload(self):
        response = json_response({"id": "1", "message": "A"})

        assert response.status_code == 200
        assert response.body == b'{"id":"1","message":"A"}'
        assert response.headers["content-type"] == "application/json"

    def test_unencodable_payload_raises(self):
        with pytest.raises(SerializationFailure):
            json_response({"id": object()})

    def test_non_ascii_kept_as_utf8(self):
        response = json_response({"message": "café"})

        assert response.body == '{"message":"café"}'.encode("utf-8")
