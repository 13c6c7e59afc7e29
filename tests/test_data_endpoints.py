"""Tests HTTP de /data, /health y /ready.

Escenarios end-to-end contra SQLite en memoria, y fallas de storage con un
storage simulado.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from readings_api.core.domain.errors import StorageError
from readings_api.infrastructure.persistence import ReadingStorage
from readings_api.main import SECURITY_HEADERS, create_app
from readings_common.config import Settings

RANGE = {"from": "2023-11-14T00:00:00Z", "to": "2023-11-14T23:59:59Z"}


def _post(client, body: str):
    return client.post("/data", content=body, headers={"Content-Type": "text/plain"})


@pytest.fixture
def failing_storage():
    storage = MagicMock(spec=ReadingStorage)
    storage.insert_readings.side_effect = StorageError("Failed to insert readings: secret detail")
    storage.query_readings.side_effect = StorageError("Failed to query readings: secret detail")
    storage.ping.side_effect = StorageError("Database not reachable")
    return storage


@pytest.fixture
def failing_client(settings, failing_storage):
    with TestClient(create_app(settings, storage=failing_storage)) as test_client:
        yield test_client


# =============================================================================
# POST /data
# =============================================================================

class TestPostData:

    def test_valid_batch(self, client, count_rows):
        response = _post(client, "1700000000 Voltage 120\n1700000000 Current 2")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert count_rows() == 2

    def test_invalid_timestamp_rejected(self, client, count_rows):
        response = _post(client, "abc Voltage 120")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "timestamp" in body["message"]
        assert count_rows() == 0

    def test_unknown_metric_never_written(self, client, count_rows):
        response = _post(client, "1700000000 Voltage 120\n1700000000 Wattage 5")

        assert response.status_code == 400
        assert "Wattage" in response.json()["message"]
        assert count_rows() == 0

    def test_malformed_line(self, client, count_rows):
        response = _post(client, "1700000000 Voltage")

        assert response.status_code == 400
        assert "Malformed" in response.json()["message"]
        assert count_rows() == 0

    def test_empty_body(self, client):
        response = _post(client, "")

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_storage_failure_is_opaque_500(self, failing_client):
        response = _post(failing_client, "1700000000 Voltage 120")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error"}


# =============================================================================
# GET /data
# =============================================================================

class TestGetData:

    def test_round_trip_with_power(self, client):
        _post(client, "1700000000 Voltage 120\n1700000000 Current 2")

        response = client.get("/data", params=RANGE)

        assert response.status_code == 200
        assert response.json() == [
            {"time": "2023-11-14T22:13:20.000Z", "name": "Voltage", "value": 120.0},
            {"time": "2023-11-14T22:13:20.000Z", "name": "Current", "value": 2.0},
            {"time": "2023-11-14T00:00:00.000Z", "name": "Power", "value": 240.0},
        ]

    def test_daily_average_power(self, client):
        _post(
            client,
            "1700000000 Voltage 10\n1700000010 Voltage 20\n1700000020 Current 2\n1700000030 Current 4",
        )

        body = client.get("/data", params=RANGE).json()

        power = [entry for entry in body if entry["name"] == "Power"]
        assert power == [{"time": "2023-11-14T00:00:00.000Z", "name": "Power", "value": 45.0}]

    def test_empty_range_returns_empty_list(self, client):
        _post(client, "1700000000 Voltage 120")

        response = client.get("/data", params={"from": "2020-01-01", "to": "2020-01-02"})

        assert response.status_code == 200
        assert response.json() == []

    def test_multiple_days_in_order(self, client):
        _post(client, "1700100000 Voltage 2\n1700000000 Voltage 1")

        body = client.get("/data", params={"from": "2023-11-14", "to": "2023-11-17"}).json()

        assert [entry["time"][:10] for entry in body if entry["name"] == "Power"] == [
            "2023-11-14",
            "2023-11-16",
        ]

    @pytest.mark.parametrize(
        "params",
        [{}, {"from": "2023-11-14"}, {"to": "2023-11-14"}, {"from": "", "to": "2023-11-14"}],
    )
    def test_missing_parameters(self, client, params):
        response = client.get("/data", params=params)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "from and to query parameters are required",
        }

    def test_invalid_date(self, client):
        response = client.get("/data", params={"from": "not-a-date", "to": "2023-11-14"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "not-a-date" in response.json()["message"]

    def test_storage_failure_is_opaque_500(self, failing_client):
        response = failing_client.get("/data", params=RANGE)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error"}
        assert "secret" not in response.text


# =============================================================================
# AMBIENT
# =============================================================================

class TestAmbient:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_not_ready(self, failing_client):
        assert failing_client.get("/ready").status_code == 503

    def test_security_headers(self, client):
        response = client.get("/health")

        for header, value in SECURITY_HEADERS.items():
            assert response.headers[header] == value

    def test_custom_allow_list_from_settings(self, storage, count_rows):
        app = create_app(Settings(allowed_metrics=("Temperature",)), storage=storage)

        with TestClient(app) as test_client:
            assert _post(test_client, "1700000000 Temperature 21.5").status_code == 200
            assert _post(test_client, "1700000000 Voltage 120").status_code == 400
            assert count_rows() == 1

    def test_storage_closed_on_shutdown(self, settings, failing_storage):
        with TestClient(create_app(settings, storage=failing_storage)):
            failing_storage.close.assert_not_called()

        failing_storage.close.assert_called_once()

    def test_security_headers_on_unhandled_error(self, settings):
        storage = MagicMock(spec=ReadingStorage)
        storage.query_readings.side_effect = RuntimeError("boom")

        with TestClient(create_app(settings, storage=storage), raise_server_exceptions=False) as test_client:
            response = test_client.get("/data", params=RANGE)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Server error"}
        for header, value in SECURITY_HEADERS.items():
            assert response.headers[header] == value

    def test_storage_closed_when_schema_bootstrap_fails(self):
        storage = MagicMock(spec=ReadingStorage)
        app = create_app(Settings(db_ensure_schema=True), storage=storage)

        with patch("readings_api.main.ensure_readings_schema", side_effect=RuntimeError("no db")):
            with pytest.raises(RuntimeError):
                with TestClient(app):
                    pass

        storage.close.assert_called_once()
