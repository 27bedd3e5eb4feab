"""Unit tests for API error handling."""

import pytest

from launchpad.api.endpoints import get_faucet_enabled
from launchpad.api.main import app, status_for
from launchpad.errors import (
    AuthorizationError,
    InsufficientAllowance,
    LiquidityError,
    ReentrancyError,
    StateError,
    TransferError,
    ValidationError,
)
from tests.helpers import ALICE, MALLORY, OWNER

UNKNOWN = "0x" + "99" * 20


class TestStatusMapping:
    """Tests for the error class -> HTTP status table."""

    @pytest.mark.parametrize(
        "error,status",
        [
            (ValidationError("x"), 400),
            (AuthorizationError(MALLORY), 403),
            (StateError("x"), 409),
            (ReentrancyError("x"), 409),
            (LiquidityError("x"), 409),
            (TransferError("x"), 400),
            (InsufficientAllowance("x"), 400),
        ],
    )
    def test_status_for(self, error, status):
        """Each error class maps to its documented status."""
        assert status_for(error) == status


class TestErrorResponses:
    """Tests for error bodies returned by the API."""

    def test_unknown_asset_is_400(self, client):
        """An unknown asset id returns ValidationError with the reason."""
        response = client.get(f"/assets/{UNKNOWN}")

        assert response.status_code == 400
        assert response.json() == {"error": "ValidationError", "detail": "Invalid token"}

    def test_malformed_asset_id_is_400(self, client):
        """A path id that is not an address is rejected."""
        response = client.get("/assets/0x1234")
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_missing_caller_is_422(self, client):
        """State-changing routes require the X-Caller header."""
        response = client.post("/assets", json={"name": "A", "symbol": "A"})
        assert response.status_code == 422

    def test_invalid_caller_is_400(self, client):
        """A malformed X-Caller is a ValidationError."""
        response = client.post(
            "/assets", json={"name": "A", "symbol": "A"}, headers={"X-Caller": "bob"}
        )
        assert response.status_code == 400

    def test_negative_amount_is_422(self, client):
        """Negative amounts fail request validation."""
        response = client.post(
            f"/assets/{UNKNOWN}/buy", json={"value": "-1"}, headers={"X-Caller": ALICE}
        )
        assert response.status_code == 422

    def test_non_owner_is_403(self, client):
        """Admin routes reject non-owners with AuthorizationError."""
        response = client.post(
            "/admin/claim-fees", json={"recipient": MALLORY}, headers={"X-Caller": MALLORY}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "AuthorizationError"
        assert MALLORY in response.json()["detail"]

    def test_unfunded_buy_is_400(self, client):
        """A buyer without native value gets InsufficientBalance."""
        asset_id = client.post(
            "/assets", json={"name": "A", "symbol": "A"}, headers={"X-Caller": ALICE}
        ).json()["assetId"]

        response = client.post(
            f"/assets/{asset_id}/buy", json={"value": "1000"}, headers={"X-Caller": MALLORY}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientBalance"

    def test_migration_without_migrator_is_501(self, client):
        """Migration is reserved until a migrator is wired in."""
        asset_id = client.post(
            "/assets", json={"name": "A", "symbol": "A"}, headers={"X-Caller": ALICE}
        ).json()["assetId"]

        response = client.post(f"/admin/assets/{asset_id}/migrate", headers={"X-Caller": OWNER})

        assert response.status_code == 501
        assert response.json()["error"] == "NotImplementedError"

    def test_faucet_disabled_is_404(self, client):
        """The deposit route is hidden unless the faucet is enabled."""
        app.dependency_overrides[get_faucet_enabled] = lambda: False

        response = client.post(f"/accounts/{ALICE}/deposit", json={"amount": "1"})

        assert response.status_code == 404


class TestErrorSchema:
    """Tests for the documented error body."""

    def test_routes_document_error_body(self, client):
        """Every launchpad route lists ErrorResponse for 400, 403 and 409."""
        schema = client.get("/openapi.json").json()

        assert set(schema["components"]["schemas"]["ErrorResponse"]["properties"]) == {
            "error",
            "detail",
        }
        buy = schema["paths"]["/assets/{asset_id}/buy"]["post"]["responses"]
        for status in ("400", "403", "409"):
            assert buy[status]["content"]["application/json"]["schema"] == {
                "$ref": "#/components/schemas/ErrorResponse"
            }
        assert "409" not in schema["paths"]["/health"]["get"]["responses"]
