import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from backoffice.errors import ConfigurationError, UpstreamError
from backoffice.utils.steadfast_client import HUB_PICKUP, STEADFAST_BASE, CreateOrderParams, SteadfastClient


def _response(status_code, body=None):
    r = MagicMock()
    r.status_code = status_code
    r.content = json.dumps(body).encode() if body is not None else b""
    r.json.return_value = body
    return r


PARAMS = CreateOrderParams(
    invoice="ORD-1001",
    recipient_name="Rahim Uddin",
    recipient_phone="01774226088",
    recipient_address="House 12, Dhanmondi, Dhaka",
    cod_amount=1090.0,
    note="Order from grocery store. Total items: 2",
)


class TestCreateOrder:
    def setup_method(self):
        self.client = SteadfastClient("sf_key", "sf_secret", timeout=7)

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_creates_consignment(self, mock_request):
        mock_request.return_value = _response(200, {
            "status": 200,
            "message": "Consignment has been created successfully.",
            "consignment": {"consignment_id": "1424107", "invoice": "ORD-1001", "tracking_code": "15BAEB8A", "status": "in_review"},
        })

        c = self.client.create_order(PARAMS)

        assert c.consignment_id == 1424107
        assert c.tracking_code == "15BAEB8A"
        assert c.status == "in_review"
        args, kwargs = mock_request.call_args
        assert args == ("POST", f"{STEADFAST_BASE}/create_order")
        assert kwargs["headers"]["Api-Key"] == "sf_key"
        assert kwargs["headers"]["Secret-Key"] == "sf_secret"
        assert kwargs["timeout"] == 7
        assert "item_description" not in kwargs["json"]
        assert kwargs["json"]["delivery_type"] == 0

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_rejection_uses_courier_message(self, mock_request):
        mock_request.return_value = _response(400, {"status": 400, "message": "The recipient phone must be 11 digits."})

        with pytest.raises(UpstreamError) as exc:
            self.client.create_order(PARAMS)

        assert exc.value.public_message == "The recipient phone must be 11 digits."
        assert exc.value.to_dict()["message"] == "Failed to create order in Steadfast Courier"

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_missing_consignment_is_an_error(self, mock_request):
        mock_request.return_value = _response(200, {"status": 200, "message": "ok"})

        with pytest.raises(UpstreamError):
            self.client.create_order(PARAMS)

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_timeout(self, mock_request):
        mock_request.side_effect = requests.Timeout()

        with pytest.raises(UpstreamError) as exc:
            self.client.create_order(PARAMS)
        assert "timed out" in exc.value.public_message

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_missing_credentials(self, mock_request):
        with pytest.raises(ConfigurationError):
            SteadfastClient("sf_key", "").create_order(PARAMS)
        mock_request.assert_not_called()

    def test_hub_pickup_payload(self):
        params = CreateOrderParams(
            invoice="ORD-1", recipient_name="A", recipient_phone="017", recipient_address="B",
            cod_amount=0.0, delivery_type=HUB_PICKUP,
        )
        assert params.to_payload()["delivery_type"] == 1


class TestStatusAndBalance:
    def setup_method(self):
        self.client = SteadfastClient("sf_key", "sf_secret", base_url="https://courier.test/api/v1/")

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_status_by_consignment_id(self, mock_request):
        mock_request.return_value = _response(200, {"status": 200, "delivery_status": "delivered"})

        assert self.client.status_by_consignment_id(1424107).delivery_status == "delivered"
        assert mock_request.call_args[0] == ("GET", "https://courier.test/api/v1/status_by_cid/1424107")

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_status_by_tracking_code_is_quoted(self, mock_request):
        mock_request.return_value = _response(200, {"status": 200, "delivery_status": "pending"})

        self.client.status_by_tracking_code("AB/12")

        assert mock_request.call_args[0][1] == "https://courier.test/api/v1/status_by_trackingcode/AB%2F12"

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_status_by_invoice(self, mock_request):
        mock_request.return_value = _response(200, {"status": 200, "delivery_status": "cancelled"})

        assert self.client.status_by_invoice("ORD-1001").delivery_status == "cancelled"

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_status_not_found(self, mock_request):
        mock_request.return_value = _response(404, {"status": 404, "message": "Consignment not found"})

        with pytest.raises(UpstreamError) as exc:
            self.client.status_by_consignment_id(9)
        assert exc.value.public_message == "Consignment not found"

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_balance(self, mock_request):
        mock_request.return_value = _response(200, {"status": 200, "current_balance": "1520.50"})

        assert self.client.get_balance() == 1520.5

    @patch("backoffice.utils.steadfast_client.requests.request")
    def test_non_object_body(self, mock_request):
        mock_request.return_value = _response(200, ["unexpected"])

        with pytest.raises(UpstreamError):
            self.client.get_balance()
