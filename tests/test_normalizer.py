from datetime import datetime

import pytest

from backoffice.risk.assessment import RiskTier
from backoffice.risk.normalizer import normalize, parse_count, parse_number, scale_ratio

NOW = datetime(2026, 10, 16, 9, 30, 0)
PHONE = "01774226088"


class TestScaleRatio:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (0.8, 80.0),
            (80, 80.0),
            (150, 100.0),
            (-5, 0.0),
            (0, 0.0),
            ("85%", 85.0),
            (" 62.5 ", 62.5),
        ],
    )
    def test_scales_and_clamps(self, raw, expected):
        assert scale_ratio(raw) == pytest.approx(expected)

    def test_exact_one_is_full_success(self):
        assert scale_ratio(1) == 100.0
        assert scale_ratio(1.0) == 100.0

    @pytest.mark.parametrize("raw", [None, "", "n/a", "1.2.3", True, float("nan"), float("inf"), [80]])
    def test_garbled_is_absent(self, raw):
        assert scale_ratio(raw) is None


class TestParsing:
    def test_parse_number_strips_decoration(self):
        assert parse_number("1,200") == 1200.0
        assert parse_number("-3") == -3.0

    def test_parse_count_rounds_half_up(self):
        assert parse_count(2.5) == 3
        assert parse_count(2.4) == 2
        assert parse_count("7") == 7

    def test_negative_count_is_absent(self):
        assert parse_count(-1) is None


class TestNormalize:
    def test_summary_overrides_top_level_ratio(self):
        payload = {
            "success_ratio": 90,
            "courierData": {"summary": {"success_ratio": 40, "total_parcel": 5}},
        }
        result = normalize(payload, phone=PHONE, now=NOW)

        assert result.success_ratio == 40.0
        assert result.risk_tier is RiskTier.HIGH
        assert result.total_orders == 5

    def test_top_level_summary_wins_over_nested(self):
        payload = {
            "summary": {"success_ratio": 0.7},
            "courierData": {"summary": {"success_ratio": 0.2}},
        }
        assert normalize(payload, phone=PHONE, now=NOW).success_ratio == pytest.approx(70.0)

    def test_courier_data_drops_summary_and_non_objects(self):
        payload = {
            "courierData": {
                "summary": {"total_parcel": 10, "success_parcel": 8, "cancelled_parcel": 2, "success_ratio": 0.8},
                "pathao": {"name": "Pathao", "total_parcel": 10, "success_parcel": 8, "cancelled_parcel": 2, "success_ratio": 80},
                "redx": None,
                "steadfast": "unavailable",
            }
        }
        result = normalize(payload, phone=PHONE, now=NOW)

        assert set(result.courier_breakdown) == {"pathao"}
        pathao = result.courier_breakdown["pathao"]
        assert pathao.name == "Pathao"
        assert pathao.success_ratio == 80.0
        assert "summary" not in result.to_dict()["courierData"]

    def test_courier_name_defaults_to_key(self):
        payload = {"courierData": {"redx": {"total_parcel": "3", "success_ratio": "1"}}}
        redx = normalize(payload, phone=PHONE, now=NOW).courier_breakdown["redx"]

        assert redx.name == "redx"
        assert redx.total_parcel == 3
        assert redx.success_ratio == 100.0

    def test_snake_case_beats_camel_case(self):
        payload = {"success_ratio": 60, "successRatio": 95, "totalOrders": 12}
        result = normalize(payload, phone=PHONE, now=NOW)

        assert result.success_ratio == 60.0
        assert result.total_orders == 12

    def test_camel_case_fallback(self):
        payload = {"successRatio": 0.9, "successfulOrders": 9, "failedOrders": 1, "fraudScore": "12"}
        result = normalize(payload, phone=PHONE, now=NOW)

        assert result.success_ratio == pytest.approx(90.0)
        assert result.successful_orders == 9
        assert result.failed_orders == 1
        assert result.fraud_score == 12.0
        assert result.risk_tier is RiskTier.LOW

    def test_data_envelope_is_unwrapped(self):
        payload = {"status": "success", "data": {"success_ratio": 55, "total_orders": 20}}
        result = normalize(payload, phone=PHONE, now=NOW)

        assert result.success_ratio == 55.0
        assert result.risk_tier is RiskTier.MEDIUM

    def test_garbled_ratio_is_high_risk_not_an_error(self):
        result = normalize({"success_ratio": "unknown"}, phone=PHONE, now=NOW)

        assert result.success_ratio is None
        assert result.risk_tier is RiskTier.HIGH
        assert result.to_dict()["successRatio"] == 0.0

    @pytest.mark.parametrize("payload", [None, [], "oops", 42])
    def test_non_object_payload(self, payload):
        result = normalize(payload, phone=PHONE, now=NOW)

        assert result.courier_breakdown == {}
        assert result.risk_tier is RiskTier.HIGH

    def test_summary_is_synthesized_for_flat_payload(self):
        payload = {"success_ratio": 0.5, "total_orders": 4, "successful_orders": 2, "failed_orders": 2}
        summary = normalize(payload, phone=PHONE, now=NOW).to_dict()["summary"]

        assert summary == {"total_parcel": 4, "success_parcel": 2, "cancelled_parcel": 2, "success_ratio": 50.0}

    def test_checked_at_is_ours(self):
        result = normalize({"checkedAt": "2001-01-01T00:00:00", "success_ratio": 80}, phone=PHONE, now=NOW)

        assert result.checked_at == NOW
        assert result.to_dict()["checkedAt"] == NOW.isoformat()

    def test_status_and_last_order_date_pass_through(self):
        payload = {"success_ratio": 80, "status": "verified", "lastOrderDate": "2026-09-30"}
        out = normalize(payload, phone=PHONE, now=NOW).to_dict()

        assert out["status"] == "verified"
        assert out["lastOrderDate"] == "2026-09-30"

    def test_default_status(self):
        assert normalize({}, phone=PHONE, now=NOW).status == "checked"
