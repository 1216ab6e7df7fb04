# Overview: Pytest coverage for the response envelope and status mapping.

from decimal import Decimal

import pytest
from orderhub.responses import BaseResponse, ErrorCode, status_for
from orderhub.schemas import OrderItemDto, StockSummaryDto


class TestStatusMapping:

    @pytest.mark.parametrize(
        "code,status",
        [(0, 200), (400, 400), (401, 401), (403, 403), (404, 404), (409, 409), (500, 500)],
    )
    def test_known_codes(self, code, status):
        assert status_for(code) == status

    @pytest.mark.parametrize("code", [1, 418, 502, -1, 999])
    def test_unknown_codes_are_internal(self, code):
        assert status_for(code) == 500


class TestEnvelope:

    def test_success_shape(self):
        response = BaseResponse.success({"id": 1}, "Done")
        assert response.ok
        assert response.status_code == 200
        assert response.to_dict() == {"message": "Done", "errorCode": 0, "data": {"id": 1}}

    def test_error_has_no_data(self):
        response = BaseResponse.error("Order not found", ErrorCode.NOT_FOUND)
        assert not response.ok
        assert response.status_code == 404
        assert response.to_dict() == {"message": "Order not found", "errorCode": 404, "data": None}

    def test_error_defaults_to_internal(self):
        assert BaseResponse.error("boom").error_code == 500

    def test_nested_dtos_serialize_camel_case(self):
        line = OrderItemDto(id=1, item_id=7, quantity=2, unit_price=Decimal("2.50"),
                            total_price=Decimal("5.00"), item_name="Gadget")
        payload = BaseResponse.success([line]).to_dict()["data"]
        assert payload == [{
            "id": 1,
            "itemId": 7,
            "quantity": 2,
            "unitPrice": 2.5,
            "totalPrice": 5.0,
            "itemName": "Gadget",
        }]

    def test_schema_decoding_ignores_key_style(self):
        summary = StockSummaryDto.from_payload({
            "TotalItems": 3,
            "items_in_stock": 2,
            "itemsOutOfStock": 1,
            "LOW_STOCK_ITEMS": 1,
            "total_inventory_value": "12.50",
        })
        assert summary.total_items == 3
        assert summary.low_stock_items == 1
        assert summary.total_inventory_value == Decimal("12.50")

    def test_schema_decoding_rejects_missing_fields(self):
        with pytest.raises(ValueError):
            StockSummaryDto.from_payload({"totalItems": 1})
