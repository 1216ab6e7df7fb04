# Overview: Inventory repository; items and stock levels via stored procedures.

from ...responses import ErrorCode
from ...schemas import (
    AdjustStockDto,
    CreateInventoryItemDto,
    InventoryItemDto,
    ItemRefDto,
    StockDto,
    StockRefDto,
    StockSummaryDto,
    UpdateInventoryItemDto,
    UpdateStockDto,
)


class InventoryRepository:
    def __init__(self, gateway):
        self.gateway = gateway

    # Items

    def get_all_items(self):
        return self.gateway.call(
            "sp_get_all_items",
            decoder=InventoryItemDto.many,
            many=True,
            on_empty=ErrorCode.OK,
        )

    def get_item_by_id(self, item_id: int):
        return self.gateway.call(
            "sp_get_item_by_id",
            {"p_id": item_id},
            decoder=InventoryItemDto.from_payload,
            on_empty=ErrorCode.NOT_FOUND,
        )

    def create_item(self, dto: CreateInventoryItemDto, user_id: int):
        return self.gateway.call(
            "sp_create_item",
            {
                "p_item_name": dto.item_name,
                "p_item_code": dto.item_code,
                "p_description": dto.description,
                "p_category": dto.category,
                "p_unit_price": dto.unit_price,
                "p_created_by": user_id,
                "p_initial_quantity": dto.initial_quantity,
                "p_warehouse_location": dto.warehouse_location,
            },
            decoder=InventoryItemDto.from_payload,
        )

    def update_item(self, item_id: int, dto: UpdateInventoryItemDto, user_id: int):
        return self.gateway.call(
            "sp_update_item",
            {
                "p_id": item_id,
                "p_item_name": dto.item_name,
                "p_item_code": dto.item_code,
                "p_description": dto.description,
                "p_category": dto.category,
                "p_unit_price": dto.unit_price,
                "p_is_active": dto.is_active,
                "p_updated_by": user_id,
            },
            decoder=InventoryItemDto.from_payload,
        )

    def delete_item(self, item_id: int, user_id: int):
        return self.gateway.call(
            "sp_delete_item",
            {"p_id": item_id, "p_updated_by": user_id},
            decoder=ItemRefDto.from_payload,
        )

    # Stock

    def get_all_stock(self):
        return self.gateway.call(
            "sp_get_all_stock",
            decoder=StockDto.many,
            many=True,
            on_empty=ErrorCode.OK,
        )

    def update_stock(self, dto: UpdateStockDto, user_id: int):
        return self.gateway.call(
            "sp_update_stock",
            {
                "p_item_id": dto.item_id,
                "p_quantity_available": dto.quantity_available,
                "p_warehouse_location": dto.warehouse_location,
                "p_updated_by": user_id,
            },
            decoder=StockDto.from_payload,
        )

    def adjust_stock(self, dto: AdjustStockDto, user_id: int):
        return self.gateway.call(
            "sp_adjust_stock",
            {
                "p_item_id": dto.item_id,
                "p_quantity_change": dto.quantity_change,
                "p_reason": dto.reason,
                "p_updated_by": user_id,
            },
            decoder=StockDto.from_payload,
        )

    def delete_stock(self, item_id: int, user_id: int):
        return self.gateway.call(
            "sp_delete_stock",
            {"p_item_id": item_id, "p_updated_by": user_id},
            decoder=StockRefDto.from_payload,
        )

    def get_stock_summary(self):
        return self.gateway.call("sp_get_stock_summary", decoder=StockSummaryDto.from_payload)
