# Overview: Order repository; maps order operations onto their stored procedures.

from ...responses import ErrorCode
from ...schemas import CreateOrderDto, OrderDto, OrderRefDto, UpdateOrderDto


def _lines(dto) -> list[dict]:
    return [{"item_id": line.item_id, "quantity": line.quantity} for line in dto.order_items]


class OrderRepository:
    """
    Typed access to the order procedures.

    Empty results: a missing row is NOT_FOUND for single fetches, an empty
    list for listings and INTERNAL for writes (a write procedure must always
    answer).
    """

    def __init__(self, gateway):
        self.gateway = gateway

    def get_all(self):
        return self.gateway.call(
            "sp_get_all_orders",
            decoder=OrderDto.many,
            many=True,
            on_empty=ErrorCode.OK,
        )

    def get_by_id(self, order_id: int):
        return self.gateway.call(
            "sp_get_order_by_id",
            {"p_order_id": order_id},
            decoder=OrderDto.from_payload,
            on_empty=ErrorCode.NOT_FOUND,
        )

    def get_by_user(self, user_id: int):
        return self.gateway.call(
            "sp_get_orders_by_user",
            {"p_user_id": user_id},
            decoder=OrderDto.many,
            many=True,
            on_empty=ErrorCode.OK,
        )

    def create(self, dto: CreateOrderDto, user_id: int):
        return self.gateway.call(
            "sp_create_order",
            {
                "p_customer_name": dto.customer_name,
                "p_customer_email": dto.customer_email,
                "p_order_items": _lines(dto),
                "p_user_id": user_id,
            },
            decoder=OrderRefDto.from_payload,
        )

    def update(self, order_id: int, dto: UpdateOrderDto, user_id: int):
        return self.gateway.call(
            "sp_update_order",
            {
                "p_order_id": order_id,
                "p_customer_name": dto.customer_name,
                "p_customer_email": dto.customer_email,
                "p_status": dto.status,
                "p_order_items": _lines(dto),
                "p_user_id": user_id,
            },
            decoder=OrderDto.from_payload,
        )

    def delete(self, order_id: int, user_id: int):
        return self.gateway.call(
            "sp_delete_order",
            {"p_order_id": order_id, "p_updated_by": user_id},
            decoder=OrderRefDto.from_payload,
        )

    def cancel(self, order_id: int, user_id: int):
        return self.gateway.call(
            "sp_cancel_order",
            {"p_order_id": order_id, "p_user_id": user_id},
            decoder=OrderDto.from_payload,
        )
