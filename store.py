import logging
import math
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set
from models import Order, OrderStatus
from errors import OrderNotFoundError, ValidationError

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStore:
    """
    スレッドセーフなインメモリ注文ストア

    - キー: 注文ID (UUID4、作成時にストアが採番)
    - 値: Order
    - 全操作を1つのロックで直列化する（読み取りも含む）
    - 返す注文は常にコピー。内部の Order を外に渡さない
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ):
        self._orders: Dict[uuid.UUID, Order] = {}
        self._lock = threading.Lock()
        self._clock = clock or utc_now
        self._new_id = id_factory
        # 一度でも払い出したIDは削除後も再利用しない
        self._issued: Set[uuid.UUID] = set()

    def create(self, customer_name: str, items: List[str], total_amount: float) -> Order:
        """注文を作成して保存"""
        self._validate(customer_name, items, total_amount)

        now = self._clock()
        order = Order(
            id=self._new_id(),
            customer_name=customer_name,
            items=list(items),
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            while order.id in self._issued:
                order.id = self._new_id()
            self._issued.add(order.id)
            self._orders[order.id] = order
            created = order.model_copy(deep=True)

        logger.info("注文を作成しました: %s", created.id)
        return created

    def get(self, order_id) -> Order:
        """特定の注文を取得"""
        key = self._key(order_id)
        with self._lock:
            order = self._orders.get(key)
            if order is None:
                raise OrderNotFoundError(order_id)
            return order.model_copy(deep=True)

    def list(self) -> List[Order]:
        """全注文を取得（順序は保証しない）"""
        with self._lock:
            orders = [order.model_copy(deep=True) for order in self._orders.values()]
        logger.debug("注文一覧: %d件", len(orders))
        return orders

    def update_status(self, order_id, status: OrderStatus) -> Order:
        """
        注文ステータスを更新

        遷移の妥当性はチェックしない（どのステータスからどのステータスへも変更可）。
        updated_at は直前の値より過去にならない。
        """
        key = self._key(order_id)
        with self._lock:
            order = self._orders.get(key)
            if order is None:
                raise OrderNotFoundError(order_id)
            order.status = status
            order.updated_at = max(self._clock(), order.updated_at)
            updated = order.model_copy(deep=True)

        logger.info("注文ステータスを更新しました: %s -> %s", key, status.value)
        return updated

    def delete(self, order_id) -> None:
        """注文を削除"""
        key = self._key(order_id)
        with self._lock:
            if self._orders.pop(key, None) is None:
                raise OrderNotFoundError(order_id)

        logger.info("注文を削除しました: %s", key)

    def count(self) -> int:
        with self._lock:
            return len(self._orders)

    @staticmethod
    def _validate(customer_name: str, items: List[str], total_amount: float):
        if not customer_name or not customer_name.strip():
            raise ValidationError("customer_name", "Customer name cannot be empty")
        if not items:
            raise ValidationError("items", "Order must contain at least one item")
        if not (math.isfinite(total_amount) and total_amount > 0):
            raise ValidationError("total_amount", "Total amount must be greater than zero")

    @staticmethod
    def _key(order_id) -> uuid.UUID:
        # UUID として解釈できないIDは「存在しない注文」として扱う
        if isinstance(order_id, uuid.UUID):
            return order_id
        try:
            return uuid.UUID(str(order_id))
        except ValueError:
            raise OrderNotFoundError(order_id)
