"""
注文ストアのエラー定義

ストアの操作はすべてここで定義した例外で失敗を通知する。
HTTP層(main.py)はこれらを捕捉してステータスコードに変換する。
"""


class OrderStoreError(Exception):
    """ストアエラーの基底クラス"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OrderStoreError):
    """注文作成時の入力値が不正 (HTTP 400)"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class OrderNotFoundError(OrderStoreError):
    """指定IDの注文が存在しない (HTTP 404)"""

    def __init__(self, order_id):
        super().__init__(f"Order with ID {order_id} not found")
        self.order_id = order_id
