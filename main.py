import logging
from typing import List, Optional
from uuid import UUID
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from models import ErrorResponse, Order, OrderCreate, OrderStatusUpdate
from store import OrderStore
from errors import OrderNotFoundError, ValidationError
from dotenv import load_dotenv

# .envファイルから環境変数を読み込み
load_dotenv()

logger = logging.getLogger(__name__)

NOT_FOUND = {404: {"model": ErrorResponse}}


def get_store(request: Request) -> OrderStore:
    """アプリに紐づくストアを取得（ハンドラへの依存性注入用）"""
    return request.app.state.store


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(p for p in first.get("loc", ()) if isinstance(p, str) and p != "body")
    msg = first.get("msg", "Invalid request")
    return f"{loc}: {msg}" if loc else msg


def create_app(store: Optional[OrderStore] = None) -> FastAPI:
    """
    FastAPIアプリを生成

    ストアはアプリごとに1つ生成して app.state に保持する。
    テストでは任意のストアを渡して差し替えられる。
    """
    app = FastAPI(title="In-Memory Order Management API")
    app.state.store = store or OrderStore()

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("入力エラー (%s): %s", exc.field, exc.message)
        return _error(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(OrderNotFoundError)
    async def handle_not_found(request: Request, exc: OrderNotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_request(request: Request, exc: RequestValidationError):
        # パスのIDがUUIDでなければ、ボディの内容に関係なく「存在しない注文」
        for error in exc.errors():
            if tuple(error.get("loc", ()))[:2] == ("path", "order_id"):
                return _error(
                    status.HTTP_404_NOT_FOUND,
                    OrderNotFoundError(error.get("input")).message,
                )
        return _error(status.HTTP_400_BAD_REQUEST, _describe(exc))

    @app.middleware("http")
    async def handle_unexpected(request: Request, call_next):
        # Exception ハンドラは ServerErrorMiddleware に再送出されるのでミドルウェアで処理する
        try:
            return await call_next(request)
        except Exception:
            logger.exception("予期しないエラー: %s %s", request.method, request.url.path)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # ハンドラは def で定義しスレッドプールで並行実行させる（ストア側でロック）

    @app.post(
        "/create-order",
        response_model=Order,
        status_code=status.HTTP_201_CREATED,
        responses={400: {"model": ErrorResponse}},
    )
    def create_order(order: OrderCreate, store: OrderStore = Depends(get_store)):
        """新しい注文を作成"""
        return store.create(order.customer_name, order.items, order.total_amount)

    @app.get("/list-orders", response_model=List[Order])
    def list_orders(store: OrderStore = Depends(get_store)):
        """注文一覧を取得"""
        return store.list()

    @app.get("/orders/{order_id}", response_model=Order, responses=NOT_FOUND)
    def get_order(order_id: UUID, store: OrderStore = Depends(get_store)):
        """特定の注文を取得"""
        return store.get(order_id)

    @app.patch(
        "/orders/{order_id}/status",
        response_model=Order,
        responses={**NOT_FOUND, 400: {"model": ErrorResponse}},
    )
    def update_order_status(
        order_id: UUID, update: OrderStatusUpdate, store: OrderStore = Depends(get_store)
    ):
        """注文ステータスを更新"""
        return store.update_status(order_id, update.status)

    @app.delete(
        "/orders/{order_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses=NOT_FOUND,
    )
    def delete_order(order_id: UUID, store: OrderStore = Depends(get_store)):
        """注文を削除"""
        store.delete(order_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/")
    def root(store: OrderStore = Depends(get_store)):
        return {
            "message": "In-Memory Order Management API",
            "docs": "/docs",
            "orders": store.count(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    from run import start_server
    start_server()
