"""多数の呼び出し元から同時にストアを操作するストレステスト"""

from concurrent.futures import ThreadPoolExecutor

from models import OrderStatus
from store import OrderStore

WORKERS = 32


def test_concurrent_creates_keep_every_order():
    store = OrderStore()
    k = 500
    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        orders = list(pool.map(lambda i: store.create(f"c{i}", ["item"], 1.0 + i), range(k)))

    assert len({o.id for o in orders}) == k
    assert store.count() == k
    assert {o.id for o in store.list()} == {o.id for o in orders}


def test_concurrent_mixed_operations():
    store = OrderStore()
    seeded = [store.create(f"c{i}", ["item"], 1.0) for i in range(200)]
    to_delete = seeded[:100]
    to_update = seeded[100:]

    def work(i):
        if i < 100:
            store.delete(to_delete[i].id)
        elif i < 200:
            store.update_status(to_update[i - 100].id, OrderStatus.SHIPPED)
        elif i < 300:
            store.create(f"new{i}", ["item"], 2.0)
        else:
            store.list()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(work, range(400)))

    remaining = store.list()
    assert len(remaining) == 200
    survivors = {o.id: o for o in remaining}
    for order in to_update:
        assert survivors[order.id].status == OrderStatus.SHIPPED
    for order in to_delete:
        assert order.id not in survivors


def test_concurrent_http_creates(client):
    k = 200
    with ThreadPoolExecutor(max_workers=16) as pool:
        responses = list(pool.map(
            lambda i: client.post(
                "/create-order",
                json={"customer_name": f"c{i}", "items": ["item"], "total_amount": 1.5},
            ),
            range(k),
        ))

    assert all(r.status_code == 201 for r in responses)
    assert len({r.json()["id"] for r in responses}) == k
    assert len(client.get("/list-orders").json()) == k
