from datetime import datetime, timezone


class DummyAtomic:
    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class StubItemsManager:
    def __init__(self, repo, order):
        self._repo = repo
        self._order = order

    def all(self):
        return self._repo.list_for_order(self._order.id)


class StubOrder:
    def __init__(self, order_id, item_repo, **fields):
        self.id = order_id
        self.customer_id = fields["customer_id"]
        self.status = fields.get("status", "PENDING")
        self.total_amount = fields.get("total_amount")
        self.customer_name = fields.get("customer_name")
        self.customer_email = fields.get("customer_email")
        self.shipping_address_id = fields.get("shipping_address_id")
        self.shipping_address = fields.get("shipping_address")
        self.order_date = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self.updated_date = self.order_date
        self.items = StubItemsManager(item_repo, self)


class StubOrderItem:
    def __init__(self, item_id, order, **fields):
        self.id = item_id
        self.order = order
        self.order_id = order.id
        for key, value in fields.items():
            setattr(self, key, value)


class FakeOrderItemRepository:
    def __init__(self):
        self._storage = {}
        self._pk = 1

    def create(self, **data):
        order = data.pop("order")
        item = StubOrderItem(self._pk, order, **data)
        self._storage[self._pk] = item
        self._pk += 1
        return item

    def list_for_order(self, order_id):
        return [i for i in self._storage.values() if i.order_id == order_id]

    def get(self, **filters):
        for item in self._storage.values():
            if all(getattr(item, key) == value for key, value in filters.items()):
                return item
        return None

    def delete(self, item):
        self._storage.pop(item.id, None)


class FakeOrderRepository:
    def __init__(self, item_repo):
        self._item_repo = item_repo
        self._storage = {}
        self._pk = 1
        self.locked = []

    def create(self, **data):
        order = StubOrder(self._pk, self._item_repo, **data)
        self._storage[self._pk] = order
        self._pk += 1
        return order

    def get(self, **filters):
        return self._storage.get(filters.get("id"))

    def get_for_update(self, **filters):
        self.locked.append(filters.get("id"))
        return self.get(**filters)

    def list(self, **filters):
        return list(self._storage.values())

    def page_for_customer(self, customer_id, offset, limit):
        rows = [o for o in self._storage.values() if o.customer_id == customer_id]
        return rows[offset : offset + limit]

    def count(self, **filters):
        return len([o for o in self._storage.values() if o.customer_id == filters["customer_id"]])

    def update(self, obj, **data):
        for key, value in data.items():
            setattr(obj, key, value)
        return obj


class FakeCartClearTaskRepository:
    def __init__(self):
        self.tasks = []

    def create(self, **data):
        task = type("Task", (), {})()
        task.id = len(self.tasks) + 1
        task.customer_id = data["customer_id"]
        task.order_id = data["order_id"]
        task.last_error = data.get("last_error", "")
        task.attempts = 0
        task.completed_at = None
        self.tasks.append(task)
        return task

    def pending(self, limit=None):
        rows = [t for t in self.tasks if t.completed_at is None]
        return rows[:limit] if limit else rows

    def mark_done(self, task):
        task.attempts += 1
        task.completed_at = "done"
        task.last_error = ""
        return task

    def mark_failed(self, task, error):
        task.attempts += 1
        task.last_error = error
        return task
