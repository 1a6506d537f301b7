from typing import Iterable, List, Optional

from django.utils import timezone

from apps.common.repository import GenericRepository

from .models import CartClearTask, Order, OrderItem


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def _base_queryset(self):
        return self.model.objects.prefetch_related("items")

    def get(self, **filters) -> Optional[Order]:
        return self._base_queryset().filter(**filters).first()

    def list(self, **filters):
        return self._base_queryset().filter(**filters)

    def page_for_customer(self, customer_id: int, offset: int, limit: int) -> List[Order]:
        return list(self.list(customer_id=customer_id)[offset : offset + limit])

    def count(self, **filters) -> int:
        return self.model.objects.filter(**filters).count()


class OrderItemRepository(GenericRepository[OrderItem]):
    def __init__(self):
        super().__init__(OrderItem)

    def list_for_order(self, order_id: int) -> Iterable[OrderItem]:
        return self.model.objects.filter(order_id=order_id).order_by("id")


class CartClearTaskRepository(GenericRepository[CartClearTask]):
    def __init__(self):
        super().__init__(CartClearTask)

    def pending(self, limit: Optional[int] = None) -> List[CartClearTask]:
        qs = self.model.objects.filter(completed_at__isnull=True).order_by("created_at", "id")
        return list(qs[:limit] if limit else qs)

    def mark_done(self, task: CartClearTask) -> CartClearTask:
        return self.update(task, completed_at=timezone.now(), attempts=task.attempts + 1, last_error="")

    def mark_failed(self, task: CartClearTask, error: str) -> CartClearTask:
        return self.update(task, attempts=task.attempts + 1, last_error=error[:2000])
