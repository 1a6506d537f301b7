from apps.common.repository import GenericRepository

from .models import Payment


class PaymentRepository(GenericRepository[Payment]):
    def __init__(self):
        super().__init__(Payment)

    def list_for_order(self, order_id: int):
        return self.model.objects.filter(order_id=order_id).order_by("id")

    def delete_matching(self, pk, **conditions) -> bool:
        """Delete the row only while it still matches `conditions`."""
        deleted, _ = self.model.objects.filter(pk=pk, **conditions).delete()
        return deleted > 0
