from typing import Any, Generic, Iterable, Optional, Type, TypeVar

from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, **filters) -> Optional[T]:
        return self.model.objects.filter(**filters).first()

    def get_for_update(self, **filters) -> Optional[T]:
        """Row-locking fetch; only meaningful inside transaction.atomic()."""
        return self.model.objects.select_for_update().filter(**filters).first()

    def list(self, **filters) -> Iterable[T]:
        return self.model.objects.filter(**filters)

    def exists(self, **filters) -> bool:
        return self.model.objects.filter(**filters).exists()

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def update(self, obj: T, **data) -> T:
        """Write only the given fields so a stale instance cannot roll back other columns."""
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save(update_fields=list(data))
        return obj

    def compare_and_set(self, pk: Any, field: str, expected: Any, **changes) -> bool:
        """Apply `changes` only while `field` still holds `expected`; True when a row was updated."""
        updated = self.model.objects.filter(pk=pk, **{field: expected}).update(**changes)
        return updated == 1

    def delete(self, obj: T):
        obj.delete()
