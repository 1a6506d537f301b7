from django.core.management.base import BaseCommand

from apps.orders.container import build_cart_clear_outbox


class Command(BaseCommand):
    help = "Retry cart clears that failed after checkout."

    def add_arguments(self, parser):
        parser.add_argument(
            "--limit", type=int, default=None, help="Process at most this many pending tasks"
        )

    def handle(self, *args, **options):
        outbox = build_cart_clear_outbox()
        completed, failed = outbox.replay(limit=options["limit"])
        self.stdout.write(f"Cart clear tasks completed: {completed}, still failing: {failed}")
        if failed:
            self.stdout.write(self.style.WARNING("Some cart clears are still pending."))
        else:
            self.stdout.write(self.style.SUCCESS("Cart clear outbox drained."))
