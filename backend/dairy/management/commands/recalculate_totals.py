from django.core.management.base import BaseCommand
from django.db import transaction

from dairy.models import MilkDistribution, MilkStore
from dairy.services import (
    retire_milk_purchase_expense,
    retire_milk_sale_income,
    sync_milk_purchase_expense,
    sync_milk_sale_income,
)


class Command(BaseCommand):
    help = 'Recalculate milk record totals and resync the linked income and expense rows.'

    def handle(self, *args, **options):
        purchases = sales = 0
        with transaction.atomic():
            for purchase in MilkStore.objects.select_related('buyer'):
                purchase.save(update_fields=['total_amount', 'updated_at'])
                if purchase.is_deleted:
                    retire_milk_purchase_expense(purchase)
                else:
                    sync_milk_purchase_expense(purchase)
                purchases += 1

            for sale in MilkDistribution.objects.select_related('seller'):
                sale.save(update_fields=['total_amount', 'updated_at'])
                if sale.is_deleted:
                    retire_milk_sale_income(sale)
                else:
                    sync_milk_sale_income(sale)
                sales += 1

        self.stdout.write(
            self.style.SUCCESS(f'Recalculated {purchases} milk purchases and {sales} milk sales')
        )
