# backend/dairy/admin.py

from django.contrib import admin
from .models import (
    Activity,
    Buyer,
    BuyerPayment,
    Expense,
    Income,
    MilkDistribution,
    MilkStore,
    Seller,
    SellerPayment,
)


@admin.register(Buyer, Seller)
class CounterpartyAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'mobile_number', 'city', 'is_deleted', 'created_at')
    list_filter = ('is_deleted', 'city')
    search_fields = ('full_name', 'mobile_number')


@admin.register(MilkStore)
class MilkStoreAdmin(admin.ModelAdmin):
    list_display = ('date', 'buyer_name', 'milk_type', 'total_qty', 'buyer_price', 'total_amount', 'is_deleted')
    list_filter = ('milk_type', 'is_deleted')
    readonly_fields = ('total_amount',)


@admin.register(MilkDistribution)
class MilkDistributionAdmin(admin.ModelAdmin):
    list_display = ('date', 'seller_name', 'milk_type', 'total_qty', 'seller_price', 'total_amount', 'is_deleted')
    list_filter = ('milk_type', 'is_deleted')
    readonly_fields = ('total_amount',)


admin.site.register(BuyerPayment)
admin.site.register(SellerPayment)
admin.site.register(Income)
admin.site.register(Expense)
admin.site.register(Activity)
