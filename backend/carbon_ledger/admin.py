"""
Django admin configuration for ledger models.

Ledger records only change through ledger operations, so every admin here
is read-only.
"""

from django.contrib import admin
from .models import (
    Farm, Sensor, CarbonMeasurement, SatelliteObservation, MeasurementVerification,
    CarbonCredit, CorporateBuyer, CreditTransaction, PracticeVerification,
    IncentivePayment, PlatformStatistics
)


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    """Base admin that exposes ledger records without allowing edits."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Farm)
class FarmAdmin(ReadOnlyLedgerAdmin):
    """Admin interface for Farm model."""

    list_display = [
        'farm_id', 'owner', 'area_hectares', 'baseline_carbon',
        'is_verified', 'total_credits_issued', 'registration_tick'
    ]

    list_filter = ['is_verified', 'created_at']

    search_fields = ['farm_id', 'owner']

    fieldsets = (
        ('Identity', {
            'fields': ('farm_id', 'owner', 'registration_tick')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude', 'area_hectares')
        }),
        ('Carbon', {
            'fields': ('baseline_carbon', 'total_credits_issued', 'practices', 'is_verified')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )


@admin.register(Sensor)
class SensorAdmin(ReadOnlyLedgerAdmin):
    list_display = ['sensor_id', 'farm', 'sensor_type', 'is_active', 'calibration_tick']
    list_filter = ['sensor_type', 'is_active']
    search_fields = ['sensor_id', 'farm__farm_id']


@admin.register(CarbonMeasurement)
class CarbonMeasurementAdmin(ReadOnlyLedgerAdmin):
    """Admin interface for CarbonMeasurement model."""

    list_display = [
        'measurement_id', 'farm', 'source_kind', 'carbon_level',
        'confidence', 'status', 'measurement_tick'
    ]
    list_filter = ['source_kind', 'status']
    search_fields = ['measurement_id', 'farm__farm_id', 'source_id']

    def get_queryset(self, request):
        """Optimize queryset with select_related."""
        return super().get_queryset(request).select_related('farm')


@admin.register(SatelliteObservation)
class SatelliteObservationAdmin(ReadOnlyLedgerAdmin):
    list_display = ['data_id', 'provider', 'ndvi', 'carbon_estimate', 'cloud_cover', 'quality_score']
    list_filter = ['provider']


@admin.register(MeasurementVerification)
class MeasurementVerificationAdmin(ReadOnlyLedgerAdmin):
    list_display = ['verification_id', 'measurement', 'verifier', 'method', 'verified_level']
    search_fields = ['verification_id', 'measurement__measurement_id']


@admin.register(CarbonCredit)
class CarbonCreditAdmin(ReadOnlyLedgerAdmin):
    """Admin interface for CarbonCredit model."""

    list_display = [
        'credit_id', 'farm', 'farmer', 'issued_amount', 'remaining_amount',
        'unit_price', 'vintage_year', 'status'
    ]
    list_filter = ['status', 'vintage_year', 'methodology']
    search_fields = ['credit_id', 'farmer', 'farm__farm_id']


@admin.register(CorporateBuyer)
class CorporateBuyerAdmin(ReadOnlyLedgerAdmin):
    list_display = ['buyer', 'company_name', 'is_verified', 'total_purchases', 'credit_limit']
    list_filter = ['is_verified']
    search_fields = ['buyer', 'company_name']


@admin.register(CreditTransaction)
class CreditTransactionAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        'transaction_id', 'credit', 'seller', 'buyer', 'amount',
        'unit_price', 'total_price', 'platform_fee'
    ]
    search_fields = ['transaction_id', 'seller', 'buyer', 'credit__credit_id']


@admin.register(PracticeVerification)
class PracticeVerificationAdmin(ReadOnlyLedgerAdmin):
    list_display = ['verification_id', 'farm', 'practice', 'compliance_score', 'verifier']
    list_filter = ['practice']


@admin.register(IncentivePayment)
class IncentivePaymentAdmin(ReadOnlyLedgerAdmin):
    list_display = ['payment_id', 'recipient', 'farm', 'amount', 'payment_type', 'practice']
    list_filter = ['payment_type', 'practice']


@admin.register(PlatformStatistics)
class PlatformStatisticsAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        'total_credits_issued', 'total_credits_sold', 'total_revenue',
        'average_price', 'platform_fee_bps'
    ]
