"""
Cabins admin configuration.

Supports:
- Location management with nested cabin inlines
- Cabin management with per-date override inlines
- Booking list with status actions
"""

from django.contrib import admin
from django.db.models import Prefetch
from django.urls import reverse
from django.utils.html import format_html

from . import conf
from .exceptions import CabinDataError
from .models import Location, Cabin, CabinDateOverride, Booking
from .services import catalog, resolve_slot, statuses_policy
from .services.snapshots import SHIFTS, booking_snapshot_from_model, cabin_snapshot_from_model

SHIFT_VALUES = {shift.value for shift in SHIFTS}


# =============================================================================
# LOCATION ADMIN
# =============================================================================

class CabinInline(admin.TabularInline):
    """Inline for cabins within a location."""
    model = Cabin
    extra = 0
    fields = ['name', 'price', 'sort_order']
    show_change_link = True


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'city', 'cabins_count_display', 'is_active']
    list_filter = ['is_active', 'state']
    search_fields = ['name', 'code', 'city']
    prepopulated_fields = {'code': ('name',)}
    readonly_fields = ['cabins_count', 'created_at', 'updated_at']

    fieldsets = (
        (None, {
            'fields': ('name', 'code', 'is_active')
        }),
        ('Address', {
            'fields': ('address', 'city', 'state', 'zip_code'),
        }),
        ('Metadata', {
            'fields': ('cabins_count', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    inlines = [CabinInline]

    def cabins_count_display(self, obj):
        """Link the cabin count to the filtered cabin list."""
        if obj.cabins_count > 0:
            url = reverse('admin:cabins_cabin_changelist') + f'?location__id__exact={obj.id}'
            return format_html('<a href="{}">{} cabins</a>', url, obj.cabins_count)
        return '0'
    cabins_count_display.short_description = 'Cabins'


# =============================================================================
# CABIN ADMIN
# =============================================================================

class CabinDateOverrideInline(admin.TabularInline):
    model = CabinDateOverride
    extra = 0
    fields = ['date', 'shift', 'price', 'available']
    ordering = ['date', 'shift']


@admin.register(Cabin)
class CabinAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'price', 'status_today', 'sort_order', 'created_at']
    list_filter = ['location']
    search_fields = ['name', 'location__name']
    list_editable = ['sort_order']
    readonly_fields = ['created_at']

    fieldsets = (
        (None, {
            'fields': ('location', 'name', 'description', 'equipment', 'sort_order')
        }),
        ('Availability & Pricing', {
            'fields': ('base_availability', 'default_pricing', 'price'),
            'description': 'Weekday keys run from 0 (Sunday) to 6 (Saturday).',
        }),
        ('Metadata', {
            'fields': ('created_at',),
            'classes': ('collapse',),
        }),
    )

    inlines = [CabinDateOverrideInline]

    def get_queryset(self, request):
        today = catalog.get_today()
        return super().get_queryset(request).select_related('location').prefetch_related(
            Prefetch('date_overrides', queryset=CabinDateOverride.objects.filter(date=today)),
            Prefetch(
                'bookings',
                queryset=Booking.objects.filter(
                    date=today, status__in=list(conf.get_setting('BLOCKING_BOOKING_STATUSES'))
                ),
                to_attr='bookings_today',
            ),
        )

    def status_today(self, obj):
        """Resolved status of each shift today, from the prefetched rows."""
        today = catalog.get_today()
        statuses = conf.get_setting('BLOCKING_BOOKING_STATUSES')
        bookings = [
            booking_snapshot_from_model(b) for b in obj.bookings_today if b.shift in SHIFT_VALUES
        ]
        snapshot = cabin_snapshot_from_model(obj)
        parts = []
        for shift in SHIFTS:
            try:
                slot = resolve_slot(snapshot, today, shift, bookings, today, blocks_slot=statuses_policy(statuses))
                parts.append(f"{shift.value}: {slot.status.value}")
            except CabinDataError:
                parts.append(f"{shift.value}: unknown")
        return ' | '.join(parts)
    status_today.short_description = 'Today'


@admin.register(CabinDateOverride)
class CabinDateOverrideAdmin(admin.ModelAdmin):
    list_display = ['cabin', 'date', 'shift', 'price', 'available']
    list_filter = ['shift', 'available', 'cabin__location']
    date_hierarchy = 'date'


# =============================================================================
# BOOKING ADMIN
# =============================================================================

@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['cabin', 'date', 'shift', 'professional_name', 'status_badge', 'price']
    list_filter = ['status', 'shift', 'cabin__location']
    search_fields = ['professional_name', 'cabin__name']
    date_hierarchy = 'date'
    actions = ['mark_cancelled']

    STATUS_COLORS = {
        'confirmed': '#28a745',
        'pending': '#ffc107',
        'cancelled': '#6c757d',
    }

    def status_badge(self, obj):
        color = self.STATUS_COLORS.get(obj.status, '#6c757d')
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color, obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    @admin.action(description='Cancel selected bookings')
    def mark_cancelled(self, request, queryset):
        updated = queryset.update(status='cancelled')
        self.message_user(request, f"{updated} booking(s) cancelled.")
