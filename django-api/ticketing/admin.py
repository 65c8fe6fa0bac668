from django.contrib import admin

from ticketing.models import Discount, Event, Member, ReferralReward, Ticket, TicketTypeOption


class TicketTypeOptionInline(admin.TabularInline):
    model = TicketTypeOption
    extra = 1


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "location", "starts_at"]
    search_fields = ["name", "location"]
    inlines = [TicketTypeOptionInline]


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "role", "reward_points"]
    search_fields = ["name", "email"]


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = ["code", "event", "discount_type", "value", "used_count", "max_usage", "is_active"]
    list_filter = ["event", "is_active"]
    readonly_fields = ["used_count"]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "member", "ticket_type", "final_price", "status", "created_at"]
    list_filter = ["event", "status", "ticket_type"]
    readonly_fields = ["price", "final_price", "discount", "badge", "badge_pdf"]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ReferralReward)
class ReferralRewardAdmin(admin.ModelAdmin):
    list_display = ["ticket", "referrer", "points", "created_at"]
