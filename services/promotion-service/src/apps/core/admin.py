from django.contrib import admin
from .models import PromotionLevelTemplate, UserClubPromotionProgress, PromotionClaim


@admin.register(PromotionLevelTemplate)
class PromotionLevelTemplateAdmin(admin.ModelAdmin):
    list_display = ['level_number', 'title', 'scope', 'club_id', 'version', 'is_active']
    list_filter = ['scope', 'is_active']
    search_fields = ['title']


@admin.register(UserClubPromotionProgress)
class UserClubPromotionProgressAdmin(admin.ModelAdmin):
    list_display = ['user_id', 'club_id', 'current_level', 'current_progress', 'status', 'pending_claims_count']
    list_filter = ['status']
    readonly_fields = ['revision', 'created_at', 'updated_at']


@admin.register(PromotionClaim)
class PromotionClaimAdmin(admin.ModelAdmin):
    list_display = ['mission_key', 'user_id', 'club_id', 'status', 'reward_granted', 'created_at']
    list_filter = ['status', 'mission_type', 'reward_granted']
