from django.contrib import admin

from batches.models import Batch


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = ("product", "batch_number", "status", "expires_at", "opened_at")
    list_filter = ("status", "expires_at")
    search_fields = ("batch_number", "product__name")
    readonly_fields = ("opened_at", "opened_by", "version")
