from django.contrib import admin

from .models import Resource, ResourceMedia


class ResourceMediaInline(admin.TabularInline):
    model = ResourceMedia
    extra = 0
    fields = ('student', 'image_url', 'latitude', 'longitude', 'upload_date')
    readonly_fields = fields
    can_delete = True


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ('resource_code', 'name', 'category', 'college', 'is_active')
    list_filter = ('category', 'college', 'is_active')
    search_fields = ('resource_code', 'name')
    inlines = (ResourceMediaInline,)


@admin.register(ResourceMedia)
class ResourceMediaAdmin(admin.ModelAdmin):
    list_display = ('resource', 'student', 'upload_date', 'latitude', 'longitude')
    list_filter = ('resource__category',)
    search_fields = ('resource__resource_code', 'student__username', 'student__email')
    date_hierarchy = 'upload_date'
    readonly_fields = ('resource', 'student', 'image_url', 'caption', 'latitude', 'longitude', 'upload_date')
