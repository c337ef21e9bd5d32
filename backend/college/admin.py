from django.contrib import admin

from .models import College, Department


class DepartmentInline(admin.TabularInline):
    model = Department
    extra = 0
    fields = ('code', 'name', 'short_name', 'is_active')


@admin.register(College)
class CollegeAdmin(admin.ModelAdmin):
    list_display = ('code', 'short_name', 'name', 'city', 'is_active')
    search_fields = ('code', 'short_name', 'name', 'city')
    list_filter = ('is_active', 'city')
    inlines = (DepartmentInline,)


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'college', 'is_active')
    search_fields = ('code', 'name', 'college__code')
    list_filter = ('college', 'is_active')
