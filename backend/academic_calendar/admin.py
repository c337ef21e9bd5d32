from django.contrib import admin

from .models import AcademicYear


@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    list_display = ('year_name', 'course_name', 'college', 'year_number', 'is_active')
    list_filter = ('is_active', 'college')
    search_fields = ('year_name', 'course_name')
