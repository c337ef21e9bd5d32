from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    # inherit Django's user add/change forms which correctly handle password hashing
    list_display = ('username', 'email', 'role', 'college', 'department', 'is_active')
    list_filter = DjangoUserAdmin.list_filter + ('role', 'college')
    search_fields = ('username', 'email', 'first_name', 'last_name', 'roll_number')
    actions = ('deactivate_users',)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Institution', {'fields': ('role', 'college', 'department', 'academic_year')}),
        ('Class', {'fields': ('class_name', 'class_in_charge', 'roll_number', 'phone')}),
    )

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f'{updated} user(s) deactivated.')
