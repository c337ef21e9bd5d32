from django.contrib import admin

from .models import ApprovalAction, ApprovalWorkflow, RegistrationRequest


class ApprovalActionInline(admin.TabularInline):
    model = ApprovalAction
    extra = 0
    fields = ('role', 'action', 'acted_by', 'remarks', 'acted_at')
    readonly_fields = fields
    can_delete = False


@admin.register(RegistrationRequest)
class RegistrationRequestAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'role', 'college', 'department', 'status', 'requested_at')
    list_filter = ('role', 'status', 'college')
    search_fields = ('name', 'email', 'roll_number')
    exclude = ('password_hash',)
    readonly_fields = ('status', 'reviewed_by', 'reviewed_at', 'rejection_reason', 'requested_at', 'updated_at')


@admin.register(ApprovalWorkflow)
class ApprovalWorkflowAdmin(admin.ModelAdmin):
    list_display = ('id', 'request', 'request_type', 'current_approver_role', 'current_approver', 'status', 'created_at')
    list_filter = ('status', 'request_type', 'current_approver_role')
    search_fields = ('request__name', 'request__email')
    readonly_fields = ('request', 'request_type', 'status', 'completed_at', 'created_at', 'updated_at')
    inlines = (ApprovalActionInline,)
