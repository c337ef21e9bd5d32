from django.urls import path

from registrations.views import (
    ApprovalHistoryView,
    ApprovalStatisticsView,
    PendingApprovalsView,
    ProcessApprovalView,
    RegistrationRequestListCreateView,
)

urlpatterns = [
    path('', RegistrationRequestListCreateView.as_view(), name='registration-list-create'),
    path('approvals/pending/', PendingApprovalsView.as_view(), name='registration-approvals-pending'),
    path('approvals/statistics/', ApprovalStatisticsView.as_view(), name='registration-approvals-statistics'),
    path('approvals/<int:id>/', ProcessApprovalView.as_view(), name='registration-approval-process'),
    path('<int:id>/history/', ApprovalHistoryView.as_view(), name='registration-approval-history'),
]
