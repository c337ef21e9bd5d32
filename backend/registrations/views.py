from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from registrations.models import ApprovalWorkflow, RegistrationRequest
from registrations.serializers import (
    ApprovalHistorySerializer,
    ApprovalWorkflowSerializer,
    ProcessApprovalSerializer,
    RegistrationCreateSerializer,
    RegistrationRequestSerializer,
)
from registrations.services import inbox_service
from registrations.services.workflow_engine import engine


class RegistrationRequestListCreateView(APIView):
    def get_permissions(self):
        if self.request.method == 'POST':
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request, *args, **kwargs):
        qs = inbox_service.get_visible_requests(request.user)
        if qs is None:
            return Response(
                {'detail': 'You are not authorized to view registration requests'},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response(RegistrationRequestSerializer(qs, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = RegistrationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = serializer.save()
        workflow = registration.workflow
        return Response(
            {
                'id': registration.id,
                'status': registration.status,
                'workflow_id': workflow.id,
                'current_approver_role': workflow.current_approver_role,
            },
            status=status.HTTP_201_CREATED,
        )


class PendingApprovalsView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        qs = inbox_service.get_pending_approvals_for_user(request.user)
        return Response(ApprovalWorkflowSerializer(qs, many=True).data)


class ProcessApprovalView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, id: int, *args, **kwargs):
        workflow = get_object_or_404(ApprovalWorkflow, pk=id)
        serializer = ProcessApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        action = serializer.validated_data['action']
        updated = engine.advance(
            workflow,
            action,
            request.user,
            reason=serializer.validated_data.get('rejection_reason') or None,
        )

        if action == 'reject':
            message = 'Request rejected successfully'
        elif updated.status == ApprovalWorkflow.Status.COMPLETED:
            message = 'Request approved and user account created'
        else:
            message = 'Request approved and forwarded to next level'
        return Response({'detail': message, 'workflow': ApprovalWorkflowSerializer(updated).data})


class ApprovalHistoryView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int, *args, **kwargs):
        registration = get_object_or_404(RegistrationRequest.objects.select_related('college'), pk=id)
        if not inbox_service.can_user_view_request(registration, request.user):
            return Response({'detail': 'Not authorized to view approval history'}, status=status.HTTP_403_FORBIDDEN)

        try:
            workflow = registration.workflow
        except ObjectDoesNotExist:
            workflow = None

        timeline = []
        if workflow is not None:
            actions = workflow.actions.select_related('acted_by').order_by('acted_at', 'id')
            timeline = ApprovalHistorySerializer(actions, many=True).data

        return Response({
            'request_id': registration.id,
            'request_type': registration.request_type,
            'status': registration.status,
            'workflow_status': workflow.status if workflow else None,
            'current_approver_role': workflow.current_approver_role if workflow else None,
            'timeline': timeline,
        })


class ApprovalStatisticsView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        rows = inbox_service.get_approval_statistics(request.user)
        if rows is None:
            return Response(
                {'detail': 'Insufficient permissions to view statistics'},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response(rows)
