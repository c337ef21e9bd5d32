from django.contrib.auth import get_user_model
from django.db.models import F, Q
from rest_framework import serializers

from academic_calendar.models import AcademicYear
from college.models import College, Department
from registrations.models import ApprovalAction, ApprovalWorkflow, RegistrationRequest
from registrations.services import registration_service

User = get_user_model()

ROLES_NEEDING_DEPARTMENT = ('student', 'staff', 'hod')


class RegistrationCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    role = serializers.ChoiceField(choices=RegistrationRequest.Role.choices)
    password = serializers.CharField(write_only=True, min_length=8, trim_whitespace=False)
    college = serializers.PrimaryKeyRelatedField(queryset=College.objects.filter(is_active=True))
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.filter(is_active=True), required=False, allow_null=True,
    )
    class_name = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    roll_number = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    academic_year = serializers.PrimaryKeyRelatedField(
        queryset=AcademicYear.objects.filter(is_active=True), required=False, allow_null=True,
    )
    year_name = serializers.CharField(max_length=32, required=False, allow_blank=True, write_only=True)

    def validate_email(self, value):
        email = value.strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError(
                'An account with this email address already exists. Please use a different email or try logging in.'
            )
        if RegistrationRequest.objects.filter(email__iexact=email, status=RegistrationRequest.Status.PENDING).exists():
            raise serializers.ValidationError('A pending registration request already exists for this email')
        return email

    def validate(self, attrs):
        role = attrs['role']
        college = attrs['college']
        department = attrs.get('department')

        if role in ROLES_NEEDING_DEPARTMENT and department is None:
            raise serializers.ValidationError({'department': f'Department is required for {role} registration'})
        if department is not None and department.college_id != college.pk:
            raise serializers.ValidationError({'department': 'Department does not belong to the selected college'})

        year_name = attrs.pop('year_name', '').strip()
        if role == RegistrationRequest.Role.STUDENT and attrs.get('academic_year') is None and year_name:
            academic_year = (
                AcademicYear.objects
                .filter(year_name=year_name, is_active=True)
                .filter(Q(college=college) | Q(college__isnull=True))
                .order_by(F('college_id').asc(nulls_last=True))
                .first()
            )
            if academic_year is None:
                raise serializers.ValidationError({'year_name': f'Unknown academic year {year_name}'})
            attrs['academic_year'] = academic_year

        if role != RegistrationRequest.Role.STUDENT:
            attrs['academic_year'] = None
        return attrs

    def create(self, validated_data):
        request, _workflow = registration_service.submit_registration(validated_data)
        return request


class RegistrationRequestSerializer(serializers.ModelSerializer):
    college_name = serializers.CharField(source='college.name', read_only=True)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    reviewed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = RegistrationRequest
        fields = (
            'id', 'name', 'email', 'phone', 'role', 'status', 'college', 'college_name',
            'department', 'department_name', 'class_name', 'roll_number', 'academic_year',
            'rejection_reason', 'reviewed_by_name', 'reviewed_at', 'requested_at',
        )
        read_only_fields = fields

    def get_reviewed_by_name(self, obj):
        return obj.reviewed_by.display_name if obj.reviewed_by else None


class ApprovalWorkflowSerializer(serializers.ModelSerializer):
    request = RegistrationRequestSerializer(read_only=True)
    current_approver = serializers.SerializerMethodField()

    class Meta:
        model = ApprovalWorkflow
        fields = (
            'id', 'request_type', 'current_approver_role', 'current_approver', 'status',
            'rejection_reason', 'created_at', 'updated_at', 'completed_at', 'request',
        )
        read_only_fields = fields

    def get_current_approver(self, obj):
        user = obj.current_approver
        if user is None:
            return None
        return {'id': user.id, 'name': user.display_name, 'email': user.email}


class ProcessApprovalSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=('approve', 'reject'))
    rejection_reason = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['action'] == 'reject' and not attrs.get('rejection_reason', '').strip():
            raise serializers.ValidationError(
                {'rejection_reason': 'Rejection reason is required when rejecting a request'}
            )
        return attrs


class ApprovalHistorySerializer(serializers.ModelSerializer):
    acted_by = serializers.SerializerMethodField()

    class Meta:
        model = ApprovalAction
        fields = ('role', 'action', 'acted_by', 'remarks', 'acted_at')
        read_only_fields = fields

    def get_acted_by(self, obj):
        if not obj.acted_by:
            return None
        user = obj.acted_by
        return {
            'id': user.id,
            'username': user.username,
            'name': user.display_name,
            'role': user.role,
        }
