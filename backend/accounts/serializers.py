from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class MeSerializer(serializers.ModelSerializer):
    college = serializers.SerializerMethodField()
    department = serializers.SerializerMethodField()
    academic_year = serializers.SerializerMethodField()
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'first_name', 'last_name', 'display_name', 'role', 'phone',
            'college', 'department', 'academic_year', 'class_name', 'class_in_charge', 'roll_number',
        )
        read_only_fields = fields

    def get_college(self, obj):
        if obj.college is None:
            return None
        return {'id': obj.college_id, 'code': obj.college.code, 'name': obj.college.name}

    def get_department(self, obj):
        if obj.department is None:
            return None
        return {'id': obj.department_id, 'code': obj.department.code, 'name': obj.department.name}

    def get_academic_year(self, obj):
        if obj.academic_year is None:
            return None
        return {'id': obj.academic_year_id, 'year_name': obj.academic_year.year_name}
