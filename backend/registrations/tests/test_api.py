from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from registrations.models import ApprovalWorkflow, RegistrationRequest
from registrations.tests.base import PASSWORD, RegistrationFixturesMixin

User = get_user_model()


class RegistrationApiTests(RegistrationFixturesMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()

    def payload(self, **overrides):
        data = {
            'name': 'Ravi S',
            'email': 'Ravi@Student.test',
            'role': 'student',
            'password': PASSWORD,
            'college': self.college.pk,
            'department': self.dept.pk,
            'class_name': 'CSE-A',
            'year_name': '2025 - 2029',
        }
        data.update(overrides)
        return data

    def register(self, **overrides):
        return self.client.post(reverse('registration-list-create'), self.payload(**overrides), format='json')

    def test_anonymous_registration_opens_workflow(self):
        resp = self.register()
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['current_approver_role'], 'staff')

        request = RegistrationRequest.objects.get(pk=resp.data['id'])
        self.assertEqual(request.email, 'ravi@student.test')
        self.assertEqual(request.academic_year, self.year)
        self.assertEqual(request.workflow.pk, resp.data['workflow_id'])

    def test_validation_errors(self):
        self.assertEqual(self.register(password='short').status_code, 400)
        self.assertEqual(self.register(department=None).status_code, 400)
        self.assertEqual(self.register(year_name='1999 - 2003').status_code, 400)

        resp = self.register(email='a@idcs.test')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('email', resp.data)

    def test_duplicate_pending_email(self):
        self.assertEqual(self.register().status_code, 201)
        resp = self.register()
        self.assertEqual(resp.status_code, 400)
        self.assertIn('pending', str(resp.data['email'][0]))

    def test_principal_conflict_is_409(self):
        resp = self.register(role='principal', email='p2@idcs.test', department=None)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data['code'], 'approval_conflict')

    def test_pending_approvals_and_processing(self):
        self.register()
        workflow = ApprovalWorkflow.objects.get()

        self.client.force_authenticate(self.class_staff)
        resp = self.client.get(reverse('registration-approvals-pending'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row['id'] for row in resp.data], [workflow.pk])
        self.assertEqual(resp.data[0]['request']['email'], 'ravi@student.test')

        url = reverse('registration-approval-process', args=[workflow.pk])
        resp = self.client.post(url, {'action': 'approve'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['workflow']['current_approver_role'], 'hod')

        resp = self.client.post(url, {'action': 'approve'}, format='json')
        self.assertEqual(resp.status_code, 409)

        self.client.force_authenticate(self.hod)
        resp = self.client.get(reverse('registration-approvals-pending'))
        self.assertEqual(len(resp.data), 1)

    def test_other_staff_sees_nothing_and_gets_403(self):
        self.register()
        workflow = ApprovalWorkflow.objects.get()
        self.client.force_authenticate(self.staff_any)
        self.assertEqual(self.client.get(reverse('registration-approvals-pending')).data, [])

        url = reverse('registration-approval-process', args=[workflow.pk])
        self.assertEqual(self.client.post(url, {'action': 'approve'}, format='json').status_code, 403)

    def test_reject_requires_reason(self):
        self.register()
        workflow = ApprovalWorkflow.objects.get()
        self.client.force_authenticate(self.class_staff)
        url = reverse('registration-approval-process', args=[workflow.pk])

        self.assertEqual(self.client.post(url, {'action': 'reject'}, format='json').status_code, 400)
        resp = self.client.post(url, {'action': 'reject', 'rejection_reason': 'Unknown student'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['workflow']['status'], 'rejected')

    def test_history(self):
        resp = self.register()
        registration_id = resp.data['id']
        workflow = ApprovalWorkflow.objects.get()

        self.client.force_authenticate(self.class_staff)
        self.client.post(reverse('registration-approval-process', args=[workflow.pk]), {'action': 'approve'}, format='json')

        resp = self.client.get(reverse('registration-approval-history', args=[registration_id]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['current_approver_role'], 'hod')
        self.assertEqual(len(resp.data['timeline']), 1)
        self.assertEqual(resp.data['timeline'][0]['acted_by']['username'], 'staff-a')

        outsider = User.objects.create_user(username='stranger', password='x', role='student')
        self.client.force_authenticate(outsider)
        resp = self.client.get(reverse('registration-approval-history', args=[registration_id]))
        self.assertEqual(resp.status_code, 403)

    def test_request_list_scoping(self):
        self.register()
        self.register(email='newstaff@idcs.test', role='staff', class_name='', year_name='')
        url = reverse('registration-list-create')

        self.client.force_authenticate(self.class_staff)
        self.assertEqual([row['role'] for row in self.client.get(url).data], ['student'])

        self.client.force_authenticate(self.hod)
        self.assertEqual(len(self.client.get(url).data), 2)

        self.client.force_authenticate(self.principal)
        self.assertEqual([row['role'] for row in self.client.get(url).data], ['staff'])

        student = User.objects.create_user(username='stu', password='x', role='student')
        self.client.force_authenticate(student)
        self.assertEqual(self.client.get(url).status_code, 403)

    def test_statistics(self):
        self.register()
        url = reverse('registration-approvals-statistics')

        self.client.force_authenticate(self.class_staff)
        self.assertEqual(self.client.get(url).status_code, 403)

        self.client.force_authenticate(self.admin)
        resp = self.client.get(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, [{'request_type': 'student_registration', 'status': 'active', 'count': 1}])
