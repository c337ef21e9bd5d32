from django.contrib.auth import get_user_model
from django.core import mail
from django.core.exceptions import PermissionDenied
from django.test import TestCase

from college.models import Department
from registrations.exceptions import ApprovalConflict, InvalidStateTransition
from registrations.models import ApprovalAction, ApprovalWorkflow, RegistrationRequest
from registrations.services import approver_resolver, inbox_service
from registrations.services.workflow_engine import ApprovalWorkflowEngine, engine
from registrations.tests.base import PASSWORD, RegistrationFixturesMixin

User = get_user_model()


class BrokenNotifier:
    def notify_approver(self, workflow, approver=None):
        raise RuntimeError('smtp down')

    def notify_outcome(self, registration, approved, reason=''):
        raise RuntimeError('smtp down')


class CreateWorkflowTests(RegistrationFixturesMixin, TestCase):
    def test_student_request_goes_to_class_in_charge(self):
        request, workflow = self.submit(self.student_data())
        self.assertEqual(workflow.status, ApprovalWorkflow.Status.ACTIVE)
        self.assertEqual(workflow.request_type, 'student_registration')
        self.assertEqual(workflow.current_approver_role, 'staff')
        self.assertEqual(workflow.current_approver, self.class_staff)
        self.assertEqual(request.status, RegistrationRequest.Status.PENDING)
        self.assertNotEqual(request.password_hash, PASSWORD)

    def test_falls_back_to_any_department_staff(self):
        with self.assertLogs('registrations.services.approver_resolver', level='WARNING'):
            _, workflow = self.submit(self.student_data(class_name='CSE-B'))
        self.assertEqual(workflow.current_approver, self.staff_any)

    def test_first_approver_by_requested_role(self):
        _, hod_flow = self.submit(self.student_data(email='newhod@idcs.test', role='hod', class_name=''))
        self.assertEqual(hod_flow.current_approver_role, 'principal')
        self.assertEqual(hod_flow.current_approver, self.principal)

        _, principal_flow = self.submit(self.principal_data())
        self.assertEqual(principal_flow.current_approver_role, 'admin')
        self.assertEqual(principal_flow.current_approver, self.admin)

    def test_approver_may_be_unresolved(self):
        self.hod.is_active = False
        self.hod.save()
        _, workflow = self.submit(self.student_data(email='s2@idcs.test', role='staff', class_name=''))
        self.assertEqual(workflow.current_approver_role, 'hod')
        self.assertIsNone(workflow.current_approver)

    def test_approver_is_emailed(self):
        self.submit(self.student_data())
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['a@idcs.test'])
        self.assertIn('Asha Kumar', mail.outbox[0].body)

    def test_notification_failure_is_logged_not_raised(self):
        broken = ApprovalWorkflowEngine(notifier=BrokenNotifier())
        with self.assertLogs('registrations.services.workflow_engine', level='ERROR'):
            _, workflow = self.submit(self.student_data(), workflow_engine=broken)
        self.assertTrue(ApprovalWorkflow.objects.filter(pk=workflow.pk).exists())

    def test_second_workflow_for_request_is_refused(self):
        request, _ = self.submit(self.student_data())
        with self.assertRaises(InvalidStateTransition):
            engine.create(request)

    def test_unknown_role_resolver_returns_none(self):
        request, _ = self.submit(self.student_data())
        self.assertIsNone(approver_resolver.resolve_approver('registrar', request))


class AdvanceWorkflowTests(RegistrationFixturesMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.request, self.workflow = self.submit(self.student_data())

    def approve_all(self):
        workflow = self.workflow
        for actor in (self.class_staff, self.hod, self.principal, self.admin):
            workflow = engine.advance(workflow, 'approve', actor)
        return workflow

    def test_full_chain_creates_account_once(self):
        workflow = engine.advance(self.workflow, 'approve', self.class_staff, reason='known student')
        self.assertEqual(workflow.current_approver_role, 'hod')
        self.assertEqual(workflow.current_approver, self.hod)
        self.assertTrue(workflow.is_active)

        workflow = engine.advance(workflow, 'approve', self.hod)
        workflow = engine.advance(workflow, 'approve', self.principal)
        self.assertEqual(workflow.current_approver_role, 'admin')
        workflow = engine.advance(workflow, 'approve', self.admin)

        self.assertEqual(workflow.status, ApprovalWorkflow.Status.COMPLETED)
        self.assertIsNotNone(workflow.completed_at)
        self.request.refresh_from_db()
        self.assertEqual(self.request.status, RegistrationRequest.Status.APPROVED)
        self.assertEqual(self.request.reviewed_by, self.admin)

        account = User.objects.get(email='asha@student.test')
        self.assertEqual(account.role, 'student')
        self.assertEqual(account.academic_year, self.year)
        self.assertEqual(account.class_name, 'CSE-A')
        self.assertTrue(account.check_password(PASSWORD))
        self.assertEqual(
            list(ApprovalAction.objects.filter(workflow=workflow).values_list('role', flat=True)),
            ['staff', 'hod', 'principal', 'admin'],
        )

    def test_same_role_cannot_approve_twice(self):
        engine.advance(self.workflow, 'approve', self.class_staff)
        with self.assertRaises(InvalidStateTransition):
            engine.advance(self.workflow, 'approve', self.class_staff)
        self.assertEqual(ApprovalAction.objects.filter(workflow=self.workflow).count(), 1)

    def test_completed_workflow_cannot_advance(self):
        workflow = self.approve_all()
        with self.assertRaises(InvalidStateTransition):
            engine.advance(workflow, 'approve', self.admin)
        self.assertEqual(User.objects.filter(email='asha@student.test').count(), 1)

    def test_reject_ends_workflow(self):
        workflow = engine.advance(self.workflow, 'reject', self.class_staff, reason='Not in my class')
        self.assertEqual(workflow.status, ApprovalWorkflow.Status.REJECTED)
        self.assertEqual(workflow.rejection_reason, 'Not in my class')

        self.request.refresh_from_db()
        self.assertEqual(self.request.status, RegistrationRequest.Status.REJECTED)
        self.assertEqual(self.request.rejection_reason, 'Not in my class')
        self.assertFalse(User.objects.filter(email='asha@student.test').exists())
        self.assertIn('Not in my class', mail.outbox[-1].body)

        with self.assertRaises(InvalidStateTransition):
            engine.advance(workflow, 'approve', self.class_staff)

    def test_reject_needs_reason(self):
        with self.assertRaises(ValueError):
            engine.advance(self.workflow, 'reject', self.class_staff, reason='  ')

    def test_unknown_decision(self):
        with self.assertRaises(ValueError):
            engine.advance(self.workflow, 'escalate', self.class_staff)

    def test_other_staff_cannot_act_on_assigned_step(self):
        with self.assertRaises(PermissionDenied):
            engine.advance(self.workflow, 'approve', self.staff_any)

    def test_existing_email_blocks_final_approval(self):
        workflow = self.workflow
        for actor in (self.class_staff, self.hod, self.principal):
            workflow = engine.advance(workflow, 'approve', actor)
        User.objects.create_user(username='asha', email='ASHA@student.test', password='x')

        with self.assertRaises(ApprovalConflict):
            engine.advance(workflow, 'approve', self.admin)

        workflow.refresh_from_db()
        self.assertTrue(workflow.is_active)
        self.assertEqual(ApprovalAction.objects.filter(workflow=workflow).count(), 3)

    def test_notification_failure_keeps_transition(self):
        broken = ApprovalWorkflowEngine(notifier=BrokenNotifier())
        with self.assertLogs('registrations.services.workflow_engine', level='ERROR'):
            workflow = broken.advance(self.workflow, 'approve', self.class_staff)
        workflow.refresh_from_db()
        self.assertEqual(workflow.current_approver_role, 'hod')


class UnassignedStepTests(RegistrationFixturesMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.other_dept = Department.objects.create(college=self.college, code='MECH', name='Mechanical')
        self.other_hod = User.objects.create_user(
            username='hod-mech', email='hod-mech@idcs.test', password='x', role='hod',
            college=self.college, department=self.other_dept,
        )
        self.hod.is_active = False
        self.hod.save()
        self.request, self.workflow = self.submit(
            self.student_data(email='newstaff@idcs.test', role='staff', class_name='')
        )

    def test_other_department_hod_is_refused(self):
        self.assertIsNone(self.workflow.current_approver)
        with self.assertRaises(InvalidStateTransition):
            engine.advance(self.workflow, 'approve', self.other_hod)

        self.workflow.refresh_from_db()
        self.assertEqual(self.workflow.current_approver_role, 'hod')
        self.assertFalse(ApprovalAction.objects.filter(workflow=self.workflow).exists())

    def test_step_becomes_actionable_once_approver_resolvable(self):
        self.hod.is_active = True
        self.hod.save()

        with self.assertRaises(PermissionDenied):
            engine.advance(self.workflow, 'approve', self.other_hod)

        workflow = engine.advance(self.workflow, 'approve', self.hod)
        self.assertEqual(workflow.current_approver_role, 'principal')
        action = ApprovalAction.objects.get(workflow=workflow)
        self.assertEqual(action.acted_by, self.hod)

    def test_inbox_lists_unassigned_step_for_resolvable_approver_only(self):
        self.assertFalse(inbox_service.get_pending_approvals_for_user(self.other_hod).exists())

        self.hod.is_active = True
        self.hod.save()
        self.assertEqual(list(inbox_service.get_pending_approvals_for_user(self.hod)), [self.workflow])
        self.assertFalse(inbox_service.get_pending_approvals_for_user(self.other_hod).exists())


class PrincipalRegistrationTests(RegistrationFixturesMixin, TestCase):
    def test_college_with_active_principal_is_refused(self):
        with self.assertRaises(ApprovalConflict):
            self.submit(self.principal_data(college=self.college))
        self.assertFalse(RegistrationRequest.objects.filter(role='principal').exists())

    def test_second_pending_principal_is_refused(self):
        self.submit(self.principal_data())
        with self.assertRaises(ApprovalConflict):
            self.submit(self.principal_data(email='other@newcollege.test'))
        self.assertEqual(RegistrationRequest.objects.filter(college=self.other_college).count(), 1)

    def test_principal_stores_no_department(self):
        request, _ = self.submit(self.principal_data(department=self.dept))
        self.assertIsNone(request.department)

    def test_invariant_checked_again_at_final_approval(self):
        request, workflow = self.submit(self.principal_data())
        User.objects.create_user(
            username='sneaky', email='sneaky@newcollege.test', password='x', role='principal',
            college=self.other_college,
        )
        with self.assertRaises(ApprovalConflict):
            engine.advance(workflow, 'approve', self.admin)

        request.refresh_from_db()
        self.assertEqual(request.status, RegistrationRequest.Status.PENDING)
        self.assertFalse(User.objects.filter(email='rao@newcollege.test').exists())

    def test_pending_principal_request_blocks_final_approval(self):
        request, workflow = self.submit(self.principal_data())
        RegistrationRequest.objects.create(
            name='Dr. Iyer', email='iyer@newcollege.test', role='principal',
            password_hash='x', college=self.other_college,
        )
        with self.assertRaises(ApprovalConflict):
            engine.advance(workflow, 'approve', self.admin)

        workflow.refresh_from_db()
        self.assertTrue(workflow.is_active)
        self.assertFalse(User.objects.filter(email='rao@newcollege.test').exists())

    def test_principal_approved_by_admin(self):
        request, workflow = self.submit(self.principal_data())
        workflow = engine.advance(workflow, 'approve', self.admin)
        self.assertEqual(workflow.status, ApprovalWorkflow.Status.COMPLETED)
        principal = User.objects.get(email='rao@newcollege.test')
        self.assertEqual(principal.role, 'principal')
        self.assertEqual(principal.college, self.other_college)
        self.assertEqual(principal.first_name, 'Dr.')
