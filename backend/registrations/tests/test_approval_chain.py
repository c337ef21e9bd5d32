from django.test import SimpleTestCase

from registrations.services import approval_chain


class ApprovalChainTests(SimpleTestCase):
    def test_first_approver_per_requested_role(self):
        self.assertEqual(approval_chain.first_approver_role('student'), 'staff')
        self.assertEqual(approval_chain.first_approver_role('staff'), 'hod')
        self.assertEqual(approval_chain.first_approver_role('hod'), 'principal')
        self.assertEqual(approval_chain.first_approver_role('principal'), 'admin')

    def test_unknown_role_goes_to_admin(self):
        self.assertEqual(approval_chain.first_approver_role('guest'), 'admin')
        self.assertEqual(approval_chain.first_approver_role(''), 'admin')

    def test_full_chains_end_at_admin(self):
        self.assertEqual(approval_chain.approval_chain('student'), ['staff', 'hod', 'principal', 'admin'])
        self.assertEqual(approval_chain.approval_chain('staff'), ['hod', 'principal', 'admin'])
        self.assertEqual(approval_chain.approval_chain('hod'), ['principal', 'admin'])
        self.assertEqual(approval_chain.approval_chain('principal'), ['admin'])

    def test_admin_is_final(self):
        self.assertIsNone(approval_chain.next_approver_role('admin'))
        self.assertTrue(approval_chain.is_final_role('admin'))
        self.assertFalse(approval_chain.is_final_role('hod'))
