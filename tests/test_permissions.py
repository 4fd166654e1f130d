"""Tests for :mod:`people.permissions`."""

from unittest import TestCase

from people.domain import Identity, RequestContext
from people.exceptions import Forbidden
from people.permissions import Authorizer, Decision, people_admin_only


def _context(**kwargs):
    return RequestContext(identity=Identity(user_id='9', **kwargs))


def _allow_everything(context, action):
    return True


class TestPeopleAdminOnly(TestCase):
    """Tests for :func:`.people_admin_only`."""

    def setUp(self):
        self.authorizer = Authorizer(policy=_allow_everything)
        self.authorizer.register('people-admin-only', people_admin_only)

    def test_non_admin_denied(self):
        """Non-admins fail every people action except viewing."""
        context = _context(permissions=['edit-people'])
        for action in ['edit-people', 'delete-people', 'publish-people']:
            self.assertFalse(self.authorizer.permits(context, action))
        self.assertTrue(self.authorizer.permits(context, 'view-people'))

    def test_anonymous_denied(self):
        self.assertFalse(self.authorizer.permits(RequestContext(),
                                                 'edit-people'))
        self.assertTrue(self.authorizer.permits(RequestContext(),
                                                'view-people'))

    def test_admin_allowed(self):
        self.assertTrue(self.authorizer.permits(_context(is_admin=True),
                                                'edit-people'))

    def test_other_actions_untouched(self):
        context = _context()
        self.assertTrue(self.authorizer.permits(context, 'edit-profile'))
        self.assertTrue(self.authorizer.permits(context, 'edit-peoples'))

    def test_require(self):
        with self.assertRaises(Forbidden):
            self.authorizer.require(_context(), 'edit-people')
        self.authorizer.require(_context(is_admin=True), 'edit-people')


class TestAuthorizer(TestCase):
    """Tests for :class:`.Authorizer`."""

    def test_default_policy(self):
        authorizer = Authorizer()
        self.assertTrue(authorizer.permits(RequestContext(), 'view-people'))
        self.assertFalse(authorizer.permits(RequestContext(),
                                            'edit-profile'))
        self.assertTrue(authorizer.permits(
            _context(permissions=['edit-profile']), 'edit-profile'))
        self.assertTrue(authorizer.permits(_context(is_admin=True),
                                           'edit-profile'))

    def test_predicates_cannot_loosen(self):
        """A denial from the base policy stands."""
        def _allow(context, action, decision):
            decision.response = None

        authorizer = Authorizer(policy=lambda context, action: False)
        authorizer.register('allow', _allow)
        decision = authorizer.decide(_context(is_admin=True), 'edit-people')
        self.assertEqual(decision.response, 'Forbidden')

    def test_register_once(self):
        calls = []

        def _count(context, action, decision):
            calls.append(action)

        authorizer = Authorizer()
        authorizer.register('count', _count)
        authorizer.register('count', _count)
        authorizer.decide(RequestContext(), 'view-people')
        self.assertEqual(calls, ['view-people'])

    def test_decision(self):
        self.assertTrue(Decision().allowed)
        self.assertFalse(Decision('Forbidden').allowed)
