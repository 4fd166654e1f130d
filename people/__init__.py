"""
Person account records on top of a generic record store.

This package keeps password hashes out of everything it hands back,
suggests free usernames, joins people to their groups, works out the best
page for each person and keeps non-admins from changing person records.

Quick start
-----------

.. code-block:: python

   from people.factory import create_web_app
   from people.services.store import SQLRecordStore

   store = SQLRecordStore.from_uri('sqlite:///people.db')
   store.create_all()
   app = create_web_app(store=store, groups=my_group_service)

Without a group service every person's best page is ``DEFAULT_PAGE_SLUG``.
Requests identify themselves with an ``Authorization: Bearer <jwt>`` header;
see :mod:`people.jwt`.
"""

from .domain import Group, Identity, Page, Person, QueryResults, \
    RequestContext
