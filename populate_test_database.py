"""
Helper script to create the people tables and add synthetic people.

.. warning: DO NOT USE THIS ON A PRODUCTION DATABASE.

"""

import asyncio
import random

import click
from mimesis import Person as FakePerson

from people import config
from people.credentials import before_save
from people.domain import Person
from people.exceptions import DuplicateUsername
from people.services.store import SQLRecordStore


def _prob(P: int) -> bool:
    return random.randint(0, 100) < P


async def _populate(store: SQLRecordStore, count: int) -> None:
    fake = FakePerson()
    for _ in range(count):
        login = _prob(60)
        data = {
            'first_name': fake.first_name(),
            'last_name': fake.last_name(),
            'login': login,
            'username': fake.username() if login else '',
            'password': fake.password() if login else None,
            'email': fake.email(),
            'phone': fake.telephone(),
        }
        person = before_save(data, Person())
        try:
            await store.save(person)
        except DuplicateUsername:
            click.echo(f"Skipping duplicate username {data['username']}")


@click.command()
@click.option('--uri', default=config.DATABASE_URI, show_default=True)
@click.option('--count', default=50, show_default=True)
def populate_database(uri: str, count: int) -> None:
    """Create the tables and add ``count`` synthetic people."""
    store = SQLRecordStore.from_uri(uri)
    store.create_all()
    asyncio.run(_populate(store, count))
    click.echo(f'Added {count} people to {uri}')


if __name__ == '__main__':
    populate_database()
