"""Database models for the person record store."""

from sqlalchemy import JSON, Boolean, Column, Index, String, false, text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DBPerson(Base):  # type: ignore
    """A person record. ``group_ids`` keeps the order it was saved in."""

    __tablename__ = 'people'

    id = Column(String(32), primary_key=True)
    title = Column(String(255), nullable=False, server_default=text("''"))
    first_name = Column(String(100), nullable=False, index=True,
                        server_default=text("''"))
    last_name = Column(String(100), nullable=False, index=True,
                       server_default=text("''"))
    slug = Column(String(255), nullable=False, index=True,
                  server_default=text("''"))
    login = Column(Boolean, nullable=False, index=True,
                   server_default=false())
    username = Column(String(64), nullable=False, index=True,
                      server_default=text("''"))
    password_hash = Column(String(255))
    email = Column(String(255), nullable=False, server_default=text("''"))
    phone = Column(String(64), nullable=False, server_default=text("''"))
    group_ids = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        # Usernames only have to be unique among people who can log in.
        # Blank usernames are allowed, and not unique.
        Index('ix_people_login_username', 'username', unique=True,
              sqlite_where=text("login = 1 AND username != ''"),
              postgresql_where=text("login AND username != ''")),
    )
