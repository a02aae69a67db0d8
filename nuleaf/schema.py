"""Table definitions, one table per entity kind"""

import logging

from nuleaf.db_context import Database

logger = logging.getLogger(__name__)

TABLES: dict[str, str] = {
    "events": """
        CREATE TABLE IF NOT EXISTS {schema}events (
            id UUID PRIMARY KEY,
            title VARCHAR(128) NOT NULL,
            date TIMESTAMPTZ,
            location VARCHAR(128)
        )
    """,
    "posts": """
        CREATE TABLE IF NOT EXISTS {schema}posts (
            id UUID PRIMARY KEY,
            title VARCHAR(128) NOT NULL,
            content TEXT NOT NULL,
            author UUID,
            date_created TIMESTAMPTZ,
            date_published TIMESTAMPTZ,
            date_modified TIMESTAMPTZ
        )
    """,
    "seminars": """
        CREATE TABLE IF NOT EXISTS {schema}seminars (
            id UUID PRIMARY KEY,
            title VARCHAR(128) NOT NULL,
            date TIMESTAMPTZ,
            location VARCHAR(128),
            host VARCHAR(128),
            image_file VARCHAR(256),
            description TEXT
        )
    """,
    "teams": """
        CREATE TABLE IF NOT EXISTS {schema}teams (
            id UUID PRIMARY KEY,
            name VARCHAR(128) NOT NULL UNIQUE
        )
    """,
    "users": """
        CREATE TABLE IF NOT EXISTS {schema}users (
            id UUID PRIMARY KEY,
            username VARCHAR(128) NOT NULL UNIQUE,
            email VARCHAR(128) NOT NULL UNIQUE,
            password VARCHAR(128) NOT NULL,
            firstname VARCHAR(64),
            lastname VARCHAR(64),
            image1 VARCHAR(256) NOT NULL DEFAULT '',
            image2 VARCHAR(256) NOT NULL DEFAULT '',
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            team_id UUID,
            team_name VARCHAR(128),
            description VARCHAR(1000) NOT NULL DEFAULT ''
        )
    """,
}


async def create_schema(database: Database, db_schema: str | None = None):
    """Create any missing tables"""
    prefix = f"{db_schema}." if db_schema else ""
    async with database.transaction() as conn:
        if db_schema:
            await conn.execute(f"CREATE SCHEMA IF NOT EXISTS {db_schema}")
        for name, ddl in TABLES.items():
            await conn.execute(ddl.format(schema=prefix))
            logger.debug("Ensured table %s%s", prefix, name)


async def truncate_all(database: Database, db_schema: str | None = None):
    """Remove every record from every table"""
    prefix = f"{db_schema}." if db_schema else ""
    tables = ", ".join(f"{prefix}{name}" for name in TABLES)
    async with database.connection() as conn:
        await conn.execute(f"TRUNCATE TABLE {tables}")
