"""
Knowledge store implementations.

Pattern: Protocol → Production impl → Test double → Factory

This module contains:
1. KnowledgeStoreConfig - Configuration dataclass
2. PgKnowledgeStore - PostgreSQL (production)
3. InMemoryKnowledgeStore - In-memory store (testing/development)
4. get_knowledge_store() - Factory function

Both stores answer the same question: which rows mention the query as a
case-insensitive substring of a text column, or as an exact element of an
array column, while satisfying every provided filter.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from psycopg import AsyncConnection, sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from medassist.schemas.knowledge import (
    ContentType,
    PediatricCondition,
    PediatricDrug,
    PediatricTopic,
    SearchFilters,
)

if TYPE_CHECKING:
    from medassist.config import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------------------------


@dataclass
class KnowledgeStoreConfig:
    """Configuration for the knowledge store."""

    connection_string: str = "postgresql://localhost/medassist"
    conditions_table: str = "pediatric_conditions"
    drugs_table: str = "pediatric_drugs"
    topics_table: str = "pediatric_topics"
    connect_timeout: int = 10

    def table_for(self, kind: ContentType) -> str:
        return {
            "condition": self.conditions_table,
            "drug": self.drugs_table,
            "topic": self.topics_table,
        }[kind]


# ---------------------------------------------------------------------------
# POSTGRES STORE (Production)
# ---------------------------------------------------------------------------


class PgKnowledgeStore:
    """
    PostgreSQL knowledge store using psycopg 3 (async).

    Text matching uses ILIKE, array matching uses containment (@>),
    tag filters use overlap (&&). Each search issues exactly one SELECT.
    """

    def __init__(self, config: KnowledgeStoreConfig):
        self.config = config
        self._conn: AsyncConnection | None = None
        self._connect_lock = asyncio.Lock()

    async def connect(self) -> None:
        """
        Establish database connection.

        Concurrent sub-queries of one search all connect lazily; the lock
        makes them share a single connection.
        """
        async with self._connect_lock:
            if self._conn is not None:
                return
            self._conn = await AsyncConnection.connect(
                self.config.connection_string,
                autocommit=True,
                connect_timeout=self.config.connect_timeout,
                row_factory=dict_row,
            )
        logger.info("Connected to knowledge base")

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def _fetch(self, query: sql.Composable, params: dict[str, Any]) -> list[dict]:
        if self._conn is None:
            await self.connect()
        async with self._conn.cursor() as cur:
            await cur.execute(query, params)
            return await cur.fetchall()

    async def create_schema(self) -> None:
        """Create the knowledge tables and their array indexes."""
        if self._conn is None:
            await self.connect()

        c = self.config
        await self._conn.execute(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {table} (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    category TEXT NOT NULL,
                    subcategory TEXT,
                    description TEXT NOT NULL DEFAULT '',
                    symptoms TEXT[] NOT NULL DEFAULT '{{}}',
                    diagnosis TEXT NOT NULL DEFAULT '',
                    treatment TEXT NOT NULL DEFAULT '',
                    complications TEXT[],
                    prognosis TEXT,
                    age_groups TEXT[] NOT NULL DEFAULT '{{}}',
                    icd_codes TEXT[],
                    "references" TEXT[] NOT NULL DEFAULT '{{}}',
                    chapter TEXT NOT NULL DEFAULT '',
                    page_number INTEGER,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                )
                """
            ).format(table=sql.Identifier(c.conditions_table))
        )
        await self._conn.execute(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {table} (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    generic_name TEXT,
                    category TEXT NOT NULL,
                    indications TEXT[] NOT NULL DEFAULT '{{}}',
                    contraindications TEXT[] NOT NULL DEFAULT '{{}}',
                    dosage_pediatric TEXT NOT NULL DEFAULT '',
                    dosage_by_age JSONB NOT NULL DEFAULT '[]',
                    side_effects TEXT[] NOT NULL DEFAULT '{{}}',
                    warnings TEXT[] NOT NULL DEFAULT '{{}}',
                    interactions TEXT[],
                    monitoring TEXT[],
                    "references" TEXT[] NOT NULL DEFAULT '{{}}',
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                )
                """
            ).format(table=sql.Identifier(c.drugs_table))
        )
        await self._conn.execute(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {table} (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    category TEXT NOT NULL,
                    content TEXT NOT NULL DEFAULT '',
                    key_points TEXT[] NOT NULL DEFAULT '{{}}',
                    related_conditions TEXT[] NOT NULL DEFAULT '{{}}',
                    related_drugs TEXT[] NOT NULL DEFAULT '{{}}',
                    chapter TEXT NOT NULL DEFAULT '',
                    section TEXT NOT NULL DEFAULT '',
                    page_number INTEGER,
                    tags TEXT[] NOT NULL DEFAULT '{{}}',
                    "references" TEXT[] NOT NULL DEFAULT '{{}}',
                    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                )
                """
            ).format(table=sql.Identifier(c.topics_table))
        )

        # GIN indexes for array containment / overlap filters
        for table, column in (
            (c.conditions_table, "age_groups"),
            (c.conditions_table, "symptoms"),
            (c.drugs_table, "indications"),
            (c.topics_table, "key_points"),
            (c.topics_table, "tags"),
        ):
            await self._conn.execute(
                sql.SQL(
                    "CREATE INDEX IF NOT EXISTS {index} ON {table} USING GIN ({column})"
                ).format(
                    index=sql.Identifier(f"{table}_{column}_idx"),
                    table=sql.Identifier(table),
                    column=sql.Identifier(column),
                )
            )

    async def _upsert(self, table: str, row: dict[str, Any]) -> None:
        columns = list(row)
        await self._conn.execute(
            sql.SQL(
                "INSERT INTO {table} ({columns}) VALUES ({values}) "
                "ON CONFLICT (id) DO UPDATE SET {updates}, updated_at = now()"
            ).format(
                table=sql.Identifier(table),
                columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
                values=sql.SQL(", ").join(map(sql.Placeholder, columns)),
                updates=sql.SQL(", ").join(
                    sql.SQL("{col} = EXCLUDED.{col}").format(col=sql.Identifier(col))
                    for col in columns
                    if col != "id"
                ),
            ),
            row,
        )

    async def insert_records(
        self,
        conditions: Iterable[PediatricCondition] = (),
        drugs: Iterable[PediatricDrug] = (),
        topics: Iterable[PediatricTopic] = (),
    ) -> None:
        """Upsert knowledge records (seeding / content pipeline only)."""
        if self._conn is None:
            await self.connect()

        for condition in conditions:
            await self._upsert(self.config.conditions_table, condition.model_dump())
        for drug in drugs:
            row = drug.model_dump()
            row["dosage_by_age"] = Jsonb(row["dosage_by_age"])
            await self._upsert(self.config.drugs_table, row)
        for topic in topics:
            await self._upsert(self.config.topics_table, topic.model_dump())

    def _search_sql(
        self,
        table: str,
        text_columns: tuple[str, ...],
        array_column: str,
        conditions: list[sql.Composable],
    ) -> sql.Composed:
        matches = [
            sql.SQL("{col} ILIKE %(pattern)s").format(col=sql.Identifier(col))
            for col in text_columns
        ]
        matches.append(
            sql.SQL("{col} @> ARRAY[%(query)s]::text[]").format(
                col=sql.Identifier(array_column)
            )
        )
        where = [sql.SQL("(") + sql.SQL(" OR ").join(matches) + sql.SQL(")")]
        where.extend(conditions)
        return sql.SQL("SELECT * FROM {table} WHERE {where} LIMIT %(limit)s").format(
            table=sql.Identifier(table),
            where=sql.SQL(" AND ").join(where),
        )

    @staticmethod
    def _params(query: str, filters: SearchFilters, limit: int) -> dict[str, Any]:
        return {
            "pattern": f"%{query.lower()}%",
            "query": query,
            "limit": limit,
            "category": filters.category,
            "age_group": filters.age_group,
            "chapter": filters.chapter,
            "tags": list(filters.tags),
        }

    async def search_conditions(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricCondition]:
        extra: list[sql.Composable] = []
        if filters.category:
            extra.append(sql.SQL("category = %(category)s"))
        if filters.age_group:
            extra.append(sql.SQL("age_groups @> ARRAY[%(age_group)s]::text[]"))
        if filters.chapter:
            extra.append(sql.SQL("chapter = %(chapter)s"))

        statement = self._search_sql(
            self.config.conditions_table, ("title", "description"), "symptoms", extra
        )
        rows = await self._fetch(statement, self._params(query, filters, limit))
        logger.debug("conditions matched %d rows for %r", len(rows), query)
        return [PediatricCondition.model_validate(row) for row in rows]

    async def search_drugs(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricDrug]:
        extra: list[sql.Composable] = []
        if filters.category:
            extra.append(sql.SQL("category = %(category)s"))

        statement = self._search_sql(
            self.config.drugs_table, ("name", "generic_name"), "indications", extra
        )
        rows = await self._fetch(statement, self._params(query, filters, limit))
        logger.debug("drugs matched %d rows for %r", len(rows), query)
        return [PediatricDrug.model_validate(row) for row in rows]

    async def search_topics(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricTopic]:
        extra: list[sql.Composable] = []
        if filters.category:
            extra.append(sql.SQL("category = %(category)s"))
        if filters.chapter:
            extra.append(sql.SQL("chapter = %(chapter)s"))
        if filters.tags:
            extra.append(sql.SQL("tags && %(tags)s::text[]"))

        statement = self._search_sql(
            self.config.topics_table, ("title", "content"), "key_points", extra
        )
        rows = await self._fetch(statement, self._params(query, filters, limit))
        logger.debug("topics matched %d rows for %r", len(rows), query)
        return [PediatricTopic.model_validate(row) for row in rows]

    async def _get_by_id(self, table: str, record_id: str) -> dict | None:
        rows = await self._fetch(
            sql.SQL("SELECT * FROM {table} WHERE id = %(id)s").format(
                table=sql.Identifier(table)
            ),
            {"id": record_id},
        )
        return rows[0] if rows else None

    async def get_condition(self, condition_id: str) -> PediatricCondition | None:
        row = await self._get_by_id(self.config.conditions_table, condition_id)
        return PediatricCondition.model_validate(row) if row else None

    async def get_drug(self, drug_id: str) -> PediatricDrug | None:
        row = await self._get_by_id(self.config.drugs_table, drug_id)
        return PediatricDrug.model_validate(row) if row else None

    async def list_conditions_by_category(
        self, category: str, limit: int
    ) -> list[PediatricCondition]:
        rows = await self._fetch(
            sql.SQL(
                "SELECT * FROM {table} WHERE category = %(category)s "
                "ORDER BY title LIMIT %(limit)s"
            ).format(table=sql.Identifier(self.config.conditions_table)),
            {"category": category, "limit": limit},
        )
        return [PediatricCondition.model_validate(row) for row in rows]

    async def list_categories(self, kind: ContentType) -> list[str]:
        rows = await self._fetch(
            sql.SQL("SELECT DISTINCT category FROM {table} ORDER BY category").format(
                table=sql.Identifier(self.config.table_for(kind))
            ),
            {},
        )
        return [row["category"] for row in rows]


# ---------------------------------------------------------------------------
# IN-MEMORY STORE (Testing/Development)
# ---------------------------------------------------------------------------


def _text_match(pattern: str, *fields: str | None) -> bool:
    return any(pattern in (f or "").lower() for f in fields)


class InMemoryKnowledgeStore:
    """
    In-memory knowledge store for development/testing.

    Implements the same interface as PgKnowledgeStore without Postgres.
    Rows are returned in insertion order.
    """

    def __init__(
        self,
        conditions: Iterable[PediatricCondition] = (),
        drugs: Iterable[PediatricDrug] = (),
        topics: Iterable[PediatricTopic] = (),
    ):
        self._conditions: dict[str, PediatricCondition] = {c.id: c for c in conditions}
        self._drugs: dict[str, PediatricDrug] = {d.id: d for d in drugs}
        self._topics: dict[str, PediatricTopic] = {t.id: t for t in topics}

    async def connect(self) -> None:
        """No-op for in-memory store."""
        pass

    async def close(self) -> None:
        """No-op for in-memory store."""
        pass

    async def create_schema(self) -> None:
        """No-op for in-memory store."""
        pass

    async def insert_records(
        self,
        conditions: Iterable[PediatricCondition] = (),
        drugs: Iterable[PediatricDrug] = (),
        topics: Iterable[PediatricTopic] = (),
    ) -> None:
        """Insert or replace records by id."""
        for condition in conditions:
            self._conditions[condition.id] = condition
        for drug in drugs:
            self._drugs[drug.id] = drug
        for topic in topics:
            self._topics[topic.id] = topic

    async def search_conditions(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricCondition]:
        pattern = query.lower()
        matches = []
        for c in self._conditions.values():
            if not (_text_match(pattern, c.title, c.description) or query in c.symptoms):
                continue
            if filters.category and c.category != filters.category:
                continue
            if filters.age_group and filters.age_group not in c.age_groups:
                continue
            if filters.chapter and c.chapter != filters.chapter:
                continue
            matches.append(c)
        return matches[:limit]

    async def search_drugs(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricDrug]:
        pattern = query.lower()
        matches = []
        for d in self._drugs.values():
            if not (_text_match(pattern, d.name, d.generic_name) or query in d.indications):
                continue
            if filters.category and d.category != filters.category:
                continue
            matches.append(d)
        return matches[:limit]

    async def search_topics(
        self, query: str, filters: SearchFilters, limit: int
    ) -> list[PediatricTopic]:
        pattern = query.lower()
        matches = []
        for t in self._topics.values():
            if not (_text_match(pattern, t.title, t.content) or query in t.key_points):
                continue
            if filters.category and t.category != filters.category:
                continue
            if filters.chapter and t.chapter != filters.chapter:
                continue
            if filters.tags and not set(filters.tags) & set(t.tags):
                continue
            matches.append(t)
        return matches[:limit]

    async def get_condition(self, condition_id: str) -> PediatricCondition | None:
        return self._conditions.get(condition_id)

    async def get_drug(self, drug_id: str) -> PediatricDrug | None:
        return self._drugs.get(drug_id)

    async def list_conditions_by_category(
        self, category: str, limit: int
    ) -> list[PediatricCondition]:
        matches = [c for c in self._conditions.values() if c.category == category]
        return sorted(matches, key=lambda c: c.title)[:limit]

    async def list_categories(self, kind: ContentType) -> list[str]:
        records = {
            "condition": self._conditions,
            "drug": self._drugs,
            "topic": self._topics,
        }[kind]
        return sorted({r.category for r in records.values()})


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_knowledge_store(
    settings: Settings | None = None,
    seed: bool = True,
) -> PgKnowledgeStore | InMemoryKnowledgeStore | None:
    """
    Factory function to get the appropriate knowledge store.

    Returns None when Postgres is requested but no database URL is
    configured. Callers treat None as the disabled (local-only) mode.

    Args:
        settings: Application settings (loaded from env if not provided)
        seed: Load seed records into the in-memory store

    Returns:
        KnowledgeStore implementation, or None in disabled mode
    """
    if settings is None:
        from medassist.config import get_settings

        settings = get_settings()

    if settings.use_postgres:
        if not settings.knowledge_enabled:
            logger.warning("Knowledge base credentials not found. Running in local-only mode.")
            return None
        return PgKnowledgeStore(
            KnowledgeStoreConfig(
                connection_string=settings.database_url,
                connect_timeout=settings.connect_timeout,
            )
        )

    if not seed:
        return InMemoryKnowledgeStore()

    from medassist.retrieval.seeds import load_seed_records

    conditions, drugs, topics = load_seed_records()
    return InMemoryKnowledgeStore(conditions, drugs, topics)
