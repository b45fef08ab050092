"""
Base repository providing common table operations.

This module defines the BaseRepository class that every table-specific
repository builds on. Queries go through the supabase-py (PostgREST)
builder; any failure is wrapped in a RecordQueryError or RecordUpdateError.
"""
from typing import Any, Dict, List, Type

import structlog
from supabase import Client

from rentops.integrations.exceptions import BackendError, RecordQueryError

logger = structlog.get_logger(__name__)


class BaseRepository:
    """
    Base repository class for one Supabase table.

    Subclass this to create table-specific repositories.
    """

    def __init__(self, client: Client, table: str):
        """
        Initialize repository with a Supabase client and table name.

        Args:
            client: Service-role Supabase client
            table: Table name
        """
        self.client = client
        self.table = table

    def query(self):
        """Start a new query builder on the table."""
        return self.client.table(self.table)

    def execute(
        self,
        builder,
        error_cls: Type[BackendError],
        action: str,
        **context: Any,
    ) -> List[Dict[str, Any]]:
        """
        Execute a builder and return its rows.

        Args:
            builder: Prepared PostgREST request builder
            error_cls: Exception raised on failure
            action: Short description used in logs and errors
            **context: Extra fields attached to the error

        Returns:
            Rows returned by the request (empty list when none)
        """
        try:
            response = builder.execute()
        except Exception as e:
            logger.error(f"{action}_failed", table=self.table, error=str(e))
            raise error_cls(
                f"Failed to {action.replace('_', ' ')} on table '{self.table}'",
                original_exception=e,
                context={"table": self.table, **context},
            )
        return list(response.data or [])

    def fetch_all_pages(
        self,
        columns: str,
        page_size: int = 1000,
        order_by: str = "id",
    ) -> List[Dict[str, Any]]:
        """
        Read every row of the table page by page.

        Args:
            columns: Columns to select
            page_size: Rows per range request
            order_by: Column giving pages a stable order

        Returns:
            All rows, in page order
        """
        rows: List[Dict[str, Any]] = []
        page = 0
        while True:
            builder = (
                self.query()
                .select(columns)
                .order(order_by)
                .range(page * page_size, (page + 1) * page_size - 1)
            )
            data = self.execute(builder, RecordQueryError, "select_page", page=page)
            if not data:
                break
            rows.extend(data)
            page += 1
        return rows
