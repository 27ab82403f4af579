from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json
from .model import ActivityLogEntry
from .repository import ActivityLogRepository


class MySQLActivityLogRepository(ActivityLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, entry: ActivityLogEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(user_id, action, resource_type, resource_id, details)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(entry.user_id),
                    entry.action.value,
                    entry.resource_type,
                    entry.resource_id,
                    dump_json(entry.details),
                ),
            )
            return int(cur.lastrowid)
