from __future__ import annotations

from typing import Any, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchone, load_json
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT setting_value FROM settings WHERE setting_key=%s",
                (key,),
            )
            r = fetchone(cur)
            if not r:
                return None
            value = load_json(r["setting_value"])
            return value if isinstance(value, dict) else None

    def put_many(self, values: Mapping[str, dict[str, Any]]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for key, value in values.items():
                cur.execute(
                    """
                    INSERT INTO settings(setting_key, setting_value)
                    VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                    """,
                    (key, dump_json(value)),
                )
