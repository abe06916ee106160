from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import PolicyConfig
from .repository import PolicyConfigRepository

# policy_config holds a single row.
_ROW_ID = 1


class MySQLPolicyConfigRepository(PolicyConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[PolicyConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT work_start_time, work_end_time
                FROM policy_config
                WHERE config_id=%s
                """,
                (_ROW_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PolicyConfig(
                work_start=normalize_mysql_time(r["work_start_time"]),
                work_end=normalize_mysql_time(r["work_end_time"]),
            )

    def save(self, config: PolicyConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO policy_config(config_id, work_start_time, work_end_time)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE work_start_time=VALUES(work_start_time), work_end_time=VALUES(work_end_time)
                """,
                (_ROW_ID, config.work_start.strftime("%H:%M:%S"), config.work_end.strftime("%H:%M:%S")),
            )
