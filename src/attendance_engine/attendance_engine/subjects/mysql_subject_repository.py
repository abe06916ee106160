from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ProxySubject, Subject
from .repository import SubjectDirectory


def _to_subject(r: dict) -> Subject:
    return Subject(
        subject_key=r["subject_key"],
        display_name=r["display_name"],
        email=r.get("email"),
        role=Role(r.get("role") or Role.EMPLOYEE.value),
        managed_by=r.get("managed_by"),
    )


def _to_proxy(r: dict) -> ProxySubject:
    return ProxySubject(
        proxy_subject_id=r["proxy_subject_id"],
        delegating_subject_id=r["delegating_subject_id"],
        label=r["label"],
    )


class MySQLSubjectDirectory(SubjectDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, subject_key: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_key, display_name, email, role, managed_by
                FROM subjects
                WHERE subject_key=%s
                """,
                (subject_key,),
            )
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_key, display_name, email, role, managed_by
                FROM subjects
                ORDER BY display_name
                """
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def list_managed_by(self, leader_key: str) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_key, display_name, email, role, managed_by
                FROM subjects
                WHERE managed_by=%s
                ORDER BY display_name
                """,
                (leader_key,),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def get_proxy(self, proxy_subject_id: str) -> Optional[ProxySubject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT proxy_subject_id, delegating_subject_id, label
                FROM proxy_subjects
                WHERE proxy_subject_id=%s
                """,
                (proxy_subject_id,),
            )
            r = fetchone(cur)
            return _to_proxy(r) if r else None

    def list_proxies(self, delegating_subject_id: str) -> Sequence[ProxySubject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT proxy_subject_id, delegating_subject_id, label
                FROM proxy_subjects
                WHERE delegating_subject_id=%s
                ORDER BY proxy_subject_id
                """,
                (delegating_subject_id,),
            )
            return [_to_proxy(r) for r in fetchall(cur)]
