from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from .admins.mysql_admin_repository import MySQLAdminRepository
from .admins.repository import AdminRepository
from .admins.service import AuthService
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .audit.service import AuditRecorder
from .common.datetime_utils import now_utc
from .common.ip_restriction import IPAllowList
from .core.constants import (
    DEFAULT_CLEANUP_DAYS,
    DEFAULT_SESSION_MAX_ENTRIES,
    DEFAULT_SESSION_TTL_HOURS,
    DEFAULT_STANDARD_WORK_HOURS,
)
from .corrections.service import CorrectionService
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .maintenance.service import MaintenanceService
from .reports.service import ReportService
from .sessions.store import InMemorySessionStore, SessionStore
from .time_records.mysql_time_record_repository import MySQLTimeRecordRepository
from .time_records.repository import TimeRecordRepository
from .time_records.service import ClockService


@dataclass(frozen=True)
class ContainerOptions:
    cleanup_days: int = DEFAULT_CLEANUP_DAYS
    standard_work_hours: float = DEFAULT_STANDARD_WORK_HOURS
    session_ttl_hours: float = DEFAULT_SESSION_TTL_HOURS
    session_max_entries: int = DEFAULT_SESSION_MAX_ENTRIES
    allowed_ips: Optional[IPAllowList] = None
    admin_allowed_ips: Optional[IPAllowList] = None

    @classmethod
    def from_settings(cls, settings) -> "ContainerOptions":
        restricted = bool(getattr(settings, "IP_RESTRICTION_ENABLED", False))
        return cls(
            cleanup_days=int(getattr(settings, "CLEANUP_RETENTION_DAYS", DEFAULT_CLEANUP_DAYS)),
            standard_work_hours=float(getattr(settings, "STANDARD_WORK_HOURS", DEFAULT_STANDARD_WORK_HOURS)),
            session_ttl_hours=float(getattr(settings, "SESSION_TTL_HOURS", DEFAULT_SESSION_TTL_HOURS)),
            session_max_entries=int(getattr(settings, "SESSION_MAX_ENTRIES", DEFAULT_SESSION_MAX_ENTRIES)),
            allowed_ips=IPAllowList.from_csv(getattr(settings, "ALLOWED_IPS", "")) if restricted else None,
            admin_allowed_ips=IPAllowList.from_csv(getattr(settings, "ADMIN_ALLOWED_IPS", "")) if restricted else None,
        )


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    records_repo: TimeRecordRepository
    audit_repo: AuditRepository
    admins_repo: AdminRepository

    audit_recorder: AuditRecorder
    auth_service: AuthService
    employee_service: EmployeeService
    clock_service: ClockService
    correction_service: CorrectionService
    maintenance_service: MaintenanceService
    report_service: ReportService
    session_store: SessionStore

    options: ContainerOptions = field(default_factory=ContainerOptions)
    conn: Optional[DatabaseConnection] = None


def assemble_container(
    *,
    employees_repo: EmployeeRepository,
    records_repo: TimeRecordRepository,
    audit_repo: AuditRepository,
    admins_repo: AdminRepository,
    options: Optional[ContainerOptions] = None,
    clock: Callable[[], datetime] = now_utc,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    options = options or ContainerOptions()
    audit_recorder = AuditRecorder(audit_repo, clock=clock)

    return Container(
        employees_repo=employees_repo,
        records_repo=records_repo,
        audit_repo=audit_repo,
        admins_repo=admins_repo,
        audit_recorder=audit_recorder,
        auth_service=AuthService(admins_repo),
        employee_service=EmployeeService(employees_repo, records_repo),
        clock_service=ClockService(records_repo, employees_repo, clock=clock),
        correction_service=CorrectionService(records_repo, employees_repo, audit_recorder),
        maintenance_service=MaintenanceService(
            records_repo,
            audit_recorder,
            default_window_days=options.cleanup_days,
            clock=clock,
        ),
        report_service=ReportService(records_repo, standard_work_hours=options.standard_work_hours),
        session_store=InMemorySessionStore(
            ttl=timedelta(hours=options.session_ttl_hours),
            max_entries=options.session_max_entries,
            clock=clock,
        ),
        options=options,
        conn=conn,
    )


def build_container(*, db_config: dict, options: Optional[ContainerOptions] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble_container(
        employees_repo=MySQLEmployeeRepository(conn),
        records_repo=MySQLTimeRecordRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        admins_repo=MySQLAdminRepository(conn),
        options=options,
        conn=conn,
    )
