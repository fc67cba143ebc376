"""Attendance payroll command line interface.

Usage:
    attendance-payroll init-db
    attendance-payroll add-employee --employee-id E1 --first-name Ana --last-name Cruz --hourly-rate 100
    attendance-payroll login --employee-id E1 --date 2024-01-08 --time 08:00
    attendance-payroll logout --employee-id E1 --date 2024-01-08 --time 17:00
    attendance-payroll attendance --employee-id E1 --start 2024-01-01 --end 2024-01-15
    attendance-payroll employees [--active-only]
    attendance-payroll employee --employee-id E1
    attendance-payroll payslip --employee-id E1 --start 2024-01-01 --end 2024-01-15
    attendance-payroll batch --start 2024-01-01 --end 2024-01-15 [E1 E2 ...]
    attendance-payroll contributions --gross-pay 25000
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import date, time
from decimal import Decimal, InvalidOperation

from attendance_payroll.calculators.attendance import daily_hours
from attendance_payroll.calculators.statutory import compute_deductions
from attendance_payroll.calculators.types import (
    AttendanceRecord,
    CompensationProfile,
    PayrollResult,
)
from attendance_payroll.config import configure_logging, get_statutory_schedule
from attendance_payroll.database import (
    create_schema,
    get_engine,
    make_session_factory,
    session_scope,
)
from attendance_payroll.exceptions import PayrollError
from attendance_payroll.providers.sql import EMPLOYEE_DETAIL_FIELDS, SqlAlchemyEmployeeDirectory
from attendance_payroll.services.payroll_service import PayrollService

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def parse_time(s: str) -> time:
    """Parse a local HH:MM[:SS] time string."""
    value = time.fromisoformat(s)
    if value.tzinfo is not None:
        raise argparse.ArgumentTypeError(f"time must not carry a UTC offset: {s!r}")
    return value


def parse_decimal(s: str) -> Decimal:
    """Parse decimal amount."""
    try:
        return Decimal(s)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a decimal number: {s!r}") from None


def format_payslip(result: PayrollResult) -> str:
    """Render a payroll result as a plain-text payslip."""
    out = [
        f"Payslip for {result.employee_id}",
        f"  Period: {result.period_start.isoformat()} to {result.period_end.isoformat()}",
        f"  Hours:  {result.regular_hours} regular, {result.overtime_hours} overtime",
    ]
    if result.is_estimated:
        out.append("  NOTE: no attendance recorded; hours estimated from the standard schedule")
    out.append("")
    for line in result.lines:
        out.append(f"  {line.code:<12}{line.amount:>15,.2f}")
    out.append("  " + "-" * 27)
    out.append(f"  {'GROSS':<12}{result.gross_pay:>15,.2f}")
    out.append(f"  {'DEDUCTIONS':<12}{result.total_deductions:>15,.2f}")
    out.append(f"  {'NET':<12}{result.net_pay:>15,.2f}")
    out.append(f"  Calculation: {result.calculation_id}")
    return "\n".join(out)


class PayrollCli:
    """Attendance payroll command line interface."""

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="attendance-payroll",
            description="Attendance-based payroll tools",
        )
        parser.add_argument(
            "--database-url",
            type=str,
            help="Database URL (default: DATABASE_URL setting)",
        )
        parser.add_argument("--log-level", type=str, help="Logging level")
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("init-db", help="Create database tables")

        # add-employee command
        add = subparsers.add_parser("add-employee", help="Register an employee and pay terms")
        add.add_argument("--employee-id", type=str, required=True)
        add.add_argument("--first-name", type=str, required=True)
        add.add_argument("--last-name", type=str, required=True)
        add.add_argument("--position", type=str)
        add.add_argument("--supervisor", type=str)
        add.add_argument("--department", type=str)
        add.add_argument("--birthday", type=parse_date, help="YYYY-MM-DD")
        add.add_argument("--address", type=str)
        add.add_argument("--phone-number", type=str)
        add.add_argument("--sss-number", type=str)
        add.add_argument("--philhealth-number", type=str)
        add.add_argument("--pagibig-number", type=str)
        add.add_argument("--tin", type=str)
        add.add_argument(
            "--status",
            choices=["regular", "probationary", "terminated"],
            default="regular",
        )
        add.add_argument("--hourly-rate", type=parse_decimal, required=True)
        add.add_argument("--rice-subsidy", type=parse_decimal, default=Decimal("0"))
        add.add_argument("--phone-allowance", type=parse_decimal, default=Decimal("0"))
        add.add_argument("--clothing-allowance", type=parse_decimal, default=Decimal("0"))

        # employees / employee commands
        employees = subparsers.add_parser("employees", help="List employees")
        employees.add_argument(
            "--active-only",
            action="store_true",
            help="Leave out terminated employees",
        )
        employee = subparsers.add_parser("employee", help="Show one employee")
        employee.add_argument("--employee-id", type=str, required=True)

        # login / logout commands
        for name in ("login", "logout"):
            event = subparsers.add_parser(name, help=f"Record a {name} time")
            event.add_argument("--employee-id", type=str, required=True)
            event.add_argument("--date", type=parse_date, required=True, help="YYYY-MM-DD")
            event.add_argument("--time", type=parse_time, required=True, help="HH:MM[:SS]")

        # attendance command
        attendance = subparsers.add_parser("attendance", help="Show recorded attendance")
        attendance.add_argument("--employee-id", type=str, required=True)
        attendance.add_argument("--start", type=parse_date, required=True, help="Range start")
        attendance.add_argument("--end", type=parse_date, required=True, help="Range end")

        # payslip command
        payslip = subparsers.add_parser("payslip", help="Compute payroll for one employee")
        payslip.add_argument("--employee-id", type=str, required=True)
        payslip.add_argument("--start", type=parse_date, required=True, help="Period start")
        payslip.add_argument("--end", type=parse_date, required=True, help="Period end")
        payslip.add_argument(
            "--estimate",
            action="store_true",
            help="Use the standard schedule when no attendance is recorded",
        )

        # batch command
        batch = subparsers.add_parser("batch", help="Compute payroll for many employees")
        batch.add_argument("--start", type=parse_date, required=True, help="Period start")
        batch.add_argument("--end", type=parse_date, required=True, help="Period end")
        batch.add_argument("--estimate", action="store_true")
        batch.add_argument(
            "employee_ids",
            nargs="*",
            help="Employee ids (default: all non-terminated employees)",
        )

        # contributions command
        contributions = subparsers.add_parser(
            "contributions",
            help="Show statutory deductions for a gross pay amount",
        )
        contributions.add_argument("--gross-pay", type=parse_decimal, required=True)

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)
        configure_logging(parsed.log_level)
        if parsed.database_url:
            self.database_url = parsed.database_url

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "init-db": self._cmd_init_db,
            "add-employee": self._cmd_add_employee,
            "employees": self._cmd_employees,
            "employee": self._cmd_employee,
            "login": self._cmd_attendance,
            "logout": self._cmd_attendance,
            "attendance": self._cmd_list_attendance,
            "payslip": self._cmd_payslip,
            "batch": self._cmd_batch,
            "contributions": self._cmd_contributions,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return handler(parsed)
        except PayrollError as e:
            logger.debug("Command %s failed", parsed.command, exc_info=True)
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
            return 2

    @asynccontextmanager
    async def _directory(self) -> AsyncGenerator[SqlAlchemyEmployeeDirectory, None]:
        engine = get_engine(self.database_url)
        try:
            async with session_scope(make_session_factory(engine)) as session:
                yield SqlAlchemyEmployeeDirectory(session)
        finally:
            await engine.dispose()

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create all tables."""

        async def _run() -> None:
            engine = get_engine(self.database_url)
            try:
                await create_schema(engine)
            finally:
                await engine.dispose()

        asyncio.run(_run())
        print("Database schema created.")
        return 0

    def _cmd_add_employee(self, args: argparse.Namespace) -> int:
        profile = CompensationProfile(
            hourly_rate=args.hourly_rate,
            rice_subsidy=args.rice_subsidy,
            phone_allowance=args.phone_allowance,
            clothing_allowance=args.clothing_allowance,
        )

        async def _run() -> None:
            async with self._directory() as directory:
                await directory.add_employee(
                    args.employee_id,
                    args.first_name,
                    args.last_name,
                    profile,
                    status=args.status,
                    **{name: getattr(args, name) for name in EMPLOYEE_DETAIL_FIELDS},
                )

        asyncio.run(_run())
        print(f"Added employee {args.employee_id}")
        return 0

    def _cmd_attendance(self, args: argparse.Namespace) -> int:
        """Record a login or logout."""

        async def _run():
            async with self._directory() as directory:
                if args.command == "login":
                    return await directory.record_login(args.employee_id, args.date, args.time)
                return await directory.record_logout(args.employee_id, args.date, args.time)

        record = asyncio.run(_run())
        print(
            f"{args.employee_id} {record.work_date.isoformat()}: "
            f"in={record.login_time or '-'} out={record.logout_time or '-'}"
        )
        return 0

    def _cmd_list_attendance(self, args: argparse.Namespace) -> int:
        """Print recorded days and worked hours."""

        async def _run() -> list[AttendanceRecord]:
            async with self._directory() as directory:
                return await directory.get_records(args.employee_id, args.start, args.end)

        records = asyncio.run(_run())
        print(f"Attendance for {args.employee_id}, {args.start.isoformat()} to {args.end.isoformat()}")
        total = Decimal("0")
        for record in records:
            hours = daily_hours(record)
            total += hours
            print(
                f"  {record.work_date.isoformat()}  in={record.login_time or '-'}  "
                f"out={record.logout_time or '-'}  {hours:>6} h"
            )
        if not records:
            print("  (no attendance recorded)")
        print(f"  Total hours: {total}")
        return 0

    def _cmd_employees(self, args: argparse.Namespace) -> int:
        async def _run() -> list[tuple[str, str, str, str]]:
            async with self._directory() as directory:
                employees = await directory.list_employees(
                    include_terminated=not args.active_only
                )
                return [
                    (e.employee_id, e.full_name, e.position or "-", e.status) for e in employees
                ]

        rows = asyncio.run(_run())
        for employee_id, name, position, status in rows:
            print(f"  {employee_id:<10}{name:<28}{position:<24}{status}")
        if not rows:
            print("  (no employees)")
        return 0

    def _cmd_employee(self, args: argparse.Namespace) -> int:
        """Print identity, government ids and pay terms for one employee."""

        async def _run() -> list[tuple[str, object]]:
            async with self._directory() as directory:
                employee = await directory.get_employee(args.employee_id)
                rows: list[tuple[str, object]] = [
                    ("name", employee.full_name),
                    ("status", employee.status),
                ]
                rows += [(name, getattr(employee, name)) for name in EMPLOYEE_DETAIL_FIELDS]
                profile = await directory.get_profile(args.employee_id)
                rows += [
                    ("hourly_rate", profile.hourly_rate),
                    ("rice_subsidy", profile.rice_subsidy),
                    ("phone_allowance", profile.phone_allowance),
                    ("clothing_allowance", profile.clothing_allowance),
                ]
                return rows

        print(f"Employee {args.employee_id}")
        for name, value in asyncio.run(_run()):
            print(f"  {name:<20}{value if value is not None else '-'}")
        return 0

    def _cmd_payslip(self, args: argparse.Namespace) -> int:
        async def _run() -> PayrollResult:
            async with self._directory() as directory:
                service = PayrollService(profiles=directory, attendance=directory)
                return await service.run_payroll(
                    args.employee_id, args.start, args.end, allow_estimate=args.estimate
                )

        print(format_payslip(asyncio.run(_run())))
        return 0

    def _cmd_batch(self, args: argparse.Namespace) -> int:
        """Run payroll for a set of employees and print a summary."""

        async def _run():
            async with self._directory() as directory:
                employee_ids = args.employee_ids or await directory.list_employee_ids()
                service = PayrollService(profiles=directory, attendance=directory)
                return await service.run_batch(
                    employee_ids, args.start, args.end, allow_estimate=args.estimate
                )

        batch = asyncio.run(_run())

        print(f"Payroll {args.start.isoformat()} to {args.end.isoformat()}")
        for employee_id, result in batch.results.items():
            marker = " (estimated)" if result.is_estimated else ""
            print(
                f"  {employee_id:<12} gross {result.gross_pay:>12,.2f}  "
                f"net {result.net_pay:>12,.2f}{marker}"
            )
        for employee_id, message in batch.errors.items():
            print(f"  {employee_id:<12} FAILED: {message}")
        print(f"\n  Total gross: {batch.total_gross:>12,.2f}")
        print(f"  Total net:   {batch.total_net:>12,.2f}")
        return 0 if batch.success else 1

    def _cmd_contributions(self, args: argparse.Namespace) -> int:
        schedule = get_statutory_schedule()
        breakdown = compute_deductions(args.gross_pay, schedule)
        print(f"Statutory deductions ({schedule.name}) on {args.gross_pay:,.2f}")
        for name, amount in breakdown.as_dict().items():
            print(f"  {name:<18}{amount:>12,.2f}")
        print(f"  {'total':<18}{breakdown.total:>12,.2f}")
        return 0


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
