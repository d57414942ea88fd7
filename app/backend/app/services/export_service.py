"""CSV and XLSX exports of the aggregated planning views."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from io import BytesIO

from app.core.months import Month
from app.models.entities import MemberType
from app.services.aggregation_service import AggregationService, serialize_financial

EXPORT_FORMATS = {"csv", "xlsx"}


class UnknownExportError(LookupError):
    pass


class UnsupportedExportFormatError(ValueError):
    pass


@dataclass(slots=True)
class ExportFilePayload:
    media_type: str
    filename: str
    content: bytes


class ExportService:
    def __init__(self, aggregation: AggregationService) -> None:
        self.aggregation = aggregation

    def _monthly_financial_rows(self) -> list[dict[str, str]]:
        # Spans every stored month, not just the requested timeline window.
        return [
            {key: str(value) for key, value in serialize_financial(row).items()}
            for row in self.aggregation.monthly_financials()
        ]

    def _capacity_rows(self, months: list[Month], member_type: MemberType | None) -> list[dict[str, str]]:
        plan = self.aggregation.capacity_plan(months, member_type)
        flat_rows: list[dict[str, str]] = []
        for row in plan["members"]:
            member = row["member"]
            for month_row in row["months"]:
                flat_rows.append(
                    {
                        "member_id": str(member["id"]),
                        "member_name": str(member["name"]),
                        "member_type": str(member["member_type"]),
                        "role_title": str(row["role_title"] or ""),
                        "month": str(month_row["month"]),
                        "total": str(month_row["total"]),
                        "bench": str(month_row["bench"]),
                        "status": str(month_row["status"]),
                    }
                )
        return flat_rows

    def export_report(
        self,
        *,
        report_key: str,
        format_name: str,
        months: list[Month],
        member_type: MemberType | None = None,
    ) -> ExportFilePayload:
        normalized_key = report_key.strip().lower()
        normalized_format = format_name.strip().lower()
        if normalized_format not in EXPORT_FORMATS:
            raise UnsupportedExportFormatError("format must be one of: csv, xlsx.")

        report_dispatch = {
            "monthly-financials": self._monthly_financial_rows,
            "capacity": lambda: self._capacity_rows(months, member_type),
        }
        report_func = report_dispatch.get(normalized_key)
        if report_func is None:
            raise UnknownExportError("Unknown report_key for export.")

        rows = report_func()
        fieldnames: list[str] = list(rows[0].keys()) if rows else []

        if normalized_format == "csv":
            csv_bytes = b""
            if fieldnames:
                sio = io.StringIO()
                writer = csv.DictWriter(sio, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(rows)
                csv_bytes = sio.getvalue().encode("utf-8")
            return ExportFilePayload(
                media_type="text/csv; charset=utf-8",
                filename=f"{normalized_key}.csv",
                content=csv_bytes,
            )

        from openpyxl import Workbook

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = normalized_key[:31]
        if fieldnames:
            sheet.append(fieldnames)
            for row in rows:
                sheet.append([row.get(column, "") for column in fieldnames])

        output = BytesIO()
        workbook.save(output)
        return ExportFilePayload(
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=f"{normalized_key}.xlsx",
            content=output.getvalue(),
        )
