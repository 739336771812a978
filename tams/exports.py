"""Excel and CSV downloads of the TAMS reports."""

from __future__ import annotations

import csv
from dataclasses import astuple, dataclass
from datetime import date
from io import BytesIO, StringIO
from typing import Any, Callable, Iterable, List, Mapping, Sequence, TextIO

from django.http import Http404, HttpResponse
from openpyxl import Workbook
from openpyxl.styles import Font
from rest_framework.decorators import api_view
from rest_framework.request import Request

from . import models, reports
from .services import dashboard

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ReportDefinition:
    title: str
    filename: str
    headers: Sequence[str]
    build_rows: Callable[[Mapping[str, Any]], Sequence[Any]]


def _assets(params: Mapping[str, Any]):
    return dashboard.filter_assets(models.Asset.objects.active(), params)


def _year(params: Mapping[str, Any]) -> int | None:
    year = params.get("year")
    return int(year) if year and str(year).isdigit() else None


ASSET_REGISTER_HEADERS = [
    "Reference",
    "Name",
    "Asset type",
    "Status",
    "Region",
    "Depot",
    "Road",
    "Latitude",
    "Longitude",
    "Installed",
    "Replacement value",
    "Latest CI",
    "Condition",
    "Urgency",
    "Last inspected",
]

REPORTS = {
    "assets": ReportDefinition(
        title="Asset Register",
        filename="asset_register",
        headers=ASSET_REGISTER_HEADERS,
        build_rows=lambda params: reports.asset_register_rows(_assets(params)),
    ),
    "inspections": ReportDefinition(
        title="Inspections",
        filename="inspection_register",
        headers=[
            "Reference",
            "Asset type",
            "Inspection date",
            "Inspector",
            "CI health",
            "CI safety",
            "CI final",
            "DERU",
            "Urgency",
            "Remedial cost",
            "Remedial work",
        ],
        build_rows=lambda params: reports.inspection_register_rows(year=_year(params)),
    ),
    "regions": ReportDefinition(
        title="Regions",
        filename="region_summary",
        headers=["Region", "Assets", "Scored", "Mean CI", "Poor", "Replacement value"],
        build_rows=lambda params: reports.region_summary_rows(_assets(params)),
    ),
}


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return value


def row_values(row: Any) -> List[Any]:
    return [_cell(value) for value in astuple(row)]


def write_csv(headers: Sequence[str], rows: Iterable[Any], stream: TextIO) -> int:
    writer = csv.writer(stream)
    writer.writerow(headers)
    count = 0
    for row in rows:
        writer.writerow(row_values(row))
        count += 1
    return count


def build_workbook(title: str, headers: Sequence[str], rows: Iterable[Any]) -> Workbook:
    workbook = Workbook()
    ws = workbook.active
    ws.title = title[:31]
    ws.append(list(headers))
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append(row_values(row))
    ws.freeze_panes = "A2"
    return workbook


def _workbook_response(filename: str, workbook: Workbook) -> HttpResponse:
    buffer = BytesIO()
    workbook.save(buffer)
    buffer.seek(0)
    response = HttpResponse(buffer.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f"attachment; filename={filename}"
    return response


def _csv_response(filename: str, headers: Sequence[str], rows: Iterable[Any]) -> HttpResponse:
    buffer = StringIO()
    write_csv(headers, rows, buffer)
    response = HttpResponse(buffer.getvalue(), content_type="text/csv")
    response["Content-Disposition"] = f"attachment; filename={filename}"
    return response


@api_view(["GET"])
def report_download(request: Request, name: str, fmt: str) -> HttpResponse:
    report = REPORTS.get(name)
    if report is None or fmt not in ("xlsx", "csv"):
        raise Http404("Unknown report")

    rows = report.build_rows(request.query_params)
    if fmt == "csv":
        return _csv_response(f"{report.filename}.csv", report.headers, rows)
    return _workbook_response(f"{report.filename}.xlsx", build_workbook(report.title, report.headers, rows))
