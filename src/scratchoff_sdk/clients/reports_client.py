from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models import DailyReport
from .base import BaseClient


@dataclass
class ReportsClient(BaseClient):
    def get_daily_report(self, store_id: int, report_date: date | str) -> DailyReport:
        day = _coerce_report_date(report_date)
        data = self._get_with_retry(
            f"/reports/store/{store_id}/daily",
            operation="reports.daily",
            params={"date": day.isoformat()},
        )
        if not isinstance(data, dict):
            raise ValidationError(
                code="MALFORMED_PAYLOAD",
                message="Expected daily report response to be a JSON object",
                raw_payload=data,
            )
        try:
            report = DailyReport.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(
                code="MALFORMED_PAYLOAD",
                message="Invalid daily report payload",
                details={"errors": exc.errors(include_url=False)},
                raw_payload=data,
            ) from exc
        if report.report_date is None:
            report = report.model_copy(update={"report_date": day})
        return report


def _coerce_report_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError(
            code="INVALID_REPORT_DATE",
            message=f"Report date must be YYYY-MM-DD, got {value!r}",
        ) from exc
