# CASHBOOK/backend/cashbook/routes/reports.py

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from cashbook.database import get_db
from cashbook.auth import get_current_user
from cashbook.models import models
from cashbook.schemas import schemas
from cashbook.constants import ReportPeriod
from cashbook.permissions import is_owner
from cashbook.services.report_service import resolve_period, get_aggregated_report, summarize

router = APIRouter(prefix="/reports", tags=["reports"])

@router.get("/", response_model=schemas.AggregatedReport)
def get_report(
    period: ReportPeriod = Query(ReportPeriod.WEEKLY, description="Période du rapport"),
    start: Optional[date] = Query(None, description="Début (période CUSTOM)"),
    end: Optional[date] = Query(None, description="Fin (période CUSTOM)"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Totaux par cashbook et totaux globaux sur une période"""
    try:
        range_start, range_end = resolve_period(period, start=start, end=end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    rows = get_aggregated_report(db, current_user.id, is_owner(current_user), range_start, range_end)
    return {
        "period": period.value,
        "start": range_start,
        "end": range_end,
        "cashbooks": rows,
        "totals": summarize(rows)
    }
