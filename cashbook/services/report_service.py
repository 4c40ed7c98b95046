# CASHBOOK/backend/cashbook/services/report_service.py : le service de rapports agrégés

from sqlalchemy.orm import Session
from sqlalchemy import func, case, and_
from datetime import datetime, date, time, timedelta
from typing import List, Dict, Optional, Tuple
from cashbook.models import models
from cashbook.constants import CashbookStatus, EntryType, ReportPeriod, WEEKLY_REPORT_DAYS
from cashbook.services.cashbook_service import not_deleted


def resolve_period(
    period: ReportPeriod,
    now: Optional[datetime] = None,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> Tuple[datetime, datetime]:
    """Convertit un filtre de période en intervalle [début, fin]"""
    now = now or datetime.utcnow()
    start_of_today = datetime.combine(now.date(), time.min)

    if period == ReportPeriod.DAILY:
        return start_of_today, datetime.combine(now.date(), time.max)
    if period == ReportPeriod.WEEKLY:
        return now - timedelta(days=WEEKLY_REPORT_DAYS), now
    if period == ReportPeriod.MONTHLY:
        return start_of_today.replace(day=1), now
    if period == ReportPeriod.YEARLY:
        return start_of_today.replace(month=1, day=1), now

    # CUSTOM
    if start is None or end is None:
        raise ValueError("Les dates de début et de fin sont requises")
    if start > end:
        raise ValueError("La date de début doit précéder la date de fin")
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def get_aggregated_report(
    db: Session,
    user_id: int,
    is_admin: bool,
    start: datetime,
    end: datetime
) -> List[Dict]:
    """Totaux par cashbook sur l'intervalle [start, end].

    L'administrateur voit tous les cashbooks hors corbeille; un membre du
    personnel ne voit que les cashbooks actifs auxquels il est assigné.
    Les cashbooks sans écriture dans l'intervalle apparaissent avec des
    totaux nuls.
    """
    in_range = and_(
        models.Entry.created_at >= start,
        models.Entry.created_at <= end
    )
    total_in = func.coalesce(func.sum(
        case((and_(in_range, models.Entry.type == EntryType.IN.value), models.Entry.amount), else_=0)
    ), 0)
    total_out = func.coalesce(func.sum(
        case((and_(in_range, models.Entry.type == EntryType.OUT.value), models.Entry.amount), else_=0)
    ), 0)
    entries_count = func.coalesce(func.sum(case((in_range, 1), else_=0)), 0)

    query = db.query(
        models.Cashbook.id,
        models.Cashbook.name,
        models.Cashbook.category_id,
        models.Cashbook.status,
        total_in.label('total_in'),
        total_out.label('total_out'),
        entries_count.label('entries_count')
    ).outerjoin(
        models.Entry, models.Entry.cashbook_id == models.Cashbook.id
    ).filter(not_deleted())

    if not is_admin:
        query = query.join(
            models.CashbookStaff,
            models.CashbookStaff.cashbook_id == models.Cashbook.id
        ).filter(
            models.CashbookStaff.user_id == user_id,
            models.Cashbook.status == CashbookStatus.ACTIVE.value
        )

    results = query.group_by(
        models.Cashbook.id,
        models.Cashbook.name,
        models.Cashbook.category_id,
        models.Cashbook.status,
        models.Cashbook.created_at
    ).order_by(models.Cashbook.created_at.desc(), models.Cashbook.id.desc()).all()

    return [
        {
            "cashbook_id": r[0],
            "name": r[1],
            "category_id": r[2],
            "status": r[3],
            "total_in": float(r[4]),
            "total_out": float(r[5]),
            "balance": float(r[4]) - float(r[5]),
            "entries_count": int(r[6])
        }
        for r in results
    ]


def summarize(rows: List[Dict]) -> Dict:
    """Totaux globaux d'un rapport"""
    total_in = sum(r["total_in"] for r in rows)
    total_out = sum(r["total_out"] for r in rows)
    return {
        "total_in": total_in,
        "total_out": total_out,
        "balance": total_in - total_out
    }
