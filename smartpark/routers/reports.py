"""
Report routes.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from smartpark import billing
from smartpark.database import get_db
from smartpark.models.car import Car
from smartpark.models.package import Package
from smartpark.models.payment import Payment
from smartpark.models.service_package import ServicePackage
from smartpark.models.user import User
from smartpark.schemas.base import ItemResponse
from smartpark.schemas.payment import Payment as PaymentSchema
from smartpark.schemas.report import DailyReport, Summary
from smartpark.schemas.service_package import ServicePackage as ServicePackageSchema
from smartpark.auth import get_current_active_user

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/daily", response_model=DailyReport)
async def get_daily_report(
    report_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get every payment made on a date (today by default) with the day's total.
    """
    report_date = report_date or date.today()
    result = await db.execute(
        select(Payment)
        .where(Payment.payment_date == report_date)
        .order_by(Payment.id)
    )
    payments = [PaymentSchema.model_validate(p) for p in result.scalars().all()]
    return billing.daily_report(payments, report_date)


@router.get("/summary", response_model=ItemResponse[Summary])
async def get_summary(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get overall counts, total revenue and revenue per package.
    """
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="startDate must not be after endDate"
        )

    total_cars = await db.scalar(select(func.count()).select_from(Car))
    total_packages = await db.scalar(select(func.count()).select_from(Package))

    services_result = await db.execute(select(ServicePackage).order_by(ServicePackage.id))
    services = [ServicePackageSchema.model_validate(s) for s in services_result.scalars().all()]

    payments_result = await db.execute(select(Payment).order_by(Payment.id))
    payments = [PaymentSchema.model_validate(p) for p in payments_result.scalars().all()]

    summary = billing.summary_report(
        total_cars, total_packages, services, payments, start=start_date, end=end_date
    )
    return {"data": summary, "message": ""}
