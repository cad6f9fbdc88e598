"""
Payment and bill routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from smartpark import billing
from smartpark.config import get_settings
from smartpark.database import get_db
from smartpark.models.payment import Payment
from smartpark.models.service_package import ServicePackage, ServiceStatus
from smartpark.models.user import User
from smartpark.routers.service_packages import get_service_or_404
from smartpark.schemas.base import ItemResponse, ListResponse
from smartpark.schemas.payment import Bill, Payment as PaymentSchema, PaymentCreate
from smartpark.schemas.service_package import ServicePackage as ServicePackageSchema
from smartpark.auth import get_current_active_user

log = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/payments", tags=["payments"])


def payment_number_for(payment_id: int) -> str:
    return f"PAY-{payment_id:05d}"


async def load_payment(db: AsyncSession, payment_id: int):
    """Fetch a payment with its service record, car and package, or None."""
    result = await db.execute(
        select(Payment)
        .where(Payment.id == payment_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@router.get("", response_model=ListResponse[PaymentSchema])
async def get_payments(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get all payments, most recent first.
    """
    result = await db.execute(
        select(Payment).order_by(Payment.payment_date.desc(), Payment.id.desc())
    )
    payments = [PaymentSchema.model_validate(p) for p in result.scalars().all()]
    return {"data": payments, "count": len(payments)}


@router.get("/bill/{service_id}", response_model=ItemResponse[Bill])
async def get_bill(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Compose the bill for a service record, paid or pending.
    """
    service = await get_service_or_404(db, service_id)

    result = await db.execute(select(Payment).where(Payment.service_package_id == service_id))
    payment = result.scalar_one_or_none()

    bill = billing.compose_bill(
        ServicePackageSchema.model_validate(service),
        PaymentSchema.model_validate(payment) if payment else None,
        settings.company_location,
    )
    return {"data": bill, "message": ""}


@router.get("/{payment_id}", response_model=ItemResponse[PaymentSchema])
async def get_payment(
    payment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific payment by ID.
    """
    payment = await load_payment(db, payment_id)
    if not payment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment not found"
        )
    return {"data": PaymentSchema.model_validate(payment), "message": ""}


@router.post("", response_model=ItemResponse[PaymentSchema], status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Record the payment for a service record and mark the service paid.
    """
    service: ServicePackage = await get_service_or_404(db, payment.service_package_id)

    result = await db.execute(
        select(Payment).where(Payment.service_package_id == service.id)
    )
    if result.scalar_one_or_none() or service.status == ServiceStatus.PAID:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Service has already been paid"
        )

    price = service.package.package_price
    amount_paid = price if payment.amount_paid is None else payment.amount_paid
    if not billing.amount_matches_price(amount_paid, price):
        log.warning(
            "Payment for %s is %.2f but package %s costs %.2f",
            service.record_number, amount_paid, service.package.package_name, price,
        )

    db_payment = Payment(
        service_package_id=service.id,
        amount_paid=amount_paid,
        payment_method=payment.payment_method,
        payment_date=payment.payment_date,
    )
    db.add(db_payment)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Service has already been paid"
        )

    db_payment.payment_number = payment_number_for(db_payment.id)
    billing.update_service_status(service, ServiceStatus.PAID, strict=settings.strict_status_transitions)
    await db.commit()

    db_payment = await load_payment(db, db_payment.id)
    log.info(
        "Payment %s of %.2f (%s) recorded for %s by %s",
        db_payment.payment_number, db_payment.amount_paid, db_payment.payment_method.value,
        service.record_number, current_user.username,
    )
    return {
        "data": PaymentSchema.model_validate(db_payment),
        "message": "Payment recorded successfully",
    }
