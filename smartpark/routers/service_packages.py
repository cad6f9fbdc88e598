"""
Service record routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from smartpark import billing
from smartpark.config import get_settings
from smartpark.database import get_db
from smartpark.models.car import Car
from smartpark.models.package import Package
from smartpark.models.payment import Payment
from smartpark.models.service_package import ServicePackage, ServiceStatus
from smartpark.models.user import User
from smartpark.schemas.base import ItemResponse, ListResponse, MessageResponse
from smartpark.schemas.service_package import (
    ServicePackage as ServicePackageSchema,
    ServicePackageCreate,
    ServicePackageUpdate,
)
from smartpark.auth import get_current_active_user

log = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/service-packages", tags=["service-packages"])


def record_number_for(service_id: int) -> str:
    return f"SP-{service_id:05d}"


async def load_service(db: AsyncSession, service_id: int):
    """Fetch a service record with its car and package, or None."""
    result = await db.execute(
        select(ServicePackage)
        .where(ServicePackage.id == service_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_service_or_404(db: AsyncSession, service_id: int) -> ServicePackage:
    service = await load_service(db, service_id)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service record not found"
        )
    return service


@router.get("", response_model=ListResponse[ServicePackageSchema])
async def get_service_packages(
    status_filter: ServiceStatus = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get all service records, newest first, with an optional status filter.
    """
    query = select(ServicePackage).order_by(ServicePackage.id.desc())

    if status_filter:
        query = query.where(ServicePackage.status == status_filter)

    result = await db.execute(query)
    services = [ServicePackageSchema.model_validate(s) for s in result.scalars().all()]
    return {"data": services, "count": len(services)}


@router.get("/unpaid", response_model=ListResponse[ServicePackageSchema])
async def get_unpaid_service_packages(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get service records that can still receive a payment.
    """
    result = await db.execute(
        select(ServicePackage)
        .outerjoin(Payment, Payment.service_package_id == ServicePackage.id)
        .where(Payment.id.is_(None))
        .where(ServicePackage.status != ServiceStatus.PAID)
        .order_by(ServicePackage.id.desc())
    )
    services = [ServicePackageSchema.model_validate(s) for s in result.scalars().all()]
    return {"data": services, "count": len(services)}


@router.get("/{service_id}", response_model=ItemResponse[ServicePackageSchema])
async def get_service_package(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific service record by ID.
    """
    service = await get_service_or_404(db, service_id)
    return {"data": ServicePackageSchema.model_validate(service), "message": ""}


@router.post("", response_model=ItemResponse[ServicePackageSchema], status_code=status.HTTP_201_CREATED)
async def create_service_package(
    service: ServicePackageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Book a package for a car.
    """
    if await db.get(Car, service.car_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Car not found"
        )
    if await db.get(Package, service.package_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Package not found"
        )

    db_service = ServicePackage(**service.model_dump())
    db.add(db_service)
    await db.flush()
    db_service.record_number = record_number_for(db_service.id)
    await db.commit()

    db_service = await load_service(db, db_service.id)
    log.info(
        "Service record %s created for car %s by %s",
        db_service.record_number, db_service.car.plate_number, current_user.username,
    )
    return {
        "data": ServicePackageSchema.model_validate(db_service),
        "message": "Service record created successfully",
    }


@router.put("/{service_id}", response_model=ItemResponse[ServicePackageSchema])
async def update_service_package(
    service_id: int,
    service_update: ServicePackageUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update the status or date of a service record.
    """
    db_service = await get_service_or_404(db, service_id)

    # Update only provided fields
    update_data = service_update.model_dump(exclude_unset=True)

    new_status = update_data.pop("status", None)
    if new_status is not None:
        previous = db_service.status
        try:
            billing.update_service_status(
                db_service, new_status, strict=settings.strict_status_transitions
            )
        except billing.InvalidStatusTransition as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(exc)
            )
        if previous != db_service.status:
            log.info(
                "Service record %s moved from %s to %s by %s",
                db_service.record_number, previous.value, db_service.status.value,
                current_user.username,
            )

    for field, value in update_data.items():
        if value is not None:
            setattr(db_service, field, value)

    await db.commit()

    db_service = await load_service(db, service_id)
    return {
        "data": ServicePackageSchema.model_validate(db_service),
        "message": "Service record updated successfully",
    }


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service_package(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a service record that has not been paid for.
    """
    db_service = await get_service_or_404(db, service_id)

    paid = await db.scalar(
        select(func.count()).select_from(Payment).where(Payment.service_package_id == service_id)
    )
    if paid:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Service record has a payment and cannot be deleted"
        )

    await db.delete(db_service)
    await db.commit()

    log.info("Service record %s deleted by %s", db_service.record_number, current_user.username)
    return {"message": "Service record deleted successfully"}
