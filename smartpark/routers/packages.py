"""
Wash package routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from smartpark.database import get_db
from smartpark.models.package import Package
from smartpark.models.service_package import ServicePackage
from smartpark.models.user import User
from smartpark.schemas.base import ItemResponse, ListResponse, MessageResponse
from smartpark.schemas.package import Package as PackageSchema, PackageCreate, PackageUpdate
from smartpark.auth import get_current_active_user

log = logging.getLogger(__name__)

router = APIRouter(prefix="/packages", tags=["packages"])


async def get_package_or_404(db: AsyncSession, package_id: int) -> Package:
    package = await db.get(Package, package_id)
    if not package:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Package not found"
        )
    return package


async def package_number_taken(db: AsyncSession, package_number: str) -> bool:
    result = await db.execute(select(Package.id).where(Package.package_number == package_number))
    return result.first() is not None


def duplicate_package_number() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Package number already exists"
    )


@router.get("", response_model=ListResponse[PackageSchema])
async def get_packages(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get all packages, newest first.
    """
    result = await db.execute(select(Package).order_by(Package.id.desc()))
    packages = [PackageSchema.model_validate(package) for package in result.scalars().all()]
    return {"data": packages, "count": len(packages)}


@router.get("/{package_id}", response_model=ItemResponse[PackageSchema])
async def get_package(
    package_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific package by ID.
    """
    package = await get_package_or_404(db, package_id)
    return {"data": PackageSchema.model_validate(package), "message": ""}


@router.post("", response_model=ItemResponse[PackageSchema], status_code=status.HTTP_201_CREATED)
async def create_package(
    package: PackageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a new package.
    """
    if await package_number_taken(db, package.package_number):
        raise duplicate_package_number()

    db_package = Package(**package.model_dump())
    db.add(db_package)
    try:
        await db.commit()
    except IntegrityError:
        # Created concurrently after the check above
        await db.rollback()
        raise duplicate_package_number()
    await db.refresh(db_package)

    log.info("Package %s created by %s", db_package.package_number, current_user.username)
    return {"data": PackageSchema.model_validate(db_package), "message": "Package created successfully"}


@router.put("/{package_id}", response_model=ItemResponse[PackageSchema])
async def update_package(
    package_id: int,
    package_update: PackageUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a package. The package number is kept as created.
    """
    db_package = await get_package_or_404(db, package_id)

    # Update only provided fields
    update_data = package_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(db_package, field, value)

    await db.commit()
    await db.refresh(db_package)

    log.info("Package %s updated by %s", db_package.package_number, current_user.username)
    return {"data": PackageSchema.model_validate(db_package), "message": "Package updated successfully"}


@router.delete("/{package_id}", response_model=MessageResponse)
async def delete_package(
    package_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a package that has no service records.
    """
    db_package = await get_package_or_404(db, package_id)

    in_use = await db.scalar(
        select(func.count()).select_from(ServicePackage).where(ServicePackage.package_id == package_id)
    )
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Package has service records and cannot be deleted"
        )

    await db.delete(db_package)
    await db.commit()

    log.info("Package %s deleted by %s", db_package.package_number, current_user.username)
    return {"message": "Package deleted successfully"}
