"""
Car routes.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from smartpark.database import get_db
from smartpark.models.car import Car
from smartpark.models.service_package import ServicePackage
from smartpark.models.user import User
from smartpark.schemas.base import ItemResponse, ListResponse, MessageResponse
from smartpark.schemas.car import Car as CarSchema, CarCreate, CarUpdate
from smartpark.auth import get_current_active_user

log = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["cars"])


async def get_car_or_404(db: AsyncSession, car_id: int) -> Car:
    car = await db.get(Car, car_id)
    if not car:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Car not found"
        )
    return car


async def plate_taken(db: AsyncSession, plate_number: str) -> bool:
    result = await db.execute(select(Car.id).where(Car.plate_number == plate_number))
    return result.first() is not None


def duplicate_plate() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Plate number already registered"
    )


@router.get("", response_model=ListResponse[CarSchema])
async def get_cars(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get all cars, newest first.
    """
    result = await db.execute(select(Car).order_by(Car.id.desc()))
    cars = [CarSchema.model_validate(car) for car in result.scalars().all()]
    return {"data": cars, "count": len(cars)}


@router.get("/{car_id}", response_model=ItemResponse[CarSchema])
async def get_car(
    car_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific car by ID.
    """
    car = await get_car_or_404(db, car_id)
    return {"data": CarSchema.model_validate(car), "message": ""}


@router.post("", response_model=ItemResponse[CarSchema], status_code=status.HTTP_201_CREATED)
async def create_car(
    car: CarCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Register a new car.
    """
    if await plate_taken(db, car.plate_number):
        raise duplicate_plate()

    db_car = Car(**car.model_dump())
    db.add(db_car)
    try:
        await db.commit()
    except IntegrityError:
        # Registered concurrently after the check above
        await db.rollback()
        raise duplicate_plate()
    await db.refresh(db_car)

    log.info("Car %s registered by %s", db_car.plate_number, current_user.username)
    return {"data": CarSchema.model_validate(db_car), "message": "Car registered successfully"}


@router.put("/{car_id}", response_model=ItemResponse[CarSchema])
async def update_car(
    car_id: int,
    car_update: CarUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a car. The plate number is kept as registered.
    """
    db_car = await get_car_or_404(db, car_id)

    # Update only provided fields
    update_data = car_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(db_car, field, value)

    await db.commit()
    await db.refresh(db_car)

    log.info("Car %s updated by %s", db_car.plate_number, current_user.username)
    return {"data": CarSchema.model_validate(db_car), "message": "Car updated successfully"}


@router.delete("/{car_id}", response_model=MessageResponse)
async def delete_car(
    car_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a car that has no service records.
    """
    db_car = await get_car_or_404(db, car_id)

    in_use = await db.scalar(
        select(func.count()).select_from(ServicePackage).where(ServicePackage.car_id == car_id)
    )
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Car has service records and cannot be deleted"
        )

    await db.delete(db_car)
    await db.commit()

    log.info("Car %s deleted by %s", db_car.plate_number, current_user.username)
    return {"message": "Car deleted successfully"}
