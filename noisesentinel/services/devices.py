import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import reload
from noisesentinel.models.device import CALIBRATED, Iotdevice
from noisesentinel.models.user import STATION_AUTHORITY, User
from noisesentinel.schemas.device import DeviceRegister, DeviceUpdate
from noisesentinel.services.stations import get_officer_profile
from noisesentinel.utils.dates import to_naive_utc, utcnow
from noisesentinel.utils.exceptions import AppException, NotFoundError

logger = logging.getLogger(__name__)


def is_device_usable(device: Iotdevice) -> bool:
    return bool(device.is_active) and device.calibration_status == CALIBRATED


async def get_device(db: AsyncSession, device_id: int) -> Iotdevice:
    device = await db.get(Iotdevice, device_id)
    if device is None:
        raise NotFoundError("IoT device not found.")
    return device


async def get_device_by_name(db: AsyncSession, device_name: str) -> Iotdevice:
    device = await db.scalar(select(Iotdevice).where(func.lower(Iotdevice.device_name) == device_name.lower()))
    if device is None:
        raise NotFoundError("IoT device not found.")
    return device


async def _check_unique_name(db: AsyncSession, device_name: str, exclude_id: int | None = None) -> None:
    query = select(Iotdevice.id).where(func.lower(Iotdevice.device_name) == device_name.lower())
    if exclude_id is not None:
        query = query.where(Iotdevice.id != exclude_id)
    if await db.scalar(query) is not None:
        raise AppException(f"A device named '{device_name}' is already registered.")


async def register_device(db: AsyncSession, payload: DeviceRegister) -> Iotdevice:
    await _check_unique_name(db, payload.device_name)
    values = payload.model_dump()
    values["calibration_date"] = to_naive_utc(values["calibration_date"])
    device = Iotdevice(**values)
    db.add(device)
    await db.commit()
    logger.info("IoT device %s registered", device.device_name)
    return await reload(db, device)


async def list_devices(db: AsyncSession, available_only: bool = False) -> list[Iotdevice]:
    query = select(Iotdevice).order_by(Iotdevice.device_name)
    if available_only:
        query = query.where(
            Iotdevice.is_active.is_(True),
            Iotdevice.calibration_status == CALIBRATED,
            Iotdevice.paired_officer_id.is_(None),
        )
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_device(db: AsyncSession, device_id: int, payload: DeviceUpdate) -> Iotdevice:
    device = await get_device(db, device_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "device_name" in changes:
        await _check_unique_name(db, changes["device_name"], exclude_id=device.id)
    if "calibration_date" in changes:
        changes["calibration_date"] = to_naive_utc(changes["calibration_date"])
    for field, value in changes.items():
        setattr(device, field, value)
    await db.commit()
    return await reload(db, device)


async def pair_device(db: AsyncSession, user: User, device_id: int) -> Iotdevice:
    officer = await get_officer_profile(db, user)
    device = await get_device(db, device_id)
    if not device.is_active:
        raise AppException("Device is inactive and cannot be paired.")
    if device.calibration_status != CALIBRATED:
        raise AppException("Device is not calibrated and cannot be paired.")
    if device.paired_officer_id == officer.id:
        raise AppException("Device is already paired with you.")
    if device.paired_officer_id is not None:
        raise AppException("Device is already paired with another officer.")

    device.paired_officer_id = officer.id
    device.pairing_datetime = utcnow()
    await db.commit()
    logger.info("IoT device %s paired with officer %s", device.device_name, officer.badge_number)
    return await reload(db, device)


async def unpair_device(db: AsyncSession, user: User, device_id: int) -> Iotdevice:
    device = await get_device(db, device_id)
    if device.paired_officer_id is None:
        raise AppException("Device is not paired.")
    if user.role.name != STATION_AUTHORITY:
        officer = await get_officer_profile(db, user)
        if device.paired_officer_id != officer.id:
            raise AppException("You can only unpair devices paired with you.", status_code=403)

    device.paired_officer_id = None
    device.pairing_datetime = None
    await db.commit()
    logger.info("IoT device %s unpaired", device.device_name)
    return await reload(db, device)
