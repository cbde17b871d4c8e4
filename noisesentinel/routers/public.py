from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.database import get_db
from noisesentinel.schemas.public import ChallanSearchRequest, StatusOtpRequest, VerifyStatusOtpRequest
from noisesentinel.services import challans as challan_service
from noisesentinel.services import public_status as public_service
from noisesentinel.services.serializers import challan_to_dict
from noisesentinel.utils.response import success_response

router = APIRouter(prefix="/public", tags=["public"])


@router.post("/request-status-otp")
async def request_status_otp(payload: StatusOtpRequest, db: AsyncSession = Depends(get_db)):
    data = await public_service.request_status_otp(db, payload)
    return success_response(data=data, message=f"Verification code sent to {data['masked_email']}.")


@router.post("/verify-status-otp")
async def verify_status_otp(payload: VerifyStatusOtpRequest, db: AsyncSession = Depends(get_db)):
    data = await public_service.verify_status_otp(db, payload)
    return success_response(data=data, message="Verification successful.")


@router.get("/case-status")
async def get_case_status(
    x_access_token: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
):
    return success_response(data=await public_service.get_case_status(db, x_access_token))


@router.post("/challan-search")
async def search_challans(payload: ChallanSearchRequest, db: AsyncSession = Depends(get_db)):
    challans = await challan_service.search_by_plate_and_cnic(db, payload.vehicle_no, payload.cnic)
    return success_response(data=[challan_to_dict(c) for c in challans], message=f"Found {len(challans)} challan(s).")
