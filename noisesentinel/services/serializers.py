"""Response shapes shared across routers.

Relationships read here are the many-to-one links loaded with
``lazy="selectin"``. Collections (``Challan.firs``, ``Fir.cases``) must be
loaded by the caller's query options before serializing.
"""
from decimal import Decimal

from noisesentinel.config import settings
from noisesentinel.models.challan import UNPAID
from noisesentinel.services.evidence import decompress_evidence
from noisesentinel.utils.dates import utcnow


def user_to_dict(user) -> dict:
    return {
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role.name,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "last_login_at": user.last_login_at,
    }


def station_to_dict(station) -> dict:
    return {
        "station_id": station.id,
        "station_name": station.station_name,
        "station_code": station.station_code,
        "location": station.location,
        "district": station.district,
        "province": station.province,
        "contact": station.contact,
    }


def officer_to_dict(officer) -> dict:
    return {
        "officer_id": officer.id,
        "user_id": officer.user_id,
        "full_name": officer.user.full_name,
        "username": officer.user.username,
        "email": officer.user.email,
        "station_id": officer.station_id,
        "station_name": officer.station.station_name if officer.station else None,
        "cnic": officer.cnic,
        "contact_no": officer.contact_no,
        "badge_number": officer.badge_number,
        "rank": officer.rank,
        "is_investigation_officer": officer.is_investigation_officer,
        "posting_date": officer.posting_date,
    }


def court_to_dict(court) -> dict:
    return {
        "court_id": court.id,
        "court_name": court.court_name,
        "court_type_id": court.court_type_id,
        "court_type_name": court.court_type.court_type_name,
        "location": court.location,
        "district": court.district,
        "province": court.province,
    }


def judge_to_dict(judge) -> dict:
    return {
        "judge_id": judge.id,
        "user_id": judge.user_id,
        "full_name": judge.user.full_name,
        "email": judge.user.email,
        "court_id": judge.court_id,
        "court_name": judge.court.court_name if judge.court else None,
        "cnic": judge.cnic,
        "contact_no": judge.contact_no,
        "rank": judge.rank,
        "service_status": judge.service_status,
    }


def accused_to_dict(accused) -> dict:
    return {
        "accused_id": accused.id,
        "full_name": accused.full_name,
        "cnic": accused.cnic,
        "city": accused.city,
        "province": accused.province,
        "address": accused.address,
        "contact": accused.contact,
        "email": accused.email,
    }


def vehicle_to_dict(vehicle) -> dict:
    return {
        "vehicle_id": vehicle.id,
        "plate_number": vehicle.plate_number,
        "make": vehicle.make,
        "color": vehicle.color,
        "chassis_no": vehicle.chassis_no,
        "engine_no": vehicle.engine_no,
        "reg_year": vehicle.reg_year,
        "owner_id": vehicle.owner_id,
        "owner_name": vehicle.owner.full_name if vehicle.owner else None,
        "owner_cnic": vehicle.owner.cnic if vehicle.owner else None,
    }


def violation_to_dict(violation) -> dict:
    return {
        "violation_id": violation.id,
        "violation_type": violation.violation_type,
        "description": violation.description,
        "penalty_amount": violation.penalty_amount,
        "section_of_law": violation.section_of_law,
        "is_cognizable": violation.is_cognizable,
        "created_at": violation.created_at,
    }


def device_to_dict(device) -> dict:
    officer = device.paired_officer
    return {
        "device_id": device.id,
        "device_name": device.device_name,
        "firmware_version": device.firmware_version,
        "calibration_date": device.calibration_date,
        "calibration_status": device.calibration_status,
        "calibration_certificate_no": device.calibration_certificate_no,
        "is_active": device.is_active,
        "paired_officer_id": device.paired_officer_id,
        "paired_officer_name": officer.user.full_name if officer else None,
        "paired_officer_badge": officer.badge_number if officer else None,
        "pairing_datetime": device.pairing_datetime,
    }


def legal_limit() -> Decimal:
    return Decimal(str(settings.legal_sound_limit_dba))


def emission_report_to_dict(report) -> dict:
    return {
        "emission_report_id": report.id,
        "device_id": report.device_id,
        "device_name": report.device.device_name,
        "co": report.co,
        "co2": report.co2,
        "hc": report.hc,
        "nox": report.nox,
        "sound_level_dba": report.sound_level_dba,
        "test_datetime": report.test_datetime,
        "ml_classification": report.ml_classification,
        "digital_signature_value": report.digital_signature_value,
        "is_violation": report.sound_level_dba > legal_limit(),
        "created_at": report.created_at,
    }


def is_challan_overdue(challan) -> bool:
    return challan.due_datetime < utcnow() and challan.status.lower() == UNPAID.lower()


def challan_to_dict(challan, include_evidence: bool = False) -> dict:
    officer = challan.officer
    report = challan.emission_report
    fir = challan.firs[0] if challan.firs else None
    data = {
        "challan_id": challan.id,
        "officer_id": challan.officer_id,
        "officer_name": officer.user.full_name,
        "officer_badge_number": officer.badge_number,
        "station_id": officer.station_id,
        "station_name": officer.station.station_name if officer.station else None,
        "accused_id": challan.accused_id,
        "accused_name": challan.accused.full_name,
        "accused_cnic": challan.accused.cnic,
        "vehicle_id": challan.vehicle_id,
        "vehicle_plate_number": challan.vehicle.plate_number,
        "vehicle_make": challan.vehicle.make,
        "violation_id": challan.violation_id,
        "violation_type": challan.violation.violation_type,
        "penalty_amount": challan.violation.penalty_amount,
        "is_cognizable": challan.violation.is_cognizable,
        "emission_report_id": challan.emission_report_id,
        "sound_level_dba": report.sound_level_dba if report else None,
        "issue_datetime": challan.issue_datetime,
        "due_datetime": challan.due_datetime,
        "status": challan.status,
        "bank_details": challan.bank_details,
        "digital_signature_value": challan.digital_signature_value,
        "is_overdue": is_challan_overdue(challan),
        "has_fir": fir is not None,
        "fir_id": fir.id if fir else None,
        "fir_no": fir.fir_no if fir else None,
    }
    if include_evidence:
        data["evidence_image"] = decompress_evidence(challan.evidence_path)
    return data


def fir_to_dict(fir) -> dict:
    challan = fir.challan
    case = fir.cases[0] if fir.cases else None
    return {
        "fir_id": fir.id,
        "fir_no": fir.fir_no,
        "station_id": fir.station_id,
        "station_name": fir.station.station_name,
        "challan_id": fir.challan_id,
        "date_filed": fir.date_filed,
        "fir_description": fir.fir_description,
        "fir_status": fir.fir_status,
        "informant_id": fir.informant_id,
        "informant_name": fir.informant.user.full_name if fir.informant else None,
        "investigation_report": fir.investigation_report,
        "accused_name": challan.accused.full_name,
        "accused_cnic": challan.accused.cnic,
        "vehicle_plate_number": challan.vehicle.plate_number,
        "violation_type": challan.violation.violation_type,
        "has_case": case is not None,
        "case_id": case.id if case else None,
        "case_no": case.case_no if case else None,
    }


def case_to_dict(case) -> dict:
    fir = case.fir
    challan = fir.challan
    judge = case.judge
    return {
        "case_id": case.id,
        "case_no": case.case_no,
        "case_type": case.case_type,
        "case_status": case.case_status,
        "hearing_date": case.hearing_date,
        "verdict": case.verdict,
        "created_at": case.created_at,
        "fir_id": case.fir_id,
        "fir_no": fir.fir_no,
        "challan_id": challan.id,
        "judge_id": case.judge_id,
        "judge_name": judge.user.full_name if judge else None,
        "court_id": judge.court_id if judge else None,
        "court_name": judge.court.court_name if judge and judge.court else None,
        "accused_name": challan.accused.full_name,
        "accused_cnic": challan.accused.cnic,
        "vehicle_plate_number": challan.vehicle.plate_number,
        "violation_type": challan.violation.violation_type,
    }


def statement_to_dict(statement) -> dict:
    return {
        "statement_id": statement.id,
        "case_id": statement.case_id,
        "case_no": statement.case.case_no,
        "statement_by": statement.statement_by,
        "statement_text": statement.statement_text,
        "statement_date": statement.statement_date,
    }
