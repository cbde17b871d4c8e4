from noisesentinel.models.user import Role, User
from noisesentinel.models.police import Policestation, Policeofficer
from noisesentinel.models.court import Courttype, Court, Judge
from noisesentinel.models.accused import Accused
from noisesentinel.models.vehicle import Vehicle
from noisesentinel.models.violation import Violation
from noisesentinel.models.device import Iotdevice
from noisesentinel.models.emission_report import EmissionReport
from noisesentinel.models.challan import Challan
from noisesentinel.models.fir import Fir
from noisesentinel.models.case import Case, Casestatement
from noisesentinel.models.public_status import PublicStatusOtp

__all__ = [
    "Role", "User", "Policestation", "Policeofficer", "Courttype", "Court", "Judge",
    "Accused", "Vehicle", "Violation", "Iotdevice", "EmissionReport", "Challan",
    "Fir", "Case", "Casestatement", "PublicStatusOtp",
]
