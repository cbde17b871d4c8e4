from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from noisesentinel.models.court import Courttype
from noisesentinel.models.user import ALL_ROLES, Role
from noisesentinel.models.violation import Violation


SEED_COURT_TYPES = ["Supreme Court", "High Court", "District Court", "Civil Court", "Sessions Court"]

SEED_VIOLATIONS = [
    {
        "violation_type": "Excessive Exhaust Noise",
        "description": "Vehicle exhaust noise above the permissible roadside limit.",
        "penalty_amount": Decimal("2000.00"),
        "is_cognizable": False,
    },
    {
        "violation_type": "Pressure Horn Usage",
        "description": "Use of pressure or multi-tone horns on public roads.",
        "penalty_amount": Decimal("3000.00"),
        "is_cognizable": False,
    },
    {
        "violation_type": "Modified Silencer",
        "description": "Silencer removed or modified to amplify engine noise.",
        "penalty_amount": Decimal("5000.00"),
        "is_cognizable": True,
    },
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(Role).limit(1))
    if result.scalars().first() is not None:
        return

    for name in ALL_ROLES:
        session.add(Role(name=name))

    for name in SEED_COURT_TYPES:
        session.add(Courttype(court_type_name=name))

    for v in SEED_VIOLATIONS:
        session.add(Violation(**v))

    await session.commit()
