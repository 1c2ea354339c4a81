"""Demo grants inserted on first startup so matching works out of the box."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import storage
from grantmatch.models import Grant

logger = logging.getLogger(__name__)

SEED_GRANTS = [
    {
        "title": "Kit Digital - Segmento I",
        "organismo": "Ministerio de Asuntos Económicos y Transformación Digital",
        "scope": "Nacional",
        "start_date": datetime(2024, 1, 1),
        "end_date": datetime(2025, 12, 31),
        "budget": 12000,
        "tags": ["Digitalizacion", "PYMES", "Web", "E-commerce"],
        "raw_text": (
            "Ayudas para la digitalización de pequeñas empresas, microempresas y personas"
            " en situación de autoempleo. Segmento I: Empresas de 10 a 49 empleados."
        ),
    },
    {
        "title": "Programa Neotec 2024",
        "organismo": "CDTI - Centro para el Desarrollo Tecnológico Industrial",
        "scope": "Nacional",
        "start_date": datetime(2024, 3, 1),
        "end_date": datetime(2024, 6, 30),
        "budget": 325000,
        "tags": ["Startups", "Deep Tech", "I+D", "Innovacion"],
        "raw_text": (
            "Subvenciones para la puesta en marcha de nuevos proyectos empresariales, que"
            " requieran el uso de tecnologías o conocimientos desarrollados a partir de la"
            " actividad investigadora y en los que la estrategia de negocio se base en el"
            " desarrollo de tecnología."
        ),
    },
    {
        "title": "Ayudas Industria 4.0",
        "organismo": "Consejería de Economía, Hacienda y Empresa",
        "scope": "Autonomico",
        "start_date": datetime(2024, 2, 15),
        "end_date": datetime(2024, 10, 30),
        "budget": 150000,
        "tags": ["Industrial", "Innovacion", "Robotica", "IoT"],
        "raw_text": (
            "Impulso a la transformación digital de la industria regional. Inversiones en"
            " activos materiales e inmateriales para la creación de un nuevo establecimiento,"
            " ampliación o modernización."
        ),
    },
    {
        "title": "Horizon Europe - EIC Accelerator",
        "organismo": "Comisión Europea",
        "scope": "Europeo",
        "start_date": datetime(2024, 1, 1),
        "end_date": datetime(2024, 12, 31),
        "budget": 2500000,
        "tags": ["Startups", "Scaleups", "Deep Tech", "Europe"],
        "raw_text": (
            "Funding for startups and SMEs to develop and scale up game-changing innovations."
            " Grant and equity financing available."
        ),
    },
    {
        "title": "Cheque Modernización Comercio",
        "organismo": "Comunidad de Madrid",
        "scope": "Autonomico",
        "start_date": datetime(2024, 4, 1),
        "end_date": datetime(2024, 9, 30),
        "budget": 30000,
        "tags": ["Comercio", "Retail", "Reformas", "Eficiencia Energetica"],
        "raw_text": (
            "Ayudas para la modernización de establecimientos comerciales y artesanos. Obras"
            " de reforma, adquisición de equipamiento y mejora de la eficiencia energética."
        ),
    },
]


async def seed_grants(session: AsyncSession) -> int:
    """Insert SEED_GRANTS when the grants table is empty. Returns rows inserted."""
    if await storage.count_rows(session, Grant) > 0:
        return 0

    logger.info("Seeding %d grants ...", len(SEED_GRANTS))
    for data in SEED_GRANTS:
        await storage.create_grant(session, dict(data))
    return len(SEED_GRANTS)
