"""MySQL DDL for the plant journal tables.

One table per entity: plants, custom locations and one table per care-log
kind. Care logs reference plants with ON DELETE CASCADE so that removing a
plant removes its whole history.
"""

from ..helpers.care_kinds import CareKind
from .core import connect, cursor

__all__ = [
    "PLANTS_DDL",
    "CUSTOM_LOCATIONS_DDL",
    "care_log_ddl",
    "all_statements",
    "create_schema",
]

PLANTS_DDL = """
CREATE TABLE IF NOT EXISTS plants (
    id INT NOT NULL AUTO_INCREMENT,
    plant_number INT NOT NULL,
    name VARCHAR(100) NOT NULL,
    personal_name VARCHAR(100) NOT NULL,
    common_name VARCHAR(150) NOT NULL DEFAULT '',
    scientific_name VARCHAR(150) NULL,
    location VARCHAR(50) NOT NULL DEFAULT '',
    watering_frequency_days INT NOT NULL DEFAULT 7,
    feeding_frequency_days INT NOT NULL DEFAULT 14,
    last_watered DATETIME NULL,
    last_fed DATETIME NULL,
    next_check DATETIME NULL,
    notes TEXT NULL,
    image_url TEXT NULL,
    status VARCHAR(20) NOT NULL DEFAULT 'healthy',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    PRIMARY KEY (id),
    UNIQUE KEY uq_plants_plant_number (plant_number)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
"""

CUSTOM_LOCATIONS_DDL = """
CREATE TABLE IF NOT EXISTS custom_locations (
    id INT NOT NULL AUTO_INCREMENT,
    name VARCHAR(50) NOT NULL,
    created_at DATETIME NOT NULL,
    PRIMARY KEY (id),
    UNIQUE KEY uq_custom_locations_name (name)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
"""


def care_log_ddl(kind: CareKind) -> str:
    detail_columns = "".join(f"    {field} VARCHAR(100) NULL,\n" for field in kind.detail_fields)
    return (
        f"CREATE TABLE IF NOT EXISTS {kind.table} (\n"
        "    id INT NOT NULL AUTO_INCREMENT,\n"
        "    plant_id INT NOT NULL,\n"
        "    occurred_at DATETIME NOT NULL,\n"
        f"{detail_columns}"
        "    notes TEXT NULL,\n"
        "    created_at DATETIME NOT NULL,\n"
        "    PRIMARY KEY (id),\n"
        f"    KEY ix_{kind.table}_plant (plant_id, occurred_at),\n"
        f"    CONSTRAINT fk_{kind.table}_plant FOREIGN KEY (plant_id)\n"
        "        REFERENCES plants (id) ON DELETE CASCADE\n"
        ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
    )


def all_statements() -> list[str]:
    # Order matters due to FKs: plants first.
    return [PLANTS_DDL, CUSTOM_LOCATIONS_DDL] + [care_log_ddl(kind) for kind in CareKind]


def create_schema() -> None:
    with connect() as conn:
        with cursor(conn) as cur:
            for statement in all_statements():
                cur.execute(statement)
