# zcatalog/ebike_demo.py
"""
A demo of a schemaless catalog: one e-bike and its constituent parts.

Bikes and their components live together in the ``component`` collection
and have very different properties: a motor has a voltage, a frame has a
material. Components can group other components, so the drivetrain parts sit
under a drivetrain document, which in turn sits under the full build.
"""
import logging
import sys
from typing import Optional, TextIO

from bson.objectid import ObjectId

from zcatalog.catalog import Catalog
from zcatalog.config import Settings, open_store
from zcatalog.references import CollectionKind
from zcatalog.renderer import dump_collection

logger = logging.getLogger(__name__)

MANUFACTURERS = ["Haibike", "Yamaha", "Shimano", "Fox", "Selle Royal", "FSA"]
BUILD_NAME = "Haibike SDURO AllMtn RC"
CURRENCY = "GBP"


def _price(value) -> dict:
    return {"value": value, "currency": CURRENCY}


def seed_ebike(catalog: Catalog) -> ObjectId:
    """Create the manufacturers, the parts and the full build; return the build's id."""
    for name in MANUFACTURERS:
        catalog.create_manufacturer(name)

    ids = [
        catalog.create_component("Battery 400Wh", {
            "watt_hours": 400,
            "list_price": _price(400),
        }),
        catalog.create_component("Motor", {
            "voltage": 36,
            "wattage": 250,
            "manufacturer": catalog.manufacturer_ref("yamaha"),
            "list_price": _price(300),
        }),
        catalog.create_component("Haibike SDURO frame", {
            "manufacturer": catalog.manufacturer_ref("haibike"),
            "material": "Aluminium",
            "size_inches": 27.5,
            "description": "6061, All MNT, 4-Link System, Yamaha-Interface, hydroforced tubes, 150mm",
        }),
    ]

    drivetrain_ids = [
        catalog.create_component("Haibike sDuro crank", {
            "material": "Aluminium",
            "list_price": _price(45),
        }),
        catalog.create_component("Front Derailleur", {
            "manufacturer": catalog.manufacturer_ref("shimano"),
            "gears": 2,
            "list_price": _price(40),
        }),
        catalog.create_component("Rear Derailleur", {
            "manufacturer": catalog.manufacturer_ref("shimano"),
            "line": "Deore XT",
            "model": "M 786 Shadow Plus",
            "gears": 10,
            "list_price": _price(50),
        }),
        catalog.create_component("Cassette", {
            "description": "Sram PG 1020 11-36 Teeth",
            "list_price": _price(60),
        }),
    ]
    ids.append(catalog.create_component("Haibike SDURO Drivetrain", {
        "speeds": 20,
        "components": catalog.component_refs(drivetrain_ids),
    }))

    return catalog.create_component(BUILD_NAME, {
        "full-build": True,
        "components": catalog.component_refs(ids),
    })


def run(catalog: Catalog, out: Optional[TextIO] = None) -> None:
    """Reset, seed and print the whole catalog."""
    out = out if out is not None else sys.stdout
    catalog.reset()
    build_id = seed_ebike(catalog)
    logger.info("Seeded build %s.", build_id)

    print("All components (including groups and bike builds):", file=out)
    dump_collection(catalog.store, CollectionKind.COMPONENTS, out=out)
    print("Manufacturers:", file=out)
    dump_collection(catalog.store, CollectionKind.MANUFACTURERS, out=out)
    print(f"Total list price of priced parts: {catalog.total_list_price()} {CURRENCY}", file=out)


def main(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(levelname)s - %(message)s")
    with open_store(settings) as store:
        run(Catalog(store))
