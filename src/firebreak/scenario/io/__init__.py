from .loaders import (
    DEFAULT_CATALOGUE_PATH,
    CatalogueLoad,
    load_analysis_request,
    load_equipment_catalogue,
    parse_equipment_entries,
)

__all__ = [
    "DEFAULT_CATALOGUE_PATH",
    "CatalogueLoad",
    "load_analysis_request",
    "load_equipment_catalogue",
    "parse_equipment_entries",
]
