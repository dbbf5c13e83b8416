REGIONS = ["NOLA", "SOLA", "BRASIL", "MEXICO"]

REGION_CATEGORIES = {
    "NOLA": ["ENTERPRISE", "SMB", "MSSP"],
    "SOLA": ["ENTERPRISE", "SMB"],
    "BRASIL": ["ENTERPRISE", "SMB"],
    "MEXICO": ["ENTERPRISE", "SMB"],
}

# MEXICO subcategories are partner levels, not countries
MEXICO_LEVELS = {
    "ENTERPRISE": ["PLATINUM", "GOLD (2)"],
    "SMB": ["PLATINUM", "GOLD (2)", "SILVER & REGISTERED"],
}

# region -> country -> cities; "" holds cities of single-country regions
REGION_HIERARCHY = {
    "NOLA": {
        "COLOMBIA": ["Bogotá", "Medellín", "Cali", "Barranquilla", "Cartagena"],
        "CENTRO AMERICA": ["Guatemala", "San Salvador", "Tegucigalpa", "Managua", "San José", "Panamá"],
    },
    "SOLA": {
        "ARGENTINA": ["Buenos Aires", "Córdoba", "Rosario", "Mendoza", "La Plata"],
        "CHILE": ["Santiago", "Valparaíso", "Concepción", "La Serena", "Antofagasta"],
        "PERU": ["Lima", "Arequipa", "Cusco", "Trujillo"],
        "OTROS": [],
    },
    "BRASIL": {
        "": ["São Paulo", "Rio de Janeiro", "Brasília", "Salvador", "Fortaleza", "Belo Horizonte", "Curitiba", "Recife"],
    },
    "MEXICO": {
        "": ["Ciudad de México", "Guadalajara", "Monterrey", "Puebla", "Tijuana", "León", "Querétaro", "Mérida"],
    },
}

# (region, category, subcategory, name, monthly_goal_target)
DEFAULT_REGION_CONFIGS = [
    ("NOLA", "ENTERPRISE", "COLOMBIA", "NOLA ENTERPRISE COLOMBIA", 10),
    ("NOLA", "ENTERPRISE", "CENTRO AMÉRICA", "NOLA ENTERPRISE CENTRO AMÉRICA", 10),
    ("NOLA", "SMB", "COLOMBIA", "NOLA SMB COLOMBIA", 8),
    ("NOLA", "SMB", "CENTRO AMÉRICA", "NOLA SMB CENTRO AMÉRICA", 8),
    ("NOLA", "MSSP", None, "NOLA MSSP", 5),
    ("SOLA", "ENTERPRISE", None, "SOLA ENTERPRISE", 12),
    ("SOLA", "SMB", None, "SOLA SMB", 10),
    ("BRASIL", "ENTERPRISE", None, "BRASIL ENTERPRISE", 15),
    ("BRASIL", "SMB", None, "BRASIL SMB", 12),
    ("MEXICO", "ENTERPRISE", "PLATINUM", "MÉXICO ENTERPRISE PLATINUM", 20),
    ("MEXICO", "ENTERPRISE", "GOLD", "MÉXICO ENTERPRISE GOLD", 15),
    ("MEXICO", "SMB", "PLATINUM", "MÉXICO SMB PLATINUM", 12),
    ("MEXICO", "SMB", "GOLD", "MÉXICO SMB GOLD", 10),
    ("MEXICO", "SMB", "SILVER & REGISTERED", "MÉXICO SMB SILVER & REGISTERED", 8),
]


def get_region_catalog():
    return {
        "regions": REGIONS,
        "categories": REGION_CATEGORIES,
        "mexicoLevels": MEXICO_LEVELS,
        "hierarchy": REGION_HIERARCHY,
    }
