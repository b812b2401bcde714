"""
Merchant keyword table.

Each entry maps uppercase keywords found in bank descriptions to a category
(and optionally a subcategory). Entries are matched in list order, so an
earlier entry wins over a later one: "AMAZON PRIME" must stay above "AMAZON".
Trailing spaces in keywords ("DIA ", "BAR ") are deliberate word boundaries.
"""

from statement_import.models.transaction import MerchantMapping


MERCHANT_MAPPINGS: list[MerchantMapping] = [
    # Alimentación
    MerchantMapping(
        keywords=[
            "MERCADONA", "CARREFOUR", "LIDL", "ALDI", "DIA ", "AHORRAMAS",
            "CONSUM", "EROSKI", "SUPERCOR", "HIPERCOR",
        ],
        category="Alimentación",
    ),
    # Restauración
    MerchantMapping(
        keywords=[
            "RESTAURANTE", "BAR ", "CAFETERIA", "MC DONALD", "BURGER KING",
            "KFC", "STARBUCKS", "GLOVO", "JUST EAT", "UBER EATS",
        ],
        category="Comida y Bebida",
        sub_category="Restaurantes",
    ),
    # Transporte y combustible
    MerchantMapping(
        keywords=[
            "REPSOL", "CEPSA", "BP ", "SHELL", "GASOLINERA", "ESTACION SERV",
            "GALP", "PETROL", "UBER", "CABIFY", "RENFE", "METRO ",
        ],
        category="Transporte",
        sub_category="Gasolina",
    ),
    # Hogar y suministros
    MerchantMapping(
        keywords=[
            "IKEA", "LEROY MERLIN", "BAUHAUS", "CONFORAMA", "ZARA HOME",
            "H&M HOME", "ENDESA", "IBERDROLA", "NATURGY", "TELEFONICA",
            "MOVISTAR", "ORANGE", "VODAFONE",
        ],
        category="Vivienda",
        sub_category="Suministros",
    ),
    # Salud
    MerchantMapping(
        keywords=[
            "FARMACIA", "OPTICA", "DENTAL", "FISIO", "HOSPITAL", "CLINICA",
            "SANITAS", "ADESLAS", "MAPFRE SALUD",
        ],
        category="Salud",
    ),
    # Ocio y suscripciones
    MerchantMapping(
        keywords=[
            "NETFLIX", "SPOTIFY", "DISNEY PLUS", "AMAZON PRIME", "HBO ",
            "APPLE.COM/BILL", "GOOGLE *", "PLAYSTATION", "NINTENDO", "STEAM",
        ],
        category="Ocio",
        sub_category="Suscripciones",
    ),
    # Compras generales
    MerchantMapping(
        keywords=[
            "AMAZON", "EL CORTE INGLES", "ZARA", "H&M", "DECATHLON",
            "MEDIA MARKT", "WORTEN", "PC COMPONENTES",
        ],
        category="Compras",
    ),
    # Educación
    MerchantMapping(
        keywords=["COLEGIO", "UNIVERSIDAD", "CURSO", "ACADEMIA", "UDEMY", "COURSERA"],
        category="Educación",
    ),
]
