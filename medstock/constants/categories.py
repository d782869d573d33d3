# medstock/constants/categories.py

from enum import Enum


class ProductCategory(str, Enum):
    MEDICATIONS = "Medications"
    SURGICAL_MATERIALS = "Surgical Materials"
    PPE = "PPE"
    DRESSING_MATERIALS = "Dressing Materials"
    DISPOSABLES = "Disposables"
    EQUIPMENT = "Equipment"
