# medstock/constants/movement_type.py

from enum import Enum


class MovementType(str, Enum):
    IN = "IN"
    OUT = "OUT"
