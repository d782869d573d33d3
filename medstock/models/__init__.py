from medstock.models.product_models import Product
from medstock.models.movement_models import Movement
