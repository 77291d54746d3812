from rmp.infrastructure.db.models.meal import MealModel
from rmp.infrastructure.db.models.restaurant import Base, RestaurantMealModel, RestaurantModel
from rmp.infrastructure.db.models.user import UserModel

__all__ = ["Base", "MealModel", "RestaurantMealModel", "RestaurantModel", "UserModel"]
