"""
Larder Backend — ORM Models
============================

Importing this package registers every table with `Base.metadata`, which
`SqlRepository.create_schema()` relies on.
"""

from larder.models.calorie_entry import CalorieEntry
from larder.models.ingredient import Ingredient
from larder.models.shopping_item import ShoppingItem
from larder.models.user import User

__all__ = ["User", "Ingredient", "CalorieEntry", "ShoppingItem"]
