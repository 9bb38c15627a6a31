from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.customer import Customer  # noqa: F401
from backend.app.models.ingredient import Ingredient  # noqa: F401
from backend.app.models.product import Product  # noqa: F401
from backend.app.models.product_ingredient import ProductIngredient  # noqa: F401
from backend.app.models.task_template import TaskTemplate  # noqa: F401
from backend.app.models.order import Order  # noqa: F401
from backend.app.models.order_item import OrderItem  # noqa: F401
from backend.app.models.task import Task  # noqa: F401
