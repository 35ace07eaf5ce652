from .order import Order  # noqa: F401
from .order_event import OrderEvent  # noqa: F401
from .module import Module  # noqa: F401
