# storefront/wiring.py
# Process-wide repository and service instances shared by the routers.
# Cart and order services must share one UserLocks so checkout and cart
# edits for the same user are serialized.
from pathlib import Path

from storefront.core.config import get_settings
from storefront.core.store import UserLocks
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.user_repo import UserRepository
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.invoice_service import InvoiceService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

settings = get_settings()

user_repo = UserRepository()
product_repo = ProductRepository()
cart_repo = CartRepository()
order_repo = OrderRepository()

user_locks = UserLocks()

auth_service = AuthService(user_repo)
user_service = UserService(user_repo)
notification_service = NotificationService()
product_service = ProductService(product_repo)
cart_service = CartService(cart_repo, product_repo, user_locks)
order_service = OrderService(order_repo, cart_service)
invoice_service = InvoiceService(order_service, Path(settings.INVOICE_DIR))
