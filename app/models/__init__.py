# package marker for app.models

# Import all models to ensure relationships are properly initialized
from app.models.user import User
from app.models.business import Business
from app.models.employees import Employee
from app.models.employee_shifts import EmployeeShift
from app.models.customers import Customer
from app.models.categories import Category
from app.models.items import Item
from app.models.orders import Order, OrderItem
from app.models.transactions import Transaction, TransactionItem

__all__ = [
    "User",
    "Business",
    "Employee",
    "EmployeeShift",
    "Customer",
    "Category",
    "Item",
    "Order",
    "OrderItem",
    "Transaction",
    "TransactionItem",
]
