from .staff import StaffMember, STAFF_ROLES
from .catalog import Product, SERVICE_CATEGORIES
from .sales import Transaction, TransactionLine, PAYMENT_METHODS
from .attendance import AttendanceRecord, ClockToken

__all__ = [
    'StaffMember', 'STAFF_ROLES',
    'Product', 'SERVICE_CATEGORIES',
    'Transaction', 'TransactionLine', 'PAYMENT_METHODS',
    'AttendanceRecord', 'ClockToken',
]
