from shared.models import users
from .inventory import inventory_items, stock_transactions
from .rejects import reject_items, reject_logs
