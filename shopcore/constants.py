AMOUNT = "amount"
PERCENTAGE = "percentage"
DISCOUNT_TYPES = (AMOUNT, PERCENTAGE)

# оптовая надбавка: любая строка с количеством >= 10 даёт +5% всей корзине
BULK_QUANTITY = 10
BULK_BONUS = 0.05
MAX_DISCOUNT_RATE = 0.5

PERCENTAGE_COUPON_MIN_TOTAL = 10_000

STOCK_MAX = 9999
LOW_STOCK = 5
PERCENTAGE_MAX = 100
AMOUNT_MAX = 100_000

COUPON_CODE_PATTERN = r"^[A-Z0-9]{4,12}$"

DEFAULT_TIER_QUANTITY = 10
DEFAULT_TIER_RATE = 0.1

SOLD_OUT = "sold_out"
LOW_STOCK_STATUS = "low_stock"
IN_STOCK = "in_stock"
