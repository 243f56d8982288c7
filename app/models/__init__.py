from .currency import Currency
from .exchange_rate import ExchangeRate, DollarReference
from .fetch_log import FetchLog
