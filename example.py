import io
from datetime import date

from fx_imf import FxIMF

print(FxIMF.__version__)  # 0.1.0

FEED = (
    "SDRs per Currency unit (2)\n"
    "\n"
    "Currency\tJanuary 31, 2013\tJanuary 30, 2013\n"
    "Euro\t0.8791080000\t0.8789170000\n"
    "U.S. Dollar\t0.6500000000\t0.6510000000\n"
    "\n"
    "Currency units per SDR(3)\n"
    "\n"
    "Currency\tJanuary 31, 2013\tJanuary 30, 2013\n"
    "Euro\t1.137520\t1.137760\n"
    "U.S. Dollar\t1.538460\t1.536100\n"
)

# Start with the cached report; a feed supplier calls on_new_data() for updates
fx = FxIMF(io.StringIO(FEED))

# SDR -> EUR on a given day
print(fx.get_rate("SDR", "EUR", date(2013, 1, 30)))

# EUR -> USD is chained through the SDR
rate = fx.get_rate("EUR", "USD", date(2013, 1, 31))
print(rate.factor, rate.legs)

# Convert an amount
print(fx.convert("250", "EUR", "USD", date(2013, 1, 31)))

# Latest SDR snapshot
print(fx.rate())
# => {'rate_date': date(2013, 1, 31), 'base_currency': 'SDR', 'source': 'IMF', ...}

# Daily SDR history
print(fx.history(date(2013, 1, 1), date(2013, 1, 31), frequency="daily"))

# Everything as a DataFrame
print(fx.to_frame().head())
