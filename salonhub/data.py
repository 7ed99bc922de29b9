# salonhub/data.py

from datetime import time

from .config import SLOT_MINUTES

shop_settings = {
    "slot_minutes": SLOT_MINUTES,
    "default_shift_start": time(9, 0),
    "default_shift_end": time(17, 0),
}
