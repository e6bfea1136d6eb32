from .utils import (
    calculate_daily_points,
    calculate_number_of_votes,
    format_display_number,
    random_sleep,
    shorten_address,
    start_of_utc_day,
    truncate_string,
)
from .logger_trx import show_trx_log
from .load_config import ConfigLoader, load_config, load_wallets
