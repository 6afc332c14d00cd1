from .date_utils import (
    get_default_business_day_convention,
    get_default_calendar,
    get_default_stub_convention,
    reset_defaults,
    set_default_business_day_convention,
    set_default_calendar,
    set_default_stub_convention,
    to_date,
)
