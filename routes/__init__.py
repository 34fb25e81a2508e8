from .health import health_bp
from .clients import clients_bp
from .bookings import bookings_bp
from .blocks import blocks_bp
from .dashboard import dashboard_bp
from .calendar_feed import calendar_bp
from .data import data_bp
