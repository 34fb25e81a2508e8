from .db import db
from .audit_log import AuditLog
from .client import Client
from .booking import Booking, BookingStatus
from .trainer_block import TrainerBlock
