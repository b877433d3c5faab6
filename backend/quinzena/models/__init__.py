from .auth import User, SessionToken, ROLE_ADMIN, ROLE_USER
from .financial import UserSettings, TimeEntryRecord, ExpenseRecord, AdvanceRecord

__all__ = [
    'User', 'SessionToken', 'ROLE_ADMIN', 'ROLE_USER',
    'UserSettings', 'TimeEntryRecord', 'ExpenseRecord', 'AdvanceRecord',
]
