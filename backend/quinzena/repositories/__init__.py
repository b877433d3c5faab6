from .base import FinancialRepository, RepositoryError
from .local_repository import LocalFinancialRepository
from .sql_repository import SqlFinancialRepository
from .selection import get_repository, select_repository

__all__ = [
    'FinancialRepository', 'RepositoryError',
    'LocalFinancialRepository', 'SqlFinancialRepository',
    'get_repository', 'select_repository',
]
