"""Model module"""

from .model import Model
from .queries import DeleteQuery, SelectQuery

__all__ = [
    'DeleteQuery',
    'Model',
    'SelectQuery'
]
