from .users import User
from .training import Training

__all__ = [
    'User',
    'Training',
]
