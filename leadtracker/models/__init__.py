from leadtracker.models.user import User
from leadtracker.models.lead import Lead

__all__ = ['User', 'Lead']
