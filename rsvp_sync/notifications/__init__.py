from .email_client import EmailClient
from .notifier import Notifier

__all__ = ['EmailClient', 'Notifier']
