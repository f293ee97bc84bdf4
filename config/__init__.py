"""
Configuration module for RSVP sheet sync.
"""

from .settings import (
    gmail_config, sheets_config, notification_config, app_config, parser_config,
    GmailConfig, SheetsConfig, NotificationConfig, AppConfig, ParserConfig
)

__all__ = [
    'gmail_config', 'sheets_config', 'notification_config', 'app_config', 'parser_config',
    'GmailConfig', 'SheetsConfig', 'NotificationConfig', 'AppConfig', 'ParserConfig'
]
