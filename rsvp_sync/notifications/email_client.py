# notifications/email_client.py
import smtplib
from email.mime.text import MIMEText

from ..utils.interfaces import NotificationSink
from config.settings import NotificationConfig


class EmailClient(NotificationSink):
    def __init__(self, config: NotificationConfig):
        self.smtp_server = config.smtp_server
        self.smtp_port = config.smtp_port
        self.username = config.smtp_user
        self.password = config.smtp_password

    def send(self, to: str, subject: str, body: str):
        msg = MIMEText(body, "plain")
        msg["Subject"] = subject
        msg["From"] = self.username
        msg["To"] = to

        with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
            server.starttls()
            server.login(self.username, self.password)
            server.sendmail(self.username, [to], msg.as_string())
