"""
Envío de alertas por WhatsApp usando la API REST de Twilio.

El envío a cada contacto es independiente: si un destinatario falla se
registra en el log y se continúa con los demás.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import requests

from .config import get_settings

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


class NotificationError(RuntimeError):
    """No se pudo entregar un mensaje al proveedor."""


def whatsapp_address(celular: str, country_code: str) -> str:
    """
    Normaliza un celular al formato "whatsapp:+<pais><numero>".

    >>> whatsapp_address("912345678", "+56")
    'whatsapp:+56912345678'
    >>> whatsapp_address("+56 9 1234 5678", "+56")
    'whatsapp:+56912345678'
    """
    number = "".join(ch for ch in celular if ch.isdigit() or ch == "+")
    if not number.startswith("+"):
        number = f"{country_code}{number}"
    return f"whatsapp:{number}"


class WhatsAppNotifier:
    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        country_code: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.account_sid = account_sid or settings.twilio_account_sid
        self.auth_token = auth_token or settings.twilio_auth_token
        self.from_number = from_number or settings.twilio_whatsapp_from
        self.country_code = country_code or settings.whatsapp_country_code
        self.timeout = timeout or settings.http_timeout_seconds

    def send(self, celular: str, body: str) -> str:
        """
        Envía un mensaje a un celular.

        Returns:
            SID del mensaje creado en Twilio

        Raises:
            NotificationError: Si faltan credenciales o Twilio rechaza el envío
        """
        if not self.account_sid or not self.auth_token:
            raise NotificationError("TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN no están configurados en el .env")

        to = whatsapp_address(celular, self.country_code)
        try:
            resp = requests.post(
                TWILIO_MESSAGES_URL.format(sid=self.account_sid),
                data={"From": self.from_number, "To": to, "Body": body},
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NotificationError(f"Error enviando WhatsApp a {to}: {e}") from e

        if not resp.ok:
            raise NotificationError(f"Twilio respondió HTTP {resp.status_code} para {to}")

        return resp.json().get("sid", "")

    def notify_all(self, celulares: Iterable[str], body: str) -> List[str]:
        """
        Envía el mismo mensaje a una lista de celulares.

        Returns:
            Celulares a los que se entregó el mensaje
        """
        delivered = []
        for celular in celulares:
            try:
                sid = self.send(celular, body)
            except NotificationError as e:
                logger.warning(f"⚠️  {e}")
                continue
            logger.info(f"📨 WhatsApp enviado a {celular} (sid={sid})")
            delivered.append(celular)
        return delivered
