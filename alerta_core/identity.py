"""
Cuentas de usuario en Supabase Auth.

Se usan dos clientes:
- uno con la service role key para crear cuentas (admin API)
- uno nuevo con la anon key por cada inicio de sesión, para no dejar
  la sesión del usuario guardada en el cliente compartido
"""

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, create_client

from .config import get_settings

logger = logging.getLogger(__name__)


class IdentityError(RuntimeError):
    """Error genérico del proveedor de identidad."""


class DuplicateAccountError(IdentityError):
    """Ya existe una cuenta con ese correo."""


class InvalidCredentialsError(IdentityError):
    """Correo o contraseña incorrectos."""


def _is_duplicate(message: str) -> bool:
    message = message.lower()
    return "already" in message or "exists" in message


class SupabaseIdentityProvider:
    def __init__(self, url: Optional[str] = None, service_key: Optional[str] = None, anon_key: Optional[str] = None):
        settings = get_settings()
        self.url = url or settings.supabase_url
        self.service_key = service_key or settings.supabase_service_role_key
        self.anon_key = anon_key or settings.supabase_anon_key or self.service_key
        self._admin: Optional[Client] = None

    def _admin_client(self) -> Client:
        if not self.url or not self.service_key:
            raise IdentityError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY no están configuradas en el .env")
        if self._admin is None:
            self._admin = create_client(self.url, self.service_key)
        return self._admin

    def create_account(self, correo: str, password: str) -> str:
        """
        Crea una cuenta confirmada y devuelve su uid.

        Raises:
            DuplicateAccountError: Si el correo ya está registrado
            IdentityError: Ante cualquier otro error de Supabase
        """
        client = self._admin_client()
        try:
            response = client.auth.admin.create_user({
                "email": correo,
                "password": password,
                "email_confirm": True,
            })
        except Exception as e:
            if _is_duplicate(str(e)):
                raise DuplicateAccountError(str(e)) from e
            raise IdentityError(f"Error creando cuenta: {e}") from e

        if not response.user:
            raise IdentityError("Supabase no devolvió el usuario creado")

        logger.info(f"👤 Cuenta creada en Supabase: {response.user.id}")
        return response.user.id

    def sign_in(self, correo: str, password: str) -> str:
        """
        Valida correo y contraseña, devuelve el uid de la cuenta.

        Raises:
            InvalidCredentialsError: Si las credenciales no son válidas
        """
        if not self.url or not self.anon_key:
            raise IdentityError("SUPABASE_URL / SUPABASE_ANON_KEY no están configuradas en el .env")

        client = create_client(self.url, self.anon_key)
        try:
            response = client.auth.sign_in_with_password({"email": correo, "password": password})
        except Exception as e:
            raise InvalidCredentialsError(f"Credenciales inválidas: {e}") from e

        if not response.user:
            raise InvalidCredentialsError("Credenciales inválidas")
        return response.user.id
