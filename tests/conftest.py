"""
Configuración compartida de tests.

- Usa una base SQLite temporal (DATABASE_URL se fija antes de importar la app)
- Recrea las tablas en cada test
- Reemplaza geocodificación, WhatsApp, identidad y storage con fakes
"""

import os
import tempfile
import uuid
from pathlib import Path

_tmp_dir = tempfile.mkdtemp(prefix="alerta-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_tmp_dir) / 'test.sqlite'}"
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-key")
os.environ.setdefault("TWILIO_ACCOUNT_SID", "ACtest")
os.environ.setdefault("TWILIO_AUTH_TOKEN", "test-token")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from alerta_core.db.database import Base, get_db_engine, get_db_session  # noqa: E402
from alerta_core.db import models  # noqa: E402,F401
from alerta_core.db.models import Commune, Gender, Person, Profile, Severity, UserType  # noqa: E402
from alerta_core.domain_models import GeocodeResult, UserKind  # noqa: E402
from alerta_core.geocoding import GeocodingError  # noqa: E402
from alerta_core.identity import DuplicateAccountError, InvalidCredentialsError  # noqa: E402
from alerta_core.notifications import NotificationError, WhatsAppNotifier  # noqa: E402
from alerta_core.storage import SupabaseImageStorage  # noqa: E402

from api.dependencies import (  # noqa: E402
    get_geocoder,
    get_identity_provider,
    get_image_storage,
    get_notifier,
)
from api.main import app  # noqa: E402


# =========================================================
# Fakes de servicios externos
# =========================================================

class FakeGeocoder:
    def __init__(self):
        self.result = GeocodeResult(comuna="Valparaíso", direccion="Av. Brasil 2950, Valparaíso, Chile")
        self.error = None
        self.calls = []

    def reverse(self, latitud, longitud):
        self.calls.append((latitud, longitud))
        if self.error:
            raise GeocodingError(self.error)
        return self.result


class FakeNotifier(WhatsAppNotifier):
    """Usa la lógica real de notify_all; solo reemplaza el envío HTTP."""

    def __init__(self):
        super().__init__(account_sid="ACtest", auth_token="test-token", country_code="+56")
        self.sent = []
        self.failing = set()

    def send(self, celular, body):
        if celular in self.failing:
            raise NotificationError(f"Twilio respondió HTTP 400 para {celular}")
        self.sent.append((celular, body))
        return f"SM{len(self.sent)}"


class FakeIdentity:
    def __init__(self):
        self.accounts = {}  # correo -> (uid, password)

    def create_account(self, correo, password):
        if correo in self.accounts:
            raise DuplicateAccountError("User already registered")
        uid = str(uuid.uuid4())
        self.accounts[correo] = (uid, password)
        return uid

    def sign_in(self, correo, password):
        account = self.accounts.get(correo)
        if not account or account[1] != password:
            raise InvalidCredentialsError("Invalid login credentials")
        return account[0]


class FakeBucket:
    def __init__(self, name, uploads):
        self.name = name
        self.uploads = uploads

    def upload(self, path, content, file_options=None):
        self.uploads[path] = content

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"


class FakeStorageApi:
    def __init__(self):
        self.uploads = {}

    def from_(self, bucket):
        return FakeBucket(bucket, self.uploads)


class FakeSupabase:
    def __init__(self):
        self.storage = FakeStorageApi()


class FakeImageStorage(SupabaseImageStorage):
    """Usa la lógica real de upload_image contra un cliente Supabase en memoria."""

    def __init__(self):
        super().__init__(url="https://supabase.test", service_key="service", bucket="imagenes", max_bytes=1024)
        self._client = FakeSupabase()

    @property
    def uploads(self):
        return self._client.storage.uploads


# =========================================================
# Fixtures
# =========================================================

@pytest.fixture(autouse=True)
def reset_db():
    """Base vacía para cada test."""
    engine = get_db_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def session():
    """Sesión de base de datos para preparar y verificar datos."""
    with get_db_session() as s:
        yield s


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def storage():
    return FakeImageStorage()


@pytest.fixture
def client(geocoder, notifier, identity, storage):
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_image_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def catalogs():
    """Tipos de usuario, una comuna, un género y dos gravedades."""
    with get_db_session() as s:
        for kind in UserKind:
            s.add(UserType(id_tipo_usuario=kind.type_id, descripcion=kind.description))
        comuna = Commune(nombre="Valparaíso", estado=True)
        genero = Gender(descripcion="Femenino", estado=True)
        baja = Severity(descripcion="Baja", estado=True)
        alta = Severity(descripcion="Alta", estado=True)
        s.add_all([comuna, genero, baja, alta])
        s.flush()
        return {
            "id_comuna": comuna.id_comuna,
            "id_genero": genero.id_genero,
            "id_gravedad_baja": baja.id_gravedad,
            "id_gravedad_alta": alta.id_gravedad,
        }


@pytest.fixture
def make_person():
    """Factory que inserta persona + perfil directamente en la base."""

    def _make(nombre="Ana", apellido="Rojas", numero_telefono=None, id_comuna=None,
              kind=UserKind.USUARIO, estado=True, rut=None):
        id_persona = str(uuid.uuid4())
        correo = f"{nombre.lower()}.{id_persona[:8]}@test.cl"
        with get_db_session() as s:
            s.add(Person(
                id_persona=id_persona,
                nombre=nombre,
                apellido=apellido,
                correo=correo,
                numero_telefono=numero_telefono,
                rut=rut,
                fecha_nacimiento="1990-01-01",
                direccion="Calle 1",
                id_comuna=id_comuna,
                id_genero=None,
            ))
            s.add(Profile(
                id_persona=id_persona,
                correo=correo,
                tipo_usuario=kind.type_id,
                estado=estado,
            ))
        return id_persona

    return _make
