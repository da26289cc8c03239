"""Rutas de la API."""

from . import (
    admin_catalogs,
    alerts,
    auth,
    catalog,
    contacts,
    groups,
    invitations,
    keywords,
    locations,
    metrics,
    officials,
    profile,
    users,
)

__all__ = [
    "admin_catalogs",
    "alerts",
    "auth",
    "catalog",
    "contacts",
    "groups",
    "invitations",
    "keywords",
    "locations",
    "metrics",
    "officials",
    "profile",
    "users",
]
