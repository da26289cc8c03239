"""
Tests de alertas: geocodificación, mensaje compuesto y aviso a contactos.
"""

from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.models import Alert, Contact, Location


def _add_contact(id_usuario, celular, nombres="Contacto"):
    with get_db_session() as s:
        s.add(Contact(
            nombres=nombres,
            apellidos="Prueba",
            celular=celular,
            email=f"{nombres.lower()}@test.cl",
            id_usuario=id_usuario,
        ))


def _alert_payload(id_usuario, id_gravedad, **overrides):
    payload = {
        "id_usuario": id_usuario,
        "latitud": -33.0458,
        "longitud": -71.6197,
        "id_gravedad": id_gravedad,
        "mensaje": "Me están siguiendo",
    }
    payload.update(overrides)
    return payload


def test_save_alert_persists_and_notifies_contacts(client, catalogs, make_person, notifier, geocoder):
    uid = make_person()
    _add_contact(uid, "911111111", "Madre")
    _add_contact(uid, "922222222", "Hermano")
    _add_contact(uid, None, "SinCelular")

    resp = client.post("/api/guardar-ubicacion", json=_alert_payload(uid, catalogs["id_gravedad_alta"]))

    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["notificados"] == 2
    assert geocoder.calls == [(-33.0458, -71.6197)]

    with get_db_session() as s:
        alert = s.get(Alert, data["id_alerta"])
        location = s.get(Location, data["id_ubicacion"])
        assert alert.comuna == "Valparaíso"
        assert alert.direccion == "Av. Brasil 2950, Valparaíso, Chile"
        assert alert.id_ubicacion == location.id_ubicacion
        assert location.latitud == -33.0458
        assert alert.mensaje.startswith("Me están siguiendo. Estimados, mi ubicación actual es Av. Brasil 2950")
        assert alert.mensaje.endswith("query=-33.0458,-71.6197")
        mensaje = alert.mensaje

    assert sorted(c for c, _ in notifier.sent) == ["911111111", "922222222"]
    assert all(body == mensaje for _, body in notifier.sent)


def test_save_alert_failed_recipient_does_not_cancel_alert(client, catalogs, make_person, notifier):
    uid = make_person()
    _add_contact(uid, "911111111", "Uno")
    _add_contact(uid, "922222222", "Dos")
    notifier.failing.add("911111111")

    resp = client.post("/api/guardar-ubicacion", json=_alert_payload(uid, catalogs["id_gravedad_baja"]))

    assert resp.status_code == 200
    assert resp.json()["notificados"] == 1
    with get_db_session() as s:
        assert s.get(Alert, resp.json()["id_alerta"]) is not None


def test_save_alert_geocoding_failure_persists_nothing(client, catalogs, make_person, geocoder, notifier):
    uid = make_person()
    _add_contact(uid, "911111111")
    geocoder.error = "OVER_QUERY_LIMIT"

    resp = client.post("/api/guardar-ubicacion", json=_alert_payload(uid, catalogs["id_gravedad_alta"]))

    assert resp.status_code == 502
    assert notifier.sent == []
    with get_db_session() as s:
        assert s.execute(select(Alert)).scalars().all() == []
        assert s.execute(select(Location)).scalars().all() == []


def test_save_alert_validation(client, catalogs, make_person):
    uid = make_person()

    missing = client.post("/api/guardar-ubicacion", json={"id_usuario": uid, "latitud": 1, "longitud": 2})
    assert missing.status_code == 400
    assert "id_gravedad" in missing.json()["detail"]

    out_of_range = client.post(
        "/api/guardar-ubicacion",
        json=_alert_payload(uid, catalogs["id_gravedad_alta"], latitud=123),
    )
    assert out_of_range.status_code == 400


def test_list_alerts_joins_location_and_severity(client, catalogs, make_person):
    uid = make_person()
    first = client.post("/api/guardar-ubicacion", json=_alert_payload(uid, catalogs["id_gravedad_alta"])).json()
    orphan = client.post("/api/guardar-ubicacion", json=_alert_payload(uid, "gravedad-borrada")).json()

    with get_db_session() as s:
        s.delete(s.get(Location, orphan["id_ubicacion"]))

    resp = client.get("/api/obtener-alertas")
    assert resp.status_code == 200
    alertas = {a["id_alerta"]: a for a in resp.json()["alertas"]}
    assert alertas[first["id_alerta"]]["gravedad"] == {
        "id_gravedad": catalogs["id_gravedad_alta"],
        "descripcion": "Alta",
    }
    assert alertas[first["id_alerta"]]["ubicacion"] == {"latitud": -33.0458, "longitud": -71.6197}
    assert alertas[orphan["id_alerta"]]["ubicacion"] == "Ubicación no encontrada"
    assert alertas[orphan["id_alerta"]]["gravedad"] == "Gravedad no encontrada"

    one = client.get("/api/obtener-alertas", params={"id_alerta": first["id_alerta"]})
    assert [a["id_alerta"] for a in one.json()["alertas"]] == [first["id_alerta"]]


def test_list_alerts_empty(client):
    resp = client.get("/api/obtener-alertas")
    assert resp.status_code == 200
    assert resp.json()["alertas"] == []


def test_user_alerts(client, catalogs, make_person):
    uid = make_person()
    other = make_person(nombre="Otro")
    client.post("/api/guardar-ubicacion", json=_alert_payload(uid, catalogs["id_gravedad_alta"]))
    client.post("/api/guardar-ubicacion", json=_alert_payload(other, catalogs["id_gravedad_alta"]))

    resp = client.get("/api/alertas-usuario", params={"id_usuario": uid})

    assert resp.status_code == 200
    assert [a["id_usuario"] for a in resp.json()["alertasUsuario"]] == [uid]

    empty = client.get("/api/alertas-usuario", params={"id_usuario": "nadie"})
    assert empty.json()["alertasUsuario"] == []
