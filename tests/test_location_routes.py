"""
Tests de ubicación actual y selección de seguimiento.
"""

from sqlalchemy import select

from alerta_core.db.database import get_db_session
from alerta_core.db.helpers import apply_selection, resolve_selection_members, selection_kind
from alerta_core.db.models import CurrentLocation, Group, GroupMembership, LocationSelection
from alerta_core.domain_models import SelectionKind


def _group_with(owner, *members, estado=True):
    with get_db_session() as s:
        group = Group(nombre_grupo="Familia", color_hex="#FF0000", estado=estado, id_usuario=owner)
        s.add(group)
        s.flush()
        for id_usuario in (owner,) + members:
            s.add(GroupMembership(id_grupo=group.id_grupo, id_usuario=id_usuario))
        return group.id_grupo


def _set_location(client, id_usuario, latitud, longitud):
    return client.post("/api/actualizar-ubicacion", json={
        "id_usuario": id_usuario,
        "latitud": latitud,
        "longitud": longitud,
    })


# =========================================================
# Ubicación actual
# =========================================================

def test_update_current_location_upserts(client, make_person):
    uid = make_person()

    first = _set_location(client, uid, -33.0, -71.6)
    assert first.status_code == 200
    assert first.json()["message"] == "Ubicación creada exitosamente."

    second = _set_location(client, uid, -33.1, -71.7)
    assert second.json()["message"] == "Ubicación actualizada exitosamente."

    with get_db_session() as s:
        rows = s.execute(
            select(CurrentLocation).where(CurrentLocation.id_usuario == uid)
        ).scalars().all()
        assert len(rows) == 1
        assert rows[0].latitud == -33.1


def test_update_current_location_validation(client):
    assert _set_location(client, "u1", 200, 0).status_code == 400
    assert client.post("/api/actualizar-ubicacion", json={"latitud": 1, "longitud": 2}).status_code == 400


def test_list_current_location_filters(client, make_person):
    ana = make_person(nombre="Ana")
    pablo = make_person(nombre="Pablo", numero_telefono="955555555")
    sola = make_person(nombre="Sola")
    id_grupo = _group_with(ana, pablo)
    _set_location(client, ana, -33.0, -71.6)
    _set_location(client, pablo, -33.2, -71.5)

    single = client.get("/api/listar-ubicacion-actual", params={
        "id_persona": ana, "id_grupo": id_grupo, "id_persona_buscar": pablo,
    }).json()["miembros"]
    assert [u["id_usuario"] for u in single] == [pablo]
    assert single[0]["persona"]["numero_telefono"] == "955555555"
    assert single[0]["ubicacion"]["latitud"] == -33.2

    by_group = client.get("/api/listar-ubicacion-actual", params={
        "id_persona": sola, "id_grupo": id_grupo,
    }).json()["miembros"]
    assert sorted(u["id_usuario"] for u in by_group) == sorted([ana, pablo])

    circle = client.get("/api/listar-ubicacion-actual", params={"id_persona": pablo}).json()["miembros"]
    assert sorted(u["id_usuario"] for u in circle) == sorted([ana, pablo])

    alone = client.get("/api/listar-ubicacion-actual", params={"id_persona": sola}).json()["miembros"]
    assert alone == []


def test_list_current_location_without_position(client, make_person):
    uid = make_person()

    miembros = client.get("/api/listar-ubicacion-actual", params={
        "id_persona": uid, "id_persona_buscar": uid,
    }).json()["miembros"]

    assert miembros[0]["ubicacion"] is None
    assert miembros[0]["perfil"]["tipo_usuario"] == "usuario"


def test_list_current_location_skips_members_without_person(client, make_person):
    ana = make_person(nombre="Ana")
    id_grupo = _group_with(ana, "sin-persona")
    _set_location(client, "sin-persona", -33.0, -71.6)

    resp = client.get("/api/listar-ubicacion-actual", params={"id_persona": ana, "id_grupo": id_grupo})

    assert resp.status_code == 200
    assert "usuarios" not in resp.json()
    assert [m["id_usuario"] for m in resp.json()["miembros"]] == [ana]


def test_list_current_location_requires_person(client):
    resp = client.get("/api/listar-ubicacion-actual", params={"id_persona": ""})
    assert resp.status_code == 400


# =========================================================
# Selección de seguimiento
# =========================================================

def test_selection_validation(client, make_person):
    uid = make_person()

    bad_kind = client.post("/api/actualizar-ubicacion-seleccion", json={"id_persona": uid, "tipo": 4})
    assert bad_kind.status_code == 400

    no_group = client.post("/api/actualizar-ubicacion-seleccion", json={"id_persona": uid, "tipo": 2})
    assert no_group.status_code == 400
    assert "id_grupo" in no_group.json()["detail"]

    assert client.get("/api/obtener-ubicacion-seleccion", params={"id_persona": uid}).status_code == 404


def test_selection_person_defaults_to_self(client, make_person):
    uid = make_person(nombre="Ana")

    saved = client.post("/api/actualizar-ubicacion-seleccion", json={"id_persona": uid, "tipo": 1})
    assert saved.status_code == 200
    assert saved.json()["message"] == "Ubicación seleccionada creada exitosamente."
    assert saved.json()["seleccion"]["id_persona_buscar"] == uid

    resp = client.get("/api/obtener-ubicacion-seleccion", params={"id_persona": uid}).json()
    assert resp["tipo_actual"] == 1
    assert [m["nombre"] for m in resp["miembros"]] == ["Ana"]


def test_selection_group_and_all_exclude_requester(client, make_person):
    ana = make_person(nombre="Ana")
    pablo = make_person(nombre="Pablo")
    luis = make_person(nombre="Luis")
    familia = _group_with(ana, pablo)
    _group_with(ana, luis)

    client.post("/api/actualizar-ubicacion-seleccion", json={"id_persona": ana, "tipo": 2, "id_grupo": familia})
    by_group = client.get("/api/obtener-ubicacion-seleccion", params={"id_persona": ana}).json()
    assert by_group["tipo_actual"] == 2
    assert [m["id_persona"] for m in by_group["miembros"]] == [pablo]

    updated = client.post("/api/actualizar-ubicacion-seleccion", json={"id_persona": ana, "tipo": 3})
    assert updated.json()["message"] == "Ubicación seleccionada actualizada exitosamente."
    assert updated.json()["seleccion"]["id_grupo"] is None
    everyone = client.get("/api/obtener-ubicacion-seleccion", params={"id_persona": ana}).json()
    assert everyone["tipo_actual"] == 3
    assert sorted(m["nombre"] for m in everyone["miembros"]) == ["Luis", "Pablo"]


def test_selection_without_active_mode(client, make_person):
    uid = make_person()
    with get_db_session() as s:
        s.add(LocationSelection(id_persona=uid))

    resp = client.get("/api/obtener-ubicacion-seleccion", params={"id_persona": uid}).json()

    assert resp["tipo_actual"] is None
    assert resp["miembros"] == []


def test_apply_selection_clears_other_modes():
    selection = LocationSelection(id_persona="u1")

    apply_selection(selection, SelectionKind.GRUPO, id_grupo="g1")
    assert (selection.persona_buscar, selection.grupo_buscar, selection.todos) == (False, True, False)
    assert selection.id_grupo == "g1"

    apply_selection(selection, SelectionKind.PERSONA, id_persona_buscar="u2")
    assert selection_kind(selection) == SelectionKind.PERSONA
    assert selection.id_grupo is None
    assert selection.id_persona_buscar == "u2"


def test_resolve_selection_ignores_inactive_groups(session, make_person):
    ana = make_person()
    pablo = make_person(nombre="Pablo")
    _group_with(ana, pablo, estado=False)

    selection = LocationSelection(id_persona=ana, todos=True)

    assert resolve_selection_members(session, selection) == []
