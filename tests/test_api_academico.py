import pytest

from db.models import ElementosCompetencia, Materias, Recuperatorios, SaberesMinimos

pytestmark = pytest.mark.django_db

BASE = "/api/academico"


def test_materias_del_docente(api_docente, materia, crear_docente):
    Materias.objects.create(nombre="Ajena", docente=crear_docente())

    r = api_docente.get(f"{BASE}/materias/")

    assert r.status_code == 200
    assert [m["nombre"] for m in r.data["data"]] == ["Programación I"]


def test_admin_consulta_materias_por_correo(api_admin, materia):
    r = api_admin.get(f"{BASE}/materias/", {"email": "ana.docente@instituto.edu.ar"})

    assert [m["id"] for m in r.data["data"]] == [materia.id]


def test_actualizar_materia_parcial(api_docente, materia):
    r = api_docente.patch(f"{BASE}/materias/{materia.id}/", {"vigente": False, "elem_evaluados": 2}, format="json")

    assert r.status_code == 200
    materia.refresh_from_db()
    assert materia.vigente is False
    assert materia.elem_evaluados == 2


def test_actualizar_materia_sin_campos(api_docente, materia):
    r = api_docente.patch(f"{BASE}/materias/{materia.id}/", {"otro": 1}, format="json")

    assert r.status_code == 400


def test_actualizar_materia_ajena_es_404(api_docente, crear_docente):
    ajena = Materias.objects.create(nombre="Ajena", docente=crear_docente())

    r = api_docente.patch(f"{BASE}/materias/{ajena.id}/", {"vigente": False}, format="json")

    assert r.status_code == 404


def test_elementos_ordenados_por_descripcion(api_docente, materia, crear_elemento):
    crear_elemento(descripcion="B - segundo")
    crear_elemento(descripcion="A - primero")

    r = api_docente.get(f"{BASE}/elementos/", {"materia": materia.id})

    assert [e["descripcion"] for e in r.data["data"]] == ["A - primero", "B - segundo"]


def test_elementos_sin_parametro(api_docente):
    assert api_docente.get(f"{BASE}/elementos/").status_code == 400


def test_completar_elemento(api_docente, crear_elemento):
    e = crear_elemento(dias=2)

    r = api_docente.patch(f"{BASE}/elementos/{e.id}/", {"completado": True, "comentario": "ok"}, format="json")

    assert r.status_code == 200
    e.refresh_from_db()
    assert e.completado is True
    assert e.comentario == "ok"


def test_elemento_inexistente(api_docente):
    r = api_docente.patch(f"{BASE}/elementos/999/", {"evaluado": True}, format="json")

    assert r.status_code == 404


def test_marcar_saber_recalcula_contadores(api_docente, crear_elemento):
    e = crear_elemento()
    s1 = SaberesMinimos.objects.create(elemento=e, descripcion="s1")
    SaberesMinimos.objects.create(elemento=e, descripcion="s2")

    r = api_docente.patch(f"{BASE}/saberes/{s1.id}/completado/", {"completado": True}, format="json")

    assert r.status_code == 200
    e.refresh_from_db()
    assert (e.saberes_totales, e.saberes_completados) == (2, 1)

    listado = api_docente.get(f"{BASE}/saberes/", {"elemento": e.id})
    assert [s["completado"] for s in listado.data["data"]] == [True, False]


def test_crear_recuperatorio_incrementa_rec_tomados(api_docente, materia, crear_elemento):
    e = crear_elemento()

    r = api_docente.post(
        f"{BASE}/recuperatorios/",
        {"elemento_competencia_id": e.id, "completado": False},
        format="json",
    )

    assert r.status_code == 201
    assert Recuperatorios.objects.filter(elemento=e).count() == 1
    materia.refresh_from_db()
    assert materia.rec_tomados == 1


def test_crear_recuperatorio_campos_requeridos(api_docente):
    r = api_docente.post(f"{BASE}/recuperatorios/", {"completado": True}, format="json")

    assert r.status_code == 400


def test_crear_recuperatorio_elemento_inexistente(api_docente):
    r = api_docente.post(
        f"{BASE}/recuperatorios/",
        {"elemento_competencia_id": 12345, "completado": True},
        format="json",
    )

    assert r.status_code == 400
    assert "no existe" in r.data["detail"]


def test_actualizar_y_eliminar_recuperatorio(api_docente, crear_elemento):
    rec = Recuperatorios.objects.create(elemento=crear_elemento(), completado=False)

    r = api_docente.patch(f"{BASE}/recuperatorios/{rec.id}/", {"completado": True}, format="json")
    assert r.status_code == 200
    rec.refresh_from_db()
    assert rec.completado is True

    listado = api_docente.get(f"{BASE}/recuperatorios/", {"elemento": rec.elemento_id})
    assert len(listado.data["data"]) == 1

    assert api_docente.delete(f"{BASE}/recuperatorios/{rec.id}/").status_code == 200
    assert api_docente.delete(f"{BASE}/recuperatorios/{rec.id}/").status_code == 404


def test_validar_correo(client, docente):
    r = client.get(f"{BASE}/validar-correo/", {"email": "ana.docente@instituto.edu.ar"})
    assert r.status_code == 200
    assert r.json() == {"exists": True}

    r = client.get(f"{BASE}/validar-correo/", {"email": "nadie@instituto.edu.ar"})
    assert r.json() == {"exists": False}

    assert client.get(f"{BASE}/validar-correo/", {"email": "mal-formado"}).status_code == 400


def test_completar_elemento_lo_saca_del_escaneo(api_docente, crear_elemento, ahora):
    from notificaciones.vencimientos import EscanerVencimientos

    e = crear_elemento(dias=-1)
    assert EscanerVencimientos().escanear(ahora).vencidos

    api_docente.patch(f"{BASE}/elementos/{e.id}/", {"completado": True}, format="json")

    assert ElementosCompetencia.objects.get(id=e.id).completado
    assert EscanerVencimientos().escanear(ahora).vencidos == []


def test_correo_con_mayusculas_se_encuentra(client, api_admin, crear_docente):
    docente = crear_docente("Ana.Perez@Instituto.edu.ar")
    materia = Materias.objects.create(nombre="Bases de Datos", docente=docente)

    for email in ("Ana.Perez@Instituto.edu.ar", "ana.perez@instituto.edu.ar"):
        assert client.get(f"{BASE}/validar-correo/", {"email": email}).json() == {"exists": True}

        r = api_admin.get(f"{BASE}/materias/", {"email": email})
        assert [m["id"] for m in r.data["data"]] == [materia.id]
