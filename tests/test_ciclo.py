import threading

import pytest

from notificaciones.ciclo import CicloNotificaciones
from notificaciones.despachador import DespachadorNotificaciones
from notificaciones.exceptions import ErrorAccesoDatos, ErrorEscrituraHistorial
from notificaciones.fcm import ResultadoEntrega
from notificaciones.models import HistorialNotificacion
from notificaciones.tokens import registrar_token, tokens_de
from notificaciones.vencimientos import ResultadoEscaneo

from .conftest import EnviadorFalso


def _ciclo(enviador):
    return CicloNotificaciones(despachador=DespachadorNotificaciones(enviador=enviador))


@pytest.mark.django_db
def test_elemento_vencido_ayer_se_notifica_una_vez_por_dia(crear_elemento, enviador, ahora):
    e = crear_elemento(dias=-1)
    registrar_token(e.materia.docente_id, "tok-a")
    ciclo = _ciclo(enviador)

    primero = ciclo.ejecutar(ahora)
    segundo = ciclo.ejecutar(ahora)

    assert primero.exito and primero.vencidos == 1 and primero.entregas == 1
    assert segundo.exito and segundo.vencidos == 0 and segundo.entregas == 0
    h = HistorialNotificacion.objects.get()
    assert (h.elemento_id, h.tipo) == (e.id, HistorialNotificacion.VENCIDO)
    assert len(enviador.enviados) == 1


@pytest.mark.django_db
def test_dos_tokens_uno_invalido(crear_elemento, ahora):
    e = crear_elemento(dias=2)
    uid = e.materia.docente_id
    registrar_token(uid, "tok-vivo")
    registrar_token(uid, "tok-muerto")
    enviador = EnviadorFalso({"tok-muerto": ResultadoEntrega.TOKEN_INVALIDO})

    resumen = _ciclo(enviador).ejecutar(ahora)

    assert resumen.por_vencer == 1
    assert resumen.entregas == 1
    assert resumen.tokens_eliminados == 1
    assert tokens_de(uid) == ["tok-vivo"]
    assert HistorialNotificacion.objects.filter(elemento_id=e.id, tipo=HistorialNotificacion.POR_VENCER).count() == 1


@pytest.mark.django_db
def test_elemento_completado_no_se_notifica(crear_elemento, enviador, ahora):
    e = crear_elemento(dias=3, completado=True)
    registrar_token(e.materia.docente_id, "tok-a")

    resumen = _ciclo(enviador).ejecutar(ahora)

    assert resumen.exito
    assert resumen.vencidos == resumen.por_vencer == 0
    assert enviador.enviados == []
    assert HistorialNotificacion.objects.count() == 0


@pytest.mark.django_db
def test_fallo_de_historial_no_detiene_los_demas_candidatos(monkeypatch, crear_elemento, enviador, ahora):
    primero = crear_elemento(dias=-2, descripcion="primero")
    segundo = crear_elemento(dias=-1, descripcion="segundo")

    from notificaciones import despachador as modulo

    original = modulo.registrar_notificacion

    def _falla_con_el_primero(**kwargs):
        if kwargs["elemento_id"] == primero.id:
            raise ErrorEscrituraHistorial("fallo")
        return original(**kwargs)

    monkeypatch.setattr(modulo, "registrar_notificacion", _falla_con_el_primero)

    resumen = _ciclo(enviador).ejecutar(ahora)

    assert resumen.exito
    assert resumen.historial_fallidos == 1
    assert list(HistorialNotificacion.objects.values_list("elemento_id", flat=True)) == [segundo.id]

    # sin registro, el siguiente ciclo lo vuelve a notificar
    monkeypatch.setattr(modulo, "registrar_notificacion", original)
    reintento = _ciclo(enviador).ejecutar(ahora)
    assert reintento.vencidos == 1


class EscanerFalso:
    def __init__(self, error=None):
        self.error = error
        self.llamadas = 0

    def escanear(self, ahora):
        self.llamadas += 1
        if self.error:
            raise self.error
        return ResultadoEscaneo()


def test_error_de_escaneo_omite_el_ciclo():
    escaner = EscanerFalso(ErrorAccesoDatos("sin conexion"))
    despachador = DespachadorNotificaciones(enviador=EnviadorFalso())

    resumen = CicloNotificaciones(escaner=escaner, despachador=despachador).ejecutar()

    assert not resumen.exito
    assert "sin conexion" in resumen.error


def test_error_inesperado_no_sale_del_ciclo():
    escaner = EscanerFalso(RuntimeError("bug"))

    resumen = CicloNotificaciones(escaner=escaner, despachador=DespachadorNotificaciones(enviador=EnviadorFalso())).ejecutar()

    assert not resumen.exito
    assert resumen.error == "bug"


def test_un_solo_ciclo_en_curso():
    escaner = EscanerFalso()
    ciclo = CicloNotificaciones(escaner=escaner, despachador=DespachadorNotificaciones(enviador=EnviadorFalso()))

    ciclo._en_curso.acquire()
    try:
        assert ciclo.en_curso
        resumen = ciclo.ejecutar()
    finally:
        ciclo._en_curso.release()

    assert not resumen.exito
    assert resumen.error == "ciclo en curso"
    assert escaner.llamadas == 0

    assert ciclo.ejecutar().exito
    assert not ciclo.en_curso


def test_disparos_concurrentes_se_serializan():
    entrar = threading.Event()
    soltar = threading.Event()

    class EscanerLento(EscanerFalso):
        def escanear(self, ahora):
            entrar.set()
            soltar.wait(5)
            return super().escanear(ahora)

    escaner = EscanerLento()
    ciclo = CicloNotificaciones(escaner=escaner, despachador=DespachadorNotificaciones(enviador=EnviadorFalso()))
    resultados = []
    hilo = threading.Thread(target=lambda: resultados.append(ciclo.ejecutar()))
    hilo.start()
    entrar.wait(5)

    segundo = ciclo.ejecutar()
    soltar.set()
    hilo.join(5)

    assert not segundo.exito
    assert resultados[0].exito
    assert escaner.llamadas == 1
