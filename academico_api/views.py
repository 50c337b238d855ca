from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated

from usuarios_api.permissions import EsDocente, get_claim

from . import services
from .serializers import (
    ElementoSerializer, ElementoUpdateSerializer,
    MateriaSerializer, MateriaUpdateSerializer,
    RecuperatorioCreateSerializer, RecuperatorioSerializer, RecuperatorioUpdateSerializer,
    SaberCompletadoSerializer, SaberSerializer,
)


def _docente_filtro(request):
    """uid del docente, o None si es admin (ve todo)."""
    if get_claim(request, "tipo") == "admin":
        return None
    return get_claim(request, "uid")


def _id_param(request, nombre):
    valor = request.query_params.get(nombre)
    try:
        return int(valor)
    except (TypeError, ValueError):
        return None


class DocenteAPIView(APIView):
    permission_classes = [IsAuthenticated, EsDocente]


class MateriasView(DocenteAPIView):

    def get(self, request):
        email = (request.query_params.get("email") or "").strip()

        if email and get_claim(request, "tipo") == "admin":
            qs = services.materias_por_correo(email)
        else:
            qs = services.materias_de_docente(get_claim(request, "uid"))

        return Response({"data": MateriaSerializer(qs, many=True).data}, status=200)


class MateriaDetalleView(DocenteAPIView):

    def patch(self, request, materia_id):
        ser = MateriaUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        if not ser.validated_data:
            return Response(
                {"detail": "Debe proporcionar al menos un campo para actualizar "
                           "(rec_tomados, elem_completados, elem_evaluados, vigente)"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        materia = services.actualizar_materia(materia_id, ser.validated_data, docente_id=_docente_filtro(request))
        if materia is None:
            return Response({"detail": "Materia no encontrada"}, status=404)

        return Response({"detail": "Materia actualizada correctamente", "data": MateriaSerializer(materia).data}, status=200)


class ElementosView(DocenteAPIView):

    def get(self, request):
        materia_id = _id_param(request, "materia")
        if materia_id is None:
            return Response({"detail": "Parámetro materia inválido"}, status=400)

        qs = services.elementos_de_materia(materia_id, docente_id=_docente_filtro(request))
        return Response({"data": ElementoSerializer(qs, many=True).data}, status=200)


class ElementoDetalleView(DocenteAPIView):

    def patch(self, request, elemento_id):
        ser = ElementoUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        if not ser.validated_data:
            return Response(
                {"detail": "Debe proporcionar al menos un campo para actualizar "
                           "(evaluado, comentario, fecha_registro, fecha_evaluado, fecha_limite, "
                           "saberes_completados, completado)"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        elemento = services.actualizar_elemento(elemento_id, ser.validated_data, docente_id=_docente_filtro(request))
        if elemento is None:
            return Response({"detail": "Elemento no encontrado"}, status=404)

        return Response({"detail": "Elemento actualizado correctamente", "data": ElementoSerializer(elemento).data}, status=200)


class SaberesView(DocenteAPIView):

    def get(self, request):
        elemento_id = _id_param(request, "elemento")
        if elemento_id is None:
            return Response({"detail": "Parámetro elemento inválido"}, status=400)

        qs = services.saberes_de_elemento(elemento_id, docente_id=_docente_filtro(request))
        return Response({"data": SaberSerializer(qs, many=True).data}, status=200)


class SaberCompletadoView(DocenteAPIView):

    def patch(self, request, saber_id):
        ser = SaberCompletadoSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        saber = services.marcar_saber(saber_id, ser.validated_data["completado"], docente_id=_docente_filtro(request))
        if saber is None:
            return Response({"detail": "Saber no encontrado"}, status=404)

        return Response({"detail": "Estado actualizado correctamente"}, status=200)


class RecuperatoriosView(DocenteAPIView):

    def get(self, request):
        elemento_id = _id_param(request, "elemento")
        if elemento_id is None:
            return Response({"detail": "Parámetro elemento inválido"}, status=400)

        qs = services.recuperatorios_de_elemento(elemento_id, docente_id=_docente_filtro(request))
        return Response({"data": RecuperatorioSerializer(qs, many=True).data}, status=200)

    def post(self, request):
        ser = RecuperatorioCreateSerializer(data=request.data)
        if not ser.is_valid():
            return Response(
                {"detail": "Los campos elemento_competencia_id y completado son requeridos", "errors": ser.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        v = ser.validated_data

        try:
            rec = services.crear_recuperatorio(
                v["elemento_competencia_id"],
                v["completado"],
                v.get("fecha_evaluado"),
                docente_id=_docente_filtro(request),
            )
        except services.ElementoNoExiste:
            return Response({"detail": "El elemento_competencia_id especificado no existe"}, status=400)

        return Response(
            {"detail": "Recuperatorio creado exitosamente", "data": RecuperatorioSerializer(rec).data},
            status=status.HTTP_201_CREATED,
        )


class RecuperatorioDetalleView(DocenteAPIView):

    def patch(self, request, recuperatorio_id):
        ser = RecuperatorioUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        if not ser.validated_data:
            return Response(
                {"detail": "Debe proporcionar al menos un campo para actualizar (completado, fecha_evaluado)"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        rec = services.actualizar_recuperatorio(recuperatorio_id, ser.validated_data, docente_id=_docente_filtro(request))
        if rec is None:
            return Response({"detail": "Recuperatorio no encontrado"}, status=404)

        return Response({"detail": "Recuperatorio actualizado correctamente"}, status=200)

    def delete(self, request, recuperatorio_id):
        if not services.eliminar_recuperatorio(recuperatorio_id, docente_id=_docente_filtro(request)):
            return Response({"detail": "Recuperatorio no encontrado"}, status=404)

        return Response({"detail": "Recuperatorio eliminado exitosamente"}, status=200)


class ValidarCorreoView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        email = (request.query_params.get("email") or "").strip()

        if not services.es_correo_valido(email):
            return Response({"detail": "Se requiere un correo electrónico válido"}, status=400)

        return Response({"exists": services.correo_registrado(email)}, status=200)
