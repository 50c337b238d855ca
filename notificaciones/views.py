from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from usuarios_api.permissions import EsAdmin, EsDocente, get_claim

from .historial import listar_historial
from .programador import get_programador
from .tokens import eliminar_token, registrar_token


class RegisterDeviceTokenView(APIView):
    permission_classes = [IsAuthenticated, EsDocente]

    def post(self, request):
        uid = get_claim(request, "uid")

        token = (request.data.get("fcm_token") or "").strip()
        platform = (request.data.get("platform") or "android").strip().lower()

        if not token:
            return Response({"detail": "fcm_token es obligatorio"}, status=400)

        obj = registrar_token(uid, token, platform)

        return Response({"detail": "Token guardado", "id": str(obj.id)}, status=200)

    def delete(self, request):
        uid = get_claim(request, "uid")

        token = (request.data.get("fcm_token") or "").strip()
        if not token:
            return Response({"detail": "fcm_token es obligatorio"}, status=400)

        if not eliminar_token(token, usuario_id=uid):
            return Response({"detail": "Token no encontrado"}, status=404)

        return Response({"detail": "Token eliminado"}, status=200)


class HistorialNotificacionesView(APIView):
    permission_classes = [IsAuthenticated, EsDocente]

    def get(self, request):
        uid = get_claim(request, "uid")

        items = []
        for h in listar_historial(uid):
            items.append({
                "id": h.id,
                "elemento_id": h.elemento_id,
                "tipo": h.tipo,
                "titulo": h.titulo,
                "mensaje": h.mensaje,
                "fecha": h.fecha.isoformat(),
                "created_at": h.created_at.isoformat() if h.created_at else None,
            })
        return Response({"count": len(items), "historial": items}, status=200)


class EjecutarCicloView(APIView):
    permission_classes = [IsAuthenticated, EsAdmin]

    def post(self, request):
        resumen = get_programador().ejecutar_ahora()
        status = 200 if resumen.exito else 503
        return Response({"success": resumen.exito, **resumen.to_dict()}, status=status)
