from django.urls import path
from .views import EjecutarCicloView, HistorialNotificacionesView, RegisterDeviceTokenView

urlpatterns = [
    path("token/", RegisterDeviceTokenView.as_view(), name="register_device_token"),
    path("historial/", HistorialNotificacionesView.as_view(), name="historial_notificaciones"),
    path("ejecutar/", EjecutarCicloView.as_view(), name="ejecutar_ciclo_notificaciones"),
]
