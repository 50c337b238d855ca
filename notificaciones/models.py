# notificaciones/models.py
import uuid
from django.db import models


class DeviceToken(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    usuario_id = models.UUIDField(db_index=True)
    fcm_token = models.TextField(unique=True)
    platform = models.CharField(max_length=20, default="android")
    updated_at = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "device_tokens"

    def __str__(self):
        return f"Token {self.platform}: {self.fcm_token[:20]}... - {self.usuario_id}"


class HistorialNotificacion(models.Model):
    """Una fila por (usuario, elemento, tipo, fecha) notificado.

    No hay restriccion de unicidad: la deduplicacion la hace el escaner
    de vencimientos antes de despachar.
    """

    VENCIDO = "vencido"
    POR_VENCER = "por_vencer"
    TIPOS = (
        (VENCIDO, "Vencido"),
        (POR_VENCER, "Por vencer"),
    )

    id = models.BigAutoField(primary_key=True)
    usuario_id = models.UUIDField(db_index=True)
    elemento_id = models.BigIntegerField(db_index=True)
    tipo = models.CharField(max_length=20, choices=TIPOS)
    titulo = models.CharField(max_length=150)
    mensaje = models.TextField()
    fecha = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "historial_notificaciones"
        indexes = [
            models.Index(fields=["usuario_id", "elemento_id", "tipo", "fecha"], name="historial_dedup_idx"),
        ]

    def __str__(self):
        return f"Notificación {self.tipo}: {self.titulo} - {self.usuario_id} - {self.fecha}"
