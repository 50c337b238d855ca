from django.contrib import admin
from .models import ElementosCompetencia, Materias, Recuperatorios, SaberesMinimos, Usuarios
from notificaciones.models import DeviceToken, HistorialNotificacion
# Register your models here.

admin.site.register(Usuarios)
admin.site.register(Materias)
admin.site.register(ElementosCompetencia)
admin.site.register(SaberesMinimos)
admin.site.register(Recuperatorios)

admin.site.register(DeviceToken)
admin.site.register(HistorialNotificacion)
