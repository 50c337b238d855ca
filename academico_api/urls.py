from django.urls import path
from .views import (
    ElementoDetalleView, ElementosView,
    MateriaDetalleView, MateriasView,
    RecuperatorioDetalleView, RecuperatoriosView,
    SaberCompletadoView, SaberesView,
    ValidarCorreoView,
)

urlpatterns = [
    path("materias/", MateriasView.as_view(), name="materias"),
    path("materias/<int:materia_id>/", MateriaDetalleView.as_view(), name="materia_detalle"),
    path("elementos/", ElementosView.as_view(), name="elementos"),
    path("elementos/<int:elemento_id>/", ElementoDetalleView.as_view(), name="elemento_detalle"),
    path("saberes/", SaberesView.as_view(), name="saberes"),
    path("saberes/<int:saber_id>/completado/", SaberCompletadoView.as_view(), name="saber_completado"),
    path("recuperatorios/", RecuperatoriosView.as_view(), name="recuperatorios"),
    path("recuperatorios/<int:recuperatorio_id>/", RecuperatorioDetalleView.as_view(), name="recuperatorio_detalle"),
    path("validar-correo/", ValidarCorreoView.as_view(), name="validar_correo"),
]
