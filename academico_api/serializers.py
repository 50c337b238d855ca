from rest_framework import serializers
from db.models import ElementosCompetencia, Materias, Recuperatorios, SaberesMinimos


class MateriaSerializer(serializers.ModelSerializer):
    class Meta:
        model = Materias
        fields = ["id", "nombre", "docente_id", "rec_tomados", "elem_completados", "elem_evaluados", "vigente"]


class MateriaUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Materias
        fields = ["rec_tomados", "elem_completados", "elem_evaluados", "vigente"]
        extra_kwargs = {
            "rec_tomados": {"min_value": 0},
            "elem_completados": {"min_value": 0},
            "elem_evaluados": {"min_value": 0},
        }


class ElementoSerializer(serializers.ModelSerializer):
    class Meta:
        model = ElementosCompetencia
        fields = [
            "id", "materia_id", "descripcion", "fecha_limite", "completado", "evaluado",
            "comentario", "fecha_registro", "fecha_evaluado", "saberes_totales", "saberes_completados",
        ]


class ElementoUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ElementosCompetencia
        fields = [
            "evaluado", "comentario", "fecha_registro", "fecha_evaluado",
            "fecha_limite", "saberes_completados", "completado",
        ]
        extra_kwargs = {"saberes_completados": {"min_value": 0}}


class SaberSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaberesMinimos
        fields = ["id", "elemento_id", "descripcion", "completado"]


class SaberCompletadoSerializer(serializers.Serializer):
    completado = serializers.BooleanField()


class RecuperatorioSerializer(serializers.ModelSerializer):
    class Meta:
        model = Recuperatorios
        fields = ["id", "elemento_id", "completado", "fecha_evaluado", "created_at"]


class RecuperatorioCreateSerializer(serializers.Serializer):
    elemento_competencia_id = serializers.IntegerField()
    completado = serializers.BooleanField()
    fecha_evaluado = serializers.DateTimeField(required=False, allow_null=True)


class RecuperatorioUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Recuperatorios
        fields = ["completado", "fecha_evaluado"]
