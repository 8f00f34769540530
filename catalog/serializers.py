from rest_framework import serializers

from .models import ServiceNode, ServiceTranslation


class ServiceTranslationSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceTranslation
        fields = ["locale", "name", "description"]


class ServiceNodeSerializer(serializers.ModelSerializer):
    translations = ServiceTranslationSerializer(many=True, read_only=True)

    class Meta:
        model = ServiceNode
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "kind",
            "parent",
            "duration_minutes",
            "price_cents",
            "cover",
            "is_active",
            "translations",
        ]
        read_only_fields = fields
