"""
Credentials serializers.
"""

from rest_framework import serializers

from credentials.models import GenerationEvent


class GenerateRequestSerializer(serializers.Serializer):
    service = serializers.CharField(max_length=64, allow_blank=True)


class GenerationEventSerializer(serializers.ModelSerializer):
    """A generation as shown to its owner; ``account`` is the parsed credential."""

    account = serializers.JSONField(source="credential", read_only=True)
    generated_at = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = GenerationEvent
        fields = ["id", "service", "account", "generated_at"]
        read_only_fields = ["id", "service"]


class UsageStatsSerializer(serializers.Serializer):
    total_generations = serializers.IntegerField()
    services = serializers.ListField(child=serializers.CharField())
    last_activity = serializers.DateTimeField(allow_null=True)
    recent_generations = GenerationEventSerializer(many=True)


class ServiceEntrySerializer(serializers.Serializer):
    """Documented shape of a catalog entry; extra catalog keys pass through."""

    name = serializers.CharField()
    stock = serializers.IntegerField()
