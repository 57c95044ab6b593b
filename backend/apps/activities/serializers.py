# apps/activities/serializers.py

from rest_framework import serializers

from .models import Activity


class ActivitySerializer(serializers.ModelSerializer):
    lead_name = serializers.CharField(source="lead.display_name", read_only=True)

    class Meta:
        model = Activity
        fields = [
            "id",
            "lead",
            "lead_name",
            "user",
            "type",
            "status",
            "priority",
            "subject",
            "description",
            "due_date",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
