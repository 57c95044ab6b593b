# apps/leads/serializers.py

from rest_framework import serializers

from apps.common.enums import ActivityType, LeadStatus

from .models import Lead


class LeadSerializer(serializers.ModelSerializer):
    """Full lead serializer with all fields."""

    class Meta:
        model = Lead
        fields = [
            "id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "status",
            "lead_score",
            "last_activity_at",
            "last_contacted_at",
            "notes",
            "manager_notes",
            "rep_notes",
            "tags",
            "assigned_to",
            "assigned_to_name",
            "sales_rep_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "last_activity_at",
            "last_contacted_at",
            "created_at",
            "updated_at",
        ]


class LeadListSerializer(serializers.ModelSerializer):
    """Lighter serializer for list views."""

    class Meta:
        model = Lead
        fields = [
            "id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "status",
            "lead_score",
            "tags",
            "assigned_to",
            "last_contacted_at",
            "created_at",
        ]


class LeadCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating leads manually."""

    status = serializers.ChoiceField(choices=LeadStatus.choices, default=LeadStatus.NEW)
    force = serializers.BooleanField(default=False, write_only=True)

    class Meta:
        model = Lead
        fields = [
            "first_name",
            "last_name",
            "email",
            "phone",
            "status",
            "lead_score",
            "notes",
            "tags",
            "assigned_to",
            "assigned_to_name",
            "sales_rep_name",
            "force",
        ]

    def validate(self, attrs):
        if not any(attrs.get(f) for f in ("email", "phone", "first_name", "last_name")):
            raise serializers.ValidationError("A lead needs a name, email or phone")
        return attrs


class DuplicateCheckSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)


class MergeSerializer(serializers.Serializer):
    master_id = serializers.IntegerField()
    duplicate_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class StatusChangeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=LeadStatus.choices)


class BulkStatusSerializer(serializers.Serializer):
    lead_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    status = serializers.ChoiceField(choices=LeadStatus.choices)


class ContactSerializer(serializers.Serializer):
    type = serializers.ChoiceField(
        choices=[(t, ActivityType(t).label) for t in ActivityType.contact_types()],
        default=ActivityType.CALL,
    )
    subject = serializers.CharField(required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
