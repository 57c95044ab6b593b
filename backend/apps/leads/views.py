# apps/leads/views.py

from django.utils import timezone
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.common.exceptions import DuplicateDetected, LeadNotFound, LeadValidationError
from apps.lifecycle.response_timer import classify

from .duplicates import check_for_duplicate_on_create, find_duplicates
from .merge import merge_duplicates
from .models import Lead
from .selectors import get_lead_stats, get_urgent_leads, search_leads
from .serializers import (
    BulkStatusSerializer,
    ContactSerializer,
    DuplicateCheckSerializer,
    LeadCreateSerializer,
    LeadListSerializer,
    LeadSerializer,
    MergeSerializer,
    StatusChangeSerializer,
)
from .services import bulk_change_status, change_lead_status, create_lead, record_contact


class LeadViewSet(viewsets.ModelViewSet):
    """
    API endpoints for leads.

    list:             GET    /api/v1/leads/
    create:           POST   /api/v1/leads/
    retrieve:         GET    /api/v1/leads/{id}/
    update:           PUT    /api/v1/leads/{id}/
    partial:          PATCH  /api/v1/leads/{id}/
    destroy:          DELETE /api/v1/leads/{id}/
    status:           POST   /api/v1/leads/{id}/status/
    contact:          POST   /api/v1/leads/{id}/contact/
    response-timer:   GET    /api/v1/leads/{id}/response-timer/
    duplicates:       GET    /api/v1/leads/duplicates/
    merge:            POST   /api/v1/leads/merge/
    check-duplicate:  POST   /api/v1/leads/check-duplicate/
    bulk-status:      POST   /api/v1/leads/bulk-status/
    urgent:           GET    /api/v1/leads/urgent/
    stats:            GET    /api/v1/leads/stats/
    """

    queryset = Lead.objects.all().order_by("-created_at")
    filter_backends = [filters.OrderingFilter]

    # Allow ordering by these fields
    ordering_fields = ["created_at", "updated_at", "lead_score", "last_activity_at"]
    ordering = ["-created_at"]

    def get_serializer_class(self):
        if self.action == "list":
            return LeadListSerializer
        if self.action == "create":
            return LeadCreateSerializer
        return LeadSerializer

    def get_queryset(self):
        """Apply filters from query params."""
        if self.action != "list":
            return super().get_queryset()

        params = self.request.query_params
        tag = params.get("tag")
        return search_leads(
            query=params.get("q"),
            status=params.get("status"),
            tags=[tag] if tag else None,
            assigned_to_id=params.get("assigned_to"),
            created_after=params.get("created_after"),
            created_before=params.get("created_before"),
        ).order_by("-created_at")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        force = data.pop("force", False)

        try:
            lead = create_lead(force=force, **data)
        except DuplicateDetected as e:
            return Response(
                {"error": str(e), "duplicate": e.check.to_dict()},
                status=status.HTTP_409_CONFLICT,
            )
        except LeadValidationError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(LeadSerializer(lead).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        lead = self.get_object()
        serializer = StatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            lead = change_lead_status(
                lead,
                serializer.validated_data["status"],
                changed_by=request.user,
            )
        except LeadValidationError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except LeadNotFound as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(LeadSerializer(lead).data)

    @action(detail=True, methods=["post"])
    def contact(self, request, pk=None):
        lead = self.get_object()
        serializer = ContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            activity = record_contact(
                lead,
                activity_type=serializer.validated_data["type"],
                user=request.user,
                subject=serializer.validated_data["subject"],
                description=serializer.validated_data["description"],
            )
        except LeadNotFound as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response({
            "activity_id": activity.id,
            "response_timer": classify(lead.created_at, lead.last_contacted_at).to_dict(),
        })

    @action(detail=True, methods=["get"], url_path="response-timer")
    def response_timer(self, request, pk=None):
        lead = self.get_object()
        return Response(classify(lead.created_at, lead.last_contacted_at).to_dict())

    @action(detail=False, methods=["get"])
    def duplicates(self, request):
        groups = find_duplicates()
        return Response({
            "count": len(groups),
            "groups": [group.to_dict() for group in groups],
        })

    @action(detail=False, methods=["post"])
    def merge(self, request):
        serializer = MergeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = merge_duplicates(
                serializer.validated_data["master_id"],
                serializer.validated_data["duplicate_ids"],
                merged_by=request.user,
            )
        except LeadValidationError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except LeadNotFound as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response({"success": result.ok, **result.to_dict()})

    @action(detail=False, methods=["post"], url_path="check-duplicate")
    def check_duplicate(self, request):
        serializer = DuplicateCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check = check_for_duplicate_on_create(**serializer.validated_data)
        return Response({"duplicate": check.to_dict() if check else None})

    @action(detail=False, methods=["post"], url_path="bulk-status")
    def bulk_status(self, request):
        serializer = BulkStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = bulk_change_status(
            serializer.validated_data["lead_ids"],
            serializer.validated_data["status"],
            changed_by=request.user,
        )
        return Response({"success": result.ok, **result.to_dict()})

    @action(detail=False, methods=["get"])
    def urgent(self, request):
        """Never-contacted leads waiting 10 minutes or more, oldest first."""
        now = timezone.now()
        leads = get_urgent_leads(now)[:100]
        return Response([
            {
                **LeadListSerializer(lead).data,
                "response_timer": classify(lead.created_at, lead.last_contacted_at, now).to_dict(),
            }
            for lead in leads
        ])

    @action(detail=False, methods=["get"])
    def stats(self, request):
        """Get lead statistics."""
        return Response(get_lead_stats())
