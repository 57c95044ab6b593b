# apps/lifecycle/views.py

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from .escalation import run_escalation_sweep
from .follow_ups import mark_overdue_tasks
from .rules import FOLLOW_UP_RULES
from .tasks import follow_up_automation


@api_view(["POST"])
@permission_classes([IsAdminUser])
def sweep(request):
    """
    Run the stale-lead sweep.

    ?async=1 queues the hourly automation task instead and returns its id.
    """
    if request.query_params.get("async"):
        result = follow_up_automation.delay()
        return Response(
            {"message": "Follow-up automation queued", "task_id": result.id},
            status=status.HTTP_202_ACCEPTED,
        )

    overdue = mark_overdue_tasks()
    result = run_escalation_sweep()
    return Response({
        "tasks_marked_overdue": overdue,
        "escalations_created": result.succeeded_count,
        **result.to_dict(),
    })


@api_view(["GET"])
def follow_up_rules(request):
    return Response([rule.to_dict() for rule in FOLLOW_UP_RULES])
