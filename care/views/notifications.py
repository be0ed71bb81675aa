from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.serializers.shapes import notification_data
from care.services.notifications import list_notifications, mark_read
from care.services.pagination import page_params, paginate


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notifications(request):
    """Own notifications, newest first; ``unread=1`` keeps unread ones only."""
    unread_only = (request.query_params.get('unread') or '0') in ['1', 'true', 'True']
    page, limit = page_params(request.query_params)
    items, pagination = paginate(list_notifications(request.user, unread_only=unread_only), page, limit)
    data = [notification_data(n) for n in items]
    return Response({'success': True, 'count': len(data), 'pagination': pagination, 'data': data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_read(request, pk: int):
    n = mark_read(request.user, pk)
    if n is None:
        return Response({'success': False, 'message': 'Notification not found'}, status=404)
    return Response({'success': True, 'data': notification_data(n)})
