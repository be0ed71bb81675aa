import pytest

from care.models import Notification
from care.services import notifications as notification_svc

pytestmark = pytest.mark.django_db


class _RecordingLayer:
    def __init__(self):
        self.sent = []

    async def group_send(self, group, message):
        self.sent.append((group, message))


def test_notify_pushes_after_commit(monkeypatch, patient, django_capture_on_commit_callbacks):
    layer = _RecordingLayer()
    monkeypatch.setattr(notification_svc, 'get_channel_layer', lambda: layer)

    with django_capture_on_commit_callbacks(execute=True):
        n = notification_svc.notify(patient, 'Hello', 'World', ntype='alert', related='booking:1')
        assert layer.sent == []

    assert layer.sent == [(f'user.{patient.id}', {
        'type': 'notification.push',
        'payload': {
            'id': n.id, 'title': 'Hello', 'message': 'World', 'type': 'alert',
            'relatedEntity': 'booking:1', 'isRead': False, 'createdAt': n.created_at.isoformat(),
        },
    })]


def test_push_failure_keeps_notification(monkeypatch, patient, django_capture_on_commit_callbacks):
    class _Broken:
        async def group_send(self, group, message):
            raise ConnectionError('redis down')

    monkeypatch.setattr(notification_svc, 'get_channel_layer', lambda: _Broken())
    with django_capture_on_commit_callbacks(execute=True):
        notification_svc.notify(patient, 'Hello', 'World')
    assert Notification.objects.filter(user=patient).count() == 1


def test_triage_notifies_patient_and_doctor(client_for, triage_user, doctor, patient, booking):
    r = client_for(triage_user).post(f'/api/triage/process/{booking.id}', {'doctorId': doctor.id}, format='json')
    related = f"appointment:{r.data['data']['appointment']['id']}"
    assert Notification.objects.filter(user=patient, type='appointment', related_entity=related).count() == 1
    assert Notification.objects.filter(user=doctor, type='appointment', related_entity=related).count() == 1


def test_list_and_mark_read(client_for, patient, other_patient):
    first = notification_svc.notify(patient, 'one', 'first')
    notification_svc.notify(patient, 'two', 'second')
    theirs = notification_svc.notify(other_patient, 'x', 'not yours')
    c = client_for(patient)

    r = c.get('/api/notifications')
    assert r.status_code == 200
    assert [n['title'] for n in r.data['data']] == ['two', 'one']

    r = c.post(f'/api/notifications/{first.id}/read')
    assert r.status_code == 200
    assert r.data['data']['isRead'] is True

    r = c.get('/api/notifications', {'unread': '1'})
    assert [n['title'] for n in r.data['data']] == ['two']

    r = c.post(f'/api/notifications/{theirs.id}/read')
    assert r.status_code == 404
    theirs.refresh_from_db()
    assert theirs.is_read is False
