import json

from channels.generic.websocket import AsyncWebsocketConsumer

from care.services.notifications import user_group


class NotificationsConsumer(AsyncWebsocketConsumer):
    """Pushes a user's new notifications as they are created.

    Anonymous connections are closed with 4001.  Events arrive from
    :func:`care.services.notifications.notify` as
    ``{"type": "notification.push", "payload": {...}}``.
    """

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            await self.close(code=4001)
            return
        self.group_name = user_group(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def notification_push(self, event):
        await self.send(json.dumps({"type": "notification", "data": event["payload"]}))
