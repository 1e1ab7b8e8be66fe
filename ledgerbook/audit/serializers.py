from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from accounts.serializers import UserBriefSerializer

from .models import AuditLogEntry


class AuditLogEntrySerializer(serializers.ModelSerializer):
    actor = UserBriefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = AuditLogEntry
        fields = [
            'id', 'action', 'actor', 'actor_role', 'target_model', 'target_id',
            'details', 'ip_address', 'user_agent', 'created_at',
        ]
        read_only_fields = fields


class AuditActionCountSerializer(serializers.Serializer):
    action = serializers.CharField()
    count = serializers.IntegerField()


class AuditTopUserSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    count = serializers.IntegerField()
    last_activity = serializers.DateTimeField()
    user = UserBriefSerializer(allow_null=True)


class AuditStatsSerializer(serializers.Serializer):
    total_actions = serializers.IntegerField()
    action_counts = AuditActionCountSerializer(many=True)
    top_users = AuditTopUserSerializer(many=True)


class AuditStatsQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'end_date': _('End date must be on or after start date.')})
        return attrs
