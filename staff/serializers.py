from rest_framework import serializers

from .models import StaffMember, WeeklyScheduleEntry


class WeeklyScheduleEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = WeeklyScheduleEntry
        fields = ["weekday", "is_closed", "start_minutes", "end_minutes"]


class StaffMemberSerializer(serializers.ModelSerializer):
    working_hours = WeeklyScheduleEntrySerializer(many=True, read_only=True)
    services = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = StaffMember
        fields = [
            "id", "name", "email", "phone", "birth_date", "bio",
            "avatar_url", "is_active", "services", "working_hours",
        ]
