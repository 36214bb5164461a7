from django.contrib.auth import get_user_model
from rest_framework import serializers

from permissions.roles import effective_capabilities_for

User = get_user_model()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for the dashboard.
    """

    capabilities = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "role",
            "capabilities",
        ]

    def get_capabilities(self, obj):
        return sorted(effective_capabilities_for(obj))
