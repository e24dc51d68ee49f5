# insights/serializers.py

from rest_framework import serializers

RESUME_MAX_BYTES = 5 * 1024 * 1024


class ChatSerializer(serializers.Serializer):
    question = serializers.CharField(min_length=5, max_length=2000)


class SmartAssignSerializer(serializers.Serializer):
    task_title = serializers.CharField(min_length=3, max_length=255)
    skill_required = serializers.CharField(min_length=2, max_length=100)


class ResumeUploadSerializer(serializers.Serializer):
    resume = serializers.FileField()

    def validate_resume(self, value):
        if not value.name.lower().endswith('.pdf'):
            raise serializers.ValidationError("Please upload a PDF file")
        if value.size > RESUME_MAX_BYTES:
            raise serializers.ValidationError("PDF must be 5MB or smaller")
        return value
