# insights/tests/test_api.py
"""
AI endpoint tests: routing, permissions, refresh flag and error envelope.
The OpenAI call is patched at ExternalAIGenerator.generate.
"""

from __future__ import annotations

from unittest.mock import patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from insights.exceptions import GenerationError
from insights.generator import ExternalAIGenerator
from insights.models import AICache
from workforce.tests.factories import admin_client, create_employee, create_organization, employee_client


class AIEndpointTest(APITestCase):

    def setUp(self) -> None:
        self.org = create_organization("Acme")
        self.alice = create_employee(self.org, "Alice", role="Engineer", skills=["Git"])
        self.admin = admin_client(self.org)

    @patch.object(ExternalAIGenerator, "generate", return_value="Hire a designer.")
    def test_chat(self, mock_generate) -> None:
        response = self.admin.post(reverse("ai-chat"), {"question": "What should we improve?"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {"success": True, "data": {"answer": "Hire a designer."}})

    def test_chat_question_too_short(self) -> None:
        response = self.admin.post(reverse("ai-chat"), {"question": "Hi"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("question", response.json()["details"])

    @patch.object(ExternalAIGenerator, "generate", return_value="Keep going.")
    def test_daily_insight_cached_until_refresh(self, mock_generate) -> None:
        url = reverse("ai-daily-insight")

        self.admin.get(url)
        self.admin.get(url)
        self.assertEqual(mock_generate.call_count, 1)

        response = self.admin.get(url, {"refresh": "true"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"insight": "Keep going."})
        self.assertEqual(mock_generate.call_count, 2)

    @patch.object(ExternalAIGenerator, "generate", return_value='{"gaps": [], "orgRecommendation": "ok"}')
    def test_skill_gap(self, mock_generate) -> None:
        response = self.admin.get(reverse("ai-skill-gap"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"gaps": [], "orgRecommendation": "ok"})
        self.assertTrue(mock_generate.call_args.kwargs["json_mode"])

    @patch.object(ExternalAIGenerator, "generate", side_effect=["Alice", "She knows Git."])
    def test_smart_assign(self, mock_generate) -> None:
        response = self.admin.post(
            reverse("ai-smart-assign"), {"task_title": "Fix CI", "skill_required": "Git"}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["recommendedEmployee"], "Alice")
        self.assertTrue(AICache.objects.filter(cache_key="smart-assign:git").exists())

    @patch.object(ExternalAIGenerator, "generate", return_value='{"learningPlan": ["Learn SQL"]}')
    def test_my_skill_gap_for_employee(self, mock_generate) -> None:
        response = employee_client(self.alice).get(reverse("ai-my-skill-gap"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["employeeName"], "Alice")
        self.assertEqual(response.data["learningPlan"], ["Learn SQL"])

    def test_my_skill_gap_requires_employee_token(self) -> None:
        response = self.admin.get(reverse("ai-my-skill-gap"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_employee_cannot_use_admin_analyses(self) -> None:
        response = employee_client(self.alice).get(reverse("ai-skill-gap"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @patch("insights.services.read_pdf_text", return_value="x" * 80)
    @patch.object(ExternalAIGenerator, "generate", return_value='{"skills": ["SQL"], "name": "Alice"}')
    def test_extract_skills(self, mock_generate, mock_read) -> None:
        resume = SimpleUploadedFile("resume.pdf", b"%PDF-1.4", content_type="application/pdf")

        response = self.admin.post(reverse("ai-extract-skills"), {"resume": resume}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["skills"], ["SQL"])

    def test_extract_skills_rejects_non_pdf(self) -> None:
        upload = SimpleUploadedFile("resume.txt", b"plain text", content_type="text/plain")

        response = self.admin.post(reverse("ai-extract-skills"), {"resume": upload}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"], "Please upload a PDF file")


class AIErrorMappingTest(APITestCase):

    def setUp(self) -> None:
        self.org = create_organization("Acme")
        self.admin = admin_client(self.org)

    @override_settings(OPENAI_API_KEY="")
    def test_unconfigured_provider_answers_503(self) -> None:
        response = self.admin.get(reverse("ai-daily-insight"))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(
            response.json(),
            {"success": False, "error": "AI service is not configured", "statusCode": 503},
        )

    @patch.object(ExternalAIGenerator, "generate", side_effect=GenerationError("API request timed out", "TIMEOUT"))
    def test_provider_failure_answers_502_and_caches_nothing(self, mock_generate) -> None:
        response = self.admin.get(reverse("ai-daily-insight"))

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.json()["error"], "API request timed out")
        self.assertFalse(AICache.objects.exists())

    @patch.object(ExternalAIGenerator, "generate", return_value="ignored")
    def test_corrupted_cache_answers_500(self, mock_generate) -> None:
        self.admin.get(reverse("ai-daily-insight"))
        AICache.objects.filter(cache_key="daily-insight").update(content="not json")

        response = self.admin.get(reverse("ai-daily-insight"))

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json()["statusCode"], 500)
