from rest_framework import generics, permissions
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from employees.services import get_current_employee
from organizations.principal import IsEmployee, IsOrganizationAdmin
from .serializers import ChatSerializer, ResumeUploadSerializer, SmartAssignSerializer
from .services import InsightService


def wants_refresh(request):
    return request.query_params.get('refresh', '').lower() == 'true'


class InsightAPIView(generics.GenericAPIView):
    """Base view: one InsightService per request, admin access."""
    permission_classes = [permissions.IsAuthenticated, IsOrganizationAdmin]

    def get_service(self):
        return InsightService()


class ChatView(InsightAPIView):
    """
    POST: Ask the HR assistant a question about the team. Never cached.
    """
    serializer_class = ChatSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().chat(request.user, serializer.validated_data['question'])
        return Response(result)

chat_view=ChatView.as_view()


class SkillGapView(InsightAPIView):
    """
    GET: Missing skills per employee and an organization-wide recommendation.
    Cached for 24 hours; ?refresh=true recomputes.
    """

    def get(self, request, *args, **kwargs):
        return Response(self.get_service().skill_gap(request.user, wants_refresh(request)))

skill_gap_view=SkillGapView.as_view()


class DailyInsightView(InsightAPIView):
    """
    GET: One actionable HR insight. Cached for 24 hours; ?refresh=true recomputes.
    """

    def get(self, request, *args, **kwargs):
        return Response(self.get_service().daily_insight(request.user, wants_refresh(request)))

daily_insight_view=DailyInsightView.as_view()


class SmartAssignView(InsightAPIView):
    """
    POST: Recommend the best employee for a task. Cached per skill for 6 hours.
    """
    serializer_class = SmartAssignSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().smart_assign(
            request.user,
            serializer.validated_data['task_title'],
            serializer.validated_data['skill_required'],
            wants_refresh(request),
        )
        return Response(result)

smart_assign_view=SmartAssignView.as_view()


class MySkillGapView(InsightAPIView):
    """
    GET: The calling employee's missing skills and learning plan.
    """
    permission_classes = [permissions.IsAuthenticated, IsEmployee]

    def get(self, request, *args, **kwargs):
        employee = get_current_employee(request)
        return Response(self.get_service().employee_skill_gap(employee, wants_refresh(request)))

my_skill_gap_view=MySkillGapView.as_view()


class ExtractSkillsView(InsightAPIView):
    """
    POST (multipart, field "resume"): Extract skills from a PDF resume.
    """
    serializer_class = ResumeUploadSerializer
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().extract_skills(serializer.validated_data['resume'])
        return Response(result)

extract_skills_view=ExtractSkillsView.as_view()
