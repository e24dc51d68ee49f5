# insights/services.py
"""
AI-assisted HR analyses.

``InsightService`` composes the OpenAI generator with the per-organization
``ResponseCache``. Organization-wide analyses are cached as JSON text; chat
and resume extraction are never cached since every input is unique.
"""

import io
import json
import logging
from typing import Any, Callable, Dict, List, Optional

import pdfplumber
from django.conf import settings
from django.db.models import Count, Q
from rest_framework.exceptions import ValidationError

from employees.models import Employee
from tasks.choices import TaskStatus
from tasks.models import Task
from .cache import ResponseCache, make_cache_key
from .exceptions import MalformedCachedPayloadError, MalformedResponseError
from .generator import ExternalAIGenerator

logger = logging.getLogger(__name__)

# Expected skills per job title; titles not listed use "Default"
ROLE_REQUIREMENTS: Dict[str, List[str]] = {
    "Engineer": ["JavaScript", "React", "Node.js", "Git", "SQL"],
    "Designer": ["Figma", "CSS", "UI/UX", "Prototyping"],
    "Manager": ["Communication", "Planning", "Leadership", "Reporting"],
    "Default": ["Communication", "Documentation"],
}

DEFAULT_TTL_HOURS = {
    "skill-gap": 24,
    "daily-insight": 24,
    "employee-skill-gap": 24,
    "smart-assign": 6,
}

TEAM_DATA_MAX_CHARS = 1500
RESUME_TEXT_MAX_CHARS = 3000
RESUME_MIN_TEXT_CHARS = 50
MAX_EXTRACTED_SKILLS = 20


def required_skills_for(role: str) -> List[str]:
    for title, skills in ROLE_REQUIREMENTS.items():
        if title.lower() == (role or "").strip().lower():
            return skills
    return ROLE_REQUIREMENTS["Default"]


def missing_skills_for(role: str, skills: List[str]) -> List[str]:
    have = {skill.strip().lower() for skill in skills or []}
    return [skill for skill in required_skills_for(role) if skill.lower() not in have]


def read_pdf_text(pdf_file) -> str:
    """Concatenated text of every page of an uploaded PDF."""
    data = pdf_file.read()
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            return "\n".join(page.extract_text() or "" for page in pdf.pages)
    except Exception as e:
        # pdfminer raises a variety of parser errors for damaged files
        logger.warning(f"Could not parse uploaded PDF: {e}")
        raise ValidationError(
            "Could not extract text from PDF. Please ensure the PDF contains readable text."
        ) from e


def _ttl_hours(kind: str) -> float:
    configured = getattr(settings, "AI_CACHE_TTL_HOURS", {}) or {}
    return configured.get(kind, DEFAULT_TTL_HOURS[kind])


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


class InsightService:
    """
    Args:
        generator: prompt -> text client (``ExternalAIGenerator``).
        cache: ``ResponseCache`` for the cached analyses.
    """

    def __init__(
        self,
        generator: Optional[ExternalAIGenerator] = None,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self.generator = generator or ExternalAIGenerator()
        self.cache = cache or ResponseCache()

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _cached_json(
        self,
        org_id,
        cache_key: str,
        kind: str,
        force_refresh: bool,
        build: Callable[[], Dict[str, Any]],
    ) -> Dict[str, Any]:
        content = self.cache.get_or_compute(
            org_id,
            cache_key,
            _ttl_hours(kind),
            force_refresh,
            lambda: json.dumps(build()),
        )
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedCachedPayloadError(cache_key) from e
        if not isinstance(payload, dict):
            raise MalformedCachedPayloadError(cache_key)
        return payload

    def _team_roster(self, organization) -> List[Dict[str, Any]]:
        employees = (
            Employee.objects.filter(organization=organization)
            .annotate(
                task_count=Count("tasks"),
                completed_count=Count("tasks", filter=Q(tasks__status=TaskStatus.COMPLETED)),
            )
            .order_by("name")
        )
        return [
            {
                "name": emp.name,
                "role": emp.role,
                "skills": emp.skills,
                "taskCount": emp.task_count,
                "completedTasks": emp.completed_count,
                "activeTasks": emp.task_count - emp.completed_count,
            }
            for emp in employees
        ]

    # -----------------------------------------------------------------------
    # Uncached
    # -----------------------------------------------------------------------

    def chat(self, organization, question: str) -> Dict[str, str]:
        team_json = json.dumps(self._team_roster(organization))[:TEAM_DATA_MAX_CHARS]
        prompt = (
            f"You are an HR intelligence assistant for {organization.name or 'this organization'}.\n\n"
            f"Here is the team data: {team_json}\n\n"
            f"Answer in 3-5 sentences: {question}"
        )
        return {"answer": self.generator.generate(prompt)}

    def extract_skills(self, pdf_file) -> Dict[str, Any]:
        text = read_pdf_text(pdf_file)
        if len(text.strip()) < RESUME_MIN_TEXT_CHARS:
            raise ValidationError(
                "Could not extract text from PDF. Please ensure the PDF contains readable text."
            )

        prompt = (
            "You are a skills extraction expert.\n"
            "Extract ALL technical and professional skills from this resume/CV text.\n"
            "Return ONLY a valid JSON object with this exact structure:\n"
            '{"skills": ["skill1", "skill2"], "name": "candidate full name or empty string", '
            '"role": "their most recent job title or empty string", '
            '"summary": "one sentence professional summary or empty string"}\n\n'
            "Rules:\n"
            '- Skills should be specific: "React.js" not "frontend"\n'
            "- Include both technical (tools, languages) and soft skills\n"
            f"- Maximum {MAX_EXTRACTED_SKILLS} skills\n"
            "- If a skill appears multiple times, include it only once\n\n"
            f"Resume text:\n{text[:RESUME_TEXT_MAX_CHARS]}"
        )
        parsed = self.generator.generate_json(prompt)

        skills: List[str] = []
        for skill in _string_list(parsed.get("skills")):
            if skill not in skills:
                skills.append(skill)

        return {
            "skills": skills[:MAX_EXTRACTED_SKILLS],
            "name": str(parsed.get("name") or ""),
            "role": str(parsed.get("role") or ""),
            "summary": str(parsed.get("summary") or ""),
        }

    # -----------------------------------------------------------------------
    # Cached per organization
    # -----------------------------------------------------------------------

    def skill_gap(self, organization, force_refresh: bool = False) -> Dict[str, Any]:
        def build() -> Dict[str, Any]:
            employee_data = [
                {
                    "name": emp.name,
                    "role": emp.role,
                    "currentSkills": emp.skills,
                    "requiredSkills": required_skills_for(emp.role),
                    "missingSkills": missing_skills_for(emp.role, emp.skills),
                }
                for emp in Employee.objects.filter(organization=organization).order_by("name")
            ]
            prompt = (
                "Return only valid JSON.\n\n"
                f"Analyze skill gaps for these employees: {json.dumps(employee_data)}\n\n"
                "Return in this exact format:\n"
                '{"gaps": [{"employeeName": "string", "role": "string", "missingSkills": ["string"]}], '
                '"orgRecommendation": "string"}'
            )
            parsed = self.generator.generate_json(prompt)
            if not isinstance(parsed.get("gaps"), list):
                raise MalformedResponseError("AI skill-gap response has no 'gaps' list")
            return {
                "gaps": [
                    {
                        "employeeName": str(gap.get("employeeName", "")),
                        "role": str(gap.get("role", "")),
                        "missingSkills": _string_list(gap.get("missingSkills")),
                    }
                    for gap in parsed["gaps"]
                    if isinstance(gap, dict)
                ],
                "orgRecommendation": str(parsed.get("orgRecommendation", "")),
            }

        return self._cached_json(
            organization.pk, make_cache_key("skill-gap"), "skill-gap", force_refresh, build
        )

    def daily_insight(self, organization, force_refresh: bool = False) -> Dict[str, str]:
        def build() -> Dict[str, str]:
            employee_count = Employee.objects.filter(organization=organization).count()
            tasks = Task.objects.filter(organization=organization)
            total_tasks = tasks.count()
            completed_tasks = tasks.filter(status=TaskStatus.COMPLETED).count()
            completion_rate = round(completed_tasks / total_tasks * 100) if total_tasks else 0

            top = (
                tasks.values("employee__name")
                .annotate(task_count=Count("id"))
                .order_by("-task_count", "employee__name")
                .first()
            )
            top_performer = top["employee__name"] if top else "None"

            prompt = (
                "Give one actionable HR insight in exactly 2 sentences for this organization:\n\n"
                f"Employee count: {employee_count}\n"
                f"Total tasks: {total_tasks}\n"
                f"Completion rate: {completion_rate}%\n"
                f"Top performer: {top_performer}\n\n"
                "Provide a practical, data-driven recommendation."
            )
            return {"insight": self.generator.generate(prompt)}

        return self._cached_json(
            organization.pk, make_cache_key("daily-insight"), "daily-insight", force_refresh, build
        )

    def smart_assign(
        self,
        organization,
        task_title: str,
        skill_required: str,
        force_refresh: bool = False,
    ) -> Dict[str, str]:
        """
        Recommend the best employee for a task. Cached per required skill, so
        two tasks needing the same skill share a recommendation for 6 hours.
        """
        def build() -> Dict[str, str]:
            roster = json.dumps(self._team_roster(organization))
            recommended = self.generator.generate(
                "Return only the employee name, no other text or explanation.\n\n"
                f'Task: "{task_title}"\n'
                f'Required skill: "{skill_required}"\n\n'
                f"Available employees: {roster}\n\n"
                "Who is the best person for this task? Return only their name."
            )
            reason = self.generator.generate(
                f"In one sentence, explain why {recommended} is best for task "
                f'"{task_title}" requiring "{skill_required}" given: {roster}'
            )
            return {"recommendedEmployee": recommended, "reason": reason}

        return self._cached_json(
            organization.pk,
            make_cache_key("smart-assign", skill_required),
            "smart-assign",
            force_refresh,
            build,
        )

    def employee_skill_gap(self, employee: Employee, force_refresh: bool = False) -> Dict[str, Any]:
        """Missing skills for the employee's role plus a 30-day learning plan."""
        missing = missing_skills_for(employee.role, employee.skills)

        def build() -> Dict[str, Any]:
            if not missing:
                learning_plan = []
            else:
                prompt = (
                    "Return only valid JSON.\n\n"
                    f"An employee with role {employee.role} has skills {json.dumps(employee.skills)} "
                    f"and is missing {json.dumps(missing)}.\n"
                    "Write a practical 30-day learning plan as 3 to 5 short steps.\n\n"
                    'Return in this exact format: {"learningPlan": ["string"]}'
                )
                parsed = self.generator.generate_json(prompt)
                learning_plan = _string_list(parsed.get("learningPlan"))
            return {
                "employeeName": employee.name,
                "role": employee.role,
                "missingSkills": missing,
                "learningPlan": learning_plan,
            }

        return self._cached_json(
            employee.organization_id,
            make_cache_key("employee-skill-gap", str(employee.pk)),
            "employee-skill-gap",
            force_refresh,
            build,
        )
