"""Rule-based results for every mode, produced without any network call.

``DeterministicFallback.evaluate`` never raises for a well-formed request and
always returns a model that satisfies the mode schema, so callers get the
same response shape whether or not a provider answered.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel

from careerpilot.ai.types import GenerationRequest
from careerpilot.features.skill_scoring import (
    LEVEL_MOTIVATION,
    RepositorySignal,
    build_justification,
    improvement_suggestions,
    score_categories,
    skill_level_for,
    strengths_for,
    top_skills_for,
    weak_categories,
)
from careerpilot.schemas import (
    CareerPathSet,
    CompanyRoadmap,
    FailureAnalysis,
    InterviewQuestionSet,
    ProjectComparison,
    ResumeReview,
    SkillEvaluation,
    WorkdaySimulation,
)

_QUESTION_BANK: dict[str, list[dict[str, str]]] = {
    "technical": [
        {
            "question": "Walk me through a recent {role} project you are proud of. What were the hardest technical decisions?",
            "answer": "Pick one project, state the goal, the constraints, and two decisions with their trade-offs. Close with the measurable result.",
            "difficulty": "Medium",
            "importance": "High",
        },
        {
            "question": "How would you find and fix a performance problem in production?",
            "answer": "Reproduce and measure first, then profile to find the hot path. Fix the biggest cost, verify with the same measurement, and add monitoring so it does not regress.",
            "difficulty": "Medium",
            "importance": "High",
        },
        {
            "question": "Explain the difference between a process and a thread.",
            "answer": "A process has its own address space; threads share the memory of their process. Threads are cheaper to create and switch but need synchronization around shared state.",
            "difficulty": "Easy",
            "importance": "Medium",
        },
        {
            "question": "How do you design a REST API that other teams will depend on?",
            "answer": "Model resources around the domain, use consistent status codes and error bodies, version the API, paginate collections, and document it with examples.",
            "difficulty": "Medium",
            "importance": "High",
        },
        {
            "question": "What does your testing strategy look like for a new feature?",
            "answer": "Unit tests for the logic, integration tests at the service boundaries, and a small number of end-to-end tests for the critical user path. Tests run in CI on every change.",
            "difficulty": "Easy",
            "importance": "Medium",
        },
    ],
    "behavioral": [
        {
            "question": "Tell me about a time you disagreed with a teammate. How did you resolve it?",
            "answer": "Use STAR: describe the situation and your task, the concrete steps you took to understand their view and find common ground, and the outcome for the team.",
            "difficulty": "Medium",
            "importance": "High",
        },
        {
            "question": "Describe a project that failed or missed its deadline. What did you learn?",
            "answer": "Own your part of the failure, explain what you changed afterwards, and show how the lesson helped on a later project.",
            "difficulty": "Medium",
            "importance": "High",
        },
        {
            "question": "Tell me about a time you had to learn something new quickly.",
            "answer": "Describe how you broke the topic down, which sources you used, how you validated your understanding, and what you delivered with it.",
            "difficulty": "Easy",
            "importance": "Medium",
        },
        {
            "question": "Why do you want to work as a {role}?",
            "answer": "Connect your past experience to the role, name the problems you enjoy solving, and explain what you want to grow into.",
            "difficulty": "Easy",
            "importance": "Medium",
        },
    ],
    "dsa": [
        {
            "question": "Given an array of integers and a target, return the indices of the two numbers that add up to the target.",
            "answer": "Scan once with a hash map from value to index. For each element check whether target minus the element is already in the map. O(n) time, O(n) space.",
            "difficulty": "Easy",
            "importance": "High",
        },
        {
            "question": "Find the length of the longest substring without repeating characters.",
            "answer": "Use a sliding window with a map of last-seen positions. Move the left edge past the previous occurrence when a character repeats. O(n) time, O(k) space.",
            "difficulty": "Medium",
            "importance": "High",
        },
        {
            "question": "Merge k sorted linked lists into one sorted list.",
            "answer": "Push the head of each list into a min-heap, repeatedly pop the smallest node and push its successor. O(n log k) time, O(k) space.",
            "difficulty": "Hard",
            "importance": "Medium",
        },
        {
            "question": "Detect whether a directed graph has a cycle.",
            "answer": "Run DFS with three colors (unvisited, in progress, done). Reaching an in-progress node means a cycle. Alternatively use Kahn's topological sort and check that every node was emitted. O(V + E).",
            "difficulty": "Medium",
            "importance": "Medium",
        },
    ],
}

_ROUNDS: dict[str, list[str]] = {
    "technical": ["Recruiter Screen", "Technical Phone Screen", "Technical Onsite", "Hiring Manager Interview"],
    "behavioral": ["Recruiter Screen", "Behavioral Interview", "Hiring Manager Interview"],
    "dsa": ["Online Assessment", "Coding Interview", "Coding Interview", "Hiring Manager Interview"],
    "mixed": ["Recruiter Screen", "Coding Interview", "System Design Interview", "Behavioral Interview"],
}

_TOPICS: dict[str, list[str]] = {
    "technical": ["Core language fundamentals", "System design basics", "Testing and debugging", "APIs and databases"],
    "behavioral": ["STAR method stories", "Conflict resolution", "Ownership and impact", "Learning from failure"],
    "dsa": ["Arrays and hashing", "Two pointers and sliding window", "Trees and graphs", "Dynamic programming"],
    "mixed": ["Data structures and algorithms", "System design basics", "STAR method stories", "Role fundamentals"],
}

_PREP_RESOURCES: list[dict[str, str]] = [
    {
        "title": "LeetCode Top Interview Questions",
        "url": "https://leetcode.com/problemset/top-interview-questions/",
        "type": "Practice Platform",
        "description": "Curated coding problems asked across top companies",
    },
    {
        "title": "NeetCode 150",
        "url": "https://neetcode.io/practice",
        "type": "Practice Platform",
        "description": "Pattern-based problem list with video solutions",
    },
    {
        "title": "System Design Primer",
        "url": "https://github.com/donnemartin/system-design-primer",
        "type": "Website",
        "description": "Reference for large-scale system design concepts",
    },
    {
        "title": "STAR Method Guide",
        "url": "https://www.indeed.com/career-advice/interviewing/how-to-use-the-star-method",
        "type": "Website",
        "description": "How to structure behavioral answers",
    },
    {
        "title": "Glassdoor Interview Experiences",
        "url": "https://www.glassdoor.com/Interview/",
        "type": "Website",
        "description": "Candidate-reported interview questions by company",
    },
]

_CAREER_TEMPLATES: dict[str, list[dict[str, Any]]] = {
    "data": [
        {
            "title": "Data Analyst",
            "description": "Turn business questions into queries, dashboards, and clear recommendations.",
            "required_skills": ["SQL", "Excel", "Python", "Data Visualization", "Statistics"],
        },
        {
            "title": "Data Scientist",
            "description": "Build and evaluate predictive models that drive product and business decisions.",
            "required_skills": ["Python", "Statistics", "Machine Learning", "SQL", "Pandas"],
        },
        {
            "title": "Data Engineer",
            "description": "Design the pipelines and warehouses that make data reliable and available.",
            "required_skills": ["SQL", "Python", "Spark", "Airflow", "Cloud Platforms"],
        },
    ],
    "frontend": [
        {
            "title": "Frontend Developer",
            "description": "Build accessible, responsive user interfaces for web applications.",
            "required_skills": ["JavaScript", "TypeScript", "React", "CSS", "Testing"],
        },
        {
            "title": "Full Stack Developer",
            "description": "Own features end to end, from the interface down to the API and database.",
            "required_skills": ["JavaScript", "React", "Node.js", "SQL", "REST APIs"],
        },
        {
            "title": "UI Engineer",
            "description": "Bridge design and engineering by building design systems and polished interactions.",
            "required_skills": ["CSS", "React", "Design Systems", "Accessibility", "Animation"],
        },
    ],
    "software": [
        {
            "title": "Software Engineer",
            "description": "Design, build, and maintain reliable software systems as part of a product team.",
            "required_skills": ["Data Structures", "Algorithms", "Git", "Testing", "System Design"],
        },
        {
            "title": "Backend Developer",
            "description": "Build the services, APIs, and data models that power applications.",
            "required_skills": ["Python", "SQL", "REST APIs", "Docker", "Cloud Platforms"],
        },
        {
            "title": "DevOps Engineer",
            "description": "Automate delivery and keep production systems observable and reliable.",
            "required_skills": ["Linux", "Docker", "Kubernetes", "CI/CD", "Cloud Platforms"],
        },
    ],
}

_CAREER_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("data", ("data", "analyst", "machine learning", "statistics", "pandas", "sql")),
    ("frontend", ("frontend", "front-end", "react", "css", "javascript")),
)

_ROLE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Data Scientist", ("machine learning", "data scientist", "pandas", "tensorflow", "scikit")),
    ("Data Analyst", ("data analyst", "tableau", "power bi", "excel", "dashboards")),
    ("Frontend Developer", ("frontend", "front-end", "react", "css", "javascript")),
    ("DevOps Engineer", ("devops", "kubernetes", "terraform", "ci/cd", "docker")),
    ("Software Engineer", ("software", "developer", "engineer", "python", "java")),
)

_ROLE_CONTENT_TIPS: dict[str, list[str]] = {
    "Data Scientist": [
        "Quantify model impact, for example accuracy gains or revenue influenced.",
        "Name the datasets, model types, and evaluation metrics you worked with.",
    ],
    "Data Analyst": [
        "Show the business decisions your analysis informed.",
        "List the BI tools and SQL dialects you use day to day.",
    ],
    "Frontend Developer": [
        "Link live projects or a portfolio so reviewers can see your UI work.",
        "Mention performance, accessibility, or conversion improvements you shipped.",
    ],
    "DevOps Engineer": [
        "Quantify reliability work such as uptime, deploy frequency, or recovery time.",
        "List the infrastructure and CI/CD tooling you operated.",
    ],
    "Software Engineer": [
        "Describe the scale of the systems you built, for example users or requests per second.",
        "Lead each bullet with a strong action verb and end with the measurable result.",
    ],
}

_GENERAL_CONTENT_TIPS = [
    "Add a short professional summary tailored to the target role.",
    "Replace duties with achievements and back them with numbers.",
]

_FOLLOW_UP_BASE = [
    "Are you willing to take paid certifications to accelerate your learning?",
    "Do you prefer remote work or are you open to on-site opportunities?",
    "What's your preferred learning style - self-paced or structured courses?",
]

_FOLLOW_UP_BY_FAMILY: dict[str, list[str]] = {
    "software": [
        "Do you prefer frontend, backend, or full-stack development?",
        "Are you interested in working at startups, big tech, or enterprises?",
    ],
    "data": [
        "Are you more interested in machine learning or statistical analysis?",
        "Do you want to focus on a specific domain like healthcare or finance?",
    ],
    "frontend": [
        "Are you interested in mobile development (React Native) as well?",
        "Do you prefer working on user interfaces or user experience?",
    ],
}

_INNOVATION_BANDS: tuple[tuple[int, str], ...] = (
    (9, "Innovative"),
    (7, "Advanced"),
    (4, "Intermediate"),
)

_FAILURE_RESOURCES: list[dict[str, str]] = [
    {"topic": "Resume optimization", "link": "https://www.coursera.org/learn/resume-writing"},
    {"topic": "Interview preparation", "link": "https://www.pramp.com/"},
    {"topic": "Technical skill building", "link": "https://leetcode.com/"},
]

_WEAK_OPENERS = ("responsible for", "worked on", "helped", "assisted", "duties included", "involved in")

_SECTION_WORDS = ("experience", "education", "skills", "projects", "summary", "certifications")
_ACTION_VERBS = ("built", "led", "designed", "developed", "improved", "reduced", "increased", "launched", "implemented")
_NUMBER_RE = re.compile(r"\d+%|\$\d|\b\d{2,}\b")


def _lower_blob(value: str) -> str:
    return " ".join(value.lower().split())


def _detect_role(text: str) -> str:
    blob = _lower_blob(text)
    for role, keywords in _ROLE_KEYWORDS:
        if any(keyword in blob for keyword in keywords):
            return role
    return "General"


def _clamp(value: int, low: int = 1, high: int = 10) -> int:
    return max(low, min(high, value))


def _json_context(request: GenerationRequest, key: str) -> dict[str, Any]:
    try:
        value = json.loads(request.context(key) or "{}")
    except ValueError:
        return {}
    return value if isinstance(value, dict) else {}


def _innovation_for(score: int) -> str:
    for floor, label in _INNOVATION_BANDS:
        if score >= floor:
            return label
    return "Basic"


def _project_profile(fallback_name: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Score one repository from its public metadata only."""
    name = str(data.get("name") or fallback_name or "project")
    description = str(data.get("description") or "").strip()
    languages = [str(item) for item in data.get("languages") or [] if str(item).strip()]
    if not languages and data.get("language"):
        languages = [str(data["language"])]
    topics = [str(item) for item in data.get("topics") or [] if str(item).strip()]
    homepage = data.get("homepage")
    size_kb = int(data.get("size_kb") or 0)
    popularity = int(data.get("stars") or 0) + int(data.get("forks") or 0)

    score = _clamp(
        2
        + min(len(languages), 4)
        + (1 if topics else 0)
        + (1 if homepage else 0)
        + (1 if size_kb > 1000 else 0)
        + (1 if popularity >= 5 else 0)
    )

    strengths = []
    if homepage:
        strengths.append("Deployed with a live demo link")
    if len(languages) > 1:
        strengths.append(f"Combines {len(languages)} languages")
    if len(description) > 20:
        strengths.append("Clear repository description")
    if topics:
        strengths.append("Tagged with topics for discoverability")
    weaknesses = []
    if not homepage:
        weaknesses.append("No live demo linked")
    if not description:
        weaknesses.append("No repository description")
    if not topics:
        weaknesses.append("No topics to help discovery")

    return {
        "name": name,
        "purpose": description or "Purpose analysis requires deeper code inspection",
        "uniqueness": "Uniqueness evaluation needs more detailed analysis",
        "tech_stack": languages or topics[:5],
        "complexity_score": score,
        "key_features": topics[:5] or ["Repository structure", "Basic functionality"],
        "strengths": strengths or ["Active development"],
        "weaknesses": weaknesses or ["Limited analysis available"],
        "innovation_level": _innovation_for(score),
        "market_relevance": "Requires deeper market analysis",
        "user_experience_quality": "Cannot assess without deeper code analysis",
    }


class DeterministicFallback:
    def evaluate(
        self,
        request: GenerationRequest,
        signals: Mapping[str, RepositorySignal] | None = None,
    ) -> BaseModel:
        mode = request.mode
        if mode in _QUESTION_BANK or mode == "mixed":
            return self._questions(request)
        if mode == "roadmap":
            return self._roadmap(request)
        if mode == "evaluation":
            return self._skills(request, signals or {})
        if mode == "simulation":
            return self._workday(request)
        if mode == "career":
            return self._career(request)
        if mode == "resume":
            return self._resume(request)
        if mode == "comparison":
            return self._comparison(request)
        if mode == "failure":
            return self._failure(request)
        raise ValueError(f"Unsupported generation mode '{mode}'")

    def _questions(self, request: GenerationRequest) -> InterviewQuestionSet:
        role = request.subject_role.strip() or "candidate"
        if request.mode == "mixed":
            bank = _QUESTION_BANK["technical"][:2] + _QUESTION_BANK["behavioral"][:2] + _QUESTION_BANK["dsa"][:2]
        else:
            bank = _QUESTION_BANK[request.mode]
        questions = [{**item, "question": item["question"].format(role=role)} for item in bank]

        tip = "Practice regularly and focus on understanding concepts rather than memorizing answers."
        if request.has_company:
            tip = f"Read {request.company}'s engineering blog and recent candidate reports before the interview. {tip}"
        return InterviewQuestionSet.model_validate(
            {
                "questions": questions,
                "topics_to_prepare": _TOPICS[request.mode],
                "interview_rounds": _ROUNDS[request.mode],
                "resources": _PREP_RESOURCES,
                "difficulty": "Medium",
                "tip": tip,
            }
        )

    def _roadmap(self, request: GenerationRequest) -> CompanyRoadmap:
        role = request.subject_role.strip()
        company = (request.company or "").strip()
        target = f"{role} at {company}" if company else f"{role} roles at top tech companies"
        return CompanyRoadmap.model_validate(
            {
                "company": company,
                "role": role,
                "overview": f"A structured preparation plan for {target}, moving from fundamentals to interview practice.",
                "culture_fit": (
                    f"Study {company}'s published values and prepare stories that show them."
                    if company
                    else "Prepare stories that show ownership, collaboration, and continuous learning."
                ),
                "skills": [
                    {
                        "category": "Technical Foundations",
                        "items": [
                            {"name": "Data Structures and Algorithms", "description": "Arrays, trees, graphs, and common patterns.", "importance": "high"},
                            {"name": "System Design", "description": "Scalability, caching, and trade-offs.", "importance": "medium"},
                        ],
                    },
                    {
                        "category": "Role Skills",
                        "items": [
                            {"name": f"{role} fundamentals", "description": "The tools and practices used daily in the role.", "importance": "high"},
                        ],
                    },
                    {
                        "category": "Soft Skills",
                        "items": [
                            {"name": "Communication", "description": "Explaining decisions clearly under time pressure.", "importance": "medium"},
                        ],
                    },
                ],
                "resources": [
                    {"title": "Cracking the Coding Interview", "description": "Classic interview preparation book.", "type": "Book"},
                    {"title": "NeetCode 150", "description": "Pattern-based problem list.", "type": "Course", "url": "https://neetcode.io/practice"},
                    {"title": "System Design Primer", "description": "Open reference for system design.", "type": "Documentation", "url": "https://github.com/donnemartin/system-design-primer"},
                ],
                "timeline": [
                    {"phase": "Foundations", "duration": "2 weeks", "description": "Review fundamentals and identify weak areas."},
                    {"phase": "Deep Practice", "duration": "4 weeks", "description": "Daily problem solving and one design topic per week."},
                    {"phase": "Mock Interviews", "duration": "2 weeks", "description": "Timed mocks and behavioral story rehearsal."},
                ],
            }
        )

    def _skills(self, request: GenerationRequest, signals: Mapping[str, RepositorySignal]) -> SkillEvaluation:
        ordered = [signals[name] for name in sorted(signals)]
        breakdown = score_categories(ordered)
        total = sum(breakdown.values())
        level, emoji = skill_level_for(total)

        projects_text = request.context("projects")
        projects = [line for line in projects_text.split("\n") if line.strip()] if projects_text else sorted(signals)
        try:
            total_repos = int(request.context("total_repos") or len(projects))
        except ValueError:
            total_repos = len(projects)

        return SkillEvaluation(
            github_username=request.context("github_username", request.subject_role),
            score_breakdown=breakdown,
            total_score=total,
            skill_level=level,
            skill_emoji=emoji,
            justification=build_justification(total, level, len(ordered), total_repos),
            improvement_suggestions=improvement_suggestions(breakdown),
            motivation=LEVEL_MOTIVATION[level],
            top_skills=top_skills_for(ordered, breakdown),
            projects=projects,
            strengths=strengths_for(breakdown),
            priority_improvements=weak_categories(breakdown)[:3],
            evaluated_at=datetime.now(timezone.utc).isoformat(),
        )

    def _workday(self, request: GenerationRequest) -> WorkdaySimulation:
        role = request.subject_role.strip()
        return WorkdaySimulation.model_validate(
            {
                "job_role": role,
                "schedule": [
                    {"time": "9:00 AM", "duration": "30 min", "activity": "Catch up", "description": "Review messages, tickets, and the plan for the day.", "tasks": ["Check email and chat", "Review task board"], "intensity": "Low"},
                    {"time": "9:30 AM", "duration": "15 min", "activity": "Team stand-up", "description": "Share progress and blockers with the team.", "tasks": ["Give a status update"], "intensity": "Low"},
                    {"time": "9:45 AM", "duration": "2 h 15 min", "activity": "Focused work", "description": f"Core {role} work on the current priority.", "tasks": ["Work on the main task", "Document decisions"], "intensity": "High"},
                    {"time": "12:00 PM", "duration": "1 h", "activity": "Lunch", "description": "Break away from the desk.", "tasks": [], "intensity": "Low"},
                    {"time": "1:00 PM", "duration": "1 h", "activity": "Meetings", "description": "Planning or review with stakeholders.", "tasks": ["Discuss requirements", "Agree next steps"], "intensity": "Medium"},
                    {"time": "2:00 PM", "duration": "2 h 30 min", "activity": "Focused work", "description": "Continue the main task and handle reviews.", "tasks": ["Finish implementation", "Review a teammate's work"], "intensity": "High"},
                    {"time": "4:30 PM", "duration": "30 min", "activity": "Wrap up", "description": "Update tickets and plan tomorrow.", "tasks": ["Update status", "Write tomorrow's plan"], "intensity": "Low"},
                ],
                "summary": {
                    "tech_intensity": "Medium",
                    "stress_level": "Medium",
                    "teamwork": "Medium",
                    "learning_curve": "Medium",
                    "typical_day_hours": "8 hours",
                    "work_style": "Mix of focused individual work and team collaboration",
                    "tools": ["Email", "Slack", "Jira", "Calendar"],
                },
            }
        )

    def _career(self, request: GenerationRequest) -> CareerPathSet:
        resume_blob = _lower_blob(request.context("resume_data"))
        target = request.context("target_role")
        focus = _lower_blob(f"{target} {resume_blob}")

        family = "software"
        for name, keywords in _CAREER_KEYWORDS:
            if any(keyword in focus for keyword in keywords):
                family = name
                break

        paths = []
        for template in _CAREER_TEMPLATES[family]:
            missing = [skill for skill in template["required_skills"] if skill.lower() not in resume_blob]
            roadmap = [
                {"step": f"Learn {skill}", "description": f"Complete a structured course on {skill} and apply it in a small project."}
                for skill in missing[:3]
            ]
            roadmap.append(
                {"step": "Build a portfolio project", "description": f"Ship one end-to-end project that a {template['title']} would build."}
            )
            paths.append({**template, "missing_skills": missing, "roadmap": roadmap})
        return CareerPathSet.model_validate(
            {"career_paths": paths, "follow_up_questions": _FOLLOW_UP_BASE + _FOLLOW_UP_BY_FAMILY[family]}
        )

    def _resume(self, request: GenerationRequest) -> ResumeReview:
        text = request.context("resume_text")
        blob = _lower_blob(text)
        words = len(blob.split())
        role = request.subject_role.strip() or _detect_role(text)

        sections = sum(1 for word in _SECTION_WORDS if word in blob)
        verbs = sum(1 for verb in _ACTION_VERBS if verb in blob)
        metrics = len(_NUMBER_RE.findall(text))

        content_score = _clamp(3 + min(words, 600) // 100 + min(verbs, 3))
        format_score = _clamp(2 + sections)
        impact_score = _clamp(2 + min(metrics, 8))
        ats_score = _clamp(3 + sections + (1 if "skills" in blob else 0))

        content_tips = list(_ROLE_CONTENT_TIPS.get(role, _GENERAL_CONTENT_TIPS))
        if metrics < 3:
            content_tips.append("Add numbers to at least three bullets to show impact.")
        if verbs < 3:
            content_tips.append("Start bullets with action verbs such as built, led, or improved.")

        format_tips = []
        missing_sections = [word for word in _SECTION_WORDS[:4] if word not in blob]
        if missing_sections:
            format_tips.append(f"Add clearly labeled sections for: {', '.join(missing_sections)}.")
        if words > 800:
            format_tips.append("Trim the resume to one or two pages by removing older or less relevant detail.")
        format_tips.append("Use one consistent date format and a single-column layout for ATS parsing.")

        return ResumeReview.model_validate(
            {
                "detected_role": role,
                "overall_assessment": (
                    f"The resume reads as a {role} profile with {sections} standard sections and "
                    f"{metrics} quantified results. Focus on measurable impact and clear structure."
                ),
                "content_improvements": content_tips,
                "format_improvements": format_tips,
                "scores": {
                    "content": content_score,
                    "format": format_score,
                    "impact": impact_score,
                    "ats_compatibility": ats_score,
                },
            }
        )

    def _comparison(self, request: GenerationRequest) -> ProjectComparison:
        first = _project_profile(request.context("project1"), _json_context(request, "project1_data"))
        second = _project_profile(request.context("project2"), _json_context(request, "project2_data"))

        if first["complexity_score"] == second["complexity_score"]:
            winner = "Tie"
            reasoning = "Both projects show a similar level of visible complexity from their repository signals."
        else:
            ahead, behind = (first, second) if first["complexity_score"] > second["complexity_score"] else (second, first)
            winner = ahead["name"]
            reasoning = (
                f"{ahead['name']} shows more visible depth (complexity {ahead['complexity_score']}/10) "
                f"than {behind['name']} ({behind['complexity_score']}/10), based on languages, topics, "
                "deployment, and repository size."
            )

        return ProjectComparison.model_validate(
            {
                "project1": first,
                "project2": second,
                "comparison_insights": {
                    "winner": winner,
                    "reasoning": reasoning,
                    "technical_depth_comparison": (
                        f"{first['name']} uses {len(first['tech_stack'])} languages or tools and "
                        f"{second['name']} uses {len(second['tech_stack'])}."
                    ),
                    "innovation_gap": (
                        f"{first['name']} rates {first['innovation_level']} and "
                        f"{second['name']} rates {second['innovation_level']}."
                    ),
                    "learning_opportunities": [
                        "Both projects: Implement more comprehensive documentation",
                        "Both projects: Add testing and deployment pipelines",
                    ],
                    "combination_suggestions": [
                        "Merge complementary features from both projects",
                        "Use best practices from both codebases",
                    ],
                },
                "recommendation": (
                    "Both projects show promise. Add detailed documentation, a live demo, and one advanced "
                    "feature to each so reviewers can see their depth."
                ),
            }
        )

    def _failure(self, request: GenerationRequest) -> FailureAnalysis:
        role = request.subject_role.strip()
        role_blob = role.lower()
        resume_text = request.context("resume_text")
        interview_feedback = request.context("interview_feedback").strip()
        test_performance = request.context("test_performance").strip()

        resume_issues: list[str] = []
        interview_issues: list[str] = []
        test_issues: list[str] = []
        recommendations = [f"Mirror the keywords of {role} job descriptions in your skills and experience sections."]
        fix = {
            "resume_rewrite": (
                "Instead of 'Responsible for reports', write 'Automated weekly reporting in Excel, "
                "saving the team 5 hours per week'."
            ),
            "mock_answer_rewrite": (
                "Answer with STAR: name the situation, your task, the specific actions you took, and the "
                "measurable result, for example 'cut onboarding time by 30%'."
            ),
        }

        if len(resume_text) < 500:
            resume_issues.append("Resume appears too brief - consider adding more detailed descriptions")
        if len(_NUMBER_RE.findall(resume_text)) < 3:
            resume_issues.append("Few bullets show measurable results")
            recommendations.append("Add numbers to at least three bullets to show impact.")

        if "developer" in role_blob or "engineer" in role_blob:
            recommendations.append("Add quantifiable metrics to your technical projects")
            recommendations.append("Highlight specific technologies relevant to the role")
            fix = {
                "resume_rewrite": (
                    "Built a full-stack e-commerce platform using React/Node.js, handling 1000+ concurrent "
                    "users and reducing page load time by 60%"
                ),
                "mock_answer_rewrite": (
                    "Instead of 'I worked on various projects,' try: 'I developed a real-time chat application "
                    "using Socket.io and React, which improved user engagement by 35% and supported 500+ "
                    "concurrent users'"
                ),
            }

        if interview_feedback:
            interview_issues.append("Review interview feedback for specific areas of improvement")
            recommendations.append("Practice mock interviews to build confidence")
        if test_performance:
            test_issues.append("Focus on improving technical assessment performance")
            recommendations.append("Practice coding problems and technical concepts")

        highlighted = []
        for line in resume_text.splitlines():
            clean = line.strip(" \t-*•")
            opener = next((word for word in _WEAK_OPENERS if clean.lower().startswith(word)), None)
            if opener:
                highlighted.append(
                    {
                        "text": clean,
                        "issue": f"Starts with '{opener}', which describes duties rather than results.",
                        "suggestion": "Lead with an action verb and end with the measurable outcome.",
                    }
                )
            if len(highlighted) == 5:
                break

        resources = _FAILURE_RESOURCES[:2] + [{"topic": f"Technical skills for {role}", "link": "https://leetcode.com/"}]
        return FailureAnalysis.model_validate(
            {
                "analysis": {
                    "resume_issues": resume_issues,
                    "interview_issues": interview_issues,
                    "test_issues": test_issues,
                },
                "recommendations": recommendations,
                "fix_suggestions": fix,
                "resources": resources,
                "positive_notes": [
                    "Shows initiative by applying to competitive roles",
                    "Demonstrates learning mindset through continuous skill development",
                ],
                "encouragement": "Every rejection is a step closer to your perfect role. Keep growing and improving! 🚀",
                "highlighted_issues": highlighted,
            }
        )
