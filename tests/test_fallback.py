import json
import unittest

from careerpilot.ai.fallback import DeterministicFallback
from careerpilot.ai.types import GENERATION_MODES, GenerationRequest
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

RESUME_TEXT = (
    "Summary\nFrontend developer with 4 years of React and TypeScript.\n"
    "Experience\nBuilt a checkout flow that increased conversion by 12%. Led a redesign used by 20000 users.\n"
    "Education\nBSc Computer Science\nSkills\nReact, CSS, JavaScript, Testing\n"
)


class DeterministicFallbackTests(unittest.TestCase):
    def setUp(self):
        self.fallback = DeterministicFallback()

    def test_every_mode_returns_a_schema_valid_model(self):
        expected = {
            "technical": InterviewQuestionSet,
            "behavioral": InterviewQuestionSet,
            "dsa": InterviewQuestionSet,
            "mixed": InterviewQuestionSet,
            "roadmap": CompanyRoadmap,
            "evaluation": SkillEvaluation,
            "simulation": WorkdaySimulation,
            "career": CareerPathSet,
            "resume": ResumeReview,
            "comparison": ProjectComparison,
            "failure": FailureAnalysis,
        }
        self.assertEqual(set(expected), set(GENERATION_MODES))
        for mode, model in expected.items():
            with self.subTest(mode=mode):
                result = self.fallback.evaluate(GenerationRequest("Software Engineer", mode))
                self.assertIsInstance(result, model)
                self.assertEqual(model.model_validate(result.model_dump()), result)

    def test_unknown_mode_is_rejected(self):
        with self.assertRaises(ValueError):
            self.fallback.evaluate(GenerationRequest("Engineer", "poetry"))

    def test_mixed_questions_draw_from_every_bank(self):
        mixed = self.fallback.evaluate(GenerationRequest("Engineer", "mixed"))
        technical = self.fallback.evaluate(GenerationRequest("Engineer", "technical"))
        dsa = self.fallback.evaluate(GenerationRequest("Engineer", "dsa"))
        self.assertEqual(len(mixed.questions), 6)
        mixed_questions = {q.question for q in mixed.questions}
        self.assertTrue(mixed_questions & {q.question for q in technical.questions})
        self.assertTrue(mixed_questions & {q.question for q in dsa.questions})

    def test_role_is_interpolated_into_questions(self):
        result = self.fallback.evaluate(GenerationRequest("Data Engineer", "behavioral"))
        self.assertIn("Why do you want to work as a Data Engineer?", [q.question for q in result.questions])

    def test_company_adds_specific_tip(self):
        general = self.fallback.evaluate(GenerationRequest("Engineer", "technical"))
        company = self.fallback.evaluate(GenerationRequest("Engineer", "technical", company="Acme"))
        self.assertNotIn("Acme", general.tip)
        self.assertIn("Acme", company.tip)

    def test_roadmap_uses_company_when_given(self):
        general = self.fallback.evaluate(GenerationRequest("Engineer", "roadmap"))
        company = self.fallback.evaluate(GenerationRequest("Engineer", "roadmap", company="Acme"))
        self.assertEqual(general.company, "")
        self.assertIn("top tech companies", general.overview)
        self.assertEqual(company.company, "Acme")
        self.assertIn("Engineer at Acme", company.overview)

    def test_workday_echoes_job_role(self):
        result = self.fallback.evaluate(GenerationRequest("Product Designer", "simulation"))
        self.assertEqual(result.job_role, "Product Designer")
        self.assertEqual(result.schedule[0].time, "9:00 AM")

    def test_career_paths_follow_resume_keywords(self):
        resume = json.dumps({"skills": ["SQL", "Python", "Excel"], "title": "Data analyst"})
        request = GenerationRequest("Career changer", "career", auxiliary_context={"resume_data": resume})
        result = self.fallback.evaluate(request)
        titles = [path.title for path in result.career_paths]
        self.assertIn("Data Analyst", titles)
        analyst = result.career_paths[titles.index("Data Analyst")]
        self.assertNotIn("SQL", analyst.missing_skills)
        self.assertIn("Statistics", analyst.missing_skills)
        self.assertEqual(analyst.roadmap[-1].step, "Build a portfolio project")

    def test_career_defaults_to_software_paths(self):
        result = self.fallback.evaluate(GenerationRequest("Career changer", "career"))
        self.assertEqual(result.career_paths[0].title, "Software Engineer")

    def test_career_includes_follow_up_questions_for_the_path_family(self):
        resume = json.dumps({"skills": ["React", "CSS"]})
        request = GenerationRequest("", "career", auxiliary_context={"resume_data": resume})
        result = self.fallback.evaluate(request)
        self.assertEqual(result.career_paths[0].title, "Frontend Developer")
        self.assertIn("Do you prefer remote work or are you open to on-site opportunities?", result.follow_up_questions)
        self.assertIn("Do you prefer working on user interfaces or user experience?", result.follow_up_questions)

    def test_comparison_ranks_the_richer_repository(self):
        rich = {
            "name": "realtime-board",
            "description": "Collaborative whiteboard with live cursors",
            "languages": ["TypeScript", "CSS", "HTML"],
            "topics": ["websocket", "react"],
            "homepage": "https://board.example.com",
            "size_kb": 4200,
            "stars": 12,
            "forks": 1,
        }
        bare = {"name": "todo", "description": "", "languages": [], "language": "JavaScript", "topics": [], "size_kb": 40}
        request = GenerationRequest(
            "octocat",
            "comparison",
            auxiliary_context={
                "project1": "realtime-board",
                "project2": "todo",
                "project1_data": json.dumps(rich),
                "project2_data": json.dumps(bare),
            },
        )
        result = self.fallback.evaluate(request)

        self.assertEqual(result.project1.complexity_score, 9)
        self.assertEqual(result.project1.innovation_level, "Innovative")
        self.assertEqual(result.project1.tech_stack, ["TypeScript", "CSS", "HTML"])
        self.assertEqual(result.project2.complexity_score, 3)
        self.assertEqual(result.project2.innovation_level, "Basic")
        self.assertIn("No live demo linked", result.project2.weaknesses)
        self.assertEqual(result.comparison_insights.winner, "realtime-board")

    def test_comparison_without_repository_data_is_a_tie(self):
        request = GenerationRequest(
            "octocat", "comparison", auxiliary_context={"project1": "alpha", "project2": "beta", "project1_data": "not json"}
        )
        result = self.fallback.evaluate(request)
        self.assertEqual((result.project1.name, result.project2.name), ("alpha", "beta"))
        self.assertEqual(result.comparison_insights.winner, "Tie")

    def test_failure_analysis_reacts_to_role_and_feedback(self):
        resume = "Experience\n- Responsible for the company website\n- Worked on internal tools\n"
        request = GenerationRequest(
            "Frontend Developer",
            "failure",
            auxiliary_context={"resume_text": resume, "interview_feedback": "Struggled with system design"},
        )
        result = self.fallback.evaluate(request)

        self.assertIn("Resume appears too brief - consider adding more detailed descriptions", result.analysis.resume_issues)
        self.assertEqual(result.analysis.interview_issues, ["Review interview feedback for specific areas of improvement"])
        self.assertEqual(result.analysis.test_issues, [])
        self.assertIn("Practice mock interviews to build confidence", result.recommendations)
        self.assertIn("React/Node.js", result.fix_suggestions.resume_rewrite)
        self.assertEqual(
            [issue.text for issue in result.highlighted_issues],
            ["Responsible for the company website", "Worked on internal tools"],
        )
        self.assertEqual(result.resources[-1].topic, "Technical skills for Frontend Developer")

    def test_resume_review_scores_and_detected_role(self):
        request = GenerationRequest("", "resume", auxiliary_context={"resume_text": RESUME_TEXT})
        result = self.fallback.evaluate(request)
        self.assertEqual(result.detected_role, "Frontend Developer")
        for score in result.scores.model_dump().values():
            self.assertGreaterEqual(score, 1)
            self.assertLessEqual(score, 10)
        self.assertTrue(result.content_improvements)
        self.assertTrue(result.format_improvements)

    def test_empty_resume_is_general_and_flags_missing_sections(self):
        result = self.fallback.evaluate(GenerationRequest("", "resume"))
        self.assertEqual(result.detected_role, "General")
        self.assertTrue(any("experience" in tip for tip in result.format_improvements))

    def test_fallback_is_deterministic_outside_timestamps(self):
        for mode in GENERATION_MODES:
            with self.subTest(mode=mode):
                first = self.fallback.evaluate(GenerationRequest("Engineer", mode)).model_dump()
                second = self.fallback.evaluate(GenerationRequest("Engineer", mode)).model_dump()
                first.pop("evaluated_at", None)
                second.pop("evaluated_at", None)
                self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
