from .career import CareerAnalysisRequest, CareerPath, CareerPathSet, RoadmapStep
from .comparison import ComparisonInsights, ProjectComparison, ProjectComparisonRequest, ProjectProfile
from .evaluation import (
    EvaluationNarrative,
    ImprovementSuggestion,
    SkillEvaluation,
    SkillEvaluationRequest,
    SuggestionResource,
)
from .failure import (
    FailureAnalysis,
    FailureAnalysisRequest,
    FailureAnalysisResponse,
    FixSuggestions,
    HighlightedIssue,
    IssueBreakdown,
    LearningResource,
)
from .interview import InterviewPrepResponse, InterviewQuestionSet, InterviewQuestionsRequest, QuestionAnswer
from .resume import ResumeAnalysisRequest, ResumeReview, ResumeScores
from .roadmap import CompanyRoadmap, CompanyRoadmapRequest
from .simulation import WorkdaySimulation, WorkdaySimulationRequest

__all__ = [
    "CareerAnalysisRequest",
    "CareerPath",
    "CareerPathSet",
    "RoadmapStep",
    "ComparisonInsights",
    "ProjectComparison",
    "ProjectComparisonRequest",
    "ProjectProfile",
    "EvaluationNarrative",
    "ImprovementSuggestion",
    "SkillEvaluation",
    "SkillEvaluationRequest",
    "SuggestionResource",
    "FailureAnalysis",
    "FailureAnalysisRequest",
    "FailureAnalysisResponse",
    "FixSuggestions",
    "HighlightedIssue",
    "IssueBreakdown",
    "LearningResource",
    "InterviewPrepResponse",
    "InterviewQuestionSet",
    "InterviewQuestionsRequest",
    "QuestionAnswer",
    "ResumeAnalysisRequest",
    "ResumeReview",
    "ResumeScores",
    "CompanyRoadmap",
    "CompanyRoadmapRequest",
    "WorkdaySimulation",
    "WorkdaySimulationRequest",
]
