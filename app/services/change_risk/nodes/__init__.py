"""
Nodes package for the change risk workflow.
"""

from app.services.change_risk.nodes.intake import intake_evaluation
from app.services.change_risk.nodes.historical import historical_analysis
from app.services.change_risk.nodes.testing import testing_validation
from app.services.change_risk.nodes.conflicts import conflict_detection
from app.services.change_risk.nodes.edge_cases import edge_case_handling
from app.services.change_risk.nodes.final import (
    final_recommendation,
    recommended_action,
)

__all__ = [
    "intake_evaluation",
    "historical_analysis",
    "testing_validation",
    "conflict_detection",
    "edge_case_handling",
    "final_recommendation",
    "recommended_action",
]
