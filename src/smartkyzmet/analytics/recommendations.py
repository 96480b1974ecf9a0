from __future__ import annotations

from .model import AttendanceAnalysis, Recommendations, SpecificRecommendation

GENERAL_ADVICE = (
    "Based on the attendance analysis, pay attention to employees with a high share "
    "of late arrivals and early departures."
)
RISK_ADVICE = "Talk to the employee about the importance of keeping to the work schedule."


def build_recommendations(analysis: AttendanceAnalysis) -> Recommendations:
    """One general advice line plus one line per employee in the risk bucket."""
    return Recommendations(
        general=GENERAL_ADVICE,
        specific=[
            SpecificRecommendation(employee_name=a.employee_name, recommendation=RISK_ADVICE)
            for a in analysis.risk
        ],
    )
