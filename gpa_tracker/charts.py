import math

import altair as alt
import pandas as pd

MAX_GPA = 4.0


def trajectory_chart(summary_df: pd.DataFrame) -> alt.Chart:
    """SGPA and running CGPA per semester, on a fixed 0 to 4 axis."""
    return alt.Chart(summary_df).transform_fold(
        ["SGPA", "CGPA"], as_=["Measure", "GPA"]
    ).mark_line(point=True, strokeWidth=3).encode(
        x=alt.X("Semester:N", sort=None, axis=alt.Axis(labelAngle=0, title="Semester")),
        y=alt.Y("GPA:Q", scale=alt.Scale(domain=[0.0, MAX_GPA]), axis=alt.Axis(title="GPA")),
        color=alt.Color("Measure:N", title=None),
        tooltip=["Semester:N", "Measure:N", alt.Tooltip("GPA:Q", format=".2f"), "Credits:Q"],
    ).properties(
        height=350
    ).interactive()


def impact_floor(current_cgpa: float) -> float:
    # nearest tenth below the current CGPA, so small gains stay visible
    return math.floor(current_cgpa * 10) / 10


def impact_chart(impact_df: pd.DataFrame, current_cgpa: float) -> alt.Chart:
    """Current vs. projected CGPA for each proposed improvement."""
    return alt.Chart(impact_df).transform_fold(
        ["Current CGPA", "New CGPA"], as_=["Series", "CGPA"]
    ).mark_line(point=True, strokeWidth=2).encode(
        x=alt.X("Course:N", sort=None, axis=alt.Axis(labelAngle=0, title="Course")),
        y=alt.Y(
            "CGPA:Q",
            scale=alt.Scale(domain=[impact_floor(current_cgpa), MAX_GPA]),
            axis=alt.Axis(title="CGPA"),
        ),
        color=alt.Color(
            "Series:N",
            title=None,
            scale=alt.Scale(domain=["Current CGPA", "New CGPA"], range=["#1E40AF", "#047857"]),
        ),
        tooltip=[
            "Course:N",
            "Series:N",
            alt.Tooltip("CGPA:Q", format=".3f"),
            alt.Tooltip("GPA Improvement:Q", format="+.3f"),
        ],
    ).properties(
        height=300
    )
