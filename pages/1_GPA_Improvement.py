import streamlit as st

from gpa_tracker.charts import impact_chart
from gpa_tracker.errors import ValidationError
from gpa_tracker.grades import GRADE_SYMBOLS
from gpa_tracker.session import ENTRIES, add_entry, apply_entry_edit, enter_simulator, entry_key
from gpa_tracker.simulator import (
    Baseline,
    final_cgpa,
    impact_frame,
    remove_entry,
    set_entry_credits,
    set_entry_name,
    set_entry_new_grade,
    set_entry_old_grade,
    total_improvement,
)

NOTICE = "sim_notice"


def fmt(value, pattern=".3f"):
    return "N/A" if value is None else format(value, pattern)


def edit(operation, *args, structural=False):
    message = apply_entry_edit(st.session_state, operation, *args, structural=structural)
    if message:
        st.session_state[NOTICE] = message


def edit_from_widget(operation, key, index):
    edit(operation, index, st.session_state[key])


# --- 1. SETUP ---
st.set_page_config(page_title="GPA Improvement Calculator", layout="centered")
enter_simulator(st.session_state)

st.page_link("app.py", label="Back to GPA Calculator", icon="⬅️")
st.title("GPA Improvement Calculator")
st.markdown(
    "See how improving your grades in specific courses could affect your overall CGPA."
)

# --- 2. BASELINE ---
col1, col2 = st.columns(2)
with col1:
    current_cgpa = st.number_input(
        "Current CGPA", min_value=0.0, max_value=4.0, step=0.01, value=None,
        placeholder="Enter your current CGPA",
    )
with col2:
    credits_done = st.number_input(
        "Total Credits Completed", min_value=0.0, step=1.0, value=None,
        placeholder="Enter total credits completed",
    )
baseline = Baseline(current_cgpa=current_cgpa, total_credits=credits_done)

if current_cgpa is not None and credits_done is not None and not baseline.is_available:
    st.warning("Total credits must be greater than zero.")

# --- 3. ENTRIES ---
st.subheader("Add Courses for Improvement")
with st.form("add_entry", clear_on_submit=True):
    f1, f2, f3, f4 = st.columns([2, 1, 1, 1])
    name = f1.text_input("Course Name")
    credits = f2.number_input("Credits", min_value=1, step=1, value=3)
    old_grade = f3.selectbox("Current Grade", GRADE_SYMBOLS, index=None, placeholder="Grade")
    new_grade = f4.selectbox("New Grade", GRADE_SYMBOLS, index=0)
    if st.form_submit_button("Add Course"):
        try:
            add_entry(st.session_state, name, credits, old_grade, new_grade)
        except ValidationError as e:
            st.warning(str(e))

if st.session_state.get(NOTICE):
    st.warning(st.session_state.pop(NOTICE))

entries = st.session_state[ENTRIES]

if entries:
    st.subheader("Added Courses")
    for i, entry in enumerate(entries):
        c1, c2, c3, c4, c5 = st.columns([2, 1, 1, 1, 0.5], vertical_alignment="bottom")
        visibility = "visible" if i == 0 else "collapsed"
        key = entry_key(st.session_state, "name", i)
        c1.text_input(
            "Course Name", value=entry.name, key=key, label_visibility=visibility,
            on_change=edit_from_widget, args=(set_entry_name, key, i),
        )
        key = entry_key(st.session_state, "credits", i)
        c2.number_input(
            "Credits", min_value=1, step=1, value=int(entry.credits), key=key, label_visibility=visibility,
            on_change=edit_from_widget, args=(set_entry_credits, key, i),
        )
        key = entry_key(st.session_state, "old", i)
        c3.selectbox(
            "Old Grade", GRADE_SYMBOLS, index=GRADE_SYMBOLS.index(entry.old_grade), key=key,
            label_visibility=visibility, on_change=edit_from_widget, args=(set_entry_old_grade, key, i),
        )
        key = entry_key(st.session_state, "new", i)
        c4.selectbox(
            "New Grade", GRADE_SYMBOLS, index=GRADE_SYMBOLS.index(entry.new_grade), key=key,
            label_visibility=visibility, on_change=edit_from_widget, args=(set_entry_new_grade, key, i),
        )
        c5.button(
            "🗑", key=entry_key(st.session_state, "remove", i), help="Remove course",
            on_click=edit, args=(remove_entry, i), kwargs={"structural": True},
        )

    # --- 4. IMPACT ---
    st.subheader("GPA Impact")
    if baseline.is_available:
        chart = impact_chart(impact_frame(baseline, entries), float(current_cgpa))
        st.altair_chart(chart, use_container_width=True)
    else:
        st.info("Enter your current CGPA and total credits to see the impact of each course.")

    with st.container(border=True):
        st.markdown("#### Final CGPA After Improvements")
        st.metric(
            label="Final CGPA",
            value=fmt(final_cgpa(baseline, entries)),
            delta=fmt(total_improvement(baseline, entries), "+.3f") if baseline.is_available else None,
            label_visibility="collapsed",
        )
        st.caption(f"Total GPA Improvement: {fmt(total_improvement(baseline, entries))}")
