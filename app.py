"""
Page Replacement Visualizer — FIFO, LRU, Optimal & CLOCK

This application provides an interactive simulation and visualization of the
classic virtual memory page replacement algorithms:
    - FIFO (First-In-First-Out)
    - LRU (Least Recently Used)
    - Optimal (Belady's clairvoyant algorithm)
    - CLOCK (Second Chance)

All four policies are replayed over the same reference string so their
behaviour can be stepped through side by side and compared.

Built with Streamlit for the web interface and Plotly for visualizations.
Run with: streamlit run app.py
"""

# =============================================================================
# IMPORTS
# =============================================================================

import time                                  # For pacing the playback
from typing import List

import plotly.graph_objects as go            # Interactive plotting library
import streamlit as st                       # Web application framework

from engine import (
    ClockMetadata,
    ReplacementPolicy,
    SimulationError,
    SimulationResult,
    Simulator,
    parse_reference_string,
    run_all,
)
from utils import (
    DEFAULT_FRAMES,
    DEFAULT_REFERENCE,
    MAX_FRAMES,
    MIN_FRAMES,
    PRESETS,
    clamp_frame_count,
    generate_reference_string,
    get_color,
    get_policy_color,
)


# =============================================================================
# RENDERING HELPERS
# =============================================================================

# Grid cell categories (heatmap z values)
EMPTY, RESIDENT, LOADED, HIT_FRAME = 0, 1, 2, 3


def _grid_colorscale():
    """Discrete colorscale mapping the four cell categories to colors."""
    colors = [
        get_color(None),
        get_color("HIT", active=False),
        get_color("FAULT"),
        get_color("HIT"),
    ]
    scale = []
    for i, color in enumerate(colors):
        scale.append([i / len(colors), color])
        scale.append([(i + 1) / len(colors), color])
    return scale


def build_frame_grid(result: SimulationResult, current_step: int) -> go.Figure:
    """
    Build the frame-by-step grid for one policy.

    Columns are reference steps (revealed up to `current_step`), rows are
    frames. The requested page is highlighted green on a hit and red where it
    was loaded on a fault. For CLOCK each cell also shows its reference bit and
    the sweep pointer position.

    Args:
        result (SimulationResult): Trace to draw
        current_step (int): Last step to reveal

    Returns:
        go.Figure: Plotly heatmap figure
    """
    n_steps = len(result.steps)
    z: List[List] = []
    text: List[List[str]] = []

    for f in range(result.frame_count):
        z_row, text_row = [], []
        for i, step in enumerate(result.steps):
            page = step.frames[f]
            if i > current_step:
                z_row.append(None)
                text_row.append("")
                continue

            if page is None:
                z_row.append(EMPTY)
            elif page == step.requested_page and step.is_hit:
                z_row.append(HIT_FRAME)
            elif page == step.requested_page:
                z_row.append(LOADED)
            else:
                z_row.append(RESIDENT)

            label = "" if page is None else str(page)
            if isinstance(step.metadata, ClockMetadata) and page is not None:
                label += f"<sub>{step.metadata.reference_bits[f]}</sub>"
                if i == current_step and step.metadata.pointer == f:
                    label += " ◀"
            text_row.append(label)
        z.append(z_row)
        text.append(text_row)

    fig = go.Figure(go.Heatmap(
        z=z,
        x=list(range(n_steps)),
        y=[f"Frame {f + 1}" for f in range(result.frame_count)],
        text=text,
        texttemplate="%{text}",
        colorscale=_grid_colorscale(),
        zmin=EMPTY - 0.5,
        zmax=HIT_FRAME + 0.5,
        showscale=False,
        xgap=3,
        ygap=3,
        hoverinfo="skip",
    ))

    # Column headers: requested page, marked F (fault) or H (hit)
    fig.update_layout(
        height=80 + 45 * result.frame_count,
        margin=dict(l=10, r=10, t=30, b=10),
        xaxis=dict(
            tickvals=list(range(n_steps)),
            ticktext=[
                f"{s.requested_page}<br>{'H' if s.is_hit else 'F'}" if s.step_index <= current_step
                else str(s.requested_page)
                for s in result.steps
            ],
            side="top",
            range=[-0.5, n_steps - 0.5],
        ),
        yaxis=dict(autorange="reversed"),
    )
    return fig


def build_faults_chart(results) -> go.Figure:
    """Horizontal bar chart comparing total faults per policy."""
    names = list(results.keys())
    fig = go.Figure(go.Bar(
        x=[results[n].total_faults for n in names],
        y=names,
        orientation="h",
        text=[results[n].total_faults for n in names],
        marker_color=[get_policy_color(n) for n in names],
    ))
    fig.update_layout(
        height=320,
        title="Faults Comparison (Lower is Better)",
        yaxis=dict(autorange="reversed"),
    )
    return fig


def build_report_rows(result: SimulationResult):
    """Rows for the detailed per-step report table."""
    rows = []
    for i, step in enumerate(result.steps):
        before = [p for p in result.frames_before(i) if p is not None]
        after = [p for p in step.frames if p is not None]
        rows.append({
            "step": i + 1,
            "request": step.requested_page,
            "frames before": ", ".join(map(str, before)) or "-",
            "status": step.status,
            "evicted": "-" if step.replaced_page is None else step.replaced_page,
            "frames after": ", ".join(map(str, after)),
            "explanation": step.explanation,
        })
    return rows


def show_step(slot, result: SimulationResult, index: int):
    """Render the explanation box for one step into a placeholder."""
    step = result.steps[index]
    message = f"Step {index + 1}: {step.status}. {step.explanation}"
    if isinstance(step.metadata, ClockMetadata):
        bits = " ".join(str(b) for b in step.metadata.reference_bits)
        message += f"  |  pointer at Frame {step.metadata.pointer + 1}, bits [{bits}]"
    if step.is_hit:
        slot.success(message)
    else:
        slot.error(message)


# =============================================================================
# STREAMLIT UI - Web Application Interface
# =============================================================================

# Configure the Streamlit page
st.set_page_config(page_title="Page Replacement Visualizer", layout="wide")

# Page selector for switching between Simulator and Concepts views
page = st.sidebar.radio("Choose View", ["Simulator", "Concepts"])

# Main application title
st.title("Page Replacement Algorithm Visualizer")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Operating System Concepts Used in This Project")
    st.markdown(
        """
        ## 📘 Key Concepts

        ### **1. Frames and Pages**
        - Physical memory holds a fixed number of *frames*; each frame holds one *page*.
        - A program references pages in some order: the **reference string**.

        ### **2. Page Hit / Page Fault**
        - **Hit**: the referenced page is already resident in a frame.
        - **Fault**: the page is not resident and must be loaded.
        - If no frame is free, a resident page (the *victim*) is evicted.

        ### **3. Page Replacement Algorithms**

        #### **FIFO (First In First Out)**
        - Replace the page that entered memory earliest.
        - Simple queue; suffers from Belady's anomaly.

        #### **LRU (Least Recently Used)**
        - Replace the page whose last use lies furthest in the past.

        #### **Optimal (Belady)**
        - Replace the page whose next use lies furthest in the future.
        - Needs the whole future reference string, so it is a benchmark,
          not an implementable policy. No policy can produce fewer faults.

        #### **CLOCK (Second Chance)**
        - Frames form a circle with a sweeping pointer and one *reference bit* each.
        - A used page gets bit 1. While sweeping, bit 1 is cleared (second chance)
          and bit 0 marks the victim.
        - In this simulator the pointer also moves forward when a free frame is filled.

        ### **4. Hit Ratio**
        - hits / total references. Fault ratio = 1 - hit ratio.

        ---
        ### ✔ Try Preset 1 with 3 and 4 frames under FIFO to see Belady's anomaly.
        """
    )
    st.stop()

# =============================================================================
# SIMULATOR PAGE - Main Interactive Interface
# =============================================================================

# -----------------------------------------------------------------------------
# SESSION STATE - Inputs and playback position
# -----------------------------------------------------------------------------

if "reference" not in st.session_state:
    st.session_state.reference = DEFAULT_REFERENCE
if "frames" not in st.session_state:
    st.session_state.frames = DEFAULT_FRAMES
if "current_step" not in st.session_state:
    st.session_state.current_step = 0
if "playing" not in st.session_state:
    st.session_state.playing = False


def _apply_preset(reference, frames):
    st.session_state.reference = reference
    st.session_state.frames = frames
    st.session_state.current_step = 0
    st.session_state.playing = False


def _randomize():
    st.session_state.reference = generate_reference_string()
    st.session_state.current_step = 0
    st.session_state.playing = False


def _go_to(index):
    st.session_state.current_step = index
    st.session_state.playing = False


def _play():
    st.session_state.playing = True


def _pause():
    st.session_state.playing = False


# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

st.sidebar.text_area(
    "Reference string (comma separated page numbers)",
    key="reference",
)
st.sidebar.button("🔀 Randomize", on_click=_randomize)

st.sidebar.number_input(
    "Frame count",
    min_value=MIN_FRAMES,
    max_value=MAX_FRAMES,
    step=1,
    key="frames",
)

preset_cols = st.sidebar.columns(len(PRESETS))
for col, (label, reference, frames) in zip(preset_cols, PRESETS):
    col.button(label, on_click=_apply_preset, args=(reference, frames))

st.sidebar.markdown("---")

# Playback speed control for animation
run_speed = st.sidebar.slider(
    "Playback speed (steps/sec)",
    min_value=0.5,
    max_value=5.0,
    value=1.0,
)

# -----------------------------------------------------------------------------
# RUN ALL POLICIES
# -----------------------------------------------------------------------------

frame_count = clamp_frame_count(st.session_state.frames)
pages = parse_reference_string(st.session_state.reference)

try:
    results = run_all(pages, frame_count)
except SimulationError as e:
    st.error(str(e))
    st.stop()

if len(pages) == 0:
    st.warning("No valid pages in the reference string")
    st.stop()

max_step = len(pages) - 1
st.session_state.current_step = min(st.session_state.current_step, max_step)

# =============================================================================
# MAIN CONTENT AREA
# =============================================================================

active = st.radio("Algorithm", list(ReplacementPolicy.ALL), horizontal=True)
active_result = results[active]

# -----------------------------------------------------------------------------
# STEP CONTROL
# -----------------------------------------------------------------------------

# Controls precede the playback loop so Pause can interrupt it
st.subheader("Step Control")
start = st.session_state.current_step
c1, c2, c3, c4, c5 = st.columns(5)
c1.button("⏮ Start", on_click=_go_to, args=(0,))
c2.button("◀ Prev", on_click=_go_to, args=(max(0, start - 1),))
c3.button("▶ Play", on_click=_play)
c4.button("⏸ Pause", on_click=_pause)
c5.button("Next ▶", on_click=_go_to, args=(min(max_step, start + 1),))

explanation_slot = st.empty()
grid_slot = st.empty()

# ----- Playback: reveal one step at a time -----
if st.session_state.playing:
    for i in range(start, max_step + 1):
        st.session_state.current_step = i
        show_step(explanation_slot, active_result, i)
        grid_slot.plotly_chart(build_frame_grid(active_result, i), use_container_width=True)
        time.sleep(1.0 / run_speed)
    st.session_state.playing = False

current = st.session_state.current_step
show_step(explanation_slot, active_result, current)
grid_slot.plotly_chart(build_frame_grid(active_result, current), use_container_width=True)

if max_step > 0:
    st.slider("Step", min_value=0, max_value=max_step, key="current_step")
st.caption(f"{current + 1} / {max_step + 1}")

# -----------------------------------------------------------------------------
# STATISTICS - Comparison across policies
# -----------------------------------------------------------------------------

st.subheader("Statistics")
metric_cols = st.columns(len(results))
for col, (name, result) in zip(metric_cols, results.items()):
    stats = result.get_stats()
    col.metric(name, f"{stats['faults']} Faults")
    col.write(f"{stats['hits']} Hits · {stats['fault_rate'] * 100:.0f}% Miss Ratio")

col1, col2 = st.columns([2, 1])

with col1:
    st.plotly_chart(build_faults_chart(results), use_container_width=True)

with col2:
    # ----- Hits vs Faults for the selected policy -----
    stats = active_result.get_stats()
    fig2 = go.Figure()
    fig2.add_trace(go.Bar(
        x=["Hits", "Faults"],
        y=[stats['hits'], stats['faults']],
        marker_color=[get_color("HIT"), get_color("FAULT")],
    ))
    fig2.update_layout(height=320, title=f"Hits vs Faults ({active})")
    st.plotly_chart(fig2, use_container_width=True)

# -----------------------------------------------------------------------------
# DETAILED REPORT AND EVENT LOG
# -----------------------------------------------------------------------------

col1, col2 = st.columns([3, 1])

with col1:
    st.subheader(f"Detailed Simulation Report - {active}")
    st.table(build_report_rows(active_result))
    st.write(
        f"Total references: {active_result.total_refs} · "
        f"Hits: {active_result.total_hits} · Faults: {active_result.total_faults} · "
        f"Hit ratio: {active_result.hit_ratio:.2%}"
    )

with col2:
    # Replay the selected policy up to the current step to show its events
    st.subheader("Event Log")
    replay = Simulator(pages, frame_count, active)
    for _ in range(current + 1):
        replay.step()
    for ev in replay.event_log[-20:][::-1]:
        st.write(ev)

# =============================================================================
# FOOTER - Usage Tips
# =============================================================================

st.markdown("---")
st.markdown(
    "**Usage tips**:\n"
    "- Enter a comma separated reference string; invalid or negative entries are ignored.\n"
    "- Pick an algorithm above the grid and use **Play**, **Prev**/**Next** or the slider to step.\n"
    "- Red cells are pages loaded on a fault, green cells are hits. "
    "CLOCK cells show the reference bit and ◀ marks the sweep pointer.\n"
    "- Optimal is the lower bound: no algorithm produces fewer faults."
)
