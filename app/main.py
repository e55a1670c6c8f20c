"""
Streamlit Frontend for Water Tracker

Pure view code: every button calls a TrackerState operation and every
number on screen is read back from it. No decisions are made here.

Pages:
1. Tracker - progress ring, preset buttons, custom add
2. Settings - daily goal, preset list, reset
"""

import streamlit as st

from water_tracker.config import get_settings, validate_all_settings
from water_tracker.orchestrator import create_app_components
from water_tracker.tracker import TrackerState
from water_tracker.validation import clamp_slider_volume, parse_volume_text


# Page configuration
st.set_page_config(
    page_title="Water Tracker",
    page_icon="💧",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .big-number {
        font-size: 3em;
        font-weight: bold;
        color: #1f77b4;
        text-align: center;
    }
    .goal-caption {
        color: gray;
        text-align: center;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_components():
    """Get or create the process-wide tracker (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    tracker, _, channel = get_components()
    
    # Apply anything the paired device pushed since the last render
    tracker.process_pending()
    
    if "show_goal_alert" not in st.session_state:
        st.session_state.show_goal_alert = False
    
    st.sidebar.title("💧 Water Tracker")
    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["💧 Tracker", "⚙️ Settings"],
        index=0,
    )
    st.sidebar.markdown("---")
    if channel.is_session_active():
        st.sidebar.success("📱 Paired device connected")
    else:
        st.sidebar.caption("📱 No paired device")
    
    if page == "💧 Tracker":
        render_tracker_page(tracker)
    else:
        render_settings_page(tracker)


def _add_water(tracker: TrackerState, volume: int) -> None:
    was_reached = tracker.goal_reached
    tracker.add_water(volume)
    if tracker.goal_reached and not was_reached:
        st.session_state.show_goal_alert = True


def render_tracker_page(tracker: TrackerState):
    """Render the main tracker page."""
    st.title("💧 Water Tracker")
    
    if st.session_state.show_goal_alert:
        st.balloons()
        st.success("🎉 Goal reached! You hit your daily water goal.")
        st.session_state.show_goal_alert = False
    
    st.caption("Current Progress")
    st.markdown(f'<div class="big-number">{tracker.current_intake}</div>', unsafe_allow_html=True)
    st.markdown(f'<div class="goal-caption">/ {tracker.daily_goal} mL</div>', unsafe_allow_html=True)
    st.progress(tracker.progress)
    
    st.markdown("---")
    st.subheader("Add Water")
    
    presets = tracker.presets
    columns = st.columns(3)
    for i, preset in enumerate(presets):
        with columns[i % 3]:
            st.button(
                f"💧 {preset.name}\n\n{preset.volume} mL",
                key=f"preset-{preset.id}",
                on_click=_add_water,
                args=(tracker, preset.volume),
            )
    
    with st.expander("➕ Add custom amount"):
        render_custom_add(tracker)


def render_custom_add(tracker: TrackerState):
    """Custom volume entry: bounded slider or free-form exact amount."""
    tracker_settings = get_settings().tracker
    
    selected = st.slider(
        "Volume (mL)",
        min_value=0,
        max_value=tracker_settings.max_custom_volume,
        value=clamp_slider_volume(
            tracker_settings.default_custom_volume,
            tracker_settings.max_custom_volume,
        ),
        step=10,
    )
    exact = st.text_input("Or enter an exact volume", placeholder="e.g. 330")
    
    volume = parse_volume_text(exact) if exact else selected
    if exact and volume is None:
        st.caption("Enter a whole number of millilitres.")
    
    if st.button("Confirm", type="primary", disabled=volume is None):
        _add_water(tracker, volume)
        st.rerun()


def _save_goal(tracker: TrackerState, key: str) -> None:
    tracker.set_daily_goal(int(st.session_state[key]))


def _add_preset(tracker: TrackerState) -> None:
    added = tracker.add_preset(
        st.session_state.new_preset_name,
        st.session_state.new_preset_volume,
    )
    # Inputs are only cleared when the preset was accepted
    if added is not None:
        st.session_state.new_preset_name = ""
        st.session_state.new_preset_volume = ""


def render_settings_page(tracker: TrackerState):
    """Render the settings page."""
    st.title("⚙️ Settings")
    
    st.markdown("### Daily Goal")
    # Keyed on the stored goal so a remote change renders a fresh widget
    goal_key = f"goal_input_{tracker.daily_goal}"
    st.number_input(
        "Goal (mL)",
        value=tracker.daily_goal,
        step=50,
        key=goal_key,
        on_change=_save_goal,
        args=(tracker, goal_key),
    )
    
    st.markdown("### Cup Presets")
    presets = tracker.presets
    for preset in presets:
        st.markdown(f"- {preset.label}")
    
    to_delete = st.multiselect(
        "Select presets to delete",
        options=list(range(len(presets))),
        format_func=lambda i: presets[i].label,
    )
    if st.button("🗑️ Delete selected", disabled=not to_delete):
        tracker.remove_preset(to_delete)
        st.rerun()
    
    col1, col2 = st.columns(2)
    with col1:
        st.text_input("Name", key="new_preset_name")
    with col2:
        st.text_input("Volume", key="new_preset_volume")
    st.button("➕ Add preset", on_click=_add_preset, args=(tracker,))
    
    st.markdown("---")
    if st.button("Reset Daily Progress", type="secondary"):
        tracker.reset_daily()
        st.rerun()
    
    st.markdown("---")
    st.markdown("### Configuration")
    status = validate_all_settings()
    for key in ("tracker", "storage", "replication", "app"):
        if status.get(key, False):
            st.success(f"✅ {key.title()} settings OK")
        else:
            st.error(f"❌ {key.title()} - {status.get(f'{key}_error', 'Invalid')}")


if __name__ == "__main__":
    main()
