"""Decorative particle banner.

Streamlit re-runs the fragment on a timer; each run is one animation frame.
"""
import streamlit as st

from neuralcanvas.particles import ParticleFieldAnimation

CANVAS_WIDTH = 900
CANVAS_HEIGHT = 160
FRAME_SECONDS = 0.1


def _animation() -> ParticleFieldAnimation:
    anim = st.session_state.get("particle_animation")
    if anim is None or anim.stopped:
        anim = ParticleFieldAnimation(CANVAS_WIDTH, CANVAS_HEIGHT)
        anim.start(threaded=False)
        st.session_state["particle_animation"] = anim
    return anim


@st.fragment(run_every=FRAME_SECONDS)
def render_particle_canvas():
    anim = _animation()
    anim.advance()
    st.image(anim.surface.to_image())
