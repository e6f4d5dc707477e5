"""
views/components/timer.py

남은 응시 시간을 렌더링하는 컴포넌트.
남은 시간은 러너의 타이머 스레드가 1초마다 줄이며,
화면은 사용자 상호작용 시(버튼 클릭 등) 갱신된다.
"""

import streamlit as st

from config import TIMER_WARNING_SECONDS


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"


def render(remaining_seconds: int) -> bool:
    """
    남은 시간 표시.

    Args:
        remaining_seconds: RunSession.remaining_seconds

    Returns:
        True  — 시간이 남아 있음
        False — 시간 초과
    """
    is_warning = remaining_seconds < TIMER_WARNING_SECONDS

    css_class = "timer-display timer-warning" if is_warning else "timer-display"
    icon = "⚠️ " if is_warning else "⏱ "

    st.markdown(
        f'<div class="{css_class}">{icon}{format_time(remaining_seconds)}</div>',
        unsafe_allow_html=True,
    )

    if remaining_seconds == 0:
        st.warning("⏰ Time is up. Your answers were submitted automatically.")
        return False
    return True
