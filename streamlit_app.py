"""
streamlit_app.py — TalentFlow 평가 Streamlit 진입점

실행: streamlit run streamlit_app.py

st.session_state.page 값으로 화면을 전환한다.
  home → builder (채용 담당자) / my_assessments → exam → result (지원자)
"""

import logging
import os
import sys

_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

import streamlit as st

from config import DATA_FILE, SEED_SAMPLE_DATA, STORAGE_BACKEND
from api.sample_data import seed_sample_data
from talentflow.services.repository import Repositories
from talentflow.services.storage import create_store
from talentflow.views import (
    assessment_list_view,
    builder_view,
    exam_view,
    home_view,
    result_view,
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

_CSS = """
<style>
.cbt-card { background:#ffffff; border-radius:16px; padding:32px 28px; }
.cbt-title { text-align:center; font-size:1.6rem; font-weight:800; color:#1a1a2e; }
.cbt-subtitle { text-align:center; font-size:0.9rem; color:#6b7280; margin-bottom:20px; }
.cbt-divider { border:none; border-top:1px solid #e5eaf2; margin:18px 0; }
.icon-circle { width:64px; height:64px; margin:0 auto 12px auto; border-radius:50%;
               background:#eef2ff; display:flex; align-items:center;
               justify-content:center; font-size:1.8rem; }
.question-card { background:#f7fafd; border-radius:12px; padding:18px 20px;
                 border:1px solid #e5eaf2; margin-bottom:16px; }
.question-number-badge { background:#3b82f6; color:#fff; border-radius:12px;
                         padding:2px 12px; font-size:0.8rem; font-weight:600; }
.timer-display { font-size:1.6rem; font-weight:800; text-align:center; color:#1a1a2e; }
.timer-warning { color:#ef4444; }
.score-big { text-align:center; font-size:3.4rem; font-weight:900; margin:0; }
.pass-badge { padding:6px 20px; border-radius:16px; font-weight:700; }
.pass-badge.pass { background:#d1fae5; color:#065f46; }
.pass-badge.fail { background:#fee2e2; color:#991b1b; }
</style>
"""

_PAGES = {
    "home": home_view.render,
    "builder": builder_view.render,
    "my_assessments": assessment_list_view.render,
    "exam": exam_view.render,
    "result": result_view.render,
}

_ROLE_PAGES = {
    "recruiter": {"builder"},
    "candidate": {"my_assessments", "exam", "result"},
}


@st.cache_resource
def _repositories() -> Repositories:
    """프로세스 전체에서 공유하는 저장소."""
    store = create_store(STORAGE_BACKEND, DATA_FILE)
    if SEED_SAMPLE_DATA:
        seeded = seed_sample_data(store)
        if seeded:
            logger.info(f"샘플 데이터 {seeded}건 추가")
    return Repositories(store)


def _init_state() -> None:
    defaults = {
        "page": "home",
        "user_id": "",
        "role": "",
        "builder": None,
        "runner": None,
        "confirm_submit": False,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value
    st.session_state.repos = _repositories()


def main() -> None:
    st.set_page_config(page_title="TalentFlow Assessments", page_icon="🎯", layout="wide")
    st.markdown(_CSS, unsafe_allow_html=True)
    _init_state()

    page = st.session_state.page
    role = st.session_state.role

    # 로그인 전이거나 역할에 맞지 않는 페이지면 홈으로
    if not st.session_state.user_id or role not in _ROLE_PAGES:
        page = "home"
    elif page not in _ROLE_PAGES[role]:
        page = home_view.LANDING_PAGE[role]
    st.session_state.page = page

    if st.session_state.user_id:
        with st.sidebar:
            st.caption(f"Signed in as **{st.session_state.user_id}** ({role})")
            if st.button("Sign Out", key="sign_out"):
                home_view.sign_out()
                st.rerun()

    _PAGES[page]()


main()
