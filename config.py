import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
STATIC_DIR = os.path.join(BASE_DIR, "static")
LOG_FILE = os.path.join(BASE_DIR, "launch.log")
DATA_FILE = os.getenv("TALENTFLOW_DATA_FILE", os.path.join(BASE_DIR, "talentflow_data.json"))

# 저장소 설정 ("file" → JSON 파일, "memory" → 프로세스 메모리)
STORAGE_BACKEND = os.getenv("TALENTFLOW_STORAGE", "file")
SEED_SAMPLE_DATA = os.getenv("TALENTFLOW_SEED", "1") == "1"

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
SESSION_TTL = 3600  # 1시간

# 평가(Assessment) 작성 기본값
DEFAULT_DURATION_MINUTES = 60
DEFAULT_PASSING_SCORE = 70
DEFAULT_QUESTION_POINTS = 5
DEFAULT_QUESTION_TIME_LIMIT = 120  # 초 (참고용, 강제하지 않음)

# 채점 설정
COMPLETION_CREDIT = 0.8     # 주관식/평점 문항 응답 시 부여하는 배점 비율

# 타이머 설정
TIMER_TICK_SECONDS = 1.0
TIMER_WARNING_SECONDS = 300  # 5분 미만이면 경고 표시
