"""
main.py — TalentFlow 평가 실행기

    python main.py            # API 서버 (uvicorn)
    python main.py --ui       # API 서버 + Streamlit 화면
    python main.py --port 0   # 빈 포트 자동 선택

종료는 Ctrl+C.
"""

import argparse
import logging
import os
import socket
import subprocess
import sys

_ROOT = os.path.dirname(os.path.abspath(__file__))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

import uvicorn

from config import BASE_DIR, DEFAULT_HOST, DEFAULT_PORT, LOG_FILE, STORAGE_BACKEND

logger = logging.getLogger("talentflow")


def configure_logging() -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    try:
        handlers.append(logging.FileHandler(LOG_FILE, encoding="utf-8"))
    except OSError:
        pass  # 읽기 전용 디렉터리면 콘솔만
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


def pick_port(requested: int) -> int:
    """0 이면 OS 가 고른 빈 포트."""
    if requested:
        return requested
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        return s.getsockname()[1]


def launch_ui() -> subprocess.Popen:
    cmd = [
        sys.executable, "-m", "streamlit", "run",
        os.path.join(BASE_DIR, "streamlit_app.py"),
        "--server.headless", "true",
    ]
    logger.info("Streamlit 화면 실행")
    return subprocess.Popen(cmd, cwd=BASE_DIR)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="TalentFlow assessment server")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--ui", action="store_true", help="Streamlit 화면도 함께 실행")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()
    os.chdir(BASE_DIR)

    from api.app import create_app

    port = pick_port(args.port)
    logger.info(f"TalentFlow 시작: http://{DEFAULT_HOST}:{port} (저장소: {STORAGE_BACKEND})")

    ui = launch_ui() if args.ui else None
    try:
        uvicorn.run(create_app(), host=DEFAULT_HOST, port=port, log_level="warning")
    except KeyboardInterrupt:
        logger.info("사용자에 의해 종료되었습니다.")
    finally:
        if ui is not None:
            ui.terminate()
    return 0


if __name__ == "__main__":
    sys.exit(main())
