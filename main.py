#!/usr/bin/env python3
"""
수박 두드림 소리 특징 추출 실행 스크립트

자세한 사용법은 `python main.py --help` 를 참고하세요.
"""

import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from wm_features.cli import main


if __name__ == "__main__":
    sys.exit(main())
