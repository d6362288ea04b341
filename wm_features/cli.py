"""
수박 두드림 소리 특징 추출 명령줄 도구

  extract  : 오디오 파일에서 53개 특징을 추출해 출력/저장
  predict  : 예측 서버에 오디오 파일을 보내 당도 예측
  health   : 예측 서버 상태 확인
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

import numpy as np

from config import Config
from .audio.feature_extraction import AudioFeatureExtractor, analyze_file
from .audio.feature_names import FEATURE_CATEGORIES, FEATURE_NAMES
from .audio.loader import load_audio
from .client.prediction_client import PredictionClient
from .exceptions import WatermelonFeatureError
from .utils.logger import setup_logger


class NumpyEncoder(json.JSONEncoder):
    """NumPy 데이터 타입을 JSON으로 직렬화하기 위한 인코더"""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        return json.JSONEncoder.default(self, obj)


def format_features(feature_array) -> str:
    """카테고리별로 묶은 `이름: 값` 표."""
    lines = []
    index = 0
    for category, count in FEATURE_CATEGORIES:
        lines.append(f"[{category}]")
        for _ in range(count):
            lines.append(f"  {FEATURE_NAMES[index]:<32} {feature_array[index]:.4f}")
            index += 1
    return "\n".join(lines)


def run_extract(args, config, logger) -> int:
    records = []
    failures = 0

    for audio_file in args.files:
        try:
            if args.no_preprocess:
                y, sr = load_audio(audio_file, config)
                feature_vector = AudioFeatureExtractor(config).extract(y, sr)
            else:
                feature_vector = analyze_file(audio_file, config)
        except WatermelonFeatureError as e:
            logger.error(f"특징 추출 실패: {audio_file}: {e}")
            failures += 1
            continue

        feature_array = feature_vector.to_array()
        print(f"== {audio_file}")
        print(format_features(feature_array))

        records.append({
            'audio_file': str(Path(audio_file).name),
            'date': datetime.now().isoformat(),
            'features': feature_array,
        })

    if args.json and records:
        with open(args.json, 'w', encoding='utf-8') as f:
            json.dump({'feature_names': FEATURE_NAMES, 'records': records},
                      f, indent=2, ensure_ascii=False, cls=NumpyEncoder)
        logger.info(f"특징 저장 완료: {args.json} ({len(records)}개)")

    return 1 if failures else 0


def run_predict(args, config, logger) -> int:
    client = PredictionClient(args.base_url or config.api_base_url, config.api_timeout)
    try:
        response = client.predict(args.file)
    except WatermelonFeatureError as e:
        logger.error(f"예측 실패: {e}")
        return 1

    confidence = "N/A" if response.confidence is None else f"{response.confidence:.3f}"
    print(f"{response.filename}: {response.result} "
          f"(prediction={response.prediction}, confidence={confidence})")
    return 0


def run_health(args, config, logger) -> int:
    client = PredictionClient(args.base_url or config.api_base_url, config.api_timeout)
    try:
        health = client.check_health()
    except WatermelonFeatureError as e:
        logger.error(f"서버 상태 확인 실패: {e}")
        return 1

    print(f"{health.status}: {health.message}")
    return 0


def create_argument_parser():
    """명령줄 인수 파서를 생성합니다."""
    parser = argparse.ArgumentParser(
        description="수박 두드림 소리 특징 추출",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
사용 예시:
  python main.py extract tap.wav                   # 특징 출력
  python main.py extract a.wav b.wav --json out.json
  python main.py predict tap.m4a --base-url http://localhost:8000
  python main.py health
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='로그 레벨 설정 (기본값: 설정의 log_level)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    extract_parser = subparsers.add_parser('extract', help='오디오 파일에서 특징 추출')
    extract_parser.add_argument('files', nargs='+', help='오디오 파일 경로')
    extract_parser.add_argument('--json', type=str, default=None, help='결과 JSON 저장 경로')
    extract_parser.add_argument(
        '--no-preprocess',
        action='store_true',
        help='정규화/무음 제거 없이 원본 샘플에서 추출'
    )

    predict_parser = subparsers.add_parser('predict', help='예측 서버로 당도 예측')
    predict_parser.add_argument('file', help='오디오 파일 경로')
    predict_parser.add_argument('--base-url', type=str, default=None, help='서버 기본 URL')

    health_parser = subparsers.add_parser('health', help='예측 서버 상태 확인')
    health_parser.add_argument('--base-url', type=str, default=None, help='서버 기본 URL')

    return parser


def main(argv=None) -> int:
    """메인 실행 함수"""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = Config()
    except ValueError as e:
        print(f"설정 오류: {e}", file=sys.stderr)
        return 1

    logger = setup_logger("watermelon_features", args.log_level or config.log_level, config.log_dir)

    handlers = {
        'extract': run_extract,
        'predict': run_predict,
        'health': run_health,
    }

    try:
        return handlers[args.command](args, config, logger)
    except KeyboardInterrupt:
        logger.info("사용자에 의해 중단되었습니다.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
