"""속눈썹 매핑 명령줄 도구"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config.settings import ImageSettings, RenderStyle
from .processing.pipeline import LashMappingPipeline
from .utils import Config, enable_debug_logging, get_config, get_logger, save_result_json
from .utils.exceptions import LashMappingException, NoFaceDetectedError
from .utils.image_utils import save_image

logger = get_logger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.webp')


def collect_images(paths: List[str]) -> List[Path]:
    """파일/디렉토리 인자 -> 이미지 파일 목록 (디렉토리는 이름순)"""
    images = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            images.extend(sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
            ))
        else:
            images.append(path)
    return images


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lash-mapping',
        description='얼굴 사진으로 얼굴형/눈 형태를 분류하고 속눈썹 매핑 템플릿 생성'
    )
    parser.add_argument('images', nargs='+', help='이미지 파일 또는 디렉토리')
    parser.add_argument('-o', '--output-dir', default='lash_output', help='결과 저장 디렉토리 (기본값: lash_output)')
    parser.add_argument('--json', action='store_true', help='결과 JSON도 저장')
    parser.add_argument('--max-dimension', type=int, help='긴 변 최대 픽셀 (기본값: config)')
    parser.add_argument('--no-landmarks', action='store_true', help='랜드마크 점 표시 안 함')
    parser.add_argument('--config', help='config.yaml 경로')
    parser.add_argument('-v', '--verbose', action='store_true', help='DEBUG 로그 출력')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI 진입점

    Returns:
        종료 코드 (0: 모두 성공, 1: 일부 실패, 2: 처리할 이미지 없음)
    """
    args = build_parser().parse_args(argv)

    config = Config(args.config) if args.config else get_config()

    if args.verbose:
        enable_debug_logging()

    image_settings = ImageSettings.from_config(config.section('image'))
    if args.max_dimension is not None:
        image_settings.max_dimension = args.max_dimension
    style = RenderStyle.from_config(config.section('rendering'))
    if args.no_landmarks:
        style.show_landmarks = False

    image_paths = collect_images(args.images)
    if not image_paths:
        print("No images to process", file=sys.stderr)
        return 2

    output_dir = Path(args.output_dir)
    suffix = config.get('export.output_suffix', '_lash_map')
    image_format = config.get('export.image_format', 'png')

    failures = 0
    print("=" * 60)
    print(f"Lash mapping - {len(image_paths)} image(s)")
    print("=" * 60)

    with LashMappingPipeline(config=config, image_settings=image_settings, style=style) as pipeline:
        for idx, image_path in enumerate(image_paths, 1):
            print(f"[{idx}/{len(image_paths)}] {image_path.name}")
            try:
                result = pipeline.process_file(image_path)
            except NoFaceDetectedError as e:
                failures += 1
                print(f"   {e}")
                continue
            except LashMappingException as e:
                failures += 1
                logger.error(f"Failed to process {image_path}: {e}")
                print(f"   Error: {e}")
                continue

            output_path = output_dir / f"{image_path.stem}{suffix}.{image_format}"
            try:
                save_image(result.rendered_image, output_path, image_settings.jpeg_quality)
                if args.json:
                    save_result_json(result, output_path.with_suffix('.json'), str(image_path))
            except (OSError, LashMappingException) as e:
                failures += 1
                logger.error(f"Failed to save results for {image_path}: {e}")
                print(f"   Error: could not save results ({e})")
                continue

            print(f"   Face shape: {result.face_shape.value}")
            print(f"   Eye shape:  {result.eye_shape.value}")
            if result.recommendation:
                print(f"   Style:      {result.recommendation.style}")
            if result.template.is_fallback:
                print(f"   Warning:    {result.template.error_message}")
            print(f"   Saved:      {output_path}")

    print("=" * 60)
    print(f"Done: {len(image_paths) - failures} succeeded, {failures} failed")
    return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
