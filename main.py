import argparse
import dataclasses
import logging

from config import BACKENDS, load_config
from detectors.orientation import Orientation
from overlay.transform import VideoGravity

logger = logging.getLogger("facelasers")


def build_detector(cfg):
    if cfg.backend == "yolo":
        from detectors.yolo_detector import YOLOFaceDetector
        return YOLOFaceDetector(cfg.yolo_weights)
    if cfg.backend == "mediapipe":
        from detectors.mp_mesh_detector import MediaPipeMeshDetector
        return MediaPipeMeshDetector(
            max_num_faces=cfg.max_num_faces,
            min_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence,
        )
    raise ValueError(f"Unknown detector backend: {cfg.backend!r}")


def apply_overrides(config, args):
    cam, det, prev = config.camera, config.detector, config.preview
    if args.device is not None:
        cam = dataclasses.replace(cam, device=args.device)
    if args.orientation is not None:
        cam = dataclasses.replace(cam, orientation=Orientation.parse(args.orientation))
    if args.backend is not None:
        det = dataclasses.replace(det, backend=args.backend)
    if args.weights is not None:
        det = dataclasses.replace(det, yolo_weights=args.weights)
    if args.gravity is not None:
        prev = dataclasses.replace(prev, gravity=VideoGravity.parse(args.gravity))
    return dataclasses.replace(config, camera=cam, detector=det, preview=prev)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Live face landmark overlay")
    ap.add_argument("--config", type=str, default=None, help="JSON config file")
    ap.add_argument("--log-level", type=str, default="INFO")
    ap.add_argument("--device", type=int, default=None)
    ap.add_argument("--backend", type=str, default=None, choices=BACKENDS)
    ap.add_argument("--weights", type=str, default=None, help="YOLO face weights")
    ap.add_argument("--orientation", type=str, default=None, choices=[o.value for o in Orientation])
    ap.add_argument("--gravity", type=str, default=None, choices=[g.value for g in VideoGravity])

    sub = ap.add_subparsers(dest="command")
    sub.add_parser("run", help="live camera preview (default)")
    bench = sub.add_parser("benchmark", help="detection + projection latency on a video file")
    bench.add_argument("video", type=str)
    bench.add_argument("--frames", type=int, default=300)
    bench.add_argument("--warmup", type=int, default=30)
    bench.add_argument("--out-dir", type=str, default="results")
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = apply_overrides(load_config(args.config), args)
    detector = build_detector(config.detector)
    logger.info("Using %s backend, orientation %s", config.detector.backend, config.camera.orientation.value)

    try:
        if args.command == "benchmark":
            from pipeline.benchmark_latency import benchmark_video_latency, save_benchmark
            result = benchmark_video_latency(
                detector,
                args.video,
                num_frames=args.frames,
                warmup=args.warmup,
                layer_size=(config.preview.width, config.preview.height),
                orientation=config.camera.orientation,
            )
            save_benchmark(result, detector.__class__.__name__, out_dir=args.out_dir)
        else:
            from pipeline.runner import run_realtime
            run_realtime(detector, config)
    finally:
        detector.close()


if __name__ == "__main__":
    main()
