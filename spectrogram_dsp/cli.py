"""Command line entry point: render spectrogram images from an audio file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from spectrogram_dsp.audio_io import read_pcm
from spectrogram_dsp.config import SpectrogramConfig
from spectrogram_dsp.errors import AudioDecodeError, ConfigurationError, InvariantViolation
from spectrogram_dsp.image_io import save_raster
from spectrogram_dsp.stft.modes import DEFAULT_MODES, RENDER_MODES
from spectrogram_dsp.stft.pipeline import render_pcm

logger = logging.getLogger("spectrogram_dsp.cli")

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INVARIANT = 3

OUTPUT_NAMES = {
    "rgb": "spectrogram_high_res.png",
    "gray": "spectrogram_high_res_gray.png",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spectrogram-dsp",
        description="Render STFT spectrogram images from an audio file.",
    )
    parser.add_argument("input", type=Path, help="audio file readable by libsndfile (wav, flac, ogg, ...)")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="directory for the rendered images")
    parser.add_argument("--frame-size", type=int, default=None, help="FFT size in samples (default 2048)")
    parser.add_argument("--hop-size", type=int, default=None, help="hop between frames (default frame-size / 4)")
    parser.add_argument("--log-offset", type=float, default=None, help="offset added to log10 magnitudes (default 3.0)")
    parser.add_argument("--log-scale", type=float, default=None, help="scale applied after the offset (default 85.0)")
    parser.add_argument("--upscale-factor", type=int, default=None, help="vertical resampling factor (default 2)")
    parser.add_argument(
        "--mode",
        dest="modes",
        action="append",
        choices=sorted(RENDER_MODES),
        help="render mode; repeat for several (default: rgb and gray)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for progress, -vv for per-frame detail")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = SpectrogramConfig.from_env().replace(
            frame_size=args.frame_size,
            hop_size=args.hop_size,
            log_offset=args.log_offset,
            log_scale=args.log_scale,
            upscale_factor=args.upscale_factor,
        )
        pcm = read_pcm(str(args.input), dtype=config.sample_dtype)
        modes: List[str] = args.modes or list(DEFAULT_MODES)
        rasters, report = render_pcm(pcm, config, modes)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except AudioDecodeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR
    except InvariantViolation as exc:
        logger.exception("[DSP] Invariant violation in stage=%s index=%s", exc.stage, exc.index)
        return EXIT_INVARIANT

    if report.empty:
        print(f"nothing to render: {report.reason}", file=sys.stderr)
        return EXIT_OK

    try:
        for name, raster in rasters.items():
            path = save_raster(raster, args.output_dir / OUTPUT_NAMES.get(name, f"spectrogram_{name}.png"))
            print(path)
    except OSError as exc:
        print(f"error: could not write image: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR

    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
