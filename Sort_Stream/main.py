# main.py

"""Entry point for running a paced, streamed sort in the terminal."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np

from invariants import checks
from Sort_Stream.config import Config
from Sort_Stream.consumer import ConsumerWorker, Mirror
from Sort_Stream.engine.context import RunContext
from Sort_Stream.engine.logging_models import RunSummaryLog, RunSummaryPayload
from Sort_Stream.engine.models.element import Element, Phase, elements_from_values
from Sort_Stream.engine.registry import ENGINES, get_engine
from Sort_Stream.engine.stream.protocol import save_trace
from Sort_Stream.engine.transport import channel
from Sort_Stream.engine.worker import EngineWorker

logger = logging.getLogger(__name__)

#: Glyph drawn next to each bar for a phase. Purely a rendering choice.
PHASE_GLYPHS = {
    Phase.DIVIDING: "~",
    Phase.LEFT_MERGE_CANDIDATE: "<",
    Phase.RIGHT_MERGE_CANDIDATE: ">",
    Phase.PLACED_FROM_LEFT: "L",
    Phase.PLACED_FROM_RIGHT: "R",
    Phase.NEUTRAL: " ",
}


def _configure_logging(level: str = "INFO") -> None:
    """Configure application logging and capture uncaught exceptions."""

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    def _log_excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).exception(
            "Uncaught exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _log_excepthook


def generate_input(length: int, seed: int | None, value_range: List[int]) -> List[Element]:
    """Return ``length`` random elements tagged with their original index."""

    if length < 0:
        raise ValueError("length must be non-negative")
    low, high = int(value_range[0]), int(value_range[1])
    if high <= low:
        raise ValueError(f"empty value range: [{low}, {high})")
    rng = np.random.default_rng(seed)
    return elements_from_values(rng.integers(low, high, size=length).tolist())


def render_frame(mirror: Mirror, width: int = 40) -> str:
    """Render ``mirror`` as horizontal bars annotated with phase glyphs."""

    values = mirror.values()
    if not values:
        return "(empty)"
    top = max(max(values), 1)
    highlight = mirror.highlight or ()
    lines = []
    for i, element in enumerate(mirror.elements()):
        mark = "*" if i in highlight else PHASE_GLYPHS[element.phase]
        bar = "█" * max(int(element.value * width // top), 0)
        lines.append(f"{i:3d} {mark} [{element.value:>5}] {bar}")
    return "\n".join(lines)


@dataclass
class MainService:
    """Handle CLI parsing, run the engine/consumer pair and report."""

    argv: list[str] | None = None

    def run(self) -> int:
        args = self._parse_args()
        if args.config:
            Config.load_from_file(args.config)
        self._apply_overrides(args)
        _configure_logging(Config.log_level)

        if Config.algorithm not in ENGINES:
            logger.error("unknown algorithm %r", Config.algorithm)
            return 2
        if Config.speed <= 0:
            logger.error("speed must be positive, got %r", Config.speed)
            return 2
        if Config.length < 0:
            logger.error("length must be non-negative, got %r", Config.length)
            return 2
        initial = generate_input(Config.length, Config.seed, Config.value_range)
        return self._run_once(initial, quiet=args.quiet, no_delay=args.no_delay)

    # ------------------------------------------------------------------
    def _parse_args(self) -> argparse.Namespace:
        parser = argparse.ArgumentParser(
            prog="sort-stream", description="Run a paced, streamed sort."
        )
        parser.add_argument("--config", help="JSON or YAML configuration file")
        parser.add_argument("--length", type=int, help="Number of elements")
        parser.add_argument("--seed", type=int, help="Seed for the input generator")
        parser.add_argument(
            "--algorithm", choices=sorted(ENGINES), help="Sorting engine to run"
        )
        parser.add_argument("--speed", type=float, help="Pacing speed multiplier")
        parser.add_argument(
            "--no-delay", action="store_true", help="Disable all pacing delays"
        )
        parser.add_argument("--trace-out", dest="trace_file", help="Write trace here")
        parser.add_argument("--summary-log", dest="summary_log", help="JSONL summary file")
        parser.add_argument(
            "--frame-interval", type=float, help="Seconds between rendered frames"
        )
        parser.add_argument("--log-level", dest="log_level", help="Logging level")
        parser.add_argument(
            "--quiet", action="store_true", help="Do not render intermediate frames"
        )
        return parser.parse_args(self.argv)

    @staticmethod
    def _apply_overrides(args: argparse.Namespace) -> None:
        """Apply CLI overrides back onto :class:`Config`."""
        for key in (
            "length",
            "seed",
            "algorithm",
            "speed",
            "trace_file",
            "summary_log",
            "frame_interval",
            "log_level",
        ):
            value = getattr(args, key, None)
            if value is not None:
                setattr(Config, key, value)

    def _run_once(self, initial: List[Element], quiet: bool, no_delay: bool) -> int:
        engine = get_engine(Config.algorithm)
        sequence = list(initial)
        context = RunContext(pacing=Config.pacing_policy(no_delay=no_delay))
        sender, receiver = channel()

        def _show(mirror: Mirror) -> None:
            print("\033[2J\033[H" + render_frame(mirror), flush=True)

        consumer = ConsumerWorker(
            receiver,
            initial,
            on_frame=None if quiet else _show,
            frame_interval=Config.frame_interval,
            keep_trace=True,
        )
        worker = EngineWorker(engine, sequence, sender, context)

        logger.info(
            "sorting %d elements with %r (seed=%s)",
            len(initial),
            Config.algorithm,
            Config.seed,
        )
        started = time.perf_counter()
        consumer.start()
        worker.start()
        try:
            worker.join()
        except KeyboardInterrupt:
            logger.warning("interrupted; cancelling engine")
            worker.stop()
            worker.join()
        consumer.join()
        elapsed = time.perf_counter() - started

        trace = consumer.trace or []
        if worker.error is not None or consumer.error is not None:
            logger.error("run failed: engine=%r consumer=%r", worker.error, consumer.error)
            return 1

        results = {} if worker.cancelled else checks.from_run(
            initial, trace, sequence, mirror=consumer.mirror.elements()
        )
        failed = [name for name, ok in results.items() if not ok]
        verified = not worker.cancelled and not failed

        if Config.trace_file:
            count = save_trace(Config.trace_file, initial, trace)
            logger.info("wrote %d operations to %s", count, Config.trace_file)

        summary = RunSummaryLog(
            payload=RunSummaryPayload(
                algorithm=Config.algorithm,
                length=len(initial),
                seed=Config.seed,
                emitted=context.stats.emitted,
                dropped=context.stats.dropped,
                applied=consumer.applied,
                by_kind=dict(context.stats.by_kind),
                elapsed_s=elapsed,
                cancelled=worker.cancelled,
                verified=verified,
                failed_checks=failed,
            )
        )
        self._write_summary(summary)

        if failed:
            logger.error("invariant checks failed: %s", ", ".join(failed))
        print(render_frame(consumer.mirror))
        print(
            f"{'VERIFIED' if verified else 'NOT VERIFIED'} | "
            f"{context.stats.emitted} ops | {context.stats.dropped} dropped | "
            f"{elapsed:.2f}s"
        )
        return 0 if verified else 1

    @staticmethod
    def _write_summary(summary: RunSummaryLog) -> None:
        logger.debug("run summary: %s", summary.model_dump_json())
        if not Config.summary_log:
            return
        path = Path(Config.summary_log)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a") as fh:
            fh.write(summary.model_dump_json() + "\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Console entrypoint for ``sort-stream``."""
    return MainService(argv=argv).run()


if __name__ == "__main__":
    sys.exit(main())
