"""Runtime profiling endpoints under /debug/pprof."""

from collections import Counter
import gc
import sys
import threading
import time
import traceback

from fastapi import APIRouter, Query
from starlette.concurrency import run_in_threadpool
from starlette.responses import PlainTextResponse

router = APIRouter(prefix="/debug/pprof", include_in_schema=False)

PROFILES = {
    "cmdline": "The command line invocation of the current program",
    "profile": "Stack samples of every thread; seconds sets the duration",
    "goroutine": "Stack traces of all current threads",
    "threadcreate": "Threads currently alive",
    "heap": "Live objects tracked by the garbage collector, by type",
    "allocs": "Same as heap, plus collector statistics",
}

MAX_PROFILE_SECONDS = 60.0
SAMPLE_INTERVAL = 0.01


@router.get("/")
async def index() -> PlainTextResponse:
    lines = ["/debug/pprof/", ""]
    lines.extend(f"{name:<14}{desc}" for name, desc in PROFILES.items())
    return PlainTextResponse("\n".join(lines) + "\n")


@router.get("/cmdline")
async def cmdline() -> PlainTextResponse:
    return PlainTextResponse("\x00".join(sys.argv))


def _thread_names():
    return {t.ident: t.name for t in threading.enumerate()}


def _sample(seconds: float) -> str:
    """Sample the innermost frame of every other thread until ``seconds`` elapse."""
    me = threading.get_ident()
    hits: Counter = Counter()
    samples = 0
    deadline = time.monotonic() + seconds

    while True:
        for ident, frame in sys._current_frames().items():
            if ident == me:
                continue
            code = frame.f_code
            hits[f"{code.co_name} ({code.co_filename}:{frame.f_lineno})"] += 1
        samples += 1
        if time.monotonic() >= deadline:
            break
        time.sleep(SAMPLE_INTERVAL)

    lines = [f"duration: {seconds:.2f}s", f"samples: {samples}", ""]
    lines.extend(f"{count:>8}  {where}" for where, count in hits.most_common())
    return "\n".join(lines) + "\n"


@router.get("/profile")
async def profile(seconds: float = Query(30.0, gt=0, le=MAX_PROFILE_SECONDS)) -> PlainTextResponse:
    return PlainTextResponse(await run_in_threadpool(_sample, seconds))


@router.get("/goroutine")
async def goroutine() -> PlainTextResponse:
    names = _thread_names()
    frames = sys._current_frames()
    chunks = [f"threads: {len(frames)}", ""]
    for ident, frame in frames.items():
        chunks.append(f"thread {ident} [{names.get(ident, 'unknown')}]:")
        chunks.append("".join(traceback.format_stack(frame)))
    return PlainTextResponse("\n".join(chunks))


@router.get("/threadcreate")
async def threadcreate() -> PlainTextResponse:
    threads = threading.enumerate()
    lines = [f"threads: {len(threads)}", ""]
    lines.extend(f"{t.ident} {t.name} daemon={t.daemon}" for t in threads)
    return PlainTextResponse("\n".join(lines) + "\n")


def _heap(limit: int = 50) -> list:
    counts = Counter(type(o).__name__ for o in gc.get_objects())
    lines = [f"objects: {sum(counts.values())}", ""]
    lines.extend(f"{n:>10}  {name}" for name, n in counts.most_common(limit))
    return lines


@router.get("/heap")
async def heap() -> PlainTextResponse:
    return PlainTextResponse("\n".join(_heap()) + "\n")


@router.get("/allocs")
async def allocs() -> PlainTextResponse:
    lines = _heap()
    lines.append("")
    for generation, stats in enumerate(gc.get_stats()):
        lines.append(
            f"gen{generation}: collections={stats['collections']} "
            f"collected={stats['collected']} uncollectable={stats['uncollectable']}"
        )
    return PlainTextResponse("\n".join(lines) + "\n")
