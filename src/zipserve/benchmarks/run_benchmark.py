import tempfile
import time
from pathlib import Path

from ..core.dispatcher import ContentDispatcher
from ..core.models import Benchmarks, CoreZip
from ..utils.common import PathLike, get_logger



SHARED = "shared handle"
REOPEN = "reopen per request"
DEFAULT_TOTAL_RUNS = 5
DEFAULT_TOTAL_ENTRIES = 200



def build_benchmark_archive(archive_file: PathLike, num_entries: int) -> list[str]:
    """Write an archive mixing markup and raw entries; return the request paths."""
    requests = []
    with CoreZip.ZipFile(archive_file, "w", compression=CoreZip.ZIP_DEFLATED) as zf:
        for idx in range(num_entries):
            match idx % 3:
                case 0:
                    zf.writestr(f"page{idx}.md", f"# Page {idx}\n\nSome *text* for page {idx}.\n")
                    requests.append(f"page{idx}")
                case 1:
                    zf.writestr(f"page{idx}.html", f"<h1>Page {idx}</h1>")
                    requests.append(f"page{idx}")
                case _:
                    zf.writestr(f"data{idx}.json", '{"idx": %d}' % idx)
                    requests.append(f"data{idx}.json")
    return requests


def benchmark_dispatcher(archive_file: PathLike, requests: list[str], num_runs: int, reopen: bool) -> Benchmarks:
    timings = []

    def time_process():
        start = time.perf_counter()
        with ContentDispatcher(archive_file, reopen=reopen, verbose=False) as dispatcher:
            for path in requests:
                dispatcher.dispatch(path)
        return time.perf_counter() - start

    # Warmup (Cold-start)
    timings.append(time_process())

    for _ in range(num_runs):
        timings.append(time_process())

    return Benchmarks(REOPEN if reopen else SHARED, timings, requests=len(requests))


def run_benchmarks(num_runs=DEFAULT_TOTAL_RUNS, num_entries=DEFAULT_TOTAL_ENTRIES):
    logger = get_logger()
    num_runs = max(num_runs, 1)
    logger.info(f"\nBenchmark started [RUNS={num_runs}, ENTRIES={num_entries}]")

    with tempfile.TemporaryDirectory() as tmp:
        archive_file = Path(tmp) / "benchmark.zip"
        requests = build_benchmark_archive(archive_file, num_entries)

        shared = benchmark_dispatcher(archive_file, requests, num_runs, reopen=False)
        reopen = benchmark_dispatcher(archive_file, requests, num_runs, reopen=True)

    logger.info("".join(map(repr, (shared, reopen))))

    if shared.is_faster(reopen):
        logger.info(f"{SHARED} is {reopen / shared:.2f}x FASTER than {REOPEN}")
    else:
        logger.info(f"{SHARED} is {shared / reopen:.2f}x SLOWER than {REOPEN}")
    return shared, reopen


if __name__ == "__main__":
    run_benchmarks()
