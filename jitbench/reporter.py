# jitbench/reporter.py
#
# Prints one human-readable line per completed trial. Results are written
# as soon as the runner yields them and are not kept afterwards.

import sys

from .config import ConfigurationError

REPORT_FORMATS = ("text", "table")

_TABLE_RULE = "-" * 48


class TrialReporter:
    """
    Writes trial results to a stream.

    Example:
        reporter = TrialReporter()
        reporter.report(run_benchmark(workload, config))
    """
    def __init__(self, stream=None, fmt="text"):
        if fmt not in REPORT_FORMATS:
            raise ConfigurationError(f"Unknown report format {fmt!r}. Expected one of: {', '.join(REPORT_FORMATS)}")
        self.stream = stream if stream is not None else sys.stdout
        self.fmt = fmt
        self._header_written = False

    def _write(self, line):
        print(line, file=self.stream, flush=True)

    def emit(self, result):
        if self.fmt == "table":
            if not self._header_written:
                self._write(f"{'Trial':>5} | {'Result':>20} | {'Time (ms)':>14}")
                self._write(_TABLE_RULE)
                self._header_written = True
            self._write(f"{result.trial_index:>5} | {result.accumulated_value:>20} | {result.elapsed_ms:>14.3f}")
        else:
            self._write(
                f"Run {result.trial_index}: Result={result.accumulated_value}, "
                f"Time={result.elapsed_ms:.3f}ms"
            )

    def report(self, results) -> int:
        """Emits every result in the order it arrives. Returns the number of trials reported."""
        count = 0
        for result in results:
            self.emit(result)
            count += 1
        if self._header_written:
            self._write(_TABLE_RULE)
            self._header_written = False
        return count
