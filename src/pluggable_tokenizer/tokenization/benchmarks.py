"""Performance benchmarking for the separators.

Runs every separator kind over generated inputs of several sizes and records
throughput and memory use, so that changes to the state machines can be checked
for performance regressions over time.
"""

import gc
import psutil
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pluggable_tokenizer.shared import get_logger
from pluggable_tokenizer.shared.config import TokenizerConfig

from .api import SeparatorTokenizer

REGRESSION_THRESHOLD = 0.05


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    separator_name: str
    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    characters_processed: int
    tokens_generated: int
    success: bool
    error_message: Optional[str] = None

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens generated per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_generated * 1000.0) / self.processing_time_ms

    @property
    def memory_per_character(self) -> float:
        """Calculate memory usage per character in bytes."""
        if self.characters_processed <= 0:
            return 0.0
        return (self.memory_used_mb * 1024 * 1024) / self.characters_processed


_METRICS = (
    "processing_time_ms",
    "memory_used_mb",
    "characters_per_second",
    "tokens_per_second",
    "memory_per_character",
)


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Separator Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        """Add a benchmark result to the suite."""
        self.results.append(result)

    def get_results_by_separator(self, separator_name: str) -> List[BenchmarkResult]:
        """Get all results for a specific separator."""
        return [r for r in self.results if r.separator_name == separator_name]

    def get_results_by_test_case(self, test_case: str) -> List[BenchmarkResult]:
        """Get all results for a specific test case."""
        return [r for r in self.results if r.test_case == test_case]

    def get_statistics(self, separator_name: str, metric: str) -> Dict[str, float]:
        """Get statistical analysis for a separator and metric.

        Args:
            separator_name: Separator whose results are analyzed
            metric: One of the ``BenchmarkResult`` measurements

        Returns:
            Min, max, mean, median, stdev and count, or an empty dict when there is
            nothing to analyze
        """
        if metric not in _METRICS:
            return {}
        values = [getattr(r, metric) for r in self.get_results_by_separator(separator_name)]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Generate a benchmark report grouped by separator and test case."""
        separators = sorted(set(r.separator_name for r in self.results))
        test_cases = sorted(set(r.test_case for r in self.results))

        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "separators": separators,
            "test_cases": test_cases,
            "summary": {},
            "detailed_results": {},
        }

        for separator in separators:
            separator_results = self.get_results_by_separator(separator)
            successful = [r for r in separator_results if r.success]
            report["summary"][separator] = {
                "total_runs": len(separator_results),
                "successful_runs": len(successful),
                "success_rate": len(successful) / len(separator_results),
                "performance": self.get_statistics(separator, "characters_per_second"),
                "memory": self.get_statistics(separator, "memory_used_mb"),
            }

        for test_case in test_cases:
            report["detailed_results"][test_case] = {
                r.separator_name: {
                    "processing_time_ms": r.processing_time_ms,
                    "memory_used_mb": r.memory_used_mb,
                    "characters_per_second": r.characters_per_second,
                    "tokens_per_second": r.tokens_per_second,
                    "success": r.success,
                    "error": r.error_message,
                }
                for r in self.get_results_by_test_case(test_case)
            }

        return report


class SeparatorBenchmark:
    """Benchmark every separator kind over generated inputs."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        warmup_runs: int = 3,
        benchmark_runs: int = 10,
        size: int = 1000
    ) -> None:
        """Initialize benchmark.

        Args:
            correlation_id: Optional correlation ID for tracking
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of benchmark runs to average
            size: Number of records in the large generated inputs
        """
        if warmup_runs < 0 or benchmark_runs < 1:
            raise ValueError("warmup_runs must be >= 0 and benchmark_runs >= 1")
        self.correlation_id = correlation_id
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.size = size
        self.logger = get_logger(__name__, correlation_id, "benchmark")

        self.configs: Dict[str, TokenizerConfig] = {
            "char": TokenizerConfig.strtok(" ,", "|"),
            "char_keep_empty": TokenizerConfig.strtok(",", keep_empty_tokens=True),
            "escaped_list": TokenizerConfig.csv(),
            "offset": TokenizerConfig.fixed_width([4, 2, 8]),
            "char_delimiters": TokenizerConfig(),
        }
        self.test_cases = self._create_test_cases()

    def _create_test_cases(self) -> Dict[str, str]:
        """Create test inputs for benchmarking."""
        records = [
            f'{i},"name {i}, jr",{i * 7 % 100}.5,,flag|{"yes" if i % 2 else "no"}'
            for i in range(self.size)
        ]
        return {
            "small_record": 'Field 1,"putting quotes around fields, allows commas",Field 3',
            "words": " ".join(f"word{i}." for i in range(self.size)),
            "large_csv": "\n".join(records),
            "large_fixed_width": "".join(f"{i:04d}AB{i * 31:08d}" for i in range(self.size)),
        }

    def _measure_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _benchmark_separator(
        self,
        separator_name: str,
        test_case: str,
        text: str
    ) -> BenchmarkResult:
        """Time one full tokenization of ``text``."""
        tokenizer = SeparatorTokenizer(self.configs[separator_name], self.correlation_id)

        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.time()

        result = tokenizer.tokenize(text)
        error_message = None
        if not result.success:
            error_message = result.diagnostics[0].message if result.diagnostics else "failed"

        processing_time = (time.time() - start_time) * 1000
        memory_used = max(0.0, self._measure_memory_usage() - memory_before)

        return BenchmarkResult(
            separator_name=separator_name,
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            characters_processed=len(text),
            tokens_generated=result.token_count,
            success=result.success,
            error_message=error_message,
        )

    def run_benchmark(self, separators: Optional[List[str]] = None) -> BenchmarkSuite:
        """Run the benchmark suite.

        Args:
            separators: Names of the separator configurations to run; all by default

        Returns:
            BenchmarkSuite with one averaged result per separator and test case
        """
        names = separators or list(self.configs)
        unknown = [name for name in names if name not in self.configs]
        if unknown:
            raise ValueError(f"Unknown separators: {', '.join(unknown)}")

        suite = BenchmarkSuite(suite_name="Separator Performance Benchmark")
        self.logger.info(
            "Starting benchmark suite",
            extra={
                "test_cases": len(self.test_cases),
                "separators": names,
                "warmup_runs": self.warmup_runs,
                "benchmark_runs": self.benchmark_runs,
            }
        )

        for test_case, text in self.test_cases.items():
            self.logger.info(f"Benchmarking test case: {test_case}")

            for name in names:
                self.logger.bind(separator_kind=self.configs[name].kind.name.lower()).debug(
                    f"Testing separator: {name}"
                )

                for _ in range(self.warmup_runs):
                    self._benchmark_separator(name, test_case, text)

                run_results = [
                    self._benchmark_separator(name, test_case, text)
                    for _ in range(self.benchmark_runs)
                ]
                successful = [r for r in run_results if r.success]
                if successful:
                    suite.add_result(BenchmarkResult(
                        separator_name=name,
                        test_case=test_case,
                        processing_time_ms=statistics.mean(r.processing_time_ms for r in successful),
                        memory_used_mb=statistics.mean(r.memory_used_mb for r in successful),
                        characters_processed=successful[0].characters_processed,
                        tokens_generated=successful[0].tokens_generated,
                        success=True,
                    ))
                else:
                    suite.add_result(BenchmarkResult(
                        separator_name=name,
                        test_case=test_case,
                        processing_time_ms=0.0,
                        memory_used_mb=0.0,
                        characters_processed=len(text),
                        tokens_generated=0,
                        success=False,
                        error_message=run_results[0].error_message,
                    ))

        self.logger.info(
            "Benchmark suite completed",
            extra={
                "total_results": len(suite.results),
                "suite_duration_seconds": time.time() - suite.timestamp,
            }
        )
        return suite

    def compare_performance(
        self,
        baseline_suite: BenchmarkSuite,
        current_suite: BenchmarkSuite
    ) -> Dict[str, Any]:
        """Compare performance between two benchmark suites.

        A change in processing time beyond 5% in either direction is reported as an
        improvement or a regression.

        Args:
            baseline_suite: Baseline benchmark results
            current_suite: Current benchmark results

        Returns:
            Performance comparison report
        """
        comparison: Dict[str, Any] = {
            "baseline_timestamp": baseline_suite.timestamp,
            "current_timestamp": current_suite.timestamp,
            "improvements": {},
            "regressions": {},
            "summary": {},
        }

        for baseline in baseline_suite.results:
            current = next(
                (
                    r for r in current_suite.get_results_by_test_case(baseline.test_case)
                    if r.separator_name == baseline.separator_name
                ),
                None,
            )
            if not (current and baseline.success and current.success):
                continue
            if baseline.processing_time_ms <= 0:
                continue

            time_change = (
                (current.processing_time_ms - baseline.processing_time_ms)
                / baseline.processing_time_ms
            )
            memory_change = (
                (current.memory_used_mb - baseline.memory_used_mb) / baseline.memory_used_mb
                if baseline.memory_used_mb > 0 else 0.0
            )
            key = f"{baseline.separator_name}_{baseline.test_case}"

            if time_change < -REGRESSION_THRESHOLD:
                comparison["improvements"][key] = {
                    "time_improvement_percent": abs(time_change) * 100,
                    "memory_change_percent": memory_change * 100,
                    "baseline_time_ms": baseline.processing_time_ms,
                    "current_time_ms": current.processing_time_ms,
                }
            elif time_change > REGRESSION_THRESHOLD:
                comparison["regressions"][key] = {
                    "time_regression_percent": time_change * 100,
                    "memory_change_percent": memory_change * 100,
                    "baseline_time_ms": baseline.processing_time_ms,
                    "current_time_ms": current.processing_time_ms,
                }

        comparison["summary"] = {
            "total_improvements": len(comparison["improvements"]),
            "total_regressions": len(comparison["regressions"]),
            "has_regressions": len(comparison["regressions"]) > 0,
        }
        return comparison
