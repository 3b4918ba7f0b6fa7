import sys
import time
from typing import Iterable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from quotagraph.history import HistoryReader
from quotagraph.localtime import HOUR_MS
from quotagraph.models import Field, HistoryResult


def _families() -> "dict[str, GaugeMetricFamily]":
    """
    creates the gauge families exposed per budget field.
     - credits_consumed: total credits consumed in the window.
     - credits_average_rate: average credits per rate bucket.
     - credits_peak_rate: highest credits in a single rate bucket.
    """
    return {
        "total": GaugeMetricFamily(
            "quotagraph_credits_consumed",
            "Credits consumed in the rolling window",
            labels=["field"],
        ),
        "average_rate": GaugeMetricFamily(
            "quotagraph_credits_average_rate",
            "Average credits consumed per rate bucket in the rolling window",
            labels=["field"],
        ),
        "peak_rate": GaugeMetricFamily(
            "quotagraph_credits_peak_rate",
            "Peak credits consumed in a single rate bucket in the rolling window",
            labels=["field"],
        ),
    }


class HistoryMetricsCollector(Collector):
    """
    exposes usage history statistics to Prometheus. Nothing is
    cached: every scrape runs a fresh query per budget field, so
    the exporter needs no refresh timer of its own.
    """

    def __init__(
        self,
        reader: "HistoryReader",
        registry: "CollectorRegistry" = REGISTRY,
        window_ms: "int" = 24 * HOUR_MS,
        rate_bucket_ms: "int" = HOUR_MS,
        fields: "Iterable[Field]" = tuple(Field),
    ) -> "None":
        self._reader = reader
        self._window_ms = window_ms
        self._rate_bucket_ms = rate_bucket_ms
        self._fields: "tuple[Field, ...]" = tuple(fields)
        self._read_errors: "Counter" = Counter(
            "quotagraph_history_read_errors_total",
            "Total number of failed history reads by field and error",
            ["field", "error"],
            registry=registry,
        )
        self._query_duration: "Histogram" = Histogram(
            "quotagraph_history_query_duration_seconds",
            "Duration of history queries",
            ["mode"],
            registry=registry,
        )
        registry.register(self)

    def describe(self) -> "Iterable[GaugeMetricFamily]":
        # describing without samples keeps registration from
        # reading the log
        return list(_families().values())

    def query(self, budget: "Field") -> "HistoryResult":
        """
        runs the rolling window query for one field and records
        the query's own metrics.
        """
        start = time.monotonic()
        # only the stats are exported; an unbounded point budget keeps
        # the raw deltas and skips downsampling
        result = self._reader.read_history(
            self._window_ms,
            budget,
            sys.maxsize,
            bucket_ms=0,
            rate_bucket_ms=self._rate_bucket_ms,
        )
        self._query_duration.labels(mode="rolling").observe(time.monotonic() - start)

        if not result.ok and result.error is not None:
            self._read_errors.labels(field=budget.value, error=result.error.value).inc()
        return result

    def collect(self) -> "Iterable[GaugeMetricFamily]":
        families = _families()

        for budget in self._fields:
            result = self.query(budget)
            # an unreadable log leaves the field without samples
            # rather than reporting zero consumption
            if not result.ok:
                continue

            families["total"].add_metric([budget.value], result.total)
            families["average_rate"].add_metric([budget.value], result.average_rate)
            families["peak_rate"].add_metric([budget.value], result.peak_rate)

        return list(families.values())
