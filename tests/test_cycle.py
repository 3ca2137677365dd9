"""End-to-end behaviour of one or more reporting cycles against a fake job."""

from __future__ import annotations

import threading

from neptune_reporter.reporting import (
    ChannelRegistry,
    ChartRegistry,
    CounterSample,
    GaugeSample,
    MeterSample,
    RegistrySnapshot,
    ReporterMetrics,
    ReportingCycle,
    SnapshotSample,
    TimerSample,
)
from neptune_reporter.reporting.cycle import APPEND_FAILURE, CREATION_FAILURE, IDLE, OK, UNSUPPORTED


def build_cycle(job, clock, metrics=None) -> ReportingCycle:
    return ReportingCycle(ChannelRegistry(job), ChartRegistry(job), clock=clock, metrics=metrics)


def timer_sample() -> TimerSample:
    return TimerSample(
        rate=MeterSample(count=4, one_minute_rate=1.0, five_minute_rate=2.0, fifteen_minute_rate=3.0, mean_rate=0.5),
        snapshot=SnapshotSample(
            median=5.0, p75=6.0, p95=7.0, p98=8.0, p99=9.0, p999=42.0, min=1.0, max=50.0, mean=6.5, std_dev=1.2
        ),
    )


def test_counter_and_gauge_end_to_end(fake_job, clock):
    cycle = build_cycle(fake_job, clock)
    snapshot = RegistrySnapshot(
        counters={"requests": CounterSample(5)},
        gauges={"temp": GaugeSample(98.6)},
    )

    report = cycle.report(snapshot)

    assert sorted(fake_job.channels) == ["counter_requests", "gauge_temp"]
    assert fake_job.channels["counter_requests"].points == [(report.timestamp, 5.0)]
    assert fake_job.channels["gauge_temp"].points == [(report.timestamp, 98.6)]
    assert sorted(fake_job.charts) == ["counter_requests", "gauge_temp"]
    for name, chart in fake_job.charts.items():
        assert [ch.name for ch in chart.channels] == [name]
    assert report.points_sent == 2
    assert report.failure_count == 0
    assert cycle.state == IDLE


def test_consecutive_cycles_reuse_channels(fake_job, clock):
    cycle = build_cycle(fake_job, clock)

    first = cycle.report(RegistrySnapshot(counters={"requests": CounterSample(5)}))
    second = cycle.report(RegistrySnapshot(counters={"requests": CounterSample(9)}))

    points = fake_job.channels["counter_requests"].points
    assert points == [(first.timestamp, 5.0), (second.timestamp, 9.0)]
    assert first.timestamp < second.timestamp
    assert fake_job.channel_calls == ["counter_requests"]
    assert fake_job.chart_calls == ["counter_requests"]


def test_non_numeric_gauge_is_skipped_without_remote_calls(fake_job, clock):
    cycle = build_cycle(fake_job, clock)

    report = cycle.report(RegistrySnapshot(gauges={"status": GaugeSample("green")}))

    assert fake_job.channel_calls == []
    assert fake_job.chart_calls == []
    assert [r.status for r in report.results] == [UNSUPPORTED]
    assert report.failure_count == 0


def test_malformed_meter_is_skipped_and_cycle_continues(fake_job, clock):
    metrics = ReporterMetrics(log_interval_s=0)
    cycle = build_cycle(fake_job, clock, metrics=metrics)
    snapshot = RegistrySnapshot(
        meters={
            "bad": MeterSample(1, "n/a", 1.0, 1.0, 1.0),
            "good": MeterSample(2, 1.0, 1.0, 1.0, 1.0),
        },
        timers={"latency": timer_sample()},
    )

    report = cycle.report(snapshot)

    assert [(r.metric_name, r.status) for r in report.results] == [
        ("bad", UNSUPPORTED),
        ("good", OK),
        ("latency", OK),
        ("latency", OK),
    ]
    assert "n/a" in report.results[0].error
    assert not any(name.startswith("meter_bad") for name in fake_job.channel_calls)
    assert fake_job.channels["meter_good_count"].points == [(report.timestamp, 2.0)]
    assert metrics.counters()["unsupported_samples"] == 1
    assert metrics.counters()["cycles_completed"] == 1


def test_gauge_too_large_for_float_does_not_abort_cycle(fake_job, clock):
    cycle = build_cycle(fake_job, clock)
    snapshot = RegistrySnapshot(gauges={"a": GaugeSample(10**400), "b": GaugeSample(1.0)})

    report = cycle.report(snapshot)

    assert [r.status for r in report.results] == [UNSUPPORTED, OK]
    assert "gauge_a" not in fake_job.channels
    assert fake_job.channels["gauge_b"].points == [(report.timestamp, 1.0)]


def test_categories_processed_in_fixed_order(fake_job, clock):
    cycle = build_cycle(fake_job, clock)
    snapshot = RegistrySnapshot(
        counters={"b": CounterSample(1), "a": CounterSample(2)},
        gauges={"g": GaugeSample(1.0)},
        meters={"m": MeterSample(1, 1.0, 1.0, 1.0, 1.0)},
        timers={"t": timer_sample()},
    )

    report = cycle.report(snapshot)

    assert [(r.kind, r.metric_name) for r in report.results] == [
        ("counter", "a"),
        ("counter", "b"),
        ("gauge", "g"),
        ("meter", "m"),
        ("timer_rate", "t"),
        ("timer_snapshot", "t"),
    ]
    assert fake_job.channel_calls[:3] == ["counter_a", "counter_b", "gauge_g"]
    assert fake_job.channel_calls[3] == "meter_m_count"


def test_timer_publishes_rates_and_distribution(fake_job, clock):
    cycle = build_cycle(fake_job, clock)

    report = cycle.report(RegistrySnapshot(timers={"db": timer_sample()}))

    assert fake_job.channels["timer_db_p999"].points == [(report.timestamp, 42.0)]
    assert fake_job.channels["timer_db_1M"].points == [(report.timestamp, 1.0)]
    # mean rate and mean duration share the timer's _mean channel
    assert fake_job.channels["timer_db_mean"].points == [(report.timestamp, 0.5), (report.timestamp, 6.5)]
    assert sorted(fake_job.charts) == ["timer_db_count", "timer_db_distribution", "timer_db_rates"]
    assert len(fake_job.charts["timer_db_distribution"].channels) == 10
    assert all(result.status == OK for result in report.results)


def test_creation_failure_aborts_only_that_metric(fake_job, clock):
    metrics = ReporterMetrics(log_interval_s=0)
    cycle = build_cycle(fake_job, clock, metrics=metrics)
    fake_job.fail_create.add("counter_bad")

    report = cycle.report(
        RegistrySnapshot(counters={"bad": CounterSample(1), "good": CounterSample(2)}),
    )

    statuses = {r.metric_name: r.status for r in report.results}
    assert statuses == {"bad": CREATION_FAILURE, "good": OK}
    assert fake_job.channels["counter_good"].points == [(report.timestamp, 2.0)]
    assert report.failure_count == 1
    assert metrics.counters()["creation_failures"] == 1
    assert metrics.counters()["cycles_completed"] == 1


def test_append_failure_is_reported_and_cycle_continues(fake_job, clock):
    cycle = build_cycle(fake_job, clock)
    fake_job.fail_send.add("gauge_a")

    report = cycle.report(RegistrySnapshot(gauges={"a": GaugeSample(1.0), "b": GaugeSample(2.0)}))

    failed = report.failures
    assert [(r.metric_name, r.status) for r in failed] == [("a", APPEND_FAILURE)]
    assert "gauge_a" not in fake_job.charts
    assert fake_job.channels["gauge_b"].points == [(report.timestamp, 2.0)]
    assert report.summary()["append_failures"] == 1


def test_overlapping_report_is_skipped(fake_job, clock):
    entered = threading.Event()
    release = threading.Event()
    metrics = ReporterMetrics(log_interval_s=0)

    class BlockingJob(type(fake_job)):
        def create_numeric_channel(self, name):
            entered.set()
            release.wait(2.0)
            return super().create_numeric_channel(name)

    job = BlockingJob()
    cycle = build_cycle(job, clock, metrics=metrics)
    snapshot = RegistrySnapshot(counters={"c": CounterSample(1)})
    worker = threading.Thread(target=cycle.report, args=(snapshot,))
    worker.start()
    assert entered.wait(2.0)

    skipped = cycle.report(snapshot)
    release.set()
    worker.join()

    assert skipped.skipped is True
    assert skipped.results == ()
    assert metrics.counters()["cycles_skipped"] == 1
    assert job.channels["counter_c"].points == [(100.0, 1.0)]
