"""Test processors."""

import pytest
from egresswatch.config import parse_csv
from egresswatch.processors import (
    ExternalIPFilter,
    IgnoreListFilter,
    ProcessorPipeline,
    has_external_ip,
)

@pytest.mark.parametrize("ips", [
    {"54.1.2.3"},
    {"10.0.0.5", "8.8.8.8"},
    {"172.32.0.1"},
    {"100.128.0.1"},
    {"2001:db8::1"},
    {"not-an-ip", "1.1.1.1"},
])
def test_has_external_ip(ips):
    assert has_external_ip(ips)

@pytest.mark.parametrize("ips", [
    set(),
    {"10.0.0.5"},
    {"127.0.0.1", "192.168.1.10", "172.16.5.4", "172.31.255.255"},
    {"100.64.0.1", "100.127.255.254"},
    {"::ffff:10.1.2.3"},
    {"garbage", "999.1.1.1"},
])
def test_has_no_external_ip(ips):
    assert not has_external_ip(ips)

def test_custom_private_ranges():
    assert not has_external_ip({"54.1.2.3"}, cidrs=["54.0.0.0/8"])

@pytest.mark.asyncio
async def test_external_ip_filter(make_intent):
    processor = ExternalIPFilter()

    assert await processor.process(make_intent(ips=["54.1.2.3"])) is not None
    assert await processor.process(make_intent(ips=["10.0.0.5"])) is None

@pytest.mark.asyncio
async def test_ignore_list_filter(make_intent):
    processor = IgnoreListFilter(names=parse_csv(" coredns , kube-dns "), namespaces={"kube-system"})

    assert await processor.process(make_intent(name="coredns")) is None
    assert await processor.process(make_intent(name="kube-dns")) is None
    assert await processor.process(make_intent(namespace="kube-system")) is None

    # Exact match only
    assert await processor.process(make_intent(name="coredns-2")) is not None

@pytest.mark.asyncio
async def test_pipeline_stops_at_first_drop(make_intent):
    pipeline = ProcessorPipeline([ExternalIPFilter(), IgnoreListFilter(names={"pay-svc"})])

    assert await pipeline.run(make_intent(ips=["10.0.0.5"])) is None
    assert pipeline.dropped_by == "ExternalIPFilter"
    assert await pipeline.run(make_intent()) is None
    assert pipeline.dropped_by == "IgnoreListFilter"
    kept = await pipeline.run(make_intent(name="billing"))
    assert kept is not None
    assert pipeline.dropped_by is None
    assert kept.client.name == "billing"

@pytest.mark.asyncio
async def test_pipeline_logs_dropping_processor(make_intent, log_messages):
    pipeline = ProcessorPipeline([ExternalIPFilter()])

    await pipeline.run(make_intent(ips=["192.168.0.7"]))

    dropped = [r for r in log_messages if r["message"] == "Intent dropped"]
    assert len(dropped) == 1
    assert dropped[0]["extra"]["dropped_by"] == "ExternalIPFilter"
