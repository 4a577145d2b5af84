from __future__ import annotations

import pytest

from kafka_gateway.core.broker.partitioning import (
    KeyBalancer,
    LeastBytesBalancer,
    make_balancer,
)


class TestLeastBytesBalancer:
    def test_ties_go_to_lowest_partition(self):
        balancer = LeastBytesBalancer()

        assert balancer.choose({2, 0, 1}, 10) == 0
        assert balancer.choose({2, 0, 1}, 10) == 1

    def test_prefers_least_written(self):
        balancer = LeastBytesBalancer()

        balancer.choose([0, 1], 100)  # -> 0
        balancer.choose([0, 1], 10)  # -> 1
        balancer.choose([0, 1], 10)  # -> 1

        assert balancer.written == {0: 100, 1: 20}
        assert balancer.choose([0, 1], 1) == 1

    def test_resets_when_partitions_change(self):
        balancer = LeastBytesBalancer()
        balancer.choose([0], 50)

        assert balancer.choose([0, 1], 5) == 0
        assert balancer.written == {0: 5, 1: 0}

    def test_no_partitions(self):
        assert LeastBytesBalancer().choose([], 10) is None


def test_key_balancer_defers():
    assert KeyBalancer().choose([0, 1, 2], 10) is None


def test_make_balancer():
    assert isinstance(make_balancer("least_bytes"), LeastBytesBalancer)
    assert isinstance(make_balancer("key"), KeyBalancer)
    with pytest.raises(ValueError):
        make_balancer("round_robin")
