"""Unit tests for XID values, the counter, the identity seed and the generator."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from core.errors import MalformedInput
from identifier import XID, Generator, IdentitySeed, MonotonicCounter, new_xid
from identifier.counter import COUNTER_MASK
from identifier.seed import fold_pid, get_identity_seed

FIXED_TIME = 1_600_000_000

EXAMPLE = XID(bytes.fromhex("5f5e1000") + b"\x01\x02\x03" + b"\x0a\x0b" + b"\x00\x00\x01")


class TestXID:
    """Tests for the XID value type and its accessors."""

    def test_field_extraction(self):
        """Accessors project each field out of the layout."""
        assert EXAMPLE.timestamp == 1_600_000_000
        assert EXAMPLE.time() == datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)
        assert EXAMPLE.machine.hex() == "010203"
        assert EXAMPLE.pid == 0x0A0B
        assert EXAMPLE.counter == 1

    def test_pack_matches_layout(self):
        """pack() writes fields big-endian at their offsets."""
        assert XID.pack(1_600_000_000, b"\x01\x02\x03", 0x0A0B, 1) == EXAMPLE

    def test_string_forms(self):
        """str() is the text form and from_string() reverses it."""
        assert str(EXAMPLE) == "btf10001081gk2o0000g"
        assert XID.from_string("btf10001081gk2o0000g") == EXAMPLE
        assert repr(EXAMPLE) == "XID('btf10001081gk2o0000g')"

    def test_bytes(self):
        """bytes() gives the raw 12 bytes."""
        assert len(bytes(EXAMPLE)) == 12
        assert XID.from_bytes(bytes(EXAMPLE)) == EXAMPLE

    @pytest.mark.parametrize("length", [0, 11, 13])
    def test_wrong_length_rejected(self, length):
        """Only 12-byte values are identifiers."""
        with pytest.raises(MalformedInput):
            XID(bytes(length))

    def test_immutable(self):
        """Attributes cannot be reassigned."""
        with pytest.raises(AttributeError):
            EXAMPLE._raw = bytes(12)

    def test_ordering_and_hash(self):
        """XIDs order by raw bytes and hash by value."""
        later = XID.pack(1_600_000_001, b"\x00\x00\x00", 0, 0)
        assert EXAMPLE < later
        assert sorted([later, EXAMPLE]) == [EXAMPLE, later]
        assert len({EXAMPLE, XID(bytes(EXAMPLE))}) == 1
        assert EXAMPLE != bytes(EXAMPLE)

    def test_nil(self):
        """NIL is the all-zero id."""
        assert XID.NIL.is_nil()
        assert str(XID.NIL) == "0" * 20
        assert not EXAMPLE.is_nil()

    def test_to_dict(self):
        """to_dict() exposes the decoded fields."""
        assert EXAMPLE.to_dict() == {
            "id": "btf10001081gk2o0000g",
            "time": 1_600_000_000,
            "machine": "010203",
            "process": 0x0A0B,
            "counter": 1,
        }

    def test_timestamp_wraps(self):
        """Timestamps beyond 32 bits wrap instead of failing."""
        assert XID.pack(2**32 + 5, b"\x00\x00\x00", 0, 0).timestamp == 5


class TestMonotonicCounter:
    """Tests for the monotonic counter."""

    def test_post_increment_value(self):
        """next() returns the incremented value."""
        counter = MonotonicCounter(seed=41)
        assert counter.next() == 42
        assert counter.next() == 43

    def test_wraparound(self):
        """2^24 - 1 wraps to 0."""
        counter = MonotonicCounter(seed=16_777_214)
        assert counter.next() == 16_777_215
        assert counter.next() == 0
        assert counter.next() == 1

    def test_random_seed_in_range(self):
        """Default seed lies within 24 bits."""
        for _ in range(50):
            assert 0 <= MonotonicCounter().current <= COUNTER_MASK

    def test_issued(self):
        """issued counts every value handed out."""
        counter = MonotonicCounter(seed=0)
        for _ in range(7):
            counter.next()
        assert counter.issued == 7

    def test_concurrent_next(self):
        """Concurrent callers get distinct, gap-free values."""
        counter = MonotonicCounter(seed=COUNTER_MASK - 500)
        threads, per_thread = 8, 2000
        results = [[] for _ in range(threads)]

        def worker(index):
            for _ in range(per_thread):
                results[index].append(counter.next())

        pool = [threading.Thread(target=worker, args=(i,)) for i in range(threads)]
        for thread in pool:
            thread.start()
        for thread in pool:
            thread.join()

        values = [value for chunk in results for value in chunk]
        total = threads * per_thread
        assert len(set(values)) == total
        expected = {(COUNTER_MASK - 500 + i) & COUNTER_MASK for i in range(1, total + 1)}
        assert set(values) == expected
        for chunk in results:
            unwrapped = [(v - (COUNTER_MASK - 500)) & COUNTER_MASK for v in chunk]
            assert unwrapped == sorted(unwrapped)


class TestIdentitySeed:
    """Tests for machine and process discriminators."""

    def test_machine_from_host(self):
        """Machine bytes are the low 3 bytes of the host hash."""
        import zlib
        seed = IdentitySeed(host_source=lambda: "test-host", pid_source=lambda: 1)
        expected = (zlib.crc32(b"test-host") & 0xFFFFFF).to_bytes(3, "big")
        assert seed.machine() == expected
        assert not seed.random_machine

    def test_machine_fallback_random(self):
        """Missing host identity falls back to stable random bytes."""
        seed = IdentitySeed(host_source=lambda: None, pid_source=lambda: 1)
        first = seed.machine()
        assert len(first) == 3
        assert seed.machine() == first
        assert seed.random_machine

    def test_process_folded(self):
        """Large pids fold to 16 bits."""
        assert fold_pid(0x0A0B) == 0x0A0B
        assert fold_pid(0x12345) == 0x2345
        seed = IdentitySeed(host_source=lambda: "h", pid_source=lambda: 4_194_304 + 7)
        assert seed.process() == 7

    def test_computed_once(self):
        """Sources are consulted once even under concurrent first use."""
        calls = []

        def host():
            calls.append(1)
            return "host"

        seed = IdentitySeed(host_source=host, pid_source=lambda: 3)
        with ThreadPoolExecutor(max_workers=8) as pool:
            machines = list(pool.map(lambda _: seed.machine(), range(64)))
        assert len(calls) == 1
        assert len(set(machines)) == 1

    def test_default_seed_shared(self):
        """get_identity_seed() returns one seed per process."""
        assert get_identity_seed() is get_identity_seed()
        assert len(get_identity_seed().machine()) == 3


class TestGenerator:
    """Tests for XID generation."""

    def test_generate_composes_fields(self, generator, seed):
        """Generated ids carry clock, seed and counter."""
        xid = generator.generate()
        assert xid.timestamp == FIXED_TIME
        assert xid.machine == seed.machine()
        assert xid.pid == 0x0A0B
        assert xid.counter == 1

    def test_same_second_ordered_by_counter(self, generator):
        """Ids in one second differ only by an increasing counter."""
        ids = [generator.generate() for _ in range(100)]
        assert [xid.counter for xid in ids] == list(range(1, 101))
        assert ids == sorted(ids)
        assert [str(x) for x in ids] == sorted(str(x) for x in ids)

    def test_fractional_clock_truncated(self, seed, counter):
        """Sub-second clock values are truncated."""
        gen = Generator(seed=seed, counter=counter, clock=lambda: 1_600_000_000.999)
        assert gen.generate().timestamp == 1_600_000_000

    def test_generate_at(self, generator):
        """generate_at() accepts datetimes and seconds."""
        when = datetime(2021, 1, 1, tzinfo=timezone.utc)
        assert generator.generate_at(when).timestamp == int(when.timestamp())
        assert generator.generate_at(123).timestamp == 123

    def test_round_trip(self):
        """decode(encode(i)) == i for generated ids."""
        for _ in range(100):
            xid = new_xid()
            assert XID.from_string(str(xid)) == xid
            assert len(str(xid)) == 20
            assert len(bytes(xid)) == 12

    def test_concurrent_generation_unique(self, seed):
        """Ids generated from many threads never collide."""
        gen = Generator(seed=seed, counter=MonotonicCounter(seed=0), clock=lambda: FIXED_TIME)
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: gen.generate(), range(5000)))
        assert len(set(ids)) == 5000
        assert sorted(xid.counter for xid in ids) == list(range(1, 5001))

    def test_new_xid_uses_current_time(self):
        """Default generator stamps the wall clock."""
        before = int(datetime.now(timezone.utc).timestamp())
        xid = new_xid()
        after = int(datetime.now(timezone.utc).timestamp())
        assert before <= xid.timestamp <= after
