"""Tests for services/code_store.py."""

import re
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from conftest import FakeClock
from nft_vote.services.code_store import CodeStore, generate_otp, normalize_email
from nft_vote.storage.memory import InMemoryCodeRepository


@pytest.fixture
def repo():
    return InMemoryCodeRepository()


@pytest.fixture
def store(repo, clock):
    return CodeStore(repo, ttl_seconds=600, clock=clock)


class TestGenerateOtp:

    def test_always_six_digits(self):
        """Codes are exactly six digits, leading zeros included."""
        for _ in range(200):
            assert re.fullmatch(r"\d{6}", generate_otp(6))

    def test_length_is_configurable(self):
        assert len(generate_otp(8)) == 8


class TestIssueAndVerify:

    def test_code_verifies_exactly_once(self, store):
        code = store.issue("a@b.com")

        assert store.verify("a@b.com", code) is True
        assert store.verify("a@b.com", code) is False

    def test_unknown_email_fails(self, store):
        assert store.verify("nobody@example.com", "123456") is False

    def test_wrong_code_does_not_consume(self, store):
        code = store.issue("a@b.com")
        wrong = "000000" if code != "000000" else "111111"

        assert store.verify("a@b.com", wrong) is False
        assert store.verify("a@b.com", code) is True

    def test_empty_candidate_fails(self, store):
        store.issue("a@b.com")
        assert store.verify("a@b.com", "") is False

    def test_email_is_normalized(self, store):
        code = store.issue("  Voter@Example.COM ")
        assert store.verify("voter@example.com", code) is True

    def test_stores_only_a_hash(self, store, repo):
        code = store.issue("a@b.com")
        record = repo.get("a@b.com")
        assert record.code_hash != code
        assert code not in record.code_hash


class TestExpiry:

    def test_valid_just_before_expiry(self, store, clock: FakeClock):
        code = store.issue("a@b.com")
        clock.advance(seconds=599)
        assert store.verify("a@b.com", code) is True

    def test_expired_code_fails_and_is_evicted(self, store, repo, clock: FakeClock):
        code = store.issue("a@b.com")
        clock.advance(minutes=10, seconds=1)

        assert store.verify("a@b.com", code) is False
        assert repo.get("a@b.com") is None

    def test_issue_purges_other_expired_codes(self, store, repo, clock: FakeClock):
        store.issue("old@example.com")
        clock.advance(minutes=11)
        store.issue("new@example.com")

        assert repo.get("old@example.com") is None
        assert repo.get("new@example.com") is not None

    def test_purge_expired_returns_count(self, store, clock: FakeClock):
        store.issue("one@example.com")
        store.issue("two@example.com")
        clock.advance(minutes=30)
        assert store.purge_expired() == 2


class TestReissue:

    def test_new_code_replaces_old(self, store):
        with patch("nft_vote.services.code_store.generate_otp", side_effect=["111111", "222222"]):
            first = store.issue("a@b.com")
            second = store.issue("a@b.com")

        assert store.verify("a@b.com", first) is False
        assert store.verify("a@b.com", second) is True

    def test_reissue_resets_expiry(self, store, clock: FakeClock):
        store.issue("a@b.com")
        clock.advance(minutes=9)
        code = store.issue("a@b.com")
        clock.advance(minutes=9)
        assert store.verify("a@b.com", code) is True


class TestAttemptLimit:

    def test_code_revoked_after_max_failures(self, repo, clock):
        store = CodeStore(repo, max_attempts=3, clock=clock)
        with patch("nft_vote.services.code_store.generate_otp", return_value="424242"):
            code = store.issue("a@b.com")

        for _ in range(3):
            assert store.verify("a@b.com", "999999") is False

        assert repo.get("a@b.com") is None
        assert store.verify("a@b.com", code) is False

    def test_zero_disables_the_cap(self, repo, clock):
        store = CodeStore(repo, max_attempts=0, clock=clock)
        with patch("nft_vote.services.code_store.generate_otp", return_value="424242"):
            code = store.issue("a@b.com")

        for _ in range(10):
            store.verify("a@b.com", "999999")

        assert store.verify("a@b.com", code) is True


class ReissueAfterRead(InMemoryCodeRepository):
    """Runs ``on_read`` once, right after the next ``get`` has taken its snapshot."""

    def __init__(self):
        super().__init__()
        self.on_read = None

    def get(self, email):
        record = super().get(email)
        hook, self.on_read = self.on_read, None
        if hook:
            hook()
        return record


class TestEvictionKeepsFreshCode:

    def test_expired_eviction_spares_reissued_code(self, clock):
        repo = ReissueAfterRead()
        store = CodeStore(repo, ttl_seconds=600, clock=clock)
        with patch("nft_vote.services.code_store.generate_otp", side_effect=["111111", "730730"]):
            store.issue("a@b.com")
            clock.advance(minutes=11)
            repo.on_read = lambda: store.issue("a@b.com")

            assert store.verify("a@b.com", "111111") is False

        assert store.verify("a@b.com", "730730") is True

    def test_attempt_cap_eviction_spares_reissued_code(self, clock):
        repo = ReissueAfterRead()
        store = CodeStore(repo, max_attempts=1, clock=clock)
        with patch("nft_vote.services.code_store.generate_otp", side_effect=["111111", "730730"]):
            store.issue("a@b.com")
            repo.on_read = lambda: store.issue("a@b.com")

            assert store.verify("a@b.com", "999999") is False

        assert store.verify("a@b.com", "730730") is True


class TestConcurrency:

    def test_concurrent_verifications_succeed_once(self, store):
        code = store.issue("race@example.com")
        workers = 8
        barrier = threading.Barrier(workers)

        def attempt():
            barrier.wait()
            return store.verify("race@example.com", code)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(lambda _: attempt(), range(workers)))

        assert outcomes.count(True) == 1


def test_normalize_email():
    assert normalize_email(" A@B.Com ") == "a@b.com"
