import pytest

from minechain.facade import ProbabilityFacade, RequestKind


def test_empty_batches_are_noops(center_mine_clues):
    facade = ProbabilityFacade(center_mine_clues, 1)

    assert facade.add_squares([]) is False
    assert facade.add_squares([(3, 3), (1, 1)]) is False
    assert facade.fulfill_request(RequestKind.SAFES) == ([], (0,))


def test_requests_read_the_latest_sets(center_mine_clues):
    facade = ProbabilityFacade(center_mine_clues, 1)
    assert facade.add_squares([(0, 0)]) is True
    facade.add_squares([(1, 0)])
    facade.add_squares([(0, 1)])

    flags, fingerprint = facade.fulfill_request("flags")
    safes, same_fingerprint = facade.fulfill_request(RequestKind.SAFES)
    lowest, _ = facade.fulfill_request("lowest")

    assert flags == [(1, 1)]
    assert safes == sorted(safes)
    assert (2, 2) in safes
    assert not set(flags) & set(safes)
    assert set(lowest) <= set(safes)
    assert fingerprint == same_fingerprint == (0b11 | 1 << 3,)


def test_fulfill_request_does_not_recompute(center_mine_clues):
    facade = ProbabilityFacade(center_mine_clues, 1)
    facade.add_squares([(0, 0)])
    before = facade.classification

    facade.fulfill_request("lowest")
    facade.fulfill_request("safes")

    assert facade.classification is before


def test_fulfill_request_rejects_unknown_kind(center_mine_clues):
    facade = ProbabilityFacade(center_mine_clues, 1)
    with pytest.raises(ValueError):
        facade.fulfill_request("mines")
