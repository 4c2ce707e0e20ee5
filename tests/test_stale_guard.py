from orchestrator.stale_guard import StaleGuard


def test_latest_batch_for_current_term_is_live():
    current = {"term": "cat"}
    guard = StaleGuard(lambda: current["term"])
    tag = guard.issue("cat")
    assert guard.is_latest(tag)
    assert guard.is_live(tag)


def test_older_batch_is_stale_even_if_it_completes_last():
    current = {"term": "ca"}
    guard = StaleGuard(lambda: current["term"])
    first = guard.issue("ca")
    current["term"] = "cat"
    second = guard.issue("cat")

    assert guard.is_live(second)
    assert not guard.is_live(first)
    assert not guard.is_latest(first)


def test_latest_batch_is_stale_once_term_moves_on():
    current = {"term": "cat"}
    guard = StaleGuard(lambda: current["term"])
    tag = guard.issue("cat")
    current["term"] = "cats"
    assert guard.is_latest(tag)
    assert not guard.is_live(tag)


def test_invalidate_makes_outstanding_batches_stale():
    guard = StaleGuard(lambda: "cat")
    tag = guard.issue("cat")
    guard.invalidate()
    assert not guard.is_live(tag)
    assert guard.latest_batch_id == tag.batch_id + 1
