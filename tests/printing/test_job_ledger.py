import threading

import pytest

from printing.job import JobStatus
from printing.ledger import JobLedger


def _finish(ledger, job_id, ok=True):
    ledger.mark_printing(job_id)
    if ok:
        ledger.mark_completed(job_id)
    else:
        ledger.mark_failed(job_id, "printer offline")


def test_submit_returns_pending_snapshot():
    ledger = JobLedger()

    job = ledger.submit("a.pdf", "Office")

    assert job.status == JobStatus.PENDING
    assert job.printer_name == "Office"
    assert ledger.get(job.id).filename == "a.pdf"
    assert len(ledger) == 1


def test_submit_without_printer_uses_default_sentinel():
    job = JobLedger().submit("a.pdf")
    assert job.printer_name == "default"


def test_snapshots_do_not_alias_ledger_state():
    ledger = JobLedger()
    job = ledger.submit("a.pdf")

    ledger.mark_printing(job.id)

    assert job.status == JobStatus.PENDING
    assert ledger.get(job.id).status == JobStatus.PRINTING


def test_list_is_newest_first_and_bounded():
    ledger = JobLedger()
    ids = [ledger.submit(f"{i}.pdf").id for i in range(60)]

    listed = ledger.list(50)

    assert len(listed) == 50
    assert listed[0].id == ids[-1]
    assert listed[-1].id == ids[10]
    # Older jobs are hidden, not dropped
    assert len(ledger) == 60
    assert ledger.get(ids[0]) is not None


def test_list_with_non_positive_limit_is_empty():
    ledger = JobLedger()
    ledger.submit("a.pdf")
    assert ledger.list(0) == []


def test_clear_terminal_removes_only_finished_jobs():
    ledger = JobLedger()
    done = ledger.submit("done.pdf")
    failed = ledger.submit("failed.pdf")
    pending = ledger.submit("pending.pdf")
    converting = ledger.submit("converting.docx")
    printing = ledger.submit("printing.pdf")

    _finish(ledger, done.id)
    _finish(ledger, failed.id, ok=False)
    ledger.mark_converting(converting.id)
    ledger.mark_printing(printing.id)

    assert ledger.clear_terminal() == 2
    assert {j.id for j in ledger.list(50)} == {pending.id, converting.id, printing.id}

    # Second call is a no-op
    assert ledger.clear_terminal() == 0


def test_transition_of_unknown_job_raises():
    with pytest.raises(KeyError):
        JobLedger().mark_printing("nope")


def test_concurrent_submissions_are_all_recorded():
    ledger = JobLedger()

    def worker(n):
        for i in range(50):
            job = ledger.submit(f"{n}-{i}.pdf")
            _finish(ledger, job.id)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ledger) == 400
    assert ledger.clear_terminal() == 400
