import pytest

from printing.job import DEFAULT_PRINTER, InvalidTransition, JobStatus, PrintJob


def test_new_job_is_pending_on_default_printer():
    job = PrintJob(filename="report.pdf")

    assert job.status == JobStatus.PENDING
    assert job.printer_name == DEFAULT_PRINTER
    assert job.completed_at is None
    assert job.error is None


def test_full_conversion_path():
    job = PrintJob(filename="report.docx")

    job.start_converting()
    job.start_printing()
    job.complete()

    assert job.status == JobStatus.COMPLETED
    assert job.completed_at is not None
    assert job.completed_at >= job.created_at


def test_pdf_skips_conversion():
    job = PrintJob(filename="report.pdf")
    job.start_printing()
    assert job.status == JobStatus.PRINTING


def test_cannot_complete_without_printing():
    job = PrintJob(filename="report.pdf")

    with pytest.raises(InvalidTransition, match="from pending to completed"):
        job.complete()

    job.start_converting()
    with pytest.raises(InvalidTransition):
        job.complete()


@pytest.mark.parametrize("finish", ["complete", "fail"])
def test_terminal_states_are_final(finish):
    job = PrintJob(filename="report.pdf")
    job.start_printing()
    if finish == "complete":
        job.complete()
    else:
        job.fail("paper jam")

    for action in (job.start_converting, job.start_printing, job.complete):
        with pytest.raises(InvalidTransition):
            action()
    with pytest.raises(InvalidTransition):
        job.fail("again")


def test_cannot_go_back_to_converting():
    job = PrintJob(filename="report.docx")
    job.start_converting()
    job.start_printing()

    with pytest.raises(InvalidTransition):
        job.start_converting()


def test_fail_records_error_without_completed_at():
    job = PrintJob(filename="report.docx")
    job.start_converting()
    job.fail("Conversion timed out after 60s")

    assert job.status == JobStatus.ERROR
    assert job.error == "Conversion timed out after 60s"
    assert job.completed_at is None


def test_to_dict_wire_format():
    job = PrintJob(filename="报告.pdf", printer_name="Office")
    job.start_printing()
    job.complete()

    data = job.to_dict()

    assert data["filename"] == "报告.pdf"
    assert data["printer"] == "Office"
    assert data["status"] == "completed"
    assert data["createdAt"].endswith("+00:00")
    assert data["completedAt"] is not None
    assert data["error"] is None
