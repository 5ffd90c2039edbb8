from contact_import.models import ImportProgress
from contact_import.orchestrator.progress import ProgressRecorder, ProgressReporter


def test_progress_is_cumulative_and_capped_at_total():
    recorder = ProgressRecorder()
    reporter = ProgressReporter(total=1200, batch_size=500, sink=recorder)

    for index in range(3):
        reporter.report(index)

    assert recorder.events == [
        ImportProgress(500, 1200),
        ImportProgress(1000, 1200),
        ImportProgress(1200, 1200),
    ]
    assert reporter.current == 1200


def test_reporter_without_sink_tracks_last_event():
    reporter = ProgressReporter(total=3, batch_size=2)

    assert reporter.last is None
    assert reporter.report(0) == ImportProgress(2, 3)
    assert reporter.last == ImportProgress(2, 3)


def test_failing_sink_does_not_stop_reporting(caplog):
    def broken_sink(progress):
        raise RuntimeError("ui closed")

    reporter = ProgressReporter(total=4, batch_size=2, sink=broken_sink)

    reporter.report(0)
    reporter.report(1)

    assert reporter.current == 4
    assert "Progress callback failed" in caplog.text
