import pytest

from site_insight.scanner.tasks import (
    TaskStatus,
    TaskType,
    create_scan_tasks,
    scan_progress,
    scan_status,
)


class TestCreateScanTasks:
    def test_four_queued_tasks(self):
        tasks = create_scan_tasks("scan-1")

        assert [task.type for task in tasks] == [TaskType.TECH, TaskType.COLORS, TaskType.SEO, TaskType.PERF]
        assert all(task.status == TaskStatus.QUEUED for task in tasks)
        assert all(task.scan_id == "scan-1" for task in tasks)
        assert len({task.task_id for task in tasks}) == 4

    def test_scan_id_required(self):
        with pytest.raises(ValueError):
            create_scan_tasks("")

    def test_to_dict(self):
        task = create_scan_tasks("scan-1")[0].to_dict()
        assert task["type"] == "tech"
        assert task["status"] == "queued"
        assert task["error"] is None


class TestLifecycle:
    def test_complete(self):
        task = create_scan_tasks("s")[0]
        task.start()
        task.complete({"seoScore": 0.5})

        assert task.status == TaskStatus.COMPLETE
        assert task.payload == {"seoScore": 0.5}
        assert task.finished_at

    def test_fail(self):
        task = create_scan_tasks("s")[0]
        task.start()
        task.fail("boom")

        assert task.status == TaskStatus.FAILED
        assert task.error == "boom"

    def test_invalid_transitions(self):
        task = create_scan_tasks("s")[0]
        with pytest.raises(ValueError):
            task.complete()
        task.start()
        with pytest.raises(ValueError):
            task.start()
        task.complete()
        with pytest.raises(ValueError):
            task.fail("late")


class TestScanState:
    def test_progress_and_status(self):
        tasks = create_scan_tasks("s")
        assert scan_progress(tasks) == 0
        assert scan_status(tasks) == TaskStatus.QUEUED

        tasks[0].start()
        assert scan_status(tasks) == TaskStatus.RUNNING

        tasks[0].complete()
        tasks[1].start()
        tasks[1].fail("x")
        assert scan_progress(tasks) == 50
        assert scan_status(tasks) == TaskStatus.RUNNING

        for task in tasks[2:]:
            task.start()
            task.complete()
        assert scan_progress(tasks) == 100
        assert scan_status(tasks) == TaskStatus.COMPLETE

    def test_all_failed(self):
        tasks = create_scan_tasks("s")
        for task in tasks:
            task.start()
            task.fail("down")
        assert scan_status(tasks) == TaskStatus.FAILED

    def test_empty(self):
        assert scan_progress([]) == 0
        assert scan_status([]) == TaskStatus.QUEUED
