from src.hrms_payroll.hrms_payroll.common.post_commit import PostCommitTasks


def test_each_task_has_its_own_failure_boundary():
    done = []
    tasks = PostCommitTasks()
    tasks.add("first", done.append, 1)
    tasks.add("broken", lambda: 1 / 0)
    tasks.add("last", done.append, 3)

    outcomes = tasks.run()

    assert done == [1, 3]
    assert [(o.name, o.ok) for o in outcomes] == [("first", True), ("broken", False), ("last", True)]
    assert "division by zero" in outcomes[1].error
    assert outcomes[1].to_dict() == {"task": "broken", "ok": False, "error": outcomes[1].error}


def test_run_drains_the_task_list():
    tasks = PostCommitTasks()
    tasks.add("noop", lambda: None)
    assert len(tasks) == 1

    tasks.run()

    assert len(tasks) == 0
    assert tasks.run() == []
