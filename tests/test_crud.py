"""Eager loading of the task -> project -> tasks graph in workflow.crud."""

from workflow import crud, models, schemas
from workflow.services.task_service import TaskService


async def _seed(db):
    project = models.Project(title="Launch")
    db.add(project)
    await db.commit()
    task = models.Task(title="Write copy", assignee={"name": "Ada"}, project_id=project.id)
    db.add(task)
    await db.commit()
    return project, task


class TestGetTask:

    async def test_repeated_reads_keep_project_loaded(self, db):
        project, task = await _seed(db)
        await crud.get_project(db, project.id, with_tasks=True)

        first = await crud.get_task(db, task.id)
        again = await crud.get_task(db, task.id)

        assert again is first
        assert "project" in again.__dict__
        assert again.project.id == project.id
        assert "tasks" in again.project.__dict__
        assert [t.id for t in again.project.tasks] == [task.id]

    async def test_read_after_listing(self, db):
        project, task = await _seed(db)
        await crud.get_tasks(db, project_id=project.id)

        loaded = await crud.get_task(db, task.id)
        assert "project" in loaded.__dict__
        assert loaded.project.title == "Launch"

    async def test_missing(self, db):
        assert await crud.get_task(db, "missing") is None


class TestTaskServiceReloads:

    async def test_second_create_sees_both_tasks(self, db):
        project, _ = await _seed(db)
        data = schemas.TaskCreate(title="Review", assignee={"name": "Linus"}, project_id=project.id)

        created = await TaskService.create_task(db, data)

        assert "project" in created.__dict__
        assert len(created.project.tasks) == 2
        assert created.project.progress == 0

    async def test_status_update_reloads_project(self, db):
        project, task = await _seed(db)
        await crud.get_task(db, task.id)

        updated = await TaskService.update_status(db, task.id, "done")

        assert "project" in updated.__dict__
        assert updated.project.progress == 100
        assert [t.status for t in updated.project.tasks] == ["done"]
