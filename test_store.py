"""Tests for the asynchronous JobStore against in-memory databases.

Run: python test_store.py  (or pytest)
"""

import asyncio
import time
from dataclasses import replace
from datetime import date
from pathlib import Path

from job_tracker.connection import MEMORY_TARGET
from job_tracker.errors import NotFoundError, StoreConnectionError
from job_tracker.models import (
    Applied,
    Interview,
    JobApplication,
    Offer,
    Rejected,
    SalaryRange,
)
from job_tracker.store import JobStore


def create_test_job(company="Test Corp", status=None):
    return JobApplication(
        company=company,
        position="Software Engineer",
        location="Remote",
        salary=SalaryRange(80_000, 120_000),
        status=status or Applied(),
        date=date(2024, 1, 15),
    )


def multiple_jobs():
    return [
        create_test_job("Company A", Applied()),
        create_test_job("Company B", Interview(2)),
        create_test_job("Company C", Offer(135_000)),
        create_test_job("Company D", Rejected()),
    ]


async def _expect_not_found(coro, app_id):
    try:
        await coro
    except NotFoundError as e:
        assert e.app_id == app_id, e.app_id
        return
    raise AssertionError(f"expected NotFoundError({app_id})")


def test_empty_store():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            assert await store.fetch_all() == []
            assert await store.count() == 0

    asyncio.run(scenario())
    print("[PASS] new store is empty")


def test_insert_and_fetch_by_id():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            job = create_test_job()
            job.cv = Path("resumes/cv.pdf")
            app_id = await store.insert(job)
            assert app_id > 0
            fetched = await store.fetch_by_id(app_id)
            assert fetched.id == app_id
            assert replace(fetched, id=None) == job

    asyncio.run(scenario())
    print("[PASS] insert() then fetch_by_id() returns an equal record")


def test_techcorp_offer():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            await store.insert(JobApplication(
                company="TechCorp",
                position="Engineer",
                location="Remote",
                salary=SalaryRange(80000, 120000),
                status=Offer(95000),
                date=date(2024, 1, 15),
            ))
            jobs = await store.fetch_all()
            assert len(jobs) == 1
            assert jobs[0].status == Offer(95000)
            assert str(jobs[0].salary) == "80000 - 120000"

    asyncio.run(scenario())
    print("[PASS] TechCorp offer round-trips through fetch_all()")


def test_all_statuses_persist():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            for job in multiple_jobs():
                await store.insert(job)
            stored = await store.fetch_all()
            # newest first
            assert [j.company for j in stored] == [
                "Company D", "Company C", "Company B", "Company A",
            ]
            assert [j.status for j in reversed(stored)] == [
                j.status for j in multiple_jobs()
            ]

    asyncio.run(scenario())
    print("[PASS] every status kind persists, newest first")


def test_update():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            app_id = await store.insert(create_test_job())
            job = await store.fetch_by_id(app_id)
            job.status = Interview(2)
            job.company = "Renamed Corp"
            job.salary = SalaryRange(90_000, 130_000)
            await store.update(job)
            assert await store.fetch_by_id(app_id) == job

            # in-memory edits do nothing until update()
            job.location = "Office"
            assert (await store.fetch_by_id(app_id)).location == "Remote"

    asyncio.run(scenario())
    print("[PASS] update() overwrites the stored record")


def test_update_not_found():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            await _expect_not_found(store.update(create_test_job()), 0)
            await _expect_not_found(
                store.update(replace(create_test_job(), id=999)), 999
            )

    asyncio.run(scenario())
    print("[PASS] update() without id -> NotFound(0); unknown id -> NotFound(999)")


def test_delete():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            await _expect_not_found(store.delete(999), 999)
            app_id = await store.insert(create_test_job())
            await store.delete(app_id)
            await _expect_not_found(store.fetch_by_id(app_id), app_id)
            await _expect_not_found(store.delete(app_id), app_id)

    asyncio.run(scenario())
    print("[PASS] delete() removes the record; missing ids raise NotFound")


def test_clear_all():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            await store.clear_all()
            for job in multiple_jobs():
                await store.insert(job)
            await store.clear_all()
            assert await store.fetch_all() == []
            await store.insert(create_test_job("After Clear"))
            assert [j.company for j in await store.fetch_all()] == ["After Clear"]

    asyncio.run(scenario())
    print("[PASS] clear_all() empties the store, even when already empty")


def test_clones_share_data():
    async def scenario():
        store = await JobStore.open(MEMORY_TARGET)
        clone = store.clone()
        app_id = await clone.insert(create_test_job())
        assert (await store.fetch_by_id(app_id)).company == "Test Corp"
        await store.close()

    asyncio.run(scenario())
    print("[PASS] clone() shares the same database")


def test_concurrent_inserts():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as store:
            handles = [store.clone() for _ in range(10)]
            ids = await asyncio.gather(*(
                h.insert(create_test_job(f"Company {i}"))
                for i, h in enumerate(handles)
            ))
            assert len(set(ids)) == 10
            assert await store.count() == 10

    asyncio.run(scenario())
    print("[PASS] concurrent inserts through clones all land")


def test_close_waits_without_blocking_loop():
    def slow_count(*, db):
        time.sleep(0.5)
        return db.execute("SELECT COUNT(*) FROM job_applications").fetchone()[0]

    async def scenario():
        store = await JobStore.open(MEMORY_TARGET)
        loop = asyncio.get_running_loop()
        gaps = []

        async def ticker():
            last = loop.time()
            while True:
                await asyncio.sleep(0.01)
                now = loop.time()
                gaps.append(now - last)
                last = now

        tick = asyncio.create_task(ticker())
        in_flight = asyncio.create_task(store._pool.run(slow_count))
        await asyncio.sleep(0.05)
        await store.clone().close()
        assert await in_flight == 0
        tick.cancel()
        try:
            await tick
        except asyncio.CancelledError:
            pass
        assert store._pool.closed
        return max(gaps)

    max_gap = asyncio.run(scenario())
    assert max_gap < 0.2, max_gap
    print("[PASS] close() waits for in-flight calls without stalling the loop")


def test_separate_memory_stores_are_isolated():
    async def scenario():
        async with await JobStore.open(MEMORY_TARGET) as first:
            async with await JobStore.open(MEMORY_TARGET) as second:
                await first.insert(create_test_job())
                assert await second.fetch_all() == []

    asyncio.run(scenario())
    print("[PASS] each in-memory store is its own database")


def test_malformed_target():
    async def scenario():
        for target in ("sqlite:", "", "sqlite://"):
            try:
                await JobStore.open(target)
            except StoreConnectionError:
                continue
            raise AssertionError(f"{target!r} should be rejected")

    asyncio.run(scenario())
    print("[PASS] malformed targets raise StoreConnectionError")
