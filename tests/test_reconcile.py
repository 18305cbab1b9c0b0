import asyncio

import pytest

from aika.error import PersistenceError, ValidationError
from aika.service.reconcile import EntryReconciliationController
from aika.service.timer import TimerEngine, TimerState

from conftest import T0, GatedStore


def make_controller(store, clock, scope_owner="alice"):
    engine = TimerEngine(clock=clock)
    return EntryReconciliationController(store, scope_owner, engine, clock=clock)


def snapshot(controller):
    return (
        controller.current_entry_id,
        controller.description,
        controller.engine.state,
        controller.engine.anchor,
        controller.elapsed,
        [entry["id"] for entry in controller.entries],
    )


def test_start_timer_creates_open_entry_and_runs(store, clock):
    async def scenario():
        async with make_controller(store, clock) as controller:
            entry = await controller.start_timer("write report")

            assert entry["start_time"] == T0
            assert entry["end_time"] is None
            assert controller.current_entry_id == entry["id"]
            assert controller.description == "write report"
            assert controller.elapsed == 0

            clock.advance(seconds=90)
            controller.engine.tick()
            assert controller.elapsed == 90

    asyncio.run(scenario())


def test_stop_timer_closes_entry(store, clock):
    async def scenario():
        async with make_controller(store, clock) as controller:
            entry = await controller.start_timer("write report")
            clock.advance(seconds=90)

            stopped_id = await controller.stop_timer()

            assert stopped_id == entry["id"]
            assert controller.engine.state is TimerState.STOPPED
            assert controller.current_entry_id is None
            assert controller.description == ""
            (stored,) = await store.list_entries("alice")
            assert stored["end_time"] == T0.add(seconds=90)
            assert controller.entries == [stored]

    asyncio.run(scenario())


def test_reconcile_resumes_open_entry_after_reload(store, clock):
    async def scenario():
        entry = await store.insert("alice", "write report", T0)
        clock.advance(minutes=10)

        async with make_controller(store, clock) as controller:
            await controller.reconcile()

            assert controller.engine.state is TimerState.RUNNING
            assert controller.engine.anchor == T0
            assert controller.current_entry_id == entry["id"]
            assert controller.description == "write report"
            assert controller.elapsed == 600

    asyncio.run(scenario())


def test_reconcile_is_idempotent(store, clock):
    async def scenario():
        await store.insert("alice", "closed", T0)
        await store.insert("alice", "open", T0.add(minutes=5))
        clock.advance(minutes=20)

        async with make_controller(store, clock) as controller:
            await controller.reconcile()
            first = snapshot(controller)
            await controller.reconcile()
            assert snapshot(controller) == first

    asyncio.run(scenario())


def test_reconcile_without_open_entry_stays_stopped(store, clock):
    async def scenario():
        entry = await store.insert("alice", "done", T0)
        await store.update(entry["id"], {"end_time": T0.add(hours=1)})

        async with make_controller(store, clock) as controller:
            await controller.reconcile()

            assert controller.engine.state is TimerState.STOPPED
            assert controller.current_entry_id is None
            assert len(controller.entries) == 1

    asyncio.run(scenario())


def test_reconcile_prefers_latest_open_entry(store, clock):
    async def scenario():
        older = await store.insert("alice", "older", T0)
        newer = await store.insert("alice", "newer", T0.add(minutes=3))
        clock.advance(minutes=5)

        async with make_controller(store, clock) as controller:
            await controller.reconcile()

            assert controller.current_entry_id == newer["id"]
            assert controller.engine.anchor == T0.add(minutes=3)
            assert controller.stranded_entry_ids == [older["id"]]

    asyncio.run(scenario())


def test_reconcile_only_sees_its_scope(store, clock):
    async def scenario():
        await store.insert("acme", "organization timer", T0)

        async with make_controller(store, clock) as controller:
            await controller.reconcile()
            assert controller.current_entry_id is None
            assert controller.entries == []

    asyncio.run(scenario())


@pytest.mark.parametrize("description", ["", "   ", "\t\n"])
def test_start_timer_rejects_blank_description(flaky_store, clock, description):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            # Any store call would fail, proving none is made
            flaky_store.failing = {"list", "insert", "update", "delete"}
            with pytest.raises(ValidationError):
                await controller.start_timer(description)
            assert controller.engine.state is TimerState.STOPPED

    asyncio.run(scenario())


def test_start_timer_trims_description(store, clock):
    async def scenario():
        async with make_controller(store, clock) as controller:
            entry = await controller.start_timer("  review PR  ")
            assert entry["description"] == "review PR"

    asyncio.run(scenario())


def test_start_timer_while_running_is_rejected(store, clock):
    async def scenario():
        async with make_controller(store, clock) as controller:
            await controller.start_timer("first")
            with pytest.raises(ValidationError):
                await controller.start_timer("second")
            assert len(await store.list_entries("alice")) == 1

    asyncio.run(scenario())


def test_failed_start_leaves_state_untouched(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            flaky_store.failing = {"insert"}
            with pytest.raises(PersistenceError):
                await controller.start_timer("write report")

            assert controller.engine.state is TimerState.STOPPED
            assert controller.current_entry_id is None
            assert controller.description == ""

    asyncio.run(scenario())


def test_failed_stop_keeps_timer_running_and_can_be_retried(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            entry = await controller.start_timer("write report")
            clock.advance(minutes=1)

            flaky_store.failing = {"update"}
            with pytest.raises(PersistenceError):
                await controller.stop_timer()

            assert controller.engine.state is TimerState.RUNNING
            assert controller.current_entry_id == entry["id"]

            flaky_store.failing = set()
            assert await controller.stop_timer() == entry["id"]
            assert controller.engine.state is TimerState.STOPPED

    asyncio.run(scenario())


def test_stop_without_running_timer_is_a_no_op(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            flaky_store.failing = {"list", "insert", "update", "delete"}
            assert await controller.stop_timer() is None

    asyncio.run(scenario())


def test_update_entry_reloads_and_reanchors(store, clock):
    async def scenario():
        async with make_controller(store, clock) as controller:
            entry = await controller.start_timer("write report")
            clock.advance(minutes=30)

            await controller.update_entry(
                entry["id"],
                {"description": "write tests", "start_time": T0.subtract(minutes=30)},
            )

            assert controller.description == "write tests"
            assert controller.engine.anchor == T0.subtract(minutes=30)
            assert controller.elapsed == 3600
            assert controller.entries[0]["description"] == "write tests"

    asyncio.run(scenario())


def test_update_entry_rejects_provenance_fields(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            entry = await controller.start_timer("write report")
            flaky_store.failing = {"update"}
            with pytest.raises(ValidationError):
                await controller.update_entry(entry["id"], {"created_at": T0})  # type: ignore[typeddict-unknown-key]

    asyncio.run(scenario())


def test_failed_update_keeps_previous_list(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            entry = await controller.start_timer("write report")
            before = controller.entries

            flaky_store.failing = {"update"}
            with pytest.raises(PersistenceError):
                await controller.update_entry(entry["id"], {"description": "nope"})

            assert controller.entries == before
            assert controller.description == "write report"

    asyncio.run(scenario())


def test_delete_running_entry_stops_timer(store, clock):
    async def scenario():
        async with make_controller(store, clock) as controller:
            entry = await controller.start_timer("write report")

            await controller.delete_entry(entry["id"])

            assert controller.engine.state is TimerState.STOPPED
            assert controller.current_entry_id is None
            assert controller.entries == []

    asyncio.run(scenario())


def test_failed_delete_keeps_previous_list(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            entry = await controller.start_timer("write report")

            flaky_store.failing = {"delete"}
            with pytest.raises(PersistenceError):
                await controller.delete_entry(entry["id"])

            assert [e["id"] for e in controller.entries] == [entry["id"]]
            assert controller.current_entry_id == entry["id"]

    asyncio.run(scenario())


def test_stale_stop_does_not_clear_newer_timer(store, clock):
    async def scenario():
        gated_store = GatedStore(store)
        gated_store.gate.set()
        async with make_controller(gated_store, clock) as controller:
            first = await controller.start_timer("first")

            gated_store.gate.clear()
            stop_task = asyncio.create_task(controller.stop_timer())
            await asyncio.sleep(0)

            # Another client starts a timer while the stop is in flight
            clock.advance(minutes=1)
            second = await store.insert("alice", "second", clock())
            await controller.reconcile()
            assert controller.current_entry_id == second["id"]

            gated_store.gate.set()
            assert await stop_task == first["id"]

            assert controller.current_entry_id == second["id"]
            assert controller.engine.anchor == second["start_time"]
            assert controller.stale_responses == 1

    asyncio.run(scenario())


def test_start_succeeds_when_reload_fails(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            original_insert = flaky_store.insert

            async def insert_then_break_listing(*args):
                entry = await original_insert(*args)
                flaky_store.failing = {"list"}
                return entry

            flaky_store.insert = insert_then_break_listing

            entry = await controller.start_timer("write report")

            assert controller.current_entry_id == entry["id"]
            assert controller.engine.state is TimerState.RUNNING
            assert [e["id"] for e in controller.entries] == [entry["id"]]

    asyncio.run(scenario())


def test_stop_succeeds_when_reload_fails(flaky_store, clock):
    async def scenario():
        async with make_controller(flaky_store, clock) as controller:
            entry = await controller.start_timer("write report")
            clock.advance(minutes=5)
            flaky_store.failing = {"list"}

            assert await controller.stop_timer() == entry["id"]

            assert controller.engine.state is TimerState.STOPPED
            assert controller.current_entry_id is None
            (cached,) = controller.entries
            assert cached["end_time"] == T0.add(minutes=5)

            flaky_store.failing = set()
            (stored,) = await flaky_store.list_entries("alice")
            assert stored["end_time"] == T0.add(minutes=5)

    asyncio.run(scenario())
