import asyncio

import pytest

from liquidpay.ui import UIQueue, UIThreadError


@pytest.mark.asyncio
async def test_submit_runs_coroutine_on_ui_loop():
    ui = UIQueue()
    seen = []

    async def job():
        ui.check()
        seen.append("ran")
        return 7

    future = await asyncio.to_thread(ui.submit, job())

    assert await asyncio.wrap_future(future) == 7
    assert seen == ["ran"]


@pytest.mark.asyncio
async def test_submit_logs_failure_when_future_is_dropped(mocker):
    log = mocker.patch("liquidpay.ui.logger")
    ui = UIQueue()

    async def job():
        raise ValueError("bad state")

    future = ui.submit(job())
    with pytest.raises(ValueError):
        await asyncio.wrap_future(future)

    log.error.assert_called_once()
    assert str(log.error.call_args.kwargs["exc_info"]) == "bad state"


@pytest.mark.asyncio
async def test_check_off_loop_raises():
    ui = UIQueue()

    with pytest.raises(UIThreadError):
        await asyncio.to_thread(ui.check)
