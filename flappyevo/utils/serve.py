import asyncio
from collections.abc import Awaitable, Iterable
import contextlib
import signal


async def serve_until_signal(
    *,
    stop_coros: Iterable[Awaitable] = (),
    on_stop: Iterable[asyncio.Future] = (),
) -> None:
    """
    Block until SIGINT/SIGTERM arrives or any task in ``on_stop`` finishes
    (e.g. the runner reached its generation cap), then await the stop
    coroutines and cancel whatever is still pending. The first exception
    raised by a stop coroutine is re-raised once cleanup is done.
    """
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    watched = [t for t in on_stop if t is not None]

    loop.add_signal_handler(signal.SIGINT, stop_event.set)
    loop.add_signal_handler(signal.SIGTERM, stop_event.set)

    try:
        waiter = asyncio.create_task(stop_event.wait())
        running = [t for t in watched if not t.done()]
        await asyncio.wait([waiter, *running], return_when=asyncio.FIRST_COMPLETED)
        if not waiter.done():
            waiter.cancel()

        results = await asyncio.gather(*stop_coros, return_exceptions=True)

        leftovers = [t for t in watched if not t.done()]
        for task in leftovers:
            task.cancel()
        if leftovers:
            with contextlib.suppress(asyncio.CancelledError):
                await asyncio.gather(*leftovers, return_exceptions=True)

        for result in results:
            if isinstance(result, Exception):
                raise result
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)
