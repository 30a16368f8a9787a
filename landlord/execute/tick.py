import asyncio

from logzero import logger as default_logger


class Ticker(object):
    """
    Free-running periodic clock.

    A beat fires every interval seconds, measured from start(). At most one
    beat is kept pending; a beat that fires while another is still pending is
    dropped. Beats that were missed entirely (the loop was busy for several
    intervals) are skipped rather than replayed.
    """

    def __init__(self, interval: float, logger=None):
        if interval <= 0:
            raise ValueError("non-positive interval for Ticker: {}".format(interval))
        self.interval = interval
        self.logger = logger if logger is not None else default_logger
        self.dropped = 0
        self._pending = None
        self._task = None

    def start(self):
        loop = asyncio.get_event_loop()
        self._pending = asyncio.Event()
        self._task = loop.create_task(self._run(loop.time()))

    def stop(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def wait(self):
        """Wait for the pending beat and consume it."""
        await self._pending.wait()
        self._pending.clear()

    async def _run(self, start: float):
        loop = asyncio.get_event_loop()
        beat = 1
        while True:
            await asyncio.sleep(max(0, start + beat * self.interval - loop.time()))
            if self._pending.is_set():
                self.dropped += 1
                self.logger.debug("Dropping tick %d, previous tick still pending", beat)
            else:
                self._pending.set()
            elapsed = int((loop.time() - start) // self.interval)
            beat = max(beat + 1, elapsed + 1)


async def tick(stop: asyncio.Event, fn, interval: float, logger=None):
    """
    Await fn immediately and every interval seconds after that.

    tick runs until stop is set. Work already started by fn is not aborted.

    Ticks are dropped if a tick takes longer than interval. When a slow tick
    (i.e., one that takes longer than interval) finishes, another tick runs
    immediately.

    :param stop: Set to make tick return.
    :type stop: asyncio.Event
    :param fn: Async function taking no arguments. It should handle its own
        errors; anything it raises propagates out of tick.
    :type fn: Callable[[], Awaitable]
    :param interval: Seconds between ticks.
    :type interval: float
    :param logger: Receives the ticker's messages.
        Optional. (Default: logzero.logger)
    :return: None
    """
    ticker = Ticker(interval, logger=logger)
    ticker.start()
    try:
        await fn()

        while not stop.is_set():
            beat = asyncio.ensure_future(ticker.wait())
            stopped = asyncio.ensure_future(stop.wait())
            try:
                await asyncio.wait({beat, stopped},
                                   return_when=asyncio.FIRST_COMPLETED)
            finally:
                beat.cancel()
                stopped.cancel()

            if stop.is_set():
                return
            await fn()
    finally:
        ticker.stop()
