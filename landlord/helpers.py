import asyncio
import signal

from logzero import logger


async def run_blocking(func, *args, timeout: float = None, executor=None):
    """
    Run a blocking call on an executor.

    Kubernetes and Azure clients are synchronous; running them in an
    executor keeps the event loop (and therefore the ticker and every other
    eviction) moving while a call is waiting on the network.

    :param func: A blocking callable
    :type func: Callable
    :param *args: Expanded list of arguments to pass to func
    :type *args: Any
    :param timeout: Number of seconds func is allowed to execute before
        asyncio.TimeoutError is raised. None waits forever. The thread running
        func is not interrupted; func must honour its own deadline.
    :type timeout: float
    :param executor: The concurrent.futures.Executor to run func on.
        Optional. (Default: the event loop's default executor)
    :type executor: concurrent.futures.Executor
    :return: Whatever func returns.
    """
    loop = asyncio.get_event_loop()
    future = loop.run_in_executor(executor, func, *args)
    if timeout is None:
        return await future
    return await asyncio.wait_for(future, timeout=max(0, timeout))


def run(callable, *args, **kwargs):
    """
    Run an async function until SIGINT or SIGTERM is received.

    The async function is given an asyncio.Event as its first argument. The
    event is set when either signal arrives. The async function decides how
    to wind down; it is not cancelled.

    :param callable: An async function pointer taking the stop event first
    :type callable: Callable[..., Awaitable]
    :param *args: Expanded list of arguments to pass to the async function
    :type *args: Any
    :param **kwargs: Expanded keyword arguments to pass to the async function
    :type **kwargs: Any
    :return: Whatever the async function returns.
    """
    async def main():
        stop = asyncio.Event()
        loop = asyncio.get_event_loop()

        def on_signal(signum):
            logger.info("Received %s, stopping", signal.Signals(signum).name)
            stop.set()

        for signum in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(signum, on_signal, signum)
        try:
            return await callable(stop, *args, **kwargs)
        finally:
            for signum in (signal.SIGTERM, signal.SIGINT):
                loop.remove_signal_handler(signum)

    return asyncio.run(main())
