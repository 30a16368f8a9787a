import asyncio
import time

from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from typing import List

from logzero import logger as default_logger

from landlord.actions.evict import (
    ScaleSetVirtualMachineId,
    read_body,
    strip_provider_prefix
)
from landlord.common import (
    DEFAULT_LANDLORD_INTERVAL,
    DEFAULT_LANDLORD_MAX_EVICTIONS,
    DEFAULT_LANDLORD_MIN_EVICTIONS
)
from landlord.errors import (
    EvictionError,
    LandlordError,
    ListNodesError,
    describe
)
from landlord.execute.tick import tick
from landlord.helpers import run_blocking
from landlord.probes.node import Node, filter_nodes

SweepOutcome = namedtuple('SweepOutcome', ['eligible', 'count', 'selected'])


class Landlord(object):
    """
    Periodically evicts a random selection of the cluster's nodes.

    :param lister: Provides list() -> List[Node]
    :param evicter: Provides simulate_eviction(ScaleSetVirtualMachineId,
        timeout=seconds) and returns a response with status_code and text().
        The call must give up once timeout seconds have passed.
    :param rand: Provides intn(n) and shuffle(n, swap). See
        landlord.rand.SeededRandom.
    :param logger: Leveled logger. Optional. (Default: logzero.logger)
    :param min_evictions: Inclusive lower bound on evictions per sweep.
    :param max_evictions: Exclusive upper bound on evictions per sweep.
    :param interval: Seconds between sweeps. Also the upper bound of the
        delay before each eviction and the deadline of each eviction call.
    :param eviction_workers: Threads available for eviction calls. Listing
        nodes never shares them. Optional. (Default: max_evictions)
    """

    def __init__(self, lister, evicter, rand, logger=None,
                 min_evictions: int = DEFAULT_LANDLORD_MIN_EVICTIONS,
                 max_evictions: int = DEFAULT_LANDLORD_MAX_EVICTIONS,
                 interval: float = DEFAULT_LANDLORD_INTERVAL,
                 eviction_workers: int = None):
        if interval <= 0:
            raise ValueError("interval must be positive, got {}".format(interval))
        if min_evictions < 0:
            raise ValueError("min_evictions must not be negative, "
                             "got {}".format(min_evictions))
        if max_evictions <= min_evictions:
            raise ValueError("max_evictions ({}) must be greater than "
                             "min_evictions ({})".format(max_evictions,
                                                         min_evictions))
        self.logger = logger if logger is not None else default_logger
        self.lister = lister
        self.evicter = evicter
        self.rand = rand
        self.min_evictions = min_evictions
        self.max_evictions = max_evictions
        self.interval = interval
        if eviction_workers is None:
            eviction_workers = max_evictions
        if eviction_workers < 1:
            raise ValueError("eviction_workers must be positive, "
                             "got {}".format(eviction_workers))
        self._executor = ThreadPoolExecutor(max_workers=eviction_workers,
                                            thread_name_prefix="landlord-evict")
        self._workers = set()

    async def start(self, stop: asyncio.Event):
        """
        Sweep every interval until stop is set, then wait for evictions that
        are still in flight.
        """
        self.logger.info("Starting landlord with interval %ss", self.interval)
        await tick(stop, self._tick, self.interval, logger=self.logger)
        self.logger.info("Stopped sweeping")
        await self.drain()

    def close(self, wait: bool = True):
        """
        Shut down the eviction executor. With wait, return only once no
        thread is using the evicter any more.
        """
        self._executor.shutdown(wait=wait)

    async def drain(self):
        """Wait for every dispatched eviction to finish."""
        workers = list(self._workers)
        if not workers:
            return
        self.logger.info("Waiting for %d evictions to finish", len(workers))
        await asyncio.gather(*workers, return_exceptions=True)

    async def _tick(self):
        try:
            await self.sweep()
        except LandlordError as e:
            self.logger.error(describe(e))
        except Exception as e:
            self.logger.exception(e)

    async def sweep(self) -> SweepOutcome:
        """
        Sweep nodes in the cluster for eviction targets.

        Evictions are dispatched but not awaited; their results are only
        logged.

        :return: SweepOutcome
        """
        self.logger.info("Sweeping nodes with min evictions %d and max evictions %d",
                         self.min_evictions, self.max_evictions)
        eviction_count = self.count()
        self.logger.info("Generated an eviction count of %d", eviction_count)

        try:
            nodes = await run_blocking(self.lister.list)
        except Exception as e:
            raise ListNodesError("error listing nodes") from e
        self.logger.info("Found %d nodes", len(nodes))

        outcome = self.select(nodes, eviction_count)

        for node in outcome.selected:
            self._dispatch(node, self.jitter())

        return outcome

    def select(self, nodes: List[Node], eviction_count: int) -> SweepOutcome:
        """
        Filter nodes, clamp eviction_count to what is left and pick that many
        at random.

        The eligible nodes are shuffled, not the full list, so that nodes
        surviving the filter are not favoured by their position.

        :param nodes: All nodes of the cluster
        :type nodes: List[Node]
        :param eviction_count: Desired number of evictions
        :type eviction_count: int
        :return: SweepOutcome
        """
        filtered = filter_nodes(nodes)
        filtered_count = len(filtered)
        self.logger.info("Filtered %d nodes to %d", len(nodes), filtered_count)

        if eviction_count > filtered_count:
            self.logger.info(
                "Eviction count (%d) is greater than the amount of filtered "
                "nodes (%d), setting eviction count to %d",
                eviction_count, filtered_count, filtered_count)
            eviction_count = filtered_count

        # Shuffle so the same nodes are not always first.
        def swap(i, j):
            filtered[i], filtered[j] = filtered[j], filtered[i]
        self.rand.shuffle(filtered_count, swap)

        return SweepOutcome(eligible=filtered_count, count=eviction_count,
                            selected=filtered[:eviction_count])

    def count(self) -> int:
        """Number of nodes to evict, in [min_evictions, max_evictions)."""
        return self.rand.intn(self.max_evictions - self.min_evictions) + self.min_evictions

    def jitter(self) -> float:
        """Delay before an eviction, in [0, interval) at millisecond resolution."""
        millis = max(1, int(self.interval * 1000))
        return self.rand.intn(millis) / 1000.0

    def _dispatch(self, node: Node, delay: float):
        task = asyncio.ensure_future(self._evict_and_log(node, delay))
        self._workers.add(task)
        task.add_done_callback(self._workers.discard)

    async def _evict_and_log(self, node: Node, delay: float):
        try:
            await self.evict(node, delay)
        except LandlordError as e:
            self.logger.error("error evicting %s: %s", node.name, describe(e))
        except Exception as e:
            self.logger.error("unexpected error evicting %s", node.name)
            self.logger.exception(e)

    async def evict(self, node: Node, delay: float):
        """
        Evict a node.

        :param node: The node to evict
        :type node: Node
        :param delay: Seconds to sleep before evicting
        :type delay: float
        :return: The eviction response, or None if the node has nothing to
            evict.
        """
        self.logger.info("Sleeping %.3fs before evicting %s", delay, node.name)
        # Sleep a bit before starting the eviction so that not all evictions
        # of the sweep have the same timestamp.
        await asyncio.sleep(delay)

        deadline = time.monotonic() + self.interval

        if not node.provider_id:
            self.logger.info("Node %s has no provider ID (perhaps it was already "
                             "evicted?), returning", node.name)
            return None

        rid = strip_provider_prefix(node.provider_id)
        self.logger.debug("Parsing resource ID %s", rid)
        vm_id = ScaleSetVirtualMachineId.parse(rid)

        self.logger.info("Evicting %s", node.name)
        try:
            response, body = await run_blocking(
                self._call_eviction_api, vm_id, deadline,
                timeout=deadline - time.monotonic(), executor=self._executor)
        except asyncio.TimeoutError as e:
            raise EvictionError("eviction deadline of {}s exceeded".format(
                self.interval)) from e

        self.logger.info("Eviction of %s got response code %d with body %s",
                         node.name, response.status_code, body)
        return response

    def _call_eviction_api(self, vm_id: ScaleSetVirtualMachineId,
                           deadline: float):
        # Runs on the eviction executor. A job that waited in the queue past
        # its deadline must not reach the API.
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise EvictionError("eviction deadline of {}s passed before calling "
                                "the eviction API for {}".format(self.interval,
                                                                 vm_id.id))
        try:
            response = self.evicter.simulate_eviction(vm_id, timeout=remaining)
        except Exception as e:
            raise EvictionError("error calling eviction API for {}".format(
                vm_id.id)) from e

        return response, read_body(response)
