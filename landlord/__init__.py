"""
landlord module

Landlord periodically picks a random set of worker nodes in a Kubernetes
cluster backed by Azure Virtual Machine Scale Sets and asks Azure to
simulate their eviction, the same thing that happens when spot capacity is
reclaimed. Running it continuously shows whether the workloads on the cluster
tolerate sudden node loss.

This module contains:
 - the sweep loop that selects and evicts nodes (landlord.py)
 - a periodic ticker that drives the sweeps (execute directory)
 - probes that list and filter the cluster's nodes (probes directory)
 - the eviction action against the Azure compute API (actions directory)
 - a seedable random source (rand.py), logging setup (log.py), errors
   (errors.py) and common defaults (common directory)

Each sweep:
1. Draws an eviction count between the configured minimum (inclusive) and
   maximum (exclusive).
2. Lists all nodes and drops the ones that must not be evicted: system pool
   nodes and nodes Azure has already scheduled an event for.
3. Shuffles the remaining nodes and dispatches an eviction for the first
   'count' of them. Every eviction waits a random delay first so they do not
   all land at the same moment.

Faults encountered while listing nodes abort only the current sweep. Faults
encountered while evicting a node affect only that node. Nothing is retried;
the next sweep simply makes a new random selection.
"""
